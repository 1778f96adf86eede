"""Value tree: conversion between JSON text and native Python values.

Documents are held as plain ``dict``/``list``/``str``/``int``/``float``/
``bool``/``None`` trees. ``json`` keeps object key order and the
integer-vs-float distinction of the source text, which is all the query
engine needs from a JSON model.
"""

from __future__ import annotations

import json
import math
from typing import Optional, TypeAlias

from .errors import ParseError

JSONScalar: TypeAlias = str | int | float | bool | None
JSONValue: TypeAlias = JSONScalar | list["JSONValue"] | dict[str, "JSONValue"]
JSONObject: TypeAlias = dict[str, JSONValue]
JSONArray: TypeAlias = list[JSONValue]


def _parse_float(text: str) -> float:
    value = float(text)
    if not math.isfinite(value):
        raise ValueError(f"number {text} is out of range")
    return value


def _reject_constant(name: str) -> None:
    raise ValueError(f"{name} is not a valid JSON value")


def _reject_surrogates(text: str) -> None:
    """Raise ParseError if ``text`` holds a lone surrogate, which UTF-8 cannot store."""
    try:
        text.encode("utf-8")
    except UnicodeEncodeError as e:
        raise ParseError(f"lone surrogate {text[e.start]!r} cannot be stored as UTF-8") from e


def parse(text: str) -> JSONValue:
    """Parse a JSON document.

    Raises:
        ParseError: If the text is not strict JSON (including trailing data,
            NaN/Infinity and numbers that overflow a float), or if a string
            decodes to a lone surrogate such as ``"\\ud800"``.
    """
    try:
        value = json.loads(text, parse_float=_parse_float, parse_constant=_reject_constant)
        # escapes are decoded by now, so check the value rather than the text
        _reject_surrogates(serialize(value))
    except json.JSONDecodeError as e:
        raise ParseError(e.msg, e.lineno, e.colno) from e
    except ValueError as e:
        raise ParseError(str(e)) from e
    except RecursionError as e:
        raise ParseError("document is nested too deeply") from e

    return value


def serialize(value: JSONValue, indent: Optional[int] = None) -> str:
    """Render a value as JSON text.

    Keys keep their insertion order. With ``indent=None`` the output is
    compact (``{"a":1}``), otherwise it is pretty-printed.
    """
    if indent is None:
        return json.dumps(value, ensure_ascii=False, allow_nan=False, separators=(",", ":"))
    return json.dumps(value, ensure_ascii=False, allow_nan=False, indent=indent)


def render(value: JSONValue) -> str:
    """Format a value for display: strings bare, everything else as JSON."""
    if isinstance(value, str):
        return value
    return serialize(value)


def kind_of(value: JSONValue) -> str:
    """Return the JSON kind name of a value, as used in error messages."""
    if value is None:
        return "null"
    # bool is a subclass of int
    if isinstance(value, bool):
        return "boolean"
    if isinstance(value, (int, float)):
        return "number"
    if isinstance(value, str):
        return "string"
    if isinstance(value, list):
        return "array"
    if isinstance(value, dict):
        return "object"
    raise TypeError(f"not a JSON value: {type(value).__name__}")


def coerce_value(raw: str, as_string: bool = False) -> JSONValue:
    """Turn a user-typed argument into the value to store.

    Text that is valid JSON on its own becomes that value (``5``, ``true``,
    ``"5"``, ``{"user": "admin"}``); anything else, such as ``0.0.0.0``, is
    stored as a string. ``as_string`` skips the JSON interpretation.

    Raises:
        ParseError: If ``raw`` holds a lone surrogate.
    """
    _reject_surrogates(raw)
    if as_string:
        return raw
    try:
        return parse(raw)
    except ParseError:
        return raw
