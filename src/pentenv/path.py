"""Path syntax for addressing a value inside a document.

A path is a field name followed by any number of ``.field`` and ``[index]``
steps::

    ip
    creds[0].password
    hosts[2].tags[0]

There is no escaping, so keys containing ``.``, ``[``, ``]`` or whitespace
cannot be addressed.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, Union

from .errors import PathSyntaxError


@dataclass(frozen=True)
class Field:
    """Address a key in an object."""
    name: str

    def __str__(self) -> str:
        return self.name


@dataclass(frozen=True)
class Index:
    """Address a position in an array."""
    position: int

    def __str__(self) -> str:
        return f"[{self.position}]"


Step = Union[Field, Index]
Path = tuple[Step, ...]

_DELIMITERS = ".[]"


def _read_identifier(text: str, start: int) -> tuple[str, int]:
    """Scan a field name starting at ``start``. Returns (name, end)."""
    end = start
    while end < len(text) and text[end] not in _DELIMITERS and not text[end].isspace():
        end += 1
    if end == start:
        if start == 0:
            raise PathSyntaxError("path must start with a field name", text, start)
        raise PathSyntaxError("empty field name", text, start)
    return text[start:end], end


def _read_index(text: str, start: int) -> tuple[int, int]:
    """Scan ``[n]`` where ``text[start] == '['``. Returns (n, end)."""
    close = text.find("]", start + 1)
    if close == -1:
        raise PathSyntaxError("unclosed '['", text, start)
    body = text[start + 1:close]
    if not body or not (body.isascii() and body.isdigit()):
        raise PathSyntaxError(f"index must be a non-negative integer, got {body!r}", text, start + 1)
    return int(body), close + 1


def parse_path(text: str) -> Path:
    """Parse a path string into a tuple of steps.

    Raises:
        PathSyntaxError: If the path is empty or malformed.
    """
    text = text.strip()
    if not text:
        raise PathSyntaxError("path is empty", text, 0)
    for pos, char in enumerate(text):
        if "\ud800" <= char <= "\udfff":
            raise PathSyntaxError("lone surrogate character", text, pos)

    name, pos = _read_identifier(text, 0)
    steps: list[Step] = [Field(name)]

    while pos < len(text):
        char = text[pos]
        if char == ".":
            name, pos = _read_identifier(text, pos + 1)
            steps.append(Field(name))
        elif char == "[":
            position, pos = _read_index(text, pos)
            steps.append(Index(position))
        else:
            raise PathSyntaxError(f"unexpected character {char!r}", text, pos)

    return tuple(steps)


def format_path(steps: Iterable[Step]) -> str:
    """Render steps back into path syntax (inverse of parse_path)."""
    parts = []
    for step in steps:
        if isinstance(step, Field) and parts:
            parts.append(".")
        parts.append(str(step))
    return "".join(parts)
