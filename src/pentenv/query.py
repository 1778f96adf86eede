"""Navigation and mutation of a document along a path.

``refer`` reads, ``modify`` writes. Writes create missing object keys on the
way down but never create array elements, and never turn a scalar into a
container.
"""

from __future__ import annotations

from .errors import IndexOutOfBounds, NotFound, TypeMismatch
from .path import Field, Index, Path, Step, format_path
from .values import JSONValue, kind_of


def _check_container(current: JSONValue, step: Step, path: Path, depth: int) -> None:
    """Raise TypeMismatch unless ``current`` is the container ``step`` needs."""
    if isinstance(step, Field):
        expected, container = "object", dict
    else:
        expected, container = "array", list
    if not isinstance(current, container):
        where = format_path(path[:depth]) or "document root"
        found = kind_of(current)
        raise TypeMismatch(
            f"expected {expected} at {where!r}, found {found} (resolving {format_path(path[:depth + 1])!r})",
            path[:depth + 1],
            expected=expected,
            found=found,
        )


def refer(root: JSONValue, path: Path) -> JSONValue:
    """Return the value at ``path``. The tree is never modified.

    Raises:
        NotFound: If a key or index along the path does not exist.
        TypeMismatch: If a step meets the wrong kind of value.
    """
    current = root
    for depth, step in enumerate(path):
        _check_container(current, step, path, depth)
        if isinstance(step, Field):
            if step.name not in current:
                raise NotFound(f"{format_path(path[:depth + 1])} not found", path[:depth + 1])
            current = current[step.name]
        else:
            if step.position >= len(current):
                raise NotFound(f"{format_path(path[:depth + 1])} not found", path[:depth + 1])
            current = current[step.position]
    return current


def _out_of_bounds(path: Path, depth: int, length: int | None) -> IndexOutOfBounds:
    step = path[depth]
    target = format_path(path[:depth + 1])
    if length is None:
        message = f"cannot write {target!r}: {format_path(path[:depth])!r} does not exist and arrays are not created"
    else:
        message = f"cannot write {target!r}: index {step.position} is out of bounds for array of length {length}"
    return IndexOutOfBounds(message, path[:depth + 1], index=step.position, length=length)


def _nest(steps: Path, value: JSONValue) -> JSONValue:
    """Wrap ``value`` in one new object per field step, innermost last."""
    for step in reversed(steps):
        value = {step.name: value}
    return value


def modify(root: JSONValue, path: Path, new_value: JSONValue) -> None:
    """Store ``new_value`` at ``path``, creating missing object keys.

    All checks happen before the first change, so on failure the tree is
    left exactly as it was.

    Raises:
        IndexOutOfBounds: If an index step addresses a missing array slot,
            or an array that would have to be created.
        TypeMismatch: If a step meets the wrong kind of value.
    """
    if not path:
        raise ValueError("path must not be empty")
    current = root
    last = len(path) - 1

    for depth, step in enumerate(path[:last]):
        _check_container(current, step, path, depth)
        if isinstance(step, Field):
            if step.name not in current:
                rest = path[depth + 1:]
                for offset, later in enumerate(rest, start=depth + 1):
                    if isinstance(later, Index):
                        raise _out_of_bounds(path, offset, None)
                current[step.name] = _nest(rest, new_value)
                return
            current = current[step.name]
        else:
            if step.position >= len(current):
                raise _out_of_bounds(path, depth, len(current))
            current = current[step.position]

    final = path[last]
    _check_container(current, final, path, last)
    if isinstance(final, Field):
        current[final.name] = new_value
    else:
        if final.position >= len(current):
            raise _out_of_bounds(path, last, len(current))
        current[final.position] = new_value
