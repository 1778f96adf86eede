"""Exception hierarchy for pentenv.

Everything raised on purpose by the package derives from PentenvError so the
shell, the CLI and the MCP tools can render it as a message instead of a
traceback.
"""

from __future__ import annotations

from typing import Optional


class PentenvError(Exception):
    """Base exception for pentenv operations."""
    pass


# ========== Document / path errors ==========


class ParseError(PentenvError):
    """Raised when a document is not valid JSON."""

    def __init__(self, message: str, line: Optional[int] = None, column: Optional[int] = None):
        if line is not None and column is not None:
            message = f"{message} (line {line}, column {column})"
        super().__init__(message)
        self.line = line
        self.column = column


class PathSyntaxError(PentenvError):
    """Raised when a path string is malformed."""

    def __init__(self, message: str, text: str, position: int):
        super().__init__(f"{message} at position {position} in {text!r}")
        self.text = text
        self.position = position


# ========== Navigation errors ==========


class QueryError(PentenvError):
    """Base exception for failures while walking a document.

    ``path`` holds the steps up to and including the one that failed.
    """

    def __init__(self, message: str, path: tuple = ()):
        super().__init__(message)
        self.path = tuple(path)


class NotFound(QueryError):
    """Raised when a read addresses a key or index that does not exist."""
    pass


class TypeMismatch(QueryError):
    """Raised when a step expects one container kind and finds another."""

    def __init__(self, message: str, path: tuple, expected: str, found: str):
        super().__init__(message, path)
        self.expected = expected
        self.found = found


class IndexOutOfBounds(QueryError):
    """Raised when a write addresses an array slot that does not exist.

    ``length`` is None when the array itself is missing.
    """

    def __init__(self, message: str, path: tuple, index: int, length: Optional[int]):
        super().__init__(message, path)
        self.index = index
        self.length = length


# ========== Workspace errors ==========


class WorkspaceError(PentenvError):
    """Base exception for workspace bookkeeping."""
    pass


class NotInitializedError(WorkspaceError):
    """Raised when the workspace document does not exist yet."""
    pass


class WorkspaceExistsError(WorkspaceError):
    """Raised when initializing a directory that already has a workspace."""
    pass


class NoWorkspaceError(WorkspaceError):
    """Raised when a command needs a workspace but none is selected."""
    pass


# ========== Environment errors ==========


class ConfigError(PentenvError):
    """Raised when settings or the dynamic config cannot be loaded."""
    pass


class ClipboardError(PentenvError):
    """Raised when the system clipboard cannot be used."""
    pass
