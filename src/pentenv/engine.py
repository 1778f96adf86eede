"""Vars engine - refer/modify against a workspace's document."""

from __future__ import annotations

import logging
from dataclasses import dataclass

from . import query
from .config import AppConfig
from .path import format_path, parse_path
from .values import JSONValue, coerce_value, parse, serialize
from .workspace import Workspace, current_workspace

logger = logging.getLogger(__name__)


@dataclass
class ModifyResult:
    """Outcome of a successful modify."""
    path: str
    value: JSONValue
    before: str  # document before the change
    after: str   # document as written


class VarsEngine:
    """Reads and writes one workspace's vars document.

    Each call re-reads the file, so the engine holds no document state
    between calls.
    """

    def __init__(self, workspace: Workspace):
        self.workspace = workspace

    @classmethod
    def for_app(cls, app_conf: AppConfig) -> "VarsEngine":
        """Engine for the currently selected workspace.

        Raises:
            NoWorkspaceError: If no workspace is selected.
        """
        return cls(current_workspace(app_conf))

    @property
    def indent(self):
        return self.workspace.settings.indent

    def load(self) -> JSONValue:
        """Parse and return the whole document.

        Raises:
            NotInitializedError: If the document does not exist.
            ParseError: If the document is not valid JSON.
        """
        return parse(self.workspace.read_text())

    def refer(self, path_text: str) -> JSONValue:
        """Return the value at ``path_text``.

        Raises:
            PathSyntaxError: If the path is malformed (checked before any I/O).
            NotFound: If the path does not exist.
            TypeMismatch: If the path crosses a value of the wrong kind.
        """
        path = parse_path(path_text)
        return query.refer(self.load(), path)

    def modify(self, path_text: str, raw_value: str, as_string: bool = False) -> ModifyResult:
        """Store ``raw_value`` at ``path_text`` and persist the document.

        The raw argument is interpreted by coerce_value: valid JSON becomes
        that value, anything else a string. The document is locked from read
        to write and is only written when the change succeeded.

        Raises:
            PathSyntaxError: If the path is malformed.
            ParseError: If the stored document is not valid JSON.
            IndexOutOfBounds: If the path addresses a missing array slot.
            TypeMismatch: If the path crosses a value of the wrong kind.
        """
        path = parse_path(path_text)
        value = coerce_value(raw_value, as_string=as_string)

        with self.workspace.lock():
            root = parse(self.workspace.read_text())
            before = serialize(root, self.indent)
            query.modify(root, path, value)
            after = serialize(root, self.indent)
            self.workspace.write_text(after)

        logger.info("modified %s in %s", format_path(path), self.workspace.vars_path)
        return ModifyResult(path=format_path(path), value=value, before=before, after=after)

    def show(self) -> str:
        """Return the whole document pretty-printed."""
        return serialize(self.load(), indent=2)
