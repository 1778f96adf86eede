"""Workspace bookkeeping: where a workspace's vars document lives."""

from __future__ import annotations

import logging
import shutil
from pathlib import Path
from typing import Optional

from .config import AppConfig, Settings
from .errors import NoWorkspaceError, NotInitializedError, WorkspaceExistsError
from .locking import atomic_write, file_lock

logger = logging.getLogger(__name__)

EMPTY_DOCUMENT = "{}"


class Workspace:
    """A directory holding ``<root>/.ptv/vars.json``."""

    def __init__(self, root: Path, settings: Optional[Settings] = None):
        self.root = Path(root)
        self.settings = settings or Settings()

    def __repr__(self) -> str:
        return f"Workspace({str(self.root)!r})"

    @property
    def name(self) -> str:
        return self.root.name

    @property
    def env_path(self) -> Path:
        return self.root / self.settings.env_dir_name

    @property
    def vars_path(self) -> Path:
        return self.env_path / self.settings.vars_file_name

    def exists(self) -> bool:
        return self.vars_path.is_file()

    @classmethod
    def init(cls, root: Path, settings: Optional[Settings] = None) -> "Workspace":
        """Create the env directory and an empty document under ``root``.

        Raises:
            WorkspaceExistsError: If the env directory already exists.
        """
        workspace = cls(Path(root).resolve(), settings)
        if workspace.env_path.exists():
            raise WorkspaceExistsError(f"{workspace.env_path} already exists")
        workspace.env_path.mkdir(parents=True)
        workspace.write_text(EMPTY_DOCUMENT)
        logger.info("initialized workspace at %s", workspace.root)
        return workspace

    def clean(self) -> None:
        """Remove the env directory and everything in it."""
        if not self.env_path.exists():
            raise NotInitializedError(f"{self.env_path} does not exist")
        shutil.rmtree(self.env_path)
        logger.info("removed %s", self.env_path)

    def lock(self):
        """Exclusive lock on the document, for read-modify-write cycles.

        Raises:
            NotInitializedError: If the env directory does not exist (the
                lock file would otherwise recreate it).
        """
        if not self.env_path.is_dir():
            raise NotInitializedError(f"{self.env_path} does not exist; run init in {self.root} first")
        return file_lock(self.vars_path, timeout=self.settings.lock_timeout)

    def read_text(self) -> str:
        """Return the raw document text.

        Raises:
            NotInitializedError: If the document does not exist.
        """
        try:
            return self.vars_path.read_text(encoding="utf-8")
        except FileNotFoundError as e:
            raise NotInitializedError(
                f"{self.vars_path} does not exist; run init in {self.root} first"
            ) from e

    def write_text(self, text: str) -> None:
        """Replace the document atomically."""
        with atomic_write(self.vars_path) as f:
            f.write(text)


def current_workspace(app_conf: AppConfig) -> Workspace:
    """Return the workspace selected in the dynamic config.

    Raises:
        NoWorkspaceError: If no workspace is selected.
    """
    root = app_conf.current_workspace()
    if root is None:
        raise NoWorkspaceError("no workspace is selected; run init or cw <dir> first")
    return Workspace(root, app_conf.settings)
