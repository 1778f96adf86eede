"""File locking and atomic replacement for workspace and config files."""

from __future__ import annotations

import logging
import os
from contextlib import contextmanager
from pathlib import Path
from typing import Generator

import portalocker

from .errors import WorkspaceError

logger = logging.getLogger(__name__)

DEFAULT_LOCK_TIMEOUT = 10.0


def lock_path_for(path: Path) -> Path:
    """Return the lock file used for ``path`` (``vars.json`` -> ``vars.json.lock``)."""
    return path.with_suffix(path.suffix + ".lock")


@contextmanager
def file_lock(path: Path, timeout: float = DEFAULT_LOCK_TIMEOUT) -> Generator[None, None, None]:
    """Hold an exclusive lock on ``path`` for the duration of the block.

    The lock lives in a sibling ``.lock`` file so the target itself can be
    replaced by atomic_write while the lock is held.

    Raises:
        WorkspaceError: If the lock cannot be acquired within ``timeout``.
    """
    lock_path = lock_path_for(path)
    lock_path.parent.mkdir(parents=True, exist_ok=True)
    lock_path.touch(exist_ok=True)

    try:
        lock = portalocker.Lock(lock_path, timeout=timeout)
        lock.acquire()
    except portalocker.LockException as e:
        logger.warning("could not lock %s within %.1fs", path, timeout)
        raise WorkspaceError(f"{path} is locked by another process") from e

    try:
        yield
    finally:
        lock.release()


@contextmanager
def atomic_write(path: Path, mode: str = "w", encoding: str = "utf-8") -> Generator:
    """Write to ``path`` through a temp file renamed into place on success.

    If the block raises, the temp file is removed and ``path`` is untouched.

    Args:
        path: Target file path
        mode: 'w' for text, 'wb' for binary (e.g. tomli_w output)
        encoding: Text encoding (ignored for binary mode)

    Yields:
        File handle for writing
    """
    tmp_path = path.with_suffix(path.suffix + ".tmp")
    path.parent.mkdir(parents=True, exist_ok=True)

    try:
        if "b" in mode:
            with open(tmp_path, mode) as f:
                yield f
        else:
            with open(tmp_path, mode, encoding=encoding) as f:
                yield f
        os.replace(tmp_path, path)
    except BaseException:
        if tmp_path.exists():
            tmp_path.unlink()
        raise


@contextmanager
def locked_atomic_write(
    path: Path,
    mode: str = "w",
    encoding: str = "utf-8",
    timeout: float = DEFAULT_LOCK_TIMEOUT,
) -> Generator:
    """file_lock and atomic_write combined, for one-shot rewrites."""
    with file_lock(path, timeout=timeout):
        with atomic_write(path, mode=mode, encoding=encoding) as f:
            yield f
