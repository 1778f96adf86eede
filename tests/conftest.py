"""Shared pytest fixtures for pentenv tests."""

import tempfile
from pathlib import Path

import pytest

from pentenv.config import load_app_config
from pentenv.engine import VarsEngine
from pentenv.workspace import Workspace


@pytest.fixture
def temp_home(monkeypatch):
    """Create a temporary application directory and point PENTENV_HOME at it."""
    with tempfile.TemporaryDirectory() as tmpdir:
        home = Path(tmpdir) / "home"
        monkeypatch.setenv("PENTENV_HOME", str(home))
        yield home


@pytest.fixture
def temp_dir():
    """Create a temporary directory for workspaces."""
    with tempfile.TemporaryDirectory() as tmpdir:
        yield Path(tmpdir).resolve()


@pytest.fixture
def app_conf(temp_home):
    """Load a fresh application config."""
    return load_app_config(temp_home)


@pytest.fixture
def workspace(temp_dir, app_conf):
    """Initialize a workspace and select it."""
    ws = Workspace.init(temp_dir / "box", app_conf.settings)
    app_conf.set_current_workspace(ws.root)
    return ws


@pytest.fixture
def engine(workspace):
    """Create an engine bound to the test workspace."""
    return VarsEngine(workspace)


@pytest.fixture
def write_vars(workspace):
    """Replace the workspace document with the given text."""

    def _write(text):
        workspace.vars_path.write_text(text, encoding="utf-8")

    return _write
