"""Configuration loading for pentenv.

Everything lives in the application directory (``~/.pentenv`` unless
``PENTENV_HOME`` is set):

1. ``config.toml`` or ``config.json`` - static settings written by the user
2. ``dynamic_config.toml`` - runtime state rewritten by pentenv itself
   (currently only the selected workspace)
3. ``shell_history`` - history of the interactive shell
"""

from __future__ import annotations

import json
import logging
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Optional

import tomli_w

# Python 3.11+ has tomllib in stdlib; fall back to tomli for older versions
try:
    import tomllib  # Python 3.11+
except ImportError:
    try:
        import tomli as tomllib  # Python <3.11
    except ImportError:  # pragma: no cover
        tomllib = None

from .errors import ConfigError
from .locking import DEFAULT_LOCK_TIMEOUT, locked_atomic_write

logger = logging.getLogger(__name__)

APP_DIR_NAME = ".pentenv"
APP_HOME_ENV = "PENTENV_HOME"
DYNAMIC_CONFIG_FILE_NAME = "dynamic_config.toml"
SHELL_HISTORY_FILE_NAME = "shell_history"


@dataclass
class ShellSettings:
    """Prompt strings for the interactive shell."""
    prompt: str = "pentenv>"
    error_prompt: str = "pentenv!>"  # shown after a command reported an error


@dataclass
class Settings:
    """Static settings from config.toml / config.json."""

    # Workspace layout, relative to the workspace root
    env_dir_name: str = ".ptv"
    vars_file_name: str = "vars.json"

    # Document writing
    indent: Optional[int] = None  # None = compact JSON
    lock_timeout: float = DEFAULT_LOCK_TIMEOUT

    shell: ShellSettings = field(default_factory=ShellSettings)


@dataclass
class DynamicConfig:
    """Runtime state persisted in dynamic_config.toml."""
    current_workspace: str = ""  # empty = no workspace selected

    def to_dict(self) -> dict[str, Any]:
        return {"current_workspace": self.current_workspace}


@dataclass
class AppConfig:
    """Application directory, settings and runtime state."""

    app_dir: Path
    settings: Settings = field(default_factory=Settings)
    dyn_conf: DynamicConfig = field(default_factory=DynamicConfig)

    @property
    def dyn_conf_path(self) -> Path:
        return self.app_dir / DYNAMIC_CONFIG_FILE_NAME

    @property
    def shell_hist_path(self) -> Path:
        return self.app_dir / SHELL_HISTORY_FILE_NAME

    def current_workspace(self) -> Optional[Path]:
        """Return the selected workspace root, or None."""
        if not self.dyn_conf.current_workspace:
            return None
        return Path(self.dyn_conf.current_workspace)

    def set_current_workspace(self, root: Optional[Path]) -> None:
        """Select (or with None, deselect) a workspace and persist the choice."""
        self.dyn_conf.current_workspace = str(root) if root is not None else ""
        write_dyn_conf(self.dyn_conf_path, self.dyn_conf, timeout=self.settings.lock_timeout)
        logger.info("current workspace set to %r", self.dyn_conf.current_workspace)


def get_app_dir() -> Path:
    """Get the application directory.

    Uses ~/.pentenv by default; can be overridden with PENTENV_HOME.
    """
    custom_dir = os.environ.get(APP_HOME_ENV)
    if custom_dir:
        return Path(custom_dir)
    return Path.home() / APP_DIR_NAME


def load_toml_config(path: Path) -> dict[str, Any]:
    """Load configuration from TOML file."""
    if tomllib is None:
        raise ImportError("tomli required for TOML config: pip install tomli")
    with open(path, "rb") as f:
        return tomllib.load(f)


def load_json_config(path: Path) -> dict[str, Any]:
    """Load configuration from JSON file."""
    with open(path, "r", encoding="utf-8") as f:
        return json.load(f)


def _expect(section: str, key: str, value: Any, kind: type | tuple[type, ...]) -> Any:
    # no setting is boolean, and bool would pass as an int
    if isinstance(value, bool) or not isinstance(value, kind):
        raise ConfigError(f"[{section}] {key} has invalid value {value!r}")
    return value


def _section(data: dict[str, Any], name: str) -> dict[str, Any]:
    section = data[name]
    if not isinstance(section, dict):
        raise ConfigError(f"[{name}] must be a table, got {section!r}")
    return section


def dict_to_settings(data: dict[str, Any]) -> Settings:
    """Convert a parsed config file to Settings. Unknown keys are ignored."""
    settings = Settings()

    if "workspace" in data:
        ws = _section(data, "workspace")
        if "dir_name" in ws:
            settings.env_dir_name = _expect("workspace", "dir_name", ws["dir_name"], str)
        if "vars_file" in ws:
            settings.vars_file_name = _expect("workspace", "vars_file", ws["vars_file"], str)

    if "vars" in data:
        v = _section(data, "vars")
        if "indent" in v:
            indent = _expect("vars", "indent", v["indent"], int)
            settings.indent = indent if indent > 0 else None
        if "lock_timeout" in v:
            settings.lock_timeout = float(_expect("vars", "lock_timeout", v["lock_timeout"], (int, float)))

    if "shell" in data:
        sh = _section(data, "shell")
        if "prompt" in sh:
            settings.shell.prompt = _expect("shell", "prompt", sh["prompt"], str)
        if "error_prompt" in sh:
            settings.shell.error_prompt = _expect("shell", "error_prompt", sh["error_prompt"], str)

    return settings


def find_config_file(app_dir: Path) -> Optional[Path]:
    """Find the settings file in the application directory.

    Search order:
    1. config.toml
    2. config.json
    """
    for name in ("config.toml", "config.json"):
        path = app_dir / name
        if path.exists():
            return path
    return None


def load_settings(app_dir: Path, config_path: Optional[Path] = None) -> Settings:
    """Load static settings.

    Args:
        app_dir: Application directory searched when config_path is None
        config_path: Optional explicit path to a config file

    Returns:
        Settings instance (defaults when no file exists)

    Raises:
        ConfigError: If the file cannot be read or holds invalid values.
    """
    if config_path is None:
        config_path = find_config_file(app_dir)

    if config_path is None:
        return Settings()

    suffix = config_path.suffix.lower()
    try:
        if suffix == ".toml":
            data = load_toml_config(config_path)
        elif suffix == ".json":
            data = load_json_config(config_path)
        else:
            raise ConfigError(f"Unsupported config file type: {suffix}")
    except (OSError, ValueError) as e:
        # TOMLDecodeError and JSONDecodeError are both ValueErrors
        raise ConfigError(f"failed to read {config_path}: {e}") from e

    if not isinstance(data, dict):
        raise ConfigError(f"{config_path} must contain a table of settings")
    logger.debug("loaded settings from %s", config_path)
    return dict_to_settings(data)


def write_dyn_conf(path: Path, conf: DynamicConfig, timeout: float = DEFAULT_LOCK_TIMEOUT) -> None:
    """Persist the dynamic config as TOML."""
    with locked_atomic_write(path, mode="wb", timeout=timeout) as f:
        tomli_w.dump(conf.to_dict(), f)


def init_dyn_conf(path: Path) -> DynamicConfig:
    """Create dynamic_config.toml with no workspace selected."""
    conf = DynamicConfig()
    write_dyn_conf(path, conf)
    logger.debug("created %s", path)
    return conf


def read_dyn_conf(path: Path) -> DynamicConfig:
    """Read dynamic_config.toml.

    Raises:
        ConfigError: If the file is unreadable or not valid TOML.
    """
    try:
        data = load_toml_config(path)
    except (OSError, ValueError) as e:
        raise ConfigError(f"failed to read dynamic config {path}: {e}") from e
    current = data.get("current_workspace", "")
    if not isinstance(current, str):
        raise ConfigError(f"{path}: current_workspace must be a string")
    return DynamicConfig(current_workspace=current)


def load_app_config(app_dir: Optional[Path] = None, config_path: Optional[Path] = None) -> AppConfig:
    """Load the application config, initializing the app directory on first run.

    Args:
        app_dir: Application directory (default: get_app_dir())
        config_path: Optional explicit settings file

    Raises:
        ConfigError: If settings or the dynamic config cannot be loaded.
    """
    if app_dir is None:
        app_dir = get_app_dir()

    try:
        app_dir.mkdir(parents=True, exist_ok=True)
    except OSError as e:
        raise ConfigError(f"failed to create {app_dir}: {e}") from e

    settings = load_settings(app_dir, config_path)
    app_conf = AppConfig(app_dir=app_dir, settings=settings)

    if app_conf.dyn_conf_path.exists():
        app_conf.dyn_conf = read_dyn_conf(app_conf.dyn_conf_path)
    else:
        app_conf.dyn_conf = init_dyn_conf(app_conf.dyn_conf_path)

    return app_conf
