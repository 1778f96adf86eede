"""Tests for configuration loading."""

import tempfile
from pathlib import Path

import pytest

from pentenv.config import (
    AppConfig,
    DynamicConfig,
    Settings,
    dict_to_settings,
    find_config_file,
    get_app_dir,
    load_app_config,
    load_json_config,
    load_settings,
    read_dyn_conf,
    write_dyn_conf,
)
from pentenv.errors import ConfigError


@pytest.fixture
def temp_app_dir():
    """Create a temporary application directory."""
    with tempfile.TemporaryDirectory() as tmpdir:
        yield Path(tmpdir)


class TestGetAppDir:
    """Tests for get_app_dir."""

    def test_env_override(self, monkeypatch, temp_app_dir):
        """PENTENV_HOME wins over the home directory."""
        monkeypatch.setenv("PENTENV_HOME", str(temp_app_dir))
        assert get_app_dir() == temp_app_dir

    def test_default_under_home(self, monkeypatch):
        monkeypatch.delenv("PENTENV_HOME", raising=False)
        assert get_app_dir() == Path.home() / ".pentenv"


class TestFindConfigFile:
    """Tests for find_config_file."""

    def test_finds_toml_config(self, temp_app_dir):
        """TOML config is found first."""
        (temp_app_dir / "config.toml").write_text("")
        (temp_app_dir / "config.json").write_text("{}")

        found = find_config_file(temp_app_dir)
        assert found.name == "config.toml"

    def test_finds_json_config(self, temp_app_dir):
        """JSON config is found if no TOML."""
        (temp_app_dir / "config.json").write_text("{}")

        found = find_config_file(temp_app_dir)
        assert found.name == "config.json"

    def test_returns_none_if_no_config(self, temp_app_dir):
        """Returns None if no config file found."""
        assert find_config_file(temp_app_dir) is None


class TestLoadJsonConfig:
    """Tests for load_json_config."""

    def test_loads_json(self, temp_app_dir):
        """Loads JSON config file."""
        config_file = temp_app_dir / "config.json"
        config_file.write_text('{"vars": {"indent": 2}}')

        data = load_json_config(config_file)
        assert data["vars"]["indent"] == 2


class TestDictToSettings:
    """Tests for dict_to_settings."""

    def test_empty_gives_defaults(self):
        assert dict_to_settings({}) == Settings()

    def test_sets_workspace_layout(self):
        settings = dict_to_settings({"workspace": {"dir_name": ".env", "vars_file": "v.json"}})
        assert settings.env_dir_name == ".env"
        assert settings.vars_file_name == "v.json"

    def test_sets_vars(self):
        settings = dict_to_settings({"vars": {"indent": 4, "lock_timeout": 2}})
        assert settings.indent == 4
        assert settings.lock_timeout == 2.0

    def test_non_positive_indent_is_compact(self):
        assert dict_to_settings({"vars": {"indent": 0}}).indent is None

    def test_sets_shell_prompts(self):
        settings = dict_to_settings({"shell": {"prompt": "$", "error_prompt": "!"}})
        assert settings.shell.prompt == "$"
        assert settings.shell.error_prompt == "!"

    def test_unknown_sections_ignored(self):
        assert dict_to_settings({"other": {"x": 1}}) == Settings()

    @pytest.mark.parametrize(
        "data",
        [
            {"vars": {"indent": "2"}},
            {"vars": {"indent": True}},
            {"vars": {"lock_timeout": "soon"}},
            {"workspace": {"dir_name": 5}},
            {"shell": {"prompt": None}},
        ],
    )
    def test_invalid_values(self, data):
        with pytest.raises(ConfigError):
            dict_to_settings(data)

    @pytest.mark.parametrize(
        "data",
        [
            {"workspace": 5},
            {"vars": "indent"},
            {"shell": ["prompt"]},
        ],
    )
    def test_section_must_be_table(self, data):
        with pytest.raises(ConfigError, match="must be a table"):
            dict_to_settings(data)


class TestLoadSettings:
    """Tests for load_settings."""

    def test_returns_defaults_without_config(self, temp_app_dir):
        assert load_settings(temp_app_dir) == Settings()

    def test_loads_toml_config(self, temp_app_dir):
        (temp_app_dir / "config.toml").write_text(
            '[vars]\nindent = 2\n\n[shell]\nprompt = "ptv>"\n'
        )
        settings = load_settings(temp_app_dir)
        assert settings.indent == 2
        assert settings.shell.prompt == "ptv>"

    def test_loads_json_config(self, temp_app_dir):
        (temp_app_dir / "config.json").write_text('{"workspace": {"dir_name": ".vars"}}')
        assert load_settings(temp_app_dir).env_dir_name == ".vars"

    def test_explicit_config_path(self, temp_app_dir):
        custom = temp_app_dir / "custom.toml"
        custom.write_text('[vars]\nlock_timeout = 0.5\n')
        assert load_settings(temp_app_dir, custom).lock_timeout == 0.5

    def test_invalid_toml(self, temp_app_dir):
        (temp_app_dir / "config.toml").write_text("[vars\n")
        with pytest.raises(ConfigError):
            load_settings(temp_app_dir)

    def test_scalar_section_in_toml(self, temp_app_dir):
        (temp_app_dir / "config.toml").write_text('workspace = 5\nvars = "indent"\n')
        with pytest.raises(ConfigError):
            load_settings(temp_app_dir)

    def test_non_table_json(self, temp_app_dir):
        (temp_app_dir / "config.json").write_text("[1, 2]")
        with pytest.raises(ConfigError):
            load_settings(temp_app_dir)

    def test_unsupported_suffix(self, temp_app_dir):
        custom = temp_app_dir / "config.yaml"
        custom.write_text("vars: {}")
        with pytest.raises(ConfigError):
            load_settings(temp_app_dir, custom)

    def test_missing_explicit_file(self, temp_app_dir):
        with pytest.raises(ConfigError):
            load_settings(temp_app_dir, temp_app_dir / "nope.toml")


class TestDynamicConfig:
    """Tests for dynamic_config.toml handling."""

    def test_write_then_read(self, temp_app_dir):
        path = temp_app_dir / "dynamic_config.toml"
        write_dyn_conf(path, DynamicConfig(current_workspace="/tmp/box"))
        assert read_dyn_conf(path).current_workspace == "/tmp/box"

    def test_read_missing_key_defaults(self, temp_app_dir):
        path = temp_app_dir / "dynamic_config.toml"
        path.write_text("")
        assert read_dyn_conf(path).current_workspace == ""

    def test_read_invalid(self, temp_app_dir):
        path = temp_app_dir / "dynamic_config.toml"
        path.write_text("current_workspace = 5\n")
        with pytest.raises(ConfigError):
            read_dyn_conf(path)


class TestLoadAppConfig:
    """Tests for load_app_config."""

    def test_first_run_creates_app_dir(self, temp_app_dir):
        app_dir = temp_app_dir / "fresh"
        app_conf = load_app_config(app_dir)

        assert app_dir.is_dir()
        assert app_conf.dyn_conf_path.exists()
        assert app_conf.current_workspace() is None

    def test_selection_persists(self, temp_app_dir):
        app_conf = load_app_config(temp_app_dir)
        app_conf.set_current_workspace(temp_app_dir / "box")

        reloaded = load_app_config(temp_app_dir)
        assert reloaded.current_workspace() == temp_app_dir / "box"

    def test_deselect(self, temp_app_dir):
        app_conf = load_app_config(temp_app_dir)
        app_conf.set_current_workspace(temp_app_dir)
        app_conf.set_current_workspace(None)

        assert load_app_config(temp_app_dir).current_workspace() is None

    def test_paths(self, temp_app_dir):
        app_conf = AppConfig(app_dir=temp_app_dir)
        assert app_conf.dyn_conf_path == temp_app_dir / "dynamic_config.toml"
        assert app_conf.shell_hist_path == temp_app_dir / "shell_history"
