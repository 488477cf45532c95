"""Unit tests for configuration loading."""

import json
from pathlib import Path

import pytest

from flexcon.config.loader import config_layers, load_config
from flexcon.config.schema import Config
from flexcon.core.constants import DISCOVER, UPDATE_QUEUE_SIZE
from flexcon.core.errors import ConfigError


def write_config(directory: Path, data: object) -> Path:
    directory.mkdir(parents=True, exist_ok=True)
    path = directory / "config.json"
    path.write_text(json.dumps(data), encoding="utf-8")
    return path


class TestDefaults:
    """Tests for schema defaults."""

    def test_defaults(self) -> None:
        config = Config()
        assert config.connection.radio == DISCOVER
        assert config.console.update_queue_size == UPDATE_QUEUE_SIZE
        assert config.console.command_timeout is None
        assert config.console.startup_commands == ["sub slice all"]
        assert config.log_level == "WARNING"

    def test_no_files_gives_defaults(self, tmp_path: Path) -> None:
        config = load_config(cwd=tmp_path / "project", home_dir=tmp_path / "home")
        assert config == Config()


class TestLayering:
    """Tests for global + local merge."""

    def test_local_overrides_global(self, tmp_path: Path) -> None:
        home = tmp_path / "home"
        project = tmp_path / "project"
        write_config(home, {"connection": {"radio": "10.0.0.1"}, "log_level": "INFO"})
        write_config(project / ".flexcon", {"connection": {"radio": "10.0.0.2"}})

        config = load_config(cwd=project, home_dir=home)
        assert config.connection.radio == "10.0.0.2"
        assert config.log_level == "INFO"

    def test_local_list_replaces_global(self, tmp_path: Path) -> None:
        home = tmp_path / "home"
        project = tmp_path / "project"
        write_config(home, {"console": {"startup_commands": ["sub slice all", "sub tx all"]}})
        write_config(project / ".flexcon", {"console": {"startup_commands": []}})

        config = load_config(cwd=project, home_dir=home)
        assert config.console.startup_commands == []

    def test_explicit_path(self, tmp_path: Path) -> None:
        path = write_config(tmp_path, {"console": {"command_timeout": 5}})
        assert load_config(path=path).console.command_timeout == 5.0


class TestErrors:
    """Tests for fail-fast validation."""

    def test_invalid_json(self, tmp_path: Path) -> None:
        home = tmp_path / "home"
        home.mkdir()
        (home / "config.json").write_text("{not json", encoding="utf-8")
        with pytest.raises(ConfigError, match="Invalid JSON"):
            load_config(cwd=tmp_path, home_dir=home)

    def test_unknown_field(self, tmp_path: Path) -> None:
        home = tmp_path / "home"
        write_config(home, {"colour": "red"})
        with pytest.raises(ConfigError, match="Invalid settings"):
            load_config(cwd=tmp_path, home_dir=home)

    def test_non_object(self, tmp_path: Path) -> None:
        path = write_config(tmp_path, ["radio"])
        with pytest.raises(ConfigError, match="Expected object"):
            load_config(path=path)

    def test_missing_explicit_path(self, tmp_path: Path) -> None:
        with pytest.raises(ConfigError, match="Config file not found"):
            load_config(path=tmp_path / "missing.json")

    def test_empty_radio_rejected(self, tmp_path: Path) -> None:
        path = write_config(tmp_path, {"connection": {"radio": "  "}})
        with pytest.raises(ConfigError):
            load_config(path=path)

    def test_timeout_must_be_positive(self, tmp_path: Path) -> None:
        path = write_config(tmp_path, {"console": {"command_timeout": 0}})
        with pytest.raises(ConfigError):
            load_config(path=path)


class TestConfigLayers:
    def test_user_then_local(self, tmp_path: Path) -> None:
        layers = config_layers(cwd=tmp_path / "project", home_dir=tmp_path / "home")
        assert layers == [
            tmp_path / "home" / "config.json",
            tmp_path / "project" / ".flexcon" / "config.json",
        ]

    def test_same_file_listed_once(self, tmp_path: Path) -> None:
        layers = config_layers(cwd=tmp_path, home_dir=tmp_path / ".flexcon")
        assert layers == [tmp_path / ".flexcon" / "config.json"]
