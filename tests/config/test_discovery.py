"""Tests for config file discovery."""

from pathlib import Path

import pytest

from claimmeta.config.discovery import (
    CONFIG_ENV_VAR,
    CONFIG_FILENAME,
    config_from_env,
    find_config,
)


class TestFindConfig:
    def test_finds_in_current_dir(self, tmp_path: Path) -> None:
        config_file = tmp_path / CONFIG_FILENAME
        config_file.write_text('[realm]\nprimary_domain = "PRIMARY"\n')
        assert find_config(tmp_path) == config_file

    def test_walks_up(self, tmp_path: Path) -> None:
        config_file = tmp_path / CONFIG_FILENAME
        config_file.write_text("")
        child = tmp_path / "a" / "b" / "c"
        child.mkdir(parents=True)
        assert find_config(child) == config_file

    def test_returns_none_when_not_found(self, tmp_path: Path) -> None:
        child = tmp_path / "empty"
        child.mkdir()
        assert find_config(child) is None

    def test_env_var_override(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        config_file = tmp_path / "custom.toml"
        config_file.write_text("")
        monkeypatch.setenv(CONFIG_ENV_VAR, str(config_file))
        assert find_config(tmp_path / "elsewhere") == config_file

    def test_env_var_pointing_nowhere(
        self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        """A dangling CLAIMMETA_CONFIG disables walk-up instead of falling back."""
        (tmp_path / CONFIG_FILENAME).write_text("")
        monkeypatch.setenv(CONFIG_ENV_VAR, str(tmp_path / "missing.toml"))
        assert find_config(tmp_path) is None

    def test_blank_env_var_ignored(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        config_file = tmp_path / CONFIG_FILENAME
        config_file.write_text("")
        monkeypatch.setenv(CONFIG_ENV_VAR, "  ")
        assert find_config(tmp_path) == config_file


class TestConfigFromEnv:
    def test_unset(self) -> None:
        assert config_from_env() is None

    def test_set(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv(CONFIG_ENV_VAR, str(tmp_path / "a.toml"))
        assert config_from_env() == tmp_path / "a.toml"
