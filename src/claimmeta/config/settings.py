"""Unified settings — init kwargs, env vars, and TOML config in one object.

Priority chain (highest to lowest):
  1. Init kwargs  — overrides passed by the embedding application
  2. Env vars     — ``CLAIMMETA_*`` prefix
  3. TOML file    — ``claimmeta.toml`` discovered via walk-up
  4. Code defaults — baked into the section models

Uses Pydantic Settings v2 with a custom :class:`TomlSettingsSource` that
reuses the walk-up discovery from :mod:`claimmeta.config.discovery`.
"""

from __future__ import annotations

import threading
import tomllib
from pathlib import Path
from typing import Any

from pydantic import Field
from pydantic_settings import BaseSettings, PydanticBaseSettingsSource

from claimmeta.config.discovery import find_config
from claimmeta.config.errors import ConfigurationError, MissingConfigurationError
from claimmeta.config.models import (
    CacheConfig,
    DatabaseConfig,
    LegacyImportConfig,
    ListenersConfig,
    RealmConfig,
)


class TomlSettingsSource(PydanticBaseSettingsSource):
    """Read settings from a ``claimmeta.toml`` file discovered via walk-up."""

    def __init__(self, settings_cls: type[BaseSettings], toml_path: Path | None) -> None:
        super().__init__(settings_cls)
        self._data: dict[str, Any] = {}
        if toml_path and toml_path.is_file():
            raw = toml_path.read_text(encoding="utf-8")
            try:
                self._data = tomllib.loads(raw)
            except tomllib.TOMLDecodeError as exc:
                msg = f"Invalid TOML in {toml_path}: {exc}"
                raise ConfigurationError(msg) from exc

    def get_field_value(self, field: Any, field_name: str) -> tuple[Any, str, bool]:
        """Return ``(value, field_name, value_is_complex)``."""
        val = self._data.get(field_name)
        return val, field_name, field_name in self._data

    def __call__(self) -> dict[str, Any]:
        """Return the full TOML data dict for Pydantic to merge."""
        return self._data


# Thread-local storage for TOML path during construction.
_tls = threading.local()


class ClaimMetaSettings(BaseSettings):
    """Settings for the claim metadata store.

    Attributes:
        root_dir: Base for relative paths (parent of ``claimmeta.toml``,
            or CWD if no config found).
        config_path: The TOML file the settings were read from, if any.
    """

    model_config = {
        "frozen": True,
        "env_prefix": "CLAIMMETA_",
        "env_nested_delimiter": "__",
    }

    root_dir: Path = Field(default_factory=Path.cwd)
    config_path: Path | None = None

    verbose: bool = False
    log_json: bool = False

    database: DatabaseConfig = Field(default_factory=DatabaseConfig)
    realm: RealmConfig = Field(default_factory=RealmConfig)
    legacy: LegacyImportConfig = Field(default_factory=LegacyImportConfig)
    cache: CacheConfig = Field(default_factory=CacheConfig)
    listeners: ListenersConfig = Field(default_factory=ListenersConfig)

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls: type[BaseSettings],
        init_settings: PydanticBaseSettingsSource,
        env_settings: PydanticBaseSettingsSource,
        dotenv_settings: PydanticBaseSettingsSource,
        file_secret_settings: PydanticBaseSettingsSource,
    ) -> tuple[PydanticBaseSettingsSource, ...]:
        """Insert TOML source between env vars and defaults."""
        toml_path = getattr(_tls, "toml_path", None)
        return (
            init_settings,
            env_settings,
            TomlSettingsSource(settings_cls, toml_path),
        )

    @classmethod
    def load(
        cls,
        *,
        config_path: str | Path | None = None,
        root_dir: Path | None = None,
        **overrides: Any,
    ) -> ClaimMetaSettings:
        """Construct settings for an embedding application.

        Discovers ``claimmeta.toml`` via walk-up from *root_dir* (or uses the
        explicit *config_path*), resolves *root_dir* from the config file's
        parent directory, and merges *overrides* as highest priority.

        Raises:
            MissingConfigurationError: *config_path* was given but is not a file.
        """
        toml_path: Path | None = None
        if config_path:
            toml_path = Path(config_path)
            if not toml_path.is_file():
                msg = f"Config file not found: {toml_path}"
                raise MissingConfigurationError(msg)
        else:
            toml_path = find_config(root_dir)

        resolved_root = root_dir
        if resolved_root is None:
            resolved_root = toml_path.parent if toml_path else Path.cwd()

        _tls.toml_path = toml_path
        try:
            return cls(
                root_dir=resolved_root,
                config_path=toml_path,
                **overrides,
            )
        finally:
            _tls.toml_path = None

    def resolve_path(self, path: Path) -> Path:
        """Resolve *path* against :attr:`root_dir` unless it is absolute."""
        path = path.expanduser()
        return path if path.is_absolute() else self.root_dir / path

    def database_url(self) -> str:
        if self.database.url:
            return self.database.url
        return f"sqlite:///{self.resolve_path(self.database.path)}"

    def legacy_claim_config_path(self) -> Path | None:
        if self.legacy.claim_config_path is None:
            return None
        return self.resolve_path(self.legacy.claim_config_path)
