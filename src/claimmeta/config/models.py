"""Pydantic configuration models with code-baked defaults.

Sparse TOML contract: defaults baked here, claimmeta.toml only contains overrides.
"""

from __future__ import annotations

from pathlib import Path
from typing import Literal

from pydantic import BaseModel, Field

from claimmeta.domain.constants import DEFAULT_PRIMARY_DOMAIN

DuplicateDomainPolicy = Literal["last_write_wins", "reject"]


class DatabaseConfig(BaseModel):
    """[database] section.

    ``url`` wins over ``path`` when both are set. A relative ``path`` is
    resolved against the directory holding claimmeta.toml.
    """

    model_config = {"frozen": True}

    path: Path = Path(".claimmeta/claimmeta.db")
    url: str | None = None
    echo: bool = False


class RealmConfig(BaseModel):
    """[realm] section."""

    model_config = {"frozen": True}

    primary_domain: str = DEFAULT_PRIMARY_DOMAIN
    tenant_primary_domains: dict[int, str] = Field(default_factory=dict)


class LegacyImportConfig(BaseModel):
    """[legacy] section."""

    model_config = {"frozen": True}

    claim_config_path: Path | None = None
    duplicate_domain_policy: DuplicateDomainPolicy = "last_write_wins"
    skip_claims_of_failed_dialects: bool = True


class CacheConfig(BaseModel):
    """[cache] section."""

    model_config = {"frozen": True}

    enabled: bool = True


class ListenersConfig(BaseModel):
    """[listeners] section."""

    model_config = {"frozen": True}

    load_entry_points: bool = True
