"""Configuration — settings, legacy claim file loading, and logging setup."""

from __future__ import annotations

from .claim_config import load_claim_config, parse_claim_config
from .errors import ConfigurationError, MissingConfigurationError
from .logging import configure_from_settings, configure_logging, tenant_context
from .settings import ClaimMetaSettings

__all__ = [
    "ClaimMetaSettings",
    "ConfigurationError",
    "MissingConfigurationError",
    "configure_from_settings",
    "configure_logging",
    "load_claim_config",
    "parse_claim_config",
    "tenant_context",
]
