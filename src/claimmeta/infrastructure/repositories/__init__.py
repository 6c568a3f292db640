"""Dialect and claim repositories: direct SQL stores and cached wrappers."""

from claimmeta.infrastructure.repositories.base import (
    DialectRepository,
    ExternalClaimRepository,
    LocalClaimRepository,
)
from claimmeta.infrastructure.repositories.cached import (
    CachedDialectRepository,
    CachedExternalClaimRepository,
    CachedLocalClaimRepository,
    TenantCache,
)
from claimmeta.infrastructure.repositories.claims import (
    SqlExternalClaimRepository,
    SqlLocalClaimRepository,
)
from claimmeta.infrastructure.repositories.dialects import SqlDialectRepository

__all__ = [
    "CachedDialectRepository",
    "CachedExternalClaimRepository",
    "CachedLocalClaimRepository",
    "DialectRepository",
    "ExternalClaimRepository",
    "LocalClaimRepository",
    "SqlDialectRepository",
    "SqlExternalClaimRepository",
    "SqlLocalClaimRepository",
    "TenantCache",
]
