"""Primary user store domain lookups.

Two lookups exist and may disagree: the process-wide primary domain name
(used when seeding a tenant from legacy configuration) and the per-tenant
realm configuration (used as the last step of attribute resolution).
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol

from claimmeta.domain.models import normalize_domain

if TYPE_CHECKING:
    from claimmeta.config.models import RealmConfig


class PrimaryDomainNameProvider(Protocol):
    def get(self) -> str: ...


class RealmConfigurationProvider(Protocol):
    def get_primary_domain(self, tenant_id: int) -> str: ...


class StaticPrimaryDomainProvider:
    """Process-wide primary domain name from configuration."""

    def __init__(self, domain_name: str) -> None:
        self._domain_name = normalize_domain(domain_name)

    def get(self) -> str:
        return self._domain_name


class ConfiguredRealmProvider:
    """Per-tenant primary domain from the ``[realm]`` settings section.

    Tenants without an override fall back to ``realm.primary_domain``.
    """

    def __init__(self, realm: RealmConfig) -> None:
        self._realm = realm

    def get_primary_domain(self, tenant_id: int) -> str:
        domain = self._realm.tenant_primary_domains.get(tenant_id, self._realm.primary_domain)
        return normalize_domain(domain)
