"""StoreContext — the single dependency injected into every claim service.

The context owns the database engine and both repository variants:

- **direct**: SQL repositories, used for bulk writes during tenant seeding.
- **cached**: read-through wrappers over the direct ones, used by every
  read on the resolution path. Equal to ``direct`` when caching is off.

It also carries the listener manager, the two primary-domain lookups, and
per-tenant initialization locks. One context is shared by all tenants of a
process; stores bound to individual tenants are cheap to create from it.
"""

from __future__ import annotations

import logging
import threading
from collections.abc import Iterator
from contextlib import contextmanager
from dataclasses import dataclass
from typing import TYPE_CHECKING

from claimmeta.config.claim_config import load_claim_config
from claimmeta.infrastructure.database.engine import init_database
from claimmeta.infrastructure.realm import ConfiguredRealmProvider, StaticPrimaryDomainProvider
from claimmeta.infrastructure.repositories import (
    CachedDialectRepository,
    CachedExternalClaimRepository,
    CachedLocalClaimRepository,
    SqlDialectRepository,
    SqlExternalClaimRepository,
    SqlLocalClaimRepository,
    TenantCache,
)
from claimmeta.plugins.manager import PluginManager

if TYPE_CHECKING:
    from sqlalchemy.engine import Engine

    from claimmeta.config.settings import ClaimMetaSettings
    from claimmeta.domain.legacy import LegacyClaimConfig
    from claimmeta.infrastructure.realm import (
        PrimaryDomainNameProvider,
        RealmConfigurationProvider,
    )
    from claimmeta.infrastructure.repositories import (
        DialectRepository,
        ExternalClaimRepository,
        LocalClaimRepository,
    )

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class RepositorySet:
    """The three claim repositories of one variant."""

    dialects: DialectRepository
    local_claims: LocalClaimRepository
    external_claims: ExternalClaimRepository


class StoreContext:
    """Shared resources for claim metadata stores."""

    def __init__(
        self,
        settings: ClaimMetaSettings,
        *,
        engine: Engine | None = None,
        plugin_manager: PluginManager | None = None,
        primary_domain_provider: PrimaryDomainNameProvider | None = None,
        realm_provider: RealmConfigurationProvider | None = None,
    ) -> None:
        self.settings = settings
        self._engine = engine or init_database(
            settings.database_url(), echo=settings.database.echo
        )

        self.direct = RepositorySet(
            dialects=SqlDialectRepository(self._engine),
            local_claims=SqlLocalClaimRepository(self._engine),
            external_claims=SqlExternalClaimRepository(self._engine),
        )
        self._cache: TenantCache | None = None
        if settings.cache.enabled:
            self._cache = TenantCache()
            self.cached = RepositorySet(
                dialects=CachedDialectRepository(self.direct.dialects, self._cache),
                local_claims=CachedLocalClaimRepository(self.direct.local_claims, self._cache),
                external_claims=CachedExternalClaimRepository(
                    self.direct.external_claims, self._cache
                ),
            )
        else:
            self.cached = self.direct

        self.plugin_manager = plugin_manager or PluginManager()
        if settings.listeners.load_entry_points and not self.plugin_manager.is_loaded:
            self._load_listeners()

        self.primary_domain = primary_domain_provider or StaticPrimaryDomainProvider(
            settings.realm.primary_domain
        )
        self.realm = realm_provider or ConfiguredRealmProvider(settings.realm)

        self._locks_guard = threading.Lock()
        self._tenant_locks: dict[int, threading.Lock] = {}

    @property
    def engine(self) -> Engine:
        """The SQLAlchemy engine."""
        return self._engine

    @contextmanager
    def tenant_lock(self, tenant_id: int) -> Iterator[None]:
        """Serialize initialization of one tenant within this process."""
        with self._locks_guard:
            lock = self._tenant_locks.setdefault(tenant_id, threading.Lock())
        with lock:
            yield

    def invalidate_tenant(self, tenant_id: int) -> None:
        """Drop every cached read for *tenant_id*."""
        if self._cache is not None:
            self._cache.invalidate_tenant(tenant_id)

    def load_legacy_config(self) -> LegacyClaimConfig | None:
        """Read the legacy claim file named in settings, if any."""
        path = self.settings.legacy_claim_config_path()
        if path is None:
            return None
        return load_claim_config(path)

    def close(self) -> None:
        """Dispose the engine."""
        self._engine.dispose()

    def _load_listeners(self) -> None:
        try:
            names = self.plugin_manager.discover_and_load()
        except Exception:
            logger.warning("Failed to load claim listeners from entry points", exc_info=True)
            return
        if names:
            logger.debug("Loaded claim listeners: %s", ", ".join(names))
