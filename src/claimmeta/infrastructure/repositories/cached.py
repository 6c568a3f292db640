"""Cache-backed repository wrappers.

Each wrapper keeps a read-through cache keyed by tenant, entity kind (and
dialect for external claims) in front of a direct repository. The three
wrappers of one context share a cache. Writes go to the delegate
and then drop the tenant's entries. Callers get a fresh list on every read;
the models inside it are shared and must not be mutated.
"""

from __future__ import annotations

import threading
from collections.abc import Callable, Hashable
from typing import TYPE_CHECKING, TypeVar

if TYPE_CHECKING:
    from claimmeta.domain.models import ClaimDialect, ExternalClaim, LocalClaim
    from claimmeta.infrastructure.repositories.base import (
        DialectRepository,
        ExternalClaimRepository,
        LocalClaimRepository,
    )

_T = TypeVar("_T")


class TenantCache:
    """Thread-safe map of ``(tenant_id, kind, *key) -> list`` entries.

    Every key starts with the tenant id so a tenant can be dropped at once.
    """

    def __init__(self) -> None:
        self._lock = threading.RLock()
        self._entries: dict[tuple[Hashable, ...], list[object]] = {}

    def get_or_load(self, key: tuple[Hashable, ...], loader: Callable[[], list[_T]]) -> list[_T]:
        with self._lock:
            if key in self._entries:
                return list(self._entries[key])  # type: ignore[arg-type]
        # Load outside the lock; a concurrent loader may store the same value.
        value = loader()
        with self._lock:
            self._entries[key] = list(value)
        return list(value)

    def invalidate_tenant(self, tenant_id: int) -> None:
        with self._lock:
            for key in [k for k in self._entries if k[0] == tenant_id]:
                del self._entries[key]

    def clear(self) -> None:
        with self._lock:
            self._entries.clear()

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)


class CachedDialectRepository:
    def __init__(self, delegate: DialectRepository, cache: TenantCache | None = None) -> None:
        self._delegate = delegate
        self.cache = cache if cache is not None else TenantCache()

    def list_dialects(self, tenant_id: int) -> list[ClaimDialect]:
        return self.cache.get_or_load(
            (tenant_id, "dialects"), lambda: self._delegate.list_dialects(tenant_id)
        )

    def add_dialect(self, dialect: ClaimDialect, tenant_id: int) -> None:
        try:
            self._delegate.add_dialect(dialect, tenant_id)
        finally:
            self.cache.invalidate_tenant(tenant_id)


class CachedLocalClaimRepository:
    def __init__(self, delegate: LocalClaimRepository, cache: TenantCache | None = None) -> None:
        self._delegate = delegate
        self.cache = cache if cache is not None else TenantCache()

    def list_local_claims(self, tenant_id: int) -> list[LocalClaim]:
        return self.cache.get_or_load(
            (tenant_id, "local_claims"), lambda: self._delegate.list_local_claims(tenant_id)
        )

    def add_local_claim(self, claim: LocalClaim, tenant_id: int) -> None:
        try:
            self._delegate.add_local_claim(claim, tenant_id)
        finally:
            self.cache.invalidate_tenant(tenant_id)


class CachedExternalClaimRepository:
    def __init__(
        self, delegate: ExternalClaimRepository, cache: TenantCache | None = None
    ) -> None:
        self._delegate = delegate
        self.cache = cache if cache is not None else TenantCache()

    def list_external_claims(self, tenant_id: int, dialect_uri: str) -> list[ExternalClaim]:
        return self.cache.get_or_load(
            (tenant_id, "external_claims", dialect_uri),
            lambda: self._delegate.list_external_claims(tenant_id, dialect_uri),
        )

    def add_external_claim(self, claim: ExternalClaim, tenant_id: int) -> None:
        try:
            self._delegate.add_external_claim(claim, tenant_id)
        finally:
            self.cache.invalidate_tenant(tenant_id)
