"""Tests for the cache-backed repository wrappers."""

from __future__ import annotations

import pytest

from claimmeta.domain.models import ClaimDialect, ExternalClaim, LocalClaim
from claimmeta.infrastructure.repositories import (
    CachedDialectRepository,
    CachedExternalClaimRepository,
    CachedLocalClaimRepository,
    TenantCache,
)


class _CountingStore:
    """In-memory delegate that records every read."""

    def __init__(self) -> None:
        self.reads = 0
        self.dialects: dict[int, list[ClaimDialect]] = {}
        self.local: dict[int, list[LocalClaim]] = {}
        self.external: dict[tuple[int, str], list[ExternalClaim]] = {}
        self.fail_writes = False

    def list_dialects(self, tenant_id: int) -> list[ClaimDialect]:
        self.reads += 1
        return list(self.dialects.get(tenant_id, []))

    def add_dialect(self, dialect: ClaimDialect, tenant_id: int) -> None:
        if self.fail_writes:
            raise RuntimeError("write failed")
        self.dialects.setdefault(tenant_id, []).append(dialect)

    def list_local_claims(self, tenant_id: int) -> list[LocalClaim]:
        self.reads += 1
        return list(self.local.get(tenant_id, []))

    def add_local_claim(self, claim: LocalClaim, tenant_id: int) -> None:
        self.local.setdefault(tenant_id, []).append(claim)

    def list_external_claims(self, tenant_id: int, dialect_uri: str) -> list[ExternalClaim]:
        self.reads += 1
        return list(self.external.get((tenant_id, dialect_uri), []))

    def add_external_claim(self, claim: ExternalClaim, tenant_id: int) -> None:
        self.external.setdefault((tenant_id, claim.dialect_uri), []).append(claim)


@pytest.fixture
def store() -> _CountingStore:
    return _CountingStore()


class TestTenantCache:
    def test_loads_once(self) -> None:
        cache = TenantCache()
        calls: list[int] = []

        def loader() -> list[str]:
            calls.append(1)
            return ["a"]

        assert cache.get_or_load((1,), loader) == ["a"]
        assert cache.get_or_load((1,), loader) == ["a"]
        assert len(calls) == 1

    def test_returns_copies(self) -> None:
        cache = TenantCache()
        first = cache.get_or_load((1,), lambda: ["a"])
        first.append("b")
        assert cache.get_or_load((1,), lambda: []) == ["a"]

    def test_invalidate_tenant_only(self) -> None:
        cache = TenantCache()
        cache.get_or_load((1,), lambda: ["a"])
        cache.get_or_load((1, "urn:x"), lambda: ["b"])
        cache.get_or_load((2,), lambda: ["c"])
        cache.invalidate_tenant(1)
        assert len(cache) == 1

    def test_clear(self) -> None:
        cache = TenantCache()
        cache.get_or_load((1,), lambda: ["a"])
        cache.clear()
        assert len(cache) == 0


class TestCachedDialectRepository:
    def test_read_through(self, store: _CountingStore) -> None:
        repo = CachedDialectRepository(store)
        repo.list_dialects(1)
        repo.list_dialects(1)
        assert store.reads == 1

    def test_add_invalidates(self, store: _CountingStore) -> None:
        repo = CachedDialectRepository(store)
        assert repo.list_dialects(1) == []
        repo.add_dialect(ClaimDialect(dialect_uri="urn:x"), 1)
        assert [d.dialect_uri for d in repo.list_dialects(1)] == ["urn:x"]

    def test_failed_add_still_invalidates(self, store: _CountingStore) -> None:
        repo = CachedDialectRepository(store)
        repo.list_dialects(1)
        store.fail_writes = True
        with pytest.raises(RuntimeError):
            repo.add_dialect(ClaimDialect(dialect_uri="urn:x"), 1)
        repo.list_dialects(1)
        assert store.reads == 2


class TestSharedCache:
    def test_dialects_and_local_claims_cached_apart(self, store: _CountingStore) -> None:
        cache = TenantCache()
        dialects = CachedDialectRepository(store, cache)
        local = CachedLocalClaimRepository(store, cache)
        store.dialects[1] = [ClaimDialect(dialect_uri="urn:x")]
        store.local[1] = [LocalClaim(claim_uri="http://wso2.org/claims/a")]

        assert [c.claim_uri for c in local.list_local_claims(1)] == ["http://wso2.org/claims/a"]
        assert [d.dialect_uri for d in dialects.list_dialects(1)] == ["urn:x"]
        assert [c.claim_uri for c in local.list_local_claims(1)] == ["http://wso2.org/claims/a"]
        assert store.reads == 2

    def test_add_on_one_wrapper_invalidates_all(self, store: _CountingStore) -> None:
        cache = TenantCache()
        local = CachedLocalClaimRepository(store, cache)
        external = CachedExternalClaimRepository(store, cache)

        assert external.list_external_claims(1, "urn:x") == []
        local.add_local_claim(LocalClaim(claim_uri="http://wso2.org/claims/a"), 1)
        external.list_external_claims(1, "urn:x")
        assert store.reads == 2

    def test_external_keyed_by_dialect(self, store: _CountingStore) -> None:
        repo = CachedExternalClaimRepository(store)
        repo.list_external_claims(1, "urn:x")
        repo.list_external_claims(1, "urn:y")
        repo.list_external_claims(1, "urn:x")
        assert store.reads == 2

    def test_external_add_visible(self, store: _CountingStore) -> None:
        repo = CachedExternalClaimRepository(store)
        repo.list_external_claims(1, "urn:x")
        claim = ExternalClaim(
            dialect_uri="urn:x", claim_uri="email", mapped_local_claim_uri="http://wso2.org/claims/a"
        )
        repo.add_external_claim(claim, 1)
        assert repo.list_external_claims(1, "urn:x") == [claim]
