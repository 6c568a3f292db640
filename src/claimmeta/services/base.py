"""BaseService — foundation for the tenant-bound claim services.

Every service receives a :class:`StoreContext` and a tenant id at
construction. Services hold no other state and are safe to recreate per
call. Reads go through the context's cached repositories.
"""

from __future__ import annotations

import logging
from collections.abc import Iterator
from contextlib import contextmanager
from typing import TYPE_CHECKING

from claimmeta.domain.constants import is_local_dialect
from claimmeta.domain.errors import ClaimMetadataError, UserStoreError

if TYPE_CHECKING:
    from claimmeta.domain.models import LocalClaim
    from claimmeta.infrastructure.context import StoreContext

logger = logging.getLogger(__name__)


class BaseService:
    """Base for services operating on one tenant's claim metadata."""

    def __init__(self, context: StoreContext, tenant_id: int) -> None:
        self._context = context
        self.tenant_id = tenant_id

    @property
    def primary_domain(self) -> str:
        """The tenant's primary user store domain per realm configuration."""
        return self._context.realm.get_primary_domain(self.tenant_id)

    @contextmanager
    def _user_store_errors(self) -> Iterator[None]:
        """Re-raise repository failures as :class:`UserStoreError`."""
        try:
            yield
        except ClaimMetadataError as exc:
            raise UserStoreError(str(exc)) from exc

    def _list_local_claims(self) -> list[LocalClaim]:
        return self._context.cached.local_claims.list_local_claims(self.tenant_id)

    def _locate_local_claim(
        self,
        claim_uri: str,
        local_claims: list[LocalClaim],
    ) -> LocalClaim | None:
        """Find the local claim behind *claim_uri*.

        A direct, case-insensitive match on a local claim URI wins. Otherwise
        the external claims of every non-local dialect are searched, and the
        first match is followed to the local claim it maps to.
        """
        for local_claim in local_claims:
            if local_claim.matches(claim_uri):
                return local_claim

        repos = self._context.cached
        for dialect in repos.dialects.list_dialects(self.tenant_id):
            if is_local_dialect(dialect.dialect_uri):
                continue
            external_claims = repos.external_claims.list_external_claims(
                self.tenant_id, dialect.dialect_uri
            )
            for external_claim in external_claims:
                if not external_claim.matches(claim_uri):
                    continue
                for local_claim in local_claims:
                    if local_claim.matches(external_claim.mapped_local_claim_uri):
                        logger.debug(
                            "Using local claim %s for external claim %s",
                            local_claim.claim_uri,
                            external_claim.claim_uri,
                        )
                        return local_claim
        return None
