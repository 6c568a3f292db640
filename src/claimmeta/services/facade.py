"""LegacyClaimFacade — deprecated read-only views in the old flat shape.

Every view reruns the local → external correlation used by the resolver and
projects the result through :mod:`claimmeta.services.converters`.
Management operations are rejected: this store is read-only.
"""

from __future__ import annotations

import logging

from claimmeta.domain.constants import LOCAL_CLAIM_DIALECT_URI, is_local_dialect
from claimmeta.domain.errors import UnsupportedOperationError
from claimmeta.domain.legacy import Claim, ClaimMapping
from claimmeta.services.base import BaseService
from claimmeta.services.converters import (
    external_claim_to_claim_mapping,
    local_claim_to_claim_mapping,
)

logger = logging.getLogger(__name__)

_READ_ONLY_MESSAGE = "ClaimMetadataStore does not support management operations"


class LegacyClaimFacade(BaseService):
    """Read-only projections for callers of the flat claim API."""

    def get_all_claim_uris(self) -> list[str] | None:
        """Local claim URIs in repository order, or None if a listener vetoes."""
        if not self._context.plugin_manager.allows_get_all_claim_uris():
            return None
        with self._user_store_errors():
            return [c.claim_uri for c in self._list_local_claims()]

    def get_claim(self, claim_uri: str) -> Claim | None:
        mapping = self._find_claim_mapping(claim_uri)
        if mapping is None:
            logger.debug("No claim for claim URI %s", claim_uri)
            return None
        return mapping.claim

    def get_claim_mapping(self, claim_uri: str) -> ClaimMapping | None:
        mapping = self._find_claim_mapping(claim_uri)
        if mapping is None:
            logger.debug("No claim mapping for claim URI %s", claim_uri)
        return mapping

    def get_all_claim_mappings(
        self, dialect_uri: str = LOCAL_CLAIM_DIALECT_URI
    ) -> list[ClaimMapping]:
        """Every claim of *dialect_uri*; external claims are correlated to local ones."""
        primary = self.primary_domain
        with self._user_store_errors():
            local_claims = self._list_local_claims()
            if is_local_dialect(dialect_uri):
                return [local_claim_to_claim_mapping(c, primary) for c in local_claims]

            external_claims = self._context.cached.external_claims.list_external_claims(
                self.tenant_id, dialect_uri
            )
        return [
            external_claim_to_claim_mapping(c, local_claims, primary) for c in external_claims
        ]

    def get_all_supported_claim_mappings_by_default(self) -> list[ClaimMapping]:
        return [m for m in self.get_all_claim_mappings() if m.claim.supported_by_default]

    def get_all_required_claim_mappings(self) -> list[ClaimMapping]:
        return [m for m in self.get_all_claim_mappings() if m.claim.required]

    # ------------------------------------------------------------------
    # Management operations (unsupported)
    # ------------------------------------------------------------------

    def add_new_claim_mapping(self, claim_mapping: ClaimMapping) -> None:
        raise UnsupportedOperationError(_READ_ONLY_MESSAGE)

    def update_claim_mapping(self, claim_mapping: ClaimMapping) -> None:
        raise UnsupportedOperationError(_READ_ONLY_MESSAGE)

    def delete_claim_mapping(self, claim_mapping: ClaimMapping) -> None:
        raise UnsupportedOperationError(_READ_ONLY_MESSAGE)

    # ------------------------------------------------------------------
    # Internal
    # ------------------------------------------------------------------

    def _find_claim_mapping(self, claim_uri: str) -> ClaimMapping | None:
        with self._user_store_errors():
            local_claim = self._locate_local_claim(claim_uri, self._list_local_claims())
        if local_claim is None:
            return None
        return local_claim_to_claim_mapping(local_claim, self.primary_domain)
