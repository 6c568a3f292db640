"""ClaimMetadataStore — the per-tenant entry object.

Construction initializes the tenant: when no dialect is recorded yet, the
legacy claim configuration is imported once. Afterwards every call is a
read delegated to :class:`ClaimAttributeResolver` or
:class:`LegacyClaimFacade`.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from claimmeta.config.errors import ConfigurationError
from claimmeta.config.logging import tenant_context
from claimmeta.domain.constants import LOCAL_CLAIM_DIALECT_URI
from claimmeta.domain.errors import ClaimMetadataError
from claimmeta.services.facade import LegacyClaimFacade
from claimmeta.services.importer import LegacyConfigImporter
from claimmeta.services.resolver import ClaimAttributeResolver

if TYPE_CHECKING:
    from claimmeta.domain.legacy import Claim, ClaimMapping, LegacyClaimConfig
    from claimmeta.infrastructure.context import StoreContext
    from claimmeta.services.result import ServiceResult

logger = logging.getLogger(__name__)


class ClaimMetadataStore:
    """Claim metadata of one tenant.

    Args:
        context: Shared engine, repositories, listeners and domain providers.
        tenant_id: The tenant this store is bound to.
        legacy_config: Claims to seed an empty tenant with. When omitted, the
            file named by ``legacy.claim_config_path`` is read on demand.
    """

    def __init__(
        self,
        context: StoreContext,
        tenant_id: int,
        *,
        legacy_config: LegacyClaimConfig | None = None,
    ) -> None:
        self._context = context
        self.tenant_id = tenant_id
        self._resolver = ClaimAttributeResolver(context, tenant_id)
        self._facade = LegacyClaimFacade(context, tenant_id)
        self.import_result: ServiceResult | None = None
        self._initialize(legacy_config)

    # ------------------------------------------------------------------
    # Initialization
    # ------------------------------------------------------------------

    def _initialize(self, legacy_config: LegacyClaimConfig | None) -> None:
        with tenant_context(self.tenant_id), self._context.tenant_lock(self.tenant_id):
            try:
                dialects = self._context.direct.dialects.list_dialects(self.tenant_id)
            except ClaimMetadataError:
                logger.error(
                    "Error while retrieving claim dialects of tenant %s",
                    self.tenant_id,
                    exc_info=True,
                )
                return
            if dialects:
                return

            if legacy_config is None:
                legacy_config = self._load_legacy_config()
            importer = LegacyConfigImporter(self._context, self.tenant_id)
            self.import_result = importer.import_claims(legacy_config)
            if self.import_result.partial:
                logger.warning(
                    "Claim import for tenant %s finished with %d skipped entries",
                    self.tenant_id,
                    self.import_result.count("skipped"),
                )

    def _load_legacy_config(self) -> LegacyClaimConfig | None:
        try:
            config = self._context.load_legacy_config()
        except ConfigurationError:
            logger.error(
                "Could not read legacy claim configuration; only the local dialect "
                "is created for tenant %s",
                self.tenant_id,
                exc_info=True,
            )
            return None
        if config is None:
            logger.info(
                "No legacy claim configuration set; only the local dialect is "
                "created for tenant %s",
                self.tenant_id,
            )
        return config

    # ------------------------------------------------------------------
    # Attribute resolution
    # ------------------------------------------------------------------

    def resolve_attribute_name(self, domain_name: str | None, claim_uri: str) -> str | None:
        return self._resolver.resolve_attribute_name(domain_name, claim_uri)

    def resolve_primary_attribute_name(self, claim_uri: str) -> str | None:
        return self._resolver.resolve_primary_attribute_name(claim_uri)

    # ------------------------------------------------------------------
    # Deprecated flat views
    # ------------------------------------------------------------------

    def get_all_claim_uris(self) -> list[str] | None:
        return self._facade.get_all_claim_uris()

    def get_claim(self, claim_uri: str) -> Claim | None:
        return self._facade.get_claim(claim_uri)

    def get_claim_mapping(self, claim_uri: str) -> ClaimMapping | None:
        return self._facade.get_claim_mapping(claim_uri)

    def get_all_claim_mappings(
        self, dialect_uri: str = LOCAL_CLAIM_DIALECT_URI
    ) -> list[ClaimMapping]:
        return self._facade.get_all_claim_mappings(dialect_uri)

    def get_all_supported_claim_mappings_by_default(self) -> list[ClaimMapping]:
        return self._facade.get_all_supported_claim_mappings_by_default()

    def get_all_required_claim_mappings(self) -> list[ClaimMapping]:
        return self._facade.get_all_required_claim_mappings()

    def add_new_claim_mapping(self, claim_mapping: ClaimMapping) -> None:
        self._facade.add_new_claim_mapping(claim_mapping)

    def update_claim_mapping(self, claim_mapping: ClaimMapping) -> None:
        self._facade.update_claim_mapping(claim_mapping)

    def delete_claim_mapping(self, claim_mapping: ClaimMapping) -> None:
        self._facade.delete_claim_mapping(claim_mapping)
