"""LegacyConfigImporter — one-shot seeding of a tenant's claim model.

Pipeline: LOCAL DIALECT → LOCAL CLAIMS → EXTERNAL DIALECTS → EXTERNAL CLAIMS

All writes use the direct repositories; the tenant's cache entries are
dropped once the import finishes. Every failed write is logged and the
entry skipped. One bad entry never aborts the import.

Conflict policies:

- Duplicate domain: an entry whose primary attribute and explicit domain map
  name the same domain with different attributes is resolved by
  ``legacy.duplicate_domain_policy`` (``last_write_wins`` keeps the explicit
  map's value, ``reject`` skips the claim).
- Failed dialect: external claims under a dialect that could not be created,
  and does not exist, are skipped when
  ``legacy.skip_claims_of_failed_dialects`` is set.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from claimmeta.domain.constants import LOCAL_CLAIM_DIALECT_URI
from claimmeta.domain.errors import ClaimMetadataError, DuplicateDialectError
from claimmeta.domain.models import (
    AttributeMapping,
    ClaimDialect,
    ExternalClaim,
    LocalClaim,
    normalize_domain,
)
from claimmeta.domain.properties import fill_claim_properties
from claimmeta.services.base import BaseService
from claimmeta.services.result import ServiceResult

if TYPE_CHECKING:
    from claimmeta.domain.legacy import LegacyClaimConfig, LegacyClaimEntry

logger = logging.getLogger(__name__)

OP = "import_claims"


class LegacyConfigImporter(BaseService):
    """Seeds one tenant from a legacy claim configuration."""

    def import_claims(self, legacy_config: LegacyClaimConfig | None) -> ServiceResult:
        """Create the local dialect, then every dialect and claim in *legacy_config*.

        Returns a ServiceResult whose ``data`` holds the counts of records
        written and ``skipped``; ``warnings`` names each skipped entry. If the
        local dialect already exists the tenant was seeded concurrently and
        nothing else is written.
        """
        warnings: list[str] = []
        counts = {
            "dialects_added": 0,
            "local_claims_added": 0,
            "external_claims_added": 0,
            "skipped": 0,
        }
        repos = self._context.direct

        try:
            # ── LOCAL DIALECT ────────────────────────────────────
            try:
                repos.dialects.add_dialect(
                    ClaimDialect(dialect_uri=LOCAL_CLAIM_DIALECT_URI), self.tenant_id
                )
                counts["dialects_added"] += 1
            except DuplicateDialectError:
                logger.info(
                    "Tenant %s already has the local dialect; skipping claim import",
                    self.tenant_id,
                )
                return ServiceResult(
                    ok=True, op=OP, data={**counts, "already_initialized": True}
                )
            except ClaimMetadataError:
                logger.error(
                    "Error while adding claim dialect %s",
                    LOCAL_CLAIM_DIALECT_URI,
                    exc_info=True,
                )
                warnings.append(f"Could not add claim dialect {LOCAL_CLAIM_DIALECT_URI}")

            if legacy_config is None:
                return ServiceResult(ok=True, op=OP, data=counts, warnings=warnings)

            # ── LOCAL CLAIMS ─────────────────────────────────────
            primary_domain = self._context.primary_domain.get()
            for entry in legacy_config.local_entries():
                if self._add_local_claim(entry, primary_domain, warnings):
                    counts["local_claims_added"] += 1
                else:
                    counts["skipped"] += 1

            # ── EXTERNAL DIALECTS ────────────────────────────────
            failed_dialects: set[str] = set()
            for dialect_uri in legacy_config.external_dialect_uris():
                if self._add_dialect(dialect_uri, warnings):
                    counts["dialects_added"] += 1
                elif self._skip_children_of(dialect_uri):
                    failed_dialects.add(dialect_uri)

            # ── EXTERNAL CLAIMS ──────────────────────────────────
            for entry in legacy_config.external_entries():
                if entry.dialect_uri in failed_dialects:
                    warnings.append(
                        f"Skipped external claim {entry.claim_uri}: "
                        f"dialect {entry.dialect_uri} was not created"
                    )
                    counts["skipped"] += 1
                    continue
                if self._add_external_claim(entry, warnings):
                    counts["external_claims_added"] += 1
                else:
                    counts["skipped"] += 1
        finally:
            self._context.invalidate_tenant(self.tenant_id)

        logger.info(
            "Imported legacy claims for tenant %s: %s",
            self.tenant_id,
            counts,
        )
        return ServiceResult(ok=True, op=OP, data=counts, warnings=warnings)

    # ------------------------------------------------------------------
    # Steps
    # ------------------------------------------------------------------

    def build_mapped_attributes(
        self,
        entry: LegacyClaimEntry,
        primary_domain: str,
        warnings: list[str],
    ) -> list[AttributeMapping] | None:
        """Merge the primary attribute and the domain map of *entry*.

        Returns None when a duplicate domain is rejected by policy.
        """
        policy = self._context.settings.legacy.duplicate_domain_policy
        merged: dict[str, AttributeMapping] = {}

        if entry.mapped_attribute and entry.mapped_attribute.strip():
            mapping = AttributeMapping(
                user_store_domain=primary_domain, attribute_name=entry.mapped_attribute
            )
            merged[mapping.user_store_domain] = mapping

        for domain_name, attribute_name in (entry.mapped_attributes or {}).items():
            key = normalize_domain(domain_name)
            existing = merged.get(key)
            if existing is not None and existing.attribute_name != attribute_name:
                message = (
                    f"Claim {entry.claim_uri} maps domain {key} to both "
                    f"{existing.attribute_name} and {attribute_name}"
                )
                if policy == "reject":
                    logger.error("%s; skipping claim", message)
                    warnings.append(f"{message}; claim skipped")
                    return None
                logger.warning("%s; keeping %s", message, attribute_name)
                warnings.append(f"{message}; kept {attribute_name}")
            merged.pop(key, None)
            merged[key] = AttributeMapping(user_store_domain=key, attribute_name=attribute_name)

        return list(merged.values())

    def _add_local_claim(
        self,
        entry: LegacyClaimEntry,
        primary_domain: str,
        warnings: list[str],
    ) -> bool:
        mapped_attributes = self.build_mapped_attributes(entry, primary_domain, warnings)
        if mapped_attributes is None:
            return False

        local_claim = LocalClaim(
            claim_uri=entry.claim_uri,
            mapped_attributes=mapped_attributes,
            claim_properties=fill_claim_properties(dict(entry.properties)),
        )
        try:
            self._context.direct.local_claims.add_local_claim(local_claim, self.tenant_id)
        except ClaimMetadataError:
            logger.error("Error while adding local claim %s", entry.claim_uri, exc_info=True)
            warnings.append(f"Could not add local claim {entry.claim_uri}")
            return False
        return True

    def _add_dialect(self, dialect_uri: str, warnings: list[str]) -> bool:
        try:
            self._context.direct.dialects.add_dialect(
                ClaimDialect(dialect_uri=dialect_uri), self.tenant_id
            )
        except ClaimMetadataError:
            logger.error("Error while adding claim dialect %s", dialect_uri, exc_info=True)
            warnings.append(f"Could not add claim dialect {dialect_uri}")
            return False
        return True

    def _skip_children_of(self, dialect_uri: str) -> bool:
        """Whether claims of a dialect whose creation failed must be skipped."""
        if not self._context.settings.legacy.skip_claims_of_failed_dialects:
            return False
        try:
            existing = self._context.direct.dialects.list_dialects(self.tenant_id)
        except ClaimMetadataError:
            logger.error("Error while retrieving claim dialects", exc_info=True)
            return True
        return all(d.dialect_uri != dialect_uri for d in existing)

    def _add_external_claim(self, entry: LegacyClaimEntry, warnings: list[str]) -> bool:
        mapped_local_claim_uri = entry.mapped_local_claim_uri
        if not mapped_local_claim_uri:
            logger.error(
                "External claim %s in dialect %s has no mapped local claim",
                entry.claim_uri,
                entry.dialect_uri,
            )
            warnings.append(f"External claim {entry.claim_uri} has no mapped local claim")
            return False

        external_claim = ExternalClaim(
            dialect_uri=entry.dialect_uri,
            claim_uri=entry.claim_uri,
            mapped_local_claim_uri=mapped_local_claim_uri,
            claim_properties=fill_claim_properties(dict(entry.properties)),
        )
        try:
            self._context.direct.external_claims.add_external_claim(
                external_claim, self.tenant_id
            )
        except ClaimMetadataError:
            logger.error(
                "Error while adding external claim %s to dialect %s",
                entry.claim_uri,
                entry.dialect_uri,
                exc_info=True,
            )
            warnings.append(
                f"Could not add external claim {entry.claim_uri} to dialect {entry.dialect_uri}"
            )
            return False
        return True
