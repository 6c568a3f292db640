"""Projection of normalized claims into the legacy Claim/ClaimMapping shape."""

from __future__ import annotations

from claimmeta.domain.legacy import Claim, ClaimMapping
from claimmeta.domain.models import ExternalClaim, LocalClaim
from claimmeta.domain.properties import ClaimProperties


def _build_claim(claim_uri: str, dialect_uri: str, properties: ClaimProperties) -> Claim:
    return Claim(
        claim_uri=claim_uri,
        dialect_uri=dialect_uri,
        display_tag=properties.display_name,
        description=properties.description,
        regex=properties.regex,
        display_order=properties.display_order or 0,
        supported_by_default=bool(properties.supported_by_default),
        required=bool(properties.required),
        read_only=bool(properties.read_only),
    )


def _mapped_attributes(local_claim: LocalClaim) -> dict[str, str]:
    return {m.user_store_domain: m.attribute_name for m in local_claim.mapped_attributes}


def _primary_attribute(local_claim: LocalClaim, primary_domain: str) -> str | None:
    return local_claim.get_mapped_attribute(primary_domain) or local_claim.default_attribute


def local_claim_to_claim_mapping(local_claim: LocalClaim, primary_domain: str) -> ClaimMapping:
    """Project a local claim; ``mapped_attribute`` is the primary-domain one."""
    claim = _build_claim(local_claim.claim_uri, local_claim.dialect_uri, local_claim.properties)
    return ClaimMapping(
        claim=claim,
        mapped_attribute=_primary_attribute(local_claim, primary_domain),
        mapped_attributes=_mapped_attributes(local_claim),
    )


def external_claim_to_claim_mapping(
    external_claim: ExternalClaim,
    local_claims: list[LocalClaim],
    primary_domain: str,
) -> ClaimMapping:
    """Project an external claim through the local claim it maps to.

    Descriptive fields and attributes come from the mapped local claim. When
    that claim is missing the external claim's own properties are used and
    the mapping carries no attributes.
    """
    local_claim = next(
        (lc for lc in local_claims if lc.matches(external_claim.mapped_local_claim_uri)),
        None,
    )
    if local_claim is None:
        claim = _build_claim(
            external_claim.claim_uri, external_claim.dialect_uri, external_claim.properties
        )
        return ClaimMapping(claim=claim)

    claim = _build_claim(
        external_claim.claim_uri, external_claim.dialect_uri, local_claim.properties
    )
    return ClaimMapping(
        claim=claim,
        mapped_attribute=_primary_attribute(local_claim, primary_domain),
        mapped_attributes=_mapped_attributes(local_claim),
    )
