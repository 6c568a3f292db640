"""Legacy flat claim shapes.

Two families:

- Input: :class:`LegacyClaimEntry` / :class:`LegacyClaimConfig`, the flat
  claim map that seeds a tenant on first start.
- Output: :class:`Claim` / :class:`ClaimMapping`, the old read shapes still
  returned by the compatibility facade.
"""

from __future__ import annotations

from pydantic import BaseModel, Field

from claimmeta.domain.constants import (
    LOCAL_CLAIM_DIALECT_URI,
    MAPPED_LOCAL_CLAIM_PROPERTY,
    is_local_dialect,
)


class LegacyClaimEntry(BaseModel):
    """One entry of the legacy claim map, keyed by (dialect URI, claim URI)."""

    dialect_uri: str
    claim_uri: str
    mapped_attribute: str | None = None
    mapped_attributes: dict[str, str] | None = None
    properties: dict[str, str] = Field(default_factory=dict)

    @property
    def is_local(self) -> bool:
        return is_local_dialect(self.dialect_uri)

    @property
    def mapped_local_claim_uri(self) -> str | None:
        return self.properties.get(MAPPED_LOCAL_CLAIM_PROPERTY)


class LegacyClaimConfig(BaseModel):
    """Ordered legacy claim map."""

    entries: list[LegacyClaimEntry] = Field(default_factory=list)

    def local_entries(self) -> list[LegacyClaimEntry]:
        return [e for e in self.entries if e.is_local]

    def external_entries(self) -> list[LegacyClaimEntry]:
        return [e for e in self.entries if not e.is_local]

    def external_dialect_uris(self) -> list[str]:
        """Distinct non-local dialect URIs in first-seen order."""
        seen: dict[str, None] = {}
        for entry in self.external_entries():
            seen.setdefault(entry.dialect_uri, None)
        return list(seen)


class Claim(BaseModel):
    """Flat claim description as exposed by the deprecated read API."""

    model_config = {"frozen": True}

    claim_uri: str
    dialect_uri: str = LOCAL_CLAIM_DIALECT_URI
    display_tag: str | None = None
    description: str | None = None
    regex: str | None = None
    display_order: int = 0
    supported_by_default: bool = False
    required: bool = False
    read_only: bool = False


class ClaimMapping(BaseModel):
    """A :class:`Claim` plus its attribute mappings.

    ``mapped_attribute`` is the primary-domain attribute (or the default
    attribute when the primary domain has none); ``mapped_attributes`` holds
    every domain mapping keyed by upper-cased domain name.
    """

    model_config = {"frozen": True}

    claim: Claim
    mapped_attribute: str | None = None
    mapped_attributes: dict[str, str] = Field(default_factory=dict)

    def get_mapped_attribute(self, domain_name: str) -> str | None:
        return self.mapped_attributes.get(domain_name.upper())
