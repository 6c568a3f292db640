"""Normalized claim metadata model: dialects, local claims, external claims.

Every entity is tenant scoped; the tenant id lives in repository keys, not
in the models themselves.

INVARIANT: A LocalClaim holds at most one AttributeMapping per user store
domain. Domains compare case-insensitively and are stored upper-cased.
"""

from __future__ import annotations

from pydantic import BaseModel, Field, field_validator, model_validator

from claimmeta.domain.constants import (
    DEFAULT_ATTRIBUTE_PROPERTY,
    LOCAL_CLAIM_DIALECT_URI,
    is_local_dialect,
)
from claimmeta.domain.properties import ClaimProperties


def normalize_domain(domain_name: str) -> str:
    """Canonical form of a user store domain name."""
    return domain_name.strip().upper()


class ClaimDialect(BaseModel):
    """A namespace URI grouping a set of claim URIs."""

    model_config = {"frozen": True}

    dialect_uri: str

    @property
    def is_local(self) -> bool:
        return is_local_dialect(self.dialect_uri)


class AttributeMapping(BaseModel):
    """Immutable (domain, attribute) pair."""

    model_config = {"frozen": True}

    user_store_domain: str
    attribute_name: str

    @field_validator("user_store_domain")
    @classmethod
    def _upper_domain(cls, value: str) -> str:
        return normalize_domain(value)


class _ClaimBase(BaseModel):
    claim_uri: str
    claim_properties: dict[str, str] = Field(default_factory=dict)

    def get_claim_property(self, name: str) -> str | None:
        return self.claim_properties.get(name)

    @property
    def properties(self) -> ClaimProperties:
        """Typed view over the string property map."""
        return ClaimProperties.from_mapping(self.claim_properties)


class LocalClaim(_ClaimBase):
    """A claim in the local dialect with one attribute per user store domain."""

    mapped_attributes: list[AttributeMapping] = Field(default_factory=list)

    @model_validator(mode="after")
    def _one_mapping_per_domain(self) -> LocalClaim:
        seen: set[str] = set()
        for mapping in self.mapped_attributes:
            if mapping.user_store_domain in seen:
                msg = (
                    f"Duplicate attribute mapping for domain {mapping.user_store_domain} "
                    f"in claim {self.claim_uri}"
                )
                raise ValueError(msg)
            seen.add(mapping.user_store_domain)
        return self

    @property
    def dialect_uri(self) -> str:
        return LOCAL_CLAIM_DIALECT_URI

    def get_mapped_attribute(self, domain_name: str | None) -> str | None:
        """Return the attribute mapped for *domain_name*, if any."""
        if not domain_name:
            return None
        wanted = normalize_domain(domain_name)
        for mapping in self.mapped_attributes:
            if mapping.user_store_domain == wanted:
                return mapping.attribute_name
        return None

    def set_mapped_attribute(self, domain_name: str, attribute_name: str) -> None:
        """Append a mapping, replacing any existing one for the same domain."""
        new = AttributeMapping(user_store_domain=domain_name, attribute_name=attribute_name)
        self.mapped_attributes = [
            m for m in self.mapped_attributes if m.user_store_domain != new.user_store_domain
        ]
        self.mapped_attributes.append(new)

    @property
    def default_attribute(self) -> str | None:
        return self.claim_properties.get(DEFAULT_ATTRIBUTE_PROPERTY)

    def matches(self, claim_uri: str | None) -> bool:
        return claim_uri is not None and self.claim_uri.lower() == claim_uri.lower()


class ExternalClaim(_ClaimBase):
    """A claim in a non-local dialect, bound to exactly one local claim."""

    dialect_uri: str
    mapped_local_claim_uri: str

    def matches(self, claim_uri: str | None) -> bool:
        return claim_uri is not None and self.claim_uri.lower() == claim_uri.lower()
