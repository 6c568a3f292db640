"""Claim property hygiene and the typed property view.

Claims persist their metadata as a flat ``str -> str`` map. Two things live
here:

- :func:`fill_claim_properties` — the import-time cleanup applied to legacy
  property holders before they become claim properties.
- :class:`ClaimProperties` — a typed reading of that map with named fields
  for every recognized option. Unrecognized keys are kept in ``extras`` so
  dialect-specific metadata survives a round trip.
"""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator

from claimmeta.domain.constants import (
    DEFAULT_ATTRIBUTE_PROPERTY,
    DEFAULT_DISPLAY_NAME,
    DESCRIPTION_PROPERTY,
    DISPLAY_NAME_PROPERTY,
    DISPLAY_ORDER_PROPERTY,
    FLAG_PROPERTIES,
    MAPPED_LOCAL_CLAIM_PROPERTY,
    READ_ONLY_PROPERTY,
    REGULAR_EXPRESSION_PROPERTY,
    REQUIRED_PROPERTY,
    STRUCTURAL_PROPERTIES,
    SUPPORTED_BY_DEFAULT_PROPERTY,
)


def fill_claim_properties(properties: dict[str, str]) -> dict[str, str]:
    """Clean a legacy property holder in place and return it.

    - Drops the structural keys (dialect, claim URI, attribute id).
    - A flag key that is present with a blank value becomes ``"true"``.
    - A missing display name becomes ``"0"``.

    Absent flag keys stay absent.
    """
    for key in STRUCTURAL_PROPERTIES:
        properties.pop(key, None)

    if DISPLAY_NAME_PROPERTY not in properties:
        properties[DISPLAY_NAME_PROPERTY] = DEFAULT_DISPLAY_NAME

    for key in FLAG_PROPERTIES:
        if key in properties and not (properties[key] or "").strip():
            properties[key] = "true"

    return properties


def parse_flag(value: str | None) -> bool:
    """Read a string-typed boolean (``"true"`` in any case is True)."""
    return value is not None and value.strip().lower() == "true"


class ClaimProperties(BaseModel):
    """Typed view of a claim's property map.

    Field aliases are the stored property names, so
    ``ClaimProperties.from_mapping(claim.claim_properties)`` and
    :meth:`to_mapping` translate between the two representations.
    """

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    display_name: str | None = Field(default=None, alias=DISPLAY_NAME_PROPERTY)
    description: str | None = Field(default=None, alias=DESCRIPTION_PROPERTY)
    regex: str | None = Field(default=None, alias=REGULAR_EXPRESSION_PROPERTY)
    display_order: int | None = Field(default=None, alias=DISPLAY_ORDER_PROPERTY)
    supported_by_default: bool | None = Field(default=None, alias=SUPPORTED_BY_DEFAULT_PROPERTY)
    required: bool | None = Field(default=None, alias=REQUIRED_PROPERTY)
    read_only: bool | None = Field(default=None, alias=READ_ONLY_PROPERTY)
    default_attribute: str | None = Field(default=None, alias=DEFAULT_ATTRIBUTE_PROPERTY)
    mapped_local_claim: str | None = Field(default=None, alias=MAPPED_LOCAL_CLAIM_PROPERTY)
    extras: dict[str, str] = Field(default_factory=dict)

    @field_validator("supported_by_default", "required", "read_only", mode="before")
    @classmethod
    def _parse_flags(cls, value: Any) -> bool | None:
        if value is None or isinstance(value, bool):
            return value
        return parse_flag(str(value))

    @field_validator("display_order", mode="before")
    @classmethod
    def _parse_order(cls, value: Any) -> int | None:
        if value is None or isinstance(value, int):
            return value
        try:
            return int(str(value).strip())
        except ValueError:
            return None

    @classmethod
    def known_keys(cls) -> set[str]:
        return {f.alias for f in cls.model_fields.values() if f.alias is not None}

    @classmethod
    def from_mapping(cls, properties: dict[str, str]) -> ClaimProperties:
        known = cls.known_keys()
        values: dict[str, Any] = {k: v for k, v in properties.items() if k in known}
        extras = {k: v for k, v in properties.items() if k not in known}
        return cls.model_validate({**values, "extras": extras})

    def to_mapping(self) -> dict[str, str]:
        """Serialize back to the stored ``str -> str`` form."""
        result: dict[str, str] = {}
        dumped = self.model_dump(by_alias=True, exclude_none=True, exclude={"extras"})
        for key, value in dumped.items():
            if isinstance(value, bool):
                result[key] = "true" if value else "false"
            else:
                result[key] = str(value)
        result.update(self.extras)
        return result
