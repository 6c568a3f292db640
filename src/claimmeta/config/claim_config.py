"""Legacy claim configuration loader.

The legacy claim map is read from a TOML file of dialect tables, each holding
claim tables::

    [[dialect]]
    uri = "http://wso2.org/claims"

      [[dialect.claim]]
      ClaimURI = "http://wso2.org/claims/emailaddress"
      DisplayName = "Email"
      AttributeID = "mail"
      Required = ""

      [dialect.claim.mapped_attributes]
      SECONDARY = "email"

Every scalar key of a claim table lands in the entry's property holder as a
string. The structural keys (``Dialect``, ``ClaimURI``, ``AttributeID``)
ride along as they do in the legacy flat map; the importer strips them.
"""

from __future__ import annotations

import tomllib
from pathlib import Path
from typing import Any

from claimmeta.config.errors import ConfigurationError, MissingConfigurationError
from claimmeta.domain.constants import (
    ATTRIBUTE_ID_PROPERTY,
    CLAIM_URI_PROPERTY,
    DIALECT_PROPERTY,
)
from claimmeta.domain.legacy import LegacyClaimConfig, LegacyClaimEntry

MAPPED_ATTRIBUTES_KEY = "mapped_attributes"


def _stringify(key: str, value: Any, where: str) -> str:
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, (str, int, float)):
        return str(value)
    msg = f"Unsupported value for {key!r} in {where}: expected a scalar"
    raise ConfigurationError(msg)


def _parse_claim(dialect_uri: str, table: dict[str, Any], where: str) -> LegacyClaimEntry:
    properties: dict[str, str] = {}
    mapped_attributes: dict[str, str] | None = None

    for key, value in table.items():
        if key == MAPPED_ATTRIBUTES_KEY:
            if not isinstance(value, dict):
                msg = f"{MAPPED_ATTRIBUTES_KEY} in {where} must be a table"
                raise ConfigurationError(msg)
            mapped_attributes = {
                str(domain): _stringify(str(domain), attr, where) for domain, attr in value.items()
            }
            continue
        properties[key] = _stringify(key, value, where)

    claim_uri = properties.get(CLAIM_URI_PROPERTY, "").strip()
    if not claim_uri:
        msg = f"Missing {CLAIM_URI_PROPERTY} in {where}"
        raise ConfigurationError(msg)

    properties[DIALECT_PROPERTY] = dialect_uri
    attribute_id = properties.get(ATTRIBUTE_ID_PROPERTY)

    return LegacyClaimEntry(
        dialect_uri=dialect_uri,
        claim_uri=claim_uri,
        mapped_attribute=attribute_id or None,
        mapped_attributes=mapped_attributes,
        properties=properties,
    )


def parse_claim_config(data: dict[str, Any]) -> LegacyClaimConfig:
    """Build a :class:`LegacyClaimConfig` from decoded TOML data.

    Raises :class:`ConfigurationError` for any table of the wrong shape.
    """
    entries: list[LegacyClaimEntry] = []
    dialects = data.get("dialect", [])
    if not isinstance(dialects, list):
        raise ConfigurationError("[[dialect]] must be an array of tables")

    for d_index, dialect in enumerate(dialects):
        if not isinstance(dialect, dict):
            msg = f"Dialect #{d_index} must be a table"
            raise ConfigurationError(msg)
        uri = str(dialect.get("uri", "")).strip()
        if not uri:
            msg = f"Missing uri for dialect #{d_index}"
            raise ConfigurationError(msg)
        claims = dialect.get("claim", [])
        if not isinstance(claims, list):
            msg = f"[[dialect.claim]] of dialect {uri} must be an array of tables"
            raise ConfigurationError(msg)
        for c_index, claim in enumerate(claims):
            where = f"dialect {uri} claim #{c_index}"
            if not isinstance(claim, dict):
                msg = f"Claim in {where} must be a table"
                raise ConfigurationError(msg)
            entries.append(_parse_claim(uri, claim, where))

    return LegacyClaimConfig(entries=entries)


def load_claim_config(path: Path) -> LegacyClaimConfig:
    """Read and parse a legacy claim configuration file."""
    if not path.is_file():
        msg = f"Legacy claim configuration not found: {path}"
        raise MissingConfigurationError(msg)

    try:
        raw = path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as exc:
        msg = f"Cannot read {path}: {exc}"
        raise ConfigurationError(msg) from exc
    try:
        data: dict[str, Any] = tomllib.loads(raw)
    except tomllib.TOMLDecodeError as exc:
        msg = f"Invalid TOML in {path}: {exc}"
        raise ConfigurationError(msg) from exc
    return parse_claim_config(data)
