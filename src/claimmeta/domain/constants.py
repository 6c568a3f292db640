"""Well-known dialect URIs and claim property names.

Property names are the keys used in the legacy claim configuration and in
the stored property map, so they keep their historical spelling.
"""

from __future__ import annotations

from typing import Final

LOCAL_CLAIM_DIALECT_URI: Final[str] = "http://wso2.org/claims"

DEFAULT_PRIMARY_DOMAIN: Final[str] = "PRIMARY"

# --- Structural properties (stripped on import) ---

DIALECT_PROPERTY: Final[str] = "Dialect"
CLAIM_URI_PROPERTY: Final[str] = "ClaimURI"
ATTRIBUTE_ID_PROPERTY: Final[str] = "AttributeID"

# --- Descriptive properties ---

DISPLAY_NAME_PROPERTY: Final[str] = "DisplayName"
DESCRIPTION_PROPERTY: Final[str] = "Description"
REGULAR_EXPRESSION_PROPERTY: Final[str] = "RegEx"
DISPLAY_ORDER_PROPERTY: Final[str] = "DisplayOrder"
SUPPORTED_BY_DEFAULT_PROPERTY: Final[str] = "SupportedByDefault"
REQUIRED_PROPERTY: Final[str] = "Required"
READ_ONLY_PROPERTY: Final[str] = "ReadOnly"
DEFAULT_ATTRIBUTE_PROPERTY: Final[str] = "DefaultAttribute"
MAPPED_LOCAL_CLAIM_PROPERTY: Final[str] = "MappedLocalClaim"

STRUCTURAL_PROPERTIES: Final[tuple[str, ...]] = (
    DIALECT_PROPERTY,
    CLAIM_URI_PROPERTY,
    ATTRIBUTE_ID_PROPERTY,
)

FLAG_PROPERTIES: Final[tuple[str, ...]] = (
    SUPPORTED_BY_DEFAULT_PROPERTY,
    READ_ONLY_PROPERTY,
    REQUIRED_PROPERTY,
)

DEFAULT_DISPLAY_NAME: Final[str] = "0"


def is_local_dialect(dialect_uri: str | None) -> bool:
    """Case-insensitive check against the local dialect URI."""
    return dialect_uri is not None and dialect_uri.lower() == LOCAL_CLAIM_DIALECT_URI.lower()
