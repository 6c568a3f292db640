"""Error taxonomy for claim metadata operations.

- Invalid arguments are plain :class:`ValueError` and are not defined here.
- Repository failures raise :class:`ClaimMetadataError`.
- The resolution and facade paths re-raise those as :class:`UserStoreError`.
- An exhausted attribute fallback chain is a :class:`MappedAttributeNotFoundError`.
"""

from __future__ import annotations


class ClaimMetadataError(Exception):
    """Raised by repositories when a read or write fails."""


class DuplicateDialectError(ClaimMetadataError):
    """Raised when a dialect already exists for the tenant."""

    def __init__(self, dialect_uri: str, tenant_id: int) -> None:
        super().__init__(f"Claim dialect {dialect_uri} already exists in tenant {tenant_id}")
        self.dialect_uri = dialect_uri
        self.tenant_id = tenant_id


class UserStoreError(Exception):
    """Raised to callers of the resolver and facade when the store fails."""


class MappedAttributeNotFoundError(RuntimeError):
    """No domain mapping, default attribute, or primary-domain mapping exists."""

    def __init__(self, claim_uri: str) -> None:
        super().__init__(f"Cannot find suitable mapped attribute for local claim {claim_uri}")
        self.claim_uri = claim_uri


class UnsupportedOperationError(RuntimeError):
    """Raised by management entry points on the read-only store."""
