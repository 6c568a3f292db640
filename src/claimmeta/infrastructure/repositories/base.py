"""Repository contracts shared by the direct and cache-backed stores."""

from __future__ import annotations

from collections.abc import Iterator
from contextlib import contextmanager
from typing import TYPE_CHECKING, Protocol

from sqlalchemy.exc import SQLAlchemyError

from claimmeta.domain.errors import ClaimMetadataError

if TYPE_CHECKING:
    from claimmeta.domain.models import ClaimDialect, ExternalClaim, LocalClaim


class DialectRepository(Protocol):
    def list_dialects(self, tenant_id: int) -> list[ClaimDialect]: ...

    def add_dialect(self, dialect: ClaimDialect, tenant_id: int) -> None: ...


class LocalClaimRepository(Protocol):
    def list_local_claims(self, tenant_id: int) -> list[LocalClaim]: ...

    def add_local_claim(self, claim: LocalClaim, tenant_id: int) -> None: ...


class ExternalClaimRepository(Protocol):
    def list_external_claims(self, tenant_id: int, dialect_uri: str) -> list[ExternalClaim]: ...

    def add_external_claim(self, claim: ExternalClaim, tenant_id: int) -> None: ...


@contextmanager
def store_errors(message: str) -> Iterator[None]:
    """Translate SQLAlchemy failures into :class:`ClaimMetadataError`."""
    try:
        yield
    except SQLAlchemyError as exc:
        raise ClaimMetadataError(f"{message}: {exc}") from exc
