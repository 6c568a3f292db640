"""Direct SQL repository for claim dialects."""

from __future__ import annotations

from sqlalchemy import Connection, insert, select
from sqlalchemy.engine import Engine
from sqlalchemy.exc import IntegrityError

from claimmeta.domain.errors import ClaimMetadataError, DuplicateDialectError
from claimmeta.domain.models import ClaimDialect
from claimmeta.infrastructure.database.schema import claim_dialects
from claimmeta.infrastructure.repositories.base import store_errors


def get_dialect_id(conn: Connection, tenant_id: int, dialect_uri: str) -> int:
    """Return the row id of a dialect or raise if the tenant lacks it."""
    row = conn.execute(
        select(claim_dialects.c.id).where(
            claim_dialects.c.tenant_id == tenant_id,
            claim_dialects.c.dialect_uri == dialect_uri,
        )
    ).first()
    if row is None:
        msg = f"Claim dialect {dialect_uri} not found in tenant {tenant_id}"
        raise ClaimMetadataError(msg)
    return int(row.id)


class SqlDialectRepository:
    """Reads and writes ``claim_dialects`` rows."""

    def __init__(self, engine: Engine) -> None:
        self._engine = engine

    def list_dialects(self, tenant_id: int) -> list[ClaimDialect]:
        stmt = (
            select(claim_dialects.c.dialect_uri)
            .where(claim_dialects.c.tenant_id == tenant_id)
            .order_by(claim_dialects.c.id)
        )
        with store_errors(f"Error while listing claim dialects of tenant {tenant_id}"):
            with self._engine.connect() as conn:
                rows = conn.execute(stmt).fetchall()
        return [ClaimDialect(dialect_uri=str(row.dialect_uri)) for row in rows]

    def add_dialect(self, dialect: ClaimDialect, tenant_id: int) -> None:
        stmt = insert(claim_dialects).values(tenant_id=tenant_id, dialect_uri=dialect.dialect_uri)
        with store_errors(f"Error while adding claim dialect {dialect.dialect_uri}"):
            try:
                with self._engine.begin() as conn:
                    conn.execute(stmt)
            except IntegrityError as exc:
                raise DuplicateDialectError(dialect.dialect_uri, tenant_id) from exc
