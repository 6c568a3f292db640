"""Direct SQL repositories for local and external claims.

Both claim kinds live in ``claims``; this module owns the joins that
reassemble attribute mappings, properties, and the external → local link
into pydantic models. Rows come back in insertion order.
"""

from __future__ import annotations

from collections import defaultdict

from sqlalchemy import Connection, insert, select
from sqlalchemy.engine import Engine
from sqlalchemy.exc import IntegrityError

from claimmeta.domain.constants import LOCAL_CLAIM_DIALECT_URI
from claimmeta.domain.errors import ClaimMetadataError
from claimmeta.domain.models import AttributeMapping, ExternalClaim, LocalClaim
from claimmeta.infrastructure.database.schema import (
    claim_attribute_mappings,
    claim_dialects,
    claim_properties,
    claims,
    external_claim_mappings,
)
from claimmeta.infrastructure.repositories.base import store_errors
from claimmeta.infrastructure.repositories.dialects import get_dialect_id


def _claim_rows(conn: Connection, tenant_id: int, dialect_uri: str) -> list[tuple[int, str]]:
    stmt = (
        select(claims.c.id, claims.c.claim_uri)
        .join(claim_dialects, claims.c.dialect_id == claim_dialects.c.id)
        .where(
            claims.c.tenant_id == tenant_id,
            claim_dialects.c.dialect_uri == dialect_uri,
        )
        .order_by(claims.c.id)
    )
    return [(int(row.id), str(row.claim_uri)) for row in conn.execute(stmt)]


def _load_properties(conn: Connection, claim_ids: list[int]) -> dict[int, dict[str, str]]:
    result: dict[int, dict[str, str]] = defaultdict(dict)
    if not claim_ids:
        return result
    stmt = (
        select(
            claim_properties.c.claim_id,
            claim_properties.c.property_name,
            claim_properties.c.property_value,
        )
        .where(claim_properties.c.claim_id.in_(claim_ids))
        .order_by(claim_properties.c.id)
    )
    for row in conn.execute(stmt):
        result[int(row.claim_id)][str(row.property_name)] = str(row.property_value)
    return result


def _insert_claim(
    conn: Connection,
    tenant_id: int,
    dialect_id: int,
    claim_uri: str,
    properties: dict[str, str],
) -> int:
    result = conn.execute(
        insert(claims).values(tenant_id=tenant_id, dialect_id=dialect_id, claim_uri=claim_uri)
    )
    claim_id = result.inserted_primary_key[0]
    if properties:
        conn.execute(
            insert(claim_properties),
            [
                {"claim_id": claim_id, "property_name": k, "property_value": v}
                for k, v in properties.items()
            ],
        )
    return int(claim_id)


def get_local_claim_id(conn: Connection, tenant_id: int, claim_uri: str) -> int:
    """Return the row id of a local claim or raise if missing."""
    stmt = (
        select(claims.c.id)
        .join(claim_dialects, claims.c.dialect_id == claim_dialects.c.id)
        .where(
            claims.c.tenant_id == tenant_id,
            claim_dialects.c.dialect_uri == LOCAL_CLAIM_DIALECT_URI,
            claims.c.claim_uri == claim_uri,
        )
    )
    row = conn.execute(stmt).first()
    if row is None:
        msg = f"Local claim {claim_uri} not found in tenant {tenant_id}"
        raise ClaimMetadataError(msg)
    return int(row.id)


class SqlLocalClaimRepository:
    """Reads and writes local claims with their attribute mappings."""

    def __init__(self, engine: Engine) -> None:
        self._engine = engine

    def list_local_claims(self, tenant_id: int) -> list[LocalClaim]:
        with store_errors(f"Error while listing local claims of tenant {tenant_id}"):
            with self._engine.connect() as conn:
                rows = _claim_rows(conn, tenant_id, LOCAL_CLAIM_DIALECT_URI)
                claim_ids = [claim_id for claim_id, _ in rows]
                properties = _load_properties(conn, claim_ids)
                mappings = self._load_mappings(conn, claim_ids)

        return [
            LocalClaim(
                claim_uri=claim_uri,
                mapped_attributes=mappings.get(claim_id, []),
                claim_properties=properties.get(claim_id, {}),
            )
            for claim_id, claim_uri in rows
        ]

    def add_local_claim(self, claim: LocalClaim, tenant_id: int) -> None:
        with store_errors(f"Error while adding local claim {claim.claim_uri}"):
            try:
                with self._engine.begin() as conn:
                    dialect_id = get_dialect_id(conn, tenant_id, LOCAL_CLAIM_DIALECT_URI)
                    claim_id = _insert_claim(
                        conn, tenant_id, dialect_id, claim.claim_uri, claim.claim_properties
                    )
                    if claim.mapped_attributes:
                        conn.execute(
                            insert(claim_attribute_mappings),
                            [
                                {
                                    "claim_id": claim_id,
                                    "user_store_domain": m.user_store_domain,
                                    "attribute_name": m.attribute_name,
                                }
                                for m in claim.mapped_attributes
                            ],
                        )
            except IntegrityError as exc:
                msg = f"Local claim {claim.claim_uri} already exists in tenant {tenant_id}"
                raise ClaimMetadataError(msg) from exc

    @staticmethod
    def _load_mappings(conn: Connection, claim_ids: list[int]) -> dict[int, list[AttributeMapping]]:
        result: dict[int, list[AttributeMapping]] = defaultdict(list)
        if not claim_ids:
            return result
        stmt = (
            select(
                claim_attribute_mappings.c.claim_id,
                claim_attribute_mappings.c.user_store_domain,
                claim_attribute_mappings.c.attribute_name,
            )
            .where(claim_attribute_mappings.c.claim_id.in_(claim_ids))
            .order_by(claim_attribute_mappings.c.id)
        )
        for row in conn.execute(stmt):
            result[int(row.claim_id)].append(
                AttributeMapping(
                    user_store_domain=str(row.user_store_domain),
                    attribute_name=str(row.attribute_name),
                )
            )
        return result


class SqlExternalClaimRepository:
    """Reads and writes external claims and their local claim references."""

    def __init__(self, engine: Engine) -> None:
        self._engine = engine

    def list_external_claims(self, tenant_id: int, dialect_uri: str) -> list[ExternalClaim]:
        local = claims.alias("local_claims")
        with store_errors(f"Error while listing external claims of dialect {dialect_uri}"):
            with self._engine.connect() as conn:
                rows = _claim_rows(conn, tenant_id, dialect_uri)
                claim_ids = [claim_id for claim_id, _ in rows]
                properties = _load_properties(conn, claim_ids)
                links: dict[int, str] = {}
                if claim_ids:
                    stmt = (
                        select(external_claim_mappings.c.external_claim_id, local.c.claim_uri)
                        .join(local, external_claim_mappings.c.mapped_local_claim_id == local.c.id)
                        .where(external_claim_mappings.c.external_claim_id.in_(claim_ids))
                    )
                    links = {int(r.external_claim_id): str(r.claim_uri) for r in conn.execute(stmt)}

        return [
            ExternalClaim(
                dialect_uri=dialect_uri,
                claim_uri=claim_uri,
                mapped_local_claim_uri=links.get(claim_id, ""),
                claim_properties=properties.get(claim_id, {}),
            )
            for claim_id, claim_uri in rows
        ]

    def add_external_claim(self, claim: ExternalClaim, tenant_id: int) -> None:
        with store_errors(f"Error while adding external claim {claim.claim_uri}"):
            try:
                with self._engine.begin() as conn:
                    dialect_id = get_dialect_id(conn, tenant_id, claim.dialect_uri)
                    local_id = get_local_claim_id(conn, tenant_id, claim.mapped_local_claim_uri)
                    claim_id = _insert_claim(
                        conn, tenant_id, dialect_id, claim.claim_uri, claim.claim_properties
                    )
                    conn.execute(
                        insert(external_claim_mappings).values(
                            external_claim_id=claim_id, mapped_local_claim_id=local_id
                        )
                    )
            except IntegrityError as exc:
                msg = (
                    f"External claim {claim.claim_uri} already exists in dialect "
                    f"{claim.dialect_uri} of tenant {tenant_id}"
                )
                raise ClaimMetadataError(msg) from exc
