"""Tests for the constraints carried by the schema."""

import pytest
from sqlalchemy import Connection
from sqlalchemy.engine import Engine
from sqlalchemy.exc import IntegrityError

from claimmeta.infrastructure.database.schema import (
    claim_attribute_mappings,
    claim_dialects,
    claims,
    external_claim_mappings,
)


def _seed_claim(conn: Connection, tenant_id: int = 1) -> int:
    dialect_id = conn.execute(
        claim_dialects.insert().values(tenant_id=tenant_id, dialect_uri="http://wso2.org/claims")
    ).inserted_primary_key[0]
    return conn.execute(
        claims.insert().values(
            tenant_id=tenant_id, dialect_id=dialect_id, claim_uri="http://wso2.org/claims/test"
        )
    ).inserted_primary_key[0]


class TestSchemaConstraints:
    def test_dialect_unique_per_tenant(self, db_engine: Engine) -> None:
        with db_engine.begin() as conn:
            conn.execute(claim_dialects.insert().values(tenant_id=1, dialect_uri="urn:a"))
            conn.execute(claim_dialects.insert().values(tenant_id=2, dialect_uri="urn:a"))
        with pytest.raises(IntegrityError):
            with db_engine.begin() as conn:
                conn.execute(claim_dialects.insert().values(tenant_id=1, dialect_uri="urn:a"))

    def test_one_mapping_per_domain(self, db_engine: Engine) -> None:
        with db_engine.begin() as conn:
            claim_id = _seed_claim(conn)
            conn.execute(
                claim_attribute_mappings.insert().values(
                    claim_id=claim_id, user_store_domain="PRIMARY", attribute_name="uid"
                )
            )
        with pytest.raises(IntegrityError):
            with db_engine.begin() as conn:
                conn.execute(
                    claim_attribute_mappings.insert().values(
                        claim_id=claim_id, user_store_domain="PRIMARY", attribute_name="cn"
                    )
                )

    def test_external_mapping_requires_local_claim(self, db_engine: Engine) -> None:
        with db_engine.begin() as conn:
            claim_id = _seed_claim(conn)
        with pytest.raises(IntegrityError):
            with db_engine.begin() as conn:
                conn.execute(
                    external_claim_mappings.insert().values(
                        external_claim_id=claim_id, mapped_local_claim_id=9999
                    )
                )
