"""SQLAlchemy Core table definitions for the claim metadata database.

Local and external claims share the ``claims`` table; a claim belongs to
its dialect row, and an external claim points at its local claim through
``external_claim_mappings``. Unique constraints carry the model invariants:

- one dialect URI per tenant (guards concurrent tenant initialization);
- one claim URI per dialect;
- one attribute mapping per user store domain per claim.
"""

from __future__ import annotations

from sqlalchemy import (
    Column,
    ForeignKey,
    Index,
    Integer,
    MetaData,
    Table,
    Text,
    UniqueConstraint,
)

metadata = MetaData()

claim_dialects = Table(
    "claim_dialects",
    metadata,
    Column("id", Integer, primary_key=True, autoincrement=True),
    Column("tenant_id", Integer, nullable=False),
    Column("dialect_uri", Text, nullable=False),
    UniqueConstraint("tenant_id", "dialect_uri"),
)

claims = Table(
    "claims",
    metadata,
    Column("id", Integer, primary_key=True, autoincrement=True),
    Column("tenant_id", Integer, nullable=False),
    Column("dialect_id", Integer, ForeignKey("claim_dialects.id"), nullable=False),
    Column("claim_uri", Text, nullable=False),
    UniqueConstraint("dialect_id", "claim_uri"),
)

claim_attribute_mappings = Table(
    "claim_attribute_mappings",
    metadata,
    Column("id", Integer, primary_key=True, autoincrement=True),
    Column("claim_id", Integer, ForeignKey("claims.id"), nullable=False),
    Column("user_store_domain", Text, nullable=False),
    Column("attribute_name", Text, nullable=False),
    UniqueConstraint("claim_id", "user_store_domain"),
)

claim_properties = Table(
    "claim_properties",
    metadata,
    Column("id", Integer, primary_key=True, autoincrement=True),
    Column("claim_id", Integer, ForeignKey("claims.id"), nullable=False),
    Column("property_name", Text, nullable=False),
    Column("property_value", Text, nullable=False),
    UniqueConstraint("claim_id", "property_name"),
)

external_claim_mappings = Table(
    "external_claim_mappings",
    metadata,
    Column("external_claim_id", Integer, ForeignKey("claims.id"), primary_key=True),
    Column("mapped_local_claim_id", Integer, ForeignKey("claims.id"), nullable=False),
)

# ---------------------------------------------------------------------------
# Indexes for frequently filtered columns
# ---------------------------------------------------------------------------

Index("ix_claim_dialects_tenant", claim_dialects.c.tenant_id)
Index("ix_claims_tenant_dialect", claims.c.tenant_id, claims.c.dialect_id)
Index("ix_claim_attribute_mappings_claim", claim_attribute_mappings.c.claim_id)
Index("ix_claim_properties_claim", claim_properties.c.claim_id)
