"""Claim metadata database engine and schema via SQLAlchemy Core."""

from claimmeta.infrastructure.database.engine import create_db_engine, init_database
from claimmeta.infrastructure.database.schema import (
    claim_attribute_mappings,
    claim_dialects,
    claim_properties,
    claims,
    external_claim_mappings,
    metadata,
)

__all__ = [
    "claim_attribute_mappings",
    "claim_dialects",
    "claim_properties",
    "claims",
    "create_db_engine",
    "external_claim_mappings",
    "init_database",
    "metadata",
]
