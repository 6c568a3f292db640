"""Shared pytest fixtures for claimmeta tests."""

from __future__ import annotations

from collections.abc import Callable, Iterator
from pathlib import Path
from typing import Any

import pytest
from sqlalchemy.engine import Engine

from claimmeta.config.settings import ClaimMetaSettings
from claimmeta.domain.constants import LOCAL_CLAIM_DIALECT_URI
from claimmeta.domain.legacy import LegacyClaimConfig, LegacyClaimEntry
from claimmeta.infrastructure.context import StoreContext
from claimmeta.infrastructure.database.engine import init_database

SAML_DIALECT_URI = "urn:oasis:names:tc:SAML:2.0:attrname-format:basic"


@pytest.fixture(autouse=True)
def _isolate_env(monkeypatch: pytest.MonkeyPatch) -> None:
    """Keep developer environment variables out of settings resolution."""
    monkeypatch.delenv("CLAIMMETA_CONFIG", raising=False)


@pytest.fixture
def db_engine(tmp_path: Path) -> Iterator[Engine]:
    """Initialized SQLite engine with all tables created."""
    engine = init_database(f"sqlite:///{tmp_path / 'claims.db'}")
    try:
        yield engine
    finally:
        engine.dispose()


@pytest.fixture
def make_settings(tmp_path: Path) -> Callable[..., ClaimMetaSettings]:
    """Factory for settings rooted at a temp dir with listener discovery off."""

    def _make(**overrides: Any) -> ClaimMetaSettings:
        overrides.setdefault("listeners", {"load_entry_points": False})
        return ClaimMetaSettings.load(root_dir=tmp_path, **overrides)

    return _make


@pytest.fixture
def settings(make_settings: Callable[..., ClaimMetaSettings]) -> ClaimMetaSettings:
    return make_settings()


@pytest.fixture
def make_context(
    make_settings: Callable[..., ClaimMetaSettings],
) -> Iterator[Callable[..., StoreContext]]:
    """Factory for store contexts; every context is closed at teardown."""
    created: list[StoreContext] = []

    def _make(**overrides: Any) -> StoreContext:
        ctx = StoreContext(make_settings(**overrides))
        created.append(ctx)
        return ctx

    try:
        yield _make
    finally:
        for ctx in created:
            ctx.close()


@pytest.fixture
def context(make_context: Callable[..., StoreContext]) -> StoreContext:
    """Store context on a temp database with default settings."""
    return make_context()


def local_entry(
    claim_uri: str,
    mapped_attribute: str | None = None,
    mapped_attributes: dict[str, str] | None = None,
    **properties: str,
) -> LegacyClaimEntry:
    """Legacy entry in the local dialect, carrying the structural keys."""
    props = {"Dialect": LOCAL_CLAIM_DIALECT_URI, "ClaimURI": claim_uri, **properties}
    if mapped_attribute is not None:
        props["AttributeID"] = mapped_attribute
    return LegacyClaimEntry(
        dialect_uri=LOCAL_CLAIM_DIALECT_URI,
        claim_uri=claim_uri,
        mapped_attribute=mapped_attribute,
        mapped_attributes=mapped_attributes,
        properties=props,
    )


def external_entry(
    dialect_uri: str,
    claim_uri: str,
    mapped_local_claim: str | None,
    **properties: str,
) -> LegacyClaimEntry:
    """Legacy entry in an external dialect."""
    props = {"Dialect": dialect_uri, "ClaimURI": claim_uri, **properties}
    if mapped_local_claim is not None:
        props["MappedLocalClaim"] = mapped_local_claim
    return LegacyClaimEntry(dialect_uri=dialect_uri, claim_uri=claim_uri, properties=props)


@pytest.fixture
def legacy_config() -> LegacyClaimConfig:
    """A small realistic claim map: three local claims and one SAML bridge."""
    return LegacyClaimConfig(
        entries=[
            local_entry(
                "http://wso2.org/claims/test",
                "uid",
                DisplayName="Test",
                SupportedByDefault="",
                Required="",
            ),
            local_entry(
                "http://wso2.org/claims/emailaddress",
                "mail",
                {"SECONDARY": "email"},
                DisplayName="Email",
                DisplayOrder="3",
                SupportedByDefault="true",
            ),
            local_entry(
                "http://wso2.org/claims/country",
                DefaultAttribute="c",
            ),
            external_entry(SAML_DIALECT_URI, "email", "http://wso2.org/claims/emailaddress"),
        ]
    )
