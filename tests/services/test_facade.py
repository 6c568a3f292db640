"""Tests for LegacyClaimFacade — the deprecated flat read views."""

from __future__ import annotations

import pytest

from claimmeta.domain.constants import LOCAL_CLAIM_DIALECT_URI
from claimmeta.domain.errors import UnsupportedOperationError
from claimmeta.domain.legacy import Claim, ClaimMapping, LegacyClaimConfig
from claimmeta.infrastructure.context import StoreContext
from claimmeta.plugins import hookimpl
from claimmeta.services.facade import LegacyClaimFacade
from claimmeta.services.importer import LegacyConfigImporter
from tests.conftest import SAML_DIALECT_URI


@pytest.fixture
def facade(context: StoreContext, legacy_config: LegacyClaimConfig) -> LegacyClaimFacade:
    LegacyConfigImporter(context, 1).import_claims(legacy_config)
    return LegacyClaimFacade(context, 1)


class _HideClaims:
    @hookimpl
    def before_get_all_claim_uris(self) -> bool:
        return False


class TestGetAllClaimUris:
    def test_repository_order(self, facade: LegacyClaimFacade) -> None:
        assert facade.get_all_claim_uris() == [
            "http://wso2.org/claims/test",
            "http://wso2.org/claims/emailaddress",
            "http://wso2.org/claims/country",
        ]

    def test_veto(self, context: StoreContext, facade: LegacyClaimFacade) -> None:
        context.plugin_manager.register_plugin(_HideClaims())
        assert facade.get_all_claim_uris() is None

    def test_empty_tenant(self, context: StoreContext) -> None:
        assert LegacyClaimFacade(context, 99).get_all_claim_uris() == []


class TestGetClaim:
    def test_local_claim(self, facade: LegacyClaimFacade) -> None:
        claim = facade.get_claim("http://wso2.org/claims/emailaddress")
        assert claim is not None
        assert claim.dialect_uri == LOCAL_CLAIM_DIALECT_URI
        assert claim.display_tag == "Email"
        assert claim.display_order == 3
        assert claim.supported_by_default is True
        assert claim.required is False

    def test_external_claim_correlated(self, facade: LegacyClaimFacade) -> None:
        """An external URI yields the local claim it maps to, not the first local claim."""
        claim = facade.get_claim("email")
        assert claim is not None
        assert claim.claim_uri == "http://wso2.org/claims/emailaddress"

    def test_unknown(self, facade: LegacyClaimFacade) -> None:
        assert facade.get_claim("http://wso2.org/claims/nope") is None


class TestGetClaimMapping:
    def test_local_mapping(self, facade: LegacyClaimFacade) -> None:
        mapping = facade.get_claim_mapping("http://wso2.org/claims/emailaddress")
        assert mapping is not None
        assert mapping.mapped_attribute == "mail"
        assert mapping.mapped_attributes == {"PRIMARY": "mail", "SECONDARY": "email"}

    def test_default_attribute_as_primary(self, facade: LegacyClaimFacade) -> None:
        mapping = facade.get_claim_mapping("http://wso2.org/claims/country")
        assert mapping is not None
        assert mapping.mapped_attribute == "c"
        assert mapping.mapped_attributes == {}

    def test_external_uri(self, facade: LegacyClaimFacade) -> None:
        mapping = facade.get_claim_mapping("EMAIL")
        assert mapping is not None
        assert mapping.claim.claim_uri == "http://wso2.org/claims/emailaddress"
        assert mapping.mapped_attribute == "mail"

    def test_unknown(self, facade: LegacyClaimFacade) -> None:
        assert facade.get_claim_mapping("urn:nope") is None


class TestGetAllClaimMappings:
    def test_local_dialect_default(self, facade: LegacyClaimFacade) -> None:
        mappings = facade.get_all_claim_mappings()
        assert len(mappings) == 3
        assert all(m.claim.dialect_uri == LOCAL_CLAIM_DIALECT_URI for m in mappings)

    def test_local_dialect_case_insensitive(self, facade: LegacyClaimFacade) -> None:
        assert len(facade.get_all_claim_mappings("HTTP://WSO2.ORG/CLAIMS")) == 3

    def test_external_dialect(self, facade: LegacyClaimFacade) -> None:
        [mapping] = facade.get_all_claim_mappings(SAML_DIALECT_URI)
        assert mapping.claim.claim_uri == "email"
        assert mapping.claim.dialect_uri == SAML_DIALECT_URI
        assert mapping.claim.display_tag == "Email"
        assert mapping.mapped_attribute == "mail"
        assert mapping.mapped_attributes["SECONDARY"] == "email"

    def test_unknown_dialect(self, facade: LegacyClaimFacade) -> None:
        assert facade.get_all_claim_mappings("urn:nope") == []

    def test_supported_by_default(self, facade: LegacyClaimFacade) -> None:
        uris = [m.claim.claim_uri for m in facade.get_all_supported_claim_mappings_by_default()]
        assert uris == ["http://wso2.org/claims/test", "http://wso2.org/claims/emailaddress"]

    def test_required(self, facade: LegacyClaimFacade) -> None:
        uris = [m.claim.claim_uri for m in facade.get_all_required_claim_mappings()]
        assert uris == ["http://wso2.org/claims/test"]


class TestManagementUnsupported:
    @pytest.mark.parametrize(
        "method", ["add_new_claim_mapping", "update_claim_mapping", "delete_claim_mapping"]
    )
    def test_always_raises(self, facade: LegacyClaimFacade, method: str) -> None:
        mapping = ClaimMapping(claim=Claim(claim_uri="http://wso2.org/claims/new"))
        with pytest.raises(UnsupportedOperationError, match="does not support management"):
            getattr(facade, method)(mapping)
        assert len(facade.get_all_claim_uris() or []) == 3
