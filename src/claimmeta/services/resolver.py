"""ClaimAttributeResolver — claim URI to user store attribute name.

Resolution order, first match wins:

1. A local claim whose URI equals the requested URI (case-insensitive).
2. An external claim in any non-local dialect with that URI, followed to
   the local claim it maps to.
3. Nothing found: ``None``.

Once a local claim is found, its attribute is picked by
:meth:`ClaimAttributeResolver.mapped_attribute`.
"""

from __future__ import annotations

import logging

from claimmeta.domain.errors import MappedAttributeNotFoundError
from claimmeta.domain.models import LocalClaim
from claimmeta.services.base import BaseService

logger = logging.getLogger(__name__)


class ClaimAttributeResolver(BaseService):
    """Resolves attribute names for one tenant."""

    def resolve_attribute_name(self, domain_name: str | None, claim_uri: str) -> str | None:
        """Return the attribute storing *claim_uri* in *domain_name*.

        ``domain_name=None`` resolves against the tenant's primary domain.
        Raises ``ValueError`` for a blank domain or claim URI, and
        :class:`MappedAttributeNotFoundError` when the matched claim has no
        usable mapping.
        """
        if domain_name is None:
            domain_name = self.primary_domain
        if not domain_name or not domain_name.strip():
            raise ValueError("User store domain name parameter cannot be empty")
        if not claim_uri or not claim_uri.strip():
            raise ValueError("Local claim URI parameter cannot be empty")

        if not self._context.plugin_manager.allows_get_attribute_name(domain_name, claim_uri):
            return None

        with self._user_store_errors():
            local_claim = self._locate_local_claim(claim_uri, self._list_local_claims())

        if local_claim is None:
            logger.debug(
                "No attribute name for domain %s, claim URI %s in tenant %s",
                domain_name,
                claim_uri,
                self.tenant_id,
            )
            return None
        return self.mapped_attribute(domain_name, local_claim)

    def resolve_primary_attribute_name(self, claim_uri: str) -> str | None:
        """Deprecated: resolve against the tenant's primary domain."""
        return self.resolve_attribute_name(None, claim_uri)

    def mapped_attribute(self, domain_name: str, local_claim: LocalClaim) -> str:
        """Pick the attribute of *local_claim* for *domain_name*.

        Falls back from the domain's own mapping to the ``DefaultAttribute``
        property, then to the mapping of the tenant's primary domain.
        """
        attribute = local_claim.get_mapped_attribute(domain_name)
        if attribute and attribute.strip():
            logger.debug(
                "Mapped attribute %s from domain %s for claim %s in tenant %s",
                attribute,
                domain_name,
                local_claim.claim_uri,
                self.tenant_id,
            )
            return attribute

        attribute = local_claim.default_attribute
        if attribute and attribute.strip():
            logger.debug(
                "Mapped attribute %s from default attribute property for claim %s in tenant %s",
                attribute,
                local_claim.claim_uri,
                self.tenant_id,
            )
            return attribute

        primary_domain = self.primary_domain
        attribute = local_claim.get_mapped_attribute(primary_domain)
        if attribute and attribute.strip():
            logger.debug(
                "Mapped attribute %s from primary domain %s for claim %s in tenant %s",
                attribute,
                primary_domain,
                local_claim.claim_uri,
                self.tenant_id,
            )
            return attribute

        raise MappedAttributeNotFoundError(local_claim.claim_uri)
