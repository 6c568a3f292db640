"""Pluggy hook specifications for claim resolution listeners.

Listeners run before a read and may veto it: returning ``False`` stops the
operation and the caller receives ``None``. Returning ``True`` or ``None``
lets it continue.
"""

from __future__ import annotations

import pluggy

hookspec = pluggy.HookspecMarker("claimmeta")


class ClaimListenerSpec:
    """Hook specifications for claim resolution listeners."""

    @hookspec
    def before_get_all_claim_uris(self) -> bool | None:
        """Called before listing the tenant's local claim URIs."""

    @hookspec
    def before_get_attribute_name(self, domain_name: str, claim_uri: str) -> bool | None:
        """Called before resolving the attribute of *claim_uri* in *domain_name*."""
