"""Listener discovery, loading, and veto dispatch.

Listeners come from two places: the ``claimmeta.listeners`` entry-point
group (loaded through pluggy's setuptools loader) and direct registration
by the host application. Each :class:`StoreContext` owns its manager, so
two contexts never see each other's listeners.
"""

from __future__ import annotations

import inspect
import logging

import pluggy

from claimmeta.plugins.hookspecs import ClaimListenerSpec

PROJECT_NAME = "claimmeta"
ENTRY_POINT_GROUP = "claimmeta.listeners"
_IMPL_ATTR = f"{PROJECT_NAME}_impl"

logger = logging.getLogger(__name__)


def _declares_hooks(cls: type) -> bool:
    """True when some public attribute of *cls* carries a ``@hookimpl`` mark."""
    return any(
        getattr(member, _IMPL_ATTR, None)
        for name, member in inspect.getmembers(cls, callable)
        if not name.startswith("_")
    )


class PluginManager:
    """Owns the pluggy manager that claim listeners are registered on."""

    def __init__(self) -> None:
        self._pm = pluggy.PluginManager(PROJECT_NAME)
        self._pm.add_hookspecs(ClaimListenerSpec)
        self._loaded = False

    @property
    def is_loaded(self) -> bool:
        return self._loaded

    @property
    def hook(self) -> pluggy.HookRelay:
        return self._pm.hook

    def discover_and_load(self) -> list[str]:
        """Load entry-point listeners and return the names now registered."""
        count = self._pm.load_setuptools_entrypoints(ENTRY_POINT_GROUP)
        if count:
            logger.debug("Loaded %d listener(s) from %s", count, ENTRY_POINT_GROUP)
        self._instantiate_listener_classes()
        self._loaded = True
        return self.list_plugin_names()

    def register_plugin(self, plugin: object, name: str | None = None) -> None:
        name = name or type(plugin).__name__
        self._pm.register(plugin, name=name)
        logger.debug("Registered listener: %s", name)

    def unregister(self, plugin: object) -> None:
        self._pm.unregister(plugin)

    def get_plugins(self) -> list[object]:
        return list(self._pm.get_plugins())

    def list_plugin_names(self) -> list[str]:
        names = []
        for plugin in self._pm.get_plugins():
            names.append(self._pm.get_name(plugin) or type(plugin).__name__)
        return names

    # ------------------------------------------------------------------
    # Veto dispatch
    # ------------------------------------------------------------------

    def allows_get_all_claim_uris(self) -> bool:
        """False when any listener vetoes listing claim URIs."""
        return False not in self._pm.hook.before_get_all_claim_uris()

    def allows_get_attribute_name(self, domain_name: str, claim_uri: str) -> bool:
        """False when any listener vetoes resolving *claim_uri* in *domain_name*."""
        verdicts = self._pm.hook.before_get_attribute_name(
            domain_name=domain_name, claim_uri=claim_uri
        )
        return False not in verdicts

    # ------------------------------------------------------------------
    # Internal
    # ------------------------------------------------------------------

    def _instantiate_listener_classes(self) -> None:
        """Swap listener classes registered by an entry point for instances.

        Hooks called on a class object run with ``self`` unbound. A class
        that cannot be built without arguments is dropped with a warning.
        """
        classes = [
            p for p in self._pm.get_plugins() if inspect.isclass(p) and _declares_hooks(p)
        ]
        for cls in classes:
            name = self._pm.get_name(cls) or cls.__name__
            self._pm.unregister(cls)
            try:
                listener = cls()
            except Exception:
                logger.warning("Failed to instantiate listener %s", name, exc_info=True)
                continue
            self._pm.register(listener, name=name)
