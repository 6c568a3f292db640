"""Extension layer — resolution listeners via pluggy.

Discovery: entry_points (pip-installed) via pluggy setuptools entrypoints.
"""

import pluggy

from claimmeta.plugins.manager import PluginManager

hookimpl = pluggy.HookimplMarker("claimmeta")

__all__ = ["PluginManager", "hookimpl"]
