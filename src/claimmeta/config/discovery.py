"""Locating ``claimmeta.toml``.

Lookup order:

1. ``CLAIMMETA_CONFIG``: an explicit file. When set, walk-up is skipped
   even if the file does not exist, so a typo never silently picks up an
   unrelated config higher in the tree.
2. Walk-up from the start directory to the filesystem root, nearest first.
"""

from __future__ import annotations

import os
from pathlib import Path

CONFIG_FILENAME = "claimmeta.toml"
CONFIG_ENV_VAR = "CLAIMMETA_CONFIG"


def config_from_env() -> Path | None:
    """Path named by ``CLAIMMETA_CONFIG``, or None when unset or blank."""
    value = os.environ.get(CONFIG_ENV_VAR, "").strip()
    return Path(value).expanduser() if value else None


def find_config(start: Path | None = None) -> Path | None:
    """Return the ``claimmeta.toml`` that applies to *start* (default: cwd)."""
    explicit = config_from_env()
    if explicit is not None:
        return explicit if explicit.is_file() else None

    here = (start or Path.cwd()).resolve()
    for directory in (here, *here.parents):
        candidate = directory / CONFIG_FILENAME
        if candidate.is_file():
            return candidate
    return None
