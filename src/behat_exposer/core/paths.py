from __future__ import annotations

import os
from pathlib import Path

from behat_exposer.core import config as config_core


def workspace_dir() -> Path | None:
    override = os.environ.get("BEHAT_EXPOSER_WORKSPACE_DIR")
    if override:
        return Path(override).expanduser()
    configured = config_core.get_config_value(config_core.CONFIG_SECTION, "workspace")
    if isinstance(configured, str) and configured.strip():
        return Path(configured).expanduser()
    return None


def is_usable_workspace(path: str | Path | None) -> bool:
    if not path:
        return False
    candidate = Path(path).expanduser()
    return candidate.is_dir() and os.access(candidate, os.R_OK | os.W_OK)
