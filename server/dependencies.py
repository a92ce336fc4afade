"""FastAPI dependency factories."""

import sys
from functools import lru_cache
from pathlib import Path
from typing import Optional, Tuple

_project_root = str(Path(__file__).resolve().parent.parent)
if _project_root not in sys.path:
    sys.path.insert(0, _project_root)

from fastapi import Depends

from server.config import Settings
from server.runtime import Runtime, runtime_from_settings

# (settings, runtime) pair; one Runtime per Settings object
_active: Optional[Tuple[Settings, Runtime]] = None


@lru_cache()
def get_settings() -> Settings:
    """Settings read once from the environment."""
    return Settings()


def get_runtime(settings: Settings = Depends(get_settings)) -> Runtime:
    """
    Shared Runtime holding the PDF index snapshot and CAPS topic table.

    Overriding get_settings with a different Settings object (tests point it
    at a temp directory) swaps in a fresh Runtime with an unloaded index.
    """
    global _active
    if _active is None or _active[0] is not settings:
        _active = (settings, runtime_from_settings(settings))
    return _active[1]
