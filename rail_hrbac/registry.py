"""
Process-wide HRBAC engine built from Django settings.

The engine is created with a deferred role loader: roles from settings and app
role files are collected and compiled on the first permission check, and every
concurrent first check waits on that single load.
"""

import logging
import threading
from typing import Any, Optional

from asgiref.sync import sync_to_async

from .rbac.engine import HRBAC
from .rbac.types import EngineOptions
from .role_loader import load_configured_roles

logger = logging.getLogger(__name__)

_engine: Optional[HRBAC] = None
_engine_lock = threading.Lock()


async def _load_roles() -> dict[str, Any]:
    return await sync_to_async(load_configured_roles)()


def build_engine() -> HRBAC:
    """Create a new engine from the current settings."""
    return HRBAC(_load_roles, options=EngineOptions.from_settings())


def get_engine() -> HRBAC:
    """Return the shared engine, building it on first use."""
    global _engine
    if _engine is None:
        with _engine_lock:
            if _engine is None:
                _engine = build_engine()
                logger.debug("HRBAC engine created from settings")
    return _engine


def reset_engine() -> None:
    """Drop the shared engine so the next call rebuilds it."""
    global _engine
    with _engine_lock:
        _engine = None
