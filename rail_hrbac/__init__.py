"""
rail-hrbac: hierarchical role-based access control for Django projects.

The engine lives in ``rail_hrbac.rbac`` and has no dependency on Django
settings; ``rail_hrbac.registry``, ``rail_hrbac.decorators`` and the
``check_roles`` management command wire it to a Django project.
"""

from .rbac import (
    HRBAC,
    ConfigError,
    Decision,
    EngineOptions,
    HRBACError,
    Permission,
    ResolutionError,
)
from .defaults import LIBRARY_VERSION as __version__

__all__ = [
    "HRBAC",
    "EngineOptions",
    "Permission",
    "Decision",
    "HRBACError",
    "ConfigError",
    "ResolutionError",
]
