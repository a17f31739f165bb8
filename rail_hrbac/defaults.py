"""
Default configuration for the rail-hrbac library.

Every key read through ``rail_hrbac.config_proxy.get_setting`` has its default
here. Projects override them in ``settings.RAIL_HRBAC``.
"""

from __future__ import annotations

from typing import Any

LIBRARY_VERSION = "0.1.0"


LIBRARY_DEFAULTS: dict[str, Any] = {
    # Role configuration: {role: {"can": [...], "inherits": [...]}}
    "roles": {},
    # Dotted paths (or callables) for the engine options
    "options": {
        "global_when": None,
        "global_filter": None,
        "global_project": None,
        "merge_filters": None,
        "merge_projections": None,
    },
    # Role files shipped by installed apps
    "load_app_role_files": True,
    "role_file_name": "roles.json",
    # User role resolution for the view guard
    "superuser_role": "superadmin",
    "role_resolver": None,
    # Compile the configured roles in AppConfig.ready()
    "validate_on_startup": True,
}
