"""
Role configuration loader for settings and roles.json files.

Roles come from ``settings.RAIL_HRBAC["roles"]`` and from ``roles.json`` files
shipped by installed apps. In both places the ``when``/``filter``/``project``
functions of a permission object may be given as dotted import paths::

    {
        "roles": {
            "reader": {
                "can": [
                    "article:read",
                    {"name": "article:list", "filter": "blog.rbac.free_articles"}
                ]
            }
        }
    }
"""

from __future__ import annotations

import json
import logging
from collections.abc import Mapping
from pathlib import Path
from typing import Any, Iterable, Optional

from django.apps import apps

from .config_proxy import get_setting
from .utils import import_callable

logger = logging.getLogger(__name__)

_CALLABLE_KEYS = ("when", "filter", "project")


def load_app_role_files(
    app_configs: Optional[Iterable[object]] = None,
) -> dict[str, Any]:
    """
    Load role files from installed apps.

    Args:
        app_configs: Optional iterable of Django app configs. Defaults to all
            installed apps.

    Returns:
        Role configuration mapping. A role defined by several apps keeps the
        definition of the first app.
    """
    if app_configs is None:
        app_configs = apps.get_app_configs()

    file_name = get_setting("role_file_name", "roles.json")
    roles: dict[str, Any] = {}
    for app_config in app_configs:
        app_path = getattr(app_config, "path", None)
        if not app_path:
            continue
        roles_path = Path(app_path) / file_name
        if not roles_path.exists():
            continue
        try:
            content = roles_path.read_text(encoding="utf-8").strip()
        except OSError as exc:
            logger.warning("Could not read roles file %s: %s", roles_path, exc)
            continue
        if not content:
            logger.debug("Skipping empty roles file %s", roles_path)
            continue
        try:
            payload = json.loads(content)
        except json.JSONDecodeError as exc:
            logger.warning("Invalid JSON in roles file %s: %s", roles_path, exc)
            continue

        file_roles = _extract_roles(payload, roles_path)
        for name, definition in file_roles.items():
            if name in roles:
                logger.debug("Role '%s' from %s is already defined", name, roles_path)
                continue
            roles[name] = definition
        logger.info("Loaded %d roles from %s", len(file_roles), roles_path)

    return roles


def _extract_roles(payload: object, roles_path: Path) -> dict[str, Any]:
    if isinstance(payload, dict) and isinstance(payload.get("roles"), dict):
        return payload["roles"]
    if isinstance(payload, dict) and "roles" not in payload:
        return payload
    logger.warning("Roles file %s must define a mapping of roles", roles_path)
    return {}


def resolve_role_callables(config: Any) -> Any:
    """
    Replace dotted paths in permission objects by the imported callables.

    Returns a new configuration; anything that is not a well formed role is
    passed through untouched and left to the compiler to reject.

    Raises:
        ConfigError: If a dotted path cannot be imported.
    """
    if not isinstance(config, Mapping):
        return config

    resolved = {}
    for role, definition in config.items():
        if not isinstance(definition, Mapping) or not isinstance(definition.get("can"), list):
            resolved[role] = definition
            continue
        can = [_resolve_entry(role, entry) for entry in definition["can"]]
        resolved[role] = {**definition, "can": can}
    return resolved


def _resolve_entry(role: str, entry: Any) -> Any:
    if not isinstance(entry, Mapping):
        return entry
    resolved = dict(entry)
    for key in _CALLABLE_KEYS:
        value = resolved.get(key)
        if isinstance(value, str):
            resolved[key] = import_callable(value, role=role)
    return resolved


def load_configured_roles() -> dict[str, Any]:
    """
    Collect the role configuration of the project.

    Roles from settings take precedence over roles from app role files.
    """
    roles: dict[str, Any] = {}
    if get_setting("load_app_role_files", True):
        roles.update(load_app_role_files())
    settings_roles = get_setting("roles", {}) or {}
    if isinstance(settings_roles, Mapping):
        roles.update(settings_roles)
    else:
        return settings_roles
    return resolve_role_callables(roles)
