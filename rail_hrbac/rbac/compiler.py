"""
Role map compiler.

Turns a declarative role configuration into the indexed structure used by the
resolution engine::

    {
        "reader": {"can": ["article:read", {"name": "article:list", "filter": ...}]},
        "editor": {"can": ["article:*"], "inherits": ["reader"]},
    }

Compilation either returns a complete role map or raises ``ConfigError``.
"""

import logging
from collections.abc import Mapping
from types import MappingProxyType
from typing import Any

from .exceptions import ConfigError
from .types import CompiledPermission, CompiledRole, Permission
from .wildcard import has_wildcard, wildcard_matcher

logger = logging.getLogger(__name__)

_CALLABLE_KEYS = ("when", "filter", "project")


def _is_sequence(value: Any) -> bool:
    return isinstance(value, (list, tuple))


def _compile_inherits(role: str, definition: Mapping, config: Mapping) -> tuple[str, ...]:
    inherits = definition.get("inherits")
    if inherits is None:
        return ()
    if not _is_sequence(inherits):
        raise ConfigError(f"Expected roles[{role}].inherits to be a list", role=role)
    for parent in inherits:
        if not isinstance(parent, str):
            raise ConfigError(
                f"Expected roles[{role}].inherits elements to be role names", role=role
            )
        if parent not in config:
            raise ConfigError(f"Undefined inheritance role: {parent}", role=role)
    return tuple(inherits)


def _compile_entry(role: str, entry: Any) -> CompiledPermission:
    if isinstance(entry, str):
        name, callables = entry, {}
    elif isinstance(entry, (Mapping, Permission)):
        if isinstance(entry, Permission):
            entry = {key: getattr(entry, key) for key in ("name", *_CALLABLE_KEYS)}
        name = entry.get("name")
        if not name or not isinstance(name, str):
            raise ConfigError(
                f"name is missing on permission object of role {role}", role=role
            )
        callables = {}
        for key in _CALLABLE_KEYS:
            value = entry.get(key)
            if value is None:
                continue
            if not callable(value):
                raise ConfigError(
                    f"{key} of permission {name} in role {role} is not callable",
                    role=role,
                )
            callables[key] = value
    else:
        raise ConfigError(f"Unexpected permission type {entry!r} in role {role}", role=role)

    matcher = wildcard_matcher(name) if has_wildcard(name) else None
    return CompiledPermission(name=name, matcher=matcher, **callables)


def compile_role(role: str, definition: Any, config: Mapping) -> CompiledRole:
    """Compile one role definition, checking inheritance against ``config``."""
    if not isinstance(definition, Mapping):
        raise ConfigError(f"Expected roles[{role}] to be a mapping", role=role)

    inherits = _compile_inherits(role, definition, config)

    can = definition.get("can")
    if not _is_sequence(can):
        raise ConfigError(f"Expected roles[{role}].can to be a list", role=role)

    exact: dict[str, CompiledPermission] = {}
    wildcards: list[CompiledPermission] = []
    for entry in can:
        permission = _compile_entry(role, entry)
        if permission.is_wildcard:
            wildcards.append(permission)
        else:
            exact[permission.name] = permission

    return CompiledRole(
        name=role,
        exact=MappingProxyType(exact),
        wildcards=tuple(wildcards),
        inherits=inherits,
    )


def compile_roles(config: Any) -> Mapping[str, CompiledRole]:
    """
    Compile a role configuration into a read-only role map.

    Args:
        config: Mapping of role name to ``{"can": [...], "inherits": [...]}``.

    Returns:
        Read-only mapping of role name to CompiledRole.

    Raises:
        ConfigError: If the configuration is malformed.
    """
    if not isinstance(config, Mapping):
        raise ConfigError("Expected roles configuration to be a mapping")

    compiled = {}
    for role, definition in config.items():
        if not isinstance(role, str):
            raise ConfigError(f"Expected role names to be strings, got {role!r}")
        compiled[role] = compile_role(role, definition, config)

    logger.debug("Compiled %d roles: %s", len(compiled), ", ".join(compiled))
    return MappingProxyType(compiled)


__all__ = ["compile_role", "compile_roles"]
