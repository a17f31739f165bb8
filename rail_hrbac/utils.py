"""
Helpers for loading callables referenced from settings and role files.
"""

from typing import Any, Callable, Optional

from django.utils.module_loading import import_string

from rail_hrbac.rbac.exceptions import ConfigError


def import_callable(
    path: str, option: Optional[str] = None, role: Optional[str] = None
) -> Callable[..., Any]:
    """
    Import a callable from a dotted path.

    Raises:
        ConfigError: If the path cannot be imported or is not callable.
    """
    try:
        value = import_string(path)
    except ImportError as exc:
        raise ConfigError(f"Could not import '{path}': {exc}", role=role, option=option) from exc
    if not callable(value):
        raise ConfigError(f"'{path}' is not callable", role=role, option=option)
    return value
