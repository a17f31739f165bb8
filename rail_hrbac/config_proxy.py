"""
Configuration management for rail-hrbac.

This module provides a settings proxy resolving keys, in order, from:
1. Runtime overrides (via configure_runtime_settings)
2. Global Django settings (RAIL_HRBAC)
3. Library defaults (LIBRARY_DEFAULTS)
"""

from typing import Any

from django.conf import settings

from .defaults import LIBRARY_DEFAULTS

# Runtime overrides (avoids modifying Django settings)
_RUNTIME_SETTINGS: dict[str, Any] = {}

_MISSING = object()


class SettingsProxy:
    """
    Proxy for accessing rail-hrbac settings with hierarchical resolution.

    Keys use dot notation (``options.merge_filters``). A key set to None in the
    runtime overrides or in RAIL_HRBAC is returned as None, it does not fall
    back to the library default. Values are not cached: tests and
    ``override_settings`` see changes immediately.
    """

    def get(self, key: str, default: Any = None) -> Any:
        """
        Get a setting value.

        Args:
            key: Setting key to retrieve
            default: Default value if setting is not found

        Returns:
            The setting value from the highest priority source
        """
        for source in (_RUNTIME_SETTINGS, self._django_settings()):
            value = self._get_nested_value(source, key)
            if value is not _MISSING:
                return value
        value = self._get_nested_value(LIBRARY_DEFAULTS, key)
        if value is _MISSING or value is None:
            return default
        return value

    def _django_settings(self) -> dict[str, Any]:
        return getattr(settings, "RAIL_HRBAC", None) or {}

    def _get_nested_value(self, data: dict[str, Any], key: str) -> Any:
        """
        Get nested value from dictionary using dot notation.

        Args:
            data: Dictionary to search in
            key: Key to retrieve (supports dot notation for nested access)

        Returns:
            The value or _MISSING if not found
        """
        if not isinstance(data, dict):
            return _MISSING

        current = data
        for k in key.split("."):
            if not isinstance(current, dict) or k not in current:
                return _MISSING
            current = current[k]

        return current


settings_proxy = SettingsProxy()


def get_setting(key: str, default: Any = None) -> Any:
    """
    Get a setting value using the hierarchical settings system.

    Args:
        key: Setting key to retrieve
        default: Default value if setting is not found

    Returns:
        The setting value from the highest priority source
    """
    return settings_proxy.get(key, default)


def configure_runtime_settings(clear_existing: bool = False, **overrides: Any) -> None:
    """
    Override settings at runtime.

    Args:
        clear_existing: Whether to drop previous runtime overrides first
        **overrides: Top-level setting keys and their values
    """
    if clear_existing:
        _RUNTIME_SETTINGS.clear()
    _RUNTIME_SETTINGS.update(overrides)


def clear_runtime_settings() -> None:
    """Clear all runtime settings overrides."""
    _RUNTIME_SETTINGS.clear()
