"""
Django app configuration for rail-hrbac.

On startup the configured roles (settings and app role files) are compiled
once so that configuration mistakes surface before the first request.
"""

import logging

from django.apps import AppConfig as BaseAppConfig

logger = logging.getLogger(__name__)


class AppConfig(BaseAppConfig):
    """Django app configuration for rail-hrbac."""

    name = "rail_hrbac"
    verbose_name = "Rail HRBAC"
    label = "rail_hrbac"

    def ready(self):
        """Validate the role configuration after Django has loaded."""
        from .config_proxy import get_setting

        if not get_setting("validate_on_startup", True):
            return
        self._validate_roles()

    def _validate_roles(self):
        from .rbac.compiler import compile_roles
        from .rbac.exceptions import ConfigError
        from .rbac.types import EngineOptions
        from .role_loader import load_configured_roles

        try:
            EngineOptions.from_settings()
            roles = compile_roles(load_configured_roles())
        except ConfigError as e:
            logger.error(f"Invalid HRBAC configuration: {e}")
            # Don't raise in production to avoid breaking the app
            if self._is_debug_mode():
                raise
            return
        logger.info("HRBAC configuration validated (%d roles)", len(roles))

    def _is_debug_mode(self):
        """Check if we're in debug mode."""
        from django.conf import settings as django_settings

        return getattr(django_settings, "DEBUG", False)
