"""
Permission decorators for Django views.

This module provides ``require_operation`` which checks the roles of the
requesting user against the HRBAC engine before calling the view, and stores
the resulting decision (with its filter and projection) on the request.
"""

import inspect
import logging
from functools import wraps
from typing import TYPE_CHECKING, Callable, Optional

from asgiref.sync import sync_to_async
from django.core.exceptions import PermissionDenied

from .config_proxy import get_setting
from .rbac.types import Decision, Params
from .utils import import_callable

if TYPE_CHECKING:
    from django.contrib.auth.models import AbstractUser
    from django.http import HttpRequest

    from .rbac.engine import HRBAC

logger = logging.getLogger(__name__)


def _get_engine():
    """Lazy import to avoid building the engine at import time."""
    from .registry import get_engine

    return get_engine()


def get_user_roles(user: Optional["AbstractUser"]) -> list[str]:
    """Get role names of a user from the configured resolver or Django groups."""
    if not user or not getattr(user, "is_authenticated", False):
        return []

    resolver = get_setting("role_resolver")
    if resolver:
        if isinstance(resolver, str):
            resolver = import_callable(resolver, option="role_resolver")
        return list(resolver(user))

    roles: list[str] = []
    if getattr(user, "pk", None) is not None:
        roles = list(user.groups.values_list("name", flat=True))
    if getattr(user, "is_superuser", False):
        superuser_role = get_setting("superuser_role")
        if superuser_role and superuser_role not in roles:
            roles.append(superuser_role)
    return roles


def _default_params(request: "HttpRequest", *args, **kwargs) -> Params:
    return {"user": getattr(request, "user", None), **kwargs}


def _enforce(request: "HttpRequest", decision: Decision, operation: str) -> None:
    if not decision.permission:
        logger.debug("Operation %s denied for %s", operation, getattr(request, "user", None))
        raise PermissionDenied(f"Operation not permitted: {operation}")
    request.rbac_decision = decision


def require_operation(
    operation: str,
    *,
    get_roles: Optional[Callable[["HttpRequest"], list[str]]] = None,
    get_params: Optional[Callable[..., Params]] = None,
    engine: Optional["HRBAC"] = None,
):
    """
    Decorator to require an HRBAC operation for a Django view.

    Args:
        operation: Operation name checked for the requesting user.
        get_roles: Callable ``request -> roles``. Defaults to the user's roles.
        get_params: Callable ``(request, *args, **kwargs) -> params``.
            Defaults to the user plus the view keyword arguments.
        engine: Engine to use. Defaults to the shared settings engine.

    Raises:
        PermissionDenied: If the operation is not permitted.
    """
    build_params = get_params or _default_params

    def decorator(view: Callable) -> Callable:
        if inspect.iscoroutinefunction(view):

            @wraps(view)
            async def async_wrapper(request, *args, **kwargs):
                if get_roles is not None:
                    roles = get_roles(request)
                else:
                    roles = await sync_to_async(get_user_roles)(getattr(request, "user", None))
                params = build_params(request, *args, **kwargs)
                decision = await (engine or _get_engine()).can(roles, operation, params)
                _enforce(request, decision, operation)
                return await view(request, *args, **kwargs)

            return async_wrapper

        @wraps(view)
        def wrapper(request, *args, **kwargs):
            if get_roles is not None:
                roles = get_roles(request)
            else:
                roles = get_user_roles(getattr(request, "user", None))
            params = build_params(request, *args, **kwargs)
            decision = (engine or _get_engine()).can_sync(roles, operation, params)
            _enforce(request, decision, operation)
            return view(request, *args, **kwargs)

        return wrapper

    return decorator


__all__ = ["require_operation", "get_user_roles"]
