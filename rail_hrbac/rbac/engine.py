"""
HRBAC - hierarchical role-based access control engine.

The engine answers, for a role (or list of roles) and an operation name,
whether the operation is permitted and which filter and projection should be
applied to the caller's query. Role configuration may be given directly or
loaded asynchronously; every check waits for the same shared compilation.

Usage:
    >>> engine = HRBAC(
    ...     {"reader": {"can": ["article:read"]}, "editor": {"can": [], "inherits": ["reader"]}}
    ... )
    >>> await engine.can("editor", "article:read")
    Decision(permission=True, filter=None, project=None)
"""

import asyncio
import inspect
import logging
import threading
from concurrent.futures import Future
from collections.abc import Mapping
from typing import Any, Awaitable, Callable, Optional, Sequence, Union

from asgiref.sync import async_to_sync

from .compiler import compile_roles
from .exceptions import ConfigError, ResolutionError
from .types import CompiledPermission, CompiledRole, Decision, EngineOptions, Params

logger = logging.getLogger(__name__)

RolesConfig = Mapping[str, Mapping[str, Any]]
RolesSource = Union[RolesConfig, Awaitable[RolesConfig], Callable[[], Any]]
RoleQuery = Union[str, Sequence[str]]


async def _evaluate(func: Optional[Callable], params: Params, default: Any = None) -> Any:
    if func is None:
        return default
    result = func(params)
    if inspect.isawaitable(result):
        result = await result
    return result


def _overlay(global_payload: Optional[dict], payload: Optional[dict]) -> Optional[dict]:
    if global_payload is None and payload is None:
        return None
    return {**(global_payload or {}), **(payload or {})}


class HRBAC:
    """
    Permission resolution over a compiled role map.

    Args:
        roles: Role configuration mapping, an awaitable resolving to one, or a
            zero-argument callable returning either.
        options: EngineOptions or a mapping of option names to callables.
    """

    def __init__(self, roles: RolesSource, options: Union[EngineOptions, Mapping, None] = None):
        self.options = EngineOptions.coerce(options)
        self._roles: Optional[Mapping[str, CompiledRole]] = None
        self._source: Optional[RolesSource] = None
        # Loop-independent so checks from any thread or event loop can wait on it.
        self._init_future: Optional[Future] = None
        self._init_lock = threading.Lock()

        if isinstance(roles, Mapping):
            self._roles = compile_roles(roles)
        elif inspect.isawaitable(roles) or callable(roles):
            self._source = roles
        else:
            raise ConfigError("Expected roles to be a mapping, an awaitable or a factory")

    @classmethod
    async def create(
        cls, roles: RolesSource, options: Union[EngineOptions, Mapping, None] = None
    ) -> "HRBAC":
        """Build an engine and wait until its role map is compiled."""
        engine = cls(roles, options)
        await engine.ready()
        return engine

    @property
    def is_ready(self) -> bool:
        return self._roles is not None

    @property
    def roles(self) -> Mapping[str, CompiledRole]:
        if self._roles is None:
            raise RuntimeError("Role map is not compiled yet, await ready() first")
        return self._roles

    async def ready(self) -> Mapping[str, CompiledRole]:
        """Wait for the role map, starting the shared initialisation once."""
        if self._roles is None:
            await asyncio.shield(asyncio.wrap_future(self._start_init()))
        return self._roles

    def _start_init(self) -> Future:
        with self._init_lock:
            if self._init_future is None:
                self._init_future = Future()
                task = asyncio.ensure_future(self._async_init())
                task.add_done_callback(self._finish_init)
            return self._init_future

    def _finish_init(self, task: asyncio.Task) -> None:
        with self._init_lock:
            future = self._init_future
            if task.cancelled():
                # The loop running the load went away: the next check starts over.
                self._init_future = None
                future.cancel()
            elif task.exception() is not None:
                future.set_exception(task.exception())
            else:
                future.set_result(None)

    async def _async_init(self) -> None:
        source = self._source
        if callable(source) and not inspect.isawaitable(source):
            source = source()
        if inspect.isawaitable(source):
            source = await source
        self._roles = compile_roles(source)
        self._source = None
        logger.debug("Deferred role configuration compiled (%d roles)", len(self._roles))

    async def can(self, role: RoleQuery, operation: str, params: Optional[Params] = None) -> Decision:
        """
        Check if ``role`` can perform ``operation``.

        Args:
            role: Role name, or list of role names checked together.
            operation: Operation name such as ``article:read``.
            params: Forwarded to ``when``/``filter``/``project`` functions.

        Returns:
            Decision with the permission and the optional filter and projection.

        Raises:
            ConfigError: If several grants carry payloads and no reducer is set.
        """
        await self.ready()
        if params is None:
            params = {}
        return await self._resolve(role, operation, params, ())

    def can_sync(self, role: RoleQuery, operation: str, params: Optional[Params] = None) -> Decision:
        """Synchronous wrapper around ``can`` for sync Django code."""
        return async_to_sync(self.can)(role, operation, params)

    async def _resolve(
        self, role: RoleQuery, operation: str, params: Params, lineage: tuple[str, ...]
    ) -> Decision:
        if isinstance(role, (list, tuple)):
            return await self._resolve_many(role, operation, params, lineage)

        if not isinstance(role, str) or not isinstance(operation, str):
            return Decision(permission=False)

        compiled = self._roles.get(role)
        # Roles already on the inheritance path are skipped to stop cycles.
        if compiled is None or role in lineage:
            return Decision(permission=False)

        entry = compiled.match(operation)
        if entry is None:
            if not compiled.inherits:
                return Decision(permission=False)
            missing = [parent for parent in compiled.inherits if parent not in self._roles]
            if missing:
                raise ResolutionError(
                    f"Role {role} inherits from uncompiled roles: {', '.join(missing)}",
                    role=role,
                    operation=operation,
                )
            return await self._resolve_many(
                compiled.inherits, operation, params, lineage + (role,)
            )

        return await self._decide(entry, params)

    async def _decide(self, entry: CompiledPermission, params: Params) -> Decision:
        options = self.options
        (
            permission,
            global_permission,
            payload_filter,
            global_filter,
            payload_project,
            global_project,
        ) = await asyncio.gather(
            _evaluate(entry.when, params, True),
            _evaluate(options.global_when, params, True),
            _evaluate(entry.filter, params),
            _evaluate(options.global_filter, params),
            _evaluate(entry.project, params),
            _evaluate(options.global_project, params),
        )
        return Decision(
            permission=bool(permission and global_permission),
            filter=_overlay(global_filter, payload_filter),
            project=_overlay(global_project, payload_project),
        )

    async def _resolve_many(
        self, roles: Sequence[str], operation: str, params: Params, lineage: tuple[str, ...]
    ) -> Decision:
        decisions = await asyncio.gather(
            *(self._resolve(role, operation, params, lineage) for role in roles)
        )
        allowed = [decision for decision in decisions if decision.permission]
        if not allowed:
            return Decision(permission=False)

        # An unrestricted grant wins over grants carrying filters or projections.
        for decision in allowed:
            if decision.filter is None and decision.project is None:
                return decision

        filters = [decision.filter for decision in allowed if decision.filter is not None]
        projects = [decision.project for decision in allowed if decision.project is not None]
        return Decision(
            permission=True,
            filter=self._merge(filters, self.options.merge_filters, "merge_filters", operation),
            project=self._merge(
                projects, self.options.merge_projections, "merge_projections", operation
            ),
        )

    @staticmethod
    def _merge(
        payloads: list[dict], reducer: Optional[Callable], option: str, operation: str
    ) -> Optional[dict]:
        if not payloads:
            return None
        if len(payloads) == 1:
            return payloads[0]
        if reducer is None:
            raise ConfigError(
                f"Multiple roles with payloads apply to {operation}. "
                f"Define {option}() in the HRBAC options.",
                option=option,
            )
        return reducer(payloads, operation)


__all__ = ["HRBAC"]
