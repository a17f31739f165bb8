"""
Hierarchical role-based access control (HRBAC) engine.

This package provides:
- Role map compilation from a declarative configuration
- Wildcard operation matching (``article:*``)
- Role inheritance with multi-role fallback
- Conditional permissions with query filters and field projections
- Global overlays and multi-role merge reducers

Quick Start:
    >>> from rail_hrbac.rbac import HRBAC
    >>>
    >>> engine = HRBAC({"reader": {"can": ["article:read"]}})
    >>> decision = await engine.can("reader", "article:read")
    >>> decision.permission
    True

Exports:
    - HRBAC: Permission resolution engine
    - EngineOptions: Global overlays and merge reducers
    - Permission: Typed conditional permission entry
    - Decision: Result of a permission check
    - CompiledRole / CompiledPermission: Compiled role map items
    - compile_roles: Role map compiler
    - wildcard_matcher / has_wildcard: Operation pattern helpers
    - HRBACError / ConfigError / ResolutionError: Exceptions
"""

from .compiler import compile_role, compile_roles
from .engine import HRBAC
from .exceptions import ConfigError, HRBACError, ResolutionError
from .types import (
    CompiledPermission,
    CompiledRole,
    Decision,
    EngineOptions,
    Filter,
    Params,
    Permission,
    Projection,
)
from .wildcard import WILDCARD, has_wildcard, wildcard_matcher

__all__ = [
    # Engine
    "HRBAC",
    # Types
    "EngineOptions",
    "Permission",
    "Decision",
    "CompiledRole",
    "CompiledPermission",
    "Params",
    "Filter",
    "Projection",
    # Compiler
    "compile_role",
    "compile_roles",
    # Wildcards
    "WILDCARD",
    "has_wildcard",
    "wildcard_matcher",
    # Exceptions
    "HRBACError",
    "ConfigError",
    "ResolutionError",
]
