"""
Type definitions for the HRBAC engine.

This module contains the dataclasses and aliases shared by the compiler and
the resolution engine:
- Permission: Typed form of a conditional permission entry
- CompiledPermission: A permission entry after compilation
- CompiledRole: Indexed permissions of one role
- EngineOptions: Global overlays and multi-role merge reducers
- Decision: Result of a permission check
"""

from dataclasses import asdict, dataclass, field, fields
from typing import Any, Awaitable, Callable, Mapping, Optional, Union

from .exceptions import ConfigError

Params = dict[str, Any]
Filter = dict[str, Any]
Projection = dict[str, Any]

ConditionEvaluator = Callable[[Params], Union[Awaitable[bool], bool]]
FilterGenerator = Callable[[Params], Union[Awaitable[Optional[Filter]], Optional[Filter]]]
ProjectionGenerator = Callable[
    [Params], Union[Awaitable[Optional[Projection]], Optional[Projection]]
]
FilterReducer = Callable[[list[Filter], str], Optional[Filter]]
ProjectionReducer = Callable[[list[Projection], str], Optional[Projection]]


@dataclass(frozen=True)
class Permission:
    """Conditional permission entry, equivalent to the mapping form."""

    name: str
    when: Optional[ConditionEvaluator] = None
    filter: Optional[FilterGenerator] = None
    project: Optional[ProjectionGenerator] = None


@dataclass(frozen=True)
class CompiledPermission:
    """Permission entry as stored in a compiled role."""

    name: str
    when: Optional[ConditionEvaluator] = None
    filter: Optional[FilterGenerator] = None
    project: Optional[ProjectionGenerator] = None
    matcher: Optional[Callable[[str], bool]] = field(default=None, compare=False)

    @property
    def is_wildcard(self) -> bool:
        return self.matcher is not None

    @property
    def is_unconditional(self) -> bool:
        return self.when is None and self.filter is None and self.project is None


@dataclass(frozen=True)
class CompiledRole:
    """Indexed permissions of a single role."""

    name: str
    exact: Mapping[str, CompiledPermission]
    wildcards: tuple[CompiledPermission, ...] = ()
    inherits: tuple[str, ...] = ()

    def match(self, operation: str) -> Optional[CompiledPermission]:
        """Return the entry granting ``operation``, exact names first."""
        entry = self.exact.get(operation)
        if entry is not None:
            return entry
        for candidate in self.wildcards:
            if candidate.matcher(operation):
                return candidate
        return None


_OPTION_NAMES = (
    "global_when",
    "global_filter",
    "global_project",
    "merge_filters",
    "merge_projections",
)


@dataclass(frozen=True)
class EngineOptions:
    """Engine-wide overlays and reducers, fixed at construction."""

    # Evaluated for every matched decision, must return True to grant.
    global_when: Optional[ConditionEvaluator] = None
    # Merged under the filter of the matched permission.
    global_filter: Optional[FilterGenerator] = None
    # Merged under the projection of the matched permission.
    global_project: Optional[ProjectionGenerator] = None
    # Reducers for multi-role checks where several grants carry payloads.
    merge_filters: Optional[FilterReducer] = None
    merge_projections: Optional[ProjectionReducer] = None

    def __post_init__(self):
        for option in fields(self):
            value = getattr(self, option.name)
            if value is not None and not callable(value):
                raise ConfigError(
                    f"Option '{option.name}' must be callable", option=option.name
                )

    @classmethod
    def coerce(cls, value: Union["EngineOptions", Mapping[str, Any], None]) -> "EngineOptions":
        """Accept an EngineOptions instance, a mapping of options or None."""
        if value is None:
            return cls()
        if isinstance(value, cls):
            return value
        if not isinstance(value, Mapping):
            raise ConfigError("Expected engine options to be a mapping")
        unknown = sorted(set(value) - set(_OPTION_NAMES))
        if unknown:
            raise ConfigError(
                f"Unknown engine options: {', '.join(unknown)}", option=unknown[0]
            )
        return cls(**value)

    @classmethod
    def from_settings(cls) -> "EngineOptions":
        """Build options from ``RAIL_HRBAC['options']``, loading dotted paths."""
        from rail_hrbac.config_proxy import get_setting
        from rail_hrbac.utils import import_callable

        configured = get_setting("options", {}) or {}
        if not isinstance(configured, Mapping):
            raise ConfigError("Expected RAIL_HRBAC['options'] to be a mapping")
        values = {}
        for name in _OPTION_NAMES:
            value = configured.get(name)
            if isinstance(value, str):
                value = import_callable(value, option=name)
            values[name] = value
        return cls(**values)


@dataclass(frozen=True)
class Decision:
    """Outcome of a permission check."""

    permission: bool
    filter: Optional[Filter] = None
    project: Optional[Projection] = None

    def as_dict(self) -> dict[str, Any]:
        """Return the decision as a dict, leaving out absent payloads."""
        return {key: value for key, value in asdict(self).items() if value is not None}


__all__ = [
    "Params",
    "Filter",
    "Projection",
    "Permission",
    "CompiledPermission",
    "CompiledRole",
    "EngineOptions",
    "Decision",
]
