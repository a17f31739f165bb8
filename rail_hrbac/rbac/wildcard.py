"""
Operation-name wildcard matching.

A pattern such as ``article:*`` is split on ``*`` into literal fragments. The
first fragment anchors the start of the operation name, every later fragment
has to follow in order, and nothing anchors the end: once the last fragment is
found, any remaining suffix is accepted.
"""

from typing import Callable

WILDCARD = "*"


def has_wildcard(name: str) -> bool:
    """Return True if ``name`` is a pattern rather than an exact operation."""
    return WILDCARD in name


def wildcard_matcher(pattern: str) -> Callable[[str], bool]:
    """
    Build a predicate testing operation names against ``pattern``.

    Args:
        pattern: Operation pattern, ``*`` standing for any run of characters.

    Returns:
        Callable returning True when the operation name matches.
    """
    head, *fragments = pattern.split(WILDCARD)

    def match(operation: str) -> bool:
        if not isinstance(operation, str) or not operation.startswith(head):
            return False
        position = len(head)
        for fragment in fragments:
            if not fragment:
                continue
            index = operation.find(fragment, position)
            if index < 0:
                return False
            position = index + len(fragment)
        return True

    return match


__all__ = ["WILDCARD", "has_wildcard", "wildcard_matcher"]
