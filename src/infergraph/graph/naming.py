from __future__ import annotations

"""
Node name allocation.

Generated names run a, b, ..., z, a1, b1, ..., z1, a2, ... The allocator keeps
no counter of its own: every call looks at the names currently in the graph.
"""

from typing import Callable, Collection, Iterable, Optional


def validate_value(value: str) -> str:
    """Sanitize a user supplied name: spaces become underscores."""
    return value.replace(" ", "_")


def candidate_name(index: int) -> str:
    """Return the candidate name for allocation attempt ``index`` (0-based)."""
    if index < 0:
        raise ValueError(f"index must be >= 0, got {index}")
    letter = chr(ord("a") + index % 26)
    suffix = index // 26
    return f"{letter}{suffix}" if suffix else letter


def generate_name(taken: Collection[str], start: int = 0) -> str:
    """First candidate at attempt ``start`` or later that is not in ``taken``."""
    index = start
    while True:
        name = candidate_name(index)
        if name not in taken:
            return name
        index += 1


class NameAllocator:
    """
    Produces valid, currently unused names.

    ``names`` is called on every request and must return the names of all
    nodes in the graph right now.
    """

    def __init__(self, names: Callable[[], Iterable[str]]) -> None:
        self._names = names

    def taken(self) -> set[str]:
        return set(self._names())

    def allocate(self, start: int = 0) -> str:
        return generate_name(self.taken(), start=start)

    @staticmethod
    def validate_value(value: str) -> str:
        return validate_value(value)

    def check_name(self, name: str) -> Optional[str]:
        """
        Return the sanitized ``name`` if no node uses it, else None.
        """
        sanitized = validate_value(name)
        if sanitized in self.taken():
            return None
        return sanitized
