from __future__ import annotations

"""Read-only cycle query used before committing an arc."""

from collections import deque
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from .node import Node


def would_cycle(parent: Node, child: Node) -> bool:
    """
    Return True if adding the arc ``parent -> child`` would create a cycle.

    Breadth-first walk from ``child`` along children edges; a cycle exists
    iff ``parent`` is reachable. ``child`` itself counts as reached, so a
    self-arc is reported as a cycle. Visited nodes are tracked by identity
    and never expanded twice.
    """
    if parent is child:
        return True

    visited: set[int] = {id(child)}
    queue: deque[Node] = deque([child])

    while queue:
        current = queue.popleft()
        for nxt in current.children:
            if nxt is parent:
                return True
            if id(nxt) not in visited:
                visited.add(id(nxt))
                queue.append(nxt)
    return False


class CycleChecker:
    """Stateless wrapper kept for callers that want an object to hold on to."""

    __slots__ = ()

    def would_cycle(self, parent: Node, child: Node) -> bool:
        return would_cycle(parent, child)

    __call__ = would_cycle
