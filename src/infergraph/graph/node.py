from __future__ import annotations

"""A single random variable plus its place in the graph."""

from typing import Any, List, Tuple

from .model import Function, Variable


class Node:
    """
    One variable of an :class:`~infergraph.graph.core.InferenceGraph`.

    Structure is read-only from the outside: parents, children and the
    function are changed through the owning graph so that every edit keeps
    back-references, distributions and the exported form consistent.

    Parent order is significant (it fixes the table layout); child order is
    not.
    """

    __slots__ = ("_variable", "_function", "_parents", "_children")

    def __init__(self, variable: Variable, function: Function) -> None:
        if function.variable is not variable:
            raise ValueError(
                f"Function head {function.variable.name!r} is not variable {variable.name!r}"
            )
        self._variable = variable
        self._function = function
        self._parents: List[Node] = []
        self._children: List[Node] = []

    # ------------------------------------------------------------------ #
    # Accessors
    # ------------------------------------------------------------------ #
    @property
    def variable(self) -> Variable:
        return self._variable

    @property
    def name(self) -> str:
        return self._variable.name

    @property
    def values(self) -> Tuple[str, ...]:
        """Domain labels, in order."""
        return tuple(self._variable.values)

    @property
    def cardinality(self) -> int:
        return self._variable.cardinality

    @property
    def properties(self) -> Tuple[str, ...]:
        return tuple(self._variable.properties)

    @property
    def function(self) -> Function:
        return self._function

    @property
    def table(self) -> Any:
        """Opaque distribution handle."""
        return self._function.table

    @property
    def parents(self) -> Tuple[Node, ...]:
        return tuple(self._parents)

    @property
    def children(self) -> Tuple[Node, ...]:
        return tuple(self._children)

    def has_parent(self, node: Node) -> bool:
        return any(p is node for p in self._parents)

    def has_child(self, node: Node) -> bool:
        return any(c is node for c in self._children)

    # ------------------------------------------------------------------ #
    # Adjacency helpers (graph-internal)
    # ------------------------------------------------------------------ #
    def _remove_parent(self, node: Node) -> bool:
        for i, p in enumerate(self._parents):
            if p is node:
                del self._parents[i]
                return True
        return False

    def _remove_child(self, node: Node) -> bool:
        for i, c in enumerate(self._children):
            if c is node:
                del self._children[i]
                return True
        return False

    def __repr__(self) -> str:
        return (
            f"Node(name={self.name!r}, values={list(self.values)!r}, "
            f"parents={[p.name for p in self._parents]!r})"
        )
