from __future__ import annotations

"""
Flat exported form of an inference graph.

A :class:`Network` holds two index-aligned sequences: ``variables[i]`` and
``functions[i]`` describe the same node. This is the surface consumed by
serialization and inference code; the graph rebuilds it after every edit.
"""

from dataclasses import dataclass, field
from typing import Any, Sequence, Tuple


@dataclass(eq=False, repr=False)
class Variable:
    """
    A discrete random variable.

    Compared and hashed by identity: two variables with equal names and
    values are still distinct variables.
    """

    name: str
    values: list[str] = field(default_factory=list)
    properties: list[str] = field(default_factory=list)

    @property
    def cardinality(self) -> int:
        return len(self.values)

    def copy(self) -> Variable:
        return Variable(self.name, list(self.values), list(self.properties))

    def __repr__(self) -> str:
        return f"Variable(name={self.name!r}, values={self.values!r})"


@dataclass(frozen=True, slots=True, eq=False)
class Function:
    """
    Dependency function of one variable.

    ``variables`` is the dependency order: the owning variable first, its
    parents after it in table order. ``table`` is an opaque distribution
    handle owned by the inference/serialization side.
    """

    variables: Tuple[Variable, ...]
    table: Any = None

    def __post_init__(self) -> None:
        if not self.variables:
            raise ValueError("Function needs at least its own variable")

    @property
    def variable(self) -> Variable:
        return self.variables[0]

    @property
    def parents(self) -> Tuple[Variable, ...]:
        return self.variables[1:]

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Function):
            return NotImplemented
        return self.table is other.table and _same(self.variables, other.variables)

    def __hash__(self) -> int:
        return hash((tuple(id(v) for v in self.variables), id(self.table)))


@dataclass(frozen=True, eq=False)
class Network:
    """Snapshot of the flat exported form plus network-level metadata."""

    name: str
    properties: Tuple[str, ...] = ()
    variables: Tuple[Variable, ...] = ()
    functions: Tuple[Function, ...] = ()

    @classmethod
    def build(
        cls,
        name: str,
        variables: Sequence[Variable],
        functions: Sequence[Function],
        properties: Sequence[str] = (),
    ) -> Network:
        return cls(
            name=name,
            properties=tuple(properties),
            variables=tuple(variables),
            functions=tuple(functions),
        )

    def __len__(self) -> int:
        return len(self.variables)

    def _key(self) -> Tuple:
        return (
            self.name,
            self.properties,
            tuple(_variable_key(v) for v in self.variables),
            tuple(
                (tuple(_variable_key(v) for v in f.variables), id(f.table))
                for f in self.functions
            ),
        )

    def __eq__(self, other: object) -> bool:
        # Snapshots hold their own variable copies: compare by value, tables
        # by identity.
        if not isinstance(other, Network):
            return NotImplemented
        return self._key() == other._key()

    def __hash__(self) -> int:
        return hash(self._key())

    def function_for(self, variable: Variable) -> Function | None:
        """Return the function whose head is ``variable`` (by identity), if any."""
        for function in self.functions:
            if function.variable is variable:
                return function
        return None


def _same(left: Sequence[Any], right: Sequence[Any]) -> bool:
    return len(left) == len(right) and all(a is b for a, b in zip(left, right))


def _variable_key(variable: Variable) -> Tuple:
    return (variable.name, tuple(variable.values), tuple(variable.properties))
