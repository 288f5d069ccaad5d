from __future__ import annotations

"""
Keeps each node's distribution handle in step with its structure.

The core never looks inside a table. After a structural change it asks a
:class:`DistributionFactory` for a fresh table of the right shape and wraps it
in a :class:`~infergraph.graph.model.Function` whose dependency order is the
node followed by its parents.
"""

from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, Protocol, Sequence, Tuple

import numpy as np

from ..log import getLogger
from .model import Function

if TYPE_CHECKING:
    from .node import Node

logger = getLogger(__name__)


class DistributionFactory(Protocol):
    """Produces an opaque table for a variable given its parents' cardinalities."""

    def __call__(self, cardinality: int, parent_cardinalities: Sequence[int]) -> Any:
        """Return a table shaped ``(cardinality, *parent_cardinalities)``."""


@dataclass(eq=False, slots=True)
class ProbabilityTable:
    """
    Default numpy-backed table.

    ``values[k, j1, ..., jn]`` is P(variable = k | parent_1 = j1, ...), with
    parents in dependency order.
    """

    values: np.ndarray

    @property
    def shape(self) -> Tuple[int, ...]:
        return tuple(self.values.shape)

    @property
    def size(self) -> int:
        return int(self.values.size)


def uniform_table(cardinality: int, parent_cardinalities: Sequence[int]) -> ProbabilityTable:
    """Table with every column set to the uniform distribution."""
    if cardinality < 1:
        raise ValueError(f"cardinality must be >= 1, got {cardinality}")
    shape = (int(cardinality), *(int(c) for c in parent_cardinalities))
    return ProbabilityTable(np.full(shape, 1.0 / cardinality, dtype=np.float64))


def dependency_shape(node: Node) -> Tuple[int, ...]:
    """Expected table shape for ``node``: own cardinality, then each parent's."""
    return (node.cardinality, *(p.cardinality for p in node.parents))


class DistributionSync:
    """
    Reinitializes distribution handles after structural edits.

    Prior table contents are discarded; the factory decides the fill.
    """

    def __init__(self, factory: DistributionFactory = uniform_table) -> None:
        self._factory = factory

    @property
    def factory(self) -> DistributionFactory:
        return self._factory

    def build(self, node: Node) -> Function:
        """Return a fresh function for ``node`` without attaching it."""
        shape = dependency_shape(node)
        table = self._factory(shape[0], shape[1:])
        variables = (node.variable, *(p.variable for p in node.parents))
        return Function(variables=variables, table=table)

    def resync(self, node: Node) -> Function:
        """Replace ``node``'s function with one matching its current structure."""
        function = self.build(node)
        node._function = function
        logger.debug(
            "Reinitialized distribution of %s with dependencies %s",
            node.name,
            [v.name for v in function.variables],
        )
        return function
