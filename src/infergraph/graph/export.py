from __future__ import annotations

"""
Conversion between the node graph and the flat exported form.

``export`` is positional: entry ``i`` of both sequences describes node ``i``
of the graph. ``import_network`` is all-or-nothing: if any variable lacks a
function, has no values, or shares its sanitized name with another
variable, no node is built.
"""

from typing import Dict, List, Optional, Sequence

from ..log import getLogger
from .distributions import DistributionSync
from .errors import InconsistentModelError
from .model import Function, Network, Variable
from .naming import validate_value
from .node import Node

logger = getLogger(__name__)


class ExportSync:
    """Builds :class:`Network` snapshots from nodes and nodes from networks."""

    def __init__(self, distributions: DistributionSync) -> None:
        self._distributions = distributions

    # ------------------------------------------------------------------ #
    # Graph -> flat
    # ------------------------------------------------------------------ #
    @staticmethod
    def export(
        nodes: Sequence[Node],
        name: str,
        properties: Sequence[str] = (),
    ) -> Network:
        """
        Fresh index-aligned snapshot of ``nodes``.

        Variables are copied (and functions rewired to the copies) so later
        edits never reach a snapshot a consumer already holds. Tables are
        shared handles; a resync replaces them rather than changing them.
        """
        copies: Dict[int, Variable] = {id(node.variable): node.variable.copy() for node in nodes}
        functions = [
            Function(
                variables=tuple(copies.get(id(v), v) for v in node.function.variables),
                table=node.function.table,
            )
            for node in nodes
        ]
        return Network.build(
            name=name,
            variables=[copies[id(node.variable)] for node in nodes],
            functions=functions,
            properties=properties,
        )

    # ------------------------------------------------------------------ #
    # Flat -> graph
    # ------------------------------------------------------------------ #
    def import_network(self, network: Network) -> List[Node]:
        """
        Build nodes (with parents/children) from a flat model.

        Variables are copied so the returned nodes own them exclusively and
        their names are sanitized; tables are kept as they are. Raises
        InconsistentModelError if some variable has no function headed by it,
        no values, or a name already used by another variable.
        """
        pairs: List[tuple[Variable, Function]] = []
        for variable in network.variables:
            function = _find_function(network.functions, variable)
            if function is None:
                logger.warning(
                    "Network %r: variable %r has no function; import aborted",
                    network.name,
                    variable.name,
                )
                raise InconsistentModelError(
                    f"Variable {variable.name!r} has no matching function"
                )
            pairs.append((variable, function))

        copies: Dict[int, Variable] = {}
        names: set[str] = set()
        for variable, _ in pairs:
            own = variable.copy()
            own.name = validate_value(own.name)
            if own.name in names:
                raise InconsistentModelError(f"Variable name {own.name!r} is used twice")
            if not own.values:
                raise InconsistentModelError(f"Variable {own.name!r} has no values")
            names.add(own.name)
            copies[id(variable)] = own

        # First pass: one node per variable/function pair.
        nodes: List[Node] = []
        for variable, function in pairs:
            own = copies[id(variable)]
            variables = (own, *(copies.get(id(v), v) for v in function.parents))
            nodes.append(Node(own, Function(variables=variables, table=function.table)))

        # Second pass: adjacency from the dependency order.
        by_variable: Dict[int, Node] = {id(node.variable): node for node in nodes}
        for node in nodes:
            unresolved = False
            for dependency in node.function.parents:
                parent = by_variable.get(id(dependency))
                if parent is None:
                    logger.warning(
                        "Network %r: dependency %r of %r is not a network variable; dropped",
                        network.name,
                        dependency.name,
                        node.name,
                    )
                    unresolved = True
                    continue
                if parent is node or node.has_parent(parent):
                    logger.warning(
                        "Network %r: repeated or self dependency %r of %r; dropped",
                        network.name,
                        dependency.name,
                        node.name,
                    )
                    unresolved = True
                    continue
                node._parents.append(parent)
                parent._children.append(node)
            if unresolved:
                self._distributions.resync(node)

        logger.debug("Imported network %r with %d nodes", network.name, len(nodes))
        return nodes


def _find_function(functions: Sequence[Function], variable: Variable) -> Optional[Function]:
    for function in functions:
        if function.variable is variable:
            return function
    return None
