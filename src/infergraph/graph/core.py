from __future__ import annotations

from contextlib import contextmanager
from typing import Callable, Dict, Iterator, List, Optional, Sequence, Tuple

from graphblas import Matrix

from ..config import GraphSettings, get_settings
from ..log import ensure_logging, getLogger
from .cycles import CycleChecker
from .distributions import (
    DistributionFactory,
    DistributionSync,
    ProbabilityTable,
    dependency_shape,
    uniform_table,
)
from .errors import (
    CycleError,
    IntegrityError,
    NameInUseError,
    NodeNotFoundError,
)
from .export import ExportSync
from .matrix import adjacency_matrix, is_acyclic
from .model import Function, Network, Variable
from .naming import NameAllocator, validate_value
from .node import Node

logger = getLogger(__name__)

Listener = Callable[[Network], None]


class InferenceGraph:
    """
    Editable structure of a Bayesian network.

    Structure:
      - Nodes in graph order; the order is the index order of the exported
        form and only changes by deletion.
      - Each node keeps ordered parents, unordered children and a function
        whose dependency order is ``[node] ++ parents``.
      - ``network`` is the flat exported form, rebuilt after every edit.

    Every public mutation runs as one edit: adjacency change, then
    distribution resync of the affected nodes, then export. If any stage
    raises, the graph is restored to its state before the edit and the
    previous export stays current.

    Arcs are not checked for cycles unless ``enforce_acyclic`` is set in the
    graph settings; callers query :meth:`would_cycle` first.
    """

    __slots__ = (
        "_nodes",
        "_name",
        "_properties",
        "_network",
        "_settings",
        "_distributions",
        "_exporter",
        "_allocator",
        "_cycles",
        "_listeners",
    )

    # ------------------------------------------------------------------ #
    # Construction
    # ------------------------------------------------------------------ #
    def __init__(
        self,
        network: Optional[Network] = None,
        *,
        settings: Optional[GraphSettings] = None,
        factory: Optional[DistributionFactory] = None,
    ) -> None:
        ensure_logging()
        self._settings: GraphSettings = settings or get_settings().graph
        self._distributions = DistributionSync(factory or uniform_table)
        self._exporter = ExportSync(self._distributions)
        self._allocator = NameAllocator(lambda: (node.name for node in self._nodes))
        self._cycles = CycleChecker()
        self._listeners: List[Listener] = []

        if network is None:
            self._nodes: List[Node] = []
            self._name: str = self._settings.default_network_name
            self._properties: List[str] = []
        else:
            self._nodes = self._exporter.import_network(network)
            self._name = network.name
            self._properties = list(network.properties)

        self._network: Network = self._export()

    @classmethod
    def from_network(
        cls,
        network: Network,
        *,
        settings: Optional[GraphSettings] = None,
        factory: Optional[DistributionFactory] = None,
    ) -> InferenceGraph:
        """Build a graph from a flat model; see :meth:`ExportSync.import_network`."""
        return cls(network, settings=settings, factory=factory)

    # ------------------------------------------------------------------ #
    # Edit transaction
    # ------------------------------------------------------------------ #
    def _export(self) -> Network:
        return self._exporter.export(self._nodes, self._name, self._properties)

    def _snapshot(self) -> Tuple:
        nodes = [
            (node, list(node._parents), list(node._children), node._function,
             node.variable.name, list(node.variable.values))
            for node in self._nodes
        ]
        return list(self._nodes), nodes, self._name, list(self._properties)

    def _restore(self, snapshot: Tuple) -> None:
        order, nodes, name, properties = snapshot
        for node, parents, children, function, var_name, values in nodes:
            node._parents = parents
            node._children = children
            node._function = function
            node.variable.name = var_name
            node.variable.values = values
        self._nodes = order
        self._name = name
        self._properties = properties

    @contextmanager
    def _edit(self, operation: str) -> Iterator[None]:
        snapshot = self._snapshot()
        try:
            yield
            network = self._export()
        except Exception:
            self._restore(snapshot)
            logger.warning("%s failed; graph restored to its previous state", operation)
            raise
        self._network = network
        logger.debug("%s done; %d nodes exported", operation, len(network))
        for listener in list(self._listeners):
            listener(network)

    def _require(self, *nodes: Node) -> None:
        for node in nodes:
            if not any(n is node for n in self._nodes):
                raise NodeNotFoundError(f"{node!r} is not part of this graph")

    # ------------------------------------------------------------------ #
    # Structural edits
    # ------------------------------------------------------------------ #
    def create_node(
        self,
        name: Optional[str] = None,
        values: Optional[Sequence[str]] = None,
    ) -> Node:
        """
        Append a node without parents or children.

        Without ``name`` the lowest free generated name is used (a, b, ...,
        a1, ...). An explicit name is sanitized and must be unused.
        """
        if name is None:
            name = self._allocator.allocate()
        else:
            checked = self._allocator.check_name(name)
            if checked is None:
                raise NameInUseError(f"Name {validate_value(name)!r} is already in use")
            name = checked

        labels = list(values) if values is not None else list(self._settings.default_values)
        if not labels:
            raise ValueError("A node needs at least one value")

        variable = Variable(name, labels)
        node = Node(variable, Function((variable,)))
        with self._edit("create_node"):
            self._distributions.resync(node)
            self._nodes.append(node)
        return node

    def create_arc(self, parent: Node, child: Node) -> bool:
        """
        Add the arc ``parent -> child``.

        Returns False, without changing anything, if ``parent`` already is a
        parent of ``child``. Only the child's distribution is reinitialized.
        """
        self._require(parent, child)
        if child.has_parent(parent):
            return False
        if self._settings.enforce_acyclic and self._cycles.would_cycle(parent, child):
            raise CycleError(f"Arc {parent.name} -> {child.name} would create a cycle")

        with self._edit("create_arc"):
            parent._children.append(child)
            child._parents.append(parent)
            self._distributions.resync(child)
        return True

    def delete_arc(self, parent: Node, child: Node) -> bool:
        """Remove the arc ``parent -> child``; returns False if there was none."""
        self._require(parent, child)
        if not (child.has_parent(parent) or parent.has_child(child)):
            return False

        with self._edit("delete_arc"):
            parent._remove_child(child)
            child._remove_parent(parent)
            self._distributions.resync(child)
        return True

    def delete_node(self, node: Node) -> None:
        """
        Detach ``node`` from its neighbours and drop it from the graph.

        Former children get their distributions reinitialized. The node
        object must not be used with this graph afterwards.
        """
        self._require(node)

        with self._edit("delete_node"):
            for child in node.children:
                child._remove_parent(node)
                self._distributions.resync(child)
            for parent in node.parents:
                parent._remove_child(node)
            self._nodes = [n for n in self._nodes if n is not node]
            node._parents = []
            node._children = []

    def change_domain(self, node: Node, values: Sequence[str]) -> None:
        """
        Replace the value labels of ``node``.

        With the same number of labels only the labels change. Otherwise the
        node's distribution and those of all its children are reinitialized.
        """
        self._require(node)
        labels = list(values)
        if not labels:
            raise ValueError("A node needs at least one value")

        with self._edit("change_domain"):
            resize = len(labels) != node.cardinality
            node.variable.values = labels
            if not resize:
                logger.debug("Relabelled %s to %s", node.name, labels)
                return
            self._distributions.resync(node)
            for child in node.children:
                self._distributions.resync(child)

    def rename_node(self, node: Node, name: str) -> Optional[str]:
        """
        Rename ``node``; returns the sanitized name, or None if it is taken.
        """
        self._require(node)
        sanitized = validate_value(name)
        if sanitized == node.name:
            return sanitized
        if self._allocator.check_name(sanitized) is None:
            return None

        with self._edit("rename_node"):
            node.variable.name = sanitized
        return sanitized

    # ------------------------------------------------------------------ #
    # Queries
    # ------------------------------------------------------------------ #
    def would_cycle(self, parent: Node, child: Node) -> bool:
        """True if adding ``parent -> child`` would close a directed cycle."""
        return self._cycles.would_cycle(parent, child)

    def check_name(self, name: str) -> Optional[str]:
        """Sanitized ``name`` if no node uses it, else None."""
        return self._allocator.check_name(name)

    @staticmethod
    def validate_value(value: str) -> str:
        return validate_value(value)

    def get_node(self, name: str) -> Optional[Node]:
        for node in self._nodes:
            if node.name == name:
                return node
        return None

    def index_of(self, node: Node) -> int:
        for i, n in enumerate(self._nodes):
            if n is node:
                return i
        raise NodeNotFoundError(f"{node!r} is not part of this graph")

    @property
    def nodes(self) -> Tuple[Node, ...]:
        return tuple(self._nodes)

    def get_nodes(self) -> Tuple[Node, ...]:
        return self.nodes

    def number_nodes(self) -> int:
        return len(self._nodes)

    def __len__(self) -> int:
        return len(self._nodes)

    def __iter__(self) -> Iterator[Node]:
        return iter(tuple(self._nodes))

    def __contains__(self, node: object) -> bool:
        return any(n is node for n in self._nodes)

    # ------------------------------------------------------------------ #
    # Exported form
    # ------------------------------------------------------------------ #
    @property
    def network(self) -> Network:
        """Current flat exported form."""
        return self._network

    def get_network(self) -> Network:
        return self._network

    def export(self) -> Network:
        """Rebuild the exported form from the current nodes and return it."""
        self._network = self._export()
        return self._network

    def add_listener(self, listener: Listener) -> None:
        """Call ``listener(network)`` after every successful edit."""
        self._listeners.append(listener)

    def remove_listener(self, listener: Listener) -> None:
        self._listeners.remove(listener)

    def adjacency_matrix(self) -> Matrix:
        """Matrix[BOOL] with (i, j) True iff node i is a parent of node j."""
        return adjacency_matrix(self._nodes)

    # ------------------------------------------------------------------ #
    # Network metadata
    # ------------------------------------------------------------------ #
    @property
    def name(self) -> str:
        return self._name

    @name.setter
    def name(self, value: str) -> None:
        self.set_name(value)

    def get_name(self) -> str:
        return self._name

    def set_name(self, value: str) -> None:
        with self._edit("set_name"):
            self._name = value

    def get_network_properties(self) -> List[str]:
        return list(self._properties)

    def set_network_properties(self, properties: Sequence[str]) -> None:
        with self._edit("set_network_properties"):
            self._properties = list(properties)

    def add_network_property(self, prop: str) -> None:
        with self._edit("add_network_property"):
            self._properties.append(prop)

    def remove_network_property(self, index: int) -> None:
        if not -len(self._properties) <= index < len(self._properties):
            raise IndexError(f"property index {index} out of range")
        with self._edit("remove_network_property"):
            del self._properties[index]

    # ------------------------------------------------------------------ #
    # Integrity
    # ------------------------------------------------------------------ #
    def verify(self) -> None:
        """
        Check the structural invariants; raise IntegrityError on the first
        violation.

        - names are pairwise distinct
        - parents/children are mutual inverses and stay inside the graph
        - every function's dependency order is ``[node] ++ parents``
        - numpy tables have the shape of that dependency order
        - the graph is acyclic
        - the exported form is aligned with the node order
        """
        members: Dict[int, Node] = {id(node): node for node in self._nodes}

        seen: set[str] = set()
        for node in self._nodes:
            if node.name in seen:
                raise IntegrityError(f"Duplicate node name {node.name!r}")
            seen.add(node.name)

        for node in self._nodes:
            if len({id(p) for p in node._parents}) != len(node._parents):
                raise IntegrityError(f"{node.name}: repeated parent")
            for parent in node._parents:
                if id(parent) not in members:
                    raise IntegrityError(f"{node.name}: parent {parent.name} not in graph")
                if not parent.has_child(node):
                    raise IntegrityError(f"{parent.name} lacks child {node.name}")
            for child in node._children:
                if id(child) not in members:
                    raise IntegrityError(f"{node.name}: child {child.name} not in graph")
                if not child.has_parent(node):
                    raise IntegrityError(f"{child.name} lacks parent {node.name}")

            expected = (node.variable, *(p.variable for p in node._parents))
            actual = node.function.variables
            if len(actual) != len(expected) or any(a is not b for a, b in zip(actual, expected)):
                raise IntegrityError(
                    f"{node.name}: function depends on {[v.name for v in actual]}, "
                    f"expected {[v.name for v in expected]}"
                )
            table = node.table
            if isinstance(table, ProbabilityTable) and table.shape != dependency_shape(node):
                raise IntegrityError(
                    f"{node.name}: table shape {table.shape} != {dependency_shape(node)}"
                )

        if not is_acyclic(self.adjacency_matrix()):
            raise IntegrityError("Graph contains a directed cycle")

        if self._network != self._export():
            raise IntegrityError("Exported form is out of date")

    # ------------------------------------------------------------------ #
    # Introspection
    # ------------------------------------------------------------------ #
    def __repr__(self) -> str:
        arcs = sum(len(node._parents) for node in self._nodes)
        return (
            f"InferenceGraph(name={self._name!r}, "
            f"num_nodes={len(self._nodes)}, "
            f"num_arcs={arcs})"
        )
