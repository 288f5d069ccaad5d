from __future__ import annotations

"""Exception taxonomy for structural edits on an inference graph."""


class GraphError(RuntimeError):
    """Base exception for inference graph errors."""
    pass


class InconsistentModelError(GraphError):
    """A flat model could not be turned into a graph (variable without function)."""
    pass


class NodeNotFoundError(GraphError, LookupError):
    """The node is not, or no longer, part of this graph."""
    pass


class NameInUseError(GraphError, ValueError):
    """An explicitly requested node name is already taken."""
    pass


class CycleError(GraphError):
    """Adding the arc would make the graph cyclic (only with enforce_acyclic)."""
    pass


class IntegrityError(GraphError):
    """A structural invariant does not hold."""
    pass
