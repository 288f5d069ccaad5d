"""
infergraph.graph
================

Editable structure of a Bayesian network kept in step with its flat form.

Public API:

- InferenceGraph   : node store; all structural edits go through it.
- Node             : one variable with ordered parents, children and function.
- Variable         : discrete variable (name, value labels, properties).
- Function         : dependency order (own variable first) + opaque table.
- Network          : flat exported form (index-aligned variables/functions).
- CycleChecker     : would adding an arc close a cycle (read-only query).
- NameAllocator    : generated and sanitized node names.
- DistributionSync : reinitializes tables after structural changes.
- ExportSync       : graph <-> flat form conversion.
- ProbabilityTable : default numpy-backed table; uniform_table builds one.

All other modules in this package are considered internal implementation details.
"""

from __future__ import annotations

from .core import InferenceGraph
from .cycles import CycleChecker, would_cycle
from .distributions import (
    DistributionFactory,
    DistributionSync,
    ProbabilityTable,
    uniform_table,
)
from .errors import (
    GraphError,
    InconsistentModelError,
    NodeNotFoundError,
    NameInUseError,
    CycleError,
    IntegrityError,
)
from .export import ExportSync
from .model import Function, Network, Variable
from .naming import NameAllocator, candidate_name, generate_name, validate_value
from .node import Node

__all__ = [
    "InferenceGraph",
    "Node",
    "Variable",
    "Function",
    "Network",
    "CycleChecker",
    "would_cycle",
    "DistributionFactory",
    "DistributionSync",
    "ProbabilityTable",
    "uniform_table",
    "ExportSync",
    "NameAllocator",
    "candidate_name",
    "generate_name",
    "validate_value",
    "GraphError",
    "InconsistentModelError",
    "NodeNotFoundError",
    "NameInUseError",
    "CycleError",
    "IntegrityError",
]
