try:
    from ._version import version as __version__  # populated by setuptools-scm
except ModuleNotFoundError:
    __version__ = "0.0.0"

from .graph import (
    InferenceGraph,
    Node,
    Variable,
    Function,
    Network,
    ProbabilityTable,
)

__all__ = [
    "__version__",
    "InferenceGraph",
    "Node",
    "Variable",
    "Function",
    "Network",
    "ProbabilityTable",
]
