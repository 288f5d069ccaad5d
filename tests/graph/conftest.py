from __future__ import annotations

from typing import Any, List, Sequence, Tuple

import pytest

from infergraph.config import GraphSettings
from infergraph.graph import InferenceGraph, Node, uniform_table


class RecordingFactory:
    """Table factory that records every (cardinality, parent cardinalities) call."""

    def __init__(self) -> None:
        self.calls: List[Tuple[int, Tuple[int, ...]]] = []

    def __call__(self, cardinality: int, parent_cardinalities: Sequence[int]) -> Any:
        self.calls.append((cardinality, tuple(parent_cardinalities)))
        return uniform_table(cardinality, parent_cardinalities)


@pytest.fixture
def settings() -> GraphSettings:
    return GraphSettings()


@pytest.fixture
def factory() -> RecordingFactory:
    return RecordingFactory()


@pytest.fixture
def graph(settings: GraphSettings, factory: RecordingFactory) -> InferenceGraph:
    return InferenceGraph(settings=settings, factory=factory)


@pytest.fixture
def abc(graph: InferenceGraph) -> Tuple[Node, Node, Node]:
    """Three nodes a, b, c with arcs a -> b -> c."""
    a = graph.create_node()
    b = graph.create_node()
    c = graph.create_node()
    assert graph.create_arc(a, b)
    assert graph.create_arc(b, c)
    return a, b, c
