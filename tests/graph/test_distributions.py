from __future__ import annotations

import numpy as np
import pytest

from infergraph.graph import (
    DistributionSync,
    Function,
    InferenceGraph,
    Node,
    ProbabilityTable,
    Variable,
    uniform_table,
)

from conftest import RecordingFactory


def test_uniform_table_shape_and_fill() -> None:
    table = uniform_table(3, [2, 4])
    assert isinstance(table, ProbabilityTable)
    assert table.shape == (3, 2, 4)
    assert table.size == 24
    np.testing.assert_allclose(table.values.sum(axis=0), np.ones((2, 4)))


def test_uniform_table_rejects_empty_domain() -> None:
    with pytest.raises(ValueError):
        uniform_table(0, [])


def test_resync_uses_node_then_parents_order() -> None:
    x = Variable("x", ["0", "1"])
    node = Node(x, Function((x,)))

    parents = []
    for name, values in (("p1", ["u", "v", "w"]), ("p2", ["t"])):
        var = Variable(name, values)
        parents.append(Node(var, Function((var,))))
    node._parents.extend(parents)

    factory = RecordingFactory()
    function = DistributionSync(factory).resync(node)

    assert node.function is function
    assert [v.name for v in function.variables] == ["x", "p1", "p2"]
    assert function.variable is x
    assert factory.calls == [(2, (3, 1))]
    assert node.table.shape == (2, 3, 1)


def test_new_node_has_single_value_table(graph: InferenceGraph, factory: RecordingFactory) -> None:
    a = graph.create_node()
    assert a.values == ("true",)
    assert a.function.variables == (a.variable,)
    assert a.table.shape == (1,)
    assert factory.calls == [(1, ())]


def test_create_arc_resyncs_child_only(graph: InferenceGraph, factory: RecordingFactory) -> None:
    a = graph.create_node(values=["lo", "hi"])
    b = graph.create_node(values=["x", "y", "z"])
    a_function = a.function
    factory.calls.clear()

    graph.create_arc(a, b)

    assert a.function is a_function
    assert [v.name for v in b.function.variables] == ["b", "a"]
    assert b.table.shape == (3, 2)
    assert factory.calls == [(3, (2,))]


def test_parent_order_fixes_table_layout(graph: InferenceGraph) -> None:
    a = graph.create_node(values=["0", "1"])
    b = graph.create_node(values=["0", "1", "2"])
    c = graph.create_node()
    graph.create_arc(b, c)
    graph.create_arc(a, c)

    assert c.parents == (b, a)
    assert [v.name for v in c.function.variables] == ["c", "b", "a"]
    assert c.table.shape == (1, 3, 2)

    graph.delete_arc(b, c)
    assert [v.name for v in c.function.variables] == ["c", "a"]
    assert c.table.shape == (1, 2)


def test_domain_size_change_resyncs_node_and_children(graph: InferenceGraph) -> None:
    x = graph.create_node(values=["a", "b"])
    child1 = graph.create_node()
    child2 = graph.create_node()
    parent = graph.create_node()
    bystander = graph.create_node()
    graph.create_arc(x, child1)
    graph.create_arc(x, child2)
    graph.create_arc(parent, x)

    untouched = {n: n.function for n in (parent, bystander)}
    touched = {n: n.function for n in (x, child1, child2)}

    graph.change_domain(x, ["a", "b", "c"])

    assert x.cardinality == 3
    assert x.table.shape == (3, 1)
    assert child1.table.shape == (1, 3)
    assert child2.table.shape == (1, 3)
    for node, function in touched.items():
        assert node.function is not function
    for node, function in untouched.items():
        assert node.function is function


def test_relabel_keeps_distributions(graph: InferenceGraph, factory: RecordingFactory) -> None:
    x = graph.create_node(values=["a", "b"])
    child = graph.create_node()
    graph.create_arc(x, child)
    functions = (x.function, child.function)
    factory.calls.clear()

    graph.change_domain(x, ["low", "high"])

    assert x.values == ("low", "high")
    assert (x.function, child.function) == functions
    assert factory.calls == []
    assert graph.network.variables[0].values == ["low", "high"]


def test_delete_node_resyncs_former_children(graph: InferenceGraph) -> None:
    a = graph.create_node(values=["0", "1"])
    b = graph.create_node()
    c = graph.create_node()
    graph.create_arc(a, b)
    graph.create_arc(b, c)
    a_function = a.function

    graph.delete_node(b)

    assert c.parents == ()
    assert c.function.variables == (c.variable,)
    assert c.table.shape == (1,)
    assert a.children == ()
    assert a.function is a_function
