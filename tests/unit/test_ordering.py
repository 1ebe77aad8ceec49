"""Graph ordering tests."""

import pytest

from pressflow.errors import CycleDetectedError
from pressflow.ordering import GraphOrderer

from tests.helpers import make_node


def _ids(nodes):
    return [n.id for n in nodes]


def test_order_emits_consumers_before_producers():
    nodes = [
        make_node("t", "trigger", ["d"]),
        make_node("d", "news-discovery", ["f"]),
        make_node("f", "filter", ["p"]),
        make_node("p", "publisher"),
    ]

    orderer = GraphOrderer()
    assert _ids(orderer.order(nodes)) == ["p", "f", "d", "t"]
    assert _ids(orderer.execution_plan(nodes)) == ["t", "d", "f", "p"]


def test_order_respects_every_edge_in_branching_graph():
    nodes = [
        make_node("a", "ai-processor", ["p"]),
        make_node("t", "trigger", ["n", "r"]),
        make_node("n", "news-discovery", ["a", "f"]),
        make_node("r", "rss-aggregator", ["f"]),
        make_node("f", "filter", ["p"]),
        make_node("p", "publisher"),
    ]

    ordered = _ids(GraphOrderer().order(nodes))

    assert sorted(ordered) == sorted(n.id for n in nodes)
    position = {node_id: i for i, node_id in enumerate(ordered)}
    for node in nodes:
        for target in node.connected:
            assert position[target] < position[node.id]


def test_disconnected_nodes_are_appended_in_input_order():
    nodes = [
        make_node("lonely", "ai-processor"),
        make_node("t", "trigger", ["a"]),
        make_node("a", "filter"),
        make_node("other", "publisher"),
    ]

    assert _ids(GraphOrderer().order(nodes)) == ["a", "t", "lonely", "other"]


def test_cycle_reachable_from_trigger_is_fatal():
    nodes = [
        make_node("t", "trigger", ["a"]),
        make_node("a", "filter", ["b"]),
        make_node("b", "ai-processor", ["a"]),
    ]

    with pytest.raises(CycleDetectedError) as exc_info:
        GraphOrderer().order(nodes)
    assert exc_info.value.node_id == "a"


def test_self_loop_is_a_cycle():
    with pytest.raises(CycleDetectedError):
        GraphOrderer().order([make_node("t", "trigger", ["t"])])


def test_cycle_in_disconnected_component_is_detected():
    nodes = [
        make_node("t", "trigger"),
        make_node("x", "filter", ["y"]),
        make_node("y", "filter", ["x"]),
    ]

    with pytest.raises(CycleDetectedError):
        GraphOrderer().order(nodes)


def test_diamond_is_not_a_cycle():
    nodes = [
        make_node("t", "trigger", ["a", "b"]),
        make_node("a", "filter", ["p"]),
        make_node("b", "filter", ["p"]),
        make_node("p", "publisher"),
    ]

    assert _ids(GraphOrderer().order(nodes)) == ["p", "a", "b", "t"]


def test_duplicate_ids_and_dangling_edges_are_skipped():
    first = make_node("a", "filter")
    nodes = [
        make_node("t", "trigger", ["missing", "a"]),
        first,
        make_node("a", "publisher"),
    ]

    ordered = GraphOrderer().order(nodes)

    assert _ids(ordered) == ["a", "t"]
    assert ordered[0] is first


def test_long_chain_does_not_recurse():
    count = 5000
    nodes = [make_node("n0", "trigger", ["n1"])]
    nodes += [
        make_node(f"n{i}", "filter", [f"n{i + 1}"] if i + 1 < count else [])
        for i in range(1, count)
    ]

    plan = GraphOrderer().execution_plan(nodes)

    assert len(plan) == count
    assert plan[0].id == "n0"
    assert plan[-1].id == f"n{count - 1}"
