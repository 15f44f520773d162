import math

import pytest

from graph import Graph, NodeState, EdgeState, GraphError, InvalidSourceError
from algorithms import classic_shortest_path
from algorithms.classic import PSEUDOCODE
from algorithms.step import EdgeInfo, NodeInfo, DoneInfo

from conftest import run_all


def test_simple_graph_step_kinds(simple):
    steps = run_all(classic_shortest_path(simple, "A"))
    assert [s.kind for s in steps] == [
        "init",
        "extract-min", "examine-edge", "relax", "examine-edge", "relax", "complete-node",
        "extract-min", "examine-edge", "relax", "examine-edge", "relax", "complete-node",
        "extract-min", "examine-edge", "relax", "complete-node",
        "extract-min", "examine-edge", "relax", "complete-node",
        "extract-min", "complete-node",
        "done",
    ]
    assert [s.step_number for s in steps] == list(range(len(steps)))


def test_simple_graph_final_state(simple):
    final = run_all(classic_shortest_path(simple, "A"))[-1]

    assert final.distances == {"A": 0, "B": 4, "C": 2, "D": 9, "E": 11}
    assert final.predecessors == {"A": None, "B": "A", "C": "A", "D": "B", "E": "D"}
    assert final.frontier == ()
    assert set(final.node_states.values()) == {NodeState.COMPLETE}

    shortest = {eid for eid, st in final.edge_states.items() if st is EdgeState.SHORTEST_PATH}
    assert shortest == {"e1", "e2", "e4", "e7"}
    # C→D and C→E were improved on later
    assert final.edge_states["e5"] is EdgeState.RELAXED
    assert final.edge_states["e6"] is EdgeState.RELAXED
    # B→C was skipped because C was already complete
    assert final.edge_states["e3"] is EdgeState.DEFAULT

    assert isinstance(final.info, DoneInfo)
    assert (final.comparisons, final.relaxations) == (6, 6)
    assert final.pseudocode_line == len(PSEUDOCODE) - 1


def test_relax_step_shows_improvement(simple):
    steps = run_all(classic_shortest_path(simple, "A"))
    # B's second relaxation: via B → D at 9, replacing 10 through C
    relax_d = [s for s in steps if s.kind == "relax" and s.info.neighbour == "D"]
    assert [s.distances["D"] for s in relax_d] == [10, 9]
    assert relax_d[-1].predecessors["D"] == "B"
    assert isinstance(relax_d[-1].info, EdgeInfo)
    assert relax_d[-1].info.relaxing_edge == "e4"


def test_extract_marks_current_and_frontier_holds_finite_queue(simple):
    steps = run_all(classic_shortest_path(simple, "A"))
    init, first = steps[0], steps[1]
    assert init.frontier == ("A",)
    assert init.node_states["A"] is NodeState.FRONTIER

    assert first.kind == "extract-min"
    assert isinstance(first.info, NodeInfo) and first.info.current_node == "A"
    assert first.node_states["A"] is NodeState.CURRENT
    assert first.frontier == ()

    # after relaxing A's arcs the frontier is C (2) then B (4)
    assert steps[5].frontier == ("C", "B")


def test_examine_marks_edge_relaxing(simple):
    steps = run_all(classic_shortest_path(simple, "A"))
    examine = steps[2]
    assert examine.kind == "examine-edge"
    assert examine.edge_states["e1"] is EdgeState.RELAXING
    assert examine.info.candidate == 4


def test_single_node_is_init_then_done(isolated):
    steps = run_all(classic_shortest_path(isolated, "solo"))
    assert [s.kind for s in steps] == ["init", "done"]
    assert steps[-1].distances == {"solo": 0}
    assert steps[-1].node_states["solo"] is NodeState.COMPLETE
    assert (steps[-1].comparisons, steps[-1].relaxations) == (0, 0)


def test_unreachable_node_stays_infinite(disconnected):
    disconnected.create_node("3")
    disconnected.create_edge("1", "3", 2)
    final = run_all(classic_shortest_path(disconnected, "1"))[-1]
    assert final.distances["3"] == 2
    assert math.isinf(final.distances["2"])
    assert final.predecessors["2"] is None
    assert final.node_states["2"] is NodeState.COMPLETE
    assert final.to_dict()["distances"]["2"] is None


def test_disconnected_pair_without_edges(disconnected):
    steps = run_all(classic_shortest_path(disconnected, "1"))
    assert [s.kind for s in steps] == ["init", "done"]
    assert math.isinf(steps[-1].distances["2"])
    assert steps[-1].node_states["2"] is NodeState.COMPLETE


def test_undirected_graph_relaxes_both_ways():
    g = Graph(directed=False)
    for nid in "XYZ":
        g.create_node(nid)
    g.create_edge("Y", "X", 3, edge_id="yx")
    g.create_edge("Z", "Y", 1, edge_id="zy")
    final = run_all(classic_shortest_path(g, "X"))[-1]
    assert final.distances == {"X": 0, "Y": 3, "Z": 4}
    assert final.edge_states == {"yx": EdgeState.SHORTEST_PATH, "zy": EdgeState.SHORTEST_PATH}


def test_parallel_edges_mark_the_cheaper_one():
    g = Graph(directed=True)
    g.create_node("A")
    g.create_node("B")
    g.create_edge("A", "B", 5, edge_id="slow")
    g.create_edge("A", "B", 2, edge_id="quick")
    final = run_all(classic_shortest_path(g, "A"))[-1]
    assert final.distances["B"] == 2
    assert final.edge_states["quick"] is EdgeState.SHORTEST_PATH
    assert final.edge_states["slow"] is EdgeState.RELAXED


def test_unknown_source_fails_before_any_step(simple):
    with pytest.raises(InvalidSourceError):
        classic_shortest_path(simple, "Z")


def test_invalid_graph_fails_before_any_step(simple):
    simple.edges["e2"].weight = -1
    with pytest.raises(GraphError):
        classic_shortest_path(simple, "A")


def test_sequence_is_exhausted_after_done(simple):
    seq = classic_shortest_path(simple, "A")
    steps = run_all(seq)
    assert steps[-1].is_final
    assert seq.done
    assert seq.phase == "exhausted"
    assert seq.advance() is None
    assert next(iter(seq), None) is None
