import json

import pytest

from graph import Graph
from engine import Recorder, compare


def _recorded(key, graph, source):
    rec = Recorder()
    rec.start(key, graph, source)
    rec.run_to_completion()
    return rec


def test_classic_metrics(simple):
    metrics = _recorded("classic", simple, "A").get_metrics()
    assert metrics.algo_key == "classic"
    assert metrics.total_steps == 24
    assert (metrics.comparisons, metrics.relaxations) == (6, 6)
    assert metrics.reached_nodes == 5
    assert metrics.pivot_count == 0


def test_pivot_metrics(simple):
    metrics = _recorded("pivot", simple, "A").get_metrics()
    assert metrics.total_steps == 10
    assert (metrics.comparisons, metrics.relaxations) == (13, 5)
    assert metrics.pivot_count == 3


def test_compare_on_same_graph(simple):
    left = _recorded("classic", simple, "A")
    right = _recorded("pivot", simple, "A")
    result = compare(left, right)

    assert result.distances_agree
    assert result.disagreements == []
    assert result.winner_comparisons == left.metrics.algo_label
    assert result.winner_relaxations == right.metrics.algo_label
    assert result.winner_steps == right.metrics.algo_label


def test_compare_agrees_on_unreachable_nodes():
    g = Graph(directed=True)
    for nid in ("a", "b", "c"):
        g.create_node(nid)
    g.create_edge("a", "b", 2)
    result = compare(_recorded("classic", g, "a"), _recorded("pivot", g, "a"))
    assert result.distances_agree
    assert result.left.reached_nodes == result.right.reached_nodes == 2


def test_compare_flags_disagreeing_nodes(simple):
    left = _recorded("classic", simple, "A")
    other = Graph.from_dict(simple.to_dict())
    other.edges["e7"].weight = 1
    right = _recorded("pivot", other, "A")

    result = compare(left, right)
    assert not result.distances_agree
    assert result.disagreements == ["E"]


def test_export_is_json_safe(disconnected):
    rec = _recorded("pivot", disconnected, "1")
    dumped = json.loads(json.dumps(rec.export(), allow_nan=False))
    assert dumped["algo_key"] == "pivot"
    assert dumped["steps"][-1]["kind"] == "done"
    assert dumped["steps"][-1]["distances"]["2"] is None
    assert len(dumped["steps"]) == dumped["metrics"]["total_steps"]


def test_run_before_start_is_an_error():
    with pytest.raises(RuntimeError):
        Recorder().run_to_completion()
