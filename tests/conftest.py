"""
Shared fixtures and reference helpers for the test-suite.
"""

import math
from typing import Dict, List

import pytest

from graph import Graph
from graph.samples import simple_graph
from algorithms import Step, StepSequence


@pytest.fixture
def simple():
    """The 5-node tutorial graph (source A)."""
    return simple_graph()


@pytest.fixture
def isolated():
    g = Graph(directed=True)
    g.create_node("solo")
    return g


@pytest.fixture
def disconnected():
    g = Graph(directed=True)
    g.create_node("1")
    g.create_node("2")
    return g


def run_all(sequence: StepSequence) -> List[Step]:
    return list(sequence)


def arc_weight(graph: Graph, u: str, v: str) -> float:
    """Cheapest arc u → v, respecting directedness."""
    return min(edge.weight for nbr, edge in graph.neighbours(u) if nbr == v)


def brute_force_distances(graph: Graph, source: str) -> Dict[str, float]:
    """Enumerate every simple path from source.  Small graphs only."""
    best = {nid: math.inf for nid in graph.nodes}

    def walk(node: str, cost: float, on_path: set) -> None:
        if cost < best[node]:
            best[node] = cost
        for nbr, edge in graph.neighbours(node):
            if nbr not in on_path:
                on_path.add(nbr)
                walk(nbr, cost + edge.weight, on_path)
                on_path.remove(nbr)

    walk(source, 0.0, {source})
    return best


def random_graphs():
    """Seeded small graphs, directed and undirected, zero weights included."""
    graphs = []
    for seed in range(25):
        for directed in (True, False):
            graphs.append(
                Graph.generate_random(
                    num_nodes=4 + seed % 4,
                    edge_probability=0.35,
                    directed=directed,
                    weight_range=(0, 9),
                    seed=seed,
                )
            )
    return graphs
