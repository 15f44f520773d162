"""
samples.py — Example Graphs
============================
The fixed graphs the visualizer ships with.  Each builder returns a
FRESH Graph so callers are free to hold on to it.

    from graph.samples import EXAMPLES
    name, build, source = EXAMPLES["simple"]
"""

from typing import Callable, Dict, List, Tuple

from graph.graph import Graph


NodeSpec = Tuple[str, float, float]
EdgeSpec = Tuple[str, str, float]


def _build(nodes: List[NodeSpec], edges: List[EdgeSpec], directed: bool = True) -> Graph:
    g = Graph(directed=directed)
    for nid, x, y in nodes:
        g.create_node(nid, x=x, y=y)
    for i, (src, tgt, w) in enumerate(edges, start=1):
        g.create_edge(src, tgt, weight=w, edge_id=f"e{i}")
    return g


def simple_graph() -> Graph:
    """5 nodes — the tutorial graph.  From A: A=0 B=4 C=2 D=9 E=11."""
    return _build(
        [("A", 100, 200), ("B", 250, 100), ("C", 250, 300), ("D", 400, 100), ("E", 400, 300)],
        [
            ("A", "B", 4), ("A", "C", 2), ("B", "C", 1), ("B", "D", 5),
            ("C", "D", 8), ("C", "E", 10), ("D", "E", 2),
        ],
    )


def medium_graph() -> Graph:
    """10 nodes — demonstration graph."""
    return _build(
        [
            ("S", 80, 250), ("A", 200, 150), ("B", 200, 350), ("C", 350, 100),
            ("D", 350, 250), ("E", 350, 400), ("F", 500, 150), ("G", 500, 350),
            ("H", 650, 200), ("T", 650, 300),
        ],
        [
            ("S", "A", 3), ("S", "B", 5), ("A", "C", 2), ("A", "D", 4), ("B", "D", 2),
            ("B", "E", 6), ("C", "F", 3), ("D", "C", 1), ("D", "F", 5), ("D", "G", 4),
            ("E", "G", 2), ("F", "H", 2), ("G", "T", 3), ("H", "T", 1), ("F", "T", 6),
        ],
    )


def sparse_graph() -> Graph:
    """13 nodes — larger sparse graph for the side-by-side comparison."""
    return _build(
        [
            ("0", 100, 300), ("1", 200, 150), ("2", 200, 450), ("3", 350, 100),
            ("4", 350, 250), ("5", 350, 400), ("6", 350, 550), ("7", 500, 150),
            ("8", 500, 350), ("9", 500, 500), ("10", 650, 250), ("11", 650, 400),
            ("12", 800, 300),
        ],
        [
            ("0", "1", 4), ("0", "2", 3), ("1", "3", 2), ("1", "4", 5), ("2", "5", 6),
            ("2", "6", 4), ("3", "7", 3), ("4", "7", 2), ("4", "8", 4), ("5", "8", 2),
            ("5", "9", 5), ("6", "9", 3), ("7", "10", 4), ("8", "10", 3), ("8", "11", 2),
            ("9", "11", 4), ("10", "12", 3), ("11", "12", 2),
        ],
    )


# key → (display name, builder, default source)
EXAMPLES: Dict[str, Tuple[str, Callable[[], Graph], str]] = {
    "simple": ("Simple graph (5 nodes)", simple_graph, "A"),
    "medium": ("Medium graph (10 nodes)", medium_graph, "S"),
    "sparse": ("Sparse graph (13 nodes)", sparse_graph, "0"),
}
