"""
graph.py — Graph Container
===========================
Single source of truth for the graph.  Both traced algorithms read from
this object; neither ever writes to it.

Responsibilities:
  1. Building nodes & edges with fail-fast validation   (add / create)
  2. Adjacency queries                                   (neighbours, …)
  3. Serialisation round-trip                            (to_dict / from_dict)
  4. Seeded random generation                            (for demos & tests)

Design decisions:
  - Nodes & edges stored in insertion-ordered dicts keyed by id for O(1)
    lookup; iteration order is the authoring order, which keeps every
    trace deterministic.
  - A separate adjacency dict  `_adj[node_id] → [(neighbour_id, edge_id)]`
    is maintained incrementally so neighbour queries are O(degree).
  - Undirected graphs register each edge under BOTH endpoints, but the
    stored edge is never duplicated or flipped.
  - Malformed input is rejected here, before any algorithm can run.
"""

import math
import random
from typing import Dict, List, Optional, Tuple

from graph.node import Node
from graph.edge import Edge
from graph.errors import GraphError


class Graph:
    """
    Attributes:
        nodes      : {node_id: Node}
        edges      : {edge_id: Edge}
        directed   : bool – graph-level directedness
        _adj       : {node_id: [(neighbour_id, edge_id), …]}
    """

    def __init__(self, directed: bool = True):
        self.nodes:    Dict[str, Node] = {}
        self.edges:    Dict[str, Edge] = {}
        self.directed: bool            = directed
        self._adj:     Dict[str, List[Tuple[str, str]]] = {}

    # ==================================================================
    # NODES
    # ==================================================================
    def add_node(self, node: Node) -> Node:
        if node.id in self.nodes:
            raise GraphError(f"Duplicate node id '{node.id}'")
        self.nodes[node.id] = node
        self._adj[node.id] = []
        return node

    def create_node(self, node_id: str, x: float = 0.0, y: float = 0.0, label: Optional[str] = None) -> Node:
        """Convenience: create + add in one call."""
        return self.add_node(Node(node_id, x=x, y=y, label=label))

    def has_node(self, node_id: str) -> bool:
        return node_id in self.nodes

    def node_ids(self) -> List[str]:
        return list(self.nodes)

    def node_count(self) -> int:
        return len(self.nodes)

    # ==================================================================
    # EDGES
    # ==================================================================
    def add_edge(self, edge: Edge) -> Edge:
        if edge.id in self.edges:
            raise GraphError(f"Duplicate edge id '{edge.id}'")
        for endpoint in (edge.source, edge.target):
            if endpoint not in self.nodes:
                raise GraphError(f"Edge '{edge.id}' references unknown node '{endpoint}'")
        edge.weight = _check_weight(edge)

        self.edges[edge.id] = edge
        self._adj[edge.source].append((edge.target, edge.id))
        if not self.directed and edge.source != edge.target:
            self._adj[edge.target].append((edge.source, edge.id))
        return edge

    def create_edge(self, source: str, target: str, weight: float = 1.0, edge_id: Optional[str] = None) -> Edge:
        return self.add_edge(Edge(edge_id or f"e{len(self.edges) + 1}", source, target, weight))

    def get_edge_between(self, a: str, b: str) -> Optional[Edge]:
        """First edge leading from a to b (direction-aware)."""
        for nbr, eid in self._adj.get(a, []):
            if nbr == b:
                return self.edges[eid]
        return None

    def edge_count(self) -> int:
        return len(self.edges)

    # ==================================================================
    # ADJACENCY QUERIES
    # ==================================================================
    def neighbours(self, node_id: str) -> List[Tuple[str, Edge]]:
        """Return [(neighbour_id, edge)] for every arc leaving node_id."""
        return [(nbr, self.edges[eid]) for nbr, eid in self._adj.get(node_id, [])]

    def out_degree(self, node_id: str) -> int:
        return len(self._adj.get(node_id, []))

    # ==================================================================
    # VALIDATION
    # ==================================================================
    def validate(self) -> None:
        """
        Re-check every invariant.  add_node / add_edge already enforce
        them, so this only trips if someone mutated the dicts directly.
        """
        for eid, edge in self.edges.items():
            if eid != edge.id:
                raise GraphError(f"Edge stored under '{eid}' has id '{edge.id}'")
            for endpoint in (edge.source, edge.target):
                if endpoint not in self.nodes:
                    raise GraphError(f"Edge '{edge.id}' references unknown node '{endpoint}'")
            _check_weight(edge)
        for nid, node in self.nodes.items():
            if nid != node.id:
                raise GraphError(f"Node stored under '{nid}' has id '{node.id}'")

    # ==================================================================
    # SERIALISATION
    # ==================================================================
    def to_dict(self) -> dict:
        return {
            "directed": self.directed,
            "nodes":    [n.to_dict() for n in self.nodes.values()],
            "edges":    [e.to_dict() for e in self.edges.values()],
        }

    @classmethod
    def from_dict(cls, data: dict) -> "Graph":
        try:
            g = cls(directed=bool(data.get("directed", True)))
            for nd in data.get("nodes", []):
                g.add_node(Node.from_dict(nd))
            for ed in data.get("edges", []):
                g.add_edge(Edge.from_dict(ed))
        except (KeyError, TypeError, AttributeError) as exc:
            raise GraphError(f"Malformed graph description: {exc!r}") from exc
        return g

    # ==================================================================
    # GENERATOR
    # ==================================================================
    @classmethod
    def generate_random(
        cls,
        num_nodes: int = 10,
        edge_probability: float = 0.3,
        directed: bool = True,
        weight_range: Tuple[int, int] = (1, 10),
        seed: Optional[int] = None,
        canvas_w: float = 800,
        canvas_h: float = 500,
    ) -> "Graph":
        """
        Erdős–Rényi style random graph with integer weights.
        Each possible edge is included with probability `edge_probability`.
        Connectivity is NOT forced, so unreachable nodes do occur.
        """
        rng = random.Random(seed)
        g = cls(directed=directed)

        # place nodes on a circle
        ids = []
        for i in range(num_nodes):
            angle  = 2 * math.pi * i / max(num_nodes, 1)
            radius = min(canvas_w, canvas_h) * 0.35
            x = canvas_w / 2 + radius * math.cos(angle)
            y = canvas_h / 2 + radius * math.sin(angle)
            nid = str(i)
            g.create_node(nid, x=round(x, 1), y=round(y, 1))
            ids.append(nid)

        for i in range(num_nodes):
            for j in (range(num_nodes) if directed else range(i + 1, num_nodes)):
                if i == j:
                    continue
                if rng.random() < edge_probability:
                    g.create_edge(ids[i], ids[j], weight=rng.randint(*weight_range))

        return g

    # ==================================================================
    # Dunder
    # ==================================================================
    def __repr__(self) -> str:
        kind = "directed" if self.directed else "undirected"
        return f"Graph({kind}, nodes={len(self.nodes)}, edges={len(self.edges)})"

    def __contains__(self, node_id: str) -> bool:
        return node_id in self.nodes


# ---------------------------------------------------------------------------
def _check_weight(edge: Edge) -> float:
    try:
        weight = float(edge.weight)
    except (TypeError, ValueError):
        raise GraphError(f"Edge '{edge.id}' has non-numeric weight {edge.weight!r}") from None
    except OverflowError:
        raise GraphError(f"Edge '{edge.id}' has a weight too large to represent") from None
    if math.isnan(weight) or math.isinf(weight):
        raise GraphError(f"Edge '{edge.id}' has non-finite weight {edge.weight!r}")
    if weight < 0:
        raise GraphError(f"Edge '{edge.id}' has negative weight {edge.weight!r}")
    return weight
