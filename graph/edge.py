"""
edge.py — Graph Edge
====================
Connects two nodes with a non-negative weight.

Design decisions:
  - `source` and `target` are node-id strings, NOT Node references.
    This keeps edges serialisable and avoids circular references.
  - Directedness is a graph-level property.  An undirected graph hands
    out the same Edge for both traversal directions (see
    Graph.neighbours), so edge-state maps always key on stored edge ids.
"""

from enum import Enum


# ---------------------------------------------------------------------------
# Edge State Enum — visual encoding for the renderer
# ---------------------------------------------------------------------------
class EdgeState(Enum):
    DEFAULT       = "default"         # untouched, or examined without improvement
    RELAXING      = "relaxing"        # being examined RIGHT NOW
    RELAXED       = "relaxed"         # produced an improvement at some point
    SHORTEST_PATH = "shortest-path"   # on the final shortest-path tree


# ---------------------------------------------------------------------------
# Edge
# ---------------------------------------------------------------------------
class Edge:
    """
    Attributes:
        id     : Unique identifier within its graph.
        source : ID of the tail node.
        target : ID of the head node.
        weight : Non-negative numeric cost.
    """

    __slots__ = ("id", "source", "target", "weight")

    def __init__(self, edge_id: str, source: str, target: str, weight: float = 1.0):
        self.id:     str   = edge_id
        self.source: str   = source
        self.target: str   = target
        self.weight: float = weight

    # ------------------------------------------------------------------
    # Serialisation
    # ------------------------------------------------------------------
    def to_dict(self) -> dict:
        return {
            "id":     self.id,
            "source": self.source,
            "target": self.target,
            "weight": self.weight,
        }

    @classmethod
    def from_dict(cls, data: dict) -> "Edge":
        return cls(
            edge_id=str(data["id"]),
            source=str(data["source"]),
            target=str(data["target"]),
            weight=data.get("weight", 1.0),
        )

    # ------------------------------------------------------------------
    # Dunder
    # ------------------------------------------------------------------
    def __repr__(self) -> str:
        return f"Edge({self.id}: {self.source} → {self.target}, w={self.weight})"

    def __eq__(self, other) -> bool:
        return isinstance(other, Edge) and self.id == other.id

    def __hash__(self) -> int:
        return hash(self.id)
