"""
node.py — Graph Node
====================
A vertex of the graph: an id, a canvas position and an optional label.

Design decisions:
  - Nodes carry NO algorithm state.  The traced algorithms own their
    node-state maps and publish them through Step snapshots, so the same
    Graph can feed any number of runs side by side.
  - NodeState lives here because it is part of the data model; the
    renderer maps NodeState → colour, never the other way round.
"""

from enum import Enum
from typing import Optional


# ---------------------------------------------------------------------------
# Node State Enum — what a traced algorithm says about each vertex
# ---------------------------------------------------------------------------
class NodeState(Enum):
    UNVISITED       = "unvisited"         # not reached yet
    FRONTIER        = "frontier"          # distance improved, not finalised
    CURRENT         = "current"           # the node being processed RIGHT NOW
    COMPLETE        = "complete"          # finalised (or given up on as unreachable)
    PIVOT           = "pivot"             # wave algorithm: root of a large subtree
    IN_FRONTIER_SET = "in-frontier-set"   # wave algorithm: visited but folded into a pivot


# ---------------------------------------------------------------------------
# Node
# ---------------------------------------------------------------------------
class Node:
    """
    Attributes:
        id    : Unique identifier within its graph.
        label : Human-readable name (defaults to the id).
        x, y  : Canvas coordinates.
    """

    __slots__ = ("id", "label", "x", "y")

    def __init__(
        self,
        node_id: str,
        x: float = 0.0,
        y: float = 0.0,
        label: Optional[str] = None,
    ):
        self.id:    str   = node_id
        self.label: str   = label or node_id
        self.x:     float = x
        self.y:     float = y

    # ------------------------------------------------------------------
    # Serialisation
    # ------------------------------------------------------------------
    def to_dict(self) -> dict:
        return {
            "id":    self.id,
            "label": self.label,
            "x":     self.x,
            "y":     self.y,
        }

    @classmethod
    def from_dict(cls, data: dict) -> "Node":
        return cls(
            node_id=str(data["id"]),
            x=data.get("x", 0.0),
            y=data.get("y", 0.0),
            label=data.get("label"),
        )

    # ------------------------------------------------------------------
    # Dunder
    # ------------------------------------------------------------------
    def __repr__(self) -> str:
        return f"Node(id={self.id}, label={self.label}, pos=({self.x:.1f},{self.y:.1f}))"

    def __eq__(self, other) -> bool:
        return isinstance(other, Node) and self.id == other.id

    def __hash__(self) -> int:
        return hash(self.id)
