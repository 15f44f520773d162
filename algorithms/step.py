"""
step.py — Algorithm Step Snapshot
==================================
Every traced algorithm emits Step objects.  A Step is a frozen-in-time
picture of everything the visualizer needs to render one frame:

    • The state of EVERY node and EVERY edge
    • The full distance and predecessor maps
    • The "active" node ids (the frontier) in display order
    • Which line of pseudocode is executing right now
    • A plain-English description of the action just taken
    • Kind-specific metadata (see the StepInfo variants below)

Design decisions:
  - Step is a frozen dataclass built from COPIES of the live maps.
    The algorithm instance is the only writer of its live state; once a
    Step is handed out, nothing the algorithm does later can reach it.
  - Metadata is a small closed family of frozen dataclasses, one per
    group of step kinds, instead of one bag of optional fields.  Every
    variant carries the running comparison / relaxation counters.
  - `to_dict()` produces JSON-safe output: enums become their string
    values and infinite distances become None.
"""

import math
from dataclasses import dataclass, field, fields
from typing import Any, Dict, Optional, Tuple

from graph import Graph, NodeState, EdgeState


INF = math.inf


# ---------------------------------------------------------------------------
# Metadata variants
# ---------------------------------------------------------------------------
@dataclass(frozen=True)
class StepInfo:
    comparisons: int
    relaxations: int

    def to_dict(self) -> Dict[str, Any]:
        out: Dict[str, Any] = {"type": type(self).__name__}
        for f in fields(self):
            out[f.name] = _jsonable(getattr(self, f.name))
        return out


@dataclass(frozen=True)
class RunInfo(StepInfo):
    """init / find-pivots-start"""
    k: Optional[int] = None


@dataclass(frozen=True)
class NodeInfo(StepInfo):
    """extract-min / complete-node / process-remaining"""
    current_node: str = ""


@dataclass(frozen=True)
class EdgeInfo(StepInfo):
    """examine-edge / relax / no-relax"""
    current_node:  str   = ""
    relaxing_edge: str   = ""
    neighbour:     str   = ""
    candidate:     float = INF


@dataclass(frozen=True)
class WaveInfo(StepInfo):
    """relax-step / wave-complete"""
    round:        int             = 0
    frontier_set: Tuple[str, ...] = ()


@dataclass(frozen=True)
class PivotInfo(StepInfo):
    """pivots-identified / frontier-reduction"""
    k:             int                         = 0
    pivots:        Tuple[str, ...]             = ()
    frontier_set:  Tuple[str, ...]             = ()
    subtree_sizes: Tuple[Tuple[str, int], ...] = ()


@dataclass(frozen=True)
class DoneInfo(StepInfo):
    """done"""
    pivots: Tuple[str, ...] = ()


# ---------------------------------------------------------------------------
# Step
# ---------------------------------------------------------------------------
@dataclass(frozen=True)
class Step:
    """
    Attributes:
        step_number     : 0-based index of this step in the run.
        kind            : Tag such as "extract-min", "relax", "done".
        description     : Human-readable account of the action.
        node_states     : {node_id: NodeState} for every node.
        edge_states     : {edge_id: EdgeState} for every edge.
        distances       : {node_id: float} best-known distances (inf = unreached).
        predecessors    : {node_id: node_id | None}.
        frontier        : Node ids currently "active", in display order.
        pseudocode_line : Index into the algorithm's PSEUDOCODE listing.
        info            : Kind-specific StepInfo variant.
    """

    step_number:     int
    kind:            str
    description:     str
    node_states:     Dict[str, NodeState]     = field(default_factory=dict)
    edge_states:     Dict[str, EdgeState]     = field(default_factory=dict)
    distances:       Dict[str, float]         = field(default_factory=dict)
    predecessors:    Dict[str, Optional[str]] = field(default_factory=dict)
    frontier:        Tuple[str, ...]          = ()
    pseudocode_line: int                      = 0
    info:            StepInfo                 = field(default_factory=lambda: StepInfo(0, 0))

    @property
    def is_final(self) -> bool:
        return self.kind == "done"

    @property
    def comparisons(self) -> int:
        return self.info.comparisons

    @property
    def relaxations(self) -> int:
        return self.info.relaxations

    def to_dict(self) -> Dict[str, Any]:
        return {
            "step_number":     self.step_number,
            "kind":            self.kind,
            "description":     self.description,
            "node_states":     {k: v.value for k, v in self.node_states.items()},
            "edge_states":     {k: v.value for k, v in self.edge_states.items()},
            "distances":       {k: _jsonable(v) for k, v in self.distances.items()},
            "predecessors":    dict(self.predecessors),
            "frontier":        list(self.frontier),
            "pseudocode_line": self.pseudocode_line,
            "info":            self.info.to_dict(),
            "is_final":        self.is_final,
        }


# ---------------------------------------------------------------------------
# Live trace state — the scratch-pad each algorithm instance owns
# ---------------------------------------------------------------------------
class TraceState:
    """
    Mutable state of one run.  Algorithms write here, then call
    `build()` to publish an independent Step.

    Usage inside an algorithm:
        trace = TraceState(graph, "A")
        trace.improve("B", "A", edge, 4.0)
        trace.edge_states[edge.id] = EdgeState.RELAXED
        return trace.build("relax", "dist[B] = 4", frontier, 11, info)
    """

    def __init__(self, graph: Graph, source: str):
        self.graph  = graph
        self.source = source

        self.node_states:  Dict[str, NodeState]     = {nid: NodeState.UNVISITED for nid in graph.nodes}
        self.edge_states:  Dict[str, EdgeState]     = {eid: EdgeState.DEFAULT for eid in graph.edges}
        self.distances:    Dict[str, float]         = {nid: INF for nid in graph.nodes}
        self.predecessors: Dict[str, Optional[str]] = {nid: None for nid in graph.nodes}
        # the exact edge behind each predecessor link (parallel edges exist)
        self.pred_edges:   Dict[str, str]           = {}
        self.distances[source] = 0.0

        self.comparisons: int = 0
        self.relaxations: int = 0
        self._step_no:    int = 0

    # -- helpers --
    def improve(self, node_id: str, via: str, edge_id: str, distance: float) -> None:
        """Record a successful relaxation into node_id."""
        self.distances[node_id]    = distance
        self.predecessors[node_id] = via
        self.pred_edges[node_id]   = edge_id
        self.relaxations += 1

    def counters(self) -> Dict[str, int]:
        return {"comparisons": self.comparisons, "relaxations": self.relaxations}

    def complete_all(self) -> None:
        """Anything still open at termination is finished (unreachable nodes included)."""
        for nid, state in self.node_states.items():
            if state is not NodeState.COMPLETE:
                self.node_states[nid] = NodeState.COMPLETE

    def mark_shortest_path_edges(self) -> None:
        for nid, pred in self.predecessors.items():
            if pred is not None and nid in self.pred_edges:
                self.edge_states[self.pred_edges[nid]] = EdgeState.SHORTEST_PATH

    def build(
        self,
        kind: str,
        description: str,
        frontier,
        pseudocode_line: int,
        info: StepInfo,
    ) -> Step:
        step = Step(
            step_number=self._step_no,
            kind=kind,
            description=description,
            node_states=dict(self.node_states),
            edge_states=dict(self.edge_states),
            distances=dict(self.distances),
            predecessors=dict(self.predecessors),
            frontier=tuple(frontier),
            pseudocode_line=pseudocode_line,
            info=info,
        )
        self._step_no += 1
        return step


# ---------------------------------------------------------------------------
def fmt_distance(value: float) -> str:
    """Render a distance for step descriptions: ∞ for unreached, no trailing .0."""
    if math.isinf(value):
        return "∞"
    if float(value).is_integer():
        return str(int(value))
    return f"{value:g}"


def _jsonable(value: Any) -> Any:
    if isinstance(value, float) and math.isinf(value):
        return None
    if isinstance(value, tuple):
        return [_jsonable(v) for v in value]
    return value
