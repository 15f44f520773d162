"""
pivot.py — Pivot-Reduction Wave Algorithm (single-level BMSSP)
===============================================================
A teaching version of the "breaking the sorting barrier" shortest-path
algorithm.  It keeps the idea that makes the real algorithm fast, the
FindPivots frontier reduction, and replaces the recursive
divide-and-conquer with one plain completion phase.  It does NOT
achieve the paper's complexity bound; the trace is the point.

    k = max(2, ⌈log2(n + 1) ** (1/3)⌉)

Phase A — bounded waves (Bellman-Ford style, not priority ordered):
  Up to k rounds.  Every node of the current wave relaxes all of its
  arcs; neighbours that improve and were never visited form the next
  wave.  When v is first visited via p, every ancestor on the
  predecessor chain gets its subtree counter bumped and
  subtree_size[v] = 1.
      relax-step     – the wave about to relax
      wave-complete  – the round reached new nodes

Phase B — pivots: visited nodes with subtree_size ≥ k, plus the source.
      pivots-identified
      frontier-reduction  – |visited| nodes represented by |pivots| pivots

Phase C — completion:
  Visited nodes are marked COMPLETE.  Arcs leaving them seed a pending
  list kept sorted by distance, one entry per node.  The smallest entry
  is popped, shown, and relaxes its arcs.  A Phase-A node whose
  distance still improves is re-opened and queued like any other, so
  the final distances are exact.
      process-remaining

Then `done`.  Nodes never reached stay at ∞ and end COMPLETE.
"""

import math
from typing import Dict, List, Optional, Set

from graph import Graph, NodeState, EdgeState
from algorithms.step import (
    Step, RunInfo, NodeInfo, WaveInfo, PivotInfo, DoneInfo, StepInfo, fmt_distance,
)
from algorithms.sequence import StepSequence
from algorithms.priority_queue import QueueEntry


# ---------------------------------------------------------------------------
# Pseudocode
# ---------------------------------------------------------------------------
PSEUDOCODE: List[str] = [
    "def pivot_reduced_shortest_path(G, source):",    # 0
    "    k ← max(2, ⌈log2(n + 1)^(1/3)⌉)",            # 1
    "    dist[source] ← 0;  W ← {source}",            # 2
    "    // FindPivots: k bounded relaxation waves",  # 3
    "    for i ← 1 to k:",                             # 4
    "        relax every edge leaving W_{i-1}",        # 5
    "        W_i ← newly reached vertices",            # 6
    "        W ← W ∪ W_i;  grow subtree counters",     # 7
    "        if W_i = ∅: break",                       # 8
    "    P ← {u ∈ W : subtree(u) ≥ k} ∪ {source}",     # 9
    "    // frontier reduction: |W| vertices → |P|",   # 10
    "    mark W complete;  D ← edges leaving W",       # 11
    "    while D is not empty:",                       # 12
    "        u ← D.pop_min()",                         # 13
    "        relax every edge (u, v), update D",       # 14
    "        mark u complete",                         # 15
    "    return dist, prev",                           # 16
]

LINE_INIT, LINE_FIND_PIVOTS, LINE_RELAX_STEP, LINE_WAVE = 2, 3, 5, 6
LINE_PIVOTS, LINE_REDUCTION, LINE_PROCESS, LINE_DONE = 9, 10, 13, 16


def pivot_parameter(n: int) -> int:
    """k: wave depth and pivot-admission threshold for an n-node graph."""
    return max(2, math.ceil(math.log2(n + 1) ** (1 / 3)))


# ---------------------------------------------------------------------------
# State machine
# ---------------------------------------------------------------------------
class PivotReductionTrace(StepSequence):
    """
    Attributes:
        k             : Wave depth / pivot threshold.
        round         : Number of Phase-A rounds started so far.
        wave          : Node ids of the current wave.
        visited       : Node ids reached in Phase A, in discovery order.
        subtree_size  : {node_id: counter} for visited nodes.
        pivots        : Node ids chosen in Phase B.
        pending       : Phase-C pending list, sorted by distance.
        current       : Node being processed in Phase C.
    """

    key        = "pivot"
    pseudocode = PSEUDOCODE
    done_line  = LINE_DONE

    def __init__(self, graph: Graph, source_id: str):
        super().__init__(graph, source_id)
        self.k = pivot_parameter(graph.node_count())

        self.round:        int              = 0
        self.wave:         List[str]        = [source_id]
        self.visited:      List[str]        = [source_id]
        self._visited_set: Set[str]         = {source_id}
        self.subtree_size: Dict[str, int]   = {source_id: 1}
        self.pivots:       List[str]        = []
        self.pending:      List[QueueEntry] = []
        self._settled:     Set[str]         = set()
        self.current:      Optional[str]    = None

        self.trace.node_states[source_id] = NodeState.FRONTIER

    # ------------------------------------------------------------------
    # Phase A — bounded waves
    # ------------------------------------------------------------------
    def _init(self) -> Step:
        self._next = self._find_pivots_start if self.graph.out_degree(self.source) else self._done
        return self.trace.build(
            "init",
            f"Initialise: source = {self.source}, k = {self.k} relaxation waves.",
            [self.source],
            LINE_INIT,
            RunInfo(k=self.k, **self.trace.counters()),
        )

    def _find_pivots_start(self) -> Step:
        self._next = self._wave_start
        return self.trace.build(
            "find-pivots-start",
            f"FindPivots: run up to {self.k} bounded relaxation waves from the frontier.",
            [self.source],
            LINE_FIND_PIVOTS,
            RunInfo(k=self.k, **self.trace.counters()),
        )

    def _wave_start(self) -> Step:
        self.round += 1
        self._next = self._wave_relax
        return self.trace.build(
            "relax-step",
            f"Wave {self.round}/{self.k}: relaxing from {len(self.wave)} node(s).",
            self.wave,
            LINE_RELAX_STEP,
            WaveInfo(round=self.round, frontier_set=tuple(self.wave), **self.trace.counters()),
        )

    def _wave_relax(self) -> Optional[Step]:
        trace = self.trace
        next_wave: List[str] = []
        for u in self.wave:
            for v, edge in self.graph.neighbours(u):
                alt = trace.distances[u] + edge.weight
                trace.comparisons += 1
                if alt < trace.distances[v]:
                    trace.improve(v, u, edge.id, alt)
                    trace.edge_states[edge.id] = EdgeState.RELAXED
                    trace.node_states[v] = NodeState.FRONTIER
                    if v not in self._visited_set:
                        self._visited_set.add(v)
                        self.visited.append(v)
                        next_wave.append(v)
                        self._grow_subtrees(v)

        self.wave = next_wave
        if next_wave and self.round < self.k:
            self._next = self._wave_start
        else:
            self._next = self._identify_pivots

        if not next_wave:
            return None
        return trace.build(
            "wave-complete",
            f"Wave {self.round} complete: {len(next_wave)} new node(s) reached.",
            next_wave,
            LINE_WAVE,
            WaveInfo(round=self.round, frontier_set=tuple(next_wave), **trace.counters()),
        )

    def _grow_subtrees(self, v: str) -> None:
        preds = self.trace.predecessors
        cur = v
        while cur != self.source and preds[cur] is not None:
            parent = preds[cur]
            self.subtree_size[parent] = self.subtree_size.get(parent, 0) + 1
            cur = parent
        self.subtree_size[v] = 1

    # ------------------------------------------------------------------
    # Phase B — pivots
    # ------------------------------------------------------------------
    def _pivot_info(self) -> PivotInfo:
        return PivotInfo(
            k=self.k,
            pivots=tuple(self.pivots),
            frontier_set=tuple(self.visited),
            subtree_sizes=tuple((nid, self.subtree_size.get(nid, 0)) for nid in self.visited),
            **self.trace.counters(),
        )

    def _identify_pivots(self) -> Step:
        self.pivots = [
            nid for nid in self.visited
            if nid == self.source or self.subtree_size.get(nid, 0) >= self.k
        ]
        for nid in self.pivots:
            self.trace.node_states[nid] = NodeState.PIVOT

        self._next = self._reduce_frontier
        return self.trace.build(
            "pivots-identified",
            f"Pivots identified: {len(self.pivots)} node(s) with subtree ≥ {self.k} "
            f"({', '.join(self.pivots)}).",
            self.pivots,
            LINE_PIVOTS,
            self._pivot_info(),
        )

    def _reduce_frontier(self) -> Step:
        pivot_set = set(self.pivots)
        for nid in self.visited:
            if nid not in pivot_set:
                self.trace.node_states[nid] = NodeState.IN_FRONTIER_SET

        factor = len(self.visited) / len(self.pivots)
        self._next = self._seed_remaining
        return self.trace.build(
            "frontier-reduction",
            f"Frontier reduction: {len(self.visited)} visited node(s) represented by "
            f"{len(self.pivots)} pivot(s) (factor ≈ {factor:.1f}).",
            self.pivots,
            LINE_REDUCTION,
            self._pivot_info(),
        )

    # ------------------------------------------------------------------
    # Phase C — completion
    # ------------------------------------------------------------------
    def _seed_remaining(self) -> None:
        trace = self.trace
        for nid in self.visited:
            trace.node_states[nid] = NodeState.COMPLETE
        self._settled.add(self.source)

        for u in self.visited:
            self._relax_arcs(u)

        self._next = self._process_next
        return None

    def _process_next(self) -> Optional[Step]:
        if not self.pending:
            self._next = self._done
            return None

        entry = self.pending.pop(0)
        u = entry.node_id
        self.current = u
        self.trace.node_states[u] = NodeState.CURRENT
        self._next = self._process_relax
        return self.trace.build(
            "process-remaining",
            f"Process remaining node {u} with dist = {fmt_distance(entry.distance)}.",
            [e.node_id for e in self.pending],
            LINE_PROCESS,
            NodeInfo(current_node=u, **self.trace.counters()),
        )

    def _process_relax(self) -> None:
        u = self.current
        self._settled.add(u)
        self._relax_arcs(u)
        self.trace.node_states[u] = NodeState.COMPLETE
        self.current = None
        self._next = self._process_next
        return None

    def _relax_arcs(self, u: str) -> None:
        trace = self.trace
        for v, edge in self.graph.neighbours(u):
            if v in self._settled:
                continue
            alt = trace.distances[u] + edge.weight
            trace.comparisons += 1
            if alt < trace.distances[v]:
                trace.improve(v, u, edge.id, alt)
                trace.edge_states[edge.id] = EdgeState.RELAXED
                trace.node_states[v] = NodeState.FRONTIER
                self._push_pending(v, alt)

    def _push_pending(self, node_id: str, distance: float) -> None:
        self.pending = [e for e in self.pending if e.node_id != node_id]
        self.pending.append(QueueEntry(node_id, distance))
        self.pending.sort(key=lambda e: e.distance)

    # ------------------------------------------------------------------
    # Terminal step
    # ------------------------------------------------------------------
    def _done_description(self) -> str:
        return (
            f"Finished: {self.trace.comparisons} comparisons, "
            f"{self.trace.relaxations} relaxations, {len(self.pivots)} pivot(s) used."
        )

    def _done_info(self) -> StepInfo:
        return DoneInfo(pivots=tuple(self.pivots), **self.trace.counters())


# ---------------------------------------------------------------------------
# Entry point
# ---------------------------------------------------------------------------
def pivot_reduced_shortest_path(graph: Graph, source_id: str) -> PivotReductionTrace:
    """Lazy step sequence for the pivot-reduction algorithm.  Raises InvalidSourceError / GraphError."""
    return PivotReductionTrace(graph, source_id)
