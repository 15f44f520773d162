"""
classic.py — Classic Priority-Queue Relaxation (Dijkstra)
==========================================================
Dijkstra's algorithm over an indexed min-heap, traced one action at a
time.

Emits a Step at:
  1. init           – distances initialised, every vertex queued
  2. extract-min    – closest queued vertex becomes CURRENT
  3. examine-edge   – arc to a still-queued neighbour, edge RELAXING
  4. relax          – candidate was shorter: distance, predecessor and
                      heap key updated, edge RELAXED, neighbour FRONTIER
     no-relax       – candidate was not shorter: edge back to DEFAULT
  5. complete-node  – every arc handled, vertex COMPLETE
  6. done           – queue exhausted (or only ∞ left), shortest-path
                      edges marked

Unreachable vertices keep dist = ∞ and are marked COMPLETE at the end.
If the source has no outgoing edges the run is just init → done.

Correctness note: requires non-negative weights, which Graph enforces.
"""

import math
from typing import List, Optional, Tuple

from graph import Graph, Edge, NodeState, EdgeState
from algorithms.step import Step, RunInfo, NodeInfo, EdgeInfo, DoneInfo, StepInfo, fmt_distance
from algorithms.sequence import StepSequence
from algorithms.priority_queue import IndexedMinHeap


# ---------------------------------------------------------------------------
# Pseudocode
# ---------------------------------------------------------------------------
PSEUDOCODE: List[str] = [
    "def classic_shortest_path(G, source):",      # 0
    "    for each vertex v in G:",                 # 1
    "        dist[v] ← ∞;  prev[v] ← None",        # 2
    "    dist[source] ← 0",                        # 3
    "    Q ← priority queue of all vertices",      # 4
    "    while Q is not empty:",                   # 5
    "        u ← Q.extract_min()",                 # 6
    "        if dist[u] = ∞: break",               # 7
    "        for each neighbour v of u in Q:",     # 8
    "            alt ← dist[u] + w(u, v)",         # 9
    "            if alt < dist[v]:",               # 10
    "                dist[v] ← alt;  prev[v] ← u", # 11
    "                Q.decrease_key(v, alt)",      # 12
    "        mark u complete",                     # 13
    "    return dist, prev",                       # 14
]

LINE_INIT, LINE_EXTRACT, LINE_EXAMINE = 4, 6, 9
LINE_NO_RELAX, LINE_RELAX, LINE_COMPLETE, LINE_DONE = 10, 11, 13, 14


# ---------------------------------------------------------------------------
# State machine
# ---------------------------------------------------------------------------
class ClassicTrace(StepSequence):
    """
    Attributes (loop variables of the textbook version):
        queue     : IndexedMinHeap of not-yet-extracted vertices.
        current   : Vertex being expanded, or None between extractions.
        _arcs     : Adjacency list of `current`.
        _arc_idx  : Cursor into `_arcs`.
        _examined : (neighbour, edge, candidate) awaiting its relax decision.
    """

    key        = "classic"
    pseudocode = PSEUDOCODE
    done_line  = LINE_DONE

    def __init__(self, graph: Graph, source_id: str):
        super().__init__(graph, source_id)
        self.queue = IndexedMinHeap()
        for nid in graph.nodes:
            self.queue.insert(nid, self.trace.distances[nid])
        self.trace.node_states[source_id] = NodeState.FRONTIER

        self.current:   Optional[str]                         = None
        self._arcs:     List[Tuple[str, Edge]]                = []
        self._arc_idx:  int                                   = 0
        self._examined: Optional[Tuple[str, Edge, float]]     = None

    def _frontier(self) -> List[str]:
        return [e.node_id for e in self.queue.snapshot_ordered() if not math.isinf(e.distance)]

    # ------------------------------------------------------------------
    # Actions
    # ------------------------------------------------------------------
    def _init(self) -> Step:
        self._next = self._extract if self.graph.out_degree(self.source) else self._done
        return self.trace.build(
            "init",
            f"Initialise: dist[{self.source}] = 0, every other distance = ∞. "
            f"All {len(self.queue)} vertices go into the priority queue.",
            self._frontier(),
            LINE_INIT,
            RunInfo(**self.trace.counters()),
        )

    def _extract(self) -> Optional[Step]:
        entry = self.queue.extract_min()
        if entry is None or math.isinf(entry.distance):
            # everything left is unreachable
            self._next = self._done
            return None

        u = entry.node_id
        self.current  = u
        self._arcs    = self.graph.neighbours(u)
        self._arc_idx = 0
        self.trace.node_states[u] = NodeState.CURRENT
        self._next = self._next_edge
        return self.trace.build(
            "extract-min",
            f"Extract minimum: u = {u} with dist[{u}] = {fmt_distance(entry.distance)}.",
            self._frontier(),
            LINE_EXTRACT,
            NodeInfo(current_node=u, **self.trace.counters()),
        )

    def _next_edge(self) -> Step:
        u = self.current
        trace = self.trace
        while self._arc_idx < len(self._arcs):
            v, edge = self._arcs[self._arc_idx]
            self._arc_idx += 1
            if v not in self.queue:
                continue                    # already complete

            du  = trace.distances[u]
            alt = du + edge.weight
            trace.comparisons += 1
            trace.edge_states[edge.id] = EdgeState.RELAXING
            self._examined = (v, edge, alt)
            self._next = self._decide
            return trace.build(
                "examine-edge",
                f"Examine edge ({u}, {v}): alt = dist[{u}] + w = "
                f"{fmt_distance(du)} + {fmt_distance(edge.weight)} = {fmt_distance(alt)}.",
                self._frontier(),
                LINE_EXAMINE,
                EdgeInfo(current_node=u, relaxing_edge=edge.id, neighbour=v, candidate=alt,
                         **trace.counters()),
            )

        trace.node_states[u] = NodeState.COMPLETE
        self.current = None
        self._next = self._extract
        return trace.build(
            "complete-node",
            f"Node {u} complete with final distance {fmt_distance(trace.distances[u])}.",
            self._frontier(),
            LINE_COMPLETE,
            NodeInfo(current_node=u, **trace.counters()),
        )

    def _decide(self) -> Step:
        u = self.current
        v, edge, alt = self._examined
        self._examined = None
        trace = self.trace
        old = trace.distances[v]

        if alt < old:
            trace.improve(v, u, edge.id, alt)
            self.queue.decrease_key(v, alt)
            trace.edge_states[edge.id] = EdgeState.RELAXED
            trace.node_states[v] = NodeState.FRONTIER
            kind, line = "relax", LINE_RELAX
            description = (
                f"Relaxed: dist[{v}] = {fmt_distance(alt)} "
                f"(was {fmt_distance(old)}), prev[{v}] = {u}."
            )
        else:
            trace.edge_states[edge.id] = EdgeState.DEFAULT
            kind, line = "no-relax", LINE_NO_RELAX
            description = f"No improvement: alt = {fmt_distance(alt)} ≥ dist[{v}] = {fmt_distance(old)}."

        self._next = self._next_edge
        return trace.build(
            kind,
            description,
            self._frontier(),
            line,
            EdgeInfo(current_node=u, relaxing_edge=edge.id, neighbour=v, candidate=alt,
                     **trace.counters()),
        )

    # ------------------------------------------------------------------
    # Terminal step
    # ------------------------------------------------------------------
    def _done_description(self) -> str:
        return (
            f"Finished: {self.trace.comparisons} comparisons, "
            f"{self.trace.relaxations} relaxations."
        )

    def _done_info(self) -> StepInfo:
        return DoneInfo(**self.trace.counters())


# ---------------------------------------------------------------------------
# Entry point
# ---------------------------------------------------------------------------
def classic_shortest_path(graph: Graph, source_id: str) -> ClassicTrace:
    """Lazy step sequence for Dijkstra from source_id.  Raises InvalidSourceError / GraphError."""
    return ClassicTrace(graph, source_id)
