"""
recorder.py — Run Recorder & Comparison
========================================
Records a complete algorithm run (all Steps), then computes the
metrics the comparison view needs.

Usage:
    rec = Recorder()
    rec.start(algo_key="classic", graph=g, source="A")
    metrics = rec.run_to_completion()   # exhausts the sequence
    rec.export()                        # JSON-safe dump for save/replay

Comparison:
    Run one Recorder per algorithm on the SAME graph and source, then
    compare(rec1, rec2) → ComparisonResult.
"""

import logging
import math
import time
from dataclasses import dataclass, field, asdict
from typing import Any, Dict, List, Optional

from graph import Graph
from algorithms import AlgoInfo, Step, require_algorithm
from engine.stepper import Stepper

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Metrics dataclass
# ---------------------------------------------------------------------------
@dataclass
class RunMetrics:
    algo_key:      str   = ""
    algo_label:    str   = ""
    source:        str   = ""
    comparisons:   int   = 0
    relaxations:   int   = 0
    total_steps:   int   = 0          # number of Steps produced
    reached_nodes: int   = 0          # nodes with a finite final distance
    pivot_count:   int   = 0          # pivot algorithm only
    wall_time_ms:  float = 0.0        # wall-clock time to run to completion

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


# ---------------------------------------------------------------------------
# ComparisonResult — side-by-side
# ---------------------------------------------------------------------------
@dataclass
class ComparisonResult:
    left:  RunMetrics = field(default_factory=RunMetrics)
    right: RunMetrics = field(default_factory=RunMetrics)
    # derived
    winner_comparisons: str  = ""   # label of the run with fewer comparisons, or "tie"
    winner_relaxations: str  = ""
    winner_steps:       str  = ""
    distances_agree:    bool = False
    disagreements:      List[str] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


# ---------------------------------------------------------------------------
# Recorder
# ---------------------------------------------------------------------------
class Recorder:
    """
    Attributes:
        steps   : Full list of Steps from the run.
        metrics : Computed RunMetrics (available after run_to_completion).
        stepper : The underlying Stepper.
    """

    def __init__(self):
        self.steps:   List[Step]           = []
        self.metrics: Optional[RunMetrics] = None
        self.stepper: Optional[Stepper]    = None

        self._algo_info: Optional[AlgoInfo] = None
        self._source:    str                = ""
        self._graph:     Optional[Graph]    = None

    # ------------------------------------------------------------------
    # Setup & run
    # ------------------------------------------------------------------
    def start(self, algo_key: str, graph: Graph, source: str) -> None:
        """Build the sequence and stepper for this run."""
        info = require_algorithm(algo_key)
        self._algo_info = info
        self._source    = source
        self._graph     = graph
        self.steps      = []
        self.metrics    = None

        self.stepper = Stepper()
        self.stepper.initialize(graph, source, algo_key)

    def run_to_completion(self) -> RunMetrics:
        """Exhaust the sequence, record every step, compute metrics."""
        if self.stepper is None:
            raise RuntimeError("Call start() first.")

        started = time.monotonic()
        self.stepper.run_to_completion()
        wall_ms = (time.monotonic() - started) * 1000
        self.steps = list(self.stepper.steps)

        self.metrics = self._compute_metrics(wall_ms)
        logger.info(
            "%s from '%s': %d steps, %d comparisons, %d relaxations",
            self.metrics.algo_key, self._source, self.metrics.total_steps,
            self.metrics.comparisons, self.metrics.relaxations,
        )
        return self.metrics

    def get_metrics(self) -> Optional[RunMetrics]:
        return self.metrics

    @property
    def final_step(self) -> Optional[Step]:
        return self.steps[-1] if self.steps else None

    # ------------------------------------------------------------------
    # Export (serialisable snapshot)
    # ------------------------------------------------------------------
    def export(self) -> Dict[str, Any]:
        return {
            "algo_key": self._algo_info.key if self._algo_info else "",
            "source":   self._source,
            "graph":    self._graph.to_dict() if self._graph else {},
            "metrics":  self.metrics.to_dict() if self.metrics else {},
            "steps":    [s.to_dict() for s in self.steps],
        }

    # ------------------------------------------------------------------
    # Internal
    # ------------------------------------------------------------------
    def _compute_metrics(self, wall_ms: float) -> RunMetrics:
        info = self._algo_info
        last = self.final_step

        pivots = getattr(last.info, "pivots", ()) if last else ()
        reached = sum(1 for d in last.distances.values() if not math.isinf(d)) if last else 0

        return RunMetrics(
            algo_key=info.key if info else "",
            algo_label=info.label if info else "",
            source=self._source,
            comparisons=last.comparisons if last else 0,
            relaxations=last.relaxations if last else 0,
            total_steps=len(self.steps),
            reached_nodes=reached,
            pivot_count=len(pivots),
            wall_time_ms=round(wall_ms, 2),
        )


# ---------------------------------------------------------------------------
# Comparison helper
# ---------------------------------------------------------------------------
def compare(left: Recorder, right: Recorder) -> ComparisonResult:
    """Given two completed Recorders, produce a ComparisonResult."""
    l = left.metrics  or RunMetrics()
    r = right.metrics or RunMetrics()

    def winner(l_val, r_val):
        if l_val == r_val:
            return "tie"
        return l.algo_label if l_val < r_val else r.algo_label

    disagreements: List[str] = []
    l_last, r_last = left.final_step, right.final_step
    if l_last is not None and r_last is not None:
        for nid, l_dist in l_last.distances.items():
            r_dist = r_last.distances.get(nid, math.inf)
            if not _same_distance(l_dist, r_dist):
                disagreements.append(nid)
    agree = l_last is not None and r_last is not None and not disagreements

    return ComparisonResult(
        left=l,
        right=r,
        winner_comparisons=winner(l.comparisons, r.comparisons),
        winner_relaxations=winner(l.relaxations, r.relaxations),
        winner_steps=winner(l.total_steps, r.total_steps),
        distances_agree=agree,
        disagreements=disagreements,
    )


def _same_distance(a: float, b: float) -> bool:
    if math.isinf(a) or math.isinf(b):
        return a == b
    return math.isclose(a, b, rel_tol=1e-9, abs_tol=1e-9)
