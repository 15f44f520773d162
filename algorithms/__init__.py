"""
algorithms/__init__.py — Algorithm Registry
=============================================
Single source of truth for every traced algorithm the engine knows about.

    from algorithms import REGISTRY, get_algorithm

REGISTRY is a dict:
    {
        "classic": AlgoInfo(key, label, fn, pseudocode, tags, …),
        "pivot":   AlgoInfo(…),
    }

AlgoInfo is a lightweight dataclass.  The runner, the recorder and the
HTTP layer all consume it, so adding an algorithm is: write the
StepSequence subclass, add one entry here.
"""

from dataclasses import dataclass, field
from typing import Callable, Dict, List, Optional

from graph import Graph, UnknownAlgorithmError
from algorithms.step import Step
from algorithms.sequence import StepSequence
from algorithms.classic import classic_shortest_path, PSEUDOCODE as _classic_pc
from algorithms.pivot import pivot_reduced_shortest_path, pivot_parameter, PSEUDOCODE as _pivot_pc


# ---------------------------------------------------------------------------
# AlgoInfo — metadata card for each algorithm
# ---------------------------------------------------------------------------
@dataclass
class AlgoInfo:
    key:              str                                          # registry key, e.g. "classic"
    label:            str                                          # human label
    fn:               Callable[[Graph, str], StepSequence]         # entry point
    pseudocode:       List[str]                                    # lines for the side-panel
    tags:             List[str] = field(default_factory=list)
    complexity_time:  str       = ""
    complexity_space: str       = ""
    description:      str       = ""

    def to_dict(self) -> dict:
        return {
            "key":              self.key,
            "label":            self.label,
            "pseudocode":       list(self.pseudocode),
            "tags":             list(self.tags),
            "complexity_time":  self.complexity_time,
            "complexity_space": self.complexity_space,
            "description":      self.description,
        }


# ---------------------------------------------------------------------------
# THE REGISTRY
# ---------------------------------------------------------------------------
REGISTRY: Dict[str, AlgoInfo] = {

    "classic": AlgoInfo(
        key="classic", label="Dijkstra (priority queue)",
        fn=classic_shortest_path, pseudocode=_classic_pc,
        tags=["weighted", "shortest-path", "priority-queue"],
        complexity_time="O((V + E) log V)", complexity_space="O(V)",
        description="Repeatedly finalises the closest queued vertex. Optimal for non-negative weights.",
    ),

    "pivot": AlgoInfo(
        key="pivot", label="Pivot reduction (simplified BMSSP)",
        fn=pivot_reduced_shortest_path, pseudocode=_pivot_pc,
        tags=["weighted", "shortest-path", "frontier-reduction"],
        complexity_time="O(m log^(2/3) n) for the full recursive algorithm",
        complexity_space="O(V)",
        description="k bounded relaxation waves pick a few pivots to stand in for the frontier, "
                    "then a completion pass finishes the rest.",
    ),
}


# ---------------------------------------------------------------------------
# Lookup helpers
# ---------------------------------------------------------------------------
def get_algorithm(key: str) -> Optional[AlgoInfo]:
    """Return AlgoInfo by key, or None."""
    return REGISTRY.get(key)


def require_algorithm(key: str) -> AlgoInfo:
    """Return AlgoInfo by key, raising UnknownAlgorithmError if missing."""
    info = REGISTRY.get(key) if isinstance(key, str) else None
    if info is None:
        raise UnknownAlgorithmError(f"Unknown algorithm: {key}")
    return info


def list_algorithms() -> List[AlgoInfo]:
    """Return all registered algorithms in insertion order."""
    return list(REGISTRY.values())


def algorithms_by_tag(tag: str) -> List[AlgoInfo]:
    """Filter registry by tag."""
    return [a for a in REGISTRY.values() if tag in a.tags]


__all__ = [
    "AlgoInfo",
    "REGISTRY",
    "Step",
    "StepSequence",
    "classic_shortest_path",
    "pivot_reduced_shortest_path",
    "pivot_parameter",
    "get_algorithm",
    "require_algorithm",
    "list_algorithms",
    "algorithms_by_tag",
]
