"""
sequence.py — Resumable Step Sequence
======================================
Base class for the traced algorithms.  Each algorithm is an explicit
state machine: every loop variable (queue, wave, cursor into the
current adjacency list, …) is a field on the instance, and `advance()`
performs exactly ONE logical action and returns the Step it produced.

    seq = classic_shortest_path(graph, "A")
    while (step := seq.advance()) is not None:
        render(step)

The sequence is also a plain Python iterator, so `list(seq)` and
`next(seq)` work.  It is finite and cannot be rewound; build a new one
to start over.

State machine:
    `_next` holds the handler for the next action.  A handler either
    returns a Step (a suspension point) or returns None after moving
    `_next` on (an internal transition that produces nothing to show).
    The terminal handler sets `_next = None`.

Preconditions (graph validity, source existence) are checked in the
constructor, so a bad call fails before any Step exists.
"""

import logging
from typing import Callable, List, Optional

from graph import Graph, InvalidSourceError
from algorithms.step import Step, TraceState, StepInfo

logger = logging.getLogger(__name__)


class StepSequence:
    """
    Attributes:
        graph   : The (read-only) input graph.
        source  : Source node id.
        trace   : Live TraceState owned by this run.
    """

    key:        str       = ""
    pseudocode: List[str] = []
    done_line:  int       = 0

    def __init__(self, graph: Graph, source_id: str):
        graph.validate()
        if not graph.has_node(source_id):
            raise InvalidSourceError(f"Unknown source node '{source_id}'")

        self.graph  = graph
        self.source = source_id
        self.trace  = TraceState(graph, source_id)
        self._next: Optional[Callable[[], Optional[Step]]] = self._init

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------
    def advance(self) -> Optional[Step]:
        """Run the next action and return its Step, or None once exhausted."""
        step = None
        while step is None and self._next is not None:
            step = self._next()
        if step is not None:
            logger.debug("%s step %d: %s", self.key, step.step_number, step.kind)
        return step

    @property
    def done(self) -> bool:
        return self._next is None

    @property
    def phase(self) -> str:
        """Name of the pending action, 'exhausted' once the run is over."""
        return self._next.__name__.lstrip("_") if self._next is not None else "exhausted"

    def __iter__(self) -> "StepSequence":
        return self

    def __next__(self) -> Step:
        step = self.advance()
        if step is None:
            raise StopIteration
        return step

    # ------------------------------------------------------------------
    # Hooks for subclasses
    # ------------------------------------------------------------------
    def _init(self) -> Optional[Step]:
        raise NotImplementedError

    def _done_description(self) -> str:
        raise NotImplementedError

    def _done_info(self) -> StepInfo:
        raise NotImplementedError

    # ------------------------------------------------------------------
    # Shared terminal action
    # ------------------------------------------------------------------
    def _done(self) -> Step:
        self.trace.complete_all()
        self.trace.mark_shortest_path_edges()
        self._next = None
        return self.trace.build(
            "done",
            self._done_description(),
            (),
            self.done_line,
            self._done_info(),
        )
