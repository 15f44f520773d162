"""
stepper.py — Step-by-Step Playback Engine
==========================================
The Stepper is the ONLY object a front-end talks to during a run.
It owns the lazy StepSequence, caches every Step it has pulled
(enabling rewind and random access), and exposes a
play/pause/next/prev/speed API.

State machine:
    IDLE     →  initialize()      →  PAUSED
    PAUSED   →  play()            →  PLAYING
    PLAYING  →  pause()           →  PAUSED
    PLAYING  →  (sequence ends)   →  FINISHED
    any      →  reset()           →  PAUSED   (fresh sequence, same inputs)

Pulling is lazy: step_forward() only resumes the algorithm when the
cursor is already on the newest cached step.  Rewinding and go_to()
never re-run anything.

Thread safety:
  This class is NOT thread-safe.  Drive tick() from a single event loop
  or hold a lock around every call, as the Flask layer does per runner.
  Each tick resumes the algorithm at most once.
"""

import logging
import time
from enum import Enum
from typing import Callable, List, Optional

from graph import Graph
from algorithms import AlgoInfo, Step, StepSequence, require_algorithm

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# States
# ---------------------------------------------------------------------------
class StepperState(Enum):
    IDLE     = "idle"
    PAUSED   = "paused"
    PLAYING  = "playing"
    FINISHED = "finished"


# ---------------------------------------------------------------------------
# Speed presets (seconds per step)
# ---------------------------------------------------------------------------
SPEED_PRESETS = {
    "slow":   1.0,    # teaching mode
    "medium": 0.5,
    "fast":   0.15,   # demo mode
    "turbo":  0.05,
}
DEFAULT_INTERVAL = SPEED_PRESETS["medium"]
MIN_INTERVAL     = 0.02


# ---------------------------------------------------------------------------
# Stepper
# ---------------------------------------------------------------------------
class Stepper:
    """
    Attributes:
        state       : Current StepperState.
        steps       : Every Step pulled so far (the cache).
        current_idx : Index into `steps` that is currently displayed.
        interval    : Seconds between auto-advance ticks.
        on_step     : Optional callback(Step) fired whenever the current step changes.
        clock       : Monotonic time source (injectable for tests).
    """

    def __init__(
        self,
        on_step: Optional[Callable[[Step], None]] = None,
        clock: Callable[[], float] = time.monotonic,
    ):
        self._sequence:   Optional[StepSequence] = None
        self._exhausted:  bool           = False
        self.algo_info:   Optional[AlgoInfo] = None
        self.graph:       Optional[Graph] = None
        self.source:      Optional[str]  = None

        self.steps:       List[Step]     = []
        self.current_idx: int            = -1
        self.state:       StepperState   = StepperState.IDLE
        self.interval:    float          = DEFAULT_INTERVAL
        self.on_step:     Optional[Callable[[Step], None]] = on_step
        self.clock:       Callable[[], float] = clock

        self._last_tick:  float = 0.0

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------
    def initialize(self, graph: Graph, source_id: str, algorithm: str) -> Step:
        """
        Bind a fresh sequence for (graph, source_id, algorithm) and load
        its first step.  Precondition failures propagate before anything
        is cached.
        """
        info = require_algorithm(algorithm)
        sequence = info.fn(graph, source_id)

        self.algo_info = info
        self.graph     = graph
        self.source    = source_id
        logger.info("initialising %s run from '%s' on %r", info.key, source_id, graph)
        return self.start(sequence)

    def start(self, sequence: StepSequence) -> Step:
        """Attach an already-built sequence and load its first step."""
        self._sequence   = sequence
        self._exhausted  = False
        self.steps       = []
        self.current_idx = -1
        self.state       = StepperState.PAUSED
        # eagerly fetch step 0 so the UI can show the initial state
        self._fetch_next()
        self._goto(0)
        return self.steps[0]

    def reset(self) -> Optional[Step]:
        """Discard the cache and re-initialise with the same inputs."""
        if self.algo_info is None or self.graph is None or self.source is None:
            self._sequence   = None
            self.steps       = []
            self.current_idx = -1
            self.state       = StepperState.IDLE
            return None
        return self.initialize(self.graph, self.source, self.algo_info.key)

    # ------------------------------------------------------------------
    # Navigation
    # ------------------------------------------------------------------
    def step_forward(self) -> bool:
        """Advance one step, pulling from the sequence only if the cache is used up."""
        target = self.current_idx + 1
        if target >= len(self.steps):
            if not self._fetch_next():
                self.state = StepperState.FINISHED
                return False
        self._goto(target)
        return True

    def step_backward(self) -> bool:
        """Rewind one cached step.  Returns False if already at the start."""
        if self.current_idx <= 0:
            return False
        if self.state == StepperState.FINISHED:
            self.state = StepperState.PAUSED
        self._goto(self.current_idx - 1)
        return True

    def go_to(self, idx: int) -> bool:
        """Jump to an already-cached step index."""
        if 0 <= idx < len(self.steps):
            if self.state == StepperState.FINISHED and idx < len(self.steps) - 1:
                self.state = StepperState.PAUSED
            self._goto(idx)
            return True
        return False

    def rewind(self) -> None:
        """Jump back to step 0."""
        self.go_to(0)

    def run_to_completion(self) -> Step:
        """Exhaust the sequence and jump to the final step."""
        while self._fetch_next():
            pass
        if self.steps:
            self._goto(len(self.steps) - 1)
        self.state = StepperState.FINISHED
        return self.steps[-1]

    # ------------------------------------------------------------------
    # Play / Pause
    # ------------------------------------------------------------------
    def play(self) -> None:
        if self.state in (StepperState.FINISHED, StepperState.IDLE):
            return
        self.state      = StepperState.PLAYING
        self._last_tick = self.clock()

    def pause(self) -> None:
        if self.state == StepperState.PLAYING:
            self.state = StepperState.PAUSED

    def toggle_play(self) -> None:
        if self.state == StepperState.PLAYING:
            self.pause()
        else:
            self.play()

    # ------------------------------------------------------------------
    # Tick  (call this from your event loop / timer)
    # ------------------------------------------------------------------
    def tick(self) -> bool:
        """
        Call periodically (e.g. every 50 ms).  If playing and `interval`
        has elapsed, advances one step.  Returns True if a step was taken.
        Playback stops by itself at the end of the sequence.
        """
        if self.state != StepperState.PLAYING:
            return False
        now = self.clock()
        if now - self._last_tick < self.interval:
            return False
        self._last_tick = now
        if not self.step_forward():
            return False
        if self.is_complete:
            self.state = StepperState.FINISHED
        return True

    # ------------------------------------------------------------------
    # Speed
    # ------------------------------------------------------------------
    def set_speed(self, preset: str) -> None:
        self.interval = SPEED_PRESETS.get(preset, DEFAULT_INTERVAL)

    def set_interval(self, seconds: float) -> None:
        self.interval = max(MIN_INTERVAL, seconds)

    # ------------------------------------------------------------------
    # Read-only accessors
    # ------------------------------------------------------------------
    @property
    def current_step(self) -> Optional[Step]:
        if 0 <= self.current_idx < len(self.steps):
            return self.steps[self.current_idx]
        return None

    @property
    def total_steps_fetched(self) -> int:
        return len(self.steps)

    @property
    def is_exhausted(self) -> bool:
        """True once the sequence has produced its terminal step."""
        return self._exhausted or bool(self.steps and self.steps[-1].is_final)

    @property
    def is_complete(self) -> bool:
        """Cursor sits on the terminal "done" step."""
        step = self.current_step
        return step is not None and step.is_final and self.current_idx == len(self.steps) - 1

    @property
    def is_playing(self) -> bool:
        return self.state == StepperState.PLAYING

    @property
    def is_finished(self) -> bool:
        return self.state == StepperState.FINISHED

    # ------------------------------------------------------------------
    # Internal
    # ------------------------------------------------------------------
    def _fetch_next(self) -> bool:
        """Pull one Step from the sequence into the cache."""
        if self._sequence is None or self._exhausted:
            return False
        step = self._sequence.advance()
        if step is None:
            self._exhausted = True
            return False
        self.steps.append(step)
        if step.is_final:
            self._exhausted = True
            logger.info("run finished after %d steps", len(self.steps))
        return True

    def _goto(self, idx: int) -> None:
        self.current_idx = idx
        self._notify(self.steps[idx] if 0 <= idx < len(self.steps) else None)

    def _notify(self, step: Optional[Step]) -> None:
        if self.on_step and step is not None:
            self.on_step(step)
