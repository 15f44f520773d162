"""
engine/
-------
Playback & recording layer.

    from engine import Stepper, Recorder, compare
"""

from engine.stepper  import Stepper, StepperState, SPEED_PRESETS, DEFAULT_INTERVAL
from engine.recorder import Recorder, RunMetrics, ComparisonResult, compare

__all__ = [
    "Stepper",
    "StepperState",
    "SPEED_PRESETS",
    "DEFAULT_INTERVAL",
    "Recorder",
    "RunMetrics",
    "ComparisonResult",
    "compare",
]
