"""
errors.py — Exception Types
============================
Everything the engine raises derives from TraceError, so callers (the
Flask layer in particular) can catch one type and turn it into a 400.

All of these are raised BEFORE the first Step of a run is produced.
Once a run has started it always reaches its terminal "done" step.
"""


class TraceError(Exception):
    """Base class for all engine errors."""


class GraphError(TraceError, ValueError):
    """Malformed graph: duplicate ids, dangling endpoints, bad weights."""


class InvalidSourceError(TraceError, ValueError):
    """The requested source node does not exist in the graph."""


class UnknownAlgorithmError(TraceError, KeyError):
    """No algorithm is registered under the requested key."""

    def __str__(self) -> str:
        # KeyError quotes its argument; keep the message readable
        return str(self.args[0]) if self.args else ""


__all__ = [
    "TraceError",
    "GraphError",
    "InvalidSourceError",
    "UnknownAlgorithmError",
]
