"""
main.py — Shortest-Path Trace Server
=====================================
JSON API that drives the step runner for a browser front-end.  Drawing
the graph is the front-end's job; this server only hands out Steps.

Routes:
  GET  /api/graphs             – bundled example graphs
  GET  /api/algorithms         – registry (labels, pseudocode, complexity)
  POST /api/run                – start a run  {example | graph, source, algorithm}
  POST /api/step/next          – advance one step (pulls lazily)
  POST /api/step/prev          – rewind one step
  POST /api/step/goto          – jump to a cached step  {index}
  POST /api/step/play          – toggle play/pause  {speed?}
  POST /api/step/tick          – playback heartbeat; advances when due
  POST /api/step/reset         – discard cache, restart the same run
  GET  /api/state              – current runner state
  POST /api/compare            – run both algorithms to completion, compare

State management:
  Runners are live objects (they hold a suspended algorithm), so they
  stay in process memory, keyed by a random token stored in the Flask
  session cookie.  The store is bounded by MAX_RUNNERS; the least
  recently used runner is evicted first.

Threading:
  The development server is threaded, so a tick poll and a "next" click
  can arrive together.  Every runner carries its own lock and each
  handler holds it while touching the Stepper.
"""

import logging
import os
import secrets
import threading
from collections import OrderedDict
from contextlib import contextmanager
from dataclasses import dataclass, field
from typing import Iterator, Optional, Tuple

from flask import Flask, abort, jsonify, request, session

from graph import Graph, GraphError, TraceError
from graph.samples import EXAMPLES
from algorithms import list_algorithms
from engine import Stepper, Recorder, compare, SPEED_PRESETS

logger = logging.getLogger(__name__)


app = Flask(__name__)
app.secret_key = os.environ.get("TRACE_SECRET_KEY") or secrets.token_hex(32)
app.config.setdefault("DEFAULT_EXAMPLE", "simple")
app.config.setdefault("DEFAULT_ALGORITHM", "classic")
app.config.setdefault("MAX_RUNNERS", int(os.environ.get("TRACE_MAX_RUNNERS", "256")))


# ---------------------------------------------------------------------------
# Runner store
# ---------------------------------------------------------------------------
@dataclass
class Runner:
    stepper: Stepper
    lock:    threading.Lock = field(default_factory=threading.Lock)


# run token → Runner, least recently used first
_RUNNERS: "OrderedDict[str, Runner]" = OrderedDict()
_RUNNERS_LOCK = threading.Lock()


def store_runner(stepper: Stepper) -> str:
    """Register a new runner, evicting the least recently used beyond MAX_RUNNERS."""
    token = secrets.token_hex(16)
    with _RUNNERS_LOCK:
        _RUNNERS[token] = Runner(stepper)
        while len(_RUNNERS) > max(1, app.config["MAX_RUNNERS"]):
            evicted, _ = _RUNNERS.popitem(last=False)
            logger.info("evicted idle runner %s", evicted[:8])
    return token


def drop_runner(token: str) -> None:
    with _RUNNERS_LOCK:
        _RUNNERS.pop(token, None)


def current_runner() -> Optional[Runner]:
    token = session.get("run_token")
    if not token:
        return None
    with _RUNNERS_LOCK:
        runner = _RUNNERS.get(token)
        if runner is not None:
            _RUNNERS.move_to_end(token)
        return runner


@contextmanager
def locked_stepper() -> Iterator[Optional[Stepper]]:
    """The session's Stepper, held exclusively for the duration of the block."""
    runner = current_runner()
    if runner is None:
        yield None
        return
    with runner.lock:
        yield runner.stepper


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------
def request_body() -> dict:
    """Parsed JSON body; missing or unparsable counts as empty, non-objects are rejected."""
    data = request.get_json(silent=True)
    if data is None:
        return {}
    if not isinstance(data, dict):
        abort(400, description="Request body must be a JSON object")
    return data


def resolve_graph(data: dict) -> Tuple[Graph, str]:
    """Graph + source from a request body: an inline graph or an example key."""
    if "graph" in data:
        if not isinstance(data["graph"], dict):
            raise GraphError("'graph' must be an object")
        g = Graph.from_dict(data["graph"])
        source = data.get("source")
        if source is None:
            ids = g.node_ids()
            source = ids[0] if ids else ""
        return g, str(source)

    key = data.get("example", app.config["DEFAULT_EXAMPLE"])
    if not isinstance(key, str) or key not in EXAMPLES:
        raise GraphError(f"Unknown example graph: {key}")
    _, build, default_source = EXAMPLES[key]
    return build(), str(data.get("source", default_source))


def runner_payload(stepper: Stepper) -> dict:
    step = stepper.current_step
    return {
        "algorithm":    stepper.algo_info.key if stepper.algo_info else None,
        "source":       stepper.source,
        "state":        stepper.state.value,
        "current_step": stepper.current_idx,
        "total_steps":  stepper.total_steps_fetched,
        "is_complete":  stepper.is_complete,
        "interval":     stepper.interval,
        "step":         step.to_dict() if step else None,
    }


def no_run():
    return jsonify({"error": "No active run. POST /api/run first."}), 400


@app.errorhandler(TraceError)
def handle_trace_error(exc: TraceError):
    logger.info("rejected request: %s", exc)
    return jsonify({"error": str(exc)}), 400


@app.errorhandler(400)
def handle_bad_request(exc):
    return jsonify({"error": exc.description}), 400


# ---------------------------------------------------------------------------
# API: Catalogue
# ---------------------------------------------------------------------------
@app.route("/api/graphs")
def api_graphs():
    return jsonify([
        {"key": key, "name": name, "source": source, "graph": build().to_dict()}
        for key, (name, build, source) in EXAMPLES.items()
    ])


@app.route("/api/algorithms")
def api_algorithms():
    return jsonify([a.to_dict() for a in list_algorithms()])


# ---------------------------------------------------------------------------
# API: Run
# ---------------------------------------------------------------------------
@app.route("/api/run", methods=["POST"])
def api_run():
    data = request_body()
    graph, source = resolve_graph(data)
    algorithm = data.get("algorithm", app.config["DEFAULT_ALGORITHM"])

    stepper = Stepper()
    stepper.initialize(graph, source, algorithm)
    if isinstance(data.get("speed"), str):
        stepper.set_speed(data["speed"])

    old = session.get("run_token")
    if old:
        drop_runner(old)
    session["run_token"] = store_runner(stepper)

    logger.info("started %s run from '%s'", algorithm, source)
    return jsonify(runner_payload(stepper))


# ---------------------------------------------------------------------------
# API: Step Navigation
# ---------------------------------------------------------------------------
@app.route("/api/step/next", methods=["POST"])
def api_step_next():
    with locked_stepper() as stepper:
        if stepper is None:
            return no_run()
        stepper.step_forward()
        return jsonify(runner_payload(stepper))


@app.route("/api/step/prev", methods=["POST"])
def api_step_prev():
    with locked_stepper() as stepper:
        if stepper is None:
            return no_run()
        if not stepper.step_backward():
            return jsonify({"error": "Already at first step"}), 400
        return jsonify(runner_payload(stepper))


@app.route("/api/step/goto", methods=["POST"])
def api_step_goto():
    idx = request_body().get("index", 0)
    # bool is an int subclass; `true` is not a step index
    if isinstance(idx, bool) or not isinstance(idx, int):
        return jsonify({"error": "Invalid step index"}), 400
    with locked_stepper() as stepper:
        if stepper is None:
            return no_run()
        if not stepper.go_to(idx):
            return jsonify({"error": "Invalid step index"}), 400
        return jsonify(runner_payload(stepper))


@app.route("/api/step/play", methods=["POST"])
def api_step_play():
    speed = request_body().get("speed")
    with locked_stepper() as stepper:
        if stepper is None:
            return no_run()
        if isinstance(speed, str) and speed in SPEED_PRESETS:
            stepper.set_speed(speed)
        stepper.toggle_play()
        return jsonify(runner_payload(stepper))


@app.route("/api/step/tick", methods=["POST"])
def api_step_tick():
    with locked_stepper() as stepper:
        if stepper is None:
            return no_run()
        advanced = stepper.tick()
        payload = runner_payload(stepper)
    payload["advanced"] = advanced
    return jsonify(payload)


@app.route("/api/step/reset", methods=["POST"])
def api_step_reset():
    with locked_stepper() as stepper:
        if stepper is None:
            return no_run()
        stepper.reset()
        return jsonify(runner_payload(stepper))


@app.route("/api/state")
def api_state():
    with locked_stepper() as stepper:
        if stepper is None:
            return jsonify({"state": "idle", "current_step": -1, "total_steps": 0, "step": None})
        return jsonify(runner_payload(stepper))


# ---------------------------------------------------------------------------
# API: Comparison
# ---------------------------------------------------------------------------
@app.route("/api/compare", methods=["POST"])
def api_compare():
    graph, source = resolve_graph(request_body())

    left, right = Recorder(), Recorder()
    left.start("classic", graph, source)
    right.start("pivot", graph, source)
    left.run_to_completion()
    right.run_to_completion()

    result = compare(left, right)
    return jsonify({
        "comparison": result.to_dict(),
        "final": {
            "classic": left.final_step.to_dict(),
            "pivot":   right.final_step.to_dict(),
        },
    })


if __name__ == "__main__":
    logging.basicConfig(
        level=os.environ.get("TRACE_LOG_LEVEL", "INFO"),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    app.run(debug=False, port=int(os.environ.get("PORT", "5000")))
