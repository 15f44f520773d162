import threading

import pytest

from main import app, _RUNNERS
from graph.samples import simple_graph


@pytest.fixture
def client():
    app.config["TESTING"] = True
    _RUNNERS.clear()
    with app.test_client() as client:
        yield client


def test_catalogue_routes(client):
    graphs = client.get("/api/graphs").get_json()
    assert [g["key"] for g in graphs] == ["simple", "medium", "sparse"]

    algos = client.get("/api/algorithms").get_json()
    assert [a["key"] for a in algos] == ["classic", "pivot"]
    assert all(a["pseudocode"] for a in algos)


def test_state_before_any_run_is_idle(client):
    data = client.get("/api/state").get_json()
    assert data["state"] == "idle"
    assert data["step"] is None


def test_step_without_run_is_rejected(client):
    resp = client.post("/api/step/next")
    assert resp.status_code == 400


def test_run_and_navigate(client):
    data = client.post("/api/run", json={"example": "simple", "algorithm": "classic"}).get_json()
    assert data["state"] == "paused"
    assert data["total_steps"] == 1
    assert data["step"]["kind"] == "init"

    data = client.post("/api/step/next").get_json()
    assert data["current_step"] == 1
    assert data["step"]["kind"] == "extract-min"
    assert data["step"]["info"]["current_node"] == "A"

    data = client.post("/api/step/prev").get_json()
    assert data["current_step"] == 0
    assert client.post("/api/step/prev").status_code == 400

    data = client.post("/api/step/goto", json={"index": 1}).get_json()
    assert data["current_step"] == 1
    assert client.post("/api/step/goto", json={"index": 50}).status_code == 400

    data = client.post("/api/step/reset").get_json()
    assert data["total_steps"] == 1


def test_play_toggles_and_tick_reports(client):
    client.post("/api/run", json={"algorithm": "pivot"})
    data = client.post("/api/step/play", json={"speed": "fast"}).get_json()
    assert data["state"] == "playing"
    assert data["interval"] == 0.15

    data = client.post("/api/step/tick").get_json()
    assert "advanced" in data

    data = client.post("/api/step/play").get_json()
    assert data["state"] == "paused"


def test_run_with_inline_graph(client):
    payload = {"graph": simple_graph().to_dict(), "source": "C", "algorithm": "pivot"}
    data = client.post("/api/run", json=payload).get_json()
    assert data["source"] == "C"
    assert data["algorithm"] == "pivot"
    assert data["step"]["distances"]["A"] is None


@pytest.mark.parametrize("payload", [
    {"example": "simple", "source": "Z"},
    {"example": "galaxy"},
    {"example": "simple", "algorithm": "teleport"},
    {"graph": "not an object"},
    {"graph": {"nodes": [{"id": "A"}, {"id": "B"}],
               "edges": [{"id": "e1", "source": "A", "target": "B", "weight": -2}]}},
    {"graph": {"nodes": [{"id": "A"}, {"id": "B"}],
               "edges": [{"id": "e1", "source": "A", "target": "B", "weight": 10 ** 400}]}},
    {"example": ["simple"]},
    {"example": "simple", "algorithm": ["classic"]},
    [1],
])
def test_bad_run_requests_return_400(client, payload):
    resp = client.post("/api/run", json=payload)
    assert resp.status_code == 400
    assert "error" in resp.get_json()


def test_compare_route(client):
    data = client.post("/api/compare", json={"example": "simple"}).get_json()
    assert data["comparison"]["distances_agree"] is True
    assert data["comparison"]["left"]["algo_key"] == "classic"
    assert data["comparison"]["right"]["algo_key"] == "pivot"
    assert data["final"]["classic"]["distances"] == data["final"]["pivot"]["distances"]


def test_compare_rejects_oversized_weight(client):
    graph = {"nodes": [{"id": "A"}, {"id": "B"}],
             "edges": [{"id": "e1", "source": "A", "target": "B", "weight": 10 ** 400}]}
    resp = client.post("/api/compare", json={"graph": graph})
    assert resp.status_code == 400
    assert "too large" in resp.get_json()["error"]


@pytest.mark.parametrize("body", [{"index": True}, {"index": "1"}, [1]])
def test_goto_rejects_non_integer_index(client, body):
    client.post("/api/run", json={})
    client.post("/api/step/next")
    resp = client.post("/api/step/goto", json=body)
    assert resp.status_code == 400
    assert client.get("/api/state").get_json()["current_step"] == 1


def test_play_ignores_unhashable_speed(client):
    client.post("/api/run", json={})
    data = client.post("/api/step/play", json={"speed": ["fast"]}).get_json()
    assert data["state"] == "playing"
    assert data["interval"] == 0.5


def test_runner_store_is_bounded(monkeypatch):
    monkeypatch.setitem(app.config, "MAX_RUNNERS", 3)
    _RUNNERS.clear()
    clients = [app.test_client() for _ in range(5)]
    for c in clients:
        assert c.post("/api/run", json={}).status_code == 200

    assert len(_RUNNERS) == 3
    # the two oldest runs were evicted
    assert clients[0].post("/api/step/next").status_code == 400
    assert clients[1].post("/api/step/next").status_code == 400
    assert clients[4].post("/api/step/next").status_code == 200


def test_runner_store_evicts_least_recently_used(monkeypatch):
    monkeypatch.setitem(app.config, "MAX_RUNNERS", 2)
    _RUNNERS.clear()
    first, second, third = (app.test_client() for _ in range(3))
    first.post("/api/run", json={})
    second.post("/api/run", json={})
    first.post("/api/step/next")          # first is now the most recent
    third.post("/api/run", json={})

    assert first.post("/api/step/next").status_code == 200
    assert second.post("/api/step/next").status_code == 400


def test_new_run_replaces_the_sessions_runner(client):
    client.post("/api/run", json={})
    client.post("/api/run", json={"algorithm": "pivot"})
    assert len(_RUNNERS) == 1


def test_step_requests_wait_for_the_runner_lock():
    _RUNNERS.clear()
    client = app.test_client()
    client.post("/api/run", json={})
    (runner,) = _RUNNERS.values()
    codes = []

    with runner.lock:
        worker = threading.Thread(target=lambda: codes.append(client.post("/api/step/next").status_code))
        worker.start()
        worker.join(timeout=0.2)
        assert worker.is_alive()
        assert runner.stepper.current_idx == 0

    worker.join(timeout=5)
    assert codes == [200]
    assert runner.stepper.current_idx == 1
