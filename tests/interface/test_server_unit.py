import inspect

import pytest
from fastapi.testclient import TestClient

from kanjiorder.application.config import AppConfig
from kanjiorder.consts import VERSION
from kanjiorder.server import create_app


@pytest.fixture
def client(forest_file):
    return TestClient(create_app(AppConfig(corpus_path=forest_file)))


def test_health_check(client):
    response = client.get("/health")
    assert response.status_code == 200
    data = response.json()
    assert data["status"] == "ok"
    assert data["version"] == VERSION


def test_get_version(client):
    response = client.get("/version")
    assert response.status_code == 200
    assert response.json() == {"version": VERSION}


def test_get_order(client):
    response = client.get("/order")

    assert response.status_code == 200
    data = response.json()
    assert data["total"] == 3
    assert [c["id"] for c in data["characters"]] == ["木", "林", "森"]


def test_get_order_filtered(client):
    response = client.get("/order", params={"kind": "kanji", "max_strokes": 10})

    assert response.status_code == 200
    data = response.json()
    assert [(c["position"], c["id"]) for c in data["characters"]] == [(1, "林")]


def test_get_order_bad_kind(client):
    response = client.get("/order", params={"kind": "glyph"})
    assert response.status_code == 400


def test_get_prefix(client):
    response = client.get("/order/林/prefix")

    assert response.status_code == 200
    assert [c["id"] for c in response.json()["characters"]] == ["木", "林"]


def test_get_prefix_unknown(client):
    response = client.get("/order/山/prefix")

    assert response.status_code == 404
    assert "not found" in response.json()["detail"]


def test_get_character(client):
    response = client.get("/characters/林")

    assert response.status_code == 200
    data = response.json()
    assert data["position"] == 1
    assert data["components"] == ["木"]
    assert data["dependents"] == ["森"]
    assert data["ancestor_count"] == 1
    assert data["descendant_count"] == 1


def test_corpus_error_is_500(tmp_path):
    corpus = tmp_path / "cycle.yaml"
    corpus.write_text("A: {components: [B]}\nB: {components: [A]}\n", encoding="utf-8")
    client = TestClient(create_app(AppConfig(corpus_path=corpus)))

    response = client.get("/order")

    assert response.status_code == 500
    assert "circular prerequisites" in response.json()["detail"]


def test_corpus_routes_run_in_threadpool(forest_file):
    # Loading and sorting the corpus is blocking work
    app = create_app(AppConfig(corpus_path=forest_file))
    endpoints = {route.path: route.endpoint for route in app.routes if hasattr(route, "endpoint")}

    for path in ("/order", "/order/{char_id}/prefix", "/characters/{char_id}"):
        assert not inspect.iscoroutinefunction(endpoints[path])
