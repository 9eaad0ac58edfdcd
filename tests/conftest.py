from __future__ import annotations

import itertools

import pytest
from fastapi.testclient import TestClient

from lineup.main import app, audit_repo, event_repo, performance_repo, venue_repo


def _reset():
    for repo in (event_repo, venue_repo, performance_repo):
        repo._store.clear()
        repo._ids = itertools.count(1)
    audit_repo._entries.clear()
    app.dependency_overrides.clear()


@pytest.fixture(autouse=True)
def _clear_repos():
    """Reset in-memory repos before each test."""
    _reset()
    yield
    _reset()


@pytest.fixture()
def client():
    return TestClient(app)


@pytest.fixture()
def festival(client: TestClient) -> dict:
    """One event, two venues and a few performances created over HTTP."""
    event = client.post("/events", json={"name": "Block Party", "status": "published"}).json()
    main = client.post("/venues", json={"name": "Main Stage"}).json()
    side = client.post("/venues", json={"name": "Side Room"}).json()

    def add(name: str, venue: dict, start: str, end: str) -> dict:
        resp = client.post(
            "/performances",
            json={
                "name": name,
                "event_id": event["id"],
                "venue_id": venue["id"],
                "start_time": start,
                "end_time": end,
            },
        )
        assert resp.status_code == 201
        return resp.json()["performance"]

    return {
        "event": event,
        "main": main,
        "side": side,
        "openers": add("Openers", main, "18:00", "19:00"),
        "acoustic": add("Acoustic Hour", side, "18:00", "18:30"),
        "headliner": add("Headliner", main, "21:00", "22:30"),
    }
