"""
Server lifecycle: run_server returns a handle that close_server stops.

Uses the in-memory backend and an ephemeral port so nothing external is needed.
"""

import httpx
import pytest

from main import ServerHandle, close_server, run_server

USER = {"username": "x", "password": "p", "firstName": "F", "lastName": "L"}


def _client(handle: ServerHandle) -> httpx.Client:
    return httpx.Client(base_url=f"http://127.0.0.1:{handle.port}", trust_env=False, timeout=5.0)


@pytest.fixture
def handle():
    h = run_server(backend="memory", port=0, host="127.0.0.1")
    yield h
    if h.thread.is_alive():
        close_server(h)


def test_run_server_serves_requests(handle):
    assert isinstance(handle, ServerHandle)
    assert handle.port > 0

    with _client(handle) as http:
        assert http.post("/users", json=USER).status_code == 201

        created = http.post("/posts", json={"title": "T", "content": "C"}, auth=("x", "p"))
        assert created.status_code == 201
        assert created.json()["author"] == "F L"

        listed = http.get("/posts")
        assert [p["id"] for p in listed.json()] == [created.json()["id"]]


def test_close_server_stops_accepting_connections(handle):
    port = handle.port
    close_server(handle)

    assert not handle.thread.is_alive()
    with httpx.Client(trust_env=False, timeout=1.0) as http:
        with pytest.raises(httpx.ConnectError):
            http.get(f"http://127.0.0.1:{port}/posts")


def test_two_servers_are_independent():
    first = run_server(backend="memory", port=0, host="127.0.0.1")
    second = run_server(backend="memory", port=0, host="127.0.0.1")
    try:
        with _client(first) as http:
            http.post("/users", json=USER)
        assert first.stores.users.count_by_username("x") == 1
        assert second.stores.users.count_by_username("x") == 0
    finally:
        close_server(first)
        close_server(second)
