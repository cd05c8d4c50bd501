"""Tests for the HTTP entry point."""

import pytest
from fastapi.testclient import TestClient

from sandbox_agent.api.main import create_app


class StubService:
    def __init__(self, result="done", error=None):
        self.result = result
        self.error = error
        self.calls = []

    def handle(self, prompt, repo_url=None):
        self.calls.append((prompt, repo_url))
        if self.error is not None:
            raise self.error
        return self.result


@pytest.fixture
def stub():
    return StubService()


@pytest.fixture
def client(stub):
    return TestClient(create_app(service_factory=lambda: stub))


def test_health(client):
    response = client.get("/health")

    assert response.status_code == 200
    assert response.json() == {"status": "ok"}


def test_agent_returns_result(client, stub):
    response = client.post("/api/agent", json={"prompt": "Tell me about this project"})

    assert response.status_code == 200
    assert response.json() == {"result": "done"}
    assert stub.calls == [("Tell me about this project", None)]


def test_agent_passes_repo_url(client, stub):
    client.post("/api/agent", json={"prompt": "p", "repo_url": "https://github.com/acme/widgets"})

    assert stub.calls == [("p", "https://github.com/acme/widgets")]


def test_agent_error_is_generic(client, stub):
    stub.error = RuntimeError("sandbox exploded with secret details")

    response = client.post("/api/agent", json={"prompt": "p"})

    assert response.status_code == 500
    assert response.json() == {"error": "An error occurred"}


@pytest.mark.parametrize("body", [b"not json", b"[]", b"{}"])
def test_malformed_body_is_generic_failure(client, stub, body):
    response = client.post("/api/agent", content=body, headers={"Content-Type": "application/json"})

    assert response.status_code == 500
    assert response.json() == {"error": "An error occurred"}
    assert stub.calls == []
