"""Tests for /ping and /health"""

from unittest.mock import PropertyMock, patch


def test_ping(client):
    assert client.get("/ping").json() == {"ok": True}
    assert client.get("/api/ping").json() == {"ok": True}


def test_health_reports_providers(client):
    body = client.get("/api/health").json()

    assert body["status"] == "healthy"
    assert body["providers"] == {
        "llm": "MockLLMProvider",
        "llm_model": "mock-model",
        "note_store": "sqlite",
        "pattern_store": "sqlite",
    }
    assert body["scheduler"]["started"] is False


def test_health_hides_initialization_errors(client, brain):
    with patch.object(type(brain), "note_store", new_callable=PropertyMock) as note_store:
        note_store.side_effect = ValueError("Unknown note store provider: secret-detail")

        body = client.get("/health").json()

    assert body == {"status": "unhealthy", "error": "Service initialization failed"}
