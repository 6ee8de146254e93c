"""Tests for the FastAPI parse adapter."""

from __future__ import annotations

from fastapi.testclient import TestClient

from postrecord.main import create_app
from postrecord.settings import Settings

POST = "---\nlayout: post\ntitle: X\n---\n# Title\n\nSome text\n"


def get_client(**overrides) -> TestClient:
    app = create_app(Settings(**overrides))
    return TestClient(app)


def test_healthz() -> None:
    """Health endpoint answers with plain text."""
    resp = get_client().get("/healthz")
    assert resp.status_code == 200
    assert resp.text == "ok\n"


def test_parse_returns_record() -> None:
    """A well-formed post comes back as metadata plus typed blocks."""
    resp = get_client().post("/parse", json={"text": POST})
    body = resp.json()

    assert resp.status_code == 200
    assert body["metadata"] == {"layout": "post", "title": "X"}
    assert [block["kind"] for block in body["blocks"]] == ["heading", "paragraph"]
    assert body["blocks"][0]["level"] == 1
    assert body["missing_keys"] == []


def test_parse_reports_missing_keys_without_strict() -> None:
    """Missing keys are reported but do not fail the request by default."""
    resp = get_client().post("/parse", json={"text": "Body only\n"})
    body = resp.json()

    assert resp.status_code == 200
    assert body["missing_keys"] == ["layout", "title"]
    assert {d["code"] for d in body["diagnostics"]} == {"MissingRequiredMetadataKey"}


def test_parse_strict_rejects_missing_keys() -> None:
    """Strict mode turns missing required keys into a 422."""
    resp = get_client().post("/parse", json={"text": "Body only\n", "strict": True})

    assert resp.status_code == 422
    assert resp.json()["detail"]["missing_keys"] == ["layout", "title"]


def test_parse_uses_app_settings() -> None:
    """Settings passed to create_app drive the parse, not the cached defaults."""
    client = get_client(required_metadata_keys=[])
    resp = client.post("/parse", json={"text": "Body only\n", "strict": True})

    assert resp.status_code == 200
    assert resp.json()["missing_keys"] == []


def test_metrics_endpoint() -> None:
    """Parse runs show up in the Prometheus exposition."""
    client = get_client()
    client.post("/parse", json={"text": POST})
    resp = client.get("/metrics")

    assert resp.status_code == 200
    assert "post_record_documents_total" in resp.text
    assert 'post_record_blocks_total{kind="heading"}' in resp.text


def test_metrics_disabled() -> None:
    """Metrics endpoint is hidden when disabled."""
    assert get_client(metrics_enabled=False).get("/metrics").status_code == 404
