"""Health endpoint, front page and application startup."""

import asyncio
import importlib
import logging

import pytest
from fastapi.testclient import TestClient
from pymongo.errors import ServerSelectionTimeoutError

import main
from config import ConfigurationError
from conftest import upload
from main import _seed_in_background, create_app


def test_home_serves_front_end(client):
    response = client.get("/")

    assert response.status_code == 200
    assert "text/html" in response.headers["content-type"]
    assert "/api/pdfs" in response.text


def test_health_reports_count(admin_client):
    upload(admin_client)

    body = admin_client.get("/api/health").json()

    assert body["status"] == "OK"
    assert body["database"] == "connected"
    assert body["pdfCount"] == 1
    assert "timestamp" in body


def test_health_when_database_down(client, context, monkeypatch):
    async def unavailable():
        raise ServerSelectionTimeoutError("no servers")

    monkeypatch.setattr(context.documents, "count", unavailable)

    response = client.get("/api/health")

    assert response.status_code == 503
    assert response.json()["database"] == "disconnected"


def test_cors_allows_dev_front_end(client):
    response = client.options(
        "/api/pdfs",
        headers={"Origin": "http://localhost:5173", "Access-Control-Request-Method": "GET"},
    )

    assert response.headers["access-control-allow-origin"] == "http://localhost:5173"
    assert response.headers["access-control-allow-credentials"] == "true"


def test_startup_with_seeding_serves_requests(context):
    context.settings = context.settings.model_copy(update={"seed_sample_data": True})
    app = create_app(context)

    with TestClient(app) as client:
        assert client.get("/api/health").status_code == 200
        assert client.get("/api/pdfs").status_code == 200


def test_seed_failure_is_logged_not_raised(context, monkeypatch, caplog):
    async def broken_count():
        raise RuntimeError("unexpected")

    monkeypatch.setattr(context.documents, "count", broken_count)

    with caplog.at_level(logging.ERROR):
        asyncio.run(_seed_in_background(context))

    assert "Seeding sample documents failed" in caplog.text


def test_importing_main_does_not_load_settings(monkeypatch):
    monkeypatch.setattr("config.load_dotenv", lambda: None)
    monkeypatch.setattr("dotenv.load_dotenv", lambda *args, **kwargs: None)
    monkeypatch.setenv("APP_ENV", "production")
    for name in ("SESSION_SECRET", "ADMIN_EMAIL", "ADMIN_PASSWORD"):
        monkeypatch.delenv(name, raising=False)

    module = importlib.reload(main)

    with pytest.raises(ConfigurationError):
        module.create_app()
