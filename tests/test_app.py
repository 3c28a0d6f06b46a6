"""
Application factory tests: health probes, JSON error handlers, request
guards, response headers and configuration.
"""

import json
import logging

import pytest

from maintflow import create_app
from maintflow.config import ProductionConfig, TestingConfig, config
from maintflow.middleware.logging_config import JSONFormatter, ReadableFormatter


class TestHealth:

    def test_ready(self, client):
        res = client.get("/api/v1/health/ready")
        assert res.status_code == 200
        assert res.get_json() == {"status": "ok"}

    def test_live(self, client):
        res = client.get("/api/v1/health/live")
        assert res.status_code == 200
        data = res.get_json()
        assert data["status"] == "ok"
        assert data["checks"]["workflow_core"]["status"] == "ok"
        assert data["checks"]["rate_limiting"]["status"] == "disabled"


class TestErrorHandlers:

    def test_404_is_json(self, client):
        res = client.get("/api/v1/nope")
        assert res.status_code == 404
        assert res.get_json() == {
            "error": "Not found",
            "code": "ERR_NOT_FOUND",
            "details": {"path": "/api/v1/nope"},
        }

    def test_405_is_json(self, client):
        res = client.get("/api/v1/workflow/dashboard")
        assert res.status_code == 405
        assert res.get_json()["code"] == "ERR_METHOD_NOT_ALLOWED"

    def test_non_json_body_rejected(self, client):
        res = client.post("/api/v1/workflow/dashboard", data="interventions=1", content_type="text/plain")
        assert res.status_code == 415
        data = res.get_json()
        assert data["code"] == "ERR_UNSUPPORTED_MEDIA_TYPE"
        assert "application/json" in data["error"]


class TestResponseHeaders:

    def test_security_headers(self, client):
        res = client.get("/api/v1/health/ready")
        assert res.headers["X-Content-Type-Options"] == "nosniff"
        assert res.headers["X-Frame-Options"] == "DENY"
        assert "default-src 'none'" in res.headers["Content-Security-Policy"]

    def test_request_id_echoed(self, client):
        res = client.get("/api/v1/workflow/statuses", headers={"X-Request-ID": "abc123"})
        assert res.headers["X-Request-ID"] == "abc123"
        assert float(res.headers["X-Request-Duration-Ms"]) >= 0


class TestConfig:

    def test_testing_config(self, app):
        assert app.config["TESTING"] is True
        assert app.config["RATELIMIT_ENABLED"] is False
        assert app.config["WORKFLOW_DASHBOARD_MAX_ITEMS"] == TestingConfig.WORKFLOW_DASHBOARD_MAX_ITEMS

    def test_config_names(self):
        assert set(config) == {"development", "testing", "production", "default"}

    def test_production_requires_secret_key(self, monkeypatch):
        monkeypatch.delenv("SECRET_KEY", raising=False)
        with pytest.raises(RuntimeError, match="SECRET_KEY"):
            ProductionConfig()

    def test_production_requires_cors_origins(self, monkeypatch):
        monkeypatch.setenv("SECRET_KEY", "s3cret")
        monkeypatch.setattr(ProductionConfig, "CORS_ORIGINS", "")
        with pytest.raises(RuntimeError, match="CORS_ORIGINS"):
            ProductionConfig()

    def test_app_env_selects_config(self, monkeypatch):
        monkeypatch.setenv("APP_ENV", "testing")
        assert create_app().config["TESTING"] is True


class TestCli:

    def test_enrich_snapshot_command(self, app, tmp_path):
        path = tmp_path / "snapshot.json"
        path.write_text(json.dumps({
            "intervention": {"id": 5, "status": "PAUSED", "description": "Repair the gearbox"},
            "diagnostic": {},
            "planning": {"parts_available": True},
        }), encoding="utf-8")

        result = app.test_cli_runner().invoke(args=["enrich-snapshot", str(path)])
        assert result.exit_code == 0, result.output
        data = json.loads(result.stdout)
        assert data["intervention_type"] == "REPAIR"
        assert data["workflow"]["current_phase"] == "EXECUTION"
        assert [a["action"] for a in data["workflow"]["next_actions"]] == ["RESUME_WORK"]


class TestLogging:

    def _record(self, **extra):
        record = logging.LogRecord("maintflow.test", logging.INFO, __file__, 10, "hello %s", ("world",), None)
        for key, value in extra.items():
            setattr(record, key, value)
        return record

    def test_json_formatter_includes_request_fields(self):
        line = JSONFormatter().format(self._record(intervention_id=42, status=200, duration_ms=12.345))
        entry = json.loads(line)
        assert entry["message"] == "hello world"
        assert entry["service"] == "maintflow"
        assert entry["intervention_id"] == 42
        assert entry["duration_ms"] == 12.3
        assert "method" not in entry

    def test_readable_formatter_tags_intervention(self):
        line = ReadableFormatter().format(self._record(intervention_id=42, status=409, duration_ms=3.0))
        assert "hello world [#42] [409 3ms]" in line
