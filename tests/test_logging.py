import json

from core.config import Config
from core.correlation import correlation_id_ctx_var
from ui import dashboard as dashboard_module
from ui.dashboard import Dashboard
from ui.log_utils import (
    clear_logs,
    redact_headers,
    write_cli_log,
    write_incoming_log,
    write_worker_log,
)


class TestLogUtils:
    def test_redact_headers(self):
        redacted = redact_headers(
            {
                "x-budibase-api-key": "internal-key-0123456789",
                "authorization": "short",
                "x-budibase-token": "tok",
                "x-budibase-tenant-id": "tenant-a",
            }
        )
        assert redacted == {
            "x-budibase-api-key": "intern...6789",
            "authorization": "***",
            "x-budibase-token": "***",
            "x-budibase-tenant-id": "tenant-a",
        }

    def test_cookie_and_session_headers_are_redacted(self):
        redacted = redact_headers(
            {
                "cookie": "budibase:auth=eyJhbGciOiJIUzI1NiJ9.payload",
                "set-cookie": "a=b",
                "x-budibase-session-id": "sess-0123456789abcdef",
            }
        )
        assert redacted == {
            "cookie": "budiba...load",
            "set-cookie": "***",
            "x-budibase-session-id": "sess-0...cdef",
        }

    def test_incoming_log_masks_cookie(self, log_root):
        path = write_incoming_log(
            "GET", "/api/users", {"cookie": "budibase:auth=secret-session-value"}, None
        )

        payload = json.loads(path.read_text())
        assert "secret-session-value" not in path.read_text()
        assert payload["headers"]["cookie"] == "budiba...alue"

    def test_write_worker_log(self, log_root):
        path = write_worker_log(
            "get user",
            "GET",
            "http://worker:4002/api/global/users/us_1",
            {"x-budibase-api-key": "internal-key-0123456789"},
            '{"a": 1}',
        )

        assert path.parent == log_root / "worker" / "get_user"
        payload = json.loads(path.read_text())
        assert payload["operation"] == "get user"
        assert payload["headers"]["x-budibase-api-key"] == "intern...6789"
        assert payload["body"] == {"a": 1}

    def test_write_cli_log_includes_correlation_id(self, tmp_path):
        log_file = tmp_path / "proxy.log"
        correlation_id_ctx_var.set("corr-9")

        write_cli_log("WORKER", "GET /api/global/users", log_file=log_file, operation="get users")

        line = log_file.read_text()
        assert "WORKER: GET /api/global/users" in line
        assert "operation=get users" in line
        assert "correlation_id=corr-9" in line

    def test_clear_logs(self, log_root):
        write_worker_log("get users", "GET", "http://w/api", {}, None)
        write_worker_log("get users", "GET", "http://w/api", {}, None)

        assert clear_logs() == 2
        assert list(log_root.rglob("*.json")) == []


class TestDashboard:
    def test_tracks_calls_results_and_errors(self, monkeypatch):
        written = []
        monkeypatch.setattr(dashboard_module, "write_worker_log", lambda *a, **k: written.append(a))
        monkeypatch.setattr(dashboard_module, "write_cli_log", lambda *a, **k: None)
        dashboard = Dashboard(Config())

        dashboard.log_worker_call(
            "get user",
            "GET",
            "http://worker:4002/api/global/users/us_1",
            {"x-budibase-tenant-id": "tenant-a"},
        )
        dashboard.log_worker_result("get user", 404)
        dashboard.log_error("get user", 404, "Unable to get user - not found")

        assert dashboard._counts["get user"] == 1
        assert dashboard._calls[0].status == 404
        assert dashboard._calls[0].tenant_id == "tenant-a"
        assert dashboard._failures == 1
        assert dashboard._errors == ["get user 404: Unable to get user - not found"]
        assert len(written) == 1
        assert dashboard._build_layout() is not None
