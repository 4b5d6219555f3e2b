"""
Health check, error feed and icon proxy tests.
"""

from datetime import datetime, timedelta
from unittest.mock import MagicMock, patch

import pytest
import requests

from linkcard.app import create_app
from linkcard.core import Database, LoggingService

from conftest import make_config


# ---------------------------------------------------------------------------
# Health
# ---------------------------------------------------------------------------

def test_health_ok(client):
    response = client.get("/api/health")
    assert response.status_code == 200

    data = response.get_json()
    assert data["status"] == "ok"
    assert data["checks"] == {"database": "ok", "uploads": "ok"}
    assert data["timestamp"]


def test_health_database_down(client):
    with patch.object(Database, "ping", return_value=False):
        response = client.get("/api/health")

    assert response.status_code == 503
    assert response.get_json()["status"] == "critical"


# ---------------------------------------------------------------------------
# Error feed
# ---------------------------------------------------------------------------

def test_logs_require_auth(client):
    assert client.get("/api/logs").status_code == 401


def test_logs_return_recent_errors(app, client, auth_headers):
    with app.app_context():
        LoggingService.info("test", "just chatter")
        LoggingService.error("test", "something broke", {"id": 7})

    response = client.get("/api/logs", headers=auth_headers)
    assert response.status_code == 200

    logs = response.get_json()["logs"]
    messages = [entry["message"] for entry in logs]
    assert "something broke" in messages
    assert "just chatter" not in messages


def test_logs_limit_is_clamped(app, client, auth_headers):
    with app.app_context():
        for i in range(3):
            LoggingService.error("test", f"error {i}")

    logs = client.get("/api/logs?limit=0", headers=auth_headers).get_json()["logs"]
    assert len(logs) == 1
    assert logs[0]["message"] == "error 2"


def test_cleanup_old_logs(app):
    with app.app_context():
        LoggingService.error("test", "recent")
        assert LoggingService.cleanup_old_logs(days_to_keep=30) == 0
        assert LoggingService.get_recent_logs(limit=10)


# ---------------------------------------------------------------------------
# Icons
# ---------------------------------------------------------------------------

def _mock_response(status_code=200, text="<svg></svg>"):
    response = MagicMock()
    response.status_code = status_code
    response.text = text
    if status_code >= 400:
        response.raise_for_status.side_effect = requests.HTTPError(f"{status_code} error")
    return response


def test_icon_proxied(app, client):
    with patch("linkcard.modules.icons.routes.requests.get", return_value=_mock_response()) as mock_get:
        response = client.get("/api/icons/GitHub")

    assert response.status_code == 200
    assert response.mimetype == "image/svg+xml"
    assert response.data == b"<svg></svg>"
    assert "max-age=86400" in response.headers["Cache-Control"]

    url = mock_get.call_args[0][0]
    assert url == f"{app.config['SIMPLE_ICONS_URL']}/github"
    assert mock_get.call_args[1]["timeout"] == app.config["ICON_TIMEOUT"]


def test_icon_not_found(client):
    with patch("linkcard.modules.icons.routes.requests.get", return_value=_mock_response(404)):
        response = client.get("/api/icons/nosuchicon")
    assert response.status_code == 404
    assert response.get_json() == {"error": "Icon not found"}


@pytest.mark.parametrize("side_effect", [requests.ConnectionError("down"), requests.Timeout("slow")])
def test_icon_service_unavailable(client, side_effect):
    with patch("linkcard.modules.icons.routes.requests.get", side_effect=side_effect):
        response = client.get("/api/icons/github")
    assert response.status_code == 502


def test_icon_upstream_error(client):
    with patch("linkcard.modules.icons.routes.requests.get", return_value=_mock_response(500)):
        response = client.get("/api/icons/github")
    assert response.status_code == 502


def test_icon_invalid_name(client):
    with patch("linkcard.modules.icons.routes.requests.get") as mock_get:
        response = client.get("/api/icons/not_valid")

    assert response.status_code == 400
    mock_get.assert_not_called()


def test_old_logs_removed_on_startup(tmp_data_dir):
    app = create_app(make_config(tmp_data_dir, LOG_RETENTION_DAYS=7))
    old = (datetime.now() - timedelta(days=10)).isoformat()
    with app.app_context():
        with Database.connect() as conn:
            conn.execute(
                "INSERT INTO app_logs (timestamp, level, source, message) VALUES (?, 'ERROR', 'test', 'stale')",
                (old,),
            )

    restarted = create_app(make_config(tmp_data_dir, LOG_RETENTION_DAYS=7))
    with restarted.app_context():
        with Database.connect() as conn:
            messages = [row["message"] for row in conn.execute("SELECT message FROM app_logs")]
    assert "stale" not in messages
