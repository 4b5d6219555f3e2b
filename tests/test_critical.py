"""
Critical Integration Tests for LinkCard
=======================================

Focused tests covering the integration points most likely to break:
app boot, config, database setup, error handling and the public page.
Run with: pytest tests/test_critical.py -v
"""

import os
from unittest.mock import patch

import pytest
from flask import Flask

from linkcard import LinkCard
from linkcard.app import create_app
from linkcard.core import Database, get_config_value
from linkcard.core.config import DEFAULT_SECRET_KEY

from conftest import ADMIN_PASSWORD, make_config


# ---------------------------------------------------------------------------
# 1. Framework initialisation -- LinkCard(app) does not raise
# ---------------------------------------------------------------------------

def test_framework_initialisation(tmp_data_dir):
    """LinkCard(app) boots without errors and stores itself on the app."""
    app = Flask(__name__, static_folder=None)
    linkcard = LinkCard(app, make_config(tmp_data_dir))

    assert "linkcard" in app.extensions
    assert app.extensions["linkcard"] is linkcard


# ---------------------------------------------------------------------------
# 2. Blueprint registration -- every module is registered
# ---------------------------------------------------------------------------

EXPECTED_MODULES = ["auth", "links", "site", "icons", "ops", "public"]


def test_all_blueprints_registered(app):
    registered = app.extensions["linkcard"].get_registered_modules()

    assert registered == EXPECTED_MODULES
    for name in EXPECTED_MODULES:
        assert name in app.blueprints


# ---------------------------------------------------------------------------
# 3. Config resolution -- defaults, overrides and derived values
# ---------------------------------------------------------------------------

def test_config_defaults_applied(app, tmp_data_dir):
    assert app.config["LINKCARD_DB"].startswith(tmp_data_dir)
    assert app.config["AVATAR_SIZE"] == 400
    assert app.config["TOKEN_MAX_AGE"] == 24 * 60 * 60
    assert app.config["MAX_CONTENT_LENGTH"] == 50 * 1024 * 1024
    assert app.config["SECRET_KEY"] == "test-secret"


def test_get_config_value_prefers_app_config(app):
    with app.app_context():
        app.config["MIN_PASSWORD_LENGTH"] = 12
        assert get_config_value("MIN_PASSWORD_LENGTH") == 12
        assert get_config_value("NOT_A_REAL_KEY", "fallback") == "fallback"


def test_max_upload_mb_sets_request_limit(tmp_data_dir):
    app = create_app(make_config(tmp_data_dir, MAX_UPLOAD_MB=2))
    assert app.config["MAX_CONTENT_LENGTH"] == 2 * 1024 * 1024


# ---------------------------------------------------------------------------
# 4. Secret key -- the development key is refused in production
# ---------------------------------------------------------------------------

def test_production_refuses_default_secret_key(tmp_data_dir):
    with pytest.raises(RuntimeError):
        create_app(make_config(
            tmp_data_dir, ENVIRONMENT="production", SECRET_KEY=DEFAULT_SECRET_KEY
        ))


def test_development_falls_back_to_default_secret_key(tmp_data_dir):
    app = create_app(make_config(tmp_data_dir, SECRET_KEY=None))
    assert app.config["SECRET_KEY"]


# ---------------------------------------------------------------------------
# 5. Database setup -- directory, schema and default config are created
# ---------------------------------------------------------------------------

def test_database_created(app):
    db_path = app.config["LINKCARD_DB"]
    assert os.path.isfile(db_path), f"Database was not created at {db_path}"

    with app.app_context():
        assert Database.ping() is True
        with Database.connect() as conn:
            tables = {row["name"] for row in conn.execute(
                "SELECT name FROM sqlite_master WHERE type = 'table'"
            )}
    assert {"links", "site_config", "app_logs"} <= tables


def test_default_config_seeded(client):
    response = client.get("/api/config")
    assert response.status_code == 200

    data = response.get_json()
    assert data["profile"]["name"] == "My Links"
    assert data["profile"]["avatar"] == "ML"
    assert data["settings"] == {}
    assert "adminPasswordHash" not in data


def test_admin_password_bootstrapped_from_env(client):
    response = client.post("/api/auth", json={"password": ADMIN_PASSWORD})
    assert response.status_code == 200


def test_short_bootstrap_password_is_ignored(tmp_data_dir):
    app = create_app(make_config(tmp_data_dir, ADMIN_PASSWORD="abc"))
    response = app.test_client().post("/api/auth", json={"password": "abc"})

    assert response.status_code == 500
    assert response.get_json()["error"] == "Server configuration error"


def test_restart_keeps_existing_password(tmp_data_dir):
    create_app(make_config(tmp_data_dir))
    app = create_app(make_config(tmp_data_dir, ADMIN_PASSWORD="another-password"))

    client = app.test_client()
    assert client.post("/api/auth", json={"password": ADMIN_PASSWORD}).status_code == 200
    assert client.post("/api/auth", json={"password": "another-password"}).status_code == 401


# ---------------------------------------------------------------------------
# 6. Error handling -- API errors are JSON, page routes serve the client
# ---------------------------------------------------------------------------

def test_unknown_api_route_is_json_404(client):
    response = client.get("/api/does-not-exist")
    assert response.status_code == 404
    assert response.get_json() == {"error": "Not found"}


def test_api_method_not_allowed_is_json(client):
    response = client.patch("/api/links")
    assert response.status_code == 405
    assert response.get_json() == {"error": "Method not allowed"}


def test_unhandled_exception_returns_json_500(tmp_data_dir):
    app = create_app(make_config(tmp_data_dir))

    def explode():
        raise RuntimeError("kaboom")

    app.add_url_rule("/api/explode", "explode", explode)
    response = app.test_client().get("/api/explode")

    assert response.status_code == 500
    assert response.get_json() == {"error": "Internal server error"}


def test_route_failure_is_logged(app, client):
    with patch("linkcard.modules.links.routes.get_all_links_db", side_effect=RuntimeError("disk gone")):
        response = client.get("/api/links")

    assert response.status_code == 500
    assert response.get_json() == {"error": "Failed to load links"}

    with app.app_context():
        with Database.connect() as conn:
            row = conn.execute(
                "SELECT level, source, details FROM app_logs WHERE source = 'links'"
            ).fetchone()
    assert row["level"] == "ERROR"
    assert "disk gone" in row["details"]


def test_security_headers_present(client):
    response = client.get("/api/links")
    assert response.headers["X-Content-Type-Options"] == "nosniff"
    assert response.headers["X-Frame-Options"] == "SAMEORIGIN"


def test_cors_allows_api_requests(client):
    response = client.get("/api/links", headers={"Origin": "https://example.com"})
    assert response.headers.get("Access-Control-Allow-Origin") in ("*", "https://example.com")


# ---------------------------------------------------------------------------
# 7. Public page -- index, assets and client-side routing catch-all
# ---------------------------------------------------------------------------

def test_index_page(client):
    response = client.get("/")
    assert response.status_code == 200
    assert b"linkcard.js" in response.data


def test_catch_all_serves_page(client):
    response = client.get("/some/client/route")
    assert response.status_code == 200
    assert b"<title>Links</title>" in response.data


def test_client_assets_served(client):
    response = client.get("/assets/linkcard.js")
    assert response.status_code == 200
    assert b"class LinkCard" in response.data


def test_missing_upload_is_404(client):
    assert client.get("/uploads/nope.png").status_code == 404
