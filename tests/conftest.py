"""
Shared fixtures for the LinkCard test suite.

NOTE: pytest and pytest-flask are listed under extras_require["dev"] in setup.py.
Install with: pip install -e ".[dev]"
"""

import io
import os
import shutil
import tempfile

import pytest
from PIL import Image

from linkcard.app import create_app

ADMIN_PASSWORD = "secret123"


def make_config(data_dir, **overrides):
    """Test config: everything lives in data_dir, rate limiting off."""
    config = {
        "TESTING": True,
        "SECRET_KEY": "test-secret",
        "ENVIRONMENT": "testing",
        "LINKCARD_DB": os.path.join(data_dir, "db", "linkcard.db"),
        "UPLOAD_FOLDER": os.path.join(data_dir, "uploads"),
        "ADMIN_PASSWORD": ADMIN_PASSWORD,
        "RATELIMIT_ENABLED": False,
    }
    config.update(overrides)
    return config


def make_image(fmt="PNG", size=(64, 48), color=(200, 30, 30)):
    """In-memory image file produced by Pillow."""
    buf = io.BytesIO()
    Image.new("RGB", size, color).save(buf, format=fmt)
    buf.seek(0)
    return buf


@pytest.fixture
def tmp_data_dir():
    """Temporary directory for the database and uploads, cleaned up after."""
    d = tempfile.mkdtemp(prefix="linkcard-test-")
    yield d
    shutil.rmtree(d, ignore_errors=True)


@pytest.fixture
def app(tmp_data_dir):
    """Fully initialised app with every LinkCard module registered."""
    return create_app(make_config(tmp_data_dir))


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def token(client):
    response = client.post("/api/auth", json={"password": ADMIN_PASSWORD})
    assert response.status_code == 200, response.get_json()
    return response.get_json()["token"]


@pytest.fixture
def auth_headers(token):
    return {"Authorization": f"Bearer {token}"}
