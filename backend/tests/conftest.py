"""Pytest configuration.

Settings are read from the environment once (``get_settings`` is cached), so
the test defaults below must be in place before the app modules are imported.
"""

import os
import tempfile


_TEST_DB_DIR = tempfile.mkdtemp(prefix="lti-settings-tests-")

os.environ["DB_PATH"] = os.path.join(_TEST_DB_DIR, "lti_settings_test.db")
os.environ.setdefault("ENV", "development")
os.environ.setdefault("SESSION_SECRET_KEY", "dev-test-secret")
os.environ["SESSION_COOKIE_SECURE"] = "0"
os.environ.pop("DB_PREFIX", None)
os.environ.pop("SETTINGS_COMPARE_MODE", None)

import uuid

import pytest
from fastapi.testclient import TestClient

from app import app
from auth import SessionManager
from database import LinkDB, LinkSettingsDB, init_database


class RecordingSettingsDB(LinkSettingsDB):
    """Records every settings write so tests can assert on store traffic."""

    def __init__(self, *args, **kwargs):
        super().__init__(*args, **kwargs)
        self.writes = []

    def update_settings(self, link_id, json_text):
        self.writes.append((link_id, json_text))
        return super().update_settings(link_id, json_text)


@pytest.fixture
def db_path(tmp_path):
    path = str(tmp_path / "links.db")
    init_database(path)
    return path


@pytest.fixture
def link_id(db_path):
    LinkDB.ensure_link("link-1", title="Week 1 quiz", db_path=db_path)
    return "link-1"


@pytest.fixture
def settings_db(db_path):
    return RecordingSettingsDB(db_path)


@pytest.fixture
def client():
    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture
def launch():
    """Registers a fresh link in the app database and returns a session token factory."""

    def _launch(custom=None, register=True, link_settings=None):
        new_link_id = f"link-{uuid.uuid4().hex[:12]}"
        if register:
            LinkDB.ensure_link(new_link_id)
        token = SessionManager.create_session_token(new_link_id, custom=custom, link_settings=link_settings)
        return new_link_id, token

    return _launch


@pytest.fixture
def app_db():
    """Creates the table in the shared app database (``DB_PATH``)."""
    init_database()
