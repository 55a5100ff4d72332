"""
Pytest configuration and shared fixtures.
"""

import pytest
from pathlib import Path
from unittest.mock import Mock

from issueannotator.host import FileVault, JsonSettingsStore, RecordingNotifier
from issueannotator.logger import get_logger, reset_logger
from issueannotator.settings import Settings


@pytest.fixture(autouse=True)
def isolated_logger(tmp_path):
    """Fresh global logger writing into the test's tmp dir."""
    reset_logger()
    logger = get_logger(log_dir=tmp_path / "logs", enable_console=False)
    yield logger
    reset_logger()


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    """Keep credentials from the developer's shell out of the tests."""
    monkeypatch.delenv("YOUTRACK_API_TOKEN", raising=False)
    monkeypatch.delenv("YOUTRACK_HOST", raising=False)


@pytest.fixture
def settings() -> Settings:
    return Settings(api_token="perm:abc123", host="example.youtrack.cloud")


@pytest.fixture
def notifier() -> RecordingNotifier:
    return RecordingNotifier()


@pytest.fixture
def sample_note() -> str:
    """A note with two issue tokens and some surrounding prose."""
    return "\n".join([
        "# Sprint notes",
        "",
        "Working on #EP-1 today",
        "Blocked by #SP-22",
        "Unrelated line",
    ])


@pytest.fixture
def vault(tmp_path) -> FileVault:
    root = tmp_path / "vault"
    root.mkdir()
    return FileVault(root)


@pytest.fixture
def settings_store(tmp_path) -> JsonSettingsStore:
    return JsonSettingsStore(tmp_path / "config" / "settings.json")


@pytest.fixture
def make_response():
    """Build a fake requests.Response with a status and JSON body."""
    def _make(status_code: int = 200, body=None, json_error: bool = False) -> Mock:
        resp = Mock()
        resp.status_code = status_code
        if json_error:
            resp.json.side_effect = ValueError("Expecting value")
        else:
            resp.json.return_value = body
        return resp
    return _make
