from __future__ import annotations

import sys
from pathlib import Path

import pytest


def _ensure_project_root_on_path() -> None:
    """Guarantee the repository root is discoverable for absolute imports."""

    root = Path(__file__).resolve().parent.parent
    root_str = str(root)
    if root_str not in sys.path:
        sys.path.insert(0, root_str)


_ensure_project_root_on_path()

from app.config import reset_app_config_cache  # noqa: E402
from services.server_update import http  # noqa: E402
from tests.unit.update_service_test_utils import FakeHttp  # noqa: E402


@pytest.fixture(autouse=True)
def _isolate_environment(monkeypatch: pytest.MonkeyPatch, tmp_path_factory: pytest.TempPathFactory):
    """Keep log files and HTTP overrides from leaking between tests."""

    log_dir = tmp_path_factory.mktemp("logs")
    monkeypatch.setenv("SERVER_UPDATER_LOG_DIR", str(log_dir))
    monkeypatch.delenv("SERVER_UPDATER_LOG_FILE", raising=False)
    monkeypatch.setattr(http, "_overrides", {})
    reset_app_config_cache()

    yield

    reset_app_config_cache()


@pytest.fixture
def fake_http(monkeypatch: pytest.MonkeyPatch) -> FakeHttp:
    fake = FakeHttp()
    monkeypatch.setattr("services.server_update.http.urlopen", fake.urlopen)
    return fake
