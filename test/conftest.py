import json
from pathlib import Path

import pytest
from fastapi.testclient import TestClient

from config import Settings
from main import create_app


@pytest.fixture
def settings(tmp_path: Path) -> Settings:
    """Settings rooted in a fresh temporary directory, with no static front-end."""
    return Settings(data_dir=tmp_path / "data", static_dir=tmp_path / "no-static")


@pytest.fixture
def tasks_file(settings: Settings) -> Path:
    return settings.tasks_file


@pytest.fixture
def read_document(tasks_file: Path):
    """Returns a callable that parses the tasks file as it is on disk right now."""
    def _read():
        return json.loads(tasks_file.read_text(encoding="utf-8"))
    return _read


@pytest.fixture
def client(settings: Settings):
    # Entering the client runs the lifespan, which initializes the store.
    with TestClient(create_app(settings=settings)) as test_client:
        yield test_client
