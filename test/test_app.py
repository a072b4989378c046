import dataclasses

import pytest
from fastapi.testclient import TestClient

from config import Settings, load_settings
from errors import StorageInitError
from main import create_app


def test_startup_creates_the_document(settings, read_document):
    assert not settings.tasks_file.exists()

    with TestClient(create_app(settings=settings)):
        pass

    assert read_document() == []


def test_startup_aborts_on_unparseable_document(settings):
    settings.data_dir.mkdir(parents=True)
    settings.tasks_file.write_text("this is not json", encoding="utf-8")

    with pytest.raises(StorageInitError):
        with TestClient(create_app(settings=settings)):
            pass


def test_static_front_end_is_served(tmp_path, settings):
    static_dir = tmp_path / "static"
    static_dir.mkdir()
    (static_dir / "index.html").write_text("<h1>Quadrant Tasks</h1>", encoding="utf-8")
    settings = dataclasses.replace(settings, static_dir=static_dir)

    with TestClient(create_app(settings=settings)) as client:
        assert "Quadrant Tasks" in client.get("/").text
        assert client.get("/api/tasks").json() == []


def test_settings_from_environment(monkeypatch, tmp_path):
    monkeypatch.setenv("TASKS_DATA_DIR", str(tmp_path / "store"))
    monkeypatch.setenv("TASKS_FILE_NAME", "board.json")
    monkeypatch.setenv("TASKS_PORT", "8080")
    monkeypatch.setenv("TASKS_LOG_LEVEL", "debug")

    settings = load_settings()

    assert settings.tasks_file == tmp_path / "store" / "board.json"
    assert settings.port == 8080
    assert settings.log_level == "DEBUG"


def test_settings_ignore_invalid_port(monkeypatch):
    monkeypatch.setenv("TASKS_PORT", "not-a-port")

    assert load_settings().port == Settings().port
