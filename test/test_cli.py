import json

import cli


def test_init_creates_the_document(tmp_path, capsys):
    data_dir = tmp_path / "data"

    assert cli.main(["init", "--data-dir", str(data_dir)]) == 0

    assert json.loads((data_dir / "tasks.txt").read_text(encoding="utf-8")) == []
    assert "Task storage ready" in capsys.readouterr().out


def test_init_fails_on_corrupt_document(tmp_path):
    (tmp_path / "tasks.txt").write_text("{", encoding="utf-8")

    assert cli.main(["init", "--data-dir", str(tmp_path)]) == 1


def test_list_prints_stored_tasks(tmp_path, capsys):
    tasks = [{"id": "1", "title": "A", "quadrant": "urgent"}]
    (tmp_path / "tasks.txt").write_text(json.dumps(tasks), encoding="utf-8")

    assert cli.main(["list", "--data-dir", str(tmp_path)]) == 0

    assert json.loads(capsys.readouterr().out) == tasks


def test_serve_refuses_to_start_on_corrupt_document(tmp_path, monkeypatch):
    (tmp_path / "tasks.txt").write_text("[1]", encoding="utf-8")
    monkeypatch.setattr(cli.uvicorn, "run", lambda *args, **kwargs: _refuse_to_serve())

    assert cli.main(["serve", "--data-dir", str(tmp_path)]) == 1


def _refuse_to_serve():
    raise AssertionError("server should not have started")


def test_port_zero_overrides_environment(monkeypatch):
    monkeypatch.setenv("TASKS_PORT", "8080")
    args = cli.build_parser().parse_args(["serve", "--port", "0"])

    assert cli.apply_overrides(cli.load_settings(), args).port == 0
