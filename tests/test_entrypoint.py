import pytest

from todo_server import __main__ as entrypoint


@pytest.fixture
def served(monkeypatch):
    calls = []

    def fake_run(app, **kwargs):
        calls.append((app, kwargs))

    monkeypatch.setattr(entrypoint.uvicorn, "run", fake_run)
    return calls


def test_port_defaults_to_8000():
    args = entrypoint.build_parser().parse_args([])
    assert args.port == 8000
    assert args.host == "0.0.0.0"


def test_port_must_be_numeric():
    with pytest.raises(SystemExit):
        entrypoint.build_parser().parse_args(["--port", "http"])


def test_starts_server_on_requested_port(monkeypatch, tmp_path, served):
    monkeypatch.setenv("DB_FILE", str(tmp_path / "todos.db"))

    assert entrypoint.main(["--port", "9001"]) == 0
    assert len(served) == 1
    app, kwargs = served[0]
    assert kwargs["port"] == 9001
    assert app.state.repository is not None
    assert (tmp_path / "todos.db").exists()


def test_database_failure_stops_startup(monkeypatch, tmp_path, served):
    monkeypatch.setenv("DB_FILE", str(tmp_path))

    assert entrypoint.main([]) == 1
    assert served == []


def test_server_failure_exits_non_zero(monkeypatch, tmp_path):
    monkeypatch.setenv("DB_FILE", str(tmp_path / "todos.db"))

    def failing_run(app, **kwargs):
        raise OSError("address already in use")

    monkeypatch.setattr(entrypoint.uvicorn, "run", failing_run)
    assert entrypoint.main([]) == 1
