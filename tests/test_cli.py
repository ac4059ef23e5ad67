"""Tests for the snippetbox command: env loading, logging, start-up checks."""

import argparse
import logging
import os
import sys

import pytest

import snippetbox.cli
from snippetbox.cli import configure_logging, load_env
from snippetbox.cli._logging import LOG_FORMAT
from snippetbox.cli._run import build_app, run_server
from snippetbox.config import AppConfig

_VARS = ("SNIPPETBOX_ADDR", "SNIPPETBOX_DSN", "SNIPPETBOX_ENV", "SNIPPETBOX_DEBUG")


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    """Guarantee the variables a .env file may set are gone after each test."""
    for name in _VARS:
        monkeypatch.setenv(name, "")
        monkeypatch.delenv(name)


@pytest.fixture
def cli_logger():
    """A private logger so the root logger stays untouched."""
    logger = logging.getLogger("tests.cli.configure")
    yield logger
    logger.handlers.clear()


@pytest.fixture
def quiet_logging(monkeypatch):
    monkeypatch.setattr("snippetbox.cli._run.configure_logging", lambda *args, **kwargs: None)


class TestLoadEnv:
    def test_loads_environment_specific_file(self, tmp_path) -> None:
        (tmp_path / ".env.development").write_text("SNIPPETBOX_ADDR=:5000\n")
        (tmp_path / ".env").write_text("SNIPPETBOX_ADDR=:6000\n")
        assert load_env(tmp_path) == tmp_path / ".env.development"
        assert os.environ["SNIPPETBOX_ADDR"] == ":5000"

    def test_env_name_selects_file(self, tmp_path, monkeypatch) -> None:
        monkeypatch.setenv("SNIPPETBOX_ENV", "production")
        (tmp_path / ".env.production").write_text("SNIPPETBOX_DSN=sqlite:///prod.db\n")
        assert load_env(tmp_path) == tmp_path / ".env.production"
        assert os.environ["SNIPPETBOX_DSN"] == "sqlite:///prod.db"

    def test_falls_back_to_dotenv(self, tmp_path) -> None:
        (tmp_path / ".env").write_text("SNIPPETBOX_ADDR=:6000\n")
        assert load_env(tmp_path) == tmp_path / ".env"
        assert os.environ["SNIPPETBOX_ADDR"] == ":6000"

    def test_process_environment_wins(self, tmp_path, monkeypatch) -> None:
        monkeypatch.setenv("SNIPPETBOX_ADDR", ":7000")
        (tmp_path / ".env").write_text("SNIPPETBOX_ADDR=:6000\n")
        load_env(tmp_path)
        assert os.environ["SNIPPETBOX_ADDR"] == ":7000"

    def test_missing_file_warns(self, tmp_path, caplog) -> None:
        with caplog.at_level(logging.WARNING, logger="snippetbox.cli"):
            assert load_env(tmp_path) is None
        assert any("no .env file found" in r.getMessage() for r in caplog.records)


class TestConfigureLogging:
    def test_single_stdout_handler(self, cli_logger) -> None:
        configure_logging("debug", cli_logger)
        handler = configure_logging("info", cli_logger)
        assert cli_logger.handlers == [handler]
        assert cli_logger.level == logging.INFO
        assert isinstance(handler, logging.StreamHandler)
        assert handler.stream is sys.stdout

    def test_text_format(self, cli_logger) -> None:
        handler = configure_logging(logging.INFO, cli_logger)
        record = logging.LogRecord("snippetbox", logging.INFO, __file__, 1, "starting server", None, None)
        line = handler.format(record)
        assert handler.formatter is not None
        assert handler.formatter._fmt == LOG_FORMAT
        assert " level=INFO msg=starting server" in line
        assert line.startswith("time=")


def _args(**overrides) -> argparse.Namespace:
    values = {"addr": ":4000", "dsn": "sqlite:///:memory:", "debug": False}
    values.update(overrides)
    return argparse.Namespace(**values)


class TestBuildApp:
    def test_flags_override_config(self) -> None:
        app = build_app(_args(addr="127.0.0.1:9999", dsn="sqlite:///x.db", debug=True), AppConfig())
        assert (app.config.host, app.config.port) == ("127.0.0.1", 9999)
        assert app.config.dsn == "sqlite:///x.db"
        assert app.config.log_level == "debug"
        assert app.db.driver == "sqlite"


class TestRunServer:
    def test_bad_addr_exits_1(self, quiet_logging) -> None:
        with pytest.raises(SystemExit) as exc_info:
            run_server(_args(addr="nope"), AppConfig())
        assert exc_info.value.code == 1

    def test_startup_failure_exits_1_before_serving(self, tmp_path, monkeypatch, quiet_logging) -> None:
        served: list[object] = []
        monkeypatch.setattr("snippetbox.app.App.run", lambda self: served.append(self))
        config = AppConfig(template_dir=tmp_path / "missing")

        with pytest.raises(SystemExit) as exc_info:
            run_server(_args(dsn=f"sqlite:///{tmp_path / 'cli.db'}"), config)

        assert exc_info.value.code == 1
        assert served == []

    def test_serves_after_successful_checks(self, tmp_path, monkeypatch, quiet_logging) -> None:
        served: list[object] = []
        monkeypatch.setattr("snippetbox.app.App.run", lambda self: served.append(self))

        run_server(_args(dsn=f"sqlite:///{tmp_path / 'cli.db'}"), AppConfig())

        assert len(served) == 1
        assert (tmp_path / "cli.db").exists()


class TestMain:
    def test_defaults_come_from_dotenv(self, tmp_path, monkeypatch) -> None:
        monkeypatch.chdir(tmp_path)
        (tmp_path / ".env").write_text("SNIPPETBOX_ADDR=127.0.0.1:4321\nSNIPPETBOX_DSN=sqlite:///env.db\n")
        captured: dict[str, object] = {}

        def fake_run(args, config, *, env_file=None):
            captured.update(args=args, config=config, env_file=env_file)

        monkeypatch.setattr(snippetbox.cli, "run_server", fake_run)
        snippetbox.cli.main([])

        args = captured["args"]
        assert args.addr == "127.0.0.1:4321"
        assert args.dsn == "sqlite:///env.db"
        assert args.debug is False
        assert captured["env_file"].name == ".env"

    def test_flags_win_over_environment(self, tmp_path, monkeypatch) -> None:
        monkeypatch.chdir(tmp_path)
        monkeypatch.setenv("SNIPPETBOX_ADDR", ":5000")
        captured: dict[str, object] = {}
        monkeypatch.setattr(snippetbox.cli, "run_server", lambda args, config, **kw: captured.update(args=args))

        snippetbox.cli.main(["--addr", ":6000", "--debug"])

        assert captured["args"].addr == ":6000"
        assert captured["args"].debug is True
