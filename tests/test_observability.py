"""
Tests for logging setup and task status reporting.
"""

import logging
from pathlib import Path

import pytest

from deployer.core.observability.logging_config import resolve_level, setup_logging
from deployer.core.task import Task


@pytest.fixture(autouse=True)
def _restore_root_logger():
    root = logging.getLogger()
    handlers, level = root.handlers[:], root.level
    yield
    root.handlers[:] = handlers
    root.setLevel(level)


class TestResolveLevel:

    def test_flags_take_precedence(self, monkeypatch):
        monkeypatch.setenv("DEPLOYER_LOG_LEVEL", "ERROR")
        assert resolve_level(debug=True) == "DEBUG"
        assert resolve_level(verbose=True) == "INFO"
        assert resolve_level(quiet=True) == "ERROR"

    def test_env_fallback(self, monkeypatch):
        monkeypatch.setenv("DEPLOYER_LOG_LEVEL", "INFO")
        assert resolve_level() == "INFO"

    def test_default(self, monkeypatch):
        monkeypatch.delenv("DEPLOYER_LOG_LEVEL", raising=False)
        assert resolve_level() == "WARNING"


class TestSetupLogging:

    def test_console_level(self, monkeypatch):
        monkeypatch.delenv("DEPLOYER_LOG_FILE", raising=False)
        setup_logging("INFO")
        root = logging.getLogger()
        assert root.level == logging.INFO
        assert len(root.handlers) == 1

    def test_unknown_level_is_warning(self, monkeypatch):
        monkeypatch.delenv("DEPLOYER_LOG_FILE", raising=False)
        setup_logging("LOUD")
        assert logging.getLogger().level == logging.WARNING

    def test_file_handler_from_env(self, tmp_path: Path, monkeypatch):
        log_file = tmp_path / "deployer.log"
        monkeypatch.setenv("DEPLOYER_LOG_FILE", str(log_file))
        monkeypatch.setenv("DEPLOYER_LOG_FILE_LEVEL", "DEBUG")
        setup_logging("WARNING")

        root = logging.getLogger()
        assert root.level == logging.DEBUG
        assert any(isinstance(h, logging.FileHandler) for h in root.handlers)

        logging.getLogger("deployer.test").debug("to the file only")
        for handler in root.handlers:
            handler.flush()
        assert "to the file only" in log_file.read_text()
        for handler in root.handlers:
            handler.close()


class TestTask:

    def test_update_status_records_and_logs(self, caplog):
        task = Task(id="deploy-1")
        with caplog.at_level(logging.INFO, logger="deployer.core.task"):
            task.update_status("DEPLOY", "Beginning deployment of manifest...")
        assert task.messages == ["Beginning deployment of manifest..."]
        assert "deploy-1" in caplog.text

    def test_complete_and_fail(self):
        done = Task(id="a")
        done.complete("DEPLOY")
        assert done.completed and not done.failed

        broken = Task(id="b")
        broken.fail("DEPLOY", "E103: nope")
        assert broken.completed and broken.failed
        assert broken.to_dict()["history"][0]["status"] == "E103: nope"
