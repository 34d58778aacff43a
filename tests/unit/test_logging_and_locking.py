"""Unit tests for logging setup and the reader/writer lock."""

import json
import logging
import threading
import time

import pytest
import structlog

from discovery_tree.core.config import LoggingConfig
from discovery_tree.core.locking import ReadWriteLock
from discovery_tree.core.logging import (
    configure_logging,
    get_logger,
    install_default_logging,
    resolve_level,
)
from discovery_tree.storage import FileTaskRepository
from discovery_tree.tasks import Task


@pytest.fixture
def restore_structlog():
    yield
    structlog.reset_defaults()
    logger = logging.getLogger("discovery_tree")
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
    logger.setLevel(logging.NOTSET)
    install_default_logging()


def stream_handlers(logger):
    return [h for h in logger.handlers if isinstance(h, logging.StreamHandler)]


class TestLogging:
    """Test cases for logging configuration."""

    @pytest.mark.parametrize(
        "name, level",
        [("debug", logging.DEBUG), ("info", logging.INFO), ("warn", logging.WARNING),
         ("error", logging.ERROR), ("WARN", logging.WARNING), ("bogus", logging.INFO)],
    )
    def test_resolve_level(self, name, level):
        assert resolve_level(name) == level

    def test_configure_installs_handler(self, restore_structlog):
        configure_logging(LoggingConfig(level="warn"))

        logger = logging.getLogger("discovery_tree")
        assert len(stream_handlers(logger)) == 1
        assert logger.level == logging.WARNING

    def test_reconfigure_does_not_duplicate_handlers(self, restore_structlog):
        configure_logging(LoggingConfig(level="info"))
        configure_logging(LoggingConfig(level="debug"))

        assert len(stream_handlers(logging.getLogger("discovery_tree"))) == 1

    def test_json_output(self, restore_structlog, capsys):
        configure_logging(LoggingConfig(level="info", format="json", include_timestamps=False))

        get_logger("tests").info("Task created", task_id="abc")

        lines = [line for line in capsys.readouterr().err.splitlines() if line.strip()]
        event = json.loads(lines[-1])
        assert event["event"] == "Task created"
        assert event["component"] == "tests"
        assert event["task_id"] == "abc"
        assert event["level"] == "info"
        assert "timestamp" not in event

    def test_quiet_until_configured(self, restore_structlog, capsys, data_file):
        structlog.reset_defaults()
        install_default_logging()

        FileTaskRepository(data_file).save(Task.new("Project"))

        captured = capsys.readouterr()
        assert captured.out == ""
        assert captured.err == ""

    def test_host_structlog_setup_kept(self, restore_structlog):
        structlog.configure(processors=[structlog.processors.JSONRenderer()])
        install_default_logging()

        assert isinstance(structlog.get_config()["processors"][0], structlog.processors.JSONRenderer)

    def test_level_filtering(self, restore_structlog, capsys):
        configure_logging(LoggingConfig(level="error", format="json"))

        get_logger("tests").info("hidden")

        assert "hidden" not in capsys.readouterr().err


class TestReadWriteLock:
    """Test cases for ReadWriteLock."""

    def test_readers_share_the_lock(self):
        lock = ReadWriteLock()
        inside = threading.Barrier(2, timeout=5)
        passed = []

        def reader():
            with lock.read_lock():
                inside.wait()
                passed.append(True)

        threads = [threading.Thread(target=reader) for _ in range(2)]
        for thread in threads:
            thread.start()
        for thread in threads:
            thread.join(timeout=5)

        assert passed == [True, True]

    def test_writer_excludes_readers(self):
        lock = ReadWriteLock()
        events = []
        writer_inside = threading.Event()

        def writer():
            with lock.write_lock():
                writer_inside.set()
                time.sleep(0.05)
                events.append("write-done")

        def reader():
            writer_inside.wait(timeout=5)
            with lock.read_lock():
                events.append("read")

        threads = [threading.Thread(target=writer), threading.Thread(target=reader)]
        for thread in threads:
            thread.start()
        for thread in threads:
            thread.join(timeout=5)

        assert events == ["write-done", "read"]

    def test_lock_released_on_error(self):
        lock = ReadWriteLock()

        with pytest.raises(RuntimeError):
            with lock.write_lock():
                raise RuntimeError("boom")

        with lock.write_lock():
            pass
        with lock.read_lock():
            pass
