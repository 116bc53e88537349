"""Tests for setup_logging."""

from __future__ import annotations

import logging

import pytest

from quiesce.config import QuiesceSettings
from quiesce.logging_config import setup_logging


@pytest.fixture
def restore_root_handlers():
    root = logging.getLogger()
    saved_handlers = list(root.handlers)
    saved_level = root.level
    yield root
    for handler in list(root.handlers):
        if handler not in saved_handlers:
            handler.close()
    root.handlers = saved_handlers
    root.setLevel(saved_level)


def test_user_friendly_console_and_file(restore_root_handlers, tmp_path):
    setup_logging("quiesce", user_friendly=True, log_dir=tmp_path / "logs")

    handlers = restore_root_handlers.handlers
    assert len(handlers) == 2
    console, file_handler = handlers
    assert console.level == logging.WARNING
    assert file_handler.level == logging.DEBUG

    logging.getLogger("quiesce.test").info("written to file only")
    file_handler.flush()
    assert "written to file only" in (tmp_path / "logs" / "quiesce.log").read_text()


def test_verbose_console_without_file(restore_root_handlers, tmp_path):
    setup_logging(verbose=True, log_dir=tmp_path)

    handlers = restore_root_handlers.handlers
    assert len(handlers) == 1
    assert handlers[0].level == logging.DEBUG


def test_log_file_is_truncated_unless_append(restore_root_handlers, tmp_path, monkeypatch):
    log_file = tmp_path / "quiesce.log"
    log_file.write_text("previous run\n")

    setup_logging("quiesce", log_dir=tmp_path)
    assert "previous run" not in log_file.read_text()

    log_file.write_text("previous run\n")
    monkeypatch.setenv("QUIESCE_LOG_APPEND", "1")
    setup_logging("quiesce", log_dir=tmp_path)
    assert "previous run" in log_file.read_text()


def test_other_library_loggers_keep_their_levels(restore_root_handlers, tmp_path):
    asyncio_logger = logging.getLogger("asyncio")
    saved_level = asyncio_logger.level
    asyncio_logger.setLevel(logging.NOTSET)
    try:
        setup_logging("quiesce", log_dir=tmp_path)

        assert asyncio_logger.level == logging.NOTSET
    finally:
        asyncio_logger.setLevel(saved_level)


def test_default_log_dir_matches_settings(restore_root_handlers, tmp_path):
    setup_logging("quiesce")

    assert (tmp_path / QuiesceSettings().log_dir / "quiesce.log").exists()
