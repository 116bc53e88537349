"""
Centralized logging configuration for the quiesce CLI.

setup_logging configures:
- Console output (operator-facing messages only in user-friendly mode)
- File output to <log_dir>/{service_name}.log
- Fresh log file on each run unless QUIESCE_LOG_APPEND is set
"""

import logging
import logging.handlers
import sys
import threading
from pathlib import Path
from typing import Optional

from quiesce.config import env_bool
from quiesce.config.settings import DEFAULT_LOG_DIR

# Thread-safe lock for logging configuration
_config_lock = threading.Lock()
_MODULE_LOGGER = logging.getLogger(__name__)
_TECHNICAL_FORMAT = "%(asctime)s.%(msecs)03d - %(name)s - %(levelname)s - %(message)s"
_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"


def _close_handlers(logger: logging.Logger) -> None:
    for handler in list(logger.handlers):
        try:
            handler.close()
        except OSError as exc:
            _MODULE_LOGGER.debug("Handler close failed: %s", exc)
    logger.handlers = []


def _build_console_handler(user_friendly: bool, verbose: bool) -> logging.Handler:
    if user_friendly:
        formatter = logging.Formatter("%(message)s")
    else:
        formatter = logging.Formatter(_TECHNICAL_FORMAT, _DATE_FORMAT)

    console_handler = logging.StreamHandler(sys.stderr)
    console_handler.setFormatter(formatter)
    if verbose:
        console_handler.setLevel(logging.DEBUG)
    elif user_friendly:
        console_handler.setLevel(logging.WARNING)
    else:
        console_handler.setLevel(logging.INFO)
    return console_handler


def _build_file_handler(service_name: Optional[str], log_dir: Path) -> Optional[logging.Handler]:
    if not service_name:
        return None

    try:
        log_dir.mkdir(parents=True, exist_ok=True)
    except OSError as exc:
        _MODULE_LOGGER.warning("Cannot create log directory %s: %s", log_dir, exc)
        return None

    file_mode = "a" if env_bool("QUIESCE_LOG_APPEND", or_value=False) else "w"
    handler_cls = getattr(logging.handlers, "WatchedFileHandler", logging.FileHandler)
    file_handler = handler_cls(log_dir / f"{service_name}.log", mode=file_mode)
    file_handler.setFormatter(logging.Formatter(_TECHNICAL_FORMAT, _DATE_FORMAT))
    file_handler.setLevel(logging.DEBUG)
    return file_handler


def setup_logging(
    service_name: Optional[str] = None,
    user_friendly: bool = False,
    *,
    log_dir: Path = DEFAULT_LOG_DIR,
    verbose: bool = False,
) -> None:
    """Configure root logging for a quiesce run."""

    with _config_lock:
        root_logger = logging.getLogger()
        _close_handlers(root_logger)

        root_logger.addHandler(_build_console_handler(user_friendly, verbose))
        file_handler = _build_file_handler(service_name, log_dir)
        if file_handler:
            root_logger.addHandler(file_handler)

        root_logger.setLevel(logging.DEBUG)


__all__ = ["setup_logging"]
