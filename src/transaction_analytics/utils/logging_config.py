"""Logging setup for the transaction analytics engine.

Every module logs through a child of the ``transaction_analytics`` logger,
so one call to ``setup_logging`` routes the whole package.
"""

import logging
import sys
import time
from pathlib import Path

ROOT_LOGGER_NAME = "transaction_analytics"

LOG_FORMAT = "%(asctime)s %(levelname)-8s %(name)s: %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"


def setup_logging(
    level: str = "INFO",
    log_file: str | None = None,
    console_output: bool = True,
) -> logging.Logger:
    """Route package logs to stderr and, optionally, a file.

    Calling it again replaces the previous handlers. With neither output
    enabled, records are discarded.

    Args:
        level: Level name; unknown names fall back to INFO.
        log_file: File to append to; its directory is created if missing.
        console_output: Whether to log to stderr.

    Returns:
        The package logger.
    """
    numeric_level = getattr(logging, level.upper(), logging.INFO)
    formatter = logging.Formatter(LOG_FORMAT, datefmt=DATE_FORMAT)

    handlers: list[logging.Handler] = []
    if log_file:
        log_path = Path(log_file)
        log_path.parent.mkdir(parents=True, exist_ok=True)
        handlers.append(logging.FileHandler(log_path, encoding="utf-8"))
    if console_output:
        handlers.append(logging.StreamHandler(sys.stderr))

    package_logger = logging.getLogger(ROOT_LOGGER_NAME)
    package_logger.setLevel(numeric_level)
    for old in list(package_logger.handlers):
        package_logger.removeHandler(old)
        old.close()

    for handler in handlers:
        handler.setFormatter(formatter)
        package_logger.addHandler(handler)
    if not handlers:
        package_logger.addHandler(logging.NullHandler())

    return package_logger


def get_logger(name: str) -> logging.Logger:
    """Return the logger for a module, placed under the package logger."""
    if name == ROOT_LOGGER_NAME or name.startswith(f"{ROOT_LOGGER_NAME}."):
        return logging.getLogger(name)
    return logging.getLogger(f"{ROOT_LOGGER_NAME}.{name}")


class LogContext:
    """Logs how long an operation took, or the exception that ended it.

    Exceptions are logged and then propagate.
    """

    def __init__(self, logger: logging.Logger, operation: str, **details: object):
        self.logger = logger
        self.operation = operation
        self.details = ", ".join(f"{k}={v}" for k, v in details.items())
        self.started = 0.0

    def __enter__(self) -> "LogContext":
        self.started = time.perf_counter()
        self.logger.debug(f"{self.operation} started ({self.details})")
        return self

    def __exit__(
        self,
        exc_type: type | None,
        exc_val: BaseException | None,
        exc_tb: object | None,
    ) -> bool:
        elapsed_ms = (time.perf_counter() - self.started) * 1000
        if exc_type is not None:
            self.logger.error(
                f"{self.operation} failed after {elapsed_ms:.1f} ms: "
                f"{exc_type.__name__}: {exc_val}"
            )
        else:
            self.logger.debug(f"{self.operation} finished in {elapsed_ms:.1f} ms ({self.details})")
        return False
