"""Logging setup for the net-worth reporter.

Everything logs under the ``networth_reporter`` logger. The CLI calls
setup_logging() once, after settings are loaded, so the log file named in
settings.yaml is the only one ever created.
"""

import logging
import sys
import time
from pathlib import Path

DEFAULT_LOG_FILE = "networth_reporter.log"
PACKAGE_LOGGER = "networth_reporter"

# Context keys masked in LogContext output
SENSITIVE_FIELDS = {"account_number", "accountnumber", "token", "api_key", "secret", "user_id"}

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"


def _mask(context: dict[str, object]) -> dict[str, object]:
    return {k: "***" if k.lower() in SENSITIVE_FIELDS else v for k, v in context.items()}


def setup_logging(
    level: str = "INFO",
    log_file: str | Path | None = None,
    console_output: bool = True,
) -> logging.Logger:
    """Attach handlers to the package logger.

    Any handlers from an earlier call are closed and replaced.

    Args:
        level: Log level name; unknown names fall back to INFO.
        log_file: File to append records to, or None for no file.
        console_output: Whether to echo records to stderr.

    Returns:
        The package logger.
    """
    numeric_level = getattr(logging, level.upper(), logging.INFO)

    logger = logging.getLogger(PACKAGE_LOGGER)
    logger.setLevel(numeric_level)
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()

    formatter = logging.Formatter(LOG_FORMAT, datefmt=DATE_FORMAT)
    handlers: list[logging.Handler] = []
    if log_file is not None:
        handlers.append(logging.FileHandler(Path(log_file), encoding="utf-8"))
    if console_output:
        handlers.append(logging.StreamHandler(sys.stderr))
    if not handlers:
        handlers.append(logging.NullHandler())

    for handler in handlers:
        handler.setLevel(numeric_level)
        handler.setFormatter(formatter)
        logger.addHandler(handler)

    return logger


def get_logger(name: str) -> logging.Logger:
    """Logger for a module, nested under the package logger."""
    if name == PACKAGE_LOGGER or name.startswith(PACKAGE_LOGGER + "."):
        return logging.getLogger(name)
    return logging.getLogger(f"{PACKAGE_LOGGER}.{name}")


class LogContext:
    """Logs how long an operation took, or why it failed.

    Usage::

        with LogContext(logger, "report generation", range="6m"):
            ...
    """

    def __init__(self, logger: logging.Logger, operation: str, **context: object):
        self.logger = logger
        self.operation = operation
        self.context = context
        self.started = 0.0

    def __enter__(self) -> "LogContext":
        details = ", ".join(f"{k}={v}" for k, v in _mask(self.context).items())
        self.logger.debug(f"Starting {self.operation}" + (f" ({details})" if details else ""))
        self.started = time.perf_counter()
        return self

    def __exit__(
        self,
        exc_type: type | None,
        exc_val: BaseException | None,
        exc_tb: object | None,
    ) -> bool:
        elapsed = time.perf_counter() - self.started
        if exc_type is not None:
            self.logger.error(
                f"{self.operation} failed after {elapsed:.2f}s: {exc_type.__name__}: {exc_val}",
                exc_info=True,
            )
        else:
            self.logger.debug(f"Finished {self.operation} in {elapsed:.2f}s")
        return False
