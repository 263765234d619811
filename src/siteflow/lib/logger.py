"""
Dual-mode diagnostic logging for siteflow.

Provides human-readable console logs by default and JSON structured logs
for collection by log shippers. Diagnostic logs go to stderr so they never
mix with command output on stdout.
"""

import logging
import os
import sys

from pythonjsonlogger.json import JsonFormatter

DEFAULT_LOG_LEVEL = "WARNING"


def setup_logger(name: str = "siteflow", verbose: bool = False) -> logging.Logger:
    """
    Setup dual-mode logger for the CLI.

    Mode is determined by the SITEFLOW_LOG_FORMAT environment variable:
    - text: Human-readable console logging with timestamps (default)
    - json: JSON structured logging

    Parameters
    ----------
    name : str
        Logger name. Module loggers under this name inherit the handler.
    verbose : bool
        Force DEBUG level regardless of LOG_LEVEL.

    Returns
    -------
    logging.Logger
        Configured logger instance

    Examples
    --------
    >>> logger = setup_logger("siteflow", verbose=True)
    >>> logging.getLogger("siteflow.commands.workflows.api").debug("GET ...")

    Environment Variables
    ---------------------
    SITEFLOW_LOG_FORMAT : str
        Log format: "text" or "json" (default: text)
    LOG_LEVEL : str
        Logging level: DEBUG, INFO, WARNING, ERROR, CRITICAL (default: WARNING)
    """
    logger = logging.getLogger(name)

    if verbose:
        logger.setLevel(logging.DEBUG)
    else:
        log_level = os.getenv("LOG_LEVEL", DEFAULT_LOG_LEVEL).upper()
        logger.setLevel(getattr(logging, log_level, logging.WARNING))

    # Remove existing handlers to avoid duplicates if called multiple times
    logger.handlers.clear()

    handler = logging.StreamHandler(sys.stderr)
    handler.setLevel(logger.level)

    log_format = os.getenv("SITEFLOW_LOG_FORMAT", "text").lower()
    if log_format == "json":
        formatter = _create_json_formatter()
    else:
        formatter = _create_text_formatter()

    handler.setFormatter(formatter)
    logger.addHandler(handler)

    # Don't propagate to root logger (prevents duplicate logs)
    logger.propagate = False

    return logger


def _create_json_formatter() -> logging.Formatter:
    """
    Create JSON formatter.

    Uses python-json-logger so extra fields passed through
    ``logger.debug(..., extra={})`` land as top-level JSON keys.
    """

    class SeverityFormatter(JsonFormatter):
        def add_fields(self, log_record, record, message_dict):
            super().add_fields(log_record, record, message_dict)

            # Rename 'levelname' to 'severity' for log collectors
            if "levelname" in log_record:
                log_record["severity"] = log_record.pop("levelname")

    return SeverityFormatter(
        fmt="%(asctime)s %(name)s %(levelname)s %(message)s",
        datefmt="%Y-%m-%dT%H:%M:%S%z",
    )


def _create_text_formatter() -> logging.Formatter:
    """Create human-readable formatter for terminal use."""
    return logging.Formatter(
        fmt="%(asctime)s %(name)s %(levelname)s %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )
