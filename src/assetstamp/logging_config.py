"""
Logging configuration for assetstamp.

Configures the ``assetstamp`` logger hierarchy from settings: a console
handler on stderr (stdout stays clean for command output) and an optional
rotating file per context (cli, api). ``log_format=json`` renders records
through structlog's JSON renderer.
"""

import logging
import logging.handlers
import sys
from typing import Optional

import structlog

from assetstamp.config import Settings, settings

LOGGER_NAME = "assetstamp"

STANDARD_FORMAT = "[%(asctime)s] [%(levelname)s] %(name)s: %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"


def json_formatter(context: str = "") -> logging.Formatter:
    """
    Build a formatter rendering stdlib records as single-line JSON.

    Each line carries ``timestamp``, ``level``, ``logger``, ``event`` and,
    when given, ``context``; tracebacks land under ``exception``.
    """

    def add_context(logger, method_name, event_dict):
        event_dict["context"] = context
        return event_dict

    pre_chain = [
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        structlog.processors.TimeStamper(fmt="iso", utc=True),
    ]
    if context:
        pre_chain.append(add_context)

    return structlog.stdlib.ProcessorFormatter(
        foreign_pre_chain=pre_chain,
        processors=[
            structlog.stdlib.ProcessorFormatter.remove_processors_meta,
            structlog.processors.format_exc_info,
            structlog.processors.JSONRenderer(),
        ],
    )


def _formatter(config: Settings, context: str) -> logging.Formatter:
    if config.log_format.lower() == "json":
        return json_formatter(context=context)
    return logging.Formatter(fmt=STANDARD_FORMAT, datefmt=DATE_FORMAT)


def setup_logging(context: str = "app", config: Optional[Settings] = None) -> logging.Logger:
    """
    Configure assetstamp logging.

    Safe to call repeatedly: handlers installed by a previous call are
    replaced, never duplicated.

    Args:
        context: Name of the running surface, used for the log file name
        config: Settings to use (default: global settings)

    Returns:
        The configured ``assetstamp`` logger

    Raises:
        PermissionError: If file logging is enabled and the log directory
            cannot be created
    """
    config = config or settings
    logger = logging.getLogger(LOGGER_NAME)

    for handler in list(logger.handlers):
        if getattr(handler, "_assetstamp_handler", False):
            logger.removeHandler(handler)
            handler.close()

    level = logging.getLevelName(config.log_level.upper())
    if not isinstance(level, int):
        level = logging.INFO
    logger.setLevel(level)

    formatter = _formatter(config, context)

    if config.log_console_enabled:
        console_handler = logging.StreamHandler(sys.stderr)
        console_handler.setFormatter(formatter)
        console_handler._assetstamp_handler = True  # type: ignore[attr-defined]
        logger.addHandler(console_handler)

    if config.log_file_enabled:
        log_dir = config.log_directory
        log_dir.mkdir(parents=True, exist_ok=True)

        file_handler = logging.handlers.RotatingFileHandler(
            log_dir / f"{context}.log",
            maxBytes=config.log_max_bytes,
            backupCount=config.log_backup_count,
            encoding="utf-8",
        )
        file_handler.setFormatter(formatter)
        file_handler._assetstamp_handler = True  # type: ignore[attr-defined]
        logger.addHandler(file_handler)

    return logger
