"""
Structured logging for the container.

Modules obtain a logger with ``get_logger(__name__)``; events are rendered as
key/value pairs by structlog and handed to the stdlib logger of the same name,
so applications control levels and handlers through ``logging`` as usual.
``setup_logging`` installs the handlers for applications that want wirebox to
do it for them.
"""
import logging
import os
from logging.handlers import RotatingFileHandler
from typing import TYPE_CHECKING, Optional

import structlog

if TYPE_CHECKING:
    from wirebox.config.schemas import LoggingConfig

LOG_FORMAT = "%(asctime)s - %(levelname)s - %(name)s [%(caller_info)s] - %(message)s"

_PROCESSORS = [
    structlog.stdlib.filter_by_level,
    structlog.stdlib.PositionalArgumentsFormatter(),
    structlog.processors.StackInfoRenderer(),
    structlog.processors.format_exc_info,
    structlog.processors.UnicodeDecoder(),
    structlog.processors.KeyValueRenderer(key_order=["event"], drop_missing=True),
]


class DetailedFormatter(logging.Formatter):
    """Formatter that adds module, function and line number to each record."""

    def format(self, record):
        record.caller_info = f"{record.module}.{record.funcName}:{record.lineno}"
        return super().format(record)


def get_logger(name: str) -> structlog.stdlib.BoundLogger:
    """
    Get a structured logger backed by the stdlib logger ``name``.

    Args:
        name: Logger name, normally ``__name__``

    Returns:
        Bound logger accepting key/value context
    """
    return structlog.wrap_logger(
        logging.getLogger(name),
        processors=_PROCESSORS,
        wrapper_class=structlog.stdlib.BoundLogger,
    )


def setup_logging(config: Optional["LoggingConfig"] = None) -> structlog.stdlib.BoundLogger:
    """
    Set up logging handlers for the application.

    Args:
        config: Logging configuration. If None, defaults are used.

    Returns:
        Logger for the ``wirebox`` namespace.
    """
    from wirebox.config.schemas import LoggingConfig

    if config is None:
        config = LoggingConfig()

    root_logger = logging.getLogger()
    root_logger.setLevel(getattr(logging, config.level))

    handlers = []

    if config.destination in ("file", "both"):
        log_path = os.path.expandvars(config.file.path)
        log_dir = os.path.dirname(log_path)
        if log_dir:
            os.makedirs(log_dir, exist_ok=True)
        file_handler = RotatingFileHandler(
            log_path,
            maxBytes=config.file.max_size_mb * 1024 * 1024,
            backupCount=config.file.backup_count,
        )
        file_handler.setFormatter(DetailedFormatter(LOG_FORMAT))
        handlers.append(file_handler)

    if config.destination in ("stdout", "both"):
        console_handler = logging.StreamHandler()
        console_handler.setFormatter(DetailedFormatter(LOG_FORMAT))
        handlers.append(console_handler)

    # Remove any existing handlers and add new ones
    for handler in root_logger.handlers[:]:
        root_logger.removeHandler(handler)

    for handler in handlers:
        root_logger.addHandler(handler)

    logger = get_logger("wirebox")
    logger.debug("Logging configured", log_level=config.level, log_destination=config.destination)
    return logger
