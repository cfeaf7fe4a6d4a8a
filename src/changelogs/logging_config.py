"""
Logging Configuration
=====================

Centralized logging setup for the changelog server.

Usage:
    from changelogs.logging_config import setup_logging

    # At application startup
    setup_logging()

    # In modules
    logger = logging.getLogger(__name__)
    logger.info("Message")
"""

import logging
import sys
from contextvars import ContextVar
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import Optional, Union

from pythonjsonlogger import jsonlogger

MAX_LOG_SIZE = 10 * 1024 * 1024  # 10 MB
BACKUP_COUNT = 5

CONSOLE_FORMAT = "[%(levelname)s] %(name)s: %(message)s"
FILE_FORMAT = "%(asctime)s [%(levelname)s] %(name)s (%(request_id)s): %(message)s"
JSON_FORMAT = "%(asctime)s %(levelname)s %(name)s %(message)s %(request_id)s"

# contextvar for request ID
request_id_ctx: ContextVar[Optional[str]] = ContextVar("request_id", default=None)

# Track if logging has been configured
_logging_configured = False


class RequestIdFilter(logging.Filter):
    def filter(self, record: logging.LogRecord) -> bool:
        record.request_id = request_id_ctx.get()
        return True


def setup_logging(
    level: Union[int, str] = logging.INFO,
    json_logs: bool = False,
    log_file: Optional[Path] = None,
    force: bool = False,
) -> None:
    """
    Configure logging for the changelog server.

    Sets up:
    - StreamHandler on stderr, plain text or JSON
    - RotatingFileHandler when a log file is given
    - The same handlers for uvicorn's loggers

    Args:
        level: Root log level
        json_logs: Format records as JSON lines
        log_file: Optional path of a rotating log file
        force: Reconfigure even if logging was already set up
    """
    global _logging_configured

    if _logging_configured and not force:
        return

    request_filter = RequestIdFilter()
    handlers: list[logging.Handler] = []

    console_handler = logging.StreamHandler(sys.stderr)
    if json_logs:
        console_handler.setFormatter(jsonlogger.JsonFormatter(JSON_FORMAT))
    else:
        console_handler.setFormatter(logging.Formatter(CONSOLE_FORMAT))
    console_handler.addFilter(request_filter)
    handlers.append(console_handler)

    if log_file is not None:
        log_file.parent.mkdir(parents=True, exist_ok=True)
        file_handler = RotatingFileHandler(
            log_file,
            maxBytes=MAX_LOG_SIZE,
            backupCount=BACKUP_COUNT,
            encoding="utf-8",
        )
        file_handler.setFormatter(logging.Formatter(FILE_FORMAT))
        file_handler.addFilter(request_filter)
        handlers.append(file_handler)

    root_logger = logging.getLogger()
    root_logger.handlers = list(handlers)
    root_logger.setLevel(level)

    # Uvicorn loggers
    for name in ("uvicorn", "uvicorn.error", "uvicorn.access"):
        uvicorn_logger = logging.getLogger(name)
        uvicorn_logger.handlers = list(handlers)
        uvicorn_logger.propagate = False
        uvicorn_logger.setLevel(level)

    # Reduce noise from third-party libraries
    logging.getLogger("httpx").setLevel(logging.WARNING)
    logging.getLogger("httpcore").setLevel(logging.WARNING)
    logging.getLogger("asyncio").setLevel(logging.WARNING)

    _logging_configured = True

    logger = logging.getLogger(__name__)
    logger.debug("Logging initialized (json=%s, file=%s)", json_logs, log_file)

