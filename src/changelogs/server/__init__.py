"""
FastAPI Backend Server
======================

HTTP server for the changelog endpoints.
"""

import logging
import os
import sys
from typing import Optional

import uvicorn

from changelogs.config import ChangelogSettings, get_settings

from .main import create_app
from .registrar import RouteRegistrar

logger = logging.getLogger(__name__)


def start_server(settings: Optional[ChangelogSettings] = None) -> None:
    """
    Scan the changelog directory and serve it until interrupted.

    The scan runs before uvicorn binds the port; a scan failure propagates
    and nothing is served.

    Args:
        settings: Configuration (default: global settings)
    """
    if settings is None:
        settings = get_settings()

    app = create_app(settings)

    # Default: disable ANSI colors on Windows or when output is non-interactive.
    use_colors = None if (os.name != "nt" and sys.stderr.isatty()) else False

    logger.info("Listening on %s:%s", settings.host, settings.port)
    uvicorn.run(
        app,
        host=settings.host,
        port=settings.port,
        access_log=False,  # access lines come from the app's own middleware
        log_config=None,  # keep the handlers installed by setup_logging
        use_colors=use_colors,
    )


__all__ = ["create_app", "start_server", "RouteRegistrar"]
