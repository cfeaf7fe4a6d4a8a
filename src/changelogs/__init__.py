"""
Changelog Server - plain-text mod changelogs over HTTP

Serves ``<root>/<version>/<modid>.txt`` at ``/<modid>/<version>``, with
``/<modid>`` aliased to the highest known version.
"""

__version__ = "1.0.0"

from changelogs.config import ChangelogSettings, get_settings
from changelogs.core import ChangelogCache, ChangelogCatalog, build_changelog_path, build_route
from changelogs.server import create_app, start_server

__all__ = [
    "ChangelogSettings",
    "get_settings",
    "ChangelogCache",
    "ChangelogCatalog",
    "build_changelog_path",
    "build_route",
    "create_app",
    "start_server",
]
