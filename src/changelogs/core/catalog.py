"""
Changelog Catalog
=================

Discovers changelog files on disk and hands each one to a route registrar.

Expected layout::

    <root>/<version>/<modid>.txt

where ``<version>`` is a directory whose name parses as a semantic version.
A scan walks every version directory, registers one endpoint per changelog
file, and finally registers an unversioned alias per mod pointing at the
highest known version.

Usage:
    catalog = ChangelogCatalog(root, registrar)
    catalog.scan()
"""

from __future__ import annotations

import logging
import re
from pathlib import Path
from typing import Optional, Protocol

from .loader import ChangelogCache
from .paths import CHANGELOG_SUFFIX, LATEST, build_route, is_regular_file
from .versions import find_latest_version, normalize_version

logger = logging.getLogger(__name__)

# Characters that would turn a route into a template or an extra segment
_UNSAFE_MOD_ID = re.compile(r"[/{}\\]")


class EndpointRegistrar(Protocol):
    def register(self, route: str, body: str) -> bool: ...


def is_valid_mod_id(mod_id: str) -> bool:
    """Check that a file stem can be used as a single route segment."""
    return bool(mod_id) and mod_id not in (".", "..") and not _UNSAFE_MOD_ID.search(mod_id)


def is_changelog_file(path: Path) -> bool:
    """Keep regular ``.txt`` files whose stem is a usable mod id."""
    return (
        path.suffix == CHANGELOG_SUFFIX
        and is_regular_file(path)
        and is_valid_mod_id(path.stem)
    )


class ChangelogCatalog:
    """
    All state discovered by one scan of a changelog root.

    Attributes:
        root: Directory containing version directories
        registrar: Receives every (route, body) pair
        cache: Loaded changelog text
        mod_ids: Discovered mod ids, in discovery order
        versions: Discovered version directory names keyed by normalized version
    """

    def __init__(self, root: Path, registrar: EndpointRegistrar):
        self.root = root
        self.registrar = registrar
        self.cache = ChangelogCache(root)
        self.mod_ids: dict[str, None] = {}
        self.versions: dict[str, str] = {}
        self.latest_version: Optional[str] = None

    # ------------------------------------------------------------------
    # Bootstrap
    # ------------------------------------------------------------------

    def scan(self) -> "ChangelogCatalog":
        """
        Discover every changelog under the root and register its endpoints.

        Raises:
            OSError: If the root cannot be listed or a changelog cannot be read
        """
        for entry in sorted(self.root.iterdir()):
            self.discover_version(entry)
        self.setup_latest_routes()
        return self

    def discover_version(self, path: Path) -> bool:
        """
        Scan ``path`` if it is a version directory not seen before.

        Returns:
            True if the directory was scanned
        """
        if not path.is_dir():
            return False

        version = path.name
        normalized = normalize_version(version)
        if normalized is None:
            return False
        if normalized in self.versions:
            logger.debug("Skipping %s, version %s already known", path, normalized)
            return False

        logger.info("Found game version: %s", version)
        self.versions[normalized] = version

        for entry in sorted(path.iterdir()):
            self.discover_mod(entry, version)
        return True

    def discover_mod(self, path: Path, version: str) -> bool:
        """Register the endpoint for one changelog file in a version directory."""
        if not is_changelog_file(path):
            logger.debug("Ignoring non-changelog entry %s", path)
            return False

        mod_id = path.stem
        self.mod_ids.setdefault(mod_id, None)
        changelog = self.cache.get_or_load(mod_id, version)
        self.registrar.register(build_route(mod_id, version), changelog)
        return True

    # ------------------------------------------------------------------
    # Latest alias
    # ------------------------------------------------------------------

    def find_latest_version(self) -> Optional[str]:
        return find_latest_version(self.versions.values())

    def setup_latest_routes(self) -> Optional[str]:
        """Register ``/<mod_id>`` for every known mod using the latest version."""
        latest = self.find_latest_version()
        self.latest_version = latest
        logger.info("Latest version: %s", latest)
        if latest is None:
            return None

        for mod_id in self.mod_ids:
            changelog = self.cache.get_or_load(mod_id, latest, latest=True)
            self.registrar.register(build_route(mod_id, LATEST), changelog)
        return latest

    # ------------------------------------------------------------------
    # Lookups
    # ------------------------------------------------------------------

    def has_mod(self, mod_id: str) -> bool:
        return mod_id in self.mod_ids
