"""
Changelog Loader
================

Reads changelog files and keeps their text in memory after the first read.

The first line of every changelog is build metadata (the commit sha written
by the CI job that generated the file) and is never served.
"""

from __future__ import annotations

import logging
from pathlib import Path

from .paths import LATEST, build_changelog_path, is_regular_file

logger = logging.getLogger(__name__)

MISSING_CHANGELOG_TEMPLATE = "Missing changelog file for mod/version: {key}"


def missing_changelog_message(mod_id: str, version: str, latest: bool = False) -> str:
    """Placeholder body served when a changelog file does not exist."""
    key = f"{mod_id}-{LATEST}" if latest else f"{mod_id}-{version}"
    return MISSING_CHANGELOG_TEMPLATE.format(key=key)


def strip_build_metadata(text: str) -> str:
    """
    Drop the first line of ``text``.

    Files with zero or one lines produce an empty string.
    """
    lines = text.split("\n")
    return "\n".join(lines[1:])


class ChangelogCache:
    """
    Changelog text keyed by ``(mod_id, version)``.

    Entries are loaded on first request and never invalidated. Missing files
    are not cached, so a placeholder is rebuilt on every miss.
    """

    def __init__(self, root: Path):
        self.root = root
        self._entries: dict[tuple[str, str], str] = {}

    def __contains__(self, key: tuple[str, str]) -> bool:
        return key in self._entries

    def __len__(self) -> int:
        return len(self._entries)

    def get_or_load(self, mod_id: str, version: str, latest: bool = False) -> str:
        """
        Return the changelog for a mod at a version, loading it if needed.

        Args:
            mod_id: Mod identifier
            version: Version directory name
            latest: Request is for the latest alias (only changes placeholder wording)

        Returns:
            The changelog text without its first line, or a placeholder if the
            file does not exist

        Raises:
            OSError: If an existing file cannot be read
        """
        key = (mod_id, version)
        cached = self._entries.get(key)
        if cached is not None:
            return cached

        file_path = build_changelog_path(self.root, mod_id, version)
        if not is_regular_file(file_path):
            logger.debug("No changelog at %s", file_path)
            return missing_changelog_message(mod_id, version, latest=latest)

        # Decode bytes directly so carriage returns survive untouched; bad bytes become U+FFFD.
        data = file_path.read_bytes().decode("utf-8", errors="replace")
        changelog = strip_build_metadata(data)
        self._entries[key] = changelog
        return changelog
