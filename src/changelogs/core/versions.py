"""
Game Versions
=============

Semantic-version parsing and ordering for version directory names.

Directory names may carry a leading ``v`` or ``=`` (``v1.2.3``), which is
dropped before parsing so that ``v1.2.3`` and ``1.2.3`` normalize to the same
version.
"""

from __future__ import annotations

import logging
from typing import Iterable, Optional

from semver import Version

logger = logging.getLogger(__name__)


def parse_version(name: str) -> Optional[Version]:
    """
    Parse a directory name as a semantic version.

    Args:
        name: Directory base name

    Returns:
        The parsed version, or None if the name is not a valid semantic version
    """
    candidate = name.strip()
    if candidate[:1] in ("v", "="):
        candidate = candidate[1:]
    try:
        return Version.parse(candidate)
    except (ValueError, TypeError):
        return None


def normalize_version(name: str) -> Optional[str]:
    """Canonical string form of ``name``, or None if it does not parse."""
    parsed = parse_version(name)
    return str(parsed) if parsed is not None else None


def compare_versions(left: str, right: str) -> int:
    """
    Compare two version names by semantic-version precedence.

    Returns:
        -1, 0 or 1

    Raises:
        ValueError: If either name is not a valid semantic version
    """
    left_version = parse_version(left)
    right_version = parse_version(right)
    if left_version is None or right_version is None:
        raise ValueError(f"Cannot compare non-semantic versions: {left!r}, {right!r}")
    return left_version.compare(right_version)


def find_latest_version(versions: Iterable[str]) -> Optional[str]:
    """
    Return the highest version in ``versions``.

    Only a strictly greater version replaces the current candidate, so the
    first of several equal versions wins. Returns None for an empty input.
    """
    latest: Optional[str] = None
    for version in versions:
        if latest is None or compare_versions(version, latest) > 0:
            latest = version
    return latest
