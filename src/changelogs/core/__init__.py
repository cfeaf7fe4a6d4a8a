"""
Changelog discovery, loading and version resolution.

Nothing in this package depends on the HTTP layer.
"""

from .catalog import ChangelogCatalog, EndpointRegistrar, is_changelog_file, is_valid_mod_id
from .loader import ChangelogCache, missing_changelog_message, strip_build_metadata
from .paths import LATEST, build_changelog_path, build_route
from .versions import compare_versions, find_latest_version, normalize_version, parse_version

__all__ = [
    "ChangelogCatalog",
    "EndpointRegistrar",
    "ChangelogCache",
    "LATEST",
    "build_changelog_path",
    "build_route",
    "compare_versions",
    "find_latest_version",
    "is_changelog_file",
    "is_valid_mod_id",
    "missing_changelog_message",
    "normalize_version",
    "parse_version",
    "strip_build_metadata",
]
