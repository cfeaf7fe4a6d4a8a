"""Filesystem paths and route names for changelog files."""

from pathlib import Path
from typing import Final, Optional

CHANGELOG_SUFFIX: Final[str] = ".txt"

# Version token for the unversioned alias route
LATEST: Final[str] = "latest"


def build_changelog_path(root: Path, mod_id: str, version: str) -> Path:
    """Return ``<root>/<version>/<mod_id>.txt``. Does not touch the disk."""
    return root / version / f"{mod_id}{CHANGELOG_SUFFIX}"


def build_route(mod_id: str, version: Optional[str] = None) -> str:
    """
    Build the endpoint name for a mod at a version.

    The unversioned form doubles as the latest alias, so passing ``None`` or
    ``"latest"`` both yield ``/<mod_id>``.
    """
    if version and version != LATEST:
        return f"/{mod_id}/{version}"
    return f"/{mod_id}"


def is_regular_file(path: Path) -> bool:
    """True if ``path`` exists and is a regular file (symlinks are not followed)."""
    return path.exists() and not path.is_symlink() and path.is_file()
