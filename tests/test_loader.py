"""Tests for changelog loading, first-line stripping and caching."""

from pathlib import Path

import pytest

from changelogs.core.loader import ChangelogCache, missing_changelog_message, strip_build_metadata


def test_strip_build_metadata_removes_only_first_line():
    assert strip_build_metadata("sha123\nFixed bug X\nAdded feature Y") == "Fixed bug X\nAdded feature Y"


def test_strip_build_metadata_keeps_trailing_newline():
    assert strip_build_metadata("sha\nline\n") == "line\n"


@pytest.mark.parametrize("text", ["", "sha-only", "sha-only\n"])
def test_strip_build_metadata_short_files_are_empty(text):
    assert strip_build_metadata(text) == ""


def test_missing_changelog_message_wording():
    assert missing_changelog_message("modA", "9.9.9") == "Missing changelog file for mod/version: modA-9.9.9"
    assert missing_changelog_message("modA", "9.9.9", latest=True) == (
        "Missing changelog file for mod/version: modA-latest"
    )


def test_get_or_load_reads_and_caches(changelog_root: Path):
    cache = ChangelogCache(changelog_root)

    first = cache.get_or_load("modA", "1.2.3")
    assert first == "Fixed bug X\nAdded feature Y"
    assert ("modA", "1.2.3") in cache

    # Changing the file afterwards has no effect: entries are never reloaded.
    (changelog_root / "1.2.3" / "modA.txt").write_text("sha\nrewritten", encoding="utf-8")
    assert cache.get_or_load("modA", "1.2.3") == first
    assert len(cache) == 1


def test_get_or_load_missing_is_not_cached(changelog_root: Path, write_changelog):
    cache = ChangelogCache(changelog_root)

    assert cache.get_or_load("modB", "1.3.0") == "Missing changelog file for mod/version: modB-1.3.0"
    assert cache.get_or_load("modB", "1.3.0", latest=True) == "Missing changelog file for mod/version: modB-latest"
    assert ("modB", "1.3.0") not in cache

    write_changelog(changelog_root, "1.3.0", "modB", "sha\nnow present")
    assert cache.get_or_load("modB", "1.3.0") == "now present"


def test_get_or_load_directory_is_treated_as_missing(changelog_root: Path):
    (changelog_root / "1.2.3" / "modDir.txt").mkdir()
    cache = ChangelogCache(changelog_root)
    assert cache.get_or_load("modDir", "1.2.3") == "Missing changelog file for mod/version: modDir-1.2.3"


def test_get_or_load_preserves_carriage_returns(tmp_path: Path, write_changelog):
    write_changelog(tmp_path, "1.0.0", "modW", "sha\r\nline one\r\nline two")
    cache = ChangelogCache(tmp_path)
    assert cache.get_or_load("modW", "1.0.0") == "line one\r\nline two"


def test_get_or_load_utf8(tmp_path: Path, write_changelog):
    write_changelog(tmp_path, "1.0.0", "modU", "sha\nAjouté ✨")
    assert ChangelogCache(tmp_path).get_or_load("modU", "1.0.0") == "Ajouté ✨"


def test_get_or_load_replaces_invalid_utf8(tmp_path: Path):
    version_dir = tmp_path / "1.0.0"
    version_dir.mkdir()
    (version_dir / "modX.txt").write_bytes(b"sha\n\xff\xfe")
    changelog = ChangelogCache(tmp_path).get_or_load("modX", "1.0.0")
    assert "\ufffd" in changelog
