"""
Pytest Configuration and Fixtures
=================================

Central pytest configuration and shared fixtures for all tests.
Includes a sample changelog tree and clients for the FastAPI application.
"""

import sys
from pathlib import Path
from typing import AsyncGenerator, Callable

import pytest

# Add src/ to path for imports when the package is not installed
PROJECT_ROOT = Path(__file__).parent.parent
SRC_DIR = PROJECT_ROOT / "src"
if str(SRC_DIR) not in sys.path:
    sys.path.insert(0, str(SRC_DIR))


@pytest.fixture(autouse=True)
def reset_settings(monkeypatch):
    """Drop the cached global settings so tests that reload them do not leak."""
    from changelogs import config

    monkeypatch.setattr(config, "_settings", None)


# =============================================================================
# Changelog Tree Fixtures
# =============================================================================


@pytest.fixture
def write_changelog() -> Callable[[Path, str, str, str], Path]:
    """Write ``<root>/<version>/<mod_id>.txt`` and return its path.

    Usage:
        def test_something(tmp_path, write_changelog):
            write_changelog(tmp_path, "1.0.0", "modA", "sha\\nbody")
    """

    def _write(root: Path, version: str, mod_id: str, text: str) -> Path:
        version_dir = root / version
        version_dir.mkdir(parents=True, exist_ok=True)
        path = version_dir / f"{mod_id}.txt"
        path.write_bytes(text.encode("utf-8"))
        return path

    return _write


@pytest.fixture
def base_dir(tmp_path: Path, write_changelog) -> Path:
    """Base directory holding a populated ``changelogs/`` folder.

    Layout:
        changelogs/1.2.3/modA.txt   sha123 / Fixed bug X / Added feature Y
        changelogs/1.2.3/modB.txt   sha789 / First release
        changelogs/1.3.0/modA.txt   sha456 / Improved Z
        changelogs/notes/readme.txt (not a version directory)
    """
    root = tmp_path / "changelogs"
    root.mkdir()

    write_changelog(root, "1.2.3", "modA", "sha123\nFixed bug X\nAdded feature Y")
    write_changelog(root, "1.2.3", "modB", "sha789\nFirst release")
    write_changelog(root, "1.3.0", "modA", "sha456\nImproved Z")
    write_changelog(root, "notes", "readme", "not\na changelog")

    return tmp_path


@pytest.fixture
def changelog_root(base_dir: Path) -> Path:
    return base_dir / "changelogs"


class RecordingRegistrar:
    """Registrar double that remembers every bound route, in order."""

    def __init__(self):
        self.bound: dict[str, str] = {}
        self.attempts: list[str] = []

    def register(self, route: str, body: str) -> bool:
        self.attempts.append(route)
        if route in self.bound:
            return False
        self.bound[route] = body
        return True


@pytest.fixture
def registrar() -> RecordingRegistrar:
    return RecordingRegistrar()


# =============================================================================
# FastAPI Test Client Fixtures
# =============================================================================


@pytest.fixture
def settings(base_dir: Path):
    """Settings pointing at the sample tree."""
    from changelogs.config import ChangelogSettings

    return ChangelogSettings(base_dir=base_dir)


@pytest.fixture
def test_app(settings):
    """Create a FastAPI application scanned from the sample tree."""
    from changelogs.server.main import create_app

    return create_app(settings)


@pytest.fixture
def client(test_app):
    from fastapi.testclient import TestClient

    return TestClient(test_app, base_url="http://127.0.0.1")


@pytest.fixture
async def async_client(test_app) -> AsyncGenerator:
    """Create an async HTTP client for testing FastAPI endpoints.

    Usage:
        async def test_endpoint(async_client):
            response = await async_client.get("/modA")
            assert response.status_code == 200
    """
    from httpx import ASGITransport, AsyncClient

    async with AsyncClient(
        transport=ASGITransport(app=test_app),
        base_url="http://test"
    ) as client:
        yield client


@pytest.fixture
def registrar_factory():
    return RecordingRegistrar
