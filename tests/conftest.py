"""Shared pytest fixtures for testing."""

from pathlib import Path
from typing import TYPE_CHECKING

import pytest

if TYPE_CHECKING:
    from _pytest.monkeypatch import MonkeyPatch

    from src.config.settings import Settings

# Environment variables that would let tests reach real vendors
VENDOR_ENV_VARS = (
    "D_ID_API_KEY",
    "D_ID_BASE_URL",
    "HEYGEN_API_KEY",
    "HEYGEN_BASE_URL",
    "SORA_API_KEY",
    "OPENAI_API_KEY",
    "ELEVENLABS_API_KEY",
    "PLAYHT_API_KEY",
    "PLAYHT_USER_ID",
    "VIDEO_PROVIDER",
    "VIDEO_FALLBACK_PROVIDER",
    "VOICE_CLONE_PROVIDER",
    "AVATAR_VIDEO_POLL_INTERVAL_SECONDS",
    "AVATAR_VIDEO_TIMEOUT_SECONDS",
    "STORAGE_ROOT",
    "STORAGE_BASE_URL",
    "MUSIC_TEMP_DIR",
    "LOG_LEVEL",
)


@pytest.fixture(autouse=True, scope="function")
def mock_settings(monkeypatch: "MonkeyPatch", tmp_path: Path) -> None:
    """Isolate every test from the developer's environment.

    This fixture is automatically applied to all tests (autouse=True).
    Vendor credentials are removed, ENV_FILE points at a file that does not
    exist, and the global settings cache is cleared.

    Args:
        monkeypatch: Pytest monkeypatch fixture.
        tmp_path: Per-test temporary directory.
    """
    for name in VENDOR_ENV_VARS:
        monkeypatch.delenv(name, raising=False)
    monkeypatch.setenv("ENV_FILE", str(tmp_path / "missing.env"))

    # Clear the global settings cache to force reload
    import src.config.settings as settings_module
    settings_module._settings = None


@pytest.fixture
def temp_dir(tmp_path: Path) -> Path:
    """Create temporary directory for test files.

    Args:
        tmp_path: Pytest temporary path fixture.

    Returns:
        Path: Temporary directory path.
    """
    return tmp_path


@pytest.fixture
def settings(monkeypatch: "MonkeyPatch", tmp_path: Path) -> "Settings":
    """Settings with every vendor configured and storage under tmp_path.

    Returns:
        Settings: Freshly loaded settings.
    """
    monkeypatch.setenv("D_ID_API_KEY", "did-test-key")
    monkeypatch.setenv("HEYGEN_API_KEY", "heygen-test-key")
    monkeypatch.setenv("SORA_API_KEY", "sora-test-key")
    monkeypatch.setenv("ELEVENLABS_API_KEY", "eleven-test-key")
    monkeypatch.setenv("PLAYHT_API_KEY", "playht-test-key")
    monkeypatch.setenv("PLAYHT_USER_ID", "playht-user")
    monkeypatch.setenv("STORAGE_ROOT", str(tmp_path / "storage"))
    monkeypatch.setenv("STORAGE_BASE_URL", "https://cdn.test/storage/")
    monkeypatch.setenv("MUSIC_TEMP_DIR", str(tmp_path / "temp"))

    from src.config import reload_settings
    return reload_settings()
