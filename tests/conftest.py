"""Shared test fixtures and configuration."""
import base64
from pathlib import Path

import pytest

from img2img_relay.core.config import get_settings

_ENV_VARS = (
    "SD_API_URL",
    "WORKSPACE_ROOT",
    "OUTPUT_DIR",
    "REFERENCE_IMAGE_PATH",
    "OPENCLAW_GATEWAY_URL",
    "OPENCLAW_GATEWAY_TOKEN",
    "OPENCLAW_COMMAND",
    "OPENCLAW_USE_CLI",
)

PNG_BYTES = base64.b64decode(
    "iVBORw0KGgoAAAANSUhEUgAAAAEAAAABCAYAAAAfFcSJAAAADUlEQVR42mP8z8DwHwAFBQIAX8jx0gAAAABJRU5ErkJggg=="
)


@pytest.fixture(autouse=True)
def isolated_settings(monkeypatch: pytest.MonkeyPatch):
    """Remove settings-related environment variables and reset the settings cache."""
    for name in _ENV_VARS:
        monkeypatch.delenv(name, raising=False)
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


@pytest.fixture
def workspace(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """Run the test from an empty working directory."""
    monkeypatch.chdir(tmp_path)
    return tmp_path


@pytest.fixture
def reference_image(tmp_path: Path) -> Path:
    path = tmp_path / "reference.png"
    path.write_bytes(b"\x89PNG_reference_bytes")
    return path


@pytest.fixture
def png_bytes() -> bytes:
    return PNG_BYTES
