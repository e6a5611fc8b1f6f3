"""Client settings with JSON persistence.

Only things the server does not own live here: where the server is,
how long to wait for it, and how the window was left.

Settings are stored at:
    ~/Library/Application Support/MakeHomerProud/settings.json

``HOMERPROUD_API_URL`` in the environment overrides ``api_base_url``.

Usage::

    settings = load_settings()
    settings.api_base_url = "http://olympus.local:8000"
    save_settings(settings)
"""

from __future__ import annotations

import json
import logging
import os
from dataclasses import dataclass, asdict, fields
from pathlib import Path

from .api.client import DEFAULT_BASE_URL, DEFAULT_TIMEOUT

logger = logging.getLogger(__name__)

APP_SUPPORT_DIR = Path.home() / "Library" / "Application Support" / "MakeHomerProud"
SETTINGS_PATH = APP_SUPPORT_DIR / "settings.json"
API_URL_ENV = "HOMERPROUD_API_URL"


@dataclass
class Settings:
    """All locally stored preferences."""

    # ── server ────────────────────────────────────────────────────────
    api_base_url: str = DEFAULT_BASE_URL
    request_timeout: float = DEFAULT_TIMEOUT   # seconds

    # ── diagnostics ───────────────────────────────────────────────────
    log_level: str = "INFO"

    # ── window ────────────────────────────────────────────────────────
    window_x: int | None = None
    window_y: int | None = None
    window_width: int = 960
    window_height: int = 720


def load_settings() -> Settings:
    """Load settings from disk, falling back to defaults."""
    settings = Settings()
    try:
        if SETTINGS_PATH.exists():
            data = json.loads(SETTINGS_PATH.read_text(encoding="utf-8"))
            # Only use keys that exist in the dataclass
            valid_keys = {f.name for f in fields(Settings)}
            filtered = {k: v for k, v in data.items() if k in valid_keys}
            settings = Settings(**filtered)
    except (OSError, ValueError, TypeError, AttributeError) as exc:
        logger.warning("Ignoring unreadable settings file %s: %s", SETTINGS_PATH, exc)

    override = os.environ.get(API_URL_ENV)
    if override:
        settings.api_base_url = override
    return settings


def save_settings(settings: Settings) -> None:
    """Write settings to disk as JSON."""
    APP_SUPPORT_DIR.mkdir(parents=True, exist_ok=True)
    SETTINGS_PATH.write_text(
        json.dumps(asdict(settings), indent=2) + "\n",
        encoding="utf-8",
    )
