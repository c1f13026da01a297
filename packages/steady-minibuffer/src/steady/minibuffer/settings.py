"""Stabilizer settings with JSON persistence and environment overrides.

Stored at ``~/.steady/minibuffer.json`` (``STEADY_CONFIG_DIR`` overrides the
directory).  ``STEADY_MINIBUFFER_HEIGHT`` and ``STEADY_POINT_OFFSET`` take
precedence over the file.
"""

from __future__ import annotations

import json
import logging
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Any

logger = logging.getLogger(__name__)

CONFIG_DIR_NAME = ".steady"
SETTINGS_FILE_NAME = "minibuffer.json"

DEFAULT_POINT_OFFSET = 3

_ENV_MINIBUFFER_HEIGHT = "STEADY_MINIBUFFER_HEIGHT"
_ENV_POINT_OFFSET = "STEADY_POINT_OFFSET"


@dataclass
class StabilizerSettings:
    """User-facing knobs, read fresh for every prompt."""

    # Overlay height override; None means infer it
    minibuffer_height: int | None = None
    # Extra rows point is moved above the overlay
    point_offset: int = DEFAULT_POINT_OFFSET


def settings_from_dict(data: dict[str, Any]) -> StabilizerSettings:
    """Deserialize settings from a JSON-compatible dict."""
    height = data.get("minibufferHeight")
    offset = data.get("pointOffset", DEFAULT_POINT_OFFSET)
    return StabilizerSettings(
        minibuffer_height=int(height) if height is not None else None,
        point_offset=int(offset),
    )


def settings_to_dict(settings: StabilizerSettings) -> dict[str, Any]:
    """Serialize settings to a JSON-compatible dict."""
    return {
        "minibufferHeight": settings.minibuffer_height,
        "pointOffset": settings.point_offset,
    }


def _get_config_dir() -> Path:
    return Path(os.environ.get("STEADY_CONFIG_DIR", Path.home() / CONFIG_DIR_NAME))


def _get_settings_path() -> Path:
    return _get_config_dir() / SETTINGS_FILE_NAME


def _env_int(name: str) -> int | None:
    raw = os.environ.get(name)
    if raw is None or raw == "":
        return None
    try:
        return int(raw)
    except ValueError:
        logger.warning("Ignoring %s=%r: not an integer", name, raw)
        return None


def load_settings() -> StabilizerSettings:
    """Load settings from disk, then apply environment overrides."""
    settings = StabilizerSettings()
    path = _get_settings_path()
    if path.exists():
        try:
            settings = settings_from_dict(json.loads(path.read_text()))
        except (OSError, ValueError, TypeError, AttributeError) as e:
            logger.warning("Error reading settings from %s: %s", path, e)
            settings = StabilizerSettings()

    height = _env_int(_ENV_MINIBUFFER_HEIGHT)
    if height is not None:
        settings.minibuffer_height = height
    offset = _env_int(_ENV_POINT_OFFSET)
    if offset is not None:
        settings.point_offset = offset
    return settings


def save_settings(settings: StabilizerSettings) -> None:
    path = _get_settings_path()
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(json.dumps(settings_to_dict(settings), indent=2))
