"""Theme preference persistence.

The preference is a plain string stored under one key of a per-user mapping
(NiceGUI's `app.storage.user` in the running app, a dict in tests).
"""

import logging
from collections.abc import MutableMapping
from typing import Any

from src.models.schemas import Theme

logger = logging.getLogger(__name__)

THEME_STORAGE_KEY = "theme"


def load_theme(storage: MutableMapping[str, Any]) -> Theme:
    """Read the stored theme, falling back to light for missing or unknown values."""
    raw = storage.get(THEME_STORAGE_KEY)
    if raw is None:
        return Theme.LIGHT
    try:
        return Theme(raw)
    except ValueError:
        logger.warning(f"Ignoring unknown stored theme: {raw!r}")
        return Theme.LIGHT


def save_theme(storage: MutableMapping[str, Any], theme: Theme) -> None:
    storage[THEME_STORAGE_KEY] = theme.value
