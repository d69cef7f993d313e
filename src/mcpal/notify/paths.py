"""Locate the notifier executable used for interactive macOS notifications."""

from __future__ import annotations

import logging
import os
import shutil
from pathlib import Path
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from mcpal.core.config import Settings

logger = logging.getLogger(__name__)

NOTIFIER_EXECUTABLE = "terminal-notifier"


def candidate_notifier_paths(settings: Settings) -> list[Path]:
    """Ordered candidates: explicit override, branded bundle, unbranded bundle."""
    candidates: list[Path] = []
    if settings.notifier_path:
        candidates.append(settings.notifier_path.expanduser())
    candidates.append(settings.branded_notifier_path)
    candidates.append(settings.unbranded_notifier_path)
    return candidates


def _is_executable(path: Path) -> bool:
    return path.is_file() and os.access(path, os.X_OK)


def find_notifier_executable(settings: Settings) -> Path | None:
    """Return the first usable notifier executable, or None.

    Falls back to ``terminal-notifier`` on PATH after the bundle candidates.
    """
    for candidate in candidate_notifier_paths(settings):
        if _is_executable(candidate):
            logger.debug("Using notifier executable %s", candidate)
            return candidate

    on_path = shutil.which(NOTIFIER_EXECUTABLE)
    if on_path:
        logger.debug("Using %s from PATH: %s", NOTIFIER_EXECUTABLE, on_path)
        return Path(on_path)

    return None
