"""Map an MCP client's name to a decorative icon shipped with the package."""

from __future__ import annotations

import logging
import re
from collections.abc import Mapping
from pathlib import Path

from mcpal.notify.config import CLIENT_ICONS

logger = logging.getLogger(__name__)

_WHITESPACE_RE = re.compile(r"\s+")


def normalize_client_name(client_name: str) -> str:
    """Lowercase and collapse whitespace runs to a single dash."""
    return _WHITESPACE_RE.sub("-", client_name.strip().lower())


def lookup_icon_file(client_name: str, aliases: Mapping[str, str] = CLIENT_ICONS) -> str | None:
    """Exact alias match first, then the first alias contained in the name."""
    normalized = normalize_client_name(client_name)
    if not normalized:
        return None
    if normalized in aliases:
        return aliases[normalized]
    for key, icon_file in aliases.items():
        if key in normalized:
            return icon_file
    return None


def resolve_icon(
    client_name: str | None,
    clients_dir: Path,
    aliases: Mapping[str, str] = CLIENT_ICONS,
) -> Path | None:
    """Return the icon path for a client, or None.

    Never raises: a missing alias, missing file or unreadable directory all
    mean "no icon".
    """
    if not client_name:
        return None

    icon_file = lookup_icon_file(client_name, aliases)
    if icon_file is None:
        logger.debug("No icon alias for client %r", client_name)
        return None

    icon_path = clients_dir / icon_file
    try:
        if icon_path.is_file():
            return icon_path
    except OSError as e:
        logger.debug("Cannot check icon %s: %s", icon_path, e)
        return None
    logger.debug("Icon asset missing for client %r: %s", client_name, icon_path)
    return None
