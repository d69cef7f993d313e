"""Input sanitization for notification text.

Agent-supplied text is never rejected: it is cleaned and bounded, and the
caller learns about it through the ``sanitized`` flag on the result.
"""

from __future__ import annotations

import re
from dataclasses import dataclass

from mcpal.notify.config import DEFAULT_NOTIFICATION_TITLE
from mcpal.tools.schemas import SendNotificationInput

# C0 controls and DEL, minus tab (\x09) and newline (\x0a); \r is normalized first
_UNSAFE_CONTROL_CHARS = re.compile(r"[\x00-\x08\x0b\x0c\x0e-\x1f\x7f]")
_LINE_ENDINGS = re.compile(r"\r\n?")


@dataclass(frozen=True)
class SanitizeLimits:
    """Maximum lengths (in characters) per field and the action count cap."""

    title: int = 256
    message: int = 4000
    action: int = 64
    dropdown_label: int = 64
    max_actions: int = 3


SANITIZE_LIMITS = SanitizeLimits()


@dataclass(frozen=True)
class SanitizedField:
    value: str
    changed: bool


@dataclass(frozen=True)
class NotificationOptions:
    """Sanitized tool input, ready for timeout and icon resolution."""

    message: str
    title: str
    actions: tuple[str, ...] | None = None
    dropdown_label: str | None = None
    reply: bool | None = None
    timeout: float | None = None


@dataclass(frozen=True)
class SanitizedInput:
    options: NotificationOptions
    sanitized: bool


def normalize_newlines(value: str) -> str:
    return _LINE_ENDINGS.sub("\n", value)


def strip_control_chars(value: str) -> str:
    return _UNSAFE_CONTROL_CHARS.sub("", value)


def truncate(value: str, max_length: int) -> str:
    """Cut to ``max_length`` code points; str indexing never splits a character."""
    if len(value) <= max_length:
        return value
    return value[:max_length]


def sanitize_text(value: str, max_length: int) -> SanitizedField:
    """Normalize line endings, strip unsafe controls, truncate."""
    cleaned = truncate(strip_control_chars(normalize_newlines(value)), max_length)
    return SanitizedField(value=cleaned, changed=cleaned != value)


def _sanitize_actions(
    actions: list[str], limits: SanitizeLimits
) -> tuple[tuple[str, ...] | None, bool]:
    sanitized = False

    limited = actions[: limits.max_actions]
    if len(limited) != len(actions):
        sanitized = True

    cleaned: list[str] = []
    for action in limited:
        result = sanitize_text(action, limits.action)
        if result.changed:
            sanitized = True
        if not result.value:
            sanitized = True
            continue
        cleaned.append(result.value)

    if cleaned:
        return tuple(cleaned), sanitized
    # Nothing usable left: omit the field rather than send an empty list
    if actions:
        sanitized = True
    return None, sanitized


def sanitize_send_notification_input(
    raw: SendNotificationInput,
    *,
    default_title: str = DEFAULT_NOTIFICATION_TITLE,
    limits: SanitizeLimits = SANITIZE_LIMITS,
) -> SanitizedInput:
    """Sanitize every text field and report whether anything was modified.

    A defaulted title never counts as sanitized; only a caller-supplied
    title that had to change does.
    """
    title = sanitize_text(raw.title if raw.title is not None else default_title, limits.title)
    message = sanitize_text(raw.message, limits.message)

    sanitized = message.changed or (raw.title is not None and title.changed)

    actions: tuple[str, ...] | None = None
    if raw.actions is not None:
        actions, actions_sanitized = _sanitize_actions(raw.actions, limits)
        sanitized = sanitized or actions_sanitized

    dropdown_label: str | None = None
    if raw.dropdown_label is not None:
        label = sanitize_text(raw.dropdown_label, limits.dropdown_label)
        sanitized = sanitized or label.changed
        dropdown_label = label.value

    return SanitizedInput(
        options=NotificationOptions(
            message=message.value,
            title=title.value,
            actions=actions,
            dropdown_label=dropdown_label,
            reply=raw.reply,
            timeout=raw.timeout,
        ),
        sanitized=sanitized,
    )
