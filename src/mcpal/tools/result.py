"""Build and render send_notification results.

Results are rendered twice from the same dumped dict: as structured content
and as line-based legacy text (``key: <JSON value>`` per line).
"""

from __future__ import annotations

import json
from dataclasses import dataclass

from mcpal.notify.types import DeliveryResult
from mcpal.tools.sanitize import SANITIZE_LIMITS, sanitize_text
from mcpal.tools.schemas import SendNotificationOutput

# Stable field order for the legacy text rendering; consumers rely on it
LEGACY_TEXT_FIELDS: tuple[str, ...] = (
    "status",
    "title",
    "message",
    "response",
    "activationType",
    "reply",
    "error",
    "sanitized",
)


@dataclass(frozen=True)
class ErrorPayloadContext:
    title: str | None
    message: str | None
    sanitized: bool = False


def error_message(error: BaseException | object) -> str:
    """Reduce any error to a bounded, control-free single string."""
    try:
        raw = str(error)
    except Exception:
        raw = ""
    if not raw:
        raw = type(error).__name__
    return sanitize_text(raw, SANITIZE_LIMITS.message).value


def _bounded(value: str | None) -> str | None:
    """Clean text reported back by the notifier, which the user typed or picked."""
    if value is None:
        return None
    return sanitize_text(value, SANITIZE_LIMITS.message).value


def build_success_payload(
    title: str,
    message: str,
    result: DeliveryResult,
    sanitized: bool,
) -> SendNotificationOutput:
    return SendNotificationOutput(
        status="sent",
        title=title,
        message=message,
        response=_bounded(result.response),
        activation_type=_bounded(result.activation_type),
        reply=_bounded(result.reply),
        sanitized=True if sanitized else None,
    )


def build_error_payload(
    error: BaseException | object,
    context: ErrorPayloadContext,
) -> SendNotificationOutput:
    return SendNotificationOutput(
        status="error",
        title=context.title,
        message=context.message,
        error=error_message(error),
        sanitized=True if context.sanitized else None,
    )


def format_legacy_text(payload: SendNotificationOutput) -> str:
    """Render as ``key: <JSON value>`` lines in LEGACY_TEXT_FIELDS order.

    JSON encoding keeps embedded newlines, quotes and colons on one physical
    line (non-ASCII is escaped too), so a naive line-splitting parser can
    never see a forged field.
    """
    data = payload.to_structured()
    return "\n".join(
        f"{key}: {json.dumps(data[key])}"
        for key in LEGACY_TEXT_FIELDS
        if key in data
    )
