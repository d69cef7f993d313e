"""The send_notification tool: sanitize, deliver, and report the user's response."""

from __future__ import annotations

import logging
import time
from collections.abc import Awaitable, Callable
from typing import Any, TYPE_CHECKING

from pydantic import ValidationError

from mcpal.notify.config import resolve_timeout
from mcpal.notify.icons import resolve_icon
from mcpal.notify.types import NotificationRequest
from mcpal.tools.result import (
    ErrorPayloadContext,
    build_error_payload,
    build_success_payload,
)
from mcpal.tools.sanitize import SANITIZE_LIMITS, sanitize_send_notification_input, sanitize_text
from mcpal.tools.schemas import SEND_NOTIFICATION_INPUT_SCHEMA, SendNotificationInput, SendNotificationOutput

if TYPE_CHECKING:
    from mcpal.core.config import Settings
    from mcpal.core.logging import AuditLogger
    from mcpal.notify.delivery import Notifier

logger = logging.getLogger(__name__)

TOOL_NAME = "send_notification"

SEND_NOTIFICATION_DEF: dict[str, Any] = {
    "name": TOOL_NAME,
    "description": (
        "Send a native desktop notification and wait for the user's response. "
        "Optionally offer action buttons or a text reply field (macOS). "
        "Returns how the user interacted: the clicked action, the typed reply, "
        "'closed', or 'timeout'."
    ),
    "input_schema": SEND_NOTIFICATION_INPUT_SCHEMA,
}

SendNotificationHandler = Callable[..., Awaitable[SendNotificationOutput]]


def _context_from_raw(params: dict[str, Any]) -> ErrorPayloadContext:
    """Best-effort title/message for an error payload when validation failed."""
    raw_title = params.get("title")
    raw_message = params.get("message")
    title = sanitize_text(raw_title, SANITIZE_LIMITS.title) if isinstance(raw_title, str) else None
    message = sanitize_text(raw_message, SANITIZE_LIMITS.message) if isinstance(raw_message, str) else None
    return ErrorPayloadContext(
        title=title.value if title else None,
        message=message.value if message else None,
        sanitized=bool((title and title.changed) or (message and message.changed)),
    )


def make_send_notification(
    notifier: Notifier,
    settings: Settings,
    audit_logger: AuditLogger | None = None,
) -> SendNotificationHandler:
    """Factory: returns an async handler bound to the notifier and settings."""

    def _audit(event_type: str, params: dict[str, Any], client_name: str | None,
               payload: SendNotificationOutput, duration_ms: int) -> None:
        if audit_logger is None:
            return
        try:
            audit_logger.log(
                event_type,
                tool_name=TOOL_NAME,
                client_name=client_name or "",
                input_data=params,
                output_data=payload.to_structured(),
                duration_ms=duration_ms,
                error=payload.error or "",
            )
        except OSError as e:
            logger.warning("Audit write to %s failed: %s", audit_logger.path, e)

    async def send_notification(
        params: dict[str, Any],
        client_name: str | None = None,
    ) -> SendNotificationOutput:
        start = time.monotonic()

        try:
            raw = SendNotificationInput.model_validate(params)
        except ValidationError as e:
            logger.warning("Invalid %s arguments: %s", TOOL_NAME, e)
            payload = build_error_payload(e, _context_from_raw(params))
            _audit("notification_error", params, client_name, payload, 0)
            return payload

        cleaned = sanitize_send_notification_input(raw, default_title=settings.default_title)
        options = cleaned.options
        if cleaned.sanitized:
            logger.info("Notification input was sanitized")

        request = NotificationRequest(
            message=options.message,
            title=options.title,
            timeout_seconds=resolve_timeout(
                timeout=options.timeout,
                reply=options.reply,
                actions=options.actions,
                tiers=settings.timeout_tiers,
            ),
            actions=options.actions or (),
            dropdown_label=options.dropdown_label,
            reply=bool(options.reply),
            content_image=resolve_icon(client_name, settings.clients_dir),
        )
        logger.info(
            "Notification: title=%r actions=%d reply=%s timeout=%ss",
            request.title, len(request.actions), request.reply, request.timeout_seconds,
        )

        try:
            result = await notifier.deliver(request)
        except Exception as e:
            duration_ms = int((time.monotonic() - start) * 1000)
            logger.warning("Notification failed after %dms: %s", duration_ms, e)
            payload = build_error_payload(
                e,
                ErrorPayloadContext(
                    title=options.title,
                    message=options.message,
                    sanitized=cleaned.sanitized,
                ),
            )
            _audit("notification_error", params, client_name, payload, duration_ms)
            return payload

        duration_ms = int((time.monotonic() - start) * 1000)
        logger.info(
            "Notification result: response=%r activation=%s -> %dms",
            result.response, result.activation_type, duration_ms,
        )
        payload = build_success_payload(options.title, options.message, result, cleaned.sanitized)
        _audit("notification_sent", params, client_name, payload, duration_ms)
        return payload

    return send_notification
