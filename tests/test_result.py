"""Tests for send_notification payloads and the legacy text rendering."""

from __future__ import annotations

import json

import pytest
from pydantic import ValidationError

from mcpal.notify.types import DeliveryError, DeliveryResult
from mcpal.tools.result import (
    LEGACY_TEXT_FIELDS,
    ErrorPayloadContext,
    build_error_payload,
    build_success_payload,
    format_legacy_text,
)
from mcpal.tools.sanitize import SANITIZE_LIMITS
from mcpal.tools.schemas import SendNotificationOutput, output_json_schema


def _parse_legacy(text: str) -> dict:
    """What a naive line-based consumer does."""
    parsed = {}
    for line in text.split("\n"):
        key, _, value = line.partition(": ")
        parsed[key] = json.loads(value)
    return parsed


def test_legacy_output_field_order_remains_stable():
    assert list(LEGACY_TEXT_FIELDS) == [
        "status",
        "title",
        "message",
        "response",
        "activationType",
        "reply",
        "error",
        "sanitized",
    ]


def test_legacy_text_escapes_multiline_payload_values_on_single_lines():
    payload = build_success_payload(
        "Title",
        "first line\nsecond line",
        DeliveryResult(response="timeout", activation_type="replied", reply="user\nresponse"),
        False,
    )

    lines = format_legacy_text(payload).split("\n")

    assert lines[0] == 'status: "sent"'
    assert lines[1] == 'title: "Title"'
    assert lines[2] == 'message: "first line\\nsecond line"'
    assert lines[3] == 'response: "timeout"'
    assert lines[4] == 'activationType: "replied"'
    assert lines[5] == 'reply: "user\\nresponse"'
    assert len(lines) == 6


def test_legacy_text_keeps_colons_quotes_and_backslashes_parse_safe():
    payload = build_success_payload(
        "a:b",
        'path: "C:\\temp\\folder"',
        DeliveryResult(response="closed"),
        False,
    )
    formatted = format_legacy_text(payload)

    assert formatted.startswith('status: "sent"')
    assert 'title: "a:b"' in formatted
    assert 'message: "path: \\"C:\\\\temp\\\\folder\\""' in formatted
    assert _parse_legacy(formatted)["message"] == 'path: "C:\\temp\\folder"'


def test_legacy_text_escapes_unicode_line_separators():
    payload = build_success_payload(
        "T", "one\u2028two\x85three", DeliveryResult(response="closed"), False
    )
    formatted = format_legacy_text(payload)
    assert len(formatted.splitlines()) == 4
    assert _parse_legacy(formatted)["message"] == "one\u2028two\x85three"


def test_legacy_text_agrees_with_structured_form():
    payload = build_success_payload(
        "Deploy",
        "Ship it?\nNow",
        DeliveryResult(response="Yes", activation_type="actionClicked"),
        True,
    )
    assert _parse_legacy(format_legacy_text(payload)) == payload.to_structured()


def test_legacy_text_includes_sanitized_last():
    payload = build_success_payload("T", "M", DeliveryResult(response="closed"), True)
    lines = format_legacy_text(payload).split("\n")
    assert lines[-1] == "sanitized: true"


def test_success_payload_omits_absent_fields():
    payload = build_success_payload("T", "M", DeliveryResult(response="timeout"), False)
    assert payload.to_structured() == {
        "status": "sent",
        "title": "T",
        "message": "M",
        "response": "timeout",
    }


def test_error_payload_remains_parse_safe_with_multiline_error_messages():
    payload = build_error_payload(
        DeliveryError('bad\n"thing"'),
        ErrorPayloadContext(title="MCPal", message="attempted message", sanitized=False),
    )
    formatted = format_legacy_text(payload)

    assert payload.status == "error"
    assert payload.error == 'bad\n"thing"'
    assert formatted.startswith('status: "error"')
    assert 'error: "bad\\n\\"thing\\""' in formatted


def test_error_payload_never_carries_interaction_fields():
    payload = build_error_payload(
        RuntimeError("boom"), ErrorPayloadContext(title="T", message="M", sanitized=True)
    ).to_structured()
    assert payload == {
        "status": "error",
        "title": "T",
        "message": "M",
        "error": "boom",
        "sanitized": True,
    }
    for key in ("response", "activationType", "reply"):
        assert key not in payload


def test_success_payload_never_carries_error():
    payload = build_success_payload(
        "T", "M", DeliveryResult(response="replied", reply="hi", activation_type="replied"), False
    ).to_structured()
    assert "error" not in payload
    assert "sanitized" not in payload
    assert payload["reply"] == "hi"


def test_error_message_is_bounded_and_cleaned():
    payload = build_error_payload(
        ValueError("x" * (SANITIZE_LIMITS.message * 2) + "\x00"),
        ErrorPayloadContext(title=None, message=None),
    )
    assert payload.error is not None
    assert len(payload.error) == SANITIZE_LIMITS.message
    assert "\x00" not in payload.error


def test_error_message_falls_back_to_type_name():
    payload = build_error_payload(TimeoutError(), ErrorPayloadContext(title=None, message=None))
    assert payload.error == "TimeoutError"


def test_error_payload_accepts_non_exception_values():
    class Weird:
        def __str__(self) -> str:
            raise RuntimeError("no str for you")

    payload = build_error_payload(Weird(), ErrorPayloadContext(title=None, message=None))
    assert payload.error == "Weird"

    payload = build_error_payload("plain string", ErrorPayloadContext(title=None, message=None))
    assert payload.error == "plain string"


def test_structured_payload_validates_against_output_schema():
    success = build_success_payload("MCPal", "hello", DeliveryResult(response="timeout"), True)
    error = build_error_payload(
        RuntimeError("boom"), ErrorPayloadContext(title="MCPal", message="hello", sanitized=True)
    )

    assert SendNotificationOutput.model_validate(success.to_structured()) == success
    assert SendNotificationOutput.model_validate(error.to_structured()) == error


def test_output_schema_rejects_bad_payloads():
    with pytest.raises(ValidationError):
        SendNotificationOutput.model_validate({"status": "queued"})
    with pytest.raises(ValidationError):
        SendNotificationOutput.model_validate({"status": "sent", "sanitized": False})
    with pytest.raises(ValidationError):
        SendNotificationOutput.model_validate({"status": "sent", "unknown": "x"})


def test_output_json_schema_uses_wire_names():
    schema = output_json_schema()
    assert schema["type"] == "object"
    assert "activationType" in schema["properties"]
    assert schema["required"] == ["status"]


def test_payload_is_immutable():
    payload = build_success_payload("T", "M", DeliveryResult(response="closed"), False)
    with pytest.raises(ValidationError):
        payload.status = "error"  # type: ignore[misc]


def test_reported_reply_is_bounded_and_cleaned():
    payload = build_success_payload(
        "T",
        "M",
        DeliveryResult(
            response="replied",
            reply="ok\x00\r\n" + "r" * (SANITIZE_LIMITS.message * 2),
            activation_type="replied",
        ),
        False,
    )
    assert payload.reply is not None
    assert payload.reply.startswith("ok\nr")
    assert len(payload.reply) == SANITIZE_LIMITS.message
    assert payload.sanitized is None


def test_reported_action_label_is_bounded():
    payload = build_success_payload(
        "T", "M", DeliveryResult(response="A" * 10_000, activation_type="actionClicked"), False
    )
    assert len(payload.response or "") == SANITIZE_LIMITS.message
