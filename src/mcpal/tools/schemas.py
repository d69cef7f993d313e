"""Pydantic input/output models for the send_notification tool."""

from __future__ import annotations

from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field


class SendNotificationInput(BaseModel):
    """Raw tool arguments as supplied by the calling agent."""

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    message: str
    title: str | None = None
    actions: list[str] | None = None
    dropdown_label: str | None = Field(default=None, alias="dropdownLabel")
    reply: bool | None = None
    timeout: float | None = Field(default=None, gt=0)


class SendNotificationOutput(BaseModel):
    """Structured result of send_notification.

    ``status`` is always set. Fields left as None are omitted from both
    renderings; ``sanitized`` is only ever True or absent.
    """

    model_config = ConfigDict(frozen=True, populate_by_name=True, extra="forbid")

    status: Literal["sent", "error"]
    title: str | None = None
    message: str | None = None
    response: str | None = None
    activation_type: str | None = Field(default=None, alias="activationType")
    reply: str | None = None
    error: str | None = None
    sanitized: Literal[True] | None = None

    def to_structured(self) -> dict[str, Any]:
        """Wire form: camelCase keys, absent fields dropped."""
        return self.model_dump(by_alias=True, exclude_none=True)


# JSON schema for the tool's input, advertised to MCP clients
SEND_NOTIFICATION_INPUT_SCHEMA: dict[str, Any] = {
    "type": "object",
    "properties": {
        "message": {
            "type": "string",
            "description": "The notification body text.",
        },
        "title": {
            "type": "string",
            "description": "The notification title (defaults to MCPal).",
        },
        "actions": {
            "type": "array",
            "items": {"type": "string"},
            "description": (
                "Action buttons, e.g. [\"Yes\", \"No\"]. At most 3 are shown. macOS only."
            ),
        },
        "dropdownLabel": {
            "type": "string",
            "description": "Label for the actions dropdown. Required with more than one action on macOS.",
        },
        "reply": {
            "type": "boolean",
            "description": "Show a text reply field and return what the user typed. macOS only.",
        },
        "timeout": {
            "type": "number",
            "exclusiveMinimum": 0,
            "description": (
                "Seconds to wait for the user. Defaults: 10 (simple), 20 (actions), 30 (reply)."
            ),
        },
    },
    "required": ["message"],
}


def output_json_schema() -> dict[str, Any]:
    """JSON schema for the structured result, keyed by wire (alias) names."""
    return SendNotificationOutput.model_json_schema(by_alias=True)
