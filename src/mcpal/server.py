"""MCP stdio server exposing the send_notification tool."""

from __future__ import annotations

import logging
from typing import Any, TYPE_CHECKING

import mcp.types as types
from mcp.server.lowlevel import Server
from mcp.server.stdio import stdio_server

from mcpal import __version__
from mcpal.core.logging import AuditLogger
from mcpal.notify.delivery import create_notifier
from mcpal.tools.notification_tool import (
    SEND_NOTIFICATION_DEF,
    TOOL_NAME,
    SendNotificationHandler,
    make_send_notification,
)
from mcpal.tools.result import ErrorPayloadContext, build_error_payload, format_legacy_text
from mcpal.tools.schemas import SendNotificationOutput, output_json_schema

if TYPE_CHECKING:
    from mcpal.core.config import Settings

logger = logging.getLogger(__name__)

SERVER_NAME = "mcpal"
SERVER_INSTRUCTIONS = (
    "Use send_notification to get the user's attention with a native desktop "
    "notification, for example when a long task finishes or a decision is needed. "
    "The result reports whether the user clicked, replied, dismissed, or ignored it."
)


def build_tool() -> types.Tool:
    return types.Tool(
        name=SEND_NOTIFICATION_DEF["name"],
        description=SEND_NOTIFICATION_DEF["description"],
        inputSchema=SEND_NOTIFICATION_DEF["input_schema"],
        outputSchema=output_json_schema(),
    )


def to_call_tool_result(payload: SendNotificationOutput) -> types.CallToolResult:
    """Structured content plus legacy text, from the same payload."""
    return types.CallToolResult(
        content=[types.TextContent(type="text", text=format_legacy_text(payload))],
        structuredContent=payload.to_structured(),
        isError=payload.status == "error",
    )


def client_name_of(server: Server) -> str | None:
    """Name the connected client gave in its initialize request, if any."""
    try:
        ctx = server.request_context
    except LookupError:
        return None
    params = ctx.session.client_params
    if params is None:
        return None
    return params.clientInfo.name


def create_server(handler: SendNotificationHandler) -> Server:
    server: Server = Server(SERVER_NAME, version=__version__, instructions=SERVER_INSTRUCTIONS)

    @server.list_tools()
    async def list_tools() -> list[types.Tool]:
        return [build_tool()]

    # Arguments are validated by the handler so that bad input still yields a payload
    @server.call_tool(validate_input=False)
    async def call_tool(name: str, arguments: dict[str, Any] | None) -> types.CallToolResult:
        if name != TOOL_NAME:
            logger.error("Unknown tool: %s", name)
            payload = build_error_payload(
                f"Unknown tool: {name}",
                ErrorPayloadContext(title=None, message=None),
            )
            return to_call_tool_result(payload)

        payload = await handler(arguments or {}, client_name=client_name_of(server))
        return to_call_tool_result(payload)

    return server


async def run_stdio_server(settings: Settings) -> None:
    """Wire settings, notifier and handler together and serve over stdio."""
    audit_logger = AuditLogger(settings.audit_log_path) if settings.audit_enabled else None
    notifier = create_notifier(settings)
    handler = make_send_notification(notifier, settings, audit_logger)
    server = create_server(handler)

    logger.info("Starting MCP stdio server (%s %s)", SERVER_NAME, __version__)
    async with stdio_server() as (read, write):
        await server.run(read, write, server.create_initialization_options())
