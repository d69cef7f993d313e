"""Notification policy tables: default title, timeout tiers, client icon aliases."""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from dataclasses import dataclass
from types import MappingProxyType
from typing import Literal

# Title used when the caller does not supply one
DEFAULT_NOTIFICATION_TITLE = "MCPal"

TimeoutKind = Literal["simple", "actions", "reply"]


@dataclass(frozen=True)
class TimeoutTiers:
    """Default wait (seconds) per interaction mode."""

    simple: float = 10
    actions: float = 20
    reply: float = 30

    def for_kind(self, kind: TimeoutKind) -> float:
        return getattr(self, kind)


DEFAULT_TIMEOUTS = TimeoutTiers()

# Normalized MCP client name -> icon filename under assets/clients/
CLIENT_ICONS: Mapping[str, str] = MappingProxyType({
    # Anthropic
    "claude": "claude.png",
    "claude-desktop": "claude.png",
    "claude-code": "claude.png",
    "opus": "claude.png",
    # OpenAI
    "openai": "openai.png",
    "chatgpt": "openai.png",
    "codex": "openai.png",
    # Misc
    "cursor": "cursor.png",
    "vscode": "vscode.png",
})


def timeout_kind(reply: bool | None = None, actions: Sequence[str] | None = None) -> TimeoutKind:
    """Pick the tier: reply beats actions beats simple."""
    if reply:
        return "reply"
    if actions:
        return "actions"
    return "simple"


def resolve_timeout(
    *,
    timeout: float | None = None,
    reply: bool | None = None,
    actions: Sequence[str] | None = None,
    tiers: TimeoutTiers = DEFAULT_TIMEOUTS,
) -> float:
    """Resolve the notification timeout.

    An explicit ``timeout`` is honored as-is; otherwise the tier default
    for the notification's shape is used.
    """
    if timeout is not None:
        return timeout
    return tiers.for_kind(timeout_kind(reply, actions))
