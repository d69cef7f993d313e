"""Notification transmitters, one per platform delivery mechanism.

- macOS: terminal-notifier (branded MCPal.app when installed), osascript fallback
- Linux/Windows: plyer (best effort, no actions or reply)

A transmitter is chosen once at startup by ``select_transmitter`` and reused
for every notification.
"""

from __future__ import annotations

import asyncio
import contextlib
import json
import logging
import math
import os
import sys
import uuid
from abc import ABC, abstractmethod
from pathlib import Path
from typing import TYPE_CHECKING, Any

from plyer import notification as plyer_notification

from mcpal.notify.paths import find_notifier_executable
from mcpal.notify.types import DeliveryError, DeliveryResult, NotificationRequest

if TYPE_CHECKING:
    from mcpal.core.config import Settings

logger = logging.getLogger(__name__)

RESPONSE_TIMEOUT = "timeout"
RESPONSE_CLOSED = "closed"
RESPONSE_ACTIVATE = "activate"

REPLY_PLACEHOLDER = "Reply"

_MAX_STDERR_LEN = 500


def format_seconds(seconds: float) -> str:
    """Whole seconds for command-line timeouts, rounded up so short waits stay non-zero."""
    return str(max(1, math.ceil(seconds)))


async def _communicate(proc: asyncio.subprocess.Process) -> tuple[bytes, bytes]:
    """Wait for the process; kill and reap it if the wait is cancelled."""
    try:
        return await proc.communicate()
    except asyncio.CancelledError:
        with contextlib.suppress(ProcessLookupError):
            proc.kill()
        await proc.wait()
        raise


class NotificationTransmitter(ABC):
    """Delivers one notification and waits for its outcome."""

    name: str = "transmitter"
    supports_actions: bool = False
    supports_reply: bool = False

    @abstractmethod
    async def send(self, request: NotificationRequest) -> DeliveryResult:
        """Present the notification and return how it ended.

        Raises DeliveryError when the mechanism fails.
        """
        ...


# ---------------------------------------------------------------------------
# terminal-notifier (macOS)
# ---------------------------------------------------------------------------


def _decode_report(output: str) -> dict[str, Any]:
    text = output.strip()
    try:
        data = json.loads(text)
    except json.JSONDecodeError:
        # Some builds log a line before the JSON object
        start, end = text.find("{"), text.rfind("}")
        if start == -1 or end < start:
            raise DeliveryError(f"Unreadable notifier output: {text[:200]}") from None
        try:
            data = json.loads(text[start:end + 1])
        except json.JSONDecodeError:
            raise DeliveryError(f"Unreadable notifier output: {text[:200]}") from None
    if not isinstance(data, dict):
        raise DeliveryError(f"Unexpected notifier output: {text[:200]}")
    return data


def response_for_activation(activation_type: str | None, activation_value: str | None) -> str:
    """Map a terminal-notifier activation to the tool's ``response`` value."""
    if activation_type == "actionClicked" and activation_value:
        return activation_value
    if not activation_type:
        return RESPONSE_CLOSED
    kind = activation_type.strip().lower()
    if kind.endswith("clicked") or kind.startswith("activate"):
        return RESPONSE_ACTIVATE
    if kind == "timedout":
        return RESPONSE_TIMEOUT
    return kind


def parse_activation_report(output: str) -> DeliveryResult:
    """Turn terminal-notifier's ``-json`` report into a DeliveryResult."""
    if not output.strip():
        return DeliveryResult(response=RESPONSE_CLOSED)

    data = _decode_report(output)
    activation_type = data.get("activationType")
    activation_value = data.get("activationValue")
    if activation_type is not None:
        activation_type = str(activation_type)
    if activation_value is not None:
        activation_value = str(activation_value)

    reply = activation_value if activation_type == "replied" else None
    return DeliveryResult(
        response=response_for_activation(activation_type, activation_value),
        reply=reply,
        activation_type=activation_type,
    )


class TerminalNotifierTransmitter(NotificationTransmitter):
    """Interactive notifications through a terminal-notifier executable."""

    name = "terminal-notifier"
    supports_actions = True
    supports_reply = True

    def __init__(self, executable: Path) -> None:
        self._executable = executable

    @property
    def executable(self) -> Path:
        return self._executable

    def build_args(self, request: NotificationRequest, group: str) -> list[str]:
        args = [
            str(self._executable),
            "-json",
            "-title", request.title,
            "-message", request.message,
            "-timeout", format_seconds(request.timeout_seconds),
            "-group", group,
        ]
        if request.actions:
            args += ["-actions", ",".join(request.actions)]
            if request.dropdown_label:
                args += ["-dropdownLabel", request.dropdown_label]
        if request.reply:
            args += ["-reply", REPLY_PLACEHOLDER]
        if request.content_image:
            args += ["-contentImage", str(request.content_image)]
        return args

    async def send(self, request: NotificationRequest) -> DeliveryResult:
        group = f"mcpal-{uuid.uuid4().hex}"
        args = self.build_args(request, group)

        try:
            proc = await asyncio.create_subprocess_exec(
                *args,
                stdout=asyncio.subprocess.PIPE,
                stderr=asyncio.subprocess.PIPE,
            )
        except OSError as e:
            raise DeliveryError(f"Could not launch {self._executable.name}: {e}") from e

        stdout, stderr = await _communicate(proc)

        if proc.returncode != 0:
            detail = stderr.decode(errors="replace").strip()[:_MAX_STDERR_LEN]
            raise DeliveryError(
                detail or f"{self._executable.name} exited with code {proc.returncode}"
            )

        return parse_activation_report(stdout.decode(errors="replace"))


# ---------------------------------------------------------------------------
# osascript (macOS without a notifier executable)
# ---------------------------------------------------------------------------

# JavaScript for Automation; text arrives through the environment so no quoting is needed
_JXA_SCRIPT = """\
ObjC.import("stdlib");
var app = Application.currentApplication();
app.includeStandardAdditions = true;
app.displayNotification($.getenv("MCPAL_NOTIFY_MESSAGE"), {
  withTitle: $.getenv("MCPAL_NOTIFY_TITLE")
});
"""


class OsascriptTransmitter(NotificationTransmitter):
    """Plain banners via ``osascript``; cannot observe user interaction."""

    name = "osascript"

    async def send(self, request: NotificationRequest) -> DeliveryResult:
        env = {
            **os.environ,
            "MCPAL_NOTIFY_MESSAGE": request.message,
            "MCPAL_NOTIFY_TITLE": request.title,
        }
        try:
            proc = await asyncio.create_subprocess_exec(
                "osascript", "-l", "JavaScript", "-e", _JXA_SCRIPT,
                stdout=asyncio.subprocess.DEVNULL,
                stderr=asyncio.subprocess.PIPE,
                env=env,
            )
        except OSError as e:
            raise DeliveryError(f"Could not launch osascript: {e}") from e

        _, stderr = await _communicate(proc)
        if proc.returncode != 0:
            detail = stderr.decode(errors="replace").strip()[:_MAX_STDERR_LEN]
            raise DeliveryError(detail or f"osascript exited with code {proc.returncode}")

        return DeliveryResult(response=RESPONSE_TIMEOUT)


# ---------------------------------------------------------------------------
# plyer (Linux, Windows)
# ---------------------------------------------------------------------------


class PlyerTransmitter(NotificationTransmitter):
    """Best-effort cross-platform notifications through plyer."""

    name = "plyer"

    def __init__(self, app_name: str = "MCPal") -> None:
        self._app_name = app_name

    async def send(self, request: NotificationRequest) -> DeliveryResult:
        try:
            await asyncio.to_thread(
                plyer_notification.notify,
                title=request.title,
                message=request.message,
                app_name=self._app_name,
                timeout=int(format_seconds(request.timeout_seconds)),
            )
        except NotImplementedError as e:
            raise DeliveryError(f"No notification backend available on {sys.platform}") from e
        except Exception as e:
            raise DeliveryError(f"Notification failed: {e}") from e

        return DeliveryResult(response=RESPONSE_TIMEOUT)


def select_transmitter(settings: Settings, platform: str | None = None) -> NotificationTransmitter:
    """Choose the transmitter for this machine. Called once at startup."""
    platform = platform or sys.platform

    if platform == "darwin":
        executable = find_notifier_executable(settings)
        if executable:
            logger.info("Notifications via terminal-notifier at %s", executable)
            return TerminalNotifierTransmitter(executable)
        logger.info("No notifier executable found; falling back to osascript (no actions or reply)")
        return OsascriptTransmitter()

    logger.info("Notifications via plyer on %s (no actions or reply)", platform)
    return PlyerTransmitter(app_name=settings.app_name)
