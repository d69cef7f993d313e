"""Types shared by the notification delivery layer."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path


class DeliveryError(Exception):
    """The notification could not be presented or its outcome not collected."""


@dataclass(frozen=True)
class NotificationRequest:
    """A fully resolved notification, ready for a transmitter."""

    message: str
    title: str
    timeout_seconds: float
    actions: tuple[str, ...] = ()
    dropdown_label: str | None = None
    reply: bool = False
    content_image: Path | None = None


@dataclass(frozen=True)
class DeliveryResult:
    """How the user ended their interaction with a notification.

    ``response`` is a sentinel ("timeout", "closed", "activate", "replied")
    or the label of the action the user clicked. ``reply`` is only set when
    the user submitted text.
    """

    response: str
    reply: str | None = None
    activation_type: str | None = None
