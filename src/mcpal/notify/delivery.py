"""Notification delivery adapter: one notification per call with uniform results and errors."""

from __future__ import annotations

import asyncio
import logging
from dataclasses import replace
from typing import TYPE_CHECKING

from mcpal.notify.transmitters import (
    RESPONSE_TIMEOUT,
    NotificationTransmitter,
    select_transmitter,
)
from mcpal.notify.types import DeliveryError, DeliveryResult, NotificationRequest

if TYPE_CHECKING:
    from mcpal.core.config import Settings

logger = logging.getLogger(__name__)


class Notifier:
    """Delivers notifications through the transmitter picked at startup.

    Each ``deliver`` call presents exactly one notification and suspends
    until the user interacts with it, it times out, or the mechanism fails.
    Whatever goes wrong underneath surfaces as a DeliveryError.
    """

    def __init__(self, transmitter: NotificationTransmitter, grace_seconds: float = 5.0) -> None:
        self._transmitter = transmitter
        self._grace_seconds = grace_seconds

    @property
    def transmitter(self) -> NotificationTransmitter:
        return self._transmitter

    async def deliver(self, request: NotificationRequest) -> DeliveryResult:
        request = self._fit_to_transmitter(request)
        deadline = request.timeout_seconds + self._grace_seconds

        scope = asyncio.timeout(deadline)
        try:
            async with scope:
                return await self._transmitter.send(request)
        except TimeoutError as e:
            if not scope.expired():
                # Raised by the transmitter itself, not our deadline
                raise DeliveryError(f"{type(e).__name__}: {e}") from e
            logger.warning(
                "%s gave no answer within %.1fs; reporting timeout",
                self._transmitter.name, deadline,
            )
            return DeliveryResult(response=RESPONSE_TIMEOUT, activation_type="timeout")
        except DeliveryError:
            raise
        except Exception as e:
            raise DeliveryError(f"{type(e).__name__}: {e}") from e

    def _fit_to_transmitter(self, request: NotificationRequest) -> NotificationRequest:
        """Drop features the active mechanism cannot honor."""
        if request.actions and not self._transmitter.supports_actions:
            logger.debug("%s ignores action buttons", self._transmitter.name)
            request = replace(request, actions=(), dropdown_label=None)
        if request.reply and not self._transmitter.supports_reply:
            logger.debug("%s ignores reply input", self._transmitter.name)
            request = replace(request, reply=False)
        return request


def create_notifier(settings: Settings) -> Notifier:
    return Notifier(
        select_transmitter(settings),
        grace_seconds=settings.delivery_grace_seconds,
    )
