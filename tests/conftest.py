"""Shared test fixtures."""

from __future__ import annotations

from pathlib import Path

import pytest

from mcpal.core.config import Settings
from mcpal.notify.transmitters import NotificationTransmitter
from mcpal.notify.types import DeliveryError, DeliveryResult, NotificationRequest


class FakeTransmitter(NotificationTransmitter):
    """Records requests and answers with a canned result or error."""

    name = "fake"
    supports_actions = True
    supports_reply = True

    def __init__(
        self,
        result: DeliveryResult | None = None,
        error: Exception | None = None,
    ) -> None:
        self.result = result or DeliveryResult(response="timeout", activation_type="timeout")
        self.error = error
        self.requests: list[NotificationRequest] = []

    async def send(self, request: NotificationRequest) -> DeliveryResult:
        self.requests.append(request)
        if self.error:
            raise self.error
        return self.result


@pytest.fixture
def clients_dir(tmp_path: Path) -> Path:
    """Icon directory with a claude icon only."""
    path = tmp_path / "assets" / "clients"
    path.mkdir(parents=True)
    (path / "claude.png").write_bytes(b"\x89PNG\r\n\x1a\n")
    return path


@pytest.fixture
def settings(tmp_path: Path, clients_dir: Path) -> Settings:
    """Create Settings pointing at temp directories."""
    return Settings(
        data_dir=tmp_path / "data",
        assets_dir=clients_dir.parent,
        log_level="DEBUG",
        _env_file=None,
    )


@pytest.fixture
def fake_transmitter() -> FakeTransmitter:
    return FakeTransmitter()


@pytest.fixture
def failing_transmitter() -> FakeTransmitter:
    return FakeTransmitter(error=DeliveryError("Notification permission denied"))


@pytest.fixture
def make_transmitter():
    """Factory for transmitters with a custom result or error."""
    return FakeTransmitter
