"""Application configuration via environment variables."""

from __future__ import annotations

from pathlib import Path

from pydantic import Field
from pydantic_settings import BaseSettings

from mcpal.notify.config import DEFAULT_NOTIFICATION_TITLE, DEFAULT_TIMEOUTS, TimeoutTiers

_PACKAGE_ASSETS = Path(__file__).resolve().parent.parent / "assets"


class Settings(BaseSettings):
    model_config = {"env_prefix": "MCPAL_", "env_file": ".env", "extra": "ignore"}

    # Branding
    default_title: str = DEFAULT_NOTIFICATION_TITLE
    app_name: str = "MCPal"

    # Timeouts (seconds) per interaction mode
    timeout_simple: float = Field(default=DEFAULT_TIMEOUTS.simple, gt=0)
    timeout_actions: float = Field(default=DEFAULT_TIMEOUTS.actions, gt=0)
    timeout_reply: float = Field(default=DEFAULT_TIMEOUTS.reply, gt=0)

    # Extra wait on top of the notification timeout before giving up on the notifier
    delivery_grace_seconds: float = Field(default=5.0, ge=0)

    # Notifier discovery; an explicit path wins over the bundle in data_dir and PATH
    notifier_path: Path | None = None

    # Paths
    data_dir: Path = Path.home() / ".mcpal"
    assets_dir: Path = _PACKAGE_ASSETS

    # Logging
    log_level: str = "INFO"
    log_to_file: bool = False

    # Audit trail of notification calls (JSONL)
    audit_enabled: bool = False

    @property
    def timeout_tiers(self) -> TimeoutTiers:
        return TimeoutTiers(
            simple=self.timeout_simple,
            actions=self.timeout_actions,
            reply=self.timeout_reply,
        )

    @property
    def clients_dir(self) -> Path:
        return self.assets_dir / "clients"

    @property
    def branded_notifier_path(self) -> Path:
        return self.data_dir / "MCPal.app" / "Contents" / "MacOS" / "terminal-notifier"

    @property
    def unbranded_notifier_path(self) -> Path:
        return self.data_dir / "terminal-notifier.app" / "Contents" / "MacOS" / "terminal-notifier"

    @property
    def app_log_path(self) -> Path:
        return self.data_dir / "logs" / "app.log"

    @property
    def audit_log_path(self) -> Path:
        return self.data_dir / "logs" / "audit.jsonl"


_settings: Settings | None = None


def get_settings() -> Settings:
    global _settings
    if _settings is None:
        _settings = Settings()
    return _settings
