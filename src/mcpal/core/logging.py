"""Application logging and append-only JSONL audit trail."""

from __future__ import annotations

import json
import logging
import sys
from datetime import datetime, timezone
from pathlib import Path
from typing import Any

_MAX_AUDIT_VALUE_LEN = 500


def _truncate(value: Any) -> Any:
    """Truncate large strings so one notification cannot bloat the audit file."""
    if isinstance(value, str):
        if len(value) > _MAX_AUDIT_VALUE_LEN:
            return value[:_MAX_AUDIT_VALUE_LEN] + f"... (truncated, {len(value)} total)"
        return value
    if isinstance(value, dict):
        return {k: _truncate(v) for k, v in value.items()}
    if isinstance(value, list):
        return [_truncate(v) for v in value]
    return value


class AuditLogger:
    """Append-only JSONL audit logger for notification calls."""

    def __init__(self, path: Path) -> None:
        self._path = path
        self._path.parent.mkdir(parents=True, exist_ok=True)

    @property
    def path(self) -> Path:
        return self._path

    def log(
        self,
        event_type: str,
        *,
        tool_name: str = "",
        client_name: str = "",
        input_data: dict[str, Any] | None = None,
        output_data: dict[str, Any] | None = None,
        duration_ms: int = 0,
        error: str = "",
    ) -> None:
        entry: dict[str, Any] = {
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "event_type": event_type,
        }
        if tool_name:
            entry["tool_name"] = tool_name
        if client_name:
            entry["client_name"] = client_name
        if input_data:
            entry["input"] = _truncate(input_data)
        if output_data:
            entry["output"] = _truncate(output_data)
        if duration_ms:
            entry["duration_ms"] = duration_ms
        if error:
            entry["error"] = _truncate(error)

        with open(self._path, "a", encoding="utf-8") as f:
            f.write(json.dumps(entry, default=str, ensure_ascii=False) + "\n")


def setup_logging(log_level: str = "INFO", app_log_path: Path | None = None) -> None:
    """Configure application logging.

    Always logs to stderr: stdout belongs to the stdio MCP transport.
    """
    handlers: list[logging.Handler] = [logging.StreamHandler(sys.stderr)]

    if app_log_path:
        app_log_path.parent.mkdir(parents=True, exist_ok=True)
        file_handler = logging.FileHandler(app_log_path, encoding="utf-8")
        file_handler.setFormatter(
            logging.Formatter("%(asctime)s %(levelname)s %(name)s %(message)s")
        )
        handlers.append(file_handler)

    logging.basicConfig(
        level=getattr(logging, log_level.upper(), logging.INFO),
        format="%(asctime)s %(levelname)s %(name)s %(message)s",
        handlers=handlers,
        force=True,
    )
