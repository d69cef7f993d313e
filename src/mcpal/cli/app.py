"""Click CLI group with serve, test-notification, and doctor commands."""

from __future__ import annotations

import asyncio
import sys
from typing import Any

import click
from rich.console import Console
from rich.table import Table

from mcpal.core.config import get_settings
from mcpal.core.logging import setup_logging

# Demo notifications for test-notification, keyed by kind
_TEST_NOTIFICATIONS: dict[str, dict[str, Any]] = {
    "simple": {
        "title": "Test Notification",
        "message": "This is a simple test notification.",
    },
    "actions": {
        "title": "Action Test",
        "message": "Choose an option from the dropdown.",
        "actions": ["Accept", "Reject", "Later"],
        "dropdownLabel": "Choose Action",
    },
    "reply": {
        "title": "Reply Test",
        "message": "What would you like to say?",
        "reply": True,
    },
}


@click.group(invoke_without_command=True)
@click.pass_context
def cli(ctx: click.Context) -> None:
    """MCPal: native desktop notifications for MCP clients."""
    if ctx.invoked_subcommand is None:
        ctx.invoke(serve)


@cli.command()
def serve() -> None:
    """Run the MCP server over stdio."""
    settings = get_settings()
    setup_logging(settings.log_level, settings.app_log_path if settings.log_to_file else None)

    from mcpal.server import run_stdio_server

    asyncio.run(run_stdio_server(settings))


@cli.command("test-notification")
@click.argument(
    "kind",
    type=click.Choice(["simple", "actions", "reply", "all"]),
    default="simple",
)
@click.option("--client", "client_name", default="claude", help="Client name used to pick the icon")
def test_notification(kind: str, client_name: str) -> None:
    """Send demo notifications through the full tool pipeline."""
    settings = get_settings()
    setup_logging(settings.log_level)
    console = Console()

    from mcpal.notify.delivery import create_notifier
    from mcpal.notify.icons import resolve_icon
    from mcpal.tools.notification_tool import make_send_notification
    from mcpal.tools.result import format_legacy_text

    icon = resolve_icon(client_name, settings.clients_dir)
    console.print(f"[bold]Clients dir:[/bold] {settings.clients_dir}")
    console.print(f"[bold]Test client:[/bold] {client_name}")
    console.print(f"[bold]Content image:[/bold] {icon or '(none)'}")

    notifier = create_notifier(settings)
    handler = make_send_notification(notifier, settings)
    kinds = list(_TEST_NOTIFICATIONS) if kind == "all" else [kind]

    async def _run() -> bool:
        ok = True
        for name in kinds:
            console.print(f"\n[bold cyan]--- Testing: {name} ---[/bold cyan]")
            payload = await handler(dict(_TEST_NOTIFICATIONS[name]), client_name=client_name)
            console.print(format_legacy_text(payload), markup=False)
            ok = ok and payload.status == "sent"
        return ok

    if not asyncio.run(_run()):
        raise SystemExit(1)


@cli.command()
def doctor() -> None:
    """Show how notifications will be delivered on this machine."""
    settings = get_settings()
    console = Console()

    from mcpal.notify.config import CLIENT_ICONS
    from mcpal.notify.paths import candidate_notifier_paths
    from mcpal.notify.transmitters import TerminalNotifierTransmitter, select_transmitter

    console.print(f"[bold]Platform:[/bold] {sys.platform}")
    console.print(f"[bold]Data dir:[/bold] {settings.data_dir}")

    if sys.platform == "darwin":
        for candidate in candidate_notifier_paths(settings):
            mark = "[green]found[/green]" if candidate.is_file() else "[dim]missing[/dim]"
            console.print(f"  {mark} {candidate}")

    transmitter = select_transmitter(settings)
    console.print(f"[bold]Transmitter:[/bold] {transmitter.name}")
    if isinstance(transmitter, TerminalNotifierTransmitter):
        console.print(f"[bold]Notifier:[/bold] {transmitter.executable}")
    console.print(
        f"[bold]Actions:[/bold] {'yes' if transmitter.supports_actions else 'no'}  "
        f"[bold]Reply:[/bold] {'yes' if transmitter.supports_reply else 'no'}"
    )

    table = Table(title=f"Client icons ({settings.clients_dir})")
    table.add_column("Client")
    table.add_column("Icon")
    table.add_column("Present")
    for alias, icon_file in CLIENT_ICONS.items():
        present = (settings.clients_dir / icon_file).is_file()
        table.add_row(alias, icon_file, "yes" if present else "no")
    console.print(table)
