"""
Schedule Command CLI - trigger client actions by schedule.
"""

from typing import List, Optional

import typer
from rich.console import Console
from rich.table import Table

from ccmclient.application.features.schedules import SCHEDULES
from ccmclient.domain.targets import TransportPreference
from ccmclient.interface.cli.commands.common import (
    AS_JSON,
    CIMSESSION,
    COMPUTERS,
    PREFER,
    PSSESSION,
    run_command,
)

console = Console()

schedule_app = typer.Typer(
    name="schedule",
    help="⏱️ Trigger client actions by schedule name or ID",
    rich_markup_mode="rich",
    no_args_is_help=True,
)


@schedule_app.command("trigger")
def schedule_trigger(
    ctx: typer.Context,
    schedule: str = typer.Argument(..., help="Schedule name (see `schedule list`) or {GUID}"),
    computers: Optional[List[str]] = COMPUTERS,
    prefer: Optional[TransportPreference] = PREFER,
    pssession: bool = PSSESSION,
    cimsession: bool = CIMSESSION,
    as_json: bool = AS_JSON,
):
    """Trigger a client schedule on every target."""
    run_command(
        ctx, computers, prefer, pssession, cimsession, as_json, "Schedule Trigger",
        lambda toolkit, targets, pref: toolkit.trigger_schedule(targets, schedule, pref),
    )


@schedule_app.command("list")
def schedule_list():
    """List the known schedule names and IDs."""
    table = Table(title="Client Schedules")
    table.add_column("Name", style="cyan")
    table.add_column("Schedule ID", style="yellow")
    for name, schedule_id in SCHEDULES.items():
        table.add_row(name, schedule_id)
    console.print(table)
