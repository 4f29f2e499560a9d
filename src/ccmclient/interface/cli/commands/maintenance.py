"""
Maintenance Command CLI - maintenance windows.
"""

from typing import List, Optional

import typer

from ccmclient.domain.targets import TransportPreference
from ccmclient.interface.cli.commands.common import (
    AS_JSON,
    CIMSESSION,
    COMPUTERS,
    PREFER,
    PSSESSION,
    run_command,
)

maintenance_app = typer.Typer(
    name="maintenance",
    help="🗓️ Maintenance windows",
    rich_markup_mode="rich",
    no_args_is_help=True,
)


@maintenance_app.command("windows")
def maintenance_windows(
    ctx: typer.Context,
    computers: Optional[List[str]] = COMPUTERS,
    prefer: Optional[TransportPreference] = PREFER,
    pssession: bool = PSSESSION,
    cimsession: bool = CIMSESSION,
    as_json: bool = AS_JSON,
):
    """List maintenance windows, earliest first."""
    run_command(
        ctx, computers, prefer, pssession, cimsession, as_json, "Maintenance Windows",
        lambda toolkit, targets, pref: toolkit.get_maintenance_windows(targets, pref),
        columns=["type_name", "start_time", "end_time", "duration_seconds"],
    )
