"""
Inventory Command CLI - cycle status and triggering.
"""

from typing import List, Optional

import typer

from ccmclient.application.features.inventory import INVENTORY_CYCLES
from ccmclient.domain.targets import TransportPreference
from ccmclient.interface.cli.commands.common import (
    AS_JSON,
    CIMSESSION,
    COMPUTERS,
    PREFER,
    PSSESSION,
    run_command,
)

inventory_app = typer.Typer(
    name="inventory",
    help="📋 Inventory cycle status and triggering",
    rich_markup_mode="rich",
    no_args_is_help=True,
)


@inventory_app.command("status")
def inventory_status(
    ctx: typer.Context,
    computers: Optional[List[str]] = COMPUTERS,
    prefer: Optional[TransportPreference] = PREFER,
    pssession: bool = PSSESSION,
    cimsession: bool = CIMSESSION,
    as_json: bool = AS_JSON,
):
    """Show when each inventory cycle last ran and reported."""
    run_command(
        ctx, computers, prefer, pssession, cimsession, as_json, "Inventory Status",
        lambda toolkit, targets, pref: toolkit.get_inventory_status(targets, pref),
    )


@inventory_app.command("trigger")
def inventory_trigger(
    ctx: typer.Context,
    cycle: str = typer.Argument(
        "HardwareInventory",
        help=f"Cycle to run: {', '.join(INVENTORY_CYCLES)}",
    ),
    full: bool = typer.Option(
        False,
        "--full",
        help="Reset the cycle status first so the client sends a full report (needs local or PSSession).",
    ),
    computers: Optional[List[str]] = COMPUTERS,
    prefer: Optional[TransportPreference] = PREFER,
    pssession: bool = PSSESSION,
    cimsession: bool = CIMSESSION,
    as_json: bool = AS_JSON,
):
    """Trigger an inventory cycle, optionally as a full report."""
    run_command(
        ctx, computers, prefer, pssession, cimsession, as_json, "Inventory Trigger",
        lambda toolkit, targets, pref: toolkit.trigger_inventory(targets, cycle, full, pref),
    )
