"""
Client Command CLI - client identity and provisioning mode.
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

client_app = typer.Typer(
    name="client",
    help="🖥️ ConfigMgr client identity and provisioning mode",
    rich_markup_mode="rich",
    no_args_is_help=True,
)


@client_app.command("info")
def client_info(
    ctx: typer.Context,
    computers: Optional[List[str]] = COMPUTERS,
    prefer: Optional[TransportPreference] = PREFER,
    pssession: bool = PSSESSION,
    cimsession: bool = CIMSESSION,
    as_json: bool = AS_JSON,
):
    """Show client version, client ID, site code and management point."""
    run_command(
        ctx, computers, prefer, pssession, cimsession, as_json, "Client Info",
        lambda toolkit, targets, pref: toolkit.get_client_info(targets, pref),
    )


@client_app.command("provisioning")
def provisioning(
    ctx: typer.Context,
    enable: Optional[bool] = typer.Option(
        None,
        "--enable/--disable",
        help="Switch provisioning mode; omit to only show the current state.",
    ),
    computers: Optional[List[str]] = COMPUTERS,
    prefer: Optional[TransportPreference] = PREFER,
    pssession: bool = PSSESSION,
    cimsession: bool = CIMSESSION,
    as_json: bool = AS_JSON,
):
    """Show or switch client provisioning mode."""
    if enable is None:
        action = lambda toolkit, targets, pref: toolkit.get_provisioning_mode(targets, pref)
    else:
        action = lambda toolkit, targets, pref: toolkit.set_provisioning_mode(targets, enable, pref)
    run_command(ctx, computers, prefer, pssession, cimsession, as_json, "Provisioning Mode", action)
