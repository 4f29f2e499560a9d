"""
Registry Command CLI - read and write registry values through StdRegProv.
"""

from typing import List, Optional

import typer

from ccmclient.application.features.registry import HIVES, VALUE_KINDS
from ccmclient.domain.targets import TransportPreference
from ccmclient.interface.cli.commands.common import (
    AS_JSON,
    CIMSESSION,
    COMPUTERS,
    PREFER,
    PSSESSION,
    run_command,
)

registry_app = typer.Typer(
    name="registry",
    help="🔑 Registry values",
    rich_markup_mode="rich",
    no_args_is_help=True,
)

HIVE = typer.Option("HKLM", "--hive", help=f"Registry hive: {', '.join(HIVES)}")
KIND = typer.Option("string", "--kind", help=f"Value kind: {', '.join(VALUE_KINDS)}")


@registry_app.command("get")
def registry_get(
    ctx: typer.Context,
    key: str = typer.Argument(..., help="Key path below the hive"),
    name: str = typer.Argument(..., help="Value name"),
    hive: str = HIVE,
    kind: str = KIND,
    computers: Optional[List[str]] = COMPUTERS,
    prefer: Optional[TransportPreference] = PREFER,
    pssession: bool = PSSESSION,
    cimsession: bool = CIMSESSION,
    as_json: bool = AS_JSON,
):
    """Read a registry value."""
    run_command(
        ctx, computers, prefer, pssession, cimsession, as_json, "Registry Value",
        lambda toolkit, targets, pref: toolkit.get_registry_value(targets, hive, key, name, kind, pref),
    )


@registry_app.command("set")
def registry_set(
    ctx: typer.Context,
    key: str = typer.Argument(..., help="Key path below the hive"),
    name: str = typer.Argument(..., help="Value name"),
    values: List[str] = typer.Argument(..., help="Value; several for multi_string"),
    hive: str = HIVE,
    kind: str = KIND,
    computers: Optional[List[str]] = COMPUTERS,
    prefer: Optional[TransportPreference] = PREFER,
    pssession: bool = PSSESSION,
    cimsession: bool = CIMSESSION,
    as_json: bool = AS_JSON,
):
    """Write a registry value, creating the key when missing."""
    value = values if kind.strip().lower() == "multi_string" else " ".join(values)
    run_command(
        ctx, computers, prefer, pssession, cimsession, as_json, "Registry Value",
        lambda toolkit, targets, pref: toolkit.set_registry_value(targets, hive, key, name, value, kind, pref),
    )
