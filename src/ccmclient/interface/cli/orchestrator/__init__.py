"""
CLI Orchestrator - Main Entry Point

Wires the command groups into one typer app and sets up logging and the
dependency container before any command runs.
"""

import logging
from pathlib import Path
from typing import Optional

import typer

from ccmclient import __version__
from ccmclient.application.container import Container
from ccmclient.infrastructure.logging_config import setup_logging
from ccmclient.interface.cli.commands import (
    cache_app,
    client_app,
    inventory_app,
    maintenance_app,
    registry_app,
    schedule_app,
    software_app,
)

logger = logging.getLogger(__name__)

app = typer.Typer(
    name="ccmclient",
    help="🛠️ Configuration Manager client administration toolkit",
    add_completion=False,
    rich_markup_mode="rich",
    no_args_is_help=True,
    context_settings={"help_option_names": ["-h", "--help"]},
)

app.add_typer(client_app, name="client")
app.add_typer(inventory_app, name="inventory")
app.add_typer(schedule_app, name="schedule")
app.add_typer(cache_app, name="cache")
app.add_typer(software_app, name="software")
app.add_typer(maintenance_app, name="maintenance")
app.add_typer(registry_app, name="registry")


def _version_callback(value: bool) -> None:
    if value:
        typer.echo(f"ccmclient {__version__}")
        raise typer.Exit()


@app.callback()
def main_callback(
    ctx: typer.Context,
    config_dir: Optional[Path] = typer.Option(
        None,
        "--config-dir",
        help="Directory holding ccmclient.json(c). Defaults to ./config",
    ),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Debug logging on the console"),
    log_file: Optional[Path] = typer.Option(None, "--log-file", help="Also write a DEBUG log to this file"),
    version: bool = typer.Option(
        False, "--version", callback=_version_callback, is_eager=True, help="Show the version and exit"
    ),
):
    """
    🛠️ ccmclient - ConfigMgr client administration over CIM and PowerShell remoting

    Every command takes one or more `--computer` targets (this machine when
    omitted). Local names run on the local PowerShell host; remote names use
    an open CIM or PowerShell session when one exists, else a plain CIM
    connection by hostname.

    📁 **Configuration:** `config/ccmclient.json` (or `.jsonc`) for WinRM
    settings, credentials and the default transport preference.
    """
    container = ctx.obj
    if container is None:
        container = Container(config_dir)
        ctx.obj = container

    try:
        settings = container.settings
    except ValueError as e:
        typer.echo(f"❌ Invalid configuration: {e}", err=True)
        raise typer.Exit(1)

    level = logging.DEBUG if verbose else getattr(logging, settings.log_level)
    setup_logging(level, str(log_file) if log_file else settings.log_file)
    logger.debug("ccmclient %s, config dir %s", __version__, container.config_dir)

    ctx.call_on_close(container.close)
