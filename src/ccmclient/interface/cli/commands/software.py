"""
Software Command CLI - deployed applications and software updates.
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

software_app = typer.Typer(
    name="software",
    help="📦 Deployed applications and software updates",
    rich_markup_mode="rich",
    no_args_is_help=True,
)


@software_app.command("apps")
def software_apps(
    ctx: typer.Context,
    computers: Optional[List[str]] = COMPUTERS,
    prefer: Optional[TransportPreference] = PREFER,
    pssession: bool = PSSESSION,
    cimsession: bool = CIMSESSION,
    as_json: bool = AS_JSON,
):
    """List applications deployed to the client."""
    run_command(
        ctx, computers, prefer, pssession, cimsession, as_json, "Applications",
        lambda toolkit, targets, pref: toolkit.get_applications(targets, pref),
        columns=["name", "software_version", "install_state", "revision", "publisher"],
    )


@software_app.command("install-app")
def software_install_app(
    ctx: typer.Context,
    app_id: str = typer.Argument(..., help="Application ID (ScopeId_.../Application_...)"),
    computers: Optional[List[str]] = COMPUTERS,
    prefer: Optional[TransportPreference] = PREFER,
    pssession: bool = PSSESSION,
    cimsession: bool = CIMSESSION,
    as_json: bool = AS_JSON,
):
    """Start installation of a deployed application."""
    run_command(
        ctx, computers, prefer, pssession, cimsession, as_json, "Install Application",
        lambda toolkit, targets, pref: toolkit.install_application(targets, app_id, pref),
        columns=["name", "revision", "install_state"],
    )


@software_app.command("updates")
def software_updates(
    ctx: typer.Context,
    computers: Optional[List[str]] = COMPUTERS,
    prefer: Optional[TransportPreference] = PREFER,
    pssession: bool = PSSESSION,
    cimsession: bool = CIMSESSION,
    as_json: bool = AS_JSON,
):
    """List software updates known to the client."""
    run_command(
        ctx, computers, prefer, pssession, cimsession, as_json, "Software Updates",
        lambda toolkit, targets, pref: toolkit.get_software_updates(targets, pref),
        columns=["article_id", "name", "evaluation_state_name", "percent_complete", "deadline"],
    )


@software_app.command("install-updates")
def software_install_updates(
    ctx: typer.Context,
    article_ids: Optional[List[str]] = typer.Option(
        None,
        "--article",
        "-a",
        help="KB article to install; repeat for several. All missing updates when omitted.",
    ),
    computers: Optional[List[str]] = COMPUTERS,
    prefer: Optional[TransportPreference] = PREFER,
    pssession: bool = PSSESSION,
    cimsession: bool = CIMSESSION,
    as_json: bool = AS_JSON,
):
    """Install missing updates (needs local execution or a PSSession)."""
    run_command(
        ctx, computers, prefer, pssession, cimsession, as_json, "Install Updates",
        lambda toolkit, targets, pref: toolkit.install_software_updates(targets, article_ids, pref),
    )
