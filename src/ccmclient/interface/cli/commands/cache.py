"""
Cache Command CLI - client cache configuration and content.
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

cache_app = typer.Typer(
    name="cache",
    help="💾 Client cache size and content",
    rich_markup_mode="rich",
    no_args_is_help=True,
)


@cache_app.command("info")
def cache_info(
    ctx: typer.Context,
    computers: Optional[List[str]] = COMPUTERS,
    prefer: Optional[TransportPreference] = PREFER,
    pssession: bool = PSSESSION,
    cimsession: bool = CIMSESSION,
    as_json: bool = AS_JSON,
):
    """Show cache location and size."""
    run_command(
        ctx, computers, prefer, pssession, cimsession, as_json, "Cache Info",
        lambda toolkit, targets, pref: toolkit.get_cache_info(targets, pref),
    )


@cache_app.command("content")
def cache_content(
    ctx: typer.Context,
    computers: Optional[List[str]] = COMPUTERS,
    prefer: Optional[TransportPreference] = PREFER,
    pssession: bool = PSSESSION,
    cimsession: bool = CIMSESSION,
    as_json: bool = AS_JSON,
):
    """List content held in the cache."""
    run_command(
        ctx, computers, prefer, pssession, cimsession, as_json, "Cache Content",
        lambda toolkit, targets, pref: toolkit.get_cache_content(targets, pref),
        columns=["content_id", "content_version", "size_kb", "last_referenced", "persist", "location"],
    )


@cache_app.command("set-size")
def cache_set_size(
    ctx: typer.Context,
    size_mb: int = typer.Argument(..., min=1, help="New cache size in MB"),
    computers: Optional[List[str]] = COMPUTERS,
    prefer: Optional[TransportPreference] = PREFER,
    pssession: bool = PSSESSION,
    cimsession: bool = CIMSESSION,
    as_json: bool = AS_JSON,
):
    """Resize the cache (needs local execution or a PSSession)."""
    run_command(
        ctx, computers, prefer, pssession, cimsession, as_json, "Cache Size",
        lambda toolkit, targets, pref: toolkit.set_cache_size(targets, size_mb, pref),
    )


@cache_app.command("clear")
def cache_clear(
    ctx: typer.Context,
    content_ids: Optional[List[str]] = typer.Option(
        None,
        "--content-id",
        help="Only remove this content; repeat for several. Clears everything when omitted.",
    ),
    force: bool = typer.Option(False, "--force", "-f", help="Clear without confirmation"),
    computers: Optional[List[str]] = COMPUTERS,
    prefer: Optional[TransportPreference] = PREFER,
    pssession: bool = PSSESSION,
    cimsession: bool = CIMSESSION,
    as_json: bool = AS_JSON,
):
    """Delete cached content (needs local execution or a PSSession)."""
    if not content_ids and not force:
        if not typer.confirm("Clear all cached content?"):
            typer.echo("Cancelled")
            return
    run_command(
        ctx, computers, prefer, pssession, cimsession, as_json, "Cache Clear",
        lambda toolkit, targets, pref: toolkit.clear_cache(targets, content_ids, pref),
    )
