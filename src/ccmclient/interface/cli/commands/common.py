"""
Shared command plumbing - target options, session scope and result output.
"""

import logging
from contextlib import contextmanager
from typing import Callable, Iterator, List, Optional, Union

import typer

from ccmclient.application.container import Container
from ccmclient.domain.errors import TransportError
from ccmclient.domain.results import ResultRecord
from ccmclient.domain.sessions import CimSession, PSSession
from ccmclient.domain.targets import TransportPreference, local_computer_name
from ccmclient.interface.cli.formatters import ResultFormatter

logger = logging.getLogger(__name__)

COMPUTERS = typer.Option(
    None,
    "--computer",
    "-c",
    help="Target computer; repeat for several. Defaults to this machine.",
)
PREFER = typer.Option(
    None,
    "--prefer",
    help="Preferred session kind when both could serve a hostname.",
    case_sensitive=False,
)
PSSESSION = typer.Option(
    False,
    "--pssession",
    help="Open PowerShell remoting sessions to the targets with the configured credentials.",
)
CIMSESSION = typer.Option(
    False,
    "--cimsession",
    help="Open CIM sessions (WS-Man) to the targets with the configured credentials.",
)
AS_JSON = typer.Option(False, "--json", help="Print results as JSON.")


def get_container(ctx: typer.Context) -> Container:
    """Container set up by the root callback (or injected by the caller)."""
    container = ctx.find_root().obj
    if container is None:
        container = Container()
        ctx.find_root().obj = container
    return container


@contextmanager
def session_scope(
    container: Container,
    computers: Optional[List[str]],
    open_pssession: bool,
    prefer: Optional[TransportPreference],
    open_cimsession: bool = False,
) -> Iterator[tuple[List[str], Optional[TransportPreference]]]:
    """
    Yield (targets, preference) for one command.

    With open_pssession, a PSSession is opened and registered for every
    remote target and closed on exit. A target that cannot be reached over
    WinRM is left to the resolver's fallback. With open_cimsession, a
    CimSession carrying the configured credentials is registered the same
    way; when both are set, --prefer (or PSSession) breaks the tie.
    """
    targets = list(computers) if computers else [local_computer_name()]
    opened: List[Union[CimSession, PSSession]] = []

    if open_pssession:
        prefer = prefer or TransportPreference.PS_SESSION
        for name in targets:
            if container.resolver.is_local(name):
                continue
            try:
                session = container.psremote_client.open_session(name)
            except TransportError as e:
                logger.warning("Could not open a PSSession to %s: %s", name, e.message)
                continue
            container.session_registry.register(session)
            opened.append(session)

    if open_cimsession:
        prefer = prefer or TransportPreference.CIM_SESSION
        settings = container.settings
        for name in targets:
            if container.resolver.is_local(name):
                continue
            cim_session = CimSession(
                computer_name=name, username=settings.username, password=settings.resolve_password()
            )
            container.session_registry.register(cim_session)
            opened.append(cim_session)

    try:
        yield targets, prefer
    finally:
        for session in opened:
            container.session_registry.unregister(session)
            session.close()


def run_command(
    ctx: typer.Context,
    computers: Optional[List[str]],
    prefer: Optional[TransportPreference],
    open_pssession: bool,
    open_cimsession: bool,
    as_json: bool,
    title: str,
    action: Callable[..., List[ResultRecord]],
    columns: Optional[List[str]] = None,
) -> None:
    """
    Run a toolkit action over the targets and print the results.

    `action` is called as action(toolkit, targets, preference). Exits with
    code 1 when any target failed or the arguments were rejected.
    """
    container = get_container(ctx)
    with session_scope(container, computers, open_pssession, prefer, open_cimsession) as (targets, preference):
        try:
            records = action(container.toolkit, targets, preference)
        except ValueError as e:
            logger.error("%s: %s", title, e)
            typer.echo(f"❌ {e}", err=True)
            raise typer.Exit(1)

    formatter = ResultFormatter()
    if as_json:
        formatter.display_json(records)
    else:
        formatter.display_results(records, title, columns)

    if any(not record.success for record in records):
        raise typer.Exit(1)
