"""
Target resolver - turns a target into a ConnectionContext.

Local names always resolve to in-process execution, even when the caller
passed a session handle for this machine. Remote hostnames go through the
fallback procedure:

    PROBE_PREFERRED -> PROBE_ALTERNATE -> BARE_HOSTNAME -> RESOLVED

Probes are plain callables (name -> open handle or None) so tests can drive
every path without live sessions. Resolution is stateless and never raises
for a well-formed target.
"""

from __future__ import annotations

import logging
from typing import Callable, Optional, Union

from ccmclient.domain.context import (
    CimSessionParams,
    ComputerNameParams,
    ConnectionContext,
    PSSessionParams,
    ResolutionState,
)
from ccmclient.domain.errors import ResolutionDegraded
from ccmclient.domain.sessions import CimSession, PSSession
from ccmclient.domain.targets import (
    Target,
    TransportKind,
    TransportPreference,
    as_target,
    is_local_name,
    local_computer_name,
    local_fqdn,
    target_name,
)
from ccmclient.infrastructure.sessions import SessionRegistry

logger = logging.getLogger(__name__)

SessionProbe = Callable[[str], Optional[Union[CimSession, PSSession]]]


def _no_session(_: str) -> None:
    return None


class TargetResolver:
    """Normalizes targets into connection contexts."""

    def __init__(
        self,
        cim_probe: SessionProbe | None = None,
        ps_probe: SessionProbe | None = None,
        local_name_provider: Callable[[], str] = local_computer_name,
        local_fqdn_provider: Callable[[], str] = local_fqdn,
    ) -> None:
        """
        Args:
            cim_probe: Finds an open CimSession for a hostname
            ps_probe: Finds an open PSSession for a hostname
            local_name_provider: Returns this machine's name
            local_fqdn_provider: Returns this machine's FQDN; only asked for dotted names
        """
        self._probes: dict[TransportPreference, SessionProbe] = {
            TransportPreference.CIM_SESSION: cim_probe or _no_session,
            TransportPreference.PS_SESSION: ps_probe or _no_session,
        }
        self._local_name_provider = local_name_provider
        self._local_fqdn_provider = local_fqdn_provider

    @classmethod
    def from_registry(
        cls,
        registry: SessionRegistry,
        local_name_provider: Callable[[], str] = local_computer_name,
        local_fqdn_provider: Callable[[], str] = local_fqdn,
    ) -> TargetResolver:
        """Resolver whose probes look sessions up in `registry`."""
        return cls(
            cim_probe=registry.find_cim_session,
            ps_probe=registry.find_ps_session,
            local_name_provider=local_name_provider,
            local_fqdn_provider=local_fqdn_provider,
        )

    def is_local(self, name: str) -> bool:
        fqdn = self._local_fqdn_provider() if "." in name else ""
        return is_local_name(name, self._local_name_provider(), fqdn)

    def resolve(
        self,
        target: Target | str,
        preference: TransportPreference | None = None,
    ) -> ConnectionContext:
        """
        Resolve one target.

        Args:
            target: Hostname (or plain string), CimSession or PSSession
            preference: Tie-break between session kinds for hostnames

        Returns:
            ConnectionContext for this call only; never cache it
        """
        target = as_target(target)
        name = target_name(target)

        if self.is_local(name):
            logger.debug("%s is this machine - using local execution", name)
            return ConnectionContext.local(name, preference)

        if isinstance(target, CimSession):
            return ConnectionContext(
                resolved_name=name,
                transport_kind=TransportKind.CIM_SESSION,
                params=CimSessionParams(target),
                preference=preference,
                resolution_path=(ResolutionState.RESOLVED,),
            )
        if isinstance(target, PSSession):
            return ConnectionContext(
                resolved_name=name,
                transport_kind=TransportKind.PS_SESSION,
                params=PSSessionParams(target),
                preference=preference,
                resolution_path=(ResolutionState.RESOLVED,),
            )

        return self._resolve_hostname(name, preference)

    def _resolve_hostname(
        self, name: str, preference: TransportPreference | None
    ) -> ConnectionContext:
        primary = preference or TransportPreference.CIM_SESSION
        alternate = primary.other
        path: list[ResolutionState] = []
        state = ResolutionState.PROBE_PREFERRED

        while True:
            path.append(state)

            if state is ResolutionState.PROBE_PREFERRED:
                handle = self._probe(primary, name)
                if handle is not None:
                    path.append(ResolutionState.RESOLVED)
                    return self._session_context(name, handle, preference, None, path)
                state = ResolutionState.PROBE_ALTERNATE

            elif state is ResolutionState.PROBE_ALTERNATE:
                handle = self._probe(alternate, name)
                if handle is not None:
                    degraded = None
                    if preference is not None:
                        degraded = self._degrade(
                            name, preference, alternate.kind, f"no open {preference.value} session"
                        )
                    path.append(ResolutionState.RESOLVED)
                    return self._session_context(name, handle, preference, degraded, path)
                state = ResolutionState.BARE_HOSTNAME

            else:
                degraded = None
                if preference is not None:
                    degraded = self._degrade(
                        name, preference, TransportKind.CIM_SESSION, "no open session of either kind"
                    )
                logger.debug("%s: no open session - using bare hostname CIM", name)
                path.append(ResolutionState.RESOLVED)
                return ConnectionContext(
                    resolved_name=name,
                    transport_kind=TransportKind.CIM_SESSION,
                    params=ComputerNameParams(name),
                    preference=preference,
                    degraded=degraded,
                    resolution_path=tuple(path),
                )

    def _probe(
        self, kind: TransportPreference, name: str
    ) -> CimSession | PSSession | None:
        handle = self._probes[kind](name)
        if handle is None or not handle.is_available:
            return None
        logger.debug("%s: found open %s session %s", name, kind.value, handle.session_id)
        return handle

    @staticmethod
    def _session_context(
        name: str,
        handle: CimSession | PSSession,
        preference: TransportPreference | None,
        degraded: ResolutionDegraded | None,
        path: list[ResolutionState],
    ) -> ConnectionContext:
        if isinstance(handle, PSSession):
            kind, params = TransportKind.PS_SESSION, PSSessionParams(handle)
        else:
            kind, params = TransportKind.CIM_SESSION, CimSessionParams(handle)
        return ConnectionContext(
            resolved_name=name,
            transport_kind=kind,
            params=params,
            preference=preference,
            degraded=degraded,
            resolution_path=tuple(path),
        )

    @staticmethod
    def _degrade(
        name: str, preference: TransportPreference, resolved: TransportKind, reason: str
    ) -> ResolutionDegraded:
        degraded = ResolutionDegraded(
            computer_name=name,
            preferred=preference.value,
            resolved=resolved.value,
            reason=reason,
        )
        logger.warning("Transport preference not met: %s", degraded)
        return degraded
