"""
ConnectionContext - the normalized resolution of one target.

The context is a tagged union: `transport_kind` says which transport is used
and `params` is the matching, strongly typed parameter record. Construction
rejects a params record that does not belong to the kind.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Union

from ccmclient.domain.errors import ResolutionDegraded
from ccmclient.domain.sessions import CimSession, PSSession
from ccmclient.domain.targets import TransportKind, TransportPreference


class ResolutionState(Enum):
    """States of the per-target transport fallback procedure."""

    PROBE_PREFERRED = "probe_preferred"
    PROBE_ALTERNATE = "probe_alternate"
    BARE_HOSTNAME = "bare_hostname"
    RESOLVED = "resolved"


@dataclass(frozen=True)
class LocalParams:
    """In-process execution on this machine."""


@dataclass(frozen=True)
class CimSessionParams:
    """An open CIM session handle."""

    session: CimSession


@dataclass(frozen=True)
class ComputerNameParams:
    """Bare hostname; the CIM transport makes its own per-call connection."""

    computer_name: str


@dataclass(frozen=True)
class PSSessionParams:
    """An open PowerShell remoting session handle."""

    session: PSSession


TransportParams = Union[LocalParams, CimSessionParams, ComputerNameParams, PSSessionParams]

_PARAMS_BY_KIND: dict[TransportKind, tuple[type, ...]] = {
    TransportKind.LOCAL: (LocalParams,),
    TransportKind.CIM_SESSION: (CimSessionParams, ComputerNameParams),
    TransportKind.PS_SESSION: (PSSessionParams,),
}


@dataclass(frozen=True)
class ConnectionContext:
    """How to reach one target for one operation."""

    resolved_name: str
    transport_kind: TransportKind
    params: TransportParams
    preference: TransportPreference | None = None
    degraded: ResolutionDegraded | None = None
    resolution_path: tuple[ResolutionState, ...] = ()

    def __post_init__(self) -> None:
        allowed = _PARAMS_BY_KIND[self.transport_kind]
        if not isinstance(self.params, allowed):
            raise TypeError(
                f"{type(self.params).__name__} is not valid for "
                f"transport kind {self.transport_kind.value}"
            )

    @property
    def is_local(self) -> bool:
        return self.transport_kind is TransportKind.LOCAL

    @property
    def is_bare_hostname(self) -> bool:
        return isinstance(self.params, ComputerNameParams)

    @property
    def transport_label(self) -> str:
        """Short label for logs and result records."""
        if self.is_bare_hostname:
            return "cim-hostname"
        return self.transport_kind.value

    @classmethod
    def local(cls, name: str, preference: TransportPreference | None = None) -> ConnectionContext:
        return cls(
            resolved_name=name,
            transport_kind=TransportKind.LOCAL,
            params=LocalParams(),
            preference=preference,
            resolution_path=(ResolutionState.RESOLVED,),
        )
