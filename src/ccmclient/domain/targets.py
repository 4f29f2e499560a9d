"""
Target identities and transport enums.

A target is either a hostname or an already-open session handle. Names that
refer to this machine are treated as local regardless of how they arrive.
"""

from __future__ import annotations

import ipaddress
import socket
from dataclasses import dataclass
from enum import Enum
from typing import Union

from ccmclient.domain.sessions import CimSession, PSSession

LOCALHOST_ALIASES = frozenset({
    "localhost",
    "127.0.0.1",
    "::1",
    ".",
    "(local)",
})


class TransportKind(Enum):
    """How a resolved target is reached."""

    LOCAL = "local"
    CIM_SESSION = "cim"
    PS_SESSION = "pssession"


class TransportPreference(Enum):
    """Caller tie-break when a hostname could use either session kind."""

    CIM_SESSION = "cim"
    PS_SESSION = "pssession"

    @property
    def kind(self) -> TransportKind:
        """Matching TransportKind."""
        return TransportKind(self.value)

    @property
    def other(self) -> TransportPreference:
        """The opposite session kind."""
        if self is TransportPreference.CIM_SESSION:
            return TransportPreference.PS_SESSION
        return TransportPreference.CIM_SESSION


@dataclass(frozen=True)
class Hostname:
    """A computer addressed by name."""

    name: str

    def __post_init__(self) -> None:
        cleaned = (self.name or "").strip()
        if not cleaned:
            raise ValueError("Hostname cannot be empty")
        object.__setattr__(self, "name", cleaned)

    def __str__(self) -> str:
        return self.name


Target = Union[Hostname, CimSession, PSSession]


def as_target(value: Target | str) -> Target:
    """Coerce a bare string into a Hostname; pass handles through."""
    if isinstance(value, str):
        return Hostname(value)
    if isinstance(value, (Hostname, CimSession, PSSession)):
        return value
    raise TypeError(f"Unsupported target type: {type(value).__name__}")


def target_name(target: Target) -> str:
    """Computer name a target refers to."""
    if isinstance(target, Hostname):
        return target.name
    return target.computer_name


def local_computer_name() -> str:
    """Name of the machine this process runs on."""
    return socket.gethostname()


def local_fqdn() -> str:
    """Fully qualified name of this machine, as DNS reports it."""
    return socket.getfqdn()


def is_local_name(name: str, local_name: str, local_fqdn_name: str = "") -> bool:
    """
    Check whether `name` refers to this machine.

    Matches the localhost aliases, the machine name, this machine's FQDN and
    a bare short name equal to the first label of either, all
    case-insensitively. A dotted name only matches exactly: another
    domain's host with the same first label is a different machine.
    """
    candidate = name.strip().lower()
    if not candidate:
        return False
    if candidate in LOCALHOST_ALIASES:
        return True

    local = local_name.strip().lower()
    if not local:
        return False
    fqdn = local_fqdn_name.strip().lower()
    if candidate in (local, fqdn):
        return True
    if "." in candidate or _is_ip_address(candidate):
        return False
    return candidate in (local.split(".")[0], fqdn.split(".")[0])


def _is_ip_address(value: str) -> bool:
    try:
        ipaddress.ip_address(value)
    except ValueError:
        return False
    return True
