"""
Caller-owned session handles.

A CimSession or PSSession is opened by the caller (or by the CLI on the
caller's behalf) and handed to the toolkit as a capability token. The
execution layer reads the bound computer name and passes the handle through
to the transport; it never opens, closes or mutates one.
"""

from __future__ import annotations

import uuid
from dataclasses import dataclass, field
from enum import Enum
from typing import Any


class SessionState(Enum):
    """Lifecycle state of a session handle."""

    OPENED = "opened"
    BROKEN = "broken"
    CLOSED = "closed"


class CimProtocol(Enum):
    """Protocol a CIM session talks to the far end."""

    WSMAN = "Wsman"
    DCOM = "Dcom"


def _new_session_id() -> str:
    return uuid.uuid4().hex[:12]


@dataclass(eq=False)
class CimSession:
    """CIM session bound to one computer."""

    computer_name: str
    protocol: CimProtocol = CimProtocol.WSMAN
    username: str | None = None
    password: str | None = field(default=None, repr=False)
    session_id: str = field(default_factory=_new_session_id)
    state: SessionState = SessionState.OPENED

    @property
    def is_available(self) -> bool:
        """Whether the session can still carry calls."""
        return self.state is SessionState.OPENED

    def close(self) -> None:
        """Mark the session closed. Called by the owner only."""
        self.state = SessionState.CLOSED


@dataclass(eq=False)
class PSSession:
    """
    PowerShell remoting session bound to one computer.

    `connection` is the live pywinrm session (anything exposing
    ``run_ps(script)`` returning std_out/std_err/status_code).
    """

    computer_name: str
    connection: Any = field(repr=False)
    transport_used: str = ""
    auth_used: str = ""
    session_id: str = field(default_factory=_new_session_id)
    state: SessionState = SessionState.OPENED

    @property
    def is_available(self) -> bool:
        """Whether the session can still carry calls."""
        return self.state is SessionState.OPENED and self.connection is not None

    def close(self) -> None:
        """Mark the session closed and drop the connection. Called by the owner only."""
        self.state = SessionState.CLOSED
        self.connection = None
