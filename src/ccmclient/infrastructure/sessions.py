"""
Session registry - the caller's pool of open session handles.

The resolver only looks sessions up here; opening and closing them is the
owner's business.
"""

from __future__ import annotations

import logging
from typing import Iterator, Union

from ccmclient.domain.sessions import CimSession, PSSession

logger = logging.getLogger(__name__)

SessionHandle = Union[CimSession, PSSession]


class SessionRegistry:
    """Open CimSession and PSSession handles, looked up by computer name."""

    def __init__(self) -> None:
        self._sessions: list[SessionHandle] = []

    def register(self, session: SessionHandle) -> None:
        if not isinstance(session, (CimSession, PSSession)):
            raise TypeError(f"Not a session handle: {type(session).__name__}")
        if session not in self._sessions:
            self._sessions.append(session)
            logger.debug(
                "Registered %s %s for %s",
                type(session).__name__,
                session.session_id,
                session.computer_name,
            )

    def unregister(self, session: SessionHandle) -> None:
        if session in self._sessions:
            self._sessions.remove(session)

    def find_cim_session(self, computer_name: str) -> CimSession | None:
        """First available CimSession bound to `computer_name`."""
        return self._find(CimSession, computer_name)

    def find_ps_session(self, computer_name: str) -> PSSession | None:
        """First available PSSession bound to `computer_name`."""
        return self._find(PSSession, computer_name)

    def close_all(self) -> None:
        """Close and forget every session. Owner-side cleanup."""
        for session in self._sessions:
            session.close()
        self._sessions.clear()

    def __iter__(self) -> Iterator[SessionHandle]:
        return iter(list(self._sessions))

    def __len__(self) -> int:
        return len(self._sessions)

    def _find(self, kind: type, computer_name: str):
        wanted = computer_name.strip().lower()
        for session in self._sessions:
            if (
                isinstance(session, kind)
                and session.computer_name.strip().lower() == wanted
                and session.is_available
            ):
                return session
        return None
