"""
Transport interfaces consumed by the execution layer.

Both transports are synchronous, make exactly one attempt per call and raise
TransportError when the underlying call faults.
"""

from __future__ import annotations

from typing import Any, Mapping, Optional, Protocol, Sequence, Union

from ccmclient.domain.sessions import CimSession, PSSession

# None = this machine, str = bare hostname, CimSession = open session
CimTarget = Union[None, str, CimSession]


class CimTransport(Protocol):
    """Structured-query transport (Get-CimInstance / Invoke-CimMethod)."""

    def query(
        self,
        namespace: str,
        class_name: Optional[str],
        filter: Optional[str],  # pylint: disable=redefined-builtin
        raw_query: Optional[str],
        properties: Optional[Sequence[str]],
        target: CimTarget,
    ) -> list[dict[str, Any]]:
        ...

    def invoke_method(
        self,
        namespace: str,
        class_name: str,
        method: str,
        arguments: Mapping[str, Any],
        target: CimTarget,
    ) -> dict[str, Any]:
        ...


class ShellTransport(Protocol):
    """Remote-shell transport: run a script block with positional arguments."""

    def invoke(
        self,
        body: str,
        arguments: Sequence[Any],
        session: Optional[PSSession],
    ) -> list[Any]:
        """Run on `session`, or on this machine when session is None."""
        ...
