"""
Error types raised by the connection and execution layer.

Every per-target failure is one of these. The batch runner turns them into
a failed ResultRecord for that target and moves on to the next one.
"""

from __future__ import annotations

from dataclasses import dataclass


class CCMClientError(Exception):
    """Base class for all toolkit errors."""

    def __init__(self, message: str, computer_name: str | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.computer_name = computer_name

    def __str__(self) -> str:
        if self.computer_name:
            return f"[{self.computer_name}] {self.message}"
        return self.message


class TransportError(CCMClientError):
    """The underlying CIM or remoting call faulted."""

    def __init__(
        self,
        message: str,
        computer_name: str | None = None,
        transport: str | None = None,
        stderr: str = "",
    ) -> None:
        super().__init__(message, computer_name)
        self.transport = transport
        self.stderr = stderr


class UnsupportedTransport(CCMClientError):
    """Free-form script logic was requested against a CIM-only target."""


class LocalExecutionFault(CCMClientError):
    """Script logic executed on the local machine raised."""


class MethodCallFailed(CCMClientError):
    """A CIM method ran but reported a non-zero ReturnValue."""

    def __init__(
        self,
        message: str,
        computer_name: str | None = None,
        return_value: int | None = None,
    ) -> None:
        super().__init__(message, computer_name)
        self.return_value = return_value


@dataclass(frozen=True)
class ResolutionDegraded:
    """
    Non-fatal resolution note.

    Recorded on a ConnectionContext when the caller's transport preference
    could not be honoured. Logged, never raised.
    """

    computer_name: str
    preferred: str
    resolved: str
    reason: str

    def __str__(self) -> str:
        return (
            f"{self.computer_name}: preferred {self.preferred}, "
            f"resolved {self.resolved} ({self.reason})"
        )
