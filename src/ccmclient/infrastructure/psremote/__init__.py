"""
PSRemote Infrastructure Package.

PowerShell remoting over pywinrm: session opening and script execution.
"""

from ccmclient.infrastructure.psremote.client import (
    AuthMethod,
    PSRemoteClient,
    Transport,
    build_plan,
)
from ccmclient.infrastructure.psremote.transport import WinRMShellTransport

__all__ = [
    "AuthMethod",
    "PSRemoteClient",
    "Transport",
    "WinRMShellTransport",
    "build_plan",
]
