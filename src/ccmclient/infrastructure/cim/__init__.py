"""
CIM Infrastructure Package.

Structured queries and method calls through the CIM cmdlets.
"""

from ccmclient.infrastructure.cim.transport import PowerShellCimTransport

__all__ = ["PowerShellCimTransport"]
