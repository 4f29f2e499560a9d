"""
PowerShell Infrastructure Package.

Local PowerShell host plus the script builders shared by both transports.
"""

from ccmclient.infrastructure.powershell.runner import PowerShellOutput, PowerShellRunner
from ccmclient.infrastructure.powershell.scripts import (
    PSTyped,
    parse_json_output,
    ps_cast,
    ps_literal,
    ps_quote,
    wrap_logic,
)

__all__ = [
    "PowerShellOutput",
    "PowerShellRunner",
    "PSTyped",
    "parse_json_output",
    "ps_cast",
    "ps_literal",
    "ps_quote",
    "wrap_logic",
]
