"""
Local PowerShell host.

Runs a script on this machine by writing it to a temporary .ps1 file and
executing it with ExecutionPolicy Bypass. Used for local execution and as
the carrier for CIM cmdlets.
"""

from __future__ import annotations

import logging
import os
import subprocess
import tempfile
from dataclasses import dataclass

from ccmclient.domain.errors import TransportError

logger = logging.getLogger(__name__)

# Windows PowerShell reads BOM-less scripts as ANSI and writes OEM to stdout
_ENCODING_PROLOGUE = "[Console]::OutputEncoding = [System.Text.Encoding]::UTF8"


@dataclass
class PowerShellOutput:
    """Raw outcome of one PowerShell invocation."""

    stdout: str = ""
    stderr: str = ""
    return_code: int = -1

    @property
    def success(self) -> bool:
        return self.return_code == 0

    @property
    def error_text(self) -> str:
        """Best available error description."""
        return (self.stderr or self.stdout or f"exit code {self.return_code}").strip()


class PowerShellRunner:
    """Runs PowerShell scripts on the local machine."""

    def __init__(self, executable: str = "powershell.exe", timeout_seconds: int | None = None) -> None:
        """
        Args:
            executable: PowerShell host (powershell.exe or pwsh)
            timeout_seconds: Subprocess timeout; None waits indefinitely
        """
        self.executable = executable
        self.timeout_seconds = timeout_seconds

    def run(self, script: str) -> PowerShellOutput:
        """
        Execute a script locally.

        Returns the output whatever the exit code; callers decide what a
        non-zero exit means.

        Raises:
            TransportError: If the host could not be started or timed out
        """
        with tempfile.NamedTemporaryFile(
            mode="w", suffix=".ps1", delete=False, encoding="utf-8-sig"
        ) as f:
            f.write(_ENCODING_PROLOGUE + "\n" + script)
            script_path = f.name

        cmd = [
            self.executable,
            "-NoProfile",
            "-NonInteractive",
            "-ExecutionPolicy",
            "Bypass",
            "-File",
            script_path,
        ]
        logger.debug("Executing: %s", " ".join(cmd))

        try:
            result = subprocess.run(
                cmd,
                capture_output=True,
                encoding="utf-8",
                errors="replace",
                timeout=self.timeout_seconds,
                check=False,
            )
        except subprocess.TimeoutExpired as e:
            raise TransportError(
                f"PowerShell timed out after {self.timeout_seconds}s",
                computer_name="localhost",
                transport="local",
            ) from e
        except OSError as e:
            raise TransportError(
                f"Cannot start {self.executable}: {e}",
                computer_name="localhost",
                transport="local",
            ) from e
        finally:
            try:
                os.unlink(script_path)
            except OSError:
                logger.debug("Could not remove temp script %s", script_path)

        return PowerShellOutput(
            stdout=result.stdout or "",
            stderr=result.stderr or "",
            return_code=result.returncode,
        )
