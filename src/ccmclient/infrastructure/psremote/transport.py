"""
Remote-shell transport.

Runs a wrapped script block on a PSSession through pywinrm, or on this
machine through the local PowerShell host when no session is given.
"""

from __future__ import annotations

import logging
from typing import Any, Optional, Sequence

from ccmclient.domain.errors import TransportError
from ccmclient.domain.sessions import PSSession
from ccmclient.infrastructure.powershell.runner import PowerShellOutput, PowerShellRunner
from ccmclient.infrastructure.powershell.scripts import as_list, parse_json_output, wrap_logic

logger = logging.getLogger(__name__)


class WinRMShellTransport:
    """Executes script logic remotely (PSSession) or locally (None)."""

    def __init__(self, local_runner: PowerShellRunner) -> None:
        self.local_runner = local_runner

    def invoke(
        self,
        body: str,
        arguments: Sequence[Any],
        session: Optional[PSSession],
    ) -> list[Any]:
        """
        Run `body` with positional `arguments`.

        Returns:
            Deserialized output values, in output order

        Raises:
            TransportError: If the session is unusable, the call faulted,
                the script raised, or the output was not JSON
        """
        script = wrap_logic(body, arguments)
        if session is None:
            output = self.local_runner.run(script)
            return self._parse(output, "localhost", "local")

        if not session.is_available:
            raise TransportError(
                f"PSSession {session.session_id} is {session.state.value}",
                computer_name=session.computer_name,
                transport="pssession",
            )

        logger.debug("Running script block on %s (%s)", session.computer_name, session.session_id)
        try:
            response = session.connection.run_ps(script)
        except Exception as e:  # pywinrm/requests raise a wide range of types
            raise TransportError(
                f"{type(e).__name__}: {e}",
                computer_name=session.computer_name,
                transport="pssession",
            ) from e

        output = PowerShellOutput(
            stdout=response.std_out.decode("utf-8", errors="replace"),
            stderr=response.std_err.decode("utf-8", errors="replace"),
            return_code=response.status_code,
        )
        return self._parse(output, session.computer_name, "pssession")

    @staticmethod
    def _parse(output: PowerShellOutput, computer_name: str, transport: str) -> list[Any]:
        if not output.success:
            raise TransportError(
                output.error_text,
                computer_name=computer_name,
                transport=transport,
                stderr=output.stderr,
            )
        try:
            return as_list(parse_json_output(output.stdout))
        except ValueError as e:
            raise TransportError(
                str(e), computer_name=computer_name, transport=transport, stderr=output.stderr
            ) from e
