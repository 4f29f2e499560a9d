"""
Remote-logic executor.

Runs free-form PowerShell script blocks on a resolved target, and CIM
methods by name. CIM-only targets can take method calls but never free-form
logic: that request fails with UnsupportedTransport before any transport is
touched. One attempt per call; retries are the caller's business.
"""

from __future__ import annotations

import logging
from typing import Any, Mapping

from ccmclient.domain.context import (
    CimSessionParams,
    ComputerNameParams,
    ConnectionContext,
)
from ccmclient.domain.errors import LocalExecutionFault, TransportError, UnsupportedTransport
from ccmclient.domain.requests import MethodResult, ScriptLogic
from ccmclient.domain.targets import TransportKind
from ccmclient.domain.transports import CimTarget, CimTransport, ShellTransport

logger = logging.getLogger(__name__)

# Executed on the far end of a PSSession in place of a direct CIM method call
INVOKE_METHOD_BODY = """
param($Namespace, $ClassName, $MethodName, $Arguments)
$out = Invoke-CimMethod -Namespace $Namespace -ClassName $ClassName -MethodName $MethodName -Arguments $Arguments
$data = [ordered]@{ ReturnValue = $out.ReturnValue }
foreach ($p in $out.OutParameters) { $data[$p.Name] = $p.Value }
[pscustomobject]$data
"""


def cim_target(context: ConnectionContext) -> CimTarget:
    """CIM transport target for a LOCAL or CIM_SESSION context."""
    params = context.params
    if isinstance(params, CimSessionParams):
        return params.session
    if isinstance(params, ComputerNameParams):
        return params.computer_name
    return None


class RemoteLogicExecutor:
    """Executes script logic and CIM methods against resolved contexts."""

    def __init__(self, shell_transport: ShellTransport, cim_transport: CimTransport) -> None:
        self.shell_transport = shell_transport
        self.cim_transport = cim_transport

    def run(self, context: ConnectionContext, logic: ScriptLogic) -> Any:
        """
        Run a script block on the target.

        Returns:
            None for no output, the value for one output, a list for several

        Raises:
            UnsupportedTransport: If the context is CIM-only
            LocalExecutionFault: If local execution raised
            TransportError: If the remote call faulted
        """
        values = self.run_collect(context, logic)
        if not values:
            return None
        if len(values) == 1:
            return values[0]
        return values

    def run_collect(self, context: ConnectionContext, logic: ScriptLogic) -> list[Any]:
        """Like run(), but always returns the full list of output values."""
        if context.transport_kind is TransportKind.CIM_SESSION:
            raise UnsupportedTransport(
                "Script logic cannot run over a CIM-only connection; "
                "open a PowerShell remoting session for this target",
                computer_name=context.resolved_name,
            )

        if context.transport_kind is TransportKind.LOCAL:
            logger.debug("Running script block locally")
            try:
                return self.shell_transport.invoke(logic.body, logic.arguments, None)
            except TransportError as e:
                raise LocalExecutionFault(e.message, computer_name=context.resolved_name) from e

        # PS_SESSION contexts always carry PSSessionParams
        session = context.params.session
        logger.debug("Running script block on %s via PSSession", context.resolved_name)
        return self.shell_transport.invoke(logic.body, logic.arguments, session)

    def invoke_method(
        self,
        context: ConnectionContext,
        namespace: str,
        class_name: str,
        method: str,
        arguments: Mapping[str, Any] | None = None,
    ) -> MethodResult:
        """
        Invoke a static CIM method on the target.

        Works on every transport kind: directly through CIM for LOCAL and
        CIM_SESSION, as remote logic for PS_SESSION.

        Raises:
            TransportError: If the call faulted
        """
        arguments = dict(arguments or {})
        logger.debug(
            "Invoking %s:%s.%s on %s (%s)",
            namespace, class_name, method, context.resolved_name, context.transport_label,
        )

        if context.transport_kind is TransportKind.PS_SESSION:
            values = self.run_collect(
                context,
                ScriptLogic(
                    body=INVOKE_METHOD_BODY,
                    arguments=(namespace, class_name, method, arguments),
                ),
            )
            return MethodResult.from_output(values)

        output = self.cim_transport.invoke_method(
            namespace, class_name, method, arguments, cim_target(context)
        )
        return MethodResult.from_output(output)
