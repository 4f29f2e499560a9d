"""
Structured-query executor.

Answers a CimQuery on any resolved context. LOCAL and CIM_SESSION contexts
use the CIM transport directly; PS_SESSION contexts re-express the query as
script logic that runs Get-CimInstance on the far end.
"""

from __future__ import annotations

import logging
from typing import Any

from ccmclient.application.logic_executor import RemoteLogicExecutor, cim_target
from ccmclient.domain.context import ConnectionContext
from ccmclient.domain.requests import CimQuery, ScriptLogic
from ccmclient.domain.targets import TransportKind
from ccmclient.domain.transports import CimTransport
from ccmclient.infrastructure.powershell.scripts import METADATA_PROPERTIES, strip_metadata

logger = logging.getLogger(__name__)

REMOTE_QUERY_BODY = """
param($Namespace, $ClassName, $Filter, $Query, $Properties, $Exclude)
$params = @{ Namespace = $Namespace }
if ($Query) {
    $params['Query'] = $Query
} else {
    $params['ClassName'] = $ClassName
    if ($Filter) { $params['Filter'] = $Filter }
}
if ($Properties) {
    Get-CimInstance @params | Select-Object -Property $Properties
} else {
    Get-CimInstance @params | Select-Object -Property * -ExcludeProperty $Exclude
}
"""


class CimQueryExecutor:
    """Runs CIM queries against resolved contexts."""

    def __init__(self, cim_transport: CimTransport, logic_executor: RemoteLogicExecutor) -> None:
        self.cim_transport = cim_transport
        self.logic_executor = logic_executor

    def query(self, context: ConnectionContext, request: CimQuery) -> list[dict[str, Any]]:
        """
        Run a query.

        Returns:
            Matching records with transport metadata removed; empty list when
            nothing matched

        Raises:
            TransportError: If the underlying call faulted
        """
        logger.debug(
            "Query %s on %s (%s)", request.describe(), context.resolved_name, context.transport_label
        )

        if context.transport_kind is TransportKind.PS_SESSION:
            records = self.logic_executor.run_collect(context, self._as_logic(request))
        else:
            records = self.cim_transport.query(
                request.namespace,
                request.class_name,
                request.filter,
                request.raw_query,
                request.properties,
                cim_target(context),
            )

        return [strip_metadata(record) for record in records or []]

    @staticmethod
    def _as_logic(request: CimQuery) -> ScriptLogic:
        return ScriptLogic(
            body=REMOTE_QUERY_BODY,
            arguments=(
                request.namespace,
                request.class_name,
                request.filter,
                request.raw_query,
                list(request.properties) if request.properties else None,
                list(METADATA_PROPERTIES),
            ),
        )
