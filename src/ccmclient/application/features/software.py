"""
Deployed software - applications and software updates.
"""

from __future__ import annotations

import logging
from typing import Optional, Sequence

from ccmclient.application.features.base import (
    NS_CLIENTSDK,
    Executors,
    parse_cim_datetime,
    require_success,
    to_bool,
    to_int,
    to_str,
)
from ccmclient.domain.client_models import ApplicationDeployment, SoftwareUpdate
from ccmclient.domain.context import ConnectionContext
from ccmclient.domain.errors import CCMClientError
from ccmclient.domain.requests import CimQuery, MethodResult, ScriptLogic
from ccmclient.infrastructure.powershell.scripts import ps_cast

logger = logging.getLogger(__name__)

EVALUATION_STATES = {
    0: "None",
    1: "Available",
    2: "Submitted",
    3: "Detecting",
    4: "PreDownload",
    5: "Downloading",
    6: "WaitInstall",
    7: "Installing",
    8: "PendingSoftReboot",
    9: "PendingHardReboot",
    10: "WaitReboot",
    11: "Verifying",
    12: "InstallComplete",
    13: "Error",
    14: "WaitServiceWindow",
    15: "WaitUserLogon",
    16: "WaitUserLogoff",
    17: "WaitJobUserLogon",
    18: "WaitUserReconnect",
    19: "PendingUserLogoff",
    20: "PendingUpdate",
    21: "WaitingRetry",
    22: "WaitPresModeOff",
    23: "WaitForOrchestration",
}

INSTALL_UPDATES_BODY = """
param($ArticleIds)
$updates = @(Get-CimInstance -Namespace 'root\\ccm\\ClientSDK' -ClassName CCM_SoftwareUpdate |
    Where-Object { $_.ComplianceState -eq 0 -and (-not $ArticleIds -or $ArticleIds -contains $_.ArticleID) })
if ($updates.Count -eq 0) {
    return [pscustomobject]@{ ReturnValue = 0; Count = 0 }
}
$r = Invoke-CimMethod -Namespace 'root\\ccm\\ClientSDK' -ClassName CCM_SoftwareUpdatesManager -MethodName InstallUpdates -Arguments @{ CCMUpdates = [ciminstance[]]$updates }
[pscustomobject]@{ ReturnValue = $r.ReturnValue; Count = $updates.Count }
"""


def _application(record: dict) -> ApplicationDeployment:
    return ApplicationDeployment(
        name=to_str(record.get("Name") or record.get("FullName")),
        app_id=to_str(record.get("Id")),
        revision=to_str(record.get("Revision")),
        publisher=to_str(record.get("Publisher")),
        software_version=to_str(record.get("SoftwareVersion")),
        install_state=to_str(record.get("InstallState")),
        is_machine_target=to_bool(record.get("IsMachineTarget")),
    )


def get_applications(ex: Executors, context: ConnectionContext) -> list[ApplicationDeployment]:
    records = ex.query.query(context, CimQuery(namespace=NS_CLIENTSDK, class_name="CCM_Application"))
    return [_application(record) for record in records]


def install_application(ex: Executors, context: ConnectionContext, app_id: str) -> ApplicationDeployment:
    """
    Start installation of a deployed application.

    The application is looked up first for its revision and targeting.

    Raises:
        CCMClientError: If the application is not deployed to the client
    """
    escaped = app_id.replace("'", "\\'")
    records = ex.query.query(
        context,
        CimQuery(namespace=NS_CLIENTSDK, class_name="CCM_Application", filter=f"Id = '{escaped}'"),
    )
    if not records:
        raise CCMClientError(f"Application {app_id} is not deployed", computer_name=context.resolved_name)

    app = _application(records[0])
    logger.info("Installing %s (rev %s) on %s", app.name, app.revision, context.resolved_name)
    result = ex.logic.invoke_method(
        context,
        NS_CLIENTSDK,
        "CCM_Application",
        "Install",
        {
            "EnforcePreference": ps_cast("uint32", 0),
            "Id": app.app_id or app_id,
            "IsMachineTarget": bool(app.is_machine_target),
            "IsRebootIfNeeded": False,
            "Priority": "High",
            "Revision": app.revision or "",
        },
    )
    require_success(result, context, "CCM_Application.Install")
    return app


def get_software_updates(ex: Executors, context: ConnectionContext) -> list[SoftwareUpdate]:
    records = ex.query.query(context, CimQuery(namespace=NS_CLIENTSDK, class_name="CCM_SoftwareUpdate"))
    updates = []
    for record in records:
        state = to_int(record.get("EvaluationState"))
        updates.append(SoftwareUpdate(
            article_id=to_str(record.get("ArticleID")),
            name=to_str(record.get("Name")),
            update_id=to_str(record.get("UpdateID")),
            evaluation_state=state,
            evaluation_state_name=EVALUATION_STATES.get(state) if state is not None else None,
            compliance_state=to_int(record.get("ComplianceState")),
            percent_complete=to_int(record.get("PercentComplete")),
            deadline=parse_cim_datetime(record.get("Deadline")),
        ))
    return updates


def install_software_updates(
    ex: Executors,
    context: ConnectionContext,
    article_ids: Optional[Sequence[str]] = None,
) -> int:
    """
    Install missing updates, all or those with the given KB article IDs.

    Needs script logic (the method takes CIM instances), so CIM-only targets
    get UnsupportedTransport.

    Returns:
        Number of updates handed to the update agent
    """
    wanted = [str(article).upper().removeprefix("KB") for article in article_ids] if article_ids else None
    output = ex.logic.run(context, ScriptLogic(body=INSTALL_UPDATES_BODY, arguments=(wanted,)))
    result = require_success(MethodResult.from_output(output), context, "InstallUpdates")
    count = to_int(result.outputs.get("Count")) or 0
    logger.info("Queued %d update(s) on %s", count, context.resolved_name)
    return count
