"""
Client schedules - trigger ConfigMgr client actions by schedule ID.
"""

from __future__ import annotations

import logging
import re

from ccmclient.application.features.base import NS_CCM, Executors, require_success
from ccmclient.domain.client_models import ScheduleTrigger
from ccmclient.domain.context import ConnectionContext

logger = logging.getLogger(__name__)

_GUID_RE = re.compile(r"^\{[0-9A-Fa-f]{8}-[0-9A-Fa-f]{4}-[0-9A-Fa-f]{4}-[0-9A-Fa-f]{4}-[0-9A-Fa-f]{12}\}$")


def _sid(n: int) -> str:
    return "{00000000-0000-0000-0000-%012d}" % n


SCHEDULES: dict[str, str] = {
    "HardwareInventory": _sid(1),
    "SoftwareInventory": _sid(2),
    "DiscoveryData": _sid(3),
    "FileCollection": _sid(10),
    "IDMIFCollection": _sid(11),
    "ClientMachineAuthentication": _sid(12),
    "MachinePolicyAssignmentsRequest": _sid(21),
    "MachinePolicyEvaluation": _sid(22),
    "RefreshDefaultMP": _sid(23),
    "LocationServicesRefreshLocations": _sid(24),
    "LocationServicesTimeoutRefresh": _sid(25),
    "UserPolicyAgentRequestAssignment": _sid(26),
    "UserPolicyAgentEvaluateAssignment": _sid(27),
    "SoftwareMeteringUsageReport": _sid(31),
    "SourceUpdateMessage": _sid(32),
    "ClearProxySettingsCache": _sid(37),
    "MachinePolicyAgentCleanup": _sid(40),
    "UserPolicyAgentCleanup": _sid(41),
    "ValidateMachinePolicy": _sid(42),
    "ValidateUserPolicy": _sid(43),
    "RefreshCertificates": _sid(51),
    "SoftwareUpdatesInstallation": _sid(63),
    "SoftwareUpdatesDeploymentEvaluation": _sid(108),
    "SendUnsentStateMessages": _sid(111),
    "StatePolicyCacheCleanout": _sid(112),
    "SoftwareUpdatesScan": _sid(113),
    "UpdateStorePolicy": _sid(114),
    "ApplicationDeploymentEvaluation": _sid(121),
    "ApplicationUserPolicyAction": _sid(122),
    "ApplicationGlobalEvaluation": _sid(123),
    "PowerManagementSummarizer": _sid(131),
    "EndpointDeploymentReevaluate": _sid(221),
    "EndpointAMPolicyReevaluate": _sid(222),
    "ExternalEventDetection": _sid(223),
}

_NAMES_BY_ID = {schedule_id: name for name, schedule_id in SCHEDULES.items()}


def resolve_schedule(schedule: str) -> tuple[str, str]:
    """
    Map a schedule name (case-insensitive) or raw GUID to (name, id).

    Raises:
        ValueError: If the name is unknown and not a GUID
    """
    wanted = schedule.strip()
    for name, schedule_id in SCHEDULES.items():
        if name.lower() == wanted.lower():
            return name, schedule_id
    if _GUID_RE.match(wanted):
        upper = wanted.upper()
        return _NAMES_BY_ID.get(upper, upper), upper
    raise ValueError(f"Unknown schedule: {schedule}")


def schedule_name(schedule_id: str) -> str:
    return _NAMES_BY_ID.get(schedule_id.upper(), schedule_id)


def trigger_schedule(ex: Executors, context: ConnectionContext, schedule: str) -> ScheduleTrigger:
    """Invoke SMS_Client.TriggerSchedule; works over every transport."""
    name, schedule_id = resolve_schedule(schedule)
    logger.info("Triggering %s on %s", name, context.resolved_name)
    result = ex.logic.invoke_method(
        context, NS_CCM, "SMS_Client", "TriggerSchedule", {"sScheduleID": schedule_id}
    )
    require_success(result, context, f"TriggerSchedule({name})")
    return ScheduleTrigger(schedule=name, schedule_id=schedule_id, return_value=result.return_value)
