"""
Inventory cycles - last-run status and (full) re-triggering.
"""

from __future__ import annotations

import logging

from ccmclient.application.features.base import (
    NS_INVAGT,
    Executors,
    parse_cim_datetime,
    require_success,
    to_int,
)
from ccmclient.application.features.schedules import resolve_schedule, schedule_name, trigger_schedule
from ccmclient.domain.client_models import InventoryCycleStatus, ScheduleTrigger
from ccmclient.domain.context import ConnectionContext
from ccmclient.domain.requests import CimQuery, MethodResult, ScriptLogic

logger = logging.getLogger(__name__)

INVENTORY_CYCLES = (
    "HardwareInventory",
    "SoftwareInventory",
    "DiscoveryData",
    "FileCollection",
)

# Removing the status instance makes the agent send a full report instead of a delta
FULL_INVENTORY_BODY = """
param($ActionId)
Get-CimInstance -Namespace 'root\\ccm\\invagt' -ClassName InventoryActionStatus -Filter "InventoryActionID='$ActionId'" | Remove-CimInstance
$r = Invoke-CimMethod -Namespace 'root\\ccm' -ClassName SMS_Client -MethodName TriggerSchedule -Arguments @{ sScheduleID = $ActionId }
[pscustomobject]@{ ReturnValue = $r.ReturnValue }
"""


def inventory_cycle_id(cycle: str) -> tuple[str, str]:
    """
    Map an inventory cycle name to (name, schedule id).

    Raises:
        ValueError: If `cycle` is not an inventory cycle
    """
    name, schedule_id = resolve_schedule(cycle)
    if name not in INVENTORY_CYCLES:
        raise ValueError(f"{cycle} is not an inventory cycle ({', '.join(INVENTORY_CYCLES)})")
    return name, schedule_id


def get_inventory_status(ex: Executors, context: ConnectionContext) -> list[InventoryCycleStatus]:
    records = ex.query.query(
        context, CimQuery(namespace=NS_INVAGT, class_name="InventoryActionStatus")
    )
    statuses = []
    for record in records:
        action_id = str(record.get("InventoryActionID") or "")
        statuses.append(InventoryCycleStatus(
            cycle=schedule_name(action_id) if action_id else "",
            action_id=action_id,
            last_cycle_started=parse_cim_datetime(record.get("LastCycleStartedDate")),
            last_report_date=parse_cim_datetime(record.get("LastReportDate")),
            major_version=to_int(record.get("LastMajorReportVersion")),
            minor_version=to_int(record.get("LastMinorReportVersion")),
        ))
    return statuses


def trigger_inventory(
    ex: Executors,
    context: ConnectionContext,
    cycle: str = "HardwareInventory",
    full: bool = False,
) -> ScheduleTrigger:
    """
    Trigger an inventory cycle.

    A full cycle deletes the cycle's InventoryActionStatus first, which needs
    script logic and therefore a local or PSSession context; on a CIM-only
    context it raises UnsupportedTransport.
    """
    name, schedule_id = inventory_cycle_id(cycle)
    if not full:
        return trigger_schedule(ex, context, name)

    logger.info("Resetting %s status and triggering a full cycle on %s", name, context.resolved_name)
    output = ex.logic.run(context, ScriptLogic(body=FULL_INVENTORY_BODY, arguments=(schedule_id,)))
    result = require_success(MethodResult.from_output(output), context, f"TriggerSchedule({name})")
    return ScheduleTrigger(
        schedule=name,
        schedule_id=schedule_id,
        return_value=result.return_value,
        full_cycle=True,
    )


__all__ = [
    "INVENTORY_CYCLES",
    "get_inventory_status",
    "inventory_cycle_id",
    "trigger_inventory",
]
