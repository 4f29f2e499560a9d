"""
Maintenance (service) windows known to the client.
"""

from __future__ import annotations

from ccmclient.application.features.base import (
    NS_CLIENTSDK,
    Executors,
    parse_cim_datetime,
    to_int,
    to_str,
)
from ccmclient.domain.client_models import MaintenanceWindow
from ccmclient.domain.context import ConnectionContext
from ccmclient.domain.requests import CimQuery

WINDOW_TYPES = {
    1: "All Deployments",
    2: "Programs",
    3: "Reboot Required",
    4: "Software Updates",
    5: "Task Sequences",
    6: "Non-Business Hours",
}


def get_maintenance_windows(ex: Executors, context: ConnectionContext) -> list[MaintenanceWindow]:
    records = ex.query.query(context, CimQuery(namespace=NS_CLIENTSDK, class_name="CCM_ServiceWindow"))
    windows = []
    for record in records:
        type_code = to_int(record.get("Type"))
        windows.append(MaintenanceWindow(
            window_id=to_str(record.get("ID")),
            type_code=type_code,
            type_name=WINDOW_TYPES.get(type_code, "Unknown") if type_code is not None else None,
            start_time=parse_cim_datetime(record.get("StartTime")),
            end_time=parse_cim_datetime(record.get("EndTime")),
            duration_seconds=to_int(record.get("Duration")),
        ))
    return sorted(windows, key=lambda window: (window.start_time is None, window.start_time))
