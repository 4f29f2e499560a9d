"""
Client identity and provisioning mode.
"""

from __future__ import annotations

import logging

from ccmclient.application.features.base import NS_CCM, Executors, require_success, to_str
from ccmclient.application.features.registry import get_registry_value
from ccmclient.domain.client_models import ClientInfo
from ccmclient.domain.context import ConnectionContext
from ccmclient.domain.requests import CimQuery

logger = logging.getLogger(__name__)

CCMEXEC_KEY = "SOFTWARE\\Microsoft\\CCM\\CcmExec"


def _first(ex: Executors, context: ConnectionContext, class_name: str) -> dict:
    records = ex.query.query(context, CimQuery(namespace=NS_CCM, class_name=class_name))
    return records[0] if records else {}


def get_client_info(ex: Executors, context: ConnectionContext) -> ClientInfo:
    client = _first(ex, context, "SMS_Client")
    authority = _first(ex, context, "SMS_Authority")
    ccm_client = _first(ex, context, "CCM_Client")

    site_code = None
    authority_name = authority.get("Name")
    if authority_name:
        # "SMS:P01"
        site_code = str(authority_name).split(":", 1)[-1]

    return ClientInfo(
        client_version=to_str(client.get("ClientVersion")),
        client_id=to_str(ccm_client.get("ClientId")),
        site_code=site_code,
        management_point=to_str(authority.get("CurrentManagementPoint")),
    )


def get_provisioning_mode(ex: Executors, context: ConnectionContext) -> bool:
    """True when the client is in provisioning mode."""
    value = get_registry_value(ex, context, "HKLM", CCMEXEC_KEY, "ProvisioningMode", "string")
    return str(value.value or "").strip().lower() == "true"


def set_provisioning_mode(ex: Executors, context: ConnectionContext, enabled: bool) -> bool:
    logger.info(
        "%s provisioning mode on %s", "Enabling" if enabled else "Disabling", context.resolved_name
    )
    result = ex.logic.invoke_method(
        context, NS_CCM, "SMS_Client", "SetClientProvisioningMode", {"bEnable": enabled}
    )
    require_success(result, context, "SetClientProvisioningMode")
    return enabled
