"""
Feature operations against the ConfigMgr client.

Each operation takes the executors and one resolved context; the toolkit
fans them out over many targets.
"""

from ccmclient.application.features.base import Executors
from ccmclient.application.features.cache import (
    clear_cache,
    get_cache_content,
    get_cache_info,
    set_cache_size,
)
from ccmclient.application.features.client import (
    get_client_info,
    get_provisioning_mode,
    set_provisioning_mode,
)
from ccmclient.application.features.inventory import get_inventory_status, trigger_inventory
from ccmclient.application.features.maintenance import get_maintenance_windows
from ccmclient.application.features.registry import get_registry_value, set_registry_value
from ccmclient.application.features.schedules import SCHEDULES, trigger_schedule
from ccmclient.application.features.software import (
    get_applications,
    get_software_updates,
    install_application,
    install_software_updates,
)

__all__ = [
    "Executors",
    "SCHEDULES",
    "clear_cache",
    "get_applications",
    "get_cache_content",
    "get_cache_info",
    "get_client_info",
    "get_inventory_status",
    "get_maintenance_windows",
    "get_provisioning_mode",
    "get_registry_value",
    "get_software_updates",
    "install_application",
    "install_software_updates",
    "set_cache_size",
    "set_provisioning_mode",
    "set_registry_value",
    "trigger_inventory",
    "trigger_schedule",
]
