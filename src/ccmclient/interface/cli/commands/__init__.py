"""
CLI command groups, one typer app per area.
"""

from ccmclient.interface.cli.commands.cache import cache_app
from ccmclient.interface.cli.commands.client import client_app
from ccmclient.interface.cli.commands.inventory import inventory_app
from ccmclient.interface.cli.commands.maintenance import maintenance_app
from ccmclient.interface.cli.commands.registry import registry_app
from ccmclient.interface.cli.commands.schedule import schedule_app
from ccmclient.interface.cli.commands.software import software_app

__all__ = [
    "cache_app",
    "client_app",
    "inventory_app",
    "maintenance_app",
    "registry_app",
    "schedule_app",
    "software_app",
]
