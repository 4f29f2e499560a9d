"""
ccmclient - Configuration Manager Client Administration Toolkit.

Queries and controls ConfigMgr client state (inventory cycles, client cache,
deployed software, maintenance windows, registry settings) on one or many
Windows machines over CIM or PowerShell remoting.

Usage:
    # CLI
    ccmclient inventory status -c SERVER01 -c SERVER02

    # Programmatic
    from ccmclient.application.container import Container

    toolkit = Container().toolkit
    records = toolkit.get_client_info(["SERVER01"])
"""

__version__ = "0.1.0"
__author__ = "ccmclient Team"

__all__ = ["__version__"]
