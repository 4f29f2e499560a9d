"""
Configuration infrastructure: settings file repository and manager.
"""

from ccmclient.infrastructure.config.manager import ConfigManager
from ccmclient.infrastructure.config.repository import ConfigRepository, strip_comments

__all__ = ["ConfigManager", "ConfigRepository", "strip_comments"]
