"""
Configuration manager.

Loads toolkit settings once and hands them out; falls back to defaults when
no settings file exists.
"""

import logging
from pathlib import Path
from typing import Optional

from ccmclient.domain.settings import ToolkitSettings
from ccmclient.infrastructure.config.repository import SETTINGS_FILE, ConfigRepository

logger = logging.getLogger(__name__)


class ConfigManager:
    """Application-facing access to configuration."""

    def __init__(self, config_dir: Optional[Path] = None):
        """
        Args:
            config_dir: Directory holding ccmclient.json(c).
                       Defaults to 'config' under the current working directory.
        """
        if config_dir is None:
            config_dir = Path.cwd() / "config"

        self.config_dir = config_dir
        self.repository = ConfigRepository(config_dir)
        self._settings: Optional[ToolkitSettings] = None

    def load_settings(self, force_reload: bool = False) -> ToolkitSettings:
        """
        Load toolkit settings.

        Raises:
            ValueError: If a settings file exists but is invalid
        """
        if self._settings is None or force_reload:
            if self.repository.exists(SETTINGS_FILE):
                logger.info("Loading settings from %s", self.config_dir)
                self._settings = self.repository.load_settings()
            else:
                logger.debug("No settings file in %s - using defaults", self.config_dir)
                self._settings = ToolkitSettings()

        return self._settings
