"""
Configuration repository for loading and saving config files.

Handles file I/O for the toolkit settings with support for JSON and
JSONC (JSON with // line comments) formats.
"""

import json
import logging
import re
from pathlib import Path
from typing import Any, Dict

from ccmclient.domain.settings import ToolkitSettings

logger = logging.getLogger(__name__)

SETTINGS_FILE = "ccmclient"

# A // comment outside of a string literal; strings are matched first so
# paths like "\\\\server\\share" or URLs survive
_COMMENT_RE = re.compile(r'("(?:\\.|[^"\\])*")|//[^\n]*')


def strip_comments(jsonc_content: str) -> str:
    """Remove // line comments from JSONC content."""
    return _COMMENT_RE.sub(lambda m: m.group(1) or "", jsonc_content)


class ConfigRepository:
    """Repository for configuration file operations."""

    def __init__(self, config_dir: Path):
        """
        Args:
            config_dir: Base directory for configuration files
        """
        self.config_dir = config_dir

    def exists(self, filename: str) -> bool:
        return any(
            (self.config_dir / f"{filename}{suffix}").exists() for suffix in (".json", ".jsonc")
        )

    def load_json_file(self, filename: str) -> Dict[str, Any]:
        """
        Load a JSON or JSONC file.

        Args:
            filename: Name of the file to load (without extension)

        Returns:
            Parsed JSON data as dictionary

        Raises:
            FileNotFoundError: If neither file exists
            ValueError: If the file cannot be parsed
        """
        json_path = self.config_dir / f"{filename}.json"
        jsonc_path = self.config_dir / f"{filename}.jsonc"

        if json_path.exists():
            try:
                with open(json_path, "r", encoding="utf-8") as f:
                    return json.load(f)
            except json.JSONDecodeError as e:
                raise ValueError(f"Invalid JSON in {json_path}: {e}") from e

        if jsonc_path.exists():
            try:
                with open(jsonc_path, "r", encoding="utf-8") as f:
                    return json.loads(strip_comments(f.read()))
            except json.JSONDecodeError as e:
                raise ValueError(f"Invalid JSONC in {jsonc_path}: {e}") from e

        raise FileNotFoundError(
            f"Config file '{filename}.json' or '{filename}.jsonc' not found in {self.config_dir}"
        )

    def save_json_file(self, filename: str, data: Dict[str, Any]) -> Path:
        """Save data as `<filename>.json`, creating the directory if needed."""
        self.config_dir.mkdir(parents=True, exist_ok=True)
        filepath = self.config_dir / f"{filename}.json"
        with open(filepath, "w", encoding="utf-8") as f:
            f.write(json.dumps(data, indent=2, ensure_ascii=False))

        logger.info("Saved config file: %s", filepath)
        return filepath

    def load_settings(self) -> ToolkitSettings:
        """
        Load toolkit settings.

        Raises:
            FileNotFoundError: If no settings file exists
            ValueError: If the file cannot be parsed or validated
        """
        data = self.load_json_file(SETTINGS_FILE)
        try:
            return ToolkitSettings(**data)
        except Exception as e:
            logger.error("Failed to validate settings: %s", e)
            raise ValueError(f"Invalid toolkit settings: {e}") from e

    def save_settings(self, settings: ToolkitSettings) -> Path:
        data = settings.model_dump(mode="json", exclude_none=True, exclude={"password"})
        return self.save_json_file(SETTINGS_FILE, data)
