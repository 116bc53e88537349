"""
Configuration loader utilities.

BaseConfigLoader provides the JSON loading pattern used for catalog files:
missing files raise FileNotFoundError, malformed JSON raises ConfigurationError.
"""

import json
import logging
from pathlib import Path
from typing import Any, Dict

from quiesce.config import ConfigurationError

logger = logging.getLogger(__name__)


class BaseConfigLoader:
    """
    Base configuration loader providing standard JSON loading patterns.

    Example usage:
        loader = BaseConfigLoader(Path("config"))
        config = loader.load_json_file("catalog.json")
    """

    def __init__(self, config_dir: Path):
        self.config_dir = config_dir

    def load_json_file(self, filename: str) -> Dict[str, Any]:
        """
        Load a JSON configuration file from the config directory.

        Args:
            filename: Name of the config file (e.g., 'catalog.json')

        Returns:
            Dictionary containing the configuration

        Raises:
            FileNotFoundError: If config file doesn't exist
            ConfigurationError: If config file is invalid JSON or not an object
        """
        config_path = self.config_dir / filename

        if not config_path.exists():
            raise FileNotFoundError(f"Config file not found: {config_path}")

        try:
            with open(config_path, "r", encoding="utf-8") as handle:
                payload = json.load(handle)
        except json.JSONDecodeError as exc:
            raise ConfigurationError(f"Invalid JSON in config file {filename}") from exc

        if not isinstance(payload, dict):
            raise ConfigurationError(f"Config file {filename} must contain an object at the top level")

        logger.debug("Loaded config file %s", config_path)
        return payload

    def get_parameter(self, config: Dict[str, Any], parameter_name: str, *, required: bool = True) -> Any:
        """
        Get a top-level parameter from a configuration dictionary.

        Raises:
            ConfigurationError: If a required parameter is missing
        """
        if parameter_name not in config:
            if required:
                raise ConfigurationError.missing_value(parameter_name, f"section of {self.config_dir}")
            return None
        return config[parameter_name]
