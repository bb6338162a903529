"""
Configuration manager for loading and validating settings.
"""

import logging
import os
from pathlib import Path
from typing import Any, Dict, Optional

import yaml

from business_day_calculator.data.schemas import Config

logger = logging.getLogger(__name__)


class ConfigManager:
    """Manages configuration loading from YAML files and environment variables."""

    def __init__(self, config_path: Optional[str] = None):
        """
        Initialize the config manager.

        Args:
            config_path: Optional path to config file. If not provided, uses default.
        """
        self.config_path = config_path or self._get_default_config_path()

    def _get_default_config_path(self) -> str:
        """Get the default configuration file path."""
        package_dir = Path(__file__).parent.parent
        return str(package_dir / "config" / "settings.yaml")

    def load_config(self) -> Config:
        """
        Load configuration from YAML file with environment variable overrides.

        Returns:
            Config: Validated configuration object.

        Raises:
            ValueError: If config is invalid.
        """
        # 1. Load from YAML file
        config_dict = self._load_yaml()

        # 2. Apply environment variable overrides
        config_dict = self._apply_env_overrides(config_dict)

        # 3. Validate and create Config object
        try:
            return Config(**config_dict)
        except Exception as e:
            raise ValueError(f"Invalid configuration: {e}")

    def _load_yaml(self) -> Dict[str, Any]:
        """Load configuration from YAML file."""
        config_path = Path(self.config_path)

        if not config_path.exists():
            logger.debug(f"Config file not found: {config_path}, using defaults")
            return {}

        try:
            with open(config_path, "r", encoding="utf-8") as f:
                config = yaml.safe_load(f)
                return self._flatten_config(config) if config else {}
        except yaml.YAMLError as e:
            raise ValueError(f"Error parsing YAML config file: {e}")

    def _flatten_config(self, config: Dict[str, Any]) -> Dict[str, Any]:
        """
        Flatten nested YAML config to match Config model fields.

        Args:
            config: Nested configuration dictionary.

        Returns:
            Flattened configuration dictionary.
        """
        result = {}

        # Handle business_day section
        if "business_day" in config:
            bd = config["business_day"] or {}
            if "auto_start_time" in bd:
                result["auto_start_time"] = self._time_string(bd["auto_start_time"])
            if bd.get("end_hour") is not None:
                result["business_day_end_hour"] = self._time_string(bd["end_hour"])
            if "auto_close_enabled" in bd:
                result["auto_close_enabled"] = bd["auto_close_enabled"]
            if "timezone" in bd:
                result["timezone"] = bd["timezone"]

        # Handle output section
        if "output" in config:
            out = config["output"] or {}
            if "format" in out:
                result["output_format"] = out["format"]
            if "directory" in out:
                result["output_directory"] = out["directory"]

        # Handle API section
        if "api" in config:
            api = config["api"] or {}
            if "host" in api:
                result["api_host"] = api["host"]
            if "port" in api:
                result["api_port"] = api["port"]

        return result

    def _time_string(self, value: Any) -> str:
        """
        Normalize a time value read from YAML.

        YAML 1.1 reads an unquoted 22:00 as the base-60 integer 1320, so
        integers are turned back into HH:MM.
        """
        if isinstance(value, int) and not isinstance(value, bool):
            return f"{value // 60:02d}:{value % 60:02d}"
        return str(value)

    def _apply_env_overrides(self, config_dict: Dict[str, Any]) -> Dict[str, Any]:
        """
        Apply environment variable overrides to configuration.

        Environment variables:
        - BUSINESS_DAY_AUTO_START_TIME -> auto_start_time
        - BUSINESS_DAY_END_HOUR -> business_day_end_hour
        - BUSINESS_DAY_AUTO_CLOSE_ENABLED -> auto_close_enabled
        - BUSINESS_DAY_TIMEZONE -> timezone
        - BUSINESS_DAY_OUTPUT_FORMAT -> output_format
        - BUSINESS_DAY_OUTPUT_DIRECTORY -> output_directory
        - BUSINESS_DAY_API_HOST -> api_host
        - BUSINESS_DAY_API_PORT -> api_port

        Args:
            config_dict: Configuration dictionary from YAML.

        Returns:
            Updated configuration dictionary.
        """
        env_mappings = {
            "BUSINESS_DAY_AUTO_START_TIME": "auto_start_time",
            "BUSINESS_DAY_END_HOUR": "business_day_end_hour",
            "BUSINESS_DAY_AUTO_CLOSE_ENABLED": ("auto_close_enabled", self._parse_bool),
            "BUSINESS_DAY_TIMEZONE": "timezone",
            "BUSINESS_DAY_OUTPUT_FORMAT": "output_format",
            "BUSINESS_DAY_OUTPUT_DIRECTORY": "output_directory",
            "BUSINESS_DAY_API_HOST": "api_host",
            "BUSINESS_DAY_API_PORT": ("api_port", int),
        }

        for env_var, mapping in env_mappings.items():
            env_value = os.environ.get(env_var)
            if env_value is not None:
                if isinstance(mapping, tuple):
                    config_key, type_converter = mapping
                    try:
                        config_dict[config_key] = type_converter(env_value)
                    except ValueError:
                        logger.warning(f"Ignoring invalid value for {env_var}: {env_value!r}")
                else:
                    config_dict[mapping] = env_value

        return config_dict

    def _parse_bool(self, value: str) -> bool:
        """Parse a boolean from string."""
        return value.lower() in ("true", "1", "yes", "on")

    def save_config(self, config: Config, output_path: Optional[str] = None) -> None:
        """
        Save configuration to YAML file.

        Args:
            config: Configuration object to save.
            output_path: Optional output path. If not provided, uses default.
        """
        output_path = output_path or self.config_path

        config_dict = {
            "business_day": {
                "auto_start_time": config.auto_start_time,
                "end_hour": config.business_day_end_hour,
                "auto_close_enabled": config.auto_close_enabled,
                "timezone": config.timezone,
            },
            "output": {
                "format": config.output_format,
                "directory": config.output_directory,
            },
            "api": {
                "host": config.api_host,
                "port": config.api_port,
            },
        }

        # Ensure directory exists
        Path(output_path).parent.mkdir(parents=True, exist_ok=True)

        with open(output_path, "w", encoding="utf-8") as f:
            yaml.dump(config_dict, f, default_flow_style=False, sort_keys=False)
