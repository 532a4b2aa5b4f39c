import os
import re
from typing import Any

import yaml
from pydantic import ValidationError

from core.schema.settings_schema import Settings
from exception import ConfigError


class ConfigManager:

    @staticmethod
    def load_yaml_file(path: str) -> dict:
        with open(path, "r", encoding="utf-8") as f:
            return yaml.safe_load(f) or {}

    @staticmethod
    def parse_env_var_with_default(value: str) -> bool | int | float | str | None:
        match = re.match(r"\$\{(\w+)(?::-([^\}]*))?\}", value)  # Match ${VAR_NAME:-default} or ${VAR_NAME}
        if not match:
            return value

        var_name = match.group(1)
        default_value = match.group(2)

        resolved_value = os.getenv(var_name) or default_value
        if resolved_value is not None:
            return ConfigManager._parse_value_by_type(resolved_value)
        return None

    @staticmethod
    def resolve_env_vars(raw: Any) -> Any:
        """Replace ${VAR:-default} strings anywhere in a loaded YAML tree."""
        if isinstance(raw, dict):
            return {k: ConfigManager.resolve_env_vars(v) for k, v in raw.items()}
        if isinstance(raw, list):
            return [ConfigManager.resolve_env_vars(v) for v in raw]
        if isinstance(raw, str):
            return ConfigManager.parse_env_var_with_default(raw)
        return raw

    @staticmethod
    def load_settings(config_path: str) -> Settings:
        """Load and validate the settings file"""
        try:
            raw_config = ConfigManager.load_yaml_file(config_path)
        except FileNotFoundError as e:
            raise ConfigError(f"Settings file not found: {config_path}") from e
        except yaml.YAMLError as e:
            raise ConfigError(f"Settings file is not valid YAML: {config_path}: {e}") from e

        if not isinstance(raw_config, dict):
            raise ConfigError(f"Settings file must contain a mapping: {config_path}")

        try:
            return Settings(**ConfigManager.resolve_env_vars(raw_config))
        except ValidationError as e:
            raise ConfigError(f"Invalid settings in {config_path}: {e}") from e

    @staticmethod
    def _parse_value_by_type(value: str) -> bool | int | float | str:
        if value.lower() in ["true", "false"]:
            return value.lower() == "true"
        if ConfigManager._is_int(value):
            return int(value)
        if ConfigManager._is_float(value):
            return float(value)
        return value

    @staticmethod
    def _is_int(value: str) -> bool:
        try:
            int(value)
            return True
        except ValueError:
            return False

    @staticmethod
    def _is_float(value: str) -> bool:
        try:
            float(value)
            return True
        except ValueError:
            return False
