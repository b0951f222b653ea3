"""
Configuration loader for armforge.

Handles loading from multiple sources with proper priority:
Explicit overrides > Environment Variables > Config File > Defaults
"""

import os
from pathlib import Path
from typing import Any, Optional

import yaml
from dotenv import load_dotenv
from pydantic import ValidationError

from ..exceptions import ConfigError
from .models import ArmForgeConfig


class ConfigLoader:
    """
    Loads and merges configuration from multiple sources.

    Priority order (highest to lowest):
    1. Explicit overrides (passed directly to ``merge_overrides``)
    2. Environment variables (ARMFORGE_*), after reading a ``.env`` file
    3. Configuration file
    4. Default values
    """

    DEFAULT_CONFIG_FILE = Path("armforge.yaml")
    CONFIG_PATH_ENV = "ARMFORGE_CONFIG_PATH"
    ENV_PREFIX = "ARMFORGE_"

    def __init__(
        self,
        config_path: Optional[Path] = None,
        dotenv_path: Optional[Path] = None,
        use_dotenv: bool = True,
    ):
        """
        Initialize configuration loader.

        Args:
            config_path: Path to configuration file. If None, uses
                ``ARMFORGE_CONFIG_PATH`` or ``./armforge.yaml``.
            dotenv_path: Optional explicit ``.env`` file
            use_dotenv: Load a ``.env`` file into the environment before reading it
        """
        self.dotenv_path = dotenv_path
        self.use_dotenv = use_dotenv
        self._explicit_path = Path(config_path) if config_path else None

    @property
    def config_path(self) -> Path:
        return self._explicit_path or self._get_config_path_from_env()

    @classmethod
    def _get_config_path_from_env(cls) -> Path:
        """Get configuration path from environment variable or default."""
        env_path = os.environ.get(cls.CONFIG_PATH_ENV)
        if env_path:
            return Path(env_path).expanduser()
        return cls.DEFAULT_CONFIG_FILE

    def load(self) -> ArmForgeConfig:
        """
        Load configuration from all sources and merge.

        Returns:
            Validated ArmForgeConfig object

        Raises:
            ConfigError: If configuration is invalid
        """
        if self.use_dotenv:
            load_dotenv(dotenv_path=self.dotenv_path, override=False)

        config_path = self.config_path
        try:
            config_dict: dict[str, Any] = {}

            if config_path.exists():
                file_config = self._load_file(config_path)
                config_dict = self._deep_merge(config_dict, file_config)

            env_config = self._load_from_env()
            config_dict = self._deep_merge(config_dict, env_config)

            return ArmForgeConfig.model_validate(config_dict)

        except ConfigError:
            raise
        except ValidationError as e:
            raise ConfigError(
                f"Configuration validation failed: {e}",
                config_path=str(config_path),
                cause=e,
            ) from e

    def _load_file(self, path: Path) -> dict[str, Any]:
        """
        Load configuration from YAML file.

        Raises:
            ConfigError: If file cannot be read or parsed
        """
        try:
            with open(path) as f:
                data = yaml.safe_load(f)
        except yaml.YAMLError as e:
            raise ConfigError(
                f"Invalid YAML in {path}: {e}", config_path=str(path), cause=e
            ) from e
        except OSError as e:
            raise ConfigError(
                f"Cannot read config file {path}: {e}", config_path=str(path), cause=e
            ) from e

        if data is None:
            return {}
        if not isinstance(data, dict):
            raise ConfigError(
                f"Config file {path} must contain a mapping at the top level",
                config_path=str(path),
            )
        return data

    def _load_from_env(self) -> dict[str, Any]:
        """
        Load configuration from environment variables.

        Environment variable format:
        - ARMFORGE_SUBSCRIPTION_ID
        - ARMFORGE_NAMING__HASH_LENGTH
        - ARMFORGE_VALIDATION__STRICT
        - ARMFORGE_LOGGING__LEVEL

        Double underscore (__) separates nested keys. ``ARMFORGE_CONFIG_PATH``
        selects the config file and is not a setting itself.
        """
        config: dict[str, Any] = {}

        for key, value in os.environ.items():
            if not key.startswith(self.ENV_PREFIX) or key == self.CONFIG_PATH_ENV:
                continue

            config_key = key[len(self.ENV_PREFIX) :].lower()
            parts = config_key.split("__")

            current = config
            for part in parts[:-1]:
                if part not in current or not isinstance(current[part], dict):
                    current[part] = {}
                current = current[part]

            current[parts[-1]] = self._convert_env_value(value)

        return config

    def _convert_env_value(self, value: str) -> Any:
        """
        Convert environment variable string to appropriate type.

        Returns:
            Converted value (bool, int, float, list or str)
        """
        lowered = value.strip().lower()
        if lowered in ("true", "yes", "on"):
            return True
        if lowered in ("false", "no", "off"):
            return False

        try:
            if "." in value:
                return float(value)
            return int(value)
        except ValueError:
            pass

        # Comma-separated lists, e.g. ARMFORGE_VALIDATION__DISABLED_VALIDATORS=limits,naming
        if "," in value:
            return [item.strip() for item in value.split(",") if item.strip()]

        return value

    def _deep_merge(
        self, base: dict[str, Any], update: dict[str, Any]
    ) -> dict[str, Any]:
        """
        Deep merge two dictionaries.

        Returns:
            Merged dictionary (base is not modified)
        """
        result = base.copy()

        for key, value in update.items():
            if (
                key in result
                and isinstance(result[key], dict)
                and isinstance(value, dict)
            ):
                result[key] = self._deep_merge(result[key], value)
            else:
                result[key] = value

        return result

    def merge_overrides(
        self,
        config: ArmForgeConfig,
        overrides: dict[str, Any],
    ) -> ArmForgeConfig:
        """
        Merge explicit overrides into configuration.

        Overrides have highest priority. ``None`` values are ignored.

        Raises:
            ConfigError: If the merged configuration is invalid
        """
        filtered = self._filter_none_values(overrides)
        if not filtered:
            return config

        config_dict = config.model_dump()
        config_dict = self._deep_merge(config_dict, filtered)

        try:
            return ArmForgeConfig.model_validate(config_dict)
        except ValidationError as e:
            raise ConfigError(
                f"Configuration override validation failed: {e}", cause=e
            ) from e

    def _filter_none_values(self, data: dict[str, Any]) -> dict[str, Any]:
        result = {}
        for key, value in data.items():
            if value is None:
                continue
            elif isinstance(value, dict):
                filtered = self._filter_none_values(value)
                if filtered:
                    result[key] = filtered
            else:
                result[key] = value
        return result


def load_config(
    config_path: Optional[Path] = None,
    overrides: Optional[dict[str, Any]] = None,
    use_dotenv: bool = True,
) -> ArmForgeConfig:
    """
    Convenience function to load configuration.

    Args:
        config_path: Path to configuration file
        overrides: Values merged on top of every other source
        use_dotenv: Read a ``.env`` file before consulting the environment

    Returns:
        Validated ArmForgeConfig object

    Raises:
        ConfigError: If configuration is invalid
    """
    loader = ConfigLoader(config_path, use_dotenv=use_dotenv)
    config = loader.load()

    if overrides:
        config = loader.merge_overrides(config, overrides)

    return config
