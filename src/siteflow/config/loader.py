"""Configuration loader with file and environment variable support."""

import logging
import os
from pathlib import Path
from typing import Any

import yaml

from siteflow.exceptions import ConfigError
from siteflow.lib.paths import get_config_file, get_project_config_file, get_secrets_file

ENV_PREFIX = "SITEFLOW_"

# Environment variables consumed elsewhere that are not config overrides
RESERVED_ENV_VARS = {"SITEFLOW_LOG_FORMAT"}

logger = logging.getLogger(__name__)


class ConfigLoader:
    """
    Load and merge configuration from multiple sources.

    The ConfigLoader manages hierarchical configuration loading from:
    1. Base config (config.yaml)
    2. Secrets (secrets.yaml)
    3. Project config (./siteflow.yaml)
    4. Environment variables (SITEFLOW_*)

    Attributes
    ----------
    config_path : Path
        Path to base configuration file.
    """

    def __init__(self, config_path: Path | None = None):
        """
        Initialize configuration loader.

        Parameters
        ----------
        config_path : Path or None, optional
            Path to base config file. If None, uses default config.yaml location,
            by default None.
        """
        self.config_path = config_path or get_config_file()

    def _load_yaml_file(self, path: Path) -> dict:
        """
        Load and parse a YAML configuration file.

        Parameters
        ----------
        path : Path
            Path to YAML file to load.

        Returns
        -------
        dict
            Parsed YAML content, or empty dict if file doesn't exist.

        Raises
        ------
        ConfigError
            If YAML file contains invalid syntax or is not a mapping.
        """
        if not path.exists():
            return {}

        try:
            with open(path) as f:
                content = yaml.safe_load(f)
        except yaml.YAMLError as e:
            raise ConfigError(f"Invalid YAML in {path}: {e}")

        if not content:
            return {}
        if not isinstance(content, dict):
            raise ConfigError(f"Expected a mapping at the top of {path}")
        return content

    def _deep_merge(self, base: dict, override: dict) -> dict:
        """
        Deep merge two dictionaries recursively.

        Nested dictionaries are merged recursively. For non-dict values,
        the override value replaces the base value.

        Parameters
        ----------
        base : dict
            Base dictionary to merge into.
        override : dict
            Override dictionary with values to merge.

        Returns
        -------
        dict
            New dictionary with merged contents.
        """
        result = base.copy()

        for key, value in override.items():
            if key in result and isinstance(result[key], dict) and isinstance(value, dict):
                result[key] = self._deep_merge(result[key], value)
            else:
                result[key] = value

        return result

    def _apply_env_overrides(self, config: dict) -> dict:
        """
        Apply environment variable overrides to configuration.

        Variable names are converted from SITEFLOW_SECTION_KEY format to
        nested paths, splitting on the first underscore only so keys may
        contain underscores (SITEFLOW_API_BASE_URL -> api.base_url).

        Parameters
        ----------
        config : dict
            Configuration dictionary to apply overrides to.

        Returns
        -------
        dict
            Configuration with environment variable overrides applied.
        """
        for env_key, env_value in os.environ.items():
            if not env_key.startswith(ENV_PREFIX) or env_key in RESERVED_ENV_VARS:
                continue

            key_path = env_key[len(ENV_PREFIX) :].lower().split("_", 1)
            if len(key_path) == 1:
                config[key_path[0]] = env_value
                continue

            section, key = key_path
            if not isinstance(config.get(section), dict):
                config[section] = {}
            config[section][key] = env_value

        return config

    def load(self) -> dict:
        """
        Load and merge configuration from all sources.

        Merge order (lowest to highest priority):
        1. Base config (config.yaml)
        2. Secrets (secrets.yaml)
        3. Project config (./siteflow.yaml)
        4. Environment variables (SITEFLOW_*)

        Returns
        -------
        dict
            Merged configuration dictionary.
        """
        config = {}

        config = self._deep_merge(config, self._load_yaml_file(self.config_path))
        config = self._deep_merge(config, self._load_yaml_file(get_secrets_file()))
        config = self._deep_merge(config, self._load_yaml_file(get_project_config_file()))
        config = self._apply_env_overrides(config)

        logger.debug("Loaded config from %s", self._get_loaded_sources() or "no files")

        return config

    def _get_loaded_sources(self) -> list[str]:
        """
        Get list of configuration files that were loaded.

        Returns
        -------
        list of str
            List of config file paths that exist and were successfully loaded.
        """
        candidates = [self.config_path, get_secrets_file(), get_project_config_file()]
        return [str(path) for path in candidates if path.exists()]


def get_config_value(config: dict, key_path: str, default: Any = None) -> Any:
    """
    Get configuration value using dot notation path.

    Parameters
    ----------
    config : dict
        Configuration dictionary to query.
    key_path : str
        Key path in dot notation (e.g., "api.base_url").
    default : Any, optional
        Default value to return if key doesn't exist, by default None.

    Returns
    -------
    Any
        Configuration value if found, default value otherwise.

    Examples
    --------
    >>> config = {"api": {"token": "abc"}}
    >>> get_config_value(config, "api.token")
    'abc'
    >>> get_config_value(config, "nonexistent.key", "default")
    'default'
    """
    keys = key_path.split(".")
    value = config

    for key in keys:
        if isinstance(value, dict) and key in value:
            value = value[key]
        else:
            return default

    return value
