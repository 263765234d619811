"""
Command Helper Functions.

This module provides common helper functions used across siteflow commands
to reduce code duplication and ensure consistent behavior.

Functions
---------
require_config : Get configuration with validation
get_api_config : Get API config section with validation
get_site_name : Get the target site from args or config defaults
get_watch_interval : Get the watch poll interval from config
"""

from typing import TypedDict

from siteflow.config.loader import get_config_value
from siteflow.exceptions import ConfigError


class CommandContext(TypedDict):
    """
    Type-safe command context dictionary.

    Attributes
    ----------
    config : dict
        Loaded configuration dictionary.
    verbose : bool
        Enable verbose output.
    quiet : bool
        Suppress informational output.
    output_format : str
        Output format for records ("normal" or "json").
    args : argparse.Namespace
        Parsed command-line arguments.
    """

    config: dict
    verbose: bool
    quiet: bool
    output_format: str
    args: object  # argparse.Namespace


def require_config(ctx: CommandContext) -> dict:
    """
    Ensure configuration is loaded and return it.

    Parameters
    ----------
    ctx : CommandContext
        Command context dictionary.

    Returns
    -------
    dict
        Configuration dictionary.

    Raises
    ------
    ConfigError
        If configuration is not loaded.
    """
    config = ctx.get("config")
    if config is None:
        raise ConfigError("Configuration not loaded")
    return config


def _positive_number(value, key: str) -> float:
    try:
        number = float(value)
    except (TypeError, ValueError):
        raise ConfigError(f"{key} must be a number, got {value!r}")
    if number <= 0:
        raise ConfigError(f"{key} must be greater than zero, got {value!r}")
    return number


def get_api_config(ctx: CommandContext) -> dict:
    """
    Get API configuration section with validation.

    Parameters
    ----------
    ctx : CommandContext
        Command context dictionary.

    Returns
    -------
    dict
        Dict with key token, plus base_url and timeout when configured

    Raises
    ------
    ConfigError
        If the API token is missing or the timeout is invalid.

    Examples
    --------
    >>> api_config = get_api_config(ctx)
    >>> repository = WorkflowRepository(**api_config)
    """
    config = require_config(ctx)

    token = get_config_value(config, "api.token")
    if not token:
        raise ConfigError(
            "API token not configured. Set api.token in secrets.yaml "
            "or export SITEFLOW_API_TOKEN"
        )

    api_config = {"token": token}

    base_url = get_config_value(config, "api.base_url")
    if base_url:
        api_config["base_url"] = base_url

    timeout = get_config_value(config, "api.timeout")
    if timeout is not None:
        api_config["timeout"] = _positive_number(timeout, "api.timeout")

    return api_config


def get_site_name(ctx: CommandContext) -> str:
    """
    Get the target site from --site, falling back to defaults.site.

    Parameters
    ----------
    ctx : CommandContext
        Command context dictionary.

    Returns
    -------
    str
        Site name or UUID.

    Raises
    ------
    ConfigError
        If no site was given and no default is configured.
    """
    site = getattr(ctx["args"], "site", None)
    if not site:
        site = get_config_value(require_config(ctx), "defaults.site")
    if not site:
        raise ConfigError("No site specified. Use --site or set defaults.site in config")
    return site


def get_watch_interval(ctx: CommandContext, default: float) -> float:
    """
    Get the watch poll interval in seconds.

    Parameters
    ----------
    ctx : CommandContext
        Command context dictionary.
    default : float
        Interval to use when watch.interval is not configured.

    Returns
    -------
    float
        Interval in seconds.

    Raises
    ------
    ConfigError
        If the configured interval is not a positive number.
    """
    value = get_config_value(require_config(ctx), "watch.interval", default)
    return _positive_number(value, "watch.interval")
