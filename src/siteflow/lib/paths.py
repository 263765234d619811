"""XDG-compliant path management for siteflow."""

import os
from pathlib import Path


def get_config_dir() -> Path:
    """
    Get the configuration directory following the XDG Base Directory layout.

    Returns
    -------
    Path
        Path to ~/.config/siteflow/ or $XDG_CONFIG_HOME/siteflow/.
    """
    xdg_config_home = os.environ.get("XDG_CONFIG_HOME")
    if xdg_config_home:
        base = Path(xdg_config_home)
    else:
        base = Path.home() / ".config"

    return base / "siteflow"


def get_config_file() -> Path:
    """
    Get path to main configuration file.

    Returns
    -------
    Path
        Path to config.yaml in the configuration directory.
    """
    return get_config_dir() / "config.yaml"


def get_secrets_file() -> Path:
    """
    Get path to secrets configuration file.

    The API token normally lives here rather than in config.yaml.

    Returns
    -------
    Path
        Path to secrets.yaml in the configuration directory.
    """
    return get_config_dir() / "secrets.yaml"


def get_project_config_file() -> Path:
    """
    Get path to project-local configuration file.

    Returns
    -------
    Path
        Path to ./siteflow.yaml in the current working directory.
    """
    return Path.cwd() / "siteflow.yaml"
