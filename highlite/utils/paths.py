"""
Filesystem locations used by highlite.

All path logic is centralized here so the CLI and the config loader
agree on where user configuration lives.

Design Decisions:
    - All functions return pathlib.Path objects
    - HIGHLITE_CONFIG_DIR wins, then the XDG base directory, then ~/.config
    - Nothing here creates directories; a missing config dir just means
      "no user configuration"
"""

import os
from pathlib import Path


def config_dir() -> Path:
    """
    Return the directory holding the user's highlite configuration.

    Returns:
        Path: $HIGHLITE_CONFIG_DIR, else $XDG_CONFIG_HOME/highlite,
              else ~/.config/highlite.

    Example:
        >>> os.environ["HIGHLITE_CONFIG_DIR"] = "/etc/highlite"
        >>> config_dir()
        PosixPath('/etc/highlite')
    """
    override = os.environ.get("HIGHLITE_CONFIG_DIR")
    if override:
        return Path(override).expanduser()

    xdg = os.environ.get("XDG_CONFIG_HOME")
    if xdg:
        return Path(xdg).expanduser() / "highlite"

    return Path.home() / ".config" / "highlite"


def default_config_path() -> Path:
    """
    Return the rule file used when no config or preset is requested.

    The file is optional; callers check that it exists.
    """
    return config_dir() / "config.yaml"


def env_file_path() -> Path:
    """Return the optional KEY=VALUE file loaded into the environment."""
    return config_dir() / "highlite.env"
