"""
Built-in rule sets.

A preset is just a named, ordered rule list; once selected it is
indistinguishable from rules loaded out of a YAML file.
"""

from typing import List

from ..errors import ConfigError
from ..rules import Rule
from . import cpp, json, logs

DEFAULT_PRESET = "logs"

PRESETS = {
    "logs": logs.RULES,
    "json": json.RULES,
    "cpp": cpp.RULES,
}


def preset_names() -> List[str]:
    return sorted(PRESETS)


def get_preset(name: str) -> List[Rule]:
    """
    Return a copy of the named preset's rules.

    Raises:
        ConfigError: If no preset has that name.
    """
    try:
        return list(PRESETS[name.lower()])
    except KeyError:
        raise ConfigError(
            f"Unknown preset {name!r} (available: {', '.join(preset_names())})"
        ) from None
