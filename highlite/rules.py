"""
Rule and color definitions.

A Rule pairs a keyword or regular expression with the color used to
render matching text. Rules are built once, from a rule file or a
preset, and never change afterwards.

Colors come in two flavours:
    - PresetColor: one of the standard 8-color ANSI foregrounds
    - RgbColor: a 24-bit true-color value

Example:
    >>> rule = Rule("ERROR", PresetColor.RED)
    >>> rule.color.to_ansi()
    '\\x1b[31m'
"""

from dataclasses import dataclass
from enum import Enum
from typing import Any, Union

from .errors import ConfigError

ANSI_RESET = "\x1b[0m"


class PresetColor(Enum):
    """Standard ANSI foreground colors usable by name in rule files."""

    RED = "\x1b[31m"
    YELLOW = "\x1b[33m"
    BLUE = "\x1b[34m"
    GREEN = "\x1b[32m"
    CYAN = "\x1b[36m"
    MAGENTA = "\x1b[35m"

    def to_ansi(self) -> str:
        return self.value

    @classmethod
    def parse(cls, name: str) -> "PresetColor":
        """
        Resolve a color name (case-insensitive, aliases allowed).

        Raises:
            ConfigError: If the name is not a known preset color.
        """
        key = str(name).strip().lower()
        color = PRESET_COLOR_ALIASES.get(key)
        if color is None:
            raise ConfigError(f"Unknown preset color: {name!r}")
        return color


# Accepted spellings for each preset, all lowercase
PRESET_COLOR_ALIASES = {
    "red": PresetColor.RED,
    "yellow": PresetColor.YELLOW,
    "yel": PresetColor.YELLOW,
    "blue": PresetColor.BLUE,
    "green": PresetColor.GREEN,
    "cyan": PresetColor.CYAN,
    "magenta": PresetColor.MAGENTA,
    "purple": PresetColor.MAGENTA,
}


@dataclass(frozen=True)
class RgbColor:
    """A 24-bit color rendered with the ESC[38;2;R;G;Bm sequence."""

    r: int
    g: int
    b: int

    def __post_init__(self):
        for channel in ("r", "g", "b"):
            value = getattr(self, channel)
            # bool is an int subclass, but `r: true` is a typo, not a color
            if isinstance(value, bool) or not isinstance(value, int):
                raise ConfigError(f"RGB channel {channel} must be an integer, got {value!r}")
            if not 0 <= value <= 255:
                raise ConfigError(f"RGB channel {channel} out of range 0-255: {value}")

    def to_ansi(self) -> str:
        return f"\x1b[38;2;{self.r};{self.g};{self.b}m"


Color = Union[PresetColor, RgbColor]


def parse_color(value: Any) -> Color:
    """
    Build a Color from its rule-file representation.

    Accepted forms:
        - "red"                     preset name as a plain string
        - {"type": "Red"}           preset name under "type"
        - {"name": "Red"}           preset name under "name"
        - {"r": 1, "g": 2, "b": 3}  RGB triple

    Args:
        value: The value of a rule's "color" field.

    Returns:
        Color: A PresetColor or RgbColor.

    Raises:
        ConfigError: If the value matches none of the forms above.
    """
    if isinstance(value, (PresetColor, RgbColor)):
        return value

    if isinstance(value, str):
        return PresetColor.parse(value)

    if isinstance(value, dict):
        if {"r", "g", "b"} <= value.keys():
            return RgbColor(value["r"], value["g"], value["b"])
        for key in ("type", "name"):
            if key in value:
                return PresetColor.parse(value[key])

    raise ConfigError(f"Unrecognised color: {value!r}")


@dataclass(frozen=True)
class Rule:
    """
    A single highlighting rule.

    Attributes:
        pattern: Keyword or regular expression to match. Never empty.
        color: Color used for matching text.
        is_regex: If False, pattern is matched as literal text.
        ignore_case: Match case-insensitively. The global --ignore-case
                     flag forces this on for every rule.
    """

    pattern: str
    color: Color
    is_regex: bool = False
    ignore_case: bool = False

    def __post_init__(self):
        if not isinstance(self.pattern, str) or not self.pattern:
            raise ConfigError("Rule pattern must be a non-empty string")
        if not isinstance(self.color, (PresetColor, RgbColor)):
            raise ConfigError(f"Rule {self.pattern!r} has an invalid color: {self.color!r}")

    @classmethod
    def from_mapping(cls, data: Any) -> "Rule":
        """
        Build a Rule from one entry of a rule file's "rules" list.

        The pattern lives under "keyword"; "is_regex" and "ignore_case"
        default to False.

        Raises:
            ConfigError: On missing fields or values of the wrong type.
        """
        if not isinstance(data, dict):
            raise ConfigError(f"Rule entry must be a mapping, got {data!r}")
        if "keyword" not in data:
            raise ConfigError(f"Rule entry is missing 'keyword': {data!r}")
        if "color" not in data:
            raise ConfigError(f"Rule {data['keyword']!r} is missing 'color'")

        pattern = data["keyword"]
        # YAML reads `keyword: 404` as an int
        if isinstance(pattern, (int, float)) and not isinstance(pattern, bool):
            pattern = str(pattern)

        flags = {}
        for key in ("is_regex", "ignore_case"):
            value = data.get(key, False)
            if not isinstance(value, bool):
                raise ConfigError(f"Rule {data['keyword']!r}: '{key}' must be true or false")
            flags[key] = value

        return cls(
            pattern=pattern,
            color=parse_color(data["color"]),
            **flags,
        )
