"""The "json" preset: keys, strings, numbers and literals."""

from ..rules import PresetColor, RgbColor, Rule

RULES = (
    # Keys must come before strings, which would also match them
    Rule(r'"[^"]+"\s*:', RgbColor(214, 157, 133), is_regex=True),
    Rule(r'"([^"\\]|\\.)*"', RgbColor(181, 206, 168), is_regex=True),
    Rule(r"\b\d+(\.\d+)?\b", RgbColor(206, 145, 120), is_regex=True),
    Rule(r"\b(true|false|null)\b", PresetColor.CYAN, is_regex=True, ignore_case=True),
)
