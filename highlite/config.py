"""
Loading rules from YAML files.

A rule file holds a list of rules and may pull in other rule files with
`include`. Includes are resolved here, recursively, so the rest of the
tool only ever sees one flat, ordered list of Rule objects.

File Format:
    include:                    # optional, a path or a list of paths
      - common.yaml             # relative to the including file
    rules:
      - keyword: "ERROR"
        color: { type: Red }
      - keyword: "//.*"
        is_regex: true
        ignore_case: false
        color: { r: 106, g: 153, b: 85 }

Ordering:
    Included rules come first, in the order listed, followed by the
    file's own rules. Since earlier rules win at a given position, a
    shared base file takes precedence over the rules that include it.
"""

from pathlib import Path
from typing import Any, List

import yaml

from .errors import ConfigError
from .rules import Rule
from .utils.log import get_logger

log = get_logger("config")


def _read_document(path: Path) -> dict:
    """Parse one YAML file into a mapping, mapping every failure to ConfigError."""
    try:
        with path.open("r", encoding="utf-8") as f:
            raw = yaml.safe_load(f)
    except FileNotFoundError as exc:
        raise ConfigError(f"Config file not found: {path}") from exc
    except yaml.YAMLError as exc:
        raise ConfigError(f"Invalid YAML in {path}: {exc}") from exc
    except (OSError, UnicodeDecodeError) as exc:
        raise ConfigError(f"Cannot read config file {path}: {exc}") from exc

    # An empty file is a valid, empty rule set
    if raw is None:
        return {}
    if not isinstance(raw, dict):
        raise ConfigError(f"{path}: top level must be a mapping with 'rules' and/or 'include'")
    return raw


def _include_paths(raw: Any, base: Path) -> List[Path]:
    if raw is None:
        return []
    if isinstance(raw, str):
        raw = [raw]
    if not isinstance(raw, list) or not all(isinstance(item, str) for item in raw):
        raise ConfigError(f"{base}: 'include' must be a path or a list of paths")
    return [(base.parent / Path(item).expanduser()) for item in raw]


def _load(path: Path, stack: List[Path]) -> List[Rule]:
    resolved = path.resolve()
    if resolved in stack:
        chain = " -> ".join(str(p) for p in stack + [resolved])
        raise ConfigError(f"Include cycle: {chain}")

    document = _read_document(path)
    stack = stack + [resolved]
    rules: List[Rule] = []

    for include in _include_paths(document.get("include"), path):
        rules.extend(_load(include, stack))

    entries = document.get("rules") or []
    if not isinstance(entries, list):
        raise ConfigError(f"{path}: 'rules' must be a list")

    for position, entry in enumerate(entries):
        try:
            rules.append(Rule.from_mapping(entry))
        except ConfigError as exc:
            raise ConfigError(f"{path}: rule {position}: {exc}") from exc

    log.debug("Loaded %d rule(s) from %s", len(entries), path)
    return rules


def load_rules(path) -> List[Rule]:
    """
    Load and flatten the rules of a YAML rule file.

    Args:
        path: The rule file.

    Returns:
        List[Rule]: Included rules first, then the file's own rules.

    Raises:
        ConfigError: On missing files, invalid YAML, malformed rules or
                     an include cycle.

    Example:
        >>> rules = load_rules("~/.config/highlite/config.yaml")
        >>> rules[0].pattern
        'ERROR'
    """
    return _load(Path(path).expanduser(), [])
