"""
Rule compilation into a single combined regular expression.

All rules are merged into one alternation so each line is scanned once,
however many rules there are. Every rule gets its own named group; the
group that took part in a match tells us which rule (and color) won.

Design Decisions:
    - Case-insensitivity is applied per rule with a scoped inline flag,
      (?i:...), since rules in one file may disagree
    - Alternation keeps rule order, so earlier rules win when two rules
      could match at the same position
    - Each rule is compiled on its own first, so a bad expression is
      reported against the rule that contains it
    - A rule behaves as it would alone: leading global flags such as
      (?i) are scoped to the rule, and numbered backreferences are
      shifted to the rule's groups in the combined pattern
"""

import re
from dataclasses import dataclass
from typing import Iterable, Optional, Tuple

from ..errors import ConfigError
from ..rules import Rule

# Named group prefix; group for rule i is "_hl<i>"
GROUP_PREFIX = "_hl"

# An expression that can never match, used when there are no rules
NEVER_MATCHES = r"(?!)"

# One inline global flag group, e.g. (?i) or (?sx)
LEADING_FLAGS = re.compile(r"\(\?([aiLmsux]+)\)")

# A conditional on a numbered group, e.g. (?(1)yes|no)
NUMBERED_CONDITIONAL = re.compile(r"\(\?\((\d+)\)")

# \N with two or more digits is read as a group number only up to 99
MAX_BACKREFERENCE = 99

OCTAL_DIGITS = "01234567"


def group_name(rule_index: int) -> str:
    return f"{GROUP_PREFIX}{rule_index}"


@dataclass(frozen=True)
class CompiledPattern:
    """
    The combined matcher for a full rule list.

    Attributes:
        regex: The compiled alternation of all rule groups.
        rules: The rules, in the order they were compiled.
        group_rules: For each capture group number, the index of the rule
                     it belongs to, or None for groups inside a rule's
                     own pattern. Indexed by Match.lastindex.
        ansi_starts: The ANSI start sequence for each rule.
    """

    regex: "re.Pattern[str]"
    rules: Tuple[Rule, ...]
    group_rules: Tuple[Optional[int], ...]
    ansi_starts: Tuple[str, ...]

    def rule_index_for(self, match: "re.Match[str]") -> int:
        """
        Return the index of the rule that produced a match.

        The rule group encloses any groups of the rule's own pattern, so it
        closes last and Match.lastindex points at it. The scan over all rule
        groups is only reached for matches made by some other pattern.
        """
        index = match.lastindex
        if index is not None and index < len(self.group_rules):
            rule_index = self.group_rules[index]
            if rule_index is not None:
                return rule_index

        for rule_index in range(len(self.rules)):
            if match.start(group_name(rule_index)) != -1:
                return rule_index

        raise LookupError(f"No rule group took part in match {match.group(0)!r}")


def scope_leading_flags(expression: str) -> str:
    """
    Turn global flags at the start of a pattern into a scoped group.

    "(?i)error" is valid on its own but not once placed after other
    rules in the alternation, so it becomes "(?i:error)".
    """
    flags = ""
    match = LEADING_FLAGS.match(expression)
    while match:
        flags += match.group(1)
        expression = expression[match.end():]
        match = LEADING_FLAGS.match(expression)

    if not flags:
        return expression

    flags = "".join(dict.fromkeys(flags))
    # A trailing verbose-mode comment would otherwise swallow the ")"
    if "x" in flags:
        expression += "\n"
    return f"(?{flags}:{expression})"


def renumber_backreferences(expression: str, offset: int) -> str:
    r"""
    Shift numbered backreferences and conditionals by `offset` groups.

    A rule's own groups are renumbered once the rule is wrapped and placed
    after other rules, so \1 in the rule has to become \(1 + offset).
    Escapes inside character classes are octal escapes and stay as they
    are.

    Raises:
        ValueError: If a shifted reference would pass group 99, which
                    the \N syntax cannot express.
    """
    out = []
    length = len(expression)
    in_class = False
    i = 0

    while i < length:
        char = expression[i]

        if char == "\\" and i + 1 < length:
            digit = expression[i + 1]
            if in_class or digit not in "123456789":
                out.append(expression[i:i + 2])
                i += 2
                continue

            end = i + 2
            if end < length and expression[end] in "0123456789":
                if (
                    digit in OCTAL_DIGITS
                    and expression[end] in OCTAL_DIGITS
                    and end + 1 < length
                    and expression[end + 1] in OCTAL_DIGITS
                ):
                    # \ooo is an octal escape, not a backreference
                    out.append(expression[i:end + 2])
                    i = end + 2
                    continue
                end += 1

            number = int(expression[i + 1:end]) + offset
            if number > MAX_BACKREFERENCE:
                raise ValueError(f"backreference {expression[i:end]} would refer to group {number}")
            # Wrapped so a following digit is not read as part of the number
            out.append(f"(?:\\{number})")
            i = end
            continue

        if in_class:
            if char == "]":
                in_class = False
            out.append(char)
            i += 1
            continue

        if char == "[":
            in_class = True
            end = i + 1
            # A ] right after [ or [^ is a literal
            if end < length and expression[end] == "^":
                end += 1
            if end < length and expression[end] == "]":
                end += 1
            out.append(expression[i:end])
            i = end
            continue

        conditional = NUMBERED_CONDITIONAL.match(expression, i)
        if conditional:
            out.append(f"(?({int(conditional.group(1)) + offset})")
            i = conditional.end()
            continue

        out.append(char)
        i += 1

    return "".join(out)


def rule_expression(rule: Rule, force_ignore_case: bool = False) -> str:
    """
    Return the regex fragment for one rule, without its named group.

    Literal keywords are escaped; case-insensitive rules are wrapped in a
    scoped (?i:...) group so the flag does not leak into other rules.
    """
    if rule.is_regex:
        expression = scope_leading_flags(rule.pattern)
    else:
        expression = re.escape(rule.pattern)
    if force_ignore_case or rule.ignore_case:
        expression = f"(?i:{expression})"
    return expression


def compile_rules(rules: Iterable[Rule], force_ignore_case: bool = False) -> CompiledPattern:
    """
    Compile an ordered list of rules into one CompiledPattern.

    Args:
        rules: Flattened rule list (includes already resolved).
        force_ignore_case: Make every rule case-insensitive, overriding the
                           rule's own ignore_case setting.

    Returns:
        CompiledPattern: The combined matcher. An empty rule list gives a
                         pattern that never matches.

    Raises:
        ConfigError: If any rule, or the combined expression, fails to
                     compile.

    Example:
        >>> compiled = compile_rules([Rule("ERROR", PresetColor.RED)])
        >>> compiled.regex.pattern
        '(?P<_hl0>ERROR)'
    """
    rules = tuple(rules)
    fragments = []
    # Capture groups used by the rules compiled so far
    groups_before = 0

    for index, rule in enumerate(rules):
        expression = rule_expression(rule, force_ignore_case)

        # Compile alone first so the error names the rule at fault
        try:
            own_groups = re.compile(expression).groups
        except re.error as exc:
            raise ConfigError(
                f"Rule {index} ({rule.pattern!r}) is not a valid regular expression: {exc}"
            ) from exc

        if own_groups:
            # Inner groups now sit after earlier rules and this rule's group
            try:
                expression = renumber_backreferences(expression, groups_before + 1)
            except ValueError as exc:
                raise ConfigError(f"Rule {index} ({rule.pattern!r}): {exc}") from exc

        fragments.append(f"(?P<{group_name(index)}>{expression})")
        groups_before += 1 + own_groups

    combined = "|".join(fragments) if fragments else NEVER_MATCHES

    # Rules can still clash, e.g. two of them defining the same group name
    try:
        regex = re.compile(combined)
    except re.error as exc:
        raise ConfigError(f"Rules could not be combined into one expression: {exc}") from exc

    group_rules: list = [None] * (regex.groups + 1)
    for index in range(len(rules)):
        group_rules[regex.groupindex[group_name(index)]] = index

    return CompiledPattern(
        regex=regex,
        rules=rules,
        group_rules=tuple(group_rules),
        ansi_starts=tuple(rule.color.to_ansi() for rule in rules),
    )
