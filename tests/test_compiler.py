"""Tests for combining rules into one pattern."""

import re

import pytest

from highlite.errors import ConfigError
from highlite.highlight import compile_rules
from highlite.highlight.compiler import group_name, renumber_backreferences, rule_expression
from highlite.rules import PresetColor, RgbColor, Rule


class TestRuleExpression:
    """Per-rule fragments."""

    def test_literal_is_escaped(self) -> None:
        assert rule_expression(Rule("a.b", PresetColor.RED)) == r"a\.b"

    def test_regex_is_kept(self) -> None:
        assert rule_expression(Rule("a.b", PresetColor.RED, is_regex=True)) == "a.b"

    def test_ignore_case_is_scoped(self) -> None:
        rule = Rule("error", PresetColor.RED, ignore_case=True)
        assert rule_expression(rule) == "(?i:error)"

    def test_force_ignore_case(self) -> None:
        rule = Rule("error", PresetColor.RED)
        assert rule_expression(rule, force_ignore_case=True) == "(?i:error)"


class TestCompileRules:
    """The combined CompiledPattern."""

    def test_one_named_group_per_rule(self) -> None:
        compiled = compile_rules([
            Rule("ERROR", PresetColor.RED),
            Rule("WARN", PresetColor.YELLOW),
        ])
        assert compiled.regex.pattern == "(?P<_hl0>ERROR)|(?P<_hl1>WARN)"
        assert set(compiled.regex.groupindex) == {group_name(0), group_name(1)}

    def test_group_maps_back_to_rule(self) -> None:
        compiled = compile_rules([
            Rule(r"(a)(b)", PresetColor.RED, is_regex=True),
            Rule("c", PresetColor.BLUE),
        ])
        match = compiled.regex.search("xc")
        assert compiled.rule_index_for(match) == 1
        match = compiled.regex.search("ab")
        assert compiled.rule_index_for(match) == 0

    def test_inner_groups_do_not_map_to_rules(self) -> None:
        compiled = compile_rules([Rule(r"(a)(b)", PresetColor.RED, is_regex=True)])
        # group 0 (whole match) and the two inner groups belong to no rule
        assert compiled.group_rules == (None, 0, None, None)

    def test_ansi_starts_follow_rule_order(self) -> None:
        compiled = compile_rules([
            Rule("a", PresetColor.RED),
            Rule("b", RgbColor(1, 2, 3)),
        ])
        assert compiled.ansi_starts == ("\x1b[31m", "\x1b[38;2;1;2;3m")

    def test_mixed_case_sensitivity(self) -> None:
        compiled = compile_rules([
            Rule("error", PresetColor.RED, ignore_case=True),
            Rule("warn", PresetColor.YELLOW),
        ])
        assert compiled.regex.search("ERROR") is not None
        assert compiled.regex.search("WARN") is None
        assert compiled.regex.search("warn") is not None

    def test_force_overrides_rule_setting(self) -> None:
        compiled = compile_rules([Rule("warn", PresetColor.YELLOW)], force_ignore_case=True)
        assert compiled.regex.search("WARN") is not None

    def test_empty_rule_list_never_matches(self) -> None:
        compiled = compile_rules([])
        assert compiled.regex.search("anything at all") is None
        assert compiled.rules == ()

    def test_invalid_regex_names_rule(self) -> None:
        with pytest.raises(ConfigError, match=r"Rule 1 \('\(unclosed'\)"):
            compile_rules([
                Rule("ok", PresetColor.RED),
                Rule("(unclosed", PresetColor.RED, is_regex=True),
            ])

    def test_literal_with_metacharacters_compiles(self) -> None:
        compiled = compile_rules([Rule("(unclosed", PresetColor.RED)])
        assert compiled.regex.search("x (unclosed y") is not None

    def test_conflicting_group_names_rejected(self) -> None:
        with pytest.raises(ConfigError):
            compile_rules([
                Rule("(?P<name>a)", PresetColor.RED, is_regex=True),
                Rule("(?P<name>b)", PresetColor.BLUE, is_regex=True),
            ])


class TestRuleLocalSyntax:
    """Rule syntax that only works when the rule stands alone."""

    def test_leading_flag_is_scoped(self) -> None:
        rule = Rule("(?i)error", PresetColor.RED, is_regex=True)
        assert rule_expression(rule) == "(?i:error)"

    def test_stacked_leading_flags_are_merged(self) -> None:
        rule = Rule("(?i)(?s)a.b", PresetColor.RED, is_regex=True)
        assert rule_expression(rule) == "(?is:a.b)"

    def test_literal_flag_text_is_escaped(self) -> None:
        assert rule_expression(Rule("(?i)x", PresetColor.RED)) == re.escape("(?i)x")

    def test_leading_flag_applies_to_its_rule_only(self) -> None:
        compiled = compile_rules([
            Rule("OK", PresetColor.GREEN),
            Rule("(?i)error", PresetColor.RED, is_regex=True),
        ])
        match = compiled.regex.search("got ERROR")
        assert compiled.rule_index_for(match) == 1
        assert compiled.regex.search("ok") is None

    def test_verbose_flag_with_trailing_comment(self) -> None:
        compiled = compile_rules([
            Rule("a", PresetColor.GREEN),
            Rule("(?x) b c  # two letters", PresetColor.RED, is_regex=True),
        ])
        match = compiled.regex.search("xbc")
        assert match.group(0) == "bc"
        assert compiled.rule_index_for(match) == 1

    def test_backreference_follows_its_rule(self) -> None:
        compiled = compile_rules([
            Rule("(a)", PresetColor.GREEN, is_regex=True),
            Rule(r"(\w)\1", PresetColor.RED, is_regex=True),
        ])
        match = compiled.regex.search("xbb")
        assert match.group(0) == "bb"
        assert compiled.rule_index_for(match) == 1
        assert compiled.regex.search("bc") is None

    def test_backreference_past_group_99_rejected(self) -> None:
        many_groups = "(a)" * 98
        with pytest.raises(ConfigError, match=r"Rule 1 .*group 101"):
            compile_rules([
                Rule(many_groups, PresetColor.GREEN, is_regex=True),
                Rule(r"(b)\1", PresetColor.RED, is_regex=True),
            ])


class TestRenumberBackreferences:

    def test_shifts_references(self) -> None:
        assert renumber_backreferences(r"(a)(b)\2\1", 3) == r"(a)(b)(?:\5)(?:\4)"

    def test_character_class_untouched(self) -> None:
        assert renumber_backreferences(r"(a)[\1]\1", 2) == r"(a)[\1](?:\3)"

    def test_bracket_literal_at_class_start(self) -> None:
        assert renumber_backreferences(r"(a)[]\1]\1", 1) == r"(a)[]\1](?:\2)"

    def test_octal_escape_untouched(self) -> None:
        assert renumber_backreferences(r"(a)\101\1", 1) == r"(a)\101(?:\2)"

    def test_escaped_backslash_untouched(self) -> None:
        assert renumber_backreferences(r"(a)\\1", 1) == r"(a)\\1"

    def test_numbered_conditional(self) -> None:
        assert renumber_backreferences(r"(a)?(?(1)b|c)", 3) == r"(a)?(?(4)b|c)"
