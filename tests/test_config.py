"""Tests for YAML rule files."""

from pathlib import Path

import pytest
import yaml

from highlite.config import load_rules
from highlite.errors import ConfigError
from highlite.rules import PresetColor, RgbColor, Rule


def write_yaml(path: Path, data) -> Path:
    path.write_text(yaml.dump(data))
    return path


class TestLoadRules:
    """Loading a single rule file."""

    def test_load_full_file(self, tmp_path: Path):
        """Should parse preset, RGB, regex and case settings."""
        path = tmp_path / "rules.yaml"
        path.write_text(
            'rules:\n'
            '  - keyword: "ERROR"\n'
            '    color: { type: Red }\n'
            '  - keyword: "//.*"\n'
            '    is_regex: true\n'
            '    ignore_case: false\n'
            '    color: { r: 106, g: 153, b: 85 }\n'
            '  - keyword: ok\n'
            '    ignore_case: true\n'
            '    color: green\n'
        )

        assert load_rules(path) == [
            Rule("ERROR", PresetColor.RED),
            Rule("//.*", RgbColor(106, 153, 85), is_regex=True),
            Rule("ok", PresetColor.GREEN, ignore_case=True),
        ]

    def test_empty_file(self, tmp_path: Path):
        path = tmp_path / "empty.yaml"
        path.write_text("")
        assert load_rules(path) == []

    def test_missing_file(self, tmp_path: Path):
        with pytest.raises(ConfigError, match="not found"):
            load_rules(tmp_path / "nope.yaml")

    def test_invalid_yaml(self, tmp_path: Path):
        path = tmp_path / "bad.yaml"
        path.write_text("rules: [unclosed\n")
        with pytest.raises(ConfigError, match="Invalid YAML"):
            load_rules(path)

    def test_top_level_must_be_mapping(self, tmp_path: Path):
        path = write_yaml(tmp_path / "list.yaml", ["ERROR"])
        with pytest.raises(ConfigError, match="mapping"):
            load_rules(path)

    def test_rules_must_be_list(self, tmp_path: Path):
        path = write_yaml(tmp_path / "rules.yaml", {"rules": {"keyword": "x"}})
        with pytest.raises(ConfigError, match="must be a list"):
            load_rules(path)

    def test_bad_rule_reports_file_and_position(self, tmp_path: Path):
        path = write_yaml(tmp_path / "rules.yaml", {
            "rules": [
                {"keyword": "ok", "color": "red"},
                {"keyword": "bad", "color": "chartreuse"},
            ],
        })
        with pytest.raises(ConfigError, match=r"rule 1: Unknown preset color"):
            load_rules(path)


class TestIncludes:
    """Recursive include resolution."""

    def test_included_rules_come_first(self, tmp_path: Path):
        write_yaml(tmp_path / "base.yaml", {"rules": [{"keyword": "BASE", "color": "red"}]})
        main = write_yaml(tmp_path / "main.yaml", {
            "include": "base.yaml",
            "rules": [{"keyword": "MAIN", "color": "blue"}],
        })

        patterns = [rule.pattern for rule in load_rules(main)]
        assert patterns == ["BASE", "MAIN"]

    def test_nested_includes_relative_to_including_file(self, tmp_path: Path):
        (tmp_path / "sub").mkdir()
        write_yaml(tmp_path / "sub" / "leaf.yaml", {"rules": [{"keyword": "LEAF", "color": "red"}]})
        write_yaml(tmp_path / "sub" / "mid.yaml", {
            "include": ["leaf.yaml"],
            "rules": [{"keyword": "MID", "color": "red"}],
        })
        main = write_yaml(tmp_path / "main.yaml", {
            "include": ["sub/mid.yaml"],
            "rules": [{"keyword": "MAIN", "color": "red"}],
        })

        patterns = [rule.pattern for rule in load_rules(main)]
        assert patterns == ["LEAF", "MID", "MAIN"]

    def test_include_list_order(self, tmp_path: Path):
        write_yaml(tmp_path / "a.yaml", {"rules": [{"keyword": "A", "color": "red"}]})
        write_yaml(tmp_path / "b.yaml", {"rules": [{"keyword": "B", "color": "red"}]})
        main = write_yaml(tmp_path / "main.yaml", {"include": ["b.yaml", "a.yaml"]})

        assert [rule.pattern for rule in load_rules(main)] == ["B", "A"]

    def test_include_cycle(self, tmp_path: Path):
        write_yaml(tmp_path / "a.yaml", {"include": "b.yaml"})
        write_yaml(tmp_path / "b.yaml", {"include": "a.yaml"})

        with pytest.raises(ConfigError, match="Include cycle"):
            load_rules(tmp_path / "a.yaml")

    def test_self_include(self, tmp_path: Path):
        path = write_yaml(tmp_path / "self.yaml", {"include": "self.yaml"})
        with pytest.raises(ConfigError, match="Include cycle"):
            load_rules(path)

    def test_shared_include_is_not_a_cycle(self, tmp_path: Path):
        write_yaml(tmp_path / "common.yaml", {"rules": [{"keyword": "C", "color": "red"}]})
        write_yaml(tmp_path / "a.yaml", {"include": "common.yaml"})
        write_yaml(tmp_path / "b.yaml", {"include": "common.yaml"})
        main = write_yaml(tmp_path / "main.yaml", {"include": ["a.yaml", "b.yaml"]})

        assert [rule.pattern for rule in load_rules(main)] == ["C", "C"]

    def test_missing_include(self, tmp_path: Path):
        main = write_yaml(tmp_path / "main.yaml", {"include": "gone.yaml"})
        with pytest.raises(ConfigError, match="not found"):
            load_rules(main)

    def test_include_must_be_paths(self, tmp_path: Path):
        main = write_yaml(tmp_path / "main.yaml", {"include": [1, 2]})
        with pytest.raises(ConfigError, match="include"):
            load_rules(main)
