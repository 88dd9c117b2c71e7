"""
The highlighting engine.

Modules:
    - compiler: merges a rule list into one CompiledPattern
    - renderer: applies a CompiledPattern to lines (LineHighlighter)

Usage:
    compiled = compile_rules(rules, force_ignore_case=False)
    highlighter = LineHighlighter(compiled)
    print(highlighter.render("ERROR: disk full"))
"""

from .compiler import CompiledPattern, compile_rules
from .renderer import HighlightedLine, LineHighlighter

__all__ = [
    "CompiledPattern",
    "HighlightedLine",
    "LineHighlighter",
    "compile_rules",
]
