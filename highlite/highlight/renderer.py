"""
Line highlighting with ANSI escape sequences.

The LineHighlighter scans a line once with the combined pattern and
wraps every match in its rule's color. Text outside matches is copied
through untouched, so stripping the escapes gives back the input line.
"""

from dataclasses import dataclass, field
from typing import Iterable, Iterator, List, Tuple

from ..rules import ANSI_RESET
from .compiler import CompiledPattern

# (start, end, rule_index) for one highlighted span
Span = Tuple[int, int, int]


@dataclass
class HighlightedLine:
    """
    A line together with the spans that should be colored.

    Attributes:
        text: The original line, without its terminator.
        spans: Non-overlapping (start, end, rule_index) spans, in order.
    """

    text: str
    spans: List[Span] = field(default_factory=list)

    @property
    def matched(self) -> bool:
        return bool(self.spans)


class LineHighlighter:
    """
    Apply a CompiledPattern to lines of text.

    One highlighter is created per run; its fragment buffer is cleared
    and refilled for every line instead of being rebuilt.

    Example:
        >>> highlighter = LineHighlighter(compile_rules([Rule("ERROR", PresetColor.RED)]))
        >>> highlighter.render("ERROR: disk full")
        '\\x1b[31mERROR\\x1b[0m: disk full'
    """

    def __init__(self, compiled: CompiledPattern):
        self.compiled = compiled
        self._buffer: List[str] = []

    def spans(self, line: str) -> Iterator[Span]:
        """
        Yield the colored spans of a line, left to right.

        finditer resumes after each match and never returns two matches at
        the same position, so a rule that can match the empty string (x*)
        cannot stall the scan. Empty matches have nothing to color and are
        skipped.
        """
        compiled = self.compiled
        for match in compiled.regex.finditer(line):
            start, end = match.span()
            if start == end:
                continue
            yield start, end, compiled.rule_index_for(match)

    def annotate(self, line: str) -> HighlightedLine:
        return HighlightedLine(line, list(self.spans(line)))

    def render(self, line: str) -> str:
        """Return the line with every match wrapped in color escapes."""
        return self._render(line, self.spans(line))

    def render_highlighted(self, highlighted: HighlightedLine) -> str:
        """Render a line that was already annotated."""
        return self._render(highlighted.text, highlighted.spans)

    def _render(self, text: str, spans: Iterable[Span]) -> str:
        buffer = self._buffer
        buffer.clear()
        ansi_starts = self.compiled.ansi_starts
        last = 0

        for start, end, rule_index in spans:
            buffer.append(text[last:start])
            buffer.append(ansi_starts[rule_index])
            buffer.append(text[start:end])
            buffer.append(ANSI_RESET)
            last = end

        # Nothing matched: hand back the original string
        if not buffer:
            return text

        buffer.append(text[last:])
        return "".join(buffer)
