"""
The "logs" preset: general application and system logs.

Order matters. Earlier rules win when two rules could start at the same
position, so specific shapes (timestamps, IPs) come before the generic
number and string rules that would otherwise split them up.
"""

from ..rules import PresetColor, RgbColor, Rule

GREY = RgbColor(180, 180, 180)
ORANGE = RgbColor(255, 165, 0)
LAVENDER = RgbColor(140, 140, 255)

RULES = (
    # Timestamps first, so dates aren't split into numbers and dashes
    Rule(r"\b\d{4}-\d{2}-\d{2}[ T]\d{2}:\d{2}:\d{2}(\.\d+)?\b", GREY, is_regex=True),

    # IPv4 before numbers, or 192.168.0.1 becomes four numbers
    Rule(r"\b\d{1,3}(\.\d{1,3}){3}\b", ORANGE, is_regex=True),
    Rule(r"\b([0-9a-fA-F]{0,4}:){1,7}[0-9a-fA-F]{0,4}\b", ORANGE, is_regex=True),

    # URLs and domains
    Rule(r"https?://[^\s/$.?#].[^\s]*", RgbColor(80, 200, 250), is_regex=True),
    Rule(r"\b([a-zA-Z0-9-]+\.)+[a-zA-Z]{2,}\b", RgbColor(100, 150, 200), is_regex=True),

    # JSON keys, ahead of plain quoted strings
    Rule(r'"[^"]+"\s*:', RgbColor(200, 100, 200), is_regex=True),

    # Common key=value fields
    Rule(
        r"\b(user|uid|id|request_id|trace_id|span_id)=\S+\b",
        RgbColor(206, 145, 120),
        is_regex=True,
        ignore_case=True,
    ),

    # Dotted module or class names, e.g. com.example.Service
    Rule(r"\b([A-Za-z_][\w$]*\.)+[A-Za-z_][\w$]*\b", RgbColor(86, 156, 214), is_regex=True),

    # File paths
    Rule(r"/[^ \t\n]+", RgbColor(152, 195, 121), is_regex=True),

    # Log levels, long and two-letter forms
    Rule(r"\b(FATAL|CRITICAL|FF)\b", RgbColor(255, 0, 0), is_regex=True, ignore_case=True),
    Rule(r"\b(ERROR|EE)\b", PresetColor.RED, is_regex=True, ignore_case=True),
    Rule(r"\b(WARN(ING)?|WW)\b", PresetColor.YELLOW, is_regex=True, ignore_case=True),
    Rule(r"\b(INFO|II)\b", PresetColor.GREEN, is_regex=True, ignore_case=True),
    Rule(r"\b(DEBUG|DD)\b", PresetColor.CYAN, is_regex=True, ignore_case=True),
    Rule(r"\b(TRACE|VV)\b", RgbColor(160, 160, 160), is_regex=True, ignore_case=True),

    # HTTP methods and status codes
    Rule(r"\b(GET|POST|PUT|DELETE|PATCH|OPTIONS|HEAD)\b", RgbColor(0, 200, 0), is_regex=True),
    Rule(r"\b(1\d{2}|2\d{2}|3\d{2}|4\d{2}|5\d{2})\b", RgbColor(255, 140, 0), is_regex=True),

    # Threads and process ids
    Rule(r"\[(main|worker-\d+|thread-\d+)\]", LAVENDER, is_regex=True, ignore_case=True),
    Rule(r"\bpid=\d+\b", LAVENDER, is_regex=True),

    # Exceptions and stack frames
    Rule(r"\b(Exception|Error|Traceback)\b", RgbColor(255, 50, 50), is_regex=True),
    Rule(r"^\s+at\s+[^\s]+\([^\)]*\)", RgbColor(180, 180, 255), is_regex=True),

    # SQL keywords and shell variables
    Rule(
        r"\b(SELECT|INSERT|UPDATE|DELETE|FROM|WHERE|JOIN|CREATE|DROP|ALTER)\b",
        RgbColor(0, 255, 200),
        is_regex=True,
        ignore_case=True,
    ),
    Rule(r"\$[a-zA-Z_]\w*", RgbColor(255, 200, 100), is_regex=True),

    # Any remaining numbers
    Rule(r"\b\d+(\.\d+)?\b", RgbColor(181, 206, 168), is_regex=True),

    # Quoted strings last, so they don't swallow JSON keys
    Rule(r'"([^"\\]|\\.)*"', RgbColor(214, 157, 133), is_regex=True),
)
