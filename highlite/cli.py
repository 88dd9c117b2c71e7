#!/usr/bin/env python3
"""
highlite - highlight keywords and patterns in streamed text.

This module implements the command-line interface: it works out which
rules to use and which input to read, then hands both to the pipeline.

Responsibilities:
    - Load optional KEY=VALUE settings from the user's config directory
    - Choose the rule set (rule file, preset, or the default preset)
    - Choose the input (journal, followed file, file, or stdin)
    - Decide whether to emit color at all
    - Map errors to exit codes

Usage:
    highlite [options]
    python -m highlite [options]

Examples:
    highlite -c rules.yaml -f app.log
    tail -f app.log | highlite -p logs
    highlite -F /var/log/syslog -i
    highlite -j --unit sshd
"""

import argparse
import logging
import os
import signal
import sys
from typing import BinaryIO, List, Optional, Tuple

from .errors import ConfigError, SourceSetupError
from .config import load_rules
from .highlight import LineHighlighter, compile_rules
from .pipeline import run_pipeline, select_source
from .preset import DEFAULT_PRESET, get_preset, preset_names
from .rules import Rule
from .source import StdinSource
from .source.tailer import DEFAULT_INITIAL_LINES, DEFAULT_POLL_INTERVAL
from .utils.log import configure_logging, get_logger
from .utils.paths import default_config_path, env_file_path

log = get_logger("cli")

PROG = "highlite"

# ============================================================
# Exit codes
# ============================================================

EXIT_OK = 0
EXIT_SOURCE_ERROR = 1
EXIT_CONFIG_ERROR = 2
EXIT_INTERRUPTED = 130

COLOR_MODES = ["always", "never", "auto"]

STDIN_HINT = "(Info: Waiting for stdin... Press Ctrl+D to end)"

# ============================================================
# Environment Configuration
# ============================================================

def load_dotenv(path=None) -> None:
    """
    Load a KEY=VALUE settings file into os.environ if present.

    This lets users keep defaults such as HIGHLITE_PRESET or
    HIGHLITE_COLOR in their config directory instead of their shell
    profile.

    Args:
        path: File to read; defaults to env_file_path().

    Side Effects:
        Modifies os.environ by adding any variables from the file that
        aren't already set (uses setdefault, so existing vars win).
    """
    env_path = env_file_path() if path is None else path

    # Silently skip if no env file exists - it's optional
    if not env_path.exists():
        return

    with env_path.open("r", encoding="utf-8") as f:
        for line in f:
            line = line.strip()
            # Skip empty lines and comments
            if not line or line.startswith("#"):
                continue
            # Skip malformed lines (no = sign)
            if "=" not in line:
                continue
            # Split on first = only (value might contain =)
            key, value = line.split("=", 1)
            # setdefault ensures existing env vars take priority
            os.environ.setdefault(key.strip(), value.strip())


def _env_poll_interval() -> float:
    raw = os.environ.get("HIGHLITE_POLL_INTERVAL")
    if not raw:
        return DEFAULT_POLL_INTERVAL
    try:
        return positive_float(raw)
    except argparse.ArgumentTypeError:
        log.warning("Ignoring invalid HIGHLITE_POLL_INTERVAL=%r", raw)
        return DEFAULT_POLL_INTERVAL


# ============================================================
# Rule selection
# ============================================================

def resolve_rules(args) -> Tuple[List[Rule], str]:
    """
    Pick the rule set for this run.

    Priority, highest first:
        1. --config FILE
        2. --preset NAME
        3. HIGHLITE_CONFIG
        4. HIGHLITE_PRESET
        5. the user's default config file, if it exists
        6. the built-in "logs" preset

    Returns:
        (rules, origin) where origin describes where the rules came from.

    Raises:
        ConfigError: If the chosen file or preset can't be loaded.
    """
    if args.config:
        if args.preset:
            log.info("Both --config and --preset given; using --config %s", args.config)
        return load_rules(args.config), f"config {args.config}"

    if args.preset:
        return get_preset(args.preset), f"preset {args.preset}"

    env_config = os.environ.get("HIGHLITE_CONFIG")
    if env_config:
        return load_rules(env_config), f"config {env_config}"

    env_preset = os.environ.get("HIGHLITE_PRESET")
    if env_preset:
        return get_preset(env_preset), f"preset {env_preset}"

    default_path = default_config_path()
    if default_path.exists():
        return load_rules(default_path), f"config {default_path}"

    return get_preset(DEFAULT_PRESET), f"preset {DEFAULT_PRESET}"


def should_color(mode: str, out: BinaryIO) -> bool:
    """Apply the --color policy to the output stream."""
    if mode == "never":
        return False
    if mode == "auto":
        isatty = getattr(out, "isatty", None)
        return bool(isatty and isatty())
    return True


# ============================================================
# Command-Line Argument Parsing
# ============================================================

def positive_float(value: str) -> float:
    try:
        number = float(value)
    except ValueError:
        raise argparse.ArgumentTypeError(f"not a number: {value!r}") from None
    if number <= 0:
        raise argparse.ArgumentTypeError(f"must be greater than zero: {value!r}")
    return number


def non_negative_int(value: str) -> int:
    try:
        number = int(value)
    except ValueError:
        raise argparse.ArgumentTypeError(f"not an integer: {value!r}") from None
    if number < 0:
        raise argparse.ArgumentTypeError(f"must not be negative: {value!r}")
    return number


def build_parser() -> argparse.ArgumentParser:
    """
    Build and configure the argument parser.

    Options fall into three groups: where rules come from, where input
    comes from, and how output looks.

    Returns:
        argparse.ArgumentParser: Configured parser ready to parse sys.argv.
    """
    parser = argparse.ArgumentParser(
        prog=PROG,
        description="Highlight keywords and regular expressions in text from "
                    "stdin, a file, a growing file or the system journal.",
    )

    # --- Rules ---
    rules = parser.add_argument_group("rules")
    rules.add_argument("-c", "--config",
                       help="YAML rule file (takes precedence over --preset)")
    rules.add_argument("-p", "--preset",
                       help=f"Built-in rule set: {', '.join(preset_names())}")
    rules.add_argument("-i", "--ignore-case", action="store_true",
                       help="Match every rule case-insensitively")
    rules.add_argument("--list-presets", action="store_true",
                       help="List built-in presets and exit")

    # --- Input ---
    source = parser.add_argument_group("input")
    source.add_argument("-f", "--file",
                        help="Read this file instead of stdin")
    source.add_argument("-F", "--follow-file", metavar="PATH",
                        help="Follow a growing file, like tail -F")
    source.add_argument("-j", "--follow-journal", action="store_true",
                        help="Follow the systemd journal (overrides -F and -f)")
    source.add_argument("--unit",
                        help="With -j: only show records for this systemd unit")
    source.add_argument("-n", "--lines", type=non_negative_int,
                        default=DEFAULT_INITIAL_LINES,
                        help="With -F/-j: existing lines to show first "
                             f"(default: {DEFAULT_INITIAL_LINES})")
    source.add_argument("--poll-interval", type=positive_float, default=None,
                        metavar="SECONDS",
                        help="With -F: seconds between checks for new data "
                             f"(default: {DEFAULT_POLL_INTERVAL})")

    # --- Output ---
    output = parser.add_argument_group("output")
    output.add_argument("--color", choices=COLOR_MODES, default=None,
                        help="When to emit colors (default: always)")
    output.add_argument("-v", "--verbose", action="count", default=0,
                        help="Log more to stderr (-v info, -vv debug)")

    return parser


def _log_level(verbose: int) -> Optional[int]:
    if verbose >= 2:
        return logging.DEBUG
    if verbose == 1:
        return logging.INFO
    return None


# ============================================================
# Entry Point
# ============================================================

def run(argv: Optional[List[str]] = None, stdin: Optional[BinaryIO] = None,
        stdout: Optional[BinaryIO] = None) -> int:
    """
    Run highlite and return the process exit code.

    Args:
        argv: Arguments without the program name; defaults to sys.argv[1:].
        stdin: Byte stream read when no file is given.
        stdout: Byte sink for highlighted output.

    Exit Codes:
        0: Success, or a follow source was interrupted
        1: The input source could not be opened
        2: Bad arguments, rules or config
        130: A static source was interrupted
    """
    load_dotenv()

    parser = build_parser()
    args = parser.parse_args(argv)

    configure_logging(_log_level(args.verbose))

    out = stdout if stdout is not None else sys.stdout.buffer

    if args.list_presets:
        for name in preset_names():
            out.write(f"{name}\n".encode("utf-8"))
        out.flush()
        return EXIT_OK

    # --- Startup: every fatal error happens before the first line ---
    try:
        rules, origin = resolve_rules(args)
        compiled = compile_rules(rules, force_ignore_case=args.ignore_case)
    except ConfigError as exc:
        print(f"{PROG}: error: {exc}", file=sys.stderr)
        return EXIT_CONFIG_ERROR

    log.info("Using %d rule(s) from %s", len(rules), origin)

    color_mode = args.color or os.environ.get("HIGHLITE_COLOR", "always")
    if color_mode not in COLOR_MODES:
        log.warning("Ignoring invalid HIGHLITE_COLOR=%r", color_mode)
        color_mode = "always"
    highlighter = LineHighlighter(compiled) if should_color(color_mode, out) else None

    poll_interval = args.poll_interval or _env_poll_interval()

    try:
        source = select_source(
            follow_journal=args.follow_journal,
            follow_file=args.follow_file,
            file=args.file,
            journal_unit=args.unit,
            initial_lines=args.lines,
            poll_interval=poll_interval,
            stdin=stdin,
        )
    except SourceSetupError as exc:
        print(f"{PROG}: error: {exc}", file=sys.stderr)
        return EXIT_SOURCE_ERROR

    # --- Main loop ---
    with source:
        if isinstance(source, StdinSource) and source.interactive:
            print(STDIN_HINT, file=sys.stderr)
        log.info("Reading from %s", source.name)
        try:
            stats = run_pipeline(source, highlighter, out)
        except KeyboardInterrupt:
            return EXIT_INTERRUPTED
        except SourceSetupError as exc:
            # The journal can fail only once journalctl has run
            print(f"{PROG}: error: {exc}", file=sys.stderr)
            return EXIT_SOURCE_ERROR

    log.debug(
        "Done: %d read, %d written, %d undecodable%s",
        stats.lines_read,
        stats.lines_written,
        stats.decode_warnings,
        " (interrupted)" if stats.interrupted else "",
    )

    if stats.broken_pipe and stdout is None:
        # The reader went away; point stdout at /dev/null so the
        # interpreter's own flush at exit doesn't fail again
        devnull = os.open(os.devnull, os.O_WRONLY)
        os.dup2(devnull, sys.stdout.fileno())

    return EXIT_OK


def _raise_interrupt(signum, frame):
    raise KeyboardInterrupt


def main() -> None:
    """
    Main entry point for the highlite command.

    SIGTERM is handled like Ctrl+C, so a follow session stopped by a
    service manager still flushes its output and closes its input.
    """
    signal.signal(signal.SIGTERM, _raise_interrupt)
    sys.exit(run())


# Standard Python idiom: only run main() if this file is executed directly
if __name__ == "__main__":
    main()
