"""
highlite - a configurable highlighting filter for terminal output.

highlite reads text line by line from stdin, a file, a growing log file
or the systemd journal, and colors keywords and regular expressions
according to a set of rules.

Package Structure:
    - cli.py: command-line interface and entry point
    - pipeline.py: the read-highlight-write loop
    - rules.py: Rule and color definitions
    - config.py: YAML rule files with recursive includes
    - highlight/: rule compilation and line rendering
    - source/: stdin, file, followed file and journal line sources
    - preset/: built-in rule sets
    - utils/: config paths and diagnostic logging

Usage:
    Run as a module: python -m highlite [options]

Example:
    tail -f app.log | python -m highlite --preset logs
"""

__version__ = "0.3.0"
