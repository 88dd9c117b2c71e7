"""
Utility modules for highlite.

Modules:
    - paths: where user configuration lives
    - log: stderr diagnostic logging

Purpose:
    These utilities are separated from the CLI to:
    - Avoid circular imports
    - Keep path and logging logic centralized and testable
"""
