"""releasenotary CLI — Typer-based command-line interface.

All output uses Rich for colored terminal display.
"""
