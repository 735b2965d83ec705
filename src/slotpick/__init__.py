"""
Command-line entry point for the availability matching engine.
"""

from .cli import app


def main() -> None:
    # Delegate to Typer app so `slotpick ...` works.
    app()
