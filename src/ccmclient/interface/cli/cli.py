"""
CLI main entry point.

Delegates to the typer app in the orchestrator.
"""


def main() -> None:
    """Main entry point for the ccmclient CLI; typer sets the exit code."""
    # Import here to avoid circular imports
    from .orchestrator import app
    app()
