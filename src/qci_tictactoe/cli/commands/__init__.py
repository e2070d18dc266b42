"""QCI CLI commands."""
