"""Command-line entrypoint, composition root and chat commands."""
