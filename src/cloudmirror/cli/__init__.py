"""Command-line interface for cloudmirror."""
