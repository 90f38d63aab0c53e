"""Command-line tools for eventglue."""
