"""Logging setup for eventglue."""
