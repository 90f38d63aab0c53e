"""Data models for eventglue."""

from eventglue.models.handler import EXPORT_NAMES, HandlerConfig, HandlerKind

__all__ = ["EXPORT_NAMES", "HandlerConfig", "HandlerKind"]
