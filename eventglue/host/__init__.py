"""Hosts that load handler modules and dispatch to their exports."""

from eventglue.host.loader import GlueLoader, load_exports, load_handler_module

__all__ = ["GlueLoader", "load_exports", "load_handler_module"]
