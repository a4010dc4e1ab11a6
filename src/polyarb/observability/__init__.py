"""Logging setup."""

from polyarb.observability.logging import bind_scan_context, setup_logging

__all__ = ["bind_scan_context", "setup_logging"]
