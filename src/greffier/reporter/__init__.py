"""Logging for Greffier components."""

from greffier.reporter.system_reporter import SystemReporter, resolve_level

__all__ = ["SystemReporter", "resolve_level"]
