"""
Utility helpers used by the migration tool.

This subpackage exposes convenience functions for structured logging.
Crawl readiness summaries live in :mod:`wa_migration.utils.readiness`.
"""

from .errors import EVENTS, report_error, report_ok

__all__ = ["EVENTS", "report_error", "report_ok"]
