"""
Exceptions and structured run reports for the migration.

Conversion problems caused by the source HTML are never raised; they are
recorded as :class:`~wa_migration.models.ConversionWarning` entries.  The
exceptions below are reserved for contract violations by the caller, such as
asking the block registry for a type it does not know or moving a published
page back into review.

The :func:`report_error` and :func:`report_ok` helpers append JSON Lines
entries under ``reports/migration`` (or the directory passed in) so a run can
be reviewed afterwards.  The ``EVENTS`` dictionary maps event codes to human
readable messages; codes not present fall back to the code itself.
"""

from __future__ import annotations

import json
import os
from typing import Any, Dict, Optional


class MigrationError(Exception):
    """Base class for migration contract violations."""


class UnknownBlockTypeError(MigrationError):
    def __init__(self, block_type: str) -> None:
        super().__init__(f"Unknown block type: {block_type}")
        self.block_type = block_type


class InvalidStatusTransitionError(MigrationError):
    def __init__(self, current: str, target: str) -> None:
        super().__init__(f"Cannot move page from '{current}' to '{target}'")
        self.current = current
        self.target = target


class PageNotFoundError(MigrationError):
    def __init__(self, page_id: str) -> None:
        super().__init__(f"Page not found in project: {page_id}")
        self.page_id = page_id


class ProjectSchemaError(MigrationError):
    """Raised when a saved project cannot be brought to the current schema."""


EVENTS: Dict[str, str] = {
    "PAGE_CONVERTED": "Page converted to blocks",
    "PAGE_CONVERSION_FAILED": "Page could not be converted",
    "THEME_EXTRACTED": "Theme extracted from crawl",
    "THEME_FAILED": "Theme extraction failed",
    "PROJECT_SAVED": "Migration project saved",
}

_REPORT_DIR = os.path.join("reports", "migration")


def _write_jsonl(path: str, data: Dict[str, Any]) -> None:
    """Append ``data`` as a JSON object followed by a newline to ``path``."""
    os.makedirs(os.path.dirname(path) or ".", exist_ok=True)
    with open(path, "a", encoding="utf-8") as f:
        json.dump(data, f, ensure_ascii=False)
        f.write("\n")


def _entry(code: str, page: Dict[str, Any]) -> Dict[str, Any]:
    return {
        "code": code,
        "message": EVENTS.get(code, code),
        "url": page.get("url"),
        "title": page.get("title"),
    }


def report_error(
    code: str,
    page: Dict[str, Any],
    exc: Optional[BaseException] = None,
    *,
    report_dir: str = _REPORT_DIR,
) -> Dict[str, Any]:
    """Log an error event for ``page``.

    Parameters
    ----------
    code:
        A key identifying the type of error.  If ``code`` is present in
        :data:`EVENTS` its value will be used as the message.
    page:
        Dictionary describing the page.  Only ``url`` and ``title`` are read.
    exc:
        Optional exception that triggered the error; its string form is
        included in the entry.
    report_dir:
        Directory holding ``errors.jsonl``.
    """
    entry = _entry(code, page)
    if exc is not None:
        entry["error"] = str(exc)
    print(f"[ERROR] {entry['message']} - {page.get('url', '')}")
    _write_jsonl(os.path.join(report_dir, "errors.jsonl"), entry)
    return entry


def report_ok(
    code: str,
    page: Dict[str, Any],
    extra: Optional[Dict[str, Any]] = None,
    *,
    report_dir: str = _REPORT_DIR,
) -> Dict[str, Any]:
    """Log a successful event for ``page``; ``extra`` is merged into the entry."""
    entry = _entry(code, page)
    if extra:
        entry.update(extra)
    print(f"[OK] {entry['message']} - {page.get('url', '')}")
    _write_jsonl(os.path.join(report_dir, "success.jsonl"), entry)
    return entry
