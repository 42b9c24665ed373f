"""
Migration projects and the page review workflow.

A project is created from a crawl report: every crawled page is converted
immediately and starts its life as ``converted``.  Reviewers then move pages
forward (``in_review`` → ``approved`` → ``published``) or drop them with
``skipped``.  All update functions return a new :class:`MigrationProject`
and leave the one passed in untouched; ``stats`` is always recomputed from
the pages.

Projects are stored as camelCase JSON carrying a ``schemaVersion``.  Older
documents are upgraded on load by the step functions in ``_MIGRATIONS``.
"""

from __future__ import annotations

import json
import uuid
from datetime import datetime, timezone
from typing import Any, Callable, Dict, List, Mapping, Optional, Union
from urllib.parse import urlparse

from wa_migration.models import (
    PROJECT_SCHEMA_VERSION,
    Block,
    CrawlReport,
    MigrationPage,
    MigrationProject,
    MigrationStats,
    PageContent,
    SourceData,
)
from wa_migration.models.project import MigrationPageStatus
from wa_migration.parsers.html_to_blocks import clean_title, convert_crawled_page
from wa_migration.utils.errors import (
    InvalidStatusTransitionError,
    PageNotFoundError,
    ProjectSchemaError,
)

__all__ = [
    "advance_page",
    "approve_page",
    "assemble_project",
    "calculate_stats",
    "clean_title",
    "create_migration_page",
    "create_project_from_crawl_report",
    "deserialize_project",
    "extract_site_name",
    "get_navigation_info",
    "get_next_status",
    "get_status_info",
    "serialize_project",
    "skip_page",
    "update_page_blocks",
    "update_page_status",
]

STATUS_RANK: Dict[str, int] = {
    "pending": 0,
    "converted": 1,
    "in_review": 2,
    "approved": 3,
    "published": 4,
}

_NEXT_STATUS: Dict[str, Optional[str]] = {
    "pending": "converted",
    "converted": "in_review",
    "in_review": "approved",
    "approved": "published",
    "published": None,
    "skipped": None,
}

_STATUS_INFO: Dict[str, Dict[str, str]] = {
    "pending": {"label": "Pending", "color": "gray", "icon": "clock"},
    "converted": {"label": "Converted", "color": "blue", "icon": "refresh"},
    "in_review": {"label": "In Review", "color": "yellow", "icon": "eye"},
    "approved": {"label": "Approved", "color": "green", "icon": "check"},
    "published": {"label": "Published", "color": "purple", "icon": "globe"},
    "skipped": {"label": "Skipped", "color": "gray", "icon": "skip"},
}

_STAT_FIELD = {
    "pending": "pending",
    "converted": "converted",
    "in_review": "in_review",
    "approved": "approved",
    "published": "published",
    "skipped": "skipped",
}

_COMPLETED = ("approved", "published", "skipped")


def _now() -> str:
    return datetime.now(timezone.utc).isoformat()


###############################################################################
# Creation
###############################################################################

def extract_site_name(url: str) -> str:
    """Turn ``https://www.my-club.wildapricot.org`` into ``My-club``."""
    try:
        host = urlparse(url or "").hostname or ""
    except ValueError:
        host = ""
    if not host:
        return "Migration Project"
    host = host[4:] if host.startswith("www.") else host
    for suffix in (".wildapricot.org", ".wildapricot.com", ".org", ".com", ".net"):
        if host.endswith(suffix):
            host = host[: -len(suffix)]
            break
    return " ".join(part[:1].upper() + part[1:] for part in host.split(".") if part) or "Migration Project"


def create_migration_page(page: Union[PageContent, Mapping[str, Any]], order: int) -> MigrationPage:
    """Convert one crawled page eagerly; the result starts as ``converted``."""
    if not isinstance(page, PageContent):
        page = PageContent.model_validate(page)
    result = convert_crawled_page(page)
    return MigrationPage(
        id=str(uuid.uuid4()),
        sourceUrl=page.url,
        title=clean_title(page.title),
        status="converted",
        order=order,
        sourceData=SourceData(
            customHtmlCount=len(page.custom_html),
            imageCount=len(page.images),
            embedCount=len(page.embeds),
            hasScripts=any(unit.contains_script for unit in page.custom_html),
        ),
        convertedBlocks=result.blocks,
        warnings=result.warnings,
        widgetMappings=result.widget_mapping,
    )


def calculate_stats(pages: List[MigrationPage]) -> MigrationStats:
    counts: Dict[str, int] = {name: 0 for name in _STAT_FIELD.values()}
    blocks = warnings = widgets = 0
    for page in pages:
        counts[_STAT_FIELD[page.status]] += 1
        blocks += len(page.converted_blocks)
        warnings += len(page.warnings)
        widgets += len(page.widget_mappings)
    return MigrationStats(
        total_pages=len(pages),
        total_blocks=blocks,
        total_warnings=warnings,
        total_widgets=widgets,
        **counts,
    )


def create_project_from_crawl_report(
    report: Union[CrawlReport, Mapping[str, Any]],
    project_name: Optional[str] = None,
    *,
    crawl_report_path: Optional[str] = None,
) -> MigrationProject:
    if not isinstance(report, CrawlReport):
        report = CrawlReport.model_validate(report)
    pages = [create_migration_page(page, index) for index, page in enumerate(report.pages)]
    return assemble_project(report, pages, project_name, crawl_report_path=crawl_report_path)


def assemble_project(
    report: CrawlReport,
    pages: List[MigrationPage],
    project_name: Optional[str] = None,
    *,
    crawl_report_path: Optional[str] = None,
) -> MigrationProject:
    """Wrap already converted pages into a fresh ``ready`` project."""
    now = _now()
    return MigrationProject(
        id=str(uuid.uuid4()),
        name=project_name or extract_site_name(report.config.base_url),
        sourceUrl=report.config.base_url,
        createdAt=now,
        updatedAt=now,
        status="ready",
        crawlReportPath=crawl_report_path,
        pages=pages,
        stats=calculate_stats(pages),
    )


###############################################################################
# Status workflow
###############################################################################

def get_next_status(current: str) -> Optional[str]:
    return _NEXT_STATUS.get(current)


def get_status_info(status: str) -> Dict[str, str]:
    return dict(_STATUS_INFO[status])


def _check_transition(current: str, target: str) -> None:
    if target not in _STATUS_INFO:
        raise InvalidStatusTransitionError(current, target)
    if current == "skipped":
        allowed = target == "skipped"
    elif target == "skipped":
        allowed = current != "published"
    else:
        allowed = STATUS_RANK[target] >= STATUS_RANK[current]
    if not allowed:
        raise InvalidStatusTransitionError(current, target)


def _find_index(project: MigrationProject, page_id: str) -> int:
    for index, page in enumerate(project.pages):
        if page.id == page_id:
            return index
    raise PageNotFoundError(page_id)


def _replace_page(project: MigrationProject, index: int, page: MigrationPage, now: str) -> MigrationProject:
    pages = list(project.pages)
    pages[index] = page
    return project.model_copy(update={"pages": pages, "updated_at": now, "stats": calculate_stats(pages)})


def update_page_status(
    project: MigrationProject,
    page_id: str,
    status: MigrationPageStatus,
    reviewed_by: Optional[str] = None,
    notes: Optional[str] = None,
) -> MigrationProject:
    """Move one page to ``status``.

    Raises :class:`PageNotFoundError` for an unknown id and
    :class:`InvalidStatusTransitionError` when the move would go backwards,
    leave ``skipped``, or skip a ``published`` page.
    """
    index = _find_index(project, page_id)
    page = project.pages[index]
    _check_transition(page.status, status)

    now = _now()
    updated = page.model_copy(
        update={
            "status": status,
            "reviewed_at": now,
            "reviewed_by": reviewed_by or page.reviewed_by,
            "notes": notes or page.notes,
        }
    )
    return _replace_page(project, index, updated, now)


def approve_page(project: MigrationProject, page_id: str, reviewed_by: Optional[str] = None,
                 notes: Optional[str] = None) -> MigrationProject:
    return update_page_status(project, page_id, "approved", reviewed_by, notes)


def skip_page(project: MigrationProject, page_id: str, reviewed_by: Optional[str] = None,
              notes: Optional[str] = None) -> MigrationProject:
    return update_page_status(project, page_id, "skipped", reviewed_by, notes)


def advance_page(project: MigrationProject, page_id: str, reviewed_by: Optional[str] = None) -> MigrationProject:
    """Move a page one step along the review chain; terminal pages are left as they are."""
    page = project.pages[_find_index(project, page_id)]
    target = get_next_status(page.status)
    if target is None:
        return project
    return update_page_status(project, page_id, target, reviewed_by)


def update_page_blocks(project: MigrationProject, page_id: str, blocks: List[Block]) -> MigrationProject:
    """Replace a page's blocks after manual editing; a ``converted`` page goes to review."""
    index = _find_index(project, page_id)
    page = project.pages[index]
    updated = page.model_copy(
        update={
            "converted_blocks": list(blocks),
            "status": "in_review" if page.status == "converted" else page.status,
        }
    )
    return _replace_page(project, index, updated, _now())


def get_navigation_info(project: MigrationProject, current_page_id: str) -> Dict[str, Any]:
    pages = project.pages
    current = next((i for i, page in enumerate(pages) if page.id == current_page_id), -1)
    completed = sum(1 for page in pages if page.status in _COMPLETED)
    total = len(pages)
    return {
        "currentIndex": current,
        "totalPages": total,
        "previousPage": pages[current - 1] if current > 0 else None,
        "nextPage": pages[current + 1] if 0 <= current < total - 1 else None,
        "progress": {
            "completed": completed,
            "total": total,
            "percentage": round(completed / total * 100) if total else 0,
        },
    }


###############################################################################
# Serialization
###############################################################################

def _migrate_v0_to_v1(doc: Dict[str, Any]) -> Dict[str, Any]:
    pages = []
    for order, page in enumerate(doc.get("pages") or []):
        page = dict(page)
        page.setdefault("order", order)
        page.setdefault("sourceData", {})
        pages.append(page)
    doc["pages"] = pages
    # stats from pre-versioned files are not trusted
    doc.pop("stats", None)
    doc["schemaVersion"] = 1
    return doc


# version found in the document -> step that upgrades it by one
_MIGRATIONS: Dict[int, Callable[[Dict[str, Any]], Dict[str, Any]]] = {
    0: _migrate_v0_to_v1,
}


def serialize_project(project: MigrationProject) -> str:
    return json.dumps(project.model_dump(mode="json", by_alias=True, exclude_none=True), indent=2, ensure_ascii=False)


def deserialize_project(raw: Union[str, bytes, Mapping[str, Any]]) -> MigrationProject:
    """Load a stored project, upgrading older schema versions.

    ``stats`` is recomputed from the pages so a hand-edited file cannot carry
    counts that disagree with its content.
    """
    doc = dict(raw) if isinstance(raw, Mapping) else json.loads(raw)
    version = doc.get("schemaVersion", 0)
    if not isinstance(version, int) or version < 0:
        raise ProjectSchemaError(f"Invalid schemaVersion: {version!r}")
    if version > PROJECT_SCHEMA_VERSION:
        raise ProjectSchemaError(
            f"Project schema version {version} is newer than supported version {PROJECT_SCHEMA_VERSION}"
        )
    while version < PROJECT_SCHEMA_VERSION:
        doc = _MIGRATIONS[version](doc)
        version = doc["schemaVersion"]

    project = MigrationProject.model_validate(doc)
    return project.model_copy(update={"stats": calculate_stats(project.pages)})
