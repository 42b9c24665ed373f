"""
High-level orchestration of the Wild Apricot → block migration.

This module defines a :class:`MigrationTool` class that ties together the
converter, the theme extractor and the project layer into a complete run:
load a crawl report, convert every page into blocks, extract the site theme
and save a reviewable migration project as JSON.

Configuration is supplied via a JSON file path or directly as a dictionary.
Settings live under the ``migration`` key (crawl report path, output path,
report directory, page limit, dry-run and theme extraction).
"""

from __future__ import annotations

import json
import os
import uuid
from typing import Any, Dict, List, Optional

from wa_migration.extractors.theme_extractor import extract_theme_from_crawl, get_theme_summary
from wa_migration.models import CrawlReport, MigrationPage, MigrationProject, PageContent
from wa_migration.project import (
    assemble_project,
    clean_title,
    create_migration_page,
    serialize_project,
)
from wa_migration.utils.errors import report_error, report_ok

DEFAULT_CONFIG_FILE = os.path.join("config", "migration_config.json")


class MigrationTool:
    """
    Holds the configuration of one migration run and drives it.  Every
    page is converted on its own: a page that fails is reported through
    :mod:`wa_migration.utils.errors` and stays ``pending`` while the rest
    of the site carries on.
    """

    def __init__(self, config: Optional[Dict[str, Any]] = None, *, config_file: Optional[str] = None) -> None:
        if config_file and os.path.exists(config_file):
            with open(config_file, "r", encoding="utf-8") as f:
                config = json.load(f)
        elif config is None:
            config = {}

        config.setdefault("migration", {})
        migration = config["migration"]
        migration.setdefault("crawl_report", os.getenv("WA_CRAWL_REPORT", ""))
        migration.setdefault("project_name", None)
        migration.setdefault("output_path", os.path.join("reports", "migration", "project.json"))
        migration.setdefault("report_dir", os.path.join("reports", "migration"))
        migration.setdefault("limit", None)
        migration.setdefault("dry_run", False)
        migration.setdefault("extract_theme", True)

        self.config = config

    @property
    def report_dir(self) -> str:
        return self.config["migration"]["report_dir"]

    def log_message(self, message: str, level: str = "INFO") -> None:
        print(f"[{level}] {message}")
        os.makedirs(self.report_dir, exist_ok=True)
        with open(os.path.join(self.report_dir, "migration.log"), "a", encoding="utf-8") as f:
            f.write(f"{level}: {message}\n")

    def load_crawl_report(self, path: Optional[str] = None) -> CrawlReport:
        path = path or self.config["migration"]["crawl_report"]
        if not path or not os.path.exists(path):
            raise FileNotFoundError(f"Crawl report not found: {path!r}")
        self.log_message(f"Loading crawl report {path}")
        with open(path, "r", encoding="utf-8") as f:
            return CrawlReport.model_validate(json.load(f))

    def convert_pages(self, pages: List[PageContent]) -> List[MigrationPage]:
        limit: Optional[int] = self.config["migration"].get("limit")
        converted: List[MigrationPage] = []

        for order, page in enumerate(pages):
            if limit is not None and order >= limit:
                break
            info = {"url": page.url, "title": page.title}
            self.log_message(f"Converting page '{page.url}'")
            try:
                migration_page = create_migration_page(page, order)
            except Exception as e:
                report_error("PAGE_CONVERSION_FAILED", info, e, report_dir=self.report_dir)
                self.log_message(f"Failed to convert page '{page.url}': {e}", "ERROR")
                migration_page = MigrationPage(
                    id=str(uuid.uuid4()),
                    sourceUrl=page.url,
                    title=clean_title(page.title),
                    status="pending",
                    order=order,
                )
            else:
                report_ok(
                    "PAGE_CONVERTED",
                    info,
                    {
                        "blocks": len(migration_page.converted_blocks),
                        "warnings": len(migration_page.warnings),
                        "widgets": len(migration_page.widget_mappings),
                    },
                    report_dir=self.report_dir,
                )
            converted.append(migration_page)
        return converted

    def build_project(self, report: CrawlReport, *, crawl_report_path: Optional[str] = None) -> MigrationProject:
        pages = self.convert_pages(report.pages)
        project = assemble_project(
            report,
            pages,
            self.config["migration"].get("project_name"),
            crawl_report_path=crawl_report_path,
        )

        if self.config["migration"].get("extract_theme", True):
            site = {"url": report.config.base_url, "title": project.name}
            try:
                theme = extract_theme_from_crawl(report)
            except Exception as e:
                report_error("THEME_FAILED", site, e, report_dir=self.report_dir)
                self.log_message(f"Theme extraction failed: {e}", "ERROR")
            else:
                project = project.model_copy(update={"theme": theme})
                report_ok("THEME_EXTRACTED", site, {"confidence": theme.confidence}, report_dir=self.report_dir)
                self.log_message(f"Theme: {get_theme_summary(theme)}")
        return project

    def save_project(self, project: MigrationProject, path: Optional[str] = None) -> Optional[str]:
        path = path or self.config["migration"]["output_path"]
        if self.config["migration"].get("dry_run"):
            self.log_message(f"Dry-run: would save project to {path}")
            return None
        os.makedirs(os.path.dirname(path) or ".", exist_ok=True)
        with open(path, "w", encoding="utf-8") as f:
            f.write(serialize_project(project))
        report_ok(
            "PROJECT_SAVED",
            {"url": project.source_url, "title": project.name},
            {"path": path},
            report_dir=self.report_dir,
        )
        return path

    def run(self, crawl_report: Optional[str] = None) -> MigrationProject:
        path = crawl_report or self.config["migration"]["crawl_report"]
        report = self.load_crawl_report(path)
        project = self.build_project(report, crawl_report_path=path)
        stats = project.stats
        self.log_message(
            f"Converted {stats.converted}/{stats.total_pages} pages "
            f"({stats.total_blocks} blocks, {stats.total_warnings} warnings, {stats.total_widgets} widgets)"
        )
        self.save_project(project)
        return project
