"""
Migration readiness summary for a crawl report.

Runs the converter and the script analyzer over every crawled page and
counts what the migration would do with the content: convert it (auto),
drop it (remove), hand it to a reviewer (manual) or flag it because nobody
could tell what it is (unknown).  The counters can be written as
``(key, count)`` CSV files for spreadsheets.
"""

from __future__ import annotations

import csv
import re
from collections import Counter
from pathlib import Path
from typing import Any, Dict, List, Mapping, Tuple, Union
from urllib.parse import urlparse

from wa_migration.models import CrawlReport
from wa_migration.parsers.html_to_blocks import convert_crawled_page, convert_html_snippet, detect_wa_widget
from wa_migration.parsers.script_analyzer import analyze_scripts_in_html

TOP_ISSUES = 10

_GADGET_RE = re.compile(r"WaGadget(\w+)")

# Checked in order; the first matching category wins.
_UNHANDLED_CATEGORIES: Tuple[Tuple[str, re.Pattern], ...] = tuple(
    (name, re.compile(pattern, re.IGNORECASE))
    for name, pattern in (
        ("navigation-menu", r"menuBackground|menuHorizontal|menuItem"),
        ("login-widget", r"loginContainer|loginLink|loginPanel"),
        ("search-widget", r"searchBox|searchField|generalSearchBox"),
        ("mobile-panel", r"mobilePanel|mobilePanelButton"),
        ("photo-album", r"photoAlbum|albumThumbnail|photoGallery"),
        ("event-list", r"eventList|upcomingEvents|eventCalendar|eventItem"),
        ("member-directory", r"memberDirectory|memberList|memberProfile"),
        ("blog-post", r"blogPost|newsItem|articleList"),
        ("donation-form", r"donationForm|paymentForm|contribution"),
        ("forum", r"forumThread|discussionPost|messageBoard"),
        ("document-list", r"fileList|documentLibrary|downloadList"),
        ("sidebar-widget", r"sidebarWidget|widgetArea"),
        ("footer", r"footerContent|copyrightText|footerLinks"),
        ("logo-header", r"<img[^>]*logo|headerLogo|siteLogo"),
    )
)


def categorize_unhandled(html: str) -> str:
    """Name the kind of content a region holds when no block pattern took it."""
    html = html or ""
    for name, pattern in _UNHANDLED_CATEGORIES:
        if pattern.search(html):
            return name

    trimmed = html.strip()
    images = len(re.findall(r"<img[^>]*>", html, re.IGNORECASE))
    if images == 1:
        return "single-image"
    if re.match(r"^<p[^>]*>[\s\S]*</p>$", trimmed, re.IGNORECASE) and len(html) < 500:
        return "simple-paragraph"
    if re.match(r"^<(h[1-6])[^>]*>[\s\S]*</\1>$", trimmed, re.IGNORECASE):
        return "simple-heading"
    if len(re.findall(r"<a ", html, re.IGNORECASE)) >= 3:
        return "link-list"
    if re.search(r"<font|style\s*=", html, re.IGNORECASE):
        return "styled-content"
    if re.search(r"<table", html, re.IGNORECASE):
        return "data-table"
    if re.search(r"<[uo]l", html, re.IGNORECASE):
        return "list-content"
    if len(re.sub(r"<[^>]+>", "", html).strip()) < 10:
        return "empty-spacer"
    return "other-content"


def _host(url: str) -> str:
    try:
        return urlparse(url).hostname or ""
    except ValueError:
        return ""


def _is_unhandled(html: str) -> bool:
    result = convert_html_snippet(html)
    if not result.blocks:
        return True
    return all(block.type == "html" for block in result.blocks)


def summarize_crawl_report(report: Union[CrawlReport, Mapping[str, Any]]) -> Dict[str, Any]:
    """Convert every page of ``report`` and tally the outcome.

    The result holds plain ``Counter`` objects under ``blockTypes``,
    ``warningTypes``, ``widgetTypes``, ``scriptPurposes``, ``unhandled`` and
    ``externalDomains``, the per-action totals under ``actions`` and the most
    frequent problems under ``topIssues``.
    """
    if not isinstance(report, CrawlReport):
        report = CrawlReport.model_validate(report)

    actions: Counter = Counter(auto=0, remove=0, manual=0, unknown=0)
    block_types: Counter = Counter()
    warning_types: Counter = Counter()
    widget_types: Counter = Counter()
    script_purposes: Counter = Counter()
    unhandled: Counter = Counter()
    external_domains: Counter = Counter()
    total_blocks = 0

    for page in report.pages:
        result = convert_crawled_page(page)
        total_blocks += len(result.blocks)
        for block in result.blocks:
            block_types[block.type] += 1
            if block.type != "html":
                actions["auto"] += 1
        for warning in result.warnings:
            warning_types[warning.type] += 1
            if warning.type == "complex_html":
                actions["manual"] += 1
        for image in page.images:
            host = _host(image.src) if image.is_external else None
            if host:
                external_domains[host] += 1

        for unit in page.custom_html:
            gadget = _GADGET_RE.search(unit.location)
            if gadget:
                widget_types[gadget.group(1)] += 1

            for analysis in analyze_scripts_in_html(unit.html_snippet):
                script_purposes[analysis.purpose] += 1
                kind = analysis.replacement.type if analysis.replacement else "manual"
                if analysis.purpose == "unknown":
                    actions["unknown"] += 1
                elif kind == "block":
                    actions["auto"] += 1
                elif kind in ("remove", "built-in"):
                    actions["remove"] += 1
                else:
                    actions["manual"] += 1

            wa_type, _target = detect_wa_widget(unit.location)
            if wa_type is None and _is_unhandled(unit.html_snippet):
                unhandled[categorize_unhandled(unit.html_snippet)] += 1

    issues: Counter = Counter()
    for name, count in warning_types.items():
        issues[f"warning:{name}"] = count
    for name, count in unhandled.items():
        issues[f"unhandled:{name}"] = count
    for name, count in script_purposes.items():
        issues[f"script:{name}"] = count

    return {
        "pages": len(report.pages),
        "totalBlocks": total_blocks,
        "actions": dict(actions),
        "blockTypes": block_types,
        "warningTypes": warning_types,
        "widgetTypes": widget_types,
        "scriptPurposes": script_purposes,
        "unhandled": unhandled,
        "externalDomains": external_domains,
        "topIssues": _ranked(issues)[:TOP_ISSUES],
    }


def _ranked(counter: Counter) -> List[Tuple[str, int]]:
    return sorted(counter.items(), key=lambda x: (-x[1], x[0]))


def write_counts_csv(counter: Counter, out_path: Union[str, Path], key_header: str = "key") -> None:
    out_path = Path(out_path)
    out_path.parent.mkdir(parents=True, exist_ok=True)
    with out_path.open("w", encoding="utf-8", newline="") as f:
        writer = csv.writer(f)
        writer.writerow([key_header, "count"])
        for key, count in _ranked(counter):
            writer.writerow([key, count])
