from __future__ import annotations

from typing import List, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field

from .blocks import Block, ConversionWarning, WidgetMapping
from .theme import ExtractedTheme


MigrationPageStatus = Literal[
    "pending",  # not yet converted
    "converted",  # auto-converted, needs review
    "in_review",
    "approved",
    "published",  # on the target site
    "skipped",  # intentionally left out
]

MigrationProjectStatus = Literal["crawling", "ready", "in_progress", "completed", "archived"]

PROJECT_SCHEMA_VERSION = 1


class SourceData(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    custom_html_count: int = Field(0, alias="customHtmlCount")
    image_count: int = Field(0, alias="imageCount")
    embed_count: int = Field(0, alias="embedCount")
    has_scripts: bool = Field(False, alias="hasScripts")


class MigrationPage(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    id: str
    source_url: str = Field(..., alias="sourceUrl")
    title: str = ""
    status: MigrationPageStatus = "pending"
    order: int = 0
    source_data: SourceData = Field(default_factory=SourceData, alias="sourceData")

    converted_blocks: List[Block] = Field(default_factory=list, alias="convertedBlocks")
    warnings: List[ConversionWarning] = Field(default_factory=list)
    widget_mappings: List[WidgetMapping] = Field(default_factory=list, alias="widgetMappings")

    reviewed_at: Optional[str] = Field(None, alias="reviewedAt")
    reviewed_by: Optional[str] = Field(None, alias="reviewedBy")
    notes: Optional[str] = None

    target_page_id: Optional[str] = Field(None, alias="targetPageId")
    target_slug: Optional[str] = Field(None, alias="targetSlug")


class MigrationStats(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    total_pages: int = Field(0, alias="totalPages")
    pending: int = 0
    converted: int = 0
    in_review: int = Field(0, alias="inReview")
    approved: int = 0
    published: int = 0
    skipped: int = 0

    total_blocks: int = Field(0, alias="totalBlocks")
    total_warnings: int = Field(0, alias="totalWarnings")
    total_widgets: int = Field(0, alias="totalWidgets")


class MigrationProject(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    schema_version: int = Field(PROJECT_SCHEMA_VERSION, alias="schemaVersion")
    id: str
    name: str
    source_url: str = Field("", alias="sourceUrl")
    created_at: str = Field(..., alias="createdAt")
    updated_at: str = Field(..., alias="updatedAt")
    status: MigrationProjectStatus = "ready"
    crawl_report_path: Optional[str] = Field(None, alias="crawlReportPath")
    pages: List[MigrationPage] = Field(default_factory=list)
    stats: MigrationStats = Field(default_factory=MigrationStats)
    theme: Optional[ExtractedTheme] = None
