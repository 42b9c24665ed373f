"""
Pydantic records shared by the converter, the extractors and the project
layer.  Every model accepts both the snake_case attribute names and the
camelCase keys used in crawl reports and saved projects.
"""

from .analysis import ScriptAnalysis, ScriptReplacement
from .blocks import Block, ConversionResult, ConversionStats, ConversionWarning, WidgetMapping
from .crawl import CrawlReport, CustomHtmlBlock, EmbedInfo, ImageInfo, PageContent
from .project import (
    PROJECT_SCHEMA_VERSION,
    MigrationPage,
    MigrationProject,
    MigrationStats,
    SourceData,
)
from .theme import ButtonStyleInfo, ColorFrequency, ExtractedTheme, FontFrequency
from .widgets import ExtractedWidgetConfig

__all__ = [
    "Block",
    "ButtonStyleInfo",
    "ColorFrequency",
    "ConversionResult",
    "ConversionStats",
    "ConversionWarning",
    "CrawlReport",
    "CustomHtmlBlock",
    "EmbedInfo",
    "ExtractedTheme",
    "ExtractedWidgetConfig",
    "FontFrequency",
    "ImageInfo",
    "MigrationPage",
    "MigrationProject",
    "MigrationStats",
    "PROJECT_SCHEMA_VERSION",
    "PageContent",
    "ScriptAnalysis",
    "ScriptReplacement",
    "SourceData",
    "WidgetMapping",
]
