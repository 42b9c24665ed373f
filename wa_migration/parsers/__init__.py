"""
Parsers and converters used by the migration pipeline.

This subpackage exposes the HTML → block converter entry points from
:mod:`wa_migration.parsers.html_to_blocks` and the script classifier from
:mod:`wa_migration.parsers.script_analyzer`.
"""

from .html_to_blocks import convert_crawled_page, convert_custom_html_blocks, convert_html_snippet
from .script_analyzer import analyze_script, analyze_scripts_in_html

__all__ = [
    "analyze_script",
    "analyze_scripts_in_html",
    "convert_crawled_page",
    "convert_custom_html_blocks",
    "convert_html_snippet",
]
