"""
Site-wide style profile built from crawled custom HTML.

Legacy pages carry their brand identity as inline ``color=``/``face=``
attributes and inline CSS.  Counting those across the whole crawl gives a
primary/accent colour, heading/body fonts and the vendor button styles in
use, which can then be applied once as theme tokens instead of being copied
into each block.
"""

from __future__ import annotations

import math
import re
from collections import Counter
from typing import Dict, Iterable, List, Optional, Set, Tuple

from wa_migration.models import CrawlReport, ExtractedTheme
from wa_migration.models.theme import ButtonStyleInfo, ColorFrequency, FontFrequency

__all__ = [
    "color_similarity",
    "extract_theme_from_crawl",
    "get_theme_summary",
    "is_neutral_color",
    "matches_theme_color",
    "modernize_font",
    "normalize_color",
    "normalize_font",
]

_NAMED_COLORS: Dict[str, str] = {
    "white": "#ffffff",
    "black": "#000000",
    "red": "#ff0000",
    "green": "#008000",
    "blue": "#0000ff",
    "yellow": "#ffff00",
    "gray": "#808080",
    "grey": "#808080",
}

_FONT_MAP: Dict[str, str] = {
    "verdana": "system-ui",
    "arial": "system-ui",
    "helvetica": "system-ui",
    "times new roman": "Georgia",
    "georgia": "Georgia",
    "courier new": "ui-monospace",
    "tahoma": "system-ui",
    "trebuchet ms": "system-ui",
}

# sqrt(3 * 255^2)
_MAX_RGB_DISTANCE = 441.0

_HEX6_RE = re.compile(r"^#[0-9a-f]{6}$", re.IGNORECASE)
_HEX3_RE = re.compile(r"^#[0-9a-f]{3}$", re.IGNORECASE)
_RGB_RE = re.compile(r"rgb\s*\(\s*(\d+)\s*,\s*(\d+)\s*,\s*(\d+)\s*\)", re.IGNORECASE)

_COLOR_ATTR_RE = re.compile(r"color\s*=\s*[\"']([^\"']+)[\"']", re.IGNORECASE)
_CSS_COLOR_RE = re.compile(r"(?:^|;|\s|\")color\s*:\s*([^;}\"']+)", re.IGNORECASE)
_CSS_BACKGROUND_RE = re.compile(r"background(?:-color)?\s*:\s*([^;}\"']+)", re.IGNORECASE)
_FACE_ATTR_RE = re.compile(r"face\s*=\s*[\"']([^\"']+)[\"']", re.IGNORECASE)
_FONT_FAMILY_RE = re.compile(r"font-family\s*:\s*([^;}\"]+)", re.IGNORECASE)
_HEADING_NEAR_FACE_RE = re.compile(r"<h[1-6][^>]*>.*?face\s*=\s*[\"'][^\"']*[\"']", re.IGNORECASE | re.DOTALL)
_BUTTON_RE = re.compile(r"stylizedButton\s+(buttonStyle\d+)", re.IGNORECASE)


def normalize_color(color: str) -> Optional[str]:
    """Return ``color`` as 6-digit lowercase hex, or ``None`` if unrecognised."""
    value = (color or "").replace("!important", "").strip()
    if _HEX6_RE.match(value):
        return value.lower()
    if _HEX3_RE.match(value):
        r, g, b = value[1], value[2], value[3]
        return f"#{r}{r}{g}{g}{b}{b}".lower()
    rgb = _RGB_RE.search(value)
    if rgb:
        channels = [min(255, int(c)) for c in rgb.groups()]
        return "#" + "".join(f"{c:02x}" for c in channels)
    return _NAMED_COLORS.get(value.lower())


def _rgb(hex_color: str) -> Tuple[int, int, int]:
    return int(hex_color[1:3], 16), int(hex_color[3:5], 16), int(hex_color[5:7], 16)


def is_neutral_color(hex_color: str) -> bool:
    """Near white, near black, or a low-saturation gray."""
    r, g, b = _rgb(hex_color)
    if r > 240 and g > 240 and b > 240:
        return True
    if r < 15 and g < 15 and b < 15:
        return True
    return max(r, g, b) - min(r, g, b) < 20


def color_similarity(hex1: str, hex2: str) -> float:
    """1 minus the normalised Euclidean RGB distance (1.0 = identical)."""
    return 1 - math.dist(_rgb(hex1), _rgb(hex2)) / _MAX_RGB_DISTANCE


def normalize_font(font: str) -> str:
    """First family in a font stack, unquoted and lowercased."""
    return (font or "").replace('"', "").replace("'", "").strip().lower().split(",")[0].strip()


def modernize_font(font: str) -> str:
    return _FONT_MAP.get(font, font)


class _Tally:
    """Occurrence count plus the set of contexts a value was seen in."""

    def __init__(self) -> None:
        self.counts: Counter = Counter()
        self.contexts: Dict[str, Set[str]] = {}

    def add(self, key: str, context: str) -> None:
        self.counts[key] += 1
        self.contexts.setdefault(key, set()).add(context)

    def ranked(self) -> List[Tuple[str, int, List[str]]]:
        # stable on first-seen order for equal counts
        return [(key, count, sorted(self.contexts[key])) for key, count in self.counts.most_common()]


def _scan_colors(html: str, tally: _Tally) -> None:
    for match in _COLOR_ATTR_RE.finditer(html):
        normalized = normalize_color(match.group(1))
        if normalized:
            tally.add(normalized, "text")
    for match in _CSS_COLOR_RE.finditer(html):
        normalized = normalize_color(match.group(1))
        if normalized:
            tally.add(normalized, "text")
    for match in _CSS_BACKGROUND_RE.finditer(html):
        normalized = normalize_color(match.group(1))
        if normalized:
            tally.add(normalized, "background")


def _scan_fonts(html: str, tally: _Tally) -> None:
    for match in _FACE_ATTR_RE.finditer(html):
        normalized = normalize_font(match.group(1))
        if not normalized:
            continue
        window = html[max(0, match.start() - 50): match.start() + 100]
        tally.add(normalized, "heading" if _HEADING_NEAR_FACE_RE.search(window) else "body")
    for match in _FONT_FAMILY_RE.finditer(html):
        normalized = normalize_font(match.group(1))
        if normalized:
            tally.add(normalized, "body")


def _scan_buttons(html: str, counts: Counter) -> None:
    for match in _BUTTON_RE.finditer(html):
        counts[match.group(1).lower()] += 1


def _suggest_button_variant(count: int, max_count: int) -> str:
    if count == max_count:
        return "primary"
    if count > max_count / 2:
        return "secondary"
    return "outline"


def _confidence(brand_colors: List[ColorFrequency], fonts: List[FontFrequency], page_count: int) -> float:
    score = 0.5
    if brand_colors and brand_colors[0].count > page_count * 2:
        score += 0.2
    if fonts and fonts[0].count > page_count:
        score += 0.15
    if page_count >= 10:
        score += 0.15
    return min(score, 1.0)


def _iter_snippets(report: CrawlReport) -> Iterable[str]:
    for page in report.pages:
        for block in page.custom_html:
            yield block.html_snippet or ""


def extract_theme_from_crawl(report: CrawlReport) -> ExtractedTheme:
    """Aggregate colours, fonts and button styles over every page of ``report``."""
    color_tally = _Tally()
    font_tally = _Tally()
    button_counts: Counter = Counter()

    for html in _iter_snippets(report):
        _scan_colors(html, color_tally)
        _scan_fonts(html, font_tally)
        _scan_buttons(html, button_counts)

    colors = [
        ColorFrequency(color=c, normalizedColor=c, count=n, contexts=ctx) for c, n, ctx in color_tally.ranked()
    ]
    fonts = [FontFrequency(font=f, normalizedFont=f, count=n, contexts=ctx) for f, n, ctx in font_tally.ranked()]

    max_buttons = max(button_counts.values(), default=0)
    button_styles = [
        ButtonStyleInfo(waClass=cls, count=n, suggestedVariant=_suggest_button_variant(n, max_buttons))
        for cls, n in button_counts.most_common()
    ]

    brand_colors = [c for c in colors if not is_neutral_color(c.normalized_color)]
    primary = brand_colors[0].normalized_color if brand_colors else None
    accent = brand_colors[1].normalized_color if len(brand_colors) > 1 else None
    if primary and accent and color_similarity(primary, accent) > 0.85:
        accent = brand_colors[2].normalized_color if len(brand_colors) > 2 else None

    heading_fonts = [f for f in fonts if "heading" in f.contexts]
    body_fonts = [f for f in fonts if "body" in f.contexts]

    return ExtractedTheme(
        primaryColor=primary,
        accentColor=accent,
        colors=colors,
        headingFont=modernize_font(heading_fonts[0].font) if heading_fonts else None,
        bodyFont=modernize_font(body_fonts[0].font) if body_fonts else None,
        fonts=fonts,
        buttonStyles=button_styles,
        confidence=_confidence(brand_colors, fonts, len(report.pages)),
    )


def get_theme_summary(theme: ExtractedTheme) -> str:
    parts: List[str] = []
    if theme.primary_color:
        parts.append(f"Primary color: {theme.primary_color}")
    if theme.accent_color:
        parts.append(f"Accent color: {theme.accent_color}")
    if theme.heading_font:
        parts.append(f"Heading font: {theme.heading_font}")
    if theme.button_styles:
        parts.append(f"{len(theme.button_styles)} button style(s) detected")
    parts.append(f"Confidence: {round(theme.confidence * 100)}%")
    return " | ".join(parts)


def matches_theme_color(color: str, theme: ExtractedTheme) -> Optional[str]:
    """Return ``"primary"``/``"accent"`` when ``color`` is close to a theme colour."""
    normalized = normalize_color(color)
    if not normalized:
        return None
    if theme.primary_color and color_similarity(normalized, theme.primary_color) > 0.9:
        return "primary"
    if theme.accent_color and color_similarity(normalized, theme.accent_color) > 0.9:
        return "accent"
    return None
