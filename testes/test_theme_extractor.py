import os
import sys

PROJECT_ROOT = os.path.abspath(os.path.join(os.path.dirname(__file__), ".."))
if PROJECT_ROOT not in sys.path:
    sys.path.insert(0, PROJECT_ROOT)

import pytest

from wa_migration.models import CrawlReport
from wa_migration.extractors.theme_extractor import (
    color_similarity,
    extract_theme_from_crawl,
    get_theme_summary,
    is_neutral_color,
    matches_theme_color,
    modernize_font,
    normalize_color,
    normalize_font,
)


def report_of(*snippets_per_page):
    return CrawlReport.model_validate(
        {
            "config": {"baseUrl": "https://club.example.org"},
            "pages": [
                {
                    "url": f"https://club.example.org/p{i}",
                    "title": f"Page {i}",
                    "customHtml": [{"htmlSnippet": s, "location": "WaGadgetContent"} for s in snippets],
                }
                for i, snippets in enumerate(snippets_per_page)
            ],
        }
    )


@pytest.mark.parametrize(
    "raw,expected",
    [
        ("#FFF", "#ffffff"),
        ("#1A4F8B", "#1a4f8b"),
        ("rgb(255, 0, 128)", "#ff0080"),
        ("rgb(300,0,0)", "#ff0000"),
        ("Red", "#ff0000"),
        ("#123456 !important", "#123456"),
        ("not-a-color", None),
        ("", None),
    ],
)
def test_normalize_color(raw, expected):
    assert normalize_color(raw) == expected


def test_neutral_colors():
    assert is_neutral_color("#ffffff")
    assert is_neutral_color("#000000")
    assert is_neutral_color("#808080")
    assert not is_neutral_color("#1a4f8b")


def test_color_similarity_bounds():
    assert color_similarity("#123456", "#123456") == 1.0
    assert color_similarity("#000000", "#ffffff") == pytest.approx(0.0, abs=0.01)


def test_fonts():
    assert normalize_font('"Times New Roman", serif') == "times new roman"
    assert modernize_font("times new roman") == "Georgia"
    assert modernize_font("verdana") == "system-ui"
    assert modernize_font("lato") == "lato"


def test_theme_from_two_pages():
    report = report_of(
        [
            '<h2><font face="Georgia" color="#1a4f8b">Title</font></h2>'
            '<p style="color: #c0392b; font-family: Verdana, sans-serif">Body</p>'
        ],
        [
            '<font color="#1A4F8B">x</font><div style="background-color: #ffffff">y</div>'
            '<a class="stylizedButton buttonStyle001" href="/a">A</a>'
            '<a class="stylizedButton buttonStyle001" href="/b">B</a>'
            '<a class="stylizedButton buttonStyle002" href="/c">C</a>'
        ],
    )
    theme = extract_theme_from_crawl(report)
    assert theme.primary_color == "#1a4f8b"
    assert theme.accent_color == "#c0392b"
    assert theme.heading_font == "Georgia"
    assert theme.body_font == "system-ui"
    assert [(b.wa_class, b.suggested_variant) for b in theme.button_styles] == [
        ("buttonstyle001", "primary"),
        ("buttonstyle002", "outline"),
    ]
    assert theme.confidence == 0.5


def test_accent_skips_colors_too_close_to_primary():
    report = report_of(
        ['<font color="#1a4f8b">a</font>' * 3 + '<font color="#1a4f8c">b</font>' * 2 + '<font color="#c0392b">c</font>']
    )
    theme = extract_theme_from_crawl(report)
    assert theme.primary_color == "#1a4f8b"
    assert theme.accent_color == "#c0392b"


def test_confidence_grows_with_evidence_and_stays_bounded():
    snippet = '<font color="#1a4f8b">a</font>' * 3 + '<span style="font-family: Arial">b</span>' * 2
    small = extract_theme_from_crawl(report_of([snippet]))
    large = extract_theme_from_crawl(report_of(*[[snippet] for _ in range(10)]))
    assert 0.0 <= small.confidence <= 1.0
    assert large.confidence >= small.confidence
    assert large.confidence == pytest.approx(1.0)


def test_empty_report():
    theme = extract_theme_from_crawl(CrawlReport())
    assert theme.primary_color is None
    assert theme.accent_color is None
    assert theme.confidence == 0.5
    assert get_theme_summary(theme) == "Confidence: 50%"


def test_matches_theme_color():
    theme = extract_theme_from_crawl(report_of(['<font color="#1a4f8b">a</font><font color="#c0392b">b</font>']))
    assert matches_theme_color("#1a4f8c", theme) == "primary"
    assert matches_theme_color("rgb(192, 57, 43)", theme) == "accent"
    assert matches_theme_color("#00ff00", theme) is None
    assert matches_theme_color("nonsense", theme) is None
