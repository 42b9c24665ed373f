import csv
import os
import sys
from collections import Counter

PROJECT_ROOT = os.path.abspath(os.path.join(os.path.dirname(__file__), ".."))
if PROJECT_ROOT not in sys.path:
    sys.path.insert(0, PROJECT_ROOT)

import pytest
pytest.importorskip("bs4")

from wa_migration.utils.readiness import categorize_unhandled, summarize_crawl_report, write_counts_csv


@pytest.mark.parametrize(
    "html,category",
    [
        ('<div class="menuBackground"><a href="/">Home</a></div>', "navigation-menu"),
        ('<div class="loginContainer"></div>', "login-widget"),
        ('<img src="/a.png">', "single-image"),
        ("<p>short</p>", "simple-paragraph"),
        ("<h3>Title</h3>", "simple-heading"),
        ('<a href="/1">1</a> <a href="/2">2</a> <a href="/3">3</a>', "link-list"),
        ("<table><tr><td>1</td></tr></table>", "data-table"),
        ("<div>&nbsp;</div>", "empty-spacer"),
        ("<div>Plenty of loose text in here</div>", "other-content"),
    ],
)
def test_categorize_unhandled(html, category):
    assert categorize_unhandled(html) == category


def test_summarize_crawl_report():
    report = {
        "config": {"baseUrl": "https://club.org"},
        "pages": [
            {
                "url": "https://club.org/",
                "title": "Club - Home",
                "customHtml": [
                    {
                        "htmlSnippet": "<h2>Hi</h2><p>Welcome to the club page</p><script>gtag('config','G-1');</script>",
                        "location": "WaGadgetContent",
                    },
                    {"htmlSnippet": "<ul><li>x</li></ul>", "location": "WaGadgetMenuHorizontal"},
                    {"htmlSnippet": '<div class="menuBackground"></div>', "location": "plain"},
                ],
                "images": [{"src": "https://cdn.example.com/a.png", "isExternal": True}],
            }
        ],
    }
    summary = summarize_crawl_report(report)
    assert summary["pages"] == 1
    assert summary["totalBlocks"] == 3
    assert summary["actions"] == {"auto": 3, "remove": 1, "manual": 0, "unknown": 0}
    assert summary["blockTypes"] == Counter(heading=2, text=1)
    assert summary["widgetTypes"] == Counter(Content=1, MenuHorizontal=1)
    assert summary["unhandled"] == Counter({"navigation-menu": 1})
    assert summary["externalDomains"] == Counter({"cdn.example.com": 1})
    assert ("script:analytics", 1) in summary["topIssues"]
    assert ("warning:script", 1) in summary["topIssues"]


def test_write_counts_csv(tmp_path):
    out = tmp_path / "out" / "counts.csv"
    write_counts_csv(Counter({"b": 1, "a": 3, "c": 1}), out, key_header="block_type")
    with out.open(encoding="utf-8", newline="") as f:
        rows = list(csv.reader(f))
    assert rows == [["block_type", "count"], ["a", "3"], ["b", "1"], ["c", "1"]]
