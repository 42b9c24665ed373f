import os
import sys

PROJECT_ROOT = os.path.abspath(os.path.join(os.path.dirname(__file__), ".."))
if PROJECT_ROOT not in sys.path:
    sys.path.insert(0, PROJECT_ROOT)

import pytest
pytest.importorskip("bs4")

from wa_migration.models import ConversionResult
from wa_migration.parsers.block_schema import validate_blocks
from wa_migration.parsers.html_to_blocks import (
    clean_title,
    convert_crawled_page,
    convert_custom_html_blocks,
    convert_html_snippet,
    detect_wa_widget,
    is_allowlisted_embed,
    sanitize_legacy_html,
)


def types_of(result):
    return [b.type for b in result.blocks]


def assert_consistent(result):
    assert isinstance(result, ConversionResult)
    assert result.stats.converted_blocks == len(result.blocks)
    assert result.stats.warnings == len(result.warnings)
    assert result.stats.skipped_elements <= result.stats.total_elements
    assert validate_blocks(result.blocks) == []


def test_structural_tags_keep_document_order():
    html = (
        "<h2>Welcome</h2>"
        "<p>Our club meets every Tuesday.</p>"
        "<ul><li>One</li><li>Two</li></ul>"
        "<hr>"
    )
    result = convert_html_snippet(html)
    assert types_of(result) == ["heading", "text", "list", "divider"]
    assert result.blocks[0].data == {"level": 2, "text": "Welcome"}
    assert result.blocks[1].data["content"] == "Our club meets every Tuesday."
    assert result.blocks[2].data == {"items": ["One", "Two"], "ordered": False}
    assert result.stats.total_elements == 4
    assert result.stats.skipped_elements == 0
    assert_consistent(result)


def test_ordered_list_and_entities():
    result = convert_html_snippet("<ol><li>Fish &amp; Chips</li><li>Tea</li></ol>")
    assert result.blocks[0].data == {"items": ["Fish & Chips", "Tea"], "ordered": True}


def test_script_tag_becomes_warning_and_never_a_block():
    html = '<p>Hello there friends</p><script>jQuery(".slider").slick({autoplay:true});</script>'
    result = convert_html_snippet(html)
    assert types_of(result) == ["text"]
    assert [w.type for w in result.warnings] == ["script"]
    for block in result.blocks:
        assert "<script" not in str(block.data).lower()
        assert "slick" not in str(block.data)
    assert_consistent(result)


def test_analytics_script_is_info_because_it_can_be_removed():
    result = convert_html_snippet("<script>gtag('config', 'G-12345');</script>")
    assert result.blocks == []
    assert len(result.warnings) == 1
    assert result.warnings[0].severity == "info"


def test_inline_handler_is_stripped_and_reported():
    html = "<p onclick=\"alert('hello world'); return false;\">Click here please</p>"
    result = convert_html_snippet(html)
    assert result.blocks[0].data["content"] == "Click here please"
    assert "onclick" not in str(result.blocks[0].data)
    assert len(result.warnings) == 1
    assert result.warnings[0].type == "script"
    assert result.warnings[0].message.startswith("Inline event handler")


def test_javascript_url_never_becomes_a_button():
    html = '<p><a class="btn" href="javascript:doThing()">Go now</a></p>'
    result = convert_html_snippet(html)
    assert "button" not in types_of(result)
    for block in result.blocks:
        assert "javascript" not in str(block.data).lower()


def test_button_link_in_paragraph():
    html = '<p><a class="stylizedButton buttonStyle001" href="/join">Join Us</a></p>'
    result = convert_html_snippet(html)
    assert types_of(result) == ["button"]
    assert result.blocks[0].data == {"text": "Join Us", "href": "/join", "variant": "primary"}


def test_allowlisted_iframe_keeps_dimensions_without_warning():
    html = '<iframe src="https://www.youtube.com/embed/abc" width="560" height="315"></iframe>'
    result = convert_html_snippet(html)
    assert types_of(result) == ["iframe"]
    assert result.blocks[0].data == {"src": "https://www.youtube.com/embed/abc", "width": "560", "height": "315"}
    assert result.warnings == []


def test_unknown_iframe_is_kept_and_flagged():
    result = convert_html_snippet('<iframe src="https://forms.example.org/f/1"></iframe>')
    assert types_of(result) == ["iframe"]
    assert result.blocks[0].data["width"] == "100%"
    assert result.blocks[0].data["height"] == "400"
    assert [w.type for w in result.warnings] == ["unsupported_embed"]
    assert result.warnings[0].severity == "warning"
    assert "forms.example.org" in result.warnings[0].message


@pytest.mark.parametrize(
    "src,expected",
    [
        ("https://www.youtube.com/embed/x", True),
        ("https://youtu.be/x", True),
        ("//player.vimeo.com/video/1", True),
        ("https://www.google.com/maps/embed?pb=1", True),
        ("https://www.google.com/search?q=x", False),
        ("https://youtube.com.evil.net/x", False),
        ("https://evil.net/?u=youtube.com", False),
        ("javascript:alert(1)", False),
        ("", False),
    ],
)
def test_embed_allowlist_matches_hosts(src, expected):
    assert is_allowlisted_embed(src) is expected


def test_image_with_text_keeps_image_and_flags_text():
    result = convert_html_snippet('<p><img src="/a.png" alt="Logo"> Welcome to our site</p>')
    assert types_of(result) == ["image"]
    assert result.blocks[0].data == {"src": "/a.png", "alt": "Logo"}
    assert [(w.type, w.severity) for w in result.warnings] == [("complex_html", "info")]


def test_image_only_paragraph():
    result = convert_html_snippet('<p><img src="/b.png"></p>')
    assert types_of(result) == ["image"]
    assert result.blocks[0].data["alt"] == ""
    assert result.warnings == []


def test_vendor_wrappers_are_removed():
    html = (
        '<div class="gadgetStyleBody gadgetContentEditableArea">'
        "<h3>News</h3><p>Latest updates from the board.</p>"
        "</div>"
    )
    result = convert_html_snippet(html)
    assert types_of(result) == ["heading", "text"]
    assert result.stats.skipped_elements == 0


def test_loose_text_becomes_text_block():
    result = convert_html_snippet("Just some loose text without tags")
    assert types_of(result) == ["text"]


def test_code_looking_text_is_not_emitted():
    result = convert_html_snippet("var x = 5; document.write(x);")
    assert result.blocks == []
    assert [w.type for w in result.warnings] == ["script"]
    assert result.stats.skipped_elements == 1


def test_boilerplate_is_skipped_silently():
    result = convert_html_snippet("<div>&nbsp;</div>")
    assert result.blocks == []
    assert result.warnings == []
    assert result.stats.total_elements == 1
    assert result.stats.skipped_elements == 1


def test_unmatched_markup_falls_back_to_legacy_html():
    html = '<div class="custom-box"><span style="color:red">Note</span></div>'
    result = convert_html_snippet(html)
    assert types_of(result) == ["html"]
    assert result.blocks[0].data["isLegacy"] is True
    assert [w.type for w in result.warnings] == ["complex_html"]


def test_legacy_html_block_carries_no_executable_content():
    html = (
        '<div class="x" style="a"><script>alert(1)</script>'
        '<form action="/go"><input name="q" onfocus="doSomethingLong()"></form></div>'
    )
    result = convert_html_snippet(html)
    assert types_of(result) == ["html"]
    content = result.blocks[0].data["content"].lower()
    assert "<script" not in content
    assert "onfocus" not in content
    assert sum(1 for w in result.warnings if w.type == "script") == 2


def script_warnings(result):
    return [w for w in result.warnings if w.type == "script"]


def test_spliced_script_tag_is_removed_and_reported():
    html = '<div class="intro-box-with-long-class-name">x<scri<script></script>pt>alert(document.cookie)</script></div>'
    result = convert_html_snippet(html)
    for block in result.blocks:
        assert "<script" not in str(block.data).lower()
        assert "alert(" not in str(block.data)
    assert any("alert(document.cookie)" in (w.html_snippet or "") for w in script_warnings(result))
    assert_consistent(result)


def test_handler_after_slash_is_removed_and_reported():
    html = '<div class="intro-box-with-long-class-name"><svg/onload=alert(document.cookie)></svg></div>'
    result = convert_html_snippet(html)
    for block in result.blocks:
        assert "onload" not in str(block.data).lower()
        assert "alert(" not in str(block.data)
    found = script_warnings(result)
    assert len(found) == 1
    assert found[0].message.startswith("Inline event handler")


def test_handler_glued_to_quoted_attribute_is_removed():
    result = convert_html_snippet('<p><img src="/a.png"onerror="alert(document.cookie)"></p>')
    assert types_of(result) == ["image"]
    assert result.blocks[0].data == {"src": "/a.png", "alt": ""}
    assert len(script_warnings(result)) == 1


def test_sanitize_legacy_html_reparses_attributes():
    cleaned = sanitize_legacy_html('<div title=\'">\' onmouseover="steal()">Hi</div>')
    assert "onmouseover" not in cleaned
    assert "Hi" in cleaned
    cleaned = sanitize_legacy_html('<a href=" java\tscript:go()">x</a><style>p{}</style>')
    assert "script:" not in cleaned
    assert "<style" not in cleaned
    assert ">x</a>" in cleaned


def test_markup_like_text_becomes_legacy_html():
    result = convert_html_snippet('Set class="note" on the box')
    assert types_of(result) == ["html"]
    assert result.blocks[0].data["content"] == 'Set class="note" on the box'
    assert [w.type for w in result.warnings] == ["complex_html"]


@pytest.mark.parametrize(
    "html",
    ["", None, "<", "<<<>>>", "<p", "<script>", "</div></div>", "<iframe>", "<h1></h1>", "<ul></ul>", "&lt;b&gt;"],
)
def test_conversion_never_raises(html):
    assert_consistent(convert_html_snippet(html))


def test_layout_widgets_are_dropped_silently():
    result = convert_custom_html_blocks(
        [{"htmlSnippet": "<ul><li>Home</li></ul>", "location": "WaGadgetMenuHorizontal gadgetStyle001"}]
    )
    assert result.blocks == []
    assert result.warnings == []
    assert result.stats.skipped_elements == 1


def test_known_widget_becomes_placeholder_with_mapping():
    result = convert_custom_html_blocks(
        [
            {"htmlSnippet": "<p>Intro text for the page</p>", "location": "WaGadgetContent"},
            {
                "htmlSnippet": '<ul><li><a href="/event-1">Gala</a></li></ul>',
                "location": "WaGadgetEventsList gadgetStyle002",
            },
        ]
    )
    assert types_of(result) == ["text", "placeholder"]
    placeholder = result.blocks[1]
    assert placeholder.data["widgetType"] == "events-list"
    assert placeholder.data["sourceWidget"] == "WaGadgetEventsList"
    assert placeholder.meta["className"] == "widget-events-list"
    assert [(m.wa_type, m.murmurant_type, m.position) for m in result.widget_mapping] == [
        ("WaGadgetEventsList", "events-list", 1)
    ]
    assert_consistent(result)


def test_detect_wa_widget():
    wa_type, target = detect_wa_widget("WaGadgetFirst WaGadgetEventCalendar gadgetStyle002")
    assert wa_type == "WaGadgetEventCalendar"
    assert target.murmurant_type == "interactive-calendar"
    assert target.auto_replace is True
    assert detect_wa_widget("plainDiv") == (None, None)


def test_clean_title():
    assert clean_title("My Club - About Us") == "About Us"
    assert clean_title("Club - Events - Spring") == "Events - Spring"
    assert clean_title("Home") == "Home"


def test_crawled_page_conversion():
    page = {
        "url": "https://club.org/about",
        "title": "My Club - About Us",
        "customHtml": [
            {
                "htmlSnippet": '<iframe src="https://www.youtube.com/embed/xyz"></iframe>',
                "location": "WaGadgetContent",
            },
            {
                "htmlSnippet": '<ul><li><a href="/event-1">Gala</a></li></ul>',
                "location": "WaGadgetEventsList",
            },
        ],
        "embeds": [
            {"src": "https://www.youtube.com/embed/xyz"},
            {"src": "https://player.vimeo.com/video/9"},
        ],
        "images": [
            {"src": "https://cdn.other.com/a.png", "isExternal": True},
            {"src": "https://cdn.other.com/b.png", "isExternal": True},
            {"src": "/local.png"},
        ],
    }
    result = convert_crawled_page(page)
    assert types_of(result) == ["heading", "iframe", "placeholder", "iframe"]
    assert result.blocks[0].data == {"level": 1, "text": "About Us"}
    assert result.blocks[3].data["src"] == "https://player.vimeo.com/video/9"
    assert [m.position for m in result.widget_mapping] == [2]
    external = [w for w in result.warnings if w.type == "external_resource"]
    assert len(external) == 1
    assert "cdn.other.com" in external[0].message
    assert_consistent(result)
