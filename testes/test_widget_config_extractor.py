import os
import sys

PROJECT_ROOT = os.path.abspath(os.path.join(os.path.dirname(__file__), ".."))
if PROJECT_ROOT not in sys.path:
    sys.path.insert(0, PROJECT_ROOT)

import pytest
pytest.importorskip("bs4")

from wa_migration.models import CustomHtmlBlock
from wa_migration.extractors.widget_config_extractor import (
    extract_all_widget_configs,
    extract_widget_config,
    infer_platform_from_url,
    summarize_widget_configs,
)


EVENTS_HTML = (
    '<ul><li><a href="/event-123">Spring Gala</a></li>'
    '<li><a href="/event-124">Picnic</a></li></ul>'
    '<span class="event-time-zone">Pacific Time</span>'
)


def test_events_widget():
    config = extract_widget_config(
        EVENTS_HTML, "WaGadgetUpcomingEvents WaGadgetUpcomingEventsStateList gadgetStyle002"
    )
    assert config.type == "events"
    assert config.style_variant == "gadgetStyle002"
    props = config.properties
    assert props.kind == "events"
    assert props.view == "list"
    assert props.timezone == "Pacific Time"
    assert props.event_count == 2
    assert [e.title for e in props.events] == ["Spring Gala", "Picnic"]
    assert config.raw_classes[0] == "WaGadgetUpcomingEvents"


def test_unrecognised_location_returns_none():
    assert extract_widget_config("<p>hi</p>", "someDiv") is None


def test_widget_without_settings_gets_empty_properties():
    config = extract_widget_config("<div>cart</div>", "WaGadgetOnlineStoreCart")
    assert config.type == "store-cart"
    assert config.properties.kind == "store-cart"


def test_social_profile():
    html = (
        '<a href="https://www.facebook.com/club">f</a>'
        '<a href="https://x.com/club" title="X (Twitter)">x</a>'
    )
    config = extract_widget_config(html, "WaGadgetSocialProfile")
    assert [(p.name, p.url) for p in config.properties.platforms] == [
        ("Facebook", "https://www.facebook.com/club"),
        ("X (Twitter)", "https://x.com/club"),
    ]


def test_infer_platform_from_url():
    assert infer_platform_from_url("https://linkedin.com/in/a") == "LinkedIn"
    assert infer_platform_from_url("https://x.com/foo") == "X"
    assert infer_platform_from_url("https://dropbox.com/s/1") is None


def test_slideshow_settings_from_camera_script():
    html = (
        "<script>jq$(function(){ jq$('#c').camera({ time: 5 * 1000, fx: 'scrollLeft' }); "
        "cameraAutoAdvance = false; });</script>"
        '<div data-src="/a.jpg"></div><div data-src="/b.jpg"></div>'
    )
    props = extract_widget_config(html, "WaGadgetSlideshow").properties
    assert props.transition_time == 5000
    assert props.transition_effect == "scrollLeft"
    assert props.auto_advance is False
    assert [i.src for i in props.images] == ["/a.jpg", "/b.jpg"]


def test_slideshow_defaults():
    props = extract_widget_config("<div></div>", "WaGadgetSlideshow").properties
    assert props.transition_time == 3000
    assert props.transition_effect == "simpleFade"
    assert props.auto_advance is True


def test_custom_menu_with_submenu():
    html = (
        '<ul><li><a href="/about">About</a><ul><li><a href="/board">Board</a></li></ul></li>'
        '<li><a href="/contact">Contact</a></li></ul>'
    )
    props = extract_widget_config(html, "WaGadgetCustomMenu").properties
    assert [(i.label, i.has_submenu) for i in props.items] == [
        ("About", True),
        ("Board", False),
        ("Contact", False),
    ]


def test_content_padding_and_stretch():
    html = '<div style="padding-top: 10px; padding-left: 5px" data-editableArea="0"></div>'
    props = extract_widget_config(html, "WaGadgetContent stretch").properties
    assert (props.padding.top, props.padding.right, props.padding.left) == (10, 0, 5)
    assert props.editable_area_id == "0"
    assert props.is_stretch is True


def test_properties_dump_with_discriminator():
    dumped = extract_widget_config(EVENTS_HTML, "WaGadgetEventsList").model_dump(by_alias=True)
    assert dumped["properties"]["kind"] == "events"
    assert dumped["properties"]["eventCount"] == 2


def test_batch_helpers():
    blocks = [
        CustomHtmlBlock(htmlSnippet=EVENTS_HTML, location="WaGadgetEventsList"),
        CustomHtmlBlock(htmlSnippet="<p>x</p>", location="plain"),
        CustomHtmlBlock(htmlSnippet="<div></div>", location="WaGadgetSlideshow"),
        CustomHtmlBlock(htmlSnippet="<div></div>", location="WaGadgetSlideshow"),
    ]
    configs = extract_all_widget_configs(blocks)
    assert len(configs) == 3
    assert summarize_widget_configs(configs) == {"events": 1, "slideshow": 2}
