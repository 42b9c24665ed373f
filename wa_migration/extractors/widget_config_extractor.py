"""
Extraction of settings from vendor widgets ("gadgets") found in crawled pages.

The crawler records the CSS class string of the container around each custom
HTML region.  When that string carries a known gadget class, the widget kind
is recognised and a kind-specific extractor pulls whatever structured data it
can out of the markup (events, products, menu entries, slides...).  Every
extractor is best-effort: missing sub-markup leaves fields at their defaults.
"""

from __future__ import annotations

import re
from collections import Counter
from typing import Callable, Dict, Iterable, List, Optional, Pattern, Tuple

from bs4 import BeautifulSoup, Tag

from wa_migration.models import CustomHtmlBlock, ExtractedWidgetConfig
from wa_migration.models.widgets import (
    AlbumImage,
    CatalogProduct,
    ContentWidgetProps,
    CustomMenuWidgetProps,
    EmptyWidgetProps,
    EventLink,
    EventsWidgetProps,
    MenuItem,
    Padding,
    PhotoAlbumWidgetProps,
    SearchWidgetProps,
    SlideImage,
    SlideshowWidgetProps,
    SocialPlatform,
    SocialProfileWidgetProps,
    StoreCatalogWidgetProps,
    StoreProductWidgetProps,
)

__all__ = [
    "WIDGET_SIGNATURES",
    "extract_all_widget_configs",
    "extract_widget_config",
    "infer_platform_from_url",
    "summarize_widget_configs",
]


# Order matters: the first signature found in the location string wins.
WIDGET_SIGNATURES: Tuple[Tuple[Pattern[str], str], ...] = tuple(
    (re.compile(pattern, re.IGNORECASE), widget_type)
    for pattern, widget_type in (
        (r"wagadgetupcoming\s*events|wagadgetevents", "events"),
        (r"wagadgetonlinestorecatalog", "store-catalog"),
        (r"wagadgetonlinestoreproduct", "store-product"),
        (r"wagadgetonlinestorecart", "store-cart"),
        (r"wagadgetsitesearch|wagadgetsearch", "search"),
        (r"wagadgetsocialprofile", "social-profile"),
        (r"wagadgetcustommenu", "custom-menu"),
        (r"wagadgetslideshow", "slideshow"),
        (r"wagadgetphotoalbum|camera_wrap", "photo-album"),
        (r"wagadgetlogin", "login"),
        (r"wagadgetmemberdirectory", "member-directory"),
        (r"wagadgetdonation", "donation"),
        (r"wagadgetmembershipapplication", "membership-app"),
        (r"wagadgetcontent", "content"),
    )
)

_STYLE_RE = re.compile(r"gadgetStyle(\d+|None)", re.IGNORECASE)

_PLATFORMS: Tuple[Tuple[str, Pattern[str]], ...] = tuple(
    (name, re.compile(pattern, re.IGNORECASE))
    for name, pattern in (
        ("Facebook", r"facebook\.com"),
        ("Twitter", r"twitter\.com"),
        ("X", r"(?:^|[/.])x\.com"),
        ("Instagram", r"instagram\.com"),
        ("LinkedIn", r"linkedin\.com"),
        ("YouTube", r"youtube\.com"),
        ("Pinterest", r"pinterest\.com"),
        ("TikTok", r"tiktok\.com"),
    )
)


def _detect_widget_type(location: str) -> Optional[str]:
    for regex, widget_type in WIDGET_SIGNATURES:
        if regex.search(location or ""):
            return widget_type
    return None


def _soup(html: str) -> BeautifulSoup:
    return BeautifulSoup(html or "", "html.parser")


def _attr(tag: Optional[Tag], name: str) -> Optional[str]:
    if tag is None:
        return None
    value = tag.get(name)
    if isinstance(value, list):
        value = " ".join(value)
    return value or None


def _alignment(html: str) -> str:
    if re.search(r"alignRight", html, re.IGNORECASE):
        return "right"
    if re.search(r"alignCenter", html, re.IGNORECASE):
        return "center"
    return "left"


def _orientation(html: str) -> str:
    return "vertical" if re.search(r"orientationVertical", html, re.IGNORECASE) else "horizontal"


# --- Property extractors ---

def _events_props(html: str, location: str) -> EventsWidgetProps:
    view = "unknown"
    if re.search(r"eventsstatelist", location, re.IGNORECASE) or re.search(r"<ul[^>]*>", html, re.IGNORECASE):
        view = "list"
    elif re.search(r"eventsstatecalendar|calendar", location, re.IGNORECASE):
        view = "calendar"

    tz_match = re.search(r"event-time-zone[^>]*>([^<]+)<", html, re.IGNORECASE)
    timezone = tz_match.group(1).strip() if tz_match else None

    events: List[EventLink] = []
    for a in _soup(html).find_all("a", href=re.compile("event", re.IGNORECASE)):
        title = a.get_text(" ", strip=True)
        if title:
            events.append(EventLink(title=title, url=_attr(a, "href") or ""))

    return EventsWidgetProps(view=view, timezone=timezone, eventCount=len(events), events=events)


def _store_catalog_props(html: str) -> StoreCatalogWidgetProps:
    products: List[CatalogProduct] = []
    soup = _soup(html)
    for item in soup.find_all("li", class_=re.compile(r"^OnlineStoreCatalog_list_item$")):
        link = item.find("a", href=re.compile(r"/Products/", re.IGNORECASE))
        product_url = _attr(link, "href") or ""
        img = item.find("img", src=True)
        name_el = item.find(class_=re.compile(r"OnlineStoreCatalog_list_item_link"))
        price_el = item.find(class_=re.compile(r"OnlineStoreCatalog_list_price"))
        name = name_el.get_text(" ", strip=True) if name_el else ""
        price = price_el.get_text(" ", strip=True) if price_el else ""
        if name or product_url:
            products.append(
                CatalogProduct(name=name, price=price, imageUrl=_attr(img, "src"), productUrl=product_url)
            )
    return StoreCatalogWidgetProps(products=products, productCount=len(products))


def _store_product_props(html: str) -> StoreProductWidgetProps:
    title = re.search(r"OnlineStoreProduct_title[^>]*>[\s\S]*?<h\d[^>]*>([^<]+)", html, re.IGNORECASE)
    price = re.search(r"OnlineStoreProduct_price[^>]*>([^<]+)", html, re.IGNORECASE)
    image = re.search(r"OnlineStoreProduct[^>]*img[^>]*src=[\"']([^\"']+)[\"']", html, re.IGNORECASE)
    desc = re.search(r"OnlineStoreProduct_description[^>]*>([\s\S]*?)</div>", html, re.IGNORECASE)
    return StoreProductWidgetProps(
        name=title.group(1).strip() if title else "",
        price=price.group(1).strip() if price else None,
        description=re.sub(r"<[^>]+>", "", desc.group(1)).strip() if desc else None,
        imageUrl=image.group(1) if image else None,
    )


def _search_props(html: str) -> SearchWidgetProps:
    placeholder = re.search(r"placeholder=[\"']([^\"']+)[\"']", html, re.IGNORECASE)
    action = re.search(r"action=[\"']([^\"']+)[\"']", html, re.IGNORECASE)
    return SearchWidgetProps(
        placeholder=placeholder.group(1) if placeholder else "Enter search string",
        alignment=_alignment(html),
        actionUrl=action.group(1) if action else None,
    )


def infer_platform_from_url(url: str) -> Optional[str]:
    for name, regex in _PLATFORMS:
        if regex.search(url or ""):
            return name
    return None


def _social_profile_props(html: str) -> SocialProfileWidgetProps:
    platforms: List[SocialPlatform] = []
    for a in _soup(html).find_all("a", href=True):
        url = _attr(a, "href") or ""
        name = _attr(a, "title") or infer_platform_from_url(url) or _attr(a, "class")
        if name:
            platforms.append(SocialPlatform(name=name, url=url))
    return SocialProfileWidgetProps(
        orientation=_orientation(html), alignment=_alignment(html), platforms=platforms
    )


def _custom_menu_props(html: str) -> CustomMenuWidgetProps:
    items: List[MenuItem] = []
    for li in _soup(html).find_all("li"):
        a = li.find("a", href=True)
        if a is None:
            continue
        label = _attr(a, "title") or a.get_text(" ", strip=True)
        if label and label.strip():
            items.append(
                MenuItem(label=label.strip(), url=_attr(a, "href") or "", hasSubmenu=li.find("ul") is not None)
            )
    return CustomMenuWidgetProps(orientation=_orientation(html), alignment=_alignment(html), items=items)


def _slideshow_props(html: str) -> SlideshowWidgetProps:
    # Camera.js options live in an inline script next to the markup
    time_match = re.search(r"time\s*:\s*\(?(\d+)\s*\*?\s*1000\)?", html, re.IGNORECASE)
    fx_match = re.search(r"fx\s*:\s*['\"]([^'\"]+)['\"]", html, re.IGNORECASE)
    auto_match = re.search(r"cameraAutoAdvance\s*=.*?(true|false)", html, re.IGNORECASE)

    images = [SlideImage(src=src) for src in re.findall(r"data-src=[\"']([^\"']+)[\"']", html, re.IGNORECASE)]
    if not images:
        images = [
            SlideImage(src=src)
            for src in re.findall(r"background-image\s*:\s*url\(['\"]?([^'\")\s]+)['\"]?\)", html, re.IGNORECASE)
        ]

    return SlideshowWidgetProps(
        transitionTime=int(time_match.group(1)) * 1000 if time_match else 3000,
        transitionEffect=fx_match.group(1) if fx_match else "simpleFade",
        autoAdvance=auto_match.group(1).lower() == "true" if auto_match else True,
        imageCount=len(images),
        images=images,
    )


def _photo_album_props(html: str) -> PhotoAlbumWidgetProps:
    id_match = re.search(r"camera_wrap[^>]*id=[\"']([^\"']+)[\"']", html, re.IGNORECASE)
    images: List[AlbumImage] = []
    for src in re.findall(r"data-src=[\"']([^\"']+)[\"']", html, re.IGNORECASE):
        thumb = re.search(
            r"data-thumb=[\"']([^\"']+)[\"'][^>]*data-src=[\"']" + re.escape(src) + r"[\"']",
            html,
            re.IGNORECASE,
        )
        images.append(AlbumImage(src=src, thumbnail=thumb.group(1) if thumb else None))
    return PhotoAlbumWidgetProps(
        albumId=id_match.group(1) if id_match else None, imageCount=len(images), images=images
    )


def _padding(html: str, side: str) -> int:
    match = re.search(rf"padding-{side}\s*:\s*(\d+)px", html, re.IGNORECASE)
    return int(match.group(1)) if match else 0


def _content_props(html: str, location: str) -> ContentWidgetProps:
    area = re.search(r"data-editableArea=[\"'](\d+)[\"']", html, re.IGNORECASE)
    return ContentWidgetProps(
        padding=Padding(
            top=_padding(html, "top"),
            right=_padding(html, "right"),
            bottom=_padding(html, "bottom"),
            left=_padding(html, "left"),
        ),
        editableAreaId=area.group(1) if area else None,
        isStretch=bool(re.search(r"\bstretch\b", location, re.IGNORECASE)),
    )


_EXTRACTORS: Dict[str, Callable[[str, str], object]] = {
    "events": _events_props,
    "store-catalog": lambda html, _loc: _store_catalog_props(html),
    "store-product": lambda html, _loc: _store_product_props(html),
    "search": lambda html, _loc: _search_props(html),
    "social-profile": lambda html, _loc: _social_profile_props(html),
    "custom-menu": lambda html, _loc: _custom_menu_props(html),
    "slideshow": lambda html, _loc: _slideshow_props(html),
    "photo-album": lambda html, _loc: _photo_album_props(html),
    "content": _content_props,
}


def extract_widget_config(html: str, location: str) -> Optional[ExtractedWidgetConfig]:
    """Recognise the widget around ``html`` and extract its settings.

    Returns ``None`` when ``location`` carries no known gadget class, which
    is the normal case for author-written content.
    """
    widget_type = _detect_widget_type(location)
    if widget_type is None:
        return None

    style = _STYLE_RE.search(location)
    extractor = _EXTRACTORS.get(widget_type)
    properties = extractor(html or "", location) if extractor else EmptyWidgetProps(kind=widget_type)

    return ExtractedWidgetConfig(
        type=widget_type,
        styleVariant=f"gadgetStyle{style.group(1)}" if style else None,
        properties=properties,
        rawClasses=[c for c in location.split() if c],
        location=location,
    )


def extract_all_widget_configs(blocks: Iterable[CustomHtmlBlock]) -> List[ExtractedWidgetConfig]:
    configs: List[ExtractedWidgetConfig] = []
    for block in blocks:
        config = extract_widget_config(block.html_snippet, block.location)
        if config is not None:
            configs.append(config)
    return configs


def summarize_widget_configs(configs: Iterable[ExtractedWidgetConfig]) -> Dict[str, int]:
    """Count detected widgets per type."""
    return dict(Counter(config.type for config in configs))
