"""
Legacy HTML → block conversion.

Custom HTML regions crawled from a Wild Apricot site are turned into native
blocks with a deliberately simple, auditable approach: known wrapper markup
and all executable content are stripped, the rest is split in front of every
top-level structural tag, and each piece is offered to a fixed list of
matchers (heading, iframe, list, image, paragraph, divider).  Pieces nobody
claims fall back to plain text or, when they still look like markup, to a raw
``html`` block flagged for review.

Nothing here raises for bad input.  Scripts and inline handlers are reported
as ``script`` warnings and never end up inside a block.

Recognised vendor gadgets are not parsed at all: layout gadgets (menus, login
boxes) are dropped because the new site provides them, the others become a
``placeholder`` block for the matching native widget.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from typing import Any, Dict, Iterable, List, Mapping, NamedTuple, Optional, Tuple, Union
from urllib.parse import urlparse

from bs4 import BeautifulSoup, Tag

from wa_migration.extractors.widget_config_extractor import extract_widget_config
from wa_migration.models import (
    Block,
    ConversionResult,
    ConversionStats,
    ConversionWarning,
    CustomHtmlBlock,
    PageContent,
    ScriptAnalysis,
    WidgetMapping,
)
from .block_schema import (
    button_block,
    divider_block,
    heading_block,
    html_block,
    iframe_block,
    image_block,
    list_block,
    placeholder_block,
    text_block,
)
from .script_analyzer import analyze_script, detect_script_type

__all__ = [
    "EMBED_ALLOWLIST",
    "WA_WIDGET_MAP",
    "clean_title",
    "convert_crawled_page",
    "convert_custom_html_blocks",
    "convert_html_snippet",
    "detect_wa_widget",
    "extract_text_content",
    "is_allowlisted_embed",
    "looks_like_html",
    "sanitize_legacy_html",
]

SNIPPET_LENGTH = 200


###############################################################################
# Vendor widget mapping
###############################################################################

class WidgetTarget(NamedTuple):
    murmurant_type: str
    description: str
    auto_replace: bool


SKIP = "skip"

WA_WIDGET_MAP: Dict[str, WidgetTarget] = {
    # Calendar & events
    "WaGadgetEventCalendar": WidgetTarget("interactive-calendar", "Event calendar widget", True),
    "WaGadgetEventsList": WidgetTarget("events-list", "Upcoming events list", True),
    "WaGadgetEventRegistration": WidgetTarget("event-registration", "Event registration form", True),
    # Membership
    "WaGadgetMembershipLevelsList": WidgetTarget("membership-levels", "Membership tiers display", True),
    "WaGadgetMembershipApplication": WidgetTarget("membership-application", "Membership application form", True),
    "WaGadgetMemberDirectory": WidgetTarget("member-directory", "Member directory/search", True),
    "WaGadgetMemberProfile": WidgetTarget("member-profile", "Member profile widget", True),
    # Donations & store
    "WaGadgetDonationForm": WidgetTarget("donation-form", "Donation form", True),
    "WaGadgetProductsList": WidgetTarget("store-products", "Store products list", True),
    "WaGadgetShoppingCart": WidgetTarget("shopping-cart", "Shopping cart widget", True),
    # Content
    "WaGadgetBlogPostsList": WidgetTarget("blog-posts", "Blog posts list", True),
    "WaGadgetPhotoAlbum": WidgetTarget("gallery", "Photo gallery", True),
    "WaGadgetContactForm": WidgetTarget("contact-form", "Contact form", True),
    # Layout and navigation, rebuilt by the site layout
    "WaGadgetLoginForm": WidgetTarget(SKIP, "Login form - handled by auth system", False),
    "WaGadgetMenuHorizontal": WidgetTarget(SKIP, "Navigation menu - handled by layout", False),
    "WaGadgetMenuVertical": WidgetTarget(SKIP, "Sidebar menu - handled by layout", False),
    "WaGadgetMobilePanel": WidgetTarget(SKIP, "Mobile menu - handled by layout", False),
    "WaGadgetFooter": WidgetTarget(SKIP, "Footer - handled by layout", False),
    "WaGadgetBreadcrumb": WidgetTarget("breadcrumb", "Breadcrumb navigation", True),
    # Social & sharing
    "WaGadgetSocialSharing": WidgetTarget("social-share", "Social sharing buttons", True),
    "WaGadgetSocialFollow": WidgetTarget("social-follow", "Social follow links", True),
    # Search
    "WaGadgetSearch": WidgetTarget("search", "Site search widget", True),
}


def detect_wa_widget(location: str) -> Tuple[Optional[str], Optional[WidgetTarget]]:
    """Find the vendor gadget class named in a container's class string."""
    lowered = (location or "").lower()
    for wa_type, target in WA_WIDGET_MAP.items():
        if wa_type.lower() in lowered:
            return wa_type, target
    return None, None


###############################################################################
# Embed allowlist
###############################################################################

EMBED_ALLOWLIST: Tuple[str, ...] = (
    "youtube.com",
    "youtube-nocookie.com",
    "youtu.be",
    "vimeo.com",
    "player.vimeo.com",
    "google.com/maps",
    "maps.google.com",
    "open.spotify.com",
    "soundcloud.com",
    "codepen.io",
)

_UNSAFE_SCHEME_RE = re.compile(r"^\s*(?:javascript|vbscript|data\s*:\s*text/html)", re.IGNORECASE)


def _parse_url(src: str):
    value = (src or "").strip()
    if value.startswith("//"):
        value = "https:" + value
    try:
        parsed = urlparse(value)
        host = (parsed.hostname or "").lower()
    except ValueError:
        return None, ""
    return host or None, parsed.path or ""


def _domain(src: str) -> Optional[str]:
    host, _ = _parse_url(src)
    return host


def is_allowlisted_embed(src: str) -> bool:
    host, path = _parse_url(src)
    if not host:
        return False
    for entry in EMBED_ALLOWLIST:
        domain, _, prefix = entry.partition("/")
        if host != domain and not host.endswith("." + domain):
            continue
        if not prefix or path.startswith("/" + prefix):
            return True
    return False


###############################################################################
# Warnings
###############################################################################

_WARNING_CATALOGUE: Dict[str, Tuple[str, str, str]] = {
    "script": (
        "warning",
        "JavaScript code detected that cannot be automatically migrated",
        "Review the functionality this script provides and use a native feature if available.",
    ),
    "unsupported_embed": (
        "warning",
        "Embed from {domain} is not on the allowlist",
        "Verify this embed works correctly after migration. Consider using a native widget "
        "if available, or ask for {domain} to be added to the embed allowlist.",
    ),
    "complex_html": (
        "info",
        "Complex HTML structure preserved as raw block",
        "Review this block in the editor. You may want to simplify it or convert it to native "
        "blocks for better mobile responsiveness.",
    ),
    "external_resource": (
        "info",
        "External resource detected: {domain}",
        "External images and resources will continue to work, but consider re-uploading them "
        "for better performance and reliability.",
    ),
}


def _warning(
    kind: str,
    snippet: Optional[str] = None,
    *,
    domain: Optional[str] = None,
    severity: Optional[str] = None,
    message: Optional[str] = None,
    recommendation: Optional[str] = None,
) -> ConversionWarning:
    default_severity, default_message, default_recommendation = _WARNING_CATALOGUE[kind]
    name = domain or "unknown source"
    return ConversionWarning(
        type=kind,
        severity=severity or default_severity,
        message=message or default_message.format(domain=name),
        recommendation=recommendation or default_recommendation.format(domain=name),
        htmlSnippet=snippet.strip()[:SNIPPET_LENGTH] if snippet else None,
    )


def _script_warning(analysis: ScriptAnalysis) -> ConversionWarning:
    replacement = analysis.replacement
    removable = replacement is not None and replacement.type in ("remove", "built-in")
    return _warning(
        "script",
        analysis.snippet,
        severity="info" if removable else "warning",
        message=f"{analysis.description} (purpose: {analysis.purpose}) was removed",
        recommendation=replacement.instructions if replacement else None,
    )


###############################################################################
# Text helpers
###############################################################################

_TAG_RE = re.compile(r"<[^>]+>")
_SCRIPT_RE = re.compile(r"<script\b([^>]*)>([\s\S]*?)(?:</script\s*>|$)", re.IGNORECASE)
_STYLE_RE = re.compile(r"<style\b[^>]*>[\s\S]*?(?:</style\s*>|$)", re.IGNORECASE)
_BLOCK_END_RE = re.compile(r"</(?:p|div|li|h[1-6])\s*>|<br\s*/?>", re.IGNORECASE)
_WRAPPER_RE = re.compile(
    r"<div[^>]*class=[\"'][^\"']*(?:gadgetStyleBody|gadgetContentEditableArea)[^\"']*[\"'][^>]*>",
    re.IGNORECASE,
)
_TRAILING_DIV_RE = re.compile(r"</div\s*>\s*$", re.IGNORECASE)
_OPEN_TAG_RE = re.compile(r"<[a-zA-Z][^>]*>")
_HANDLER_ATTR_RE = re.compile(
    r"(?:[\s/]|(?<=[\"']))(on[a-z]+)\s*=\s*(\"[^\"]*\"|'[^']*'|[^\s>]+)",
    re.IGNORECASE,
)
_URL_ATTR_RE = re.compile(
    r"\s(href|src|action|formaction)\s*=\s*(\"[^\"]*\"|'[^']*'|[^\s>]+)",
    re.IGNORECASE,
)
_URL_ATTRS = frozenset({"href", "src", "action", "formaction", "xlink:href"})
# Lookahead split: every top-level structural tag starts a new segment.
_BLOCK_SPLIT_RE = re.compile(r"(?=<(?:h[1-6]|p|ul|ol|div|hr|iframe)\b)", re.IGNORECASE)

_LOOKS_LIKE_HTML = (
    re.compile(r"^<[a-z]", re.IGNORECASE),
    re.compile(r"^&lt;[a-z]", re.IGNORECASE),
    re.compile(r"class=[\"']"),
    re.compile(r"style=[\"']"),
)


def _strip_tags(html: str) -> str:
    return re.sub(r"\s+", " ", _TAG_RE.sub(" ", html or "")).strip()


def extract_text_content(html: str) -> str:
    """Plain text of ``html`` with block-level ends turned into line breaks."""
    clean = _SCRIPT_RE.sub("", html or "")
    clean = _STYLE_RE.sub("", clean)
    clean = _BLOCK_END_RE.sub("\n", clean)
    clean = _TAG_RE.sub(" ", clean)
    lines = (re.sub(r"[ \t\r\f\v]+", " ", line).strip() for line in clean.split("\n"))
    return "\n".join(line for line in lines if line)


def looks_like_html(text: str) -> bool:
    """True when text left after tag stripping still reads as markup."""
    trimmed = (text or "").strip()
    return any(p.search(trimmed) for p in _LOOKS_LIKE_HTML)


def _unquote(value: str) -> str:
    if len(value) >= 2 and value[0] == value[-1] and value[0] in "\"'":
        return value[1:-1]
    return value


###############################################################################
# Pre-processing
###############################################################################

def _extract_scripts(html: str) -> Tuple[str, List[str]]:
    """Remove ``<script>``/``<style>`` blocks; return the cleaned markup and script bodies."""
    scripts: List[str] = []

    def _take(match: "re.Match[str]") -> str:
        body = match.group(2).strip()
        # external scripts are classified by their tag, e.g. the tracker URL
        scripts.append(body or match.group(0).strip())
        return ""

    # removing one tag can splice a new one together, e.g. "<scri<script></script>pt>"
    cleaned = html
    while True:
        previous = cleaned
        cleaned = _STYLE_RE.sub("", _SCRIPT_RE.sub(_take, cleaned))
        if cleaned == previous:
            return cleaned, scripts


def _strip_inline_handlers(html: str) -> Tuple[str, List[str]]:
    """Drop ``on*=`` attributes and ``javascript:`` URLs from every tag."""
    handlers: List[str] = []

    def _clean_url(match: "re.Match[str]") -> str:
        value = _unquote(match.group(2))
        if _UNSAFE_SCHEME_RE.match(value):
            handlers.append(value.split(":", 1)[-1].strip())
            return ""
        return match.group(0)

    def _clean_tag(match: "re.Match[str]") -> str:
        tag = match.group(0)

        def _drop(attr: "re.Match[str]") -> str:
            handlers.append(_unquote(attr.group(2)).strip())
            return ""

        tag = _HANDLER_ATTR_RE.sub(_drop, tag)
        return _URL_ATTR_RE.sub(_clean_url, tag)

    return _OPEN_TAG_RE.sub(_clean_tag, html), handlers


def _remove_executable(html: str) -> Tuple[str, List[str], List[str]]:
    """Strip scripts and handlers until the markup no longer changes."""
    scripts: List[str] = []
    handlers: List[str] = []
    cleaned = html
    while True:
        previous = cleaned
        cleaned, found = _extract_scripts(cleaned)
        scripts.extend(found)
        cleaned, found = _strip_inline_handlers(cleaned)
        handlers.extend(found)
        if cleaned == previous:
            return cleaned, scripts, handlers


def sanitize_legacy_html(html: str) -> str:
    """Re-serialize markup for an ``html`` block with nothing executable left.

    The regex passes above work on raw text; this pass parses the fragment
    and drops whatever a browser would still run from it.
    """
    soup = BeautifulSoup(html or "", "html.parser")
    for tag in soup.find_all(["script", "style"]):
        tag.decompose()
    for tag in soup.find_all(True):
        for attr in list(tag.attrs):
            value = tag.attrs[attr]
            if isinstance(value, list):
                value = " ".join(value)
            if attr.lower().startswith("on"):
                del tag.attrs[attr]
            elif attr.lower() in _URL_ATTRS and _UNSAFE_SCHEME_RE.match(re.sub(r"[\x00-\x20]", "", str(value))):
                del tag.attrs[attr]
    return str(soup).strip()


def _strip_wrappers(html: str) -> str:
    cleaned, count = _WRAPPER_RE.subn("", html)
    for _ in range(count):
        cleaned, removed = _TRAILING_DIV_RE.subn("", cleaned)
        if not removed:
            break
    return cleaned


###############################################################################
# Pattern matchers
###############################################################################

@dataclass
class PatternMatch:
    type: str
    block: Optional[Block]
    warnings: List[ConversionWarning] = field(default_factory=list)


def _first_tag(html: str, name: str) -> Optional[Tag]:
    found = BeautifulSoup(html, "html.parser").find(name)
    return found if isinstance(found, Tag) else None


def _attr(tag: Tag, name: str) -> Optional[str]:
    value = tag.get(name)
    if isinstance(value, list):
        value = " ".join(value)
    return value.strip() if value else None


_HEADING_RE = re.compile(r"<h([1-6])\b[^>]*>([\s\S]*?)</h\1\s*>", re.IGNORECASE)
_IFRAME_RE = re.compile(r"<iframe\b[^>]*>", re.IGNORECASE)
_LIST_OPEN_RE = re.compile(r"<(ul|ol)\b[^>]*>", re.IGNORECASE)
_LI_RE = re.compile(r"<li\b[^>]*>([\s\S]*?)(?=</li\s*>|<li\b|$)", re.IGNORECASE)
_IMG_RE = re.compile(r"<img\b[^>]*>", re.IGNORECASE)
_PARAGRAPH_RE = re.compile(r"<p\b[^>]*>([\s\S]*?)(?:</p\s*>|$)", re.IGNORECASE)
_IMAGE_ONLY_RE = re.compile(r"^(?:\s|&nbsp;)*<img\b[^>]*>(?:\s|&nbsp;)*$", re.IGNORECASE)
_BUTTON_CLASS_RE = re.compile(r"btn|button", re.IGNORECASE)
_HR_RE = re.compile(r"<hr\b[^>]*>", re.IGNORECASE)


def _match_heading(html: str) -> Optional[PatternMatch]:
    match = _HEADING_RE.search(html)
    if not match:
        return None
    text = _strip_tags(match.group(2))
    if not text:
        return None
    return PatternMatch("heading", heading_block(int(match.group(1)), text))


def _match_iframe(html: str) -> Optional[PatternMatch]:
    match = _IFRAME_RE.search(html)
    if not match:
        return None
    tag = _first_tag(match.group(0), "iframe")
    src = _attr(tag, "src") if tag is not None else None
    if not src:
        return None

    block = iframe_block(src, _attr(tag, "width"), _attr(tag, "height"))
    if is_allowlisted_embed(src):
        return PatternMatch("iframe", block)
    return PatternMatch("iframe", block, [_warning("unsupported_embed", html, domain=_domain(src))])


def _match_list(html: str) -> Optional[PatternMatch]:
    opening = _LIST_OPEN_RE.search(html)
    if not opening:
        return None
    name = opening.group(1).lower()
    body = html[opening.end():]
    close = re.search(rf"</{name}\s*>", body, re.IGNORECASE)
    if close:
        body = body[: close.start()]

    items = [text for text in (_strip_tags(m.group(1)) for m in _LI_RE.finditer(body)) if text]
    if not items:
        return None
    return PatternMatch("list", list_block(items, ordered=name == "ol"))


def _match_image(html: str) -> Optional[PatternMatch]:
    for raw in _IMG_RE.findall(html):
        tag = _first_tag(raw, "img")
        src = _attr(tag, "src") if tag is not None else None
        if not src:
            continue
        warnings: List[ConversionWarning] = []
        if re.search(r"\w", extract_text_content(html)):
            warnings.append(
                _warning(
                    "complex_html",
                    html,
                    message="Text next to an image was not converted",
                    recommendation="Add the surrounding text as its own text block if it is still needed.",
                )
            )
        return PatternMatch("image", image_block(src, _attr(tag, "alt")), warnings)
    return None


def _match_paragraph(html: str) -> Optional[PatternMatch]:
    match = _PARAGRAPH_RE.search(html)
    if not match:
        return None
    content = match.group(1).strip()
    if not content:
        return None

    if _IMAGE_ONLY_RE.match(content):
        img = _first_tag(content, "img")
        src = _attr(img, "src") if img is not None else None
        if src:
            return PatternMatch("image", image_block(src, _attr(img, "alt")))

    for anchor in BeautifulSoup(content, "html.parser").find_all("a", href=True):
        if not _BUTTON_CLASS_RE.search(_attr(anchor, "class") or ""):
            continue
        label = anchor.get_text(" ", strip=True)
        href = _attr(anchor, "href")
        if label and href:
            return PatternMatch("button", button_block(label, href))

    text = extract_text_content(content)
    if not text:
        return None
    return PatternMatch("text", text_block(text))


def _match_divider(html: str) -> Optional[PatternMatch]:
    if _HR_RE.search(html):
        return PatternMatch("divider", divider_block())
    return None


# Fixed priority order; the first matcher that claims a segment wins.
MATCHERS = (
    _match_heading,
    _match_iframe,
    _match_list,
    _match_image,
    _match_paragraph,
    _match_divider,
)


def _fallback(segment: str) -> Tuple[Optional[Block], List[ConversionWarning]]:
    """Handle a segment no matcher claimed."""
    text = extract_text_content(segment)
    if text:
        is_script, _kind = detect_script_type(text)
        if is_script:
            return None, [_script_warning(analyze_script(text))]
        if looks_like_html(text):
            return html_block(sanitize_legacy_html(segment)), [_warning("complex_html", segment)]
        if len(text) > 10:
            return text_block(text), []
    if len(segment.strip()) > 50:
        return html_block(sanitize_legacy_html(segment)), [_warning("complex_html", segment)]
    return None, []


###############################################################################
# Entry points
###############################################################################

def _convert(html: str) -> ConversionResult:
    blocks: List[Block] = []
    warnings: List[ConversionWarning] = []
    total = 0
    skipped = 0

    remaining, scripts, handlers = _remove_executable((html or "").strip())
    remaining, more_scripts, more_handlers = _remove_executable(_strip_wrappers(remaining.strip()))
    scripts.extend(more_scripts)
    handlers.extend(more_handlers)

    for code in scripts:
        warnings.append(_script_warning(analyze_script(code)))
    for code in handlers:
        if len(code) > 10:
            analysis = analyze_script(code)
            analysis.description = f"Inline event handler: {analysis.description}"
            warnings.append(_script_warning(analysis))

    for segment in _BLOCK_SPLIT_RE.split(remaining):
        if not segment.strip():
            continue
        total += 1

        match = next((m for m in (matcher(segment) for matcher in MATCHERS) if m is not None), None)
        if match is not None:
            block, found = match.block, match.warnings
        else:
            block, found = _fallback(segment)

        warnings.extend(found)
        if block is not None:
            blocks.append(block)
        else:
            skipped += 1

    return ConversionResult(
        blocks=blocks,
        warnings=warnings,
        stats=ConversionStats(
            totalElements=total,
            convertedBlocks=len(blocks),
            skippedElements=skipped,
            warnings=len(warnings),
        ),
    )


def convert_html_snippet(html: str) -> ConversionResult:
    """Convert one custom HTML region into blocks.

    Never raises for any input string.  If conversion itself breaks on some
    pathological markup, the region is kept as a single ``html`` block (with
    executable content removed) and flagged for review.
    """
    try:
        return _convert(html)
    except Exception as exc:  # the converter must stay total over its input
        try:
            cleaned = sanitize_legacy_html(_remove_executable(html or "")[0])
        except Exception:  # markup the parser rejects is dropped, the warning below still reports it
            cleaned = ""
        blocks = [html_block(cleaned)] if cleaned else []
        warnings = [
            _warning(
                "complex_html",
                cleaned,
                message=f"HTML could not be converted ({type(exc).__name__}); preserved as raw block",
            )
        ]
        return ConversionResult(
            blocks=blocks,
            warnings=warnings,
            stats=ConversionStats(
                totalElements=1,
                convertedBlocks=len(blocks),
                skippedElements=1 - len(blocks),
                warnings=1,
            ),
        )


HtmlUnit = Union[CustomHtmlBlock, Mapping[str, Any]]


def _as_unit(unit: HtmlUnit) -> CustomHtmlBlock:
    if isinstance(unit, CustomHtmlBlock):
        return unit
    return CustomHtmlBlock.model_validate(unit)


def convert_custom_html_blocks(custom_html: Iterable[HtmlUnit]) -> ConversionResult:
    """Convert every custom HTML region of a page, in order.

    Regions inside a recognised gadget are not parsed: layout gadgets are
    dropped silently and the rest become one placeholder block each, with a
    matching entry in ``widget_mapping``.
    """
    blocks: List[Block] = []
    warnings: List[ConversionWarning] = []
    widget_mapping: List[WidgetMapping] = []
    total = 0
    skipped = 0

    for unit in map(_as_unit, custom_html):
        wa_type, target = detect_wa_widget(unit.location)

        if wa_type and target:
            if target.murmurant_type == SKIP:
                total += 1
                skipped += 1
                continue
            if target.auto_replace:
                config = extract_widget_config(unit.html_snippet, unit.location)
                blocks.append(
                    placeholder_block(
                        target.murmurant_type,
                        wa_type,
                        config.properties.model_dump(by_alias=True, exclude_none=True) if config else None,
                    )
                )
                widget_mapping.append(
                    WidgetMapping(waType=wa_type, murmurantType=target.murmurant_type, position=len(blocks) - 1)
                )
                total += 1
                continue

        result = convert_html_snippet(unit.html_snippet)
        blocks.extend(result.blocks)
        warnings.extend(result.warnings)
        total += result.stats.total_elements
        skipped += result.stats.skipped_elements

    return ConversionResult(
        blocks=blocks,
        warnings=warnings,
        widgetMapping=widget_mapping,
        stats=ConversionStats(
            totalElements=total,
            convertedBlocks=len(blocks),
            skippedElements=skipped,
            warnings=len(warnings),
        ),
    )


def clean_title(title: str) -> str:
    """Drop the "Site Name - " prefix legacy page titles carry."""
    _prefix, sep, rest = (title or "").partition(" - ")
    if sep and rest.strip():
        return rest.strip()
    return (title or "").strip()


def _is_web_url(src: str) -> bool:
    return bool(src) and not _UNSAFE_SCHEME_RE.match(src)


def convert_crawled_page(page: Union[PageContent, Mapping[str, Any]]) -> ConversionResult:
    """Convert a whole crawled page: title heading, custom HTML, then page embeds."""
    if not isinstance(page, PageContent):
        page = PageContent.model_validate(page)

    blocks: List[Block] = []
    title = clean_title(page.title)
    if title:
        blocks.append(heading_block(1, title))
    offset = len(blocks)

    batch = convert_custom_html_blocks(page.custom_html)
    blocks.extend(batch.blocks)
    warnings = list(batch.warnings)
    widget_mapping = [m.model_copy(update={"position": m.position + offset}) for m in batch.widget_mapping]

    seen = {b.data.get("src") for b in blocks if b.type == "iframe"}
    added_embeds = 0
    for embed in page.embeds:
        if embed.src in seen or not _is_web_url(embed.src):
            continue
        seen.add(embed.src)
        blocks.append(iframe_block(embed.src, embed.width, embed.height))
        added_embeds += 1
        if not is_allowlisted_embed(embed.src):
            warnings.append(_warning("unsupported_embed", embed.src, domain=embed.domain or _domain(embed.src)))

    external_hosts: List[str] = []
    for image in page.images:
        host = _domain(image.src) if image.is_external else None
        if host and host not in external_hosts:
            external_hosts.append(host)
            warnings.append(_warning("external_resource", image.src, domain=host))

    return ConversionResult(
        blocks=blocks,
        warnings=warnings,
        widgetMapping=widget_mapping,
        stats=ConversionStats(
            totalElements=batch.stats.total_elements + offset + added_embeds,
            convertedBlocks=len(blocks),
            skippedElements=batch.stats.skipped_elements,
            warnings=len(warnings),
        ),
    )
