"""
Classification of inline JavaScript found in legacy pages.

Inline scripts are never carried over into migrated blocks.  Each script (or
inline event handler) is matched against an ordered table of pattern groups
to guess what it was doing, so that a reviewer can be pointed at the native
feature that replaces it.  The first group with a matching pattern wins, so
specific plugins are listed before generic effects.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Dict, List, Optional, Pattern, Sequence, Tuple

from bs4 import BeautifulSoup

from wa_migration.models import ScriptAnalysis, ScriptReplacement

__all__ = [
    "SCRIPT_PATTERNS",
    "analyze_script",
    "analyze_scripts_in_html",
    "detect_script_type",
    "get_script_issue_summary",
]

MATCH_CONFIDENCE = 0.8
JQUERY_CONFIDENCE = 0.3
UNKNOWN_CONFIDENCE = 0.1
SNIPPET_LENGTH = 200


@dataclass(frozen=True)
class ScriptPattern:
    purpose: str
    patterns: Tuple[Pattern[str], ...]
    description: str
    replacement: ScriptReplacement


def _group(purpose: str, patterns: Sequence[str], description: str, **replacement) -> ScriptPattern:
    return ScriptPattern(
        purpose=purpose,
        patterns=tuple(re.compile(p, re.IGNORECASE) for p in patterns),
        description=description,
        replacement=ScriptReplacement(**replacement),
    )


SCRIPT_PATTERNS: Tuple[ScriptPattern, ...] = (
    # Camera.js is the slider bundled with many vendor themes
    _group(
        "carousel",
        [
            r"slick\s*\(",
            r"owl[\s-]?carousel",
            r"swiper",
            r"\.carousel\s*\(",
            r"bxSlider",
            r"flexslider",
            r"\.slider\s*\(",
            r"cycle\s*\(",
            r"slideshow",
            r"camera_wrap",
            r"\.camera\s*\(",
            r"cameraNavigation",
            r"cameraAutoAdvance",
            r"nivo[\s-]?slider",
        ],
        "Image carousel or slider",
        type="block",
        blockType="carousel",
        action="Replace with Carousel block",
        instructions=(
            "The images from this carousel will be added to a native Carousel block. "
            "Settings like auto-advance and navigation will be configured automatically."
        ),
    ),
    _group(
        "lightbox",
        [
            r"lightbox",
            r"fancybox",
            r"magnific[\s-]?popup",
            r"colorbox",
            r"\.modal.*img",
            r"photo[\s-]?swipe",
        ],
        "Image lightbox or popup gallery",
        type="block",
        blockType="gallery",
        action="Replace with Gallery block",
        instructions="Add a Gallery block. Images will automatically open in a lightbox when clicked.",
    ),
    _group(
        "accordion",
        [
            r"\.accordion\s*\(",
            r"slideToggle",
            r"slideUp.*slideDown|slideDown.*slideUp",
            r"collapse.*toggle",
            r"\.panel.*collapse",
        ],
        "Collapsible accordion sections",
        type="block",
        blockType="accordion",
        action="Replace with Accordion block",
        instructions="Add an Accordion block and copy the section titles and content into each panel.",
    ),
    _group(
        "tabs",
        [r"\.tabs?\s*\(", r"tab-content", r"\.tab-pane", r"ui-tabs"],
        "Tabbed content sections",
        type="block",
        blockType="tabs",
        action="Replace with Tabs block",
        instructions="Add a Tabs block and create a tab for each section of content.",
    ),
    _group(
        "analytics",
        [
            r"\bga\s*\(",
            r"gtag\s*\(",
            r"google.*analytics",
            r"fbq\s*\(",
            r"facebook.*pixel",
            r"_gaq",
            r"trackEvent",
            r"pageview",
            r"hotjar",
            r"mixpanel",
            r"segment\.com",
        ],
        "Analytics or tracking script",
        type="remove",
        action="Remove - use built-in analytics",
        instructions=(
            "The new site has built-in analytics. This tracking script can be safely removed. "
            "If you need specific tracking, configure it in Site Settings > Analytics."
        ),
    ),
    _group(
        "countdown",
        [
            r"countdown",
            r"timer.*date|date.*timer",
            r"setInterval.*getTime",
            r"new Date\(.*\).*-.*new Date",
        ],
        "Countdown timer",
        type="block",
        blockType="countdown",
        action="Replace with Countdown block",
        instructions="Add a Countdown block and set the target date. The countdown will automatically update.",
    ),
    _group(
        "form-validation",
        [
            r"\.validate\s*\(",
            r"checkValidity",
            r"setCustomValidity",
            r"required.*pattern",
            r"form.*submit.*prevent",
        ],
        "Form validation script",
        type="built-in",
        action="Remove - forms have built-in validation",
        instructions="Native forms validate input. Use the form builder to set required fields and validation rules.",
    ),
    _group(
        "smooth-scroll",
        [r"smooth.*scroll", r"scrollTo.*behavior", r"animate.*scrollTop", r"scroll-behavior"],
        "Smooth scrolling for anchor links",
        type="built-in",
        action="Remove - smooth scroll is built-in",
        instructions="Smooth scrolling is enabled by default. Anchor links will scroll smoothly.",
    ),
    _group(
        "sticky-header",
        [
            r"sticky",
            r"position\s*[:=]\s*['\"]?fixed",
            r"scrollTop\s*\(\s*\)\s*>",
            r"pageYOffset\s*>",
        ],
        "Header pinned to the top while scrolling",
        type="built-in",
        action="Remove - header behaviour is set by the layout",
        instructions="The site layout controls whether the header stays visible. This script is not needed.",
    ),
    _group(
        "social-share",
        [
            r"addthis",
            r"sharethis",
            r"share.*facebook|facebook.*share",
            r"share.*twitter|twitter.*share",
            r"social.*share|share.*social",
        ],
        "Social media sharing buttons",
        type="block",
        blockType="social-share",
        action="Replace with Social Share block",
        instructions="Add a Social Share block to add sharing buttons for Facebook, Twitter, LinkedIn, and email.",
    ),
    _group(
        "modal",
        [r"\.modal\s*\(", r"showModal", r"dialog.*open", r"popup.*show|show.*popup"],
        "Popup modal or dialog",
        type="manual",
        action="Review - may need redesign",
        instructions=(
            "Modals often contain important content. Consider whether this content should be "
            "on its own page, in an accordion, or if a modal is truly needed."
        ),
    ),
    _group(
        "tooltip",
        [r"tooltip", r"tippy\s*\(", r"qtip", r"\.popover\s*\("],
        "Hover tooltips",
        type="manual",
        action="Review - move tooltip text into the page",
        instructions="Tooltips hide content from touch users. Move the hint text next to the element it describes.",
    ),
    _group(
        "lazy-load",
        [r"lazy", r"data-src", r"loading.*lazy", r"intersection.*observer.*img"],
        "Lazy loading for images",
        type="built-in",
        action="Remove - lazy loading is automatic",
        instructions="Images are lazy-loaded automatically. This script is not needed.",
    ),
    _group(
        "animation",
        [
            r"\baos\b",
            r"animate\.css",
            r"wow\.js",
            r"scrollreveal",
            r"\.animate\s*\(",
            r"fadeIn|fadeOut|slideIn|slideOut",
        ],
        "Scroll or fade animations",
        type="built-in",
        action="Remove - subtle animations are built-in",
        instructions="Subtle, accessible animations are built in. Avoid excessive animation which can cause accessibility issues.",
    ),
    _group(
        "menu-toggle",
        [r"menu.*toggle|toggle.*menu", r"hamburger", r"nav.*mobile|mobile.*nav", r"\.navbar-toggle"],
        "Mobile menu toggle",
        type="built-in",
        action="Remove - mobile menu is automatic",
        instructions="A mobile-friendly menu is generated automatically. This script is not needed.",
    ),
)

_JQUERY_RE = re.compile(r"\$\(|jQuery", re.IGNORECASE)

_JQUERY_REPLACEMENT = ScriptReplacement(
    type="manual",
    action="Review manually",
    instructions=(
        "This jQuery code couldn't be automatically identified. Review what it does and "
        "determine if a native feature can replace it."
    ),
)

_UNKNOWN_REPLACEMENT = ScriptReplacement(
    type="manual",
    action="Review manually",
    instructions=(
        "This script couldn't be identified. Inline JavaScript is not allowed for security "
        "reasons. Determine what functionality is needed and use a native feature."
    ),
)


def analyze_script(code: str) -> ScriptAnalysis:
    """Classify one script body or handler and suggest a replacement."""
    trimmed = (code or "").strip()
    snippet = trimmed[:SNIPPET_LENGTH]

    for group in SCRIPT_PATTERNS:
        if any(regex.search(trimmed) for regex in group.patterns):
            return ScriptAnalysis(
                purpose=group.purpose,
                description=group.description,
                confidence=MATCH_CONFIDENCE,
                replacement=group.replacement,
                snippet=snippet,
            )

    if _JQUERY_RE.search(trimmed):
        return ScriptAnalysis(
            purpose="unknown",
            description="jQuery code with unknown purpose",
            confidence=JQUERY_CONFIDENCE,
            replacement=_JQUERY_REPLACEMENT,
            snippet=snippet,
        )

    return ScriptAnalysis(
        purpose="unknown",
        description="Unknown JavaScript code",
        confidence=UNKNOWN_CONFIDENCE,
        replacement=_UNKNOWN_REPLACEMENT,
        snippet=snippet,
    )


def _is_event_handler(attr: str) -> bool:
    return attr.lower().startswith("on") and len(attr) > 2


def analyze_scripts_in_html(html: str) -> List[ScriptAnalysis]:
    """Classify every ``<script>`` body and inline event handler in ``html``.

    Handlers shorter than 11 characters (``return false;`` style stubs aside)
    are ignored.  Handler analyses have their description prefixed so the
    reviewer can tell them apart from script tags.
    """
    soup = BeautifulSoup(html or "", "html.parser")
    results: List[ScriptAnalysis] = []

    for script in soup.find_all("script"):
        content = script.get_text().strip()
        if content:
            results.append(analyze_script(content))

    for tag in soup.find_all(True):
        for attr, value in tag.attrs.items():
            if not _is_event_handler(attr):
                continue
            content = (" ".join(value) if isinstance(value, list) else str(value)).strip()
            if len(content) > 10:
                analysis = analyze_script(content)
                analysis.description = f"Inline event handler: {analysis.description}"
                results.append(analysis)

    return results


# Text that starts like a statement, or calls into the DOM, once tags are gone.
_GENERAL_SCRIPT_PATTERNS: Tuple[Pattern[str], ...] = tuple(
    re.compile(p)
    for p in (
        r"^function\s*\w*\s*\(",
        r"^var\s+\w+\s*=",
        r"^let\s+\w+\s*=",
        r"^const\s+\w+\s*=",
        r"^document\.",
        r"^window\.",
        r"\.addEventListener",
        r"\.onclick\s*=",
        r"^if\s*\(",
        r"^for\s*\(",
        r"^while\s*\(",
    )
)

_JQUERY_TEXT_RE = re.compile(r"^jq\$\(|^\$\(|\.ready\(|\.click\(|\.on\(")
_ANALYTICS_TEXT_RE = re.compile(r"\bga\(|gtag\(|fbq\(|_gaq", re.IGNORECASE)


def detect_script_type(text: str) -> Tuple[bool, Optional[str]]:
    """Guess whether plain text extracted from markup is really code.

    Returns ``(is_script, kind)`` where ``kind`` is ``"jquery"``,
    ``"analytics"`` or ``"general"``.
    """
    trimmed = (text or "").strip()
    if _JQUERY_TEXT_RE.search(trimmed):
        return True, "jquery"
    if _ANALYTICS_TEXT_RE.search(trimmed):
        return True, "analytics"
    if any(p.search(trimmed) for p in _GENERAL_SCRIPT_PATTERNS):
        return True, "general"
    return False, None


def get_script_issue_summary(analyses: Sequence[ScriptAnalysis]) -> Dict[str, int]:
    """Count analyses that can be auto-fixed, need review, or can be removed."""

    def kind(a: ScriptAnalysis) -> Optional[str]:
        return a.replacement.type if a.replacement else None

    return {
        "canAutoFix": sum(1 for a in analyses if kind(a) == "block" and a.confidence > 0.5),
        "needsReview": sum(1 for a in analyses if kind(a) == "manual" or a.confidence <= 0.5),
        "canRemove": sum(1 for a in analyses if kind(a) in ("built-in", "remove")),
    }
