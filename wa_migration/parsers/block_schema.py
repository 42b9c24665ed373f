from __future__ import annotations

import uuid
from html import unescape
from typing import Any, Dict, FrozenSet, Iterable, List, Optional

from wa_migration.models import Block
from wa_migration.utils.errors import UnknownBlockTypeError


# Block types known to the target block registry.
BLOCK_TYPES: FrozenSet[str] = frozenset(
    {
        # text
        "text", "heading", "paragraph", "list", "quote", "code",
        # media
        "image", "gallery", "video", "audio", "file",
        # layout
        "columns", "divider", "spacer", "card", "accordion", "tabs", "carousel",
        # interactive
        "button", "button-group", "form", "interactive-calendar", "map", "search",
        # embed
        "html", "iframe", "social-embed",
        # navigation
        "menu", "breadcrumb", "table-of-contents",
        # data
        "table", "placeholder",
    }
)

CONTAINER_TYPES: FrozenSet[str] = frozenset({"columns", "card", "accordion", "tabs", "carousel"})

# Keys the registry requires in ``data`` for the types this package produces.
REQUIRED_DATA_KEYS: Dict[str, FrozenSet[str]] = {
    "heading": frozenset({"level", "text"}),
    "text": frozenset({"content"}),
    "image": frozenset({"src", "alt"}),
    "list": frozenset({"items", "ordered"}),
    "divider": frozenset(),
    "button": frozenset({"text", "href", "variant"}),
    "iframe": frozenset({"src", "width", "height"}),
    "html": frozenset({"content", "isLegacy"}),
    "placeholder": frozenset({"message"}),
}


def require_block_type(block_type: str) -> str:
    """Return ``block_type`` or raise :class:`UnknownBlockTypeError`."""
    if block_type not in BLOCK_TYPES:
        raise UnknownBlockTypeError(block_type)
    return block_type


def new_block_id() -> str:
    return str(uuid.uuid4())


def make_block(
    block_type: str,
    data: Optional[Dict[str, Any]] = None,
    meta: Optional[Dict[str, Any]] = None,
    children: Optional[List[Block]] = None,
) -> Block:
    require_block_type(block_type)
    if children is not None and block_type not in CONTAINER_TYPES:
        raise ValueError(f"Block type '{block_type}' cannot hold children")
    return Block(
        id=new_block_id(),
        type=block_type,
        version=1,
        data=data or {},
        meta=meta or {},
        children=children,
    )


# --- Builders for the block types the converter emits ---

def heading_block(level: int, text: str) -> Block:
    lvl = max(1, min(6, int(level or 1)))
    return make_block("heading", {"level": lvl, "text": unescape(text.strip())})


def text_block(content: str) -> Block:
    return make_block("text", {"content": unescape(content.strip())})


def image_block(src: str, alt: Optional[str] = None) -> Block:
    return make_block("image", {"src": src, "alt": unescape(alt) if alt else ""})


def list_block(items: Iterable[str], ordered: bool) -> Block:
    return make_block(
        "list",
        {"items": [unescape(item.strip()) for item in items], "ordered": bool(ordered)},
    )


def divider_block() -> Block:
    return make_block("divider")


def button_block(text: str, href: str, variant: str = "primary") -> Block:
    return make_block("button", {"text": unescape(text.strip()), "href": href, "variant": variant})


def iframe_block(src: str, width: Optional[str] = None, height: Optional[str] = None) -> Block:
    return make_block("iframe", {"src": src, "width": width or "100%", "height": height or "400"})


def html_block(raw_html: str) -> Block:
    return make_block("html", {"content": raw_html or "", "isLegacy": True})


def placeholder_block(
    widget_type: str,
    source_widget: str,
    widget_config: Optional[Dict[str, Any]] = None,
) -> Block:
    """Stand-in for a vendor widget that a native feature renders instead."""
    meta: Dict[str, Any] = {"className": f"widget-{widget_type}"}
    if widget_config:
        meta["widgetConfig"] = widget_config
    return make_block(
        "placeholder",
        {
            "widgetType": widget_type,
            "sourceWidget": source_widget,
            "message": f"Native {widget_type} widget will render here",
        },
        meta,
    )


# --- Validation ---

def validate_block(block: Block) -> List[str]:
    """Return the list of contract problems for ``block`` (empty when valid).

    An unknown ``type`` is not reported here: it raises, because no code in
    this package is allowed to produce one.
    """
    require_block_type(block.type)
    errors: List[str] = []
    missing = REQUIRED_DATA_KEYS.get(block.type, frozenset()) - set(block.data)
    for key in sorted(missing):
        errors.append(f"{block.id}: data.{key} is required for '{block.type}'")
    if block.type == "heading":
        level = block.data.get("level")
        if not isinstance(level, int) or not 1 <= level <= 6:
            errors.append(f"{block.id}: heading level must be 1-6")
    if block.children is not None:
        if block.type not in CONTAINER_TYPES:
            errors.append(f"{block.id}: '{block.type}' cannot hold children")
        for child in block.children:
            errors.extend(validate_block(child))
    return errors


def validate_blocks(blocks: Iterable[Block]) -> List[str]:
    errors: List[str] = []
    for block in blocks:
        errors.extend(validate_block(block))
    return errors
