import os
import sys
import unittest

PROJECT_ROOT = os.path.abspath(os.path.join(os.path.dirname(__file__), ".."))
if PROJECT_ROOT not in sys.path:
    sys.path.insert(0, PROJECT_ROOT)

from wa_migration.models import Block
from wa_migration.parsers.block_schema import (
    BLOCK_TYPES,
    button_block,
    divider_block,
    heading_block,
    html_block,
    iframe_block,
    image_block,
    list_block,
    make_block,
    placeholder_block,
    require_block_type,
    text_block,
    validate_blocks,
)
from wa_migration.utils.errors import UnknownBlockTypeError


class TestBlockSchema(unittest.TestCase):

    def test_ids_are_unique(self):
        """Verifica se os IDs gerados são únicos."""
        ids = {text_block(f"parágrafo {i}").id for i in range(50)}
        self.assertEqual(len(ids), 50)

    def test_unknown_type_is_rejected(self):
        """Um tipo fora do registro nunca é construído."""
        with self.assertRaises(UnknownBlockTypeError) as ctx:
            make_block("marquee", {"text": "x"})
        self.assertEqual(ctx.exception.block_type, "marquee")

    def test_require_block_type(self):
        self.assertEqual(require_block_type("divider"), "divider")
        with self.assertRaises(UnknownBlockTypeError):
            require_block_type("Divider")

    def test_typed_constructors_fill_required_fields(self):
        """Cada construtor gera um bloco válido."""
        blocks = [
            image_block("/logo.png"),
            list_block([" Um ", "Dois &amp; Três"], True),
            divider_block(),
            button_block(" Entrar ", "/login"),
            iframe_block("https://www.youtube.com/embed/x"),
        ]
        self.assertEqual(validate_blocks(blocks), [])
        self.assertEqual(blocks[0].data, {"src": "/logo.png", "alt": ""})
        self.assertEqual(blocks[1].data, {"items": ["Um", "Dois & Três"], "ordered": True})
        self.assertEqual(blocks[3].data, {"text": "Entrar", "href": "/login", "variant": "primary"})
        self.assertEqual(blocks[4].data["width"], "100%")
        self.assertEqual(blocks[4].data["height"], "400")

    def test_heading_level_is_clamped(self):
        self.assertEqual(heading_block(9, "Título").data["level"], 6)
        self.assertEqual(heading_block(0, "Título").data["level"], 1)

    def test_heading_text_is_unescaped(self):
        self.assertEqual(heading_block(2, " Fish &amp; Chips ").data["text"], "Fish & Chips")

    def test_children_only_for_containers(self):
        child = text_block("filho")
        card = make_block("card", {}, children=[child])
        self.assertEqual(card.children[0].id, child.id)
        with self.assertRaises(ValueError):
            make_block("text", {"content": "x"}, children=[child])

    def test_placeholder_carries_widget_config_in_meta(self):
        block = placeholder_block("events-list", "WaGadgetEventsList", {"kind": "events", "eventCount": 2})
        self.assertEqual(block.type, "placeholder")
        self.assertEqual(block.data["message"], "Native events-list widget will render here")
        self.assertEqual(block.meta["className"], "widget-events-list")
        self.assertEqual(block.meta["widgetConfig"]["eventCount"], 2)

    def test_validate_blocks_reports_missing_data(self):
        good = html_block("<div>legacy</div>")
        bad = Block(id="b1", type="image", data={"src": "/a.png"})
        errors = validate_blocks([good, bad])
        self.assertEqual(errors, ["b1: data.alt is required for 'image'"])

    def test_validate_blocks_raises_for_unknown_type(self):
        with self.assertRaises(UnknownBlockTypeError):
            validate_blocks([Block(id="x", type="blink")])

    def test_registry_contains_converter_output_types(self):
        for name in ("heading", "text", "list", "image", "divider", "button", "iframe", "html", "placeholder"):
            self.assertIn(name, BLOCK_TYPES)


if __name__ == '__main__':
    unittest.main()
