import unittest

import pytest

from column_resolution import (
    Column,
    FormatterProps,
    HelpHeader,
    Placeholder,
    active_breakpoint,
    merge_base_meta,
    placeholder_width,
    resolve_columns,
    resolve_widths,
    with_help_header,
)
from config_paths import EngineConfig


def _columns():
    return [
        Column(key="name", name="Name", editable=True, filterable=True, sortable=True),
        Column(key="qty", name="Qty", width=50, tooltip="Units on hand"),
    ]


class LoadingFlagsTests(unittest.TestCase):
    def test_loading_disables_every_interaction(self):
        cols = resolve_columns(_columns(), {"sortable": True}, is_loading=True)
        for c in cols:
            self.assertFalse(c.editable)
            self.assertFalse(c.filterable)
            self.assertFalse(c.sortable)

    def test_loaded_columns_keep_declared_flags(self):
        cols = resolve_columns(_columns())
        self.assertTrue(cols[0].editable)
        self.assertFalse(cols[1].editable)

    def test_loading_swaps_in_placeholder_formatter(self):
        col = resolve_columns(_columns(), is_loading=True)[0]
        out = col.format(3)
        self.assertIsInstance(out, Placeholder)
        self.assertEqual(out.height, 20)

    def test_loading_prefers_column_placeholder_formatter(self):
        custom = Column(key="a", name="A", placeholder_formatter=lambda p: "...")
        col = resolve_columns([custom], is_loading=True)[0]
        self.assertEqual(col.format(1), "...")

    def test_loaded_formatter_renders_missing_as_blank(self):
        col = resolve_columns(_columns())[0]
        self.assertEqual(col.format(None), "")
        self.assertEqual(col.format("x"), "x")

    def test_custom_formatter_receives_props(self):
        seen = []

        def fmt(props: FormatterProps):
            seen.append(props)
            return f"<{props.value}>"

        col = resolve_columns([Column(key="a", formatter=fmt)])[0]
        self.assertEqual(col.format(5, {"a": 5}, 2), "<5>")
        self.assertEqual(seen[0].row_index, 2)
        self.assertIs(seen[0].column, col)


class WidthTests(unittest.TestCase):
    WIDTHS = {"base": [100, None], "md": [80, None]}

    def test_active_breakpoint_width_wins_and_none_keeps_declared(self):
        cols = resolve_columns(_columns(), width_map=self.WIDTHS, breakpoint="md")
        self.assertEqual(cols[0].width, 80)
        self.assertEqual(cols[1].width, 50)

    def test_base_used_without_breakpoint(self):
        cols = resolve_columns(_columns(), width_map=self.WIDTHS)
        self.assertEqual(cols[0].width, 100)

    def test_unknown_breakpoint_falls_back_to_base(self):
        with self.assertLogs("column_resolution", level="WARNING"):
            widths = resolve_widths(self.WIDTHS, "xl", 2)
        self.assertEqual(widths, [100, None])

    def test_short_sequences_are_padded(self):
        self.assertEqual(resolve_widths({"base": [7]}, None, 3), [7, None, None])
        self.assertEqual(resolve_widths(None, None, 2), [None, None])

    def test_active_breakpoint_picks_largest_fitting(self):
        widths = {"base": [], "sm": [], "md": [], "xl": []}
        self.assertEqual(active_breakpoint(120, widths), "md")
        self.assertEqual(active_breakpoint(10, widths), None)
        self.assertEqual(active_breakpoint(500, widths), "xl")

    def test_active_breakpoint_ignores_names_without_widths(self):
        self.assertEqual(active_breakpoint(500, {"base": [], "sm": []}), "sm")


class HeaderTests(unittest.TestCase):
    def test_tooltip_wraps_header(self):
        col = with_help_header(_columns()[1])
        self.assertIsInstance(col.header_renderer, HelpHeader)
        self.assertEqual(col.header_renderer.tooltip, "Units on hand")
        self.assertEqual(col.header_renderer.text, "Qty")

    def test_wrapping_is_idempotent(self):
        once = with_help_header(_columns()[1])
        twice = with_help_header(once)
        self.assertEqual(once, twice)
        self.assertNotIsInstance(twice.header_renderer.renderer, HelpHeader)

    def test_without_tooltip_header_is_untouched(self):
        col = _columns()[0]
        self.assertIs(with_help_header(col), col)

    def test_custom_renderer_is_kept_inside(self):
        col = Column(key="k", tooltip="t", header_renderer="Custom")
        self.assertEqual(with_help_header(col).header_renderer.text, "Custom")

    def test_resolved_header_text(self):
        cols = resolve_columns(_columns())
        self.assertEqual([c.header_text for c in cols], ["Name", "Qty"])
        self.assertEqual(cols[1].tooltip, "Units on hand")


class BaseMetaTests(unittest.TestCase):
    def test_base_fills_unset_fields(self):
        col = merge_base_meta(Column(key="a"), {"sortable": True, "width": 9})
        self.assertTrue(col.sortable)
        self.assertEqual(col.width, 9)

    def test_column_fields_win_over_base(self):
        col = merge_base_meta(
            Column(key="a", sortable=False, width=3), {"sortable": True, "width": 9}
        )
        self.assertFalse(col.sortable)
        self.assertEqual(col.width, 3)

    def test_base_cannot_change_key(self):
        self.assertEqual(merge_base_meta(Column(key="a"), {"key": "b"}).key, "a")

    def test_mapping_columns_are_accepted(self):
        cols = resolve_columns([{"key": "a", "name": "A", "unknown": 1}])
        self.assertEqual(cols[0].name, "A")

    def test_bad_column_raises(self):
        with self.assertRaises(TypeError):
            resolve_columns(["nope"])

    def test_name_falls_back_to_key(self):
        self.assertEqual(resolve_columns([Column(key=4)])[0].name, "4")


@pytest.mark.parametrize("value", [0, 1, 7, 123456, -3, 2.5, "abc", None, float("inf")])
def test_placeholder_width_is_bounded(value):
    width = placeholder_width(value)
    assert 26.667 <= width <= 93.333


def test_placeholder_width_is_deterministic():
    assert placeholder_width("alpha") == placeholder_width("alpha")
    assert placeholder_width(42) == placeholder_width(42)


def test_placeholder_width_formula():
    # (1 * 137) % 11 + 4 = 9 -> 9 / 15
    assert placeholder_width(1) == 60.0
    assert placeholder_width(0) == 26.667


def test_placeholder_width_follows_config():
    cfg = EngineConfig(placeholder_multiplier=1, placeholder_modulus=2, placeholder_floor=1)
    assert placeholder_width(1, cfg) == round(2 / 3 * 100, 3)


if __name__ == "__main__":
    unittest.main()
