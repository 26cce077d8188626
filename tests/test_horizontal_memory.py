from __future__ import annotations

from sequential_text.caret import HorizontalMemory
from sequential_text.region import GridLayout, Region, TextRange


def make_region(text: str) -> Region:
    return Region(text, layout=GridLayout(columns=20))


def test_store_uses_left_edge_of_glyph() -> None:
    memory = HorizontalMemory()

    memory.store(make_region("abc"), 1)

    assert memory.has_value()
    assert memory.value == 1.0


def test_store_past_end_uses_right_edge_of_last_glyph() -> None:
    memory = HorizontalMemory()

    memory.store(make_region("abc"), 3)

    assert memory.value == 3.0


def test_store_in_empty_region_is_zero() -> None:
    memory = HorizontalMemory()

    memory.store(make_region(""), 0)

    assert memory.value == 0.0


def test_store_from_caret_ignores_ranges() -> None:
    memory = HorizontalMemory()
    region = make_region("abcdef")
    region.set_selection(TextRange(1, 3))

    assert memory.store_from_caret(region) is None
    assert not memory.has_value()

    region.place_caret(4)
    assert memory.store_from_caret(region) == 4.0


def test_missing_layout_degrades_to_no_value() -> None:
    memory = HorizontalMemory()
    memory.store(make_region("abc"), 2)

    assert memory.store(Region("abc"), 1) is None
    assert not memory.has_value()


def test_reset_clears_value() -> None:
    memory = HorizontalMemory()
    memory.store(make_region("abc"), 2)

    memory.reset()

    assert memory.value is None
    assert not memory.has_value()


def test_store_at_end_after_trailing_newline_uses_terminator_edge() -> None:
    memory = HorizontalMemory()

    memory.store(make_region("abc\n"), 4)

    assert memory.value == 3.0
