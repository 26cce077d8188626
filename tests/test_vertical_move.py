from __future__ import annotations

import pytest

from sequential_text.caret import (
    HorizontalMemory,
    index_for_point,
    is_at_vertical_edge,
    landing_index,
    native_vertical_move,
    resolve_vertical_move,
)
from sequential_text.caret.vertical import probe_index
from sequential_text.region import Direction, GridLayout, LayoutUnavailableError, Region


def make_region(text: str, *, columns: int = 40) -> Region:
    return Region(text, layout=GridLayout(columns=columns))


def test_probe_index_steps_back_at_end_of_buffer() -> None:
    assert probe_index(5, 5) == 4
    assert probe_index(0, 0) == 0
    assert probe_index(2, 5) == 2


def test_down_moves_keep_remembered_column() -> None:
    region = make_region("hello world\nhi\nlonger line")
    memory = HorizontalMemory()

    first = resolve_vertical_move(region, 8, Direction.DOWN, memory)
    second = resolve_vertical_move(region, first, Direction.DOWN, memory)
    third = resolve_vertical_move(region, second, Direction.DOWN, memory)

    assert memory.value == 8.0
    assert first == 14  # end of the short "hi" line
    assert second == 23  # column 8 again on the long line
    assert third is None


def test_up_moves_walk_back_to_original_column() -> None:
    region = make_region("hello world\nhi\nlonger line")
    memory = HorizontalMemory()

    middle = resolve_vertical_move(region, 23, Direction.UP, memory)
    top = resolve_vertical_move(region, middle, Direction.UP, memory)

    assert (middle, top) == (14, 8)
    assert resolve_vertical_move(region, top, Direction.UP, memory) is None


def test_phantom_end_snaps_to_end_of_short_line() -> None:
    region = make_region("short\nmuch longer line")
    memory = HorizontalMemory()

    target = resolve_vertical_move(region, region.length, Direction.UP, memory)

    assert memory.value == 16.0
    assert target == 5


def test_phantom_end_on_soft_wrapped_line_stays_on_that_line() -> None:
    region = make_region("abcdefgh", columns=4)
    memory = HorizontalMemory()

    target = resolve_vertical_move(region, 8, Direction.UP, memory)

    assert target == 3


def test_existing_memory_is_not_overwritten() -> None:
    region = make_region("abcdef\nabcdef")
    memory = HorizontalMemory()
    memory.store(region, 5)

    target = resolve_vertical_move(region, 8, Direction.UP, memory)

    assert target == 5
    assert memory.value == 5.0


def test_rounding_threshold_decides_insertion_point() -> None:
    region = make_region("abcdef\nabcdef")
    line = region.require_layout().line_fragment(0)

    assert index_for_point(region, 2.4, line) == 2
    assert index_for_point(region, 2.5, line) == 3
    assert index_for_point(region, 2.6, line, threshold=0.7) == 2


def test_landing_uses_first_or_last_line() -> None:
    region = make_region("top line\nbottom")

    assert landing_index(region, 3.0, from_end=False) == 3
    assert landing_index(region, 3.0, from_end=True) == 12
    assert landing_index(region, 30.0, from_end=True) == region.length
    assert landing_index(make_region(""), 7.0, from_end=False) == 0


def test_vertical_edges() -> None:
    region = make_region("one\ntwo")

    assert is_at_vertical_edge(region, 2, Direction.UP)
    assert not is_at_vertical_edge(region, 2, Direction.DOWN)
    assert is_at_vertical_edge(region, region.length, Direction.DOWN)


def test_horizontal_direction_is_rejected() -> None:
    with pytest.raises(ValueError):
        resolve_vertical_move(make_region("ab"), 0, Direction.LEFT, HorizontalMemory())


def test_missing_layout_raises_for_callers_to_degrade() -> None:
    memory = HorizontalMemory()

    with pytest.raises(LayoutUnavailableError):
        resolve_vertical_move(Region("a\nb"), 0, Direction.DOWN, memory)
    assert not memory.has_value()


def test_native_fallback_preserves_character_column() -> None:
    text = "ab\ncdef\ng"

    assert native_vertical_move(text, 6, Direction.UP) == 2
    assert native_vertical_move(text, 6, Direction.DOWN) == 9
    assert native_vertical_move(text, 1, Direction.UP) == 0
    assert native_vertical_move(text, 8, Direction.DOWN) == 9
