from __future__ import annotations

from sequential_text import (
    Command,
    CommandKind,
    CoordinatorSettings,
    GridLayout,
    Rect,
    Region,
    TextRange,
    create_coordinator,
)
from sequential_text.coordinator import DocumentCoordinator
from sequential_text.events import BOUNDARY_REACHED, BoundaryReached
from sequential_text.region import Direction
from sequential_text.selection import Position


def make_coordinator(*texts: str, columns: int = 20) -> DocumentCoordinator:
    return create_coordinator(texts, columns=columns, settings=CoordinatorSettings())


def press(coordinator: DocumentCoordinator, kind: CommandKind, *, extend: bool = False):
    return coordinator.handle_command(Command(kind, extend=extend))


def caret_of(coordinator: DocumentCoordinator) -> tuple[str, int]:
    region = coordinator.focused
    assert region is not None
    return region.id, region.caret


def test_up_at_document_top_stays_and_clears_memory() -> None:
    coordinator = make_coordinator("abc", "def")
    reached: list[BoundaryReached] = []
    coordinator.bus.subscribe(BOUNDARY_REACHED, reached.append)
    coordinator.memory.store(coordinator.regions[0], 2)

    result = press(coordinator, CommandKind.MOVE_UP)

    assert result.status == "document_edge"
    assert caret_of(coordinator) == ("region-0", 0)
    assert not coordinator.memory.has_value()
    assert reached and reached[0].direction is Direction.UP


def test_down_crosses_regions_with_remembered_x() -> None:
    coordinator = make_coordinator("abc", "def", "ghi")
    r0 = coordinator.regions[0]
    coordinator.focus_region(r0, 2)

    press(coordinator, CommandKind.MOVE_DOWN)
    assert caret_of(coordinator) == ("region-1", 2)
    assert coordinator.memory.value == 2.0

    press(coordinator, CommandKind.MOVE_DOWN)
    assert caret_of(coordinator) == ("region-2", 2)

    result = press(coordinator, CommandKind.MOVE_DOWN)
    assert result.status == "document_edge"
    assert caret_of(coordinator) == ("region-2", 3)
    assert not coordinator.memory.has_value()


def test_up_lands_on_last_line_of_previous_region() -> None:
    coordinator = make_coordinator("first line\nsecond", "x")
    coordinator.focus_region(coordinator.regions[1], 1)

    result = press(coordinator, CommandKind.MOVE_UP)

    assert result.status == "crossed"
    assert caret_of(coordinator) == ("region-0", 12)


def test_memory_survives_short_region_in_between() -> None:
    coordinator = make_coordinator("abcdef", "ab", "abcdef")
    coordinator.focus_region(coordinator.regions[0], 5)

    press(coordinator, CommandKind.MOVE_DOWN)
    assert caret_of(coordinator) == ("region-1", 2)

    press(coordinator, CommandKind.MOVE_DOWN)
    assert caret_of(coordinator) == ("region-2", 5)


def test_left_and_right_cross_and_reset_memory() -> None:
    coordinator = make_coordinator("abc", "def")
    r0, r1 = coordinator.regions
    coordinator.focus_region(r1, 0)
    coordinator.memory.store(r1, 0)

    press(coordinator, CommandKind.MOVE_LEFT)
    assert caret_of(coordinator) == ("region-0", 3)
    assert not coordinator.memory.has_value()

    press(coordinator, CommandKind.MOVE_RIGHT)
    assert caret_of(coordinator) == ("region-1", 0)

    press(coordinator, CommandKind.MOVE_RIGHT)
    assert caret_of(coordinator) == ("region-1", 1)


def test_right_at_document_end_reports_boundary() -> None:
    coordinator = make_coordinator("abc", "def")
    coordinator.focus_region(coordinator.regions[1], 3)

    result = press(coordinator, CommandKind.MOVE_RIGHT)

    assert result.status == "document_edge"
    assert caret_of(coordinator) == ("region-1", 3)


def test_left_collapses_local_selection_to_its_start() -> None:
    coordinator = make_coordinator("abcdef")
    (region,) = coordinator.regions
    region.set_selection(TextRange(2, 3))

    press(coordinator, CommandKind.MOVE_LEFT)

    assert region.selection == TextRange(2, 0)


def test_down_collapses_multi_region_selection_then_moves() -> None:
    coordinator = make_coordinator("abc", "def", "ghi")
    r0, r1, r2 = coordinator.regions
    coordinator.selection.set_anchor(Position(r0, 1))
    coordinator.selection.apply(Position(r0, 1), Position(r1, 2))

    press(coordinator, CommandKind.MOVE_DOWN)

    assert caret_of(coordinator) == ("region-2", 2)
    assert all(region.selection.is_empty for region in coordinator.regions)
    assert coordinator.selection.anchor is None


def test_up_collapses_to_start_then_moves_up() -> None:
    coordinator = make_coordinator("abc", "def", "ghi")
    r0, r1, r2 = coordinator.regions
    coordinator.selection.apply(Position(r1, 1), Position(r2, 2))

    press(coordinator, CommandKind.MOVE_UP)

    assert caret_of(coordinator) == ("region-0", 1)
    assert not coordinator.selection.selected_regions()


def test_left_only_collapses_multi_region_selection() -> None:
    coordinator = make_coordinator("abc", "def", "ghi")
    r0, r1, r2 = coordinator.regions
    coordinator.selection.apply(Position(r0, 1), Position(r2, 2))

    press(coordinator, CommandKind.MOVE_LEFT)
    assert caret_of(coordinator) == ("region-0", 1)

    coordinator.selection.apply(Position(r0, 1), Position(r2, 2))
    press(coordinator, CommandKind.MOVE_RIGHT)
    assert caret_of(coordinator) == ("region-2", 2)


def test_word_moves_cross_into_neighbor_words() -> None:
    coordinator = make_coordinator("hello world", "foo bar")
    r0, r1 = coordinator.regions

    press(coordinator, CommandKind.WORD_RIGHT)
    assert caret_of(coordinator) == ("region-0", 5)

    coordinator.focus_region(r0, 11)
    press(coordinator, CommandKind.WORD_RIGHT)
    assert caret_of(coordinator) == ("region-1", 3)

    coordinator.focus_region(r1, 0)
    press(coordinator, CommandKind.WORD_LEFT)
    assert caret_of(coordinator) == ("region-0", 6)


def test_word_left_at_document_start_does_nothing() -> None:
    coordinator = make_coordinator("hello", "world")

    result = press(coordinator, CommandKind.WORD_LEFT)

    assert result.status == "document_edge"
    assert caret_of(coordinator) == ("region-0", 0)


def test_global_jumps_clear_selection_and_anchor() -> None:
    coordinator = make_coordinator("abc", "def", "ghi")
    r0, r1, _ = coordinator.regions
    coordinator.selection.set_anchor(Position(r0, 1))
    coordinator.selection.apply(Position(r0, 1), Position(r1, 1))

    press(coordinator, CommandKind.GLOBAL_END)
    assert caret_of(coordinator) == ("region-2", 3)
    assert not coordinator.selection.selected_regions()
    assert coordinator.selection.anchor is None

    press(coordinator, CommandKind.GLOBAL_START)
    assert caret_of(coordinator) == ("region-0", 0)


def test_extending_down_grows_selection_across_regions() -> None:
    coordinator = make_coordinator("abc", "def", "ghi")
    coordinator.focus_region(coordinator.regions[0], 1)

    press(coordinator, CommandKind.MOVE_DOWN, extend=True)
    assert [r.selection for r in coordinator.regions] == [
        TextRange(1, 2),
        TextRange(0, 1),
        TextRange(0, 0),
    ]

    press(coordinator, CommandKind.MOVE_DOWN, extend=True)
    assert coordinator.selection.selected_text() == "bc\n\ndef\n\ng"

    press(coordinator, CommandKind.MOVE_UP, extend=True)
    assert [r.selection for r in coordinator.regions] == [
        TextRange(1, 2),
        TextRange(0, 1),
        TextRange(0, 0),
    ]
    assert caret_of(coordinator)[0] == "region-1"


def test_extending_right_crosses_region_edge() -> None:
    coordinator = make_coordinator("ab", "cd")
    coordinator.focus_region(coordinator.regions[0], 1)

    for _ in range(3):
        press(coordinator, CommandKind.MOVE_RIGHT, extend=True)

    assert coordinator.selection.selected_text() == "b\n\nc"
    assert coordinator.selection.anchor == Position(coordinator.regions[0], 1)


def test_extending_left_at_document_start_keeps_selection() -> None:
    coordinator = make_coordinator("ab", "cd")
    coordinator.focus_region(coordinator.regions[0], 1)

    press(coordinator, CommandKind.MOVE_LEFT, extend=True)
    result = press(coordinator, CommandKind.MOVE_LEFT, extend=True)

    assert result.status == "document_edge"
    assert coordinator.regions[0].selection == TextRange(0, 1)


def test_extending_to_document_end_selects_everything_after_anchor() -> None:
    coordinator = make_coordinator("abc", "def", "ghi")
    coordinator.focus_region(coordinator.regions[0], 1)

    press(coordinator, CommandKind.GLOBAL_END, extend=True)

    assert coordinator.selection.selected_text() == "bc\n\ndef\n\nghi"
    assert caret_of(coordinator)[0] == "region-2"


def test_extending_by_word_stops_at_next_region_start() -> None:
    coordinator = make_coordinator("one two", "three four")
    r0, r1 = coordinator.regions
    coordinator.focus_region(r0, 4)

    press(coordinator, CommandKind.WORD_RIGHT, extend=True)
    result = press(coordinator, CommandKind.WORD_RIGHT, extend=True)

    assert result.status == "crossed"
    assert caret_of(coordinator) == ("region-1", 0)
    assert r0.selection == TextRange(4, 3)
    assert r1.selection == TextRange(0, 0)

    press(coordinator, CommandKind.WORD_RIGHT, extend=True)
    assert coordinator.selection.selected_text() == "two\n\nthree"


def test_extending_by_word_left_stops_at_previous_region_end() -> None:
    coordinator = make_coordinator("one two", "three four")
    r0, r1 = coordinator.regions
    coordinator.focus_region(r1, 0)

    result = press(coordinator, CommandKind.WORD_LEFT, extend=True)

    assert result.status == "crossed"
    assert caret_of(coordinator) == ("region-0", 7)
    assert r0.selection == TextRange(7, 0)
    assert r1.selection == TextRange(0, 0)
    assert coordinator.selection.anchor == Position(r1, 0)


def test_regions_registered_out_of_visual_order_are_sorted() -> None:
    coordinator = DocumentCoordinator(settings=CoordinatorSettings())
    bottom = Region("bottom", region_id="b", layout=GridLayout(columns=20))
    top = Region("top", region_id="t", layout=GridLayout(columns=20))
    bottom.frame = Rect(0.0, 10.0, 20.0, 1.0)
    top.frame = Rect(0.0, 0.0, 20.0, 1.0)
    coordinator.register(bottom)
    coordinator.register(top)

    assert [region.id for region in coordinator.regions] == ["t", "b"]

    coordinator.focus_region(top, 1)
    result = press(coordinator, CommandKind.MOVE_DOWN)

    assert result.status == "crossed"
    assert caret_of(coordinator) == ("b", 1)


def test_invalidate_order_resorts_after_frames_move() -> None:
    coordinator = DocumentCoordinator(settings=CoordinatorSettings())
    first = coordinator.register(
        Region("first", region_id="first", layout=GridLayout(columns=20))
    )
    second = coordinator.register(
        Region("second", region_id="second", layout=GridLayout(columns=20))
    )
    first.frame = Rect(0.0, 0.0, 20.0, 1.0)
    second.frame = Rect(0.0, 2.0, 20.0, 1.0)
    coordinator.document.invalidate_order()
    assert [region.id for region in coordinator.regions] == ["first", "second"]

    first.frame = Rect(0.0, 6.0, 20.0, 1.0)
    assert [region.id for region in coordinator.regions] == ["first", "second"]

    coordinator.document.invalidate_order()

    assert [region.id for region in coordinator.regions] == ["second", "first"]
    assert coordinator.document.neighbor(second, 1) is first


def test_vertical_move_without_layout_uses_native_lines() -> None:
    coordinator = DocumentCoordinator(settings=CoordinatorSettings())
    region = coordinator.register(Region("ab\ncdef"))
    coordinator.focus_region(region, 5)

    result = press(coordinator, CommandKind.MOVE_UP)

    assert result.status == "native"
    assert region.caret == 2
    assert not coordinator.memory.has_value()


def test_commands_on_empty_document_are_not_consumed() -> None:
    coordinator = DocumentCoordinator(settings=CoordinatorSettings())

    result = press(coordinator, CommandKind.MOVE_DOWN)

    assert not result.consumed
    assert result.status == "empty_document"
