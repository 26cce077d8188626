"""Executable Textual app showing several regions as one document."""

from __future__ import annotations

import argparse
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Optional, Sequence

try:  # pragma: no cover - imported only when demo is run
    from rich.text import Text
    from textual import events
    from textual.app import App, ComposeResult
    from textual.widgets import Footer, Header, Static
except ModuleNotFoundError as exc:  # pragma: no cover - friendly error for missing dep
    raise RuntimeError(
        "Install the 'textual' package to use sequential_text.adapters.textual.app"
    ) from exc

from sequential_text.config import CoordinatorSettings
from sequential_text.coordinator import (
    DocumentCoordinator,
    DocumentSnapshot,
    create_coordinator,
)
from sequential_text.region.layout import GridLayout
from sequential_text.runtime import telemetry

from .controller import TextualDocumentAdapter, TextualUIHooks

SAMPLE_REGIONS = (
    "Each block below is its own region.\nArrow keys cross between them.",
    "Shift+arrows grow one selection\nthrough every block it touches.",
    "Backspace on a multi-block selection\nmerges the survivors into the first block.",
)

SELECTION_STYLE = "reverse"
CARET_STYLE = "underline bold"
GAP_STYLE = "dim"


def render_document(coordinator: DocumentCoordinator) -> Text:  # pragma: no cover
    """Rich text for every region, one terminal row per laid-out line."""

    output = Text()
    row = 0
    for region in coordinator.regions:
        layout = region.layout
        if region.frame is None or not isinstance(layout, GridLayout):
            continue
        width = layout.columns
        while row < int(region.frame.y):
            output.append("╌" * width + "\n", style=GAP_STYLE)
            row += 1

        selection = region.selection
        lines = layout.lines()
        for position, line in enumerate(lines):
            segment = region.text[line.start : line.end].rstrip("\n")
            rendered = Text(segment)
            low = max(selection.location, line.start)
            high = min(selection.upper_bound, line.start + len(segment))
            if high > low:
                rendered.stylize(SELECTION_STYLE, low - line.start, high - line.start)

            caret = selection.location
            last_line = position == len(lines) - 1
            on_line = line.start <= caret < line.end or (last_line and caret == line.end)
            if region.focused and selection.is_empty and on_line:
                column = caret - line.start
                if column >= len(segment):
                    rendered.append(" ")
                rendered.stylize(CARET_STYLE, column, column + 1)
            output.append_text(rendered)
            output.append("\n")
            row += 1
    return output


@dataclass
class UIState:
    status_text: str = ""
    last_event: str = ""


class SequentialTextApp(App[None]):
    """Minimal Textual UI hosting a DocumentCoordinator."""

    CSS = """
	Screen {
		layout: vertical;
	}

	#document-view {
		height: 1fr;
		border: round $accent;
		padding: 0 1;
		content-align: left top;
		overflow: auto;
	}

	#status-line {
		height: 1;
		background: $surface-darken-1;
		padding: 0 1;
	}
	"""

    BINDINGS = [
        ("ctrl+q", "quit", "Quit"),
    ]

    def __init__(
        self,
        texts: Sequence[str] = SAMPLE_REGIONS,
        *,
        columns: Optional[int] = None,
        settings: Optional[CoordinatorSettings] = None,
    ) -> None:
        super().__init__()
        self._state = UIState()
        self._texts = tuple(texts)
        self._columns = columns
        self._settings = settings
        self.coordinator: DocumentCoordinator | None = None
        self.adapter: TextualDocumentAdapter | None = None
        self._document_widget: Static | None = None
        self._status_widget: Static | None = None

    def compose(self) -> ComposeResult:
        yield Header(show_clock=True)
        self._document_widget = Static("", id="document-view")
        yield self._document_widget
        self._status_widget = Static("", id="status-line")
        yield self._status_widget
        yield Footer()

    def on_mount(self) -> None:
        self.coordinator = create_coordinator(
            self._texts, columns=self._columns, settings=self._settings
        )
        hooks = TextualUIHooks(
            update_document=self._update_document,
            update_status=self._update_status,
            handle_event=self._handle_event,
            log=self._log_line,
        )
        self.adapter = TextualDocumentAdapter(self.coordinator, hooks)

    def on_key(self, event: events.Key) -> None:
        if not self.adapter or event.key == "ctrl+q":
            return
        self.adapter.handle_textual_key(event.key, text=event.character)
        event.stop()

    def _content_offset(self, event: events.MouseEvent) -> Optional[tuple[int, int]]:
        if self._document_widget is None:
            return None
        offset = event.get_content_offset(self._document_widget)
        if offset is None:
            return None
        return offset.x, offset.y

    def on_mouse_down(self, event: events.MouseDown) -> None:
        offset = self._content_offset(event)
        if not self.adapter or offset is None:
            return
        if self._document_widget is not None:
            self._document_widget.capture_mouse()
        self.adapter.handle_mouse_down(*offset, shift=event.shift)

    def on_mouse_move(self, event: events.MouseMove) -> None:
        offset = self._content_offset(event)
        if self.adapter and offset is not None:
            self.adapter.handle_mouse_move(*offset)

    def on_mouse_up(self, event: events.MouseUp) -> None:
        del event
        if self._document_widget is not None:
            self._document_widget.release_mouse()
        if self.adapter:
            self.adapter.handle_mouse_up()

    def _update_document(self, snapshot: DocumentSnapshot) -> None:
        del snapshot
        if self._document_widget and self.coordinator:
            self._document_widget.update(render_document(self.coordinator))

    def _update_status(self, status: str) -> None:
        self._state.status_text = status
        if self._status_widget:
            self._status_widget.update(status)

    def _handle_event(self, name: str, payload: Any | None) -> None:
        del payload
        self._state.last_event = name

    def _log_line(self, line: str) -> None:
        telemetry.record_event("textual.adapter", data={"line": line})


def _read_regions(path: Path) -> list[str]:
    """Blank-line separated paragraphs of ``path`` become regions."""

    raw = path.read_text(encoding="utf-8")
    return [block.strip("\n") for block in raw.split("\n\n") if block.strip()]


def _parse_args(argv: Optional[Sequence[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        description="Run the sequential text regions Textual demo."
    )
    parser.add_argument(
        "file",
        nargs="?",
        type=Path,
        help="Text file whose blank-line separated paragraphs become regions",
    )
    parser.add_argument(
        "--columns",
        type=int,
        default=None,
        help="Wrap width for every region (default: SEQUENTIAL_TEXT_COLUMNS or 72)",
    )
    parser.add_argument(
        "--telemetry",
        default=os.environ.get("SEQUENTIAL_TEXT_TELEMETRY_PRESET"),
        choices=("development", "production", "performance"),
        help="Telemetry preset to activate before starting",
    )
    return parser.parse_args(argv)


def main(argv: Optional[Sequence[str]] = None) -> None:
    args = _parse_args(argv)
    if args.telemetry:
        telemetry.configure(preset=args.telemetry)
    texts = _read_regions(args.file) if args.file else list(SAMPLE_REGIONS)
    app = SequentialTextApp(texts, columns=args.columns)
    app.run()


if __name__ == "__main__":  # pragma: no cover - manual demo
    main()
