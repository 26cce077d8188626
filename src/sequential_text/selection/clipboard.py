"""Clipboard storage for copied selections."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional


@dataclass(slots=True)
class ClipboardEntry:
    text: str
    region_count: int = 1


class ClipboardBank:
    """Keeps the most recent copy and mirrors it to the host clipboard."""

    def __init__(self) -> None:
        self._entry: Optional[ClipboardEntry] = None

    @property
    def entry(self) -> Optional[ClipboardEntry]:
        return self._entry

    def get(self) -> Optional[str]:
        hosted = self.clipboard_get()
        if hosted is not None:
            return hosted
        return self._entry.text if self._entry else None

    def put(self, text: str, *, region_count: int = 1) -> ClipboardEntry:
        self._entry = ClipboardEntry(text=text, region_count=region_count)
        self.clipboard_set(text)
        return self._entry

    def clear(self) -> None:
        self._entry = None

    def clipboard_get(self) -> Optional[str]:  # stub, host adapters override
        return None

    def clipboard_set(self, value: str) -> None:  # stub, host adapters override
        _ = value


__all__ = ["ClipboardBank", "ClipboardEntry"]
