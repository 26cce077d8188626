"""Word boundary scanning over plain strings."""

from __future__ import annotations


def is_word_char(char: str) -> bool:
    return char.isalnum() or char == "_"


def previous_word_boundary(text: str, index: int) -> int:
    """Return the start of the word before ``index``, skipping separators first."""

    position = max(0, min(index, len(text)))
    while position > 0 and not is_word_char(text[position - 1]):
        position -= 1
    while position > 0 and is_word_char(text[position - 1]):
        position -= 1
    return position


def next_word_boundary(text: str, index: int) -> int:
    """Return the end of the word after ``index``, skipping separators first."""

    length = len(text)
    position = max(0, min(index, length))
    while position < length and not is_word_char(text[position]):
        position += 1
    while position < length and is_word_char(text[position]):
        position += 1
    return position


__all__ = ["is_word_char", "next_word_boundary", "previous_word_boundary"]
