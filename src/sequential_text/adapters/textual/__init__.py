"""Textual front end; ``controller`` works without Textual installed."""

from .controller import TextualDocumentAdapter, TextualUIHooks

__all__ = ["TextualDocumentAdapter", "TextualUIHooks"]
