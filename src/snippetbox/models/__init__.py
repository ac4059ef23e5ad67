"""Domain models backed by ``snippetbox.data``."""

from snippetbox.models.snippets import EXPIRY_DAYS, Snippet, SnippetModel

__all__ = ["EXPIRY_DAYS", "Snippet", "SnippetModel"]
