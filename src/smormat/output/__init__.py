"""Output writers for converted Markdown."""

from smormat.output.writer import MARKDOWN_MEDIA_TYPE, MarkdownWriter

__all__ = [
    "MARKDOWN_MEDIA_TYPE",
    "MarkdownWriter",
]
