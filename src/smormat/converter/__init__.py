"""HTML to Markdown conversion."""

from smormat.converter.markdown import (
    DROPPED_TAGS,
    MarkdownConverter,
    convert_html,
    html_to_markdown,
)

__all__ = [
    "DROPPED_TAGS",
    "MarkdownConverter",
    "convert_html",
    "html_to_markdown",
]
