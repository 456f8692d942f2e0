"""Output filename inference from a document's <title>."""

import logging
import re

from bs4 import BeautifulSoup

logger = logging.getLogger(__name__)

FALLBACK_NAME = "untitled"
MARKDOWN_SUFFIX = ".md"

_UNSAFE_CHARS = re.compile(r"[^A-Za-z0-9 \-_().]")
_WHITESPACE = re.compile(r"\s+")


def sanitize_name(text: str) -> str:
    """Keep ASCII letters, digits, spaces, ``-``, ``_``, ``.`` and parentheses."""
    text = _UNSAFE_CHARS.sub("", text)
    return _WHITESPACE.sub(" ", text).strip()


def strip_extension(name: str) -> str:
    """Drop the final ``.ext`` segment; names without a stem are kept whole."""
    stem, dot, _ext = name.rpartition(".")
    if not dot or not stem:
        return name
    return stem


def extract_title(html: str) -> str | None:
    """Return the trimmed text of the first <title>, or None if absent or blank."""
    soup = BeautifulSoup(html, "lxml")
    title = soup.find("title")
    if title is None:
        return None
    text = title.get_text().strip()
    return text or None


def infer_markdown_name(original_name: str, html: str) -> str:
    """Derive a filesystem-safe ``.md`` filename for a converted document.

    The document title wins; otherwise the original filename without its
    extension is used. Never raises: a document that cannot be parsed is
    treated as having no title.
    """
    try:
        title = extract_title(html)
    except Exception:
        logger.debug("Title extraction failed for %s", original_name, exc_info=True)
        title = None

    base_name = sanitize_name(title or strip_extension(original_name))
    if not base_name:
        base_name = FALLBACK_NAME

    return f"{base_name}{MARKDOWN_SUFFIX}"
