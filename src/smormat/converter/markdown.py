"""HTML to Markdown conversion."""

import logging
import re

from bs4 import BeautifulSoup, Tag
from markdownify import ATX
from markdownify import MarkdownConverter as BaseMarkdownConverter

from smormat.errors import ConversionError

logger = logging.getLogger(__name__)

# Tags whose whole subtree carries no document text.
DROPPED_TAGS = ["script", "style", "iframe", "svg"]

# Document metadata; the <title> feeds the file name, not the body text.
_METADATA_TAGS = ["head"]

_LANGUAGE_PREFIXES = ("language-", "lang-", "highlight-")
_BACKTICK_RUN = re.compile(r"`+")


def _fence_for(code: str) -> str:
    """A backtick fence longer than any backtick run inside ``code``."""
    longest = max((len(run) for run in _BACKTICK_RUN.findall(code)), default=0)
    return "`" * max(3, longest + 1)


class MarkdownConverter(BaseMarkdownConverter):
    """Markdown converter with fixed GitHub-flavoured settings."""

    def __init__(self, **kwargs):
        super().__init__(
            heading_style=ATX,
            bullets="-",
            strong_em_symbol="*",
            **kwargs,
        )

    def convert_pre(self, el: Tag, text: str, parent_tags=None, **kwargs) -> str:
        """Render code blocks as fenced blocks, keeping the language hint."""
        code = el.find("code")
        if code is None:
            lang, code_text = "", el.get_text()
        else:
            lang, code_text = self._extract_language(code), code.get_text()
        if not code_text.startswith("\n"):
            code_text = "\n" + code_text
        if not code_text.endswith("\n"):
            code_text = code_text + "\n"
        fence = _fence_for(code_text)
        return f"\n\n{fence}{lang}{code_text}{fence}\n\n"

    def convert_code(self, el: Tag, text: str, parent_tags=None, **kwargs) -> str:
        """Handle inline code."""
        if el.parent and el.parent.name == "pre":
            return text
        code_text = el.get_text()
        if "`" in code_text:
            return f"`` {code_text} ``"
        return f"`{code_text}`"

    def convert_hr(self, el: Tag, text: str, parent_tags=None, **kwargs) -> str:
        return "\n\n---\n\n"

    def convert_script(self, el: Tag, text: str, parent_tags=None, **kwargs) -> str:
        return ""

    convert_style = convert_script
    convert_iframe = convert_script
    convert_svg = convert_script

    def _extract_language(self, code_elem: Tag) -> str:
        """Extract programming language from class names."""
        raw_classes: str | list[str] = code_elem.get("class") or []
        classes: list[str] = (
            raw_classes.split() if isinstance(raw_classes, str) else list(raw_classes)
        )
        for cls in classes:
            for prefix in _LANGUAGE_PREFIXES:
                if cls.startswith(prefix):
                    return cls[len(prefix):]
        return ""


_converter = MarkdownConverter()


def html_to_markdown(html: str) -> str:
    """Convert HTML to Markdown, dropping non-content elements.

    Raises:
        ConversionError: if parsing or serialization fails.
    """
    if not html:
        return ""

    try:
        soup = BeautifulSoup(html, "lxml")
        for tag in soup.find_all(_METADATA_TAGS + DROPPED_TAGS):
            # Nested matches go away with their ancestor.
            if not tag.decomposed:
                tag.decompose()
        markdown = _converter.convert_soup(soup)
    except Exception as e:
        logger.debug("Conversion failed", exc_info=True)
        raise ConversionError(f"Failed to parse HTML content: {e}") from e

    markdown = re.sub(r"\n{3,}", "\n\n", markdown)
    return markdown.strip()


convert_html = html_to_markdown
