"""Tests for saving Markdown files and display helpers."""

from __future__ import annotations

import asyncio
import io
from pathlib import Path

import pytest
from rich.console import Console

from smormat.display import (
    build_preview_panel,
    build_records_table,
    display_name,
    format_size,
    preview,
)
from smormat.errors import SmormatError
from smormat.models import ConversionStatus, ProcessedFile
from smormat.output import MARKDOWN_MEDIA_TYPE, MarkdownWriter


def completed(name: str = "Doc.md", content: str = "# Doc\n") -> ProcessedFile:
    return (
        ProcessedFile(original_name="doc.html", original_size=2048)
        .advance(ConversionStatus.PROCESSING, markdown_name=name)
        .advance(ConversionStatus.COMPLETED, content=content)
    )


def render(renderable) -> str:
    console = Console(file=io.StringIO(), width=120)
    console.print(renderable)
    return console.file.getvalue()


class TestMarkdownWriter:
    def test_media_type(self):
        assert MARKDOWN_MEDIA_TYPE == "text/markdown; charset=utf-8"

    def test_writes_utf8_content(self, tmp_path: Path):
        writer = MarkdownWriter(tmp_path / "out")
        path = asyncio.run(writer.write(completed(content="Café ☕")))
        assert path == tmp_path / "out" / "Doc.md"
        assert path.read_text(encoding="utf-8") == "Café ☕"

    def test_name_collision_gets_counter(self, tmp_path: Path):
        writer = MarkdownWriter(tmp_path)
        first = asyncio.run(writer.write(completed(content="1")))
        second = asyncio.run(writer.write(completed(content="2")))
        third = asyncio.run(writer.write(completed(content="3")))
        assert first.name == "Doc.md"
        assert second.name == "Doc (1).md"
        assert third.name == "Doc (2).md"

    def test_overwrite(self, tmp_path: Path):
        writer = MarkdownWriter(tmp_path, overwrite=True)
        asyncio.run(writer.write(completed(content="old")))
        path = asyncio.run(writer.write(completed(content="new")))
        assert path.read_text(encoding="utf-8") == "new"
        assert list(tmp_path.iterdir()) == [path]

    def test_refuses_unfinished_record(self, tmp_path: Path):
        record = ProcessedFile(original_name="a.html", original_size=1)
        with pytest.raises(SmormatError):
            asyncio.run(MarkdownWriter(tmp_path).write(record))

    def test_write_all_skips_failed(self, tmp_path: Path):
        failed = ProcessedFile(original_name="bad.html", original_size=1).fail()
        paths = asyncio.run(MarkdownWriter(tmp_path).write_all([completed(), failed]))
        assert [p.name for p in paths] == ["Doc.md"]


class TestFormatSize:
    @pytest.mark.parametrize(
        "size, expected",
        [
            (0, "0 B"),
            (512, "512 B"),
            (1023, "1023 B"),
            (1024, "1.0 KB"),
            (1536, "1.5 KB"),
            (1024 * 1024, "1.0 MB"),
            (5 * 1024 * 1024 + 300 * 1024, "5.3 MB"),
        ],
    )
    def test_units(self, size: int, expected: str):
        assert format_size(size) == expected


class TestPreview:
    def test_short_content_unchanged(self):
        assert preview("short") == "short"

    def test_exactly_limit_not_truncated(self):
        assert preview("x" * 500) == "x" * 500

    def test_long_content_truncated(self):
        text = preview("y" * 501)
        assert text == "y" * 500 + "..."

    def test_custom_limit(self):
        assert preview("abcdef", limit=3) == "abc..."


class TestRenderables:
    def test_display_name_while_reading(self):
        record = ProcessedFile(original_name="page.html", original_size=1)
        assert display_name(record) == "page.html"
        assert display_name(completed()) == "Doc.md"

    def test_records_table(self):
        failed = ProcessedFile(original_name="bad.html", original_size=10).fail()
        output = render(build_records_table([completed(), failed], title="Converted Files (2)"))
        assert "Converted Files (2)" in output
        assert "Doc.md" in output
        assert "2.0 KB" in output
        assert "Markdown" in output
        assert "Failed to process file" in output

    def test_preview_panel(self):
        output = render(build_preview_panel(completed(content="# Heading")))
        assert "Markdown Preview" in output
        assert "First 500 chars" in output
        assert "# Heading" in output
