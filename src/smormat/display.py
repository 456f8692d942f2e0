"""Rich renderables for records and their previews."""

from collections.abc import Iterable

from rich.console import Group
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from smormat.models import ConversionStatus, ProcessedFile

PREVIEW_CHARS = 500

_STATUS_STYLES = {
    ConversionStatus.READING: "magenta",
    ConversionStatus.PROCESSING: "blue",
    ConversionStatus.COMPLETED: "green",
    ConversionStatus.ERROR: "red",
}


def format_size(size_bytes: int) -> str:
    """Format a byte size as a human-readable string."""
    if size_bytes < 1024:
        return f"{size_bytes} B"
    elif size_bytes < 1024 * 1024:
        return f"{size_bytes / 1024:.1f} KB"
    else:
        return f"{size_bytes / (1024 * 1024):.1f} MB"


def preview(content: str, limit: int = PREVIEW_CHARS) -> str:
    """First ``limit`` characters of ``content``, with ``...`` if cut short."""
    if len(content) > limit:
        return content[:limit] + "..."
    return content


def display_name(record: ProcessedFile) -> str:
    """The inferred name once known, the source name while still reading."""
    if record.status == ConversionStatus.READING:
        return record.original_name
    return record.markdown_name


def build_records_table(records: Iterable[ProcessedFile], title: str | None = None) -> Table:
    """Table of records, numbered from 1 in display order."""
    table = Table(title=title, show_header=True, header_style="bold", box=None, pad_edge=False)
    table.add_column("#", justify="right", style="dim")
    table.add_column("File", min_width=30, overflow="ellipsis", no_wrap=True)
    table.add_column("Source", overflow="ellipsis", no_wrap=True, style="dim")
    table.add_column("Size", justify="right")
    table.add_column("Status", min_width=20)

    for index, record in enumerate(records, start=1):
        status = Text(record.status.label, style=_STATUS_STYLES[record.status])
        if record.error_message:
            status.append(f" ({record.error_message})", style="dim")
        table.add_row(
            str(index),
            display_name(record),
            record.original_name,
            format_size(record.original_size),
            status,
        )
    return table


def build_preview_panel(record: ProcessedFile, limit: int = PREVIEW_CHARS) -> Panel:
    """Panel with the first ``limit`` characters of a completed record."""
    body = Group(
        Text(f"First {limit} chars", style="dim"),
        Text(preview(record.content, limit)),
    )
    return Panel(body, title=f"Markdown Preview: {record.markdown_name}", border_style="blue")
