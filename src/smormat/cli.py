"""Command-line interface for smormat."""

import asyncio
import logging
from pathlib import Path
from typing import Optional

import typer
from rich.console import Console
from rich.live import Live
from rich.logging import RichHandler

from smormat import __version__
from smormat.config import AppConfig
from smormat.display import build_preview_panel, build_records_table
from smormat.errors import UnsupportedFileType
from smormat.intake import filter_html_files
from smormat.interactive import InteractiveSession
from smormat.models import ConversionStatus, ProcessedFile, SourceFile
from smormat.output import MarkdownWriter
from smormat.pipeline import IntakePipeline
from smormat.store import RecordStore

app = typer.Typer(
    name="smormat",
    help="Convert HTML files to Markdown, named after their <title>.",
    rich_markup_mode="rich",
    no_args_is_help=True,
)

console = Console()
logger = logging.getLogger(__name__)


def version_callback(value: bool):
    if value:
        console.print(f"smormat version {__version__}")
        raise typer.Exit()


def setup_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(message)s",
        handlers=[RichHandler(console=console, show_path=False)],
        force=True,
    )


@app.callback()
def main(
    version: bool = typer.Option(
        False,
        "--version",
        "-V",
        help="Show version and exit.",
        callback=version_callback,
        is_eager=True,
    ),
):
    """HTML to Markdown converter."""
    pass


@app.command()
def convert(
    files: list[Path] = typer.Argument(..., help="HTML files to convert"),
    output: Optional[Path] = typer.Option(
        None,
        "--output",
        "-o",
        help="Directory for the Markdown files",
    ),
    config_file: Optional[Path] = typer.Option(
        None,
        "--config",
        "-c",
        help="TOML configuration file",
    ),
    overwrite: bool = typer.Option(
        False,
        "--overwrite",
        help="Replace existing files instead of adding a (n) suffix",
    ),
    show_preview: bool = typer.Option(
        False,
        "--preview",
        "-p",
        help="Print the start of each converted file",
    ),
    interactive: bool = typer.Option(
        False,
        "--interactive/--no-interactive",
        "-I/-N",
        help="Review, save and remove files in an interactive session",
    ),
    verbose: bool = typer.Option(
        False,
        "--verbose",
        "-v",
        help="Enable verbose output",
    ),
):
    """
    Convert HTML files to Markdown.

    Each output file is named after the document's <title>, falling back to
    the source file name.

    Examples:

        smormat convert page.html

        smormat convert *.html -o ./markdown

        smormat convert report.htm -I
    """
    config = AppConfig.from_toml(config_file) if config_file else AppConfig()
    output_updates: dict = {}
    if output is not None:
        output_updates["directory"] = output
    if overwrite:
        output_updates["overwrite"] = True
    config = config.model_copy(
        update={
            "output": config.output.model_copy(update=output_updates),
            "verbose": verbose or config.verbose,
        }
    )
    if interactive:
        config = config.interactive()

    setup_logging(config.verbose)
    logger.debug("Effective configuration:\n%s", config.to_toml())

    try:
        sources = filter_html_files(
            [SourceFile.from_path(path) for path in files], config.intake
        )
    except UnsupportedFileType as e:
        console.print(f"[red]{e}[/red]")
        raise typer.Exit(1)

    if not sources:
        console.print("[yellow]No files to convert.[/yellow]")
        raise typer.Exit(0)

    store = RecordStore()
    pipeline = IntakePipeline(store, config.pipeline)
    writer = MarkdownWriter(config.output.directory, overwrite=config.output.overwrite)

    try:
        records = asyncio.run(_run_with_display(pipeline, sources))
    except KeyboardInterrupt:
        console.print("\n[yellow]Cancelled.[/yellow]")
        raise typer.Exit(130)

    if show_preview:
        for record in records:
            if record.status == ConversionStatus.COMPLETED:
                console.print(build_preview_panel(record, config.output.preview_chars))

    if interactive:
        InteractiveSession(
            store, writer, console, preview_chars=config.output.preview_chars
        ).run()
        return

    try:
        paths = asyncio.run(writer.write_all(records))
    except OSError as e:
        console.print(f"[red]Error: {e}[/red]")
        if config.verbose:
            console.print_exception()
        raise typer.Exit(1)

    _print_summary(records, paths)

    if any(record.status == ConversionStatus.ERROR for record in records):
        raise typer.Exit(1)


async def _run_with_display(
    pipeline: IntakePipeline, sources: list[SourceFile]
) -> list[ProcessedFile]:
    """Run the pipeline while a live table tracks every record."""
    store = pipeline.store
    with Live(
        build_records_table(store.snapshot()),
        console=console,
        refresh_per_second=8,
    ) as live:
        def refresh(snapshot):
            live.update(build_records_table(snapshot))

        store.subscribe(refresh)
        try:
            return await pipeline.run(sources)
        finally:
            store.unsubscribe(refresh)


def _print_summary(records: list[ProcessedFile], paths: list[Path]) -> None:
    console.print()
    console.print(f"  Converted: [green]{len(paths)}[/green] of {len(records)}")
    for path in paths:
        console.print(f"  [green]{path}[/green]")
    failed = [r for r in records if r.status == ConversionStatus.ERROR]
    if failed:
        console.print(f"  Errors:    [red]{len(failed)}[/red]")
        for record in failed:
            console.print(f"  [red]{record.original_name}[/red]: {record.error_message}")


if __name__ == "__main__":
    app()
