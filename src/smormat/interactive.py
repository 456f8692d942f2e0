"""Interactive session for reviewing, saving and discarding converted files."""

import asyncio
from typing import Optional

from rich.console import Console
from rich.panel import Panel
from rich.prompt import Confirm, Prompt

from smormat.display import PREVIEW_CHARS, build_preview_panel, build_records_table
from smormat.errors import SmormatError
from smormat.models import ConversionStatus, ProcessedFile
from smormat.output import MarkdownWriter
from smormat.store import RecordStore

HELP_TEXT = (
    "[bold]list[/bold]          show converted files\n"
    "[bold]preview N[/bold]     show the first characters of file N\n"
    "[bold]save N[/bold]        save file N as Markdown\n"
    "[bold]save all[/bold]      save every converted file\n"
    "[bold]remove N[/bold]      remove file N from the list\n"
    "[bold]clear[/bold]         remove all files\n"
    "[bold]quit[/bold]          leave the session"
)


class InteractiveSession:
    """Command loop over the records held by a :class:`RecordStore`."""

    def __init__(
        self,
        store: RecordStore,
        writer: MarkdownWriter,
        console: Optional[Console] = None,
        preview_chars: int = PREVIEW_CHARS,
    ):
        self.store = store
        self.writer = writer
        self.console = console or Console()
        self.preview_chars = preview_chars

    def run(self) -> None:
        """Prompt for commands until the user quits."""
        self.console.print()
        self.console.print(Panel.fit(HELP_TEXT, title="Commands", border_style="blue"))
        self.show_list()

        while True:
            command = Prompt.ask("[bold]smormat[/bold]", console=self.console, default="quit")
            if not self.handle(command):
                break

    def handle(self, command: str) -> bool:
        """Execute one command. Returns False when the session should end."""
        verb, _, arg = command.strip().partition(" ")
        verb = verb.lower()
        arg = arg.strip()

        if verb in ("q", "quit", "exit"):
            return False
        if verb in ("l", "ls", "list"):
            self.show_list()
        elif verb in ("p", "preview"):
            record = self._select(arg)
            if record:
                self.show_preview(record)
        elif verb in ("s", "save"):
            if arg.lower() == "all":
                self.save_all()
            else:
                record = self._select(arg)
                if record:
                    self.save(record)
        elif verb in ("r", "rm", "remove"):
            record = self._select(arg)
            if record:
                self.store.remove(record.id)
                self.console.print(f"[dim]Removed {record.original_name}[/dim]")
        elif verb == "clear":
            self.clear()
        elif verb in ("h", "help", "?"):
            self.console.print(HELP_TEXT)
        else:
            self.console.print(f"[yellow]Unknown command: {command}[/yellow]")
        return True

    def show_list(self) -> None:
        records = self.store.snapshot()
        if not records:
            self.console.print("[dim]No files.[/dim]")
            return
        self.console.print(
            build_records_table(records, title=f"Converted Files ({len(records)})")
        )

    def show_preview(self, record: ProcessedFile) -> None:
        if record.status != ConversionStatus.COMPLETED:
            self.console.print(f"[yellow]{record.original_name} has no Markdown yet.[/yellow]")
            return
        self.console.print(build_preview_panel(record, self.preview_chars))

    def save(self, record: ProcessedFile) -> None:
        try:
            path = asyncio.run(self.writer.write(record))
        except (SmormatError, OSError) as e:
            self.console.print(f"[red]Error: {e}[/red]")
            return
        self.console.print(f"[green]Saved {path}[/green]")

    def save_all(self) -> None:
        try:
            paths = asyncio.run(self.writer.write_all(list(self.store.snapshot())))
        except OSError as e:
            self.console.print(f"[red]Error: {e}[/red]")
            return
        self.console.print(f"[green]Saved {len(paths)} file(s) to {self.writer.directory}[/green]")

    def clear(self) -> None:
        if not len(self.store):
            return
        if Confirm.ask(
            "Are you sure you want to clear all converted files?",
            console=self.console,
            default=False,
        ):
            count = self.store.clear()
            self.console.print(f"[dim]Cleared {count} file(s)[/dim]")

    def _select(self, arg: str) -> ProcessedFile | None:
        """Resolve a 1-based list position to a record."""
        records = self.store.snapshot()
        try:
            index = int(arg)
        except ValueError:
            self.console.print("[yellow]Give a file number from the list.[/yellow]")
            return None
        if not 1 <= index <= len(records):
            self.console.print(f"[yellow]No file #{index}.[/yellow]")
            return None
        return records[index - 1]
