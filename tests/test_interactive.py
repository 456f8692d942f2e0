"""Tests for the interactive review session."""

from __future__ import annotations

import io
from pathlib import Path

import pytest
from rich.console import Console
from rich.prompt import Confirm

from smormat.interactive import InteractiveSession
from smormat.models import ConversionStatus, ProcessedFile
from smormat.output import MarkdownWriter
from smormat.store import RecordStore


def completed(name: str) -> ProcessedFile:
    return (
        ProcessedFile(original_name=f"{name}.html", original_size=5)
        .advance(ConversionStatus.PROCESSING, markdown_name=f"{name}.md")
        .advance(ConversionStatus.COMPLETED, content=f"# {name}")
    )


@pytest.fixture
def session(tmp_path: Path, store: RecordStore) -> InteractiveSession:
    store.prepend([completed("alpha"), completed("beta"), completed("gamma")])
    console = Console(file=io.StringIO(), width=120)
    return InteractiveSession(store, MarkdownWriter(tmp_path), console)


def output(session: InteractiveSession) -> str:
    return session.console.file.getvalue()


class TestInteractiveSession:
    def test_quit(self, session: InteractiveSession):
        assert session.handle("quit") is False
        assert session.handle("q") is False

    def test_list(self, session: InteractiveSession):
        assert session.handle("list") is True
        assert "Converted Files (3)" in output(session)
        assert "beta.md" in output(session)

    def test_remove_by_position(self, session: InteractiveSession, store: RecordStore):
        session.handle("remove 2")
        assert [r.markdown_name for r in store] == ["alpha.md", "gamma.md"]

    def test_invalid_position(self, session: InteractiveSession, store: RecordStore):
        session.handle("remove 9")
        session.handle("remove x")
        assert len(store) == 3

    def test_preview(self, session: InteractiveSession):
        session.handle("preview 1")
        assert "# alpha" in output(session)

    def test_preview_unfinished(self, session: InteractiveSession, store: RecordStore):
        store.prepend([ProcessedFile(original_name="busy.html", original_size=1)])
        session.handle("preview 1")
        assert "has no Markdown yet" in output(session)

    def test_save_and_save_all(self, session: InteractiveSession, tmp_path: Path):
        session.handle("save 3")
        assert (tmp_path / "gamma.md").read_text(encoding="utf-8") == "# gamma"
        session.handle("save all")
        assert (tmp_path / "alpha.md").exists()
        assert (tmp_path / "gamma (1).md").exists()

    def test_clear_confirmed(self, monkeypatch, session: InteractiveSession, store: RecordStore):
        monkeypatch.setattr(Confirm, "ask", classmethod(lambda cls, *a, **kw: True))
        session.handle("clear")
        assert len(store) == 0

    def test_clear_declined(self, monkeypatch, session: InteractiveSession, store: RecordStore):
        monkeypatch.setattr(Confirm, "ask", classmethod(lambda cls, *a, **kw: False))
        session.handle("clear")
        assert len(store) == 3

    def test_unknown_command(self, session: InteractiveSession):
        assert session.handle("dance") is True
        assert "Unknown command" in output(session)
