"""Shared fixtures for the smormat test suite."""

from __future__ import annotations

import logging
import sys

import pytest

from smormat.config import PipelineConfig
from smormat.models import SourceFile
from smormat.pipeline import IntakePipeline
from smormat.store import RecordStore

logging.basicConfig(
    level=logging.DEBUG,
    format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
    stream=sys.stderr,
    force=True,
)

REPORT_HTML = (
    "<html><head><title>My Report!!</title></head>"
    "<body><h1>Hi</h1><script>evil()</script></body></html>"
)


def html_source(name: str, html: str) -> SourceFile:
    return SourceFile.from_bytes(name, html.encode("utf-8"), media_type="text/html")


@pytest.fixture
def store() -> RecordStore:
    return RecordStore()


@pytest.fixture
def pipeline(store: RecordStore) -> IntakePipeline:
    return IntakePipeline(store, PipelineConfig())


@pytest.fixture
def report_source() -> SourceFile:
    return html_source("report.html", REPORT_HTML)
