"""File-type filter applied before anything enters the pipeline."""

import logging
from collections.abc import Iterable

from smormat.config import IntakeConfig
from smormat.errors import UnsupportedFileType
from smormat.models import SourceFile

logger = logging.getLogger(__name__)


def is_html_file(source: SourceFile, config: IntakeConfig | None = None) -> bool:
    """Check the declared media type, then the filename suffix."""
    config = config or IntakeConfig()
    if source.media_type:
        media_type = source.media_type.split(";")[0].strip().lower()
        if media_type in config.accepted_media_types:
            return True
    name = source.name.lower()
    return any(name.endswith(suffix) for suffix in config.accepted_suffixes)


def partition_html_files(
    files: Iterable[SourceFile], config: IntakeConfig | None = None
) -> tuple[list[SourceFile], list[SourceFile]]:
    """Split a submission into (accepted, rejected), preserving order."""
    accepted: list[SourceFile] = []
    rejected: list[SourceFile] = []
    for source in files:
        (accepted if is_html_file(source, config) else rejected).append(source)
    return accepted, rejected


def filter_html_files(
    files: Iterable[SourceFile], config: IntakeConfig | None = None
) -> list[SourceFile]:
    """Return the HTML files of a submission.

    Raises:
        UnsupportedFileType: if files were submitted but none is HTML.
    """
    config = config or IntakeConfig()
    accepted, rejected = partition_html_files(files, config)

    if rejected and not accepted:
        raise UnsupportedFileType([f.name for f in rejected])

    if rejected and config.report_dropped:
        logger.warning(
            "Skipped %d non-HTML file(s): %s",
            len(rejected),
            ", ".join(f.name for f in rejected),
        )

    return accepted
