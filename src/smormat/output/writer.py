"""Save converted records as Markdown files."""

from pathlib import Path

import aiofiles

from smormat.errors import SmormatError
from smormat.models import ConversionStatus, ProcessedFile

MARKDOWN_MEDIA_TYPE = "text/markdown; charset=utf-8"


class MarkdownWriter:
    """Write completed records into a directory, one file each."""

    def __init__(self, directory: Path, overwrite: bool = False):
        self.directory = Path(directory)
        self.overwrite = overwrite

    async def write(self, record: ProcessedFile) -> Path:
        """Write one record and return the path it landed at."""
        if record.status != ConversionStatus.COMPLETED:
            raise SmormatError(
                f"{record.original_name} is not converted yet ({record.status.value})"
            )

        self.directory.mkdir(parents=True, exist_ok=True)
        path = self._target_path(record.markdown_name)

        async with aiofiles.open(path, "w", encoding="utf-8") as f:
            await f.write(record.content)

        return path

    async def write_all(self, records: list[ProcessedFile]) -> list[Path]:
        """Write every completed record, skipping the rest."""
        return [
            await self.write(record)
            for record in records
            if record.status == ConversionStatus.COMPLETED
        ]

    def _target_path(self, filename: str) -> Path:
        """Pick ``name.md`` or, if taken, ``name (1).md``, ``name (2).md``..."""
        path = self.directory / filename
        if self.overwrite or not path.exists():
            return path
        stem, suffix = path.stem, path.suffix
        counter = 1
        while True:
            candidate = self.directory / f"{stem} ({counter}){suffix}"
            if not candidate.exists():
                return candidate
            counter += 1
