"""Intake pipeline: read, name, and convert each submitted file concurrently."""

import asyncio
import logging
import time
from collections.abc import Sequence

from smormat.config import PipelineConfig
from smormat.converter import convert_html
from smormat.errors import ReadError
from smormat.models import ConversionStatus, ProcessedFile, SourceFile
from smormat.naming import infer_markdown_name
from smormat.store import RecordStore

logger = logging.getLogger(__name__)


class IntakePipeline:
    """Runs one independent task per submitted file against a shared store."""

    def __init__(self, store: RecordStore, config: PipelineConfig | None = None):
        self.store = store
        self.config = config or PipelineConfig()

    def submit(self, files: Sequence[SourceFile]) -> list[asyncio.Task]:
        """Create a record per file and start processing all of them.

        Must be called from a running event loop. The returned tasks never
        raise; awaiting them is optional.
        """
        entries = [
            ProcessedFile(original_name=source.name, original_size=source.size)
            for source in files
        ]
        self.store.prepend(entries)

        return [
            asyncio.create_task(self._process_file(entry.id, source))
            for entry, source in zip(entries, files)
        ]

    async def run(self, files: Sequence[SourceFile]) -> list[ProcessedFile]:
        """Submit ``files``, wait for every task, and return their final records.

        Records removed from the store while running are omitted.
        """
        tasks = self.submit(files)
        ids = await asyncio.gather(*tasks)
        return [record for record in map(self.store.get, ids) if record is not None]

    async def _process_file(self, record_id: str, source: SourceFile) -> str:
        """Read, name, and convert a single file; failures end in ERROR."""
        t0 = time.monotonic()
        try:
            text = await self._read_text(source)

            # Keep the reading phase visible before the name changes
            await asyncio.sleep(self.config.read_delay_seconds)

            markdown_name = infer_markdown_name(source.name, text)
            self.store.update(
                record_id,
                lambda r: r.advance(ConversionStatus.PROCESSING, markdown_name=markdown_name),
            )

            await asyncio.sleep(self.config.convert_delay_seconds)

            markdown = await asyncio.to_thread(convert_html, text)
            self.store.update(
                record_id,
                lambda r: r.advance(ConversionStatus.COMPLETED, content=markdown),
            )
            logger.info(
                "Converted %s -> %s in %.2fs",
                source.name,
                markdown_name,
                time.monotonic() - t0,
            )
        except Exception as e:
            logger.warning("Failed to process %s: %s", source.name, e)
            logger.debug("Pipeline failure details", exc_info=True)
            self.store.update(
                record_id, lambda r: r if r.status.is_terminal else r.fail()
            )
        return record_id

    async def _read_text(self, source: SourceFile) -> str:
        try:
            raw = await source.read()
            return raw.decode(self.config.encoding)
        except (OSError, ValueError, LookupError) as e:
            raise ReadError(f"Could not read {source.name}: {e}") from e
