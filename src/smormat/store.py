"""In-memory record collection shared by concurrent pipelines."""

import logging
import threading
from collections.abc import Callable, Iterable, Iterator

from smormat.models import ProcessedFile

logger = logging.getLogger(__name__)

Listener = Callable[[tuple[ProcessedFile, ...]], None]


class RecordStore:
    """Newest-first list of records, updated by replacement only.

    Every change swaps in a fresh tuple under a lock, so readers always see a
    consistent snapshot and concurrent updates to different records never
    interleave.
    """

    def __init__(self):
        self._records: tuple[ProcessedFile, ...] = ()
        self._lock = threading.Lock()
        self._listeners: list[Listener] = []

    def __len__(self) -> int:
        return len(self._records)

    def __iter__(self) -> Iterator[ProcessedFile]:
        return iter(self._records)

    def snapshot(self) -> tuple[ProcessedFile, ...]:
        return self._records

    def subscribe(self, listener: Listener) -> None:
        """Call ``listener`` with the new snapshot after every change."""
        self._listeners.append(listener)

    def unsubscribe(self, listener: Listener) -> None:
        if listener in self._listeners:
            self._listeners.remove(listener)

    def get(self, record_id: str) -> ProcessedFile | None:
        return next((r for r in self._records if r.id == record_id), None)

    def prepend(self, records: Iterable[ProcessedFile]) -> None:
        """Insert a batch at the front, keeping the batch's own order."""
        with self._lock:
            self._records = tuple(records) + self._records
            snapshot = self._records
        self._notify(snapshot)

    def update(
        self, record_id: str, fn: Callable[[ProcessedFile], ProcessedFile]
    ) -> ProcessedFile | None:
        """Replace the record with ``fn(record)``.

        Returns the new record, or None if the id is no longer present.
        """
        with self._lock:
            for index, record in enumerate(self._records):
                if record.id == record_id:
                    new_record = fn(record)
                    self._records = (
                        self._records[:index] + (new_record,) + self._records[index + 1:]
                    )
                    snapshot = self._records
                    break
            else:
                logger.debug("Update for removed record %s ignored", record_id)
                return None
        self._notify(snapshot)
        return new_record

    def remove(self, record_id: str) -> bool:
        """Remove exactly one record; the rest keep their order."""
        with self._lock:
            remaining = tuple(r for r in self._records if r.id != record_id)
            if len(remaining) == len(self._records):
                return False
            self._records = remaining
            snapshot = self._records
        self._notify(snapshot)
        return True

    def clear(self) -> int:
        """Drop every record and return how many there were."""
        with self._lock:
            count = len(self._records)
            self._records = ()
        self._notify(())
        return count

    def _notify(self, snapshot: tuple[ProcessedFile, ...]) -> None:
        for listener in self._listeners:
            listener(snapshot)
