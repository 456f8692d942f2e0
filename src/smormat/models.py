"""Records tracked through the intake pipeline."""

import mimetypes
import uuid
from datetime import datetime
from enum import Enum
from pathlib import Path

import aiofiles
from pydantic import BaseModel, ConfigDict, Field

from smormat.errors import StatusTransitionError

PLACEHOLDER_NAME = "Analysing..."
ERROR_MESSAGE = "Failed to process file"


class ConversionStatus(str, Enum):
    """Status of a record in the pipeline."""

    READING = "reading"
    PROCESSING = "processing"
    COMPLETED = "completed"
    ERROR = "error"

    @property
    def is_terminal(self) -> bool:
        return self in (ConversionStatus.COMPLETED, ConversionStatus.ERROR)

    @property
    def label(self) -> str:
        return _STATUS_LABELS[self]


_STATUS_LABELS = {
    ConversionStatus.READING: "Reading & Naming...",
    ConversionStatus.PROCESSING: "Converting...",
    ConversionStatus.COMPLETED: "Markdown",
    ConversionStatus.ERROR: "Error",
}

_ALLOWED_TRANSITIONS: dict[ConversionStatus, set[ConversionStatus]] = {
    ConversionStatus.READING: {ConversionStatus.PROCESSING, ConversionStatus.ERROR},
    ConversionStatus.PROCESSING: {ConversionStatus.COMPLETED, ConversionStatus.ERROR},
    ConversionStatus.COMPLETED: set(),
    ConversionStatus.ERROR: set(),
}

# Fields each step may set; everything else is fixed at intake.
_TRANSITION_FIELDS: dict[ConversionStatus, set[str]] = {
    ConversionStatus.READING: set(),
    ConversionStatus.PROCESSING: {"markdown_name"},
    ConversionStatus.COMPLETED: {"content"},
    ConversionStatus.ERROR: {"error_message"},
}


class ProcessedFile(BaseModel):
    """One uploaded document and its conversion result.

    Records are frozen; every update produces a new value via :meth:`advance`.
    """

    model_config = ConfigDict(frozen=True)

    id: str = Field(default_factory=lambda: uuid.uuid4().hex)
    original_name: str
    original_size: int = Field(ge=0)
    markdown_name: str = PLACEHOLDER_NAME
    content: str = ""
    status: ConversionStatus = ConversionStatus.READING
    error_message: str | None = None
    timestamp: datetime = Field(default_factory=datetime.now)

    def advance(self, status: ConversionStatus, **changes) -> "ProcessedFile":
        """Return a copy moved forward to ``status`` with ``changes`` applied.

        Raises:
            StatusTransitionError: if ``status`` is not a forward step, or
                ``changes`` touches a field this step does not own.
        """
        if status not in _ALLOWED_TRANSITIONS[self.status]:
            raise StatusTransitionError(
                f"Cannot move record {self.id} from {self.status.value} to {status.value}"
            )
        unexpected = set(changes) - _TRANSITION_FIELDS[status]
        if unexpected:
            raise StatusTransitionError(
                f"Moving to {status.value} cannot change: {', '.join(sorted(unexpected))}"
            )
        return self.model_copy(update={**changes, "status": status})

    def fail(self, message: str = ERROR_MESSAGE) -> "ProcessedFile":
        """Return a copy in the terminal error state with empty content."""
        return self.advance(ConversionStatus.ERROR, error_message=message)


class SourceFile(BaseModel):
    """A submitted file: its name, size, declared media type and bytes."""

    name: str
    size: int = Field(default=0, ge=0)
    media_type: str | None = None
    data: bytes | None = None
    path: Path | None = None

    @classmethod
    def from_path(cls, path: Path) -> "SourceFile":
        """Describe a file on disk without reading it."""
        path = Path(path)
        media_type, _ = mimetypes.guess_type(path.name)
        size = path.stat().st_size if path.exists() else 0
        return cls(name=path.name, size=size, media_type=media_type, path=path)

    @classmethod
    def from_bytes(cls, name: str, data: bytes, media_type: str | None = None) -> "SourceFile":
        return cls(name=name, size=len(data), media_type=media_type, data=data)

    async def read(self) -> bytes:
        """Return the raw bytes, from memory or from disk."""
        if self.data is not None:
            return self.data
        if self.path is None:
            raise ValueError(f"Source {self.name} has neither data nor path")
        async with aiofiles.open(self.path, "rb") as f:
            return await f.read()
