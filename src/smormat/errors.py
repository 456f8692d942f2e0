"""Exception hierarchy for smormat."""


class SmormatError(Exception):
    """Base class for all smormat errors."""


class ReadError(SmormatError):
    """Raw file content could not be read or decoded as text."""


class ConversionError(SmormatError):
    """The HTML-to-Markdown engine failed on the given input."""


class UnsupportedFileType(SmormatError):
    """A submitted batch contained no acceptable HTML files."""

    def __init__(self, rejected: list[str]):
        self.rejected = rejected
        super().__init__("Only HTML files are supported.")


class StatusTransitionError(SmormatError):
    """A record was asked to move backwards or out of a terminal state."""
