"""Exception hierarchy shared by the pipeline, the loader and the CLI."""

from __future__ import annotations

__all__ = [
    "Journal2GelfError",
    "IOFailure",
    "ParsingFailure",
    "ConfigurationError",
    "InsufficientLogLevel",
    "NoMessage",
    "InternalFailure",
    "ChunkCapacityExceeded",
    "UnsupportedPlatform",
    "SourceTerminated",
    "CompressionFailure",
]


class Journal2GelfError(Exception):
    """Base class for every error raised by journal2gelf."""


class IOFailure(Journal2GelfError):
    """Reading, writing or binding failed."""


class ParsingFailure(Journal2GelfError, ValueError):
    """A log record or a document could not be decoded."""


class ConfigurationError(ParsingFailure):
    """Raised when configuration loading or validation fails."""


class InsufficientLogLevel(Journal2GelfError):
    """The record is less severe than the configured threshold."""

    def __init__(self, message: str = "insufficient log level") -> None:
        super().__init__(message)


class NoMessage(Journal2GelfError):
    """The record carries no ``MESSAGE`` field."""

    def __init__(self, message: str = "no message field found") -> None:
        super().__init__(message)


class InternalFailure(Journal2GelfError):
    """Protocol capacity or platform support violation."""


class ChunkCapacityExceeded(InternalFailure):
    """The payload needs more chunks than GELF allows."""


class UnsupportedPlatform(InternalFailure):
    """The requested log source is not available on this operating system."""


class SourceTerminated(InternalFailure):
    """The line source stopped producing output."""


class CompressionFailure(Journal2GelfError):
    """The compressor rejected the payload."""
