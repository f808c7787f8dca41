"""Error definitions for zipmeta_arrow."""

from typing import Any, Dict


class ZipMetaError(Exception):
    """Base exception for all zipmeta_arrow errors."""

    def __init__(self, message: str, **context: Any) -> None:
        super().__init__(message)
        self.message = message
        self.context: Dict[str, Any] = context


class ConfigurationError(ZipMetaError):
    """Configuration is invalid or missing."""
    pass


class ArchiveError(ZipMetaError):
    """Archive processing failed."""
    pass


class ArchiveIOError(ArchiveError):
    """Archive could not be opened, parsed, or an entry could not be read."""
    pass


class EncodingError(ZipMetaError):
    """Columnar construction rejected the assembled columns."""
    pass
