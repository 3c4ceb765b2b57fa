from __future__ import annotations

from typing import Optional


class HogError(Exception):
    """Base class for HOG-specific errors.

    ``path`` names the container or input file involved, ``name`` the stored
    record name, when known.
    """

    def __init__(self, message: str, *, path: Optional[str] = None, name: Optional[str] = None):
        super().__init__(message)
        self.message = message
        self.path = path
        self.name = name

    def __str__(self) -> str:
        where = self.path
        if self.name is not None:
            where = f"{where}: {self.name}" if where else self.name
        return f"{where}: {self.message}" if where else self.message


# Container corruption
class CorruptArchive(HogError):
    pass


class TruncatedHeader(CorruptArchive):
    pass


class TruncatedPayload(CorruptArchive):
    pass


class InvalidSignature(CorruptArchive):
    pass


# Record names (decode: unsafe stored name; encode: no usable base name)
class InvalidFilename(HogError):
    pass


# Create-time validation
class NameTooLong(HogError):
    pass


class FileTooLarge(HogError):
    pass


# Filesystem
class IoFailure(HogError):
    """Wraps an OSError raised while opening, reading or writing a file."""

    def __init__(self, message: str, cause: OSError, *, path: Optional[str] = None, name: Optional[str] = None):
        reason = cause.strerror or str(cause)
        super().__init__(f"{message}: {reason}", path=path, name=name)
        self.cause = cause


class DestinationExists(HogError):
    """Extraction target already exists and overwrite is disabled."""
