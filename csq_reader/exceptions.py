"""
Exceptions raised while reading .csq sequences.

Stream-level errors (StreamIoError, ToolUnavailableError) are terminal.
Block-local and per-frame errors leave the reader usable: the next pull
continues with the following frame.
"""
from typing import Optional


class CSQReaderError(Exception):
    """Base class for all csq_reader errors."""


class ToolUnavailableError(CSQReaderError):
    """Raised when exiftool or the JPEG decoder cannot be used."""


class StreamIoError(CSQReaderError):
    """Raised when the underlying stream cannot be read."""


class FrameSplitError(CSQReaderError):
    """A block could not be split into frames."""


class NoMarkerFound(FrameSplitError):
    """Raised when a non-empty block holds no frame marker."""


class InsufficientMarkers(FrameSplitError):
    """Raised when a block holds a single marker and cannot bound a frame on its own."""


class CalibrationError(CSQReaderError, ValueError):
    """Calibration metadata for a frame is unusable."""

    def __init__(self, message: str, field: Optional[str] = None):
        self.field = field
        super().__init__(message)


class MissingField(CalibrationError):
    """Raised when a required calibration field is absent."""

    def __init__(self, field: str):
        super().__init__(f"Missing calibration field: {field}", field)


class MalformedField(CalibrationError):
    """Raised when a required calibration field is not a number."""

    def __init__(self, field: str, value: Optional[str] = None):
        self.value = value
        super().__init__(f"Malformed calibration field {field}: {value!r}", field)


class DecodeError(CSQReaderError):
    """Raised when the raw thermal image of a frame cannot be decoded."""


class MetadataToolError(CSQReaderError):
    """Raised when exiftool fails on a frame."""
