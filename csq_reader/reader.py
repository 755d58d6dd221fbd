"""Read FLIR .csq sequences; yields temperature grids (numpy float32 °C) frame by frame."""

import logging
from pathlib import Path
from typing import BinaryIO, Iterator, Optional, Union

import numpy as np

from .constants import BLOCKSIZE
from .exceptions import (
    CalibrationError,
    DecodeError,
    FrameSplitError,
    MetadataToolError,
    ToolUnavailableError,
)
from .models import CalibrationParameters, ThermalFrame
from .parsers import (
    ExifToolMetadataExtractor,
    MetadataExtractor,
    PyLibJpegDecoder,
    RawImageDecoder,
    exiftool_available,
    jpeg_decoder_available,
)
from .splitter import ChunkedFrameSplitter
from .utilities import raw_to_temperature

logger = logging.getLogger(__name__)

# Errors that only affect one block or frame; the reader can go on after them
RECOVERABLE_ERRORS = (FrameSplitError, CalibrationError, DecodeError, MetadataToolError)


def read_csq(file_path: Union[str, Path], **kwargs) -> "CSQReader":
    """Open a .csq file; return a CSQReader yielding temperature grids (°C)."""
    file_path = Path(file_path)

    if not file_path.exists():
        raise FileNotFoundError(f"File not found: {file_path}")

    file_extension = file_path.suffix.lower()
    if file_extension != ".csq":
        raise ValueError(
            f"Unsupported file format: {file_extension}. Supported formats: .csq"
        )
    return CSQReader(file_path, **kwargs)


class CSQReader:
    """
    Lazy, forward-only reader over the frames of a .csq stream.

    Iterating yields one temperature grid (float32 °C, shape (height, width))
    per frame, in stream order. An error raised by one pull (bad block, bad
    frame) leaves the reader usable; the next pull continues with the
    following frame. Use frames(skip_errors=True) to log and skip them.

    Usage example:
        with CSQReader("recording.csq") as reader:
            for temps in reader:
                print(f"Average temperature: {temps.mean():.2f}°C")
    """

    def __init__(
        self,
        source: Union[str, Path, BinaryIO],
        metadata_extractor: Optional[MetadataExtractor] = None,
        image_decoder: Optional[RawImageDecoder] = None,
        block_size: int = BLOCKSIZE,
    ):
        if metadata_extractor is None or image_decoder is None:
            if not exiftool_available():
                raise ToolUnavailableError("exiftool not available for execution")
        if image_decoder is None and not jpeg_decoder_available():
            raise ToolUnavailableError(
                "No lossless JPEG decoder available; install pylibjpeg-libjpeg"
            )
        self.metadata_extractor = metadata_extractor or ExifToolMetadataExtractor()
        self.image_decoder = image_decoder or PyLibJpegDecoder()

        if isinstance(source, (str, Path)):
            path = Path(source)
            if not path.exists():
                raise FileNotFoundError(f"File not found: {path}")
            self.stream = open(path, "rb")
            self._owns_stream = True
            self.name = path.name
        else:
            self.stream = source
            self._owns_stream = False
            self.name = getattr(source, "name", "<stream>")

        self.splitter = ChunkedFrameSplitter(self.stream, block_size)
        self.index = 0

    def next_thermal_frame(self) -> Optional[ThermalFrame]:
        """Return the next converted frame, or None at end of stream."""
        frame = self.splitter.next_frame()
        if frame is None:
            return None

        index = self.index
        self.index += 1

        metadata = self.metadata_extractor.extract(frame)
        calibration = CalibrationParameters.from_metadata(metadata)
        raw = self.image_decoder.decode(frame)
        temperatures = raw_to_temperature(raw, calibration)
        return ThermalFrame(index=index, temperature_data=temperatures, calibration=calibration)

    def next_frame(self) -> Optional[np.ndarray]:
        """Return the next temperature grid (°C), or None at end of stream."""
        frame = self.next_thermal_frame()
        return None if frame is None else frame.temperature_data

    def frames(self, skip_errors: bool = False) -> Iterator[ThermalFrame]:
        """Yield ThermalFrame objects; with skip_errors, log and skip bad blocks and frames."""
        while True:
            try:
                frame = self.next_thermal_frame()
            except RECOVERABLE_ERRORS as e:
                if not skip_errors:
                    raise
                logger.warning("%s: skipping after frame %d: %s", self.name, self.index, e)
                continue
            if frame is None:
                return
            yield frame

    def __iter__(self) -> "CSQReader":
        return self

    def __next__(self) -> np.ndarray:
        temperatures = self.next_frame()
        if temperatures is None:
            raise StopIteration
        return temperatures

    def close(self):
        if self._owns_stream and not self.stream.closed:
            self.stream.close()

    def __enter__(self) -> "CSQReader":
        return self

    def __exit__(self, exc_type, exc, tb):
        self.close()
