"""
csq_reader - Python library for reading FLIR .csq radiometric sequences

A .csq file is a stream of FLIR frames, each holding a lossless JPEG raw
thermal image and its calibration metadata. The reader splits the stream
frame by frame and converts raw sensor counts to temperatures in °C.

Main usage:
    import csq_reader

    with csq_reader.read_csq("recording.csq") as reader:
        for temperature_data in reader:
            print(f"Average temperature: {temperature_data.mean():.2f}°C")

Requires the exiftool executable and the pylibjpeg-libjpeg plugin.
"""

__version__ = "0.1.0"

from .reader import read_csq, CSQReader
from .splitter import ChunkedFrameSplitter
from .models import CalibrationParameters, ThermalFrame
from .utilities import raw_to_temperature
from .parsers import ExifToolMetadataExtractor, PyLibJpegDecoder
from .exceptions import (
    CSQReaderError,
    ToolUnavailableError,
    StreamIoError,
    FrameSplitError,
    NoMarkerFound,
    InsufficientMarkers,
    CalibrationError,
    MissingField,
    MalformedField,
    DecodeError,
    MetadataToolError,
)

__all__ = [
    "read_csq",
    "CSQReader",
    "ChunkedFrameSplitter",
    "CalibrationParameters",
    "ThermalFrame",
    "raw_to_temperature",
    "ExifToolMetadataExtractor",
    "PyLibJpegDecoder",
    "CSQReaderError",
    "ToolUnavailableError",
    "StreamIoError",
    "FrameSplitError",
    "NoMarkerFound",
    "InsufficientMarkers",
    "CalibrationError",
    "MissingField",
    "MalformedField",
    "DecodeError",
    "MetadataToolError",
]
