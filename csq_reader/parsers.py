"""Read calibration metadata and raw thermal images out of single .csq frames with exiftool and pylibjpeg."""

import importlib.util
import json
import logging
import os
import shutil
import subprocess
import tempfile
import time
from contextlib import contextmanager
from typing import Dict, Iterator, List, Optional, Protocol

import numpy as np
import pylibjpeg

from .constants import RAW_THERMAL_IMAGE_TAG, get_exiftool_command
from .exceptions import DecodeError, MetadataToolError, ToolUnavailableError

logger = logging.getLogger(__name__)


class MetadataExtractor(Protocol):
    """Anything that maps the bytes of one frame to exiftool-style tag -> string values."""

    def extract(self, frame: bytes) -> Dict[str, str]:
        ...


class RawImageDecoder(Protocol):
    """Anything that turns the bytes of one frame into a 2-D grid of raw counts."""

    def decode(self, frame: bytes) -> np.ndarray:
        ...


def exiftool_available() -> bool:
    """Return True if the exiftool executable can be found."""
    return shutil.which(get_exiftool_command()) is not None


def jpeg_decoder_available() -> bool:
    """Return True if a pylibjpeg plugin able to decode lossless JPEG is installed."""
    return importlib.util.find_spec("libjpeg") is not None


@contextmanager
def frame_file(frame: bytes, suffix: str = ".fff") -> Iterator[str]:
    """Write frame to a temporary file for the lifetime of the block; always removed."""
    handle = tempfile.NamedTemporaryFile(prefix="csq_frame_", suffix=suffix, delete=False)
    try:
        with handle:
            handle.write(frame)
        yield handle.name
    finally:
        if os.path.exists(handle.name):
            os.remove(handle.name)


def run_exiftool(args: List[str], path: str) -> bytes:
    """Run exiftool on path and return its stdout; MetadataToolError on failure."""
    command = [get_exiftool_command(), *args, path]
    try:
        result = subprocess.run(command, capture_output=True, check=True)
    except FileNotFoundError as e:
        raise ToolUnavailableError(f"exiftool not found: {command[0]}") from e
    except subprocess.CalledProcessError as e:
        stderr = e.stderr.decode(errors="replace").strip() if e.stderr else ""
        raise MetadataToolError(f"exiftool exited with status {e.returncode}: {stderr}") from e
    return result.stdout


class ExifToolMetadataExtractor:
    """Extract the FLIR tags of a frame with `exiftool -j`."""

    def __init__(self, args: Optional[List[str]] = None):
        self.args = list(args) if args is not None else ["-j"]

    def extract(self, frame: bytes) -> Dict[str, str]:
        """Return tag name -> value (as string) for one frame."""
        with frame_file(frame) as path:
            start = time.perf_counter()
            stdout = run_exiftool(self.args, path)
            logger.debug("exiftool metadata took %.3fs", time.perf_counter() - start)

        try:
            records = json.loads(stdout.decode("utf-8", errors="replace"))
        except ValueError as e:
            raise MetadataToolError(f"exiftool returned invalid JSON: {e}") from e
        if not records or not isinstance(records[0], dict):
            raise MetadataToolError("exiftool returned no metadata")

        return {k: v if isinstance(v, str) else str(v) for k, v in records[0].items()}


class PyLibJpegDecoder:
    """Pull the embedded RawThermalImage out of a frame with exiftool and decode it with pylibjpeg."""

    def decode(self, frame: bytes) -> np.ndarray:
        """Return the raw sensor counts of one frame as a float32 (height, width) array."""
        with frame_file(frame) as path:
            try:
                image = run_exiftool(["-b", f"-{RAW_THERMAL_IMAGE_TAG}"], path)
            except MetadataToolError as e:
                raise DecodeError(f"Cannot extract {RAW_THERMAL_IMAGE_TAG}: {e}") from e

        if not image:
            raise DecodeError(f"Frame has no {RAW_THERMAL_IMAGE_TAG}")

        # The images in a .csq are old-style lossless JPEGs, which PIL cannot read
        try:
            decoded = pylibjpeg.decode(image)
        except Exception as e:
            raise DecodeError(f"Cannot decode {RAW_THERMAL_IMAGE_TAG}: {e}") from e

        arr = np.asarray(decoded, dtype=np.float32)
        if arr.ndim != 2 or arr.size == 0:
            raise DecodeError(f"Expected a 2-D raw image, got shape {arr.shape}")
        return arr
