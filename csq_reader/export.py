"""Colorize temperature grids and write them out from a background thread."""

import logging
import queue
import threading
from pathlib import Path
from typing import List, Optional, Union

import matplotlib
import matplotlib.image
import numpy as np

from .models import ThermalFrame

logger = logging.getLogger(__name__)

SUPPORTED_FORMATS = ("png", "npy")

_STOP = object()


def colorize(temperatures: np.ndarray, cmap: str = "rainbow") -> np.ndarray:
    """Map a temperature grid to RGB uint8 (height, width, 3), stretched between its min and max."""
    temps = np.asarray(temperatures, dtype=np.float64)
    finite = np.isfinite(temps)
    normalized = np.zeros_like(temps)
    if finite.any():
        t_min = float(temps[finite].min())
        t_max = float(temps[finite].max())
        if t_max > t_min:
            normalized[finite] = (temps[finite] - t_min) / (t_max - t_min)
    rgba = matplotlib.colormaps[cmap](normalized)
    return (rgba[..., :3] * 255).astype(np.uint8)


class FrameExporter:
    """
    Single consumer thread writing frames in the order they are submitted.

    Frames go through a FIFO queue; the writer is only touched under a lock.
    close() lets the thread drain the queue, joins it, and re-raises the first
    write error, if any.

    Usage example:
        with FrameExporter("out", fmt="png") as exporter:
            for frame in reader.frames(skip_errors=True):
                exporter.submit(frame)
        print(f"Wrote {len(exporter.written)} frames")
    """

    def __init__(
        self,
        output_dir: Union[str, Path],
        fmt: str = "png",
        cmap: str = "rainbow",
        prefix: str = "frame",
    ):
        if fmt not in SUPPORTED_FORMATS:
            raise ValueError(
                f"Unsupported export format: {fmt}. Supported formats: {', '.join(SUPPORTED_FORMATS)}"
            )
        if cmap not in matplotlib.colormaps:
            raise ValueError(f"Unknown colormap: {cmap}")
        self.output_dir = Path(output_dir)
        self.output_dir.mkdir(parents=True, exist_ok=True)
        self.fmt = fmt
        self.cmap = cmap
        self.prefix = prefix
        self.written: List[Path] = []
        self.errors: List[Exception] = []
        self.lock = threading.Lock()
        self.queue: "queue.Queue" = queue.Queue()
        self._closed = False
        self._thread = threading.Thread(target=self._run, name="csq-frame-exporter", daemon=True)
        self._thread.start()

    def submit(self, frame: ThermalFrame):
        if self._closed:
            raise RuntimeError("FrameExporter is closed")
        self.queue.put(frame)

    def write(self, frame: ThermalFrame) -> Path:
        """Write one frame and return its path."""
        path = self.output_dir / f"{self.prefix}_{frame.index:05d}.{self.fmt}"
        with self.lock:
            if self.fmt == "png":
                matplotlib.image.imsave(path, colorize(frame.temperature_data, self.cmap))
            else:
                np.save(path, frame.temperature_data)
            self.written.append(path)
        return path

    def _run(self):
        while True:
            frame = self.queue.get()
            if frame is _STOP:
                break
            # Any failure is recorded and re-raised by close(); the queue keeps draining
            try:
                self.write(frame)
            except Exception as e:
                logger.error("Cannot write frame %d: %s", frame.index, e)
                self.errors.append(e)

    def close(self, timeout: Optional[float] = None):
        """Drain queued frames, stop the thread, and raise the first write error."""
        if not self._closed:
            self._closed = True
            self.queue.put(_STOP)
        self._thread.join(timeout)
        if self.errors:
            raise self.errors[0]

    def __enter__(self) -> "FrameExporter":
        return self

    def __exit__(self, exc_type, exc, tb):
        self.close()
