"""Split a .csq byte stream into raw frames without loading it whole."""

import logging
from collections import deque
from typing import BinaryIO, Deque, List, Optional

from .constants import BLOCKSIZE, MAGIC_PATTERN, MAGIC_SEQUENCE, MAX_LEFTOVER
from .exceptions import InsufficientMarkers, NoMarkerFound, StreamIoError

logger = logging.getLogger(__name__)


class ChunkedFrameSplitter:
    """
    Read a stream in fixed-size blocks and cut it into frames at each marker.

    A frame runs from one marker up to (not including) the next. Bytes after
    the last marker of a block are kept as leftover and completed by the
    bytes in front of the first marker of the next block. At end of stream
    the leftover is returned as the last frame. A leftover that grows past
    max_leftover without meeting another marker is dropped with a warning.

    Usage example:
        with open("recording.csq", "rb") as f:
            splitter = ChunkedFrameSplitter(f)
            while (frame := splitter.next_frame()) is not None:
                ...
    """

    def __init__(self, stream: BinaryIO, block_size: int = BLOCKSIZE, max_leftover: int = MAX_LEFTOVER):
        if block_size <= 0:
            raise ValueError(f"block_size must be positive, got {block_size}")
        if max_leftover < block_size:
            raise ValueError(f"max_leftover must be at least block_size, got {max_leftover}")
        self.stream = stream
        self.block_size = block_size
        self.max_leftover = max_leftover
        self.leftover = b""
        # Tail of data seen before the first marker, in case a marker straddles blocks
        self._head = b""
        self.frames: Deque[bytes] = deque()
        self.blocks_read = 0
        self.exhausted = False

    def next_frame(self) -> Optional[bytes]:
        """
        Return the next complete frame, refilling from the stream as needed.

        Returns None once the stream is exhausted. NoMarkerFound and
        InsufficientMarkers are raised for the block that caused them; the
        splitter stays usable and the next call reads on.
        """
        while not self.frames:
            if self.exhausted:
                return None
            self.refill()
        return self.frames.popleft()

    def refill(self) -> None:
        """Read one block and queue the frames it completes."""
        try:
            block = self.stream.read(self.block_size)
        except OSError as e:
            raise StreamIoError(f"Failed to read stream: {e}") from e

        if not block:
            self.exhausted = True
            if self.leftover:
                self.frames.append(self.leftover)
                self.leftover = b""
            return

        self.blocks_read += 1
        frames = self.split_block(block)
        logger.debug("Block %d: %d bytes, %d frames", self.blocks_read, len(block), len(frames))

    def split_block(self, block: bytes) -> List[bytes]:
        """
        Queue the frames completed by block and return them.

        Frames completed before an error is raised stay queued. A block
        without a marker extends the leftover, up to max_leftover. A block
        with a single marker closes the previous frame and starts a new
        leftover. A marker cut in two by the block boundary is still found.
        """
        carry = len(self.leftover)
        if carry:
            data = self.leftover + block
            # The leftover starts with its own marker; only its tail can hold the start of another.
            search_from = max(1, carry - len(MAGIC_SEQUENCE) + 1)
        else:
            data = self._head + block
            search_from = 0
        self._head = b""
        starts = [m.start() for m in MAGIC_PATTERN.finditer(data, search_from)]

        if not starts:
            if carry and len(data) <= self.max_leftover:
                self.leftover = data
            else:
                if carry:
                    logger.warning(
                        "Dropping %d bytes: no frame marker within %d bytes", len(data), self.max_leftover
                    )
                    self.leftover = b""
                self._head = data[-(len(MAGIC_SEQUENCE) - 1):]
            raise NoMarkerFound(f"No frame marker in block {self.blocks_read} ({len(block)} bytes)")

        frames = []
        first = starts[0]
        if carry:
            frames.append(data[:first])
        elif first:
            logger.debug("Discarding %d bytes before the first marker", first)

        for start, end in zip(starts, starts[1:]):
            frames.append(data[start:end])

        self.leftover = data[starts[-1]:]
        self.frames.extend(frames)

        if len(starts) == 1:
            raise InsufficientMarkers(
                f"Only one frame marker in block {self.blocks_read} ({len(block)} bytes)"
            )
        return frames
