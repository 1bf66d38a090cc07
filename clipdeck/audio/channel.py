"""
Channel - Independent FIFO playback queue.

Sources appended to a channel play back-to-back in the order they were
queued. The caller thread appends; the device callback thread reads.
"""

from __future__ import annotations
from collections import deque
from typing import Deque, Iterator, Optional
import threading

import numpy as np

from .source import BufferedSource


def fit_channels(block: np.ndarray, channels: int) -> np.ndarray:
    """Map a (frames, n) block onto `channels` output channels."""
    n = block.shape[1]
    if n == channels:
        return block
    if n == 1:
        return np.repeat(block, channels, axis=1)
    if n > channels:
        return block[:, :channels]
    padded = np.zeros((block.shape[0], channels), dtype=block.dtype)
    padded[:, :n] = block
    return padded


class Channel:
    """A single playback queue."""

    def __init__(self, index: int, output_channels: int = 2):
        self.index = index
        self.output_channels = output_channels
        self._lock = threading.Lock()
        self._queue: Deque[BufferedSource] = deque()
        self._blocks: Optional[Iterator[np.ndarray]] = None
        self._block: Optional[np.ndarray] = None
        self._offset = 0

    def append(self, source: BufferedSource):
        """Queue `source` to play after everything already on this channel."""
        with self._lock:
            self._queue.append(source)

    def empty(self) -> bool:
        """True only when nothing is queued or playing."""
        with self._lock:
            return not self._queue and self._blocks is None

    def __len__(self) -> int:
        """Sources queued or in progress."""
        with self._lock:
            return len(self._queue) + (self._blocks is not None)

    def read(self, frames: int) -> np.ndarray:
        """
        Pull the next `frames` frames of this channel's output.

        Returns a float32 array of shape (frames, output_channels); anything
        past the end of the queue is silence.
        """
        out = np.zeros((frames, self.output_channels), dtype=np.float32)
        self.mix_into(out)
        return out

    def mix_into(self, out: np.ndarray) -> int:
        """Add this channel's next len(out) frames into `out`. Returns frames written."""
        frames = out.shape[0]
        written = 0
        with self._lock:
            while written < frames:
                block = self._current_block()
                if block is None:
                    break
                take = min(frames - written, len(block) - self._offset)
                chunk = block[self._offset:self._offset + take]
                out[written:written + take] += fit_channels(chunk, self.output_channels)
                self._offset += take
                written += take
        return written

    def _current_block(self) -> Optional[np.ndarray]:
        # Caller holds self._lock
        while True:
            if self._block is not None and self._offset < len(self._block):
                return self._block
            if self._blocks is not None:
                self._block = next(self._blocks, None)
                self._offset = 0
                if self._block is not None:
                    continue
                self._blocks = None
            if not self._queue:
                return None
            self._blocks = iter(self._queue.popleft())
