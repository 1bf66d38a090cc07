"""
BufferedSource - Lazily decoded, cache-backed audio clips.

A clip is decoded block by block the first time it is traversed. Decoded
blocks are kept in a cache shared by every clone of the source, so later
traversals (from any clone, on any thread) replay from memory instead of
decoding again.
"""

from __future__ import annotations
from dataclasses import dataclass
from pathlib import Path
from typing import Iterator, List, Optional, Union
import io
import logging
import os
import threading

import numpy as np
import soundfile as sf

from .errors import DecodeError, SourceReadError

logger = logging.getLogger(__name__)

SourceLike = Union[str, os.PathLike, bytes, bytearray, memoryview]


@dataclass(frozen=True)
class ClipFormat:
    """Format metadata of a decoded clip."""
    sample_rate: int
    channels: int


# =============================================================================
# Shared decode cache
# =============================================================================

class _DecodeCache:
    """Decoded blocks plus the decoder that is still producing them."""

    def __init__(self, blocks: Iterator[np.ndarray]):
        self._lock = threading.Lock()
        self._blocks: List[np.ndarray] = []
        self._pending: Optional[Iterator[np.ndarray]] = blocks
        self.decode_count = 0

    @property
    def complete(self) -> bool:
        with self._lock:
            return self._pending is None

    def block(self, index: int) -> Optional[np.ndarray]:
        """Return block `index`, decoding up to it if needed. None past the end."""
        with self._lock:
            while index >= len(self._blocks) and self._pending is not None:
                try:
                    block = next(self._pending)
                except StopIteration:
                    self._pending = None
                    break
                block.setflags(write=False)
                self._blocks.append(block)
                self.decode_count += 1
            if index < len(self._blocks):
                return self._blocks[index]
            return None

    def frames(self) -> int:
        with self._lock:
            return sum(len(b) for b in self._blocks)


class BufferedSource:
    """
    Immutable decoded sample sequence.

    Iterating yields read-only float32 blocks of shape (frames, channels).
    clone() returns a new handle on the same cache without copying samples.

    Usage:
        clip = decode_clip(Path("move.wav").read_bytes(), name="move")
        clip.warm()
        for block in clip.clone():
            ...
    """

    def __init__(self, name: str, fmt: ClipFormat, cache: _DecodeCache):
        self.name = name
        self.format = fmt
        self._cache = cache

    def __iter__(self) -> Iterator[np.ndarray]:
        index = 0
        while True:
            block = self._cache.block(index)
            if block is None:
                return
            yield block
            index += 1

    def clone(self) -> BufferedSource:
        return BufferedSource(self.name, self.format, self._cache)

    def shares_cache_with(self, other: BufferedSource) -> bool:
        return self._cache is other._cache

    def warm(self):
        """Decode everything now by traversing a clone and discarding the output."""
        for _ in self.clone():
            pass

    @property
    def is_cached(self) -> bool:
        return self._cache.complete

    @property
    def num_frames(self) -> int:
        """Frames decoded so far (the whole clip once cached)."""
        return self._cache.frames()

    @property
    def duration(self) -> float:
        return self.num_frames / self.format.sample_rate

    def to_array(self) -> np.ndarray:
        """Concatenate the full clip into one (frames, channels) array."""
        blocks = list(self)
        if not blocks:
            return np.zeros((0, self.format.channels), dtype=np.float32)
        return np.concatenate(blocks)

    def __repr__(self):
        return (f"BufferedSource({self.name!r}, sr={self.format.sample_rate}, "
                f"ch={self.format.channels}, cached={self.is_cached})")


# =============================================================================
# Loading
# =============================================================================

def read_source_bytes(source: SourceLike) -> bytes:
    """Return the full byte content of a path, or the bytes themselves."""
    if isinstance(source, (bytes, bytearray, memoryview)):
        return bytes(source)
    try:
        return Path(source).read_bytes()
    except OSError as e:
        raise SourceReadError(source) from e


def _iter_blocks(sound_file: sf.SoundFile, name: str,
                 block_frames: int) -> Iterator[np.ndarray]:
    with sound_file:
        try:
            for block in sound_file.blocks(blocksize=block_frames,
                                           dtype='float32', always_2d=True):
                yield block
        except RuntimeError as e:
            raise DecodeError(name, str(e)) from e


def decode_clip(data: bytes, name: str = "", block_frames: int = 4096) -> BufferedSource:
    """
    Open encoded audio (WAV, FLAC, Ogg Vorbis, MP3) for lazy decoding.

    Only the header is parsed here; sample data is decoded on first traversal.

    Raises:
        DecodeError: the bytes are not a supported audio format.
    """
    try:
        sound_file = sf.SoundFile(io.BytesIO(data))
    except RuntimeError as e:
        raise DecodeError(name, str(e)) from e

    fmt = ClipFormat(sample_rate=sound_file.samplerate, channels=sound_file.channels)
    logger.debug(f"Opened clip '{name}' ({sound_file.format}/{sound_file.subtype}, "
                 f"sr={fmt.sample_rate}, ch={fmt.channels})")
    cache = _DecodeCache(_iter_blocks(sound_file, name, block_frames))
    return BufferedSource(name, fmt, cache)
