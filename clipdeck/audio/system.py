"""
AudioSystem - Named clips played round-robin across a fixed channel pool.
"""

from __future__ import annotations
from typing import Dict, List, Optional
import logging
import time

from .channel import Channel
from .config import AudioConfig
from .device import OutputDevice, acquire_output_device
from .errors import ChannelAllocationError, UnknownClipError
from .source import BufferedSource, SourceLike, decode_clip, read_source_bytes

logger = logging.getLogger(__name__)


class AudioSystem:
    """
    Loads, decodes and plays named audio clips on a pool of channels.

    You only need one of these per process. If no output device can be
    opened the system runs disabled: every method becomes a no-op.

    Usage:
        audio = AudioSystem()
        audio.add("move", "audios/move.wav")
        audio.play("move")
        audio.wait()
    """

    def __init__(
        self,
        config: AudioConfig = None,
        device: OutputDevice = None,
        enabled: bool = True,
    ):
        self.config = config or AudioConfig()
        self._clips: Dict[str, BufferedSource] = {}
        self._channels: List[Channel] = []
        self._cursor = 0
        self._device: Optional[OutputDevice] = None

        if not enabled:
            logger.info("AudioSystem: Disabled by request")
            return

        if device is None:
            device = acquire_output_device(self.config)
        if device is None:
            logger.warning("AudioSystem: No output device, running disabled")
            return

        for i in range(self.config.channel_count):
            try:
                self._channels.append(device.create_channel())
            except (RuntimeError, OSError) as e:
                device.close()
                if isinstance(e, ChannelAllocationError):
                    raise
                raise ChannelAllocationError(i, str(e)) from e
        self._device = device
        logger.info(f"AudioSystem: Ready with {len(self._channels)} channels")

    def disabled(self) -> bool:
        """True when no output device is available."""
        return self._device is None

    @property
    def cursor(self) -> int:
        """Index of the channel that will receive the next play request."""
        return self._cursor

    @property
    def channel_count(self) -> int:
        return len(self._channels)

    @property
    def clip_names(self) -> List[str]:
        return list(self._clips.keys())

    def has_clip(self, name: str) -> bool:
        return name in self._clips

    def __contains__(self, name: str) -> bool:
        return self.has_clip(name)

    def clip(self, name: str) -> BufferedSource:
        try:
            return self._clips[name]
        except KeyError:
            raise UnknownClipError(name) from None

    def add(self, name: str, source: SourceLike):
        """
        Load, decode and pre-warm a clip under `name`, replacing any previous clip.

        Decoding is forced here so the first play() does not pay the decode
        cost while audio is running.

        Args:
            name: Name used later with play()
            source: Path to an audio file (WAV, FLAC, Ogg Vorbis, MP3) or its bytes

        Raises:
            SourceReadError: the file could not be read
            DecodeError: the data is not a supported audio format
        """
        if self.disabled():
            return

        data = read_source_bytes(source)
        clip = decode_clip(data, name=name, block_frames=self.config.decode_block_frames)
        clip.warm()

        if clip.format.sample_rate != self.config.sample_rate:
            logger.warning(f"AudioSystem: Clip '{name}' is {clip.format.sample_rate} Hz, "
                           f"device is {self.config.sample_rate} Hz (no resampling)")

        self._clips[name] = clip
        logger.info(f"AudioSystem: Loaded '{name}' ({clip.duration:.2f}s)")

    def play(self, name: str) -> Optional[int]:
        """
        Queue clip `name` on the next channel in round-robin order.

        Returns:
            The channel index used, or None when disabled.

        Raises:
            UnknownClipError: `name` was never added
        """
        if self.disabled():
            return None

        clip = self.clip(name)
        index = self._cursor
        self._channels[index].append(clip.clone())
        self._cursor = (index + 1) % len(self._channels)
        logger.debug(f"AudioSystem: '{name}' -> channel {index}")
        return index

    def busy(self) -> bool:
        """True while any channel still has audio queued or playing."""
        return any(not channel.empty() for channel in self._channels)

    def wait(self):
        """Block until no sounds are playing."""
        if self.disabled():
            return

        while self.busy():
            time.sleep(self.config.poll_interval)

    def close(self):
        """Stop the output stream. The system is disabled afterwards."""
        if self._device is None:
            return
        self._device.close()
        self._device = None
        self._channels = []
        self._clips.clear()
        self._cursor = 0
