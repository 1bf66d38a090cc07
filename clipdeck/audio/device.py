"""
OutputDevice - sounddevice output stream driving a set of channels.

The stream callback runs on PortAudio's thread and sums the next block of
every channel into the device buffer.
"""

from __future__ import annotations
from typing import List, Optional
import logging
import threading

import numpy as np

from .channel import Channel
from .config import AudioConfig
from .errors import ChannelAllocationError

logger = logging.getLogger(__name__)

# sounddevice raises OSError at import time when the PortAudio library is missing
try:
    import sounddevice as sd
    SOUNDDEVICE_AVAILABLE = True
except (ImportError, OSError) as e:
    sd = None
    SOUNDDEVICE_AVAILABLE = False
    logger.warning(f"sounddevice not available ({e}). Audio will be disabled.")


class OutputDevice:
    """
    One output stream plus the channels bound to it.

    Usage:
        device = OutputDevice(AudioConfig())
        device.open()
        channel = device.create_channel()
    """

    def __init__(self, config: AudioConfig):
        self.config = config
        self._channels: List[Channel] = []
        self._channels_lock = threading.Lock()
        self._stream: Optional[sd.OutputStream] = None
        self._closed = False

    @property
    def is_open(self) -> bool:
        return self._stream is not None

    @property
    def channels(self) -> List[Channel]:
        with self._channels_lock:
            return list(self._channels)

    def open(self):
        """Open and start the output stream. Raises sd.PortAudioError on failure."""
        if sd is None:
            raise OSError("sounddevice is not available")
        if self._stream is not None:
            return
        self._stream = sd.OutputStream(
            samplerate=self.config.sample_rate,
            blocksize=self.config.block_size,
            channels=self.config.output_channels,
            dtype='float32',
            device=self.config.device,
            callback=self._audio_callback,
        )
        self._stream.start()
        logger.info(f"OutputDevice: Started (sr={self.config.sample_rate}, "
                    f"buf={self.config.block_size}, ch={self.config.output_channels})")

    def create_channel(self) -> Channel:
        """Create a new channel bound to this device."""
        with self._channels_lock:
            index = len(self._channels)
            if self._closed:
                raise ChannelAllocationError(index, "device is closed")
            channel = Channel(index, self.config.output_channels)
            self._channels.append(channel)
        return channel

    def close(self):
        """Stop and close the stream. Safe to call more than once."""
        self._closed = True
        if self._stream is not None:
            self._stream.stop()
            self._stream.close()
            self._stream = None
            logger.info("OutputDevice: Stopped")

    def _audio_callback(self, outdata: np.ndarray, frames: int,
                        time_info, status):
        """Audio callback - runs on audio thread."""
        if status:
            logger.debug(f"OutputDevice: {status}")

        outdata.fill(0)
        for channel in self.channels:
            channel.mix_into(outdata)
        np.clip(outdata, -1.0, 1.0, out=outdata)


def acquire_output_device(config: AudioConfig) -> Optional[OutputDevice]:
    """Open the configured output device, or return None if there is none."""
    if not SOUNDDEVICE_AVAILABLE:
        return None

    device = OutputDevice(config)
    try:
        device.open()
    except (sd.PortAudioError, OSError, ValueError) as e:
        logger.warning(f"No usable audio output device: {e}")
        return None
    return device
