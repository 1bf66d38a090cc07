"""
Audio configuration.
"""

from __future__ import annotations
from dataclasses import dataclass
from typing import Optional, Union


@dataclass
class AudioConfig:
    channel_count: int = 4            # Playback channels, fixed for the system's lifetime
    sample_rate: int = 44100          # Output stream rate (Hz)
    output_channels: int = 2          # Stereo output
    block_size: int = 512             # Frames per device callback
    decode_block_frames: int = 4096   # Frames decoded per cache block
    poll_interval: float = 0.05       # wait() polling interval (seconds)
    device: Optional[Union[int, str]] = None  # sounddevice id or name, None = default

    def __post_init__(self):
        for attr in ('channel_count', 'sample_rate', 'output_channels',
                     'block_size', 'decode_block_frames'):
            if getattr(self, attr) <= 0:
                raise ValueError(f"AudioConfig.{attr} must be positive")
        if self.poll_interval <= 0:
            raise ValueError("AudioConfig.poll_interval must be positive")
