# clipdeck/__init__.py
"""
clipdeck - Small multi-channel sound effect playback.

Core components:
- AudioSystem: Clip store, round-robin dispatcher and drain
- BufferedSource: Lazily decoded clip with a shared cache
- Channel: FIFO playback queue
- OutputDevice: sounddevice stream driving the channels
"""

from .audio import (
    AudioSystem,
    AudioConfig,
    AudioError,
    SourceReadError,
    DecodeError,
    UnknownClipError,
    ChannelAllocationError,
)

__version__ = "0.1.0"

__all__ = [
    'AudioSystem',
    'AudioConfig',
    'AudioError',
    'SourceReadError',
    'DecodeError',
    'UnknownClipError',
    'ChannelAllocationError',
]
