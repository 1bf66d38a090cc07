"""
clipdeck Audio System
=====================

Decoded, cached clips played round-robin across a fixed channel pool.

Quick Start:
    from clipdeck.audio import AudioSystem

    audio = AudioSystem()
    audio.add("move", "audios/move.wav")
    audio.play("move")
    audio.wait()
"""

from .config import AudioConfig
from .errors import (
    AudioError,
    SourceReadError,
    DecodeError,
    UnknownClipError,
    ChannelAllocationError,
)
from .source import BufferedSource, ClipFormat, decode_clip, read_source_bytes
from .channel import Channel
from .device import OutputDevice, acquire_output_device, SOUNDDEVICE_AVAILABLE
from .system import AudioSystem

__all__ = [
    'AudioSystem',
    'AudioConfig',
    'AudioError',
    'SourceReadError',
    'DecodeError',
    'UnknownClipError',
    'ChannelAllocationError',
    'BufferedSource',
    'ClipFormat',
    'decode_clip',
    'read_source_bytes',
    'Channel',
    'OutputDevice',
    'acquire_output_device',
    'SOUNDDEVICE_AVAILABLE',
]
