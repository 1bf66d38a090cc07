"""
Audio errors.

Device absence is deliberately not represented here: a missing output device
puts AudioSystem into disabled mode instead of raising.
"""

from __future__ import annotations


class AudioError(RuntimeError):
    """Base class for every error raised by clipdeck.audio."""


class SourceReadError(AudioError):
    """Clip source bytes could not be read."""

    def __init__(self, source):
        self.source = source
        super().__init__(f"Could not read audio source: {source}")


class DecodeError(AudioError):
    """Source bytes are not a supported, well-formed audio file."""

    def __init__(self, name: str, reason: str = ""):
        self.name = name
        message = f"Could not decode audio clip '{name}'"
        if reason:
            message = f"{message}: {reason}"
        super().__init__(message)


class UnknownClipError(AudioError, KeyError):
    """play() was asked for a clip that was never added."""

    def __init__(self, name: str):
        self.name = name
        super().__init__(f"No clip named '{name}'")

    def __str__(self):
        return self.args[0]


class ChannelAllocationError(AudioError):
    """The output device was acquired but a playback channel could not be created."""

    def __init__(self, index: int, reason: str = ""):
        self.index = index
        message = f"Failed to create sound channel {index}"
        if reason:
            message = f"{message}: {reason}"
        super().__init__(message)
