"""Tests for Channel queues and the OutputDevice callback."""

import types

import numpy as np
import pytest

from clipdeck.audio import AudioConfig, Channel, ChannelAllocationError, OutputDevice, decode_clip
from clipdeck.audio import device as device_module
from clipdeck.audio.channel import fit_channels

from conftest import constant_clip, write_clip


def load(path, name="clip"):
    clip = decode_clip(path.read_bytes(), name=name, block_frames=64)
    clip.warm()
    return clip


def test_new_channel_is_empty():
    channel = Channel(0)
    assert channel.empty()
    assert len(channel) == 0
    assert not channel.read(32).any()


def test_channel_plays_sources_back_to_back(tmp_path):
    first = load(constant_clip(tmp_path / "a.wav", 0.25, frames=100))
    second = load(constant_clip(tmp_path / "b.wav", -0.5, frames=100))

    channel = Channel(0, output_channels=2)
    channel.append(first.clone())
    channel.append(second.clone())
    assert not channel.empty()
    assert len(channel) == 2

    out = channel.read(200)
    assert np.all(out[:100] == 0.25)
    assert np.all(out[100:] == -0.5)

    # Drained on the next pull
    tail = channel.read(10)
    assert not tail.any()
    assert channel.empty()


def test_channel_pads_with_silence(tmp_path):
    clip = load(constant_clip(tmp_path / "a.wav", 0.25, frames=30))
    channel = Channel(0, output_channels=1)
    channel.append(clip.clone())
    out = channel.read(50)
    assert np.all(out[:30] == 0.25)
    assert not out[30:].any()


def test_same_clip_on_two_channels(tmp_path):
    clip = load(constant_clip(tmp_path / "a.wav", 0.25, frames=80))
    left, right = Channel(0, 1), Channel(1, 1)
    left.append(clip.clone())
    right.append(clip.clone())
    assert np.array_equal(left.read(80), right.read(80))


def test_fit_channels():
    mono = np.array([[0.1], [0.2]], dtype=np.float32)
    assert np.allclose(fit_channels(mono, 2), [[0.1, 0.1], [0.2, 0.2]])

    quad = np.ones((2, 4), dtype=np.float32)
    assert fit_channels(quad, 2).shape == (2, 2)

    stereo = np.ones((2, 2), dtype=np.float32)
    padded = fit_channels(stereo, 3)
    assert padded.shape == (2, 3)
    assert not padded[:, 2].any()


def test_device_creates_indexed_channels():
    device = OutputDevice(AudioConfig())
    channels = [device.create_channel() for _ in range(3)]
    assert [c.index for c in channels] == [0, 1, 2]
    assert device.channels == channels
    assert not device.is_open


def test_closed_device_refuses_channels():
    device = OutputDevice(AudioConfig())
    device.close()
    with pytest.raises(ChannelAllocationError):
        device.create_channel()


def test_callback_sums_channels(tmp_path):
    device = OutputDevice(AudioConfig(output_channels=2))
    a, b = device.create_channel(), device.create_channel()
    a.append(load(constant_clip(tmp_path / "a.wav", 0.25, frames=64)))
    b.append(load(constant_clip(tmp_path / "b.wav", 0.125, frames=64)))

    out = np.full((64, 2), 9.0, dtype=np.float32)
    device._audio_callback(out, 64, None, None)
    assert np.allclose(out, 0.375)


def test_callback_clips_output(tmp_path):
    device = OutputDevice(AudioConfig(output_channels=1))
    for name in ("a", "b"):
        device.create_channel().append(
            load(constant_clip(tmp_path / f"{name}.wav", 0.75, frames=16)))

    out = np.zeros((16, 1), dtype=np.float32)
    device._audio_callback(out, 16, None, None)
    assert np.all(out == 1.0)


def test_acquire_without_sounddevice(monkeypatch):
    monkeypatch.setattr(device_module, "SOUNDDEVICE_AVAILABLE", False)
    assert device_module.acquire_output_device(AudioConfig()) is None


def test_acquire_when_stream_fails(monkeypatch):
    fake_sd = types.SimpleNamespace(PortAudioError=type("PortAudioError", (Exception,), {}))

    def fail(self):
        raise fake_sd.PortAudioError("Error querying device -1")

    monkeypatch.setattr(device_module, "SOUNDDEVICE_AVAILABLE", True)
    monkeypatch.setattr(device_module, "sd", fake_sd)
    monkeypatch.setattr(OutputDevice, "open", fail)
    assert device_module.acquire_output_device(AudioConfig()) is None


def test_stereo_clip_on_mono_device(tmp_path):
    data = np.zeros((20, 2), dtype=np.float32)
    data[:, 0] = 0.5
    clip = load(write_clip(tmp_path / "s.wav", data))
    channel = Channel(0, output_channels=1)
    channel.append(clip)
    assert np.all(channel.read(20) == 0.5)
