import numpy as np
import pytest
import soundfile as sf

from clipdeck.audio import AudioConfig, AudioSystem, OutputDevice


def write_clip(path, data, sample_rate=44100, subtype='FLOAT'):
    sf.write(str(path), np.asarray(data, dtype=np.float32), sample_rate, subtype=subtype)
    return path


def constant_clip(path, value, frames=100, sample_rate=44100):
    return write_clip(path, np.full(frames, value, dtype=np.float32), sample_rate)


def pump(device, frames=256, limit=10000):
    """Run the device callback until every channel is empty."""
    out = np.zeros((frames, device.config.output_channels), dtype=np.float32)
    for _ in range(limit):
        if all(channel.empty() for channel in device.channels):
            return
        device._audio_callback(out, frames, None, None)
    raise AssertionError("channels never drained")


@pytest.fixture
def config():
    return AudioConfig(poll_interval=0.01, decode_block_frames=256)


@pytest.fixture
def device(config):
    # Never opened: tests drive the callback by hand
    return OutputDevice(config)


@pytest.fixture
def audio(config, device):
    return AudioSystem(config=config, device=device)


@pytest.fixture
def move_wav(tmp_path):
    t = np.linspace(0, 0.1, 4410, dtype=np.float32)
    data = np.sin(2 * np.pi * 440 * t) * np.exp(-t * 30) * 0.5
    return write_clip(tmp_path / "move.wav", data, subtype='PCM_16')
