"""
Audio Demo - Load a set of sound effects and play them.

Run: python audio_demo.py [AUDIO_DIR]

AUDIO_DIR may contain bomb.ogg, lose.ogg, move.wav, arrow_hit.ogg,
startup.mp3 and achieved.ogg. Without it a short tone is generated.
"""

import logging
import sys
import tempfile
from pathlib import Path

import numpy as np
import soundfile as sf

from clipdeck.audio import AudioSystem

CLIPS = {
    "explode": "bomb.ogg",
    "lose": "lose.ogg",
    "move": "move.wav",
    "pew": "arrow_hit.ogg",
    "startup": "startup.mp3",
    "win": "achieved.ogg",
}


def generate_move_clip(path: Path, sample_rate: int = 44100):
    """Write a short decaying blip to `path`."""
    t = np.linspace(0, 0.12, int(sample_rate * 0.12), dtype=np.float32)
    data = np.sin(2 * np.pi * 440 * t) * np.exp(-t * 30) * 0.5
    sf.write(str(path), data, sample_rate)


def main():
    logging.basicConfig(level=logging.INFO, format="%(name)s: %(message)s")

    print("=" * 60)
    print("CLIPDECK AUDIO DEMO")
    print("=" * 60)

    audio = AudioSystem()
    if audio.disabled():
        print("\nWARNING: no audio output device, running silent")

    audio_dir = Path(sys.argv[1]) if len(sys.argv) > 1 else None
    with tempfile.TemporaryDirectory() as tmp:
        if audio_dir is not None:
            for name, filename in CLIPS.items():
                path = audio_dir / filename
                if path.exists():
                    audio.add(name, path)
        if "move" not in audio:
            move_path = Path(tmp) / "move.wav"
            generate_move_clip(move_path, audio.config.sample_rate)
            audio.add("move", move_path)

        print(f"\nLoaded clips: {', '.join(audio.clip_names) or '(none)'}")

        for name in ["startup", "move", "move", "pew", "explode", "win"]:
            if audio.disabled() or name in audio:
                channel = audio.play(name)
                print(f"  play {name:8s} -> channel {channel}")

        print("\nWaiting for playback to finish...")
        audio.wait()
        audio.close()

    print("Done.")


if __name__ == "__main__":
    main()
