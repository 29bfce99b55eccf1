"""
Click waveform generation.

A dull percussive click: white noise through a one-pole low-pass,
shaped by a quadratic decay envelope. Generated once at startup and
replayed for every row.
"""

import random
from typing import Optional

import numpy as np
from numpy.typing import NDArray

FILTER_FEEDBACK = 0.85  # weight of the previous filtered sample
CLICK_GAIN = 3.0


def noise(rng: random.Random) -> float:
    """White noise sample in [-1, 1)."""
    return rng.random() * 2 - 1


def lowpass(samples: NDArray[np.float32], feedback: float = FILTER_FEEDBACK) -> NDArray[np.float32]:
    """One-pole low-pass: out[i] = out[i-1] * feedback + in[i] * (1 - feedback)."""
    out = np.empty_like(samples)
    prev = 0.0
    for i, s in enumerate(samples):
        prev = prev * feedback + float(s) * (1.0 - feedback)
        out[i] = prev
    return out


def decay_envelope(num_samples: int) -> NDArray[np.float32]:
    """Quadratic decay, (1 - i/N)^2."""
    if num_samples <= 0:
        return np.zeros(0, dtype=np.float32)
    ramp = 1.0 - np.arange(num_samples, dtype=np.float32) / num_samples
    return ramp * ramp


def synthesize_click(
    sample_rate: int = 44100,
    duration_ms: int = 20,
    rng: Optional[random.Random] = None,
) -> NDArray[np.float32]:
    """Generate the click waveform as mono float samples.

    Args:
        sample_rate: Samples per second
        duration_ms: Click length in milliseconds
        rng: Random source for the noise; a fresh generator if omitted

    Returns:
        float32 array of length sample_rate * duration_ms / 1000. Amplitude
        is not limited here and may exceed 1.0 after the gain.
    """
    rng = rng or random.Random()
    num_samples = (sample_rate * duration_ms) // 1000

    raw = np.array([noise(rng) for _ in range(num_samples)], dtype=np.float32)
    filtered = lowpass(raw)
    return (filtered * decay_envelope(num_samples) * CLICK_GAIN).astype(np.float32)


def to_pcm16(samples: NDArray[np.float32], channels: int = 1) -> NDArray[np.int16]:
    """Convert float samples to interleaved signed 16-bit PCM.

    Values outside [-1, 1] clip at the PCM range, as an output device would.
    """
    pcm = (np.clip(samples, -1.0, 1.0) * 32767).astype(np.int16)
    if channels > 1:
        pcm = np.repeat(pcm[:, np.newaxis], channels, axis=1)
    return np.ascontiguousarray(pcm)
