"""Offline synthesis primitives: curves, oscillators, filters, pan, mixing.

Every function works on mono ``float32``/``float64`` numpy arrays except
``pan``, which produces an ``(n, 2)`` stereo array.
"""
from __future__ import annotations

import math
from typing import Literal, Sequence

import numpy as np
from numpy.typing import NDArray
from scipy.signal import butter, sawtooth, sosfilt, square

SAMPLE_RATE = 44100

FloatArray = NDArray[np.floating]
Waveform = Literal["sine", "triangle", "square", "sawtooth"]
Breakpoints = Sequence[tuple[float, float]]


def sample_count(duration: float, sample_rate: int = SAMPLE_RATE) -> int:
    return max(int(round(duration * sample_rate)), 0)


def _time_axis(duration: float, sample_rate: int) -> FloatArray:
    return np.arange(sample_count(duration, sample_rate), dtype=np.float64) / sample_rate


def exponential_curve(
    points: Breakpoints, duration: float, sample_rate: int = SAMPLE_RATE
) -> FloatArray:
    """Exponential ramps between (time, value) breakpoints.

    The value holds before the first and after the last breakpoint. All
    values must be positive.
    """
    times = np.array([t for t, _ in points], dtype=np.float64)
    values = np.array([v for _, v in points], dtype=np.float64)
    if np.any(values <= 0):
        raise ValueError("exponential breakpoints must be positive")
    return np.exp(np.interp(_time_axis(duration, sample_rate), times, np.log(values)))


def linear_curve(
    points: Breakpoints, duration: float, sample_rate: int = SAMPLE_RATE
) -> FloatArray:
    times = np.array([t for t, _ in points], dtype=np.float64)
    values = np.array([v for _, v in points], dtype=np.float64)
    return np.interp(_time_axis(duration, sample_rate), times, values)


def oscillator(
    waveform: Waveform, frequency: FloatArray, sample_rate: int = SAMPLE_RATE
) -> FloatArray:
    """Band-unlimited oscillator following a per-sample frequency curve."""
    phase = 2.0 * np.pi * np.cumsum(frequency) / sample_rate
    if waveform == "sine":
        return np.sin(phase)
    if waveform == "triangle":
        return sawtooth(phase, width=0.5)
    if waveform == "square":
        return square(phase)
    if waveform == "sawtooth":
        return sawtooth(phase)
    raise ValueError(f"unknown waveform {waveform!r}")


def highpass(
    signal: FloatArray, cutoff: float, sample_rate: int = SAMPLE_RATE, order: int = 2
) -> FloatArray:
    nyquist = sample_rate / 2
    cutoff = min(max(cutoff, 1.0), nyquist * 0.99)
    sos = butter(order, cutoff, btype="highpass", fs=sample_rate, output="sos")
    return sosfilt(sos, signal)


def bandpass(
    signal: FloatArray, center: float, q: float, sample_rate: int = SAMPLE_RATE
) -> FloatArray:
    """Second-order band-pass around `center` with the bandwidth implied by `q`."""
    if q <= 0:
        raise ValueError("q must be positive")
    octaves = 2.0 / math.log(2.0) * math.asinh(1.0 / (2.0 * q))
    nyquist = sample_rate / 2
    low = max(center / 2.0 ** (octaves / 2), 1.0)
    high = min(center * 2.0 ** (octaves / 2), nyquist * 0.99)
    if low >= high:
        return np.zeros_like(signal)
    sos = butter(1, [low, high], btype="bandpass", fs=sample_rate, output="sos")
    return sosfilt(sos, signal)


def pan(signal: FloatArray, position: float) -> FloatArray:
    """Equal-power pan of a mono signal; -1 is hard left, 1 hard right."""
    position = min(max(position, -1.0), 1.0)
    x = (position + 1.0) / 2.0 * (math.pi / 2.0)
    return np.column_stack((signal * math.cos(x), signal * math.sin(x)))


def decaying_noise(
    rng: np.random.Generator, sample_rate: int = SAMPLE_RATE, duration: float = 0.5
) -> NDArray[np.float32]:
    """White noise fading linearly from full scale to silence."""
    n = sample_count(duration, sample_rate)
    decay = 1.0 - np.arange(n, dtype=np.float64) / max(n, 1)
    return (rng.uniform(-1.0, 1.0, n) * decay).astype(np.float32)


def mix(layers: Sequence[tuple[int, FloatArray]]) -> FloatArray:
    """Sum mono layers, each placed at a sample offset."""
    if not layers:
        return np.zeros(0, dtype=np.float64)
    length = max(offset + len(layer) for offset, layer in layers)
    out = np.zeros(length, dtype=np.float64)
    for offset, layer in layers:
        out[offset:offset + len(layer)] += layer
    return out


def to_pcm16(stereo: FloatArray) -> NDArray[np.int16]:
    clipped = np.clip(stereo, -1.0, 1.0)
    return np.ascontiguousarray((clipped * 32767.0).astype(np.int16))
