"""Shared synthetic-signal fixtures for the ppg_core test suite."""
import numpy as np
import pytest


def make_sine(frequency, sample_rate, duration, amplitude=1.0, offset=0.0, phase=0.0):
    """Sampled offset + amplitude * sin(2*pi*f*t + phase)."""
    t = np.arange(int(round(sample_rate * duration))) / sample_rate
    return offset + amplitude * np.sin(2 * np.pi * frequency * t + phase)


@pytest.fixture
def sine():
    return make_sine


@pytest.fixture
def camera_ppg():
    """30 s of a 72 bpm camera-like PPG at 30 Hz: 0.5 + 0.1 * sin(2*pi*1.2*t)."""
    return make_sine(1.2, 30, 30, amplitude=0.1, offset=0.5)
