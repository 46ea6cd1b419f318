# tests/test_convolution.py

"""
Tests for the convolution reverb engine.
"""

import pytest
import numpy as np
from numpy.testing import assert_allclose, assert_array_equal

from reverberance.config.models import ReverbParameters
from reverberance.core.audio.effects import apply_convolution_reverb, synthesize_impulse_response
from reverberance.errors import InvalidParameterError

# --- Test Fixtures ---

@pytest.fixture
def sample_pulse():
    """A short pulse followed by silence (mono)."""
    sr = 8000
    signal = np.zeros(sr, dtype=np.float64)
    signal[800:900] = 0.8
    return signal, sr

# --- Test Cases ---

@pytest.mark.parametrize("n_dry,n_ir", [(1, 1), (10, 500), (500, 10), (8000, 4000)])
def test_output_length_matches_input(n_dry, n_ir):
    rng = np.random.default_rng(0)
    wet = apply_convolution_reverb(rng.standard_normal(n_dry), rng.standard_normal(n_ir))
    assert wet.shape == (n_dry,)
    assert wet.dtype == np.float64

def test_matches_truncated_direct_convolution():
    rng = np.random.default_rng(1)
    dry = rng.standard_normal(300)
    ir = rng.standard_normal(120)
    expected = np.convolve(dry, ir)[:300]
    expected /= np.max(np.abs(expected))
    assert_allclose(apply_convolution_reverb(dry, ir), expected, atol=1e-10)

def test_silent_input_stays_silent(sample_pulse):
    """One second of silence yields one second of silence, without normalization blow-up."""
    _, sr = sample_pulse
    ir = synthesize_impulse_response(ReverbParameters(decay_time_seconds=0.5), sr, seed=0)
    wet = apply_convolution_reverb(np.zeros(sr), ir)
    assert wet.shape == (sr,)
    assert_array_equal(wet, 0.0)
    assert np.all(np.isfinite(wet))

def test_unit_impulse_only_normalizes(sample_pulse):
    signal, _ = sample_pulse
    wet = apply_convolution_reverb(signal, np.array([1.0]))
    assert_allclose(wet, signal / 0.8, atol=1e-12)

def test_delayed_impulse_shifts_signal():
    dry = np.array([1.0, 0.5, -0.25, 0.0, 0.0])
    wet = apply_convolution_reverb(dry, np.array([0.0, 0.0, 2.0]))
    assert_allclose(wet, [0.0, 0.0, 1.0, 0.5, -0.25], atol=1e-12)

def test_tail_is_truncated(sample_pulse):
    """Reverb that would extend past the input end is discarded, not appended."""
    signal, sr = sample_pulse
    ir = synthesize_impulse_response(ReverbParameters(decay_time_seconds=2.0), sr, seed=2)
    wet = apply_convolution_reverb(signal, ir)
    assert len(wet) == len(signal)
    assert np.isclose(np.max(np.abs(wet)), 1.0)
    # Energy after the pulse shows the reverb tail
    assert np.mean(wet[2000:] ** 2) > 0.0

def test_input_is_not_modified(sample_pulse):
    signal, _ = sample_pulse
    original = signal.copy()
    apply_convolution_reverb(signal, np.array([0.5, 0.25]))
    assert_array_equal(signal, original)

def test_invalid_inputs():
    with pytest.raises(InvalidParameterError):
        apply_convolution_reverb(np.ones(10), np.array([]))
    with pytest.raises(InvalidParameterError):
        apply_convolution_reverb(np.ones((2, 10)), np.ones(3))
    with pytest.raises(InvalidParameterError):
        apply_convolution_reverb(np.ones(10), np.ones((2, 3)))
