"""Test the first-order SVF: coefficient table, response shape, regression.

Run: uv run python tests/test_first_order.py
"""

import math
import os
import sys

import numpy as np

sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))
from svf.first_order import IIR1, IIR1Coefficients

SR = 48000
DESIGNERS = [
    IIR1Coefficients.lowpass,
    IIR1Coefficients.highpass,
    IIR1Coefficients.allpass,
    IIR1Coefficients.lowshelf,
    IIR1Coefficients.highshelf,
]


def hash_noise(n_samples, dtype):
    """x[n] = fract(sin(n * 12.9898) * 43758.5453), computed in dtype."""
    real = np.dtype(dtype).type
    out = np.empty(n_samples, dtype=dtype)
    for n in range(n_samples):
        s = real(math.sin(real(n) * real(12.9898)))
        p = s * real(43758.5453)
        out[n] = p - np.trunc(p)
    return out


def run(filt, audio):
    output = np.zeros_like(audio)
    for i in range(len(audio)):
        output[i] = filt.process(audio[i])
    return output


# ---------------------------------------------------------------------------
# Test 1: Output mix per archetype
# ---------------------------------------------------------------------------
def test_mix_table():
    print("Test 1: First-order mix coefficients")
    g = math.tan(math.pi * 1000 / SR)

    lp = IIR1Coefficients.lowpass(1000, 0.0, SR)
    assert (lp.m0, lp.m1) == (0.0, 1.0)
    assert lp.a == 1.0
    assert np.isclose(lp.g, g)
    assert np.isclose(lp.a1, g / (1 + g))

    hp = IIR1Coefficients.highpass(1000, 0.0, SR)
    assert (hp.m0, hp.m1) == (1.0, -1.0)

    ap = IIR1Coefficients.allpass(1000, 0.0, SR)
    assert (ap.m0, ap.m1) == (1.0, -2.0)

    a = 10 ** (6.0 / 20)
    ls = IIR1Coefficients.lowshelf(1000, 6.0, SR)
    assert np.isclose(ls.a, a)
    assert np.isclose(ls.g, g / math.sqrt(a))
    assert ls.m0 == 1.0 and np.isclose(ls.m1, a - 1)

    hs = IIR1Coefficients.highshelf(1000, 6.0, SR)
    assert np.isclose(hs.g, g * math.sqrt(a))
    assert np.isclose(hs.m0, a) and np.isclose(hs.m1, 1 - a)
    print("  mix table: OK")


# ---------------------------------------------------------------------------
# Test 2: gain_db only matters for shelves
# ---------------------------------------------------------------------------
def test_gain_ignored_without_shelf():
    print("Test 2: gain_db ignored by lowpass/highpass/allpass")
    for design in DESIGNERS[:3]:
        assert design(1000, 0.0, SR) == design(1000, 12.0, SR)
    assert IIR1Coefficients.lowshelf(1000, 0.0, SR) != IIR1Coefficients.lowshelf(1000, 12.0, SR)


# ---------------------------------------------------------------------------
# Test 3: Cutoff above Nyquist is clamped, coefficients stay finite
# ---------------------------------------------------------------------------
def test_nyquist_clamp():
    print("Test 3: Cutoff clamped to Nyquist")
    for dtype in (np.float32, np.float64):
        over = IIR1Coefficients.lowpass(30000, 0.0, SR, dtype=dtype)
        at = IIR1Coefficients.lowpass(SR / 2, 0.0, SR, dtype=dtype)
        assert over.g == at.g
        assert over.g > 0 and np.isfinite(over.a1)


def test_coefficients_finite():
    print("Test 4: g >= 0 and finite a1 across sample rates and cutoffs")
    for fs in (8000, 44100, 48000, 96000, 192000):
        for frac in (1e-4, 0.01, 0.1, 0.25, 0.45, 0.5):
            for design in DESIGNERS:
                for dtype in (np.float32, np.float64):
                    c = design(frac * fs, 6.0, fs, dtype=dtype)
                    assert c.g >= 0, (design.__name__, fs, frac, dtype)
                    assert np.isfinite(c.a1), (design.__name__, fs, frac, dtype)
    print("  all designs finite: OK")


# ---------------------------------------------------------------------------
# Test 5: Response shape at DC and Nyquist
# ---------------------------------------------------------------------------
def test_response_extremes():
    print("Test 5: DC / Nyquist response")
    for dtype, tol in ((np.float64, 1e-9), (np.float32, 1e-4)):
        lp = IIR1Coefficients.lowpass(1000, 0.0, SR, dtype=dtype)
        hp = IIR1Coefficients.highpass(1000, 0.0, SR, dtype=dtype)
        assert abs(abs(lp.bode_sample(0.0)) - 1.0) < tol
        assert abs(hp.bode_sample(0.0)) < tol
        assert abs(lp.bode_sample(SR / 2)) < tol
        assert abs(abs(hp.bode_sample(SR / 2)) - 1.0) < tol

    for db in (-12.0, 6.0, 18.0):
        a = 10 ** (db / 20)
        hs = IIR1Coefficients.highshelf(500, db, SR)
        ls = IIR1Coefficients.lowshelf(500, db, SR)
        assert np.isclose(abs(hs.bode_sample(SR / 2)), a)
        assert np.isclose(abs(hs.bode_sample(0.0)), 1.0)
        assert np.isclose(abs(ls.bode_sample(0.0)), a)
        assert np.isclose(abs(ls.bode_sample(SR / 2)), 1.0)
        # Near Nyquist the high shelf has settled onto its gain
        assert abs(abs(hs.bode_sample(0.45 * SR)) / a - 1.0) < 0.05
    print("  shelves reach their gain: OK")


def test_allpass_flat():
    print("Test 6: Allpass magnitude is flat, phase is +90 at the cutoff")
    ap = IIR1Coefficients.allpass(2000, 0.0, SR)
    for f in (10.0, 100.0, 2000.0, 10000.0, 23000.0):
        assert np.isclose(abs(ap.bode_sample(f)), 1.0)
    assert np.isclose(np.angle(ap.bode_sample(2000.0), deg=True), 90.0)


# ---------------------------------------------------------------------------
# Test 7: Regression: high shelf on the hash-noise sequence
# ---------------------------------------------------------------------------
def test_regression_highshelf():
    print("Test 7: High shelf regression at n=500")
    expected = {np.float32: (-0.41374409, 1e-5), np.float64: (-0.9407069884178492, 1e-9)}
    for dtype, (value, tol) in expected.items():
        audio = hash_noise(1000, dtype)
        filt = IIR1(IIR1Coefficients.highshelf(1000.0, 6.0, 48000.0, dtype=dtype))
        output = run(filt, audio)
        assert output.dtype == dtype
        print(f"  {np.dtype(dtype).name}: y[500] = {output[500]!r}")
        assert abs(output[500] - value) < tol


# ---------------------------------------------------------------------------
# Test 8: State handling
# ---------------------------------------------------------------------------
def test_update_keeps_state():
    print("Test 8: update_coefficients leaves the integrator alone")
    audio = hash_noise(200, np.float64)
    filt = IIR1(IIR1Coefficients.lowpass(500, 0.0, SR))
    twin = IIR1(IIR1Coefficients.lowpass(500, 0.0, SR))
    run(filt, audio)
    run(twin, audio)

    before = filt.ic1eq
    filt.update_coefficients(IIR1Coefficients.highpass(5000, 0.0, SR))
    assert filt.ic1eq == before
    assert filt.ic1eq.tobytes() == before.tobytes()
    assert filt.ic1eq != 0.0

    # Only the next sample sees the new coefficients
    assert filt.process(0.5) != twin.process(0.5)


def test_reset():
    print("Test 9: reset zeroes the register, keeps coefficients")
    coeffs = IIR1Coefficients.lowpass(500, 0.0, SR)
    filt = IIR1(coeffs)
    first = filt.process(1.0)
    filt.process(1.0)
    filt.reset()
    assert filt.ic1eq == 0.0
    assert filt.coeffs is coeffs
    assert filt.process(1.0) == first


def test_empty_is_silent():
    print("Test 10: empty coefficients output silence")
    filt = IIR1(IIR1Coefficients.empty(np.float32))
    audio = hash_noise(64, np.float32)
    assert not np.any(run(filt, audio))


def test_bad_input_propagates():
    print("Test 11: Non-positive sample rate gives NaN, no exception")
    c = IIR1Coefficients.lowpass(1000, 0.0, 0.0)
    assert np.isnan(c.g)
    c = IIR1Coefficients.highshelf(1000, 6.0, -48000.0)
    assert isinstance(c, IIR1Coefficients)


if __name__ == "__main__":
    print(f"Sample rate: {SR} Hz\n")
    test_mix_table()
    test_gain_ignored_without_shelf()
    test_nyquist_clamp()
    test_coefficients_finite()
    test_response_extremes()
    test_allpass_flat()
    test_regression_highshelf()
    test_update_keeps_state()
    test_reset()
    test_empty_is_silent()
    test_bad_input_propagates()
    print("\nDone!")
