"""Precision selection and the small numeric helpers shared by both orders.

A coefficient set lives in exactly one precision, float32 or float64,
picked at design time. Everything downstream (processing, response
evaluation) stays in that precision by doing plain numpy scalar
arithmetic, so each operation rounds to the chosen width.
"""

import numpy as np

PRECISIONS = {"f32": np.float32, "f64": np.float64}

_SUPPORTED = (np.dtype(np.float32), np.dtype(np.float64))


def resolve_dtype(dtype):
    """Return the numpy scalar type for np.float32/np.float64, a dtype, or "f32"/"f64"."""
    if isinstance(dtype, str) and dtype in PRECISIONS:
        dtype = PRECISIONS[dtype]
    dt = np.dtype(dtype)
    if dt not in _SUPPORTED:
        raise TypeError(f"Unsupported precision {dt}; use float32 or float64")
    return dt.type


def complex_type(real):
    """Complex scalar type matching a real scalar type."""
    return np.complex64 if real is np.float32 else np.complex128


def db_to_amp(db_gain, divisor, real):
    """10 ** (db_gain / divisor). divisor is 20 for amplitude, 40 per biquad section."""
    return real(10.0) ** (real(db_gain) / real(divisor))


def prewarp(f0, fs, real):
    """tan(pi * f0 / fs) with f0 clamped to Nyquist.

    The tangent is evaluated in float64 and rounded once, so g stays
    non-negative up to and including Nyquist in float32 too.
    """
    fs = real(fs)
    f0 = np.fmin(real(f0), fs * real(0.5))
    return real(np.tan(np.pi * np.float64(f0) / np.float64(fs)))


def z_sample(f_hz, fs, real):
    """z = exp(-j * 2pi * f / fs), from cos and sin."""
    w = -real(2.0 * np.pi) * real(f_hz) / real(fs)
    return np.cos(w) + np.sin(w) * complex_type(real)(1j)
