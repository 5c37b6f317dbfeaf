"""Bode sweeps for plotting and analysis.

Thin layer over bode_sample(): the coefficient sets evaluate their own
transfer function; this module sweeps frequency grids and converts to
dB / degrees. Filters in series combine by complex multiplication, which
is the same as adding their dB and degree curves.
"""

import logging

import numpy as np

from svf.numeric import complex_type

log = logging.getLogger(__name__)


def evaluate(coeffs, f_hz, fs=None):
    """Complex response of one coefficient set at f_hz."""
    return coeffs.bode_sample(f_hz, fs)


def log_frequencies(n_points=256, f_lo=20.0, f_hi=20000.0):
    """Log-spaced frequency grid, f_lo..f_hi inclusive."""
    return np.geomspace(f_lo, f_hi, n_points)


def response(coeffs, freqs, fs=None):
    """Complex response at every frequency in freqs (same precision as coeffs)."""
    h = np.empty(len(freqs), dtype=complex_type(coeffs.dtype.type))
    for i, f in enumerate(freqs):
        h[i] = coeffs.bode_sample(f, fs)
    return h


def magnitude_db(h, floor=1e-12):
    return 20.0 * np.log10(np.maximum(np.abs(h), floor))


def phase_degrees(h):
    return np.angle(h, deg=True)


def combine(first, *rest):
    """Response of filters in series: product of their complex responses."""
    out = np.asarray(first)
    for h in rest:
        out = out * h
    return out


def bode(coeffs, freqs, fs=None):
    """Return (magnitude_db, phase_degrees) arrays over freqs."""
    h = response(coeffs, freqs, fs)
    log.debug("bode sweep: %d points, fs=%s", len(freqs), fs if fs is not None else coeffs.fs)
    return magnitude_db(h), phase_degrees(h)
