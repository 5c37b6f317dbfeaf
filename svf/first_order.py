"""First-order TPT state-variable filter: one trapezoidal integrator.

Per sample (zero-delay feedback loop already solved into a1):

    v1 = a1 * (x - ic1eq)
    v2 = v1 + ic1eq          # lowpass output
    ic1eq = v2 + v1
    y = m0 * x + m1 * v2

The archetype only changes a, g and the output mix (m0, m1).
"""

from dataclasses import dataclass

import numpy as np

from svf.numeric import db_to_amp, prewarp, resolve_dtype, z_sample


@dataclass(frozen=True, slots=True)
class IIR1Coefficients:
    """Resolved constants for a one-pole filter, all in one precision.

    a:  linear shelf gain (1 for non-shelving types)
    g:  prewarped cutoff, tan(pi * f0 / fs)
    a1: feedback coefficient, g / (1 + g)
    m0, m1: output mix of input and lowpass
    fs: sample rate the set was designed for
    """

    a: np.floating
    g: np.floating
    a1: np.floating
    m0: np.floating
    m1: np.floating
    fs: np.floating

    @property
    def dtype(self):
        return np.dtype(type(self.fs))

    def bode_sample(self, f_hz, fs=None):
        """Complex response at f_hz. abs() is linear gain, np.angle(h, deg=True) phase."""
        real = self.dtype.type
        if fs is None:
            fs = self.fs
        one = real(1.0)
        with np.errstate(all="ignore"):
            z = z_sample(f_hz, fs, real)
            denominator = self.g + z * (self.g - one) + one
            return self.m0 + (self.m1 * self.g * (z + one)) / denominator

    # -- designers ---------------------------------------------------------
    # db_gain is accepted everywhere so all archetypes share one signature.

    @classmethod
    def empty(cls, dtype=np.float64):
        """All-zero set: a filter holding it outputs silence."""
        zero = resolve_dtype(dtype)(0.0)
        return cls(a=zero, g=zero, a1=zero, m0=zero, m1=zero, fs=zero)

    @classmethod
    def lowpass(cls, f0, db_gain, fs, dtype=np.float64):
        real = resolve_dtype(dtype)
        with np.errstate(all="ignore"):
            g = prewarp(f0, fs, real)
            return cls._solve(real(1.0), g, real(0.0), real(1.0), fs, real)

    @classmethod
    def highpass(cls, f0, db_gain, fs, dtype=np.float64):
        real = resolve_dtype(dtype)
        with np.errstate(all="ignore"):
            g = prewarp(f0, fs, real)
            return cls._solve(real(1.0), g, real(1.0), real(-1.0), fs, real)

    @classmethod
    def allpass(cls, f0, db_gain, fs, dtype=np.float64):
        real = resolve_dtype(dtype)
        with np.errstate(all="ignore"):
            g = prewarp(f0, fs, real)
            return cls._solve(real(1.0), g, real(1.0), real(-2.0), fs, real)

    @classmethod
    def lowshelf(cls, f0, db_gain, fs, dtype=np.float64):
        """Gain db_gain below f0, unity above."""
        real = resolve_dtype(dtype)
        with np.errstate(all="ignore"):
            a = db_to_amp(db_gain, 20.0, real)
            g = prewarp(f0, fs, real) / np.sqrt(a)
            return cls._solve(a, g, real(1.0), a - real(1.0), fs, real)

    @classmethod
    def highshelf(cls, f0, db_gain, fs, dtype=np.float64):
        """Gain db_gain above f0, unity below."""
        real = resolve_dtype(dtype)
        with np.errstate(all="ignore"):
            a = db_to_amp(db_gain, 20.0, real)
            g = prewarp(f0, fs, real) * np.sqrt(a)
            return cls._solve(a, g, a, real(1.0) - a, fs, real)

    @classmethod
    def _solve(cls, a, g, m0, m1, fs, real):
        a1 = g / (real(1.0) + g)
        return cls(a=a, g=g, a1=a1, m0=m0, m1=m1, fs=real(fs))


class IIR1:
    """One-pole SVF: one integrator register plus the current coefficient set.

    Not thread-safe; one owner per audio thread.
    """

    def __init__(self, coefficients: IIR1Coefficients):
        self.coeffs = coefficients
        self._real = coefficients.dtype.type
        self.ic1eq = self._real(0.0)

    def process(self, x: float) -> float:
        c = self.coeffs
        x = self._real(x)
        v1 = c.a1 * (x - self.ic1eq)
        v2 = v1 + self.ic1eq
        self.ic1eq = v2 + v1
        return c.m0 * x + c.m1 * v2

    def update_coefficients(self, coefficients: IIR1Coefficients):
        """Swap coefficients mid-stream. The register is kept, so there is no click."""
        self.coeffs = coefficients
        self._real = coefficients.dtype.type

    def reset(self):
        self.ic1eq = self._real(0.0)
