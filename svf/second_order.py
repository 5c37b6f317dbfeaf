"""Second-order TPT state-variable filter (two trapezoidal integrators).

Per sample, with the zero-delay feedback loop solved into a1, a2, a3:

    v3 = x - ic2eq
    v1 = a1 * ic1eq + a2 * v3        # bandpass
    v2 = ic2eq + a2 * ic1eq + a3 * v3  # lowpass
    ic1eq = 2 * v1 - ic1eq
    ic2eq = 2 * v2 - ic2eq
    y = m0 * x + m1 * v1 + m2 * v2

Every archetype is the same loop with a different output mix (m0, m1, m2);
shelves and bell additionally move g or k by the gain factor a.
"""

from dataclasses import dataclass

import numpy as np

from svf.numeric import db_to_amp, prewarp, resolve_dtype, z_sample


@dataclass(frozen=True, slots=True)
class IIR2Coefficients:
    """Resolved constants for a two-pole filter, all in one precision.

    a:      shelf/bell gain per section, 10 ** (db / 40) (1 otherwise)
    g:      prewarped cutoff; gpow2 = g * g
    k:      damping, 1 / Q (1 / (Q * a) for bell)
    a1..a3: solved feedback coefficients
    m0..m2: output mix of input, bandpass and lowpass
    fs:     sample rate the set was designed for
    """

    a: np.floating
    g: np.floating
    gpow2: np.floating
    k: np.floating
    a1: np.floating
    a2: np.floating
    a3: np.floating
    m0: np.floating
    m1: np.floating
    m2: np.floating
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
        two = real(2.0)
        with np.errstate(all="ignore"):
            z = z_sample(f_hz, fs, real)
            zpow2 = z * z
            gk = self.g * self.k
            denominator = ((self.gpow2 + gk + one)
                           + two * (self.gpow2 - one) * z
                           + (self.gpow2 - gk + one) * zpow2)
            return self.m0 + (self.m1 * self.g * (one - zpow2)
                              + self.m2 * self.gpow2 * (one + two * z + zpow2)) / denominator

    # -- designers ---------------------------------------------------------
    # Argument order is (f0, db_gain, q, fs) for every archetype; db_gain is
    # ignored by the types that have no gain.

    @classmethod
    def empty(cls, dtype=np.float64):
        """All-zero set: a filter holding it outputs silence."""
        zero = resolve_dtype(dtype)(0.0)
        return cls(a=zero, g=zero, gpow2=zero, k=zero, a1=zero, a2=zero, a3=zero,
                   m0=zero, m1=zero, m2=zero, fs=zero)

    @classmethod
    def lowpass(cls, f0, db_gain, q, fs, dtype=np.float64):
        real = resolve_dtype(dtype)
        with np.errstate(all="ignore"):
            g = prewarp(f0, fs, real)
            k = real(1.0) / real(q)
            return cls._solve(real(1.0), g, k, real(0.0), real(0.0), real(1.0), fs, real)

    @classmethod
    def highpass(cls, f0, db_gain, q, fs, dtype=np.float64):
        real = resolve_dtype(dtype)
        with np.errstate(all="ignore"):
            g = prewarp(f0, fs, real)
            k = real(1.0) / real(q)
            return cls._solve(real(1.0), g, k, real(1.0), -k, real(-1.0), fs, real)

    @classmethod
    def bandpass(cls, f0, db_gain, q, fs, dtype=np.float64):
        """Constant skirt gain; peak gain is Q."""
        real = resolve_dtype(dtype)
        with np.errstate(all="ignore"):
            g = prewarp(f0, fs, real)
            k = real(1.0) / real(q)
            return cls._solve(real(1.0), g, k, real(0.0), real(1.0), real(0.0), fs, real)

    @classmethod
    def notch(cls, f0, db_gain, q, fs, dtype=np.float64):
        real = resolve_dtype(dtype)
        with np.errstate(all="ignore"):
            g = prewarp(f0, fs, real)
            k = real(1.0) / real(q)
            return cls._solve(real(1.0), g, k, real(1.0), -k, real(0.0), fs, real)

    @classmethod
    def allpass(cls, f0, db_gain, q, fs, dtype=np.float64):
        real = resolve_dtype(dtype)
        with np.errstate(all="ignore"):
            g = prewarp(f0, fs, real)
            k = real(1.0) / real(q)
            return cls._solve(real(1.0), g, k, real(1.0), real(-2.0) * k, real(0.0), fs, real)

    @classmethod
    def lowshelf(cls, f0, db_gain, q, fs, dtype=np.float64):
        """Gain db_gain below f0, unity above."""
        real = resolve_dtype(dtype)
        one = real(1.0)
        with np.errstate(all="ignore"):
            a = db_to_amp(db_gain, 40.0, real)
            g = prewarp(f0, fs, real) / np.sqrt(a)
            k = one / real(q)
            return cls._solve(a, g, k, one, k * (a - one), a * a - one, fs, real)

    @classmethod
    def highshelf(cls, f0, db_gain, q, fs, dtype=np.float64):
        """Gain db_gain above f0, unity below."""
        real = resolve_dtype(dtype)
        one = real(1.0)
        with np.errstate(all="ignore"):
            a = db_to_amp(db_gain, 40.0, real)
            g = prewarp(f0, fs, real) * np.sqrt(a)
            k = one / real(q)
            return cls._solve(a, g, k, a * a, k * (one - a) * a, one - a * a, fs, real)

    @classmethod
    def bell(cls, f0, db_gain, q, fs, dtype=np.float64):
        """Peaking EQ: db_gain at f0, bandwidth set by q."""
        real = resolve_dtype(dtype)
        one = real(1.0)
        with np.errstate(all="ignore"):
            a = db_to_amp(db_gain, 40.0, real)
            g = prewarp(f0, fs, real)
            k = one / (real(q) * a)
            return cls._solve(a, g, k, one, k * (a * a - one), real(0.0), fs, real)

    @classmethod
    def _solve(cls, a, g, k, m0, m1, m2, fs, real):
        a1 = real(1.0) / (real(1.0) + g * (g + k))
        a2 = g * a1
        a3 = g * a2
        return cls(a=a, g=g, gpow2=g * g, k=k, a1=a1, a2=a2, a3=a3,
                   m0=m0, m1=m1, m2=m2, fs=real(fs))


class IIR2:
    """Two-pole SVF: two integrator registers plus the current coefficient set.

    Not thread-safe; one owner per audio thread.
    """

    def __init__(self, coefficients: IIR2Coefficients):
        self.coeffs = coefficients
        self._real = coefficients.dtype.type
        self._two = self._real(2.0)
        self.ic1eq = self._real(0.0)
        self.ic2eq = self._real(0.0)

    def process(self, x: float) -> float:
        c = self.coeffs
        x = self._real(x)
        v3 = x - self.ic2eq
        v1 = c.a1 * self.ic1eq + c.a2 * v3
        v2 = self.ic2eq + c.a2 * self.ic1eq + c.a3 * v3
        self.ic1eq = self._two * v1 - self.ic1eq
        self.ic2eq = self._two * v2 - self.ic2eq
        return c.m0 * x + c.m1 * v1 + c.m2 * v2

    def update_coefficients(self, coefficients: IIR2Coefficients):
        """Swap coefficients mid-stream. Registers are kept, so there is no click."""
        self.coeffs = coefficients
        self._real = coefficients.dtype.type
        self._two = self._real(2.0)

    def reset(self):
        self.ic1eq = self._real(0.0)
        self.ic2eq = self._real(0.0)
