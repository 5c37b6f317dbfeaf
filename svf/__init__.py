"""TPT state-variable filters, first and second order, in float32 or float64.

    coeffs = IIR2Coefficients.bell(1000.0, 6.0, 0.7, 48000.0, dtype=np.float32)
    filt = IIR2(coeffs)
    y = filt.process(x)                 # one sample in, one sample out
    h = coeffs.bode_sample(1000.0)      # abs(h) gain, np.angle(h, deg=True) phase
"""

from svf.first_order import IIR1, IIR1Coefficients
from svf.numeric import PRECISIONS, resolve_dtype, z_sample
from svf.second_order import IIR2, IIR2Coefficients

__all__ = [
    "IIR1", "IIR1Coefficients",
    "IIR2", "IIR2Coefficients",
    "PRECISIONS", "resolve_dtype", "z_sample",
]
