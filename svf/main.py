#!/usr/bin/env python3
"""Print the Bode response of a designed filter.

Usage:
    python -m svf.main bell --cutoff 1000 --gain 6 --q 2
    python -m svf.main highshelf --order 1 --precision f32 --points 16
    python -m svf.main lowpass --preset preset.json
"""

import argparse
import json
import logging
import sys

from svf.bode import bode, log_frequencies
from svf.params import FILTER_TYPES, design, resolve_params

log = logging.getLogger(__name__)


def build_parser():
    parser = argparse.ArgumentParser(description="TPT SVF frequency response")
    parser.add_argument("filter_type", nargs="?", choices=FILTER_TYPES,
                        help="Filter archetype (default: preset or lowpass)")
    parser.add_argument("--order", type=int, choices=[1, 2])
    parser.add_argument("--cutoff", type=float, help="Cutoff/centre frequency in Hz")
    parser.add_argument("--gain", type=float, help="Gain in dB (shelves and bell)")
    parser.add_argument("--q", type=float, help="Resonance (order 2 only)")
    parser.add_argument("--fs", type=int, help="Sample rate in Hz")
    parser.add_argument("--precision", choices=["f32", "f64"])
    parser.add_argument("--preset", help="Preset JSON file")
    parser.add_argument("--points", type=int, default=24,
                        help="Number of log-spaced frequencies (default 24)")
    parser.add_argument("--f-lo", type=float, default=20.0)
    parser.add_argument("--f-hi", type=float, default=None,
                        help="Highest frequency (default: Nyquist)")
    parser.add_argument("-v", "--verbose", action="store_true")
    return parser


def main(argv=None):
    parser = build_parser()
    args = parser.parse_args(argv)
    logging.basicConfig(level=logging.DEBUG if args.verbose else logging.INFO,
                        format="%(name)s %(levelname)s: %(message)s")

    raw = {}
    if args.preset:
        with open(args.preset) as f:
            preset = json.load(f)
        preset.pop("_meta", None)
        raw.update(preset)
        log.info("loaded preset %s", args.preset)

    overrides = {
        "filter_type": args.filter_type,
        "order": args.order,
        "cutoff_hz": args.cutoff,
        "gain_db": args.gain,
        "q": args.q,
        "sample_rate": args.fs,
        "precision": args.precision,
    }
    raw.update({k: v for k, v in overrides.items() if v is not None})

    params = resolve_params(raw)
    try:
        coeffs = design(params)
    except ValueError as e:
        parser.error(str(e))

    fs = params["sample_rate"]
    f_hi = args.f_hi if args.f_hi is not None else fs / 2.0
    if args.points < 1:
        parser.error(f"--points must be at least 1, got {args.points}")
    if not 0.0 < args.f_lo <= f_hi:
        parser.error(f"need 0 < --f-lo <= --f-hi, got {args.f_lo} and {f_hi}")
    freqs = log_frequencies(args.points, args.f_lo, f_hi)
    mag, phase = bode(coeffs, freqs)

    log.info("order-%d %s, %.1f Hz, %.1f dB, q=%.3f, %d Hz, %s",
             params["order"], params["filter_type"], params["cutoff_hz"],
             params["gain_db"], params["q"], fs, params["precision"])
    print(f"{'freq (Hz)':>12} {'gain (dB)':>10} {'phase (deg)':>12}")
    for f, m, p in zip(freqs, mag, phase):
        print(f"{f:12.1f} {m:10.3f} {p:12.2f}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
