"""Declarative parameter schema for designing a filter from a params dict.

The filter core never validates its numeric inputs; this is the layer that
does. A filter is described by a flat dict (GUI sliders, JSON presets and
the CLI all produce one); ParamSchema supplies defaults and ranges and
cleans raw dicts before design() hands them to a designer function.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Any

from svf.first_order import IIR1, IIR1Coefficients
from svf.numeric import PRECISIONS
from svf.second_order import IIR2, IIR2Coefficients

log = logging.getLogger(__name__)


class ParamType(Enum):
    FLOAT = "float"
    INT = "int"
    CHOICE = "choice"


@dataclass
class ParamDef:
    key: str
    type: ParamType
    default: Any
    section: str
    label: str = ""
    range: tuple | None = None        # (min, max) for continuous params
    choices: list[str] | None = None  # allowed values for CHOICE type


class ParamSchema:
    """Defaults, ranges and clamping derived from a declarative param list."""

    def __init__(self, params: list[ParamDef]):
        self._params = params
        self._by_key: dict[str, ParamDef] = {p.key: p for p in params}

    def default_params(self) -> dict:
        return {p.key: p.default for p in self._params}

    def param_ranges(self) -> dict[str, tuple]:
        """Continuous params only (float/int with range)."""
        result = {}
        for p in self._params:
            if p.range is not None and p.type != ParamType.CHOICE:
                result[p.key] = p.range
        return result

    def param_sections(self) -> dict[str, list[str]]:
        """Section name -> list of param keys."""
        sections: dict[str, list[str]] = {}
        for p in self._params:
            sections.setdefault(p.section, []).append(p.key)
        return sections

    def validate_and_clamp(self, raw: dict) -> dict:
        """Validate and clamp a raw params dict (e.g. a JSON preset).

        Unknown keys are dropped. Values are type-cast and clamped to range.
        Choice values are passed through as strings; design() rejects
        names it does not know.
        """
        result = {}
        for key, value in raw.items():
            p = self._by_key.get(key)
            if p is None:
                log.debug("dropping unknown param %r", key)
                continue

            if p.type == ParamType.INT:
                try:
                    v = int(round(value))
                except (TypeError, ValueError, OverflowError):
                    continue
            elif p.type == ParamType.FLOAT:
                try:
                    v = float(value)
                except (TypeError, ValueError, OverflowError):
                    continue
            else:
                result[key] = str(value)
                continue

            if p.range:
                lo, hi = p.range
                clamped = max(lo, min(hi, v))
                if clamped != v:
                    log.debug("clamped %s: %s -> %s", key, v, clamped)
                v = clamped
            result[key] = v

        return result

    def get(self, key: str) -> ParamDef | None:
        return self._by_key.get(key)

    def __iter__(self):
        return iter(self._params)

    def __len__(self):
        return len(self._params)


# ── Archetypes ────────────────────────────────────────────────────────

ARCHETYPES = {
    1: {
        "lowpass": IIR1Coefficients.lowpass,
        "highpass": IIR1Coefficients.highpass,
        "allpass": IIR1Coefficients.allpass,
        "lowshelf": IIR1Coefficients.lowshelf,
        "highshelf": IIR1Coefficients.highshelf,
    },
    2: {
        "lowpass": IIR2Coefficients.lowpass,
        "highpass": IIR2Coefficients.highpass,
        "bandpass": IIR2Coefficients.bandpass,
        "notch": IIR2Coefficients.notch,
        "allpass": IIR2Coefficients.allpass,
        "lowshelf": IIR2Coefficients.lowshelf,
        "highshelf": IIR2Coefficients.highshelf,
        "bell": IIR2Coefficients.bell,
    },
}

FILTER_TYPES = list(ARCHETYPES[2])

# ── Schema ────────────────────────────────────────────────────────────

T = ParamType

SCHEMA = ParamSchema([
    ParamDef("filter_type", T.CHOICE, section="filter",
             default="lowpass", choices=FILTER_TYPES),
    ParamDef("order", T.INT, section="filter",
             default=2, range=(1, 2)),
    ParamDef("cutoff_hz", T.FLOAT, section="tuning", label="Cutoff (Hz)",
             default=1000.0, range=(1.0, 192000.0)),
    ParamDef("gain_db", T.FLOAT, section="tuning", label="Gain (dB)",
             default=0.0, range=(-48.0, 48.0)),
    ParamDef("q", T.FLOAT, section="tuning", label="Q",
             default=0.7071, range=(0.025, 40.0)),
    ParamDef("sample_rate", T.INT, section="tuning", label="Sample rate (Hz)",
             default=48000, range=(8000, 384000)),
    ParamDef("precision", T.CHOICE, section="numeric",
             default="f64", choices=list(PRECISIONS)),
])


def default_params() -> dict:
    return SCHEMA.default_params()


def resolve_params(raw: dict) -> dict:
    """Defaults overlaid with the validated, clamped values from raw."""
    params = default_params()
    params.update(SCHEMA.validate_and_clamp(raw))
    return params


def design(raw: dict):
    """Design a coefficient set from a params dict.

    Raises ValueError for a filter type the order does not offer or an
    unknown precision.
    """
    params = resolve_params(raw)
    order = params["order"]
    name = params["filter_type"].strip().lower()
    table = ARCHETYPES[order]
    if name not in table:
        raise ValueError(f"Unknown order-{order} filter type '{name}'. "
                         f"Available: {', '.join(table)}")
    if params["precision"] not in PRECISIONS:
        raise ValueError(f"Unknown precision '{params['precision']}'. "
                         f"Available: {', '.join(PRECISIONS)}")
    dtype = PRECISIONS[params["precision"]]

    if order == 1:
        coeffs = table[name](params["cutoff_hz"], params["gain_db"],
                             params["sample_rate"], dtype=dtype)
    else:
        coeffs = table[name](params["cutoff_hz"], params["gain_db"], params["q"],
                             params["sample_rate"], dtype=dtype)
    log.debug("designed order-%d %s: f0=%.1f Hz, %.1f dB, q=%.3f, fs=%d, %s",
              order, name, params["cutoff_hz"], params["gain_db"], params["q"],
              params["sample_rate"], params["precision"])
    return coeffs


def make_filter(raw: dict):
    """Design from a params dict and wrap in a fresh filter (zeroed state)."""
    coeffs = design(raw)
    if isinstance(coeffs, IIR1Coefficients):
        return IIR1(coeffs)
    return IIR2(coeffs)
