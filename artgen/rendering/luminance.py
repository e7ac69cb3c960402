#!/usr/bin/env python3
# artgen/rendering/luminance.py
"""
RGB -> brightness in [0, 255].

Policies:
- perceptual: ITU-R BT.601 weights (0.299, 0.587, 0.114). Default.
- uniform:    plain channel average.

Both accept scalars or numpy arrays. Alpha is ignored.
"""

from __future__ import annotations

from typing import Callable, Dict, Union

import numpy as np

from artgen.errors import UnsupportedConfigError

Number = Union[int, float, np.ndarray]

PERCEPTUAL = "perceptual"
UNIFORM = "uniform"
DEFAULT_POLICY = PERCEPTUAL

__all__ = ["luminance", "luminance_grid", "policies", "PERCEPTUAL", "UNIFORM", "DEFAULT_POLICY"]


def _perceptual(r: Number, g: Number, b: Number) -> Number:
    # Weights over 1000 sum exactly, so white stays 255.0 with no float drift.
    return (299 * r + 587 * g + 114 * b) / 1000.0


def _uniform(r: Number, g: Number, b: Number) -> Number:
    return (r + g + b) / 3.0


_POLICIES: Dict[str, Callable[[Number, Number, Number], Number]] = {
    PERCEPTUAL: _perceptual,
    UNIFORM: _uniform,
}


def policies():
    return sorted(_POLICIES)


def _resolve(policy: str):
    fn = _POLICIES.get(policy)
    if fn is None:
        raise UnsupportedConfigError(
            f"unknown luminance policy {policy!r} (expected one of: {', '.join(policies())})"
        )
    return fn


def luminance(r: int, g: int, b: int, policy: str = DEFAULT_POLICY) -> float:
    return float(_resolve(policy)(int(r), int(g), int(b)))


def luminance_grid(rgba: np.ndarray, policy: str = DEFAULT_POLICY) -> np.ndarray:
    """Luminance for an (..., 4) or (..., 3) uint8 array."""
    fn = _resolve(policy)
    arr = rgba.astype(np.int64)
    return fn(arr[..., 0], arr[..., 1], arr[..., 2]).astype(np.float64)
