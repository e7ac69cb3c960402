#!/usr/bin/env python3
# artgen/rendering/quantizer.py
"""
Brightness -> glyph.

Ramp convention: index 0 is the glyph drawn for the darkest pixels,
the last index for the lightest ones.

Policies:
- graded: index = floor(lum / 255 * (len(ramp) - 1)), clamped.
- binary: ramp[0] at or below the threshold, ramp[-1] above it.
"""

from __future__ import annotations

import math
from typing import Sequence

import numpy as np

from artgen.errors import UnsupportedConfigError

GRADED = "graded"
BINARY = "binary"
DEFAULT_POLICY = GRADED
DEFAULT_THRESHOLD = 128.0

_POLICIES = (BINARY, GRADED)

__all__ = [
    "quantize",
    "quantize_index",
    "quantize_indices",
    "check_ramp",
    "check_policy",
    "policies",
    "GRADED",
    "BINARY",
    "DEFAULT_POLICY",
    "DEFAULT_THRESHOLD",
]


def policies():
    return list(_POLICIES)


def check_policy(policy: str) -> None:
    if policy not in _POLICIES:
        raise UnsupportedConfigError(
            f"unknown quantize policy {policy!r} (expected one of: {', '.join(_POLICIES)})"
        )


def check_ramp(ramp: Sequence[str]) -> None:
    if len(set(ramp)) < 2:
        raise UnsupportedConfigError(
            f"character ramp needs at least 2 distinct glyphs, got {''.join(ramp)!r}"
        )


def quantize_index(
    lum: float,
    ramp_len: int,
    policy: str = DEFAULT_POLICY,
    threshold: float = DEFAULT_THRESHOLD,
) -> int:
    check_policy(policy)
    last = ramp_len - 1
    if policy == BINARY:
        return 0 if lum <= threshold else last
    idx = math.floor((lum / 255.0) * last)
    return max(0, min(last, idx))


def quantize(
    lum: float,
    ramp: Sequence[str],
    policy: str = DEFAULT_POLICY,
    threshold: float = DEFAULT_THRESHOLD,
) -> str:
    check_ramp(ramp)
    return ramp[quantize_index(lum, len(ramp), policy, threshold)]


def quantize_indices(
    lum: np.ndarray,
    ramp_len: int,
    policy: str = DEFAULT_POLICY,
    threshold: float = DEFAULT_THRESHOLD,
) -> np.ndarray:
    """Vectorized quantize_index over a luminance array."""
    check_policy(policy)
    last = ramp_len - 1
    if policy == BINARY:
        return np.where(lum <= threshold, 0, last).astype(np.intp)
    idx = np.floor((lum / 255.0) * last).astype(np.intp)
    return np.clip(idx, 0, last)
