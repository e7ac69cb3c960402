#!/usr/bin/env python3
# artgen/rendering/sampler.py
"""
Nearest-neighbor mapping from output grid cells to source pixels.

No averaging: each character cell reads exactly one source pixel.
When the grid is larger than the source, source pixels repeat.
"""

from __future__ import annotations

from typing import Tuple

import numpy as np

__all__ = ["map_coordinate", "sample_axis"]


def map_coordinate(
    out_x: int,
    out_y: int,
    output_width: int,
    output_height: int,
    source_width: int,
    source_height: int,
) -> Tuple[int, int]:
    # Integer floor division keeps results exact for large images.
    src_x = (out_x * source_width) // output_width
    src_y = (out_y * source_height) // output_height
    return src_x, src_y


def sample_axis(count: int, source_size: int, step: int = 1) -> np.ndarray:
    """Source indices for output positions 0, step, 2*step, ... < count."""
    out = np.arange(0, count, step, dtype=np.int64)
    return (out * source_size) // count
