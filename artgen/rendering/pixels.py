#!/usr/bin/env python3
# artgen/rendering/pixels.py
"""
Read-only RGBA pixel buffer handed to the render engine.

Pixels are stored interleaved, row-major, 4 bytes per pixel (R, G, B, A).
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Tuple

import numpy as np
from PIL import Image

from artgen.errors import InvalidDimensionsError, OutOfBoundsError

Pixel = Tuple[int, int, int, int]

__all__ = ["PixelBuffer", "Pixel"]


@dataclass(frozen=True)
class PixelBuffer:
    width: int
    height: int
    pixels: bytes
    _grid: np.ndarray = field(init=False, repr=False, compare=False)

    def __post_init__(self):
        if self.width <= 0 or self.height <= 0:
            raise InvalidDimensionsError(
                f"buffer dimensions must be positive, got {self.width}x{self.height}"
            )
        data = bytes(self.pixels)
        expected = self.width * self.height * 4
        if len(data) != expected:
            raise InvalidDimensionsError(
                f"RGBA buffer for {self.width}x{self.height} needs {expected} bytes, got {len(data)}"
            )
        # frombuffer over bytes is read-only, which keeps the buffer immutable.
        grid = np.frombuffer(data, dtype=np.uint8).reshape(self.height, self.width, 4)
        object.__setattr__(self, "pixels", data)
        object.__setattr__(self, "_grid", grid)

    @classmethod
    def from_image(cls, img: Image.Image) -> "PixelBuffer":
        """Build a buffer from any Pillow image (converted to RGBA)."""
        if img.mode != "RGBA":
            img = img.convert("RGBA")
        return cls(img.width, img.height, img.tobytes())

    @classmethod
    def solid(cls, width: int, height: int, rgba: Pixel) -> "PixelBuffer":
        return cls(width, height, bytes(rgba) * (width * height))

    def _check(self, x: int, y: int) -> None:
        if not (0 <= x < self.width and 0 <= y < self.height):
            raise OutOfBoundsError(x, y, self.width, self.height)

    def get_pixel(self, x: int, y: int) -> Pixel:
        self._check(x, y)
        off = (y * self.width + x) * 4
        r, g, b, a = self.pixels[off:off + 4]
        return r, g, b, a

    def take(self, xs: np.ndarray, ys: np.ndarray) -> np.ndarray:
        """
        Gather pixels for every (ys[i], xs[j]) pair.
        Returns an array of shape (len(ys), len(xs), 4).
        """
        xs = np.asarray(xs, dtype=np.intp)
        ys = np.asarray(ys, dtype=np.intp)
        for axis, size, name in ((xs, self.width, "x"), (ys, self.height, "y")):
            if axis.size and (axis.min() < 0 or axis.max() >= size):
                bad = int(axis[(axis < 0) | (axis >= size)][0])
                if name == "x":
                    raise OutOfBoundsError(bad, 0, self.width, self.height)
                raise OutOfBoundsError(0, bad, self.width, self.height)
        return self._grid[np.ix_(ys, xs)]
