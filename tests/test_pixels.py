import unittest
from dataclasses import FrozenInstanceError

import numpy as np
from PIL import Image

from artgen.errors import InvalidDimensionsError, OutOfBoundsError
from artgen.rendering.pixels import PixelBuffer


def _checker() -> PixelBuffer:
    black = bytes([0, 0, 0, 255])
    white = bytes([255, 255, 255, 255])
    return PixelBuffer(2, 2, black + white + white + black)


class PixelBufferTests(unittest.TestCase):
    def test_get_pixel_row_major(self):
        buf = PixelBuffer(3, 1, bytes([1, 2, 3, 4, 5, 6, 7, 8, 9, 10, 11, 12]))
        self.assertEqual(buf.get_pixel(0, 0), (1, 2, 3, 4))
        self.assertEqual(buf.get_pixel(2, 0), (9, 10, 11, 12))

    def test_checker_layout(self):
        buf = _checker()
        self.assertEqual(buf.get_pixel(1, 0), (255, 255, 255, 255))
        self.assertEqual(buf.get_pixel(1, 1), (0, 0, 0, 255))

    def test_out_of_bounds(self):
        buf = _checker()
        for x, y in ((2, 0), (0, 2), (-1, 0), (0, -1)):
            with self.assertRaises(OutOfBoundsError):
                buf.get_pixel(x, y)

    def test_length_mismatch(self):
        with self.assertRaises(InvalidDimensionsError):
            PixelBuffer(2, 2, bytes(15))

    def test_non_positive_dimensions(self):
        with self.assertRaises(InvalidDimensionsError):
            PixelBuffer(0, 1, b"")

    def test_immutable(self):
        buf = _checker()
        with self.assertRaises(FrozenInstanceError):
            buf.width = 5

    def test_take_matches_get_pixel(self):
        buf = PixelBuffer(3, 2, bytes(range(24)))
        grid = buf.take(np.array([2, 0]), np.array([1]))
        self.assertEqual(grid.shape, (1, 2, 4))
        self.assertEqual(tuple(grid[0, 0].tolist()), buf.get_pixel(2, 1))
        self.assertEqual(tuple(grid[0, 1].tolist()), buf.get_pixel(0, 1))

    def test_take_out_of_bounds(self):
        buf = _checker()
        with self.assertRaises(OutOfBoundsError):
            buf.take(np.array([0, 2]), np.array([0]))

    def test_from_image_adds_alpha(self):
        img = Image.new("RGB", (4, 3), (10, 20, 30))
        buf = PixelBuffer.from_image(img)
        self.assertEqual((buf.width, buf.height), (4, 3))
        self.assertEqual(len(buf.pixels), 4 * 3 * 4)
        self.assertEqual(buf.get_pixel(3, 2), (10, 20, 30, 255))

    def test_solid(self):
        buf = PixelBuffer.solid(2, 3, (5, 6, 7, 8))
        self.assertEqual(buf.get_pixel(1, 2), (5, 6, 7, 8))


if __name__ == "__main__":
    unittest.main()
