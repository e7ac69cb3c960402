import tempfile
import unittest
from pathlib import Path

from PIL import Image

from artgen.decode import load_image, load_image_bytes
from artgen.errors import ImageLoadError, UnsupportedImageError


class DecodeTests(unittest.TestCase):
    def test_png(self):
        with tempfile.TemporaryDirectory() as tmp:
            path = Path(tmp) / "img.png"
            img = Image.new("RGB", (5, 4), (255, 255, 255))
            img.putpixel((1, 2), (0, 0, 0))
            img.save(path)
            buf = load_image(path)
            self.assertEqual((buf.width, buf.height), (5, 4))
            self.assertEqual(buf.get_pixel(1, 2), (0, 0, 0, 255))
            self.assertEqual(buf.get_pixel(0, 0), (255, 255, 255, 255))

    def test_jpeg(self):
        with tempfile.TemporaryDirectory() as tmp:
            path = Path(tmp) / "img.jpg"
            Image.new("RGB", (16, 8), (200, 200, 200)).save(path, "JPEG")
            buf = load_image(str(path))
            self.assertEqual((buf.width, buf.height), (16, 8))
            r, g, b, a = buf.get_pixel(8, 4)
            self.assertEqual(a, 255)
            self.assertLess(abs(r - 200), 8)

    def test_palette_image(self):
        with tempfile.TemporaryDirectory() as tmp:
            path = Path(tmp) / "img.gif"
            Image.new("P", (3, 3), 0).save(path)
            buf = load_image(path)
            self.assertEqual(len(buf.pixels), 3 * 3 * 4)

    def test_missing_file(self):
        with self.assertRaises(ImageLoadError):
            load_image("/nonexistent/image.png")

    def test_unsupported(self):
        with tempfile.TemporaryDirectory() as tmp:
            path = Path(tmp) / "notes.png"
            path.write_bytes(b"definitely not an image")
            with self.assertRaises(UnsupportedImageError):
                load_image(path)

    def test_bytes(self):
        import io
        out = io.BytesIO()
        Image.new("RGBA", (2, 2), (1, 2, 3, 4)).save(out, "PNG")
        buf = load_image_bytes(out.getvalue())
        self.assertEqual(buf.get_pixel(1, 1), (1, 2, 3, 4))
        with self.assertRaises(UnsupportedImageError):
            load_image_bytes(b"\x00\x01")


if __name__ == "__main__":
    unittest.main()
