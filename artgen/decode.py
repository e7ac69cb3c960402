#!/usr/bin/env python3
# artgen/decode.py
"""
Image decoding via Pillow.

Turns a file path or raw bytes into a PixelBuffer. Any container Pillow can
identify is accepted (PNG and JPEG at minimum).
"""

from __future__ import annotations

import io
import logging
from pathlib import Path
from typing import Union

from PIL import Image, UnidentifiedImageError

from artgen.errors import ImageLoadError, UnsupportedImageError
from artgen.rendering.pixels import PixelBuffer

log = logging.getLogger(__name__)

__all__ = ["load_image", "load_image_bytes"]


def _to_buffer(img: Image.Image, source: str) -> PixelBuffer:
    try:
        img.load()
    except OSError as e:
        raise ImageLoadError(f"{source}: truncated or corrupt image ({e})") from e
    log.debug("decoded %s: %s %dx%d mode=%s", source, img.format, img.width, img.height, img.mode)
    return PixelBuffer.from_image(img)


def load_image(path: Union[str, Path]) -> PixelBuffer:
    p = Path(path).expanduser()
    if not p.is_file():
        raise ImageLoadError(f"image not found: {p}")
    try:
        with Image.open(p) as img:
            return _to_buffer(img, str(p))
    except UnidentifiedImageError as e:
        raise UnsupportedImageError(f"unsupported image format: {p}") from e


def load_image_bytes(data: bytes, source: str = "<bytes>") -> PixelBuffer:
    try:
        with Image.open(io.BytesIO(data)) as img:
            return _to_buffer(img, source)
    except UnidentifiedImageError as e:
        raise UnsupportedImageError(f"unsupported image format: {source}") from e
