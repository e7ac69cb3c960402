#!/usr/bin/env python3
# artgen/errors.py
"""
Typed failures raised by artgen.

Core rendering errors derive from RenderError; the rest belong to the
boundary layers (image decoding, text-generation providers).
"""

from __future__ import annotations


class ArtgenError(Exception):
    """Base class for every error the CLI reports to the user."""


# -------------------------
# Rendering core
# -------------------------

class RenderError(ArtgenError):
    pass


class InvalidDimensionsError(RenderError, ValueError):
    """Non-positive or inconsistent buffer/grid dimensions."""


class OutOfBoundsError(RenderError, IndexError):
    """Pixel lookup outside the source buffer. Indicates a sampling defect."""

    def __init__(self, x: int, y: int, width: int, height: int):
        super().__init__(f"pixel ({x}, {y}) outside {width}x{height} buffer")
        self.x = x
        self.y = y
        self.width = width
        self.height = height


class UnsupportedConfigError(RenderError, ValueError):
    """Unknown policy or style name, or an unusable character ramp."""


# -------------------------
# Image decoding
# -------------------------

class ImageLoadError(ArtgenError):
    pass


class UnsupportedImageError(ImageLoadError):
    pass


# -------------------------
# Providers
# -------------------------

class ProviderError(ArtgenError):
    """A text-generation backend failed to return content."""


class ProviderConfigError(ProviderError):
    """Provider is missing required settings (API key, host)."""


class UnknownProviderError(ArtgenError, ValueError):
    pass


__all__ = [
    "ArtgenError",
    "RenderError",
    "InvalidDimensionsError",
    "OutOfBoundsError",
    "UnsupportedConfigError",
    "ImageLoadError",
    "UnsupportedImageError",
    "ProviderError",
    "ProviderConfigError",
    "UnknownProviderError",
]
