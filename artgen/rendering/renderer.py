#!/usr/bin/env python3
# artgen/rendering/renderer.py
"""
Render engine: PixelBuffer x RenderConfig -> text block.

- Common API: RenderEngine.render(buffer, config, mode="grid")
- Two interchangeable backends produce identical output:
    "grid": numpy-vectorized sampling over the whole output grid
    "cell": one get_pixel/luminance/quantize call per character
  Backends may register via RenderEngine.register(mode, backend).
- Named ramp styles live in default_styles(); index 0 of every ramp is
  the glyph for the darkest pixels.

Pure and deterministic: no I/O, no randomness, no shared state.
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass, field, replace
from typing import Dict, List, Optional

import numpy as np

from artgen.errors import InvalidDimensionsError, UnsupportedConfigError
from artgen.rendering import luminance as lum_mod
from artgen.rendering import quantizer as quant_mod
from artgen.rendering.pixels import PixelBuffer
from artgen.rendering.sampler import map_coordinate, sample_axis

log = logging.getLogger(__name__)

__all__ = [
    "RampStyle",
    "RenderConfig",
    "RenderEngine",
    "RenderBackend",
    "default_styles",
    "output_height",
    "render_image",
]

# -------------------------
# Styles
# -------------------------

# Darkest-pixel glyph first.
_DENSE = "$@B%8&WM#*oahkbdpqwmZO0QLCJUYXzcvunxrjft/\\|()1{}[]?-_+~<>i!lI;:,\"^`'. "


@dataclass(frozen=True)
class RampStyle:
    ramp: str
    quantize: str = quant_mod.GRADED
    luminance: str = lum_mod.PERCEPTUAL
    description: str = ""


def default_styles() -> Dict[str, RampStyle]:
    return {
        # Output of the original `create` command: '@' below mid-gray, blank above.
        "binary": RampStyle("@ ", quant_mod.BINARY, lum_mod.UNIFORM, "two-glyph threshold"),
        "classic": RampStyle("@%#*+=-:. ", description="10-step ASCII ramp"),
        "dense": RampStyle(_DENSE, description="70-step ASCII ramp"),
        "blocks": RampStyle("█▓▒░ ", description="Unicode shade blocks"),
        "dots": RampStyle("#o:. ", description="sparse, low-ink ramp"),
    }


DEFAULT_STYLE = "classic"

# -------------------------
# Config
# -------------------------

@dataclass(frozen=True)
class RenderConfig:
    output_width: int = 80
    char_ramp: str = default_styles()[DEFAULT_STYLE].ramp
    aspect_correction: float = 0.5
    row_stride: int = 1
    luminance_policy: str = lum_mod.DEFAULT_POLICY
    quantize_policy: str = quant_mod.DEFAULT_POLICY
    threshold: float = quant_mod.DEFAULT_THRESHOLD
    invert: bool = False

    @classmethod
    def from_style(
        cls,
        name: str,
        styles: Optional[Dict[str, RampStyle]] = None,
        **overrides,
    ) -> "RenderConfig":
        """Config seeded from a named style; keyword overrides win. None values are ignored."""
        styles = styles if styles is not None else default_styles()
        style = styles.get(name)
        if style is None:
            raise UnsupportedConfigError(
                f"unknown style {name!r} (expected one of: {', '.join(sorted(styles))})"
            )
        base = cls(
            char_ramp=style.ramp,
            luminance_policy=style.luminance,
            quantize_policy=style.quantize,
        )
        return replace(base, **{k: v for k, v in overrides.items() if v is not None})

    def validate(self) -> None:
        if self.output_width <= 0:
            raise InvalidDimensionsError(f"output width must be positive, got {self.output_width}")
        if self.row_stride <= 0:
            raise InvalidDimensionsError(f"row stride must be positive, got {self.row_stride}")
        if not (math.isfinite(self.aspect_correction) and self.aspect_correction > 0):
            raise InvalidDimensionsError(
                f"aspect correction must be a positive finite number, got {self.aspect_correction}"
            )
        if self.luminance_policy not in lum_mod.policies():
            raise UnsupportedConfigError(f"unknown luminance policy {self.luminance_policy!r}")
        quant_mod.check_policy(self.quantize_policy)
        quant_mod.check_ramp(self.char_ramp)

    @property
    def ramp(self) -> str:
        """Effective ramp after inversion."""
        return self.char_ramp[::-1] if self.invert else self.char_ramp


def output_height(buffer: PixelBuffer, config: RenderConfig) -> int:
    h = math.floor(config.output_width * (buffer.height / buffer.width) * config.aspect_correction)
    if h <= 0:
        raise InvalidDimensionsError(
            f"{buffer.width}x{buffer.height} image at width {config.output_width} "
            f"with aspect {config.aspect_correction} yields {h} rows"
        )
    return h

# -------------------------
# Backends
# -------------------------

class RenderBackend:
    """Interface for all backends. Receives a validated config."""
    name: str = "base"

    def render_rows(self, buffer: PixelBuffer, config: RenderConfig, out_h: int) -> List[str]:
        raise NotImplementedError


class GridBackend(RenderBackend):
    name = "grid"

    def render_rows(self, buffer: PixelBuffer, config: RenderConfig, out_h: int) -> List[str]:
        glyphs = np.array(list(config.ramp))
        xs = sample_axis(config.output_width, buffer.width)
        ys = sample_axis(out_h, buffer.height, config.row_stride)
        rgba = buffer.take(xs, ys)                       # (rows, cols, 4)
        lum = lum_mod.luminance_grid(rgba, config.luminance_policy)
        idx = quant_mod.quantize_indices(lum, glyphs.size, config.quantize_policy, config.threshold)
        return ["".join(glyphs[row].tolist()) for row in idx]


class CellBackend(RenderBackend):
    name = "cell"

    def render_rows(self, buffer: PixelBuffer, config: RenderConfig, out_h: int) -> List[str]:
        ramp = config.ramp
        rows: List[str] = []
        for y in range(0, out_h, config.row_stride):
            line = []
            for x in range(config.output_width):
                sx, sy = map_coordinate(x, y, config.output_width, out_h, buffer.width, buffer.height)
                r, g, b, _ = buffer.get_pixel(sx, sy)
                lum = lum_mod.luminance(r, g, b, config.luminance_policy)
                line.append(quant_mod.quantize(lum, ramp, config.quantize_policy, config.threshold))
            rows.append("".join(line))
        return rows

# -------------------------
# Engine
# -------------------------

@dataclass
class RenderEngine:
    """
    Backend and style holder.
    Use register() for new backends and register_style() for new ramps.
    """
    styles: Dict[str, RampStyle] = field(default_factory=default_styles)
    default_mode: str = "grid"

    def __post_init__(self):
        self._backends: Dict[str, RenderBackend] = {}
        self.register("grid", GridBackend())
        self.register("cell", CellBackend())

    def register(self, mode: str, backend: RenderBackend) -> None:
        self._backends[mode] = backend

    def modes(self) -> List[str]:
        return sorted(self._backends)

    def register_style(self, name: str, style: RampStyle) -> None:
        quant_mod.check_ramp(style.ramp)
        self.styles[name] = style

    def config_for(self, style: str, **overrides) -> RenderConfig:
        return RenderConfig.from_style(style, self.styles, **overrides)

    def render(self, buffer: PixelBuffer, config: RenderConfig, mode: Optional[str] = None) -> str:
        mode = mode or self.default_mode
        backend = self._backends.get(mode)
        if backend is None:
            raise UnsupportedConfigError(f"unknown render mode {mode!r}")
        config.validate()
        out_h = output_height(buffer, config)
        log.debug(
            "render %dx%d -> %dx%d (stride %d, %s/%s, mode %s)",
            buffer.width, buffer.height, config.output_width, out_h,
            config.row_stride, config.luminance_policy, config.quantize_policy, mode,
        )
        return "\n".join(backend.render_rows(buffer, config, out_h))


def render_image(buffer: PixelBuffer, config: Optional[RenderConfig] = None) -> str:
    """One-shot render with the default engine."""
    return RenderEngine().render(buffer, config or RenderConfig())
