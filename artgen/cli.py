#!/usr/bin/env python3
# artgen/cli.py
"""
Entry point for artgen.

Subcommands:
    gen <prompt>        ask a text-generation backend for art
    create <file>       render an image as ASCII art (alias: crt)
    cfg                 show where configuration lives
    styles              list the built-in character ramps
"""

from __future__ import annotations

import argparse
import json
import logging
import sys
from pathlib import Path
from typing import List, Optional

from dotenv import find_dotenv, load_dotenv

from artgen import providers
from artgen.config import OFFLINE_STYLES, PROVIDER_NAMES, Config
from artgen.decode import load_image
from artgen.errors import ArtgenError, ProviderError
from artgen.logging_conf import setup_logging
from artgen.rendering.luminance import policies as luminance_policies
from artgen.rendering.quantizer import policies as quantize_policies
from artgen.rendering.renderer import RenderEngine
from artgen.styles import report
from artgen.version import version_info

log = logging.getLogger(__name__)


def _emit(art: str, output: Optional[str], cfg: Config) -> None:
    if output:
        path = Path(output).expanduser()
        path.write_text(art if art.endswith("\n") else art + "\n", encoding="utf-8")
        report("success", f"Art saved to {path}", cfg)
    else:
        print(art)


def cmd_gen(args: argparse.Namespace, cfg: Config) -> int:
    p = cfg["providers"]
    name = args.provider or p["default"]
    style = args.style or p["style"]
    fallback = p["offline_fallback"] and not args.no_fallback
    try:
        art = providers.generate(args.prompt, name, model=args.model, style=style, cfg=cfg)
    except ProviderError as e:
        if not fallback or name == "offline":
            raise
        log.warning("provider %s failed: %s", name, e)
        report("warning", f"{name} unavailable ({e}); using offline templates", cfg)
        art = providers.generate(args.prompt, "offline", style=style, cfg=cfg)
    _emit(art, args.output, cfg)
    return 0


def cmd_create(args: argparse.Namespace, cfg: Config) -> int:
    engine = RenderEngine()
    config = cfg.render_config(
        style=args.style,
        output_width=args.width,
        char_ramp=args.ramp,
        aspect_correction=args.aspect,
        row_stride=args.row_stride,
        luminance_policy=args.luminance,
        quantize_policy=args.quantize,
        threshold=args.threshold,
        invert=True if args.invert else None,
    )
    buffer = load_image(args.file)
    art = engine.render(buffer, config, mode=args.mode)
    _emit(art, args.output, cfg)
    return 0


def cmd_cfg(args: argparse.Namespace, cfg: Config) -> int:
    if args.init:
        cfg.save()
        report("success", f"Wrote {cfg.path}", cfg)
    if args.path:
        print(cfg.path)
        return 0
    state = "" if cfg.exists else " (not created yet; run `artgen cfg --init`)"
    report("info", f"To configure artgen, edit {cfg.path}{state} and your .env file.", cfg)
    report("info", "Provider keys: OPENAI_API_KEY, OLLAMA_HOST.", cfg)
    print(json.dumps(cfg.diff(), indent=2, sort_keys=True))
    return 0


def cmd_styles(args: argparse.Namespace, cfg: Config) -> int:
    engine = RenderEngine()
    for name in sorted(engine.styles):
        style = engine.styles[name]
        print(f"{name:<10} {style.quantize:<7} {style.ramp!r}  {style.description}")
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="artgen",
        description="ASCII art generator for the terminal.",
    )
    parser.add_argument("--version", action="version", version=version_info())
    parser.add_argument("--config", default=None, help="Config file (default: ARTGEN_CONFIG or OS config dir)")
    parser.add_argument("--env-file", default=None, help=".env file to load (default: nearest one from cwd)")
    parser.add_argument(
        "--log-level",
        default=None,
        choices=["CRITICAL", "ERROR", "WARNING", "INFO", "DEBUG"],
        type=str.upper,
    )
    sub = parser.add_subparsers(dest="command", required=True)

    gen = sub.add_parser("gen", help="Generate text art from a prompt")
    gen.add_argument("prompt")
    gen.add_argument("-p", "--provider", choices=PROVIDER_NAMES, default=None,
                     help="Backend to use (default from config: openai)")
    gen.add_argument("-m", "--model", default=None, help="Model name for the backend")
    gen.add_argument("-s", "--style", choices=OFFLINE_STYLES, default=None, help="Art style hint")
    gen.add_argument("-o", "--output", default=None, help="Output file path")
    gen.add_argument("--no-fallback", action="store_true",
                     help="Fail instead of using offline templates when the backend errors")
    gen.set_defaults(func=cmd_gen)

    create = sub.add_parser("create", aliases=["crt"], help="Create ASCII art from an image file")
    create.add_argument("file")
    create.add_argument("-w", "--width", type=int, default=None, help="Width of the output in characters")
    create.add_argument("--style", default=None, help="Named ramp (see `artgen styles`)")
    create.add_argument("--ramp", default=None, help="Explicit ramp, darkest-pixel glyph first")
    create.add_argument("--aspect", type=float, default=None, help="Vertical aspect correction (default 0.5)")
    create.add_argument("--row-stride", type=int, default=None, help="Emit every Nth output row")
    create.add_argument("--luminance", choices=luminance_policies(), default=None)
    create.add_argument("--quantize", choices=quantize_policies(), default=None)
    create.add_argument("--threshold", type=float, default=None, help="Cutoff for --quantize binary")
    create.add_argument("--invert", action="store_true", help="Reverse the ramp for dark backgrounds")
    create.add_argument("--mode", choices=RenderEngine().modes(), default=None,
                        help="Render backend: grid (vectorized, default) or cell (per-pixel)")
    create.add_argument("-o", "--output", default=None, help="Output file path")
    create.set_defaults(func=cmd_create)

    cfg = sub.add_parser("cfg", help="Configure API keys and providers")
    cfg.add_argument("--path", action="store_true", help="Print the config file path only")
    cfg.add_argument("--init", action="store_true", help="Write the config file with defaults")
    cfg.set_defaults(func=cmd_cfg)

    styles = sub.add_parser("styles", help="List built-in character ramps")
    styles.set_defaults(func=cmd_styles)
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    load_dotenv(args.env_file or find_dotenv(usecwd=True))
    cfg = Config.load(args.config)
    setup_logging(cfg, args.log_level)
    try:
        return args.func(args, cfg)
    except (ArtgenError, OSError) as e:
        report("error", f"Error: {e}", cfg)
        return 1


if __name__ == "__main__":
    sys.exit(main())
