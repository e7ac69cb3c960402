#!/usr/bin/env python3
# artgen/styles.py
"""
Terminal message styles for artgen.
Provides light, dark, and auto themes for prompt_toolkit and a helper
to print styled status lines (errors, saved-file notices, hints).
"""

import os
import sys
from typing import Optional, TextIO

from prompt_toolkit import print_formatted_text
from prompt_toolkit.formatted_text import FormattedText
from prompt_toolkit.styles import Style

from artgen.config import Config

BASE_DARK = {
    "info": "fg:#5fafff",
    "success": "fg:#5fd75f",
    "warning": "fg:#ffd75f",
    "error": "fg:#ff5f5f bold",
}
BASE_LIGHT = {
    "info": "fg:#005faf",
    "success": "fg:#008700",
    "warning": "fg:#875f00",
    "error": "fg:#af0000 bold",
}


def make_style(cfg: Optional[Config] = None) -> Style:
    theme = cfg["output"].get("theme", "auto") if cfg is not None else "auto"

    if theme == "light":
        return Style.from_dict(BASE_LIGHT)
    if theme == "dark":
        return Style.from_dict(BASE_DARK)

    # Auto-detect via environment
    if os.getenv("TERM_THEME", "").lower() == "light":
        return Style.from_dict(BASE_LIGHT)
    return Style.from_dict(BASE_DARK)


def report(kind: str, message: str, cfg: Optional[Config] = None, file: Optional[TextIO] = None) -> None:
    """Print one styled line. kind is one of info|success|warning|error."""
    stream = file or (sys.stderr if kind in ("error", "warning") else sys.stdout)
    text = FormattedText([(f"class:{kind}", message)])
    if stream.isatty():
        print_formatted_text(text, style=make_style(cfg), file=stream)
    else:
        print(message, file=stream)
