#!/usr/bin/env python3
# artgen/config.py
"""
Config loader/saver and defaults for artgen.

Goals:
- Single JSON file per user.
- Safe atomic writes.
- Deep-merge of user config over defaults.
- Basic validation with sane fallbacks.

Usage:
    from artgen.config import Config, DEFAULT_CONFIG
    cfg = Config.load()                 # ~/.config/artgen/artgen.json or OS-specific
    width = cfg["render"]["width"]
    cfg["render"]["style"] = "dense"
    cfg.save()
"""

from __future__ import annotations

import json
import logging
import os
import platform
import shutil
import tempfile
from dataclasses import dataclass, field
from typing import Any, Dict, Optional, Tuple

from artgen.rendering.luminance import policies as luminance_policies
from artgen.rendering.quantizer import policies as quantize_policies
from artgen.rendering.renderer import RenderConfig, default_styles

log = logging.getLogger(__name__)

# ----------------------------
# Defaults
# ----------------------------

PROVIDER_NAMES = ("openai", "ollama", "offline")
OFFLINE_STYLES = ("ascii", "chaos", "verse", "banner")

DEFAULT_CONFIG: Dict[str, Any] = {
    "render": {
        "width": 80,                      # output columns
        "style": "classic",               # see artgen styles
        "ramp": None,                     # explicit ramp overrides the style's
        "aspect": 0.5,                    # cell height/width compensation
        "row_stride": 1,
        "luminance": None,                # None = style default
        "quantize": None,
        "threshold": 128.0,               # binary quantize cutoff
        "invert": False,                  # dark-background terminals
    },
    "providers": {
        "default": "openai",
        "style": "ascii",
        "offline_fallback": True,
        "connect_timeout_s": 5.0,
        "read_timeout_s": 60.0,
        "retries": 2,
        "openai": {
            "base_url": "https://api.openai.com/v1",
            "model": "gpt-4o-mini",
            "api_key": None,              # falls back to OPENAI_API_KEY
        },
        "ollama": {
            "host": None,                 # falls back to OLLAMA_HOST
            "model": "llama2",
        },
    },
    "output": {
        "theme": "auto",                  # auto | light | dark
    },
    "logging": {
        "level": "WARNING",
        "http_debug": False,
        "file": None,                     # path or None
        "rotate_bytes": 5 * 1024 * 1024,
        "rotate_keep": 3,
        "format": "%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        "datefmt": None,                  # strftime pattern or None
    },
}

# ----------------------------
# Helpers
# ----------------------------

def _os_config_home() -> str:
    """Return per-OS config base directory."""
    if platform.system() == "Windows":
        base = os.environ.get("APPDATA") or os.path.expanduser("~\\AppData\\Roaming")
        return os.path.join(base, "artgen")
    if platform.system() == "Darwin":
        return os.path.join(os.path.expanduser("~/Library/Application Support"), "artgen")
    return os.path.join(os.path.expanduser("~/.config"), "artgen")

def _default_config_path() -> str:
    """Resolve default config path, honoring ARTGEN_CONFIG env override."""
    env = os.environ.get("ARTGEN_CONFIG")
    if env:
        return os.path.expanduser(env)
    return os.path.join(_os_config_home(), "artgen.json")

def _deep_merge(a: Dict[str, Any], b: Dict[str, Any]) -> Dict[str, Any]:
    """Return deep-merged copy of dicts: values in b override a."""
    out = dict(a)
    for k, v in b.items():
        if isinstance(v, dict) and isinstance(out.get(k), dict):
            out[k] = _deep_merge(out[k], v)
        else:
            out[k] = v
    return out

def _copy(d: Dict[str, Any]) -> Dict[str, Any]:
    return json.loads(json.dumps(d))

def _atomic_write_json(path: str, data: Dict[str, Any]) -> None:
    os.makedirs(os.path.dirname(path) or ".", exist_ok=True)
    fd, tmp = tempfile.mkstemp(prefix=".tmp_cfg_", dir=os.path.dirname(path) or ".")
    try:
        with os.fdopen(fd, "w", encoding="utf-8") as f:
            json.dump(data, f, indent=2, sort_keys=True)
            f.write("\n")
        os.replace(tmp, path)
    except BaseException:
        if os.path.exists(tmp):
            os.remove(tmp)
        raise

def _coerce_num(v: Any, default: float, minmax: Optional[Tuple[float, float]] = None) -> float:
    try:
        x = float(v)
    except (TypeError, ValueError):
        return float(default)
    if minmax:
        lo, hi = minmax
        x = min(hi, max(lo, x))
    return x

def _coerce_int(v: Any, default: int, minmax: Optional[Tuple[int, int]] = None) -> int:
    try:
        x = int(v)
    except (TypeError, ValueError):
        return int(default)
    if minmax:
        lo, hi = minmax
        x = min(hi, max(lo, x))
    return x

def _coerce_bool(v: Any, default: bool) -> bool:
    if isinstance(v, bool):
        return v
    if isinstance(v, str):
        s = v.strip().lower()
        if s in ("1", "true", "yes", "on"): return True
        if s in ("0", "false", "no", "off"): return False
    return default

def _coerce_choice(v: Any, choices, default: Any) -> Any:
    return v if isinstance(v, str) and v in choices else default

def _coerce_str(v: Any) -> Optional[str]:
    return str(v) if v else None

# ----------------------------
# Validation
# ----------------------------

def _validate(cfg: Dict[str, Any]) -> Dict[str, Any]:
    """Return validated copy with fallbacks applied."""
    c = _deep_merge(_copy(DEFAULT_CONFIG), cfg or {})
    d = DEFAULT_CONFIG

    # render
    r = c["render"]
    r["width"] = _coerce_int(r.get("width"), d["render"]["width"], (1, 2000))
    r["style"] = _coerce_choice(r.get("style"), tuple(default_styles()), d["render"]["style"])
    ramp = r.get("ramp")
    r["ramp"] = str(ramp) if ramp and len(set(str(ramp))) >= 2 else None
    r["aspect"] = _coerce_num(r.get("aspect"), d["render"]["aspect"], (0.05, 4.0))
    r["row_stride"] = _coerce_int(r.get("row_stride"), d["render"]["row_stride"], (1, 16))
    r["luminance"] = _coerce_choice(r.get("luminance"), luminance_policies(), None)
    r["quantize"] = _coerce_choice(r.get("quantize"), quantize_policies(), None)
    r["threshold"] = _coerce_num(r.get("threshold"), d["render"]["threshold"], (0.0, 255.0))
    r["invert"] = _coerce_bool(r.get("invert"), d["render"]["invert"])

    # providers
    p = c["providers"]
    dp = d["providers"]
    p["default"] = _coerce_choice(p.get("default"), PROVIDER_NAMES, dp["default"])
    p["style"] = _coerce_choice(p.get("style"), OFFLINE_STYLES, dp["style"])
    p["offline_fallback"] = _coerce_bool(p.get("offline_fallback"), dp["offline_fallback"])
    p["connect_timeout_s"] = _coerce_num(p.get("connect_timeout_s"), dp["connect_timeout_s"], (0.2, 60.0))
    p["read_timeout_s"] = _coerce_num(p.get("read_timeout_s"), dp["read_timeout_s"], (0.5, 600.0))
    p["retries"] = _coerce_int(p.get("retries"), dp["retries"], (0, 10))
    oa = p["openai"]
    oa["base_url"] = str(oa.get("base_url") or dp["openai"]["base_url"]).rstrip("/")
    oa["model"] = str(oa.get("model") or dp["openai"]["model"])
    oa["api_key"] = _coerce_str(oa.get("api_key"))
    ol = p["ollama"]
    ol["host"] = _coerce_str(ol.get("host"))
    ol["model"] = str(ol.get("model") or dp["ollama"]["model"])

    # output
    o = c["output"]
    o["theme"] = _coerce_choice(o.get("theme"), ("auto", "light", "dark"), d["output"]["theme"])

    # logging
    lg = c["logging"]
    if str(lg.get("level", "")).upper() not in ("CRITICAL", "ERROR", "WARNING", "INFO", "DEBUG", "NOTSET"):
        lg["level"] = d["logging"]["level"]
    lg["level"] = lg["level"].upper()
    lg["http_debug"] = _coerce_bool(lg.get("http_debug"), d["logging"]["http_debug"])
    lg["file"] = _coerce_str(lg.get("file"))
    lg["rotate_bytes"] = _coerce_int(lg.get("rotate_bytes"), d["logging"]["rotate_bytes"], (256 * 1024, 50 * 1024 * 1024))
    lg["rotate_keep"] = _coerce_int(lg.get("rotate_keep"), d["logging"]["rotate_keep"], (0, 50))
    fmt = lg.get("format")
    lg["format"] = fmt if isinstance(fmt, str) and "%(message)s" in fmt else d["logging"]["format"]
    lg["datefmt"] = _coerce_str(lg.get("datefmt"))

    return c

# ----------------------------
# Public API
# ----------------------------

@dataclass
class Config:
    """Thin wrapper around a nested dict with load/save/merge."""
    data: Dict[str, Any] = field(default_factory=lambda: _validate({}))
    path: str = field(default_factory=_default_config_path)

    # --- Mapping-style access
    def __getitem__(self, k: str) -> Any:
        return self.data[k]

    def __setitem__(self, k: str, v: Any) -> None:
        self.data[k] = v

    def get(self, k: str, default: Any = None) -> Any:
        return self.data.get(k, default)

    # --- Ops
    @classmethod
    def load(cls, path: Optional[str] = None, create_if_missing: bool = False) -> "Config":
        cfg_path = os.path.expanduser(path) if path else _default_config_path()
        if not os.path.exists(cfg_path):
            cfg = _validate({})
            if create_if_missing:
                _atomic_write_json(cfg_path, cfg)
            return cls(cfg, cfg_path)

        try:
            with open(cfg_path, "r", encoding="utf-8") as f:
                user_cfg = json.load(f)
            if not isinstance(user_cfg, dict):
                raise ValueError("top-level JSON value is not an object")
        except (OSError, ValueError) as e:
            # Corrupt file. Backup and regenerate.
            backup = cfg_path + ".corrupt.bak"
            log.warning("config %s unreadable (%s); backing up to %s", cfg_path, e, backup)
            try:
                shutil.copyfile(cfg_path, backup)
            except OSError as copy_err:
                log.warning("could not back up %s: %s", cfg_path, copy_err)
            user_cfg = {}

        return cls(_validate(user_cfg), cfg_path)

    def save(self) -> None:
        """Persist to JSON atomically."""
        full = _validate(self.data)
        _atomic_write_json(self.path, full)
        self.data = full  # sync in-memory with normalized values

    def update(self, partial: Dict[str, Any]) -> None:
        """Deep-merge a partial config then validate."""
        merged = _deep_merge(self.data, partial)
        self.data = _validate(merged)

    def diff(self) -> Dict[str, Any]:
        """Keys that differ from the defaults."""
        return _diff(_validate({}), self.data)

    # Convenience getters
    @property
    def exists(self) -> bool:
        return os.path.exists(self.path)

    def render_config(self, **overrides) -> RenderConfig:
        """RenderConfig from the [render] section; keyword overrides (None = unset) win."""
        r = self.data["render"]
        base = {
            "output_width": r["width"],
            "char_ramp": r["ramp"],
            "aspect_correction": r["aspect"],
            "row_stride": r["row_stride"],
            "luminance_policy": r["luminance"],
            "quantize_policy": r["quantize"],
            "threshold": r["threshold"],
            "invert": r["invert"],
        }
        style = overrides.pop("style", None) or r["style"]
        base.update({k: v for k, v in overrides.items() if v is not None})
        return RenderConfig.from_style(style, **base)


def _diff(base: Dict[str, Any], cur: Dict[str, Any]) -> Dict[str, Any]:
    """Return nested dictionary of keys where cur differs from base."""
    out: Dict[str, Any] = {}
    for k in cur.keys() | base.keys():
        if k not in base:
            out[k] = cur[k]
            continue
        if k not in cur:
            continue
        vb = base[k]
        vc = cur[k]
        if isinstance(vb, dict) and isinstance(vc, dict):
            d = _diff(vb, vc)
            if d:
                out[k] = d
        elif vb != vc:
            out[k] = vc
    return out

__all__ = [
    "Config",
    "DEFAULT_CONFIG",
    "PROVIDER_NAMES",
    "OFFLINE_STYLES",
    "_default_config_path",
]
