#!/usr/bin/env python3
# artgen/logging_conf.py
"""
Central logging setup for artgen.

Logs go to stderr so rendered art on stdout stays clean, plus an optional
rotating file. Format, level and file come from the [logging] config section.
"""

import logging
import sys
from logging.handlers import RotatingFileHandler
from typing import List, Optional

from artgen.config import Config

_HTTP_LOGGERS = ("urllib3", "requests")


def setup_logging(cfg: Config, level_override: Optional[str] = None) -> None:
    lg = cfg["logging"]
    level = getattr(logging, (level_override or lg["level"]).upper(), logging.WARNING)

    handlers: List[logging.Handler] = [logging.StreamHandler(sys.stderr)]
    if lg.get("file"):
        handlers.append(RotatingFileHandler(
            lg["file"],
            maxBytes=int(lg["rotate_bytes"]),
            backupCount=int(lg["rotate_keep"]),
            encoding="utf-8",
        ))
    # force replaces handlers left by an earlier call.
    logging.basicConfig(
        level=level,
        format=lg["format"],
        datefmt=lg.get("datefmt"),
        handlers=handlers,
        force=True,
    )

    # Retry chatter from urllib3 stays quiet unless asked for.
    http_level = logging.DEBUG if lg.get("http_debug") else logging.WARNING
    for name in _HTTP_LOGGERS:
        logging.getLogger(name).setLevel(http_level)
