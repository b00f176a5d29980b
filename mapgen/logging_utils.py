"""Minimal structured logging helper.

Wraps print() to emit key=value pairs (or one JSON object per line) with a
timestamp and level, so generation logs stay easy to grep and parse. Records
go to stderr; stdout is left to command output such as maps and stats.

Usage:
    from mapgen.logging_utils import get_logger
    log = get_logger("mapgen.pipeline")
    log.info(event="generation_complete", seed=42, rooms=12)

Environment:
    MAPGEN_LOG_LEVEL   debug | info | warn | error (default info)
    MAPGEN_LOG_JSON    1/true/yes/on for JSON lines

Reserved keys: level, ts, logger.
"""

from __future__ import annotations

import json
import os
import sys
import time

LEVELS = {"debug": 10, "info": 20, "warn": 30, "error": 40}
CURRENT_LEVEL = LEVELS.get(os.getenv("MAPGEN_LOG_LEVEL", "info").lower(), 20)
JSON_MODE = os.getenv("MAPGEN_LOG_JSON", "0").lower() in ("1", "true", "yes", "on")


def set_level(level: str) -> None:
    global CURRENT_LEVEL
    CURRENT_LEVEL = LEVELS[level]


def _format(level: str, **fields):
    ts = int(time.time())
    if JSON_MODE:
        rec = {k: v for k, v in fields.items() if v is not None}
        rec["level"] = level
        rec["ts"] = ts
        return json.dumps(rec, separators=(",", ":"), default=str)
    parts = [f"level={level}", f"ts={ts}"]
    for k, v in fields.items():
        if v is None:
            continue
        if isinstance(v, (int, float)):
            parts.append(f"{k}={v}")
        else:
            parts.append(f"{k}={str(v).replace(' ', '_')}")
    return " ".join(parts)


class _Logger:
    def __init__(self, name: str | None = None):
        self.name = name or "mapgen"

    def _log(self, lvl: str, **fields):
        if LEVELS[lvl] < CURRENT_LEVEL:
            return
        fields.setdefault("logger", self.name)
        print(_format(lvl, **fields), file=sys.stderr)

    def debug(self, **fields):
        self._log("debug", **fields)

    def info(self, **fields):
        self._log("info", **fields)

    def warn(self, **fields):
        self._log("warn", **fields)

    def error(self, **fields):
        self._log("error", **fields)


_LOGGER_CACHE = {}


def get_logger(name: str):
    if name not in _LOGGER_CACHE:
        _LOGGER_CACHE[name] = _Logger(name)
    return _LOGGER_CACHE[name]


log = get_logger("mapgen")
