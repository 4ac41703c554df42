from __future__ import annotations

"""Logging for the clock: one JSON line per record in a rotating file.

Structured fields ride along as ``extra={"_json_<name>": value}``; the prefix
is stripped in the file output and ignored by the console formatter.
"""

import json
import logging
from logging.handlers import RotatingFileHandler
from pathlib import Path
from datetime import datetime, timezone
from typing import Any, Dict, Union

LOG_DIR_NAME = "logs"
LOG_FILE_BASENAME = "app.log"
LOG_MAX_BYTES = 512_000
LOG_BACKUP_COUNT = 5
JSON_EXTRA_PREFIX = "_json_"


def _record_time(record: logging.LogRecord) -> str:
    ts = datetime.fromtimestamp(record.created, tz=timezone.utc)
    return ts.isoformat(timespec="milliseconds").replace("+00:00", "Z")


class JsonFormatter(logging.Formatter):
    def format(self, record: logging.LogRecord) -> str:  # noqa: D401
        payload: Dict[str, Any] = {
            "ts": _record_time(record),
            "level": record.levelname,
            "logger": record.name,
            "msg": record.getMessage(),
        }
        if record.exc_info:
            payload["exc_info"] = self.formatException(record.exc_info)
        payload.update(
            (k[len(JSON_EXTRA_PREFIX):], v)
            for k, v in record.__dict__.items()
            if k.startswith(JSON_EXTRA_PREFIX)
        )
        # datetimes and enums in extras
        return json.dumps(payload, ensure_ascii=False, default=str)


def resolve_level(level: Union[int, str]) -> int:
    """Accept ``logging.DEBUG`` or a name such as ``"debug"``."""
    if isinstance(level, int):
        return level
    resolved = logging.getLevelName(level.strip().upper())
    if not isinstance(resolved, int):
        raise ValueError(f"unknown log level: {level!r}")
    return resolved


def configure_logging(base_dir: Path, level: Union[int, str] = logging.INFO) -> Path:
    log_dir = base_dir / LOG_DIR_NAME
    log_dir.mkdir(parents=True, exist_ok=True)
    logfile = log_dir / LOG_FILE_BASENAME
    root = logging.getLogger()
    root.setLevel(resolve_level(level))
    for old in list(root.handlers):
        root.removeHandler(old)
        old.close()
    handler = RotatingFileHandler(logfile, maxBytes=LOG_MAX_BYTES, backupCount=LOG_BACKUP_COUNT, encoding="utf-8")
    handler.setFormatter(JsonFormatter())
    root.addHandler(handler)
    console = logging.StreamHandler()
    console.setFormatter(logging.Formatter("%(levelname)s %(name)s: %(message)s"))
    root.addHandler(console)
    logging.getLogger(__name__).info("logging initialised", extra={"_json_logfile": str(logfile)})
    return logfile


__all__ = ["configure_logging", "JsonFormatter", "resolve_level"]
