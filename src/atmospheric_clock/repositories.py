from __future__ import annotations

"""Settings helpers and the SQLite-backed alarm preset repository."""

import json
import logging
from typing import Any, Optional

from .database_manager import DatabaseManager
from .models import AlarmPreset, RecurrenceClass, is_valid_time_of_day

_log = logging.getLogger(__name__)

PRESET_KEY_PREFIX = "alarm.preset."


# --- Settings ---------------------------------------------------------------

def get_setting(db: DatabaseManager, key: str) -> str | None:
    row = db.query_one("SELECT value FROM settings WHERE key=?", (key,))
    return row["value"] if row else None


def set_setting(db: DatabaseManager, key: str, value: str) -> None:
    conn = db.connect()
    with conn:
        conn.execute(
            "INSERT INTO settings(key, value) VALUES(?, ?) ON CONFLICT(key) DO UPDATE SET value=excluded.value",
            (key, value),
        )


# --- Alarm presets ----------------------------------------------------------

def preset_to_json(preset: AlarmPreset) -> str:
    return json.dumps({"time": preset.time_str, "isEnabled": preset.enabled})


def preset_from_json(recurrence: RecurrenceClass, raw: str) -> AlarmPreset:
    """Parse the stored form; raises ValueError on anything malformed.

    Accepts ``{"time": "HH:MM", "isEnabled": bool}`` and the structured
    ``{"hour": h, "minute": m, "isEnabled": bool}``.
    """
    try:
        data: Any = json.loads(raw)
    except json.JSONDecodeError as e:
        raise ValueError(f"invalid preset JSON: {e}") from e
    if not isinstance(data, dict):
        raise ValueError("preset must be a JSON object")
    if "time" in data:
        hh, sep, mm = str(data["time"]).partition(":")
        if not (sep and hh.isdigit() and mm.isdigit()):
            raise ValueError(f"malformed time: {data['time']!r}")
        hour, minute = int(hh), int(mm)
    else:
        hour, minute = data["hour"], data["minute"]
    # Rejects floats and strings as well as out-of-range values
    if not is_valid_time_of_day(hour, minute):
        raise ValueError(f"invalid time: {hour!r}:{minute!r}")
    enabled = data.get("isEnabled", False)
    if not isinstance(enabled, bool):
        raise ValueError(f"isEnabled must be a boolean, got {enabled!r}")
    return AlarmPreset(recurrence=recurrence, hour=hour, minute=minute, enabled=enabled)


class SqlitePresetRepository:
    def __init__(self, db: DatabaseManager) -> None:
        self._db = db

    def load(self, recurrence: RecurrenceClass) -> Optional[AlarmPreset]:
        raw = get_setting(self._db, PRESET_KEY_PREFIX + recurrence.value)
        if not raw:
            return None
        try:
            return preset_from_json(recurrence, raw)
        except (ValueError, KeyError, TypeError) as e:
            _log.warning("ignoring stored %s preset: %s", recurrence.value, e)
            return None

    def save(self, preset: AlarmPreset) -> None:
        set_setting(self._db, PRESET_KEY_PREFIX + preset.recurrence.value, preset_to_json(preset))


__all__ = [
    "get_setting",
    "set_setting",
    "preset_to_json",
    "preset_from_json",
    "SqlitePresetRepository",
    "PRESET_KEY_PREFIX",
]
