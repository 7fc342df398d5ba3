"""JSON-based settings persistence for the calendar picker."""

from __future__ import annotations

import calendar
import json
import logging
import os
from datetime import date

from calendar_logic import DEFAULT_HEADER_FORMAT
from configuration import CalendarConfiguration
from selection import SelectionMode
from theme import theme_from_dict

logger = logging.getLogger(__name__)

_SETTINGS_PATH = os.path.join(os.path.expanduser("~"), ".calendar-picker-settings.json")

# Indexed like the calendar module: Monday == 0
_WEEKDAY_NAMES = ["monday", "tuesday", "wednesday", "thursday", "friday", "saturday", "sunday"]

_DEFAULTS = {
    "start_date": None,
    "end_date": None,
    "selection_mode": SelectionMode.SINGLE.value,
    "show_adjacent_months": False,
    "show_month_with_year": False,
    "header_format": DEFAULT_HEADER_FORMAT,
    "weekday_symbols": None,
    "first_weekday": "sunday",
    "theme": {},
}


def _valid_iso_date(value) -> bool:
    if not isinstance(value, str):
        return False
    try:
        date.fromisoformat(value)
    except ValueError:
        return False
    return True


def load_settings(path: str | None = None) -> dict:
    """Load settings from disk, returning defaults for missing keys."""
    settings = dict(_DEFAULTS)
    path = path or _SETTINGS_PATH
    try:
        with open(path, "r", encoding="utf-8") as f:
            stored = json.load(f)
    except FileNotFoundError:
        return settings
    except (json.JSONDecodeError, OSError) as exc:
        logger.warning("Could not read settings from %s: %s", path, exc)
        return settings
    if not isinstance(stored, dict):
        logger.warning("Ignoring settings in %s: expected an object", path)
        return settings

    for key in ("start_date", "end_date"):
        if key in stored and _valid_iso_date(stored[key]):
            settings[key] = stored[key]
    if settings["start_date"] and settings["end_date"] and \
            date.fromisoformat(settings["start_date"]) > date.fromisoformat(settings["end_date"]):
        logger.warning("Ignoring stored range %s..%s: start is after end",
                       settings["start_date"], settings["end_date"])
        settings["start_date"] = None
        settings["end_date"] = None
    for key in ("show_adjacent_months", "show_month_with_year"):
        if key in stored and isinstance(stored[key], bool):
            settings[key] = stored[key]
    for key in ("selection_mode", "header_format", "first_weekday"):
        if key in stored and isinstance(stored[key], str):
            settings[key] = stored[key]
    symbols = stored.get("weekday_symbols")
    if isinstance(symbols, list) and len(symbols) == 7 and all(isinstance(s, str) for s in symbols):
        settings["weekday_symbols"] = symbols
    elif symbols is not None:
        logger.warning("Ignoring weekday symbols %r: expected 7 strings", symbols)
    if "theme" in stored and isinstance(stored["theme"], dict):
        settings["theme"] = dict(stored["theme"])
    return settings


def save_settings(settings: dict, path: str | None = None) -> None:
    """Persist settings to disk."""
    with open(path or _SETTINGS_PATH, "w", encoding="utf-8") as f:
        json.dump(settings, f, indent=2)


# ------------------------------------------------------------------
# Settings dict <-> CalendarConfiguration
# ------------------------------------------------------------------
def configuration_from_settings(settings: dict) -> CalendarConfiguration:
    """Build a configuration from a settings dict as returned by load_settings.

    Unknown selection modes and weekday names fall back to the defaults. A
    stored range whose start is after its end raises InvalidRange.
    """
    date_range = None
    if settings.get("start_date") and settings.get("end_date"):
        date_range = (date.fromisoformat(settings["start_date"]),
                      date.fromisoformat(settings["end_date"]))

    try:
        mode = SelectionMode(settings.get("selection_mode", SelectionMode.SINGLE.value))
    except ValueError:
        logger.warning("Unknown selection mode %r, using single", settings.get("selection_mode"))
        mode = SelectionMode.SINGLE

    weekday_name = str(settings.get("first_weekday", "sunday")).lower()
    if weekday_name in _WEEKDAY_NAMES:
        first_weekday = _WEEKDAY_NAMES.index(weekday_name)
    else:
        logger.warning("Unknown first weekday %r, using sunday", weekday_name)
        first_weekday = calendar.SUNDAY

    symbols = settings.get("weekday_symbols")
    return CalendarConfiguration(
        date_range=date_range,
        selection_mode=mode,
        show_adjacent_months=bool(settings.get("show_adjacent_months", False)),
        show_month_with_year=bool(settings.get("show_month_with_year", False)),
        header_format=settings.get("header_format") or DEFAULT_HEADER_FORMAT,
        weekday_symbols=tuple(symbols) if symbols else None,
        first_weekday=first_weekday,
        theme=theme_from_dict(settings.get("theme") or {}),
    )


def settings_from_configuration(configuration: CalendarConfiguration) -> dict:
    """Inverse of configuration_from_settings.

    A callable header formatter cannot be stored; the default pattern is
    written in its place.
    """
    header_format = configuration.header_format
    if not isinstance(header_format, str):
        header_format = DEFAULT_HEADER_FORMAT
    return {
        "start_date": configuration.start_date.isoformat(),
        "end_date": configuration.end_date.isoformat(),
        "selection_mode": configuration.selection_mode.value,
        "show_adjacent_months": configuration.show_adjacent_months,
        "show_month_with_year": configuration.show_month_with_year,
        "header_format": header_format,
        "weekday_symbols": list(configuration.weekday_symbols) if configuration.weekday_symbols else None,
        "first_weekday": _WEEKDAY_NAMES[configuration.first_weekday],
        "theme": configuration.theme.to_dict(),
    }


def load_configuration(path: str | None = None) -> CalendarConfiguration:
    return configuration_from_settings(load_settings(path))


def save_configuration(configuration: CalendarConfiguration, path: str | None = None) -> None:
    save_settings(settings_from_configuration(configuration), path)
