"""Calendar theme record: colours, fonts and box styling handed to the UI layer."""

from __future__ import annotations

import logging
from dataclasses import dataclass, fields, replace
from typing import Any

from PIL import ImageColor

logger = logging.getLogger(__name__)

RGBA = tuple[int, int, int, int]


def parse_color(value: str | tuple | list) -> RGBA:
    """Return an RGBA tuple for a CSS colour string or a 3/4-item sequence.

    Raises ValueError for anything Pillow does not recognise.
    """
    if isinstance(value, (tuple, list)):
        if len(value) not in (3, 4) or not all(isinstance(c, int) and 0 <= c <= 255 for c in value):
            raise ValueError(f"invalid colour {value!r}")
        return tuple(value) + (255,) if len(value) == 3 else tuple(value)
    if not isinstance(value, str):
        raise ValueError(f"invalid colour {value!r}")
    return ImageColor.getcolor(value, "RGBA")


def color_to_hex(color: RGBA) -> str:
    return "#{:02x}{:02x}{:02x}{:02x}".format(*color)


@dataclass(frozen=True)
class FontSpec:
    size: float
    weight: str = "regular"


@dataclass(frozen=True)
class CalendarTheme:
    # Text colours
    day_text_color: RGBA = (0, 0, 0, 255)
    today_text_color: RGBA = (0, 122, 255, 255)
    other_month_text_color: RGBA = (142, 142, 147, 255)
    weekday_text_color: RGBA = (0, 0, 0, 255)
    header_text_color: RGBA = (0, 0, 0, 255)
    selected_day_text_color: RGBA = (255, 255, 255, 255)

    # Background colours
    selected_day_background_color: RGBA = (0, 122, 255, 255)
    range_background_color: RGBA = (0, 122, 255, 77)
    calendar_border_color: RGBA = (142, 142, 147, 77)

    # Fonts
    day_font: FontSpec = FontSpec(16)
    selected_day_font: FontSpec = FontSpec(18, "semibold")
    weekday_font: FontSpec = FontSpec(14, "medium")
    header_font: FontSpec = FontSpec(14, "medium")

    # Box styling
    corner_radius: float = 5
    border_width: float = 2
    shadow_radius: float = 8

    def to_dict(self) -> dict[str, Any]:
        """JSON-friendly form; colours become ``#rrggbbaa`` strings."""
        out: dict[str, Any] = {}
        for f in fields(self):
            value = getattr(self, f.name)
            if f.name in COLOR_FIELDS:
                out[f.name] = color_to_hex(value)
            elif f.name in FONT_FIELDS:
                out[f.name] = {"size": value.size, "weight": value.weight}
            else:
                out[f.name] = value
        return out


COLOR_FIELDS = frozenset(f.name for f in fields(CalendarTheme) if f.name.endswith("_color"))
FONT_FIELDS = frozenset(f.name for f in fields(CalendarTheme) if f.name.endswith("_font"))
STYLE_FIELDS = frozenset(("corner_radius", "border_width", "shadow_radius"))


def _parse_font(value: Any, default: FontSpec) -> FontSpec:
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        return FontSpec(value, default.weight)
    if isinstance(value, dict):
        size = value.get("size", default.size)
        weight = value.get("weight", default.weight)
        if isinstance(size, (int, float)) and not isinstance(size, bool) and size > 0 \
                and isinstance(weight, str):
            return FontSpec(size, weight)
    raise ValueError(f"invalid font {value!r}")


def theme_from_dict(data: dict[str, Any], base: CalendarTheme | None = None) -> CalendarTheme:
    """Build a theme from stored values, keeping *base* (or the defaults) for
    anything missing or invalid."""
    base = base or CalendarTheme()
    changes: dict[str, Any] = {}
    for key, value in data.items():
        try:
            if key in COLOR_FIELDS:
                changes[key] = parse_color(value)
            elif key in FONT_FIELDS:
                changes[key] = _parse_font(value, getattr(base, key))
            elif key in STYLE_FIELDS:
                if isinstance(value, bool) or not isinstance(value, (int, float)) or value < 0:
                    raise ValueError(f"invalid {key} {value!r}")
                changes[key] = value
            else:
                logger.warning("Ignoring unknown theme key %r", key)
        except ValueError as exc:
            logger.warning("Ignoring theme value for %s: %s", key, exc)
    return replace(base, **changes)
