"""Immutable calendar configuration shared by the generator, the selection
controller and the UI layer."""

from __future__ import annotations

import calendar
from dataclasses import dataclass, field
from datetime import date, datetime

from calendar_logic import (
    DEFAULT_HEADER_FORMAT,
    HeaderFormatter,
    InvalidRange,
    MonthGridGenerator,
    to_calendar_date,
    utc_today,
    weekday_labels,
)
from selection import SelectionMode
from theme import CalendarTheme


def _shift_years(d: date, years: int) -> date:
    try:
        return d.replace(year=d.year + years)
    except ValueError:
        # 29 February in a non-leap target year
        return d.replace(year=d.year + years, day=28)


def default_date_range(today: date | None = None) -> tuple[date, date]:
    """One year before to one year after *today*."""
    today = today or utc_today()
    return _shift_years(today, -1), _shift_years(today, 1)


@dataclass(frozen=True)
class CalendarConfiguration:
    """Everything fixed when a calendar is set up.

    ``date_range`` defaults to one year either side of today. A range that
    starts after it ends raises :class:`InvalidRange`.

    ``show_month_with_year`` only tells the UI layer whether to draw the
    month/year header; nothing here reads it.
    """

    date_range: tuple[date | datetime, date | datetime] | None = None
    selection_mode: SelectionMode | str = SelectionMode.SINGLE
    show_adjacent_months: bool = False
    show_month_with_year: bool = False
    header_format: HeaderFormatter = DEFAULT_HEADER_FORMAT
    weekday_symbols: tuple[str, ...] | None = None
    first_weekday: int = calendar.SUNDAY
    theme: CalendarTheme = field(default_factory=CalendarTheme)

    def __post_init__(self) -> None:
        if self.date_range is None:
            start, end = default_date_range()
        else:
            start, end = (to_calendar_date(d) for d in self.date_range)
        if start > end:
            raise InvalidRange(start, end)
        object.__setattr__(self, "date_range", (start, end))
        object.__setattr__(self, "selection_mode", SelectionMode(self.selection_mode))
        object.__setattr__(self, "first_weekday", self.first_weekday % 7)
        if self.weekday_symbols is not None:
            object.__setattr__(self, "weekday_symbols", tuple(self.weekday_symbols))

    @property
    def start_date(self) -> date:
        return self.date_range[0]

    @property
    def end_date(self) -> date:
        return self.date_range[1]

    @property
    def weekday_labels(self) -> list[str]:
        return weekday_labels(self.first_weekday, self.weekday_symbols)

    def grid_generator(self) -> MonthGridGenerator:
        return MonthGridGenerator(self.first_weekday)
