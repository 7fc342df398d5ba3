"""Pure calendar calculations — no UI dependencies."""

from __future__ import annotations

import calendar
import logging
import math
from dataclasses import dataclass
from datetime import date, datetime, timedelta, timezone
from typing import Callable, Iterator, Sequence, Union

logger = logging.getLogger(__name__)

# Indexed by date.weekday(): Monday == 0
DAY_ABBR = ["Mon", "Tue", "Wed", "Thu", "Fri", "Sat", "Sun"]

GRID_ROWS = 6
GRID_COLS = 7
GRID_CELLS = GRID_ROWS * GRID_COLS

DEFAULT_HEADER_FORMAT = "%b %Y"

# Adjacent days of January 0001 and December 9999 fall outside datetime.date
FIRST_ADJACENT_MONTH = date(1, 2, 1)
LAST_ADJACENT_MONTH = date(9999, 11, 1)

HeaderFormatter = Union[str, Callable[[date], str]]


class InvalidRange(ValueError):
    """Raised when a date range starts after it ends, or cannot be shown."""

    def __init__(self, start: date, end: date, reason: str | None = None) -> None:
        super().__init__(reason or f"start date {start.isoformat()} is after end date {end.isoformat()}")
        self.start = start
        self.end = end


def to_calendar_date(value: date | datetime) -> date:
    """Strip the time part of *value*, normalising aware datetimes to UTC first.

    Naive datetimes are taken to already be in UTC.
    """
    if isinstance(value, datetime):
        if value.tzinfo is not None:
            value = value.astimezone(timezone.utc)
        return value.date()
    return value


def utc_today() -> date:
    """Return today's date on the UTC calendar."""
    return datetime.now(timezone.utc).date()


@dataclass(frozen=True)
class MonthDescriptor:
    """One page of the calendar: a month and its 42 grid cells.

    A cell is ``None`` for a padding slot, which only occurs when adjacent
    months are hidden.
    """

    year: int
    month: int
    cells: tuple[date | None, ...]

    @property
    def first_day(self) -> date:
        return date(self.year, self.month, 1)

    @property
    def rows(self) -> list[list[date | None]]:
        """The cells as 6 rows of 7."""
        return [list(self.cells[i:i + GRID_COLS]) for i in range(0, GRID_CELLS, GRID_COLS)]

    def contains(self, d: date | datetime) -> bool:
        """Return True if *d* falls in this month (not an adjacent one)."""
        d = to_calendar_date(d)
        return d.year == self.year and d.month == self.month

    def title(self, formatter: HeaderFormatter = DEFAULT_HEADER_FORMAT) -> str:
        """Header text for this month, from a strftime pattern or a callable."""
        if callable(formatter):
            return formatter(self.first_day)
        return self.first_day.strftime(formatter)


def prev_month(year: int, month: int) -> tuple[int, int]:
    """Return (year, month) for one month earlier."""
    if month == 1:
        return year - 1, 12
    return year, month - 1


def next_month(year: int, month: int) -> tuple[int, int]:
    """Return (year, month) for one month later."""
    if month == 12:
        return year + 1, 1
    return year, month + 1


def iter_months(start: date, end: date) -> Iterator[tuple[int, int]]:
    """Yield (year, month) for every month from *start* to *end*, inclusive."""
    y, m = start.year, start.month
    while (y, m) <= (end.year, end.month):
        yield y, m
        y, m = next_month(y, m)


def days_in_month(year: int, month: int) -> int:
    return calendar.monthrange(year, month)[1]


def weekday_labels(first_weekday: int = calendar.SUNDAY,
                   symbols: Sequence[str] | None = None) -> list[str]:
    """Column headers for the grid.

    Custom *symbols* are used verbatim; the defaults are rotated so the
    column for *first_weekday* comes first.
    """
    if symbols is not None:
        return list(symbols)
    return [DAY_ABBR[(first_weekday + i) % 7] for i in range(7)]


class MonthGridGenerator:
    """Builds fixed-size month grids for a week starting on *first_weekday*.

    *first_weekday* uses the :mod:`calendar` numbering (Monday == 0); the
    default matches the Sunday-first layout of the picker.
    """

    def __init__(self, first_weekday: int = calendar.SUNDAY) -> None:
        self.first_weekday = first_weekday % 7
        self._cal = calendar.Calendar(firstweekday=self.first_weekday)

    def first_weekday_offset(self, year: int, month: int) -> int:
        """Column index of the 1st of the month (number of leading cells)."""
        return (calendar.weekday(year, month, 1) - self.first_weekday) % 7

    def month_cells(self, year: int, month: int,
                    show_adjacent_months: bool = False) -> tuple[date | None, ...]:
        """Return the 42 cells for one month."""
        if show_adjacent_months:
            cells: list[date | None] = list(self._cal.itermonthdates(year, month))
            # itermonthdates stops at the end of the last week; keep counting
            # into the next month until the sixth row is full
            while len(cells) < GRID_CELLS:
                cells.append(cells[-1] + timedelta(days=1))
        else:
            cells = [date(year, month, d) if d else None
                     for d in self._cal.itermonthdays(year, month)]
            cells.extend([None] * (GRID_CELLS - len(cells)))
        return tuple(cells)

    def month(self, year: int, month: int,
              show_adjacent_months: bool = False) -> MonthDescriptor:
        return MonthDescriptor(year, month, self.month_cells(year, month, show_adjacent_months))

    def row_count(self, year: int, month: int, show_adjacent_months: bool = False) -> int:
        """Number of grid rows the month needs on screen.

        With adjacent months shown every page is a full 6 rows.
        """
        if show_adjacent_months:
            return GRID_ROWS
        return math.ceil((days_in_month(year, month) + self.first_weekday_offset(year, month)) / 7)

    def generate(self, start_date: date | datetime, end_date: date | datetime,
                 show_adjacent_months: bool = False) -> list[MonthDescriptor]:
        """Return one MonthDescriptor per month spanned, in chronological order."""
        start = to_calendar_date(start_date)
        end = to_calendar_date(end_date)
        if start > end:
            raise InvalidRange(start, end)
        if show_adjacent_months and (start < FIRST_ADJACENT_MONTH
                                     or (end.year, end.month) > (LAST_ADJACENT_MONTH.year,
                                                                 LAST_ADJACENT_MONTH.month)):
            raise InvalidRange(
                start, end,
                f"adjacent months can only be shown from {FIRST_ADJACENT_MONTH.isoformat()[:7]} "
                f"to {LAST_ADJACENT_MONTH.isoformat()[:7]}",
            )

        months = [self.month(y, m, show_adjacent_months) for y, m in iter_months(start, end)]
        logger.debug("Generated %d months from %s to %s (adjacent=%s)",
                     len(months), start, end, show_adjacent_months)
        return months


def generate_months(start_date: date | datetime, end_date: date | datetime,
                    show_adjacent_months: bool = False,
                    first_weekday: int = calendar.SUNDAY) -> list[MonthDescriptor]:
    """Shortcut for ``MonthGridGenerator(first_weekday).generate(...)``."""
    return MonthGridGenerator(first_weekday).generate(start_date, end_date, show_adjacent_months)


def month_grid(year: int, month: int, show_adjacent_months: bool = False,
               first_weekday: int = calendar.SUNDAY) -> list[list[date | None]]:
    """Return a 6×7 grid for the given month.

    Always 6 rows so the calendar height stays constant.
    """
    return MonthGridGenerator(first_weekday).month(year, month, show_adjacent_months).rows


def initial_month_index(months: Sequence[MonthDescriptor], today: date | None = None) -> int:
    """Index of the page to open on: today's month if present, else the middle one."""
    today = today or utc_today()
    for i, ym in enumerate(months):
        if ym.contains(today):
            return i
    return len(months) // 2
