"""Tests for month grid generation."""

import calendar
from datetime import date, datetime, timedelta, timezone

import pytest

from calendar_logic import (
    GRID_CELLS,
    InvalidRange,
    MonthGridGenerator,
    generate_months,
    initial_month_index,
    iter_months,
    month_grid,
    next_month,
    prev_month,
    to_calendar_date,
    weekday_labels,
)


def test_march_2024_hidden_adjacent_months():
    (march,) = generate_months(date(2024, 3, 1), date(2024, 3, 31))

    assert (march.year, march.month) == (2024, 3)
    assert len(march.cells) == GRID_CELLS
    assert march.cells[:5] == (None,) * 5
    assert list(march.cells[5:36]) == [date(2024, 3, d) for d in range(1, 32)]
    assert march.cells[36:] == (None,) * 6


def test_march_2024_with_adjacent_months():
    (march,) = generate_months(date(2024, 3, 10), date(2024, 3, 10), show_adjacent_months=True)

    assert list(march.cells[:5]) == [date(2024, 2, d) for d in range(25, 30)]
    assert list(march.cells[5:36]) == [date(2024, 3, d) for d in range(1, 32)]
    assert list(march.cells[36:]) == [date(2024, 4, d) for d in range(1, 7)]


def test_adjacent_cells_are_consecutive_days():
    gen = MonthGridGenerator()
    for year, month in iter_months(date(2023, 1, 1), date(2025, 12, 1)):
        cells = gen.month_cells(year, month, show_adjacent_months=True)
        assert len(cells) == GRID_CELLS
        assert all(b - a == timedelta(days=1) for a, b in zip(cells, cells[1:]))
        assert cells[0].weekday() == calendar.SUNDAY


def test_hidden_adjacent_cells_are_none():
    for ym in generate_months(date(2023, 1, 1), date(2025, 12, 1)):
        offset = MonthGridGenerator().first_weekday_offset(ym.year, ym.month)
        body = calendar.monthrange(ym.year, ym.month)[1]
        assert len(ym.cells) == GRID_CELLS
        assert ym.cells[:offset] == (None,) * offset
        assert all(d is not None and ym.contains(d) for d in ym.cells[offset:offset + body])
        assert all(d is None for d in ym.cells[offset + body:])


def test_month_starting_on_first_weekday_has_no_leading_cells():
    # 1 September 2024 is a Sunday
    (sept,) = generate_months(date(2024, 9, 1), date(2024, 9, 30))
    assert sept.cells[0] == date(2024, 9, 1)
    assert sept.cells[30:] == (None,) * 12


def test_month_count_spans_year_boundary():
    months = generate_months(date(2023, 11, 15), date(2024, 2, 3))
    assert [(m.year, m.month) for m in months] == [(2023, 11), (2023, 12), (2024, 1), (2024, 2)]


def test_same_day_range_yields_one_month():
    assert len(generate_months(date(2024, 5, 5), date(2024, 5, 5))) == 1


def test_invalid_range_raises():
    with pytest.raises(InvalidRange) as excinfo:
        generate_months(date(2024, 3, 2), date(2024, 3, 1))
    assert excinfo.value.start == date(2024, 3, 2)
    assert excinfo.value.end == date(2024, 3, 1)


def test_start_later_in_same_month_is_still_invalid():
    with pytest.raises(ValueError):
        generate_months(date(2024, 3, 31), date(2024, 3, 1))


@pytest.mark.parametrize("start, end", [
    (date(1, 1, 1), date(1, 1, 31)),
    (date(9999, 12, 1), date(9999, 12, 31)),
    (date(9998, 6, 1), date(9999, 12, 1)),
])
def test_adjacent_months_outside_date_limits_raise(start, end):
    with pytest.raises(InvalidRange, match="adjacent months"):
        generate_months(start, end, show_adjacent_months=True)


def test_calendar_limits_without_adjacent_months():
    first, = generate_months(date(1, 1, 1), date(1, 1, 31))
    last, = generate_months(date(9999, 12, 1), date(9999, 12, 31))
    assert first.cells[1] == date(1, 1, 1)
    assert date(9999, 12, 31) in last.cells

    feb, = generate_months(date(1, 2, 1), date(1, 2, 28), show_adjacent_months=True)
    nov, = generate_months(date(9999, 11, 1), date(9999, 11, 30), show_adjacent_months=True)
    assert feb.cells[0] == date(1, 1, 28)
    assert nov.cells[-1].year == 9999


def test_row_count():
    gen = MonthGridGenerator()
    assert gen.row_count(2015, 2) == 4  # Sunday 1st, 28 days
    assert gen.row_count(2024, 3) == 6  # Friday 1st, 31 days
    assert gen.row_count(2025, 3) == 6  # Saturday 1st, 31 days
    assert gen.row_count(2024, 9) == 5
    assert gen.row_count(2015, 2, show_adjacent_months=True) == 6


def test_monday_first_week():
    gen = MonthGridGenerator(first_weekday=calendar.MONDAY)
    assert gen.first_weekday_offset(2024, 3) == 4
    cells = gen.month_cells(2024, 3)
    assert cells[4] == date(2024, 3, 1)
    assert gen.month_cells(2024, 3, show_adjacent_months=True)[0] == date(2024, 2, 26)


def test_month_grid_rows():
    grid = month_grid(2024, 3)
    assert len(grid) == 6
    assert all(len(row) == 7 for row in grid)
    assert grid[0][5] == date(2024, 3, 1)
    assert grid[5] == [date(2024, 3, 31)] + [None] * 6


def test_prev_next_month_wrap():
    assert prev_month(2024, 1) == (2023, 12)
    assert next_month(2024, 12) == (2025, 1)
    assert next_month(2024, 5) == (2024, 6)


def test_to_calendar_date_uses_utc():
    eastern = timezone(timedelta(hours=-5))
    assert to_calendar_date(datetime(2024, 3, 10, 23, 30, tzinfo=eastern)) == date(2024, 3, 11)
    assert to_calendar_date(datetime(2024, 3, 10, 23, 30)) == date(2024, 3, 10)
    assert to_calendar_date(date(2024, 3, 10)) == date(2024, 3, 10)


def test_title():
    (march,) = generate_months(date(2024, 3, 1), date(2024, 3, 1))
    assert march.title("%Y-%m") == "2024-03"
    assert march.title(lambda d: f"{d.month}/{d.year}") == "3/2024"


def test_initial_month_index():
    months = generate_months(date(2024, 1, 1), date(2024, 12, 31))
    assert initial_month_index(months, date(2024, 3, 10)) == 2
    assert initial_month_index(months, date(2030, 1, 1)) == 6


def test_weekday_labels():
    assert weekday_labels() == ["Sun", "Mon", "Tue", "Wed", "Thu", "Fri", "Sat"]
    assert weekday_labels(calendar.MONDAY)[0] == "Mon"
    assert weekday_labels(symbols=["S", "M", "T", "W", "T", "F", "S"])[1] == "M"
