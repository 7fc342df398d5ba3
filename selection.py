"""Date selection state machine for single, multiple and range picking."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import date, datetime
from enum import Enum
from typing import Callable, Union

from calendar_logic import to_calendar_date

logger = logging.getLogger(__name__)


class SelectionMode(Enum):
    NONE = "none"
    SINGLE = "single"
    MULTIPLE = "multiple"
    RANGE = "range"


@dataclass(frozen=True)
class DateSelected:
    date: date


@dataclass(frozen=True)
class RangeSelected:
    start: date
    end: date


@dataclass(frozen=True)
class MultipleSelected:
    dates: tuple[date, ...]


SelectionEvent = Union[DateSelected, RangeSelected, MultipleSelected]
Listener = Callable[["SelectionController"], None]


class SelectionController:
    """Holds the selection for one calendar and applies taps to it.

    ``handle_selected_date`` is the only mutating entry point. Taps that do
    not apply (selection disabled, a date outside its page, re-tapping an
    endpoint) are ignored and return ``None``.

    Every state change bumps ``version`` and calls the subscribed listeners;
    completed selections are also returned as an event and passed to the
    matching ``on_*`` callback.
    """

    def __init__(
        self,
        mode: SelectionMode | str = SelectionMode.SINGLE,
        show_adjacent_months: bool = False,
        on_date_selected: Callable[[date], None] | None = None,
        on_range_selected: Callable[[date, date], None] | None = None,
        on_multiple_dates_selected: Callable[[list[date]], None] | None = None,
    ) -> None:
        self._mode = SelectionMode(mode)
        self._show_adjacent_months = show_adjacent_months
        self.on_date_selected = on_date_selected
        self.on_range_selected = on_range_selected
        self.on_multiple_dates_selected = on_multiple_dates_selected

        self._from_date: date | None = None
        self._to_date: date | None = None
        self._selected: list[date] = []

        self.version = 0
        self._listeners: list[Listener] = []

    @classmethod
    def from_configuration(cls, configuration, **callbacks) -> "SelectionController":
        return cls(configuration.selection_mode, configuration.show_adjacent_months, **callbacks)

    # ------------------------------------------------------------------
    # State
    # ------------------------------------------------------------------
    @property
    def mode(self) -> SelectionMode:
        return self._mode

    @property
    def show_adjacent_months(self) -> bool:
        return self._show_adjacent_months

    @property
    def from_date(self) -> date | None:
        return self._from_date

    @property
    def to_date(self) -> date | None:
        return self._to_date

    @property
    def selected_dates(self) -> tuple[date, ...]:
        """Multiple-mode selection in the order the dates were tapped."""
        return tuple(self._selected)

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        """Call *listener* after every state change; returns an unsubscribe function."""
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def clear(self) -> None:
        """Drop every selected date."""
        if self._from_date is None and self._to_date is None and not self._selected:
            return
        self._from_date = None
        self._to_date = None
        self._selected.clear()
        self._changed()

    # ------------------------------------------------------------------
    # Taps
    # ------------------------------------------------------------------
    def handle_selected_date(self, value: date | datetime,
                             month_of_date: tuple[int, int]) -> SelectionEvent | None:
        """Apply a tap on *value*, shown on the page for *month_of_date* (year, month)."""
        d = to_calendar_date(value)

        if self._mode is SelectionMode.NONE:
            return None

        if not self._show_adjacent_months and (d.year, d.month) != tuple(month_of_date):
            logger.debug("Ignoring %s: not on page %s", d, month_of_date)
            return None

        if d == self._from_date or d == self._to_date:
            logger.debug("Ignoring %s: already an endpoint", d)
            return None

        if self._mode is SelectionMode.SINGLE:
            event = self._select_single(d)
        elif self._mode is SelectionMode.RANGE:
            event = self._select_range(d)
        else:
            event = self._toggle_multiple(d)

        self._changed()
        if event is not None:
            self._dispatch(event)
        return event

    def _select_single(self, d: date) -> SelectionEvent:
        self._from_date = d
        self._to_date = None
        return DateSelected(d)

    def _select_range(self, d: date) -> SelectionEvent | None:
        if self._from_date is None or self._to_date is not None:
            # First tap, or a completed range: start over
            self._from_date = d
            self._to_date = None
            return None
        if d < self._from_date:
            self._from_date = d
            return None
        self._to_date = d
        return RangeSelected(self._from_date, d)

    def _toggle_multiple(self, d: date) -> SelectionEvent:
        if d in self._selected:
            self._selected.remove(d)
        else:
            self._selected.append(d)
        return MultipleSelected(tuple(self._selected))

    def _changed(self) -> None:
        self.version += 1
        for listener in list(self._listeners):
            listener(self)

    def _dispatch(self, event: SelectionEvent) -> None:
        if isinstance(event, DateSelected):
            if self.on_date_selected:
                self.on_date_selected(event.date)
        elif isinstance(event, RangeSelected):
            if self.on_range_selected:
                self.on_range_selected(event.start, event.end)
        elif self.on_multiple_dates_selected:
            self.on_multiple_dates_selected(list(event.dates))

    # ------------------------------------------------------------------
    # Queries (read-only, called per cell on every render)
    # ------------------------------------------------------------------
    def is_start(self, d: date | datetime) -> bool:
        return self._from_date is not None and to_calendar_date(d) == self._from_date

    def is_end(self, d: date | datetime) -> bool:
        return self._to_date is not None and to_calendar_date(d) == self._to_date

    def is_selected(self, d: date | datetime) -> bool:
        """True for either endpoint."""
        return self.is_start(d) or self.is_end(d)

    def is_in_range(self, d: date | datetime | None) -> bool:
        """True strictly between the endpoints; the endpoints themselves are not in range."""
        if d is None or self._from_date is None or self._to_date is None:
            return False
        return self._from_date < to_calendar_date(d) < self._to_date

    def is_multiple_selected(self, d: date | datetime) -> bool:
        return to_calendar_date(d) in self._selected
