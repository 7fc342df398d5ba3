"""Paged calendar state for a UI layer to render: months, current page, selection."""

from __future__ import annotations

import logging
from datetime import date, datetime
from typing import Callable

from calendar_logic import MonthDescriptor, initial_month_index, to_calendar_date, utc_today
from configuration import CalendarConfiguration
from selection import SelectionController, SelectionEvent

logger = logging.getLogger(__name__)


class CalendarModel:
    """Everything a calendar widget shows, minus the widgets.

    The month list is generated once per configuration. The page opens on
    today's month, or on the middle month when today is out of range.
    Listeners are called after page changes, selection changes and
    reconfiguration.
    """

    def __init__(
        self,
        configuration: CalendarConfiguration | None = None,
        today: date | None = None,
        on_date_selected: Callable[[date], None] | None = None,
        on_range_selected: Callable[[date, date], None] | None = None,
        on_multiple_dates_selected: Callable[[list[date]], None] | None = None,
    ) -> None:
        self._today = today
        self._callbacks = {
            "on_date_selected": on_date_selected,
            "on_range_selected": on_range_selected,
            "on_multiple_dates_selected": on_multiple_dates_selected,
        }
        self._listeners: list[Callable[[CalendarModel], None]] = []
        self._setup(configuration or CalendarConfiguration())

    def _setup(self, configuration: CalendarConfiguration) -> None:
        self.configuration = configuration
        self._generator = configuration.grid_generator()
        self.months: list[MonthDescriptor] = self._generator.generate(
            configuration.start_date, configuration.end_date,
            configuration.show_adjacent_months,
        )
        self.current_index = initial_month_index(self.months, self.today)
        self.selection = SelectionController.from_configuration(configuration, **self._callbacks)
        self.selection.subscribe(lambda _controller: self._notify())

    def reconfigure(self, configuration: CalendarConfiguration) -> None:
        """Regenerate the months for a new configuration. The selection starts empty."""
        logger.debug("Reconfiguring calendar: %s", configuration)
        self._setup(configuration)
        self._notify()

    # ------------------------------------------------------------------
    # Notifications
    # ------------------------------------------------------------------
    def subscribe(self, listener: Callable[[CalendarModel], None]) -> Callable[[], None]:
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def _notify(self) -> None:
        for listener in list(self._listeners):
            listener(self)

    # ------------------------------------------------------------------
    # Paging
    # ------------------------------------------------------------------
    @property
    def today(self) -> date:
        return self._today or utc_today()

    @property
    def current_month(self) -> MonthDescriptor:
        return self.months[self.current_index]

    @property
    def title(self) -> str:
        """Header text for the current page."""
        return self.current_month.title(self.configuration.header_format)

    @property
    def row_count(self) -> int:
        """Visible rows on the current page."""
        ym = self.current_month
        return self._generator.row_count(ym.year, ym.month, self.configuration.show_adjacent_months)

    @property
    def weekday_labels(self) -> list[str]:
        return self.configuration.weekday_labels

    def page_to(self, index: int) -> bool:
        """Show page *index*; out-of-range indexes are ignored."""
        if not 0 <= index < len(self.months):
            return False
        if index != self.current_index:
            self.current_index = index
            self._notify()
        return True

    def navigate(self, delta: int) -> None:
        """Move *delta* pages, stopping at the first and last month."""
        self.page_to(max(0, min(len(self.months) - 1, self.current_index + delta)))

    def go_today(self) -> bool:
        """Show today's month; returns False when it is outside the range."""
        for i, ym in enumerate(self.months):
            if ym.contains(self.today):
                return self.page_to(i)
        return False

    # ------------------------------------------------------------------
    # Per-cell queries
    # ------------------------------------------------------------------
    def is_today(self, d: date | datetime) -> bool:
        return to_calendar_date(d) == self.today

    @staticmethod
    def is_current_month(d: date | datetime, month: MonthDescriptor) -> bool:
        return month.contains(d)

    @staticmethod
    def day_label(d: date | datetime) -> str:
        return str(to_calendar_date(d).day)

    def handle_selected_date(self, value: date | datetime,
                             month: MonthDescriptor | None = None) -> SelectionEvent | None:
        """Forward a tap to the selection, on the current page unless *month* is given."""
        month = month or self.current_month
        return self.selection.handle_selected_date(value, (month.year, month.month))
