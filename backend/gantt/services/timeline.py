"""
Timeline projection: where task bars sit on screen.

The horizontal axis is calendar days scaled by pixels_per_day from the
timeline origin, shifted right by the task-name column and any pan. Rows are
stacked below the date header, one row_height each.
"""

from collections.abc import Iterable
from dataclasses import dataclass
from datetime import date, timedelta

from gantt.config import get_settings
from gantt.models import Task, Anchor
from gantt.services.dates import date_to_offset, days_between


@dataclass(frozen=True)
class Point:
    x: float
    y: float


@dataclass(frozen=True)
class BarRect:
    """Screen extent of one task bar: left edge, right edge, row centre."""
    start_x: float
    end_x: float
    center_y: float

    def anchor(self, anchor: Anchor) -> Point:
        x = self.start_x if anchor is Anchor.START else self.end_x
        return Point(x, self.center_y)


@dataclass
class TimelineViewport:
    """Scale and offsets used to project dates and rows to screen space."""
    min_date: date
    pixels_per_day: float
    left_column_width: float
    header_height: float
    row_height: float
    min_bar_width: float
    connector_offset: float
    connector_buffer: float
    pan_x: float = 0

    @classmethod
    def from_settings(cls, min_date: date, **overrides) -> "TimelineViewport":
        """Viewport with configured defaults; keyword overrides win unless None."""
        settings = get_settings()
        values = {
            "pixels_per_day": settings.pixels_per_day,
            "left_column_width": settings.left_column_width,
            "header_height": settings.header_height,
            "row_height": settings.row_height,
            "min_bar_width": settings.min_bar_width,
            "connector_offset": settings.connector_offset,
            "connector_buffer": settings.connector_buffer,
        }
        values.update({key: value for key, value in overrides.items() if value is not None})
        return cls(min_date=min_date, **values)

    def row_center(self, row: int) -> float:
        return self.header_height + row * self.row_height + self.row_height / 2

    def x_for(self, value: date) -> float:
        return date_to_offset(self.min_date, value, self.pixels_per_day) + self.left_column_width + self.pan_x


def timeline_bounds(tasks: Iterable[Task], today: date | None = None) -> tuple[date, int]:
    """
    Origin date and day count covering every dated task.

    One day of padding is kept on each side. Tasks missing either date are
    ignored; with none left the timeline is just `today`.
    """
    dated = [t for t in tasks if t.start_date is not None and t.end_date is not None]
    if not dated:
        return (today or date.today(), 1)

    min_date = min(t.start_date for t in dated) - timedelta(days=1)
    max_date = max(t.end_date for t in dated) + timedelta(days=1)

    return min_date, days_between(min_date, max_date) + 1


def bar_rect(task: Task, row: int, viewport: TimelineViewport) -> BarRect | None:
    """Rectangle of `task` drawn on `row`, or None when it has no dates."""
    if task.start_date is None or task.end_date is None:
        return None

    start_x = viewport.x_for(task.start_date)
    width = max(viewport.min_bar_width, viewport.x_for(task.end_date) - start_x)

    return BarRect(
        start_x=start_x,
        end_x=start_x + width,
        center_y=viewport.row_center(row),
    )
