"""
Reshape station-month rows into chart series.

The historical charts want `[epoch_millis, value]` pairs sorted by time,
one point per recorded day, and a way to zoom to the last N days/years.
"""
from __future__ import annotations

import calendar
from datetime import date

DAY_MS = 24 * 60 * 60 * 1000

RANGE_DAYS = {
    "1D": 1,
    "1W": 7,
    "1M": 30,
    "3M": 90,
    "6M": 180,
    "1Y": 365,
    "5Y": 1825,
    "10Y": 3650,
    "20Y": 7300,
    "30Y": 10950,
    "50Y": 18250,
}
DEFAULT_RANGE_DAYS = 30


def epoch_millis(day: date) -> int:
    """Midnight UTC of `day` in milliseconds."""
    return calendar.timegm(day.timetuple()) * 1000


def record_points(records) -> list[list]:
    points = []
    for record in records:
        for day, value in enumerate(record.day_values(), start=1):
            if value is None:
                continue
            try:
                reading_date = date(record.year, record.month, day)
            except ValueError:
                # day31 of a 30-day month and friends
                continue
            points.append([epoch_millis(reading_date), float(value)])
    points.sort(key=lambda point: point[0])
    return points


def filter_points(points: list, range_key: str | None = "All", *,
                  start: date | None = None, end: date | None = None) -> list:
    """
    Cut a sorted series down to a time window.

    An explicit start/end window wins (the end day is included completely);
    otherwise `range_key` counts back from the newest point.
    """
    if start is not None or end is not None:
        start_ms = epoch_millis(start) if start is not None else None
        end_ms = epoch_millis(end) + DAY_MS - 1 if end is not None else None
        return [
            point for point in points
            if (start_ms is None or point[0] >= start_ms)
            and (end_ms is None or point[0] <= end_ms)
        ]

    if not points or not range_key or range_key == "All":
        return points

    days_back = RANGE_DAYS.get(range_key, DEFAULT_RANGE_DAYS)
    cutoff = points[-1][0] - days_back * DAY_MS
    return [point for point in points if point[0] >= cutoff]
