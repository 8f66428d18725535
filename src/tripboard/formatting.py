"""Display formatting for dates, times and durations."""

from __future__ import annotations

from datetime import datetime, timedelta

MINUTES_IN_HOUR = 60
MINUTES_IN_DAY = 24 * MINUTES_IN_HOUR


def format_day(value: datetime) -> str:
    """``MAR 18``"""
    return value.strftime("%b %d").upper()


def format_time(value: datetime) -> str:
    """``10:30``"""
    return value.strftime("%H:%M")


def format_trip_date(value: datetime) -> str:
    """``18 MAR``"""
    return value.strftime("%d %b").upper()


def format_duration(duration: timedelta) -> str:
    """Format a duration as ``30M``, ``02H 30M`` or ``01D 02H 30M``.

    Negative durations are shown as zero.
    """
    total_minutes = max(0, int(duration.total_seconds() // 60))
    days, remainder = divmod(total_minutes, MINUTES_IN_DAY)
    hours, minutes = divmod(remainder, MINUTES_IN_HOUR)
    if days:
        return f"{days:02d}D {hours:02d}H {minutes:02d}M"
    if hours:
        return f"{hours:02d}H {minutes:02d}M"
    return f"{minutes:02d}M"
