"""
This module contains helper functions for formatting data into human-readable strings.
"""

from datetime import timedelta


def format_timedelta(td_object: timedelta) -> str:
    """
    Formats a timedelta object into a "HH:MM:SS" string.

    Args:
        td_object: The timedelta object to format.

    Returns:
        A string representing the timedelta in HH:MM:SS format.
        For example, a timedelta of 7261 seconds becomes "02:01:01".
        Returns "00:00:00" if the input is not a valid timedelta object.
    """
    if not isinstance(td_object, timedelta):
        return "00:00:00"

    total_seconds = int(td_object.total_seconds())
    hours, remainder = divmod(total_seconds, 3600)
    minutes, seconds = divmod(remainder, 60)
    return f"{hours:02}:{minutes:02}:{seconds:02}"


def format_frames(current: int, total: int) -> str:
    """Formats a frame position as "current/total (pct%)"."""
    if total <= 0:
        return f"{current}/?"
    percent = min(100.0, current * 100.0 / total)
    return f"{current}/{total} ({percent:.0f}%)"
