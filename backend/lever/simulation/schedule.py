"""Firing rules shared by every handler."""
from __future__ import annotations

from typing import Optional

from lever.config import settings
from lever.models.events import TimedParams


def within_window(params: TimedParams, day: int) -> bool:
    if day < params.start_time:
        return False
    return params.end_time is None or day <= params.end_time


def fires_on(params: TimedParams, day: int, frequency_days: Optional[float] = None) -> bool:
    """True when a recurring parameter set fires on ``day``.

    Always fires on the start day; otherwise only when recurring, not past
    ``end_time``, and on a whole multiple of the rounded frequency.
    """
    if day == params.start_time:
        return True
    if not params.is_recurring or not within_window(params, day):
        return False
    step = round(frequency_days if frequency_days is not None else params.frequency_days)
    if step <= 0:
        return False
    return (day - params.start_time) % step == 0


def pay_cadence_days(frequency_days: float, pay_period: Optional[float]) -> int:
    """Days between paychecks: explicit frequency, else ``round(365 / pay_period)``."""
    if frequency_days and frequency_days > 0:
        return max(1, round(frequency_days))
    if pay_period and pay_period > 0:
        return max(1, round(settings.DAYS_PER_YEAR / pay_period))
    return 0
