"""
Astronomical time keeping.

Julian Date conversions (Meeus, proleptic Gregorian calendar) and a clock that
advances a continuous Julian Date from wall-clock deltas scaled by a time factor.
"""

from __future__ import annotations

import logging
import math
import time
from datetime import datetime, timedelta, timezone
from typing import Callable, Optional

from solar_sim.core.constants import DAYS_PER_CENTURY, J2000_JD, SECONDS_PER_DAY

logger = logging.getLogger(__name__)

MS_PER_DAY: int = 86_400_000


def wall_clock_ms() -> float:
    return time.time() * 1000.0


def _as_utc(date: datetime) -> datetime:
    # Naive datetimes are taken to be UTC already
    if date.tzinfo is None:
        return date.replace(tzinfo=timezone.utc)
    return date.astimezone(timezone.utc)


def datetime_to_julian(date: datetime) -> float:
    """
    Calendar date -> Julian Date (Meeus, Astronomical Algorithms ch. 7).
    The Gregorian correction is always applied (proleptic Gregorian calendar).
    """
    d = _as_utc(date)
    year = d.year
    month = d.month
    if month <= 2:
        year -= 1
        month += 12

    a = math.floor(year / 100)
    b = 2 - a + math.floor(a / 4)

    jdn = (
        math.floor(365.25 * (year + 4716))
        + math.floor(30.6001 * (month + 1))
        + d.day
        + b
        - 1524.5
    )

    day_ms = ((d.hour * 60 + d.minute) * 60 + d.second) * 1000 + d.microsecond / 1000.0
    return jdn + day_ms / MS_PER_DAY


def julian_to_datetime(julian_date: float) -> datetime:
    """
    Julian Date -> UTC datetime, rounded to the whole millisecond.

    Inverse of datetime_to_julian. The Gregorian branch is used for every date,
    so dates before the 1582 reform come back in the proleptic Gregorian calendar.
    Dates outside the years 1..9999 are clamped to the nearest representable one.
    """
    if math.isnan(julian_date) or julian_date < MIN_JULIAN_DATE:
        logger.debug("Julian Date %s before year 1, clamped", julian_date)
        return MIN_DATETIME
    if julian_date > MAX_JULIAN_DATE:
        logger.debug("Julian Date %s after year 9999, clamped", julian_date)
        return MAX_DATETIME

    jd = julian_date + 0.5
    z = math.floor(jd)
    f = jd - z

    alpha = math.floor((z - 1867216.25) / 36524.25)
    a = z + 1 + alpha - math.floor(alpha / 4)

    b = a + 1524
    c = math.floor((b - 122.1) / 365.25)
    d = math.floor(365.25 * c)
    e = math.floor((b - d) / 30.6001)

    day = b - d - math.floor(30.6001 * e)
    month = e - 1 if e < 14 else e - 13
    year = c - 4716 if month > 2 else c - 4715

    # Rounding may carry into the next day; timedelta handles the rollover
    ms = round(f * MS_PER_DAY)
    return datetime(year, month, day, tzinfo=timezone.utc) + timedelta(milliseconds=ms)


MIN_DATETIME = datetime(1, 1, 1, tzinfo=timezone.utc)
MAX_DATETIME = datetime(9999, 12, 31, 23, 59, 59, 999000, tzinfo=timezone.utc)
MIN_JULIAN_DATE: float = datetime_to_julian(MIN_DATETIME)
MAX_JULIAN_DATE: float = datetime_to_julian(MAX_DATETIME)


class AstronomicalClock:
    """
    Simulation clock expressed as a Julian Date.

    The clock is the only owner of the current date, the time scale and the
    wall-clock anchor of the last update. Everything else reads elapsed
    simulated seconds from advance().
    """

    def __init__(
        self,
        initial_date: Optional[datetime] = None,
        reference_epoch: float = J2000_JD,
        time_source: Callable[[], float] = wall_clock_ms,
    ):
        """
        Args:
            initial_date: Starting calendar date (defaults to now, UTC)
            reference_epoch: Julian Date that centuries are measured from
            time_source: Wall-clock source returning milliseconds
        """
        if initial_date is None:
            initial_date = datetime.now(timezone.utc)
        self._time_source = time_source
        self._julian_date = datetime_to_julian(initial_date)
        self._reference_epoch = reference_epoch
        self._time_scale = 1.0
        self._last_wall_clock_ms = time_source()

    @property
    def julian_date(self) -> float:
        return self._julian_date

    @property
    def reference_epoch(self) -> float:
        return self._reference_epoch

    @property
    def time_scale(self) -> float:
        return self._time_scale

    @property
    def last_wall_clock_ms(self) -> float:
        return self._last_wall_clock_ms

    @property
    def date(self) -> datetime:
        return julian_to_datetime(self._julian_date)

    @property
    def formatted_date(self) -> str:
        return self.date.strftime("%Y-%m-%d %H:%M:%S UTC")

    def set_time_scale(self, factor: float) -> None:
        """Set the time multiplier; negative values are clamped to 0."""
        if factor < 0:
            logger.warning("Negative time scale %s clamped to 0", factor)
            factor = 0.0
        self._time_scale = float(factor)

    def centuries_since_epoch(self) -> float:
        """T = (JD - epoch) / 36525."""
        return (self._julian_date - self._reference_epoch) / DAYS_PER_CENTURY

    def advance(self, now_ms: Optional[float] = None) -> float:
        """
        Advance the Julian Date by the scaled wall-clock time since the last call.

        Returns:
            Elapsed simulated seconds (0 when the wall clock did not move forward)
        """
        if now_ms is None:
            now_ms = self._time_source()

        elapsed_real_ms = now_ms - self._last_wall_clock_ms
        self._last_wall_clock_ms = now_ms
        if elapsed_real_ms <= 0:
            return 0.0

        elapsed_sim_s = elapsed_real_ms * self._time_scale / 1000.0
        self._julian_date += elapsed_sim_s / SECONDS_PER_DAY
        return elapsed_sim_s

    def set_date(self, date: datetime) -> None:
        self._julian_date = datetime_to_julian(date)
        self._last_wall_clock_ms = self._time_source()

    def set_julian_date(self, julian_date: float) -> None:
        self._julian_date = julian_date
        self._last_wall_clock_ms = self._time_source()

    def advance_by_days(self, days: float) -> None:
        self._julian_date += days
        self._last_wall_clock_ms = self._time_source()
