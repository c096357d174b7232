# timescales.py
"""
Time-correlation context.

This module:
- Converts Julian dates between TDB, TT, TAI, UTC and UT1 with astropy
- Holds the UT1-UTC table (bundled IERS-B) read once per context
- Produces every TimeInstant used by the eclipse computations
"""

import logging
import warnings
from datetime import datetime
from typing import Optional

import numpy as np
from astropy.time import Time
from astropy.utils import iers
import astropy.units as u
from erfa import ErfaWarning

from .models import TimeInstant

logger = logging.getLogger(__name__)

TIME_SCALES = ("tdb", "tt", "tai", "utc", "ut1")

MJD_OFFSET = 2400000.5


class TimeContext:
    """
    Read-only time-correlation context.

    Built once by the caller and passed into every entry point. The only
    state is the UT1-UTC table; nothing is modified after construction,
    so a single context can be shared between threads.
    """

    def __init__(self, iers_table: Optional[iers.IERS] = None):
        """
        Initialize time context.

        Args:
            iers_table: Earth orientation table providing UT1-UTC. Defaults
                to the IERS-B table bundled with astropy (no download).
        """
        self._iers_table = iers_table if iers_table is not None else iers.IERS_B.open()
        mjd = u.Quantity(self._iers_table["MJD"], u.d).to_value(u.d)
        ut1_utc = u.Quantity(self._iers_table["UT1_UTC"], u.s).to_value(u.s)
        ind_min = int(np.argmin(mjd))
        ind_max = int(np.argmax(mjd))
        self._mjd_min = float(mjd[ind_min])
        self._mjd_max = float(mjd[ind_max])
        # Edge values read from the table, as the interpolator rejects the last row
        self._ut1_utc_first = float(ut1_utc[ind_min])
        self._ut1_utc_last = float(ut1_utc[ind_max])
        logger.debug(
            f"TimeContext UT1-UTC table covers MJD {self._mjd_min:.1f} to {self._mjd_max:.1f}"
        )

    def delta_ut1_utc(self, mjd_utc: float) -> float:
        """
        UT1-UTC in seconds for a UTC modified Julian date.

        Outside the span of the table, the value at the nearest edge is used.
        """
        if mjd_utc <= self._mjd_min:
            return self._ut1_utc_first
        if mjd_utc >= self._mjd_max:
            return self._ut1_utc_last
        return float(self._iers_table.ut1_utc(MJD_OFFSET, mjd_utc).to_value(u.s))

    def to_instant(self, jd: float, scale: str = "tdb") -> TimeInstant:
        """
        Build a TimeInstant from a Julian date.

        Args:
            jd: Julian date
            scale: Time scale of jd ('tdb', 'tt', 'tai', 'utc' or 'ut1')

        Returns:
            TimeInstant carrying the same instant in all scales
        """
        scale = scale.lower()
        if scale not in TIME_SCALES:
            raise ValueError(f"Unknown time scale: {scale}")

        with warnings.catch_warnings():
            # Dates outside the leap second table are best-effort.
            warnings.simplefilter("ignore", ErfaWarning)
            time = Time(jd, format="jd", scale=scale)
            if scale == "ut1":
                mjd_utc = jd - MJD_OFFSET
            else:
                mjd_utc = time.utc.mjd
            time.delta_ut1_utc = self.delta_ut1_utc(mjd_utc)

            return TimeInstant(
                jd_tdb=float(time.tdb.jd),
                jd_tt=float(time.tt.jd),
                jd_tai=float(time.tai.jd),
                jd_utc=float(time.utc.jd),
                jd_ut1=float(time.ut1.jd),
            )

    def from_datetime(self, dt: datetime) -> TimeInstant:
        """TimeInstant from a UTC datetime (naive datetimes are taken as UTC)."""
        with warnings.catch_warnings():
            warnings.simplefilter("ignore", ErfaWarning)
            jd_utc = float(Time(dt, scale="utc").jd)
        return self.to_instant(jd_utc, "utc")

    def shift(self, instant: TimeInstant, delta_days: float) -> TimeInstant:
        """
        Shift an instant by a TDB interval.

        Args:
            instant: Instant to shift
            delta_days: Interval in days (may be negative)

        Returns:
            New TimeInstant
        """
        return self.to_instant(instant.jd_tdb + delta_days, "tdb")
