# test_timescales.py
"""
Tests for the time-correlation context.
"""

from datetime import datetime, timezone

from astropy.utils import iers
import astropy.units as u
import pytest

from solareclipses.timescales import TimeContext


def test_scale_offsets(context):
    """TT-TAI is fixed, TAI-UTC is 37 s in 2020, TDB-TT is periodic and small."""
    instant = context.to_instant(2458849.5, "tt")

    assert instant.jd_tt == pytest.approx(2458849.5, abs=1e-9)
    assert (instant.jd_tt - instant.jd_tai) * 86400 == pytest.approx(32.184, abs=1e-3)
    assert (instant.jd_tai - instant.jd_utc) * 86400 == pytest.approx(37.0, abs=1e-3)
    assert abs(instant.jd_tdb - instant.jd_tt) * 86400 < 0.002
    assert abs(instant.jd_ut1 - instant.jd_utc) * 86400 < 0.9


@pytest.mark.parametrize("scale", ["tdb", "tt", "tai", "utc", "ut1", "TDB"])
def test_round_trip_all_scales(context, scale):
    instant = context.to_instant(2457986.5, scale)
    value = getattr(instant, f"jd_{scale.lower()}")
    assert value == pytest.approx(2457986.5, abs=1e-8)


def test_unknown_scale_raises(context):
    with pytest.raises(ValueError, match="Unknown time scale"):
        context.to_instant(2458849.5, "gps")


def test_shift(context):
    instant = context.to_instant(2458849.5, "tdb")

    later = context.shift(instant, 1.25)
    earlier = context.shift(instant, -0.5)

    assert later.jd_tdb - instant.jd_tdb == pytest.approx(1.25, abs=1e-9)
    assert earlier.jd_tdb - instant.jd_tdb == pytest.approx(-0.5, abs=1e-9)
    # Same interval in TT within the periodic TDB-TT terms
    assert later.jd_tt - instant.jd_tt == pytest.approx(1.25, abs=1e-7)


def test_monotonic(context):
    instants = [context.to_instant(2451545.0 + 100.0 * i, "tdb") for i in range(20)]
    for first, second in zip(instants, instants[1:]):
        assert second.jd_utc > first.jd_utc
        assert second.jd_ut1 > first.jd_ut1


def test_from_datetime(context):
    instant = context.from_datetime(datetime(2020, 1, 1, 0, 0, 0))

    assert instant.jd_utc == pytest.approx(2458849.5, abs=1e-9)
    dt = instant.to_datetime()
    assert dt.tzinfo is not None
    delta = dt - datetime(2020, 1, 1, tzinfo=timezone.utc)
    assert abs(delta.total_seconds()) < 1e-3


def test_ut1_utc_clamped_outside_table(context):
    """Far outside the table the edge value is used instead of extrapolating."""
    assert context.delta_ut1_utc(-1.0e6) == context.delta_ut1_utc(-2.0e6)
    assert context.delta_ut1_utc(1.0e6) == context.delta_ut1_utc(2.0e6)

    # Instants outside the table still convert
    instant = context.to_instant(2415020.5, "tdb")
    assert instant.jd_ut1 == pytest.approx(instant.jd_utc, abs=1.0 / 86400)


def test_ut1_utc_at_table_end():
    """The last row of the table and the dates after it use the last value."""
    table = iers.IERS_B.open()
    context = TimeContext(table)
    mjd = u.Quantity(table["MJD"], u.d).to_value(u.d)
    last = float(u.Quantity(table["UT1_UTC"], u.s).to_value(u.s)[-1])

    assert context.delta_ut1_utc(float(mjd[-1])) == pytest.approx(last)
    assert context.delta_ut1_utc(float(mjd[-1]) + 0.5) == pytest.approx(last)
    assert abs(context.delta_ut1_utc(float(mjd[-1]) - 0.5)) < 0.9

    # 2030-01-01, after the end of the table
    instant = context.to_instant(2462502.5, "utc")
    assert (instant.jd_ut1 - instant.jd_utc) * 86400 == pytest.approx(last, abs=1e-3)
    later = context.shift(instant, 365.0)
    assert later.jd_tdb - instant.jd_tdb == pytest.approx(365.0, abs=1e-9)


def test_contexts_agree():
    instant1 = TimeContext().to_instant(2455000.25, "utc")
    instant2 = TimeContext().to_instant(2455000.25, "utc")
    assert instant1 == instant2
