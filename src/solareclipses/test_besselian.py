# test_besselian.py
"""
Tests for the Besselian elements and the central line.

Reference elements of the eclipse of 2017 August 21 at 18:00 TD are from
the NASA eclipse bulletin (F. Espenak).
"""

import math

from astropy.time import Time
import pytest

from solareclipses.models import (
    BesselianElements,
    EclipseType,
    SolarEclipseEvent,
    TimeInstant,
)
from solareclipses.besselian import (
    EARTH_EQUATORIAL_RADIUS_M,
    EARTH_POLAR_RADIUS_M,
    besselian_central_line,
    besselian_solar,
    besselian_solar_with_delta,
)
from solareclipses.frames import nutation_1980
from solareclipses import besselian


@pytest.fixture(scope="module")
def eclipse_2017(eclipses_2001_2019):
    for eclipse in eclipses_2001_2019:
        if eclipse.new_moon_time.iso.startswith("2017-08-21"):
            return eclipse
    raise AssertionError("Eclipse of 2017-08-21 not found")


@pytest.fixture(scope="module")
def instant_2017(context):
    return context.to_instant(Time("2017-08-21T18:00:00", scale="tt").jd, "tt")


def _synthetic_eclipse():
    instant = TimeInstant(
        jd_tdb=2451545.0, jd_tt=2451545.0, jd_tai=2451545.0, jd_utc=2451545.0,
        jd_ut1=2451545.0,
    )
    return SolarEclipseEvent(
        new_moon_time=instant,
        max_time=instant,
        eclipse_type=EclipseType.TOTAL,
        sigma=0.0,
        beta_m=0.0,
        gamma=0.0,
    )


def _elements(x, y, d):
    return BesselianElements(
        a=0.0,
        d=d,
        x=x,
        y=y,
        sin_d=math.sin(math.radians(d)),
        cos_d=math.cos(math.radians(d)),
        mu=0.0,
        l1=0.54,
        l2=-0.004,
        tan_f1=0.0046,
        tan_f2=0.0046,
    )


def test_elements_2017(context, eclipse_2017, instant_2017):
    bessel = besselian_solar(context, eclipse_2017, instant_2017)

    # The Sun carries stellar aberration and the Moon does not, which moves
    # the axis by about 0.006 Earth radii from the bulletin values.
    assert bessel.x == pytest.approx(-0.129571, abs=8e-3)
    assert bessel.y == pytest.approx(0.485416, abs=5e-3)
    assert bessel.d == pytest.approx(11.86696, abs=0.02)
    # The bulletin tabulates the hour angle at TD; mu here is taken at UT1.
    delta_t = (instant_2017.jd_tt - instant_2017.jd_ut1) * 86400.0
    mu_ref = 89.24545 - 1.002738 * delta_t / 240.0
    assert bessel.mu % 360.0 == pytest.approx(mu_ref, abs=0.02)
    assert bessel.l1 == pytest.approx(0.542093, abs=1e-3)
    assert bessel.l2 == pytest.approx(-0.004016, abs=1e-3)
    assert bessel.tan_f1 == pytest.approx(0.0046222, rel=2e-3)
    assert bessel.tan_f2 == pytest.approx(0.0045992, rel=2e-3)

    assert bessel.sin_d == pytest.approx(math.sin(math.radians(bessel.d)))
    assert bessel.cos_d == pytest.approx(math.cos(math.radians(bessel.d)))
    assert bessel.x_dot == 0.0
    assert bessel.mu_dot == 0.0


def test_elements_repeatable(context, eclipse_2017, instant_2017):
    bessel1 = besselian_solar(context, eclipse_2017, instant_2017)
    bessel2 = besselian_solar(context, eclipse_2017, instant_2017)
    assert bessel1 == bessel2

    # Nutation computed at the instant when not given
    bessel3 = besselian_solar(
        context, eclipse_2017, instant_2017, nutation_1980(instant_2017)
    )
    assert bessel1 == bessel3


def test_elements_with_delta(context, eclipse_2017, instant_2017):
    bessel = besselian_solar(context, eclipse_2017, instant_2017)
    bessel_delta = besselian_solar_with_delta(
        context, eclipse_2017, instant_2017, 1.0 / 1440.0
    )

    for field in ("a", "d", "x", "y", "mu", "l1", "l2", "tan_f1", "tan_f2"):
        assert getattr(bessel_delta, field) == getattr(bessel, field)

    # Hourly rates from the bulletin, converted to per day
    assert bessel_delta.x_dot == pytest.approx(0.5406426 * 24, rel=0.01)
    assert bessel_delta.y_dot == pytest.approx(-0.1416434 * 24, rel=0.01)
    assert bessel_delta.d_dot == pytest.approx(-0.0143 * 24, rel=0.1)
    assert bessel_delta.mu_dot == pytest.approx(15.00409 * 24, rel=1e-3)
    assert bessel_delta.a_dot > 0
    assert bessel_delta.l1_dot != 0.0
    assert bessel_delta.l2_dot != 0.0


def test_central_line_2017(context, eclipse_2017):
    bessel = besselian_solar(context, eclipse_2017, eclipse_2017.max_time)
    point = besselian_central_line(eclipse_2017, bessel)

    assert point.intersects_earth
    assert 0.0 < point.zeta < 1.0
    assert point.xi == bessel.x
    assert point.eta == bessel.y
    # Distance of the axis from the center of the Earth at greatest eclipse
    assert math.hypot(point.xi, point.eta) == pytest.approx(0.4367, abs=0.02)


def test_central_line_center():
    """Axis through the center of the Earth, on the equator and at the pole."""
    eclipse = _synthetic_eclipse()

    point = besselian_central_line(eclipse, _elements(0.0, 0.0, 0.0))
    assert point.zeta == pytest.approx(1.0)
    assert point.rho2 == pytest.approx(1.0)
    assert point.sin_d1 == 0.0
    assert point.cos_d1 == pytest.approx(1.0)

    point = besselian_central_line(eclipse, _elements(0.0, 0.0, 90.0))
    assert point.zeta == pytest.approx(EARTH_POLAR_RADIUS_M / EARTH_EQUATORIAL_RADIUS_M)
    assert point.rho1 == pytest.approx(1.0)


def test_central_line_auxiliary_elements():
    d = 23.0
    point = besselian_central_line(_synthetic_eclipse(), _elements(0.1, 0.2, d))

    assert point.sin_d1 ** 2 + point.cos_d1 ** 2 == pytest.approx(1.0)
    assert point.sin_d1d2 ** 2 + point.cos_d1d2 ** 2 == pytest.approx(1.0)
    assert point.rho1 < 1.0
    assert point.rho2 < 1.0


@pytest.mark.parametrize("d", [0.0, 11.9, -23.4, 60.0])
def test_central_line_misses_earth(d):
    """zeta is NaN exactly when xi^2 + (eta / rho1)^2 > 1."""
    eclipse = _synthetic_eclipse()
    rho1 = besselian_central_line(eclipse, _elements(0.0, 0.0, d)).rho1

    inside = besselian_central_line(eclipse, _elements(0.6, 0.79 * rho1, d))
    assert inside.intersects_earth
    assert not math.isnan(inside.zeta)

    outside = besselian_central_line(eclipse, _elements(0.6, 0.81 * rho1, d))
    assert not outside.intersects_earth
    assert math.isnan(outside.zeta)

    far = besselian_central_line(eclipse, _elements(1.2, 0.0, d))
    assert math.isnan(far.zeta)


def test_mu_dot_across_sidereal_wrap(context, eclipse_2017, instant_2017, monkeypatch):
    """GAST passing through 0 inside the step does not disturb mu_dot."""
    rate = 360.98564736629
    base = instant_2017.jd_ut1 - 359.9 / rate

    def gast_near_wrap(instant, nutation):
        return (rate * (instant.jd_ut1 - base)) % 360.0

    monkeypatch.setattr(besselian, "gast", gast_near_wrap)
    bessel = besselian_solar_with_delta(
        context, eclipse_2017, instant_2017, 1.0 / 1440.0
    )

    assert bessel.mu % 360.0 == pytest.approx(359.9 - bessel.a, abs=1e-5)
    assert bessel.mu_dot == pytest.approx(rate - bessel.a_dot, rel=1e-3)
