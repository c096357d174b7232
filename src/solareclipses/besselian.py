# besselian.py
"""
Besselian elements and the central line of a solar eclipse.

This module computes:
- The direction of the shadow axis in the true-of-date frame
- The position of the Moon in the fundamental plane
- Penumbral and umbral cone angles and shadow radii
- Time derivatives of the elements by forward differences
- The intersection of the shadow axis with the Earth ellipsoid

Formulas follow Urban & Seidelmann, Explanatory Supplement to the
Astronomical Almanac, 3rd ed., sections 11.3-11.4.
"""

import logging
import math
from dataclasses import replace
from typing import Optional

import numpy as np

from .models import (
    MOON_RADIUS_M,
    SUN_RADIUS_M,
    BesselianElements,
    CentralLinePoint,
    NutationData,
    SolarEclipseEvent,
    StateVector,
    Frame,
    TimeInstant,
)
from .timescales import TimeContext
from .ephemeris import moon_ecliptic_geocentric, planet_heliocentric
from .frames import (
    SPEED_OF_LIGHT,
    aberration_stellar,
    coord_ecl_eq,
    coord_j2000_mod,
    coord_mod_tod,
    coord_tod_fund,
    gast,
    nutation_1980,
)
from .utils import angle_diff, asind, atan2d, cosd, sind, tand

logger = logging.getLogger(__name__)

# WGS-84 ellipsoid
EARTH_EQUATORIAL_RADIUS_M = 6378137.0
EARTH_POLAR_RADIUS_M = 6356752.3142


def sun_true_of_date(
    context: TimeContext, instant: TimeInstant, nutation: NutationData
) -> StateVector:
    """
    Apparent geocentric Sun in the true-of-date frame.

    Light time is applied once, from the distance at the instant.
    """
    earth_ecl = planet_heliocentric("earth", instant)
    light_time_days = earth_ecl.distance / (SPEED_OF_LIGHT * 86400.0)
    earth_ecl = planet_heliocentric("earth", context.shift(instant, -light_time_days))

    sun_ecl = StateVector(
        position=-earth_ecl.position,
        velocity=-earth_ecl.velocity,
        frame=Frame.ECL_GEO,
        instant=instant,
    )
    sun_j2000 = aberration_stellar(coord_ecl_eq(sun_ecl), earth_ecl)
    return coord_mod_tod(coord_j2000_mod(sun_j2000), nutation)


def moon_true_of_date(instant: TimeInstant, nutation: NutationData) -> StateVector:
    """Geocentric Moon in the true-of-date frame."""
    moon_j2000 = coord_ecl_eq(moon_ecliptic_geocentric(instant))
    return coord_mod_tod(coord_j2000_mod(moon_j2000), nutation)


def besselian_solar(
    context: TimeContext,
    eclipse: SolarEclipseEvent,
    instant: TimeInstant,
    nutation: Optional[NutationData] = None,
) -> BesselianElements:
    """
    Compute Besselian elements for a solar eclipse.

    Args:
        context: Time context
        eclipse: The eclipse
        instant: Time of the elements
        nutation: Nutation parameters. Computed at instant if None.

    Returns:
        BesselianElements with zero time derivatives
    """
    logger.debug(
        f"Besselian elements of the {eclipse.eclipse_type.value} eclipse "
        f"of {eclipse.new_moon_time.iso} at {instant.iso}"
    )
    if nutation is None:
        nutation = nutation_1980(instant)

    sun_tod = sun_true_of_date(context, instant, nutation)
    moon_tod = moon_true_of_date(instant, nutation)

    # Direction of the shadow axis
    g = sun_tod.position - moon_tod.position
    g_norm = float(np.linalg.norm(g))
    g_unit = g / g_norm

    a = atan2d(g_unit[1], g_unit[0])
    d = asind(g_unit[2])
    mu = gast(instant, nutation) - a

    moon_fund = coord_tod_fund(moon_tod, a, d)
    x, y, z = moon_fund.position / EARTH_EQUATORIAL_RADIUS_M

    k = MOON_RADIUS_M / EARTH_EQUATORIAL_RADIUS_M
    # Penumbral and umbral cone half-angles
    f1 = asind((SUN_RADIUS_M + MOON_RADIUS_M) / g_norm)
    f2 = asind((SUN_RADIUS_M - MOON_RADIUS_M) / g_norm)
    c1 = z + k / sind(f1)
    c2 = z - k / sind(f2)
    l1 = c1 * tand(f1)
    l2 = c2 * tand(f2)

    return BesselianElements(
        a=a,
        d=d,
        x=float(x),
        y=float(y),
        sin_d=sind(d),
        cos_d=cosd(d),
        mu=mu,
        l1=float(l1),
        l2=float(l2),
        tan_f1=tand(f1),
        tan_f2=tand(f2),
    )


def besselian_solar_with_delta(
    context: TimeContext,
    eclipse: SolarEclipseEvent,
    instant: TimeInstant,
    delta_days: float,
    nutation: Optional[NutationData] = None,
) -> BesselianElements:
    """
    Compute Besselian elements with forward-difference time derivatives.

    The truncation and rounding errors of the derivatives depend on
    delta_days, which is not checked; a few minutes is typical.
    The differences of a and mu are wrapped to [-180, 180), so the step
    must stay well below half a sidereal day.

    Args:
        context: Time context
        eclipse: The eclipse
        instant: Time of the elements
        delta_days: Step of the forward difference (days)
        nutation: Nutation parameters, used at both instants. Computed at
            instant if None.

    Returns:
        BesselianElements with derivatives per day
    """
    if nutation is None:
        nutation = nutation_1980(instant)

    instant_delta = context.shift(instant, delta_days)
    bessel0 = besselian_solar(context, eclipse, instant, nutation)
    bessel1 = besselian_solar(context, eclipse, instant_delta, nutation)

    return replace(
        bessel0,
        a_dot=angle_diff(bessel1.a, bessel0.a) / delta_days,
        d_dot=(bessel1.d - bessel0.d) / delta_days,
        x_dot=(bessel1.x - bessel0.x) / delta_days,
        y_dot=(bessel1.y - bessel0.y) / delta_days,
        mu_dot=angle_diff(bessel1.mu, bessel0.mu) / delta_days,
        l1_dot=(bessel1.l1 - bessel0.l1) / delta_days,
        l2_dot=(bessel1.l2 - bessel0.l2) / delta_days,
    )


def besselian_central_line(
    eclipse: SolarEclipseEvent, bessel: BesselianElements
) -> CentralLinePoint:
    """
    Compute the point of the central line for the given elements.

    zeta is NaN when the shadow axis does not intersect the Earth, which
    is always the case for a partial eclipse.

    Args:
        eclipse: The eclipse
        bessel: Besselian elements

    Returns:
        CentralLinePoint
    """
    # Auxiliary elements (11.61)
    a = EARTH_EQUATORIAL_RADIUS_M
    b = EARTH_POLAR_RADIUS_M
    # Square of the eccentricity
    el2 = 1 - b * b / (a * a)

    rho1 = math.sqrt(1 - el2 * bessel.cos_d * bessel.cos_d)
    rho2 = math.sqrt(1 - el2 * bessel.sin_d * bessel.sin_d)
    sin_d1 = bessel.sin_d / rho1
    cos_d1 = math.sqrt(1 - el2) * bessel.cos_d / rho1
    sin_d1d2 = el2 * bessel.sin_d * bessel.cos_d / (rho1 * rho2)
    cos_d1d2 = math.sqrt(1 - el2) / (rho1 * rho2)

    xi = bessel.x
    eta = bessel.y
    eta1 = eta / rho1
    zeta1_sq = 1 - xi * xi - eta1 * eta1

    if zeta1_sq < 0:
        zeta = math.nan
    else:
        zeta = rho2 * (math.sqrt(zeta1_sq) * cos_d1d2 - eta1 * sin_d1d2)

    return CentralLinePoint(
        rho1=rho1,
        rho2=rho2,
        sin_d1=sin_d1,
        cos_d1=cos_d1,
        sin_d1d2=sin_d1d2,
        cos_d1d2=cos_d1d2,
        xi=xi,
        eta=eta,
        zeta=zeta,
    )
