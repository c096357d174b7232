# frames.py
"""
Reference frame transformations.

This module handles:
- Ecliptic <-> J2000 equatorial rotation
- Precession J2000 -> mean-of-date (IAU 1976)
- Nutation mean-of-date -> true-of-date (IAU 1980)
- Greenwich apparent sidereal time
- Stellar aberration
- True-of-date <-> fundamental frame of the eclipse shadow axis

Rotation matrices come from pyerfa; everything else is plain numpy.
"""

import logging
import math
import warnings

import numpy as np
import erfa
from erfa import ErfaWarning
from astropy import constants as const
import astropy.units as u

from .models import Frame, NutationData, StateVector, TimeInstant
from .utils import cosd, rotate_axis1, rotate_axis3

logger = logging.getLogger(__name__)

# Mean obliquity of the ecliptic at J2000.0 (IAU 1980), degrees
OBLIQUITY_J2000 = math.degrees(erfa.obl80(2451545.0, 0.0))

AU_M = const.au.to_value(u.m)
SPEED_OF_LIGHT = const.c.to_value(u.m / u.s)


def _transform(
    osv: StateVector, matrix: np.ndarray, frame: Frame
) -> StateVector:
    return StateVector(
        position=matrix @ osv.position,
        velocity=matrix @ osv.velocity,
        frame=frame,
        instant=osv.instant,
    )


def coord_ecl_eq(osv: StateVector) -> StateVector:
    """
    Convert from the J2000 mean ecliptic to the J2000 mean equator.

    Args:
        osv: State vector in an ecliptic frame (geocentric or heliocentric)

    Returns:
        State vector in Frame.J2000
    """
    return StateVector(
        position=rotate_axis1(osv.position, -OBLIQUITY_J2000),
        velocity=rotate_axis1(osv.velocity, -OBLIQUITY_J2000),
        frame=Frame.J2000,
        instant=osv.instant,
    )


def coord_eq_ecl(osv: StateVector, frame: Frame = Frame.ECL_GEO) -> StateVector:
    """
    Convert from the J2000 mean equator to the J2000 mean ecliptic.

    Args:
        osv: State vector in Frame.J2000
        frame: Ecliptic frame tag of the result

    Returns:
        State vector in the ecliptic frame
    """
    return StateVector(
        position=rotate_axis1(osv.position, OBLIQUITY_J2000),
        velocity=rotate_axis1(osv.velocity, OBLIQUITY_J2000),
        frame=frame,
        instant=osv.instant,
    )


def precession_matrix(instant: TimeInstant) -> np.ndarray:
    """IAU 1976 precession matrix J2000 -> mean-of-date."""
    with warnings.catch_warnings():
        warnings.simplefilter("ignore", ErfaWarning)
        return erfa.pmat76(instant.jd_tt, 0.0)


def nutation_matrix(nutation: NutationData) -> np.ndarray:
    """Nutation matrix mean-of-date -> true-of-date."""
    return erfa.numat(
        math.radians(nutation.eps),
        math.radians(nutation.dpsi),
        math.radians(nutation.deps),
    )


def coord_j2000_mod(osv: StateVector) -> StateVector:
    """Precess a J2000 state vector to the mean equator and equinox of date."""
    return _transform(osv, precession_matrix(osv.instant), Frame.MOD)


def coord_mod_j2000(osv: StateVector) -> StateVector:
    """Inverse of coord_j2000_mod."""
    return _transform(osv, precession_matrix(osv.instant).T, Frame.J2000)


def coord_mod_tod(osv: StateVector, nutation: NutationData) -> StateVector:
    """Apply nutation to a mean-of-date state vector."""
    return _transform(osv, nutation_matrix(nutation), Frame.TOD)


def coord_tod_mod(osv: StateVector, nutation: NutationData) -> StateVector:
    """Inverse of coord_mod_tod."""
    return _transform(osv, nutation_matrix(nutation).T, Frame.MOD)


def nutation_1980(instant: TimeInstant) -> NutationData:
    """
    IAU 1980 nutation and mean obliquity.

    Args:
        instant: Time

    Returns:
        NutationData with angles in degrees
    """
    dpsi, deps = erfa.nut80(instant.jd_tt, 0.0)
    eps = erfa.obl80(instant.jd_tt, 0.0)
    return NutationData(
        dpsi=math.degrees(dpsi),
        deps=math.degrees(deps),
        eps=math.degrees(eps),
    )


def gast(instant: TimeInstant, nutation: NutationData) -> float:
    """
    Greenwich apparent sidereal time.

    GMST (IAU 1982) from UT1 plus the equation of the equinoxes
    dpsi * cos(eps).

    Args:
        instant: Time (UT1 is used)
        nutation: Nutation parameters

    Returns:
        GAST in degrees, [0, 360)
    """
    gmst = math.degrees(erfa.gmst82(instant.jd_ut1, 0.0))
    return (gmst + nutation.dpsi * cosd(nutation.eps_true)) % 360.0


def aberration_stellar(
    osv_target_j2000: StateVector, osv_earth_ecl_hel: StateVector
) -> StateVector:
    """
    Apply stellar aberration to the position of a J2000 state vector.

    Args:
        osv_target_j2000: Geocentric target in Frame.J2000
        osv_earth_ecl_hel: Heliocentric Earth in the ecliptic frame

    Returns:
        State vector in Frame.J2000 with the apparent direction. Distance
        and velocity are unchanged.
    """
    earth_j2000 = coord_ecl_eq(osv_earth_ecl_hel)

    r_target = osv_target_j2000.position
    dist = np.linalg.norm(r_target)

    v_c = earth_j2000.velocity / SPEED_OF_LIGHT
    bm1 = math.sqrt(1.0 - float(np.dot(v_c, v_c)))
    sun_dist_au = earth_j2000.distance / AU_M

    direction = erfa.ab(r_target / dist, v_c, sun_dist_au, bm1)

    return StateVector(
        position=np.asarray(direction) * dist,
        velocity=osv_target_j2000.velocity,
        frame=Frame.J2000,
        instant=osv_target_j2000.instant,
    )


def coord_tod_fund(osv: StateVector, a: float, d: float) -> StateVector:
    """
    Convert from true-of-date to the fundamental frame.

    The z-axis of the fundamental frame is the shadow axis with right
    ascension a and declination d (degrees).

    Args:
        osv: State vector in Frame.TOD
        a: Right ascension of the axis (degrees)
        d: Declination of the axis (degrees)

    Returns:
        State vector in Frame.FUND
    """
    r_fund = rotate_axis1(rotate_axis3(osv.position, a + 90.0), 90.0 - d)
    # TODO: add the term from the time derivatives of a and d to the velocity.
    v_fund = rotate_axis1(rotate_axis3(osv.velocity, a + 90.0), 90.0 - d)

    return StateVector(
        position=r_fund, velocity=v_fund, frame=Frame.FUND, instant=osv.instant
    )


def coord_fund_tod(osv: StateVector, a: float, d: float) -> StateVector:
    """Inverse of coord_tod_fund."""
    r_tod = rotate_axis3(rotate_axis1(osv.position, -(90.0 - d)), -(a + 90.0))
    # TODO: add the term from the time derivatives of a and d to the velocity.
    v_tod = rotate_axis3(rotate_axis1(osv.velocity, -(90.0 - d)), -(a + 90.0))

    return StateVector(
        position=r_tod, velocity=v_tod, frame=Frame.TOD, instant=osv.instant
    )
