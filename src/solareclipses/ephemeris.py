# ephemeris.py
"""
Positions of the Moon and the planets.

This module provides:
- Geocentric state of the Moon in the J2000 mean ecliptic frame
- Heliocentric states of the Earth and the planets in the same ecliptic

Both are built on the SOFA/ERFA low-precision series (Moon98, EPV00,
Plan94) exposed by pyerfa. Positions are in metres, velocities in m/s.
"""

import logging
import warnings

import numpy as np
import erfa
from erfa import ErfaWarning
from astropy import constants as const
import astropy.units as u

from .models import Frame, StateVector, TimeInstant
from .frames import coord_eq_ecl

logger = logging.getLogger(__name__)

AU_M = const.au.to_value(u.m)
DAY_S = 86400.0

# Body numbering used by erfa.plan94
PLAN94_BODIES = {
    "mercury": 1,
    "venus": 2,
    "emb": 3,
    "mars": 4,
    "jupiter": 5,
    "saturn": 6,
    "uranus": 7,
    "neptune": 8,
}


def _state_from_pv(pv, frame: Frame, instant: TimeInstant) -> StateVector:
    """Convert an ERFA pv-vector (au, au/day) to a StateVector (m, m/s)."""
    return StateVector(
        position=np.asarray(pv["p"], dtype=float) * AU_M,
        velocity=np.asarray(pv["v"], dtype=float) * AU_M / DAY_S,
        frame=frame,
        instant=instant,
    )


def moon_ecliptic_geocentric(instant: TimeInstant) -> StateVector:
    """
    Geocentric state of the Moon in the J2000 mean ecliptic.

    Args:
        instant: Time

    Returns:
        StateVector in Frame.ECL_GEO
    """
    with warnings.catch_warnings():
        warnings.simplefilter("ignore", ErfaWarning)
        pv = erfa.moon98(instant.jd_tt, 0.0)

    # Moon98 is referred to the GCRS (J2000 mean equator).
    osv_eq = _state_from_pv(pv, Frame.J2000, instant)
    return coord_eq_ecl(osv_eq, Frame.ECL_GEO)


def planet_heliocentric(name: str, instant: TimeInstant) -> StateVector:
    """
    Heliocentric state of a planet in the J2000 mean ecliptic.

    Args:
        name: 'earth', 'sun', 'emb' or a planet name from Mercury to Neptune
        instant: Time

    Returns:
        StateVector in Frame.ECL_HEL
    """
    key = name.lower()

    if key == "sun":
        return StateVector(np.zeros(3), np.zeros(3), Frame.ECL_HEL, instant)

    with warnings.catch_warnings():
        warnings.simplefilter("ignore", ErfaWarning)
        if key == "earth":
            pv, _ = erfa.epv00(instant.jd_tdb, 0.0)
        elif key in PLAN94_BODIES:
            pv = erfa.plan94(instant.jd_tdb, 0.0, PLAN94_BODIES[key])
        else:
            raise ValueError(f"Unknown body: {name}")

    osv_eq = _state_from_pv(pv, Frame.J2000, instant)
    return coord_eq_ecl(osv_eq, Frame.ECL_HEL)
