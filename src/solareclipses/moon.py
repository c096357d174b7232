# moon.py
"""
Periodic lunar events: passages through the ecliptic and new moons.

This module:
- Estimates event times from the closed-form series in Meeus,
  Astronomical Algorithms, Ch. 49 (new moons) and Ch. 51 (nodes)
- Refines each estimate with one linear correction using the Moon and
  Sun positions one step apart (one minute by default)

The refinement is not iterated, so the precision is bounded by the
local linearity of the sampled signal.
"""

import logging
import math
from typing import List, Optional

from .models import EclipseCandidate, EclipseConfig, TimeInstant, SUN_LIGHT_TIME_DAYS
from .timescales import TimeContext
from .ephemeris import moon_ecliptic_geocentric, planet_heliocentric
from .utils import angle_diff, ecliptic_longitude, sind

logger = logging.getLogger(__name__)

MINUTES_PER_DAY = 24 * 60

# Mean number of node cycles and lunations per year.
NODE_CYCLES_PER_YEAR = 13.4223
LUNATIONS_PER_YEAR = 12.3685

# Periodic terms of the node passage (Meeus Ch. 51):
# (coefficient, multiple of D, multiple of M, multiple of M')
NODE_TERMS = (
    (-0.4721, 0, 0, 1),
    (-0.1649, 2, 0, 0),
    (-0.0868, 2, 0, -1),
    (0.0084, 2, 0, 1),
    (-0.0083, 2, -1, 0),
    (-0.0039, 2, -1, -1),
    (0.0034, 0, 0, 2),
    (-0.0031, 2, 0, -2),
    (0.0030, 2, 1, 0),
    (0.0028, 0, 1, -1),
    (0.0026, 0, 1, 0),
    (0.0025, 4, 0, 0),
    (0.0024, 1, 0, 0),
    (0.0022, 0, 1, 1),
    (0.0014, 4, 0, -1),
    (0.0005, 2, 1, -1),
    (0.0004, 2, -1, 1),
    (-0.0003, 2, -2, 0),
    (0.0003, 4, -1, 0),
)

# Periodic terms of the new moon (Meeus Ch. 49):
# (coefficient, power of E, multiple of M, multiple of M', multiple of F)
NEW_MOON_TERMS = (
    (-0.40720, 0, 0, 1, 0),
    (0.17241, 1, 1, 0, 0),
    (0.01608, 0, 0, 2, 0),
    (0.01039, 0, 0, 0, 2),
    (0.00739, 1, -1, 1, 0),
    (-0.00514, 1, 1, 1, 0),
    (0.00208, 2, 2, 0, 0),
    (-0.00111, 0, 0, 1, -2),
    (-0.00057, 0, 0, 1, 2),
    (0.00056, 1, 1, 2, 0),
    (-0.00042, 0, 0, 3, 0),
    (0.00042, 1, 1, 0, 2),
    (0.00038, 1, 1, 0, -2),
    (-0.00024, 1, -1, 2, 0),
    (-0.00007, 0, 2, 1, 0),
    (0.00004, 0, 0, 2, -2),
    (0.00004, 0, 3, 0, 0),
    (0.00003, 0, 1, 1, -2),
    (0.00003, 0, 0, 2, 2),
    (-0.00003, 0, 1, 1, 2),
    (0.00003, 0, -1, 1, 2),
    (-0.00002, 0, -1, 1, -2),
    (-0.00002, 0, 1, 3, 0),
    (0.00002, 0, 0, 4, 0),
)

# Additional planetary arguments of the new moon (Meeus Ch. 49):
# (coefficient, A at k=0, A per unit k, A per T^2)
PLANETARY_TERMS = (
    (0.000325, 299.77, 0.107408, -0.009173),
    (0.000165, 251.88, 0.016321, 0.0),
    (0.000164, 251.83, 26.651886, 0.0),
    (0.000126, 349.42, 36.412478, 0.0),
    (0.000110, 84.66, 18.206239, 0.0),
    (0.000062, 141.74, 53.303771, 0.0),
    (0.000060, 207.14, 2.453732, 0.0),
    (0.000056, 154.84, 7.306860, 0.0),
    (0.000047, 34.52, 27.261239, 0.0),
    (0.000042, 207.19, 0.121824, 0.0),
    (0.000040, 291.34, 1.844379, 0.0),
    (0.000037, 161.72, 24.198154, 0.0),
    (0.000035, 239.56, 25.513099, 0.0),
    (0.000023, 331.55, 3.592518, 0.0),
)


def node_cycle_indices(year_start: float, year_end: float) -> List[float]:
    """
    Cycle indices k of the node passages in a year range.

    Each integer k is followed by k + 0.5 (ascending, then descending node).
    """
    if year_end <= year_start:
        return []

    k_start = math.floor((year_start - 2000.05) * NODE_CYCLES_PER_YEAR)
    k_end = math.ceil((year_end - 2000.05) * NODE_CYCLES_PER_YEAR)

    indices = []
    for k in range(k_start, k_end):
        indices.append(float(k))
        indices.append(k + 0.5)
    return indices


def new_moon_cycle_indices(year_start: float, year_end: float) -> List[int]:
    """Lunation indices k of the new moons in a year range."""
    if year_end <= year_start:
        return []

    k_start = math.floor((year_start - 2000.0) * LUNATIONS_PER_YEAR)
    k_end = math.ceil((year_end - 2000.0) * LUNATIONS_PER_YEAR)
    return list(range(k_start, k_end))


def moon_node_passage(context: TimeContext, k: float) -> TimeInstant:
    """
    Approximate time of passage of the Moon through a node.

    Args:
        context: Time context
        k: Cycle index; integer for the ascending node, half-integer for
            the descending node (Meeus Ch. 51)

    Returns:
        Estimated passage time
    """
    T = k / 1342.23
    T2 = T * T
    T3 = T2 * T
    T4 = T3 * T

    D = 183.6380 + 331.73735682 * k + 0.0014852 * T2 + 0.00000209 * T3 - 0.00000001 * T4
    M = 17.4006 + 26.82037250 * k + 0.0001186 * T2 + 0.00000006 * T3
    M_moon = (
        38.3776 + 355.52747313 * k + 0.0123499 * T2 + 0.000014627 * T3 - 0.000000069 * T4
    )
    Omega = 123.9767 - 1.44098956 * k + 0.0020608 * T2 + 0.00000214 * T3 - 0.000000016 * T4
    V = 299.75 + 132.85 * T - 0.009173 * T2
    P = Omega + 272.75 - 2.3 * T

    jde = (
        2451565.1619
        + 27.212220817 * k
        + 0.0002762 * T2
        + 0.000000021 * T3
        - 0.000000000088 * T4
    )
    for coeff, n_d, n_m, n_mm in NODE_TERMS:
        jde += coeff * sind(n_d * D + n_m * M + n_mm * M_moon)
    jde += 0.0017 * sind(Omega) + 0.0003 * sind(V) + 0.0003 * sind(P)

    return context.to_instant(jde, "tdb")


def moon_new(context: TimeContext, k: int) -> TimeInstant:
    """
    Approximate time of a new moon.

    Args:
        context: Time context
        k: Lunation index as defined in Meeus Ch. 49 (k = 0 on 2000-01-06)

    Returns:
        Estimated new moon time
    """
    T = k / 1236.85
    T2 = T * T
    T3 = T2 * T
    T4 = T3 * T

    jde = (
        2451550.09766
        + 29.530588861 * k
        + 0.00015437 * T2
        - 0.000000150 * T3
        + 0.00000000073 * T4
    )
    M = 2.5534 + 29.10535670 * k - 0.0000014 * T2 - 0.00000011 * T3
    M_moon = (
        201.5643 + 385.81693528 * k + 0.0107582 * T2 + 0.00001238 * T3 - 0.000000058 * T4
    )
    F = 160.7108 + 390.67050284 * k - 0.0016118 * T2 - 0.00000227 * T3 + 0.000000011 * T4
    Omega = 124.7746 - 1.56375588 * k + 0.0020672 * T2 + 0.00000215 * T3

    # Eccentricity of the Earth's orbit
    E = 1.0 - 0.002516 * T - 0.0000074 * T2

    for coeff, e_power, n_m, n_mm, n_f in NEW_MOON_TERMS:
        jde += coeff * E**e_power * sind(n_m * M + n_mm * M_moon + n_f * F)
    jde += -0.00017 * sind(Omega)

    for coeff, base, rate, rate_t2 in PLANETARY_TERMS:
        jde += coeff * sind(base + rate * k + rate_t2 * T2)

    return context.to_instant(jde, "tdb")


def refine_node_passage(
    context: TimeContext, instant: TimeInstant, step_minutes: float = 1.0
) -> TimeInstant:
    """
    Move a node passage estimate to the zero of the Moon's ecliptic z.

    The z-coordinate is sampled at the estimate and one step later and
    assumed linear in time.
    """
    step_days = step_minutes / MINUTES_PER_DAY
    instant_step = context.shift(instant, step_days)

    z_initial = moon_ecliptic_geocentric(instant).position[2]
    z_step = moon_ecliptic_geocentric(instant_step).position[2]

    num_steps = -z_initial / (z_step - z_initial)
    return context.shift(instant, num_steps * step_days)


def refine_new_moon(
    context: TimeContext,
    instant: TimeInstant,
    step_minutes: float = 1.0,
    light_time_days: float = SUN_LIGHT_TIME_DAYS,
) -> TimeInstant:
    """
    Move a new moon estimate to the zero of the Sun-Moon longitude difference.

    The Sun is the negated heliocentric Earth evaluated one average light
    time earlier. Both longitudes are assumed linear over one step.
    """
    step_days = step_minutes / MINUTES_PER_DAY
    instant_step = context.shift(instant, step_days)

    moon_initial = moon_ecliptic_geocentric(instant).position
    moon_step = moon_ecliptic_geocentric(instant_step).position
    sun_initial = -planet_heliocentric(
        "earth", context.shift(instant, -light_time_days)
    ).position
    sun_step = -planet_heliocentric(
        "earth", context.shift(instant_step, -light_time_days)
    ).position

    lon_sun_initial = ecliptic_longitude(sun_initial)
    lon_moon_initial = ecliptic_longitude(moon_initial)

    diff_sun = angle_diff(ecliptic_longitude(sun_step), lon_sun_initial)
    diff_moon = angle_diff(ecliptic_longitude(moon_step), lon_moon_initial)

    num_steps = angle_diff(lon_sun_initial, lon_moon_initial) / (diff_moon - diff_sun)
    return context.shift(instant, num_steps * step_days)


def node_passages(
    context: TimeContext,
    year_start: float,
    year_end: float,
    config: Optional[EclipseConfig] = None,
) -> List[TimeInstant]:
    """
    Passages of the Moon through the ecliptic plane.

    Args:
        context: Time context
        year_start: Start year (decimal)
        year_end: End year (decimal)
        config: Search parameters

    Returns:
        Passage times, ascending and descending node for each cycle in
        cycle order
    """
    config = config or EclipseConfig()
    indices = node_cycle_indices(year_start, year_end)

    passages = [
        refine_node_passage(
            context, moon_node_passage(context, k), config.refine_step_minutes
        )
        for k in indices
    ]

    logger.info(
        f"Found {len(passages)} node passages between {year_start} and {year_end}"
    )
    return passages


def new_moon_candidates(
    context: TimeContext,
    year_start: float,
    year_end: float,
    config: Optional[EclipseConfig] = None,
) -> List[EclipseCandidate]:
    """New moons in a year range with their lunation index, in ascending k."""
    config = config or EclipseConfig()

    candidates = []
    for k in new_moon_cycle_indices(year_start, year_end):
        instant = refine_new_moon(
            context,
            moon_new(context, k),
            config.refine_step_minutes,
            config.sun_light_time_days,
        )
        candidates.append(EclipseCandidate(k=k, instant=instant))

    logger.info(
        f"Found {len(candidates)} new moons between {year_start} and {year_end}"
    )
    return candidates


def new_moons(
    context: TimeContext,
    year_start: float,
    year_end: float,
    config: Optional[EclipseConfig] = None,
) -> List[TimeInstant]:
    """
    New moons in a year range.

    Args:
        context: Time context
        year_start: Start year (decimal)
        year_end: End year (decimal)
        config: Search parameters

    Returns:
        New moon times in ascending order
    """
    return [
        candidate.instant
        for candidate in new_moon_candidates(context, year_start, year_end, config)
    ]
