# eclipses.py
"""
Detection and classification of solar eclipses.

This module:
- Pairs every new moon with the closest passage of the Moon through a node
- Computes the minimum angular distance between the Moon and the Sun
  and the time of that minimum
- Classifies the event as Partial, Total or Annular

The method follows Urban & Seidelmann, Explanatory Supplement to the
Astronomical Almanac, 3rd ed., section 11.2.
"""

import logging
import math
from typing import Callable, List, Optional, Sequence

import numpy as np

from .models import (
    EARTH_MEAN_RADIUS_M,
    MOON_RADIUS_M,
    SUN_RADIUS_M,
    EclipseConfig,
    EclipseType,
    NodePassage,
    SolarEclipseEvent,
    TimeInstant,
)
from .timescales import TimeContext
from .ephemeris import moon_ecliptic_geocentric, planet_heliocentric
from .moon import new_moons, node_cycle_indices, node_passages
from .utils import (
    angle_diff,
    asind,
    atand,
    ecliptic_latitude,
    ecliptic_longitude,
    tand,
)

logger = logging.getLogger(__name__)

# Mean longitude rate of the Sun (degrees per second)
SUN_LON_RATE = 360.0 / (365.256 * 86400.0)


def tdb_distance(instant1: TimeInstant, instant2: TimeInstant) -> float:
    """Absolute TDB distance between two instants (days)."""
    return abs(instant1.jd_tdb - instant2.jd_tdb)


def find_closest(
    items: Sequence[TimeInstant],
    target: TimeInstant,
    distance: Callable[[TimeInstant, TimeInstant], float] = tdb_distance,
) -> Optional[int]:
    """
    Index of the item closest to the target.

    Linear scan with a strict comparison, so the first of several equally
    close items wins.

    Args:
        items: Instants to search
        target: Reference instant
        distance: Distance metric between two instants

    Returns:
        Index of the closest item, or None for an empty sequence
    """
    index = None
    dist_min = math.inf

    for ind_item, item in enumerate(items):
        dist_new = distance(item, target)
        if dist_new < dist_min:
            index = ind_item
            dist_min = dist_new

    return index


def moon_lon_rate_node(
    context: TimeContext, instant: TimeInstant, step_seconds: float
) -> float:
    """
    First-order estimate of the ecliptic longitude rate of the Moon.

    Args:
        context: Time context
        instant: Time
        step_seconds: Step in seconds

    Returns:
        Longitude rate in degrees per second
    """
    instant_step = context.shift(instant, step_seconds / 86400.0)
    pos = moon_ecliptic_geocentric(instant).position
    pos_step = moon_ecliptic_geocentric(instant_step).position

    return (
        angle_diff(ecliptic_longitude(pos_step), ecliptic_longitude(pos))
        / step_seconds
    )


def moon_node_inclination(
    context: TimeContext, instant: TimeInstant, step_seconds: float
) -> float:
    """
    Inclination of the Moon's path to the ecliptic at a node.

    Args:
        context: Time context
        instant: Time of the node passage
        step_seconds: Step in seconds

    Returns:
        Inclination in degrees
    """
    instant_step = context.shift(instant, step_seconds / 86400.0)
    pos = moon_ecliptic_geocentric(instant).position
    pos_step = moon_ecliptic_geocentric(instant_step).position
    r_diff = pos_step - pos

    return asind(r_diff[2] / np.linalg.norm(r_diff))


def compute_node_passages(
    context: TimeContext,
    year_start: float,
    year_end: float,
    config: Optional[EclipseConfig] = None,
) -> List[NodePassage]:
    """Node passages with inclination and longitude rate at each node."""
    config = config or EclipseConfig()
    indices = node_cycle_indices(year_start, year_end)
    instants = node_passages(context, year_start, year_end, config)

    return [
        NodePassage(
            k=k,
            instant=instant,
            inclination=moon_node_inclination(
                context, instant, config.node_sample_seconds
            ),
            lon_rate=moon_lon_rate_node(context, instant, config.node_sample_seconds),
        )
        for k, instant in zip(indices, instants)
    ]


def eclipse_limits(moon_distance: float, sun_distance: float):
    """
    Limits of the minimum separation for partial and central eclipses.

    Args:
        moon_distance: Geocentric distance of the Moon (m)
        sun_distance: Distance of the Sun (m)

    Returns:
        Tuple of (partial_limit, total_limit, semi_sun, semi_moon) in degrees
    """
    semi_moon = atand(MOON_RADIUS_M / moon_distance)
    semi_sun = atand(SUN_RADIUS_M / sun_distance)
    hori_moon = atand(EARTH_MEAN_RADIUS_M / moon_distance)
    hori_sun = atand(EARTH_MEAN_RADIUS_M / sun_distance)

    # (11.21)
    partial_limit = semi_sun + semi_moon + hori_moon - hori_sun
    # (11.23)
    total_limit = semi_sun - semi_moon + hori_moon - hori_sun

    return partial_limit, total_limit, semi_sun, semi_moon


def classify_eclipse(
    sigma: float,
    partial_limit: float,
    total_limit: float,
    semi_sun: float,
    semi_moon: float,
) -> Optional[EclipseType]:
    """
    Eclipse type for a minimum separation sigma, or None if there is no eclipse.
    """
    if abs(sigma) >= partial_limit:
        return None
    if abs(sigma) < total_limit:
        return EclipseType.TOTAL if semi_sun < semi_moon else EclipseType.ANNULAR
    return EclipseType.PARTIAL


def solar_eclipses(
    context: TimeContext,
    start_year: float,
    end_year: float,
    config: Optional[EclipseConfig] = None,
) -> List[SolarEclipseEvent]:
    """
    Compute the solar eclipses in a period.

    New moons and node passages are searched up to end_year plus
    config.search_padding_years, as the eclipse seasons at the end of the
    period need the following nodes.

    Args:
        context: Time context
        start_year: Start year (decimal)
        end_year: End year (decimal)
        config: Search parameters

    Returns:
        Eclipses in ascending order of new moon time
    """
    config = config or EclipseConfig()
    if end_year <= start_year:
        logger.info(f"Empty period {start_year} - {end_year}, no eclipses")
        return []

    search_end = end_year + config.search_padding_years
    passages = compute_node_passages(context, start_year, search_end, config)
    passage_times = [passage.instant for passage in passages]
    moons = new_moons(context, start_year, search_end, config)

    eclipses: List[SolarEclipseEvent] = []

    for instant in moons:
        ind_closest = find_closest(passage_times, instant)
        if ind_closest is None:
            continue
        node = passages[ind_closest]

        moon_pos = moon_ecliptic_geocentric(instant).position
        # Angular distance of the Moon from the ecliptic
        beta_m = ecliptic_latitude(moon_pos)
        incl = node.inclination

        # Ratio of the longitude rates of the Moon and the Sun (11.1)
        lam = node.lon_rate / SUN_LON_RATE
        tan_incl = tand(incl)
        denom = (lam - 1) ** 2 + lam * lam * tan_incl * tan_incl

        # (11.6)
        gamma = atand(lam * tan_incl / denom)
        # Minimum angular distance between the Moon and the Sun (11.7)
        sigma = beta_m * (lam - 1) / math.sqrt(denom)

        # Sun longitude difference to the time of minimum distance
        lon_diff_min = beta_m * tand(gamma)
        jt_max = instant.jd_tdb - (lon_diff_min / SUN_LON_RATE) / 86400.0

        # Used only for the distance to the Sun.
        earth = planet_heliocentric(
            "earth", context.shift(instant, -config.sun_light_time_days)
        )
        partial_limit, total_limit, semi_sun, semi_moon = eclipse_limits(
            float(np.linalg.norm(moon_pos)), earth.distance
        )

        eclipse_type = classify_eclipse(
            sigma, partial_limit, total_limit, semi_sun, semi_moon
        )
        logger.debug(
            f"New moon {instant.iso}: node k={node.k} sigma={sigma:.4f} "
            f"partial_limit={partial_limit:.4f} total_limit={total_limit:.4f} "
            f"type={eclipse_type.value if eclipse_type else None}"
        )
        if eclipse_type is None:
            continue

        eclipses.append(
            SolarEclipseEvent(
                new_moon_time=instant,
                max_time=context.to_instant(jt_max, "tdb"),
                eclipse_type=eclipse_type,
                sigma=sigma,
                beta_m=beta_m,
                gamma=gamma,
            )
        )

    logger.info(
        f"Found {len(eclipses)} solar eclipses from {len(moons)} new moons "
        f"({start_year} - {end_year})"
    )
    return eclipses
