# models.py
from dataclasses import dataclass
from datetime import datetime, timezone
from enum import Enum
import math

import numpy as np
from astropy.time import Time
from astropy import constants as const


@dataclass(frozen=True)
class TimeInstant:
    """
    A single physical instant expressed as Julian dates in several time scales.

    Instances are produced by TimeContext only, so that all scale values
    stay consistent with each other.
    """

    jd_tdb: float
    jd_tt: float
    jd_tai: float
    jd_utc: float
    jd_ut1: float

    def to_datetime(self) -> datetime:
        """UTC datetime (timezone-aware)."""
        return Time(self.jd_utc, format="jd", scale="utc").to_datetime(
            timezone=timezone.utc
        )

    @property
    def iso(self) -> str:
        """UTC ISO string with Z suffix."""
        return self.to_datetime().strftime("%Y-%m-%dT%H:%M:%SZ")


class Frame(Enum):
    """Reference frames of state vectors."""

    ECL_GEO = "ecliptic_geocentric"
    ECL_HEL = "ecliptic_heliocentric"
    J2000 = "j2000"
    MOD = "mean_of_date"
    TOD = "true_of_date"
    FUND = "fundamental"


@dataclass(frozen=True, eq=False)
class StateVector:
    """
    Position (m) and velocity (m/s) in a given frame at a given instant.

    The arrays are made read-only on construction; transforms always
    return a new StateVector.
    """

    position: np.ndarray
    velocity: np.ndarray
    frame: Frame
    instant: TimeInstant

    def __post_init__(self):
        for name in ("position", "velocity"):
            vec = np.array(getattr(self, name), dtype=float)
            if vec.shape != (3,):
                raise ValueError(f"{name} must be a 3-vector, got shape {vec.shape}")
            vec.setflags(write=False)
            object.__setattr__(self, name, vec)

    @property
    def distance(self) -> float:
        return float(np.linalg.norm(self.position))


@dataclass(frozen=True)
class NutationData:
    """IAU 1980 nutation angles and mean obliquity (degrees)."""

    dpsi: float
    deps: float
    eps: float

    @property
    def eps_true(self) -> float:
        """True obliquity of the ecliptic."""
        return self.eps + self.deps


@dataclass(frozen=True)
class EclipseCandidate:
    """New moon with its Meeus cycle index k."""

    k: int
    instant: TimeInstant


@dataclass(frozen=True)
class NodePassage:
    """
    Passage of the Moon through the ecliptic.

    k is integer for an ascending node and half-integer for a descending one.
    inclination is in degrees, lon_rate in degrees per second.
    """

    k: float
    instant: TimeInstant
    inclination: float
    lon_rate: float

    @property
    def ascending(self) -> bool:
        return float(self.k).is_integer()


class EclipseType(Enum):
    """Solar eclipse types."""

    PARTIAL = "Partial"
    TOTAL = "Total"
    ANNULAR = "Annular"


@dataclass(frozen=True)
class SolarEclipseEvent:
    """A detected solar eclipse."""

    new_moon_time: TimeInstant
    max_time: TimeInstant
    eclipse_type: EclipseType
    sigma: float  # minimum angular separation (degrees)
    beta_m: float  # ecliptic latitude of the Moon at new moon (degrees)
    gamma: float  # degrees


@dataclass(frozen=True)
class BesselianElements:
    """
    Besselian elements of a solar eclipse at a single instant.

    a, d, mu are in degrees, x and y in Earth equatorial radii. Time
    derivatives are per day and stay zero unless explicitly computed.
    """

    a: float
    d: float
    x: float
    y: float
    sin_d: float
    cos_d: float
    mu: float
    l1: float
    l2: float
    tan_f1: float
    tan_f2: float
    a_dot: float = 0.0
    d_dot: float = 0.0
    x_dot: float = 0.0
    y_dot: float = 0.0
    mu_dot: float = 0.0
    l1_dot: float = 0.0
    l2_dot: float = 0.0


@dataclass(frozen=True)
class CentralLinePoint:
    """
    Intersection of the shadow axis with the Earth ellipsoid.

    zeta is NaN when the axis misses the ellipsoid.
    """

    rho1: float
    rho2: float
    sin_d1: float
    cos_d1: float
    sin_d1d2: float
    cos_d1d2: float
    xi: float
    eta: float
    zeta: float

    @property
    def intersects_earth(self) -> bool:
        return not math.isnan(self.zeta)


# Radii used for apparent sizes and shadow cones (m)
SUN_RADIUS_M = 696340e3
MOON_RADIUS_M = 1737.4e3
EARTH_MEAN_RADIUS_M = 6371e3

# Average light travel time from the Sun to the Earth (days).
SUN_LIGHT_TIME_DAYS = (const.au / const.c).to_value("day")


@dataclass
class EclipseConfig:
    """Tunable parameters for the event searches."""

    # Sampling step of the single linear refinement
    refine_step_minutes: float = 1.0
    # Step for node inclination and longitude rate
    node_sample_seconds: float = 60.0
    # The detector searches [start_year, end_year + padding)
    search_padding_years: float = 1.0
    sun_light_time_days: float = SUN_LIGHT_TIME_DAYS

    def __post_init__(self):
        """Validate configuration."""
        if self.refine_step_minutes <= 0:
            raise ValueError("refine_step_minutes must be positive")
        if self.node_sample_seconds <= 0:
            raise ValueError("node_sample_seconds must be positive")
        if self.search_padding_years < 0:
            raise ValueError("search_padding_years must be non-negative")
        if self.sun_light_time_days < 0:
            raise ValueError("sun_light_time_days must be non-negative")
