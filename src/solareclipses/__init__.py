# __init__.py
"""
Solar Eclipses Package

Prediction of solar eclipses, their Besselian elements and the central line.
"""

__version__ = "1.0.0"

from .models import (
    TimeInstant,
    Frame,
    StateVector,
    NutationData,
    EclipseCandidate,
    NodePassage,
    EclipseType,
    SolarEclipseEvent,
    BesselianElements,
    CentralLinePoint,
    EclipseConfig,
)
from .timescales import TimeContext
from .moon import node_passages, new_moons, new_moon_candidates
from .eclipses import solar_eclipses, compute_node_passages, find_closest
from .besselian import (
    besselian_solar,
    besselian_solar_with_delta,
    besselian_central_line,
)

__all__ = [
    'TimeInstant',
    'Frame',
    'StateVector',
    'NutationData',
    'EclipseCandidate',
    'NodePassage',
    'EclipseType',
    'SolarEclipseEvent',
    'BesselianElements',
    'CentralLinePoint',
    'EclipseConfig',
    'TimeContext',
    'node_passages',
    'new_moons',
    'new_moon_candidates',
    'solar_eclipses',
    'compute_node_passages',
    'find_closest',
    'besselian_solar',
    'besselian_solar_with_delta',
    'besselian_central_line',
    'predict_solar_eclipses',
]


# Convenience functions

def predict_solar_eclipses(
    start_year,
    end_year,
    context=None,
    **kwargs
):
    """
    Convenience function to predict solar eclipses.

    Args:
        start_year: Start year (decimal)
        end_year: End year (decimal)
        context: TimeContext to use. A new one is built if None.
        **kwargs: Additional EclipseConfig parameters
            - refine_step_minutes: Step of the linear refinement
            - node_sample_seconds: Step for node inclination and rate
            - search_padding_years: Extension of the search window
            - sun_light_time_days: Sun-Earth light time

    Returns:
        List of SolarEclipseEvent
    """
    # Create context and config
    if context is None:
        context = TimeContext()
    config = EclipseConfig(**kwargs)

    return solar_eclipses(context, start_year, end_year, config)
