# conftest.py
"""
Shared fixtures for the solar eclipse tests.
"""

import logging

import pytest

from solareclipses.timescales import TimeContext
from solareclipses.eclipses import solar_eclipses

logging.basicConfig(level=logging.INFO)


@pytest.fixture(scope="session")
def context():
    """Time context with the bundled UT1-UTC table."""
    return TimeContext()


@pytest.fixture(scope="session")
def eclipses_2001_2019(context):
    """Solar eclipses from 2001.1 to 2019, computed once per session."""
    return solar_eclipses(context, 2001.1, 2019)
