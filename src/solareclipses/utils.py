# utils.py
import math

import numpy as np


def sind(deg: float) -> float:
    return math.sin(math.radians(deg))


def cosd(deg: float) -> float:
    return math.cos(math.radians(deg))


def tand(deg: float) -> float:
    return math.tan(math.radians(deg))


def asind(value: float) -> float:
    return math.degrees(math.asin(value))


def atand(value: float) -> float:
    return math.degrees(math.atan(value))


def atan2d(y: float, x: float) -> float:
    return math.degrees(math.atan2(y, x))


def angle_diff(angle1: float, angle2: float) -> float:
    """
    Difference angle1 - angle2 wrapped to [-180, 180).

    Args:
        angle1, angle2: Angles (degrees)

    Returns:
        Wrapped difference in degrees
    """
    return (angle1 - angle2 + 180.0) % 360.0 - 180.0


def rotate_axis1(vec: np.ndarray, angle_deg: float) -> np.ndarray:
    """Rotate the coordinate frame about the first axis."""
    c = cosd(angle_deg)
    s = sind(angle_deg)
    return np.array([vec[0], c * vec[1] + s * vec[2], -s * vec[1] + c * vec[2]])


def rotate_axis3(vec: np.ndarray, angle_deg: float) -> np.ndarray:
    """Rotate the coordinate frame about the third axis."""
    c = cosd(angle_deg)
    s = sind(angle_deg)
    return np.array([c * vec[0] + s * vec[1], -s * vec[0] + c * vec[1], vec[2]])


def ecliptic_longitude(vec: np.ndarray) -> float:
    """Longitude (degrees) of a vector in an ecliptic frame."""
    return atan2d(vec[1], vec[0])


def ecliptic_latitude(vec: np.ndarray) -> float:
    """Latitude (degrees) of a vector in an ecliptic frame."""
    return asind(vec[2] / np.linalg.norm(vec))
