"""
Coordinate helpers for sensor-local object positions.
"""
import numpy as np
from typing import Sequence


def planar_distance(position: Sequence[float]) -> float:
    """
    Horizontal distance from the sensor origin.

    Args:
        position: Position (x, y, ...) in meters; only x and y are used

    Returns:
        sqrt(x^2 + y^2)
    """
    return float(np.sqrt(position[0] ** 2 + position[1] ** 2))


def bearing(position: Sequence[float]) -> float:
    """
    Horizontal angle from the sensor origin to a position.

    Args:
        position: Position (x, y, ...) in meters

    Returns:
        atan2(y, x) in radians, in [-pi, pi]
    """
    return float(np.arctan2(position[1], position[0]))
