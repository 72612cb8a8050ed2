"""
Sensor resolution model for a rotating multi-beam range sensor.

The angular spacing between neighbouring returns is converted to a metric
spacing at the range of the tracked object, which is what velocity
estimators use as their measurement precision.
"""
from typing import NamedTuple, Optional, Sequence
import numpy as np

from .config import SensorConfig
from .coordinate_transforms import planar_distance

HORIZONTAL_ANGULAR_RES_DEG = 0.18
VERTICAL_ANGULAR_RES_DEG = 26.8 / 63


class SensorResolution(NamedTuple):
    horizontal: float
    vertical: float


def angular_to_metric(angular_res_deg: float, distance: float) -> float:
    """
    Metric spacing of two rays separated by an angle, at a given range.

    Args:
        angular_res_deg: Angle between rays in degrees
        distance: Range in meters

    Returns:
        2 * distance * tan(angle / 2)
    """
    return 2 * distance * np.tan(angular_res_deg / 2.0 * np.pi / 180.0)


def get_sensor_resolution(centroid_local_coordinates: Sequence[float],
                          sensor: Optional[SensorConfig] = None) -> SensorResolution:
    """
    Compute the sensor resolution for an object at a given position.

    Args:
        centroid_local_coordinates: Object centroid (x, y, z) in sensor coordinates
        sensor: Angular resolutions to use; defaults to the 64-beam sensor

    Returns:
        Horizontal and vertical resolution in meters. Zero at the origin.
    """
    horizontal_angular_res = HORIZONTAL_ANGULAR_RES_DEG
    vertical_angular_res = VERTICAL_ANGULAR_RES_DEG
    if sensor is not None:
        horizontal_angular_res = sensor.horizontal_angular_res_deg
        vertical_angular_res = sensor.vertical_angular_res_deg

    horizontal_distance = planar_distance(centroid_local_coordinates)

    return SensorResolution(
        horizontal=float(angular_to_metric(horizontal_angular_res, horizontal_distance)),
        vertical=float(angular_to_metric(vertical_angular_res, horizontal_distance)),
    )
