import numpy as np
import pytest

from velocity_eval.config import SensorConfig
from velocity_eval.sensor_model import get_sensor_resolution, angular_to_metric


def test_zero_at_origin():
    resolution = get_sensor_resolution([0.0, 0.0, 3.0])
    assert resolution.horizontal == 0.0
    assert resolution.vertical == 0.0


def test_known_values_at_ten_meters():
    resolution = get_sensor_resolution([6.0, 8.0, -1.5])
    assert resolution.horizontal == pytest.approx(2 * 10 * np.tan(np.deg2rad(0.18) / 2))
    assert resolution.vertical == pytest.approx(2 * 10 * np.tan(np.deg2rad(26.8 / 63) / 2))


def test_height_is_ignored():
    assert get_sensor_resolution([3.0, 4.0, 0.0]) == get_sensor_resolution([3.0, 4.0, 100.0])


def test_monotonic_in_distance():
    distances = np.linspace(0, 100, 51)
    resolutions = [get_sensor_resolution([d, 0.0, 0.0]) for d in distances]
    horizontal = [r.horizontal for r in resolutions]
    vertical = [r.vertical for r in resolutions]
    assert all(a <= b for a, b in zip(horizontal, horizontal[1:]))
    assert all(a <= b for a, b in zip(vertical, vertical[1:]))
    # Beams are spaced further apart vertically than horizontally.
    assert all(h <= v for h, v in zip(horizontal, vertical))


def test_custom_sensor():
    sensor = SensorConfig(horizontal_angular_res_deg=1.0, vertical_angular_res_deg=2.0)
    resolution = get_sensor_resolution([0.0, 20.0, 0.0], sensor)
    assert resolution.horizontal == pytest.approx(angular_to_metric(1.0, 20.0))
    assert resolution.vertical == pytest.approx(angular_to_metric(2.0, 20.0))
