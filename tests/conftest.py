import numpy as np
import pytest

from velocity_eval.data_structures import Frame, Track
from velocity_eval.tracker import VelocityEstimator


class ScriptedEstimator(VelocityEstimator):
    """Returns pre-set velocities in order and records every call."""

    def __init__(self, velocities=None, default=(1.0, 0.0, 0.0)):
        self.velocities = list(velocities or [])
        self.default = np.array(default, dtype=float)
        self.calls = []
        self.resets = 0

    def reset(self):
        self.resets += 1

    def process(self, point_cloud, timestamp, horizontal_resolution, vertical_resolution):
        self.calls.append((timestamp, horizontal_resolution, vertical_resolution))
        if self.velocities:
            return np.array(self.velocities.pop(0), dtype=float), 0.5
        return self.default.copy(), 0.5


def _make_track(track_num, positions, timestamps):
    frames = []
    for position, timestamp in zip(positions, timestamps):
        position = np.array(position, dtype=float)
        cloud = np.array([position + [0.1, 0.0, 0.0], position - [0.1, 0.0, 0.0]])
        frames.append(Frame(timestamp=timestamp, point_cloud=cloud, centroid=position))
    return Track(track_num=track_num, frames=frames)


@pytest.fixture
def make_track():
    return _make_track


@pytest.fixture
def scripted_estimator():
    return ScriptedEstimator


@pytest.fixture
def write_gt(tmp_path):
    def _write(track_num, values):
        path = tmp_path / f"track{track_num}gt.txt"
        path.write_text("".join(f"{v}\n" for v in values))
        return path
    return _write
