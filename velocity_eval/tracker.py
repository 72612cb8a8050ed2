# tracker.py
"""
Runs a velocity estimator over tracks and collects its estimates.
"""
from abc import ABC, abstractmethod
from typing import Any, List, Optional, Tuple
import logging
import time

import numpy as np
from tqdm import tqdm

from .config import SensorConfig
from .data_structures import Track, TrackResult, TrackingRun
from .sensor_model import get_sensor_resolution

logger = logging.getLogger(__name__)


class VelocityEstimator(ABC):
    """
    Interface for estimators evaluated by the TrackingDriver.

    An estimator keeps temporal state for a single object. After reset() it
    receives the frames of one track, in order.
    """

    @abstractmethod
    def reset(self):
        """Clear all temporal state before a new track."""

    @abstractmethod
    def process(self,
                point_cloud: Any,
                timestamp: float,
                horizontal_resolution: float,
                vertical_resolution: float) -> Tuple[np.ndarray, float]:
        """
        Add the next observation of the object.

        Args:
            point_cloud: Points of the object in this frame
            timestamp: Frame timestamp in seconds
            horizontal_resolution: Sensor horizontal resolution at the object (meters)
            vertical_resolution: Sensor vertical resolution at the object (meters)

        Returns:
            Tuple of (estimated 3D velocity, alignment confidence)
        """


class TrackingDriver:
    """
    Feeds every track to an estimator, frame by frame.
    """

    def __init__(self,
                 estimator: VelocityEstimator,
                 sensor: Optional[SensorConfig] = None,
                 show_progress: bool = False):
        """
        Args:
            estimator: Estimator to evaluate
            sensor: Sensor model settings used to compute per-frame resolution
            show_progress: Whether to display a progress bar over tracks
        """
        self.estimator = estimator
        self.sensor = sensor
        self.show_progress = show_progress

    def track(self, tracks: List[Track]) -> TrackingRun:
        """
        Track all objects and store the estimated velocities.

        Exceptions raised by the estimator are not caught.

        Args:
            tracks: Tracks to process, in order

        Returns:
            TrackingRun with one TrackResult per track and timing totals
        """
        results = []
        total_num_frames = 0

        start = time.perf_counter()
        for track in tqdm(tracks, desc="Tracking", unit="track", disable=not self.show_progress):
            track_estimates = self.track_single(track)
            total_num_frames += len(track_estimates)
            results.append(track_estimates)
        elapsed = time.perf_counter() - start

        run = TrackingRun(results=results, total_seconds=elapsed, num_frame_pairs=total_num_frames)
        logger.info(f"Total time for tracking {len(tracks)} objects: {elapsed * 1000:.1f} ms")
        return run

    def track_single(self, track: Track) -> TrackResult:
        """Reset the estimator and run it over one track."""
        self.estimator.reset()

        track_estimates = TrackResult(track_num=track.track_num)

        for j, frame in enumerate(track.frames):
            resolution = get_sensor_resolution(frame.centroid, self.sensor)

            estimated_velocity, alignment_probability = self.estimator.process(
                frame.point_cloud,
                frame.timestamp,
                resolution.horizontal,
                resolution.vertical,
            )

            # The first time we see the object there is no velocity yet.
            if j > 0:
                track_estimates.estimated_velocities.append(np.asarray(estimated_velocity, dtype=float))
                # By default, don't ignore any frames.
                track_estimates.ignore_frame.append(False)
                track_estimates.alignment_probabilities.append(float(alignment_probability))

        return track_estimates
