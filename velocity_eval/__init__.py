"""
Velocity Estimator Evaluation

Evaluates object velocity estimators on tracks of point-cloud observations
against ground-truth speeds.

Key Components:
- Track, frame and result data structures
- Sensor resolution model for a rotating multi-beam range sensor
- Bad frame detection (bearing discontinuities, near-duplicate frames)
- Tracking driver feeding frames to a VelocityEstimator
- RMS speed error evaluation, optionally restricted by distance
- Centroid Kalman filter baseline estimator

Usage:
    from velocity_eval import (BadFrameDetector, GroundTruthSource,
                               KalmanVelocityEstimator, TrackingDriver,
                               VelocityMetrics, load_tracks)

    tracks = load_tracks("tracks.json")
    run = TrackingDriver(KalmanVelocityEstimator()).track(tracks)
    BadFrameDetector().find_bad_frames(tracks, run.results)

    metrics = VelocityMetrics(GroundTruthSource("gt").get_velocities)
    metrics.print_metrics(metrics.evaluate_tracking(run.results))
"""

from .data_structures import (
    Frame,
    Track,
    TrackResult,
    FramePairRecord,
    TrackingRun,
    EvaluationResult,
)
from .exceptions import (
    VelocityEvalError,
    FatalConfigurationError,
    GroundTruthNotFoundError,
    GroundTruthMismatchError,
    TrackFileError,
    ConfigError,
    DegenerateAggregationError,
)
from .config import EvaluationConfig, SensorConfig, BadFrameConfig, KalmanConfig, load_config
from .coordinate_transforms import planar_distance, bearing
from .sensor_model import SensorResolution, get_sensor_resolution
from .bad_frames import BadFrameDetector, DetectorState
from .distance_filter import get_within_distance
from .ground_truth import GroundTruthSource, read_gt_velocities
from .metrics import ErrorAccumulator, VelocityMetrics, compute_error_statistics, resolve_track_records
from .tracker import TrackingDriver, VelocityEstimator
from .kalman_filter import CentroidKalmanFilter, KalmanVelocityEstimator
from .data_loader import load_tracks, save_tracks

__version__ = "1.0.0"

__all__ = [
    # Data structures
    'Frame',
    'Track',
    'TrackResult',
    'FramePairRecord',
    'TrackingRun',
    'EvaluationResult',

    # Errors
    'VelocityEvalError',
    'FatalConfigurationError',
    'GroundTruthNotFoundError',
    'GroundTruthMismatchError',
    'TrackFileError',
    'ConfigError',
    'DegenerateAggregationError',

    # Configuration
    'EvaluationConfig',
    'SensorConfig',
    'BadFrameConfig',
    'KalmanConfig',
    'load_config',

    # Geometry and sensor model
    'planar_distance',
    'bearing',
    'SensorResolution',
    'get_sensor_resolution',

    # Core components
    'BadFrameDetector',
    'DetectorState',
    'get_within_distance',
    'GroundTruthSource',
    'read_gt_velocities',
    'ErrorAccumulator',
    'VelocityMetrics',
    'compute_error_statistics',
    'resolve_track_records',
    'TrackingDriver',
    'VelocityEstimator',
    'CentroidKalmanFilter',
    'KalmanVelocityEstimator',
    'load_tracks',
    'save_tracks',
]
