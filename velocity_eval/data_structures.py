"""
Data structures for the velocity evaluation pipeline.
"""
from dataclasses import dataclass, field
from typing import Any, List, Optional
import numpy as np


@dataclass
class Frame:
    """
    One observation of a tracked object.

    Attributes:
        timestamp: Observation time in seconds
        point_cloud: Points belonging to the object, passed through to the estimator
        centroid: Object centroid (x, y, z) in sensor-local coordinates
    """
    timestamp: float
    point_cloud: Any
    centroid: Optional[np.ndarray] = None

    def __post_init__(self):
        """Compute the centroid from the point cloud when it is not given."""
        if self.centroid is None:
            points = np.asarray(self.point_cloud, dtype=float)
            self.centroid = points[:, :3].mean(axis=0)
        else:
            self.centroid = np.asarray(self.centroid, dtype=float)


@dataclass
class Track:
    """
    A temporally ordered sequence of observations of one object.

    Attributes:
        track_num: Track identifier, also used to locate ground truth
        frames: Frames in time order
    """
    track_num: int
    frames: List[Frame] = field(default_factory=list)

    def __len__(self) -> int:
        return len(self.frames)


@dataclass
class TrackResult:
    """
    Estimated velocities for one track.

    Entry i describes the frame pair (i, i + 1), so every list holds
    len(frames) - 1 values.

    Attributes:
        track_num: Identifier copied from the source track
        estimated_velocities: Estimated velocity vector per frame pair
        ignore_frame: Whether the estimate is excluded from evaluation
        alignment_probabilities: Estimator confidence per frame pair
    """
    track_num: int
    estimated_velocities: List[np.ndarray] = field(default_factory=list)
    ignore_frame: List[bool] = field(default_factory=list)
    alignment_probabilities: List[float] = field(default_factory=list)

    def __len__(self) -> int:
        return len(self.estimated_velocities)


@dataclass
class FramePairRecord:
    """
    A frame pair resolved against the ground-truth stream.

    Attributes:
        estimated_velocity: Estimated velocity vector
        ignored: Whether the pair was flagged as a bad frame
        gt_index: Index into the track's ground truth, None for ignored pairs
    """
    estimated_velocity: np.ndarray
    ignored: bool
    gt_index: Optional[int]

    @property
    def speed(self) -> float:
        """Magnitude of the estimated velocity."""
        return float(np.linalg.norm(self.estimated_velocity))


@dataclass
class TrackingRun:
    """
    Output of running an estimator over all tracks.

    Attributes:
        results: One TrackResult per input track, in input order
        total_seconds: Wall-clock time spent tracking
        num_frame_pairs: Number of velocity estimates produced
    """
    results: List[TrackResult]
    total_seconds: float
    num_frame_pairs: int

    @property
    def mean_runtime_ms(self) -> float:
        """Mean tracking time per frame pair in milliseconds."""
        if self.num_frame_pairs == 0:
            return 0.0
        return self.total_seconds * 1000.0 / self.num_frame_pairs


@dataclass
class EvaluationResult:
    """
    Results from one evaluation pass.

    Attributes:
        rms_error: Root-mean-square speed error (m/s)
        mean_error: Mean signed speed error (m/s)
        std_error: Standard deviation of the speed error (m/s)
        num_evaluated: Number of frame pairs compared with ground truth
        num_ignored: Number of frame pairs flagged as bad frames
        num_masked: Number of frame pairs excluded by the distance mask
        errors: Individual signed errors, estimated minus ground truth
    """
    rms_error: float
    mean_error: float
    std_error: float
    num_evaluated: int
    num_ignored: int = 0
    num_masked: int = 0
    errors: List[float] = field(default_factory=list)
