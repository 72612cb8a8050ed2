"""
Error types raised by the velocity evaluation pipeline.

Estimator failures are not represented here: whatever the estimator raises
propagates to the caller unchanged.
"""


class VelocityEvalError(Exception):
    """Base class for all evaluation errors."""


class FatalConfigurationError(VelocityEvalError):
    """An input required by the run is missing or unusable. Aborts the run."""


class GroundTruthNotFoundError(FatalConfigurationError):
    """The ground-truth file for a track cannot be located or read."""

    def __init__(self, path, track_num: int):
        self.path = path
        self.track_num = track_num
        super().__init__(f"Cannot open file: {path}")


class GroundTruthMismatchError(FatalConfigurationError):
    """A track has more evaluated frame pairs than ground-truth entries."""

    def __init__(self, track_num: int, gt_index: int, num_gt: int):
        self.track_num = track_num
        self.gt_index = gt_index
        self.num_gt = num_gt
        super().__init__(
            f"Track {track_num}: ground truth index {gt_index} requested "
            f"but only {num_gt} values are available"
        )


class TrackFileError(FatalConfigurationError):
    """The track file is missing or malformed."""


class ConfigError(FatalConfigurationError):
    """The evaluation config file is invalid."""


class DegenerateAggregationError(VelocityEvalError):
    """No errors were collected, so aggregate statistics are undefined."""
