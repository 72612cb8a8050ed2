"""
Evaluation metrics for velocity estimation.

Estimated speeds are compared with ground-truth speeds frame pair by frame
pair, and summarized as a root-mean-square error.

Frame pair idx of a track reads ground truth at idx - skipped, where
skipped counts the pairs before it that were flagged as bad frames. Flagged
pairs do not consume a ground-truth slot; pairs excluded by a distance mask
do.
"""
import logging
import numpy as np
from typing import Callable, List, Optional, Sequence

from .data_structures import EvaluationResult, FramePairRecord, TrackResult
from .exceptions import DegenerateAggregationError, GroundTruthMismatchError

logger = logging.getLogger(__name__)


def resolve_track_records(track_results: TrackResult) -> List[FramePairRecord]:
    """
    Pair each estimate of a track with its ground-truth index.

    Args:
        track_results: Estimates and ignore flags of one track

    Returns:
        One record per frame pair, in order
    """
    if len(track_results.ignore_frame) != len(track_results.estimated_velocities):
        raise ValueError(
            f"Track {track_results.track_num}: {len(track_results.estimated_velocities)} "
            f"estimates but {len(track_results.ignore_frame)} ignore flags"
        )

    records = []
    skipped = 0
    for idx, (velocity, ignored) in enumerate(zip(track_results.estimated_velocities,
                                                   track_results.ignore_frame)):
        if ignored:
            skipped += 1
            records.append(FramePairRecord(estimated_velocity=velocity, ignored=True, gt_index=None))
        else:
            records.append(FramePairRecord(estimated_velocity=velocity, ignored=False,
                                           gt_index=idx - skipped))
    return records


class ErrorAccumulator:
    """
    Running state of an evaluation pass.

    Tracks are folded in one at a time with add_track. The frame-pair
    counter indexes the distance mask and spans all tracks, so an
    accumulator covering a later range of tracks is started at the counter
    value where the earlier one stops, and the two are combined with merge.
    """

    def __init__(self, start_index: int = -1):
        self.start_index = start_index
        self.frame_counter = start_index
        self.errors: List[float] = []
        self.num_ignored = 0
        self.num_masked = 0

    def add_track(self,
                  track_num: int,
                  records: Sequence[FramePairRecord],
                  gt_velocities: Sequence[float],
                  mask: Optional[Sequence[bool]] = None):
        """
        Fold one track's frame pairs into the accumulator.

        Args:
            track_num: Track identifier, for error messages
            records: Resolved frame pairs of the track
            gt_velocities: Ground-truth speeds of the track
            mask: Optional inclusion mask over all frame pairs of all tracks

        Raises:
            GroundTruthMismatchError: If an evaluated pair has no ground truth
        """
        for record in records:
            self.frame_counter += 1

            if record.ignored:
                self.num_ignored += 1
                continue

            if mask is not None and not mask[self.frame_counter]:
                self.num_masked += 1
                continue

            if record.gt_index >= len(gt_velocities):
                raise GroundTruthMismatchError(track_num, record.gt_index, len(gt_velocities))

            error = record.speed - float(gt_velocities[record.gt_index])
            self.errors.append(error)

    def merge(self, other: 'ErrorAccumulator') -> 'ErrorAccumulator':
        """
        Append the results of an accumulator that covers the following tracks.

        Raises:
            ValueError: If other does not start where this accumulator stops
        """
        if other.start_index != self.frame_counter:
            raise ValueError(
                f"Cannot merge accumulator starting at {other.start_index} "
                f"into one ending at {self.frame_counter}"
            )
        self.errors.extend(other.errors)
        self.num_ignored += other.num_ignored
        self.num_masked += other.num_masked
        self.frame_counter = other.frame_counter
        return self

    def result(self) -> EvaluationResult:
        """
        Summarize the collected errors.

        Raises:
            DegenerateAggregationError: If no errors were collected
        """
        result = compute_error_statistics(self.errors)
        result.num_ignored = self.num_ignored
        result.num_masked = self.num_masked
        return result


def compute_error_statistics(errors: Sequence[float]) -> EvaluationResult:
    """
    Compute the root-mean-square error and related statistics.

    Args:
        errors: Signed speed errors (estimated minus ground truth)

    Returns:
        EvaluationResult for the errors

    Raises:
        DegenerateAggregationError: If errors is empty
    """
    if len(errors) == 0:
        raise DegenerateAggregationError("No frames evaluated; RMS error is undefined")

    errors_arr = np.asarray(errors, dtype=float)
    rms_error = float(np.sqrt(np.mean(errors_arr ** 2)))

    return EvaluationResult(
        rms_error=rms_error,
        mean_error=float(np.mean(errors_arr)),
        std_error=float(np.std(errors_arr)),
        num_evaluated=len(errors_arr),
        errors=errors_arr.tolist(),
    )


class VelocityMetrics:
    """
    Compares estimated velocities with ground truth across tracks.
    """

    def __init__(self, get_gt_velocities: Callable[[int], Sequence[float]]):
        """
        Args:
            get_gt_velocities: Returns the ground-truth speeds for a track number,
                e.g. GroundTruthSource.get_velocities
        """
        self.get_gt_velocities = get_gt_velocities

    def accumulate(self,
                   velocity_estimates: List[TrackResult],
                   mask: Optional[Sequence[bool]] = None,
                   accumulator: Optional[ErrorAccumulator] = None) -> ErrorAccumulator:
        """
        Fold the given tracks into an accumulator.

        Args:
            velocity_estimates: Tracking results with bad frames marked
            mask: Optional inclusion mask over all frame pairs of all tracks
            accumulator: Accumulator to continue; a new one is started if None

        Returns:
            The accumulator
        """
        if accumulator is None:
            accumulator = ErrorAccumulator()

        num_pairs = sum(len(r) for r in velocity_estimates)
        if mask is not None and len(mask) < accumulator.frame_counter + 1 + num_pairs:
            raise ValueError(
                f"Mask has {len(mask)} entries but {accumulator.frame_counter + 1 + num_pairs} "
                f"frame pairs are evaluated"
            )

        for track_results in velocity_estimates:
            gt_velocities = self.get_gt_velocities(track_results.track_num)
            records = resolve_track_records(track_results)
            accumulator.add_track(track_results.track_num, records, gt_velocities, mask)

        return accumulator

    def evaluate_tracking(self,
                          velocity_estimates: List[TrackResult],
                          mask: Optional[Sequence[bool]] = None) -> EvaluationResult:
        """
        Evaluate the tracking accuracy.

        Args:
            velocity_estimates: Tracking results with bad frames marked
            mask: Optional inclusion mask over all frame pairs of all tracks

        Returns:
            EvaluationResult with the RMS speed error

        Raises:
            DegenerateAggregationError: If no frame pair was evaluated
        """
        accumulator = self.accumulate(velocity_estimates, mask)
        logger.debug(
            f"Evaluated {len(accumulator.errors)} frame pairs, "
            f"{accumulator.num_ignored} ignored, {accumulator.num_masked} masked"
        )
        return accumulator.result()

    @staticmethod
    def print_metrics(result: EvaluationResult, title: Optional[str] = None):
        """
        Print evaluation metrics in a readable format.

        Args:
            result: EvaluationResult to print
            title: Optional heading
        """
        if title:
            print(title)
        print(f"RMS error: {result.rms_error:.6f} m/s")
        print(f"  Mean error: {result.mean_error:.6f} m/s")
        print(f"  Std error: {result.std_error:.6f} m/s")
        print(f"  Frames evaluated: {result.num_evaluated}")
        print(f"  Frames ignored: {result.num_ignored}")
        if result.num_masked:
            print(f"  Frames outside distance: {result.num_masked}")
