# main.py

"""Track objects with a velocity estimator and evaluate its accuracy against ground truth."""

import argparse
import logging
import sys
from typing import Dict, List, Optional

from .bad_frames import BadFrameDetector
from .config import EvaluationConfig, load_config
from .data_loader import load_tracks
from .data_structures import EvaluationResult, Track
from .distance_filter import get_within_distance
from .exceptions import DegenerateAggregationError, FatalConfigurationError
from .ground_truth import GroundTruthSource
from .kalman_filter import KalmanVelocityEstimator
from .metrics import VelocityMetrics
from .tracker import TrackingDriver, VelocityEstimator

logger = logging.getLogger(__name__)


def _report(metrics: VelocityMetrics, results, mask=None, title=None) -> Optional[EvaluationResult]:
    try:
        result = metrics.evaluate_tracking(results, mask)
    except DegenerateAggregationError as e:
        if title:
            print(title)
        print(f"No frames evaluated: {e}")
        logger.warning(str(e))
        return None
    metrics.print_metrics(result, title)
    return result


def track_and_evaluate(estimator: VelocityEstimator,
                       tracks: List[Track],
                       ground_truth: GroundTruthSource,
                       config: Optional[EvaluationConfig] = None,
                       show_progress: bool = False) -> Dict[str, Optional[EvaluationResult]]:
    """
    Track all objects, mark bad frames and evaluate the estimates.

    Two passes are evaluated: all objects ("all") and objects within
    config.max_distance of the sensor ("within_<max_distance>m"). A pass in
    which no frame pair can be evaluated maps to None.

    Args:
        estimator: Estimator to evaluate
        tracks: Tracks to process
        ground_truth: Source of ground-truth speeds
        config: Run settings; defaults are used if None
        show_progress: Whether to show a progress bar while tracking

    Returns:
        Mapping of pass name to its EvaluationResult
    """
    config = config or EvaluationConfig()

    # Track all objects and store the estimated velocities.
    driver = TrackingDriver(estimator, sensor=config.sensor, show_progress=show_progress)
    run = driver.track(tracks)
    print(f"Mean runtime per frame: {run.mean_runtime_ms:f} ms")

    # Find bad frames that we want to ignore.
    detector = BadFrameDetector(max_angle_jump=config.bad_frames.max_angle_jump,
                                min_time_diff=config.bad_frames.min_time_diff)
    detector.find_bad_frames(tracks, run.results)

    metrics = VelocityMetrics(ground_truth.get_velocities)
    evaluations = {}

    evaluations['all'] = _report(metrics, run.results)

    # Evaluate the tracking accuracy for nearby objects.
    max_distance = config.max_distance
    within = get_within_distance(tracks, max_distance)
    evaluations[f'within_{max_distance:g}m'] = _report(
        metrics, run.results, within,
        title=f"Evaluating only for objects within {max_distance:f} m:")

    return evaluations


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog='velocity-eval',
        description='Evaluate velocity estimates on tracked point clouds against ground truth.')
    parser.add_argument('tm_file', nargs='?', help='Path to the track file.')
    parser.add_argument('gt_folder', nargs='?', help='Folder with track<N>gt.txt ground-truth files.')
    parser.add_argument('--config', help='Path to a YAML config file.', default=None)
    parser.add_argument('--max-distance', type=float, default=None,
                        help='Distance threshold (m) for the nearby-objects pass.')
    parser.add_argument('--progress', action='store_true', help='Show a progress bar while tracking.')
    parser.add_argument('--log-level', default='INFO',
                        choices=['DEBUG', 'INFO', 'WARNING', 'ERROR'])
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    if args.tm_file is None or args.gt_folder is None:
        parser.print_usage()
        return 1

    logging.basicConfig(format="%(levelname)s: %(message)s", level=getattr(logging, args.log_level))

    try:
        config = load_config(args.config) if args.config else EvaluationConfig()
        if args.max_distance is not None:
            config.max_distance = args.max_distance

        tracks = load_tracks(args.tm_file)
        ground_truth = GroundTruthSource(args.gt_folder, config.gt_filename_pattern)

        print("Tracking objects with the centroid-based Kalman filter baseline. "
              "This method is very fast but not very accurate. Please wait...")
        estimator = KalmanVelocityEstimator(config.kalman)
        track_and_evaluate(estimator, tracks, ground_truth, config, show_progress=args.progress)
    except FatalConfigurationError as e:
        print(e)
        return 1

    return 0


if __name__ == '__main__':
    sys.exit(main())
