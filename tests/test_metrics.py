import numpy as np
import pytest

from velocity_eval.data_structures import TrackResult
from velocity_eval.exceptions import DegenerateAggregationError, GroundTruthMismatchError
from velocity_eval.metrics import (ErrorAccumulator, VelocityMetrics, compute_error_statistics,
                                   resolve_track_records)


def _result(track_num, speeds, ignore):
    return TrackResult(track_num=track_num,
                       estimated_velocities=[np.array([s, 0.0, 0.0]) for s in speeds],
                       ignore_frame=list(ignore))


def test_rms_error():
    result = compute_error_statistics([1.0, -1.0, 2.0])
    assert result.rms_error == pytest.approx(np.sqrt(2))
    assert result.rms_error == pytest.approx(1.41421, abs=1e-5)
    assert result.mean_error == pytest.approx(2.0 / 3.0)
    assert result.num_evaluated == 3


def test_empty_errors_are_degenerate():
    with pytest.raises(DegenerateAggregationError):
        compute_error_statistics([])


def test_ignored_frame_does_not_consume_ground_truth():
    gt = {0: [10.0, 20.0, 30.0]}
    metrics = VelocityMetrics(gt.__getitem__)

    result = metrics.evaluate_tracking([_result(0, [9.0, 99.0, 31.0], [False, True, False])])

    assert result.errors == pytest.approx([9.0 - 10.0, 31.0 - 20.0])
    assert result.num_ignored == 1


def test_resolve_track_records():
    records = resolve_track_records(_result(0, [1.0, 2.0, 3.0, 4.0], [True, False, True, False]))
    assert [r.ignored for r in records] == [True, False, True, False]
    assert [r.gt_index for r in records] == [None, 0, None, 1]
    assert records[3].speed == pytest.approx(4.0)


def test_speed_uses_vector_magnitude():
    gt = {0: [5.0]}
    track = TrackResult(track_num=0, estimated_velocities=[np.array([3.0, 4.0, 0.0])],
                        ignore_frame=[False])
    result = VelocityMetrics(gt.__getitem__).evaluate_tracking([track])
    assert result.errors == pytest.approx([0.0])


def test_masked_frame_still_consumes_ground_truth():
    gt = {0: [10.0, 20.0, 30.0]}
    metrics = VelocityMetrics(gt.__getitem__)

    result = metrics.evaluate_tracking([_result(0, [9.0, 99.0, 31.0], [False, False, False])],
                                       mask=[True, False, True])

    assert result.errors == pytest.approx([-1.0, 1.0])
    assert result.num_masked == 1


def test_mask_counter_spans_tracks_and_ignored_frames():
    gt = {1: [1.0, 2.0], 2: [5.0, 6.0]}
    metrics = VelocityMetrics(gt.__getitem__)
    results = [
        _result(1, [1.0, 2.0], [True, False]),
        _result(2, [5.5, 6.5], [False, False]),
    ]

    # Mask index 0 belongs to the ignored pair, index 2 to the first pair of track 2.
    result = metrics.evaluate_tracking(results, mask=[False, True, False, True])

    # Track 1 pair 1 reads gt index 0; track 2 pair 1 reads gt index 1.
    assert result.errors == pytest.approx([2.0 - 1.0, 6.5 - 6.0])
    assert result.num_ignored == 1
    assert result.num_masked == 1


def test_all_frames_ignored_is_degenerate():
    gt = {0: [1.0, 2.0]}
    metrics = VelocityMetrics(gt.__getitem__)
    with pytest.raises(DegenerateAggregationError):
        metrics.evaluate_tracking([_result(0, [1.0, 2.0], [True, True])])


def test_all_frames_masked_is_degenerate():
    gt = {0: [1.0, 2.0]}
    metrics = VelocityMetrics(gt.__getitem__)
    with pytest.raises(DegenerateAggregationError):
        metrics.evaluate_tracking([_result(0, [1.0, 2.0], [False, False])], mask=[False, False])


def test_short_ground_truth():
    gt = {7: [1.0]}
    metrics = VelocityMetrics(gt.__getitem__)
    with pytest.raises(GroundTruthMismatchError) as excinfo:
        metrics.evaluate_tracking([_result(7, [1.0, 2.0], [False, False])])
    assert excinfo.value.track_num == 7
    assert excinfo.value.gt_index == 1


def test_short_mask():
    gt = {0: [1.0, 2.0]}
    metrics = VelocityMetrics(gt.__getitem__)
    with pytest.raises(ValueError):
        metrics.evaluate_tracking([_result(0, [1.0, 2.0], [False, False])], mask=[True])


def test_merge_matches_sequential_pass():
    gt = {1: [1.0, 2.0, 3.0], 2: [4.0, 5.0]}
    metrics = VelocityMetrics(gt.__getitem__)
    first = _result(1, [1.5, 2.5, 3.5], [False, True, False])
    second = _result(2, [3.0, 6.0], [False, False])
    mask = [True, True, False, True, True]

    sequential = metrics.evaluate_tracking([first, second], mask)

    left = metrics.accumulate([first], mask)
    right = metrics.accumulate([second], mask, ErrorAccumulator(start_index=left.frame_counter))
    merged = left.merge(right).result()

    assert merged.errors == pytest.approx(sequential.errors)
    assert merged.rms_error == pytest.approx(sequential.rms_error)
    assert merged.num_ignored == sequential.num_ignored
    assert merged.num_masked == sequential.num_masked


def test_merge_rejects_gap():
    left = ErrorAccumulator()
    left.frame_counter = 4
    with pytest.raises(ValueError):
        left.merge(ErrorAccumulator(start_index=2))


def test_print_metrics(capsys):
    result = compute_error_statistics([1.0, -1.0, 2.0])
    VelocityMetrics.print_metrics(result, "Nearby objects:")
    out = capsys.readouterr().out
    assert "Nearby objects:" in out
    assert "RMS error: 1.414214 m/s" in out
