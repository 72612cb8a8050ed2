import numpy as np
import pytest

from velocity_eval.exceptions import FatalConfigurationError, GroundTruthNotFoundError
from velocity_eval.ground_truth import GroundTruthSource, read_gt_velocities


def test_reads_one_value_per_line(tmp_path, write_gt):
    write_gt(3, [1.5, 2.25, 0.0])
    source = GroundTruthSource(tmp_path)

    velocities = source.get_velocities(3)

    assert isinstance(velocities, np.ndarray)
    assert velocities.tolist() == [1.5, 2.25, 0.0]


def test_path_follows_naming_convention(tmp_path):
    source = GroundTruthSource(tmp_path)
    assert source.path_for(12) == tmp_path / "track12gt.txt"

    custom = GroundTruthSource(tmp_path, "gt_{track_num:03d}.txt")
    assert custom.path_for(12) == tmp_path / "gt_012.txt"


def test_stops_at_first_non_numeric_line(tmp_path):
    path = tmp_path / "gt.txt"
    path.write_text("1.0\n\n  2.0  \nend\n3.0\n")
    assert read_gt_velocities(path).tolist() == [1.0, 2.0]


def test_missing_file_is_fatal(tmp_path):
    source = GroundTruthSource(tmp_path)
    with pytest.raises(GroundTruthNotFoundError) as excinfo:
        source.get_velocities(4)
    assert isinstance(excinfo.value, FatalConfigurationError)
    assert excinfo.value.track_num == 4
    assert "track4gt.txt" in str(excinfo.value)


def test_values_are_cached(tmp_path, write_gt):
    path = write_gt(1, [4.0])
    source = GroundTruthSource(tmp_path)
    assert source.get_velocities(1).tolist() == [4.0]

    path.unlink()
    assert source.get_velocities(1).tolist() == [4.0]


def test_undecodable_file_is_fatal(tmp_path):
    (tmp_path / "track0gt.txt").write_bytes(b"\xff\xfe\x00garbage\n")
    with pytest.raises(GroundTruthNotFoundError) as excinfo:
        GroundTruthSource(tmp_path).get_velocities(0)
    assert isinstance(excinfo.value, FatalConfigurationError)


def test_reads_every_number_on_a_line(tmp_path):
    path = tmp_path / "gt.txt"
    path.write_text("1.5 2.0\n3.0\t4.0 x 5.0\n6.0\n")
    assert read_gt_velocities(path).tolist() == [1.5, 2.0, 3.0, 4.0]
