"""
Ground-truth velocity files.

Each track has one text file in the ground-truth folder holding one velocity
magnitude (m/s) per line, one line per frame pair of the track.
"""
from pathlib import Path
from typing import Dict, Union
import logging

import numpy as np

from .exceptions import GroundTruthNotFoundError

logger = logging.getLogger(__name__)

DEFAULT_FILENAME_PATTERN = "track{track_num}gt.txt"


def read_gt_velocities(path: Union[str, Path]) -> np.ndarray:
    """
    Read velocity magnitudes from a ground-truth file.

    Every whitespace-separated number is read in order, until the first
    token that is not a number.

    Raises:
        OSError: If the file cannot be opened
        UnicodeDecodeError: If the file is not text
    """
    velocities = []
    with open(path, 'r', encoding='utf-8') as fid:
        for line in fid:
            for token in line.split():
                try:
                    velocities.append(float(token))
                except ValueError:
                    return np.array(velocities, dtype=float)
    return np.array(velocities, dtype=float)


class GroundTruthSource:
    """
    Looks up ground-truth velocities by track number.

    Files are read once per source and cached, so repeated evaluation passes
    over the same tracks do not re-read the folder.
    """

    def __init__(self, gt_folder: Union[str, Path],
                 filename_pattern: str = DEFAULT_FILENAME_PATTERN):
        """
        Args:
            gt_folder: Folder containing the ground-truth files
            filename_pattern: File name format string, formatted with track_num
        """
        self.gt_folder = Path(gt_folder)
        self.filename_pattern = filename_pattern
        self._cache: Dict[int, np.ndarray] = {}

    def path_for(self, track_num: int) -> Path:
        """Path of the ground-truth file for a track."""
        return self.gt_folder / self.filename_pattern.format(track_num=track_num)

    def get_velocities(self, track_num: int) -> np.ndarray:
        """
        Get the ground-truth velocity magnitudes for a track.

        Raises:
            GroundTruthNotFoundError: If the file cannot be opened or decoded
        """
        if track_num not in self._cache:
            path = self.path_for(track_num)
            try:
                velocities = read_gt_velocities(path)
            except (OSError, UnicodeDecodeError) as e:
                raise GroundTruthNotFoundError(path, track_num) from e
            logger.debug(f"Read {len(velocities)} ground truth velocities from {path}")
            self._cache[track_num] = velocities
        return self._cache[track_num]
