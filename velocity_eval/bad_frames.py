# bad_frames.py
"""
Detection of frame pairs whose velocity estimate should not be evaluated.

Two situations make an estimate unreliable:

* The bearing to the object jumps between consecutive frames. Part of the
  object was recorded at the beginning of one sensor spin and the rest at
  the end of it, so the segmented shape is distorted. The pair on each side
  of the jump is contaminated, and so is the pair that follows it.
* The time between consecutive frames is extremely small, typically because
  the object moved from the end of one spin to the beginning of the next.
"""
from enum import Enum
from typing import List
import logging

from .coordinate_transforms import bearing
from .data_structures import Track, TrackResult

logger = logging.getLogger(__name__)


class DetectorState(Enum):
    """Scan state carried from one frame to the next."""
    NORMAL = "normal"
    POST_DISCONTINUITY = "post_discontinuity"


class BadFrameDetector:
    """
    Marks unreliable frame pairs in TrackResult.ignore_frame.

    Slot j - 1 of ignore_frame belongs to the estimate between frames j - 1
    and j. Flags are only ever set, never cleared.
    """

    def __init__(self, max_angle_jump: float = 1.0, min_time_diff: float = 0.05):
        """
        Args:
            max_angle_jump: Largest bearing change between frames that is
                still treated as continuous (radians)
            min_time_diff: Smallest time gap between frames that still gives
                a usable estimate (seconds)
        """
        self.max_angle_jump = max_angle_jump
        self.min_time_diff = min_time_diff

    def find_bad_frames(self, tracks: List[Track], results: List[TrackResult]) -> int:
        """
        Mark bad frames for every track.

        Args:
            tracks: Source tracks
            results: Tracking results, index-aligned with tracks

        Returns:
            Total number of frame pairs marked as ignored
        """
        if len(tracks) != len(results):
            raise ValueError(f"Got {len(tracks)} tracks but {len(results)} results")

        total_ignored = 0
        for track, track_results in zip(tracks, results):
            total_ignored += self.mark_track(track, track_results)

        logger.info(f"Ignoring {total_ignored} bad frames")
        return total_ignored

    def mark_track(self, track: Track, track_results: TrackResult) -> int:
        """
        Mark bad frames for a single track, in place.

        Returns:
            Number of frame pairs of this track marked as ignored
        """
        ignore_frame = track_results.ignore_frame
        if len(ignore_frame) != max(len(track.frames) - 1, 0):
            raise ValueError(
                f"Track {track.track_num}: {len(track.frames)} frames but "
                f"{len(ignore_frame)} ignore flags"
            )

        state = DetectorState.NORMAL
        prev_angle = 0.0
        prev_time = 0.0

        for j, frame in enumerate(track.frames):
            angle = bearing(frame.centroid)
            angle_diff = abs(angle - prev_angle)

            curr_time = frame.timestamp
            time_diff = curr_time - prev_time

            prev_angle = angle
            prev_time = curr_time

            # No estimate exists for the first frame.
            if j == 0:
                continue

            if angle_diff <= self.max_angle_jump:
                if state is DetectorState.POST_DISCONTINUITY or time_diff < self.min_time_diff:
                    ignore_frame[j - 1] = True
                state = DetectorState.NORMAL
            else:
                ignore_frame[j - 1] = True
                if j > 1:
                    ignore_frame[j - 2] = True
                state = DetectorState.POST_DISCONTINUITY

        num_ignored = sum(ignore_frame)
        logger.debug(f"Track {track_results.track_num}: {num_ignored}/{len(ignore_frame)} frames ignored")
        return num_ignored
