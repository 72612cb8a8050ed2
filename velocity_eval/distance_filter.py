"""
Filter to only evaluate on objects within a given distance.
"""
from typing import List

from .coordinate_transforms import planar_distance
from .data_structures import Track


def get_within_distance(tracks: List[Track], max_distance: float) -> List[bool]:
    """
    Build an inclusion mask over all frame pairs of all tracks.

    The mask has one entry per frame from each track's second frame onward,
    in track order then frame order, which is the order in which frame pairs
    are visited during evaluation. It does not depend on ignore flags.

    Args:
        tracks: Source tracks
        max_distance: Planar distance threshold in meters (inclusive)

    Returns:
        True for frames whose centroid is within max_distance of the sensor
    """
    within = []
    for track in tracks:
        for frame in track.frames[1:]:
            within.append(planar_distance(frame.centroid) <= max_distance)
    return within
