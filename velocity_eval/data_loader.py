# data_loader.py  Loads tracks (frames with point clouds and timestamps) from a JSON track file.
"""
Track file format:

    {
      "tracks": [
        {
          "track_num": 0,
          "frames": [
            {"timestamp": 0.0, "points": [[x, y, z], ...], "centroid": [x, y, z]},
            ...
          ]
        }
      ]
    }

"centroid" is optional and defaults to the mean of the points. Points may
carry extra columns (e.g. color) after x, y, z.
"""
import json
import logging
from pathlib import Path
from typing import Any, Dict, List, Union

import numpy as np

from .data_structures import Frame, Track
from .exceptions import TrackFileError

logger = logging.getLogger(__name__)


def _parse_frame(raw: Dict[str, Any]) -> Frame:
    points = np.asarray(raw['points'], dtype=float)
    if points.ndim != 2 or points.shape[0] == 0 or points.shape[1] < 3:
        raise ValueError(f"points must be a non-empty N x 3 (or wider) array, got shape {points.shape}")
    return Frame(
        timestamp=float(raw['timestamp']),
        point_cloud=points,
        centroid=raw.get('centroid'),
    )


def tracks_from_dict(data: Dict[str, Any]) -> List[Track]:
    """
    Build tracks from a decoded track document.

    Raises:
        TrackFileError: If the document does not follow the track file format
    """
    try:
        tracks = []
        for i, raw_track in enumerate(data['tracks']):
            frames = [_parse_frame(raw_frame) for raw_frame in raw_track['frames']]
            tracks.append(Track(track_num=int(raw_track.get('track_num', i)), frames=frames))
    except (KeyError, TypeError, ValueError) as e:
        raise TrackFileError(f"Malformed track data: {e!r}") from e
    return tracks


def load_tracks(path: Union[str, Path]) -> List[Track]:
    """
    Load all tracks from a JSON track file.

    Args:
        path: Path to the track file

    Returns:
        Tracks in file order

    Raises:
        TrackFileError: If the file cannot be read or is malformed
    """
    path = Path(path)
    logger.info(f"Loading file: {path}")
    try:
        with open(path, 'r', encoding='utf-8') as fp:
            data = json.load(fp)
    except OSError as e:
        raise TrackFileError(f"Cannot open file: {path}") from e
    except json.JSONDecodeError as e:
        raise TrackFileError(f"Invalid JSON in {path}: {e}") from e
    except UnicodeDecodeError as e:
        raise TrackFileError(f"Cannot decode file: {path}") from e

    tracks = tracks_from_dict(data)
    logger.info(f"Found {len(tracks)} tracks")
    return tracks


def save_tracks(tracks: List[Track], path: Union[str, Path]):
    """Write tracks in the track file format."""
    data = {
        'tracks': [
            {
                'track_num': track.track_num,
                'frames': [
                    {
                        'timestamp': frame.timestamp,
                        'points': np.asarray(frame.point_cloud).tolist(),
                        'centroid': np.asarray(frame.centroid).tolist(),
                    }
                    for frame in track.frames
                ],
            }
            for track in tracks
        ]
    }
    with open(path, 'w', encoding='utf-8') as fp:
        json.dump(data, fp)
