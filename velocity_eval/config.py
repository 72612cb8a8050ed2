"""
Configuration for an evaluation run.

A config file is YAML with optional top-level keys matching the fields of
EvaluationConfig; nested sections map onto SensorConfig, BadFrameConfig and
KalmanConfig. Omitted keys keep their defaults.

Example:
    max_distance: 5.0
    bad_frames:
      max_angle_jump: 1.0
      min_time_diff: 0.05
"""
from dataclasses import dataclass, field, fields, is_dataclass
from pathlib import Path
from typing import Any, Dict, Union
import logging

import yaml

from .exceptions import ConfigError

logger = logging.getLogger(__name__)


@dataclass
class SensorConfig:
    """
    Angular resolution of the rotating multi-beam range sensor.

    Defaults describe a 64-beam sensor spinning at 10 Hz: 0.18 degrees
    horizontally and 64 beams spanning 26.8 vertical degrees.
    """
    horizontal_angular_res_deg: float = 0.18
    vertical_angular_res_deg: float = 26.8 / 63


@dataclass
class BadFrameConfig:
    """Thresholds for flagging unreliable frame pairs."""
    max_angle_jump: float = 1.0  # radians
    min_time_diff: float = 0.05  # seconds


@dataclass
class KalmanConfig:
    """Tuning of the centroid Kalman filter baseline estimator."""
    process_noise: float = 10.0
    base_dt: float = 0.1
    min_measurement_noise: float = 0.05
    initial_covariance: float = 50.0


@dataclass
class EvaluationConfig:
    """
    Settings for one evaluation run.

    Attributes:
        max_distance: Planar distance threshold for the restricted pass (meters)
        gt_filename_pattern: Ground-truth file name inside the ground-truth folder,
            formatted with track_num
        sensor: Sensor resolution model settings
        bad_frames: Bad frame detector thresholds
        kalman: Baseline estimator tuning
    """
    max_distance: float = 5.0
    gt_filename_pattern: str = "track{track_num}gt.txt"
    sensor: SensorConfig = field(default_factory=SensorConfig)
    bad_frames: BadFrameConfig = field(default_factory=BadFrameConfig)
    kalman: KalmanConfig = field(default_factory=KalmanConfig)


def _check_scalar(value, expected: type, name: str, section: str):
    if expected is float:
        if isinstance(value, bool) or not isinstance(value, (int, float)):
            raise ConfigError(f"'{section}.{name}' must be a number, got {value!r}")
        return float(value)
    if not isinstance(value, expected):
        raise ConfigError(f"'{section}.{name}' must be a {expected.__name__}, got {value!r}")
    return value


def _build(cls, values: Dict[str, Any], section: str):
    if not isinstance(values, dict):
        raise ConfigError(f"Section '{section}' must be a mapping, got {type(values).__name__}")

    known = {f.name: f for f in fields(cls)}
    unknown = set(values) - set(known)
    if unknown:
        raise ConfigError(f"Unknown keys in '{section}': {', '.join(sorted(unknown))}")

    kwargs = {}
    for name, value in values.items():
        default = known[name].default_factory() if callable(known[name].default_factory) else None
        if is_dataclass(default):
            kwargs[name] = _build(type(default), value or {}, name)
        else:
            kwargs[name] = _check_scalar(value, known[name].type, name, section)
    return cls(**kwargs)


def config_from_dict(values: Dict[str, Any]) -> EvaluationConfig:
    """
    Build an EvaluationConfig from a plain mapping.

    Raises:
        ConfigError: If the mapping contains unknown keys, malformed sections
            or values of the wrong type
    """
    return _build(EvaluationConfig, values or {}, "root")


def load_config(path: Union[str, Path]) -> EvaluationConfig:
    """
    Load an EvaluationConfig from a YAML file.

    Args:
        path: Path to the YAML config file

    Returns:
        Parsed configuration

    Raises:
        ConfigError: If the file cannot be read or parsed
    """
    path = Path(path)
    try:
        with open(path, 'r', encoding='utf-8') as fp:
            values = yaml.safe_load(fp)
    except (OSError, UnicodeDecodeError) as e:
        raise ConfigError(f"Cannot read config file {path}: {e}") from e
    except yaml.YAMLError as e:
        raise ConfigError(f"Invalid YAML in {path}: {e}") from e

    logger.info(f"Loaded config from {path}")
    return config_from_dict(values)
