# kalman_filter.py

"""
Centroid-based Kalman filter baseline estimator.

Tracks the centroid of each frame's point cloud with a constant-velocity
model. It is very fast but not very accurate, which makes it a useful
reference point when evaluating more precise estimators.
"""
import numpy as np
from typing import Any, Optional, Tuple

from .config import KalmanConfig
from .tracker import VelocityEstimator


class CentroidKalmanFilter:
    """
    Kalman filter for tracking an object centroid in 3D with variable time steps.

    State vector: [x, y, z, vx, vy, vz] (position and velocity)
    Measurement vector: [x, y, z] (position only)
    """

    def __init__(self,
                 base_dt: float = 0.1,
                 process_noise: float = 10.0,
                 initial_covariance: float = 50.0):
        """
        Initialize Kalman filter.

        Args:
            base_dt: Base time step for process noise tuning (seconds)
            process_noise: Process noise magnitude (expected acceleration)
            initial_covariance: Initial state variance
        """
        self.base_dt = base_dt
        self.dim_x = 6  # State dimension: [x, y, z, vx, vy, vz]
        self.dim_z = 3  # Measurement dimension: [x, y, z]

        # Measurement matrix (observe position only)
        self.H = np.hstack([np.eye(3), np.zeros((3, 3))])

        self.q = process_noise

        # Initial state covariance matrix
        self.P_init = np.eye(self.dim_x) * initial_covariance

    def _get_F_matrix(self, dt: float) -> np.ndarray:
        """Get state transition matrix for given time step."""
        F = np.eye(self.dim_x)
        F[0:3, 3:6] = np.eye(3) * dt
        return F

    def _get_Q_matrix(self, dt: float) -> np.ndarray:
        """Get process noise matrix for given time step."""
        # Larger time steps = more uncertainty
        q_scaled = self.q * (dt / self.base_dt)

        block = np.array([
            [dt ** 4 / 4, dt ** 3 / 2],
            [dt ** 3 / 2, dt ** 2]
        ])
        return q_scaled * np.kron(block, np.eye(3))

    def initiate(self, measurement: np.ndarray) -> Tuple[np.ndarray, np.ndarray]:
        """
        Initialize state from the first measurement, with zero velocity.

        Args:
            measurement: Initial centroid (x, y, z)

        Returns:
            Tuple of (initial_state, initial_covariance)
        """
        state = np.concatenate([np.asarray(measurement, dtype=float), np.zeros(3)])
        covariance = self.P_init.copy()

        return state, covariance

    def predict(self, state: np.ndarray, covariance: np.ndarray,
                dt: float) -> Tuple[np.ndarray, np.ndarray]:
        """
        Propagate the state dt seconds ahead under constant velocity.

        Returns:
            Tuple of (predicted_state, predicted_covariance)
        """
        F = self._get_F_matrix(dt)
        return F @ state, F @ covariance @ F.T + self._get_Q_matrix(dt)

    def _innovation(self, state: np.ndarray, covariance: np.ndarray,
                    measurement: np.ndarray, R: np.ndarray) -> Tuple[np.ndarray, np.ndarray]:
        residual = np.asarray(measurement, dtype=float) - self.H @ state
        residual_cov = self.H @ covariance @ self.H.T + R
        return residual, residual_cov

    def update(self,
               state: np.ndarray,
               covariance: np.ndarray,
               measurement: np.ndarray,
               R: np.ndarray) -> Tuple[np.ndarray, np.ndarray]:
        """
        Correct a predicted state with an observed centroid.

        Args:
            state: Predicted state vector
            covariance: Predicted state covariance matrix
            measurement: Observed centroid (x, y, z)
            R: Measurement noise covariance (3x3)

        Returns:
            Tuple of (corrected_state, corrected_covariance)
        """
        residual, residual_cov = self._innovation(state, covariance, measurement, R)

        # Gain via a linear solve; residual_cov is symmetric.
        gain = np.linalg.solve(residual_cov, self.H @ covariance).T

        corrected_state = state + gain @ residual
        corrected_covariance = (np.eye(self.dim_x) - gain @ self.H) @ covariance

        return corrected_state, corrected_covariance

    def gating_distance(self,
                        state: np.ndarray,
                        covariance: np.ndarray,
                        measurement: np.ndarray,
                        R: np.ndarray) -> float:
        """Squared Mahalanobis distance of an observed centroid from the prediction."""
        residual, residual_cov = self._innovation(state, covariance, measurement, R)
        return float(residual @ np.linalg.solve(residual_cov, residual))


class KalmanVelocityEstimator(VelocityEstimator):
    """
    VelocityEstimator that filters point cloud centroids.

    Measurement noise follows the sensor resolution at the object, so
    distant objects are trusted less. The returned confidence is the
    likelihood-shaped score exp(-d^2 / 2) of the new centroid under the
    predicted state, d being its Mahalanobis distance.
    """

    def __init__(self, config: Optional[KalmanConfig] = None):
        self.config = config or KalmanConfig()
        self.kf = CentroidKalmanFilter(
            base_dt=self.config.base_dt,
            process_noise=self.config.process_noise,
            initial_covariance=self.config.initial_covariance,
        )
        self.state: Optional[np.ndarray] = None
        self.covariance: Optional[np.ndarray] = None
        self.last_timestamp: Optional[float] = None

    def reset(self):
        self.state = None
        self.covariance = None
        self.last_timestamp = None

    def _measurement_noise(self, horizontal_resolution: float, vertical_resolution: float) -> np.ndarray:
        sigma = max(horizontal_resolution, vertical_resolution, self.config.min_measurement_noise)
        return np.eye(3) * sigma ** 2

    def process(self,
                point_cloud: Any,
                timestamp: float,
                horizontal_resolution: float,
                vertical_resolution: float) -> Tuple[np.ndarray, float]:
        points = np.asarray(point_cloud, dtype=float)
        centroid = points[:, :3].mean(axis=0)

        if self.state is None:
            self.state, self.covariance = self.kf.initiate(centroid)
            self.last_timestamp = timestamp
            return self.state[3:6].copy(), 0.0

        R = self._measurement_noise(horizontal_resolution, vertical_resolution)

        dt = timestamp - self.last_timestamp
        if dt > 0:
            self.state, self.covariance = self.kf.predict(self.state, self.covariance, dt)

        distance = self.kf.gating_distance(self.state, self.covariance, centroid, R)
        alignment_probability = float(np.exp(-0.5 * distance))

        self.state, self.covariance = self.kf.update(self.state, self.covariance, centroid, R)
        self.last_timestamp = timestamp

        return self.state[3:6].copy(), alignment_probability
