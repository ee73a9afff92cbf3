"""Steering module: weighted average of the nine central rangefinders."""

from __future__ import annotations

import numpy as np

from swarmdriver.driver.state import TRACK_FRONT, CarState
from swarmdriver.modules.base import check_length

STEER_LOCK = 0.785398
N_WEIGHTS = 9
STRAIGHT_DISTANCE = 100.0
STRAIGHT_DAMPING = 0.2


class SteeringControlModule:
    """
    Steer towards the free space seen by the track sensors.

    On track, the steer value is `f0 * sum(w_i * d_i) / sum(d_i)` over the
    nine sensors around the front one, damped on straights. Off track or in
    reverse, steer back towards the track axis.
    """

    name = "steering"

    def __init__(self, weights=None):
        if weights is None:
            weights = (self.lower_bounds() + self.upper_bounds()) / 2.0
        self.weights = check_length(weights, N_WEIGHTS, self.name).copy()

    @staticmethod
    def is_on_track(cs: CarState) -> bool:
        return abs(cs.track_pos) <= 1.0

    def control(self, cs: CarState) -> float:
        if cs.gear == -1:
            return float(-cs.angle / STEER_LOCK)
        if not self.is_on_track(cs):
            return float((cs.angle - cs.track_pos * 0.5) / STEER_LOCK)

        half = N_WEIGHTS // 2
        sensors = cs.track[TRACK_FRONT - half:TRACK_FRONT + half + 1]
        norm = float(np.sum(sensors))
        if norm <= 0.0:
            return 0.0
        f0 = STRAIGHT_DAMPING if cs.track[TRACK_FRONT] >= STRAIGHT_DISTANCE else 1.0
        return float(f0 * np.dot(sensors, self.weights) / norm)

    def parameter_count(self) -> int:
        return N_WEIGHTS

    def lower_bounds(self) -> np.ndarray:
        return np.arange(-4, 5) * 0.5 - 0.5

    def upper_bounds(self) -> np.ndarray:
        return np.arange(-4, 5) * 0.5 + 0.5

    def get_parameters(self) -> np.ndarray:
        return self.weights.copy()

    def set_parameters(self, parameters) -> None:
        self.weights = check_length(parameters, N_WEIGHTS, self.name).copy()
