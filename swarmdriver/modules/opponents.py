"""Opponents module: adjusts steering and pedals from the opponent sensors."""

from __future__ import annotations

from typing import Tuple

import numpy as np

from swarmdriver.driver.state import OPPONENTS_FRONT, CarState
from swarmdriver.modules.base import check_length

# Braking tolerance per sensor angle:  ±40°  ±30°  ±20°  ±10°   0°
TOL_BRAKE = (6.0, 6.5, 7.0, 7.5, 8.0)
# Overtaking tolerances / increments:  >50°  ±50°  ±40°  ±30°  ±20°  <20°
TOL_OVERTAKE = (10.0, 12.0, 14.0, 16.0, 18.0, 20.0)
INC_OVERTAKE = (0.10, 0.12, 0.14, 0.16, 0.18, 0.20)

BRAKE_SPEED = 70.0
BRAKE_STEP = 0.5
TOL_UB = 20.0
INC_UB = 0.30


def _brake_index(i: int) -> int:
    return 4 - abs(i)


def _overtake_index(i: int) -> int:
    if abs(i) > 5:
        return 0
    return min(5, 6 - abs(i))


class OpponentsModule:
    """Brake when an opponent is too close ahead and steer away from nearby cars."""

    name = "opponents"

    def __init__(self):
        self.tol_brake = np.array(TOL_BRAKE, dtype=float)
        self.tol_overtake = np.array(TOL_OVERTAKE, dtype=float)
        self.inc_overtake = np.array(INC_OVERTAKE, dtype=float)

    def violated_security_distance(self, cs: CarState) -> bool:
        for i in range(-4, 5):
            if cs.opponents[OPPONENTS_FRONT + i] < self.tol_brake[_brake_index(i)]:
                return True
        return False

    def control(self, cs: CarState, steer: float, accelbrake: float) -> Tuple[float, float]:
        """Return the adjusted (steer, accelbrake) pair."""
        if cs.speed() > BRAKE_SPEED and self.violated_security_distance(cs):
            accelbrake = max(0.0, accelbrake - BRAKE_STEP)

        for i in range(-10, 11):
            sign = -1.0 if i < 0 else 1.0
            k = _overtake_index(i)
            if cs.opponents[OPPONENTS_FRONT + i] < self.tol_overtake[k]:
                steer += -sign * self.inc_overtake[k]
        return float(steer), float(accelbrake)

    def parameter_count(self) -> int:
        return 17

    def lower_bounds(self) -> np.ndarray:
        return np.zeros(17)

    def upper_bounds(self) -> np.ndarray:
        return np.concatenate([np.full(11, TOL_UB), np.full(6, INC_UB)])

    def get_parameters(self) -> np.ndarray:
        return np.concatenate([self.tol_brake, self.tol_overtake, self.inc_overtake])

    def set_parameters(self, parameters) -> None:
        vec = check_length(parameters, 17, self.name)
        self.tol_brake = vec[0:5].copy()
        self.tol_overtake = vec[5:11].copy()
        self.inc_overtake = vec[11:17].copy()
