"""Acceleration/brake module: a single value in [0, 1] driving both pedals."""

from __future__ import annotations

import numpy as np

from swarmdriver.driver.state import CarState
from swarmdriver.modules.base import check_length

THRESHOLD_LB = 1.0
THRESHOLD_UB = 2.0


class AccelBrakeModule:
    """
    Map the gap between current and target speed to a pedal value.

    0 is full brake, 1 full throttle, 0.5 no action. The only parameter is
    the ABS threshold: wheel slip beyond it reduces the output.
    """

    name = "accelbrake"

    def __init__(self, threshold: float = 1.5):
        self.threshold = float(threshold)

    def control(self, cs: CarState, target_speed: float) -> float:
        if cs.gear == -1:
            return 1.0
        speed = cs.speed()
        # Close to 2 when far below the target, close to 0 when far above
        accelbrake = 2.0 / (1.0 + np.exp(np.clip(speed - target_speed, -500.0, 500.0)))

        slip = speed - cs.wheels_speed()
        if slip > self.threshold:
            accelbrake -= (slip - self.threshold) / 5.0
        return float(accelbrake / 2.0)

    def parameter_count(self) -> int:
        return 1

    def lower_bounds(self) -> np.ndarray:
        return np.array([THRESHOLD_LB])

    def upper_bounds(self) -> np.ndarray:
        return np.array([THRESHOLD_UB])

    def get_parameters(self) -> np.ndarray:
        return np.array([self.threshold])

    def set_parameters(self, parameters) -> None:
        self.threshold = float(check_length(parameters, 1, self.name)[0])
