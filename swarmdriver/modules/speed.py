"""Target speed module: a small network reading the forward rangefinders."""

from __future__ import annotations

from typing import Optional

import numpy as np

from swarmdriver.driver.state import TRACK_FRONT, CarState
from swarmdriver.modules.base import check_length
from swarmdriver.modules.network import FeedForwardNetwork

N_SENSORS = 7
SENSOR_RANGE = 200.0
# Free road ahead: drive flat out
STRAIGHT_DISTANCE = 100.0
STRAIGHT_SPEED = 300.0

# Uniform bound with the same std as a Gaussian of variance (1/14)^2,
# i.e. sigma^2 = (b - a)^2 / 12 with b = -a
WEIGHT_BOUND = float(np.sqrt(6.0 / (14.0 * 14.0)))

MIN_SPEED_BOUNDS = (0.0, 70.0)
MAX_SPEED_BOUNDS = (100.0, 350.0)


class TargetSpeedModule:
    """Desired speed from the 7 central track sensors (7-7-7-1 network)."""

    name = "target_speed"

    def __init__(self, min_speed: float = 35.0, max_speed: float = 225.0,
                 rng: Optional[np.random.Generator] = None):
        self.mlp = FeedForwardNetwork(N_SENSORS, use_bias=True, weight_bound=WEIGHT_BOUND)
        self.mlp.add_fully_connected_layer(N_SENSORS, N_SENSORS).add_activation("tanh")
        self.mlp.add_fully_connected_layer(N_SENSORS, N_SENSORS).add_activation("tanh")
        # Output squashed into [0, 1]
        self.mlp.add_fully_connected_layer(N_SENSORS, 1).add_activation("clipping")
        self.mlp.init_weights(rng)
        self.min_speed = float(min_speed)
        self.max_speed = float(max_speed)

    def control(self, cs: CarState) -> float:
        half = N_SENSORS // 2
        sensors = cs.track[TRACK_FRONT - half:TRACK_FRONT + half + 1] / SENSOR_RANGE
        output = float(self.mlp.forward(sensors)[0])
        if cs.track[TRACK_FRONT] >= STRAIGHT_DISTANCE:
            return STRAIGHT_SPEED
        return output * (self.max_speed - self.min_speed) + self.min_speed

    def parameter_count(self) -> int:
        return self.mlp.parameter_count() + 2

    def lower_bounds(self) -> np.ndarray:
        return np.concatenate([self.mlp.lower_bounds(), [MIN_SPEED_BOUNDS[0], MAX_SPEED_BOUNDS[0]]])

    def upper_bounds(self) -> np.ndarray:
        return np.concatenate([self.mlp.upper_bounds(), [MIN_SPEED_BOUNDS[1], MAX_SPEED_BOUNDS[1]]])

    def get_parameters(self) -> np.ndarray:
        return np.concatenate([self.mlp.get_weights(), [self.min_speed, self.max_speed]])

    def set_parameters(self, parameters) -> None:
        vec = check_length(parameters, self.parameter_count(), self.name)
        n = self.mlp.parameter_count()
        self.mlp.set_weights(vec[:n])
        self.min_speed = float(vec[n])
        self.max_speed = float(vec[n + 1])
