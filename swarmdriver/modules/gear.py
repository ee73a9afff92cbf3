"""Gear selection module with stuck detection."""

from __future__ import annotations

import numpy as np

from swarmdriver.driver.state import TRACK_FRONT, CarState
from swarmdriver.modules.base import check_length

N_GEARS = 6

# Shift thresholds per forward gear (index 0 is first gear)
GEAR_UP = (8000.0, 8000.0, 8000.0, 8000.0, 8000.0, 0.0)
GEAR_DOWN = (0.0, 2500.0, 3000.0, 3000.0, 3500.0, 3500.0)

UP_BOUNDS = (3000.0, 8000.0)
DOWN_BOUNDS = (1000.0, 4000.0)

STUCK_ANGLE = np.pi / 6.0
STUCK_STEPS = 25


class GearModule:
    """
    Shift up above the up-shift rpm, down below the down-shift rpm, and
    select reverse when the car has pointed the wrong way for too long.

    By default the thresholds are fixed: `set_parameters` validates the
    length of its input and leaves the constants untouched, so the 12 gear
    entries of the aggregate vector have no effect. Pass `tunable=True` to
    let the swarm actually drive the thresholds.
    """

    name = "gear"

    def __init__(self, tunable: bool = False):
        self.tunable = bool(tunable)
        self.gear_up = np.array(GEAR_UP, dtype=float)
        self.gear_down = np.array(GEAR_DOWN, dtype=float)
        self.stuck = 0
        self.getting_unstuck = False

    def check_if_stuck(self, cs: CarState) -> bool:
        if abs(cs.angle) > STUCK_ANGLE:
            self.stuck += 1
        else:
            self.stuck = 0
        if self.stuck >= STUCK_STEPS:
            self.getting_unstuck = True

        if self.getting_unstuck:
            front = cs.track[TRACK_FRONT]
            # Pointing back towards the track axis, or free road ahead
            if (cs.angle * cs.track_pos > 0) or (front > 10.0 and abs(cs.angle) < 2.0):
                self.getting_unstuck = False
        return self.getting_unstuck

    def control(self, cs: CarState) -> int:
        if self.check_if_stuck(cs):
            return -1
        if cs.gear < 1:
            return 1

        idx = min(cs.gear, N_GEARS) - 1
        if cs.rpm > self.gear_up[idx] and cs.gear < N_GEARS:
            return cs.gear + 1
        if cs.rpm < self.gear_down[idx] and cs.gear > 1:
            return cs.gear - 1
        return cs.gear

    def parameter_count(self) -> int:
        return 2 * N_GEARS

    def lower_bounds(self) -> np.ndarray:
        return np.concatenate([np.full(N_GEARS, UP_BOUNDS[0]), np.full(N_GEARS, DOWN_BOUNDS[0])])

    def upper_bounds(self) -> np.ndarray:
        return np.concatenate([np.full(N_GEARS, UP_BOUNDS[1]), np.full(N_GEARS, DOWN_BOUNDS[1])])

    def get_parameters(self) -> np.ndarray:
        return np.concatenate([self.gear_up, self.gear_down])

    def set_parameters(self, parameters) -> None:
        vec = check_length(parameters, self.parameter_count(), self.name)
        if not self.tunable:
            return
        self.gear_up = vec[:N_GEARS].copy()
        self.gear_down = vec[N_GEARS:].copy()
