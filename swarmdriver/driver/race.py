"""Episode boundary between the simulator client and the controller.

The client calls `drive` once per simulation step. During training the
driver asks the simulator to restart the race when an episode is over;
`restart` then turns the episode into a fitness value and hands it to the
controller.
"""

from __future__ import annotations

import logging
from typing import Optional

import numpy as np

from swarmdriver.algorithm.constants import DAMAGE_PENALTY, MIN_FITNESS_MAGNITUDE
from swarmdriver.driver.controller import Controller
from swarmdriver.driver.state import TRACK_SENSORS_NUM, CarControl, CarState

logger = logging.getLogger(__name__)

# Episode limits
MAX_LAP_TIME = 300.0
MAX_DAMAGE = 1000.0
MIN_FUEL = 0.05
# Steps allowed before a negative distance raced ends the episode
WARMUP_STEPS = 100


def rangefinder_angles() -> np.ndarray:
    """Track sensor angles in degrees, -90 to 90 in steps of 10."""
    return np.linspace(-90.0, 90.0, TRACK_SENSORS_NUM)


class RaceDriver:
    """Runs episodes against the simulator and reports their fitness."""

    def __init__(self,
                 controller: Controller,
                 damage_penalty: float = DAMAGE_PENALTY,
                 min_fitness_magnitude: float = MIN_FITNESS_MAGNITUDE):
        self.controller = controller
        self.damage_penalty = float(damage_penalty)
        self.min_fitness_magnitude = float(min_fitness_magnitude)

        self.state: Optional[CarState] = None
        self.n_steps = 0
        self.restart_requested = False
        self.episodes = 0
        self.suppressed = 0

    @property
    def is_training(self) -> bool:
        return self.controller.is_training

    def episode_over(self, cs: CarState) -> bool:
        return (cs.cur_lap_time > MAX_LAP_TIME
                or cs.damage > MAX_DAMAGE
                or cs.fuel < MIN_FUEL
                or (self.n_steps > WARMUP_STEPS and cs.dist_raced < 0.0))

    def drive(self, cs: CarState) -> CarControl:
        """Compute the commands for one step."""
        self.state = cs
        cc = self.controller.control(cs)

        # Steps after a restart request belong to no episode
        if not self.restart_requested:
            self.n_steps += 1
            if self.is_training and self.episode_over(cs):
                self.restart_requested = True
        if self.restart_requested:
            cc.meta = CarControl.META_RESTART
        return cc

    def objective(self) -> float:
        """Distance raced minus the damage penalty; clears the stored distance."""
        if self.state is None:
            return 0.0
        value = self.state.dist_raced - self.damage_penalty * self.state.damage
        self.state.dist_raced = 0.0
        return float(value)

    def restart(self) -> Optional[float]:
        """
        Close the current episode.

        The objective reaches the controller only when its magnitude exceeds
        `min_fitness_magnitude`; smaller values come from restarts issued
        before the car really moved. Returns the forwarded objective, or None.
        """
        self.restart_requested = False
        self.n_steps = 0
        value = self.objective()
        if abs(value) <= self.min_fitness_magnitude:
            self.suppressed += 1
            logger.debug("Ignoring episode objective %.3f (|value| <= %.1f)",
                         value, self.min_fitness_magnitude)
            return None

        self.episodes += 1
        self.controller.update(value)
        return value

    def shutdown(self) -> None:
        logger.info("Driver shutdown after %d episodes (%d suppressed)", self.episodes, self.suppressed)

    def ready_to_shutdown(self) -> bool:
        return self.controller.finished_learning()
