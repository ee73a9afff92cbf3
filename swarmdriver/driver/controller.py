"""Bridge between the swarm optimizer and the control modules.

The controller owns an ordered list of Tunable modules and presents them as
one flat parameter vector. In training mode, every completed episode yields
one fitness value: it is assigned to the particle whose position is
currently installed, the swarm is updated, the next particle's position is
installed, and the best vector found so far is saved. In deployment mode the
vector is loaded once from the parameter file and never changes.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import List, Optional, Sequence

import numpy as np

from swarmdriver.algorithm.constants import DEFAULT, HISTORY_LOG_EVERY
from swarmdriver.algorithm.pso import SwarmOptimizer
from swarmdriver.config import SwarmParams
from swarmdriver.data.parameters import load_parameters, save_parameters
from swarmdriver.driver.state import CarControl, CarState
from swarmdriver.logging.run_logger import RunLogger
from swarmdriver.modules.accelbrake import AccelBrakeModule
from swarmdriver.modules.base import (
    Tunable,
    apply_parameters,
    concat_lower_bounds,
    concat_parameters,
    concat_upper_bounds,
    parameter_slices,
    total_parameter_count,
)
from swarmdriver.modules.gear import GearModule
from swarmdriver.modules.opponents import OpponentsModule
from swarmdriver.modules.speed import TargetSpeedModule
from swarmdriver.modules.steering import SteeringControlModule

logger = logging.getLogger(__name__)


def default_modules(rng: Optional[np.random.Generator] = None, tunable_gear: bool = False) -> List[Tunable]:
    """The driving modules, in their fixed concatenation order."""
    return [
        AccelBrakeModule(),
        GearModule(tunable=tunable_gear),
        OpponentsModule(),
        SteeringControlModule(),
        TargetSpeedModule(rng=rng),
    ]


class Controller:
    """Aggregates Tunable modules and drives the swarm from episode fitness."""

    def __init__(self,
                 modules: Optional[Sequence[Tunable]] = None,
                 params: Optional[SwarmParams] = None,
                 model_path=None,
                 training: bool = True,
                 rng: Optional[np.random.Generator] = None,
                 run_logger: Optional[RunLogger] = None):
        params = params or SwarmParams(**DEFAULT)
        self.rng = rng if rng is not None else np.random.default_rng(params.seed)
        self.modules: List[Tunable] = list(modules) if modules is not None else default_modules(self.rng)
        for m in self.modules:
            if not isinstance(m, Tunable):
                raise TypeError(f"{type(m).__name__} does not implement the Tunable interface.")

        self.n_parameters = total_parameter_count(self.modules)
        if self.n_parameters == 0:
            raise ValueError("Controller needs at least one parameter to optimize.")

        self.model_path: Optional[Path] = Path(model_path) if model_path else None
        self.is_training = bool(training)
        self.run_logger = run_logger
        self.objective: List[float] = []

        self.pso = SwarmOptimizer(self.n_parameters, params, rng=self.rng)
        self.current_particle = None
        self.initialize()

    # ---------------------------
    # Setup
    # ---------------------------
    def initialize(self) -> None:
        """Spread the swarm over the module bounds and install the first parameters."""
        self.objective = []
        self.pso.initialize(self.lower_bounds(), self.upper_bounds())
        self.current_particle = self.pso.next()

        if self.is_training:
            self.set_parameters(self.current_particle.position)
        else:
            self.load_model()

    def train(self, is_training: bool) -> None:
        """Switch mode; leaving training loads the persisted vector."""
        self.is_training = bool(is_training)
        if not self.is_training:
            self.load_model()

    def set_model_location(self, model_path) -> None:
        self.model_path = Path(model_path)

    # ---------------------------
    # Persistence
    # ---------------------------
    def save_model(self) -> Optional[Path]:
        """Persist the best vector found so far (no-op without a path)."""
        if self.model_path is None:
            return None
        return save_parameters(self.model_path, self.pso.best_position)

    def load_model(self) -> np.ndarray:
        if self.model_path is None:
            raise ValueError("No model path set; cannot load controller parameters.")
        parameters = load_parameters(self.model_path, expected_length=self.n_parameters)
        self.set_parameters(parameters)
        logger.info("Loaded %d parameters from %s", self.n_parameters, self.model_path)
        return parameters

    # ---------------------------
    # Optimization
    # ---------------------------
    def finished_learning(self) -> bool:
        if not self.is_training:
            return False
        return self.pso.termination_condition()

    def update(self, objective: float) -> None:
        """Feed the fitness of the episode that just ended back to the swarm."""
        objective = float(objective)
        if np.isnan(objective):
            raise ValueError("Fitness must not be NaN.")
        self.objective.append(objective)

        if len(self.objective) % HISTORY_LOG_EVERY == 0:
            logger.info("Fitness history (%d): %s", len(self.objective),
                        ", ".join(f"{v:.2f}" for v in self.objective[-HISTORY_LOG_EVERY:]))

        if not self.is_training:
            return

        particle = self.current_particle
        particle.set_evaluation(objective)
        improved = self.pso.update()

        if self.run_logger is not None:
            self.run_logger.log_evaluation(
                evaluation=self.pso.n_evaluations,
                iteration=self.pso.n_iterations,
                particle=particle.index,
                fitness=objective,
                pbest=particle.pbest_fitness,
                best=self.pso.best_fitness,
                improved=int(improved),
                inertia=self.pso.inertia,
            )

        self.current_particle = self.pso.next()
        self.set_parameters(self.current_particle.position)
        self.save_model()

    # ---------------------------
    # Driving
    # ---------------------------
    def _module(self, cls):
        for m in self.modules:
            if isinstance(m, cls):
                return m
        raise LookupError(f"Controller has no {cls.__name__}.")

    def control(self, cs: CarState) -> CarControl:
        """Combine the module outputs into car commands."""
        gear = self._module(GearModule).control(cs)
        target_speed = self._module(TargetSpeedModule).control(cs)
        accelbrake = self._module(AccelBrakeModule).control(cs, target_speed)
        steer = self._module(SteeringControlModule).control(cs)

        # Adjust for nearby opponents
        steer, accelbrake = self._module(OpponentsModule).control(cs, steer, accelbrake)

        # One value drives both pedals so they are never pressed together
        cc = CarControl(gear=gear, steer=steer, clutch=0.0)
        if accelbrake > 0.5:
            cc.accel = (accelbrake - 0.5) * 2.0
            cc.brake = 0.0
        else:
            cc.accel = 0.0
            cc.brake = 1.0 - accelbrake * 2.0
        return cc

    # ---------------------------
    # Tunable interface (aggregate)
    # ---------------------------
    def parameter_count(self) -> int:
        return self.n_parameters

    def lower_bounds(self) -> np.ndarray:
        return concat_lower_bounds(self.modules)

    def upper_bounds(self) -> np.ndarray:
        return concat_upper_bounds(self.modules)

    def get_parameters(self) -> np.ndarray:
        return concat_parameters(self.modules)

    def set_parameters(self, parameters) -> None:
        apply_parameters(self.modules, parameters)

    def parameter_slices(self):
        return parameter_slices(self.modules)
