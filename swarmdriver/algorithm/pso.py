"""Particle Swarm Optimization with one-sample-at-a-time evaluation.

The fitness of a position is the outcome of a whole race, produced by a
slow external process, so the swarm cannot call an objective function in a
loop. Instead the caller asks for the next particle, installs its position,
runs an episode, and reports the result:

    particle = swarm.next()
    ...  # run an episode with particle.position
    particle.set_evaluation(fitness)
    swarm.update()

Particles are dispatched round-robin. When the cursor wraps after at least
one evaluation, the whole population moves at once (a generation), and the
inertia weight decays.

The main entry point is the SwarmOptimizer class.
"""

from __future__ import annotations

import logging
from typing import List, Optional

import numpy as np

from swarmdriver.algorithm import steps
from swarmdriver.algorithm.components.particle import Particle, Solution, make_population
from swarmdriver.algorithm.components.topology import build_topology
from swarmdriver.config import SwarmParams
from swarmdriver.utils import make_rng

logger = logging.getLogger(__name__)


class SwarmOptimizer:
    """Particle swarm driven by externally supplied evaluations."""

    def __init__(self,
                 n_dim: int,
                 params: Optional[SwarmParams] = None,
                 rng: Optional[np.random.Generator] = None,
                 **overrides):
        params = (params or SwarmParams()).with_overrides(**overrides)
        if n_dim <= 0:
            raise ValueError("n_dim must be positive.")

        self.params = params
        self.n_dim = int(n_dim)
        self.n_particles = params.n_particles
        self.task = params.task.lower()
        self.phi_1 = float(params.phi_1)
        self.phi_2 = float(params.phi_2)
        self.inertia = float(params.inertia)
        self.decay = float(params.decay)
        self.max_iterations = params.max_iterations
        self.max_evaluations = params.max_evaluations
        self.max_n_eval_without_improvement = params.max_stagnation
        self.rng = rng if rng is not None else make_rng(params.seed)

        # Counters
        self.n_iterations = 0
        self.n_evaluations = 0
        self.n_eval_without_improvement = 0
        self.history: List[Optional[float]] = []

        # Identifier of the next particle to be evaluated. Each time it
        # comes back to 0, every particle has been dispatched once.
        self.next_particle_id = 0

        self._terminated = False
        self.termination_reason: Optional[str] = None

        # Population and neighbourhoods (fixed for the swarm's lifetime)
        self.swarm: List[Particle] = make_population(
            self.n_particles, self.n_dim, self.phi_1, self.phi_2, self.inertia, self.task, self.rng
        )
        self.topology = build_topology(params.topology, self.n_particles)
        for particle in self.swarm:
            particle.attach(self.swarm, self.topology.of(particle.index))

        # Nothing evaluated yet
        self.global_best = Solution(np.zeros(self.n_dim, dtype=float))

    # ---------------------------
    # Protocol
    # ---------------------------
    def initialize(self, lower, upper) -> None:
        """Place every particle uniformly inside [lower, upper]."""
        steps.initialize_phase(self, lower, upper)
        logger.debug("Initialized %d particles (%s topology, %d dims)",
                     self.n_particles, self.topology.name, self.n_dim)

    def next(self) -> Particle:
        """Return the particle to evaluate next, moving the swarm on wrap-around."""
        if self.next_particle_id == 0 and self.n_evaluations > 0:
            steps.move_phase(self)

        particle = self.swarm[self.next_particle_id]
        self.next_particle_id = (self.next_particle_id + 1) % self.n_particles
        return particle

    def update(self) -> bool:
        """Fold newly reported evaluations into the global best."""
        return steps.update_phase(self)

    def termination_condition(self) -> bool:
        """
        True once iterations or evaluations exceed their budget, or the global
        best has not improved for `max_stagnation` updates. Stays true after.

        The flag is latched by the update and move phases, so a threshold
        crossed between two queries is not lost.
        """
        return self._terminated

    # ---------------------------
    # Getters
    # ---------------------------
    @property
    def has_best(self) -> bool:
        return not self.global_best.pending

    @property
    def best_position(self) -> np.ndarray:
        if self.global_best.pending:
            raise RuntimeError("No particle has been evaluated yet; best position is undefined.")
        return self.global_best.position.copy()

    @property
    def best_fitness(self) -> float:
        if self.global_best.pending:
            raise RuntimeError("No particle has been evaluated yet; best fitness is undefined.")
        return float(self.global_best.fitness)

    # ---------------------------
    # Setters (broadcast to every particle)
    # ---------------------------
    def set_phi_1(self, phi_1: float) -> None:
        self.phi_1 = float(phi_1)
        for particle in self.swarm:
            particle.phi_1 = self.phi_1

    def set_phi_2(self, phi_2: float) -> None:
        self.phi_2 = float(phi_2)
        for particle in self.swarm:
            particle.phi_2 = self.phi_2

    def set_inertia(self, inertia: float) -> None:
        self.inertia = float(inertia)
        for particle in self.swarm:
            particle.inertia = self.inertia

    def __repr__(self) -> str:
        best = self.global_best.fitness
        return (f"SwarmOptimizer(n_particles={self.n_particles}, n_dim={self.n_dim}, "
                f"topology={self.topology.name}, iterations={self.n_iterations}, "
                f"evaluations={self.n_evaluations}, best={best})")
