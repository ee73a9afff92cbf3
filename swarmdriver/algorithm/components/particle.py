"""Particle component for the asynchronous swarm.

A particle carries a position, a velocity, its personal best and the best
personal best found among its neighbours. Fitness is supplied from outside
via `set_evaluation` (e.g. at the end of a race), so a position may stay
pending for a long time; `None` is the pending marker and never wins a
comparison.

Neighbours are indices into the population list shared by the swarm.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import List, Optional, Sequence

import numpy as np

from swarmdriver.algorithm.constants import MAXIMIZE, MINIMIZE
from swarmdriver.utils import make_rng, rand_symmetric, rand_uniform


def is_better(candidate: Optional[float], incumbent: Optional[float], task: str = MAXIMIZE) -> bool:
    """Strict comparison under the task; a pending candidate never wins."""
    if candidate is None:
        return False
    if incumbent is None:
        return True
    if task == MINIMIZE:
        return candidate < incumbent
    return candidate > incumbent


@dataclass
class Solution:
    position: np.ndarray
    fitness: Optional[float] = None

    @property
    def pending(self) -> bool:
        return self.fitness is None

    def copy(self) -> "Solution":
        return Solution(self.position.copy(), self.fitness)


class Particle:
    """One candidate solution of the swarm."""

    def __init__(self,
                 n_dim: int,
                 phi_1: float = 1.0,
                 phi_2: float = 1.0,
                 inertia: float = 1.0,
                 task: str = MAXIMIZE,
                 index: int = 0,
                 rng: Optional[np.random.Generator] = None):
        if n_dim < 0:
            raise ValueError("n_dim must be >= 0.")
        self.n_dim = int(n_dim)
        self.phi_1 = float(phi_1)
        self.phi_2 = float(phi_2)
        self.inertia = float(inertia)
        self.task = task
        self.index = int(index)
        self.rng = rng if rng is not None else make_rng()

        self.lower: Optional[np.ndarray] = None
        self.upper: Optional[np.ndarray] = None
        self.velocity = np.zeros(self.n_dim, dtype=float)
        self.current = Solution(np.zeros(self.n_dim, dtype=float))
        self.pbest = Solution(np.zeros(self.n_dim, dtype=float))
        self.nbest = Solution(np.zeros(self.n_dim, dtype=float))

        # Filled in by the swarm when the topology is built
        self.neighbours: tuple = ()
        self.population: Sequence["Particle"] = ()

    # ---------------------------
    # Lifecycle
    # ---------------------------
    @property
    def initialized(self) -> bool:
        return self.lower is not None

    @property
    def state(self) -> str:
        if not self.initialized:
            return "uninitialized"
        return "ready" if self.current.pending else "evaluated"

    def _require_initialized(self, action: str) -> None:
        if not self.initialized:
            raise RuntimeError(f"Particle {self.index} must be initialized before {action}.")

    def attach(self, population: Sequence["Particle"], neighbours) -> None:
        """Register the shared population and this particle's neighbour indices."""
        neighbours = tuple(int(j) for j in neighbours)
        if self.index in neighbours:
            raise ValueError(f"Particle {self.index} cannot be its own neighbour.")
        self.population = population
        self.neighbours = neighbours

    def initialize(self, lower, upper, rng: Optional[np.random.Generator] = None) -> None:
        """Sample position uniformly in [lower, upper] and velocity on the same scale."""
        rng = rng if rng is not None else self.rng
        lower = np.asarray(lower, dtype=float).ravel()
        upper = np.asarray(upper, dtype=float).ravel()
        if lower.size != self.n_dim or upper.size != self.n_dim:
            raise ValueError(f"Bounds must have {self.n_dim} values, got {lower.size} and {upper.size}.")
        if np.any(lower > upper):
            raise ValueError("lower bounds must not exceed upper bounds.")

        span = upper - lower
        self.lower = lower.copy()
        self.upper = upper.copy()
        # Clip guards against rounding past the upper bound
        self.current = Solution(np.clip(lower + rand_uniform(rng, self.n_dim) * span, lower, upper))
        self.velocity = rand_symmetric(rng, self.n_dim) * span

    # ---------------------------
    # Evaluation
    # ---------------------------
    def set_evaluation(self, fitness: float) -> None:
        """
        Record the fitness of the current position.

        Updates the personal best on strict improvement, then refreshes the
        neighbourhood best of this particle and of every neighbour, whose
        view may have changed too.
        """
        self._require_initialized("evaluation")
        fitness = float(fitness)
        if np.isnan(fitness):
            raise ValueError("fitness must not be NaN.")

        self.current.fitness = fitness
        if is_better(fitness, self.pbest.fitness, self.task):
            self.pbest = self.current.copy()

        self.check_neighbourhood()
        for j in self.neighbours:
            self.population[j].check_neighbourhood()

    def check_neighbourhood(self) -> None:
        """Pick the best personal best among the neighbours (first index wins ties)."""
        best: Optional[Solution] = None
        for j in self.neighbours:
            candidate = self.population[j].pbest
            if is_better(candidate.fitness, None if best is None else best.fitness, self.task):
                best = candidate
        if best is None:
            # No evaluated neighbour: fall back on our own experience
            best = self.pbest
        self.nbest = best.copy()

    # ---------------------------
    # Motion
    # ---------------------------
    def move(self, rng: Optional[np.random.Generator] = None) -> None:
        """v' = w*v + phi_1*U1*(pbest - x) + phi_2*U2*(nbest - x); x' = clip(x + v')."""
        self._require_initialized("moving")
        rng = rng if rng is not None else self.rng
        x = self.current.position

        # A pending attractor exerts no pull
        pb = x if self.pbest.pending else self.pbest.position
        nb = x if self.nbest.pending else self.nbest.position

        u1 = rand_uniform(rng, self.n_dim)
        u2 = rand_uniform(rng, self.n_dim)
        self.velocity = (self.inertia * self.velocity
                         + self.phi_1 * u1 * (pb - x)
                         + self.phi_2 * u2 * (nb - x))

        self.current = Solution(np.clip(x + self.velocity, self.lower, self.upper))

    # ---------------------------
    # Getters
    # ---------------------------
    @property
    def position(self) -> np.ndarray:
        return self.current.position

    @property
    def fitness(self) -> Optional[float]:
        return self.current.fitness

    @property
    def pbest_fitness(self) -> Optional[float]:
        return self.pbest.fitness

    def __repr__(self) -> str:
        return (f"Particle(index={self.index}, state={self.state}, "
                f"fitness={self.current.fitness}, pbest={self.pbest.fitness})")


def make_population(n_particles: int, n_dim: int, phi_1: float, phi_2: float, inertia: float,
                    task: str, rng: np.random.Generator) -> List[Particle]:
    return [Particle(n_dim, phi_1, phi_2, inertia, task=task, index=i, rng=rng)
            for i in range(n_particles)]
