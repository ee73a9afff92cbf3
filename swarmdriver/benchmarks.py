"""Synthetic landscapes for exercising the asynchronous swarm offline.

Each landscape is registered as a Benchmark: a cost to minimise (global
minimum 0), the search box it is usually flown in, and the cost below
which a run counts as a success. The swarm maximises, so registration
also builds the negated fitness that is reported back to it.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Callable, Dict, Optional, Tuple

import numpy as np

from swarmdriver.modules.base import ParameterBlock

Cost = Callable[[np.ndarray], float]


def as_fitness(cost: Cost) -> Cost:
    """Turn a cost to minimise into a fitness to maximise."""
    def fitness(position) -> float:
        return -cost(position)
    fitness.__name__ = f"neg_{getattr(cost, '__name__', 'cost')}"
    return fitness


@dataclass(frozen=True)
class Benchmark:
    name: str
    cost: Cost
    bounds: Tuple[float, float]
    threshold: Optional[float] = None
    fitness: Cost = field(init=False, repr=False, compare=False)

    def __post_init__(self):
        lo, hi = self.bounds
        if not lo < hi:
            raise ValueError(f"Benchmark '{self.name}' needs lower < upper, got {self.bounds}.")
        object.__setattr__(self, "fitness", as_fitness(self.cost))

    def block(self, dim: int) -> ParameterBlock:
        """A `dim`-dimensional tunable box for this landscape."""
        lo, hi = self.bounds
        return ParameterBlock.uniform(dim, lo, hi, name=self.name)

    def solved(self, cost: float) -> bool:
        return self.threshold is not None and cost <= self.threshold


BENCHMARKS: Dict[str, Benchmark] = {}


def register(name: str, bounds: Tuple[float, float], threshold: Optional[float] = None):
    """Decorator adding a cost function to BENCHMARKS under `name`."""
    def wrap(cost: Cost) -> Cost:
        key = name.lower()
        if key in BENCHMARKS:
            raise ValueError(f"Benchmark '{name}' is already registered.")
        BENCHMARKS[key] = Benchmark(key, cost, (float(bounds[0]), float(bounds[1])), threshold)
        return cost
    return wrap


def get_benchmark(name: str) -> Benchmark:
    key = str(name).lower()
    try:
        return BENCHMARKS[key]
    except KeyError:
        raise ValueError(f"Unknown benchmark '{name}'. Expected one of {sorted(BENCHMARKS)}.") from None


def success_thresholds() -> Dict[str, Optional[float]]:
    return {name: b.threshold for name, b in BENCHMARKS.items()}


# ---------------------------
# Landscapes
# ---------------------------
@register("sphere", bounds=(-5.12, 5.12), threshold=1e-2)
def sphere(position) -> float:
    """Sum of squares: a single smooth basin."""
    x = np.asarray(position, dtype=np.float64)
    return float(np.sum(np.square(x)))


@register("rosenbrock", bounds=(-5.0, 10.0), threshold=1.0)
def rosenbrock(position) -> float:
    """Banana valley: the minimum at (1, ..., 1) sits in a long flat trough."""
    x = np.asarray(position, dtype=np.float64)
    head, tail = x[:-1], x[1:]
    valley = np.square(tail - np.square(head))
    return float(np.sum(100.0 * valley + np.square(1.0 - head)))


@register("rastrigin", bounds=(-5.12, 5.12), threshold=1.0)
def rastrigin(position) -> float:
    """Sphere plus a cosine ripple: a regular grid of local minima."""
    x = np.asarray(position, dtype=np.float64)
    ripple = 10.0 * (1.0 - np.cos(2.0 * np.pi * x))
    return float(np.sum(np.square(x) + ripple))


@register("ackley", bounds=(-32.768, 32.768), threshold=1e-1)
def ackley(position) -> float:
    """Nearly flat outer plateau around a narrow central funnel."""
    x = np.asarray(position, dtype=np.float64)
    radius = np.sqrt(np.mean(np.square(x)))
    wave = np.mean(np.cos(2.0 * np.pi * x))
    return float(20.0 * (1.0 - np.exp(-0.2 * radius)) + (np.e - np.exp(wave)))
