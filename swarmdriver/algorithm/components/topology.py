"""Neighbourhood topologies for the particle swarm.

Each builder returns an (n, n) boolean adjacency matrix: nb[i, j] is True
iff j is a neighbour of i. Matrices are symmetric and a particle is never
its own neighbour. `build_topology` resolves a topology name once into an
immutable `NeighbourhoodTopology` holding per-particle neighbour indices.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, Dict, Tuple

import numpy as np

from swarmdriver.algorithm.constants import ERGODIC, RING, STAR


def _check_size(n_particles: int) -> None:
    if not isinstance(n_particles, (int, np.integer)) or n_particles <= 0:
        raise ValueError("n_particles must be a positive int.")


def ergodic_neighbors(n_particles: int) -> np.ndarray:
    """
    Fully-connected neighbourhood matrix (every particle sees every other).
    """
    _check_size(n_particles)
    nb = np.ones((n_particles, n_particles), dtype=bool)
    np.fill_diagonal(nb, False)
    return nb


def ring_neighbors(n_particles: int) -> np.ndarray:
    """
    Ring neighbourhood: particle i is linked to (i - 1) and (i + 1) mod n.

    Parameters
    ----------
    n_particles : int
        Number of particles in the swarm.

    Returns
    -------
    nb : (n_particles, n_particles) bool ndarray

    Notes
    -----
    - With n = 2 both ring links point at the other particle; it is linked once.
    - With n = 1 the only candidate is the particle itself, so the set is empty.
    """
    _check_size(n_particles)
    nb = np.zeros((n_particles, n_particles), dtype=bool)
    for i in range(n_particles):
        nb[i, (i - 1) % n_particles] = True
        nb[i, (i + 1) % n_particles] = True
    np.fill_diagonal(nb, False)
    return nb


def star_neighbors(n_particles: int) -> np.ndarray:
    """
    Star neighbourhood: particle 0 is the hub, linked to all others; the
    others are linked only to the hub.
    """
    _check_size(n_particles)
    nb = np.zeros((n_particles, n_particles), dtype=bool)
    nb[0, 1:] = True
    nb[1:, 0] = True
    return nb


TOPOLOGY_BUILDERS: Dict[str, Callable[[int], np.ndarray]] = {
    ERGODIC: ergodic_neighbors,
    RING: ring_neighbors,
    STAR: star_neighbors,
}


@dataclass(frozen=True)
class NeighbourhoodTopology:
    """Immutable adjacency among the particles of a fixed-size swarm."""

    name: str
    adjacency: np.ndarray
    neighbours: Tuple[Tuple[int, ...], ...]

    @property
    def n_particles(self) -> int:
        return len(self.neighbours)

    def of(self, i: int) -> Tuple[int, ...]:
        return self.neighbours[i]

    def degree(self, i: int) -> int:
        return len(self.neighbours[i])

    def n_edges(self) -> int:
        return int(self.adjacency.sum()) // 2


def build_topology(name: str, n_particles: int) -> NeighbourhoodTopology:
    topo = (name or ERGODIC).lower()
    if topo not in TOPOLOGY_BUILDERS:
        raise ValueError(f"Unknown topology: {name}")
    nb = TOPOLOGY_BUILDERS[topo](n_particles)
    nb.setflags(write=False)
    neighbours = tuple(tuple(int(j) for j in np.flatnonzero(nb[i])) for i in range(n_particles))
    return NeighbourhoodTopology(name=topo, adjacency=nb, neighbours=neighbours)
