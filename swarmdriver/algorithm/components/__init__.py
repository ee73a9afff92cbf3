from .particle import Particle, Solution, is_better, make_population
from .topology import (
    NeighbourhoodTopology,
    build_topology,
    ergodic_neighbors,
    ring_neighbors,
    star_neighbors,
)

__all__ = [
    "Particle",
    "Solution",
    "is_better",
    "make_population",
    "NeighbourhoodTopology",
    "build_topology",
    "ergodic_neighbors",
    "ring_neighbors",
    "star_neighbors",
]
