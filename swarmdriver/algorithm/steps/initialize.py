"""Initialization phase: place every particle in the search box.

Positions are sampled uniformly inside [lower, upper], velocities on the
scale of the box width, and every fitness starts pending. Runs once per
swarm, before the first particle is dispatched.
"""

from __future__ import annotations

import logging

import numpy as np

logger = logging.getLogger(__name__)


def initialize_phase(swarm, lower, upper) -> None:
    lower = np.asarray(lower, dtype=float).ravel()
    upper = np.asarray(upper, dtype=float).ravel()
    if lower.size != swarm.n_dim or upper.size != swarm.n_dim:
        raise ValueError(
            f"Bounds must have {swarm.n_dim} values, got {lower.size} and {upper.size}."
        )

    for particle in swarm.swarm:
        particle.initialize(lower, upper, swarm.rng)

    fixed = int(np.count_nonzero(upper == lower))
    if fixed:
        logger.debug("%d of %d dimensions have zero range and stay fixed", fixed, swarm.n_dim)
