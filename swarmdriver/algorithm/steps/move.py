"""Move phase: the generational update.

Once every particle of the current pass has been dispatched, all particles
move at once, the iteration counter advances and the inertia weight decays.
"""

from __future__ import annotations

import logging

from .terminate import termination_phase

logger = logging.getLogger(__name__)


def move_phase(swarm) -> None:
    pending = 0
    for particle in swarm.swarm:
        if particle.current.pending:
            pending += 1
        particle.move(swarm.rng)
    swarm.n_iterations += 1
    termination_phase(swarm)

    # Apply decay to the inertia weight
    swarm.set_inertia(swarm.inertia * swarm.decay)

    if pending:
        logger.debug("Generation %d moved %d never-evaluated particles", swarm.n_iterations, pending)
    logger.debug("Generation %d: inertia=%.4f", swarm.n_iterations, swarm.inertia)
