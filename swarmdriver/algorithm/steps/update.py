"""Update phase: global best tracking and stagnation counting.

Called once per received fitness. Scans the personal bests of the whole
population and replaces the global best only on strict improvement, so the
global-best fitness never decreases.
"""

from __future__ import annotations

import logging

from ..components.particle import is_better
from .terminate import termination_phase

logger = logging.getLogger(__name__)


def update_phase(swarm) -> bool:
    """Return True when the global best improved."""
    swarm.n_evaluations += 1

    improved = False
    for particle in swarm.swarm:
        if is_better(particle.pbest.fitness, swarm.global_best.fitness, swarm.task):
            swarm.global_best = particle.pbest.copy()
            improved = True

    if improved:
        swarm.n_eval_without_improvement = 0
        logger.info("Evaluation %d: new global best %.6g", swarm.n_evaluations, swarm.global_best.fitness)
    else:
        swarm.n_eval_without_improvement += 1
    swarm.history.append(swarm.global_best.fitness)
    termination_phase(swarm)
    return improved
