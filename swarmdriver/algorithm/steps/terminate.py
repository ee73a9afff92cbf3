"""Termination phase: latch the stop condition as soon as a threshold trips.

Runs after every counter change (evaluation or generation), so the swarm
remembers a stagnation streak even if an improvement resets the counter
before anyone asks whether to stop. Thresholds are checked in a fixed
order and the first match names the reason.
"""

from __future__ import annotations

import logging

logger = logging.getLogger(__name__)


def termination_phase(swarm) -> bool:
    if swarm._terminated:
        return True

    if swarm.n_iterations > swarm.max_iterations:
        reason = "max_iterations"
    elif swarm.n_evaluations > swarm.max_evaluations:
        reason = "max_evaluations"
    elif swarm.n_eval_without_improvement >= swarm.max_n_eval_without_improvement:
        reason = "stagnation"
    else:
        return False

    swarm._terminated = True
    swarm.termination_reason = reason
    logger.info("PSO termination condition met (%s) after %d evaluations.", reason, swarm.n_evaluations)
    return True
