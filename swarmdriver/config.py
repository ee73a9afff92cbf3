"""
Configuration dataclasses.

`SwarmParams` carries the swarm hyperparameters (fixed once the optimizer is
built). `RunConfig` gathers the run-level settings the CLI derives from its
argparse namespace.
"""

from __future__ import annotations

from dataclasses import asdict, dataclass, replace
from datetime import datetime
from pathlib import Path
from typing import Optional
import uuid

from swarmdriver.algorithm.constants import (
    DAMAGE_PENALTY,
    ERGODIC,
    MAX_EVALUATIONS,
    MAX_ITERATIONS,
    MAX_STAGNATION,
    MAXIMIZE,
    MIN_FITNESS_MAGNITUDE,
    PRESETS,
    TASKS,
    TOPOLOGIES,
)


@dataclass(frozen=True)
class SwarmParams:
    n_particles: int = 25
    phi_1: float = 1.0            # cognitive weight (pull towards personal best)
    phi_2: float = 1.0            # social weight (pull towards neighbourhood best)
    inertia: float = 1.0
    decay: float = 0.98           # inertia multiplier per generation
    topology: str = ERGODIC
    task: str = MAXIMIZE
    max_iterations: int = MAX_ITERATIONS
    max_evaluations: int = MAX_EVALUATIONS
    max_stagnation: int = MAX_STAGNATION
    seed: Optional[int] = None

    def validate(self) -> "SwarmParams":
        """Raise ValueError listing every invalid field; return self otherwise."""
        bad = []
        if not isinstance(self.n_particles, int) or self.n_particles <= 0:
            bad.append("n_particles must be a positive int")
        for k in ("phi_1", "phi_2", "inertia", "decay"):
            v = getattr(self, k)
            if not isinstance(v, (int, float)) or v < 0:
                bad.append(f"{k} must be a non-negative number")
        if str(self.topology).lower() not in TOPOLOGIES:
            bad.append(f"topology must be one of {TOPOLOGIES}")
        if str(self.task).lower() not in TASKS:
            bad.append(f"task must be one of {TASKS}")
        for k in ("max_iterations", "max_evaluations", "max_stagnation"):
            v = getattr(self, k)
            if not isinstance(v, int) or v < 0:
                bad.append(f"{k} must be a non-negative int")
        if bad:
            raise ValueError("Invalid SwarmParams: " + "; ".join(bad))
        return self

    def with_overrides(self, **overrides) -> "SwarmParams":
        """Copy with the non-None overrides applied."""
        d = {k: v for k, v in overrides.items() if v is not None}
        return replace(self, **d).validate()

    def as_dict(self) -> dict:
        return asdict(self)


def params_from_preset(name: str, **overrides) -> SwarmParams:
    key = str(name).upper()
    if key not in PRESETS:
        raise ValueError(f"Unknown preset '{name}'. Expected one of {sorted(PRESETS)}.")
    return SwarmParams(**PRESETS[key]).with_overrides(**overrides)


@dataclass
class RunConfig:
    run_name: str
    preset: str
    seed: Optional[int]
    training: bool
    model_path: Optional[Path]

    # episode gating
    damage_penalty: float
    min_fitness_magnitude: float

    # paths
    results_root: Path
    run_dir: Path
    reports_dir: Path


def load_config(args) -> RunConfig:
    run_name = getattr(args, "run_name", None) or f"{datetime.now().strftime('%Y%m%d-%H%M%S')}-{uuid.uuid4().hex[:6]}"
    preset          = getattr(args, "preset", "DEFAULT")
    seed            = getattr(args, "seed", None)
    training        = not getattr(args, "deploy", False)
    model_path      = getattr(args, "model_path", None)
    damage_penalty  = getattr(args, "damage_penalty", DAMAGE_PENALTY)
    min_fitness     = getattr(args, "min_fitness", MIN_FITNESS_MAGNITUDE)
    results_root    = Path(getattr(args, "results_root", None) or "results")
    run_dir = results_root / run_name

    return RunConfig(
        run_name=run_name,
        preset=preset,
        seed=seed,
        training=training,
        model_path=Path(model_path) if model_path else None,
        damage_penalty=damage_penalty,
        min_fitness_magnitude=min_fitness,
        results_root=results_root,
        run_dir=run_dir,
        reports_dir=run_dir / "reports",
    )
