"""
Numeric and filesystem helpers shared by the swarm and the control modules.

Responsibilities:
  • Random sampling (uniform / Gaussian) from an explicit numpy Generator.
  • Activation functions for the feed-forward network.
  • Filesystem helpers (create directories, write a JSON manifest).
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Callable

import numpy as np


def make_rng(seed: int | None = None) -> np.random.Generator:
    """Return a numpy Generator; `None` draws fresh OS entropy."""
    return np.random.default_rng(seed)


# ---------------------------
# Sampling
# ---------------------------
def rand_uniform(rng: np.random.Generator, size) -> np.ndarray:
    """Uniform samples in [0, 1] with the given shape."""
    return rng.random(size=size)


def rand_symmetric(rng: np.random.Generator, size) -> np.ndarray:
    """Uniform samples in [-1, 1] with the given shape."""
    return rng.uniform(-1.0, 1.0, size=size)


def rand_gaussian(rng: np.random.Generator, size, mu: float = 0.0, std: float = 1.0) -> np.ndarray:
    """Gaussian samples N(mu, std^2) with the given shape."""
    return rng.normal(loc=mu, scale=std, size=size)


# ---------------------------
# Activations
# ---------------------------
def sigmoid(x: np.ndarray) -> np.ndarray:
    # Split on sign so exp() never overflows
    x = np.asarray(x, dtype=float)
    out = np.empty_like(x)
    pos = x >= 0
    out[pos] = 1.0 / (1.0 + np.exp(-x[pos]))
    ex = np.exp(x[~pos])
    out[~pos] = ex / (1.0 + ex)
    return out


def tanh(x: np.ndarray) -> np.ndarray:
    return np.tanh(x)


def relu(x: np.ndarray) -> np.ndarray:
    return np.maximum(0.0, x)


def clipping(x: np.ndarray) -> np.ndarray:
    """Shift by 0.5 and clamp into [0, 1]."""
    return np.clip(np.asarray(x, dtype=float) + 0.5, 0.0, 1.0)


ACTIVATIONS: dict[str, Callable[[np.ndarray], np.ndarray]] = {
    "sigmoid": sigmoid,
    "tanh": tanh,
    "relu": relu,
    "clipping": clipping,
}


def get_activation(name: str) -> Callable[[np.ndarray], np.ndarray]:
    key = str(name).lower()
    if key not in ACTIVATIONS:
        raise ValueError(f"Unknown activation '{name}'. Expected one of {sorted(ACTIVATIONS)}.")
    return ACTIVATIONS[key]


# ---------------------------
# Filesystem
# ---------------------------
def ensure_dirs(*paths: Path) -> None:
    """
    Create all given directories (recursively) if they do not exist.

    Args:
        *paths: One or more Path objects (directories) to create.
    """
    for p in paths:
        Path(p).mkdir(parents=True, exist_ok=True)


def save_manifest(manifest: dict[str, Any], run_dir: Path) -> Path:
    """
    Write a JSON manifest describing a run's key hyperparameters.

    Args:
        manifest: Plain mapping of JSON-serialisable values.
        run_dir: Directory receiving `manifest.json`.

    Returns:
        Path of the written file.
    """
    run_dir = Path(run_dir)
    ensure_dirs(run_dir)
    path = run_dir / "manifest.json"
    with open(path, "w") as f:
        json.dump(manifest, f, indent=2, default=str)
    return path
