"""Tunable capability shared by every optimizable control module.

A Tunable exposes a fixed-length parameter vector with box constraints.
Unrelated modules are optimized together by concatenating their vectors in a
fixed list order; the helpers below implement that mapping and its inverse.
"""

from __future__ import annotations

from typing import Dict, Iterable, List, Optional, Protocol, Sequence, runtime_checkable

import numpy as np


@runtime_checkable
class Tunable(Protocol):
    """Minimal interface of an optimizable module."""

    def parameter_count(self) -> int: ...

    def lower_bounds(self) -> np.ndarray: ...

    def upper_bounds(self) -> np.ndarray: ...

    def get_parameters(self) -> np.ndarray: ...

    def set_parameters(self, parameters) -> None: ...


def check_length(parameters, expected: int, owner: str = "module") -> np.ndarray:
    """Return `parameters` as a float vector, or raise if its length is wrong."""
    vec = np.asarray(parameters, dtype=float)
    if vec.ndim != 1:
        raise ValueError(f"{owner}: expected a flat parameter vector, got shape {vec.shape}.")
    if vec.size != expected:
        raise ValueError(f"{owner}: expected {expected} parameters, got {vec.size}.")
    return vec


def module_name(module: object) -> str:
    return getattr(module, "name", None) or type(module).__name__


# ---------- Aggregation ----------
def total_parameter_count(modules: Iterable[Tunable]) -> int:
    return int(sum(m.parameter_count() for m in modules))


def concat_parameters(modules: Sequence[Tunable]) -> np.ndarray:
    """Concatenate module vectors in list order."""
    parts = [check_length(m.get_parameters(), m.parameter_count(), module_name(m)) for m in modules]
    return np.concatenate(parts) if parts else np.zeros(0, dtype=float)


def concat_lower_bounds(modules: Sequence[Tunable]) -> np.ndarray:
    parts = [check_length(m.lower_bounds(), m.parameter_count(), module_name(m)) for m in modules]
    return np.concatenate(parts) if parts else np.zeros(0, dtype=float)


def concat_upper_bounds(modules: Sequence[Tunable]) -> np.ndarray:
    parts = [check_length(m.upper_bounds(), m.parameter_count(), module_name(m)) for m in modules]
    return np.concatenate(parts) if parts else np.zeros(0, dtype=float)


def parameter_slices(modules: Sequence[Tunable]) -> Dict[str, slice]:
    """
    Map each module to its slice of the aggregate vector.

    Duplicate module names get a numeric suffix (`name#1`, `name#2`, ...).
    """
    slices: Dict[str, slice] = {}
    start = 0
    for m in modules:
        n = m.parameter_count()
        key = module_name(m)
        if key in slices:
            k = 1
            while f"{key}#{k}" in slices:
                k += 1
            key = f"{key}#{k}"
        slices[key] = slice(start, start + n)
        start += n
    return slices


def split_parameters(modules: Sequence[Tunable], parameters) -> List[np.ndarray]:
    """
    Cut an aggregate vector into per-module segments.

    The total length is validated before anything is returned, so callers
    can apply the segments without risking a partial update.
    """
    vec = check_length(parameters, total_parameter_count(modules), "aggregate")
    segments = []
    start = 0
    for m in modules:
        n = m.parameter_count()
        segments.append(vec[start:start + n].copy())
        start += n
    return segments


def apply_parameters(modules: Sequence[Tunable], parameters) -> None:
    """Install an aggregate vector into each module, in list order."""
    for m, segment in zip(modules, split_parameters(modules, parameters)):
        m.set_parameters(segment)


class ParameterBlock:
    """
    Plain named vector with box constraints.

    Useful for benchmark objectives and for driving the swarm with a search
    space that has no control law attached.
    """

    def __init__(self, lower, upper, values=None, name: Optional[str] = None):
        lower = np.asarray(lower, dtype=float).ravel()
        upper = np.asarray(upper, dtype=float).ravel()
        if lower.shape != upper.shape:
            raise ValueError("lower and upper bounds must have the same length.")
        if np.any(lower > upper):
            raise ValueError("lower bounds must not exceed upper bounds.")
        self.name = name or "block"
        self._lower = lower
        self._upper = upper
        if values is None:
            self._values = (lower + upper) / 2.0
        else:
            self._values = check_length(values, lower.size, self.name).copy()

    @classmethod
    def uniform(cls, n: int, lo: float, hi: float, name: Optional[str] = None) -> "ParameterBlock":
        return cls(np.full(n, lo, dtype=float), np.full(n, hi, dtype=float), name=name)

    def parameter_count(self) -> int:
        return int(self._lower.size)

    def lower_bounds(self) -> np.ndarray:
        return self._lower.copy()

    def upper_bounds(self) -> np.ndarray:
        return self._upper.copy()

    def get_parameters(self) -> np.ndarray:
        return self._values.copy()

    def set_parameters(self, parameters) -> None:
        self._values = check_length(parameters, self.parameter_count(), self.name).copy()
