"""Fully-connected feed-forward network whose weights are a Tunable vector.

Layer k computes `h[k+1] = act_k(W_k^T h[k] + b_k)`, with `W_k` of shape
(n_inputs, n_outputs). The flat parameter layout is, per layer in
construction order: weights row-major, then biases (when enabled).
"""

from __future__ import annotations

from typing import List, Optional

import numpy as np

from swarmdriver.modules.base import check_length
from swarmdriver.utils import get_activation, make_rng, rand_gaussian


class FeedForwardNetwork:
    """Stack of dense layers with optional biases and per-layer activations."""

    def __init__(self, n_inputs: int, use_bias: bool = True, weight_bound: float = 1.0,
                 name: Optional[str] = None):
        if n_inputs <= 0:
            raise ValueError("n_inputs must be positive.")
        if weight_bound <= 0:
            raise ValueError("weight_bound must be > 0.")
        self.name = name or "network"
        self.n_inputs = int(n_inputs)
        self.use_bias = bool(use_bias)
        self.weight_bound = float(weight_bound)

        self.A: List[np.ndarray] = []
        self.b: List[np.ndarray] = []
        self.activations: List[str] = []
        # h[0] is the input buffer, h[k+1] the output of layer k
        self.h: List[np.ndarray] = [np.zeros(self.n_inputs, dtype=float)]

    # ---------------------------
    # Construction
    # ---------------------------
    def add_fully_connected_layer(self, n_inputs: int, n_outputs: int) -> "FeedForwardNetwork":
        width = self.h[-1].size
        if n_inputs != width:
            raise ValueError(f"Layer expects {n_inputs} inputs but previous width is {width}.")
        if n_outputs <= 0:
            raise ValueError("n_outputs must be positive.")
        self.A.append(np.zeros((n_inputs, n_outputs), dtype=float))
        if self.use_bias:
            self.b.append(np.zeros(n_outputs, dtype=float))
        self.h.append(np.zeros(n_outputs, dtype=float))
        return self

    def add_activation(self, name: str) -> "FeedForwardNetwork":
        get_activation(name)  # validate early
        if len(self.activations) >= len(self.A):
            raise ValueError("Every activation must follow a fully-connected layer.")
        self.activations.append(str(name).lower())
        return self

    @property
    def n_layers(self) -> int:
        return len(self.A)

    # ---------------------------
    # Buffers
    # ---------------------------
    @property
    def inputs(self) -> np.ndarray:
        return self.h[0]

    @inputs.setter
    def inputs(self, values) -> None:
        self.h[0][:] = check_length(values, self.n_inputs, f"{self.name} inputs")

    @property
    def outputs(self) -> np.ndarray:
        return self.h[-1]

    def out(self, i: int) -> float:
        return float(self.h[-1][i])

    # ---------------------------
    # Parameters
    # ---------------------------
    def parameter_count(self) -> int:
        n = 0
        for k, A in enumerate(self.A):
            n += A.size
            if self.use_bias:
                n += self.b[k].size
        return n

    def init_weights(self, rng: Optional[np.random.Generator] = None) -> None:
        """Gaussian init: var 2/(fan_in+fan_out) for weights, 1/fan_out for biases."""
        rng = rng if rng is not None else make_rng()
        for k, A in enumerate(self.A):
            n_in, n_out = A.shape
            self.A[k] = rand_gaussian(rng, (n_in, n_out), 0.0, np.sqrt(2.0 / (n_in + n_out)))
            # Biases are not zero-initialized since the network is searched by a swarm
            if self.use_bias:
                self.b[k] = rand_gaussian(rng, n_out, 0.0, np.sqrt(1.0 / n_out))

    def get_weights(self) -> np.ndarray:
        parts = []
        for k, A in enumerate(self.A):
            parts.append(A.reshape(-1))  # row-major
            if self.use_bias:
                parts.append(self.b[k])
        if not parts:
            return np.zeros(0, dtype=float)
        return np.concatenate(parts).astype(float, copy=True)

    def set_weights(self, weights) -> None:
        vec = check_length(weights, self.parameter_count(), self.name)
        j = 0
        for k, A in enumerate(self.A):
            n_in, n_out = A.shape
            self.A[k] = vec[j:j + n_in * n_out].reshape(n_in, n_out).copy()
            j += n_in * n_out
            if self.use_bias:
                self.b[k] = vec[j:j + n_out].copy()
                j += n_out

    # Tunable interface
    def lower_bounds(self) -> np.ndarray:
        return np.full(self.parameter_count(), -self.weight_bound, dtype=float)

    def upper_bounds(self) -> np.ndarray:
        return np.full(self.parameter_count(), self.weight_bound, dtype=float)

    def get_parameters(self) -> np.ndarray:
        return self.get_weights()

    def set_parameters(self, parameters) -> None:
        self.set_weights(parameters)

    # ---------------------------
    # Inference
    # ---------------------------
    def forward(self, x=None) -> np.ndarray:
        """Refresh every activation buffer and return the output buffer."""
        if x is not None:
            self.inputs = x
        for k, A in enumerate(self.A):
            z = A.T @ self.h[k]
            if self.use_bias:
                z = z + self.b[k]
            if k < len(self.activations):
                z = get_activation(self.activations[k])(z)
            self.h[k + 1][:] = z
        return self.h[-1]
