"""Persisted controller parameters.

Format: one flat vector of whitespace-separated decimal values, no header,
no length prefix. The order is the fixed concatenation order of the
controller's modules. Values are written with Python's shortest round-trip
float repr, so save -> load is exact.
"""

from __future__ import annotations

import logging
import os
import tempfile
from pathlib import Path
from typing import Optional

import numpy as np

logger = logging.getLogger(__name__)


def format_parameters(parameters) -> str:
    vec = np.asarray(parameters, dtype=float).ravel()
    return " ".join(repr(float(v)) for v in vec) + "\n"


def parse_parameters(text: str, source: str = "<string>") -> np.ndarray:
    tokens = text.split()
    if not tokens:
        raise ValueError(f"Parameter file {source} is empty.")
    try:
        values = [float(tok) for tok in tokens]
    except ValueError as e:
        raise ValueError(f"Parameter file {source} contains a non-numeric value: {e}") from e
    return np.array(values, dtype=float)


def load_parameters(path, expected_length: Optional[int] = None) -> np.ndarray:
    """
    Load a parameter vector.

    Args:
        path: Parameter file location.
        expected_length: When given, the vector must have exactly this length.

    Returns:
        1D float array.

    Raises:
        FileNotFoundError / OSError: the file cannot be read.
        ValueError: empty file, non-numeric token, or length mismatch.
    """
    path = Path(path)
    with open(path, "r") as f:
        vec = parse_parameters(f.read(), str(path))
    if expected_length is not None and vec.size != expected_length:
        raise ValueError(
            f"Parameter file {path} holds {vec.size} values but {expected_length} are expected."
        )
    return vec


def save_parameters(path, parameters) -> Path:
    """
    Overwrite `path` with the given vector.

    The text is written to a temporary sibling first and moved into place
    with os.replace, so readers see either the old or the new vector.
    """
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    fd, tmp = tempfile.mkstemp(prefix=f".{path.name}.", suffix=".tmp", dir=str(path.parent))
    try:
        with os.fdopen(fd, "w") as f:
            f.write(format_parameters(parameters))
            f.flush()
            os.fsync(f.fileno())
        os.replace(tmp, path)
    except BaseException:
        if os.path.exists(tmp):
            os.remove(tmp)
        raise
    logger.debug("Saved %d parameters to %s", np.asarray(parameters).size, path)
    return path
