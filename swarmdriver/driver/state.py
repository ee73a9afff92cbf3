"""Car state snapshot and car control records exchanged with the simulator client.

These are plain containers: the wire format and its parsing belong to the
client, which builds a `CarState` (e.g. through `CarState.from_dict`) and
serialises the returned `CarControl`.
"""

from __future__ import annotations

from dataclasses import asdict, dataclass, field, fields
from typing import Any, Mapping

import numpy as np

FOCUS_SENSORS_NUM = 5
TRACK_SENSORS_NUM = 19
OPPONENTS_SENSORS_NUM = 36
WHEELS_NUM = 4

# Index of the sensor pointing straight ahead in the track array
TRACK_FRONT = 9
# Index of the sensor pointing straight ahead in the opponents array
OPPONENTS_FRONT = 18

WHEEL_RADIUS = 0.3325
# Opponent sensors report 200 m when nothing is in range
NO_OPPONENT = 200.0


def _array(n: int, fill: float = 0.0):
    return field(default_factory=lambda: np.full(n, fill, dtype=float))


@dataclass
class CarState:
    """Read-only snapshot of the car at one simulation step."""

    angle: float = 0.0
    cur_lap_time: float = 0.0
    damage: float = 0.0
    dist_from_start: float = 0.0
    dist_raced: float = 0.0
    focus: np.ndarray = _array(FOCUS_SENSORS_NUM)
    fuel: float = 0.0
    gear: int = 0
    last_lap_time: float = 0.0
    opponents: np.ndarray = _array(OPPONENTS_SENSORS_NUM, NO_OPPONENT)
    race_pos: int = 1
    rpm: float = 0.0
    speed_x: float = 0.0
    speed_y: float = 0.0
    speed_z: float = 0.0
    track: np.ndarray = _array(TRACK_SENSORS_NUM)
    track_pos: float = 0.0
    wheel_spin_vel: np.ndarray = _array(WHEELS_NUM)
    z: float = 0.0

    def __post_init__(self) -> None:
        for name, n in (("focus", FOCUS_SENSORS_NUM),
                        ("opponents", OPPONENTS_SENSORS_NUM),
                        ("track", TRACK_SENSORS_NUM),
                        ("wheel_spin_vel", WHEELS_NUM)):
            arr = np.asarray(getattr(self, name), dtype=float).ravel()
            if arr.size != n:
                raise ValueError(f"CarState.{name} must have {n} values, got {arr.size}.")
            setattr(self, name, arr)
        self.gear = int(self.gear)

    @classmethod
    def from_dict(cls, values: Mapping[str, Any]) -> "CarState":
        """Build a state from a mapping; unknown keys are ignored."""
        known = {f.name for f in fields(cls)}
        return cls(**{k: v for k, v in values.items() if k in known})

    def speed(self) -> float:
        """Norm of the velocity vector."""
        return float(np.sqrt(self.speed_x ** 2 + self.speed_y ** 2 + self.speed_z ** 2))

    def wheels_speed(self) -> float:
        """Average wheel angular speed converted to ground speed."""
        velocity = float(np.mean(self.wheel_spin_vel))
        return velocity * WHEEL_RADIUS * 4.0 * np.pi ** 2


@dataclass
class CarControl:
    """Commands sent back to the simulator for one step."""

    META_RESTART = 1

    accel: float = 0.0
    brake: float = 0.0
    gear: int = 0
    steer: float = 0.0
    clutch: float = 0.0
    focus: int = 0
    meta: int = 0

    def clip_to_limits(self) -> "CarControl":
        self.accel = float(np.clip(self.accel, 0.0, 1.0))
        self.brake = float(np.clip(self.brake, 0.0, 1.0))
        self.steer = float(np.clip(self.steer, -1.0, 1.0))
        self.clutch = float(np.clip(self.clutch, 0.0, 1.0))
        self.gear = int(np.clip(self.gear, -1, 6))
        self.focus = int(np.clip(self.focus, -90, 90))
        return self

    @property
    def restart_requested(self) -> bool:
        return self.meta == self.META_RESTART

    def as_dict(self) -> dict:
        return asdict(self)
