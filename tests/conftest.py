import numpy as np
import pytest

from swarmdriver.config import SwarmParams
from swarmdriver.driver.state import CarState


@pytest.fixture
def rng():
    return np.random.default_rng(1234)


@pytest.fixture
def small_params():
    return SwarmParams(n_particles=6, phi_1=1.5, phi_2=1.5, inertia=0.7, decay=0.99,
                       max_iterations=50, max_evaluations=200, max_stagnation=100)


@pytest.fixture
def car_state():
    """Car in third gear, centred on a straight-ish road, no opponents."""
    track = np.full(19, 50.0)
    return CarState(gear=3, rpm=5000.0, speed_x=80.0, track=track, track_pos=0.0,
                    fuel=50.0, wheel_spin_vel=np.full(4, 80.0 / (0.3325 * 4 * np.pi ** 2)))
