import numpy as np
import pytest

from swarmdriver.driver.state import CarControl, CarState


def test_from_dict_ignores_unknown_keys():
    cs = CarState.from_dict({"angle": 0.1, "gear": "3", "track": [1.0] * 19, "lapsDone": 4})
    assert cs.angle == 0.1
    assert cs.gear == 3
    assert cs.track.shape == (19,)


def test_sensor_arrays_are_length_checked():
    with pytest.raises(ValueError):
        CarState(track=np.zeros(18))
    with pytest.raises(ValueError):
        CarState(opponents=np.zeros(10))


def test_default_opponents_are_out_of_range():
    assert np.all(CarState().opponents == 200.0)


def test_speed_is_euclidean_norm():
    assert CarState(speed_x=3.0, speed_y=4.0).speed() == pytest.approx(5.0)


def test_clip_to_limits():
    cc = CarControl(accel=1.7, brake=-0.2, gear=9, steer=-3.0, clutch=2.0, focus=120).clip_to_limits()
    assert (cc.accel, cc.brake, cc.gear, cc.steer, cc.clutch, cc.focus) == (1.0, 0.0, 6, -1.0, 1.0, 90)


def test_restart_flag_and_dict():
    cc = CarControl(meta=CarControl.META_RESTART)
    assert cc.restart_requested
    d = cc.as_dict()
    assert d["meta"] == 1
    assert set(d) == {"accel", "brake", "gear", "steer", "clutch", "focus", "meta"}
