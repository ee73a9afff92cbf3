from .base import (
    ParameterBlock,
    Tunable,
    apply_parameters,
    check_length,
    concat_lower_bounds,
    concat_parameters,
    concat_upper_bounds,
    parameter_slices,
    split_parameters,
    total_parameter_count,
)
from .network import FeedForwardNetwork
from .accelbrake import AccelBrakeModule
from .gear import GearModule
from .opponents import OpponentsModule
from .speed import TargetSpeedModule
from .steering import SteeringControlModule

__all__ = [
    "Tunable",
    "ParameterBlock",
    "check_length",
    "apply_parameters",
    "concat_parameters",
    "concat_lower_bounds",
    "concat_upper_bounds",
    "parameter_slices",
    "split_parameters",
    "total_parameter_count",
    "FeedForwardNetwork",
    "AccelBrakeModule",
    "GearModule",
    "OpponentsModule",
    "SteeringControlModule",
    "TargetSpeedModule",
]
