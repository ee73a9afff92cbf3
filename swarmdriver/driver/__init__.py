from .state import CarControl, CarState

__all__ = ["CarControl", "CarState"]
