from .initialize import initialize_phase
from .move import move_phase
from .terminate import termination_phase
from .update import update_phase

__all__ = ["initialize_phase", "move_phase", "termination_phase", "update_phase"]
