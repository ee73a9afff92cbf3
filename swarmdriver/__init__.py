"""Asynchronous particle-swarm tuning of a hand-built race-car controller."""

__version__ = "1.0.0"
