"""Swarm optimizer: components (particle, topology), phases and presets.

Import the optimizer from `swarmdriver.algorithm.pso`.
"""
