"""Presets and constants for the asynchronous particle swarm."""


# ============= Task =============
# Only MAXIMIZE is exercised by the controller; MINIMIZE mirrors the
# comparator and is kept for the benchmark harness.
MAXIMIZE = "maximize"
MINIMIZE = "minimize"
TASKS = (MAXIMIZE, MINIMIZE)


# ============= Topologies =============
# ERGODIC: complete graph, fastest information spread.
# RING: i <-> i-1, i+1 (mod N), slow spread, more exploration.
# STAR: particle 0 is the hub linked to every other particle.
ERGODIC = "ergodic"
RING = "ring"
STAR = "star"
TOPOLOGIES = (ERGODIC, RING, STAR)


# ============= Termination =============
MAX_ITERATIONS = 1000
MAX_EVALUATIONS = 10000
# Consecutive updates without improving the global best
MAX_STAGNATION = 300


# ============= Presets =============

# Values used to train the driving controller: 50 particles, strong
# cognitive pull, mild inertia decay per generation.
DEFAULT = {
    'n_particles': 50,
    'phi_1': 1.87,
    'phi_2': 1.24,
    'inertia': 0.85,
    'decay': 0.98,
    'topology': ERGODIC,
}

# Quick smoke test: tiny swarm, short budget.
QUICK_TEST = {
    'n_particles': 8,
    'phi_1': 1.5,
    'phi_2': 1.5,
    'inertia': 0.7,
    'decay': 0.99,
    'topology': ERGODIC,
    'max_iterations': 30,
    'max_evaluations': 300,
    'max_stagnation': 100,
}

# Exploratory: sparse ring neighbourhood, inertia kept high for longer.
EXPLORATORY = {
    'n_particles': 40,
    'phi_1': 1.49445,
    'phi_2': 1.49445,
    'inertia': 0.9,
    'decay': 0.995,
    'topology': RING,
}

# Classic constriction-like values on a star.
STAR_HUB = {
    'n_particles': 30,
    'phi_1': 1.49445,
    'phi_2': 1.49445,
    'inertia': 0.729,
    'decay': 1.0,
    'topology': STAR,
}


PRESETS = {
    'DEFAULT': DEFAULT,
    'QUICK_TEST': QUICK_TEST,
    'EXPLORATORY': EXPLORATORY,
    'STAR_HUB': STAR_HUB,
}


# ============= Fitness =============
# Objective = distance raced - DAMAGE_PENALTY * damage
DAMAGE_PENALTY = 2.0
# Episodes whose |objective| is below this are treated as spurious restarts
MIN_FITNESS_MAGNITUDE = 10.0
# Log the fitness history every N evaluations
HISTORY_LOG_EVERY = 50
