import numpy as np
import pytest

from swarmdriver.algorithm.components.particle import Solution
from swarmdriver.algorithm.pso import SwarmOptimizer
from swarmdriver.config import SwarmParams, params_from_preset


def _drive(swarm, fitness, n_updates):
    """Run the dispatch/evaluate/update cycle n_updates times."""
    for _ in range(n_updates):
        p = swarm.next()
        p.set_evaluation(fitness(p.position))
        swarm.update()


def test_two_particle_ring_global_best():
    params = SwarmParams(n_particles=2, phi_1=1.0, phi_2=1.0, inertia=1.0, decay=1.0, topology="ring")
    swarm = SwarmOptimizer(1, params, rng=np.random.default_rng(0))
    swarm.initialize([0.0], [10.0])

    a = swarm.next()
    b = swarm.next()
    assert (a.index, b.index) == (0, 1)
    a.current = Solution(np.array([2.0]))
    b.current = Solution(np.array([8.0]))
    a.set_evaluation(5.0)
    b.set_evaluation(9.0)
    swarm.update()

    assert swarm.best_position[0] == 8.0
    assert swarm.best_fitness == 9.0


def test_best_before_any_evaluation_raises():
    swarm = SwarmOptimizer(2, SwarmParams(n_particles=3), rng=np.random.default_rng(0))
    swarm.initialize([0.0, 0.0], [1.0, 1.0])
    assert not swarm.has_best
    with pytest.raises(RuntimeError):
        swarm.best_position
    with pytest.raises(RuntimeError):
        swarm.best_fitness


def test_next_is_round_robin_and_moves_on_wrap(small_params):
    swarm = SwarmOptimizer(2, small_params, rng=np.random.default_rng(3))
    swarm.initialize([-1.0, -1.0], [1.0, 1.0])
    order = []
    for _ in range(2 * small_params.n_particles):
        p = swarm.next()
        order.append(p.index)
        p.set_evaluation(1.0)
        swarm.update()
    assert order == list(range(6)) * 2
    assert swarm.n_iterations == 1
    assert swarm.inertia == pytest.approx(0.7 * 0.99)
    assert all(p.inertia == swarm.inertia for p in swarm.swarm)


def test_first_wrap_without_evaluations_does_not_move():
    swarm = SwarmOptimizer(1, SwarmParams(n_particles=2), rng=np.random.default_rng(0))
    swarm.initialize([0.0], [1.0])
    before = [p.position.copy() for p in swarm.swarm]
    swarm.next()
    swarm.next()
    swarm.next()
    assert swarm.n_iterations == 0
    assert all(np.array_equal(b, p.position) for b, p in zip(before, swarm.swarm))


def test_global_best_is_monotonic(small_params):
    rng = np.random.default_rng(11)
    swarm = SwarmOptimizer(3, small_params, rng=rng)
    swarm.initialize(np.full(3, -5.0), np.full(3, 5.0))
    _drive(swarm, lambda x: float(rng.normal(scale=10.0)), 120)
    history = np.asarray(swarm.history, dtype=float)
    assert len(history) == 120
    assert np.all(np.diff(history) >= 0)
    assert swarm.best_fitness == history[-1]


def test_positions_stay_in_bounds_over_generations(small_params):
    swarm = SwarmOptimizer(4, small_params.with_overrides(inertia=3.0, decay=1.0),
                           rng=np.random.default_rng(5))
    lower, upper = np.array([0.0, -1.0, 2.0, 0.0]), np.array([1.0, 1.0, 2.5, 0.0])
    swarm.initialize(lower, upper)
    for _ in range(150):
        p = swarm.next()
        assert np.all(p.position >= lower) and np.all(p.position <= upper)
        p.set_evaluation(-float(np.sum(p.position ** 2)))
        swarm.update()


def test_maximizes_negated_sphere():
    params = params_from_preset("QUICK_TEST", max_evaluations=600, max_iterations=1000,
                                max_stagnation=1000)
    swarm = SwarmOptimizer(2, params, rng=np.random.default_rng(42))
    swarm.initialize(np.full(2, -5.0), np.full(2, 5.0))
    while not swarm.termination_condition():
        _drive(swarm, lambda x: -float(np.dot(x, x)), 1)
    assert swarm.best_fitness > -0.5
    assert swarm.termination_reason == "max_evaluations"


def test_termination_by_evaluations_latches():
    params = SwarmParams(n_particles=2, max_evaluations=5, max_stagnation=100)
    swarm = SwarmOptimizer(1, params, rng=np.random.default_rng(0))
    swarm.initialize([0.0], [1.0])
    counter = iter(range(100))
    for _ in range(5):
        _drive(swarm, lambda x: float(next(counter)), 1)
        assert not swarm.termination_condition()
    _drive(swarm, lambda x: float(next(counter)), 1)
    assert swarm.termination_condition()
    assert swarm.termination_reason == "max_evaluations"
    assert swarm.termination_condition()


def test_termination_by_stagnation_stays_true_after_improvement():
    params = SwarmParams(n_particles=2, max_stagnation=3)
    swarm = SwarmOptimizer(1, params, rng=np.random.default_rng(0))
    swarm.initialize([0.0], [1.0])
    _drive(swarm, lambda x: 1.0, 1)
    assert not swarm.termination_condition()
    _drive(swarm, lambda x: 1.0, 2)
    assert not swarm.termination_condition()
    _drive(swarm, lambda x: 1.0, 1)
    assert swarm.termination_condition()
    assert swarm.termination_reason == "stagnation"

    _drive(swarm, lambda x: 100.0, 1)
    assert swarm.n_eval_without_improvement == 0
    assert swarm.termination_condition()


def test_termination_by_iterations():
    params = SwarmParams(n_particles=2, max_iterations=1)
    swarm = SwarmOptimizer(1, params, rng=np.random.default_rng(0))
    swarm.initialize([0.0], [1.0])
    values = iter(range(100))
    _drive(swarm, lambda x: float(next(values)), 4)
    assert swarm.n_iterations == 1
    assert not swarm.termination_condition()
    _drive(swarm, lambda x: float(next(values)), 2)
    assert swarm.n_iterations == 2
    assert swarm.termination_condition()
    assert swarm.termination_reason == "max_iterations"


def test_setters_broadcast_to_particles():
    swarm = SwarmOptimizer(1, SwarmParams(n_particles=3), rng=np.random.default_rng(0))
    swarm.set_phi_1(0.5)
    swarm.set_phi_2(0.25)
    swarm.set_inertia(0.1)
    for p in swarm.swarm:
        assert (p.phi_1, p.phi_2, p.inertia) == (0.5, 0.25, 0.1)


def test_invalid_configuration_rejected():
    with pytest.raises(ValueError):
        SwarmOptimizer(0)
    with pytest.raises(ValueError):
        SwarmOptimizer(2, topology="torus")
    with pytest.raises(ValueError):
        SwarmOptimizer(2, n_particles=0)


def test_minimize_task_tracks_lowest_value():
    params = SwarmParams(n_particles=3, task="minimize")
    swarm = SwarmOptimizer(1, params, rng=np.random.default_rng(0))
    swarm.initialize([0.0], [1.0])
    values = iter([5.0, 2.0, 8.0, 1.0])
    _drive(swarm, lambda x: next(values), 4)
    assert swarm.best_fitness == 1.0
    assert np.all(np.diff(swarm.history) <= 0)


def test_stagnation_latches_without_being_queried():
    params = SwarmParams(n_particles=2, max_stagnation=3)
    swarm = SwarmOptimizer(1, params, rng=np.random.default_rng(0))
    swarm.initialize([0.0], [1.0])
    # One improving update, then a flat streak past the limit
    _drive(swarm, lambda x: 1.0, 5)
    assert swarm.n_eval_without_improvement == 4
    _drive(swarm, lambda x: 100.0, 1)
    assert swarm.n_eval_without_improvement == 0
    assert swarm.termination_condition()
    assert swarm.termination_reason == "stagnation"


def test_iteration_limit_latches_on_the_move_that_crosses_it():
    params = SwarmParams(n_particles=2, max_iterations=0)
    swarm = SwarmOptimizer(1, params, rng=np.random.default_rng(0))
    swarm.initialize([0.0], [1.0])
    _drive(swarm, lambda x: float(x[0]), 2)
    assert not swarm.termination_condition()
    swarm.next()
    assert swarm.n_iterations == 1
    assert swarm.termination_condition()
    assert swarm.termination_reason == "max_iterations"


def test_first_matching_threshold_names_the_reason():
    params = SwarmParams(n_particles=2, max_iterations=2, max_evaluations=5)
    swarm = SwarmOptimizer(1, params, rng=np.random.default_rng(0))
    swarm.initialize([0.0], [1.0])
    p = swarm.next()
    p.set_evaluation(1.0)
    # Both counters past their limits when the update runs
    swarm.n_iterations = 3
    swarm.n_evaluations = 10
    swarm.update()
    assert swarm.termination_condition()
    assert swarm.termination_reason == "max_iterations"


def test_evaluations_take_precedence_over_stagnation():
    params = SwarmParams(n_particles=2, max_evaluations=3, max_stagnation=3)
    swarm = SwarmOptimizer(1, params, rng=np.random.default_rng(0))
    swarm.initialize([0.0], [1.0])
    _drive(swarm, lambda x: 1.0, 3)
    assert not swarm.termination_condition()
    # Fourth flat update trips both limits at once
    _drive(swarm, lambda x: 1.0, 1)
    assert swarm.n_eval_without_improvement == 3
    assert swarm.termination_reason == "max_evaluations"
