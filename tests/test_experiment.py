import numpy as np
import pandas as pd
import pytest

from swarmdriver.benchmarks import (
    BENCHMARKS,
    Benchmark,
    ackley,
    as_fitness,
    get_benchmark,
    rastrigin,
    register,
    rosenbrock,
    sphere,
    success_thresholds,
)
from swarmdriver.config import params_from_preset
from swarmdriver.experiment import RUN_COLUMNS, optimize, run_seed, run_suite


def test_benchmarks_have_zero_minimum():
    assert sphere(np.zeros(3)) == 0.0
    assert rosenbrock(np.ones(4)) == 0.0
    assert rastrigin(np.zeros(5)) == pytest.approx(0.0)
    assert ackley(np.zeros(2)) == pytest.approx(0.0, abs=1e-12)


def test_fitness_wrapper_negates():
    fit = as_fitness(sphere)
    assert fit(np.array([1.0, 2.0])) == -5.0
    assert fit.__name__ == "neg_sphere"


def test_registry_builds_fitness_at_registration():
    bench = get_benchmark("SPHERE")
    assert bench.cost is sphere
    assert bench.fitness(np.array([1.0, 2.0])) == -5.0
    assert bench.bounds == (-5.12, 5.12)
    with pytest.raises(ValueError):
        get_benchmark("griewank")


def test_benchmark_block_and_success():
    bench = get_benchmark("rosenbrock")
    block = bench.block(3)
    assert block.parameter_count() == 3
    np.testing.assert_array_equal(block.lower_bounds(), [-5.0] * 3)
    np.testing.assert_array_equal(block.upper_bounds(), [10.0] * 3)
    assert bench.solved(0.5)
    assert not bench.solved(2.0)
    assert not Benchmark("flat", sphere, (0.0, 1.0)).solved(0.0)
    assert success_thresholds()["ackley"] == 1e-1


def test_register_rejects_duplicates_and_empty_boxes():
    with pytest.raises(ValueError):
        register("sphere", bounds=(-1.0, 1.0))(sphere)
    with pytest.raises(ValueError):
        Benchmark("inverted", sphere, (1.0, -1.0))


def test_run_seed_is_stable():
    assert run_seed(1, "sphere", 2, 0, "ring") == run_seed(1, "sphere", 2, 0, "ring")
    assert run_seed(1, "sphere", 2, 0, "ring") != run_seed(1, "sphere", 2, 1, "ring")


def test_optimize_reports_best_in_f_units():
    params = params_from_preset("QUICK_TEST", max_evaluations=200, max_stagnation=500)
    res = optimize(get_benchmark("sphere"), 2, params, np.random.default_rng(0))
    assert res["evals_used"] == 201
    assert res["best_f"] == pytest.approx(sphere(res["best_x"]))
    curve = res["gbest_curve"]
    assert len(curve) == 201
    assert np.all(np.diff(curve) <= 0)
    assert res["best_f"] == curve[-1]


@pytest.mark.parametrize("topology", ["ergodic", "ring", "star"])
def test_run_suite_writes_results(tmp_path, topology):
    params = params_from_preset("QUICK_TEST", max_evaluations=40)
    runs_csv, summary_csv = run_suite(
        outdir=tmp_path,
        dims=[2],
        runs=2,
        topology=topology,
        seed0=7,
        params=params,
        thresholds={"sphere": 1e-2, "ackley": None},
        functions=["sphere", "ackley"],
        log_evaluations=True,
    )
    runs = pd.read_csv(runs_csv)
    assert list(runs.columns) == RUN_COLUMNS
    assert len(runs) == 4
    assert set(runs["evals"]) == {41}
    assert (runs.loc[runs["func"] == "ackley", "success"] == 0).all()

    summary = pd.read_csv(summary_csv)
    assert set(summary["func"]) == {"sphere", "ackley"}
    assert "success_rate" in summary.columns

    assert (tmp_path / f"curves_{topology}" / "sphere_n2_run1.npy").exists()
    evals = pd.read_csv(tmp_path / f"evaluations_{topology}" / "ackley_n2_run0.csv")
    assert len(evals) == 41
    assert set(evals["func"]) == {"ackley"}


def test_run_suite_is_reproducible(tmp_path):
    params = params_from_preset("QUICK_TEST", max_evaluations=30)
    kw = dict(dims=[3], runs=1, topology="ring", seed0=3, params=params,
              thresholds={}, functions=["rastrigin"])
    a, _ = run_suite(outdir=tmp_path / "a", **kw)
    b, _ = run_suite(outdir=tmp_path / "b", **kw)
    assert pd.read_csv(a)["best_f"].tolist() == pd.read_csv(b)["best_f"].tolist()


def test_run_suite_validates_arguments(tmp_path):
    params = params_from_preset("QUICK_TEST")
    with pytest.raises(ValueError):
        run_suite(outdir=tmp_path, dims=[], runs=1, topology="ring", seed0=0,
                  params=params, thresholds={})
    with pytest.raises(ValueError):
        run_suite(outdir=tmp_path, dims=[2], runs=1, topology="ring", seed0=0,
                  params=params, thresholds={}, functions=["griewank"])
    assert set(BENCHMARKS) == {"sphere", "rosenbrock", "rastrigin", "ackley"}
