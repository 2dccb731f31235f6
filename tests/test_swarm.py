import numpy as np
import pytest

from pso_maxsat.config import ConfigurationError, PSOParams
from pso_maxsat.core import Swarm, pso_run
from pso_maxsat.run_logger import RunLogger


def params(**kw):
    base = dict(swarm_size=16, iters=10, topology="global", seed=5)
    base.update(kw)
    return PSOParams(**base)


def test_zero_iterations_reports_initial_bests(random_3sat):
    swarm = Swarm(random_3sat, params(iters=0, topology="ring"))
    initial = max(p.personal_best_fitness for p in swarm.particles)
    res = swarm.run()
    assert res.iterations == 0
    assert res.best_per_iteration.size == 0
    assert res.best_fitness == initial
    assert res.evals_used == 16


def test_global_first_iteration_is_swarm_max(random_3sat):
    swarm = Swarm(random_3sat, params(swarm_size=5, iters=1))
    res = swarm.run()
    assert res.best_per_iteration.shape == (1,)
    assert res.best_per_iteration[0] == max(p.personal_best_fitness for p in swarm.particles)
    assert res.best_fitness == res.best_per_iteration[0]


@pytest.mark.parametrize("topology,size", [("global", 8), ("ring", 8), ("von_neumann", 16), ("random", 8)])
def test_best_per_iteration_never_decreases(random_3sat, topology, size):
    res = pso_run(random_3sat, params(swarm_size=size, iters=25, topology=topology))
    curve = res.best_per_iteration
    assert curve.shape == (25,)
    assert np.all(np.diff(curve) >= 0)
    assert np.all((curve >= 0) & (curve <= 100))
    assert res.evals_used == size * 26
    assert res.best_probability.shape == (random_3sat.variables,)


def test_seeded_runs_repeat(random_3sat):
    a = pso_run(random_3sat, params(topology="random", iters=15))
    b = pso_run(random_3sat, params(topology="random", iters=15))
    np.testing.assert_array_equal(a.best_per_iteration, b.best_per_iteration)
    np.testing.assert_array_equal(a.best_probability, b.best_probability)


def test_injected_rng_overrides_seed(random_3sat):
    a = pso_run(random_3sat, params(seed=None), rng=np.random.default_rng(9))
    b = pso_run(random_3sat, params(seed=1), rng=np.random.default_rng(9))
    np.testing.assert_array_equal(a.best_per_iteration, b.best_per_iteration)


def test_neighbors_wired_once(random_3sat):
    swarm = Swarm(random_3sat, params(topology="ring", swarm_size=6))
    before = [list(p.neighbors) for p in swarm.particles]
    swarm.run(iterations=3)
    assert [p.neighbors for p in swarm.particles] == before
    assert before[0] == [5, 1, 0]


def test_legacy_pbest_vectors_stay_initial(random_3sat):
    swarm = Swarm(random_3sat, params(legacy_pbest=True))
    initial = [p.personal_best.copy() for p in swarm.particles]
    swarm.run()
    for p, v in zip(swarm.particles, initial):
        np.testing.assert_array_equal(p.personal_best, v)


def test_satisfiable_unit_clauses_reach_full_score(rng):
    from pso_maxsat.clauses import ClauseSet
    cs = ClauseSet.from_clauses([[1], [-2]], variables=2)
    res = pso_run(cs, params(iters=30), rng=rng)
    assert res.best_fitness == 100.0


@pytest.mark.parametrize("bad", [
    dict(topology="vn", swarm_size=20),
    dict(topology="star"),
    dict(topology=None),
    dict(swarm_size=0),
    dict(iters=-1),
    dict(topology="ring", swarm_size=1),
    dict(topology="random", swarm_size=4),
])
def test_bad_configuration_fails_before_running(random_3sat, bad):
    with pytest.raises(ConfigurationError):
        Swarm(random_3sat, params(**bad))


def test_clause_set_required():
    with pytest.raises(TypeError):
        Swarm([[1, 0]], params())


def test_logger_receives_each_iteration(random_3sat, tmp_path):
    logger = RunLogger(base_dir=tmp_path, filename="iters.csv")
    swarm = Swarm(random_3sat, params(iters=4))
    swarm.run(logger=logger, logger_metadata={"problem": "random"})
    rows = logger.rows
    assert [r["iteration"] for r in rows] == [1, 2, 3, 4]
    assert rows[0]["problem"] == "random"
    assert rows[0]["topology"] == "global"
    path = logger.flush()
    header = path.read_text().splitlines()[0].split(",")
    assert "best_fitness" in header and "mean_personal_best" in header


def test_verbose_progress(random_3sat, capsys):
    pso_run(random_3sat, params(iters=4, log_every=2), verbose=True)
    out = capsys.readouterr().out.splitlines()
    assert len(out) == 2
    assert out[0].startswith("Iter 2/4")

