"""
Tests for the termination policy: fixed iteration count, error threshold and pso_run.
"""

import numpy as np
import pytest

from scalar_pso.config import Direction, PSOParams, UpdateCoefficients
from scalar_pso.core import pso_run, run_iterations, run_until_threshold
from scalar_pso.errors import DimensionMismatch, EmptySwarm, InvalidObjectiveValue, NonConvergence
from scalar_pso.swarm import ParticleSwarm

from conftest import FixedRandom


COEFFS = UpdateCoefficients()


class TestFixedIterations:

    def test_runs_exact_count(self, f):
        swarm = ParticleSwarm.from_arrays(2, [0.2, 0.8], [0.0, 0.0], f, Direction.MINIMIZE)
        rng = FixedRandom([0.3])
        seen = []
        n = run_iterations(swarm, COEFFS, f, Direction.MINIMIZE, rng, 7,
                           on_iteration=lambda t, s: seen.append(t))
        assert n == 7
        assert seen == list(range(1, 8))
        assert rng.calls == 7 * 2 * 2

    def test_zero_iterations_leaves_swarm(self, f):
        swarm = ParticleSwarm.from_arrays(2, [0.2, 0.8], [0.1, 0.1], f, Direction.MINIMIZE)
        assert run_iterations(swarm, COEFFS, f, Direction.MINIMIZE, FixedRandom([0.0]), 0) == 0
        assert swarm.position.tolist() == [0.2, 0.8]

    def test_negative_rejected(self, f, zeros):
        swarm = ParticleSwarm.from_arrays(1, [0.2], [0.0], f, Direction.MINIMIZE)
        with pytest.raises(ValueError):
            run_iterations(swarm, COEFFS, f, Direction.MINIMIZE, zeros, -1)


class TestThreshold:

    def test_already_converged_takes_no_steps(self, f, zeros):
        swarm = ParticleSwarm.from_arrays(2, [0.0, 1.0], [3.0, 3.0], f, Direction.MINIMIZE)
        assert run_until_threshold(swarm, COEFFS, f, Direction.MINIMIZE, zeros, 1e-4) == 0
        assert swarm.position.tolist() == [0.0, 1.0]

    def test_converges_in_one_step(self, f, zeros):
        swarm = ParticleSwarm.from_arrays(1, [1.5], [-0.5], f, Direction.MINIMIZE)
        assert run_until_threshold(swarm, COEFFS, f, Direction.MINIMIZE, zeros, 1e-4) == 1
        assert swarm.global_best == 1.0

    def test_converges_after_several_steps(self, f, zeros):
        # constant velocity -2 with no pulls: 5 -> 3 -> 1
        swarm = ParticleSwarm.from_arrays(2, [5.0, -3.0], [-2.0, 0.0], f, Direction.MINIMIZE)
        seen = []
        t = run_until_threshold(swarm, COEFFS, f, Direction.MINIMIZE, zeros, 1e-4,
                                on_iteration=lambda i, s: seen.append(f(s.global_best)))
        assert t == 2
        assert seen == [4.0, 0.0]
        assert swarm.global_best == 1.0

    @pytest.mark.parametrize("seed", [0, 42])
    def test_seeded_run_from_far_positions(self, f, seed):
        rng = np.random.default_rng(seed)
        x0 = np.linspace(-10.0, 12.0, 50)
        swarm = ParticleSwarm.from_arrays(50, x0, np.zeros(50), f, Direction.MINIMIZE)
        assert f(swarm.global_best) > 1e-4
        t = run_until_threshold(swarm, COEFFS, f, Direction.MINIMIZE, rng, 1e-4, max_iters=10_000)
        assert t > 0
        assert f(swarm.global_best) <= 1e-4

    def test_cap_raises_non_convergence(self, zeros):
        flat = lambda x: 1.0
        swarm = ParticleSwarm.from_arrays(2, [0.0, 2.0], [0.1, -0.1], flat, Direction.MINIMIZE)
        with pytest.raises(NonConvergence) as exc:
            run_until_threshold(swarm, COEFFS, flat, Direction.MINIMIZE, zeros, 1e-4, max_iters=5)
        assert exc.value.iterations == 5
        assert exc.value.best_value == 1.0
        assert swarm.position.tolist() == pytest.approx([0.5, 1.5])

    def test_maximize_rejected(self, f, zeros):
        swarm = ParticleSwarm.from_arrays(1, [0.2], [0.0], f, Direction.MAXIMIZE)
        with pytest.raises(ValueError, match="minimization"):
            run_until_threshold(swarm, COEFFS, f, Direction.MAXIMIZE, zeros, 1e-4)

    @pytest.mark.parametrize("threshold", [0.0, -1.0, float("nan"), float("inf")])
    def test_bad_threshold(self, f, zeros, threshold):
        swarm = ParticleSwarm.from_arrays(1, [0.2], [0.0], f, Direction.MINIMIZE)
        with pytest.raises(ValueError):
            run_until_threshold(swarm, COEFFS, f, Direction.MINIMIZE, zeros, threshold)


class TestPSORun:

    def test_explicit_init_defaults_velocity_to_zero(self, f, zeros):
        res = pso_run(f, PSOParams(swarm_size=2, iters=3), zeros, init=[0.2, 0.8])
        assert res["swarm"].velocity.tolist() == [0.0, 0.0]
        assert res["best_x"] == 0.8
        assert res["best_f"] == pytest.approx(0.04)
        assert res["iters_run"] == 3
        assert len(res["gbest_curve"]) == 3

    def test_threshold_mode(self, f, zeros):
        res = pso_run(f, PSOParams(swarm_size=1), zeros, init=[1.5], vinit=[-0.5])
        assert res["converged"] is True
        assert res["iters_run"] == 1
        assert res["best_x"] == 1.0
        assert res["gbest_curve"].tolist() == [0.0]

    def test_random_init_seeded(self, f):
        params = PSOParams(swarm_size=5, iters=30, seed=3)
        a = pso_run(f, params, np.random.default_rng(params.seed))
        b = pso_run(f, params, np.random.default_rng(params.seed))
        assert a["best_x"] == b["best_x"]
        assert np.array_equal(a["gbest_curve"], b["gbest_curve"])

    def test_gbest_curve_never_worsens(self, f):
        res = pso_run(f, PSOParams(swarm_size=6, iters=50), np.random.default_rng(5))
        curve = res["gbest_curve"]
        assert np.all(np.diff(curve) <= 0)

    def test_on_start_sees_initial_swarm(self, f, zeros):
        seen = []
        pso_run(f, PSOParams(swarm_size=2, iters=1), zeros, init=[0.2, 0.8], vinit=[1.0, 1.0],
                on_start=lambda s: seen.append(s.position.tolist()))
        assert seen == [[0.2, 0.8]]

    def test_init_length_mismatch(self, f, zeros):
        with pytest.raises(DimensionMismatch):
            pso_run(f, PSOParams(swarm_size=2, iters=1), zeros, init=[0.1, 0.2, 0.3])

    def test_vinit_without_init(self, f, zeros):
        with pytest.raises(ValueError):
            pso_run(f, PSOParams(swarm_size=1, iters=1), zeros, vinit=[0.0])

    def test_empty_swarm(self, f, zeros):
        with pytest.raises(EmptySwarm):
            pso_run(f, PSOParams(swarm_size=0, iters=1), zeros)

    def test_nan_objective_is_not_reported_as_converged(self, zeros):
        g = lambda x: float("nan") if x < 0.5 else (x - 1.0) ** 2
        with pytest.raises(InvalidObjectiveValue):
            pso_run(g, PSOParams(swarm_size=2), zeros, init=[0.2, 0.9])

    def test_nan_after_move_never_becomes_best(self, zeros):
        g = lambda x: float("nan") if x > 2.0 else (x - 1.0) ** 2
        res = pso_run(g, PSOParams(swarm_size=1, iters=2), zeros, init=[1.5], vinit=[1.0])
        assert res["best_x"] == 1.5
        assert res["swarm"].position.tolist() == [3.5]

    def test_missing_swarm_size(self, f, zeros):
        with pytest.raises(ValueError, match="swarm_size"):
            pso_run(f, PSOParams(iters=1), zeros)


class TestUpdateCoefficients:

    def test_defaults(self):
        c = UpdateCoefficients()
        assert (c.cognitive, c.social) == (0.5, 0.5)

    @pytest.mark.parametrize("bad", [-0.1, float("nan"), float("inf")])
    def test_rejects_bad_values(self, bad):
        with pytest.raises(ValueError):
            UpdateCoefficients(cognitive=bad)

    def test_params_expose_coefficients(self):
        assert PSOParams(c1=1.0, c2=2.0).coefficients == UpdateCoefficients(1.0, 2.0)
