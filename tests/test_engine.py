"""Engine behaviour on noise-only data."""
import numpy as np
import pytest

from posthoc_bias.config import InvalidConfiguration, SimulationConfig
from posthoc_bias.simulator.engine import (
    RolloutResult,
    SimulationOutput,
    draw_measurements,
    run_rollout,
    run_simulation,
    summarize_extrema,
)


@pytest.mark.parametrize("rollouts", [1, 7, 250])
def test_output_length(rollouts):
    cfg = SimulationConfig(rollout_count=rollouts)
    out = run_simulation(cfg)
    assert isinstance(out, SimulationOutput)
    assert len(out) == rollouts
    assert out.means.shape == (rollouts,)
    assert out.stds.shape == (rollouts,)
    assert all(isinstance(r, RolloutResult) for r in out)


def test_measurement_shape_and_scale():
    cfg = SimulationConfig(subjects_count=400, trials_count=50, noise_std=0.05)
    m = draw_measurements(cfg, np.random.default_rng(1))
    assert m.shape == (400, 50)
    assert abs(m.mean()) < 0.005
    assert np.isclose(m.std(), 0.05, rtol=0.05)


def test_sample_std_convention():
    r = summarize_extrema([1.0, 2.0, 3.0, 4.0])
    assert r.mean_across_subjects == pytest.approx(2.5)
    assert r.std_across_subjects == pytest.approx(np.std([1, 2, 3, 4], ddof=1))
    assert r.std_across_subjects == pytest.approx(1.2909944487)


def test_single_subject_has_zero_std():
    out = run_simulation(SimulationConfig(subjects_count=1, rollout_count=10))
    assert np.all(out.stds == 0.0)


def test_rollout_matches_manual_computation():
    cfg = SimulationConfig(subjects_count=4, trials_count=3, noise_std=0.2)
    manual_rng = np.random.default_rng(11)
    m = 0.2 * manual_rng.standard_normal((4, 3))
    result = run_rollout(cfg, np.random.default_rng(11))
    assert result.mean_across_subjects == pytest.approx(m.min(axis=1).mean())
    assert result.std_across_subjects == pytest.approx(m.min(axis=1).std(ddof=1))


def test_reproducible_with_same_seed():
    cfg = SimulationConfig(rollout_count=300, seed=7)
    a = run_simulation(cfg)
    b = run_simulation(cfg)
    assert a.rollouts == b.rollouts
    c = run_simulation(cfg, rng=np.random.default_rng(7))
    assert np.array_equal(a.means, c.means)


def test_different_seeds_differ():
    a = run_simulation(SimulationConfig(rollout_count=50, seed=1))
    b = run_simulation(SimulationConfig(rollout_count=50, seed=2))
    assert not np.array_equal(a.means, b.means)


def test_rollouts_are_independent_draws():
    out = run_simulation(SimulationConfig(rollout_count=100))
    assert len(np.unique(out.means)) == 100


def test_vanishing_noise_gives_zero_effect():
    out = run_simulation(SimulationConfig(noise_std=1e-12, rollout_count=100))
    assert np.all(np.abs(out.means) < 1e-10)


def test_single_trial_is_unbiased():
    cfg = SimulationConfig(subjects_count=8, trials_count=1, noise_std=0.05, rollout_count=4000, seed=3)
    means = run_simulation(cfg).means
    expected_spread = 0.05 / np.sqrt(8)
    assert abs(means.mean()) < 4 * expected_spread / np.sqrt(4000)
    assert np.isclose(means.std(ddof=1), expected_spread, rtol=0.1)


def test_more_trials_more_negative():
    one = run_simulation(SimulationConfig(trials_count=1, rollout_count=2000, seed=4)).means.mean()
    seven = run_simulation(SimulationConfig(trials_count=7, rollout_count=2000, seed=4)).means.mean()
    assert seven < one
    assert seven < -0.05


def test_maximum_policy_mirrors_minimum():
    mins = run_simulation(SimulationConfig(rollout_count=200, seed=8)).means
    maxs = run_simulation(SimulationConfig(rollout_count=200, seed=8, selection="maximum")).means
    assert np.all(maxs > 0)
    assert np.all(mins < 0)
    assert np.isclose(maxs.mean(), -mins.mean(), rtol=0.15)


def test_default_study_shows_spurious_reduction():
    cfg = SimulationConfig(seed=2020)
    means = run_simulation(cfg).means
    assert len(means) == 10000
    # E[min of 7 standard normals] is about -1.352, times 5 % noise
    assert -0.075 < means.mean() < -0.06
    assert np.mean(means <= -0.0468) > 0.5
    assert np.mean(means <= -0.147) < 0.001


def test_invalid_configuration_before_sampling():
    class ExplodingRng:
        def standard_normal(self, *args, **kwargs):
            raise AssertionError("sampled with an invalid configuration")

    with pytest.raises(InvalidConfiguration):
        run_simulation(SimulationConfig(subjects_count=0), rng=ExplodingRng())
