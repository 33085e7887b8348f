"""Per-subject extremum policies."""
import numpy as np
import pytest

from posthoc_bias.config import InvalidConfiguration, SimulationConfig
from posthoc_bias.simulator.engine import draw_measurements
from posthoc_bias.simulator.selection import (
    available_policies,
    get_policy,
    register_policy,
    select_extremum,
)


def test_builtin_policies_registered():
    assert available_policies() == ["maximum", "minimum"]


def test_unknown_policy():
    with pytest.raises(InvalidConfiguration, match="minimum"):
        get_policy("best")


def test_duplicate_registration():
    with pytest.raises(KeyError):
        register_policy("minimum")(lambda m: m[:, 0])


def test_minimum_picks_row_minimum():
    m = np.array([[0.3, -0.2, 0.1], [0.05, 0.0, 0.4]])
    assert np.allclose(select_extremum(m), [-0.2, 0.0])
    assert np.allclose(select_extremum(m, "maximum"), [0.3, 0.4])


@pytest.mark.parametrize("selection", ["minimum", "maximum"])
def test_extremum_bounds_every_draw_and_is_sampled(selection):
    cfg = SimulationConfig(subjects_count=8, trials_count=7, selection=selection)
    rng = np.random.default_rng(5)
    for _ in range(20):
        m = draw_measurements(cfg, rng)
        extrema = select_extremum(m, selection)
        assert extrema.shape == (8,)
        for i in range(8):
            if selection == "minimum":
                assert np.all(extrema[i] <= m[i])
            else:
                assert np.all(extrema[i] >= m[i])
            assert extrema[i] in m[i]


def test_single_trial_extremum_is_the_draw():
    cfg = SimulationConfig(trials_count=1)
    m = draw_measurements(cfg, np.random.default_rng(0))
    assert np.array_equal(select_extremum(m), m[:, 0])


def test_rejects_non_matrix():
    with pytest.raises(ValueError):
        select_extremum(np.array([1.0, 2.0]))
