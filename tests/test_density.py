"""Tests for the 2D KDE and credible levels."""

import pytest
import numpy as np
from numpy.testing import assert_allclose

from csgw.analysis.density import CredibleLevels, find_credible_levels, kde_2d


@pytest.fixture
def samples():
    rng = np.random.default_rng(0)
    log_gmu = rng.normal(-11.0, 0.3, 500)
    logP = rng.normal(-2.0, 0.4, 500)
    return np.column_stack([10.0**log_gmu, logP])


class TestKDE:
    """Tests for kde_2d."""

    def test_grid_shape_and_sign(self, samples):
        kde = kde_2d(samples, grid_size=30, bandwidth=0.2)
        assert kde.density_grid.shape == (30, 30)
        assert np.all(kde.density_grid >= 0)

    def test_bounds_are_extrema_plus_bandwidth(self, samples):
        h = 0.15
        kde = kde_2d(samples, grid_size=20, bandwidth=h)
        log_gmu = np.log10(samples[:, 0])
        assert kde.log_gmu_min == log_gmu.min() - h
        assert kde.log_gmu_max == log_gmu.max() + h
        assert kde.log_p_min == samples[:, 1].min() - h
        assert kde.log_p_max == samples[:, 1].max() + h
        assert kde.log_gmu_axis[0] == kde.log_gmu_min
        assert kde.log_gmu_axis[-1] == kde.log_gmu_max
        assert kde.log_p_axis[-1] == kde.log_p_max

    def test_integrates_to_about_one(self, samples):
        kde = kde_2d(samples, grid_size=60, bandwidth=0.2)
        dx = kde.log_gmu_axis[1] - kde.log_gmu_axis[0]
        dy = kde.log_p_axis[1] - kde.log_p_axis[0]
        # Only the mass within one bandwidth of the extrema is on the grid
        assert 0.8 < kde.density_grid.sum() * dx * dy < 1.05

    def test_single_sample_peak(self):
        h = 0.2
        kde = kde_2d(np.array([[1e-11, -2.0]]), grid_size=3, bandwidth=h)
        assert_allclose(kde.density_grid[1, 1], 1.0 / (2 * np.pi * h**2), rtol=1e-9)
        assert kde.density_grid.argmax() == 4

    def test_grid_records_order(self, samples):
        kde = kde_2d(samples, grid_size=4, bandwidth=0.2)
        records = kde.grid
        assert len(records) == 16
        # logP is the outer loop
        assert records[0]["logP"] == records[3]["logP"]
        assert records[0]["logGmu"] < records[1]["logGmu"]
        assert records[4]["logP"] > records[0]["logP"]
        assert records[5]["density"] == kde.density_grid[1, 1]

    def test_dict_samples(self):
        dicts = [{"Gmu": 1e-11, "logP": -2.0}, {"Gmu": 2e-11, "logP": -1.5}]
        arr = np.array([[1e-11, -2.0], [2e-11, -1.5]])
        assert_allclose(
            kde_2d(dicts, grid_size=10).density_grid,
            kde_2d(arr, grid_size=10).density_grid,
        )

    def test_to_dict_keys(self, samples):
        d = kde_2d(samples, grid_size=5).to_dict()
        assert {"grid", "logGmuMin", "logGmuMax", "logPMin", "logPMax", "gridSize", "bandwidth"} <= set(d)

    @pytest.mark.parametrize("kwargs", [{"grid_size": 1}, {"bandwidth": 0.0}, {"bandwidth": -0.1}])
    def test_invalid_arguments(self, samples, kwargs):
        with pytest.raises(ValueError):
            kde_2d(samples, **kwargs)

    def test_no_samples(self):
        with pytest.raises(ValueError, match="at least one sample"):
            kde_2d(np.empty((0, 2)))


class TestCredibleLevels:
    """Tests for find_credible_levels."""

    def test_small_grid(self):
        levels = find_credible_levels([[4.0, 3.0], [2.0, 1.0]])
        assert levels == CredibleLevels(level68=3.0, level95=1.0)

    def test_ordering(self, samples):
        levels = find_credible_levels(kde_2d(samples, grid_size=40))
        assert levels.level68 >= levels.level95 > 0

    def test_mass_enclosed(self, samples):
        kde = kde_2d(samples, grid_size=40)
        levels = find_credible_levels(kde)
        grid = kde.density_grid
        total = grid.sum()
        assert grid[grid >= levels.level68].sum() / total >= 0.68
        assert grid[grid >= levels.level95].sum() / total >= 0.95

    def test_zero_grid(self):
        assert find_credible_levels(np.zeros((5, 5))) == CredibleLevels(0.0, 0.0)

    def test_empty_grid(self):
        assert find_credible_levels(np.zeros((0, 0))) == CredibleLevels(0.0, 0.0)

    def test_custom_levels(self):
        levels = find_credible_levels([[4.0, 3.0], [2.0, 1.0]], level_a=0.3, level_b=0.5)
        assert levels.to_dict() == {"level68": 4.0, "level95": 3.0}
