"""Tests for priors and likelihood functions."""

import math

import pytest
import numpy as np
from numpy.testing import assert_allclose

from csgw.observables.datasets import LISADataset, PTADataset
from csgw.observables.likelihoods import (
    PosteriorTarget,
    gaussian_log_likelihood,
    log_likelihood_lisa,
    log_likelihood_pta,
    log_posterior,
    upper_limit_log_likelihood,
)
from csgw.sampling.priors import (
    LOG_GMU_RANGE,
    LOG_P_RANGE,
    UniformPrior,
    default_string_priors,
    log_prior,
)
from csgw.spectrum import SpectrumModel


@pytest.fixture
def loose_pta():
    """Five bins with limits far above any model prediction."""
    return PTADataset(
        frequencies=np.logspace(-9, -8, 5),
        upper_limits=np.ones(5),
        errors=0.2 * np.ones(5),
        name="Loose PTA",
    )


class CountingModel(SpectrumModel):
    """Spectrum model that counts evaluations."""

    def __init__(self, *args, value=None, **kwargs):
        super().__init__(*args, **kwargs)
        self.calls = 0
        self.value = value

    def omega_gw(self, f, Gmu, P):
        self.calls += 1
        if self.value is not None:
            return self.value
        return super().omega_gw(f, Gmu, P)


class TestPriors:
    """Tests for the flat log-box prior."""

    def test_inside(self):
        assert log_prior(1e-11, -2.0) == 0.0

    def test_closed_corners(self):
        assert log_prior(1e-15, -4.0) == 0.0
        assert log_prior(1e-6, 0.0) == 0.0

    def test_just_outside(self):
        assert log_prior(1e-6 * (1 + 1e-12), -2.0) == -np.inf
        assert log_prior(1e-11, np.nextafter(0.0, 1.0)) == -np.inf
        assert log_prior(1e-11, np.nextafter(-4.0, -5.0)) == -np.inf

    def test_one_ulp_outside_log_tension(self):
        assert log_prior(10.0 ** np.nextafter(-6.0, 0.0), -2.0) == -np.inf
        assert log_prior(10.0 ** np.nextafter(-15.0, -16.0), -2.0) == -np.inf

    @pytest.mark.parametrize("Gmu", [0.0, -1e-11, float("nan")])
    def test_non_positive_tension(self, Gmu):
        assert log_prior(Gmu, -2.0) == -np.inf

    def test_default_bounds(self):
        priors = default_string_priors()
        assert priors.param_names == ["log10_Gmu", "logP"]
        bounds = [(p.low, p.high) for p in priors.priors.values()]
        assert bounds == [LOG_GMU_RANGE, LOG_P_RANGE]

    def test_uniform_prior_invalid(self):
        with pytest.raises(ValueError):
            UniformPrior(1.0, 1.0)


class TestUpperLimit:
    """Tests for the one-sided Gaussian term."""

    def test_below_limit(self):
        assert upper_limit_log_likelihood(0.5, 1.0, 0.1) == 0.0

    def test_at_limit(self):
        assert upper_limit_log_likelihood(1.0, 1.0, 0.1) == 0.0

    def test_above_limit(self):
        assert_allclose(upper_limit_log_likelihood(1.2, 1.0, 0.1), -2.0)

    @pytest.mark.parametrize("sigma", [0.0, -0.1])
    def test_invalid_sigma(self, sigma):
        assert upper_limit_log_likelihood(0.5, 1.0, sigma) == -np.inf

    def test_gaussian_one_sigma(self):
        assert_allclose(gaussian_log_likelihood(1.1, 1.0, 0.1), -0.5)


class TestPTALikelihood:
    """Tests for the summed PTA likelihood."""

    @pytest.mark.parametrize("Gmu, logP", [(1e-15, -4.0), (1e-11, -2.0), (1e-6, 0.0)])
    def test_loose_limits_give_zero(self, loose_pta, Gmu, logP):
        assert log_likelihood_pta(Gmu, logP, loose_pta) == 0.0

    def test_exceeded_limits(self):
        model = CountingModel(value=3.0)
        pta = PTADataset([1e-9, 2e-9], [1.0, 1.0], [1.0, 2.0])
        # -½(2/1)² - ½(2/2)²
        assert_allclose(log_likelihood_pta(1e-11, -2.0, pta, model), -2.5)
        assert model.calls == 2

    def test_zero_error_bin(self):
        pta = PTADataset([1e-9], [1.0], [0.0])
        assert log_likelihood_pta(1e-11, -2.0, pta) == -np.inf

    def test_accepts_mapping(self, loose_pta):
        data = {
            "frequencies": loose_pta.frequencies,
            "upper_limits": loose_pta.upper_limits,
            "errors": loose_pta.errors,
        }
        assert log_likelihood_pta(1e-11, -2.0, data) == 0.0


class TestLISALikelihood:
    """Tests for the LISA Gaussian term."""

    def test_absent(self):
        assert log_likelihood_lisa(1e-11, -2.0, None) == 0.0

    def test_one_sigma_residual(self):
        model = CountingModel(value=1.1e-12)
        lisa = LISADataset([1e-3], [1e-12], [1e-13])
        assert_allclose(log_likelihood_lisa(1e-11, -2.0, lisa, model), -0.5)

    def test_non_positive_sigma_skipped(self):
        model = CountingModel(value=5.0)
        lisa = LISADataset([1e-3, 2e-3], [1.0, 1.0], [0.0, -1.0])
        assert log_likelihood_lisa(1e-11, -2.0, lisa, model) == 0.0
        assert model.calls == 0


class TestPosterior:
    """Tests for the combined log-posterior."""

    def test_outside_prior_skips_model(self, loose_pta):
        model = CountingModel()
        assert log_posterior(1e-5, -2.0, loose_pta, model) == -np.inf
        assert log_posterior(1e-11, 0.5, loose_pta, model) == -np.inf
        assert model.calls == 0

    def test_inside_prior(self, loose_pta):
        assert log_posterior(1e-11, -2.0, loose_pta) == 0.0

    def test_invalid_pta_error(self):
        pta = PTADataset([1e-9], [1.0], [0.0])
        assert log_posterior(1e-11, -2.0, pta) == -np.inf

    def test_lisa_only_when_enabled(self, loose_pta):
        model = CountingModel(value=1.1e-12)
        lisa = LISADataset([1e-3], [1e-12], [1e-13])
        assert log_posterior(1e-11, -2.0, loose_pta, model, lisa=lisa) == 0.0
        assert_allclose(
            log_posterior(1e-11, -2.0, loose_pta, model, lisa=lisa, use_lisa=True),
            -0.5,
        )

    def test_target_matches_function(self, loose_pta):
        target = PosteriorTarget(loose_pta, physics={"Nk": 10})
        assert target.physics.Nk == 10
        assert target(1e-11, -2.0) == log_posterior(1e-11, -2.0, loose_pta, {"Nk": 10})
        assert target(1e-16, -2.0) == -np.inf
        assert math.isinf(target(1e-11, -5.0))
