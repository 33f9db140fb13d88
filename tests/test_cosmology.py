"""Tests for the cosmology lookup table and its cache."""

import threading

import pytest
import numpy as np
from numpy.testing import assert_allclose

from csgw.cosmology import (
    CosmologyCache,
    CosmologyTable,
    DEFAULT_CACHE,
    build_cosmology_table,
    hubble_rate,
)
from csgw.utils.constants import SI_UNITS, BACKGROUND


class TestBuildCosmologyTable:
    """Tests for build_cosmology_table."""

    @pytest.fixture
    def table(self):
        return build_cosmology_table(z_max=10.0, nz=600)

    def test_array_lengths(self, table):
        """All arrays share the grid length."""
        for arr in (table.z, table.t, table.dtdz, table.H):
            assert arr.shape == (600,)

    def test_grid_endpoints(self, table):
        """Grid runs from 0 to z_max."""
        assert table.z[0] == 0.0
        assert_allclose(table.z[-1], 10.0)

    def test_z_strictly_increasing(self, table):
        assert np.all(np.diff(table.z) > 0)

    def test_age_strictly_decreasing(self, table):
        """The universe is younger at higher redshift."""
        assert np.all(np.diff(table.t) < 0)

    def test_age_today(self, table):
        """t(0) = 2/(3H₀) in the closed-form approximation."""
        assert_allclose(table.t[0], 2.0 / (3.0 * SI_UNITS.H0))

    def test_hubble_today(self, table):
        """H(0) = H₀ for a flat background."""
        expected = SI_UNITS.H0 * np.sqrt(BACKGROUND.Omega_m + BACKGROUND.Omega_Lambda)
        assert_allclose(table.H[0], expected)

    def test_dtdz_relation(self, table):
        """|dt/dz| = 1/(H (1+z))."""
        assert_allclose(table.dtdz, 1.0 / (table.H * (1.0 + table.z)))

    def test_matter_scaling_at_high_z(self):
        """H ∝ (1+z)^(3/2) once matter dominates."""
        z = np.array([100.0, 200.0])
        H = hubble_rate(z)
        assert_allclose(H[1] / H[0], (201.0 / 101.0) ** 1.5, rtol=1e-4)

    def test_interpolators_clamp(self, table):
        """Lookups outside [0, z_max] clamp to the boundary values."""
        assert table.t_at(-1.0) == table.t[0]
        assert table.t_at(50.0) == table.t[-1]
        assert table.H_at(0.0) == table.H[0]

    def test_arrays_read_only(self, table):
        with pytest.raises(ValueError):
            table.t[0] = 0.0

    def test_invalid_nz(self):
        with pytest.raises(ValueError, match="nz"):
            build_cosmology_table(z_max=10.0, nz=1)

    def test_invalid_z_max(self):
        with pytest.raises(ValueError, match="z_max"):
            build_cosmology_table(z_max=0.0, nz=10)


class TestCosmologyCache:
    """Tests for the single-slot cache."""

    def test_same_key_returns_identical_table(self):
        """A repeated key returns the cached object without rebuilding."""
        cache = CosmologyCache()
        first = cache.build(10.0, 600)
        second = cache.build(10.0, 600)
        assert first is second
        assert cache.n_builds == 1

    def test_new_key_replaces_slot(self):
        """A different key rebuilds and evicts the old table."""
        cache = CosmologyCache()
        first = cache.build(10.0, 600)
        other = cache.build(8.0, 600)
        assert other is not first
        assert cache.key == (8.0, 600)

        again = cache.build(10.0, 600)
        assert again is not first
        assert cache.n_builds == 3

    def test_clear(self):
        cache = CosmologyCache()
        cache.build(5.0, 50)
        cache.clear()
        assert cache.key is None

    def test_independent_caches(self):
        """Separately owned caches do not interfere."""
        a, b = CosmologyCache(), CosmologyCache()
        a.build(10.0, 100)
        b.build(5.0, 100)
        assert a.key == (10.0, 100)
        assert b.key == (5.0, 100)

    def test_concurrent_same_key(self):
        """Threads requesting one key share a single build."""
        cache = CosmologyCache()
        tables = []

        def worker():
            tables.append(cache.build(10.0, 200))

        threads = [threading.Thread(target=worker) for _ in range(8)]
        for t in threads:
            t.start()
        for t in threads:
            t.join()

        assert cache.n_builds == 1
        assert all(t is tables[0] for t in tables)

    def test_default_cache_type(self):
        assert isinstance(DEFAULT_CACHE, CosmologyCache)
        assert isinstance(DEFAULT_CACHE.build(10.0, 600), CosmologyTable)
