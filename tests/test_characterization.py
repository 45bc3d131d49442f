"""Tests for physical parameter estimation in solarlens.core.characterization."""

import jax.numpy as jnp
import numpy as np
import pytest

from solarlens import constants as const
from solarlens.core.characterization import (
    estimate_albedo,
    estimate_orbital_radius,
    estimate_radius,
    estimate_temperature,
    in_habitable_zone,
)


class TestEstimateRadius:
    """Tests for the reflected-flux radius inversion."""

    def test_known_flux(self):
        """Radius follows d * sqrt(4 pi F / (A L)) in Earth radii."""
        flux = 1e6
        expected = (
            10.0 * const.ly2m * np.sqrt(4 * np.pi * flux / (0.3 * const.L_sun))
        ) / const.Rearth2m
        assert float(estimate_radius(flux)) == pytest.approx(expected, rel=1e-4)

    def test_scales_with_sqrt_flux(self):
        """Four times the flux doubles the radius."""
        ratio = estimate_radius(4e5) / estimate_radius(1e5)
        assert jnp.isclose(ratio, 2.0, rtol=1e-5)

    def test_large_flux_is_finite(self):
        """Bright sources do not overflow single precision."""
        assert jnp.isfinite(estimate_radius(jnp.float32(1e9)))

    def test_non_positive_flux(self):
        """Zero or negative flux gives a zero radius."""
        assert estimate_radius(0.0) == 0.0
        assert estimate_radius(-10.0) == 0.0


class TestEstimateTemperature:
    """Tests for the Wien's law temperature estimate."""

    def test_single_peak(self, grid):
        """A peak at bin 103 (500.59 nm) gives about 5787 K."""
        spectrum = jnp.zeros(grid.n_bins).at[103].set(1.0)
        expected = 2.897e-3 / (grid.wavelength_at(103) * 1e-9)
        assert float(estimate_temperature(spectrum, grid)) == pytest.approx(
            expected, rel=1e-5
        )

    def test_first_peak_wins(self, grid):
        """Equal maxima resolve to the shortest wavelength."""
        spectrum = jnp.zeros(grid.n_bins).at[500].set(2.0).at[1500].set(2.0)
        expected = 2.897e-3 / (grid.wavelength_at(500) * 1e-9)
        assert float(estimate_temperature(spectrum, grid)) == pytest.approx(
            expected, rel=1e-5
        )

    def test_empty_spectrum(self, grid):
        """A spectrum without positive samples gives zero."""
        assert estimate_temperature(jnp.zeros(grid.n_bins), grid) == 0.0


class TestEstimateAlbedo:
    """Tests for the radiative balance albedo."""

    def test_radiative_balance(self):
        """albedo = 1 - sigma T^4 / S at 1 AU."""
        temperature = 278.6
        incident = const.L_sun / (4 * np.pi * const.AU2m**2)
        expected = 1.0 - const.sigma_SB * temperature**4 / incident
        assert float(estimate_albedo(temperature)) == pytest.approx(expected, rel=1e-4)

    def test_hot_planet_is_negative(self):
        """Emission above the insolation gives a negative albedo, kept as is."""
        assert estimate_albedo(1000.0) < 0.0

    def test_zero_temperature(self):
        """No temperature estimate gives a zero albedo."""
        assert estimate_albedo(0.0) == 0.0


class TestEstimateOrbitalRadius:
    """Tests for the Keplerian orbit inversion."""

    def test_earth_like_velocity(self):
        """A 1e-4 shift (30 km/s) is just inside 1 AU."""
        v = 1e-4 * const.c
        expected = const.G * const.M_sun / v**2 / const.AU2m
        assert float(estimate_orbital_radius(1e-4)) == pytest.approx(expected, rel=1e-4)
        assert float(estimate_orbital_radius(1e-4)) == pytest.approx(0.987, abs=1e-3)

    def test_sign_independent(self):
        """Approaching and receding shifts give the same orbit."""
        assert jnp.isclose(estimate_orbital_radius(-2e-4), estimate_orbital_radius(2e-4))

    def test_zero_shift(self):
        """No Doppler shift gives zero rather than infinity."""
        assert estimate_orbital_radius(0.0) == 0.0


class TestHabitableZone:
    """Tests for the habitable zone check."""

    @pytest.mark.parametrize(
        "radius_au, expected",
        [(1.0, True), (1.2, True), (0.95, False), (1.37, False), (0.5, False)],
    )
    def test_sun_like(self, radius_au, expected):
        """Bounds are exclusive, 0.95 to 1.37 AU around one solar luminosity."""
        assert bool(in_habitable_zone(radius_au)) is expected

    def test_scales_with_luminosity(self):
        """A four times brighter star doubles both bounds."""
        assert bool(in_habitable_zone(2.0, luminosity=4.0))
        assert not bool(in_habitable_zone(1.0, luminosity=4.0))
