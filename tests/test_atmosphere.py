"""Tests for atmospheric analysis in solarlens.core.atmosphere."""

import jax.numpy as jnp
import numpy as np
import pytest

from solarlens.core.atmosphere import (
    ABSORPTION_LINES,
    absorption_depth,
    analyze_atmosphere,
    biosignature_score,
)
from solarlens.core.results import Atmosphere
from solarlens.core.spectrum import SpectralGrid


def with_dips(spectrum, grid, **dips):
    """Copy of a spectrum with absorption dips at the named lines' bins."""
    spectrum = np.array(spectrum, dtype=np.float32)
    wavelengths = {line.field: line.wavelength_nm for line in ABSORPTION_LINES}
    for field, value in dips.items():
        spectrum[grid.bin_at(wavelengths[field])] = value
    return jnp.asarray(spectrum)


class TestAbsorptionLines:
    """Tests for the absorption line table."""

    def test_line_order(self):
        """Lines are processed in a fixed order."""
        assert [line.molecule for line in ABSORPTION_LINES] == [
            "O2",
            "CH4",
            "H2O",
            "CO2",
            "N2",
        ]

    def test_fields_exist(self):
        """Every line targets an Atmosphere field."""
        atmosphere = Atmosphere()
        for line in ABSORPTION_LINES:
            assert hasattr(atmosphere, line.field)


class TestAbsorptionDepth:
    """Tests for the depth of a single line."""

    def test_half_depth(self):
        """A dip to half the continuum is 50 percent deep."""
        spectrum = jnp.ones(200).at[100].set(0.5)
        assert jnp.isclose(absorption_depth(spectrum, 100), 50.0)

    def test_continuum_is_mean_of_neighbours(self):
        """The continuum averages the bins ten either side."""
        spectrum = jnp.zeros(200).at[90].set(1.0).at[110].set(3.0).at[100].set(1.0)
        assert jnp.isclose(absorption_depth(spectrum, 100), 50.0)

    def test_emission_is_negative(self):
        """An emission line gives a negative depth."""
        spectrum = jnp.ones(200).at[100].set(1.5)
        assert jnp.isclose(absorption_depth(spectrum, 100), -50.0)

    def test_zero_continuum(self):
        """A dark continuum gives zero instead of dividing by zero."""
        spectrum = jnp.zeros(200).at[100].set(1.0)
        assert absorption_depth(spectrum, 100) == 0.0


class TestBiosignatureScore:
    """Tests for the biosignature decision table."""

    @pytest.mark.parametrize(
        "oxygen, methane, water, expected",
        [
            (2.0, 0.02, 0.0, 0.9),
            (2.0, 0.02, 5.0, 0.9),
            (2.0, 0.0, 0.5, 0.6),
            (0.5, 0.02, 0.5, 0.3),
            (0.0, 0.0, 0.2, 0.3),
            (2.0, 0.0, 0.0, 0.0),
            (0.0, 1.0, 0.0, 0.0),
            (1.0, 0.02, 0.1, 0.0),
        ],
    )
    def test_table(self, oxygen, methane, water, expected):
        """Scores follow oxygen+methane, oxygen+water, water, nothing."""
        assert biosignature_score(oxygen, methane, water) == expected


class TestAnalyzeAtmosphere:
    """Tests for the full atmospheric analysis."""

    def test_flat_spectrum(self, grid, flat_spectrum):
        """A featureless continuum has no absorption and no biosignature."""
        atmosphere = analyze_atmosphere(jnp.asarray(flat_spectrum), grid)
        assert atmosphere == Atmosphere()

    def test_depths_land_in_their_fields(self, grid, flat_spectrum):
        """Each line's depth is stored in its own field."""
        spectrum = with_dips(
            flat_spectrum, grid, oxygen=0.9, methane=0.8, water=0.7, co2=0.6, nitrogen=0.5
        )
        atmosphere = analyze_atmosphere(spectrum, grid)
        assert atmosphere.oxygen == pytest.approx(10.0, rel=1e-4)
        assert atmosphere.methane == pytest.approx(20.0, rel=1e-4)
        assert atmosphere.water == pytest.approx(30.0, rel=1e-4)
        assert atmosphere.co2 == pytest.approx(40.0, rel=1e-4)
        assert atmosphere.nitrogen == pytest.approx(50.0, rel=1e-4)

    def test_oxygen_methane(self, grid, flat_spectrum):
        """O2 at 2 percent with CH4 at 0.02 percent scores 0.9."""
        spectrum = with_dips(flat_spectrum, grid, oxygen=0.98, methane=0.9998)
        atmosphere = analyze_atmosphere(spectrum, grid)
        assert atmosphere.oxygen == pytest.approx(2.0, rel=1e-4)
        assert atmosphere.methane == pytest.approx(0.02, rel=1e-2)
        assert atmosphere.water == 0.0
        assert atmosphere.biosignature_score == 0.9

    def test_oxygen_water(self, grid, flat_spectrum):
        """O2 at 2 percent with H2O at 0.5 percent scores 0.6."""
        spectrum = with_dips(flat_spectrum, grid, oxygen=0.98, water=0.995)
        atmosphere = analyze_atmosphere(spectrum, grid)
        assert atmosphere.methane == 0.0
        assert atmosphere.water == pytest.approx(0.5, rel=1e-3)
        assert atmosphere.biosignature_score == 0.6

    def test_lines_near_edges_are_skipped(self):
        """Lines within the continuum offset of either end keep zero depth."""
        grid = SpectralGrid(n_bins=100, min_nm=755.0, max_nm=2400.0)
        spectrum = np.ones(100, dtype=np.float32)
        spectrum[grid.bin_at(760.0)] = 0.5
        spectrum[grid.bin_at(2300.0)] = 0.5
        atmosphere = analyze_atmosphere(jnp.asarray(spectrum), grid)
        assert atmosphere.oxygen == 0.0
        assert atmosphere.nitrogen == 0.0
