"""Atmospheric absorption line analysis."""

from typing import NamedTuple

import jax.numpy as jnp
from jaxtyping import Array

from solarlens import constants as const
from solarlens.core.results import Atmosphere
from solarlens.core.spectrum import SpectralGrid


class AbsorptionLine(NamedTuple):
    """A molecular band and the Atmosphere field it fills."""

    wavelength_nm: float
    field: str
    molecule: str


ABSORPTION_LINES = (
    AbsorptionLine(760.0, "oxygen", "O2"),  # O2 A-band
    AbsorptionLine(1640.0, "methane", "CH4"),
    AbsorptionLine(940.0, "water", "H2O"),
    AbsorptionLine(2013.0, "co2", "CO2"),
    AbsorptionLine(2300.0, "nitrogen", "N2"),
)


def absorption_depth(spectrum: Array, bin_index: int, continuum_offset: int = 10):
    """Depth of an absorption dip in percent of the local continuum.

    The continuum is the mean of the bins ``continuum_offset`` either side
    of ``bin_index``. A vanishing continuum gives zero.
    """
    continuum = 0.5 * (
        spectrum[bin_index - continuum_offset] + spectrum[bin_index + continuum_offset]
    )
    valid = jnp.abs(continuum) > const.eps
    safe = jnp.where(valid, continuum, 1.0)
    return jnp.where(valid, (continuum - spectrum[bin_index]) / safe * 100.0, 0.0)


def biosignature_score(oxygen: float, methane: float, water: float) -> float:
    """Heuristic probability of life from absorption depths in percent.

    Oxygen with methane (chemical disequilibrium) scores highest, oxygen
    with water next, water alone lowest.
    """
    oxygen_present = oxygen > 1.0
    methane_present = methane > 0.01
    water_present = water > 0.1

    if oxygen_present and methane_present:
        return 0.9
    if oxygen_present and water_present:
        return 0.6
    if water_present:
        return 0.3
    return 0.0


def analyze_atmosphere(
    spectrum: Array, grid: SpectralGrid, continuum_offset: int = 10
) -> Atmosphere:
    """Measure every absorption line and score the biosignature.

    Lines whose bin lies within ``continuum_offset`` bins of either end of
    the spectrum are skipped and keep a depth of zero.
    """
    depths = {}
    for line in ABSORPTION_LINES:
        bin_index = grid.bin_at(line.wavelength_nm)
        if bin_index < continuum_offset or bin_index + continuum_offset >= grid.n_bins:
            continue
        depths[line.field] = float(
            absorption_depth(spectrum, bin_index, continuum_offset)
        )

    atmosphere = Atmosphere(**depths)
    atmosphere.biosignature_score = biosignature_score(
        atmosphere.oxygen, atmosphere.methane, atmosphere.water
    )
    return atmosphere
