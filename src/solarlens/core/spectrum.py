"""Linear wavelength grid of the spectral channel."""

import equinox as eqx


class SpectralGrid(eqx.Module):
    """Fixed-length spectrum spanning [min_nm, max_nm) with linear bins."""

    n_bins: int
    min_nm: float
    max_nm: float

    def __init__(self, n_bins: int = 2048, min_nm: float = 400.0, max_nm: float = 2400.0):
        """Initialize the spectral grid."""
        self.n_bins = n_bins
        self.min_nm = min_nm
        self.max_nm = max_nm

    @property
    def bin_width_nm(self) -> float:
        """Width of a single bin in nanometers."""
        return (self.max_nm - self.min_nm) / self.n_bins

    def wavelength_at(self, bin_index):
        """Wavelength in nm at the lower edge of a bin."""
        return self.min_nm + bin_index * self.bin_width_nm

    def bin_at(self, wavelength_nm: float) -> int:
        """Index of the bin containing a wavelength (floor).

        Values outside the grid map to indices outside [0, n_bins); callers
        are responsible for bounds checks.
        """
        return int((wavelength_nm - self.min_nm) * self.n_bins // (self.max_nm - self.min_nm))
