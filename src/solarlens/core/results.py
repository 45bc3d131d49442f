"""Records produced by the detection pipeline."""

from dataclasses import asdict, dataclass, field

import equinox as eqx
from jaxtyping import Array


class Detection(eqx.Module):
    """Outcome of the point-source search on one processed image.

    Lives only for the duration of a single pipeline invocation. The
    Doppler shift and spectrum belong to the spectral channel and are
    carried through untouched.
    """

    found: Array
    flux: Array  # summed intensity in the aperture
    snr: Array
    noise: Array  # annulus RMS
    peak_y: Array
    peak_x: Array
    doppler_shift: Array  # v / c
    spectrum: Array


@dataclass
class Atmosphere:
    """Molecular absorption depths in percent and a biosignature score."""

    oxygen: float = 0.0
    methane: float = 0.0
    water: float = 0.0
    co2: float = 0.0
    nitrogen: float = 0.0
    biosignature_score: float = 0.0


@dataclass
class PlanetData:
    """Physical characterization of a detected planet.

    All numeric fields stay at zero and ``detected`` stays False when the
    pipeline finds no point source.
    """

    detected: bool = False
    # SNR / 10, not clamped to 1
    confidence: float = 0.0
    radius_earth: float = 0.0
    orbital_radius_au: float = 0.0
    temperature_kelvin: float = 0.0
    albedo: float = 0.0
    in_habitable_zone: bool = False
    atmosphere: Atmosphere = field(default_factory=Atmosphere)

    def as_dict(self) -> dict:
        """Flat mapping with atmosphere fields prefixed by ``atmosphere_``."""
        data = asdict(self)
        atmosphere = data.pop("atmosphere")
        data.update({f"atmosphere_{key}": value for key, value in atmosphere.items()})
        return data
