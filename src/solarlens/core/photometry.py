"""Point-source search and aperture photometry."""

import functools

import jax
import jax.numpy as jnp
from jaxtyping import Array

from solarlens import constants as const
from solarlens.core.results import Detection


def find_peak(image: Array, margin: int) -> tuple[Array, Array, Array]:
    """Brightest pixel of the image, ignoring a border of ``margin`` pixels.

    Returns:
        (y, x, value) of the first maximum in row-major order.
    """
    ny, nx = image.shape
    interior = image[margin : ny - margin, margin : nx - margin]
    iy, ix = jnp.unravel_index(jnp.argmax(interior), interior.shape)
    return iy + margin, ix + margin, interior[iy, ix]


def chebyshev_offsets(half_width: int) -> Array:
    """Chebyshev distance of each cell of a (2h+1)^2 cutout from its centre."""
    offsets = jnp.abs(jnp.arange(-half_width, half_width + 1))
    return jnp.maximum(offsets[:, None], offsets[None, :])


def aperture_stats(
    image: Array,
    y: Array,
    x: Array,
    aperture_half_width: int,
    annulus_inner: int,
    annulus_outer: int,
) -> tuple[Array, Array]:
    """Aperture sum and annulus RMS around a pixel.

    The aperture is the square of Chebyshev radius ``aperture_half_width``
    and the annulus holds every pixel whose Chebyshev distance lies in
    [annulus_inner, annulus_outer]. The annulus RMS is sqrt(sum(I^2) / N)
    over its N pixels. The full annulus must lie inside the image.

    Returns:
        (signal, noise)
    """
    size = 2 * annulus_outer + 1
    cutout = jax.lax.dynamic_slice(
        image, (y - annulus_outer, x - annulus_outer), (size, size)
    )
    distance = chebyshev_offsets(annulus_outer)

    in_aperture = distance <= aperture_half_width
    in_annulus = (distance >= annulus_inner) & (distance <= annulus_outer)

    signal = jnp.sum(jnp.where(in_aperture, cutout, 0.0))
    n_annulus = jnp.sum(in_annulus)
    noise = jnp.sqrt(jnp.sum(jnp.where(in_annulus, cutout**2, 0.0)) / n_annulus)
    return signal, noise


def exceeds_threshold(snr, threshold):
    """Detection rule: strictly above the threshold."""
    return snr > threshold


@functools.partial(
    jax.jit,
    static_argnames=[
        "margin",
        "aperture_half_width",
        "annulus_inner",
        "annulus_outer",
    ],
)
def detect_point_source(
    image: Array,
    spectrum: Array,
    doppler_shift: float,
    snr_threshold: float = 5.0,
    margin: int = 10,
    aperture_half_width: int = 2,
    annulus_inner: int = 6,
    annulus_outer: int = 10,
) -> Detection:
    """Locate the brightest interior source and measure its SNR.

    The spectral channel (``spectrum`` and ``doppler_shift``) is attached to
    the returned record. Inside the jit the Doppler shift becomes a float32
    array; callers that need the exact value should reattach it. A frame whose interior holds no positive
    pixel is reported as not found.

    Args:
        image: Processed image, shape (ny, nx).
        spectrum: Spectrum associated with the detection.
        doppler_shift: Doppler shift (v / c) associated with the detection.
        snr_threshold: Detection threshold in sigma.
        margin: Border excluded from the peak search. Must be at least
            ``annulus_outer`` so that the annulus stays inside the image.
        aperture_half_width: Chebyshev radius of the signal aperture.
        annulus_inner: Inner Chebyshev radius of the noise annulus.
        annulus_outer: Outer Chebyshev radius of the noise annulus.
    """
    y, x, peak = find_peak(image, margin)
    signal, noise = aperture_stats(
        image, y, x, aperture_half_width, annulus_inner, annulus_outer
    )
    snr = signal / (noise + const.eps)
    found = (peak > 0.0) & exceeds_threshold(snr, snr_threshold)

    return Detection(
        found=found,
        flux=signal,
        snr=snr,
        noise=noise,
        peak_y=y,
        peak_x=x,
        doppler_shift=jnp.asarray(doppler_shift),
        spectrum=spectrum,
    )
