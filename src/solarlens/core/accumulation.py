"""Photon accumulation on the detector."""

import jax
import jax.numpy as jnp
from jaxtyping import Array


def photon_noise(signal: Array, dark_current_rate: float, integration_time_s: float) -> Array:
    """Closed-form noise magnitude of an integrated signal.

    Shot noise of the signal plus dark current, sqrt(S + D * t). This is an
    estimate of the noise amplitude, not a random draw.

    Args:
        signal: Integrated signal in electrons.
        dark_current_rate: Dark current rate in electrons/s/pixel.
        integration_time_s: Integration time in seconds.

    Returns:
        Noise magnitude in electrons.
    """
    return jnp.sqrt(signal + dark_current_rate * integration_time_s)


@jax.jit
def accumulate_photons(
    frame: Array, integration_time_s: float, dark_current_rate: float
) -> Array:
    """Convert a sensor frame of counts into a raw image.

    Args:
        frame: Unsigned 16-bit photon counts, shape (ny, nx).
        integration_time_s: Integration time in seconds, strictly positive.
        dark_current_rate: Dark current rate in electrons/s/pixel.

    Returns:
        Float32 raw image, signal plus its noise magnitude.
    """
    signal = frame.astype(jnp.float32) * integration_time_s
    return signal + photon_noise(signal, dark_current_rate, integration_time_s)
