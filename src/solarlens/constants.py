"""Physical constants and unit conversions for solarlens."""

import jax.numpy as jnp

# Mathematical constants
four_pi = 4 * jnp.pi
eps = 1e-10  # guard added to denominators that may vanish

# Physical constants
G = 6.67430e-11  # Gravitational constant in m^3 / (kg s^2)
c = 299792458.0  # Speed of light in m/s
h = 6.62607015e-34  # Planck constant in J⋅s
k_B = 1.380649e-23  # Boltzmann constant in J/K
sigma_SB = 5.67e-8  # Stefan-Boltzmann constant in W⋅m^-2⋅K^-4
wien_b = 2.897e-3  # Wien displacement constant in m⋅K

# Solar parameters
M_sun = 1.98847e30  # kg
R_sun = 6.95700e8  # m
L_sun = 3.828e26  # W
T_sun = 5778.0  # K

# Earth
Rearth2m = 6.371e6  # Earth radii to meters

# Length conversions
nm2m = 1e-9  # nanometers to meters
m2nm = 1e9  # meters to nanometers
km2m = 1e3  # kilometers to meters

# Distance conversions
AU2m = 1.495978707e11  # AU to meters
m2AU = 1.0 / AU2m  # meters to AU
ly2m = 9.4607304725808e15  # light years to meters
pc2m = 3.0857e16  # parsecs to meters

# Angular conversions
rad2mas = 206265000.0  # radians to milliarcseconds (Rayleigh convention)

# Solar corona electron density model
corona_n_e = 1e8  # electrons/cm^3
plasma_freq_coeff = 8.98e3  # Hz per sqrt(electrons/cm^3)

# Mission parameters
focal_min_AU = 547.8  # Minimum focal distance
focal_optimal_AU = 650.0  # Optimal for visible light
focal_max_AU = 900.0  # Maximum useful distance
