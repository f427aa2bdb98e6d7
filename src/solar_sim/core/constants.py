from __future__ import annotations

# Universal gravitational constant in m^3 kg^-1 s^-2 (CODATA 2018)
G_SI: float = 6.6743e-11

# Speed of light in m/s
C_M_S: float = 299792458.0

# Astronomical unit in km (IAU 2012)
AU_KM: float = 149597870.7

# Solar mass in kg, used when no central body is registered
SOLAR_MASS_KG: float = 1.989e30

SECONDS_PER_DAY: float = 86400.0
DAYS_PER_CENTURY: float = 36525.0
ARCSEC_PER_DEGREE: float = 3600.0

# Julian Date of the J2000.0 epoch (2000-01-01 12:00 TT)
J2000_JD: float = 2451545.0

# Observed relativistic perihelion advance of Mercury (arcsec/century)
MERCURY_PRECESSION_ARCSEC_PER_CENTURY: float = 43.03

# Kepler solver
KEPLER_TOLERANCE: float = 1e-8
KEPLER_MAX_ITERATIONS: int = 30

# Relativistic corrections are skipped below this speed (m/s)
RELATIVISTIC_MIN_SPEED_M_S: float = 1000.0
# ... and above this Lorentz factor
MAX_LORENTZ_FACTOR: float = 2.0
# Velocity precession nudge only inside this multiple of the semi-major axis
PRECESSION_RADIUS_FACTOR: float = 1.5
# Upper bound on v/c when a Lorentz factor must stay finite
MAX_BETA: float = 0.9999

# Bodies whose obliquity lies within this band of 90 deg get the sideways spin convention
NEAR_POLAR_OBLIQUITY_BAND_DEG: float = 30.0
