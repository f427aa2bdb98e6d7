# src/solar_sim/physics/orbit.py

from __future__ import annotations

import math
from dataclasses import dataclass, replace
from typing import List, Optional, Tuple

from solar_sim.core.constants import (
    C_M_S,
    G_SI,
    NEAR_POLAR_OBLIQUITY_BAND_DEG,
    SECONDS_PER_DAY,
    SOLAR_MASS_KG,
)
from solar_sim.core.frames import (
    Quaternion,
    Vector3,
    orbital_plane_to_inertial,
    quat_from_axis_angle,
    quat_multiply,
)
from solar_sim.physics.kepler import (
    TWO_PI,
    solve_keplers_equation,
    true_anomaly_from_eccentric,
    wrap_to_2pi,
)


@dataclass(frozen=True)
class OrbitalElements:
    """
    Heliocentric orbital elements of one body.

    Units:
        semi_major_axis_km: semi-major axis in km
        eccentricity: 0 <= e < 1
        inclination_deg: inclination in degrees
        ascending_node_deg: longitude of ascending node in degrees
        argument_of_perihelion_deg: argument of perihelion in degrees
        mean_anomaly_rad: mean anomaly in radians, kept in [0, 2π)
        orbital_period_days: sidereal period in days
        semi_minor_axis_km: derived, filled by initialize_elements
    """
    semi_major_axis_km: float
    eccentricity: float
    orbital_period_days: float
    inclination_deg: float = 0.0
    ascending_node_deg: Optional[float] = None
    argument_of_perihelion_deg: Optional[float] = None
    mean_anomaly_rad: float = 0.0
    semi_minor_axis_km: Optional[float] = None

    def __post_init__(self):
        if not (self.semi_major_axis_km > 0):
            raise ValueError("Semi-major axis must be positive.")
        if not (0.0 <= self.eccentricity < 1.0):
            raise ValueError(f"Eccentricity must be in range [0, 1). Got: {self.eccentricity}")
        if not (self.orbital_period_days > 0):
            raise ValueError(f"Orbital period must be positive. Got: {self.orbital_period_days}")
        if not (0.0 <= self.inclination_deg <= 180.0):
            raise ValueError(f"Inclination must be in range [0, 180] degrees. Got: {self.inclination_deg}")
        if self.ascending_node_deg is not None and not math.isfinite(self.ascending_node_deg):
            raise ValueError(f"Ascending node must be finite. Got: {self.ascending_node_deg}")
        if self.argument_of_perihelion_deg is not None and not math.isfinite(self.argument_of_perihelion_deg):
            raise ValueError(f"Argument of perihelion must be finite. Got: {self.argument_of_perihelion_deg}")
        if not math.isfinite(self.mean_anomaly_rad):
            raise ValueError(f"Mean anomaly must be finite. Got: {self.mean_anomaly_rad}")

    @property
    def orbital_period_s(self) -> float:
        return self.orbital_period_days * SECONDS_PER_DAY

    @property
    def mean_motion_rad_s(self) -> float:
        return TWO_PI / self.orbital_period_s


def initialize_elements(elements: OrbitalElements) -> OrbitalElements:
    """
    Fill the fields a freshly registered body may leave out: semi-minor axis
    and the two orientation angles (0 when absent).
    """
    b = elements.semi_minor_axis_km
    if not b:
        e = elements.eccentricity
        b = elements.semi_major_axis_km * math.sqrt(1.0 - e * e)
    return replace(
        elements,
        semi_minor_axis_km=b,
        ascending_node_deg=elements.ascending_node_deg or 0.0,
        argument_of_perihelion_deg=elements.argument_of_perihelion_deg or 0.0,
    )


def advance_mean_anomaly(elements: OrbitalElements, elapsed_s: float) -> OrbitalElements:
    M = elements.mean_anomaly_rad + elements.mean_motion_rad_s * elapsed_s
    return replace(elements, mean_anomaly_rad=wrap_to_2pi(M))


def precession_per_orbit_rad(elements: OrbitalElements, central_mass_kg: float = SOLAR_MASS_KG) -> float:
    """Δω = 6πGM / (c² a (1 - e²)) per revolution."""
    a_m = elements.semi_major_axis_km * 1000.0
    e = elements.eccentricity
    return (6.0 * math.pi * G_SI * central_mass_kg) / (C_M_S * C_M_S * a_m * (1.0 - e * e))


def relativistic_precession_angle(
    elements: OrbitalElements,
    elapsed_s: float,
    central_mass_kg: float = SOLAR_MASS_KG,
) -> float:
    """Perihelion advance over elapsed_s, as a fraction of the per-orbit advance."""
    fraction_of_orbit = elapsed_s / elements.orbital_period_s
    return precession_per_orbit_rad(elements, central_mass_kg) * fraction_of_orbit


def _plane_to_inertial(elements: OrbitalElements, v_plane: Vector3) -> Vector3:
    return orbital_plane_to_inertial(
        v_plane,
        math.radians(elements.ascending_node_deg or 0.0),
        math.radians(elements.inclination_deg),
        math.radians(elements.argument_of_perihelion_deg or 0.0),
    )


def position_at(
    elements: OrbitalElements,
    elapsed_s: float,
    central_mass_kg: float = SOLAR_MASS_KG,
) -> Tuple[Vector3, OrbitalElements]:
    """
    Advance the mean anomaly by elapsed_s and return the heliocentric position.

    The relativistic perihelion advance for this interval is added to the true
    anomaly before the plane rotation. It is separate from, and in addition to,
    the element-level precession applied by the secular updater.

    Returns:
        (r_km, advanced elements)
    """
    advanced = advance_mean_anomaly(elements, elapsed_s)
    e = advanced.eccentricity

    E = solve_keplers_equation(advanced.mean_anomaly_rad, e)
    nu = true_anomaly_from_eccentric(E, e)
    nu += relativistic_precession_angle(advanced, elapsed_s, central_mass_kg)

    r_km = advanced.semi_major_axis_km * (1.0 - e * math.cos(E))
    r_plane: Vector3 = (r_km * math.cos(nu), r_km * math.sin(nu), 0.0)
    return _plane_to_inertial(advanced, r_plane), advanced


def state_vector(
    elements: OrbitalElements,
    central_mass_kg: float = SOLAR_MASS_KG,
) -> Tuple[Vector3, Vector3]:
    """
    Two-body position (km) and velocity (km/s) for the current mean anomaly.
    Used to seed bodies at registration.
    """
    mu_km3_s2 = G_SI * central_mass_kg / 1e9
    a = elements.semi_major_axis_km
    e = elements.eccentricity

    E = solve_keplers_equation(elements.mean_anomaly_rad, e)
    nu = true_anomaly_from_eccentric(E, e)
    r_km = a * (1.0 - e * math.cos(E))

    p = a * (1.0 - e * e)
    h = math.sqrt(mu_km3_s2 * p)  # specific angular momentum
    r_plane: Vector3 = (r_km * math.cos(nu), r_km * math.sin(nu), 0.0)
    v_plane: Vector3 = (
        -mu_km3_s2 / h * math.sin(nu),
        mu_km3_s2 / h * (e + math.cos(nu)),
        0.0,
    )
    return _plane_to_inertial(elements, r_plane), _plane_to_inertial(elements, v_plane)


def orbit_outline(elements: OrbitalElements, segments: int = 256) -> List[Vector3]:
    """Closed ellipse for the current elements, sampled by true anomaly."""
    a = elements.semi_major_axis_km
    e = elements.eccentricity
    points: List[Vector3] = []
    for j in range(segments + 1):
        theta = j / segments * TWO_PI
        r = a * (1.0 - e * e) / (1.0 + e * math.cos(theta))
        points.append(_plane_to_inertial(elements, (r * math.cos(theta), r * math.sin(theta), 0.0)))
    return points


def axial_tilt(obliquity_deg: float) -> Quaternion:
    """
    Body orientation from its obliquity: a tilt about the z axis. Bodies lying
    on their side (obliquity near 90 deg, e.g. Uranus) get an extra quarter
    turn about x for their sideways spin convention.
    """
    q = quat_from_axis_angle((0.0, 0.0, 1.0), math.radians(obliquity_deg))
    if abs(obliquity_deg - 90.0) < NEAR_POLAR_OBLIQUITY_BAND_DEG:
        q = quat_multiply(q, quat_from_axis_angle((1.0, 0.0, 0.0), math.pi / 2))
    return q
