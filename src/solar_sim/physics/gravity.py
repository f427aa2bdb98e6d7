# Newtonian point-mass gravity shared by the N-body integrator and the trajectory planner

from __future__ import annotations

from solar_sim.core.constants import G_SI
from solar_sim.core.frames import ZERO, Vector3, norm, scale, sub

M_S2_TO_KM_S2: float = 1e-3


def gravitational_acceleration(
    position_km: Vector3,
    source_position_km: Vector3,
    source_mass_kg: float,
    min_distance_km: float = 0.0,
) -> Vector3:
    """
    Acceleration (km/s²) at position_km due to a point mass.

    Magnitude is G*m / d² with d in meters. Inside min_distance_km (overlapping
    bodies, or a point inside a body's radius) the contribution is zero instead
    of an unbounded spike.

    Args:
        position_km: Where the acceleration is evaluated (km)
        source_position_km: Attracting body position (km)
        source_mass_kg: Attracting body mass (kg)
        min_distance_km: Separation below which the pair is skipped (km)

    Returns:
        Acceleration vector (km/s²)
    """
    d_vec = sub(source_position_km, position_km)
    d_km = norm(d_vec)
    if d_km == 0.0 or d_km < min_distance_km:
        return ZERO

    d_m = d_km * 1000.0
    accel_m_s2 = G_SI * source_mass_kg / (d_m * d_m)
    return scale(d_vec, accel_m_s2 * M_S2_TO_KM_S2 / d_km)


def surface_gravity_m_s2(mass_kg: float, distance_km: float) -> float:
    d_m = distance_km * 1000.0
    return G_SI * mass_kg / (d_m * d_m)
