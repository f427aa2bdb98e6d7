"""
Approximate relativistic corrections.

- Element-level perihelion precession for the secular updater
- Lorentz-factor scaling of accelerations (N-body integrator and trajectory planner)
- Perihelion precession as a rotation of the velocity vector (N-body mode)

Simplified models only; no full general-relativistic treatment.
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass, replace
from typing import Optional, Tuple

from solar_sim.core.constants import (
    ARCSEC_PER_DEGREE,
    AU_KM,
    C_M_S,
    MAX_BETA,
    MAX_LORENTZ_FACTOR,
    MERCURY_PRECESSION_ARCSEC_PER_CENTURY,
    RELATIVISTIC_MIN_SPEED_M_S,
    SOLAR_MASS_KG,
)
from solar_sim.core.frames import Vector3, cross, norm, normalize, rotate_about_axis
from solar_sim.physics.orbit import OrbitalElements, precession_per_orbit_rad

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class PrecessionState:
    """
    Relativistic bookkeeping for one body.

    rate_arcsec_per_century: precession rate, computed once on first use
    initial_argument_of_perihelion_deg: argument of perihelion when first seen
    cumulative_arcsec: precession accumulated at the last evaluated epoch
    """
    rate_arcsec_per_century: float
    initial_argument_of_perihelion_deg: float
    cumulative_arcsec: float = 0.0


def precession_rate_arcsec_per_century(elements: OrbitalElements) -> float:
    """
    Mercury's observed 43.03"/century scaled by 1/a (AU) and 1/(1 - e²).
    """
    a_au = elements.semi_major_axis_km / AU_KM
    e = elements.eccentricity
    return MERCURY_PRECESSION_ARCSEC_PER_CENTURY * (1.0 / a_au) * (1.0 / (1.0 - e * e))


def apply_relativistic_precession(
    elements: OrbitalElements,
    T: float,
    state: Optional[PrecessionState] = None,
) -> Tuple[OrbitalElements, PrecessionState]:
    """
    Set the argument of perihelion to its initial value plus rate * T.

    The cumulative precession is derived from the absolute epoch T on every
    call, so calling this twice at the same T gives the same result.

    Args:
        elements: Current elements
        T: Julian centuries since the reference epoch
        state: Previous bookkeeping, or None on first use

    Returns:
        (updated elements, updated bookkeeping)
    """
    if state is None:
        state = PrecessionState(
            rate_arcsec_per_century=precession_rate_arcsec_per_century(elements),
            initial_argument_of_perihelion_deg=elements.argument_of_perihelion_deg or 0.0,
        )

    cumulative = state.rate_arcsec_per_century * T
    state = replace(state, cumulative_arcsec=cumulative)
    argp = state.initial_argument_of_perihelion_deg + cumulative / ARCSEC_PER_DEGREE
    return replace(elements, argument_of_perihelion_deg=argp), state


def lorentz_factor(speed_m_s: float) -> float:
    """γ = 1/sqrt(1 - (v/c)²), with v/c capped below 1."""
    beta = min(abs(speed_m_s) / C_M_S, MAX_BETA)
    return 1.0 / math.sqrt(1.0 - beta * beta)


def correction_gamma(velocity_km_s: Vector3) -> Optional[float]:
    """
    Lorentz factor to divide an acceleration by, or None when no correction
    applies this tick (speed under 1 km/s, or γ above the stability limit).
    """
    speed_m_s = norm(velocity_km_s) * 1000.0
    if speed_m_s < RELATIVISTIC_MIN_SPEED_M_S:
        return None
    gamma = lorentz_factor(speed_m_s)
    if gamma > MAX_LORENTZ_FACTOR:
        logger.debug("Lorentz factor %.3f above %.1f, correction skipped", gamma, MAX_LORENTZ_FACTOR)
        return None
    return gamma


def precess_velocity(
    relative_position_km: Vector3,
    velocity_km_s: Vector3,
    elements: OrbitalElements,
    elapsed_s: float,
    central_mass_kg: float = SOLAR_MASS_KG,
) -> Vector3:
    """
    Rotate the velocity about the orbit normal by the perihelion advance for
    this tick (per-orbit advance times the fraction of a period elapsed).
    """
    angle = precession_per_orbit_rad(elements, central_mass_kg) * (elapsed_s / elements.orbital_period_s)
    if abs(angle) <= 1e-12:
        return velocity_km_s
    normal = normalize(cross(relative_position_km, velocity_km_s))
    if normal == (0.0, 0.0, 0.0):
        return velocity_km_s
    return rotate_about_axis(velocity_km_s, normal, angle)
