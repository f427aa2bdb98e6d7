"""
Direct-summation N-body integrator.

Every ordered pair contributes a Newtonian acceleration; all accelerations are
computed from the pre-step snapshot before any body is moved. Bodies are then
advanced with semi-implicit (symplectic) Euler: velocity first, then position
from the new velocity.

Complexity is O(N²) per step, which is fine for a planetary system.
"""

from __future__ import annotations

import logging
from typing import List, Mapping, Optional, Sequence

from solar_sim.core.constants import PRECESSION_RADIUS_FACTOR
from solar_sim.core.frames import ZERO, Vector3, add, distance, scale, sub
from solar_sim.objects.celestial_body import CelestialBody
from solar_sim.physics.gravity import gravitational_acceleration
from solar_sim.physics.orbit import OrbitalElements
from solar_sim.physics.relativity import correction_gamma, precess_velocity

logger = logging.getLogger(__name__)


def compute_accelerations(bodies: Sequence[CelestialBody]) -> List[Vector3]:
    """
    Acceleration (km/s²) on each body from all others. Pairs closer than the
    sum of their radii contribute nothing.
    """
    accelerations: List[Vector3] = [ZERO] * len(bodies)
    for i, body_i in enumerate(bodies):
        total = ZERO
        for j, body_j in enumerate(bodies):
            if i == j:
                continue
            contact_km = body_i.radius_km + body_j.radius_km
            if distance(body_i.position_km, body_j.position_km) < contact_km:
                logger.debug("%s and %s overlap, pair skipped", body_i.name, body_j.name)
                continue
            total = add(total, gravitational_acceleration(
                body_i.position_km, body_j.position_km, body_j.mass_kg,
            ))
        accelerations[i] = total
    return accelerations


def apply_relativistic_corrections(
    bodies: Sequence[CelestialBody],
    accelerations: List[Vector3],
    elapsed_s: float,
    elements: Mapping[str, OrbitalElements],
    central: Optional[CelestialBody] = None,
) -> None:
    """
    Divide each fast body's acceleration by its Lorentz factor and, close to the
    central body, nudge its velocity direction by the perihelion advance for
    this step. Bodies under 1 km/s or with γ > 2 are left alone.
    """
    for i, body in enumerate(bodies):
        gamma = correction_gamma(body.velocity_km_s)
        if gamma is None:
            continue
        accelerations[i] = scale(accelerations[i], 1.0 / gamma)

        if central is None or body is central:
            continue
        el = elements.get(body.name)
        if el is None:
            continue
        if distance(body.position_km, central.position_km) < el.semi_major_axis_km * PRECESSION_RADIUS_FACTOR:
            body.velocity_km_s = precess_velocity(
                sub(body.position_km, central.position_km),
                sub(body.velocity_km_s, central.velocity_km_s),
                el,
                elapsed_s,
                central.mass_kg,
            )
            # precess_velocity works in the central body's frame
            body.velocity_km_s = add(body.velocity_km_s, central.velocity_km_s)


def step(
    bodies: Sequence[CelestialBody],
    elapsed_s: float,
    elements: Optional[Mapping[str, OrbitalElements]] = None,
    central: Optional[CelestialBody] = None,
    relativistic: bool = False,
) -> None:
    """
    Advance all bodies by elapsed_s.

    Args:
        bodies: Bodies to integrate (mutated in place)
        elapsed_s: Step size (s)
        elements: Orbital elements by body name, for the precession nudge
        central: Central body, for the precession nudge
        relativistic: Apply Lorentz and precession corrections
    """
    if elapsed_s <= 0 or not bodies:
        return

    accelerations = compute_accelerations(bodies)

    if relativistic:
        apply_relativistic_corrections(bodies, accelerations, elapsed_s, elements or {}, central)

    for body, accel in zip(bodies, accelerations):
        body.velocity_km_s = add(body.velocity_km_s, scale(accel, elapsed_s))
        body.position_km = add(body.position_km, scale(body.velocity_km_s, elapsed_s))
        body.spin(elapsed_s)
