from __future__ import annotations

import math
from dataclasses import dataclass
from enum import Enum

from solar_sim.core.constants import SECONDS_PER_DAY
from solar_sim.core.frames import ZERO, Quaternion, Vector3, quat_from_axis_angle, quat_multiply
from solar_sim.physics.kepler import wrap_to_2pi
from solar_sim.physics.orbit import axial_tilt


class BodyRole(Enum):
    """How a body's position is propagated in Keplerian mode."""
    CENTRAL = "central"    # the star: fixed reference, no orbital elements
    ORBITING = "orbiting"  # propagated from its orbital elements


@dataclass
class CelestialBody:
    """
    A simulated body, including the central star.

    Physical constants are fixed after construction. Position, velocity and
    spin angle are written only by the active propagation mode.
    """
    name: str
    mass_kg: float
    radius_km: float
    rotation_period_days: float
    obliquity_deg: float = 0.0

    position_km: Vector3 = ZERO
    velocity_km_s: Vector3 = ZERO
    spin_angle_rad: float = 0.0
    role: BodyRole = BodyRole.ORBITING

    def __post_init__(self):
        if not self.name.strip():
            raise ValueError("Body name cannot be empty or whitespace.")
        if not (self.mass_kg > 0):
            raise ValueError(f"Mass must be positive. Got: {self.mass_kg}")
        if not (self.radius_km >= 0):
            raise ValueError(f"Radius must be non-negative. Got: {self.radius_km}")
        if not (self.rotation_period_days > 0):
            raise ValueError(f"Rotation period must be positive. Got: {self.rotation_period_days}")
        if not math.isfinite(self.obliquity_deg):
            raise ValueError(f"Obliquity must be finite. Got: {self.obliquity_deg}")

    @property
    def is_retrograde(self) -> bool:
        return self.obliquity_deg > 90.0

    def spin(self, elapsed_s: float) -> None:
        """Rotate about the body's own axis for elapsed_s."""
        rate = 2.0 * math.pi / (self.rotation_period_days * SECONDS_PER_DAY)
        direction = -1.0 if self.is_retrograde else 1.0
        self.spin_angle_rad = wrap_to_2pi(self.spin_angle_rad + rate * elapsed_s * direction)

    def orientation(self) -> Quaternion:
        """Axial tilt composed with the current spin about the body's y axis."""
        return quat_multiply(
            axial_tilt(self.obliquity_deg),
            quat_from_axis_angle((0.0, 1.0, 0.0), self.spin_angle_rad),
        )
