"""
Autopilot trajectory planning.

Open-loop forward simulation of a burn-and-coast flight from a start state to a
target under the combined gravity of a snapshot of bodies. The planner never
touches the bodies it is given; it works on its own copy of the ship state and
returns a path for the caller to display or apply.

Includes:
- Thrust steering (direct approach, gravity-assist blending, inertia blending)
- Fuel and travel-time estimates
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass
from typing import List, Optional, Protocol, Sequence

from solar_sim.core.frames import (
    ZERO,
    Vector3,
    add,
    angle_between,
    cross,
    distance,
    lerp,
    norm,
    normalize,
    scale,
    sub,
)
from solar_sim.physics.gravity import M_S2_TO_KM_S2, gravitational_acceleration, surface_gravity_m_s2
from solar_sim.physics.relativity import correction_gamma, lorentz_factor

logger = logging.getLogger(__name__)

# Gravity from bodies farther than this is ignored (km)
MAX_GRAVITY_RANGE_KM: float = 1e12
# A body dominates steering inside this multiple of its radius
INFLUENCE_RADIUS_FACTOR: float = 20.0
MAX_ASSIST_FACTOR: float = 0.6
ASSIST_GRAVITY_SCALE: float = 1e10
MAX_SWINGBY_SPEED_FACTOR: float = 0.8
SWINGBY_SPEED_SCALE_KM_S: float = 50.0
# Above this speed the current heading limits steering
INERTIA_MIN_SPEED_KM_S: float = 5.0
INERTIA_SPEED_SCALE_KM_S: float = 100.0
MAX_INERTIA_FACTOR: float = 0.9
# Thrust ramps down linearly inside this distance of the target (km)
THRUST_RAMP_DISTANCE_KM: float = 1e6
FUEL_RATE_COEFFICIENT: float = 0.0001

# estimates
MAX_FUEL_MASS_FRACTION: float = 0.2
FUEL_PER_KM_KG: float = 1e-8
MAX_CRUISE_SPEED_KM_S: float = 100.0
RELATIVISTIC_ESTIMATE_SPEED_KM_S: float = 10000.0


class GravitySource(Protocol):
    name: str
    position_km: Vector3
    mass_kg: float
    radius_km: float


@dataclass(frozen=True)
class TrajectoryResult:
    """Outcome of one planning call."""
    path: List[Vector3]
    estimated_time_s: float
    fuel_required: float
    success: bool
    steps: int = 0


@dataclass
class TrajectoryPlanner:
    """
    Fixed-step forward simulation used as a planning oracle.

    Termination is guaranteed by max_steps and max_flight_time_s.
    """
    max_steps: int = 2000
    time_step_s: float = 60.0
    max_path_points: int = 500
    max_burn_time_s: float = 600.0
    fuel_efficiency: float = 0.8
    max_acceleration_m_s2: float = 50.0
    arrival_tolerance_km: float = 10.0
    max_flight_time_s: float = 100000.0
    relativistic: bool = True

    def __post_init__(self):
        if self.max_steps <= 0:
            raise ValueError("max_steps must be positive.")
        if self.time_step_s <= 0:
            raise ValueError("time_step_s must be positive.")
        if self.max_path_points < 2:
            raise ValueError("max_path_points must be at least 2.")
        if not (0.0 < self.fuel_efficiency <= 1.0):
            raise ValueError(f"fuel_efficiency must be in range (0, 1]. Got: {self.fuel_efficiency}")
        if self.max_acceleration_m_s2 < 0:
            raise ValueError("max_acceleration_m_s2 must be non-negative.")
        if self.arrival_tolerance_km < 0:
            raise ValueError("arrival_tolerance_km must be non-negative.")

    @property
    def path_stride(self) -> int:
        # The start and final points are always recorded
        if self.max_path_points <= 2:
            return self.max_steps + 1
        return math.ceil(self.max_steps / (self.max_path_points - 2))

    def plan(
        self,
        start_km: Vector3,
        target_km: Vector3,
        start_velocity_km_s: Vector3,
        vehicle_mass_kg: float,
        bodies: Sequence[GravitySource],
    ) -> TrajectoryResult:
        """
        Simulate a flight toward target_km.

        Args:
            start_km: Start position (km)
            target_km: Target position (km)
            start_velocity_km_s: Initial velocity (km/s)
            vehicle_mass_kg: Ship mass (kg), scales fuel use
            bodies: Gravity sources; read only

        Returns:
            TrajectoryResult with a downsampled path. success is False when the
            step or flight-time budget runs out before arrival.
        """
        dt = self.time_step_s
        stride = self.path_stride

        position = start_km
        velocity = start_velocity_km_s
        path: List[Vector3] = [position]
        total_time = 0.0
        fuel = 0.0
        burn_remaining = self.max_burn_time_s
        success = False
        steps = 0
        recorded = 0

        for _ in range(self.max_steps):
            distance_to_target = distance(position, target_km)
            if distance_to_target < self.arrival_tolerance_km:
                success = True
                break

            accel = self.gravity_at(position, bodies)
            direction = self.thrust_direction(position, velocity, target_km, bodies)

            if burn_remaining > 0:
                distance_factor = min(1.0, distance_to_target / THRUST_RAMP_DISTANCE_KM)
                thrust_m_s2 = self.max_acceleration_m_s2 * distance_factor
                accel = add(accel, scale(direction, thrust_m_s2 * M_S2_TO_KM_S2))

                fuel_rate = thrust_m_s2 * vehicle_mass_kg * FUEL_RATE_COEFFICIENT * self.fuel_efficiency
                fuel += fuel_rate * dt
                burn_remaining -= dt

            if self.relativistic:
                gamma = correction_gamma(velocity)
                if gamma is not None:
                    accel = scale(accel, 1.0 / gamma)

            velocity = add(velocity, scale(accel, dt))
            position = add(position, scale(velocity, dt))
            steps += 1
            total_time += dt

            if steps % stride == 0:
                path.append(position)
                recorded = steps

            if distance(position, target_km) < self.arrival_tolerance_km:
                success = True
                break
            if total_time > self.max_flight_time_s:
                logger.debug("Flight time ceiling reached after %d steps", steps)
                break

        if recorded != steps:
            path.append(position)

        logger.info(
            "Trajectory plan %s: %d steps, %.0f s, fuel %.3f",
            "reached target" if success else "did not reach target",
            steps, total_time, fuel,
        )
        return TrajectoryResult(
            path=path,
            estimated_time_s=total_time,
            fuel_required=fuel,
            success=success,
            steps=steps,
        )

    def gravity_at(self, position_km: Vector3, bodies: Sequence[GravitySource]) -> Vector3:
        """Summed acceleration (km/s²); bodies out of range or enclosing the point are skipped."""
        total = ZERO
        for body in bodies:
            d = distance(position_km, body.position_km)
            if d > MAX_GRAVITY_RANGE_KM:
                continue
            total = add(total, gravitational_acceleration(
                position_km, body.position_km, body.mass_kg, min_distance_km=body.radius_km,
            ))
        return total

    def thrust_direction(
        self,
        position_km: Vector3,
        velocity_km_s: Vector3,
        target_km: Vector3,
        bodies: Sequence[GravitySource],
    ) -> Vector3:
        """
        Unit thrust direction.

        Starts from the straight line to the target. Near a dominant body it is
        blended toward a swing-by direction, more so at higher speed. Finally it
        is blended toward the current heading: the faster the ship, the less
        steering authority it has.
        """
        direction = normalize(sub(target_km, position_km))

        strongest: Optional[GravitySource] = None
        max_gravity = 0.0
        for body in bodies:
            d = distance(position_km, body.position_km)
            if 0.0 < d < body.radius_km * INFLUENCE_RADIUS_FACTOR:
                g = surface_gravity_m_s2(body.mass_kg, d)
                if g > max_gravity:
                    max_gravity = g
                    strongest = body

        if strongest is not None:
            gravity_dir = normalize(sub(strongest.position_km, position_km))
            # Only when approaching the body, not leaving it
            if angle_between(direction, gravity_dir) < math.pi / 2:
                swingby = normalize(cross(direction, gravity_dir))
                assist = min(MAX_ASSIST_FACTOR, max_gravity * ASSIST_GRAVITY_SCALE)
                speed_factor = min(MAX_SWINGBY_SPEED_FACTOR, norm(velocity_km_s) / SWINGBY_SPEED_SCALE_KM_S)
                direction = normalize(lerp(direction, swingby, assist * speed_factor))

        speed = norm(velocity_km_s)
        if speed > INERTIA_MIN_SPEED_KM_S:
            inertia = min(MAX_INERTIA_FACTOR, speed / INERTIA_SPEED_SCALE_KM_S)
            direction = normalize(lerp(direction, normalize(velocity_km_s), inertia))

        return direction

    def estimate_fuel_requirements(
        self,
        distance_km: float,
        ship_mass_kg: float,
        target_speed_km_s: float = 0.0,
    ) -> float:
        """
        Rough fuel estimate, capped at 20% of ship mass and scaled by the
        Lorentz factor for very high target speeds.
        """
        fuel = min(
            ship_mass_kg * MAX_FUEL_MASS_FRACTION,
            distance_km * ship_mass_kg * FUEL_PER_KM_KG / self.fuel_efficiency,
        )
        if target_speed_km_s > RELATIVISTIC_ESTIMATE_SPEED_KM_S:
            fuel *= lorentz_factor(target_speed_km_s * 1000.0)
        return fuel

    def estimate_travel_time(self, distance_km: float, initial_speed_km_s: float = 0.0) -> float:
        """
        Travel time (s) at an average speed capped at 100 km/s. Above
        10000 km/s the result is the traveller's proper time.
        """
        if distance_km <= 0:
            return 0.0
        avg_speed = max(abs(initial_speed_km_s), min(MAX_CRUISE_SPEED_KM_S, distance_km / 1000.0))
        travel_time = distance_km / avg_speed
        if avg_speed > RELATIVISTIC_ESTIMATE_SPEED_KM_S:
            travel_time /= lorentz_factor(avg_speed * 1000.0)
        return travel_time

