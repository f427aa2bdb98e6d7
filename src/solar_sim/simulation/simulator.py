"""
Tick orchestration for the solar system.

One tick: the clock yields elapsed simulated seconds, every body's secular
elements are re-evaluated for the new epoch, then exactly one propagation mode
(Keplerian or N-body) moves the bodies.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import Callable, List, Optional

from solar_sim.core.astro_time import AstronomicalClock, wall_clock_ms
from solar_sim.core.constants import SECONDS_PER_DAY, SOLAR_MASS_KG
from solar_sim.core.frames import ZERO, Quaternion, Vector3, add, scale, sub
from solar_sim.objects.celestial_body import BodyRole, CelestialBody
from solar_sim.physics import nbody
from solar_sim.physics.orbit import OrbitalElements, orbit_outline, position_at, state_vector
from solar_sim.physics.secular import update_orbital_elements
from solar_sim.physics.trajectory import TrajectoryPlanner, TrajectoryResult
from solar_sim.simulation.solar_system import SolarSystem

logger = logging.getLogger(__name__)


class SimulationMode(Enum):
    KEPLERIAN = "keplerian"
    N_BODY = "n_body"


@dataclass(frozen=True)
class BodyState:
    """Read-only view of one body for visualization and planning."""
    name: str
    position_km: Vector3
    velocity_km_s: Vector3
    mass_kg: float
    radius_km: float
    orientation: Quaternion


class SolarSystemSimulation:
    """
    Owns the clock and the body registry and advances them together.

    Toggles (mode, relativistic effects, time scale) take effect on the next tick.
    """

    def __init__(
        self,
        name: str = "Solar System",
        initial_date: Optional[datetime] = None,
        mode: SimulationMode = SimulationMode.N_BODY,
        relativistic_effects: bool = True,
        time_source: Callable[[], float] = wall_clock_ms,
    ):
        self.clock = AstronomicalClock(initial_date, time_source=time_source)
        self.system = SolarSystem(name=name)
        self.mode = mode
        self.relativistic_effects = relativistic_effects
        self._warned_no_central = False

    # --- registry -------------------------------------------------------

    def add_body(self, body: CelestialBody, elements: Optional[OrbitalElements] = None) -> None:
        """
        Register a body. Bodies with elements are brought to the current epoch
        and placed on their orbit around the central body.
        """
        self.system.add_body(body, elements)
        if body.role is BodyRole.ORBITING:
            self._update_elements(body.name)
            r, v = state_vector(self.system.elements[body.name], self.central_mass_kg)
            central = self.system.central
            if central is not None:
                r = add(central.position_km, r)
                v = add(central.velocity_km_s, v)
            body.position_km = r
            body.velocity_km_s = v
        logger.info("Registered %s (%s)", body.name, body.role.value)

    def remove_body(self, name: str) -> bool:
        removed = self.system.remove_body(name)
        if removed:
            logger.info("Removed %s", name)
        return removed

    def get_body(self, name: str) -> Optional[CelestialBody]:
        return self.system.get_body(name)

    def bodies(self) -> List[CelestialBody]:
        return self.system.body_list()

    def elements_of(self, name: str) -> Optional[OrbitalElements]:
        body = self.system.get_body(name)
        if body is None:
            return None
        return self.system.elements.get(body.name)

    @property
    def central_mass_kg(self) -> float:
        central = self.system.central
        if central is None:
            if not self._warned_no_central:
                logger.warning("No central body registered; using solar mass %.4g kg", SOLAR_MASS_KG)
                self._warned_no_central = True
            return SOLAR_MASS_KG
        return central.mass_kg

    # --- toggles and time -----------------------------------------------

    def set_mode(self, mode: SimulationMode) -> None:
        self.mode = mode
        logger.info("Propagation mode set to %s", mode.value)

    def set_relativistic_effects(self, enable: bool) -> None:
        """
        Toggle the element-level perihelion precession and the N-body Lorentz
        and precession corrections.

        Keplerian mode is not affected: the per-step perihelion advance added
        to the true anomaly in position_at always applies.
        """
        self.relativistic_effects = enable
        logger.info("Relativistic effects %s", "enabled" if enable else "disabled")

    def set_time_scale(self, factor: float) -> None:
        self.clock.set_time_scale(factor)

    @property
    def time_scale(self) -> float:
        return self.clock.time_scale

    @property
    def julian_date(self) -> float:
        return self.clock.julian_date

    @property
    def date(self) -> datetime:
        return self.clock.date

    @property
    def formatted_date(self) -> str:
        return self.clock.formatted_date

    def set_date(self, date: datetime) -> None:
        self.clock.set_date(date)
        for name in list(self.system.elements):
            self._update_elements(name)
        logger.info("Simulation date set to %s", self.clock.formatted_date)

    # --- stepping -------------------------------------------------------

    def tick(self, now_ms: Optional[float] = None, mode: Optional[SimulationMode] = None) -> float:
        """
        Advance by the scaled wall-clock time since the previous tick.

        Returns:
            Elapsed simulated seconds (0 if time did not advance)
        """
        elapsed_s = self.clock.advance(now_ms)
        if elapsed_s <= 0:
            return 0.0
        self.step(elapsed_s, mode)
        return elapsed_s

    def advance_seconds(self, elapsed_s: float, mode: Optional[SimulationMode] = None) -> None:
        """Advance by a fixed amount of simulated time, ignoring the wall clock."""
        if elapsed_s <= 0:
            return
        self.clock.advance_by_days(elapsed_s / SECONDS_PER_DAY)
        self.step(elapsed_s, mode)

    def step(self, elapsed_s: float, mode: Optional[SimulationMode] = None) -> None:
        if elapsed_s <= 0:
            return
        mode = mode or self.mode
        for name in list(self.system.elements):
            self._update_elements(name)

        if mode is SimulationMode.KEPLERIAN:
            self._step_keplerian(elapsed_s)
        else:
            nbody.step(
                self.system.body_list(),
                elapsed_s,
                elements=self.system.elements,
                central=self.system.central,
                relativistic=self.relativistic_effects,
            )

    def _update_elements(self, name: str) -> None:
        updated, precession = update_orbital_elements(
            name,
            self.system.elements[name],
            self.clock.centuries_since_epoch(),
            self.system.precession.get(name),
            relativistic=self.relativistic_effects,
        )
        self.system.elements[name] = updated
        if precession is not None:
            self.system.precession[name] = precession

    def _step_keplerian(self, elapsed_s: float) -> None:
        """Move orbiting bodies along their ellipses; includes the true-anomaly precession advance."""
        central = self.system.central
        origin = central.position_km if central is not None else ZERO
        central_mass = self.central_mass_kg

        for body in self.system.body_list():
            if body.role is BodyRole.ORBITING:
                r, advanced = position_at(self.system.elements[body.name], elapsed_s, central_mass)
                self.system.elements[body.name] = advanced
                new_position = add(origin, r)
                body.velocity_km_s = scale(sub(new_position, body.position_km), 1.0 / elapsed_s)
                body.position_km = new_position
            body.spin(elapsed_s)

    # --- outputs --------------------------------------------------------

    def snapshot(self) -> List[BodyState]:
        return [
            BodyState(
                name=b.name,
                position_km=b.position_km,
                velocity_km_s=b.velocity_km_s,
                mass_kg=b.mass_kg,
                radius_km=b.radius_km,
                orientation=b.orientation(),
            )
            for b in self.system.body_list()
        ]

    def orbit_outline(self, name: str, segments: int = 256) -> List[Vector3]:
        elements = self.elements_of(name)
        if elements is None:
            return []
        central = self.system.central
        origin = central.position_km if central is not None else ZERO
        return [add(origin, p) for p in orbit_outline(elements, segments)]

    def plan_trajectory(
        self,
        start_km: Vector3,
        target_km: Vector3,
        start_velocity_km_s: Vector3,
        vehicle_mass_kg: float,
        planner: Optional[TrajectoryPlanner] = None,
    ) -> TrajectoryResult:
        """Plan against a snapshot of the current bodies; no body state is changed."""
        planner = planner or TrajectoryPlanner()
        return planner.plan(start_km, target_km, start_velocity_km_s, vehicle_mass_kg, self.snapshot())
