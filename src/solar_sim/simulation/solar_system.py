from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, List, Optional

from solar_sim.objects.celestial_body import BodyRole, CelestialBody
from solar_sim.physics.orbit import OrbitalElements, initialize_elements
from solar_sim.physics.relativity import PrecessionState

CENTRAL_BODY_NAME = "sun"


@dataclass
class SolarSystem:
    """
    Registry of bodies plus the per-body orbital state they evolve with.
    Keep this pure: just data + lookup, no stepping logic.

    Orbital elements and precession bookkeeping are kept here, keyed by body
    name, rather than on the bodies themselves; updaters take and return values.
    """
    name: str
    bodies: Dict[str, CelestialBody] = field(default_factory=dict)
    elements: Dict[str, OrbitalElements] = field(default_factory=dict)
    precession: Dict[str, PrecessionState] = field(default_factory=dict)
    central_name: Optional[str] = None

    def add_body(self, body: CelestialBody, elements: Optional[OrbitalElements] = None) -> None:
        if self.get_body(body.name) is not None:
            raise ValueError(f"Duplicate body name: {body.name}")

        if elements is None:
            body.role = BodyRole.CENTRAL
            if self.central_name is None or body.name.lower() == CENTRAL_BODY_NAME:
                self.central_name = body.name
        else:
            body.role = BodyRole.ORBITING
            self.elements[body.name] = initialize_elements(elements)

        self.bodies[body.name] = body

    def remove_body(self, name: str) -> bool:
        body = self.get_body(name)
        if body is None:
            return False
        del self.bodies[body.name]
        self.elements.pop(body.name, None)
        self.precession.pop(body.name, None)
        if body.name == self.central_name:
            self.central_name = next(
                (b.name for b in self.bodies.values() if b.role is BodyRole.CENTRAL), None
            )
        return True

    def get_body(self, name: str) -> Optional[CelestialBody]:
        if name in self.bodies:
            return self.bodies[name]
        lowered = name.lower()
        for body in self.bodies.values():
            if body.name.lower() == lowered:
                return body
        return None

    @property
    def central(self) -> Optional[CelestialBody]:
        if self.central_name is None:
            return None
        return self.bodies.get(self.central_name)

    def body_list(self) -> List[CelestialBody]:
        return list(self.bodies.values())

    def orbiting_bodies(self) -> List[CelestialBody]:
        return [b for b in self.bodies.values() if b.role is BodyRole.ORBITING]
