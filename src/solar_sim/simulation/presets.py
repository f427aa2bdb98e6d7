"""
Seed data for the Sun and the nine classical planets, and loaders that turn
seed records into bodies and elements.

A seed record is a plain dict so the same shape can come from JSON:

    {"name": "Mars", "mass_kg": 6.39e23, "radius_km": 3389.5,
     "rotation_period_days": 1.025, "obliquity_deg": 25.19,
     "orbit": {"semi_major_axis_km": ..., "eccentricity": ..., ...}}

Records without "orbit" are central bodies.
"""

from __future__ import annotations

import json
import logging
from datetime import datetime
from pathlib import Path
from typing import Any, Dict, List, Optional, Sequence, Tuple

from solar_sim.objects.celestial_body import CelestialBody
from solar_sim.physics.orbit import OrbitalElements
from solar_sim.simulation.simulator import SolarSystemSimulation

logger = logging.getLogger(__name__)

SeedRecord = Dict[str, Any]


def _planet(name, mass_kg, radius_km, rotation_days, obliquity_deg, a_km, e, period_days, inc_deg, node_deg, argp_deg):
    return {
        "name": name,
        "mass_kg": mass_kg,
        "radius_km": radius_km,
        "rotation_period_days": rotation_days,
        "obliquity_deg": obliquity_deg,
        "orbit": {
            "semi_major_axis_km": a_km,
            "eccentricity": e,
            "orbital_period_days": period_days,
            "inclination_deg": inc_deg,
            "ascending_node_deg": node_deg,
            "argument_of_perihelion_deg": argp_deg,
        },
    }


SOLAR_SYSTEM_SEED: List[SeedRecord] = [
    {
        "name": "Sun",
        "mass_kg": 1.989e30,
        "radius_km": 696342.0,
        "rotation_period_days": 25.05,
        "obliquity_deg": 7.25,
    },
    _planet("Mercury", 3.285e23, 2439.7, 58.65, 0.034, 57909050.0, 0.2056, 87.969, 7.0, 48.331, 29.124),
    _planet("Venus", 4.867e24, 6052.0, 243.0, 177.36, 108208930.0, 0.0067, 224.701, 3.39, 76.68, 54.85),
    _planet("Earth", 5.972e24, 6371.0, 0.99726, 23.439, 149597890.0, 0.0167, 365.256, 0.0, 174.873, 288.064),
    _planet("Mars", 6.39e23, 3389.5, 1.025, 25.19, 227936640.0, 0.0934, 686.98, 1.85, 49.578, 286.502),
    _planet("Jupiter", 1.898e27, 69911.0, 0.41354, 3.13, 778547200.0, 0.0489, 4332.59, 1.305, 100.56, 273.88),
    _planet("Saturn", 5.683e26, 58232.0, 0.444, 26.73, 1433449370.0, 0.0565, 10759.22, 2.485, 113.715, 339.394),
    _planet("Uranus", 8.681e25, 25559.0, 0.71833, 97.77, 2870658186.0, 0.046381, 30688.5, 0.772, 74.23, 96.7),
    _planet("Neptune", 1.024e26, 24764.0, 0.67125, 28.32, 4498396441.0, 0.01, 60190.0, 1.77, 131.78, 272.85),
    _planet("Pluto", 1.303e22, 1188.0, 6.3872, 122.53, 5906380624.0, 0.2488, 90560.0, 17.15, 110.3, 113.83),
]


def _optional_float(value: Any) -> Optional[float]:
    return None if value is None else float(value)


def body_from_seed(seed: SeedRecord) -> Tuple[CelestialBody, Optional[OrbitalElements]]:
    """
    Build a body and its elements (None for a central body) from one record.

    Raises:
        ValueError: if a required field is missing or a value is out of range
    """
    name = seed.get("name", "<unnamed>")
    try:
        body = CelestialBody(
            name=seed["name"],
            mass_kg=float(seed["mass_kg"]),
            radius_km=float(seed["radius_km"]),
            rotation_period_days=float(seed["rotation_period_days"]),
            obliquity_deg=float(seed.get("obliquity_deg", 0.0)),
        )
        orbit = seed.get("orbit")
        if orbit is None:
            return body, None
        elements = OrbitalElements(
            semi_major_axis_km=float(orbit["semi_major_axis_km"]),
            eccentricity=float(orbit["eccentricity"]),
            orbital_period_days=float(orbit["orbital_period_days"]),
            inclination_deg=float(orbit.get("inclination_deg", 0.0)),
            ascending_node_deg=_optional_float(orbit.get("ascending_node_deg")),
            argument_of_perihelion_deg=_optional_float(orbit.get("argument_of_perihelion_deg")),
        )
    except KeyError as exc:
        raise ValueError(f"Seed record for {name} is missing field {exc.args[0]!r}") from exc
    except (TypeError, ValueError) as exc:
        raise ValueError(f"Invalid seed record for {name}: {exc}") from exc
    return body, elements


def load_seed_file(path: str) -> List[SeedRecord]:
    """Read a JSON list of seed records."""
    with open(Path(path), "r", encoding="utf-8") as f:
        data = json.load(f)
    if not isinstance(data, list):
        raise ValueError(f"Seed file {path} must contain a list of bodies.")
    logger.info("Loaded %d seed records from %s", len(data), path)
    return data


def build_solar_system(
    seeds: Sequence[SeedRecord] = SOLAR_SYSTEM_SEED,
    initial_date: Optional[datetime] = None,
    **kwargs: Any,
) -> SolarSystemSimulation:
    """
    Create a simulation and register every seed body in order. Extra keyword
    arguments go to SolarSystemSimulation.
    """
    sim = SolarSystemSimulation(initial_date=initial_date, **kwargs)
    # Central bodies first so orbiting bodies are seeded relative to them
    ordered = sorted(seeds, key=lambda s: s.get("orbit") is not None)
    for seed in ordered:
        body, elements = body_from_seed(seed)
        sim.add_body(body, elements)
    return sim
