"""
Secular variation of planetary orbital elements.

Each body has its own polynomial coefficients in T (Julian centuries since
J2000) for a, e, i, Ω and ω. This is a lookup table, not live physics.
"""

from __future__ import annotations

import math
from dataclasses import dataclass, replace
from typing import Dict, Optional, Tuple

from solar_sim.physics.orbit import OrbitalElements
from solar_sim.physics.relativity import PrecessionState, apply_relativistic_precession

# Coefficients (c0, c1, c2, ...) of c0 + c1*T + c2*T^2 + ...
Polynomial = Tuple[float, ...]

# Keeps the eccentricity polynomial inside the elliptic range far from J2000
MAX_SECULAR_ECCENTRICITY: float = 0.99


def evaluate(poly: Polynomial, T: float) -> float:
    # Horner
    result = 0.0
    for c in reversed(poly):
        result = result * T + c
    return result


@dataclass(frozen=True)
class SecularCoefficients:
    semi_major_axis_km: Polynomial
    eccentricity: Polynomial
    inclination_deg: Polynomial
    ascending_node_deg: Polynomial
    argument_of_perihelion_deg: Polynomial
    relativistic_precession: bool = False


SECULAR_COEFFICIENTS: Dict[str, SecularCoefficients] = {
    "Mercury": SecularCoefficients(
        semi_major_axis_km=(57909050.0, -0.0036),
        eccentricity=(0.2056317, 0.0002123, -0.000000039),
        inclination_deg=(7.00487, -0.0059, 0.0000008),
        ascending_node_deg=(48.33167, -0.1254229),
        argument_of_perihelion_deg=(29.124, 0.26938),
        relativistic_precession=True,
    ),
    "Venus": SecularCoefficients(
        semi_major_axis_km=(108208930.0, -0.0011),
        eccentricity=(0.006773, -0.000047),
        inclination_deg=(3.39471, 0.0008),
        ascending_node_deg=(76.68069, -0.278008),
        argument_of_perihelion_deg=(54.85229, 0.1317),
        relativistic_precession=True,
    ),
    "Earth": SecularCoefficients(
        semi_major_axis_km=(149597890.0, -0.0003),
        eccentricity=(0.01671123, -0.0000004),
        inclination_deg=(0.00005, 0.013),
        ascending_node_deg=(174.873, 0.0),
        argument_of_perihelion_deg=(288.064, 0.00085),
        relativistic_precession=True,
    ),
    "Mars": SecularCoefficients(
        semi_major_axis_km=(227936640.0, 0.0001),
        eccentricity=(0.0934, 0.000092),
        inclination_deg=(1.85, -0.0061),
        ascending_node_deg=(49.57854, -0.2949846),
        argument_of_perihelion_deg=(286.5016, 0.70916),
        relativistic_precession=True,
    ),
    "Jupiter": SecularCoefficients(
        semi_major_axis_km=(778547200.0,),
        eccentricity=(0.0489, 0.000164),
        inclination_deg=(1.3053, -0.00358),
        ascending_node_deg=(100.55615, 0.4155),
        argument_of_perihelion_deg=(273.8777, 1.0211),
    ),
    "Saturn": SecularCoefficients(
        semi_major_axis_km=(1433449370.0,),
        eccentricity=(0.0565, -0.00015),
        inclination_deg=(2.4845, -0.00372),
        ascending_node_deg=(113.71504, -0.2566722),
        argument_of_perihelion_deg=(339.3939, 2.9544),
    ),
    "Uranus": SecularCoefficients(
        semi_major_axis_km=(2870658186.0,),
        eccentricity=(0.046381, 0.000019),
        inclination_deg=(0.772556, -0.0002),
        ascending_node_deg=(74.22988, 0.0741461),
        argument_of_perihelion_deg=(96.7, 0.556),
    ),
    "Neptune": SecularCoefficients(
        semi_major_axis_km=(4498396441.0,),
        eccentricity=(0.0097, 0.000007),
        inclination_deg=(1.7679, -0.00003),
        ascending_node_deg=(131.7806, -0.0061),
        argument_of_perihelion_deg=(272.8461, -0.6365),
    ),
    "Pluto": SecularCoefficients(
        semi_major_axis_km=(5906380624.0,),
        eccentricity=(0.2488, 0.00002),
        inclination_deg=(17.16, 0.001),
        ascending_node_deg=(110.30347, -0.0155611),
        argument_of_perihelion_deg=(113.834, 0.159),
    ),
}


def secular_elements(elements: OrbitalElements, coeffs: SecularCoefficients, T: float) -> OrbitalElements:
    """
    Evaluate the coefficient set at T. Mean anomaly and period are carried over.
    """
    a = evaluate(coeffs.semi_major_axis_km, T)
    e = min(max(evaluate(coeffs.eccentricity, T), 0.0), MAX_SECULAR_ECCENTRICITY)
    inc = evaluate(coeffs.inclination_deg, T)
    node = evaluate(coeffs.ascending_node_deg, T)
    argp = evaluate(coeffs.argument_of_perihelion_deg, T)

    # A near-zero inclination can drift negative before J2000. Tilting it back
    # keeps the same plane with the node and perihelion both turned half a revolution.
    if inc < 0.0:
        inc = -inc
        node += 180.0
        argp -= 180.0

    return replace(
        elements,
        semi_major_axis_km=a,
        eccentricity=e,
        inclination_deg=min(inc, 180.0),
        ascending_node_deg=node % 360.0,
        argument_of_perihelion_deg=argp,
        semi_minor_axis_km=a * math.sqrt(1.0 - e * e),
    )


def has_relativistic_precession(name: str, table: Dict[str, SecularCoefficients] = SECULAR_COEFFICIENTS) -> bool:
    coeffs = table.get(name)
    return coeffs is not None and coeffs.relativistic_precession


def update_orbital_elements(
    name: str,
    elements: OrbitalElements,
    T: float,
    precession: Optional[PrecessionState] = None,
    relativistic: bool = True,
    table: Dict[str, SecularCoefficients] = SECULAR_COEFFICIENTS,
) -> Tuple[OrbitalElements, Optional[PrecessionState]]:
    """
    Recompute a body's secular elements for epoch T, then apply the
    element-level relativistic precession when the body carries it.

    Bodies without a table entry keep their elements unchanged.

    Returns:
        (new elements, new precession bookkeeping or None)
    """
    coeffs = table.get(name)
    if coeffs is None:
        return elements, precession

    updated = secular_elements(elements, coeffs, T)
    if coeffs.relativistic_precession and relativistic:
        # Precession is measured from the untilted perihelion
        half_turn = 180.0 if evaluate(coeffs.inclination_deg, T) < 0.0 else 0.0
        updated = _shift_perihelion(updated, half_turn)
        updated, precession = apply_relativistic_precession(updated, T, precession)
        updated = _shift_perihelion(updated, -half_turn)
    return updated, precession


def _shift_perihelion(elements: OrbitalElements, degrees: float) -> OrbitalElements:
    if degrees == 0.0:
        return elements
    return replace(elements, argument_of_perihelion_deg=elements.argument_of_perihelion_deg + degrees)
