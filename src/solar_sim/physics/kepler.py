# Kepler's equation for elliptic orbits

from __future__ import annotations

import logging
import math

from solar_sim.core.constants import KEPLER_MAX_ITERATIONS, KEPLER_TOLERANCE

logger = logging.getLogger(__name__)

TWO_PI: float = 2.0 * math.pi


def wrap_to_2pi(angle_rad: float) -> float:
    """Wrap angle to [0, 2π)."""
    wrapped = angle_rad % TWO_PI
    # -1e-17 % 2π rounds up to exactly 2π
    return 0.0 if wrapped == TWO_PI else wrapped


def solve_keplers_equation(
    M_rad: float,
    e: float,
    tol: float = KEPLER_TOLERANCE,
    max_iter: int = KEPLER_MAX_ITERATIONS,
) -> float:
    """
    Solve Kepler's equation for elliptic orbits:
        M = E - e sin(E)
    using Newton-Raphson seeded at E = M.

    The root always lies in [M - e, M + e]; a Newton step that leaves that
    bracket is replaced by a bisection step, which keeps high-eccentricity
    cases from wandering off.

    Args:
        M_rad: Mean anomaly (rad)
        e: eccentricity (0 <= e < 1)
        tol: convergence tolerance on |dE|
        max_iter: iteration cap

    Returns:
        E_rad: Eccentric anomaly (rad) in [0, 2π). If the cap is reached the
        current best estimate is returned.
    """
    M = wrap_to_2pi(M_rad)
    E = M
    lo = M - e
    hi = M + e

    for _ in range(max_iter):
        f = E - e * math.sin(E) - M
        if f == 0.0:
            return wrap_to_2pi(E)
        if f < 0.0:
            lo = E
        else:
            hi = E

        fp = 1.0 - e * math.cos(E)
        E_next = E - f / fp if fp > 1e-15 else 0.5 * (lo + hi)
        if not (lo < E_next < hi):
            E_next = 0.5 * (lo + hi)

        dE = E_next - E
        E = E_next
        if abs(dE) < tol:
            return wrap_to_2pi(E)

    logger.debug("Kepler solver hit %d iterations (M=%.6f, e=%.6f)", max_iter, M, e)
    return wrap_to_2pi(E)


def true_anomaly_from_eccentric(E_rad: float, e: float) -> float:
    """Half-angle formula in its quadrant-safe atan2 form."""
    return 2.0 * math.atan2(
        math.sqrt(1.0 + e) * math.sin(E_rad / 2.0),
        math.sqrt(1.0 - e) * math.cos(E_rad / 2.0),
    )
