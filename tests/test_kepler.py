import math

import pytest

from solar_sim.physics.kepler import (
    TWO_PI,
    solve_keplers_equation,
    true_anomaly_from_eccentric,
    wrap_to_2pi,
)


def _residual(E, e, M):
    # Residual of Kepler's equation, modulo 2π
    r = (E - e * math.sin(E) - M) % TWO_PI
    return min(r, TWO_PI - r)


def test_kepler_zero_eccentricity():
    # If e=0, E=M exactly
    for M in [0.0, 0.5, 1.0, 2.0, 5.0]:
        E = solve_keplers_equation(M, 0.0)
        assert math.isclose(E, M % TWO_PI, abs_tol=1e-12)


def test_kepler_converges_typical():
    E = solve_keplers_equation(M_rad=1.0, e=0.4)
    assert abs(E - 0.4 * math.sin(E) - 1.0) < 1e-8


@pytest.mark.parametrize("e", [0.0, 0.1, 0.3, 0.5, 0.7, 0.9, 0.95, 0.99])
def test_kepler_residual_across_eccentricities(e):
    for k in range(24):
        M = -TWO_PI + k * (3 * TWO_PI / 24)
        E = solve_keplers_equation(M, e)
        assert _residual(E, e, M) < 1e-6


def test_kepler_result_is_wrapped():
    E = solve_keplers_equation(-0.5, 0.2)
    assert 0.0 <= E < TWO_PI


def test_kepler_iteration_cap_returns_estimate():
    E = solve_keplers_equation(0.1, 0.99, max_iter=1)
    assert math.isfinite(E)
    assert 0.0 <= E < TWO_PI


def test_wrap_to_2pi():
    assert wrap_to_2pi(TWO_PI) == 0.0
    assert math.isclose(wrap_to_2pi(-math.pi / 2), 1.5 * math.pi)
    assert wrap_to_2pi(-1e-17) == 0.0


class TestTrueAnomaly:
    def test_circular_orbit_true_equals_eccentric(self):
        assert math.isclose(true_anomaly_from_eccentric(1.2, 0.0), 1.2, rel_tol=1e-12)

    def test_perihelion_and_aphelion(self):
        assert true_anomaly_from_eccentric(0.0, 0.5) == 0.0
        assert math.isclose(abs(true_anomaly_from_eccentric(math.pi, 0.5)), math.pi, rel_tol=1e-12)

    def test_true_anomaly_leads_eccentric_anomaly(self):
        E = 1.0
        assert true_anomaly_from_eccentric(E, 0.3) > E
