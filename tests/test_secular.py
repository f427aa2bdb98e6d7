"""
Tests for secular element updates and element-level relativistic precession.
"""
import math

import pytest

from solar_sim.core.constants import AU_KM
from solar_sim.core.frames import orbital_plane_to_inertial
from solar_sim.physics.orbit import OrbitalElements, initialize_elements, position_at
from solar_sim.physics.relativity import (
    PrecessionState,
    apply_relativistic_precession,
    precession_rate_arcsec_per_century,
)
from solar_sim.physics.secular import (
    SECULAR_COEFFICIENTS,
    evaluate,
    has_relativistic_precession,
    secular_elements,
    update_orbital_elements,
)

PLANETS = ["Mercury", "Venus", "Earth", "Mars", "Jupiter", "Saturn", "Uranus", "Neptune", "Pluto"]


@pytest.fixture
def mercury():
    return initialize_elements(OrbitalElements(
        semi_major_axis_km=57909050.0,
        eccentricity=0.2056,
        orbital_period_days=87.969,
        inclination_deg=7.0,
        ascending_node_deg=48.331,
        argument_of_perihelion_deg=29.124,
        mean_anomaly_rad=1.25,
    ))


@pytest.fixture
def earth():
    return initialize_elements(OrbitalElements(
        semi_major_axis_km=149597890.0, eccentricity=0.0167, orbital_period_days=365.256,
    ))


def test_evaluate_polynomial():
    assert evaluate((1.0, 2.0, 3.0), 2.0) == 1.0 + 4.0 + 12.0
    assert evaluate((5.0,), 100.0) == 5.0


def test_table_covers_all_planets():
    assert sorted(SECULAR_COEFFICIENTS) == sorted(PLANETS)


def test_relativistic_flag_on_inner_planets_only():
    assert [p for p in PLANETS if has_relativistic_precession(p)] == ["Mercury", "Venus", "Earth", "Mars"]
    assert not has_relativistic_precession("Vulcan")


class TestSecularElements:
    def test_mercury_at_j2000(self, mercury):
        el = secular_elements(mercury, SECULAR_COEFFICIENTS["Mercury"], 0.0)
        assert el.semi_major_axis_km == 57909050.0
        assert el.eccentricity == 0.2056317
        assert el.inclination_deg == 7.00487
        assert el.ascending_node_deg == 48.33167
        assert el.argument_of_perihelion_deg == 29.124

    def test_mean_anomaly_and_period_carried_over(self, mercury):
        el = secular_elements(mercury, SECULAR_COEFFICIENTS["Mercury"], 0.5)
        assert el.mean_anomaly_rad == mercury.mean_anomaly_rad
        assert el.orbital_period_days == mercury.orbital_period_days

    def test_semi_minor_axis_recomputed(self, mercury):
        el = secular_elements(mercury, SECULAR_COEFFICIENTS["Mercury"], 1.0)
        e = el.eccentricity
        assert math.isclose(el.semi_minor_axis_km, el.semi_major_axis_km * math.sqrt(1 - e * e))

    def test_negative_inclination_flips_node(self, earth):
        el = secular_elements(earth, SECULAR_COEFFICIENTS["Earth"], -1.0)
        assert math.isclose(el.inclination_deg, 0.01295, rel_tol=1e-9)
        assert math.isclose(el.ascending_node_deg, 354.873, rel_tol=1e-12)
        assert math.isclose(el.argument_of_perihelion_deg, 108.06315, rel_tol=1e-12)

    def test_flipped_inclination_keeps_position(self, earth):
        coeffs = SECULAR_COEFFICIENTS["Earth"]
        T = -0.1
        el = secular_elements(earth, coeffs, T)
        r, _ = position_at(el, 0.0)

        perihelion = el.semi_major_axis_km * (1.0 - el.eccentricity)
        expected = orbital_plane_to_inertial(
            (perihelion, 0.0, 0.0),
            math.radians(evaluate(coeffs.ascending_node_deg, T)),
            math.radians(evaluate(coeffs.inclination_deg, T)),
            math.radians(evaluate(coeffs.argument_of_perihelion_deg, T)),
        )
        assert evaluate(coeffs.inclination_deg, T) < 0.0
        assert all(math.isclose(a, b, abs_tol=1.0) for a, b in zip(r, expected))

    def test_eccentricity_clamped_far_from_epoch(self):
        el = secular_elements(
            initialize_elements(OrbitalElements(semi_major_axis_km=1e8, eccentricity=0.1, orbital_period_days=100.0)),
            SECULAR_COEFFICIENTS["Venus"],
            500.0,
        )
        assert el.eccentricity == 0.0


class TestRelativisticPrecession:
    def test_rate_for_one_au_circular(self):
        el = OrbitalElements(semi_major_axis_km=AU_KM, eccentricity=0.0, orbital_period_days=365.25)
        assert math.isclose(precession_rate_arcsec_per_century(el), 43.03)

    def test_rate_scales_with_eccentricity(self):
        el = OrbitalElements(semi_major_axis_km=AU_KM, eccentricity=0.6, orbital_period_days=365.25)
        assert math.isclose(precession_rate_arcsec_per_century(el), 43.03 / 0.64)

    def test_state_created_on_first_use(self, mercury):
        el, state = apply_relativistic_precession(mercury, 1.0)
        assert state.initial_argument_of_perihelion_deg == 29.124
        assert math.isclose(state.cumulative_arcsec, state.rate_arcsec_per_century)
        assert math.isclose(el.argument_of_perihelion_deg, 29.124 + state.rate_arcsec_per_century / 3600.0)

    def test_idempotent_at_same_epoch(self, mercury):
        el1, state1 = apply_relativistic_precession(mercury, 2.0)
        el2, state2 = apply_relativistic_precession(el1, 2.0, state1)
        assert el2.argument_of_perihelion_deg == el1.argument_of_perihelion_deg
        assert state2 == state1

    def test_uses_absolute_epoch(self, mercury):
        state = PrecessionState(rate_arcsec_per_century=36.0, initial_argument_of_perihelion_deg=10.0)
        el, _ = apply_relativistic_precession(mercury, 1.0, state)
        el, _ = apply_relativistic_precession(el, 0.5, state)
        assert math.isclose(el.argument_of_perihelion_deg, 10.005)


class TestUpdateOrbitalElements:
    def test_unknown_body_unchanged(self, mercury):
        el, state = update_orbital_elements("Vulcan", mercury, 3.0)
        assert el is mercury
        assert state is None

    def test_outer_planet_has_no_precession_state(self, mercury):
        _el, state = update_orbital_elements("Jupiter", mercury, 1.0)
        assert state is None

    def test_inner_planet_gets_precession(self, mercury):
        el, state = update_orbital_elements("Mercury", mercury, 1.0)
        assert state is not None
        expected = 29.124 + 0.26938 + state.rate_arcsec_per_century / 3600.0
        assert math.isclose(el.argument_of_perihelion_deg, expected)

    def test_precession_can_be_disabled(self, mercury):
        el, state = update_orbital_elements("Mercury", mercury, 1.0, relativistic=False)
        assert state is None
        assert math.isclose(el.argument_of_perihelion_deg, 29.124 + 0.26938)

    def test_repeated_updates_are_stable(self, mercury):
        el, state = update_orbital_elements("Mercury", mercury, 0.25)
        again, state2 = update_orbital_elements("Mercury", el, 0.25, state)
        assert again.argument_of_perihelion_deg == el.argument_of_perihelion_deg
        assert state2 == state

    def test_precession_continues_across_inclination_flip(self, earth):
        before, state = update_orbital_elements("Earth", earth, -0.1)
        assert math.isclose(state.initial_argument_of_perihelion_deg, 288.063915, rel_tol=1e-12)
        assert math.isclose(
            before.argument_of_perihelion_deg,
            288.063915 - 0.1 * state.rate_arcsec_per_century / 3600.0 - 180.0,
            rel_tol=1e-12,
        )

        after, state = update_orbital_elements("Earth", before, 0.1, state)
        assert math.isclose(
            after.argument_of_perihelion_deg,
            288.063915 + 0.1 * state.rate_arcsec_per_century / 3600.0,
            rel_tol=1e-12,
        )
