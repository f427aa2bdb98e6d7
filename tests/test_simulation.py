"""
Tests for the body registry and the tick orchestration.
"""
import logging
import math
from datetime import datetime, timezone

import pytest

from solar_sim.core.constants import G_SI, J2000_JD, SOLAR_MASS_KG
from solar_sim.core.frames import distance, norm
from solar_sim.objects.celestial_body import BodyRole, CelestialBody
from solar_sim.physics.orbit import OrbitalElements
from solar_sim.physics.trajectory import TrajectoryPlanner
from solar_sim.simulation.simulator import SimulationMode, SolarSystemSimulation
from solar_sim.simulation.solar_system import SolarSystem

J2000 = datetime(2000, 1, 1, 12, tzinfo=timezone.utc)


class FakeWallClock:
    def __init__(self, start_ms=0.0):
        self.now_ms = start_ms

    def __call__(self):
        return self.now_ms


def make_sun():
    return CelestialBody("Sun", mass_kg=SOLAR_MASS_KG, radius_km=696342.0, rotation_period_days=25.05, obliquity_deg=7.25)


def make_vulcan():
    body = CelestialBody("Vulcan", mass_kg=1e23, radius_km=1000.0, rotation_period_days=10.0)
    elements = OrbitalElements(semi_major_axis_km=1e7, eccentricity=0.0, orbital_period_days=10.0)
    return body, elements


@pytest.fixture
def wall():
    return FakeWallClock(5_000.0)


@pytest.fixture
def sim(wall):
    s = SolarSystemSimulation(initial_date=J2000, time_source=wall)
    s.add_body(make_sun())
    body, elements = make_vulcan()
    s.add_body(body, elements)
    return s


class TestSolarSystem:
    def test_body_without_elements_is_central(self):
        system = SolarSystem(name="Test")
        sun = make_sun()
        system.add_body(sun)
        assert sun.role is BodyRole.CENTRAL
        assert system.central is sun

    def test_body_with_elements_is_orbiting(self):
        system = SolarSystem(name="Test")
        body, elements = make_vulcan()
        system.add_body(body, elements)
        assert body.role is BodyRole.ORBITING
        assert system.elements["Vulcan"].semi_minor_axis_km == 1e7
        assert system.central is None

    def test_duplicate_names_rejected_case_insensitively(self):
        system = SolarSystem(name="Test")
        system.add_body(make_sun())
        with pytest.raises(ValueError, match="Duplicate body name"):
            system.add_body(CelestialBody("SUN", mass_kg=1.0, radius_km=1.0, rotation_period_days=1.0))

    def test_lookup_is_case_insensitive(self):
        system = SolarSystem(name="Test")
        system.add_body(make_sun())
        assert system.get_body("sun").name == "Sun"
        assert system.get_body("Moon") is None

    def test_sun_preferred_as_central(self):
        system = SolarSystem(name="Test")
        system.add_body(CelestialBody("Proxima", mass_kg=2e29, radius_km=1e5, rotation_period_days=80.0))
        system.add_body(make_sun())
        assert system.central.name == "Sun"

    def test_remove_body(self):
        system = SolarSystem(name="Test")
        system.add_body(make_sun())
        body, elements = make_vulcan()
        system.add_body(body, elements)
        assert system.remove_body("vulcan")
        assert "Vulcan" not in system.elements
        assert not system.remove_body("Vulcan")
        assert system.remove_body("Sun")
        assert system.central is None


class TestRegistration:
    def test_orbiting_body_seeded_on_orbit(self, sim):
        vulcan = sim.get_body("Vulcan")
        assert math.isclose(vulcan.position_km[0], 1e7, rel_tol=1e-12)
        expected_speed = math.sqrt(G_SI * SOLAR_MASS_KG / 1e9 / 1e7)
        assert math.isclose(norm(vulcan.velocity_km_s), expected_speed, rel_tol=1e-9)

    def test_bodies_listed_in_registration_order(self, sim):
        assert [b.name for b in sim.bodies()] == ["Sun", "Vulcan"]

    def test_default_central_mass_warns(self, wall, caplog):
        s = SolarSystemSimulation(initial_date=J2000, time_source=wall)
        body, elements = make_vulcan()
        with caplog.at_level(logging.WARNING):
            s.add_body(body, elements)
            assert s.central_mass_kg == SOLAR_MASS_KG
        assert sum("No central body" in r.message for r in caplog.records) == 1

    def test_remove_body(self, sim):
        assert sim.remove_body("Vulcan")
        assert sim.get_body("Vulcan") is None


class TestTick:
    def test_tick_without_wall_time_is_noop(self, sim, wall):
        before = sim.get_body("Vulcan").position_km
        assert sim.tick(wall.now_ms) == 0.0
        assert sim.get_body("Vulcan").position_km == before

    def test_tick_advances_clock(self, sim, wall):
        sim.set_time_scale(3600.0)
        elapsed = sim.tick(wall.now_ms + 1000.0)
        assert elapsed == 3600.0
        assert math.isclose(sim.julian_date, J2000_JD + 3600.0 / 86400.0)

    def test_keplerian_quarter_orbit(self, sim):
        sim.set_mode(SimulationMode.KEPLERIAN)
        sim.advance_seconds(0.25 * 10.0 * 86400.0)
        r = sim.get_body("Vulcan").position_km
        assert abs(r[0]) < 50.0
        assert math.isclose(r[1], 1e7, rel_tol=1e-6)

    def test_keplerian_velocity_from_displacement(self, sim):
        vulcan = sim.get_body("Vulcan")
        start = vulcan.position_km
        sim.advance_seconds(600.0, mode=SimulationMode.KEPLERIAN)
        end = vulcan.position_km
        assert math.isclose(norm(vulcan.velocity_km_s), distance(start, end) / 600.0, rel_tol=1e-12)

    def test_keplerian_mode_spins_central_body(self, sim):
        sim.advance_seconds(86400.0, mode=SimulationMode.KEPLERIAN)
        sun = sim.get_body("Sun")
        assert sun.spin_angle_rad > 0.0
        assert sun.position_km == (0.0, 0.0, 0.0)

    def test_nbody_mode_keeps_orbit(self, sim):
        for _ in range(100):
            sim.advance_seconds(600.0)
        r = distance(sim.get_body("Vulcan").position_km, sim.get_body("Sun").position_km)
        assert math.isclose(r, 1e7, rel_tol=1e-2)

    def test_mode_override_applies_to_one_tick(self, sim):
        sim.advance_seconds(600.0, mode=SimulationMode.KEPLERIAN)
        assert sim.mode is SimulationMode.N_BODY

    def test_negative_time_scale_clamped(self, sim, wall):
        sim.set_time_scale(-2.0)
        assert sim.time_scale == 0.0
        assert sim.tick(wall.now_ms + 1000.0) == 0.0

    def test_relativistic_toggle(self, sim):
        sim.set_relativistic_effects(False)
        assert not sim.relativistic_effects
        sim.advance_seconds(600.0)

    def test_relativistic_toggle_leaves_keplerian_mode_alone(self, wall):
        positions = []
        for enabled in (True, False):
            s = SolarSystemSimulation(initial_date=J2000, time_source=wall, relativistic_effects=enabled)
            s.add_body(make_sun())
            body, elements = make_vulcan()
            s.add_body(body, elements)
            s.advance_seconds(3.0 * 86400.0, mode=SimulationMode.KEPLERIAN)
            positions.append(s.get_body("Vulcan").position_km)
        assert positions[0] == positions[1]


class TestDatesAndOutputs:
    def test_set_date(self, sim):
        sim.set_date(datetime(2024, 6, 1, tzinfo=timezone.utc))
        assert sim.formatted_date == "2024-06-01 00:00:00 UTC"
        assert sim.date.year == 2024

    def test_snapshot(self, sim):
        states = sim.snapshot()
        assert [s.name for s in states] == ["Sun", "Vulcan"]
        assert states[1].position_km == sim.get_body("Vulcan").position_km
        assert len(states[0].orientation) == 4

    def test_orbit_outline(self, sim):
        outline = sim.orbit_outline("Vulcan", segments=32)
        assert len(outline) == 33
        assert all(math.isclose(norm(p), 1e7, rel_tol=1e-9) for p in outline)
        assert sim.orbit_outline("Sun") == []

    def test_plan_trajectory_leaves_bodies_alone(self, sim):
        before = [(b.position_km, b.velocity_km_s) for b in sim.bodies()]
        planner = TrajectoryPlanner(max_steps=50)
        result = sim.plan_trajectory((2e7, 0.0, 0.0), (2e7, 1e5, 0.0), (0.0, 0.0, 0.0), 1000.0, planner)
        assert result.steps <= 50
        assert [(b.position_km, b.velocity_km_s) for b in sim.bodies()] == before
