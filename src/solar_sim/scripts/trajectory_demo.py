import logging
from datetime import datetime, timezone

from solar_sim.core.frames import distance
from solar_sim.physics.trajectory import TrajectoryPlanner
from solar_sim.simulation.engine import SimulationLog
from solar_sim.simulation.presets import build_solar_system
from solar_sim.visualization.export_log import export_log_to_json
from solar_sim.visualization.plotly_viewer import render_static_scene

logging.basicConfig(level=logging.INFO, format="%(asctime)s %(levelname)s %(name)s: %(message)s")

sim = build_solar_system(initial_date=datetime(2024, 1, 1, tzinfo=timezone.utc))
earth = sim.get_body("Earth")
mars = sim.get_body("Mars")

# Depart from just outside Earth's radius with Earth's orbital velocity
start = (earth.position_km[0] + 2 * earth.radius_km, earth.position_km[1], earth.position_km[2])
planner = TrajectoryPlanner(max_steps=20000, time_step_s=600.0, max_flight_time_s=2e7)
result = sim.plan_trajectory(start, mars.position_km, earth.velocity_km_s, 50000.0, planner)

gap_km = distance(start, mars.position_km)
print(f"Earth-Mars distance: {gap_km:.3e} km")
print(f"Reached target: {result.success} after {result.steps} steps")
print(f"Flight time: {result.estimated_time_s / 86400.0:.1f} days, fuel: {result.fuel_required:.1f}")
print(f"Quick estimates: time {planner.estimate_travel_time(gap_km) / 86400.0:.1f} days, "
      f"fuel {planner.estimate_fuel_requirements(gap_km, 50000.0):.1f} kg")

log = SimulationLog()
for body in sim.bodies():
    log.record_position(body.name, sim.julian_date, body.position_km)
log.record_trajectory("Earth->Mars", result.path)
log.record_event(
    "trajectory_planned",
    sim.julian_date,
    label="Earth->Mars",
    success=result.success,
    steps=result.steps,
    flight_time_s=result.estimated_time_s,
    fuel_required=result.fuel_required,
)

print("Saved:", export_log_to_json(log, "out/trajectory_log.json"))
print("Saved:", render_static_scene(log, "out/trajectory_scene.html"))
