import logging
from datetime import datetime, timezone

from solar_sim.core.constants import SECONDS_PER_DAY
from solar_sim.simulation.engine import Engine
from solar_sim.simulation.presets import build_solar_system
from solar_sim.simulation.simulator import SimulationMode
from solar_sim.simulation.systems.state_recorder import StateRecorderSystem
from solar_sim.visualization.export_log import export_log_to_json
from solar_sim.visualization.plotly_viewer import render_animated_body, render_static_scene

logging.basicConfig(level=logging.INFO, format="%(asctime)s %(levelname)s %(name)s: %(message)s")

sim = build_solar_system(initial_date=datetime(2024, 1, 1, tzinfo=timezone.utc))
print(f"Start: {sim.formatted_date}")

# One Earth year of Keplerian motion, one sample per day
engine = Engine(dt_s=SECONDS_PER_DAY, systems=[StateRecorderSystem()], mode=SimulationMode.KEPLERIAN)
log = engine.run(sim, duration_s=365.0 * SECONDS_PER_DAY)
print(f"End:   {sim.formatted_date}")

inner = ["Mercury", "Venus", "Earth", "Mars"]
outlines = {name: sim.orbit_outline(name) for name in inner}

print("Saved:", export_log_to_json(log, "out/solar_log.json"))
print("Saved:", render_static_scene(log, "out/solar_scene.html", outlines=outlines))
print("Saved:", render_animated_body(log, "Earth", "out/earth_animated.html"))
