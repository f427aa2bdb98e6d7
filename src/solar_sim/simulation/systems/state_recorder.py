from __future__ import annotations

from dataclasses import dataclass

from solar_sim.simulation.engine import SimulationLog
from solar_sim.simulation.simulator import SolarSystemSimulation


@dataclass
class StateRecorderSystem:
    name: str = "state_recorder"

    def on_step(self, julian_date: float, simulation: SolarSystemSimulation, log: SimulationLog) -> None:
        for body in simulation.bodies():
            log.record_position(body.name, julian_date, body.position_km)
