from __future__ import annotations

import logging
import math
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Protocol, Tuple

from solar_sim.core.frames import Vector3
from solar_sim.simulation.simulator import SimulationMode, SolarSystemSimulation

logger = logging.getLogger(__name__)


class System(Protocol):
    """
    Plugin interface for per-step observers.
    Each system runs after every step and can write to the log.
    """
    name: str

    def on_step(self, julian_date: float, simulation: SolarSystemSimulation, log: "SimulationLog") -> None:
        ...


@dataclass
class SimulationLog:
    """
    Stores outputs from a simulation run.
    Keep it simple and serializable.
    """
    # Positions: body name -> list of (julian date, position)
    body_positions_km: Dict[str, List[Tuple[float, Vector3]]] = field(default_factory=dict)

    # Planned paths by label
    trajectories: Dict[str, List[Vector3]] = field(default_factory=dict)

    events: List[Dict[str, Any]] = field(default_factory=list)

    def record_position(self, name: str, julian_date: float, position_km: Vector3) -> None:
        self.body_positions_km.setdefault(name, []).append((julian_date, position_km))

    def record_trajectory(self, label: str, path: List[Vector3]) -> None:
        self.trajectories[label] = list(path)

    def record_event(self, kind: str, julian_date: float, **details: Any) -> None:
        self.events.append({"kind": kind, "jd": julian_date, **details})


@dataclass
class Engine:
    """
    Fixed-step driver for a simulation.
    Deterministic replay: same simulation + dt + duration => same output.
    The wall clock is not consulted.
    """
    dt_s: float
    systems: List[System] = field(default_factory=list)
    mode: Optional[SimulationMode] = None

    def run(self, simulation: SolarSystemSimulation, duration_s: float) -> SimulationLog:
        if self.dt_s <= 0:
            raise ValueError("dt_s must be positive.")
        if duration_s < 0:
            raise ValueError("duration_s must be non-negative.")

        log = SimulationLog()
        n_steps = math.floor(duration_s / self.dt_s + 1e-9)
        logger.info("Running %d steps of %.0f s", n_steps, self.dt_s)

        # Systems see the initial state, then the state after each step
        for i in range(n_steps + 1):
            if i > 0:
                simulation.advance_seconds(self.dt_s, self.mode)
            for sys in self.systems:
                sys.on_step(simulation.julian_date, simulation, log)

        return log
