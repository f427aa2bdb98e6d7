from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Dict

from solar_sim.simulation.engine import SimulationLog


def export_log_to_json(log: SimulationLog, out_path: str = "out/solar_log.json") -> str:
    """
    Export playback data:
      {
        "body_positions_km": {
          "Earth": [{"jd": 2451545.0, "r": [x, y, z]}, ...],
          ...
        },
        "trajectories": {"Earth->Mars": [[x, y, z], ...]},
        "events": [...]
      }
    """
    data: Dict[str, Any] = {"body_positions_km": {}, "trajectories": {}, "events": log.events}

    for name, samples in log.body_positions_km.items():
        data["body_positions_km"][name] = [{"jd": jd, "r": [r[0], r[1], r[2]]} for (jd, r) in samples]

    for label, path in log.trajectories.items():
        data["trajectories"][label] = [[p[0], p[1], p[2]] for p in path]

    Path(out_path).parent.mkdir(parents=True, exist_ok=True)
    with open(out_path, "w", encoding="utf-8") as f:
        json.dump(data, f)

    return out_path
