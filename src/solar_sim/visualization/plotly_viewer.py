from __future__ import annotations

from pathlib import Path
from typing import List, Optional

import plotly.graph_objects as go

from solar_sim.core.frames import Vector3
from solar_sim.simulation.engine import SimulationLog


def _scene_layout() -> dict:
    return dict(
        xaxis_title="X (km)",
        yaxis_title="Y (km)",
        zaxis_title="Z (km)",
        aspectmode="data",
    )


def render_static_scene(
    log: SimulationLog,
    out_html: str = "out/solar_scene.html",
    outlines: Optional[dict] = None,
) -> str:
    """
    Renders a static 3D scene:
      - Track and last position for each body
      - Optional orbit outlines (name -> list of points)
      - Planned trajectories
    """
    fig = go.Figure()

    for name, points in (outlines or {}).items():
        fig.add_trace(go.Scatter3d(
            x=[p[0] for p in points], y=[p[1] for p in points], z=[p[2] for p in points],
            mode="lines",
            name=f"{name} orbit",
            line=dict(width=1, dash="dot"),
        ))

    for name, samples in log.body_positions_km.items():
        xs = [r[0] for (_jd, r) in samples]
        ys = [r[1] for (_jd, r) in samples]
        zs = [r[2] for (_jd, r) in samples]

        fig.add_trace(go.Scatter3d(x=xs, y=ys, z=zs, mode="lines", name=f"{name} track"))
        fig.add_trace(go.Scatter3d(
            x=[xs[-1]], y=[ys[-1]], z=[zs[-1]],
            mode="markers",
            name=name,
            marker=dict(size=5),
        ))

    for label, path in log.trajectories.items():
        fig.add_trace(_path_trace(path, label))

    fig.update_layout(
        title="Solar System Playback",
        scene=_scene_layout(),
        margin=dict(l=0, r=0, t=40, b=0),
        legend=dict(orientation="h"),
    )

    Path(out_html).parent.mkdir(parents=True, exist_ok=True)
    fig.write_html(out_html, auto_open=False)
    return out_html


def _path_trace(path: List[Vector3], label: str) -> go.Scatter3d:
    return go.Scatter3d(
        x=[p[0] for p in path], y=[p[1] for p in path], z=[p[2] for p in path],
        mode="lines",
        name=label,
        line=dict(width=4),
    )


def render_animated_body(
    log: SimulationLog,
    name: str,
    out_html: str = "out/solar_animated.html",
) -> str:
    """
    Renders an animated 3D scene for ONE body: full track plus a moving marker.
    """
    if name not in log.body_positions_km:
        raise ValueError(f"Body '{name}' not found in log.body_positions_km")

    samples = log.body_positions_km[name]
    jds = [jd for (jd, _r) in samples]
    xs = [r[0] for (_jd, r) in samples]
    ys = [r[1] for (_jd, r) in samples]
    zs = [r[2] for (_jd, r) in samples]

    fig = go.Figure()
    fig.add_trace(go.Scatter3d(x=xs, y=ys, z=zs, mode="lines", name=f"{name} track"))
    fig.add_trace(go.Scatter3d(
        x=[xs[0]], y=[ys[0]], z=[zs[0]],
        mode="markers",
        name=f"{name} marker",
        marker=dict(size=6),
    ))

    # Frames update the marker trace (index 1)
    fig.frames = [
        go.Frame(
            name=str(i),
            data=[go.Scatter3d(x=[xs[i]], y=[ys[i]], z=[zs[i]], mode="markers", marker=dict(size=6))],
            traces=[1],
        )
        for i in range(len(jds))
    ]

    fig.update_layout(
        title=f"Animated Playback: {name}",
        scene=_scene_layout(),
        margin=dict(l=0, r=0, t=40, b=0),
        updatemenus=[dict(
            type="buttons",
            showactive=True,
            buttons=[
                dict(label="Play", method="animate",
                     args=[None, {"frame": {"duration": 50, "redraw": True}, "fromcurrent": True}]),
                dict(label="Pause", method="animate",
                     args=[[None], {"frame": {"duration": 0, "redraw": False}, "mode": "immediate"}]),
            ],
        )],
        sliders=[dict(
            steps=[dict(method="animate", args=[[str(i)], {"mode": "immediate", "frame": {"duration": 0, "redraw": True}}],
                        label=f"JD {jds[i]:.1f}") for i in range(0, len(jds), max(1, len(jds) // 20))],
            active=0,
        )],
    )

    Path(out_html).parent.mkdir(parents=True, exist_ok=True)
    fig.write_html(out_html, auto_open=False)
    return out_html
