"""
Side-view deployment preview.

Draws one spanwise station of each surface (chordwise x against height y)
with matplotlib and animates it from the auto-deployment oscillator. The
figure's canvas timer is the oscillator's tick source; closing the window
tears the oscillator down so no tick outlives the figure.

Usage:
    python main.py --animate both
    python main.py --animate flaps --save flaps.gif
"""

from __future__ import annotations

from typing import Dict, List, Optional, Tuple
import logging

import numpy as np
import matplotlib.pyplot as plt
import matplotlib.animation as ani
from matplotlib.patches import Polygon

from config import config
from config.wing_config import SurfaceKind
from .controls import ControlState, sync_from_oscillator
from .oscillator import AnimationTarget, AutoDeployOscillator
from .scene import PartPlacement, iter_placements
from .surfaces import PlacementCatalog, Segment
from .tracks import path_for

logger = logging.getLogger(__name__)
logger.addHandler(logging.NullHandler())

PART_COLORS = {
    "slat": "#95a3b8",
    "flap": "#95a3b8",
    "vane": "#8595a8",
    "aileron": "#8a9db5",
    "panel": "#8a9db5",
    "roller": "#5a6a7a",
    "carriage": "#5a6a7a",
    "actuator": "#b36b00",
    "control_rod": "#4a5a6a",
}

# Space left around the swept parts [m]
VIEW_MARGIN = 0.2


def side_outline(placement: PartPlacement) -> np.ndarray:
    """(4, 2) x-y outline of a part box at its mid-span plane."""
    sx, sy, _ = placement.size
    cx, cy, cz = placement.local_center
    local = np.array([
        [cx - sx / 2, cy - sy / 2, cz],
        [cx + sx / 2, cy - sy / 2, cz],
        [cx + sx / 2, cy + sy / 2, cz],
        [cx - sx / 2, cy + sy / 2, cz],
    ])
    world = placement.transform.apply(local) + np.asarray(placement.origin)
    return world[:, :2]


def nearest_segment(catalog: PlacementCatalog, kind: SurfaceKind, span_position: float) -> Segment:
    """Segment of ``kind`` whose centre is closest to ``span_position``."""
    return min(catalog.segments_for(kind), key=lambda s: abs(s.span_center - span_position))


class DeploymentPreview:
    """Matplotlib side view of one station per surface kind."""

    def __init__(
        self,
        catalog: Optional[PlacementCatalog] = None,
        oscillator: Optional[AutoDeployOscillator] = None,
        controls: Optional[ControlState] = None,
        span_position: float = 0.5,
    ):
        self.catalog = catalog or PlacementCatalog()
        self.oscillator = oscillator or AutoDeployOscillator()
        self.controls = controls or ControlState()
        self.stations: Dict[SurfaceKind, Segment] = {
            kind: nearest_segment(self.catalog, kind, span_position) for kind in SurfaceKind
        }

        self.fig, self.ax = plt.subplots(figsize=(9, 4))
        self._patches: Dict[str, Polygon] = {}
        self._setup_axes()
        self.redraw()

    def _setup_axes(self) -> None:
        ax = self.ax
        ax.set_aspect("equal")
        (x_low, x_high), (y_low, y_high) = self.view_limits()
        ax.set_xlim(x_low, x_high)
        ax.set_ylim(y_low, y_high)
        ax.set_xlabel("x (aft) [m]")
        ax.set_ylabel("y (up) [m]")
        ax.grid(True, alpha=0.3)

        for kind in (SurfaceKind.SLATS, SurfaceKind.FLAPS):
            track = path_for(self.catalog, self.stations[kind], 0.0)
            ax.plot(track.points[:, 0], track.points[:, 1], color="#3a4a5a", lw=1, alpha=0.6)

    def _station_placements(self, controls: ControlState) -> List[PartPlacement]:
        return [
            p for p in iter_placements(self.catalog, controls)
            if not p.is_static and p.segment == self.stations[p.kind]
        ]

    def _placements(self) -> List[PartPlacement]:
        return self._station_placements(sync_from_oscillator(self.controls, self.oscillator))

    def view_limits(self) -> Tuple[Tuple[float, float], Tuple[float, float]]:
        """x and y bounds covering the stations stowed and at both range ends."""
        extremes = (
            ControlState(),
            ControlState(slats=1.0, flaps=1.0, ailerons=1.0, spoilers=1.0),
            ControlState(slats=1.0, flaps=1.0, ailerons=-1.0, spoilers=1.0),
        )
        xy = np.vstack([
            p.corners()[:, :2]
            for controls in extremes
            for p in self._station_placements(controls)
        ])
        low = xy.min(axis=0) - VIEW_MARGIN
        high = xy.max(axis=0) + VIEW_MARGIN
        return (float(low[0]), float(high[0])), (float(low[1]), float(high[1]))

    def redraw(self) -> None:
        for placement in self._placements():
            xy = side_outline(placement)
            patch = self._patches.get(placement.label)
            if patch is None:
                patch = Polygon(
                    xy, closed=True,
                    facecolor=PART_COLORS.get(placement.part, "#a0a0a0"),
                    edgecolor="#2a3440", lw=0.8,
                )
                self.ax.add_patch(patch)
                self._patches[placement.label] = patch
            else:
                patch.set_xy(xy)

        state = self.oscillator.current_state()
        self.ax.set_title(
            f"Slats {state.slat_value:.0%}  Flaps {state.flap_value:.0%}"
            + ("  [auto]" if state.running else "")
        )
        self.fig.canvas.draw_idle()

    def show(self, target: AnimationTarget = AnimationTarget.BOTH) -> None:
        """Interactive window driven by the canvas timer."""
        interval_ms = int(round(config.animation.tick_interval_s * 1000))
        timer = self.fig.canvas.new_timer(interval=interval_ms)
        self.oscillator.attach_timer(timer)
        timer.add_callback(self.redraw)
        self.fig.canvas.mpl_connect("close_event", lambda _evt: self.oscillator.close())
        self.oscillator.start(target)
        try:
            plt.show()
        finally:
            self.oscillator.close()

    def save(self, outfile: str, target: AnimationTarget = AnimationTarget.BOTH, n_frames: int = 200) -> None:
        """Render ``n_frames`` oscillator ticks to a GIF or MP4."""
        interval_ms = config.animation.tick_interval_s * 1000
        self.oscillator.start(target)

        def update(_frame):
            self.oscillator.tick()
            self.redraw()

        anim = ani.FuncAnimation(self.fig, update, frames=n_frames, interval=interval_ms, blit=False)
        fps = max(1, int(round(1000 / interval_ms)))
        if outfile.endswith(".mp4"):
            anim.save(outfile, writer=ani.FFMpegWriter(fps=fps, bitrate=2000))
        else:
            anim.save(outfile, writer="pillow", fps=fps)
        self.oscillator.close()
        plt.close(self.fig)
        logger.info("Saved deployment animation: %s", outfile)
