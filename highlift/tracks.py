"""
Track/path generator for slat and flap carriages.

Slats ride a quadratic Bezier: straight forward travel with a drop that
eases out near full deployment. Flaps ride a cubic Bezier that runs aft
and curls down at the end; its controls are evenly spaced aft so the
carriage x equals the flap slide at the same extension phase. The same
curves drive the slat law and the flap carriage in ``kinematics`` and feed
the track polylines drawn by renderers.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional, Tuple

import numpy as np

from config import config
from config.wing_config import SurfaceKind
from .surfaces import PlacementCatalog, Segment

MIN_SAMPLES = 10


def sample_parameters(samples: int) -> np.ndarray:
    """``samples`` evenly spaced intervals over [0, 1] (samples + 1 values)."""
    if samples < MIN_SAMPLES:
        raise ValueError(f"Track resolution must be at least {MIN_SAMPLES} intervals, got {samples}")
    return np.linspace(0.0, 1.0, samples + 1)


def quadratic_bezier(p0, p1, p2, t) -> np.ndarray:
    """Evaluate a quadratic Bezier at scalar or array ``t``; returns (..., dim)."""
    t = np.asarray(t, dtype=float)[..., None]
    p0, p1, p2 = (np.asarray(p, dtype=float) for p in (p0, p1, p2))
    u = 1.0 - t
    return u * u * p0 + 2.0 * u * t * p1 + t * t * p2


def cubic_bezier(p0, p1, p2, p3, t) -> np.ndarray:
    """Evaluate a cubic Bezier at scalar or array ``t``; returns (..., dim)."""
    t = np.asarray(t, dtype=float)[..., None]
    p0, p1, p2, p3 = (np.asarray(p, dtype=float) for p in (p0, p1, p2, p3))
    u = 1.0 - t
    return u**3 * p0 + 3.0 * u * u * t * p1 + 3.0 * u * t * t * p2 + t**3 * p3


def slat_track_controls(taper: float) -> Tuple[np.ndarray, np.ndarray, np.ndarray]:
    """
    Control points of the slat track in the slat's stowed frame.

    With P1 at half the forward travel and the full drop, the curve is
    x = -depth*taper*t and y = -drop*taper*t*(2 - t).
    """
    depth = config.slats.depth * taper
    drop = config.slats.drop * taper
    return (
        np.zeros(3),
        np.array([-depth / 2, -drop, 0.0]),
        np.array([-depth, -drop, 0.0]),
    )


def flap_track_controls(
    chord: float, taper: float = 1.0
) -> Tuple[np.ndarray, np.ndarray, np.ndarray, np.ndarray]:
    """
    Control points of the flap track: aft run, then curl down.

    The x coordinates sit at thirds of the aft travel, so x = e*t exactly
    with e = extension_ratio*chord*taper.
    """
    e = config.flaps.extension_ratio * chord * taper
    return (
        np.zeros(3),
        np.array([e / 3, 0.0, 0.0]),
        np.array([2 * e / 3, -e * 0.2, 0.0]),
        np.array([e, -e * 0.4, 0.0]),
    )


def slat_track_point(taper: float, deployment: float) -> np.ndarray:
    return quadratic_bezier(*slat_track_controls(taper), deployment)


def flap_track_point(chord: float, taper: float, extension: float) -> np.ndarray:
    """Carriage point on the flap track at a flap extension phase in [0, 1]."""
    return cubic_bezier(*flap_track_controls(chord, taper), extension)


@dataclass(frozen=True)
class TrackPath:
    """Sampled track polylines for one segment, in the wing frame."""

    kind: SurfaceKind
    stations: Tuple[float, ...]       # Spanwise position of each track
    polylines: Tuple[np.ndarray, ...]  # One (N, 3) array per station
    current: Tuple[np.ndarray, ...]    # Carriage point per station at the query deployment

    @property
    def points(self) -> np.ndarray:
        """Polyline of the first track station."""
        return self.polylines[0]


def track_stations(segment: Segment) -> Tuple[float, float]:
    """Span positions of the two tracks carried by a segment."""
    offset = config.export.track_station_offset * segment.width_along_span * config.export.track_station_spread
    return (segment.span_center - offset, segment.span_center + offset)


def path_for(
    catalog: PlacementCatalog,
    segment: Segment,
    deployment: float,
    samples: Optional[int] = None,
) -> TrackPath:
    """
    Track polylines for a slat or flap segment.

    Args:
        catalog: Placement catalog supplying the stowed group offset
        segment: Segment whose tracks are drawn
        deployment: Deployment used for the carriage marker (clamped to [0, 1])
        samples: Polyline intervals; defaults to the per-kind SSOT value

    Returns:
        TrackPath with one polyline per track station
    """
    from .kinematics import clamp_deployment, flap_phases

    d = clamp_deployment(segment.kind, deployment)
    if segment.kind is SurfaceKind.SLATS:
        controls = slat_track_controls(segment.taper)
        curve = quadratic_bezier
        samples = samples if samples is not None else config.slats.track_samples
    elif segment.kind is SurfaceKind.FLAPS:
        controls = flap_track_controls(segment.chord_at_span, segment.taper)
        # Carriage is fully aft once the flap starts rotating
        d, _ = flap_phases(d)
        curve = cubic_bezier
        samples = samples if samples is not None else config.flaps.track_samples
    else:
        raise ValueError(f"{segment.kind.value} have no deployment track")

    local = curve(*controls, sample_parameters(samples))
    marker = curve(*controls, d)
    bx, by, _ = catalog.base_position(segment.kind)

    polylines = []
    current = []
    for station in track_stations(segment):
        shift = np.array([bx, by, station])
        polylines.append(local + shift)
        current.append(marker + shift)

    return TrackPath(
        kind=segment.kind,
        stations=track_stations(segment),
        polylines=tuple(polylines),
        current=tuple(current),
    )
