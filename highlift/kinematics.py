"""
Open-HLD: Deployment Kinematics
===============================

One pure law per surface kind mapping (segment, deployment, taper) to the
rigid transform of the moving part relative to its stowed pose:

- Slats: forward and down along the curved slat track
- Flaps: slide aft (first half), then rotate trailing edge down about the
  hinge with aft travel held (second half)
- Ailerons: rotate about the hinge line, signed deflection
- Spoilers: rotate up about the trailing hinge edge

``transform_for`` is the single dispatch point. Dependent parts (vane,
rollers, actuators, control rods) come from ``part_transforms`` and have no
deployment input of their own.
"""

from __future__ import annotations

from typing import Callable, Dict, Optional, Sequence
import math

from config import config
from config.wing_config import SurfaceKind
from .surfaces import Segment, flap_chord, spoiler_panel_chord
from .tracks import flap_track_point, slat_track_point
from .transforms import ORIGIN, Transform, rotate_point


# Flaps deflect about -z: positive rotation lowers the trailing edge
FLAP_AXIS = -1


def clamp_deployment(kind: SurfaceKind, value: float) -> float:
    """Clamp a deployment parameter to the kind's declared range; NaN becomes 0."""
    low, high = kind.deployment_range
    value = float(value)
    if math.isnan(value):
        return 0.0
    return max(low, min(high, value))


def _vec(array) -> tuple:
    return tuple(float(v) for v in array)


# === PER-KIND LAWS ===

def slat_transform(segment: Segment, deployment: float, taper: float) -> Transform:
    """Slat position on its track: forward -depth*taper*d, drop -drop*taper*d*(2-d)."""
    d = clamp_deployment(SurfaceKind.SLATS, deployment)
    return Transform(translation=_vec(slat_track_point(taper, d)))


def flap_phases(deployment: float) -> tuple:
    """(extension_phase, rotation_phase) for a clamped flap deployment."""
    d = clamp_deployment(SurfaceKind.FLAPS, deployment)
    return min(1.0, 2.0 * d), max(0.0, 2.0 * d - 1.0)


def flap_hinge(segment: Segment) -> tuple:
    """Flap hinge line (leading edge) in the flap's stowed frame."""
    return (-flap_chord(segment) / 2, 0.0, 0.0)


def _deflect_about_hinge(segment: Segment, rotation: float, shift: Sequence[float]) -> Transform:
    """Rotate about the flap hinge (trailing edge down), then slide by ``shift``."""
    hinged = Transform.about_pivot(rotation, flap_hinge(segment), axis=FLAP_AXIS)
    return hinged.then(Transform(translation=tuple(shift)))


def flap_transform(segment: Segment, deployment: float, taper: float) -> Transform:
    """Fowler motion: aft slide then rotation about the hinge with aft travel held."""
    extension, rotation_phase = flap_phases(deployment)
    aft = config.flaps.extension_ratio * segment.chord_at_span * extension * taper
    return _deflect_about_hinge(
        segment, config.flaps.max_angle * rotation_phase, (aft, 0.0, 0.0)
    )


def vane_transform(segment: Segment, deployment: float, taper: float) -> Transform:
    """Secondary flap element: follows the main flap, rotates 1.2x, tucks toward the wing."""
    d = clamp_deployment(SurfaceKind.FLAPS, deployment)
    extension, rotation_phase = flap_phases(d)
    chord = segment.chord_at_span
    aft = config.flaps.extension_ratio * chord * extension * taper
    rotation = config.flaps.max_angle * rotation_phase * config.flaps.vane_rotation_gain
    return _deflect_about_hinge(
        segment,
        rotation,
        (aft + config.flaps.vane_offset_x * chord * d, config.flaps.vane_offset_y * chord * d, 0.0),
    )


def aileron_transform(
    segment: Segment,
    deflection: float,
    taper: float,
    pivot: Optional[Sequence[float]] = None,
) -> Transform:
    """Rotation about the hinge line (part origin unless a pivot is given)."""
    d = clamp_deployment(SurfaceKind.AILERONS, deflection)
    rotation = d * config.ailerons.max_angle
    if pivot is None:
        return Transform(rotation=rotation)
    return Transform.about_pivot(rotation, pivot)


def spoiler_hinge(segment: Segment) -> tuple:
    """Trailing hinge edge of a spoiler panel in its stowed frame."""
    return (spoiler_panel_chord(segment) / 2, 0.0, 0.0)


def spoiler_transform(
    segment: Segment,
    deployment: float,
    taper: float,
    pivot: Optional[Sequence[float]] = None,
) -> Transform:
    """Panel tilts up out of the surface about its trailing hinge edge."""
    d = clamp_deployment(SurfaceKind.SPOILERS, deployment)
    rotation = -d * config.spoilers.max_angle
    if pivot is None:
        pivot = spoiler_hinge(segment)
    return Transform.about_pivot(rotation, pivot)


_LAWS: Dict[SurfaceKind, Callable[..., Transform]] = {
    SurfaceKind.SLATS: slat_transform,
    SurfaceKind.FLAPS: flap_transform,
    SurfaceKind.AILERONS: aileron_transform,
    SurfaceKind.SPOILERS: spoiler_transform,
}

_PIVOTED = (SurfaceKind.AILERONS, SurfaceKind.SPOILERS)


def transform_for(
    kind: SurfaceKind,
    segment: Segment,
    deployment: float,
    pivot: Optional[Sequence[float]] = None,
) -> Transform:
    """
    Transform of a segment's primary part relative to its stowed pose.

    Args:
        kind: Surface kind; must match the segment
        segment: Catalog segment (carries local chord and taper)
        deployment: Deployment parameter, clamped to the kind's range
        pivot: Optional rotation pivot in the part frame (ailerons, spoilers)

    Returns:
        Transform to apply to the part's stowed geometry
    """
    try:
        law = _LAWS[kind]
    except (KeyError, TypeError):
        raise ValueError(f"Unknown surface kind: {kind}") from None
    if segment.kind is not kind:
        raise ValueError(f"Segment belongs to {segment.kind.value}, not {kind.value}")
    if pivot is not None:
        if kind not in _PIVOTED:
            raise ValueError(f"{kind.value} do not accept a pivot override")
        return law(segment, deployment, segment.taper, pivot=pivot)
    return law(segment, deployment, segment.taper)


# === DEPENDENT PARTS ===

def _scaled(transform: Transform, fraction: float) -> Transform:
    tx, ty, tz = transform.translation
    return Transform(translation=(tx * fraction, ty * fraction, tz * fraction))


def control_rod_endpoint(deflection: float) -> tuple:
    """Aileron control rod endpoint: fixed offset below the hinge, rotated with the surface."""
    offset = (0.0, -config.ailerons.control_rod_offset * config.ailerons.thickness, 0.0)
    rotation = clamp_deployment(SurfaceKind.AILERONS, deflection) * config.ailerons.max_angle
    return rotate_point(offset, rotation)


def part_transforms(kind: SurfaceKind, segment: Segment, deployment: float) -> Dict[str, Transform]:
    """Primary and dependent part transforms for one segment."""
    primary = transform_for(kind, segment, deployment)
    taper = segment.taper

    if kind is SurfaceKind.SLATS:
        return {
            "slat": primary,
            "roller": _scaled(primary, config.slats.roller_fraction),
            "actuator": _scaled(primary, config.slats.actuator_fraction),
        }
    if kind is SurfaceKind.FLAPS:
        extension, _ = flap_phases(deployment)
        carriage = flap_track_point(segment.chord_at_span, taper, extension)
        return {
            "flap": primary,
            "vane": vane_transform(segment, deployment, taper),
            "carriage": Transform(translation=_vec(carriage)),
        }
    if kind is SurfaceKind.AILERONS:
        return {
            "aileron": primary,
            # Rod pivots on the hinge line with the surface
            "control_rod": Transform(translation=ORIGIN, rotation=primary.rotation),
        }
    return {
        "panel": primary,
        # Actuator rod rides the panel about the same hinge
        "actuator": primary,
    }
