"""
Open-HLD: Single Source of Truth (SSOT)
=======================================

This configuration file defines ALL parametric constants for the wing
assembly and its movable high-lift and control surfaces.
NEVER hard-code dimensions elsewhere. Planform, placement catalog,
kinematics, exports and the preview all derive from these variables.

Units are metres and radians unless noted. Spanwise coordinates run from
-span/2 to +span/2 with the wing root at 0.
"""

from dataclasses import asdict, dataclass, field
from enum import Enum
from typing import Dict, List, Tuple
import hashlib
import json
import math


class SurfaceKind(Enum):
    """Movable surfaces driven by the kinematics engine."""
    SLATS = "slats"          # Leading-edge slats on curved tracks
    FLAPS = "flaps"          # Trailing-edge Fowler flaps (two-phase)
    AILERONS = "ailerons"    # Roll control, signed deflection
    SPOILERS = "spoilers"    # Upper-surface lift dumpers

    @property
    def deployment_range(self) -> Tuple[float, float]:
        """Declared range of the deployment parameter for this surface."""
        if self is SurfaceKind.AILERONS:
            return (-1.0, 1.0)
        return (0.0, 1.0)


# (start_span, end_span, segment_width_target, name)
SectionSpec = Tuple[float, float, float, str]


@dataclass
class PlanformParams:
    """Main wing planform - all dimensions in metres."""

    span: float = 5.0                     # Tip to tip
    root_chord: float = 2.0               # Chord at span position 0
    tip_chord: float = 1.4                # Chord at |span position| = span/2
    thickness_ratio: float = 0.15         # 0.3 m wing box over 2 m root chord
    taper_motion_loss: float = 0.2        # Deployment travel lost at the tip

    # === LEADING EDGE (fixed panels + slat chord reference) ===
    le_root_chord: float = 0.6
    le_tip_chord: float = 0.4

    @property
    def semi_span(self) -> float:
        return self.span / 2

    @property
    def taper_ratio(self) -> float:
        """Tip chord over root chord."""
        return self.tip_chord / self.root_chord

    @property
    def wing_area(self) -> float:
        """Trapezoidal planform area in square metres."""
        return (self.root_chord + self.tip_chord) / 2 * self.span


@dataclass
class SlatParams:
    """Leading-edge slat travel and section sizing."""

    depth: float = 0.3                    # Forward travel at full deployment
    drop: float = 0.15                    # Downward travel at full deployment
    thickness: float = 0.04
    chord_fraction: float = 0.25          # Slat chord over leading-edge chord
    roller_fraction: float = 0.8          # Roller travel relative to slat
    actuator_fraction: float = 0.5        # Piston travel relative to slat
    fitting_size: float = 0.04            # Roller and actuator body size
    track_samples: int = 10               # Polyline intervals per track


@dataclass
class FlapParams:
    """Fowler flap two-phase motion and vane coupling."""

    chord_fraction: float = 0.6           # Flap chord over local chord
    extension_ratio: float = 0.3          # Aft travel over local chord
    max_angle: float = math.pi / 6        # 30 deg at full deployment
    thickness: float = 0.06
    vane_chord_fraction: float = 0.6      # Vane chord over flap chord
    vane_thickness: float = 0.04
    vane_rotation_gain: float = 1.2       # Vane rotation over flap rotation
    vane_offset_x: float = -0.1           # Vane shift toward the wing, per chord
    vane_offset_y: float = -0.05
    carriage_size: float = 0.06
    track_samples: int = 20


@dataclass
class AileronParams:
    """Aileron hinge-line rotation."""

    chord_fraction: float = 0.25
    max_angle: float = math.pi / 6        # 30 deg at full deflection
    thickness: float = 0.05
    hinge_count: int = 5
    control_rod_offset: float = 2.0       # Rod endpoint below hinge, in thicknesses


@dataclass
class SpoilerParams:
    """Spoiler panel rotation about the trailing hinge edge."""

    panel_chord: float = 0.3              # At the root; scales with local chord
    max_angle: float = math.pi / 4        # 45 deg at full deployment
    thickness: float = 0.02
    actuator_length: float = 0.08


@dataclass
class LayoutParams:
    """Spanwise sections per surface kind and group offsets in the wing frame."""

    slat_sections: List[SectionSpec] = field(default_factory=lambda: [
        (-2.0, -1.2, 0.4, "Inboard Slat"),
        (0.2, 1.0, 0.4, "Mid Slat"),
        (1.5, 2.3, 0.4, "Outboard Slat"),
    ])
    flap_sections: List[SectionSpec] = field(default_factory=lambda: [
        (-2.25, -0.75, 0.5, "Inboard Flap"),
        (-0.5, 1.0, 0.5, "Mid Flap"),
        (1.25, 1.75, 0.5, "Outboard Flap"),
    ])
    spoiler_sections: List[SectionSpec] = field(default_factory=lambda: [
        (1.75, 2.15, 0.13, "Spoiler Panels"),
    ])
    aileron_sections: List[SectionSpec] = field(default_factory=lambda: [
        (2.15, 2.5, 0.5, "Aileron"),
    ])

    # Gaps the fixed leading edge leaves for the slats
    leading_edge_gaps: List[Tuple[float, float]] = field(default_factory=lambda: [
        (-2.0, -1.2),
        (0.2, 1.0),
        (1.5, 2.3),
    ])

    # Surface group offsets keyed by SurfaceKind.value
    base_positions: Dict[str, Tuple[float, float, float]] = field(
        default_factory=lambda: {
            "slats": (-0.9, 0.0, 0.0),
            "flaps": (1.5, 0.0, 0.0),
            "ailerons": (1.5, 0.0, 0.0),
            "spoilers": (0.5, 0.25, 0.0),
        }
    )

    def sections(self, kind: SurfaceKind) -> List[SectionSpec]:
        return {
            SurfaceKind.SLATS: self.slat_sections,
            SurfaceKind.FLAPS: self.flap_sections,
            SurfaceKind.SPOILERS: self.spoiler_sections,
            SurfaceKind.AILERONS: self.aileron_sections,
        }[kind]


@dataclass
class AnimationParams:
    """Auto-deployment oscillator timing."""

    tick_interval_s: float = 0.030        # Timer period
    step: float = 0.01                    # Parameter change per tick
    upper_bound: float = 0.99             # Reverse to retracting at/above
    lower_bound: float = 0.01             # Reverse to extending at/below


@dataclass
class ExportParams:
    """Track template and scene export settings."""

    track_station_offset: float = 0.3     # Track offset from segment centre
    track_station_spread: float = 0.4     # Fraction of segment width
    segment_fill: float = 0.9             # Part width over segment width
    dxf_units_scale: float = 1000.0       # Metres to millimetres in DXF


@dataclass
class WingAssemblyConfig:
    """
    Master configuration singleton.

    ALL downstream modules import this. Changes here propagate through:
    - Planform chord/taper laws
    - Placement catalog sections and offsets
    - Kinematics limits and track shapes
    - Oscillator timing
    - DXF/STEP exports and the preview
    """

    planform: PlanformParams = field(default_factory=PlanformParams)
    slats: SlatParams = field(default_factory=SlatParams)
    flaps: FlapParams = field(default_factory=FlapParams)
    ailerons: AileronParams = field(default_factory=AileronParams)
    spoilers: SpoilerParams = field(default_factory=SpoilerParams)
    layout: LayoutParams = field(default_factory=LayoutParams)
    animation: AnimationParams = field(default_factory=AnimationParams)
    export: ExportParams = field(default_factory=ExportParams)

    # Project metadata
    project_name: str = "Open-HLD"
    version: str = "0.1.0"
    baseline: str = "Stylized swept transport wing"

    def validate(self) -> List[str]:
        """Validate the design constants the catalog and oscillator rely on."""
        errors = []
        pf = self.planform

        if pf.span <= 0:
            errors.append(f"PLANFORM: span must be positive, got {pf.span}")
        if not (pf.root_chord >= pf.tip_chord > 0):
            errors.append(
                f"PLANFORM: require root_chord >= tip_chord > 0 "
                f"(root {pf.root_chord}, tip {pf.tip_chord})"
            )
        if not (pf.le_root_chord >= pf.le_tip_chord > 0):
            errors.append("PLANFORM: leading-edge chords must taper and stay positive")

        # LAYOUT: sections inside the span and non-overlapping per kind
        for kind in SurfaceKind:
            specs = sorted(self.layout.sections(kind))
            for start, end, width, name in specs:
                if end <= start:
                    errors.append(f"LAYOUT: {name} has end {end} <= start {start}")
                if width <= 0:
                    errors.append(f"LAYOUT: {name} segment width target must be positive")
                if start < -pf.semi_span or end > pf.semi_span:
                    errors.append(f"LAYOUT: {name} [{start}, {end}] leaves the wing span")
            for (_, a_end, _, a_name), (b_start, _, _, b_name) in zip(specs, specs[1:]):
                if b_start < a_end:
                    errors.append(f"LAYOUT: {a_name} overlaps {b_name}")

        # Slats must sit exactly in the leading-edge gaps
        slat_spans = sorted((s, e) for s, e, _, _ in self.layout.slat_sections)
        if slat_spans != sorted(self.layout.leading_edge_gaps):
            errors.append(
                "LAYOUT: slat sections do not match the fixed leading-edge gaps"
            )

        # Spoilers and ailerons must stay clear of the flap spans
        for kind in (SurfaceKind.SPOILERS, SurfaceKind.AILERONS):
            for start, end, _, name in self.layout.sections(kind):
                for f_start, f_end, _, f_name in self.layout.flap_sections:
                    if start < f_end and f_start < end:
                        errors.append(f"LAYOUT: {name} overlaps {f_name}")

        anim = self.animation
        if anim.tick_interval_s <= 0 or anim.step <= 0:
            errors.append("ANIMATION: tick interval and step must be positive")
        if not (0.0 <= anim.lower_bound < anim.upper_bound <= 1.0):
            errors.append("ANIMATION: reversal bounds must satisfy 0 <= lower < upper <= 1")

        return errors

    def config_hash(self) -> str:
        """Stable hash of the configuration for export provenance."""
        payload = json.dumps(asdict(self), default=str, sort_keys=True)
        return hashlib.sha256(payload.encode("utf-8")).hexdigest()

    def summary(self) -> str:
        """Generate human-readable configuration summary."""
        pf = self.planform
        return f"""
Open-HLD Configuration Summary
==============================
Baseline: {self.baseline}
Version: {self.version}

PLANFORM
--------
Span: {pf.span:.2f} m
Root / Tip Chord: {pf.root_chord:.2f} / {pf.tip_chord:.2f} m
Taper Ratio: {pf.taper_ratio:.2f}
Wing Area: {pf.wing_area:.2f} m^2

SURFACES
--------
Slat Sections: {len(self.layout.slat_sections)} (travel {self.slats.depth} m fwd, {self.slats.drop} m drop)
Flap Sections: {len(self.layout.flap_sections)} (max {math.degrees(self.flaps.max_angle):.0f} deg)
Aileron Sections: {len(self.layout.aileron_sections)} (+/-{math.degrees(self.ailerons.max_angle):.0f} deg)
Spoiler Sections: {len(self.layout.spoiler_sections)} (max {math.degrees(self.spoilers.max_angle):.0f} deg)

ANIMATION
---------
Tick: {self.animation.tick_interval_s * 1000:.0f} ms, step {self.animation.step}
"""


# Singleton instance - import this throughout the project
config = WingAssemblyConfig()

# Validate on import
_errors = config.validate()
if _errors:
    import warnings
    for err in _errors:
        warnings.warn(err, UserWarning)
