"""
Open-HLD: Surface Placement Catalog
===================================

Fixed spanwise layout of every movable surface: which span intervals each
kind occupies, how those intervals split into segments, where each group
sits in the wing frame, and how big each part is.

The catalog is built once from the SSOT and never mutated. Layout rules
(sections inside the span, no overlap within a kind, slats in the fixed
leading-edge gaps, spoilers/ailerons clear of the flaps) are checked at
construction; queries trust them.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, List, Optional, Sequence, Tuple
import logging
import math

from config import config
from config.wing_config import LayoutParams, SurfaceKind
from .planform import WingPlanform
from .transforms import Vec3

logger = logging.getLogger(__name__)
logger.addHandler(logging.NullHandler())


@dataclass(frozen=True)
class SurfaceSection:
    """Contiguous spanwise run of one surface, split into equal segments."""

    start_span: float
    end_span: float
    segment_width_target: float = 0.5
    name: str = ""

    def __post_init__(self):
        if self.end_span <= self.start_span:
            raise ValueError(
                f"Section {self.name!r}: end {self.end_span} must exceed start {self.start_span}"
            )
        if self.segment_width_target <= 0:
            raise ValueError(f"Section {self.name!r}: segment width target must be positive")

    @property
    def length(self) -> float:
        return self.end_span - self.start_span

    @property
    def segment_count(self) -> int:
        return max(2, math.floor(self.length / self.segment_width_target))

    @property
    def segment_width(self) -> float:
        return self.length / self.segment_count

    def segment_center(self, index: int) -> float:
        if not 0 <= index < self.segment_count:
            raise IndexError(
                f"Segment {index} out of range for {self.name!r} ({self.segment_count} segments)"
            )
        return self.start_span + index * self.segment_width + self.segment_width / 2

    def overlaps(self, other: "SurfaceSection") -> bool:
        """Open-interval overlap; sections that only touch do not overlap."""
        return self.start_span < other.end_span and other.start_span < self.end_span


@dataclass(frozen=True)
class Segment:
    """One spanwise slice of a section, derived on demand."""

    kind: SurfaceKind
    section_index: int
    index: int
    span_center: float
    chord_at_span: float
    width_along_span: float
    taper: float


def spoiler_panel_chord(segment: Segment) -> float:
    """Spoiler panel chord, scaled from the root value by local chord."""
    return config.spoilers.panel_chord * segment.chord_at_span / config.planform.root_chord


def flap_chord(segment: Segment) -> float:
    return segment.chord_at_span * config.flaps.chord_fraction


class PlacementCatalog:
    """
    Per-kind layout data for the wing assembly.

    Features:
    - Ordered sections per surface kind
    - On-demand segments with local chord and taper
    - Stowed group offsets and part sizes
    - Fixed leading-edge panels between the slat gaps
    """

    def __init__(
        self,
        planform: Optional[WingPlanform] = None,
        leading_edge: Optional[WingPlanform] = None,
        layout: Optional[LayoutParams] = None,
    ):
        self.planform = planform or WingPlanform.from_config()
        self.leading_edge = leading_edge or WingPlanform.leading_edge_from_config()
        self.layout = layout or config.layout

        self._sections: Dict[SurfaceKind, Tuple[SurfaceSection, ...]] = {
            kind: tuple(
                SurfaceSection(start, end, width, name)
                for start, end, width, name in self.layout.sections(kind)
            )
            for kind in SurfaceKind
        }
        self._verify()
        logger.debug(
            "Placement catalog built: %s",
            {kind.value: len(sections) for kind, sections in self._sections.items()},
        )

    def _verify(self) -> None:
        """Enforce the fixed layout rules once, at construction."""
        half = self.planform.semi_span
        for kind, sections in self._sections.items():
            for section in sections:
                if section.start_span < -half or section.end_span > half:
                    raise ValueError(
                        f"{kind.value} section {section.name!r} leaves the wing span"
                    )
            for i, a in enumerate(sections):
                for b in sections[i + 1:]:
                    if a.overlaps(b):
                        raise ValueError(
                            f"{kind.value} sections {a.name!r} and {b.name!r} overlap"
                        )

        slat_spans = sorted((s.start_span, s.end_span) for s in self._sections[SurfaceKind.SLATS])
        if slat_spans != sorted(tuple(gap) for gap in self.layout.leading_edge_gaps):
            raise ValueError("Slat sections must align with the fixed leading-edge gaps")

        for kind in (SurfaceKind.SPOILERS, SurfaceKind.AILERONS):
            for section in self._sections[kind]:
                for flap in self._sections[SurfaceKind.FLAPS]:
                    if section.overlaps(flap):
                        raise ValueError(
                            f"{kind.value} section {section.name!r} overlaps flap {flap.name!r}"
                        )

    # --- sections and segments ---

    def sections_for(self, kind: SurfaceKind) -> Tuple[SurfaceSection, ...]:
        """Ordered sections covering the kind's spanwise footprint."""
        try:
            return self._sections[kind]
        except KeyError:
            raise ValueError(f"Unknown surface kind: {kind}") from None

    def chord_planform(self, kind: SurfaceKind) -> WingPlanform:
        """Slats scale with the leading-edge strip; everything else with the wing."""
        return self.leading_edge if kind is SurfaceKind.SLATS else self.planform

    def segment(self, kind: SurfaceKind, section_index: int, segment_index: int) -> Segment:
        sections = self.sections_for(kind)
        if not 0 <= section_index < len(sections):
            raise IndexError(
                f"Section {section_index} out of range for {kind.value} ({len(sections)} sections)"
            )
        section = sections[section_index]
        center = section.segment_center(segment_index)
        return Segment(
            kind=kind,
            section_index=section_index,
            index=segment_index,
            span_center=center,
            chord_at_span=self.chord_planform(kind).chord_at(center),
            width_along_span=section.segment_width,
            taper=self.planform.taper_factor(center),
        )

    def segments_for(self, kind: SurfaceKind) -> List[Segment]:
        """Every segment of a kind, inboard to outboard per section order."""
        return [
            self.segment(kind, s_idx, i)
            for s_idx, section in enumerate(self.sections_for(kind))
            for i in range(section.segment_count)
        ]

    # --- placement ---

    def base_position(self, kind: SurfaceKind) -> Vec3:
        """Stowed offset of the surface group in the wing frame."""
        if not isinstance(kind, SurfaceKind):
            raise ValueError(f"Unknown surface kind: {kind}")
        return tuple(self.layout.base_positions[kind.value])

    def stowed_origin(self, segment: Segment) -> Vec3:
        """Stowed position of a segment's part frame in the wing frame."""
        bx, by, bz = self.base_position(segment.kind)
        return (bx, by, bz + segment.span_center)

    def part_size(self, segment: Segment, part: Optional[str] = None) -> Vec3:
        """(chordwise, thickness, spanwise) box extents of a segment's part."""
        fill = config.export.segment_fill
        width = segment.width_along_span * fill
        chord = segment.chord_at_span
        kind = segment.kind

        if kind is SurfaceKind.SLATS:
            return (chord * config.slats.chord_fraction, config.slats.thickness, width)
        if kind is SurfaceKind.FLAPS:
            main_chord = flap_chord(segment)
            if part == "vane":
                return (
                    main_chord * config.flaps.vane_chord_fraction,
                    config.flaps.vane_thickness,
                    segment.width_along_span * (fill - 0.05),
                )
            return (main_chord, config.flaps.thickness, width)
        if kind is SurfaceKind.AILERONS:
            return (chord * config.ailerons.chord_fraction, config.ailerons.thickness, width)
        return (spoiler_panel_chord(segment), config.spoilers.thickness, width)

    def hinge_stations(self, kind: SurfaceKind) -> List[float]:
        """Evenly spaced hinge span positions along each aileron section."""
        if kind is not SurfaceKind.AILERONS:
            raise ValueError(f"{kind.value} has no discrete hinge stations")
        count = config.ailerons.hinge_count
        stations = []
        for section in self.sections_for(kind):
            stations.extend(
                section.start_span + i / (count - 1) * section.length for i in range(count)
            )
        return stations

    # --- fixed leading edge ---

    def fixed_leading_edge_sections(self) -> List[SurfaceSection]:
        """Leading-edge panels between the slat gaps, tip to tip."""
        half = self.planform.semi_span
        gaps: Sequence[Tuple[float, float]] = sorted(
            (s.start_span, s.end_span) for s in self._sections[SurfaceKind.SLATS]
        )
        panels = []
        cursor = -half
        for start, end in gaps:
            if start > cursor:
                panels.append(SurfaceSection(cursor, start, name=f"Fixed LE {len(panels) + 1}"))
            cursor = max(cursor, end)
        if cursor < half:
            panels.append(SurfaceSection(cursor, half, name=f"Fixed LE {len(panels) + 1}"))
        return panels
