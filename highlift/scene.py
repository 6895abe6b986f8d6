"""
Scene assembly for renderers and exporters.

Walks the placement catalog for a control state and emits one
``PartPlacement`` per moving part: where its frame sits when stowed, the
transform from the kinematics, and a box describing its extent. The fixed
leading-edge panels and the aileron hinge fittings follow as static
placements (no segment, identity transform). Renderers only need
``corners()``; nothing here depends on a drawing library.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, Iterator, List, Optional

import numpy as np

from config import config
from config.wing_config import SurfaceKind
from .controls import ControlState
from .kinematics import control_rod_endpoint, part_transforms, spoiler_hinge
from .surfaces import PlacementCatalog, Segment
from .transforms import ORIGIN, Transform, Vec3

_UNIT_BOX = np.array([
    [sx, sy, sz]
    for sx in (-0.5, 0.5)
    for sy in (-0.5, 0.5)
    for sz in (-0.5, 0.5)
])


@dataclass(frozen=True)
class PartPlacement:
    """A box-shaped part posed by the kinematics."""

    kind: SurfaceKind
    part: str
    segment: Optional[Segment]   # None for static structure
    origin: Vec3          # Stowed part frame in the wing frame
    local_center: Vec3    # Box centre in the part frame
    size: Vec3            # (chordwise, thickness, spanwise)
    transform: Transform
    index: int = 0        # Running number of a static part

    @property
    def is_static(self) -> bool:
        return self.segment is None

    @property
    def label(self) -> str:
        if self.segment is None:
            return f"{self.kind.value}_{self.part}_{self.index}"
        return f"{self.kind.value}_{self.segment.section_index}_{self.segment.index}_{self.part}"

    def corners(self) -> np.ndarray:
        """(8, 3) box corners in the wing frame."""
        local = _UNIT_BOX * np.asarray(self.size) + np.asarray(self.local_center)
        return self.transform.apply(local) + np.asarray(self.origin)


def control_rod_geometry() -> Dict[str, Vec3]:
    """Rod box spanning the hinge line to the stowed control rod endpoint."""
    end = np.asarray(control_rod_endpoint(0.0))
    width = config.ailerons.thickness / 2
    return {
        "center": tuple(float(v) for v in end / 2),
        "size": (width, float(np.linalg.norm(end)), width),
    }


def _part_geometry(catalog: PlacementCatalog, segment: Segment, part: str) -> Dict[str, Vec3]:
    """Box centre and size of one part in its own frame."""
    kind = segment.kind
    chord_x, thick, width = catalog.part_size(segment, part)

    if kind is SurfaceKind.SLATS:
        if part == "slat":
            return {"center": ORIGIN, "size": (chord_x, thick, width)}
        f = config.slats.fitting_size
        return {"center": ORIGIN, "size": (f, f, f)}

    if kind is SurfaceKind.FLAPS:
        if part == "carriage":
            c = config.flaps.carriage_size
            return {"center": ORIGIN, "size": (c, c, c)}
        return {"center": ORIGIN, "size": (chord_x, thick, width)}

    if kind is SurfaceKind.AILERONS:
        if part == "control_rod":
            return control_rod_geometry()
        return {"center": (chord_x / 2, 0.0, 0.0), "size": (chord_x, thick, width)}

    if part == "actuator":
        hinge_x = spoiler_hinge(segment)[0]
        length = config.spoilers.actuator_length
        return {"center": (hinge_x / 2, -length / 2, 0.0), "size": (thick, length, thick)}
    return {"center": (0.0, thick / 2, 0.0), "size": (chord_x, thick, width)}


def fixed_leading_edge_placements(catalog: PlacementCatalog) -> Iterator[PartPlacement]:
    """Static leading-edge panels filling the span between the slats."""
    bx, by, bz = catalog.base_position(SurfaceKind.SLATS)
    strip = catalog.leading_edge
    for index, section in enumerate(catalog.fixed_leading_edge_sections()):
        center = (section.start_span + section.end_span) / 2
        yield PartPlacement(
            kind=SurfaceKind.SLATS,
            part="fixed_le",
            segment=None,
            origin=(bx, by, bz + center),
            local_center=ORIGIN,
            size=(strip.chord_at(center), strip.thickness_at(center), section.length),
            transform=Transform(),
            index=index,
        )


def hinge_fitting_placements(catalog: PlacementCatalog) -> Iterator[PartPlacement]:
    """Static fittings at every aileron hinge station."""
    bx, by, bz = catalog.base_position(SurfaceKind.AILERONS)
    size = config.ailerons.thickness
    for index, station in enumerate(catalog.hinge_stations(SurfaceKind.AILERONS)):
        yield PartPlacement(
            kind=SurfaceKind.AILERONS,
            part="hinge_fitting",
            segment=None,
            origin=(bx, by, bz + station),
            local_center=ORIGIN,
            size=(size, size, size),
            transform=Transform(),
            index=index,
        )


_STATIC_PARTS = {
    SurfaceKind.SLATS: fixed_leading_edge_placements,
    SurfaceKind.AILERONS: hinge_fitting_placements,
}


def iter_placements(
    catalog: PlacementCatalog,
    controls: ControlState,
    kinds: Optional[List[SurfaceKind]] = None,
) -> Iterator[PartPlacement]:
    """Yield placements kind by kind: moving parts segment by segment, then static parts."""
    controls = controls.clamped()
    for kind in kinds or list(SurfaceKind):
        deployment = controls.value(kind)
        for segment in catalog.segments_for(kind):
            origin = catalog.stowed_origin(segment)
            for part, transform in part_transforms(kind, segment, deployment).items():
                geom = _part_geometry(catalog, segment, part)
                yield PartPlacement(
                    kind=kind,
                    part=part,
                    segment=segment,
                    origin=origin,
                    local_center=geom["center"],
                    size=geom["size"],
                    transform=transform,
                )
        static = _STATIC_PARTS.get(kind)
        if static is not None:
            yield from static(catalog)


def build_scene(
    catalog: PlacementCatalog,
    controls: ControlState,
    kinds: Optional[List[SurfaceKind]] = None,
) -> List[PartPlacement]:
    """All part placements for a control state."""
    return list(iter_placements(catalog, controls, kinds))
