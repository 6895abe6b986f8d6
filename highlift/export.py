"""
Open-HLD: Exports
=================

- Track templates: slat and flap track polylines to DXF (ezdxf)
- Deployed scene: posed part boxes to STEP/STL (CadQuery)

Every artifact gets a ``*.metadata.json`` sidecar recording the deployment
state and configuration hash.
"""

from pathlib import Path
from typing import Dict, List, Optional
import logging

import cadquery as cq
import ezdxf

from config import config
from config.wing_config import SurfaceKind
from .controls import ControlState
from .metadata import write_artifact_metadata
from .scene import PartPlacement, build_scene
from .surfaces import PlacementCatalog
from .tracks import path_for

logger = logging.getLogger(__name__)
logger.addHandler(logging.NullHandler())

TRACK_LAYERS = {
    SurfaceKind.SLATS: "SLAT_TRACKS",
    SurfaceKind.FLAPS: "FLAP_TRACKS",
}


def _controls_record(controls: ControlState) -> Dict[str, float]:
    return {kind.value: value for kind, value in controls.clamped().as_dict().items()}


def export_track_dxf(
    output_path: Path,
    catalog: Optional[PlacementCatalog] = None,
    controls: Optional[ControlState] = None,
    name: str = "deployment_tracks",
) -> Path:
    """
    Write every slat and flap track as a 3D polyline (millimetres).

    Args:
        output_path: Directory for the DXF
        catalog: Placement catalog (built from the SSOT if omitted)
        controls: Deployment state for the carriage markers
        name: File stem

    Returns:
        Path to the DXF file
    """
    catalog = catalog or PlacementCatalog()
    controls = controls or ControlState()
    scale = config.export.dxf_units_scale
    output_path.mkdir(parents=True, exist_ok=True)

    doc = ezdxf.new()
    for layer in TRACK_LAYERS.values():
        doc.layers.add(layer)
    doc.layers.add("CARRIAGES")
    msp = doc.modelspace()

    n_tracks = 0
    for kind, layer in TRACK_LAYERS.items():
        deployment = controls.value(kind)
        for segment in catalog.segments_for(kind):
            track = path_for(catalog, segment, deployment)
            for polyline, marker in zip(track.polylines, track.current):
                msp.add_polyline3d(
                    [tuple(p) for p in polyline * scale],
                    dxfattribs={"layer": layer},
                )
                msp.add_point(tuple(marker * scale), dxfattribs={"layer": "CARRIAGES"})
                n_tracks += 1

    dxf_file = output_path / f"{name}.dxf"
    doc.saveas(dxf_file)
    write_artifact_metadata(dxf_file, "DXF", _controls_record(controls))
    logger.info("Wrote %d track polylines to %s", n_tracks, dxf_file.name)
    return dxf_file


def placement_solid(placement: PartPlacement) -> cq.Workplane:
    """Box for one part, posed in the wing frame."""
    sx, sy, sz = placement.size
    tx, ty, tz = placement.transform.translation
    ox, oy, oz = placement.origin
    return (
        cq.Workplane("XY")
        .box(sx, sy, sz)
        .translate(placement.local_center)
        .rotate((0, 0, 0), (0, 0, placement.transform.axis), placement.transform.rotation_deg)
        .translate((tx + ox, ty + oy, tz + oz))
    )


def build_scene_solids(
    catalog: Optional[PlacementCatalog] = None,
    controls: Optional[ControlState] = None,
    kinds: Optional[List[SurfaceKind]] = None,
) -> cq.Workplane:
    """All posed parts gathered in a single workplane."""
    catalog = catalog or PlacementCatalog()
    controls = controls or ControlState()
    solids = [placement_solid(p).val() for p in build_scene(catalog, controls, kinds)]
    return cq.Workplane("XY").add(cq.Compound.makeCompound(solids))


def export_scene(
    output_path: Path,
    controls: ControlState,
    catalog: Optional[PlacementCatalog] = None,
    name: str = "wing_assembly",
    export_type: str = "STEP",
    tolerance: float = 0.001,
) -> Path:
    """Export the posed assembly as STEP or STL."""
    export_type = export_type.upper()
    if export_type not in ("STEP", "STL"):
        raise ValueError(f"Unsupported export type: {export_type}")
    output_path.mkdir(parents=True, exist_ok=True)

    geometry = build_scene_solids(catalog, controls)
    suffix = "step" if export_type == "STEP" else "stl"
    out_file = output_path / f"{name}.{suffix}"
    if export_type == "STL":
        cq.exporters.export(geometry, str(out_file), exportType="STL", tolerance=tolerance)
    else:
        cq.exporters.export(geometry, str(out_file))

    write_artifact_metadata(out_file, export_type, _controls_record(controls))
    logger.info("Exported %s scene to %s", export_type, out_file.name)
    return out_file
