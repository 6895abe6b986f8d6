# Open-HLD Kinematics Engine
from config.wing_config import SurfaceKind
from .planform import WingPlanform
from .surfaces import PlacementCatalog, Segment, SurfaceSection
from .transforms import Transform
from .kinematics import clamp_deployment, part_transforms, transform_for
from .tracks import TrackPath, path_for
from .oscillator import AnimationTarget, AutoDeployOscillator, OscillatorState, advance
from .controls import ControlState, FlightPreset, apply_preset

__all__ = [
    "SurfaceKind",
    "WingPlanform",
    "PlacementCatalog",
    "Segment",
    "SurfaceSection",
    "Transform",
    "clamp_deployment",
    "part_transforms",
    "transform_for",
    "TrackPath",
    "path_for",
    "AnimationTarget",
    "AutoDeployOscillator",
    "OscillatorState",
    "advance",
    "ControlState",
    "FlightPreset",
    "apply_preset",
]
