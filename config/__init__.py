# Open-HLD Configuration Module
from .wing_config import (
    WingAssemblyConfig, config, SurfaceKind,
    PlanformParams, LayoutParams, AnimationParams
)

__all__ = [
    "WingAssemblyConfig", "config", "SurfaceKind",
    "PlanformParams", "LayoutParams", "AnimationParams"
]
