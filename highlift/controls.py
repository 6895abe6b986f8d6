"""
Control state and flight presets.

A ``ControlState`` holds one deployment value per surface kind, the inputs a
control panel hands to the kinematics on every frame. Presets reproduce the
standard configurations (cruise, takeoff, landing, braking) and always halt
the auto-deployment sweep before loading their slat/flap values.
"""

from __future__ import annotations

from dataclasses import dataclass, replace
from enum import Enum
from typing import Dict, Optional

from config.wing_config import SurfaceKind
from .kinematics import clamp_deployment
from .oscillator import AutoDeployOscillator


@dataclass(frozen=True)
class ControlState:
    """Deployment inputs for every surface kind."""

    slats: float = 0.0
    flaps: float = 0.0
    ailerons: float = 0.0
    spoilers: float = 0.0

    def value(self, kind: SurfaceKind) -> float:
        return getattr(self, kind.value)

    def clamped(self) -> "ControlState":
        return ControlState(**{kind.value: clamp_deployment(kind, self.value(kind)) for kind in SurfaceKind})

    def as_dict(self) -> Dict[SurfaceKind, float]:
        return {kind: self.value(kind) for kind in SurfaceKind}


class FlightPreset(Enum):
    CRUISE = "cruise"
    TAKEOFF = "takeoff"
    LANDING = "landing"
    BRAKING = "braking"

    @property
    def controls(self) -> ControlState:
        return PRESETS[self]


PRESETS: Dict[FlightPreset, ControlState] = {
    FlightPreset.CRUISE: ControlState(),
    FlightPreset.TAKEOFF: ControlState(slats=0.5, flaps=0.5),
    FlightPreset.LANDING: ControlState(slats=1.0, flaps=1.0),
    FlightPreset.BRAKING: ControlState(spoilers=1.0),
}


def apply_preset(
    preset: FlightPreset,
    oscillator: Optional[AutoDeployOscillator] = None,
) -> ControlState:
    """Controls for ``preset``; stops the oscillator and loads its slat/flap values."""
    controls = PRESETS[preset]
    if oscillator is not None:
        oscillator.stop()
        oscillator.set_parameter(SurfaceKind.SLATS, controls.slats)
        oscillator.set_parameter(SurfaceKind.FLAPS, controls.flaps)
    return controls


def sync_from_oscillator(controls: ControlState, oscillator: AutoDeployOscillator) -> ControlState:
    """Copy the oscillator's current slat/flap values into ``controls``."""
    state = oscillator.current_state()
    return replace(controls, slats=state.slat_value, flaps=state.flap_value)
