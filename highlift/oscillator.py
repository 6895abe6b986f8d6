"""
Auto-deployment oscillator.

Sweeps slat and/or flap deployment between stowed and deployed, reversing
at the bounds, and yields to the user when they grab one of the controls.
State changes go through ``advance``, a pure function of the current
snapshot and a tick count; bound checks use the post-tick values, so with
``BOTH`` the direction flips on the tick where the lagging parameter
arrives.

The oscillator can own a periodic timer exposing the matplotlib
``TimerBase`` interface (``add_callback``, ``remove_callback``, ``start``,
``stop``). ``stop`` cancels it immediately and any tick that still arrives
afterwards is ignored.
"""

from __future__ import annotations

from dataclasses import dataclass, replace
from enum import Enum
from typing import Any, Optional
import logging
import math

from config import config
from config.wing_config import AnimationParams, SurfaceKind

logger = logging.getLogger(__name__)
logger.addHandler(logging.NullHandler())


class AnimationTarget(Enum):
    """Which deployment parameters the oscillator drives."""
    SLATS = "slats"
    FLAPS = "flaps"
    BOTH = "both"

    def drives(self, kind: SurfaceKind) -> bool:
        if self is AnimationTarget.BOTH:
            return kind in (SurfaceKind.SLATS, SurfaceKind.FLAPS)
        return kind.value == self.value


@dataclass(frozen=True)
class OscillatorState:
    """Read-only snapshot of the oscillator."""

    running: bool = False
    direction: int = 1
    target: AnimationTarget = AnimationTarget.BOTH
    slat_value: float = 0.0
    flap_value: float = 0.0


def _clamp_unit(value: float) -> float:
    return max(0.0, min(1.0, value))


def advance(
    state: OscillatorState,
    ticks: int = 1,
    params: Optional[AnimationParams] = None,
) -> OscillatorState:
    """
    Next state after ``ticks`` timer ticks.

    Each tick moves the active parameter(s) by ``step * direction`` and then
    tests the bound on the new values. A stopped state is returned unchanged.
    """
    params = params or config.animation
    if not state.running or ticks <= 0:
        return state

    slat, flap, direction = state.slat_value, state.flap_value, state.direction
    move_slats = state.target.drives(SurfaceKind.SLATS)
    move_flaps = state.target.drives(SurfaceKind.FLAPS)

    for _ in range(ticks):
        if move_slats:
            slat = _clamp_unit(slat + params.step * direction)
        if move_flaps:
            flap = _clamp_unit(flap + params.step * direction)

        active = [v for v, on in ((slat, move_slats), (flap, move_flaps)) if on]
        if direction > 0 and all(v >= params.upper_bound for v in active):
            direction = -1
        elif direction < 0 and all(v <= params.lower_bound for v in active):
            direction = 1

    return replace(state, slat_value=slat, flap_value=flap, direction=direction)


class AutoDeployOscillator:
    """
    Time-driven slat/flap sweep with manual override.

    Usage:
        osc = AutoDeployOscillator()
        osc.start(AnimationTarget.BOTH)
        osc.update(0.25)           # or attach_timer(fig.canvas.new_timer(...))
        osc.current_state().slat_value
    """

    def __init__(
        self,
        slat_value: float = 0.0,
        flap_value: float = 0.0,
        params: Optional[AnimationParams] = None,
    ):
        self.params = params or config.animation
        self._state = OscillatorState(
            slat_value=_clamp_unit(slat_value),
            flap_value=_clamp_unit(flap_value),
        )
        self._elapsed = 0.0
        self._timer: Optional[Any] = None
        self._timer_running = False

    # --- queries ---

    def current_state(self) -> OscillatorState:
        return self._state

    def value(self, kind: SurfaceKind) -> float:
        if kind is SurfaceKind.SLATS:
            return self._state.slat_value
        if kind is SurfaceKind.FLAPS:
            return self._state.flap_value
        raise ValueError(f"Oscillator does not drive {kind}")

    # --- lifecycle ---

    def start(self, target: AnimationTarget = AnimationTarget.BOTH) -> OscillatorState:
        """Begin (or retarget) the sweep; a fresh start always extends first."""
        if not isinstance(target, AnimationTarget):
            raise ValueError(f"Unknown animation target: {target}")
        if self._state.running:
            self._state = replace(self._state, target=target)
        else:
            self._state = replace(self._state, running=True, direction=1, target=target)
            self._elapsed = 0.0
        self._start_timer()
        logger.info("Auto-deployment running: target=%s", target.value)
        return self._state

    def stop(self) -> OscillatorState:
        """Stop the sweep and cancel the timer; parameter values are kept."""
        self._cancel_timer()
        if self._state.running:
            logger.info("Auto-deployment stopped at slats=%.2f flaps=%.2f",
                        self._state.slat_value, self._state.flap_value)
        self._state = replace(self._state, running=False, direction=1)
        self._elapsed = 0.0
        return self._state

    def close(self) -> None:
        """Teardown: stop and release the timer."""
        self.stop()
        if self._timer is not None:
            self._timer.remove_callback(self.tick)
            self._timer = None

    # --- time ---

    def tick(self) -> OscillatorState:
        """One timer tick; ignored once stopped."""
        self._state = advance(self._state, 1, self.params)
        return self._state

    def update(self, elapsed_s: float) -> OscillatorState:
        """Advance by wall-clock time, carrying the sub-tick remainder."""
        if not self._state.running or not math.isfinite(elapsed_s) or elapsed_s <= 0:
            return self._state
        self._elapsed += elapsed_s
        ticks = int(self._elapsed // self.params.tick_interval_s)
        self._elapsed -= ticks * self.params.tick_interval_s
        self._state = advance(self._state, ticks, self.params)
        return self._state

    # --- manual control ---

    def set_parameter(self, kind: SurfaceKind, value: float) -> OscillatorState:
        """
        Manual edit of slats or flaps.

        While sweeping both, the edited surface is released and the other
        keeps moving. While sweeping a single surface, any edit stops the sweep.
        """
        value = _clamp_unit(0.0 if math.isnan(float(value)) else float(value))
        if kind is SurfaceKind.SLATS:
            self._state = replace(self._state, slat_value=value)
            other = AnimationTarget.FLAPS
        elif kind is SurfaceKind.FLAPS:
            self._state = replace(self._state, flap_value=value)
            other = AnimationTarget.SLATS
        else:
            raise ValueError(f"Oscillator does not drive {kind}")

        if self._state.running:
            if self._state.target is AnimationTarget.BOTH:
                self._state = replace(self._state, target=other)
                logger.info("Manual %s input; auto-deployment narrowed to %s",
                            kind.value, other.value)
            else:
                self.stop()
        return self._state

    # --- timer plumbing ---

    def attach_timer(self, timer: Any) -> None:
        """Drive ticks from a periodic timer (matplotlib TimerBase interface)."""
        if self._timer is not None:
            self._cancel_timer()
            self._timer.remove_callback(self.tick)
        self._timer = timer
        timer.add_callback(self.tick)
        if self._state.running:
            self._start_timer()

    def _start_timer(self) -> None:
        if self._timer is not None and not self._timer_running:
            self._timer.start()
            self._timer_running = True

    def _cancel_timer(self) -> None:
        if self._timer is not None and self._timer_running:
            self._timer.stop()
            self._timer_running = False
