"""
Open-HLD: Wing Planform Model
=============================

Linear taper law for chord, thickness and deployment travel along the span.
The wing root sits at span position 0 and the tips at +/- span/2, so every
law depends on ``|span_position|``. Positions past a tip are clamped to the
tip rather than extrapolated.
"""

from dataclasses import dataclass
from typing import Optional

from config import config
from config.wing_config import PlanformParams


def _clamp(value: float, low: float, high: float) -> float:
    return max(low, min(high, value))


@dataclass(frozen=True)
class WingPlanform:
    """Immutable trapezoidal planform."""

    span: float
    root_chord: float
    tip_chord: float
    thickness_ratio: float = 0.15
    taper_motion_loss: float = 0.2

    def __post_init__(self):
        if self.span <= 0:
            raise ValueError(f"Wing span must be positive, got {self.span}")
        if not (self.root_chord >= self.tip_chord > 0):
            raise ValueError(
                f"Require root_chord >= tip_chord > 0 "
                f"(root {self.root_chord}, tip {self.tip_chord})"
            )
        if not 0.0 <= self.taper_motion_loss <= 1.0:
            raise ValueError("taper_motion_loss must lie in [0, 1]")

    @classmethod
    def from_config(cls, params: Optional[PlanformParams] = None) -> "WingPlanform":
        """Main wing planform from the SSOT."""
        pf = params or config.planform
        return cls(
            span=pf.span,
            root_chord=pf.root_chord,
            tip_chord=pf.tip_chord,
            thickness_ratio=pf.thickness_ratio,
            taper_motion_loss=pf.taper_motion_loss,
        )

    @classmethod
    def leading_edge_from_config(cls, params: Optional[PlanformParams] = None) -> "WingPlanform":
        """Planform of the fixed leading-edge strip that carries the slats."""
        pf = params or config.planform
        return cls(
            span=pf.span,
            root_chord=pf.le_root_chord,
            tip_chord=pf.le_tip_chord,
            thickness_ratio=pf.thickness_ratio,
            taper_motion_loss=pf.taper_motion_loss,
        )

    @property
    def semi_span(self) -> float:
        return self.span / 2

    def span_fraction(self, span_position: float) -> float:
        """|span_position| over the semi-span, clamped to [0, 1]."""
        return _clamp(abs(span_position) / self.semi_span, 0.0, 1.0)

    def normalized_span_ratio(self, span_position: float) -> float:
        """Tip-to-tip ratio (s + span/2) / span, clamped to [0, 1]."""
        return _clamp((span_position + self.semi_span) / self.span, 0.0, 1.0)

    def chord_at(self, span_position: float) -> float:
        """Local chord: root chord at the root, tip chord at either tip."""
        eta = self.span_fraction(span_position)
        return self.root_chord + eta * (self.tip_chord - self.root_chord)

    def thickness_at(self, span_position: float) -> float:
        """Local maximum thickness, proportional to the local chord."""
        return self.thickness_ratio * self.chord_at(span_position)

    def taper_factor(self, span_position: float) -> float:
        """
        Fraction of full deployment travel available at a span position.

        Motion tightens towards the tip: 1.0 at the root and
        ``1 - taper_motion_loss`` (0.8 by default) at the tips.
        """
        return 1.0 - self.taper_motion_loss * self.span_fraction(span_position)
