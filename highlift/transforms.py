"""
Rigid transforms about the span axis.

Axes follow the wing frame used throughout Open-HLD: x chordwise aft,
y up, z spanwise. Every movable surface rotates about an axis parallel to z,
so a transform is a translation plus one angle. A point ``p`` in a part's
stowed frame maps to ``R(axis * rotation) @ p + translation``.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Sequence, Tuple
import math

import numpy as np

Vec3 = Tuple[float, float, float]

ORIGIN: Vec3 = (0.0, 0.0, 0.0)


def rotation_matrix(angle: float) -> np.ndarray:
    """3x3 right-handed rotation about +z."""
    c, s = math.cos(angle), math.sin(angle)
    return np.array([
        [c, -s, 0.0],
        [s, c, 0.0],
        [0.0, 0.0, 1.0],
    ])


def rotate_point(point: Sequence[float], angle: float) -> Vec3:
    """Rotate a single point about the z axis through the origin."""
    x, y, z = point
    c, s = math.cos(angle), math.sin(angle)
    return (c * x - s * y, s * x + c * y, z)


@dataclass(frozen=True)
class Transform:
    """
    Translation plus rotation about the span axis (radians).

    ``axis`` is +1 for rotation about +z and -1 for rotation about -z. A
    flap deflects about -z so that a positive angle lowers its trailing edge
    in the x-aft/y-up frame.
    """

    translation: Vec3 = ORIGIN
    rotation: float = 0.0
    axis: int = 1

    @classmethod
    def about_pivot(cls, rotation: float, pivot: Sequence[float], axis: int = 1) -> "Transform":
        """Rotation about ``pivot`` expressed as rotation about the origin."""
        rx, ry, rz = rotate_point(pivot, rotation * axis)
        px, py, pz = pivot
        return cls(translation=(px - rx, py - ry, pz - rz), rotation=rotation, axis=axis)

    @property
    def angle_z(self) -> float:
        """Signed rotation about +z."""
        return self.rotation * self.axis

    @property
    def is_identity(self) -> bool:
        return self.rotation == 0.0 and all(v == 0.0 for v in self.translation)

    def apply(self, points) -> np.ndarray:
        """Map a point or an (N, 3) array of points through the transform."""
        pts = np.asarray(points, dtype=float)
        return pts @ rotation_matrix(self.angle_z).T + np.asarray(self.translation)

    def then(self, other: "Transform") -> "Transform":
        """Apply ``self`` first, then ``other``."""
        rx, ry, rz = rotate_point(self.translation, other.angle_z)
        ox, oy, oz = other.translation
        translation = (rx + ox, ry + oy, rz + oz)
        if self.axis == other.axis or other.rotation == 0.0:
            return Transform(translation, self.rotation + other.rotation, self.axis)
        if self.rotation == 0.0:
            return Transform(translation, other.rotation, other.axis)
        return Transform(translation, self.angle_z + other.angle_z)

    @property
    def rotation_deg(self) -> float:
        return math.degrees(self.rotation)
