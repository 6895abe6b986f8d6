"""
Deployment Kinematics
=====================

Per-kind laws mapping (segment, deployment) to the transform of the moving
part relative to its stowed pose.

Conventions:
  - x aft, y up, z span; rotations are right-handed about +z, except flaps
    which deflect about -z so a positive angle lowers the trailing edge
  - Flaps: aft slide over the first half of travel, rotation about the
    hinge over the second
  - Slats: forward and down on the quadratic slat track
  - Ailerons/spoilers: pure rotation, identity when undeflected
"""

import math
import sys
from pathlib import Path

REPO_ROOT = Path(__file__).resolve().parents[1]
sys.path.insert(0, str(REPO_ROOT))

import numpy as np  # noqa: E402
import pytest  # noqa: E402

from config import config, SurfaceKind  # noqa: E402
from highlift.kinematics import (  # noqa: E402
    clamp_deployment,
    control_rod_endpoint,
    flap_hinge,
    flap_phases,
    part_transforms,
    spoiler_hinge,
    transform_for,
)
from highlift.surfaces import PlacementCatalog, flap_chord  # noqa: E402
from highlift.transforms import Transform  # noqa: E402


@pytest.fixture(scope="module")
def catalog():
    return PlacementCatalog()


class TestClamping:

    def test_unit_range_kinds(self):
        for kind in (SurfaceKind.SLATS, SurfaceKind.FLAPS, SurfaceKind.SPOILERS):
            assert clamp_deployment(kind, 1.7) == 1.0
            assert clamp_deployment(kind, -0.4) == 0.0

    def test_ailerons_signed(self):
        assert clamp_deployment(SurfaceKind.AILERONS, -3.0) == -1.0
        assert clamp_deployment(SurfaceKind.AILERONS, -0.5) == -0.5

    def test_nan_becomes_stowed(self):
        assert clamp_deployment(SurfaceKind.FLAPS, float("nan")) == 0.0

    def test_out_of_range_matches_bound(self, catalog):
        seg = catalog.segment(SurfaceKind.FLAPS, 1, 1)
        over = transform_for(SurfaceKind.FLAPS, seg, 1.5)
        full = transform_for(SurfaceKind.FLAPS, seg, 1.0)
        assert over == full


class TestFlaps:

    @pytest.mark.parametrize("d, expected", [
        (0.0, (0.0, 0.0)),
        (0.25, (0.5, 0.0)),
        (0.5, (1.0, 0.0)),
        (0.75, (1.0, 0.5)),
        (1.0, (1.0, 1.0)),
    ])
    def test_two_phase_split(self, d, expected):
        assert flap_phases(d) == pytest.approx(expected)

    def test_half_deployment_is_full_slide_no_rotation(self, catalog):
        seg = catalog.segment(SurfaceKind.FLAPS, 0, 1)
        tf = transform_for(SurfaceKind.FLAPS, seg, 0.5)
        assert tf.translation == pytest.approx((0.3 * 1.64 * 0.88, 0.0, 0.0))
        assert tf.rotation == pytest.approx(0.0)

    def test_full_deployment_holds_slide_and_rotates(self, catalog):
        seg = catalog.segment(SurfaceKind.FLAPS, 0, 1)
        half = transform_for(SurfaceKind.FLAPS, seg, 0.5)
        full = transform_for(SurfaceKind.FLAPS, seg, 1.0)
        hinge = flap_hinge(seg)
        assert full.apply(hinge) == pytest.approx(half.apply(hinge))
        assert full.rotation == pytest.approx(math.radians(30.0))

    def test_hinge_on_leading_edge(self, catalog):
        seg = catalog.segment(SurfaceKind.FLAPS, 1, 1)
        assert flap_hinge(seg) == pytest.approx((-flap_chord(seg) / 2, 0.0, 0.0))

    def test_trailing_edge_drops(self, catalog):
        for seg in catalog.segments_for(SurfaceKind.FLAPS):
            tf = transform_for(SurfaceKind.FLAPS, seg, 1.0)
            trailing = tf.apply((flap_chord(seg) / 2, 0.0, 0.0))
            hinge = tf.apply(flap_hinge(seg))
            assert trailing[1] < 0.0
            # Chord stays rigid about the hinge
            assert np.linalg.norm(trailing - hinge) == pytest.approx(flap_chord(seg))

    def test_rotation_increases_through_second_half(self, catalog):
        seg = catalog.segment(SurfaceKind.FLAPS, 0, 0)
        sweep = np.linspace(0.5, 1.0, 11)
        rotations = [transform_for(SurfaceKind.FLAPS, seg, d).rotation for d in sweep]
        assert rotations[0] == 0.0
        assert np.all(np.diff(rotations) > 0.0)

    def test_carriage_slides_with_flap(self, catalog):
        seg = catalog.segment(SurfaceKind.FLAPS, 2, 1)
        for d in (0.1, 0.3, 0.5, 0.8, 1.0):
            parts = part_transforms(SurfaceKind.FLAPS, seg, d)
            aft = config.flaps.extension_ratio * seg.chord_at_span * seg.taper * flap_phases(d)[0]
            assert parts["carriage"].translation[0] == pytest.approx(aft)
            assert parts["flap"].apply(flap_hinge(seg))[0] - flap_hinge(seg)[0] == pytest.approx(aft)

    def test_stowed_is_identity(self, catalog):
        seg = catalog.segment(SurfaceKind.FLAPS, 2, 0)
        assert transform_for(SurfaceKind.FLAPS, seg, 0.0).is_identity

    def test_travel_scales_with_chord_and_taper(self, catalog):
        inboard = catalog.segment(SurfaceKind.FLAPS, 1, 1)
        outboard = catalog.segment(SurfaceKind.FLAPS, 2, 1)
        a = transform_for(SurfaceKind.FLAPS, inboard, 0.5).translation[0]
        b = transform_for(SurfaceKind.FLAPS, outboard, 0.5).translation[0]
        ratio = (outboard.chord_at_span * outboard.taper) / (inboard.chord_at_span * inboard.taper)
        assert b / a == pytest.approx(ratio)
        assert b < a

    def test_vane_over_rotates(self, catalog):
        seg = catalog.segment(SurfaceKind.FLAPS, 1, 0)
        parts = part_transforms(SurfaceKind.FLAPS, seg, 1.0)
        assert set(parts) == {"flap", "vane", "carriage"}
        assert parts["vane"].rotation == pytest.approx(parts["flap"].rotation * 1.2)


class TestSlats:

    def test_full_deployment_forward_and_down(self, catalog):
        seg = catalog.segment(SurfaceKind.SLATS, 2, 1)
        tf = transform_for(SurfaceKind.SLATS, seg, 1.0)
        t = seg.taper
        assert tf.translation == pytest.approx((-0.3 * t, -0.15 * t, 0.0))
        assert tf.rotation == 0.0

    def test_drop_eases_out(self, catalog):
        seg = catalog.segment(SurfaceKind.SLATS, 1, 0)
        tf = transform_for(SurfaceKind.SLATS, seg, 0.5)
        t = seg.taper
        assert tf.translation[0] == pytest.approx(-0.15 * t)
        assert tf.translation[1] == pytest.approx(-0.15 * t * 0.75)

    def test_tip_moves_less_than_root(self, catalog):
        segments = catalog.segments_for(SurfaceKind.SLATS)
        inner = min(segments, key=lambda s: abs(s.span_center))
        outer = max(segments, key=lambda s: abs(s.span_center))
        d_inner = transform_for(SurfaceKind.SLATS, inner, 1.0).translation
        d_outer = transform_for(SurfaceKind.SLATS, outer, 1.0).translation
        assert abs(d_outer[0]) < abs(d_inner[0])

    def test_dependent_parts_follow_fractionally(self, catalog):
        seg = catalog.segment(SurfaceKind.SLATS, 0, 0)
        parts = part_transforms(SurfaceKind.SLATS, seg, 1.0)
        slat_x = parts["slat"].translation[0]
        assert parts["roller"].translation[0] == pytest.approx(0.8 * slat_x)
        assert parts["actuator"].translation[0] == pytest.approx(0.5 * slat_x)


class TestRotatingSurfaces:

    def test_neutral_is_identity(self, catalog):
        for kind in (SurfaceKind.AILERONS, SurfaceKind.SPOILERS):
            for seg in catalog.segments_for(kind):
                assert transform_for(kind, seg, 0.0).is_identity

    def test_aileron_linear_in_deflection(self, catalog):
        seg = catalog.segment(SurfaceKind.AILERONS, 0, 0)
        full = transform_for(SurfaceKind.AILERONS, seg, 1.0).rotation
        assert full == pytest.approx(math.radians(30.0))
        assert transform_for(SurfaceKind.AILERONS, seg, 0.5).rotation == pytest.approx(full / 2)
        assert transform_for(SurfaceKind.AILERONS, seg, -1.0).rotation == pytest.approx(-full)

    def test_aileron_pivot_stays_fixed(self, catalog):
        seg = catalog.segment(SurfaceKind.AILERONS, 0, 1)
        pivot = (0.1, 0.02, 0.0)
        tf = transform_for(SurfaceKind.AILERONS, seg, 0.7, pivot=pivot)
        assert tf.apply(pivot) == pytest.approx(np.array(pivot))

    def test_spoiler_rotates_up_about_trailing_hinge(self, catalog):
        seg = catalog.segment(SurfaceKind.SPOILERS, 0, 0)
        tf = transform_for(SurfaceKind.SPOILERS, seg, 1.0)
        assert tf.rotation == pytest.approx(-math.radians(45.0))
        hinge = spoiler_hinge(seg)
        assert tf.apply(hinge) == pytest.approx(np.array(hinge))
        # Leading edge of the panel lifts
        leading = (-hinge[0], 0.0, 0.0)
        assert tf.apply(leading)[1] > 0.0

    def test_spoiler_rotation_monotonic(self, catalog):
        seg = catalog.segment(SurfaceKind.SPOILERS, 0, 2)
        sweep = np.linspace(0.0, 1.0, 21)
        rotations = [transform_for(SurfaceKind.SPOILERS, seg, d).rotation for d in sweep]
        assert np.all(np.diff(rotations) < 0.0)
        assert rotations[-1] == pytest.approx(-config.spoilers.max_angle)

    def test_control_rod_rotates_with_aileron(self):
        assert control_rod_endpoint(0.0) == pytest.approx((0.0, -0.1, 0.0))
        x, y, _ = control_rod_endpoint(1.0)
        assert math.hypot(x, y) == pytest.approx(0.1)
        assert x > 0.0


class TestDispatch:

    def test_pure(self, catalog):
        seg = catalog.segment(SurfaceKind.FLAPS, 1, 2)
        assert transform_for(SurfaceKind.FLAPS, seg, 0.8) == transform_for(SurfaceKind.FLAPS, seg, 0.8)

    def test_unknown_kind(self, catalog):
        seg = catalog.segment(SurfaceKind.FLAPS, 0, 0)
        with pytest.raises(ValueError):
            transform_for("rudder", seg, 0.5)

    def test_kind_mismatch(self, catalog):
        seg = catalog.segment(SurfaceKind.FLAPS, 0, 0)
        with pytest.raises(ValueError):
            transform_for(SurfaceKind.SLATS, seg, 0.5)

    def test_pivot_rejected_for_track_surfaces(self, catalog):
        seg = catalog.segment(SurfaceKind.FLAPS, 0, 0)
        with pytest.raises(ValueError):
            transform_for(SurfaceKind.FLAPS, seg, 0.5, pivot=(0.0, 0.0, 0.0))

    def test_every_segment_posable(self, catalog):
        for kind in SurfaceKind:
            low, high = kind.deployment_range
            for seg in catalog.segments_for(kind):
                for d in (low, 0.5, high):
                    parts = part_transforms(kind, seg, d)
                    for tf in parts.values():
                        assert np.isfinite(tf.translation).all()
                        assert math.isfinite(tf.rotation)

    def test_limits_come_from_config(self, catalog):
        seg = catalog.segment(SurfaceKind.SPOILERS, 0, 1)
        tf = transform_for(SurfaceKind.SPOILERS, seg, 1.0)
        assert tf.rotation == pytest.approx(-config.spoilers.max_angle)


class TestTransform:

    POINTS = np.array([[0.3, 0.2, 0.1], [-1.0, 0.5, 2.0]])

    @pytest.mark.parametrize("axis", [1, -1])
    def test_about_pivot_holds_pivot(self, axis):
        pivot = (-0.4, 0.05, 0.0)
        tf = Transform.about_pivot(0.6, pivot, axis=axis)
        assert tf.apply(pivot) == pytest.approx(np.array(pivot))

    def test_negative_axis_turns_clockwise(self):
        tf = Transform(rotation=math.radians(90.0), axis=-1)
        assert tf.apply((1.0, 0.0, 0.0)) == pytest.approx(np.array([0.0, -1.0, 0.0]))

    @pytest.mark.parametrize("first, second", [
        (Transform.about_pivot(0.4, (1.0, 0.0, 0.0), axis=-1), Transform(translation=(0.2, 0.1, 0.0))),
        (Transform(translation=(0.1, 0.0, 0.3), rotation=0.3, axis=-1), Transform(rotation=0.5)),
        (Transform(translation=(0.0, 0.2, 0.0)), Transform(rotation=0.25, axis=-1)),
    ])
    def test_then_applies_in_order(self, first, second):
        combined = first.then(second)
        assert combined.apply(self.POINTS) == pytest.approx(second.apply(first.apply(self.POINTS)))
