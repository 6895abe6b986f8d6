"""
Placement Catalog
=================

Spanwise layout of every surface kind: section splitting, segment lookup,
layout rules enforced at construction, and the fixed leading-edge panels
that fill the span between the slat gaps.
"""

import sys
from dataclasses import replace
from pathlib import Path

REPO_ROOT = Path(__file__).resolve().parents[1]
sys.path.insert(0, str(REPO_ROOT))

import pytest  # noqa: E402

from config import config, SurfaceKind  # noqa: E402
from highlift.surfaces import PlacementCatalog, SurfaceSection  # noqa: E402


@pytest.fixture(scope="module")
def catalog():
    return PlacementCatalog()


class TestSurfaceSection:

    def test_segment_count_floors_to_target(self):
        assert SurfaceSection(-2.25, -0.75, 0.5).segment_count == 3
        assert SurfaceSection(1.75, 2.15, 0.13).segment_count == 3

    def test_at_least_two_segments(self):
        assert SurfaceSection(0.0, 0.3, 0.5).segment_count == 2
        assert SurfaceSection(2.15, 2.5, 0.5).segment_count == 2

    def test_segments_cover_the_section(self):
        section = SurfaceSection(-0.5, 1.0, 0.5)
        widths = section.segment_width * section.segment_count
        assert widths == pytest.approx(section.length)
        assert section.segment_center(0) == pytest.approx(-0.25)
        assert section.segment_center(2) == pytest.approx(0.75)

    def test_segment_center_out_of_range(self):
        section = SurfaceSection(-0.5, 1.0, 0.5)
        with pytest.raises(IndexError):
            section.segment_center(3)
        with pytest.raises(IndexError):
            section.segment_center(-1)

    def test_touching_sections_do_not_overlap(self):
        a = SurfaceSection(0.0, 1.0)
        assert not a.overlaps(SurfaceSection(1.0, 2.0))
        assert a.overlaps(SurfaceSection(0.9, 2.0))

    def test_rejects_reversed_interval(self):
        with pytest.raises(ValueError):
            SurfaceSection(1.0, 0.5)


class TestCatalogQueries:

    def test_flap_layout(self, catalog):
        sections = catalog.sections_for(SurfaceKind.FLAPS)
        assert len(sections) == 3
        assert [s.segment_count for s in sections] == [3, 3, 2]

    def test_every_kind_has_sections(self, catalog):
        for kind in SurfaceKind:
            assert len(catalog.sections_for(kind)) >= 1

    def test_unknown_kind_rejected(self, catalog):
        with pytest.raises(ValueError):
            catalog.sections_for("rudder")

    def test_segment_carries_chord_and_taper(self, catalog):
        seg = catalog.segment(SurfaceKind.FLAPS, 0, 1)
        assert seg.span_center == pytest.approx(-1.5)
        assert seg.chord_at_span == pytest.approx(1.64)
        assert seg.width_along_span == pytest.approx(0.5)
        assert seg.taper == pytest.approx(0.88)

    def test_slat_chord_uses_leading_edge_strip(self, catalog):
        seg = catalog.segment(SurfaceKind.SLATS, 1, 0)
        assert seg.span_center == pytest.approx(0.4)
        assert seg.chord_at_span == pytest.approx(0.6 - 0.2 * 0.4 / 2.5)

    def test_segment_out_of_range(self, catalog):
        with pytest.raises(IndexError):
            catalog.segment(SurfaceKind.FLAPS, 3, 0)
        with pytest.raises(IndexError):
            catalog.segment(SurfaceKind.FLAPS, 2, 2)

    def test_segments_for_order(self, catalog):
        segments = catalog.segments_for(SurfaceKind.FLAPS)
        assert len(segments) == 8
        keys = [(s.section_index, s.index) for s in segments]
        assert keys == sorted(keys)

    def test_base_positions(self, catalog):
        assert catalog.base_position(SurfaceKind.SLATS) == (-0.9, 0.0, 0.0)
        assert catalog.base_position(SurfaceKind.SPOILERS) == (0.5, 0.25, 0.0)

    def test_stowed_origin_adds_span_position(self, catalog):
        seg = catalog.segment(SurfaceKind.FLAPS, 1, 0)
        assert catalog.stowed_origin(seg) == pytest.approx((1.5, 0.0, -0.25))

    def test_hinge_stations_only_for_ailerons(self, catalog):
        stations = catalog.hinge_stations(SurfaceKind.AILERONS)
        assert len(stations) == config.ailerons.hinge_count
        assert stations[0] == pytest.approx(2.15)
        assert stations[-1] == pytest.approx(2.5)
        with pytest.raises(ValueError):
            catalog.hinge_stations(SurfaceKind.FLAPS)

    def test_spoiler_panels_shrink_outboard(self, catalog):
        panels = catalog.segments_for(SurfaceKind.SPOILERS)
        sizes = [catalog.part_size(seg)[0] for seg in panels]
        assert sizes == sorted(sizes, reverse=True)


class TestLayoutRules:

    def test_default_layout_valid(self):
        assert config.validate() == []

    def test_overlapping_flaps_rejected(self):
        layout = replace(
            config.layout,
            flap_sections=[(-2.0, 0.0, 0.5, "A"), (-0.5, 1.0, 0.5, "B")],
        )
        with pytest.raises(ValueError, match="overlap"):
            PlacementCatalog(layout=layout)

    def test_section_outside_span_rejected(self):
        layout = replace(config.layout, aileron_sections=[(2.2, 2.8, 0.5, "Long Aileron")])
        with pytest.raises(ValueError, match="span"):
            PlacementCatalog(layout=layout)

    def test_spoiler_over_flap_rejected(self):
        layout = replace(config.layout, spoiler_sections=[(1.5, 1.9, 0.13, "Spoilers")])
        with pytest.raises(ValueError, match="flap"):
            PlacementCatalog(layout=layout)

    def test_slats_must_fill_leading_edge_gaps(self):
        layout = replace(config.layout, slat_sections=[(-2.0, -1.2, 0.4, "Only Slat")])
        with pytest.raises(ValueError, match="leading-edge"):
            PlacementCatalog(layout=layout)


class TestFixedLeadingEdge:

    def test_panels_and_slats_tile_the_span(self, catalog):
        pieces = sorted(
            [(p.start_span, p.end_span) for p in catalog.fixed_leading_edge_sections()]
            + [(s.start_span, s.end_span) for s in catalog.sections_for(SurfaceKind.SLATS)]
        )
        assert pieces[0][0] == pytest.approx(-2.5)
        assert pieces[-1][1] == pytest.approx(2.5)
        for (_, end), (start, _) in zip(pieces, pieces[1:]):
            assert start == pytest.approx(end)

    def test_panel_count(self, catalog):
        panels = catalog.fixed_leading_edge_sections()
        assert len(panels) == 4
        assert panels[0].name == "Fixed LE 1"
