"""Tests for sitrep.geo.projection."""

import math

import pytest

from sitrep.geo.projection import Projector, basis_curve, graticule_lines, on_canvas, project

W, H = 800, 550


class TestGlobalView:

    def test_tehran_position(self):
        x, y = project(51.39, 35.69, "global", W, H)
        assert x == pytest.approx(64.27, abs=0.2)
        assert y == pytest.approx(35.58, abs=0.2)

    def test_origin_is_canvas_centre(self):
        x, y = project(0.0, 0.0, "global", W, H)
        assert x == pytest.approx(50.0, abs=1e-6)
        assert y == pytest.approx(50.0, abs=1e-6)

    @pytest.mark.parametrize("lon,lat", [
        (math.nan, 0.0),
        (0.0, math.inf),
        (181.0, 0.0),
        (0.0, -90.5),
        (None, 10.0),
    ])
    def test_invalid_input_is_none(self, lon, lat):
        assert project(lon, lat, "global", W, H) is None


class TestUsView:

    def test_washington_lands_east_of_centre(self):
        x, y = project(-77.0, 38.9, "us", W, H)
        assert 80.0 < x < 88.0
        assert 40.0 < y < 50.0

    def test_london_is_outside_every_inset(self):
        assert project(-0.12, 51.5, "us", W, H) is None

    def test_honolulu_uses_hawaii_inset(self):
        pos = project(-157.86, 21.31, "us", W, H)
        assert pos is not None
        assert on_canvas(pos)


class TestRegionalViews:

    def test_tehran_in_mideast(self):
        x, y = project(51.39, 35.69, "mideast", W, H)
        assert 70.0 < x < 80.0
        assert 10.0 < y < 22.0

    def test_off_canvas_point_is_none(self):
        assert project(-0.12, 51.5, "mideast", W, H) is None
        assert project(139.69, 35.69, "taiwan", W, H) is None

    def test_unclipped_keeps_off_canvas_points(self):
        proj = Projector("mideast", W, H)
        pos = proj.project_unclipped(-0.12, 51.5)
        assert pos is not None
        assert pos[0] < 0.0

    def test_kyiv_in_ukraine_view(self):
        assert on_canvas(project(30.52, 50.45, "ukraine", W, H))


class TestProjector:

    def test_unknown_view_raises(self):
        with pytest.raises(ValueError):
            Projector("mars", W, H)

    @pytest.mark.parametrize("width,height", [(0, 550), (800, 0), (-1, 10)])
    def test_non_positive_canvas_raises(self, width, height):
        with pytest.raises(ValueError):
            Projector("global", width, height)

    def test_project_path_drops_failed_vertices(self):
        proj = Projector("global", W, H)
        path = proj.project_path([(0.0, 0.0), (10.0, 95.0), (20.0, 10.0)])
        assert len(path) == 2

    def test_ring_parts_single_unbounded_part_in_global(self):
        parts = Projector("global", W, H).project_ring_parts(
            [(0.0, 0.0), (10.0, 0.0), (10.0, 10.0), (0.0, 0.0)])
        assert len(parts) == 1
        assert parts[0][1] is None

    def test_ring_parts_one_per_albers_piece(self):
        ring = [(-141.0, 60.0), (-141.0, 69.0), (-120.0, 69.0), (-123.0, 49.0), (-141.0, 60.0)]
        parts = Projector("us", W, H).project_ring_parts(ring)
        assert len(parts) == 3
        for points, bounds in parts:
            assert len(points) == len(ring)
            assert bounds is not None
        alaska_box = parts[1][1]
        assert alaska_box[0] < 0.0 < alaska_box[2] < 23.0
        assert 72.0 < alaska_box[1] < alaska_box[3] < 95.0

    def test_ring_across_conic_seam_skipped(self):
        # 84°E is the seam of the lower-48 conic
        ring = [(70.0, 30.0), (100.0, 30.0), (100.0, 50.0), (70.0, 50.0), (70.0, 30.0)]
        parts = Projector("us", W, H).project_ring_parts(ring)
        assert len(parts) == 2


class TestLineHelpers:

    def test_graticule_line_count(self):
        # 12 meridians (-180..150) + 5 parallels (-60..60)
        assert len(graticule_lines(step=30.0)) == 17

    def test_basis_curve_hits_endpoints(self):
        pts = [(0.0, 0.0), (10.0, 20.0), (30.0, 5.0), (40.0, 40.0)]
        curve = basis_curve(pts, samples=8)
        assert curve[0] == pytest.approx(pts[0])
        assert curve[-1] == pytest.approx(pts[-1])
        assert len(curve) > len(pts)

    def test_basis_curve_short_input_unchanged(self):
        pts = [(1.0, 2.0), (3.0, 4.0)]
        assert basis_curve(pts) == pts
