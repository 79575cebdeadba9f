from __future__ import annotations

import unittest

from tests.unit._bootstrap import ensure_project_on_path


ensure_project_on_path()


def _l_shaped_track():
    from core.track import Track
    from tests.unit._factories import make_point

    points = [
        make_point(45.000, 6.000, 0),
        make_point(45.010, 6.000, 100),
        make_point(45.010, 6.020, 200),
    ]
    return Track(tuple(points))


class TestRegion(unittest.TestCase):
    def test_region_contains_bounding_box(self) -> None:
        from core.geo import bounding_box
        from core.region import compute_region

        track = _l_shaped_track()
        region = compute_region(track)
        min_lat, max_lat, min_lon, max_lon = bounding_box(track.points)
        self.assertLess(region.min_lat, min_lat)
        self.assertGreater(region.max_lat, max_lat)
        self.assertLess(region.min_lon, min_lon)
        self.assertGreater(region.max_lon, max_lon)
        self.assertAlmostEqual(region.center_lat, 45.005)
        self.assertAlmostEqual(region.center_lon, 6.010)
        self.assertAlmostEqual(region.lat_span, 0.010 * 1.3)
        self.assertAlmostEqual(region.lon_span, 0.020 * 1.3)

    def test_wide_padding(self) -> None:
        from core.constants import REGION_PADDING_WIDE
        from core.region import compute_region

        region = compute_region(_l_shaped_track(), padding=REGION_PADDING_WIDE)
        self.assertAlmostEqual(region.lon_span, 0.020 * 1.6)

    def test_single_point_gets_minimum_span(self) -> None:
        from core.region import compute_region
        from core.track import Track
        from tests.unit._factories import make_point

        region = compute_region(Track((make_point(45.0, 6.0, 0),)))
        self.assertEqual(region.lat_span, 0.005)
        self.assertEqual(region.lon_span, 0.005)
        self.assertEqual((region.center_lat, region.center_lon), (45.0, 6.0))

        wider = compute_region(Track((make_point(45.0, 6.0, 0),)), min_span_deg=0.01)
        self.assertEqual(wider.lat_span, 0.01)

    def test_aspect_ratio_only_expands(self) -> None:
        from core.region import compute_region

        track = _l_shaped_track()
        base = compute_region(track)
        for aspect in (0.5, 1.0, 2.0, 4.0):
            region = compute_region(track, aspect_ratio=aspect)
            self.assertGreaterEqual(region.lat_span, base.lat_span - 1e-12)
            self.assertGreaterEqual(region.lon_span, base.lon_span - 1e-12)

    def test_no_track_no_region(self) -> None:
        from core.region import compute_region

        self.assertIsNone(compute_region(None))


class TestPositionInterpolator(unittest.TestCase):
    def test_endpoints(self) -> None:
        from core.interpolation import PositionInterpolator

        track = _l_shaped_track()
        interp = PositionInterpolator(track)
        start = interp.position_at(0.0)
        end = interp.position_at(1.0)
        self.assertAlmostEqual(start.latitude, track.first.latitude)
        self.assertAlmostEqual(start.longitude, track.first.longitude)
        self.assertAlmostEqual(end.latitude, track.last.latitude)
        self.assertAlmostEqual(end.longitude, track.last.longitude)

    def test_midpoints_and_heading(self) -> None:
        from core.interpolation import PositionInterpolator

        interp = PositionInterpolator(_l_shaped_track())
        quarter = interp.position_at(0.25)
        self.assertAlmostEqual(quarter.latitude, 45.005)
        self.assertAlmostEqual(quarter.longitude, 6.000)
        self.assertAlmostEqual(quarter.heading, 0.0, places=6)

        three_quarters = interp.position_at(0.75)
        self.assertAlmostEqual(three_quarters.latitude, 45.010)
        self.assertAlmostEqual(three_quarters.longitude, 6.010)
        self.assertAlmostEqual(three_quarters.heading, 90.0, delta=0.1)

    def test_out_of_range_progress_is_clamped(self) -> None:
        from core.interpolation import PositionInterpolator

        track = _l_shaped_track()
        interp = PositionInterpolator(track)
        self.assertEqual(interp.position_at(-0.5), interp.position_at(0.0))
        self.assertEqual(interp.position_at(3.0), interp.position_at(1.0))
        self.assertEqual(interp.position_at(float("nan")), interp.position_at(0.0))

    def test_continuity(self) -> None:
        from core.interpolation import PositionInterpolator

        interp = PositionInterpolator(_l_shaped_track())
        previous = interp.position_at(0.0)
        for i in range(1, 1001):
            current = interp.position_at(i / 1000)
            self.assertLess(abs(current.latitude - previous.latitude), 1e-4)
            self.assertLess(abs(current.longitude - previous.longitude), 1e-4)
            previous = current

    def test_single_point(self) -> None:
        from core.interpolation import PositionInterpolator
        from core.track import Track
        from tests.unit._factories import make_point

        interp = PositionInterpolator(Track((make_point(45.0, 6.0, 0),)))
        self.assertEqual(tuple(interp.position_at(0.7)), (45.0, 6.0, 0.0))

    def test_replay_progress_loops(self) -> None:
        from core.interpolation import replay_progress

        self.assertEqual(replay_progress(0.0, 10.0), 0.0)
        self.assertAlmostEqual(replay_progress(2.5, 10.0), 0.25)
        self.assertAlmostEqual(replay_progress(12.5, 10.0), 0.25)
        self.assertEqual(replay_progress(10.0, 10.0), 0.0)
        self.assertEqual(replay_progress(5.0, 0.0), 0.0)


if __name__ == "__main__":
    unittest.main()
