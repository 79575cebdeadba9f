from __future__ import annotations

import unittest

from tests.unit._bootstrap import ensure_project_on_path


ensure_project_on_path()


class _P:
    def __init__(self, lat: float, lon: float) -> None:
        self.latitude = lat
        self.longitude = lon


class TestGeo(unittest.TestCase):
    def test_distance_one_degree_latitude(self) -> None:
        from core.geo import distance

        d = distance(_P(45.0, 6.0), _P(46.0, 6.0))
        self.assertAlmostEqual(d, 111319.49, delta=1.0)
        self.assertEqual(distance(_P(45.0, 6.0), _P(45.0, 6.0)), 0.0)

    def test_bearing_cardinal_directions(self) -> None:
        from core.geo import bearing

        origin = _P(45.0, 6.0)
        self.assertAlmostEqual(bearing(origin, _P(45.1, 6.0)), 0.0, places=6)
        self.assertAlmostEqual(bearing(origin, _P(45.0, 6.1)), 90.0, delta=0.1)
        self.assertAlmostEqual(bearing(origin, _P(44.9, 6.0)), 180.0, places=6)
        self.assertAlmostEqual(bearing(origin, _P(45.0, 5.9)), 270.0, delta=0.1)

    def test_bearing_stays_in_range(self) -> None:
        from core.geo import bearing

        for target in (_P(45.1, 5.99), _P(44.9, 5.99), _P(45.0, 5.0), _P(45.0 + 1e-12, 6.0 - 1e-12)):
            value = bearing(_P(45.0, 6.0), target)
            self.assertGreaterEqual(value, 0.0)
            self.assertLess(value, 360.0)

    def test_bounding_box(self) -> None:
        from core.geo import bounding_box

        box = bounding_box([_P(45.0, 6.0), _P(45.2, 5.9), _P(44.9, 6.3)])
        self.assertEqual(box, (44.9, 45.2, 5.9, 6.3))

    def test_bounding_box_empty_raises(self) -> None:
        from core.geo import bounding_box

        with self.assertRaises(ValueError):
            bounding_box([])

    def test_segment_distances(self) -> None:
        from core.geo import segment_distances

        self.assertEqual(len(segment_distances([_P(45.0, 6.0)])), 0)
        seg = segment_distances([_P(45.0, 6.0), _P(45.001, 6.0), _P(45.002, 6.0)])
        self.assertEqual(len(seg), 2)
        self.assertAlmostEqual(seg[0], seg[1], places=3)


if __name__ == "__main__":
    unittest.main()
