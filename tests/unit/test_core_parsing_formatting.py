from __future__ import annotations

import math
import unittest

from tests.unit._bootstrap import ensure_project_on_path


ensure_project_on_path()


class TestMetadataParsing(unittest.TestCase):
    def test_parse_distance_text(self) -> None:
        from core.metadata import parse_distance_text

        self.assertAlmostEqual(parse_distance_text("5.8 mi"), 5.8 * 1609.34)
        self.assertAlmostEqual(parse_distance_text("5.8"), 5.8 * 1609.34)
        self.assertAlmostEqual(parse_distance_text("8.4 km"), 8400.0)
        self.assertAlmostEqual(parse_distance_text("8.4 kilometers"), 8400.0)
        self.assertAlmostEqual(parse_distance_text("8.4 Kilometres"), 8400.0)
        self.assertAlmostEqual(parse_distance_text("3 miles"), 3 * 1609.34)
        self.assertIsNone(parse_distance_text(""))
        self.assertIsNone(parse_distance_text("n/a"))
        self.assertIsNone(parse_distance_text(None))

    def test_parse_duration_text(self) -> None:
        from core.metadata import parse_duration_text

        self.assertEqual(parse_duration_text("45:00"), 2700.0)
        self.assertEqual(parse_duration_text("1:02:03"), 3723.0)
        self.assertIsNone(parse_duration_text("abc"))
        self.assertIsNone(parse_duration_text("12"))
        self.assertIsNone(parse_duration_text(None))

    def test_parse_pace_text(self) -> None:
        from core.metadata import parse_pace_text

        self.assertAlmostEqual(parse_pace_text("9:00/mi"), 540.0 / 1609.34)
        self.assertAlmostEqual(parse_pace_text("8:30 /mi"), 510.0 / 1609.34)
        self.assertAlmostEqual(parse_pace_text("5:15 /km"), 315.0 / 1000.0)
        self.assertAlmostEqual(parse_pace_text("5:15/kilometer"), 315.0 / 1000.0)
        self.assertAlmostEqual(parse_pace_text("8:30"), 510.0 / 1609.34)
        self.assertAlmostEqual(parse_pace_text("8.5"), 510.0 / 1609.34)
        self.assertIsNone(parse_pace_text("fast"))
        self.assertIsNone(parse_pace_text("0:00"))
        self.assertIsNone(parse_pace_text(""))

    def test_metadata_average_pace_fallbacks(self) -> None:
        from core.metadata import WorkoutMetadata

        with_pace = WorkoutMetadata(reported_avg_pace_text="9:00/mi", reported_distance_text="5.0 mi")
        self.assertAlmostEqual(with_pace.average_pace_s_per_m(), 540.0 / 1609.34)

        derived = WorkoutMetadata(reported_distance_text="10 km", reported_duration_text="50:00")
        self.assertAlmostEqual(derived.average_pace_s_per_m(), 0.3)

        self.assertIsNone(WorkoutMetadata(reported_duration_text="bad").average_pace_s_per_m())


class TestUnitsAndFormatting(unittest.TestCase):
    def test_unit_preference(self) -> None:
        from core.units import IMPERIAL, METRIC, UnitPreference

        self.assertEqual(METRIC.unit_distance_m, 1000.0)
        self.assertEqual(IMPERIAL.unit_distance_m, 1609.34)
        self.assertEqual(UnitPreference.from_label("miles"), IMPERIAL)
        self.assertEqual(UnitPreference.from_label("metric"), METRIC)
        self.assertAlmostEqual(IMPERIAL.to_units(1609.34), 1.0)

    def test_pace_conversions(self) -> None:
        from core.utils import pace_s_per_m_to_min_per_unit

        self.assertAlmostEqual(pace_s_per_m_to_min_per_unit(0.3, 1000.0), 5.0)
        self.assertAlmostEqual(pace_s_per_m_to_min_per_unit(0.3, 1609.34), 8.0467, places=4)
        self.assertTrue(math.isnan(pace_s_per_m_to_min_per_unit(0.0, 1000.0)))
        self.assertTrue(math.isnan(pace_s_per_m_to_min_per_unit(float("inf"), 1000.0)))

    def test_format_pace(self) -> None:
        from core.formatting import format_pace
        from core.units import IMPERIAL, METRIC

        self.assertEqual(format_pace(5.5, METRIC), "5:30 /km")
        self.assertEqual(format_pace(9.0, IMPERIAL), "9:00 /mi")
        self.assertEqual(format_pace(None, METRIC), "-")
        self.assertEqual(format_pace(float("nan"), METRIC), "-")

    def test_format_distance_and_elevation(self) -> None:
        from core.formatting import format_distance, format_elevation
        from core.units import IMPERIAL, METRIC

        self.assertEqual(format_distance(850.0, METRIC), "850 m")
        self.assertEqual(format_distance(12346.0, METRIC), "12.35 km")
        self.assertEqual(format_distance(1609.34 * 3.1, IMPERIAL), "3.10 mi")
        self.assertEqual(format_elevation(100.0, METRIC), "100 m")
        self.assertEqual(format_elevation(100.0, IMPERIAL), "328 ft")
        self.assertEqual(format_elevation(None, IMPERIAL), "-")

    def test_format_duration_clock(self) -> None:
        from core.formatting import format_duration_clock

        self.assertEqual(format_duration_clock(302), "5:02")
        self.assertEqual(format_duration_clock(3723), "1:02:03")
        self.assertEqual(format_duration_clock(None), "-")


if __name__ == "__main__":
    unittest.main()
