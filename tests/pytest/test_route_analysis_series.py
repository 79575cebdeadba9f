from __future__ import annotations

import pytest

from tests.unit._bootstrap import ensure_project_on_path


ensure_project_on_path()


def _hilly_track():
    from core.track import Track
    from tests.unit._factories import METERS_PER_DEG_LAT, make_point

    # 100 m segments; altitude jumps on the first segment must be ignored for grades.
    altitudes = [0.0, 50.0, 55.0, 63.0, 60.0, 48.0, 48.0]
    speeds = [0.0, 2.5, 3.0, 2.0, 4.0, 5.0, 0.0]
    points = [
        make_point(
            45.0 + i * 100.0 / METERS_PER_DEG_LAT,
            6.0,
            i * 30.0,
            altitude=alt,
            speed=spd,
            cadence=170.0 if i % 2 else None,
        )
        for i, (alt, spd) in enumerate(zip(altitudes, speeds))
    ]
    return Track(tuple(points))


def test_analyze_route_descriptors() -> None:
    from core.route_analysis import analyze_route
    from core.units import METRIC

    analysis = analyze_route(_hilly_track(), METRIC)

    assert analysis.total_points == 7
    assert analysis.fastest_pace == pytest.approx(1000.0 / 5.0 / 60.0)
    assert analysis.slowest_pace == pytest.approx(1000.0 / 2.0 / 60.0)
    assert analysis.steepest_climb_pct == pytest.approx(8.0, abs=1e-3)
    assert analysis.steepest_descent_pct == pytest.approx(-12.0, abs=1e-3)
    assert analysis.elevation_gain_m == pytest.approx(63.0)
    assert analysis.elevation_loss_m == pytest.approx(15.0)
    assert analysis.max_speed_m_s == 5.0
    assert analysis.avg_cadence == 170.0


def test_analyze_route_without_speed_or_points() -> None:
    from core.route_analysis import analyze_route
    from core.track import Track
    from core.units import IMPERIAL
    from tests.unit._factories import make_point, straight_track

    analysis = analyze_route(straight_track(5, 10.0, 5.0), IMPERIAL)
    assert analysis.fastest_pace is None
    assert analysis.slowest_pace is None
    assert analysis.steepest_climb_pct == 0.0

    single = analyze_route(Track((make_point(45.0, 6.0, 0.0),)), IMPERIAL)
    assert single.total_points == 1
    assert analyze_route(None, IMPERIAL) is None


def test_elevation_series_indexed_by_distance() -> None:
    from core.series import elevation_series
    from core.units import IMPERIAL, METRIC

    track = _hilly_track()
    metric = elevation_series(track, METRIC)
    assert len(metric) == 7
    assert metric.index[-1] == pytest.approx(0.6)
    assert metric.iloc[3] == 63.0

    imperial = elevation_series(track, IMPERIAL)
    assert imperial.index[-1] == pytest.approx(600.0 / 1609.34)
    assert imperial.iloc[3] == pytest.approx(63.0 * 3.28084)


def test_heart_rate_series_drops_missing_and_downsamples() -> None:
    from core.series import downsample_series, heart_rate_series
    from core.units import METRIC
    from tests.unit._factories import straight_track

    hr = heart_rate_series(straight_track(300, 5.0, 2.0, heart_rate=150.0), METRIC, target_points=50)
    assert len(hr) == 50
    assert hr.index[0] == 0.0
    assert hr.index[-1] == pytest.approx(299 * 5.0 / 1000.0)

    assert heart_rate_series(_hilly_track(), METRIC).empty
    assert len(downsample_series(hr, None)) == 50
