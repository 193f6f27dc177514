from __future__ import annotations

from datetime import datetime, timezone

from mapty.workout.model import MONTHS, Cycling, Running, compute_pace, compute_speed, describe


def test_describe_uses_capitalized_kind_and_month_name() -> None:
    created = datetime(2026, 4, 14, 9, 30, tzinfo=timezone.utc)

    assert describe("running", created) == "Running on April 14"
    assert describe("cycling", datetime(2026, 12, 1)) == "Cycling on December 1"
    assert len(MONTHS) == 12


def test_pace_and_speed_formulas() -> None:
    assert compute_pace(5, 24) == 24 / 5
    assert compute_pace(5.0, 24.0) == 4.8
    assert compute_speed(20.0, 60.0) == 20.0
    assert compute_speed(27.0, 95.0) == 27.0 / (95.0 / 60)


def test_marker_label_and_popup_class() -> None:
    created = datetime(2026, 4, 14, tzinfo=timezone.utc)
    run = Running(
        id="r1",
        created_at=created,
        coordinates=(40.7, -74.0),
        distance_km=5.0,
        duration_min=24.0,
        description="Running on April 14",
        cadence_spm=178,
        pace_min_per_km=4.8,
    )
    ride = Cycling(
        id="c1",
        created_at=created,
        coordinates=(40.7, -74.0),
        distance_km=27.0,
        duration_min=95.0,
        description="Cycling on April 14",
        elevation_gain_m=523.0,
        speed_km_per_h=27.0 / (95.0 / 60),
    )

    assert run.kind == "running"
    assert ride.kind == "cycling"
    assert run.marker_label.endswith("Running on April 14")
    assert run.popup_class == "running-popup"
    assert ride.popup_class == "cycling-popup"
