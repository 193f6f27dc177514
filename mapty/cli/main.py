"""Terminal CLI entrypoint for the Mapty workout tracker."""

from __future__ import annotations

import argparse
import logging
from dataclasses import replace
from pathlib import Path

from mapty.core.config import AppConfig
from mapty.workout.byte_store import FileByteStore, default_storage_dir
from mapty.workout.factory import ValidationError, WorkoutFactory
from mapty.workout.model import WORKOUT_KINDS, Running, WorkoutRecord
from mapty.workout.persistence import WorkoutPersistence
from mapty.workout.store import WorkoutStore


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Mapty running and cycling tracker")
    parser.add_argument(
        "--ui-web",
        action="store_true",
        help="Launch web UI (NiceGUI) with the workout map",
    )
    parser.add_argument(
        "--web-host",
        default="127.0.0.1",
        help="Host bind for --ui-web",
    )
    parser.add_argument(
        "--web-port",
        type=int,
        default=8088,
        help="Port for --ui-web",
    )
    parser.add_argument(
        "--storage-dir",
        type=Path,
        default=None,
        help=f"Directory holding saved workouts (default: {default_storage_dir()})",
    )
    parser.add_argument("--list", action="store_true", help="Print saved workouts")
    parser.add_argument(
        "--add",
        nargs=5,
        metavar=("KIND", "LAT,LNG", "DISTANCE_KM", "DURATION_MIN", "EXTRA"),
        default=None,
        help=(
            f"Log a workout without the map. KIND is one of {', '.join(WORKOUT_KINDS)}; "
            "EXTRA is cadence (spm) for running or elevation gain (m) for cycling"
        ),
    )
    parser.add_argument("--reset", action="store_true", help="Delete all saved workouts")
    parser.add_argument(
        "--log-level",
        default="WARNING",
        choices=("DEBUG", "INFO", "WARNING", "ERROR"),
        help="Diagnostic log level",
    )
    return parser


def build_config(args: argparse.Namespace) -> AppConfig:
    config = AppConfig(web_host=args.web_host, web_port=args.web_port)
    if args.storage_dir is not None:
        config = replace(config, storage_dir=args.storage_dir)
    return config


def format_workout(record: WorkoutRecord) -> str:
    lat, lng = record.coordinates
    if isinstance(record, Running):
        metrics = f"{record.pace_min_per_km:.1f} min/km, {record.cadence_spm} spm"
    else:
        metrics = f"{record.speed_km_per_h:.1f} km/h, {record.elevation_gain_m:g} m"
    return (
        f"{record.id[:8]}  {record.description:<24} {record.distance_km:>6g} km "
        f"{record.duration_min:>5g} min  {metrics}  @ {lat:.4f},{lng:.4f}"
    )


def _parse_coords(raw: str) -> tuple[str, ...]:
    return tuple(part.strip() for part in raw.split(","))


def run_list(persistence: WorkoutPersistence) -> int:
    result = persistence.load()
    if result.error is not None:
        print(f"Cannot read saved workouts: {result.error}")
        return 2
    if not result.records:
        print("No workouts saved")
        return 0
    for record in result.records:
        print(format_workout(record))
    return 0


def run_add(persistence: WorkoutPersistence, raw: list[str]) -> int:
    kind, coords, distance, duration, extra = raw
    result = persistence.load()
    if result.error is not None:
        print(f"Cannot read saved workouts: {result.error}")
        return 2
    try:
        record = WorkoutFactory().create(kind, _parse_coords(coords), distance, duration, extra)
    except ValidationError as exc:
        print(str(exc))
        return 2

    store = WorkoutStore(result.records)
    store.append(record)
    error = persistence.save(store.all())
    if error is not None:
        print(f"Workout not saved: {error}")
        return 2
    print(format_workout(record))
    return 0


def run_reset(persistence: WorkoutPersistence) -> int:
    error = persistence.clear()
    if error is not None:
        print(f"Could not delete saved workouts: {error}")
        return 2
    print("Saved workouts deleted")
    return 0


def main(argv: list[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    logging.basicConfig(
        level=getattr(logging, args.log_level),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    config = build_config(args)

    if args.ui_web:
        from mapty.ui.web_app import run_web_ui

        return run_web_ui(config)

    persistence = WorkoutPersistence(FileByteStore(config.storage_dir), key=config.storage_key)
    if args.reset:
        return run_reset(persistence)
    if args.add is not None:
        return run_add(persistence, args.add)
    if args.list:
        return run_list(persistence)

    parser.print_help()
    return 1


if __name__ == "__main__":
    raise SystemExit(main())
