"""Command line entry point: play journeys headlessly from a destinations file."""
from __future__ import annotations

import argparse
import logging
from pathlib import Path

from roamly.app.build import App, build
from roamly.config.models import AppModel, load_config
from roamly.domain.state import Phase
from roamly.sim.clock import RealtimePacer

log = logging.getLogger("roamly.main")


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Animate journeys to destinations on a headless map.")
    parser.add_argument("destinations", type=Path, help="JSON file with a top-level 'destinations' list.")
    parser.add_argument("--config", type=Path, default=None, help="JSON or YAML application config.")
    parser.add_argument(
        "--select",
        type=int,
        action="append",
        default=None,
        help="Destination id to travel to (repeatable). Defaults to every destination.",
    )
    parser.add_argument("--realtime", action="store_true", help="Pace the journey by the wall clock.")
    parser.add_argument("--speed", type=float, default=1.0, help="Realtime playback speed factor.")
    parser.add_argument("--log-level", default=None, choices=["DEBUG", "INFO", "WARNING", "ERROR"])
    args = parser.parse_args(argv)
    if args.speed <= 0:
        parser.error("--speed must be positive")
    return args


def play(app: App, destination_id: int) -> bool:
    """Run one full journey to Details and close it again."""
    d = app.catalog.get_destination(destination_id)
    if d is None:
        log.warning("unknown destination id %d", destination_id)
        return False
    if not app.catalog.on_marker_click(d):
        return False
    app.kernel.run()
    arrived = app.journey.phase is Phase.DETAILS
    app.catalog.close_details()
    app.kernel.run()
    return arrived


def run(argv: list[str] | None = None) -> int:
    args = parse_args(argv)
    model = load_config(args.config) if args.config else AppModel()
    updates = {"data": model.data.model_copy(update={"path": str(args.destinations)})}
    if args.log_level:
        updates["log"] = model.log.model_copy(update={"level": args.log_level})
    model = model.model_copy(update=updates)

    pacer = RealtimePacer(speed=args.speed) if args.realtime else None
    app = build(model, pacer=pacer)
    app.catalog.load()
    ids = args.select or [d.id for d in app.catalog.destinations]

    completed = sum(play(app, i) for i in ids)
    app.catalog.destroy()
    log.info("completed %d of %d journeys", completed, len(ids))
    return 0 if completed == len(ids) else 1


def main(argv: list[str] | None = None) -> None:
    raise SystemExit(run(argv))


if __name__ == "__main__":  # pragma: no cover - CLI entry point
    main()
