"""Main module for tripboard."""

import argparse
import asyncio
import logging
import os
import shutil
import sys
from importlib import resources
from pathlib import Path

from rich.console import Console
from rich.table import Table

from tripboard.config import settings
from tripboard.config.paths import get_paths, reset_paths
from tripboard.formatting import format_day, format_duration, format_time
from tripboard.models.catalog import Destination, OfferGroup, find_destination
from tripboard.models.types import FilterType, SortType
from tripboard.models.waypoint import Waypoint
from tripboard.presenters.pipeline import derive_display_list
from tripboard.presenters.trip_info import build_trip_info, waypoint_cost
from tripboard.store.backend import BackendError, YamlTripBackend

SAMPLE_TRIP = "sample_trip.yaml"


def setup_logging() -> None:
    """Configure logging to file for debugging."""
    paths = get_paths()
    paths.ensure_workspace_dirs()
    log_file = paths.debug_log

    # Set level from env var, default to INFO
    level = os.environ.get("TRIPBOARD_LOG_LEVEL", "INFO").upper()

    logging.basicConfig(
        level=getattr(logging, level, logging.INFO),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
        handlers=[
            logging.FileHandler(log_file, mode="w"),
        ],
    )
    logging.info("Tripboard starting, logging to %s", log_file)


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    """Parse command line arguments."""
    parser = argparse.ArgumentParser(description="Tripboard - plan your trip")
    parser.add_argument(
        "--workdir",
        "-w",
        type=Path,
        help="Working directory for trip data and logs (default: current directory)",
    )
    parser.add_argument(
        "--data",
        "-d",
        type=Path,
        help="Trip YAML file (default: .tripboard/trip.yaml, seeded with a sample)",
    )
    parser.add_argument(
        "--latency",
        type=int,
        metavar="MS",
        help="Simulated backend latency in milliseconds",
    )
    parser.add_argument(
        "--failure-rate",
        type=float,
        metavar="P",
        help="Probability (0..1) that a save is rejected, to try the rollback",
    )

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    list_parser = subparsers.add_parser("list", help="Print the trip without the TUI")
    list_parser.add_argument(
        "--filter",
        type=FilterType,
        choices=list(FilterType),
        default=FilterType.EVERYTHING,
        metavar="{" + ",".join(f.value for f in FilterType) + "}",
        help="Which waypoints to show",
    )
    list_parser.add_argument(
        "--sort",
        type=SortType,
        choices=[SortType.DAY, SortType.TIME, SortType.PRICE],
        default=SortType.DAY,
        metavar="{day,time,price}",
        help="Order of the waypoints",
    )

    return parser.parse_args(argv)


def resolve_trip_file(data: Path | None) -> Path:
    """Return the trip file to use, seeding the default one if missing."""
    if data is not None:
        return data.expanduser().resolve()
    trip_file = get_paths().trip_file
    if not trip_file.exists():
        trip_file.parent.mkdir(parents=True, exist_ok=True)
        sample = resources.files("tripboard.data").joinpath(SAMPLE_TRIP)
        with resources.as_file(sample) as sample_path:
            shutil.copyfile(sample_path, trip_file)
        logging.info("Seeded %s from bundled sample", trip_file)
    return trip_file


def build_backend(args: argparse.Namespace, trip_file: Path) -> YamlTripBackend:
    latency_ms = args.latency if args.latency is not None else settings.backend_latency_ms
    failure_rate = (
        args.failure_rate if args.failure_rate is not None else settings.backend_failure_rate
    )
    return YamlTripBackend(
        trip_file,
        latency=max(0, latency_ms) / 1000,
        failure_rate=min(1.0, max(0.0, failure_rate)),
    )


async def _fetch_trip(
    backend: YamlTripBackend,
) -> tuple[list[Waypoint], list[Destination], list[OfferGroup]]:
    return (
        await backend.get_waypoints(),
        await backend.get_destinations(),
        await backend.get_offers(),
    )


def cmd_list(args: argparse.Namespace, backend: YamlTripBackend) -> int:
    """Print the filtered and sorted trip as a table."""
    console = Console()
    waypoints, destinations, offers = asyncio.run(_fetch_trip(backend))
    displayed = derive_display_list(waypoints, args.filter, args.sort)

    info = build_trip_info(waypoints, destinations, offers)
    if info is not None:
        console.print(f"[bold]{info.title}[/bold]  {info.dates}  Total: €{info.total_cost}")

    table = Table(title=f"{args.filter.value.title()} · sorted by {args.sort.value}")
    table.add_column("Day")
    table.add_column("Event")
    table.add_column("Time")
    table.add_column("Duration", justify="right")
    table.add_column("Price", justify="right")
    table.add_column("★")
    for waypoint in displayed:
        destination = find_destination(destinations, waypoint.destination)
        table.add_row(
            format_day(waypoint.date_from),
            f"{waypoint.type.value.title()} {destination.name if destination else ''}",
            f"{format_time(waypoint.date_from)} — {format_time(waypoint.date_to)}",
            format_duration(waypoint.duration),
            f"€{waypoint_cost(waypoint, offers)}",
            "★" if waypoint.is_favorite else "",
        )
    console.print(table)
    if not displayed:
        console.print("[dim]No events match this filter.[/dim]")
    return 0


def main(argv: list[str] | None = None) -> None:
    """Main entry point for tripboard."""
    args = parse_args(argv)

    if args.workdir:
        workdir = args.workdir.expanduser().resolve()
        if not workdir.is_dir():
            print(f"Error: {workdir} is not a directory", file=sys.stderr)
            sys.exit(1)
        os.chdir(workdir)
        reset_paths()

    setup_logging()
    logging.info("Working directory: %s", Path.cwd())

    try:
        trip_file = resolve_trip_file(args.data)
        backend = build_backend(args, trip_file)
    except (BackendError, OSError) as e:
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(1)

    if args.command == "list":
        sys.exit(cmd_list(args, backend))

    from tripboard.tui.app import TripboardApp

    app = TripboardApp(backend)
    app.run()


if __name__ == "__main__":
    main()
