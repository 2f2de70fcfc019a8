# Project: mapbox-geocoder
# Owner: GreenUnicorn
"""
cli.py — Command-line interface for mapbox-geocoder.

argparse (stdlib) is enough for two subcommands.

Commands:
  mapbox-geocode forward "QUERY" [--proximity LON,LAT]  — text → places
  mapbox-geocode reverse LAT LON                         — coordinate → places

The geocoder delivers results on a worker thread; the CLI waits for the
completion handler with a threading.Event.
"""

import argparse
import threading
from pathlib import Path

from mapbox_geocoder.config import DEFAULT_CONFIG_PATH, load_config
from mapbox_geocoder.geocoder import Geocoder
from mapbox_geocoder.placemark import Coordinate, Placemark


DEFAULT_WAIT_SECONDS = 30


def _lon_lat(text: str) -> Coordinate:
    """argparse type for 'LON,LAT' strings."""
    try:
        lon_str, lat_str = text.split(",")
        return Coordinate(latitude=float(lat_str), longitude=float(lon_str))
    except ValueError:
        raise argparse.ArgumentTypeError(
            f"Expected LON,LAT (e.g. -73.99,40.73), got '{text}'"
        )


def _make_geocoder(config: dict) -> Geocoder:
    mapbox = config["mapbox"]
    return Geocoder(
        mapbox["access_token"],
        base_url=mapbox["base_url"],
        dataset=mapbox["dataset"],
        timeout=mapbox["timeout"],
        log_path=Path(config["log"]["path"]),
    )


def _wait_for_results(geocoder: Geocoder, start, wait_seconds: float) -> list[Placemark]:
    """Start a request via start(handler) and block until its handler runs.

    Raises:
        SystemExit: If the request fails or does not finish in time.
    """
    done = threading.Event()
    outcome = {}

    def handler(placemarks, error):
        outcome["placemarks"] = placemarks
        outcome["error"] = error
        done.set()

    start(handler)

    if not done.wait(wait_seconds):
        geocoder.cancel_geocode()
        print(f"[error] No response after {wait_seconds}s.")
        raise SystemExit(1)

    if outcome["error"] is not None:
        print(f"[error] {outcome['error']}")
        raise SystemExit(1)
    return outcome["placemarks"]


def _print_results(placemarks: list[Placemark], as_json: bool) -> None:
    if as_json:
        for placemark in placemarks:
            print(placemark.to_json())
        return

    if not placemarks:
        print("No results.")
        return
    for placemark in placemarks:
        if len(placemark.feature["geometry"]["coordinates"]) < 2:
            print(f"📍 {placemark.name}  (no coordinates)")
            continue
        lat, lon = placemark.location
        print(f"📍 {placemark.name}  ({lat}, {lon})")


def cmd_forward(args) -> None:
    """Geocode a free-text query and print matching places."""
    config = load_config(args.config)
    geocoder = _make_geocoder(config)

    placemarks = _wait_for_results(
        geocoder,
        lambda handler: geocoder.geocode_address_string(
            args.query, handler, proximity=args.proximity,
        ),
        args.wait,
    )
    _print_results(placemarks, args.json)


def cmd_reverse(args) -> None:
    """Reverse geocode a coordinate and print the places found there."""
    config = load_config(args.config)
    geocoder = _make_geocoder(config)
    coordinate = Coordinate(latitude=args.latitude, longitude=args.longitude)

    placemarks = _wait_for_results(
        geocoder,
        lambda handler: geocoder.reverse_geocode(coordinate, handler),
        args.wait,
    )
    _print_results(placemarks, args.json)


def main(argv: list[str] | None = None) -> None:
    parser = argparse.ArgumentParser(
        prog="mapbox-geocode",
        description="Forward and reverse geocoding using the Mapbox geocoding API",
    )
    parser.add_argument(
        "--config",
        metavar="PATH",
        type=Path,
        default=DEFAULT_CONFIG_PATH,
        help="Path to the TOML config file. Default: config.toml",
    )
    parser.add_argument(
        "--wait",
        metavar="SECONDS",
        type=float,
        default=DEFAULT_WAIT_SECONDS,
        help=f"Give up after this many seconds. Default: {DEFAULT_WAIT_SECONDS}",
    )
    parser.add_argument(
        "--json",
        action="store_true",
        help="Print each result as its serialized JSON feature",
    )
    subparsers = parser.add_subparsers(dest="command", metavar="command")
    subparsers.required = True

    p_forward = subparsers.add_parser("forward", help="Find places matching a text query")
    p_forward.add_argument("query", help='Address or place name, e.g. "Brooklyn Bridge"')
    p_forward.add_argument(
        "--proximity",
        metavar="LON,LAT",
        type=_lon_lat,
        default=None,
        help="Bias results towards this coordinate",
    )

    p_reverse = subparsers.add_parser("reverse", help="Find places at a coordinate")
    p_reverse.add_argument("latitude", type=float, help="Latitude in decimal degrees")
    p_reverse.add_argument("longitude", type=float, help="Longitude in decimal degrees")

    args = parser.parse_args(argv)

    commands = {
        "forward": cmd_forward,
        "reverse": cmd_reverse,
    }
    try:
        commands[args.command](args)
    except (FileNotFoundError, ValueError) as e:
        print(f"[error] {e}")
        raise SystemExit(1)


if __name__ == "__main__":
    main()
