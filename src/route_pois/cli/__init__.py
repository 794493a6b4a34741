"""Command-line interface for route-pois."""

import sys
import logging
import argparse


def main(argv=None):
    """Main CLI entry point with subcommands."""
    parser = argparse.ArgumentParser(
        prog="route-pois",
        description="Build a GPX route profile and find water, bars and food shops along it"
    )
    parser.add_argument(
        "--log-level",
        default="WARNING",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="Logging level (default: WARNING)"
    )

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    # Route subcommand
    route_parser = subparsers.add_parser(
        "route",
        help="Show distance and elevation stats of a GPX route"
    )
    route_parser.add_argument(
        "--gpx",
        required=True,
        help="Input GPX route file"
    )
    route_parser.add_argument(
        "--output",
        help="Write the route payload as JSON to this file"
    )

    # POIs subcommand
    pois_parser = subparsers.add_parser(
        "pois",
        help="Find POIs along a GPX route via Overpass"
    )
    pois_parser.add_argument(
        "--gpx",
        required=True,
        help="Input GPX route file"
    )
    pois_parser.add_argument(
        "--radius",
        help="Max distance from route in km, clamped to 1-10 (default: 5)"
    )
    pois_parser.add_argument(
        "--output",
        default="data/pois_along_route.csv",
        help="Output CSV file (default: data/pois_along_route.csv)"
    )
    pois_parser.add_argument(
        "--json",
        dest="json_output",
        help="Also write the POI payload as JSON to this file"
    )
    pois_parser.add_argument(
        "--config",
        help="Path to config.ini file (default: use built-in settings)"
    )

    # Export subcommand
    export_parser = subparsers.add_parser(
        "export",
        help="Export POIs to Garmin GPX format"
    )
    export_parser.add_argument(
        "--csv",
        default="data/pois_along_route.csv",
        help="Input CSV file with POIs (default: data/pois_along_route.csv)"
    )
    export_parser.add_argument(
        "--output",
        default="data/pois.gpx",
        help="Output GPX file (default: data/pois.gpx)"
    )
    export_parser.add_argument(
        "--split",
        action="store_true",
        help="Export separate files per category"
    )
    export_parser.add_argument(
        "--output-dir",
        default="data/gpx",
        help="Output directory for split files (default: data/gpx)"
    )
    export_parser.add_argument(
        "--categories",
        nargs="+",
        help="Only export specific categories"
    )
    export_parser.add_argument(
        "--config",
        help="Path to config.ini file for symbol mappings"
    )

    args = parser.parse_args(argv)

    if not args.command:
        parser.print_help()
        sys.exit(1)

    if not logging.getLogger().hasHandlers():
        logging.basicConfig(
            level=getattr(logging, args.log_level),
            format="%(asctime)s %(levelname)s %(name)s: %(message)s",
        )

    # Route to appropriate subcommand
    if args.command == "route":
        from .route import run_route
        sys.exit(run_route(args))
    elif args.command == "pois":
        from .pois import run_pois
        sys.exit(run_pois(args))
    elif args.command == "export":
        from .export import run_export
        sys.exit(run_export(args))


if __name__ == "__main__":
    main()
