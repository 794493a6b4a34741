"""Route subcommand implementation."""

import json
from pathlib import Path

from ..core import load_route
from ..core.errors import RoutePoisError


def run_route(args) -> int:
    """
    Load a GPX route and print its stats.

    Args:
        args: Parsed command-line arguments

    Returns:
        Process exit code
    """
    print("=" * 60)
    print("Route profile")
    print("=" * 60)
    print(f"\nGPX file: {args.gpx}")

    if not Path(args.gpx).exists():
        print(f"\n❌ Error: GPX file not found: {args.gpx}")
        return 1

    try:
        route = load_route(args.gpx)
    except RoutePoisError as e:
        print(f"\n❌ Error: {e}")
        return 1

    stats = route.stats
    print(f"✓ Loaded '{route.name}' with {len(route.points)} points")
    print(f"\n  Distance:  {stats.distance_km:.1f} km")
    print(f"  Gain:      {stats.gain_m} m")
    print(f"  Loss:      {stats.loss_m} m")
    print(f"  Elevation: {stats.min_ele:.1f} - {stats.max_ele:.1f} m")

    if args.output:
        output_path = Path(args.output)
        output_path.parent.mkdir(parents=True, exist_ok=True)
        with open(output_path, "w", encoding="utf-8") as f:
            json.dump(route.to_dict(), f, ensure_ascii=False)
        print(f"\n✓ Route payload saved to {output_path}")

    return 0
