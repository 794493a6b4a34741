"""POIs subcommand implementation."""

import json
from pathlib import Path

from ..api import RouteService
from ..core import Config
from ..extractors import category_breakdown, save_pois_to_csv


def run_pois(args) -> int:
    """
    Find POIs along a route and save them.

    Args:
        args: Parsed command-line arguments

    Returns:
        Process exit code
    """
    print("=" * 60)
    print("POIs along route")
    print("=" * 60)
    print(f"\nGPX file: {args.gpx}")
    print(f"Output: {args.output}")

    if not Path(args.gpx).exists():
        print(f"\n❌ Error: GPX file not found: {args.gpx}")
        return 1

    if args.config:
        print(f"Config: {args.config}")
        try:
            config = Config(args.config)
        except FileNotFoundError as e:
            print(f"\n❌ Error: {e}")
            return 1
    else:
        config = Config()

    print("\n" + "-" * 60)
    print("Querying OpenStreetMap via Overpass API...")
    print("(This may take a few minutes...)")

    try:
        with RouteService(args.gpx, config=config) as service:
            payload, status, pois = service.lookup_pois(args.radius)
    except KeyboardInterrupt:
        print("\n\n⚠ Extraction interrupted by user")
        return 130

    print(f"Radius: {payload['meta']['radiusKm']} km")

    if args.json_output:
        json_path = Path(args.json_output)
        json_path.parent.mkdir(parents=True, exist_ok=True)
        with open(json_path, "w", encoding="utf-8") as f:
            json.dump(payload, f, ensure_ascii=False, indent=2)
        print(f"✓ Payload saved to {json_path}")

    if status != 200:
        print(f"\n❌ Error during extraction: {payload['error']}")
        return 1

    if not pois:
        print("\n⚠ Warning: No POIs found!")

    for category, count in category_breakdown(pois).items():
        print(f"  - {category}: {count}")

    save_pois_to_csv(pois, args.output)
    print(f"\n✓ Saved {len(pois)} POIs to {args.output}")

    print("\n" + "=" * 60)
    print("✅ POI EXTRACTION COMPLETE!")
    print("=" * 60)
    print("\nNext step: Export to Garmin GPX format")
    print(f"  route-pois export --csv {args.output}")

    return 0
