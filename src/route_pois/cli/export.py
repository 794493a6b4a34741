"""Export subcommand implementation."""

from pathlib import Path

from ..core import Config
from ..exporters import GarminExporter


def run_export(args) -> int:
    """
    Run the POI export to Garmin GPX format.

    Args:
        args: Parsed command-line arguments

    Returns:
        Process exit code
    """
    print("=" * 60)
    print("Garmin GPX Exporter")
    print("=" * 60)
    print(f"\nInput CSV: {args.csv}")

    if not Path(args.csv).exists():
        print(f"\n❌ Error: CSV file not found: {args.csv}")
        print("\nRun extraction first:")
        print("  route-pois pois --gpx <route.gpx>")
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

    exporter = GarminExporter(args.csv, config=config)
    exporter.load_pois()

    print(f"\nTotal POIs: {len(exporter.pois)}")
    for category, count in exporter.statistics().items():
        print(f"  {category:15s}: {count:4d}")

    if args.split:
        print(f"\nOutput directory: {args.output_dir}")
        files = exporter.export_by_category(args.output_dir)
        print(f"✓ Exported {len(files)} category files")
    else:
        print(f"\nOutput file: {args.output}")
        if args.categories:
            print(f"Categories filter: {', '.join(args.categories)}")
        exporter.export_gpx(args.output, categories=args.categories)
        print(f"✓ Exported to {args.output}")

    print("\n" + "=" * 60)
    print("✅ EXPORT COMPLETE!")
    print("=" * 60)
    print("\nTo load onto Garmin device:")
    print("  Copy GPX files to your device's /Garmin/NewFiles/ folder")

    return 0
