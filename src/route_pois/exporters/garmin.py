"""Garmin GPX exporter for POIs."""

import logging
from datetime import datetime
from pathlib import Path
from typing import List, Optional

import gpxpy.gpx
import pandas as pd

from ..core import Config

logger = logging.getLogger(__name__)


class GarminExporter:
    """Export POIs saved by CorridorExtractor to Garmin-compatible GPX."""

    def __init__(self, csv_file: str, config: Optional[Config] = None):
        """
        Initialize Garmin Exporter.

        Args:
            csv_file: Path to CSV file with POI data
            config: Configuration object for symbol mappings (uses defaults if None)
        """
        self.csv_file = Path(csv_file)
        self.config = config or Config()
        self.pois = None

    def load_pois(self) -> pd.DataFrame:
        """
        Load POIs from CSV file.

        Returns:
            DataFrame of POIs
        """
        self.pois = pd.read_csv(self.csv_file, keep_default_na=False)
        logger.info("Loaded %d POIs from %s", len(self.pois), self.csv_file)
        return self.pois

    def build_gpx(self, categories: Optional[List[str]] = None) -> gpxpy.gpx.GPX:
        """
        Build a GPX document with one waypoint per POI.

        Args:
            categories: List of categories to include (default: all)

        Returns:
            gpxpy GPX object
        """
        df = self.pois
        if categories:
            df = df[df["category"].isin(categories)]

        gpx = gpxpy.gpx.GPX()
        gpx.name = "POI Waypoints"
        gpx.description = (
            f"Points of Interest along route - "
            f"Generated {datetime.now().strftime('%Y-%m-%d')}"
        )

        for _, row in df.iterrows():
            category = str(row["category"])
            name = str(row.get("name", ""))

            # Garmin truncates long waypoint names
            wpt_name = f"{category[:3].upper()} - {name[:20]}" if name else category.capitalize()

            wpt = gpxpy.gpx.GPXWaypoint(
                latitude=float(row["lat"]),
                longitude=float(row["lon"]),
                name=wpt_name,
            )
            wpt.symbol = self.config.get_garmin_symbol(category)
            wpt.type = category

            desc_parts = [f"Category: {category}"]
            if name:
                desc_parts.append(f"Name: {name}")
            desc_parts.append(f"Km: {float(row['dist_along_km']):.2f}")
            desc_parts.append(f"Off route: {float(row['dist_to_route_km']):.2f} km")
            for col in ["amenity", "shop"]:
                if row.get(col):
                    desc_parts.append(f"{col}: {row[col]}")
            wpt.description = " | ".join(desc_parts)

            gpx.waypoints.append(wpt)

        return gpx

    def export_gpx(self, output_file: str,
                   categories: Optional[List[str]] = None) -> str:
        """
        Export POIs to GPX format.

        Args:
            output_file: Output GPX file path
            categories: List of categories to include (default: all)

        Returns:
            Path to output file
        """
        gpx = self.build_gpx(categories)

        output_path = Path(output_file)
        output_path.parent.mkdir(parents=True, exist_ok=True)

        with open(output_path, "w", encoding="utf-8") as f:
            f.write(gpx.to_xml())

        logger.info("Exported %d waypoints to %s", len(gpx.waypoints), output_path)
        return str(output_path)

    def export_by_category(self, output_dir: str) -> List[str]:
        """
        Export separate GPX files for each category.

        Args:
            output_dir: Output directory for GPX files

        Returns:
            List of output file paths
        """
        output_dir = Path(output_dir)
        output_dir.mkdir(parents=True, exist_ok=True)

        files = []
        for category in self.pois["category"].unique():
            output_file = output_dir / f"poi-{category}.gpx"
            files.append(self.export_gpx(str(output_file), categories=[category]))

        return files

    def statistics(self) -> dict:
        """Count POIs per category."""
        return {str(k): int(v) for k, v in self.pois["category"].value_counts().items()}
