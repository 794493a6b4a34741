"""Exporters for extracted POIs."""

from .garmin import GarminExporter

__all__ = ["GarminExporter"]
