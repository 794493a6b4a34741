"""Configuration management for route-pois."""

import configparser
from pathlib import Path
from typing import Dict, List, Optional


class Config:
    """Parse and manage route-pois configuration."""

    # Default POI categories (used if no config file provided)
    DEFAULT_CATEGORIES = {
        "water": {
            "amenity": ["drinking_water", "fountain"],
        },
        "bar": {
            "amenity": ["bar", "pub", "cafe"],
        },
        "food_shop": {
            "shop": ["supermarket", "convenience", "bakery", "butcher"],
        },
    }

    # Default Garmin symbol mappings
    DEFAULT_SYMBOLS = {
        "water": "Water Source",
        "bar": "Bar",
        "food_shop": "Shopping",
    }

    # Overpass mirrors, tried in order
    DEFAULT_ENDPOINTS = [
        "https://overpass-api.de/api/interpreter",
        "https://overpass.kumi.systems/api/interpreter",
        "https://maps.mail.ru/osm/tools/overpass/api/interpreter",
    ]

    DEFAULT_TIMEOUT = 35.0
    DEFAULT_MAX_RETRIES = 2
    DEFAULT_BACKOFF = 0.4
    DEFAULT_STEP_KM = 3.0
    DEFAULT_BATCH_SIZE = 18
    DEFAULT_RADIUS_KM = 5.0

    RESERVED_SECTIONS = ["overpass", "sampling", "garmin_symbols"]

    def __init__(self, config_file: Optional[str] = None):
        """
        Initialize configuration.

        Args:
            config_file: Path to config.ini file. If None, uses defaults.
        """
        self.categories = {
            name: {key: list(values) for key, values in filters.items()}
            for name, filters in self.DEFAULT_CATEGORIES.items()
        }
        self.symbols = self.DEFAULT_SYMBOLS.copy()
        self.endpoints = list(self.DEFAULT_ENDPOINTS)
        self.timeout = self.DEFAULT_TIMEOUT
        self.max_retries = self.DEFAULT_MAX_RETRIES
        self.backoff = self.DEFAULT_BACKOFF
        self.step_km = self.DEFAULT_STEP_KM
        self.batch_size = self.DEFAULT_BATCH_SIZE
        self.default_radius_km = self.DEFAULT_RADIUS_KM

        if config_file:
            self._load_config(config_file)

    def _load_config(self, config_file: str):
        """Load configuration from INI file."""
        config_path = Path(config_file)
        if not config_path.exists():
            raise FileNotFoundError(f"Config file not found: {config_file}")

        parser = configparser.ConfigParser()
        parser.read(config_path)

        # Category sections replace the defaults for that category only
        for section in parser.sections():
            if section in self.RESERVED_SECTIONS:
                continue

            category_filters = {}
            for key in parser[section]:
                values = [v.strip() for v in parser[section][key].split(',') if v.strip()]
                category_filters[key] = values

            self.categories[section] = category_filters

        if 'overpass' in parser:
            section = parser['overpass']
            if 'endpoints' in section:
                endpoints = [e.strip() for e in section['endpoints'].split(',') if e.strip()]
                if endpoints:
                    self.endpoints = endpoints
            self.timeout = self._get_number(section, 'timeout', float, self.timeout)
            self.max_retries = self._get_number(section, 'max_retries', int, self.max_retries)
            self.backoff = self._get_number(section, 'backoff', float, self.backoff)

        if 'sampling' in parser:
            section = parser['sampling']
            self.step_km = self._get_number(section, 'step_km', float, self.step_km)
            self.batch_size = self._get_number(section, 'batch_size', int, self.batch_size)
            self.default_radius_km = self._get_number(
                section, 'default_radius_km', float, self.default_radius_km
            )

        # Parse Garmin symbols
        if 'garmin_symbols' in parser:
            for category, symbol in parser['garmin_symbols'].items():
                self.symbols[category] = symbol

    @staticmethod
    def _get_number(section, key, cast, default):
        """Read a numeric option, keeping the default when missing or invalid."""
        if key not in section:
            return default
        try:
            value = cast(section[key])
        except ValueError:
            return default
        return value if value > 0 else default

    def get_categories(self) -> Dict[str, Dict[str, List[str]]]:
        """Get all POI category definitions."""
        return self.categories

    def get_garmin_symbol(self, category: str) -> str:
        """Get Garmin symbol for a category."""
        return self.symbols.get(category, "Flag, Blue")
