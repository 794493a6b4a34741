"""Tests for configuration loading."""

import pytest

from route_pois.core import Config


def test_defaults():
    config = Config()
    assert list(config.categories) == ["water", "bar", "food_shop"]
    assert config.endpoints[0] == "https://overpass-api.de/api/interpreter"
    assert len(config.endpoints) == 3
    assert config.timeout == 35
    assert config.max_retries == 2
    assert config.backoff == pytest.approx(0.4)
    assert config.step_km == 3
    assert config.batch_size == 18
    assert config.default_radius_km == 5
    assert config.get_garmin_symbol("water") == "Water Source"
    assert config.get_garmin_symbol("unknown") == "Flag, Blue"


def test_defaults_are_not_shared_between_instances():
    first = Config()
    first.categories["water"]["amenity"].append("water_point")
    assert "water_point" not in Config().categories["water"]["amenity"]


def test_missing_file():
    with pytest.raises(FileNotFoundError):
        Config("does/not/exist.ini")


def test_ini_overrides(tmp_path):
    path = tmp_path / "config.ini"
    path.write_text(
        "[overpass]\n"
        "endpoints = https://one.test/api,\n"
        "    https://two.test/api\n"
        "timeout = 10\n"
        "max_retries = many\n"
        "\n"
        "[sampling]\n"
        "step_km = 2.5\n"
        "batch_size = 10\n"
        "\n"
        "[bar]\n"
        "amenity = bar, biergarten\n"
        "\n"
        "[garmin_symbols]\n"
        "bar = Drinking Water\n",
        encoding="utf-8",
    )

    config = Config(str(path))

    assert config.endpoints == ["https://one.test/api", "https://two.test/api"]
    assert config.timeout == 10
    assert config.max_retries == 2
    assert config.step_km == 2.5
    assert config.batch_size == 10
    assert config.categories["bar"] == {"amenity": ["bar", "biergarten"]}
    assert config.categories["water"] == {"amenity": ["drinking_water", "fountain"]}
    assert config.get_garmin_symbol("bar") == "Drinking Water"
