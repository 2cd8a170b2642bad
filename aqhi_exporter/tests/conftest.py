"""Shared test fixtures."""

from pathlib import Path

import pytest
import yaml

from aqhi_exporter.config.schema import ExporterConfig


class FakeClock:
    """Manually advanced clock for TTL tests."""

    def __init__(self, start: float = 1_000_000.0):
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def fixtures_dir() -> Path:
    """Return the path to the test fixtures directory."""
    return Path(__file__).parent / "fixtures"


@pytest.fixture
def aqhi_html(fixtures_dir: Path) -> str:
    return (fixtures_dir / "aqhi_two_stations.html").read_text()


@pytest.fixture
def no_table_html(fixtures_dir: Path) -> str:
    return (fixtures_dir / "aqhi_no_table.html").read_text()


@pytest.fixture
def default_config() -> ExporterConfig:
    return ExporterConfig(scrape_url="https://aqhi.example.com/index.php")


@pytest.fixture
def config_yaml_path(tmp_path: Path) -> Path:
    """Write a minimal valid config YAML and return its path."""
    data = {
        "scrape_url": "https://aqhi.example.com/index.php",
        "station": "Kitchener",
        "cache_ttl_seconds": 120,
    }
    path = tmp_path / "test_config.yaml"
    with open(path, "w") as f:
        yaml.dump(data, f)
    return path
