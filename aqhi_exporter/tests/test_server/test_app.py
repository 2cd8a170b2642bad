"""End-to-end tests for the exporter HTTP app."""

from unittest.mock import MagicMock

import httpx
import pytest
import respx
from fastapi.testclient import TestClient
from prometheus_client.parser import text_string_to_metric_families

from aqhi_exporter.cache.ttl_cache import TTLCache
from aqhi_exporter.collector.aqhi_collector import AqhiCollector
from aqhi_exporter.config.schema import ExporterConfig
from aqhi_exporter.ingest.aqhi_client import AqhiClient
from aqhi_exporter.models.forecast import FetchResult, ForecastRecord
from aqhi_exporter.server import create_app

URL = "https://aqhi.example.com/index.php"


def _samples(text: str) -> dict[tuple[str, str], float]:
    return {
        (s.name, s.labels["station"]): s.value
        for family in text_string_to_metric_families(text)
        for s in family.samples
    }


@pytest.fixture
def config() -> ExporterConfig:
    return ExporterConfig(scrape_url=URL)


class TestMetricsEndpoint:
    @respx.mock
    def test_all_stations_scrape(self, config: ExporterConfig, aqhi_html: str):
        respx.get(URL).mock(return_value=httpx.Response(200, text=aqhi_html))
        client = TestClient(create_app(config))

        resp = client.get("/metrics")
        assert resp.status_code == 200
        assert resp.headers["content-type"].startswith("text/plain")

        samples = _samples(resp.text)
        assert samples == {
            ("all_stations_current_aqhi_level", "Kitchener"): 7,
            ("all_stations_upcoming_aqhi_level", "Kitchener"): 8,
            ("all_stations_tomorrow_aqhi_level", "Kitchener"): 4,
            ("all_stations_current_aqhi_level", "Toronto Downtown"): 3,
            ("all_stations_upcoming_aqhi_level", "Toronto Downtown"): 5,
            ("all_stations_tomorrow_aqhi_level", "Toronto Downtown"): 2,
        }

    @respx.mock
    def test_repeated_scrapes_use_cache(self, config: ExporterConfig, aqhi_html: str):
        route = respx.get(URL).mock(return_value=httpx.Response(200, text=aqhi_html))
        client = TestClient(create_app(config))

        client.get("/metrics")
        client.get("/metrics")
        assert route.call_count == 1

    @respx.mock
    def test_upstream_down_still_200(self):
        respx.get(URL).mock(return_value=httpx.Response(500))
        config = ExporterConfig(scrape_url=URL, station="Kitchener")
        client = TestClient(create_app(config))

        resp = client.get("/metrics")
        assert resp.status_code == 200
        samples = _samples(resp.text)
        assert samples[("current_aqhi_level", "Kitchener")] == 0
        assert len(samples) == 3

    def test_injected_collector(self, config: ExporterConfig):
        aqhi = MagicMock(spec=AqhiClient)
        aqhi.fetch.return_value = FetchResult(
            records=[ForecastRecord("Sarnia", 2, 3, 4)]
        )
        collector = AqhiCollector(aqhi, TTLCache(60), URL)
        client = TestClient(create_app(config, collector=collector))

        samples = _samples(client.get("/metrics").text)
        assert samples[("all_stations_tomorrow_aqhi_level", "Sarnia")] == 4


class TestStatusEndpoint:
    def test_before_first_scrape(self, config: ExporterConfig):
        client = TestClient(create_app(config))

        body = client.get("/api/status").json()
        assert body["cached"] is False
        assert body["cache_age_seconds"] is None
        assert body["station"] is None
        assert body["scrape_url"] == URL

    @respx.mock
    def test_after_scrape(self, config: ExporterConfig, aqhi_html: str):
        respx.get(URL).mock(return_value=httpx.Response(200, text=aqhi_html))
        client = TestClient(create_app(config))

        client.get("/metrics")
        body = client.get("/api/status").json()
        assert body["cached"] is True
        assert body["stations_cached"] == 2
        assert body["cache_age_seconds"] >= 0


class TestIndex:
    def test_landing_page(self, config: ExporterConfig):
        client = TestClient(create_app(config))
        resp = client.get("/")
        assert resp.status_code == 200
        assert "/metrics" in resp.text
