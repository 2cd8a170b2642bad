"""Prometheus collector that serves AQHI levels from a TTL-cached page scrape."""

import logging
import threading
from collections.abc import Iterable

from prometheus_client.core import GaugeMetricFamily
from prometheus_client.registry import Collector

from aqhi_exporter.cache.ttl_cache import TTLCache
from aqhi_exporter.ingest.aqhi_client import AqhiClient
from aqhi_exporter.models.forecast import ForecastRecord

logger = logging.getLogger(__name__)

CACHE_KEY = "AQHI"
ALL_STATIONS_PREFIX = "all_stations_"


class AqhiCollector(Collector):
    def __init__(
        self,
        client: AqhiClient,
        cache: TTLCache,
        scrape_url: str,
        station: str = "",
    ):
        self.client = client
        self.cache = cache
        self.scrape_url = scrape_url
        self.station = station.strip()
        self._fetch_lock = threading.Lock()

    @property
    def metric_prefix(self) -> str:
        return "" if self.station else ALL_STATIONS_PREFIX

    def describe(self) -> Iterable[GaugeMetricFamily]:
        # Sample-free families so registration does not hit the upstream page
        return self._families()

    def collect(self) -> Iterable[GaugeMetricFamily]:
        records = self.select_records(self.get_records())
        current, upcoming, tomorrow = self._families()
        for record in records:
            current.add_metric([record.station], record.current)
            upcoming.add_metric([record.station], record.upcoming)
            tomorrow.add_metric([record.station], record.tomorrow)
        return [current, upcoming, tomorrow]

    def get_records(self) -> list[ForecastRecord]:
        """Return cached records, fetching and caching them on a miss.

        The whole check-fetch-store sequence holds one lock so concurrent
        scrapes in a miss window share a single upstream request.
        """
        with self._fetch_lock:
            records, found = self.cache.get(CACHE_KEY)
            if found:
                return records

            result = self.client.fetch(self.scrape_url)
            if not result.ok:
                logger.warning(
                    "AQHI fetch degraded (%s); caching %d records",
                    result.error, len(result.records),
                )
            self.cache.set(CACHE_KEY, result.records)
            return result.records

    def cached_records(self) -> list[ForecastRecord] | None:
        """Peek at the cache without fetching."""
        records, found = self.cache.get(CACHE_KEY)
        return records if found else None

    def select_records(self, records: list[ForecastRecord]) -> list[ForecastRecord]:
        """Apply the station filter, or collapse duplicates in all-stations mode."""
        if self.station:
            wanted = self.station.casefold()
            for record in records:
                if record.station.casefold() == wanted:
                    return [record]
            return [ForecastRecord(station=self.station)]

        # Last write wins, kept at the station's first position
        by_station: dict[str, ForecastRecord] = {}
        for record in records:
            by_station[record.station] = record
        return list(by_station.values())

    def _families(self) -> list[GaugeMetricFamily]:
        prefix = self.metric_prefix
        return [
            GaugeMetricFamily(
                f"{prefix}current_aqhi_level", "Current AQHI level", labels=["station"]
            ),
            GaugeMetricFamily(
                f"{prefix}upcoming_aqhi_level", "Upcoming AQHI level", labels=["station"]
            ),
            GaugeMetricFamily(
                f"{prefix}tomorrow_aqhi_level", "Tomorrow AQHI level", labels=["station"]
            ),
        ]
