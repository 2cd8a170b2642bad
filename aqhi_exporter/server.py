"""AQHI exporter HTTP server: Prometheus metrics plus a small status API."""

from fastapi import FastAPI
from fastapi.responses import HTMLResponse, Response
from prometheus_client import CONTENT_TYPE_LATEST, CollectorRegistry, generate_latest

from aqhi_exporter.cache.ttl_cache import TTLCache
from aqhi_exporter.collector.aqhi_collector import CACHE_KEY, AqhiCollector
from aqhi_exporter.config.defaults import VERSION
from aqhi_exporter.config.schema import ExporterConfig
from aqhi_exporter.ingest.aqhi_client import AqhiClient

LANDING_PAGE = """<html>
<head><title>AQHI Exporter</title></head>
<body>
<h1>AQHI Exporter</h1>
<p><a href="/metrics">Metrics</a></p>
</body>
</html>
"""


def build_collector(config: ExporterConfig) -> AqhiCollector:
    client = AqhiClient(
        timeout=config.fetch_timeout_seconds, user_agent=config.user_agent
    )
    cache = TTLCache(config.cache_ttl_seconds)
    return AqhiCollector(client, cache, config.scrape_url, station=config.station)


def create_app(
    config: ExporterConfig, collector: AqhiCollector | None = None
) -> FastAPI:
    """Build the exporter app with its own registry and collector."""
    if collector is None:
        collector = build_collector(config)
    registry = CollectorRegistry()
    registry.register(collector)

    app = FastAPI(title="AQHI Exporter", version=VERSION)
    app.state.config = config
    app.state.collector = collector
    app.state.registry = registry

    # Sync handlers run in the worker pool, so a client disconnect cannot
    # abort a fetch other scrapers are waiting on.
    @app.get("/metrics")
    def metrics():
        return Response(
            content=generate_latest(registry), media_type=CONTENT_TYPE_LATEST
        )

    @app.get("/api/status")
    def status():
        """Cache state for operators; never triggers an upstream fetch."""
        records = collector.cached_records()
        return {
            "scrape_url": config.scrape_url,
            "station": config.station or None,
            "cache_ttl_seconds": config.cache_ttl_seconds,
            "cached": records is not None,
            "cache_age_seconds": collector.cache.age(CACHE_KEY),
            "stations_cached": len(records) if records is not None else 0,
        }

    @app.get("/", response_class=HTMLResponse)
    def index():
        return LANDING_PAGE

    return app
