"""Default settings for the exporter."""

VERSION = "0.1.0"

DEFAULT_LISTEN_ADDR = "127.0.0.1:8085"
DEFAULT_SCRAPE_URL = "http://www.airqualityontario.com/aqhi/index.php"
DEFAULT_CACHE_TTL_SECONDS = 300.0
DEFAULT_FETCH_TIMEOUT_SECONDS = 5.0
DEFAULT_USER_AGENT = f"aqhi-exporter/{VERSION}"

# Environment variable -> config field
ENV_VARS: dict[str, str] = {
    "LISTEN_ADDR": "listen_addr",
    "SCRAPE_URL": "scrape_url",
    "STATION_LOCATION": "station",
    "CACHE_TTL": "cache_ttl_seconds",
}
