"""CLI entry point for the AQHI exporter."""

import argparse
import logging

import uvicorn
import yaml
from pydantic import ValidationError

from aqhi_exporter.config.defaults import VERSION
from aqhi_exporter.config.loader import load_config
from aqhi_exporter.config.schema import ExporterConfig
from aqhi_exporter.ingest.aqhi_client import AqhiClient
from aqhi_exporter.server import create_app

logger = logging.getLogger(__name__)


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(
        prog="aqhi-exporter",
        description="Prometheus exporter for Air Quality Ontario AQHI forecasts",
    )
    parser.add_argument("--config", help="Optional config YAML path")
    parser.add_argument(
        "-v", "--verbose", action="store_true", help="Enable debug logging"
    )
    parser.add_argument(
        "--version", action="version", version=f"%(prog)s {VERSION}"
    )
    # Flags default to None so env vars and the YAML file show through
    parser.add_argument("--listen", help="Address to bind, host:port [LISTEN_ADDR]")
    parser.add_argument("--scrape", help="URL to fetch the AQHI page from [SCRAPE_URL]")
    parser.add_argument(
        "--station", help="Only export this station [STATION_LOCATION]"
    )
    parser.add_argument(
        "--cache-ttl", help="Seconds to cache a fetched page [CACHE_TTL]"
    )

    sub = parser.add_subparsers(dest="command")
    sub.add_parser("serve", help="Serve /metrics over HTTP")
    sub.add_parser("fetch", help="Fetch the page once and print the stations")
    config_p = sub.add_parser("config", help="Config operations")
    config_sub = config_p.add_subparsers(dest="config_command")
    config_sub.add_parser("show", help="Display effective config")

    args = parser.parse_args(argv)

    if args.command is None:
        parser.print_help()
        return 1

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    try:
        config = load_config(
            args.config,
            overrides={
                "listen_addr": args.listen,
                "scrape_url": args.scrape,
                "station": args.station,
                "cache_ttl_seconds": args.cache_ttl,
            },
        )
    except (ValidationError, ValueError, OSError, yaml.YAMLError) as e:
        logger.error("Invalid configuration: %s", e)
        return 2

    if args.command == "serve":
        return _cmd_serve(config)
    elif args.command == "fetch":
        return _cmd_fetch(config)
    elif args.command == "config":
        return _cmd_config(config, args)
    else:
        parser.print_help()
        return 1


def _cmd_serve(config: ExporterConfig) -> int:
    app = create_app(config)
    mode = f"station={config.station}" if config.station else "all stations"
    logger.info(
        "Serving on %s (%s, ttl=%.0fs)",
        config.listen_addr, mode, config.cache_ttl_seconds,
    )
    # uvicorn exits the process itself if the address cannot be bound
    uvicorn.run(
        app,
        host=config.listen_host,
        port=config.listen_port,
        log_level="info",
    )
    return 0


def _cmd_fetch(config: ExporterConfig) -> int:
    client = AqhiClient(
        timeout=config.fetch_timeout_seconds, user_agent=config.user_agent
    )
    result = client.fetch(config.scrape_url)
    for r in result.records:
        print(
            f"  {r.station}: current={r.current:g} "
            f"upcoming={r.upcoming:g} tomorrow={r.tomorrow:g}"
        )
    print(f"Stations: {len(result.records)}")
    return 0 if result.records else 1


def _cmd_config(config: ExporterConfig, args) -> int:
    if args.config_command == "show":
        print(config.model_dump_json(indent=2))
        return 0
    print("Use: config show")
    return 1
