"""Pydantic v2 configuration schema with strict validation."""

from pydantic import BaseModel, Field, field_validator

from aqhi_exporter.config.defaults import (
    DEFAULT_CACHE_TTL_SECONDS,
    DEFAULT_FETCH_TIMEOUT_SECONDS,
    DEFAULT_LISTEN_ADDR,
    DEFAULT_SCRAPE_URL,
    DEFAULT_USER_AGENT,
)


class ExporterConfig(BaseModel):
    model_config = {"extra": "forbid"}

    listen_addr: str = DEFAULT_LISTEN_ADDR
    scrape_url: str = DEFAULT_SCRAPE_URL
    station: str = ""  # empty = export every station
    cache_ttl_seconds: float = Field(default=DEFAULT_CACHE_TTL_SECONDS, gt=0.0)
    fetch_timeout_seconds: float = Field(
        default=DEFAULT_FETCH_TIMEOUT_SECONDS, gt=0.0
    )
    user_agent: str = DEFAULT_USER_AGENT

    @field_validator("listen_addr")
    @classmethod
    def _check_listen_addr(cls, value: str) -> str:
        host, sep, port = value.rpartition(":")
        if not sep or not port.isdigit():
            raise ValueError(f"listen address must be host:port, got {value!r}")
        if not 0 < int(port) < 65536:
            raise ValueError(f"listen port out of range: {port}")
        return value

    @field_validator("station")
    @classmethod
    def _strip_station(cls, value: str) -> str:
        return value.strip()

    @property
    def listen_host(self) -> str:
        host = self.listen_addr.rpartition(":")[0]
        # ":8085" binds every interface, as Go's net/http does
        return host.strip("[]") or "0.0.0.0"

    @property
    def listen_port(self) -> int:
        return int(self.listen_addr.rpartition(":")[2])
