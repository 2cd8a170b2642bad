"""Layered config loading: defaults, YAML file, environment, then CLI flags."""

import os
from collections.abc import Mapping
from pathlib import Path
from typing import Any

import yaml

from aqhi_exporter.config.defaults import ENV_VARS
from aqhi_exporter.config.schema import ExporterConfig


def load_config(
    path: str | Path | None = None,
    environ: Mapping[str, str] | None = None,
    overrides: Mapping[str, Any] | None = None,
) -> ExporterConfig:
    """Load and validate config.

    Later layers win: YAML file values replace defaults, environment
    variables replace file values, and non-None ``overrides`` (the CLI
    flags) replace everything. Raises ``pydantic.ValidationError`` for
    invalid values such as a non-numeric TTL.
    """
    raw: dict[str, Any] = {}
    if path is not None:
        with open(Path(path)) as f:
            raw = yaml.safe_load(f) or {}
        if not isinstance(raw, dict):
            raise ValueError(f"Config file {path} must contain a mapping")

    raw.update(env_overrides(os.environ if environ is None else environ))

    if overrides:
        raw.update({k: v for k, v in overrides.items() if v is not None})

    return ExporterConfig(**raw)


def env_overrides(environ: Mapping[str, str]) -> dict[str, str]:
    """Map the exporter's environment variables onto config field names."""
    return {
        field: environ[var] for var, field in ENV_VARS.items() if var in environ
    }
