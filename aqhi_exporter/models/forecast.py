"""AQHI forecast data models."""

from dataclasses import dataclass, field


@dataclass(frozen=True)
class ForecastRecord:
    station: str
    current: float = 0.0
    upcoming: float = 0.0
    tomorrow: float = 0.0


@dataclass(frozen=True)
class FetchResult:
    """Outcome of one page fetch.

    ``error`` is a diagnostic for logging only; ``records`` holds whatever
    was parsed before the failure (usually nothing).
    """

    records: list[ForecastRecord] = field(default_factory=list)
    error: str | None = None

    @property
    def ok(self) -> bool:
        return self.error is None
