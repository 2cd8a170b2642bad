"""Air Quality Ontario AQHI page client and table parser."""

import logging

import httpx
from bs4 import BeautifulSoup

from aqhi_exporter.config.defaults import (
    DEFAULT_FETCH_TIMEOUT_SECONDS,
    DEFAULT_USER_AGENT,
)
from aqhi_exporter.ingest.levels import level_of
from aqhi_exporter.models.forecast import FetchResult, ForecastRecord

logger = logging.getLogger(__name__)

TABLE_SELECTOR = 'table[class="resourceTable"] tbody'


class AqhiClient:
    def __init__(
        self,
        timeout: float = DEFAULT_FETCH_TIMEOUT_SECONDS,
        user_agent: str = DEFAULT_USER_AGENT,
    ):
        self.timeout = timeout
        self.user_agent = user_agent

    def fetch(self, url: str) -> FetchResult:
        """Fetch the forecast page and parse its station table.

        Never raises: transport errors, timeouts, non-200 responses and a
        missing table are logged and reported through ``FetchResult.error``.
        """
        logger.info("Fetching: %s", url)
        headers = {"User-Agent": self.user_agent, "Accept": "text/html"}
        try:
            resp = httpx.get(
                url, headers=headers, timeout=self.timeout, follow_redirects=True
            )
        except httpx.TimeoutException as e:
            logger.error("Timed out fetching %s after %.1fs: %s", url, self.timeout, e)
            return FetchResult(error=f"timeout: {e}")
        except (httpx.HTTPError, httpx.InvalidURL) as e:
            logger.error("Request to %s failed: %s", url, e)
            return FetchResult(error=f"request failed: {e}")

        if resp.status_code != 200:
            logger.error("AQHI page %s returned %d", url, resp.status_code)
            return FetchResult(error=f"HTTP {resp.status_code}")

        records = parse_forecast_table(resp.text)
        if not records:
            logger.warning("No AQHI rows found at %s", url)
            return FetchResult(error="no forecast table rows")

        logger.debug("Parsed %d stations from %s", len(records), url)
        return FetchResult(records=records)


def parse_forecast_table(html: str) -> list[ForecastRecord]:
    """Extract station rows from every matching forecast table, in page order."""
    soup = BeautifulSoup(html, "html.parser")
    records: list[ForecastRecord] = []
    for body in soup.select(TABLE_SELECTOR):
        for row in body.find_all("tr"):
            cells = [td.get_text(" ", strip=True) for td in row.find_all("td")]
            record = parse_row(cells)
            if record is not None:
                records.append(record)
    return records


def parse_row(cells: list[str]) -> ForecastRecord | None:
    """Map one row's cell texts onto a record.

    Four cells are [station, current, upcoming, tomorrow]. Five cells carry
    a descriptive column at index 2 which is skipped. Any other shape is
    unsupported and yields None.
    """
    if len(cells) == 4:
        station, current, upcoming, tomorrow = cells
    elif len(cells) == 5:
        station, current, _, upcoming, tomorrow = cells
    else:
        if cells:
            logger.debug("Skipping row with %d cells: %r", len(cells), cells[0])
        return None

    return ForecastRecord(
        station=station,
        current=level_of(current),
        upcoming=level_of(upcoming),
        tomorrow=level_of(tomorrow),
    )
