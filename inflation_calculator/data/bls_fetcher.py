"""US Bureau of Labor Statistics (BLS) API fetcher."""

import logging
from datetime import date

import pandas as pd

from inflation_calculator.data.base import BaseFetcher
from inflation_calculator.exceptions import DataSourceUnavailable
from inflation_calculator.models import TimeSeriesObservation


logger = logging.getLogger(__name__)

MAX_SERIES_PER_REQUEST = 50
# BLS caps the span of a single query
YEARS_PER_REQUEST_REGISTERED = 20
YEARS_PER_REQUEST_ANONYMOUS = 10


class BlsFetcher(BaseFetcher):
    """Fetches CPI series from the BLS public API v2."""

    SOURCE = "BLS"
    BASE_URL = "https://api.bls.gov/publicAPI/v2"

    def _year_chunks(self, start_year: int, end_year: int) -> list[tuple[int, int]]:
        step = (
            YEARS_PER_REQUEST_REGISTERED
            if self.settings.has_bls()
            else YEARS_PER_REQUEST_ANONYMOUS
        )
        return [
            (year, min(year + step - 1, end_year))
            for year in range(start_year, end_year + 1, step)
        ]

    def fetch_raw(self, series_ids: list[str], start_year: int, end_year: int) -> dict:
        """POST a single timeseries query and return the checked payload."""
        if len(series_ids) > MAX_SERIES_PER_REQUEST:
            raise ValueError(
                f"BLS API allows maximum {MAX_SERIES_PER_REQUEST} series per request"
            )

        body = {
            "seriesid": series_ids,
            "startyear": str(start_year),
            "endyear": str(end_year),
        }
        if self.settings.has_bls():
            body["registrationkey"] = self.settings.bls_api_key

        data = self._request("POST", f"{self.BASE_URL}/timeseries/data/", json=body)
        if not isinstance(data, dict):
            raise self._unexpected("response is not an object")
        if data.get("status") != "REQUEST_SUCCEEDED":
            messages = ", ".join(data.get("message") or []) or "request failed"
            raise DataSourceUnavailable(self.SOURCE, messages)
        return data

    def fetch_observations(
        self,
        series_id: str,
        start_year: int = 1913,
        end_year: int | None = None,
    ) -> list[TimeSeriesObservation]:
        """
        Fetch monthly observations for one series across a year range.

        Long ranges are split into several requests. The M13 period (BLS's
        own annual average) is skipped so months are not double counted.
        """
        end_year = end_year or date.today().year
        logger.info(f"Fetching {series_id} from BLS ({start_year}-{end_year})...")

        rows = []
        for chunk_start, chunk_end in self._year_chunks(start_year, end_year):
            data = self.fetch_raw([series_id], chunk_start, chunk_end)
            with self._reading(f"{series_id} {chunk_start}-{chunk_end}"):
                series = data.get("Results", {}).get("series") or []
                if series:
                    rows.extend(series[0].get("data") or [])
            if not series:
                raise self._unexpected("missing Results.series")

        if not rows:
            return []

        with self._reading(series_id):
            df = pd.DataFrame(rows)
            df["value"] = pd.to_numeric(df["value"], errors="coerce")
            df = df.dropna(subset=["value"])
            df = df[df["period"].astype(str).str.match(r"^M(0[1-9]|1[0-2])$")].copy()
            df["period"] = df["year"].astype(str) + "-" + df["period"].str[1:]
            df = df.drop_duplicates(subset=["period"]).sort_values("period")
            result = [
                TimeSeriesObservation(period=row.period, value=float(row.value))
                for row in df.itertuples(index=False)
            ]

        logger.info(f"  {series_id}: {len(result)} monthly observations")
        return result
