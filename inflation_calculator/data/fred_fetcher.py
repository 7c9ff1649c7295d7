"""FRED API data fetcher."""

import logging

import pandas as pd

from inflation_calculator.data.base import BaseFetcher
from inflation_calculator.exceptions import DataSourceUnavailable
from inflation_calculator.models import TimeSeriesObservation


logger = logging.getLogger(__name__)


class FredFetcher(BaseFetcher):
    """Fetches observations from the St. Louis Fed FRED API."""

    SOURCE = "FRED"
    BASE_URL = "https://api.stlouisfed.org/fred"

    def _require_key(self) -> None:
        if not self.settings.has_fred():
            raise DataSourceUnavailable(
                self.SOURCE,
                "FRED_API_KEY not set. Get one at: "
                "https://fred.stlouisfed.org/docs/api/api_key.html",
            )

    def fetch_observations(
        self, series_id: str, observation_start: str | None = None
    ) -> list[TimeSeriesObservation]:
        """
        Fetch observations for a FRED series.

        Args:
            series_id: FRED series ID
            observation_start: Earliest date to fetch (YYYY-MM-DD)

        Returns:
            Observations in date order; FRED's "." placeholders are dropped
        """
        self._require_key()
        logger.info(f"Fetching {series_id} from FRED...")

        params = {
            "series_id": series_id,
            "api_key": self.settings.fred_api_key,
            "file_type": "json",
        }
        if observation_start:
            params["observation_start"] = observation_start

        data = self._request("GET", f"{self.BASE_URL}/series/observations", params=params)

        if not isinstance(data, dict):
            raise self._unexpected("response is not an object")
        if "error_code" in data:
            raise DataSourceUnavailable(
                self.SOURCE, data.get("error_message", f"error {data['error_code']}")
            )

        observations = data.get("observations")
        if not isinstance(observations, list):
            raise self._unexpected("missing observations")
        if not observations:
            return []

        with self._reading(series_id):
            df = pd.DataFrame(observations)
            df["value"] = pd.to_numeric(df["value"], errors="coerce")
            df = df[["date", "value"]].dropna().sort_values("date")
            result = [
                TimeSeriesObservation(period=str(row.date), value=float(row.value))
                for row in df.itertuples(index=False)
            ]

        logger.info(f"  {series_id}: {len(result)} observations")
        return result
