"""UK Office for National Statistics (ONS) time series fetcher."""

import logging

import pandas as pd

from inflation_calculator.data.base import BaseFetcher
from inflation_calculator.models import TimeSeriesObservation


logger = logging.getLogger(__name__)


class OnsFetcher(BaseFetcher):
    """Fetches a CDID time series (e.g. CHAW, the RPI all-items index)."""

    SOURCE = "ONS"
    BASE_URL = "https://api.ons.gov.uk"

    def fetch_observations(
        self, series_id: str, dataset: str | None = "MM23"
    ) -> list[TimeSeriesObservation]:
        """
        Fetch observations for an ONS series.

        Monthly values are preferred; series that only publish annual
        figures fall back to the "years" block.
        """
        cdid = series_id.lower()
        if dataset:
            url = f"{self.BASE_URL}/timeseries/{cdid}/dataset/{dataset.lower()}/data"
        else:
            url = f"{self.BASE_URL}/timeseries/{cdid}/data"

        logger.info(f"Fetching {series_id} from ONS...")
        data = self._request("GET", url, headers={"Accept": "application/json"})
        if not isinstance(data, dict):
            raise self._unexpected("response is not an object")

        entries = data.get("months") or data.get("years")
        if entries is None:
            raise self._unexpected("no months or years block")
        if not entries:
            return []

        with self._reading(series_id):
            df = pd.DataFrame(entries)
            # ONS dates look like "1987 JAN" or "1987"
            df["value"] = pd.to_numeric(df["value"], errors="coerce")
            df = df[["date", "value"]].dropna()
            result = [
                TimeSeriesObservation(period=str(row.date), value=float(row.value))
                for row in df.itertuples(index=False)
            ]

        logger.info(f"  {series_id}: {len(result)} observations")
        return result
