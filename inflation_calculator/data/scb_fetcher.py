"""Statistics Sweden (SCB) PxWeb API fetcher."""

import logging

import pandas as pd

from inflation_calculator.data.base import BaseFetcher
from inflation_calculator.models import TimeSeriesObservation


logger = logging.getLogger(__name__)

CPI_TABLE = "PR/PR0101/PR0101A/KPItotM"


class ScbFetcher(BaseFetcher):
    """Queries a PxWeb table for every time period of one content code."""

    SOURCE = "SCB"
    BASE_URL = "https://api.scb.se/OV0104/v1/doris/en/ssd/START"

    def fetch_observations(
        self, contents_code: str, table: str = CPI_TABLE
    ) -> list[TimeSeriesObservation]:
        """
        Fetch all periods for a content code (000004VU is the CPI total index).

        Periods come back as "1980M01"; ".." marks a missing value.
        """
        query = {
            "query": [
                {
                    "code": "ContentsCode",
                    "selection": {"filter": "item", "values": [contents_code]},
                },
                {
                    "code": "Tid",
                    "selection": {"filter": "all", "values": ["*"]},
                },
            ],
            "response": {"format": "json"},
        }

        logger.info(f"Fetching {contents_code} from SCB table {table}...")
        data = self._request("POST", f"{self.BASE_URL}/{table}", json=query)

        if not isinstance(data, dict) or not isinstance(data.get("data"), list):
            raise self._unexpected("missing data array")

        with self._reading(contents_code):
            rows = [
                {"period": item["key"][-1], "value": item["values"][0]}
                for item in data["data"]
                if item.get("key") and item.get("values")
            ]
            if not rows:
                return []

            df = pd.DataFrame(rows)
            df["value"] = pd.to_numeric(df["value"], errors="coerce")
            df = df.dropna()
            result = [
                TimeSeriesObservation(period=str(row.period), value=float(row.value))
                for row in df.itertuples(index=False)
            ]

        logger.info(f"  {contents_code}: {len(result)} observations")
        return result
