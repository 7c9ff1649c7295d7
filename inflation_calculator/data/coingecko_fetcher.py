"""CoinGecko market chart fetcher for crypto price history."""

import logging

import pandas as pd

from inflation_calculator.data.base import BaseFetcher
from inflation_calculator.models import TimeSeriesObservation


logger = logging.getLogger(__name__)


class CoinGeckoFetcher(BaseFetcher):
    """Fetches historical prices. No key required for the public tier."""

    SOURCE = "CoinGecko"
    BASE_URL = "https://api.coingecko.com/api/v3"

    def fetch_prices(
        self, coin_id: str, vs_currency: str = "usd"
    ) -> list[TimeSeriesObservation]:
        """Fetch the full daily price history as YYYY-MM-DD observations."""
        logger.info(f"Fetching {coin_id} prices from CoinGecko...")
        data = self._request(
            "GET",
            f"{self.BASE_URL}/coins/{coin_id}/market_chart",
            params={"vs_currency": vs_currency, "days": "max", "interval": "daily"},
        )

        prices = data.get("prices") if isinstance(data, dict) else None
        if not isinstance(prices, list):
            raise self._unexpected("missing prices")
        if not prices:
            return []

        with self._reading(coin_id):
            df = pd.DataFrame(prices, columns=["timestamp", "value"])
            df["date"] = pd.to_datetime(df["timestamp"], unit="ms").dt.strftime("%Y-%m-%d")
            df["value"] = pd.to_numeric(df["value"], errors="coerce")
            df = df.dropna(subset=["value"]).drop_duplicates(subset=["date"], keep="last")
            result = [
                TimeSeriesObservation(period=row.date, value=float(row.value))
                for row in df[["date", "value"]].itertuples(index=False)
            ]

        logger.info(f"  {coin_id}: {len(result)} daily prices")
        return result

    def fetch_monthly_prices(
        self, coin_id: str, vs_currency: str = "usd"
    ) -> list[TimeSeriesObservation]:
        """Monthly mean prices, keyed by the first day of each month."""
        daily = self.fetch_prices(coin_id, vs_currency)
        if not daily:
            return []

        series = pd.Series(
            [obs.value for obs in daily],
            index=pd.to_datetime([obs.period for obs in daily]),
        )
        monthly = series.resample("MS").mean().dropna()
        return [
            TimeSeriesObservation(period=ts.strftime("%Y-%m-%d"), value=round(float(value), 2))
            for ts, value in monthly.items()
        ]
