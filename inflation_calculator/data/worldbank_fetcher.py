"""World Bank Indicators API fetcher for PPP conversion factors."""

import logging

from inflation_calculator.config import PPP_INDICATOR
from inflation_calculator.data.base import BaseFetcher
from inflation_calculator.exceptions import DataSourceUnavailable


logger = logging.getLogger(__name__)


class WorldBankFetcher(BaseFetcher):
    """Fetches indicator values by country and year. No API key required."""

    SOURCE = "World Bank"
    BASE_URL = "https://api.worldbank.org/v2"

    def fetch_indicator(
        self,
        indicator: str,
        countries: list[str],
        start_year: int,
        end_year: int,
    ) -> dict[str, dict[int, float]]:
        """
        Fetch an indicator for several countries.

        Returns:
            ISO3 country code -> year -> value; null values are left out
            (PPP coverage is sparse for many country/year pairs)
        """
        countries_param = ";".join(countries) if countries else "all"
        logger.info(f"Fetching {indicator} for {countries_param} ({start_year}-{end_year})...")

        payload = self._request(
            "GET",
            f"{self.BASE_URL}/country/{countries_param}/indicator/{indicator}",
            params={
                "format": "json",
                "date": f"{start_year}:{end_year}",
                "per_page": 10000,
            },
        )

        # Success is [meta, rows]; errors come back as [{"message": [...]}]
        if not isinstance(payload, list) or not payload:
            raise self._unexpected("response is not a list")
        if len(payload) < 2:
            with self._reading("error block"):
                messages = payload[0].get("message") if isinstance(payload[0], dict) else None
                detail = "; ".join(m.get("value", "") for m in messages or []) or "no data block"
            raise DataSourceUnavailable(self.SOURCE, detail)

        factors: dict[str, dict[int, float]] = {}
        with self._reading(indicator):
            for point in payload[1] or []:
                value = point.get("value")
                if value is None:
                    continue
                country = point.get("countryiso3code") or point.get("country", {}).get("id")
                factors.setdefault(country, {})[int(point["date"])] = float(value)

        logger.info(f"  {indicator}: {sum(len(v) for v in factors.values())} values")
        return factors

    def fetch_ppp_factors(
        self, countries: list[str], start_year: int = 1990, end_year: int = 2024
    ) -> dict[str, dict[int, float]]:
        """PPP conversion factor, GDP (LCU per international $)."""
        return self.fetch_indicator(PPP_INDICATOR, countries, start_year, end_year)
