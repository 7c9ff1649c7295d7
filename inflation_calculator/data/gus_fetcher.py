"""Statistics Poland (GUS) Local Data Bank (BDL) API fetcher."""

import logging
from datetime import date

from inflation_calculator.data.base import BaseFetcher
from inflation_calculator.models import TimeSeriesObservation


logger = logging.getLogger(__name__)


class GusFetcher(BaseFetcher):
    """Fetches national-level values of a BDL variable (1738 is CPI total)."""

    SOURCE = "GUS"
    BASE_URL = "https://bdl.stat.gov.pl/api/v1"

    def fetch_observations(
        self,
        variable_id: str,
        start_year: int = 1990,
        end_year: int | None = None,
    ) -> list[TimeSeriesObservation]:
        """Fetch annual values; null entries are dropped."""
        end_year = end_year or date.today().year
        params: list[tuple[str, str | int]] = [
            ("format", "json"),
            ("unit-level", 0),
            ("page-size", 100),
        ]
        params.extend(("year", year) for year in range(start_year, end_year + 1))

        logger.info(f"Fetching variable {variable_id} from GUS ({start_year}-{end_year})...")
        data = self._request(
            "GET",
            f"{self.BASE_URL}/data/by-variable/{variable_id}",
            params=params,
            headers={"Accept": "application/json"},
        )

        if not isinstance(data, dict) or not isinstance(data.get("results"), list):
            raise self._unexpected("missing results array")

        observations = []
        with self._reading(variable_id):
            for unit in data["results"]:
                for entry in unit.get("values") or []:
                    year = entry.get("year")
                    value = entry.get("val")
                    if year is None or value is None:
                        continue
                    try:
                        observations.append(
                            TimeSeriesObservation(period=str(int(year)), value=float(value))
                        )
                    except (TypeError, ValueError):
                        logger.warning(f"  Skipping unparseable GUS value {value!r} for {year}")

        logger.info(f"  {variable_id}: {len(observations)} observations")
        return observations
