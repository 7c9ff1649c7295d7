"""Statistics Denmark (DST) StatBank API fetcher."""

import logging

from inflation_calculator.data.base import BaseFetcher
from inflation_calculator.models import TimeSeriesObservation


logger = logging.getLogger(__name__)


class DstFetcher(BaseFetcher):
    """Reads JSON-stat output from StatBank tables such as PRIS111."""

    SOURCE = "DST"
    BASE_URL = "https://api.statbank.dk/v1/data"

    def fetch_observations(
        self,
        table: str = "PRIS111",
        filters: dict[str, str] | None = None,
    ) -> list[TimeSeriesObservation]:
        """
        Fetch every period of a StatBank table.

        The default filters select the all-items CPI index (VAREGR=000000,
        ENHED=300).
        """
        params = {"lang": "en", "Tid": "*"}
        params.update(filters or {"VAREGR": "000000", "ENHED": "300"})

        logger.info(f"Fetching {table} from DST...")
        data = self._request(
            "GET",
            f"{self.BASE_URL}/{table}/JSONSTAT",
            params=params,
            headers={"Accept": "application/json"},
        )

        observations = []
        with self._reading(f"{table} JSON-stat"):
            dataset = data["dataset"]
            time_index = dataset["dimension"]["Tid"]["category"]["index"]
            values = dataset["value"]

            for label, position in sorted(time_index.items(), key=lambda item: item[1]):
                # JSON-stat allows a sparse {"position": value} object instead of a list
                if isinstance(values, dict):
                    value = values.get(str(position))
                else:
                    value = values[position] if position < len(values) else None
                if value is None:
                    continue
                observations.append(TimeSeriesObservation(period=str(label), value=float(value)))

        logger.info(f"  {table}: {len(observations)} observations")
        return observations
