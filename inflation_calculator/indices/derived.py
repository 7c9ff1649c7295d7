"""PPP adjustment and housing price-to-income metrics."""

from collections.abc import Mapping
import math

import pandas as pd

from inflation_calculator.exceptions import IncompleteYearPair, InvalidBaseYear, MissingPPPFactor
from inflation_calculator.models import HousingAffordabilityRecord


def _usable_factor(factor: float | None) -> bool:
    return factor is not None and math.isfinite(factor) and factor != 0


def ppp_adjust(amount: float, from_factor: float | None, to_factor: float | None) -> float:
    """Convert an amount between countries: ``amount * (to / from)``."""
    if not _usable_factor(from_factor) or not _usable_factor(to_factor):
        raise MissingPPPFactor()
    return amount * (to_factor / from_factor)


def ppp_convert(
    amount: float,
    from_country: str,
    to_country: str,
    year: int,
    factors: Mapping[str, Mapping[int, float]],
) -> float:
    """
    PPP-adjust an amount using a country -> year -> factor table.

    World Bank coverage is sparse, so a missing pair is an expected
    outcome and is reported as MissingPPPFactor naming the gap.
    """
    looked_up = []
    for country in (from_country, to_country):
        factor = factors.get(country, {}).get(year)
        if not _usable_factor(factor):
            raise MissingPPPFactor(country, year)
        looked_up.append(factor)
    return ppp_adjust(amount, looked_up[0], looked_up[1])


def price_to_income_ratio(
    home_price_index: Mapping[int, float],
    median_income: Mapping[int, float],
    base_year: int,
    base_year_median_home_price: float,
) -> list[HousingAffordabilityRecord]:
    """
    Estimate home prices from an index and relate them to income.

    The index is scaled so that base_year equals the known median home
    price for that year. Only years present in both series are returned;
    nothing is interpolated.

    Raises:
        InvalidBaseYear: base_year missing or zero in the home price index
        IncompleteYearPair: the two series share no years
    """
    base_index = home_price_index.get(base_year)
    if base_index is None or not math.isfinite(base_index) or base_index <= 0:
        raise InvalidBaseYear(base_year)

    frame = pd.DataFrame(
        {
            "index": pd.Series(dict(home_price_index), dtype="float64"),
            "income": pd.Series(dict(median_income), dtype="float64"),
        }
    ).dropna()
    frame = frame[frame["income"] > 0].sort_index()
    if frame.empty:
        raise IncompleteYearPair("Home price and income series have no years in common")

    records = []
    for year, row in frame.iterrows():
        home_price = (row["index"] / base_index) * base_year_median_home_price
        records.append(
            HousingAffordabilityRecord(
                year=int(year),
                case_shiller_index=float(row["index"]),
                median_income=float(row["income"]),
                approximate_home_price=home_price,
                price_to_income_ratio=home_price / row["income"],
            )
        )
    return records
