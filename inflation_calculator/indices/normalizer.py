"""Aggregate raw observations and normalize them into base-year indices."""

from collections.abc import Iterable, Mapping

import numpy as np
import pandas as pd

from inflation_calculator.exceptions import EmptySeries, InvalidBaseYear, YearOutOfRange
from inflation_calculator.models import (
    AnnualRateSeries,
    AnnualSeries,
    NormalizedSeries,
    TimeSeriesObservation,
)


RATIO_DECIMALS = 2
COMPOUNDING_DECIMALS = 4


def _to_series(values: Mapping[int, float | None]) -> pd.Series:
    """Convert a year mapping to a sorted float Series without NaN/inf."""
    series = pd.Series(
        {int(year): value for year, value in values.items()}, dtype="float64"
    )
    series = series[np.isfinite(series)]
    return series.sort_index()


def _to_dict(series: pd.Series) -> dict[int, float]:
    return {int(year): float(value) for year, value in series.items()}


def aggregate_annual(observations: Iterable[TimeSeriesObservation]) -> AnnualSeries:
    """
    Collapse sub-year observations to one value per year.

    Multiple observations for the same year are combined with a true
    arithmetic mean over all of them, so the result does not depend on
    the order the provider returned them in.

    Args:
        observations: Raw observations; non-finite values are ignored

    Returns:
        Mapping of year to mean value (empty if nothing usable)
    """
    rows = [
        (obs.year, obs.value)
        for obs in observations
        if obs.value is not None and np.isfinite(obs.value)
    ]
    if not rows:
        return {}

    df = pd.DataFrame(rows, columns=["year", "value"])
    annual = df.groupby("year")["value"].mean()
    return _to_dict(annual.sort_index())


def normalize(
    series: Mapping[int, float | None],
    base_year: int | None = None,
    decimals: int = RATIO_DECIMALS,
) -> NormalizedSeries:
    """
    Express every year of a series relative to a base year.

    Args:
        series: Year -> absolute value (price level, index level)
        base_year: Reference year; defaults to the earliest year with a valid value
        decimals: Rounding applied to each ratio

    Returns:
        Year -> ratio, with ``result[base_year] == 1.0``

    Raises:
        EmptySeries: No finite values in the input
        InvalidBaseYear: Base year value is missing, zero or negative
    """
    values = _to_series(series)
    if values.empty:
        raise EmptySeries("Cannot normalize an empty series")

    if base_year is None:
        base_year = int(values.index[0])

    if base_year not in values.index:
        raise InvalidBaseYear(base_year)
    base_value = float(values[base_year])
    if base_value <= 0:
        raise InvalidBaseYear(base_year)

    normalized = (values / base_value).round(decimals)
    normalized[base_year] = 1.0
    return _to_dict(normalized)


def normalize_from_annual_rates(
    rates: Mapping[int, float | None],
    start_year: int | None = None,
    decimals: int = COMPOUNDING_DECIMALS,
) -> NormalizedSeries:
    """
    Build a cumulative index from annual percentage inflation rates.

    The start year is defined as 1.0; each later year compounds its own
    rate onto the previous level (``level *= 1 + rate / 100``). Years are
    always processed in ascending numeric order regardless of how the
    mapping was built.

    Args:
        rates: Year -> annual inflation in percent (3.2 means 3.2%)
        start_year: First year of the index; defaults to the earliest year
        decimals: Rounding applied to the final cumulative values only

    Returns:
        Year -> cumulative index with ``result[start_year] == 1.0``

    Raises:
        EmptySeries: No finite rates in the input
        YearOutOfRange: start_year outside the covered years
    """
    values = _to_series(rates)
    if values.empty:
        raise EmptySeries("Cannot compound an empty rate series")

    years = [int(year) for year in values.index]
    if start_year is None:
        start_year = years[0]
    elif not years[0] <= start_year <= years[-1]:
        raise YearOutOfRange(start_year, years[0], years[-1])

    cumulative = {start_year: 1.0}
    level = 1.0
    for year in years:
        if year <= start_year:
            continue
        level *= 1 + float(values[year]) / 100
        cumulative[year] = level

    base = cumulative[start_year]
    if base == 0 or not np.isfinite(base):
        raise InvalidBaseYear(start_year)

    result = {year: round(value / base, decimals) for year, value in cumulative.items()}
    result[start_year] = 1.0
    return result


def annual_rates(observations: Iterable[TimeSeriesObservation]) -> AnnualRateSeries:
    """Average rate observations per year (monthly y/y figures become one annual rate)."""
    return aggregate_annual(observations)
