"""Project monetary amounts between years using an inflation index."""

from collections.abc import Mapping
from dataclasses import dataclass
import math

from inflation_calculator.exceptions import EmptySeries, InvalidBaseYear, YearOutOfRange
from inflation_calculator.indices.normalizer import normalize_from_annual_rates
from inflation_calculator.models import AnnualRateSeries, NormalizedSeries


# Rate tables feed projections directly, so keep them effectively unrounded
RATE_TABLE_DECIMALS = 12


@dataclass(frozen=True)
class ProjectionResult:
    """What an amount from one year is worth in another."""

    start_amount: float
    from_year: int
    to_year: int
    end_amount: float
    total_inflation_percent: float
    # Loss relative to the end amount, not the start amount
    purchasing_power_loss_percent: float
    # Compound yearly rate over the span, in chronological direction
    annual_average_percent: float = 0.0


def _index_value(series: Mapping[int, float], year: int) -> float:
    value = series.get(year)
    if value is None or not math.isfinite(value):
        raise YearOutOfRange(year, min(series), max(series))
    return float(value)


def annualized_rate(ratio: float, years: int) -> float:
    """
    Constant yearly percentage that compounds to ``ratio`` over ``years``.

    Returns 0.0 for a zero-length span or a non-positive ratio.
    """
    if years <= 0 or ratio <= 0:
        return 0.0
    return (ratio ** (1 / years) - 1) * 100


def project(
    amount: float,
    from_year: int,
    to_year: int,
    series: Mapping[int, float],
) -> ProjectionResult:
    """
    Convert an amount in from_year money into to_year money.

    Works in both directions: when to_year precedes from_year the same
    index ratio applies and the amount deflates.

    Args:
        amount: Amount in from_year currency units
        from_year: Year the amount is denominated in
        to_year: Year to express the amount in
        series: Year -> index level (any base; only ratios matter)

    Returns:
        ProjectionResult with unrounded figures

    Raises:
        EmptySeries: series is empty
        YearOutOfRange: either year has no index value
        InvalidBaseYear: the from_year index value is zero or negative
    """
    if not series:
        raise EmptySeries("Cannot project with an empty series")

    start_index = _index_value(series, from_year)
    end_index = _index_value(series, to_year)
    if start_index <= 0:
        raise InvalidBaseYear(from_year)

    ratio = end_index / start_index
    end_amount = amount * ratio
    total_inflation = (ratio - 1) * 100

    if end_amount > amount:
        purchasing_power_loss = (end_amount - amount) / end_amount * 100
    else:
        purchasing_power_loss = 0.0

    # The yearly rate is reported for the earlier -> later direction
    chronological_ratio = ratio if to_year >= from_year else (1 / ratio if ratio > 0 else 0.0)

    return ProjectionResult(
        start_amount=amount,
        from_year=from_year,
        to_year=to_year,
        end_amount=end_amount,
        total_inflation_percent=total_inflation,
        purchasing_power_loss_percent=purchasing_power_loss,
        annual_average_percent=annualized_rate(chronological_ratio, abs(to_year - from_year)),
    )


def index_from_rate_table(rates: Mapping[int, float]) -> NormalizedSeries:
    """
    Convert a year -> rate table into the index form used by project().

    A rate keyed by year Y moves the level from Y to Y + 1, so the index
    covers the first rate year through one year past the last. Years
    missing from the table carry the previous level forward.

    This is normalize_from_annual_rates() with every rate moved one year
    later: ``index_from_rate_table(r)[y + 1]`` equals
    ``normalize_from_annual_rates({k + 1: v for k, v in r.items()})[y + 1]``.
    """
    usable = {
        int(year): float(rate)
        for year, rate in rates.items()
        if rate is not None and math.isfinite(rate)
    }
    if not usable:
        raise EmptySeries("Cannot build an index from an empty rate table")

    first, last = min(usable), max(usable)
    shifted = {first: 0.0}
    for year in range(first, last + 1):
        shifted[year + 1] = usable.get(year, 0.0)

    return normalize_from_annual_rates(
        shifted, start_year=first, decimals=RATE_TABLE_DECIMALS
    )


def project_with_rates(
    amount: float,
    from_year: int,
    to_year: int,
    rates: AnnualRateSeries,
) -> ProjectionResult:
    """project() driven by an annual rate table instead of an index."""
    return project(amount, from_year, to_year, index_from_rate_table(rates))
