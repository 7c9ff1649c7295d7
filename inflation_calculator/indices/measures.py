"""Weighted consensus across several price measures of one currency."""

from collections.abc import Mapping
from dataclasses import dataclass, field
import logging

from inflation_calculator.exceptions import EmptySeries, SeriesError
from inflation_calculator.indices.projection import ProjectionResult, annualized_rate, project


logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class MeasureContribution:
    """One measure's projection and its share of the consensus."""

    measure: str
    weight: float
    result: ProjectionResult


@dataclass(frozen=True)
class ConsensusResult:
    """Weighted average of per-measure projections."""

    start_amount: float
    from_year: int
    to_year: int
    end_amount: float
    total_inflation_percent: float
    annual_average_percent: float
    contributions: list[MeasureContribution] = field(default_factory=list)
    # measure -> why it was left out
    skipped: dict[str, str] = field(default_factory=dict)


def consensus_projection(
    amount: float,
    from_year: int,
    to_year: int,
    measures: Mapping[str, Mapping[int, float]],
    weights: Mapping[str, float],
) -> ConsensusResult:
    """
    Project an amount with every weighted measure and blend the results.

    Measures without a weight are ignored. Measures that cannot cover both
    years are skipped and the remaining weights are rescaled to sum to 1.

    Args:
        amount: Amount in from_year currency units
        from_year: Year the amount is denominated in
        to_year: Year to express the amount in
        measures: Measure name -> year -> index level
        weights: Measure name -> relative weight

    Returns:
        ConsensusResult with contributions sorted by weight, largest first

    Raises:
        EmptySeries: no weighted measure covers both years
    """
    results: dict[str, ProjectionResult] = {}
    skipped: dict[str, str] = {}

    for name, series in measures.items():
        weight = weights.get(name, 0.0)
        if weight <= 0:
            continue
        try:
            results[name] = project(amount, from_year, to_year, series)
        except SeriesError as e:
            logger.debug(f"Skipping measure {name}: {e}")
            skipped[name] = str(e)

    total_weight = sum(weights[name] for name in results)
    if not results or total_weight <= 0:
        raise EmptySeries(f"No weighted measure covers {from_year} and {to_year}")

    contributions = sorted(
        (
            MeasureContribution(name, weights[name] / total_weight, result)
            for name, result in results.items()
        ),
        key=lambda c: c.weight,
        reverse=True,
    )

    total_inflation = sum(c.weight * c.result.total_inflation_percent for c in contributions)
    ratio = 1 + total_inflation / 100
    chronological_ratio = ratio if to_year >= from_year else (1 / ratio if ratio > 0 else 0.0)

    return ConsensusResult(
        start_amount=amount,
        from_year=from_year,
        to_year=to_year,
        end_amount=amount * ratio,
        total_inflation_percent=total_inflation,
        annual_average_percent=annualized_rate(chronological_ratio, abs(to_year - from_year)),
        contributions=contributions,
        skipped=skipped,
    )
