"""Index normalization, projection and derived metrics."""

from inflation_calculator.indices.derived import ppp_adjust, ppp_convert, price_to_income_ratio
from inflation_calculator.indices.measures import (
    ConsensusResult,
    MeasureContribution,
    consensus_projection,
)
from inflation_calculator.indices.normalizer import (
    aggregate_annual,
    annual_rates,
    normalize,
    normalize_from_annual_rates,
)
from inflation_calculator.indices.projection import (
    ProjectionResult,
    annualized_rate,
    index_from_rate_table,
    project,
    project_with_rates,
)
from inflation_calculator.indices.validation import ValidationResult, validate_series

__all__ = [
    "ConsensusResult",
    "MeasureContribution",
    "ProjectionResult",
    "ValidationResult",
    "aggregate_annual",
    "annual_rates",
    "annualized_rate",
    "consensus_projection",
    "index_from_rate_table",
    "normalize",
    "normalize_from_annual_rates",
    "ppp_adjust",
    "ppp_convert",
    "price_to_income_ratio",
    "project",
    "project_with_rates",
    "validate_series",
]
