"""Data-quality checks for annual series before they are published."""

from collections.abc import Mapping
from dataclasses import dataclass, field

import numpy as np
import pandas as pd


MIN_DATA_POINTS = 10
MAX_YEAR_OVER_YEAR_CHANGE = 50.0  # percent
MIN_YEAR_OVER_YEAR_CHANGE = -20.0
OUTLIER_Z_SCORE = 3.0
MIN_VALID_SCORE = 50.0


@dataclass
class ValidationResult:
    """Quality report for one series."""

    is_valid: bool
    errors: list[str] = field(default_factory=list)
    warnings: list[str] = field(default_factory=list)
    score: float = 0.0
    missing_years: list[int] = field(default_factory=list)
    gaps: list[tuple[int, int]] = field(default_factory=list)
    outliers: dict[int, str] = field(default_factory=dict)


def _find_gaps(years: list[int]) -> tuple[list[int], list[tuple[int, int]]]:
    present = set(years)
    missing = [year for year in range(years[0], years[-1] + 1) if year not in present]

    gaps: list[tuple[int, int]] = []
    for year in missing:
        if gaps and gaps[-1][1] == year - 1:
            gaps[-1] = (gaps[-1][0], year)
        else:
            gaps.append((year, year))
    return missing, gaps


def validate_series(series: Mapping[int, float | None]) -> ValidationResult:
    """
    Check a year -> value series for gaps, bad values and outliers.

    Errors (series is unusable): no data, non-finite or non-positive values.
    Warnings: short history, missing years, extreme year-over-year moves.
    """
    result = ValidationResult(is_valid=False)
    if not series:
        result.errors.append("No data points")
        return result

    values = pd.Series(
        {int(year): value for year, value in series.items()}, dtype="float64"
    ).sort_index()

    for year, value in values.items():
        if not np.isfinite(value):
            result.errors.append(f"Non-finite value for {year}")
        elif value <= 0:
            result.errors.append(f"Non-positive value for {year}: {value}")

    clean = values[np.isfinite(values) & (values > 0)]
    years = [int(year) for year in clean.index]

    if len(years) < MIN_DATA_POINTS:
        result.warnings.append(
            f"Insufficient data points: {len(years)} (minimum: {MIN_DATA_POINTS})"
        )

    if years:
        result.missing_years, result.gaps = _find_gaps(years)
        if result.missing_years:
            result.warnings.append(f"{len(result.missing_years)} missing years")

        changes = (clean.pct_change() * 100).dropna()
        for year, change in changes.items():
            if change > MAX_YEAR_OVER_YEAR_CHANGE:
                result.outliers[int(year)] = f"Extreme inflation: {change:.1f}%"
                result.warnings.append(f"Extreme inflation for {year}: {change:.1f}%")
            elif change < MIN_YEAR_OVER_YEAR_CHANGE:
                result.outliers[int(year)] = f"Extreme deflation: {change:.1f}%"
                result.warnings.append(f"Extreme deflation for {year}: {change:.1f}%")

        if len(changes) > 3:
            std = changes.std(ddof=0)
            if std > 0:
                z_scores = ((changes - changes.mean()) / std).abs()
                for year, z in z_scores[z_scores > OUTLIER_Z_SCORE].items():
                    result.outliers.setdefault(int(year), f"Statistical outlier (z-score: {z:.2f})")

        expected = years[-1] - years[0] + 1
        completeness = len(years) / expected
    else:
        completeness = 0.0

    score = 100.0
    score -= len(result.errors) * 20
    score -= len(result.warnings) * 5
    score -= (1 - completeness) * 30
    score -= len(result.outliers) * 2
    if len(years) >= 50:
        score += 5
    if len(years) >= 100:
        score += 5
    result.score = max(0.0, min(100.0, score))

    result.is_valid = not result.errors and result.score >= MIN_VALID_SCORE
    return result
