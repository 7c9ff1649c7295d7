"""Data models."""

from .series import (
    AnnualRateSeries,
    AnnualSeries,
    CurrencySeriesRecord,
    HousingAffordabilityRecord,
    IngestionReport,
    NormalizedSeries,
    TimeSeriesObservation,
)

__all__ = [
    "AnnualRateSeries",
    "AnnualSeries",
    "CurrencySeriesRecord",
    "HousingAffordabilityRecord",
    "IngestionReport",
    "NormalizedSeries",
    "TimeSeriesObservation",
]
