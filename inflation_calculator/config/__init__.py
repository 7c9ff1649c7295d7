"""Configuration."""

from .settings import (
    CASE_SHILLER_SERIES,
    CASE_SHILLER_START,
    CRYPTO_COINS,
    CURRENCIES,
    DATA_UPDATE_PAGES,
    HOUSING_BASE_MEDIAN_PRICE,
    HOUSING_BASE_YEAR,
    MEASURE_SOURCES,
    MEASURE_WEIGHTS,
    MEDIAN_INCOME_SERIES,
    MEDIAN_INCOME_START,
    PPP_COUNTRIES,
    PPP_INDICATOR,
    SOURCES,
    CurrencyInfo,
    Settings,
    SourceSpec,
)

__all__ = [
    "CASE_SHILLER_SERIES",
    "CASE_SHILLER_START",
    "CRYPTO_COINS",
    "CURRENCIES",
    "DATA_UPDATE_PAGES",
    "HOUSING_BASE_MEDIAN_PRICE",
    "HOUSING_BASE_YEAR",
    "MEASURE_SOURCES",
    "MEASURE_WEIGHTS",
    "MEDIAN_INCOME_SERIES",
    "MEDIAN_INCOME_START",
    "PPP_COUNTRIES",
    "PPP_INDICATOR",
    "SOURCES",
    "CurrencyInfo",
    "Settings",
    "SourceSpec",
]
