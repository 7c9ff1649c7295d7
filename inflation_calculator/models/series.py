"""Data models for inflation series."""

from dataclasses import dataclass, field


# year -> value; plain dicts so callers can build them from any source
AnnualSeries = dict[int, float]
AnnualRateSeries = dict[int, float]
NormalizedSeries = dict[int, float]


@dataclass(frozen=True)
class TimeSeriesObservation:
    """Single raw observation from a statistics provider.

    ``period`` is a year (``"2020"``) or a year with a sub-year suffix
    (``"2020-01"``, ``"2020M01"``, ``"2020-01-31"``). The first four
    characters are always the year.
    """

    period: str
    value: float

    @property
    def year(self) -> int:
        return int(self.period[:4])


@dataclass
class CurrencySeriesRecord:
    """Normalized inflation series for one currency, as served to pages.

    ``data`` is always ratio-based: the base (earliest) year is 1.0.
    """

    currency: str
    symbol: str
    name: str
    flag: str
    earliest: int
    latest: int
    last_updated: str
    source: str
    data: NormalizedSeries = field(default_factory=dict)

    def to_dict(self) -> dict:
        """Serialize to the stable on-disk JSON shape."""
        return {
            "currency": self.currency,
            "symbol": self.symbol,
            "name": self.name,
            "flag": self.flag,
            "earliest": self.earliest,
            "latest": self.latest,
            "lastUpdated": self.last_updated,
            "source": self.source,
            "data": {str(year): self.data[year] for year in sorted(self.data)},
        }

    @classmethod
    def from_dict(cls, payload: dict) -> "CurrencySeriesRecord":
        return cls(
            currency=payload["currency"],
            symbol=payload["symbol"],
            name=payload["name"],
            flag=payload["flag"],
            earliest=int(payload["earliest"]),
            latest=int(payload["latest"]),
            last_updated=payload["lastUpdated"],
            source=payload["source"],
            data={int(year): float(value) for year, value in payload["data"].items()},
        )


@dataclass
class HousingAffordabilityRecord:
    """Price-to-income figures for a single year."""

    year: int
    case_shiller_index: float
    median_income: float
    approximate_home_price: float
    price_to_income_ratio: float

    def to_dict(self) -> dict:
        return {
            "year": self.year,
            "caseShillerIndex": round(self.case_shiller_index, 2),
            "medianIncome": round(self.median_income),
            "approximateHomePrice": round(self.approximate_home_price),
            "priceToIncomeRatio": round(self.price_to_income_ratio, 2),
        }


@dataclass
class IngestionReport:
    """Outcome of a multi-source ingestion run."""

    succeeded: dict[str, CurrencySeriesRecord] = field(default_factory=dict)
    failed: dict[str, str] = field(default_factory=dict)
    warnings: dict[str, list[str]] = field(default_factory=dict)

    @property
    def ok(self) -> bool:
        """True when at least one source succeeded and none failed."""
        return bool(self.succeeded) and not self.failed
