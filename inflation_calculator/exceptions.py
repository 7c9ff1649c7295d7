"""
Exceptions raised by ingestion and index calculations.

Everything derives from InflationDataError so batch runs can catch a
single base class per source and keep going.
"""


class InflationDataError(Exception):
    """Base exception for all inflation data errors."""

    pass


class DataSourceUnavailable(InflationDataError):
    """
    Raised when an external statistical API cannot provide data.

    Covers:
    - Network failures and timeouts
    - Non-2xx HTTP responses
    - Provider-level error payloads
    - Missing API credentials
    """

    def __init__(self, source: str, reason: str) -> None:
        self.source = source
        self.reason = reason
        super().__init__(f"{source} unavailable: {reason}")


class SeriesError(InflationDataError):
    """Base class for arithmetic failures on a time series."""

    pass


class EmptySeries(SeriesError):
    """Raised when a series has no usable values."""

    pass


class InvalidBaseYear(SeriesError):
    """Raised when the base year value is missing, zero or not finite."""

    def __init__(self, year: int | None, message: str | None = None) -> None:
        self.year = year
        super().__init__(message or f"Invalid base year {year}: value is missing, zero or not finite")


class YearOutOfRange(SeriesError):
    """Raised when a requested year is not covered by the series."""

    def __init__(self, year: int, earliest: int | None, latest: int | None) -> None:
        self.year = year
        self.earliest = earliest
        self.latest = latest
        super().__init__(f"Year {year} not covered by series ({earliest}-{latest})")


class MissingPPPFactor(SeriesError):
    """Raised when a PPP conversion factor is absent or zero."""

    def __init__(self, country: str | None = None, year: int | None = None) -> None:
        self.country = country
        self.year = year
        if country is None:
            message = "PPP factor is missing or zero"
        else:
            message = f"No PPP factor for {country} in {year}"
        super().__init__(message)


class IncompleteYearPair(SeriesError):
    """Raised when two series that must be paired share no years."""

    pass


class ValidationFailed(SeriesError):
    """Raised when a built series fails data-quality checks and must not be published."""

    def __init__(self, errors: list[str], score: float) -> None:
        self.errors = errors
        self.score = score
        detail = "; ".join(errors[:3]) or f"quality score {score:.0f} too low"
        super().__init__(f"Series failed validation: {detail}")
