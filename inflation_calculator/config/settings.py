"""Configuration settings for inflation data ingestion."""

from dataclasses import dataclass, field
from pathlib import Path
import os

from dotenv import load_dotenv


load_dotenv()


@dataclass(frozen=True)
class CurrencyInfo:
    """Display metadata for a currency."""

    symbol: str
    name: str
    flag: str


@dataclass(frozen=True)
class SourceSpec:
    """Where a currency's inflation series comes from."""

    key: str
    currency: str
    provider: str  # fred, bls, ons, scb, dst, gus
    series_id: str
    kind: str  # "index" (price levels) or "rate" (annual % change)
    output_file: str
    source: str  # attribution shown on the site
    measure: str = "cpi"  # which price measure the series tracks


CURRENCIES: dict[str, CurrencyInfo] = {
    "USD": CurrencyInfo("$", "US Dollar", "🇺🇸"),
    "GBP": CurrencyInfo("£", "British Pound", "🇬🇧"),
    "EUR": CurrencyInfo("€", "Euro", "🇪🇺"),
    "CAD": CurrencyInfo("CA$", "Canadian Dollar", "🇨🇦"),
    "AUD": CurrencyInfo("AU$", "Australian Dollar", "🇦🇺"),
    "CHF": CurrencyInfo("Fr", "Swiss Franc", "🇨🇭"),
    "JPY": CurrencyInfo("¥", "Japanese Yen", "🇯🇵"),
    "NZD": CurrencyInfo("NZ$", "New Zealand Dollar", "🇳🇿"),
    "SEK": CurrencyInfo("kr", "Swedish Krona", "🇸🇪"),
    "DKK": CurrencyInfo("kr", "Danish Krone", "🇩🇰"),
    "PLN": CurrencyInfo("zł", "Polish Zloty", "🇵🇱"),
}


def _fred_rate_source(key: str, currency: str, country: str, output_file: str) -> SourceSpec:
    series_id = f"FPCPITOTLZG{country}"
    return SourceSpec(
        key=key,
        currency=currency,
        provider="fred",
        series_id=series_id,
        kind="rate",
        output_file=output_file,
        source=f"FRED ({series_id})",
    )


# Primary sources - national statistics agencies publishing index levels
SOURCES: dict[str, SourceSpec] = {
    "usd": SourceSpec(
        "usd", "USD", "bls", "CUUR0000SA0", "index", "usd-inflation.json",
        "US Bureau of Labor Statistics",
    ),
    "gbp": SourceSpec(
        "gbp", "GBP", "ons", "CHAW", "index", "gbp-inflation.json",
        "UK Office for National Statistics", "rpi",
    ),
    "sek": SourceSpec(
        "sek", "SEK", "scb", "000004VU", "index", "sek-inflation.json",
        "Statistics Sweden (SCB)",
    ),
    "dkk": SourceSpec(
        "dkk", "DKK", "dst", "PRIS111", "index", "dkk-inflation.json",
        "Statistics Denmark (DST)",
    ),
    "pln": SourceSpec(
        "pln", "PLN", "gus", "1738", "index", "pln-inflation.json",
        "Statistics Poland (GUS)",
    ),
    # World Bank annual CPI inflation rates, mirrored on FRED
    "sek-fred": _fred_rate_source("sek-fred", "SEK", "SWE", "sek-inflation-fred.json"),
    "dkk-fred": _fred_rate_source("dkk-fred", "DKK", "DNK", "dkk-inflation-fred.json"),
    "pln-fred": _fred_rate_source("pln-fred", "PLN", "POL", "pln-inflation-fred.json"),
    "eur": _fred_rate_source("eur", "EUR", "EMU", "eur-inflation.json"),
    "cad": _fred_rate_source("cad", "CAD", "CAN", "cad-inflation.json"),
    "aud": _fred_rate_source("aud", "AUD", "AUS", "aud-inflation.json"),
    "chf": _fred_rate_source("chf", "CHF", "CHE", "chf-inflation.json"),
    "jpy": _fred_rate_source("jpy", "JPY", "JPN", "jpy-inflation.json"),
    "nzd": _fred_rate_source("nzd", "NZD", "NZL", "nzd-inflation.json"),
}


def _measure_source(
    currency: str, measure: str, provider: str, series_id: str, source: str
) -> SourceSpec:
    key = f"{currency.lower()}-{measure.replace('_', '-')}"
    return SourceSpec(
        key=key,
        currency=currency,
        provider=provider,
        series_id=series_id,
        kind="index",
        output_file=f"{key}-inflation.json",
        source=source,
        measure=measure,
    )


# Alternative price measures, ingested alongside the headline series
MEASURE_SOURCES: list[SourceSpec] = [
    _measure_source("USD", "core_cpi", "fred", "CPILFESL", "FRED (CPILFESL)"),
    _measure_source("USD", "chained_cpi", "fred", "SUUR0000SA0", "FRED (SUUR0000SA0)"),
    _measure_source("USD", "pce", "fred", "PCEPI", "FRED (PCEPI)"),
    _measure_source("USD", "core_pce", "fred", "PCEPILFE", "FRED (PCEPILFE)"),
    _measure_source("USD", "ppi", "fred", "PPIACO", "FRED (PPIACO)"),
    _measure_source("USD", "gdp_deflator", "fred", "GDPDEF", "FRED (GDPDEF)"),
    _measure_source("GBP", "cpi", "ons", "D7BT", "UK Office for National Statistics (D7BT)"),
    _measure_source("GBP", "core_cpi", "ons", "DKC7", "UK Office for National Statistics (DKC7)"),
    _measure_source("GBP", "cpih", "ons", "L55O", "UK Office for National Statistics (L55O)"),
]
SOURCES.update({spec.key: spec for spec in MEASURE_SOURCES})

# Consensus weights per measure; renormalized over the measures available
MEASURE_WEIGHTS: dict[str, dict[str, float]] = {
    "USD": {
        "cpi": 0.25,
        "core_cpi": 0.2,
        "chained_cpi": 0.15,
        "pce": 0.15,
        "core_pce": 0.1,
        "ppi": 0.1,
        "gdp_deflator": 0.05,
    },
    "GBP": {
        "cpi": 0.3,
        "core_cpi": 0.25,
        "cpih": 0.2,
        "rpi": 0.1,
        "ppi_output": 0.1,
        "gdp_deflator": 0.05,
    },
}

# Housing affordability inputs (FRED)
CASE_SHILLER_SERIES = "CSUSHPISA"
CASE_SHILLER_START = "1987-01-01"
MEDIAN_INCOME_SERIES = "MEHOINUSA672N"
MEDIAN_INCOME_START = "1984-01-01"
HOUSING_BASE_YEAR = 2000
HOUSING_BASE_MEDIAN_PRICE = 165_000.0

# World Bank PPP conversion factor, GDP (LCU per international $)
PPP_INDICATOR = "PA.NUS.PPP"
PPP_COUNTRIES: list[str] = [
    "USA", "GBR", "EMU", "CAN", "AUS", "CHE", "JPN", "NZL", "SWE", "DNK", "POL",
]

CRYPTO_COINS: dict[str, str] = {
    "bitcoin": "Bitcoin",
    "ethereum": "Ethereum",
}

# Pages that render currency data, pinged after an update
DATA_UPDATE_PAGES: list[str] = ["/", "/charts"]


@dataclass
class Settings:
    """Application settings."""

    fred_api_key: str = field(default_factory=lambda: os.getenv("FRED_API_KEY", ""))
    bls_api_key: str = field(default_factory=lambda: os.getenv("BLS_API_KEY", ""))
    indexnow_key: str = field(default_factory=lambda: os.getenv("INDEXNOW_KEY", ""))
    site_url: str = field(
        default_factory=lambda: os.getenv(
            "SITE_URL", "https://globalinflationcalculator.com"
        )
    )
    output_dir: Path = field(
        default_factory=lambda: Path(
            os.getenv(
                "INFLATION_DATA_DIR",
                str(Path(__file__).parent.parent.parent / "public" / "data"),
            )
        )
    )
    request_timeout: float = 30.0
    db_path: Path = field(init=False)

    def __post_init__(self) -> None:
        self.output_dir = Path(self.output_dir)
        self.db_path = self.output_dir / "inflation_data.db"

    def has_fred(self) -> bool:
        """Check if a FRED API key is configured."""
        return bool(self.fred_api_key)

    def has_bls(self) -> bool:
        """Check if a BLS registration key is configured."""
        return bool(self.bls_api_key)

    def has_indexnow(self) -> bool:
        """Check if IndexNow submissions are configured."""
        return bool(self.indexnow_key)
