"""Fetch, normalize and publish inflation series."""

import logging
from datetime import datetime, timezone

from inflation_calculator.config import (
    CASE_SHILLER_SERIES,
    CASE_SHILLER_START,
    CRYPTO_COINS,
    CURRENCIES,
    DATA_UPDATE_PAGES,
    HOUSING_BASE_MEDIAN_PRICE,
    HOUSING_BASE_YEAR,
    MEDIAN_INCOME_SERIES,
    MEDIAN_INCOME_START,
    PPP_COUNTRIES,
    PPP_INDICATOR,
    SOURCES,
    Settings,
    SourceSpec,
)
from inflation_calculator.data.base import BaseFetcher
from inflation_calculator.data.bls_fetcher import BlsFetcher
from inflation_calculator.data.cache import DataCache
from inflation_calculator.data.coingecko_fetcher import CoinGeckoFetcher
from inflation_calculator.data.dst_fetcher import DstFetcher
from inflation_calculator.data.fred_fetcher import FredFetcher
from inflation_calculator.data.gus_fetcher import GusFetcher
from inflation_calculator.data.indexnow import IndexNowNotifier
from inflation_calculator.data.ons_fetcher import OnsFetcher
from inflation_calculator.data.scb_fetcher import ScbFetcher
from inflation_calculator.data.store import JsonFileStore
from inflation_calculator.data.worldbank_fetcher import WorldBankFetcher
from inflation_calculator.exceptions import InflationDataError, ValidationFailed
from inflation_calculator.indices import (
    aggregate_annual,
    annual_rates,
    normalize,
    normalize_from_annual_rates,
    price_to_income_ratio,
    validate_series,
)
from inflation_calculator.models import (
    CurrencySeriesRecord,
    HousingAffordabilityRecord,
    IngestionReport,
    NormalizedSeries,
    TimeSeriesObservation,
)


logger = logging.getLogger(__name__)


FETCHER_CLASSES: dict[str, type[BaseFetcher]] = {
    "fred": FredFetcher,
    "bls": BlsFetcher,
    "ons": OnsFetcher,
    "scb": ScbFetcher,
    "dst": DstFetcher,
    "gus": GusFetcher,
}


def _utc_now() -> datetime:
    return datetime.now(timezone.utc)


def build_currency_record(
    spec: SourceSpec,
    observations: list[TimeSeriesObservation],
    now: datetime | None = None,
) -> CurrencySeriesRecord:
    """
    Turn raw observations into a publishable record.

    Index sources are averaged per year and normalized to their earliest
    year. Rate sources are averaged per year, compounded into a cumulative
    index, then normalized the same way.
    """
    if spec.kind == "rate":
        cumulative = normalize_from_annual_rates(annual_rates(observations))
        data = normalize(cumulative)
    elif spec.kind == "index":
        data = normalize(aggregate_annual(observations))
    else:
        raise ValueError(f"Unknown series kind: {spec.kind}")

    info = CURRENCIES[spec.currency]
    years = sorted(data)
    return CurrencySeriesRecord(
        currency=spec.currency,
        symbol=info.symbol,
        name=info.name,
        flag=info.flag,
        earliest=years[0],
        latest=years[-1],
        last_updated=(now or _utc_now()).isoformat(),
        source=spec.source,
        data=data,
    )


class IngestionRunner:
    """Runs currency sources one after another, isolating failures per source."""

    def __init__(
        self,
        settings: Settings | None = None,
        store: JsonFileStore | None = None,
        cache: DataCache | None = None,
        notifier: IndexNowNotifier | None = None,
        fetchers: dict[str, BaseFetcher] | None = None,
    ) -> None:
        self.settings = settings or Settings()
        self.store = store or JsonFileStore(self.settings.output_dir)
        self.cache = cache
        self.notifier = notifier
        self._fetchers: dict[str, BaseFetcher] = dict(fetchers or {})
        self._owned: list[BaseFetcher] = []

    def close(self) -> None:
        for fetcher in self._owned:
            fetcher.close()
        self._owned.clear()

    def __enter__(self) -> "IngestionRunner":
        return self

    def __exit__(self, *args) -> None:
        self.close()

    def fetcher(self, provider: str) -> BaseFetcher:
        """Get (creating on first use) the fetcher for a provider."""
        if provider not in self._fetchers:
            if provider not in FETCHER_CLASSES:
                raise ValueError(f"Unknown provider: {provider}")
            fetcher = FETCHER_CLASSES[provider](self.settings)
            self._fetchers[provider] = fetcher
            self._owned.append(fetcher)
        return self._fetchers[provider]

    def fetch_observations(self, spec: SourceSpec) -> list[TimeSeriesObservation]:
        return self.fetcher(spec.provider).fetch_observations(spec.series_id)

    def ingest(self, key: str) -> tuple[CurrencySeriesRecord, list[str]]:
        """
        Fetch, build, validate and write one source.

        Nothing is written unless the record is complete and valid.

        Returns:
            The written record and any validation warnings
        """
        if key not in SOURCES:
            raise ValueError(f"Unknown source: {key}")
        spec = SOURCES[key]

        logger.info(f"Ingesting {key} ({spec.currency}) from {spec.source}...")
        observations = self.fetch_observations(spec)
        record = build_currency_record(spec, observations)

        validation = validate_series(record.data)
        if not validation.is_valid:
            raise ValidationFailed(validation.errors, validation.score)
        for warning in validation.warnings:
            logger.warning(f"  {key}: {warning}")

        path = self.store.write_record(spec.output_file, record)
        if self.cache is not None:
            self.cache.store_record(key, record)

        logger.info(
            f"  Wrote {path.name}: {len(record.data)} years "
            f"({record.earliest}-{record.latest})"
        )
        return record, validation.warnings

    def run(self, keys: list[str] | None = None) -> IngestionReport:
        """
        Ingest several sources; a failing source never aborts the others.

        Returns:
            Report of succeeded and failed sources
        """
        report = IngestionReport()

        for key in list(SOURCES) if keys is None else keys:
            try:
                record, warnings = self.ingest(key)
            except InflationDataError as e:
                logger.error(f"Error ingesting {key}: {e}")
                report.failed[key] = str(e)
                continue

            report.succeeded[key] = record
            if warnings:
                report.warnings[key] = warnings

        if report.failed:
            logger.warning(f"Failed to ingest {len(report.failed)} sources: {list(report.failed)}")

        if self.notifier is not None and report.succeeded:
            self.notifier.submit(DATA_UPDATE_PAGES)

        return report


def load_measure_series(store: JsonFileStore, currency: str) -> dict[str, NormalizedSeries]:
    """
    Stored series for every price measure of a currency, ready for consensus_projection().

    When several sources track the same measure the first one in SOURCES wins.
    """
    measures: dict[str, NormalizedSeries] = {}
    for spec in SOURCES.values():
        if spec.currency != currency or spec.measure in measures:
            continue
        record = store.read_record(spec.output_file)
        if record is not None:
            measures[spec.measure] = record.data
    return measures


def run_housing_job(
    fred: FredFetcher, store: JsonFileStore, now: datetime | None = None
) -> list[HousingAffordabilityRecord]:
    """Case-Shiller vs median household income, written to housing-affordability.json."""
    home_prices = aggregate_annual(
        fred.fetch_observations(CASE_SHILLER_SERIES, CASE_SHILLER_START)
    )
    income = aggregate_annual(
        fred.fetch_observations(MEDIAN_INCOME_SERIES, MEDIAN_INCOME_START)
    )

    records = price_to_income_ratio(
        home_prices, income, HOUSING_BASE_YEAR, HOUSING_BASE_MEDIAN_PRICE
    )
    store.write_json(
        "housing-affordability.json",
        {
            "lastUpdated": (now or _utc_now()).isoformat(),
            "source": f"FRED ({CASE_SHILLER_SERIES}, {MEDIAN_INCOME_SERIES})",
            "baseYear": HOUSING_BASE_YEAR,
            "baseYearMedianHomePrice": HOUSING_BASE_MEDIAN_PRICE,
            "yearRange": f"{records[0].year}-{records[-1].year}",
            "data": [record.to_dict() for record in records],
        },
    )
    logger.info(f"Wrote housing-affordability.json: {len(records)} years")
    return records


def run_ppp_job(
    worldbank: WorldBankFetcher,
    store: JsonFileStore,
    countries: list[str] | None = None,
    start_year: int = 1990,
    end_year: int | None = None,
    now: datetime | None = None,
) -> dict[str, dict[int, float]]:
    """World Bank PPP factors, written to ppp-factors.json."""
    now = now or _utc_now()
    factors = worldbank.fetch_ppp_factors(
        countries or PPP_COUNTRIES, start_year, end_year or now.year
    )
    store.write_json(
        "ppp-factors.json",
        {
            "lastUpdated": now.isoformat(),
            "source": "World Bank",
            "indicator": PPP_INDICATOR,
            "data": {
                country: {str(year): values[year] for year in sorted(values)}
                for country, values in sorted(factors.items())
            },
        },
    )
    logger.info(f"Wrote ppp-factors.json: {len(factors)} countries")
    return factors


def run_crypto_job(
    coingecko: CoinGeckoFetcher,
    store: JsonFileStore,
    coins: dict[str, str] | None = None,
    now: datetime | None = None,
) -> dict[str, str]:
    """
    Monthly crypto prices, one {coin}-prices.json per coin.

    Returns:
        Coin id -> error message for coins that failed
    """
    errors = {}
    for coin_id, title in (coins or CRYPTO_COINS).items():
        try:
            prices = coingecko.fetch_monthly_prices(coin_id)
        except InflationDataError as e:
            logger.error(f"Error fetching {coin_id}: {e}")
            errors[coin_id] = str(e)
            continue

        store.write_json(
            f"{coin_id}-prices.json",
            {
                "metadata": {
                    "title": f"{title} Prices (USD)",
                    "source": "CoinGecko API",
                    "units": f"U.S. Dollars per {title}",
                    "frequency": "Monthly",
                    "last_updated": (now or _utc_now()).isoformat(),
                },
                "data": [{"date": p.period, "value": p.value} for p in prices],
            },
        )
        logger.info(f"Wrote {coin_id}-prices.json: {len(prices)} months")
    return errors


def main() -> None:
    """CLI entry point for fetching data."""
    import argparse
    import sys
    from pathlib import Path

    parser = argparse.ArgumentParser(description="Fetch and normalize inflation data")
    parser.add_argument(
        "--source",
        action="append",
        choices=sorted(SOURCES),
        help="Ingest this source only (repeatable; default: all)",
    )
    parser.add_argument("--housing", action="store_true", help="Build housing affordability data")
    parser.add_argument("--ppp", action="store_true", help="Fetch World Bank PPP factors")
    parser.add_argument("--crypto", action="store_true", help="Fetch crypto price history")
    parser.add_argument("--db", action="store_true", help="Also upsert records into SQLite")
    parser.add_argument("--notify", action="store_true", help="Ping IndexNow after updates")
    parser.add_argument("--status", action="store_true", help="Show stored data and exit")
    parser.add_argument("--output-dir", type=Path, help="Directory for JSON output")
    parser.add_argument("--verbose", action="store_true", help="Debug logging")
    args = parser.parse_args()

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s - %(levelname)s - %(message)s",
    )

    settings = Settings(output_dir=args.output_dir) if args.output_dir else Settings()
    store = JsonFileStore(settings.output_dir)

    if args.status:
        print("\nStored series:")
        print("-" * 70)
        for filename, info in store.list_records().items():
            print(
                f"{filename:28} | {info['years']:4} yrs | "
                f"{info['earliest']}-{info['latest']} | {info['source']}"
            )
        if args.db:
            print("\nDatabase rows:")
            print("-" * 70)
            for key, info in DataCache(settings.db_path).get_cache_status().items():
                print(f"{key:12} | {info['currency']} | stored {info['stored_at']}")
        return

    extras_only = (args.housing or args.ppp or args.crypto) and not args.source
    keys = [] if extras_only else (args.source or list(SOURCES))

    cache = DataCache(settings.db_path) if args.db else None
    notifier = IndexNowNotifier(settings) if args.notify else None
    failures = 0
    attempted = 0

    try:
        with IngestionRunner(settings, store, cache, notifier) as runner:
            if keys:
                report = runner.run(keys)
                attempted += len(keys)
                failures += len(report.failed)

                print("\nDone. Ingestion summary:")
                for key, record in report.succeeded.items():
                    print(f"  {key}: {len(record.data)} years, {record.earliest}-{record.latest}")
                for key, error in report.failed.items():
                    print(f"  {key}: FAILED - {error}")

            if args.housing:
                attempted += 1
                try:
                    with FredFetcher(settings) as fred:
                        records = run_housing_job(fred, store)
                    print(f"  housing: {len(records)} years")
                except InflationDataError as e:
                    failures += 1
                    print(f"  housing: FAILED - {e}")

            if args.ppp:
                attempted += 1
                try:
                    with WorldBankFetcher(settings) as worldbank:
                        factors = run_ppp_job(worldbank, store)
                    print(f"  ppp: {len(factors)} countries")
                except InflationDataError as e:
                    failures += 1
                    print(f"  ppp: FAILED - {e}")

            if args.crypto:
                attempted += len(CRYPTO_COINS)
                with CoinGeckoFetcher(settings) as coingecko:
                    errors = run_crypto_job(coingecko, store)
                failures += len(errors)
                for coin_id, error in errors.items():
                    print(f"  {coin_id}: FAILED - {error}")
    finally:
        if notifier is not None:
            notifier.close()

    if attempted and failures == attempted:
        sys.exit(1)


if __name__ == "__main__":
    main()
