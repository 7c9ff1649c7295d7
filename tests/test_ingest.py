"""Tests for record building, batch ingestion and the auxiliary jobs."""

import json
from datetime import datetime, timezone

import pytest

from inflation_calculator.config import DATA_UPDATE_PAGES, SOURCES
from inflation_calculator.data import DataCache, JsonFileStore
from inflation_calculator.data.fred_fetcher import FredFetcher
from inflation_calculator.data.ingest import (
    IngestionRunner,
    build_currency_record,
    load_measure_series,
    run_crypto_job,
    run_housing_job,
    run_ppp_job,
)
from inflation_calculator.exceptions import DataSourceUnavailable
from inflation_calculator.models import TimeSeriesObservation


NOW = datetime(2024, 5, 1, tzinfo=timezone.utc)


def _monthly(values_by_year: dict[int, list[float]]) -> list[TimeSeriesObservation]:
    return [
        TimeSeriesObservation(period=f"{year}-{month:02d}", value=value)
        for year, values in values_by_year.items()
        for month, value in enumerate(values, start=1)
    ]


class FakeFetcher:
    """Returns canned observations per series id, or raises for listed ids."""

    def __init__(self, observations=None, failing=()):
        self.observations = observations or {}
        self.failing = set(failing)
        self.calls = []

    def fetch_observations(self, series_id, *args):
        self.calls.append((series_id, *args))
        if series_id in self.failing:
            raise DataSourceUnavailable("fake", f"{series_id} is down")
        return self.observations[series_id]

    def close(self):
        pass


class FakeNotifier:
    def __init__(self):
        self.submitted = []

    def submit(self, paths):
        self.submitted.append(list(paths))
        return True


USD_OBSERVATIONS = _monthly({2000: [170.0, 174.4], 2001: [177.1], 2002: [179.9]})


def test_build_record_from_index_levels():
    record = build_currency_record(SOURCES["usd"], USD_OBSERVATIONS, now=NOW)

    assert record.currency == "USD"
    assert record.symbol == "$"
    assert record.source == "US Bureau of Labor Statistics"
    assert record.last_updated == "2024-05-01T00:00:00+00:00"
    assert (record.earliest, record.latest) == (2000, 2002)
    assert record.data == {2000: 1.0, 2001: 1.03, 2002: 1.04}


def test_build_record_from_annual_rates():
    observations = [
        TimeSeriesObservation("2020-01-01", 1.0),
        TimeSeriesObservation("2021-01-01", 5.0),
        TimeSeriesObservation("2022-01-01", 8.0),
    ]

    record = build_currency_record(SOURCES["eur"], observations, now=NOW)

    assert record.currency == "EUR"
    assert record.data == {2020: 1.0, 2021: 1.05, 2022: 1.13}


def test_runner_isolates_failing_sources(settings):
    store = JsonFileStore(settings.output_dir)
    notifier = FakeNotifier()
    fetchers = {
        "bls": FakeFetcher({"CUUR0000SA0": USD_OBSERVATIONS}),
        "ons": FakeFetcher(failing={"CHAW"}),
    }

    runner = IngestionRunner(settings, store, notifier=notifier, fetchers=fetchers)
    report = runner.run(["usd", "gbp"])

    assert list(report.succeeded) == ["usd"]
    assert "CHAW is down" in report.failed["gbp"]
    assert not report.ok
    assert store.read_record("usd-inflation.json") == report.succeeded["usd"]
    assert not store.path_for("gbp-inflation.json").exists()
    assert notifier.submitted == [DATA_UPDATE_PAGES]


def test_failed_source_keeps_previous_file(settings):
    store = JsonFileStore(settings.output_dir)
    store.write_json("gbp-inflation.json", {"previous": True})
    fetchers = {"ons": FakeFetcher(failing={"CHAW"})}

    report = IngestionRunner(settings, store, fetchers=fetchers).run(["gbp"])

    assert list(report.failed) == ["gbp"]
    assert store.read_json("gbp-inflation.json") == {"previous": True}


def test_invalid_series_is_not_published(settings):
    store = JsonFileStore(settings.output_dir)
    notifier = FakeNotifier()
    fetchers = {"bls": FakeFetcher({"CUUR0000SA0": _monthly({2000: [100.0], 2001: [-5.0]})})}

    report = IngestionRunner(settings, store, notifier=notifier, fetchers=fetchers).run(["usd"])

    assert "failed validation" in report.failed["usd"]
    assert not store.path_for("usd-inflation.json").exists()
    assert notifier.submitted == []


def test_empty_source_is_reported(settings):
    store = JsonFileStore(settings.output_dir)
    fetchers = {"gus": FakeFetcher({"1738": []})}

    report = IngestionRunner(settings, store, fetchers=fetchers).run(["pln"])

    assert "empty" in report.failed["pln"]


def test_runner_writes_cache(settings, tmp_path):
    store = JsonFileStore(settings.output_dir)
    cache = DataCache(tmp_path / "records.db")
    fetchers = {"bls": FakeFetcher({"CUUR0000SA0": USD_OBSERVATIONS})}

    report = IngestionRunner(settings, store, cache=cache, fetchers=fetchers).run(["usd"])

    assert report.ok
    assert cache.get_record("usd") == report.succeeded["usd"]


def test_runner_rejects_unknown_source(settings):
    runner = IngestionRunner(settings, JsonFileStore(settings.output_dir), fetchers={})

    with pytest.raises(ValueError):
        runner.run(["xyz"])


def test_housing_job(settings):
    store = JsonFileStore(settings.output_dir)
    fred = FakeFetcher(
        {
            "CSUSHPISA": _monthly({1999: [95.0], 2000: [100.0, 100.0], 2001: [110.0]}),
            "MEHOINUSA672N": [
                TimeSeriesObservation("2000-01-01", 50_000.0),
                TimeSeriesObservation("2001-01-01", 55_000.0),
                TimeSeriesObservation("2002-01-01", 60_000.0),
            ],
        }
    )

    records = run_housing_job(fred, store, now=NOW)

    assert [r.year for r in records] == [2000, 2001]
    payload = store.read_json("housing-affordability.json")
    assert payload["yearRange"] == "2000-2001"
    assert payload["data"][1] == {
        "year": 2001,
        "caseShillerIndex": 110.0,
        "medianIncome": 55000,
        "approximateHomePrice": 181500,
        "priceToIncomeRatio": 3.3,
    }
    assert ("CSUSHPISA", "1987-01-01") in fred.calls


def test_ppp_job(settings):
    class FakeWorldBank:
        def fetch_ppp_factors(self, countries, start_year, end_year):
            self.args = (countries, start_year, end_year)
            return {"USA": {2020: 1.0, 2019: 1.0}, "SWE": {2020: 8.6}}

    store = JsonFileStore(settings.output_dir)
    worldbank = FakeWorldBank()

    run_ppp_job(worldbank, store, countries=["USA", "SWE"], now=NOW)

    assert worldbank.args == (["USA", "SWE"], 1990, 2024)
    payload = store.read_json("ppp-factors.json")
    assert payload["indicator"] == "PA.NUS.PPP"
    assert payload["data"] == {"SWE": {"2020": 8.6}, "USA": {"2019": 1.0, "2020": 1.0}}


def test_crypto_job_continues_past_failures(settings):
    class FakeCoinGecko:
        def fetch_monthly_prices(self, coin_id):
            if coin_id == "ethereum":
                raise DataSourceUnavailable("CoinGecko", "HTTP 429")
            return [TimeSeriesObservation("2024-01-01", 42000.5)]

    store = JsonFileStore(settings.output_dir)

    errors = run_crypto_job(FakeCoinGecko(), store, now=NOW)

    assert list(errors) == ["ethereum"]
    payload = store.read_json("bitcoin-prices.json")
    assert payload["data"] == [{"date": "2024-01-01", "value": 42000.5}]
    assert payload["metadata"]["title"] == "Bitcoin Prices (USD)"
    assert not store.path_for("ethereum-prices.json").exists()


def test_malformed_payload_fails_only_its_source(settings, make_client):
    store = JsonFileStore(settings.output_dir)
    fred = FredFetcher(
        settings, client=make_client(json_body={"observations": [{"date": "2020-01-01"}]})
    )
    fetchers = {"fred": fred, "bls": FakeFetcher({"CUUR0000SA0": USD_OBSERVATIONS})}

    report = IngestionRunner(settings, store, fetchers=fetchers).run(["eur", "usd"])

    assert "unexpected payload" in report.failed["eur"]
    assert list(report.succeeded) == ["usd"]
    assert store.path_for("usd-inflation.json").exists()
    assert not store.path_for("eur-inflation.json").exists()


def test_run_with_no_keys_does_nothing(settings):
    store = JsonFileStore(settings.output_dir)
    notifier = FakeNotifier()
    bls = FakeFetcher({"CUUR0000SA0": USD_OBSERVATIONS})

    report = IngestionRunner(settings, store, notifier=notifier, fetchers={"bls": bls}).run([])

    assert report.succeeded == {}
    assert report.failed == {}
    assert bls.calls == []
    assert notifier.submitted == []


def test_load_measure_series(settings):
    store = JsonFileStore(settings.output_dir)
    fetchers = {
        "bls": FakeFetcher({"CUUR0000SA0": USD_OBSERVATIONS}),
        "fred": FakeFetcher({"PCEPI": _monthly({2000: [80.0], 2001: [82.4], 2002: [84.0]})}),
        "scb": FakeFetcher({"000004VU": _monthly({2000: [260.0], 2001: [267.0], 2002: [272.0]})}),
    }
    IngestionRunner(settings, store, fetchers=fetchers).run(["usd", "usd-pce", "sek"])

    measures = load_measure_series(store, "USD")

    assert sorted(measures) == ["cpi", "pce"]
    assert measures["cpi"] == {2000: 1.0, 2001: 1.03, 2002: 1.04}
    assert measures["pce"] == {2000: 1.0, 2001: 1.03, 2002: 1.05}


def test_measure_keys():
    assert SOURCES["usd"].measure == "cpi"
    assert SOURCES["gbp"].measure == "rpi"
    assert SOURCES["usd-core-cpi"].measure == "core_cpi"
    assert SOURCES["usd-core-cpi"].output_file == "usd-core-cpi-inflation.json"
