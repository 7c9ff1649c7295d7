"""Parsing and error-mapping tests for the statistics API fetchers."""

import json

import httpx
import pytest

from inflation_calculator.data import (
    BlsFetcher,
    CoinGeckoFetcher,
    DstFetcher,
    FredFetcher,
    GusFetcher,
    OnsFetcher,
    ScbFetcher,
    WorldBankFetcher,
)
from inflation_calculator.exceptions import DataSourceUnavailable


# FRED


def test_fred_drops_placeholder_values(settings, make_client):
    requests = []

    def handler(request: httpx.Request) -> httpx.Response:
        requests.append(request)
        return httpx.Response(
            200,
            json={
                "observations": [
                    {"date": "2021-01-01", "value": "2.1"},
                    {"date": "2020-01-01", "value": "1.2"},
                    {"date": "2022-01-01", "value": "."},
                ]
            },
        )

    fetcher = FredFetcher(settings, client=make_client(handler))
    observations = fetcher.fetch_observations("FPCPITOTLZGSWE", observation_start="1960-01-01")

    assert [(o.period, o.value) for o in observations] == [
        ("2020-01-01", 1.2),
        ("2021-01-01", 2.1),
    ]
    params = requests[0].url.params
    assert params["series_id"] == "FPCPITOTLZGSWE"
    assert params["api_key"] == "test-fred-key"
    assert params["observation_start"] == "1960-01-01"


def test_fred_requires_api_key(settings, make_client):
    def handler(request: httpx.Request) -> httpx.Response:
        raise AssertionError("no request should be sent without a key")

    settings.fred_api_key = ""
    fetcher = FredFetcher(settings, client=make_client(handler))

    with pytest.raises(DataSourceUnavailable, match="FRED_API_KEY"):
        fetcher.fetch_observations("CSUSHPISA")


def test_fred_http_error(settings, make_client):
    fetcher = FredFetcher(settings, client=make_client(json_body={}, status_code=500))

    with pytest.raises(DataSourceUnavailable) as exc:
        fetcher.fetch_observations("CSUSHPISA")

    assert exc.value.source == "FRED"
    assert "500" in exc.value.reason


def test_fred_error_payload(settings, make_client):
    body = {"error_code": 400, "error_message": "Bad Request. The series does not exist."}
    fetcher = FredFetcher(settings, client=make_client(json_body=body))

    with pytest.raises(DataSourceUnavailable, match="does not exist"):
        fetcher.fetch_observations("NOPE")


def test_fred_network_error(settings, make_client):
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectTimeout("timed out", request=request)

    fetcher = FredFetcher(settings, client=make_client(handler))

    with pytest.raises(DataSourceUnavailable):
        fetcher.fetch_observations("CSUSHPISA")


def test_fetcher_does_not_close_injected_client(settings, make_client):
    client = make_client(json_body={"observations": []})

    with FredFetcher(settings, client=client) as fetcher:
        assert fetcher.fetch_observations("CSUSHPISA") == []

    assert not client.is_closed


# BLS


def _bls_payload(rows):
    return {
        "status": "REQUEST_SUCCEEDED",
        "message": [],
        "Results": {"series": [{"seriesID": "CUUR0000SA0", "data": rows}]},
    }


def test_bls_skips_annual_average_period(settings, make_client):
    bodies = []

    def handler(request: httpx.Request) -> httpx.Response:
        bodies.append(json.loads(request.content))
        return httpx.Response(
            200,
            json=_bls_payload(
                [
                    {"year": "2020", "period": "M13", "value": "258.811"},
                    {"year": "2020", "period": "M02", "value": "258.678"},
                    {"year": "2020", "period": "M01", "value": "257.971"},
                    {"year": "2020", "period": "M03", "value": "-"},
                ]
            ),
        )

    fetcher = BlsFetcher(settings, client=make_client(handler))
    observations = fetcher.fetch_observations("CUUR0000SA0", start_year=2020, end_year=2020)

    assert [(o.period, o.value) for o in observations] == [
        ("2020-01", 257.971),
        ("2020-02", 258.678),
    ]
    assert "registrationkey" not in bodies[0]
    assert bodies[0]["seriesid"] == ["CUUR0000SA0"]


def test_bls_splits_long_ranges(settings, make_client):
    bodies = []

    def handler(request: httpx.Request) -> httpx.Response:
        body = json.loads(request.content)
        bodies.append(body)
        return httpx.Response(
            200,
            json=_bls_payload(
                [{"year": body["startyear"], "period": "M01", "value": "100.0"}]
            ),
        )

    fetcher = BlsFetcher(settings, client=make_client(handler))
    observations = fetcher.fetch_observations("CUUR0000SA0", start_year=2000, end_year=2025)

    assert [(b["startyear"], b["endyear"]) for b in bodies] == [
        ("2000", "2009"),
        ("2010", "2019"),
        ("2020", "2025"),
    ]
    assert [o.period for o in observations] == ["2000-01", "2010-01", "2020-01"]


def test_bls_sends_registration_key_when_configured(settings, make_client):
    bodies = []

    def handler(request: httpx.Request) -> httpx.Response:
        bodies.append(json.loads(request.content))
        return httpx.Response(200, json=_bls_payload([]))

    settings.bls_api_key = "bls-key"
    fetcher = BlsFetcher(settings, client=make_client(handler))
    fetcher.fetch_observations("CUUR0000SA0", start_year=2000, end_year=2019)

    assert len(bodies) == 1
    assert bodies[0]["registrationkey"] == "bls-key"


def test_bls_failed_status(settings, make_client):
    body = {"status": "REQUEST_NOT_PROCESSED", "message": ["Daily threshold reached"]}
    fetcher = BlsFetcher(settings, client=make_client(json_body=body))

    with pytest.raises(DataSourceUnavailable, match="Daily threshold"):
        fetcher.fetch_observations("CUUR0000SA0", start_year=2020, end_year=2020)


def test_bls_rejects_too_many_series(settings, make_client):
    fetcher = BlsFetcher(settings, client=make_client(json_body={}))

    with pytest.raises(ValueError):
        fetcher.fetch_raw([f"S{i}" for i in range(51)], 2020, 2020)


# ONS


def test_ons_reads_monthly_block(settings, make_client):
    requests = []

    def handler(request: httpx.Request) -> httpx.Response:
        requests.append(request)
        return httpx.Response(
            200,
            json={
                "years": [{"date": "1987", "value": "101.9"}],
                "months": [
                    {"date": "1987 JAN", "value": "100.0"},
                    {"date": "1987 FEB", "value": "100.4"},
                    {"date": "1987 MAR", "value": ""},
                ],
            },
        )

    fetcher = OnsFetcher(settings, client=make_client(handler))
    observations = fetcher.fetch_observations("CHAW")

    assert [(o.period, o.value) for o in observations] == [
        ("1987 JAN", 100.0),
        ("1987 FEB", 100.4),
    ]
    assert requests[0].url.path == "/timeseries/chaw/dataset/mm23/data"


def test_ons_falls_back_to_years(settings, make_client):
    body = {"months": [], "years": [{"date": "1950", "value": "10.2"}]}
    fetcher = OnsFetcher(settings, client=make_client(json_body=body))

    observations = fetcher.fetch_observations("CHAW")

    assert [(o.year, o.value) for o in observations] == [(1950, 10.2)]


def test_ons_unexpected_payload(settings, make_client):
    fetcher = OnsFetcher(settings, client=make_client(json_body={"description": {}}))

    with pytest.raises(DataSourceUnavailable, match="unexpected payload"):
        fetcher.fetch_observations("CHAW")


# SCB


def test_scb_parses_pxweb_rows(settings, make_client):
    queries = []

    def handler(request: httpx.Request) -> httpx.Response:
        queries.append(json.loads(request.content))
        return httpx.Response(
            200,
            json={
                "columns": [],
                "data": [
                    {"key": ["1980M01"], "values": ["100.0"]},
                    {"key": ["1980M02"], "values": ["101.5"]},
                    {"key": ["1980M03"], "values": [".."]},
                ],
            },
        )

    fetcher = ScbFetcher(settings, client=make_client(handler))
    observations = fetcher.fetch_observations("000004VU")

    assert [(o.period, o.value) for o in observations] == [
        ("1980M01", 100.0),
        ("1980M02", 101.5),
    ]
    contents = queries[0]["query"][0]
    assert contents["code"] == "ContentsCode"
    assert contents["selection"]["values"] == ["000004VU"]


def test_scb_http_error(settings, make_client):
    fetcher = ScbFetcher(settings, client=make_client(json_body={}, status_code=503))

    with pytest.raises(DataSourceUnavailable) as exc:
        fetcher.fetch_observations("000004VU")

    assert exc.value.source == "SCB"


# DST


def _jsonstat(values):
    return {
        "dataset": {
            "dimension": {
                "Tid": {"category": {"index": {"2000M02": 1, "2000M01": 0, "2000M03": 2}}}
            },
            "value": values,
        }
    }


def test_dst_reads_jsonstat_list_values(settings, make_client):
    requests = []

    def handler(request: httpx.Request) -> httpx.Response:
        requests.append(request)
        return httpx.Response(200, json=_jsonstat([76.1, None, 76.9]))

    fetcher = DstFetcher(settings, client=make_client(handler))
    observations = fetcher.fetch_observations("PRIS111")

    assert [(o.period, o.value) for o in observations] == [
        ("2000M01", 76.1),
        ("2000M03", 76.9),
    ]
    params = requests[0].url.params
    assert params["Tid"] == "*"
    assert params["VAREGR"] == "000000"


def test_dst_reads_sparse_jsonstat_values(settings, make_client):
    fetcher = DstFetcher(settings, client=make_client(json_body=_jsonstat({"1": 76.5})))

    observations = fetcher.fetch_observations("PRIS111")

    assert [(o.period, o.value) for o in observations] == [("2000M02", 76.5)]


def test_dst_missing_dataset(settings, make_client):
    fetcher = DstFetcher(settings, client=make_client(json_body={"error": "no table"}))

    with pytest.raises(DataSourceUnavailable):
        fetcher.fetch_observations("PRIS111")


# GUS


def test_gus_reads_national_values(settings, make_client):
    requests = []

    def handler(request: httpx.Request) -> httpx.Response:
        requests.append(request)
        return httpx.Response(
            200,
            json={
                "results": [
                    {
                        "id": "000000000000",
                        "values": [
                            {"year": "2020", "val": 103.4},
                            {"year": "2021", "val": None},
                            {"year": "2022", "val": 114.4},
                        ],
                    }
                ]
            },
        )

    fetcher = GusFetcher(settings, client=make_client(handler))
    observations = fetcher.fetch_observations("1738", start_year=2020, end_year=2022)

    assert [(o.period, o.value) for o in observations] == [("2020", 103.4), ("2022", 114.4)]
    params = requests[0].url.params
    assert params["unit-level"] == "0"
    assert params.get_list("year") == ["2020", "2021", "2022"]


def test_gus_missing_results(settings, make_client):
    fetcher = GusFetcher(settings, client=make_client(json_body={"errors": ["bad"]}))

    with pytest.raises(DataSourceUnavailable):
        fetcher.fetch_observations("1738", start_year=2020, end_year=2020)


# World Bank


def test_worldbank_groups_factors_by_country(settings, make_client):
    body = [
        {"page": 1, "pages": 1, "total": 3},
        [
            {"countryiso3code": "SWE", "date": "2020", "value": 8.6},
            {"countryiso3code": "SWE", "date": "2019", "value": None},
            {"countryiso3code": "USA", "date": "2020", "value": 1.0},
        ],
    ]
    fetcher = WorldBankFetcher(settings, client=make_client(json_body=body))

    factors = fetcher.fetch_ppp_factors(["SWE", "USA"], 2019, 2020)

    assert factors == {"SWE": {2020: 8.6}, "USA": {2020: 1.0}}


def test_worldbank_error_payload(settings, make_client):
    body = [{"message": [{"id": "120", "key": "Invalid value", "value": "The provided parameter value is not valid"}]}]
    fetcher = WorldBankFetcher(settings, client=make_client(json_body=body))

    with pytest.raises(DataSourceUnavailable, match="not valid"):
        fetcher.fetch_ppp_factors(["XXX"])


# CoinGecko


def test_coingecko_monthly_means(settings, make_client):
    body = {
        "prices": [
            [1704067200000, 100.0],  # 2024-01-01
            [1704153600000, 200.0],  # 2024-01-02
            [1706745600000, 300.0],  # 2024-02-01
        ]
    }
    fetcher = CoinGeckoFetcher(settings, client=make_client(json_body=body))

    monthly = fetcher.fetch_monthly_prices("bitcoin")

    assert [(o.period, o.value) for o in monthly] == [
        ("2024-01-01", 150.0),
        ("2024-02-01", 300.0),
    ]


def test_coingecko_missing_prices(settings, make_client):
    fetcher = CoinGeckoFetcher(settings, client=make_client(json_body={"status": "error"}))

    with pytest.raises(DataSourceUnavailable):
        fetcher.fetch_prices("bitcoin")


# Payloads with the wrong shape


@pytest.mark.parametrize(
    "fetcher_cls,fetch,body",
    [
        (FredFetcher, lambda f: f.fetch_observations("CPILFESL"), {"observations": [{"date": "2020-01-01"}]}),
        (
            BlsFetcher,
            lambda f: f.fetch_observations("CUUR0000SA0", start_year=2020, end_year=2020),
            {"status": "REQUEST_SUCCEEDED", "Results": None},
        ),
        (OnsFetcher, lambda f: f.fetch_observations("CHAW"), {"months": [{"date": "1987 JAN"}]}),
        (ScbFetcher, lambda f: f.fetch_observations("000004VU"), {"data": ["not-a-row"]}),
        (
            DstFetcher,
            lambda f: f.fetch_observations("PRIS111"),
            {"dataset": {"dimension": {"Tid": {"category": {"index": {"2000M01": 0}}}}, "value": ["n/a"]}},
        ),
        (GusFetcher, lambda f: f.fetch_observations("1738", start_year=2020, end_year=2020), {"results": [None]}),
        (
            WorldBankFetcher,
            lambda f: f.fetch_ppp_factors(["USA"]),
            [{"page": 1}, [{"countryiso3code": "USA", "date": "latest", "value": 1.0}]],
        ),
        (CoinGeckoFetcher, lambda f: f.fetch_prices("bitcoin"), {"prices": [[1704067200000, 1.0, "extra"]]}),
    ],
)
def test_malformed_payload_is_reported_as_unavailable(settings, make_client, fetcher_cls, fetch, body):
    fetcher = fetcher_cls(settings, client=make_client(json_body=body))

    with pytest.raises(DataSourceUnavailable, match="unexpected payload"):
        fetch(fetcher)
