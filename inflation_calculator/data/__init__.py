"""Data fetching, storage and publishing."""

from .bls_fetcher import BlsFetcher
from .cache import DataCache
from .coingecko_fetcher import CoinGeckoFetcher
from .dst_fetcher import DstFetcher
from .fred_fetcher import FredFetcher
from .gus_fetcher import GusFetcher
from .indexnow import IndexNowNotifier
from .ons_fetcher import OnsFetcher
from .scb_fetcher import ScbFetcher
from .store import JsonFileStore
from .worldbank_fetcher import WorldBankFetcher

__all__ = [
    "BlsFetcher",
    "CoinGeckoFetcher",
    "DataCache",
    "DstFetcher",
    "FredFetcher",
    "GusFetcher",
    "IndexNowNotifier",
    "JsonFileStore",
    "OnsFetcher",
    "ScbFetcher",
    "WorldBankFetcher",
]
