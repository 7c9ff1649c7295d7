"""Multi-currency inflation indices: ingestion, normalization and projection."""

__version__ = "0.1.0"
