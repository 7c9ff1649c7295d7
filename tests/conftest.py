"""Shared fixtures."""

import json
from collections.abc import Callable

import httpx
import pytest

from inflation_calculator.config import Settings


@pytest.fixture
def settings(tmp_path) -> Settings:
    return Settings(
        fred_api_key="test-fred-key",
        bls_api_key="",
        indexnow_key="",
        site_url="https://example.com",
        output_dir=tmp_path / "data",
    )


@pytest.fixture
def make_client() -> Callable[..., httpx.Client]:
    """Build an httpx.Client that answers every request from a handler or a fixed body."""

    def _make(handler=None, *, json_body=None, status_code: int = 200) -> httpx.Client:
        if handler is None:

            def handler(request: httpx.Request) -> httpx.Response:
                return httpx.Response(
                    status_code=status_code,
                    headers={"content-type": "application/json"},
                    content=json.dumps(json_body).encode("utf-8"),
                    request=request,
                )

        return httpx.Client(transport=httpx.MockTransport(handler))

    return _make
