"""Shared fixtures for pool hours tests."""

import os
from collections.abc import Callable

import httpx
import pytest

from pool_hours.client import PoolSiteClient

DATA_DIR = os.path.join(os.path.dirname(os.path.abspath(__file__)), "data")
TEST_URL = "https://pool.example.test/pool-hours"


@pytest.fixture
def pool_html() -> str:
    """The sample pool hours page."""
    with open(os.path.join(DATA_DIR, "pool_hours.html"), encoding="utf-8") as f:
        return f.read()


@pytest.fixture
def make_client() -> Callable[[Callable[[httpx.Request], httpx.Response]], PoolSiteClient]:
    """Build a PoolSiteClient whose requests are answered by `handler`."""

    def factory(handler):
        return PoolSiteClient(url=TEST_URL, transport=httpx.MockTransport(handler))

    return factory


@pytest.fixture
def html_client(make_client, pool_html) -> PoolSiteClient:
    """A client that always serves the sample page."""
    return make_client(lambda request: httpx.Response(200, text=pool_html))


@pytest.fixture
def refused_client(make_client) -> PoolSiteClient:
    """A client whose connections are always refused."""

    def handler(request):
        raise httpx.ConnectError("[Errno 111] Connection refused", request=request)

    return make_client(handler)


@pytest.fixture(autouse=True)
def category_mode(monkeypatch):
    """Run with the default extraction mode regardless of the environment."""
    monkeypatch.setenv("POOL_HOURS_EXTRACTION_MODE", "category")
    monkeypatch.setenv("POOL_HOURS_SITE_TIMEZONE", "America/Los_Angeles")
    monkeypatch.setenv("POOL_HOURS_CLIENT_TIMEZONE", "America/Los_Angeles")
