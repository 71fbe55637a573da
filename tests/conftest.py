from __future__ import annotations

from typing import Any, Callable

import httpx
import pytest

from address_validator.app.settings import Settings
from address_validator.infra.cache import MemoryCache
from address_validator.infra.http import HttpClient

GEOAPIFY_URL = "https://geoapify.test/v1/geocode/search"
SMARTY_URL = "https://smarty.test/lookup"


def geoapify_feature(**props: Any) -> dict[str, Any]:
    base = {
        "housenumber": "123",
        "street": "Main Street",
        "city": "San Francisco",
        "state": "California",
        "state_code": "CA",
        "postcode": "94102",
        "county": "San Francisco County",
        "country": "United States",
        "formatted": "123 Main Street, San Francisco, CA 94102, United States of America",
    }
    base.update(props)
    return {"type": "Feature", "properties": base}


def smarty_suggestion(**fields: Any) -> dict[str, Any]:
    base = {
        "street_line": "123 Main St",
        "secondary": "",
        "city": "San Francisco",
        "state": "CA",
        "zipcode": "94102",
        "entries": 0,
    }
    base.update(fields)
    return base


class Router:
    """MockTransport handler that records every request and dispatches by host."""

    def __init__(self) -> None:
        self.requests: list[httpx.Request] = []
        self.routes: dict[str, Callable[[httpx.Request], httpx.Response]] = {}

    def on(self, host: str, handler: Callable[[httpx.Request], httpx.Response]) -> None:
        self.routes[host] = handler

    def calls(self, host: str) -> list[httpx.Request]:
        return [r for r in self.requests if r.url.host == host]

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        handler = self.routes.get(request.url.host)
        if handler is None:
            return httpx.Response(404, json={"error": "no route"})
        return handler(request)


@pytest.fixture
def router() -> Router:
    return Router()


@pytest.fixture
def http(router: Router) -> HttpClient:
    return HttpClient(timeout_seconds=10.0, user_agent="tests", transport=httpx.MockTransport(router))


@pytest.fixture
def memory_cache() -> MemoryCache:
    return MemoryCache(maxsize=100, ttl_seconds=60)


@pytest.fixture
def make_settings() -> Callable[..., Settings]:
    def _make(**overrides: Any) -> Settings:
        values: dict[str, Any] = dict(
            api_token="secret-token",
            geocoding_a_api_key="key-a",
            geocoding_a_base_url=GEOAPIFY_URL,
            geocoding_b_api_key="key-b",
            geocoding_b_base_url=SMARTY_URL,
            smarty_referer="localhost:3000",
            smarty_license="us-autocomplete-pro-cloud",
            cache_backend="memory",
            cache_ttl_seconds=60.0,
            cache_maxsize=100,
            cache_write_timeout_seconds=2.0,
            redis_host="localhost",
            redis_port=6379,
            redis_password="",
            redis_db=0,
            http_timeout_seconds=10.0,
            http_user_agent="tests",
            host="127.0.0.1",
            port=3000,
            environment="test",
            log_level="DEBUG",
            coalesce_requests=False,
        )
        values.update(overrides)
        return Settings(**values)

    return _make
