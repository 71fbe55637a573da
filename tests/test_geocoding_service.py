from __future__ import annotations

import httpx
import pytest

from address_validator.core.errors import AllProvidersFailedError
from address_validator.core.models import ResultKind
from address_validator.infra.providers.geoapify import GeoapifyProvider
from address_validator.infra.providers.smarty import SmartyProvider
from address_validator.services.geocoding_service import GeocodingService

from conftest import GEOAPIFY_URL, SMARTY_URL, geoapify_feature, smarty_suggestion


def _service(http, *, key_a="key-a", key_b="key-b") -> GeocodingService:
    return GeocodingService(
        providers=[
            GeoapifyProvider(http=http, api_key=key_a, base_url=GEOAPIFY_URL),
            SmartyProvider(http=http, api_key=key_b, base_url=SMARTY_URL),
        ]
    )


async def test_primary_success_skips_fallback(router, http):
    router.on("geoapify.test", lambda r: httpx.Response(200, json={"features": [geoapify_feature()]}))
    router.on("smarty.test", lambda r: httpx.Response(200, json={"suggestions": [smarty_suggestion()]}))

    result = await _service(http).geocode("123 Main street")

    assert result.provider == "geoapify"
    assert router.calls("smarty.test") == []


async def test_empty_primary_falls_back(router, http):
    router.on("geoapify.test", lambda r: httpx.Response(200, json={"features": []}))
    router.on("smarty.test", lambda r: httpx.Response(200, json={"suggestions": [smarty_suggestion()]}))

    result = await _service(http).geocode("123 Main street")

    assert result.success
    assert result.provider == "smarty"
    assert len(router.calls("geoapify.test")) == 1


async def test_primary_error_falls_back(router, http):
    router.on("geoapify.test", lambda r: httpx.Response(500, text="boom"))
    router.on("smarty.test", lambda r: httpx.Response(200, json={"suggestions": [smarty_suggestion()]}))

    result = await _service(http).geocode("123 Main street")

    assert result.provider == "smarty"


async def test_disabled_primary_is_not_called(router, http):
    router.on("smarty.test", lambda r: httpx.Response(200, json={"suggestions": [smarty_suggestion()]}))

    result = await _service(http, key_a="").geocode("123 Main street")

    assert result.provider == "smarty"
    assert router.calls("geoapify.test") == []


async def test_all_providers_failing_raises(router, http):
    router.on("geoapify.test", lambda r: httpx.Response(503, text="down"))
    router.on("smarty.test", lambda r: httpx.Response(200, json={"suggestions": []}))

    with pytest.raises(AllProvidersFailedError) as exc_info:
        await _service(http).geocode("123 Main street")

    err = exc_info.value
    assert str(err) == "failed to geocode address"
    assert err.result is not None
    assert err.result.provider == "none"
    assert not err.result.success
    assert err.result.record is None
    assert [a.kind for a in err.attempts] == [ResultKind.ERROR, ResultKind.EMPTY]


async def test_no_enabled_provider_raises(router, http):
    with pytest.raises(AllProvidersFailedError):
        await _service(http, key_a="", key_b="").geocode("123 Main street")
    assert router.requests == []
