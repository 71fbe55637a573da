from __future__ import annotations

import asyncio
import time

import httpx
import pytest

from address_validator.core.errors import UpstreamError
from address_validator.infra.http import HttpClient


async def _trickle(request: httpx.Request) -> httpx.Response:
    async def body():
        for ch in b'{"features": []}':
            await asyncio.sleep(0.05)
            yield bytes([ch])

    return httpx.Response(200, content=body())


async def test_timeout_caps_the_whole_call_including_a_slow_body():
    # each chunk arrives well inside the timeout, the whole body does not
    client = HttpClient(timeout_seconds=0.2, user_agent="tests", transport=httpx.MockTransport(_trickle))

    started = time.monotonic()
    with pytest.raises(UpstreamError, match="failed to make request: timeout"):
        await client.get_json("https://slow.test/", params={})
    elapsed = time.monotonic() - started

    assert elapsed < 0.6
    await client.close()


async def test_fast_body_within_timeout_decodes():
    async def handler(request):
        return httpx.Response(200, json={"features": []})

    client = HttpClient(timeout_seconds=0.2, user_agent="tests", transport=httpx.MockTransport(handler))

    assert await client.get_json("https://fast.test/", params={"q": "x"}) == {"features": []}
    await client.close()
