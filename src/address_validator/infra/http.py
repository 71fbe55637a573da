from __future__ import annotations

import asyncio
import logging
from typing import Any

import httpx

from address_validator.core.errors import UpstreamError

log = logging.getLogger(__name__)


class HttpClient:
    """
    Shared async client for provider calls. Safe for concurrent use.

    timeout_seconds caps the whole call, body included, not each phase.
    Cancelling the awaiting task aborts the in-flight request.
    """

    def __init__(
        self,
        *,
        timeout_seconds: float,
        user_agent: str,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self._timeout = timeout_seconds
        self._client = httpx.AsyncClient(
            timeout=timeout_seconds,
            headers={"User-Agent": user_agent},
            transport=transport,
        )

    async def get_json(
        self,
        url: str,
        *,
        params: dict[str, Any],
        headers: dict[str, str] | None = None,
    ) -> Any:
        try:
            r = await asyncio.wait_for(
                self._client.get(url, params=params, headers=headers),
                self._timeout,
            )
        except asyncio.TimeoutError as e:
            log.warning("HTTP request to %s timed out after %ss", url, self._timeout)
            raise UpstreamError("failed to make request: timeout") from e
        except httpx.HTTPError as e:
            log.warning("HTTP error: %s", e)
            raise UpstreamError(f"failed to make request: {e}") from e

        if r.status_code != 200:
            raise UpstreamError(f"API returned status {r.status_code}: {r.text}")

        try:
            return r.json()
        except ValueError as e:
            raise UpstreamError(f"failed to decode response: {e}") from e

    async def close(self) -> None:
        try:
            await self._client.aclose()
        except Exception:
            # shutdown path; nothing useful to do with a close failure
            log.debug("HTTP client close failed", exc_info=True)
