from __future__ import annotations

import logging
from typing import Protocol, Sequence

from address_validator.core.errors import AllProvidersFailedError
from address_validator.core.models import PROVIDER_NONE, ProviderResult, ResultKind

log = logging.getLogger(__name__)


class GeocodingProvider(Protocol):
    name: str

    @property
    def enabled(self) -> bool: ...

    async def geocode(self, address: str) -> ProviderResult: ...


class GeocodingService:
    def __init__(self, *, providers: Sequence[GeocodingProvider]) -> None:
        self._providers = list(providers)

    @property
    def providers(self) -> list[GeocodingProvider]:
        return list(self._providers)

    async def geocode(self, address: str) -> ProviderResult:
        """
        Walk the provider chain in order and return the first success.

        Disabled providers (missing key or URL) are skipped. Errors and empty
        results are logged and fall through to the next provider.

        Raises:
            AllProvidersFailedError: no enabled provider produced a record.
        """
        attempts: list[ProviderResult] = []

        for provider in self._providers:
            if not provider.enabled:
                log.debug("Provider %s is not configured, skipping", provider.name)
                continue

            result = await provider.geocode(address)
            if result.success:
                log.info("Address resolved by %s", result.provider)
                return result

            attempts.append(result)
            if result.kind is ResultKind.EMPTY:
                log.info("Provider %s returned no results, trying fallback...", provider.name)
            else:
                log.warning("Provider %s error: %s, trying fallback...", provider.name, result.error)

        if not attempts:
            log.error("No geocoding provider is configured")

        failed = ProviderResult.failed(PROVIDER_NONE, "all geocoding providers failed")
        raise AllProvidersFailedError(result=failed, attempts=attempts)
