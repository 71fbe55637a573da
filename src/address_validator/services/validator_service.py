from __future__ import annotations

import asyncio
import hashlib
import logging

from address_validator.core.errors import UpstreamError, ValidationError
from address_validator.core.models import NormalizedInput, ValidateResponse
from address_validator.core.normalizer import AddressNormalizer
from address_validator.infra.cache import Cache
from address_validator.services.geocoding_service import GeocodingService

log = logging.getLogger(__name__)

CACHE_KEY_PREFIX = "addr:"


def generate_cache_key(normalized: str) -> str:
    digest = hashlib.md5(normalized.lower().encode("utf-8")).hexdigest()
    return CACHE_KEY_PREFIX + digest


def _require_address(address: str) -> None:
    if not isinstance(address, str) or not address.strip():
        raise ValidationError("address field is required")


class ValidatorService:
    def __init__(
        self,
        *,
        geocoding: GeocodingService,
        cache: Cache,
        normalizer: AddressNormalizer | None = None,
        coalesce: bool = False,
    ) -> None:
        self._geocoding = geocoding
        self._cache = cache
        self._normalizer = normalizer or AddressNormalizer()
        self._coalesce = coalesce
        self._inflight: dict[str, asyncio.Task[ValidateResponse]] = {}

    def normalize(self, address: str) -> NormalizedInput:
        _require_address(address)
        return self._normalizer.normalize(address)

    async def validate(self, address: str) -> ValidateResponse:
        """
        Normalize -> cache lookup -> provider chain -> cache write.

        Args:
            address: free-form US address

        Returns:
            ValidateResponse; status=error when every provider failed
            (nothing is cached in that case).

        Raises:
            ValidationError: address is missing or blank.
        """
        normalized = self.normalize(address)
        key = generate_cache_key(normalized.normalized)

        cached = await self._cached_response(key)
        if cached is not None:
            return cached

        if not self._coalesce:
            return await self._resolve_and_store(key, normalized)

        task = self._inflight.get(key)
        if task is None:
            task = asyncio.ensure_future(self._resolve_and_store(key, normalized))
            self._inflight[key] = task
            task.add_done_callback(lambda _t: self._inflight.pop(key, None))
        else:
            log.debug("Joining in-flight lookup for %s", key)

        # one caller going away must not cancel the lookup for the others
        return await asyncio.shield(task)

    async def _cached_response(self, key: str) -> ValidateResponse | None:
        value, hit = await self._cache.get(key)
        if not hit:
            return None

        try:
            response = ValidateResponse.from_dict(value)
        except (TypeError, ValueError) as e:
            log.warning("Ignoring unreadable cache entry %s: %s", key, e)
            return None

        log.debug("Cache hit for %s", key)
        return response

    async def _resolve_and_store(self, key: str, normalized: NormalizedInput) -> ValidateResponse:
        try:
            result = await self._geocoding.geocode(normalized.normalized)
        except UpstreamError as e:
            log.warning("Could not resolve %r: %s", normalized.normalized, e)
            return ValidateResponse.failure(f"Failed to validate address: {e}")

        if result.record is None:
            return ValidateResponse.failure("Failed to validate address: provider returned no record")

        response = ValidateResponse.success(result.record, normalized.changes)
        await self._cache.set(key, response.to_dict())
        return response
