from __future__ import annotations

from dataclasses import dataclass

from address_validator.app.settings import Settings, get_settings
from address_validator.core.normalizer import AddressNormalizer
from address_validator.infra.cache import Cache, MemoryCache
from address_validator.infra.http import HttpClient
from address_validator.infra.providers.geoapify import GeoapifyProvider
from address_validator.infra.providers.smarty import SmartyProvider
from address_validator.infra.redis_cache import RedisCache
from address_validator.services.geocoding_service import GeocodingService
from address_validator.services.validator_service import ValidatorService


@dataclass(frozen=True)
class Container:
    settings: Settings
    cache: Cache
    http: HttpClient
    geoapify: GeoapifyProvider
    smarty: SmartyProvider
    geocoding_service: GeocodingService
    validator_service: ValidatorService

    async def aclose(self) -> None:
        try:
            await self.cache.close()
        finally:
            await self.http.close()


def build_cache(settings: Settings) -> Cache:
    if settings.cache_backend == "redis":
        return RedisCache.from_settings(
            host=settings.redis_host,
            port=settings.redis_port,
            password=settings.redis_password,
            db=settings.redis_db,
            ttl_seconds=settings.cache_ttl_seconds,
            write_timeout_seconds=settings.cache_write_timeout_seconds,
        )
    return MemoryCache(maxsize=settings.cache_maxsize, ttl_seconds=settings.cache_ttl_seconds)


def build_container(
    settings: Settings | None = None,
    *,
    cache: Cache | None = None,
    http: HttpClient | None = None,
) -> Container:
    settings = settings or get_settings()

    cache = cache if cache is not None else build_cache(settings)
    http = http or HttpClient(timeout_seconds=settings.http_timeout_seconds, user_agent=settings.http_user_agent)

    # provider order is the fallback order: A first, then B
    geoapify = GeoapifyProvider(
        http=http,
        api_key=settings.geocoding_a_api_key,
        base_url=settings.geocoding_a_base_url,
    )
    smarty = SmartyProvider(
        http=http,
        api_key=settings.geocoding_b_api_key,
        base_url=settings.geocoding_b_base_url,
        license_name=settings.smarty_license,
        referer=settings.smarty_referer,
    )

    geocoding_service = GeocodingService(providers=[geoapify, smarty])
    validator_service = ValidatorService(
        geocoding=geocoding_service,
        cache=cache,
        normalizer=AddressNormalizer(),
        coalesce=settings.coalesce_requests,
    )

    return Container(
        settings=settings,
        cache=cache,
        http=http,
        geoapify=geoapify,
        smarty=smarty,
        geocoding_service=geocoding_service,
        validator_service=validator_service,
    )
