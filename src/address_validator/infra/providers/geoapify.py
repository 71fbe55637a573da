from __future__ import annotations

import logging
from typing import Any

from address_validator.core.errors import UpstreamError
from address_validator.core.models import AddressRecord, ProviderResult
from address_validator.infra.http import HttpClient

log = logging.getLogger(__name__)

GEOAPIFY_API_URL = "https://api.geoapify.com/v1/geocode/search"


class GeoapifyProvider:
    """
    Provider A: Geoapify forward geocoding.
    - GET {base_url}?text=<address>&apiKey=<key>
    - response: { "features": [ { "properties": {...} }, ... ] }
    """

    name = "geoapify"

    def __init__(self, *, http: HttpClient, api_key: str, base_url: str = GEOAPIFY_API_URL) -> None:
        self._http = http
        self._api_key = (api_key or "").strip()
        self._base_url = (base_url or "").strip()

    @property
    def enabled(self) -> bool:
        return bool(self._api_key and self._base_url)

    async def geocode(self, address: str) -> ProviderResult:
        log.debug("Geoapify lookup: %s", address)
        params = {"text": address, "apiKey": self._api_key}

        try:
            payload = await self._http.get_json(self._base_url, params=params)
            features = self.extract_features(payload)
        except UpstreamError as e:
            return ProviderResult.failed(self.name, str(e))

        if not features:
            return ProviderResult.empty(self.name)

        props = features[0].get("properties")
        if not isinstance(props, dict):
            return ProviderResult.failed(self.name, "failed to decode response: feature without properties")

        return ProviderResult.ok(self.name, self.to_record(props))

    @staticmethod
    def extract_features(payload: Any) -> list[dict[str, Any]]:
        if not isinstance(payload, dict):
            raise UpstreamError("failed to decode response: expected a JSON object")
        features = payload.get("features") or []
        if not isinstance(features, list):
            raise UpstreamError("failed to decode response: 'features' is not a list")
        return [f for f in features if isinstance(f, dict)]

    @staticmethod
    def to_record(props: dict[str, Any]) -> AddressRecord:
        def pick(key: str) -> str:
            v = props.get(key)
            return "" if v is None else str(v)

        # street stays as the provider returns it; the number is its own field
        return AddressRecord(
            street=pick("street"),
            number=pick("housenumber"),
            city=pick("city"),
            state=pick("state_code"),
            postal_code=pick("postcode"),
            county=pick("county"),
            country=pick("country"),
            formatted=pick("formatted"),
        )
