from __future__ import annotations

import logging
from typing import Any

from address_validator.core.errors import UpstreamError
from address_validator.core.models import AddressRecord, ProviderResult
from address_validator.core.text import split_street_line
from address_validator.infra.http import HttpClient

log = logging.getLogger(__name__)

SMARTY_API_URL = "https://us-autocomplete-pro.api.smarty.com/lookup"
SMARTY_LICENSE = "us-autocomplete-pro-cloud"
SMARTY_REFERER = "localhost:3000"

DEFAULT_COUNTRY = "United States"


class SmartyProvider:
    """
    Provider B: Smarty US autocomplete pro.
    - GET {base_url}?key=..&search=..&max_results=1&license=..  (Referer header required)
    - response: { "suggestions": [ {street_line, secondary, city, state, zipcode, entries} ] }
    """

    name = "smarty"

    def __init__(
        self,
        *,
        http: HttpClient,
        api_key: str,
        base_url: str = SMARTY_API_URL,
        license_name: str = SMARTY_LICENSE,
        referer: str = SMARTY_REFERER,
    ) -> None:
        self._http = http
        self._api_key = (api_key or "").strip()
        self._base_url = (base_url or "").strip()
        self._license = license_name
        self._referer = referer

    @property
    def enabled(self) -> bool:
        return bool(self._api_key and self._base_url)

    async def geocode(self, address: str) -> ProviderResult:
        log.debug("Smarty lookup: %s", address)
        params = {
            "key": self._api_key,
            "search": address,
            "max_results": "1",
            "license": self._license,
        }

        try:
            payload = await self._http.get_json(
                self._base_url,
                params=params,
                headers={"Referer": self._referer},
            )
            suggestions = self.extract_suggestions(payload)
        except UpstreamError as e:
            return ProviderResult.failed(self.name, str(e))

        if not suggestions:
            return ProviderResult.empty(self.name)

        return ProviderResult.ok(self.name, self.to_record(suggestions[0]))

    @staticmethod
    def extract_suggestions(payload: Any) -> list[dict[str, Any]]:
        if not isinstance(payload, dict):
            raise UpstreamError("failed to decode response: expected a JSON object")
        suggestions = payload.get("suggestions") or []
        if not isinstance(suggestions, list):
            raise UpstreamError("failed to decode response: 'suggestions' is not a list")
        return [s for s in suggestions if isinstance(s, dict)]

    @staticmethod
    def format_address(suggestion: dict[str, Any]) -> str:
        """'123 Main St, Apt 4, Springfield, IL 62701' (secondary only when present)."""
        parts = [str(suggestion.get("street_line") or "")]

        secondary = str(suggestion.get("secondary") or "")
        if secondary:
            parts.append(secondary)

        city = suggestion.get("city") or ""
        state = suggestion.get("state") or ""
        zipcode = suggestion.get("zipcode") or ""
        parts.append(f"{city}, {state} {zipcode}")

        return ", ".join(parts)

    @classmethod
    def to_record(cls, suggestion: dict[str, Any]) -> AddressRecord:
        street_line = str(suggestion.get("street_line") or "")
        number, street = split_street_line(street_line)

        return AddressRecord(
            street=street,
            number=number,
            city=str(suggestion.get("city") or ""),
            state=str(suggestion.get("state") or ""),
            postal_code=str(suggestion.get("zipcode") or ""),
            county="",
            country=DEFAULT_COUNTRY,
            formatted=cls.format_address(suggestion),
        )
