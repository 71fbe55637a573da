from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from address_validator.core.models import ProviderResult


class AddressValidatorError(Exception):
    """Base error for address-validator."""


class UpstreamError(AddressValidatorError):
    """Raised when a geocoding provider fails at the transport level."""


class ValidationError(AddressValidatorError):
    """Raised when input validation fails."""


class AllProvidersFailedError(UpstreamError):
    """Raised when every enabled provider in the chain failed or came back empty."""

    def __init__(
        self,
        message: str = "failed to geocode address",
        *,
        result: ProviderResult | None = None,
        attempts: list[ProviderResult] | None = None,
    ) -> None:
        super().__init__(message)
        self.result = result
        self.attempts = list(attempts or [])
