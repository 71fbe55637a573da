from __future__ import annotations

from typing import Any

from fastmcp import FastMCP
from fastmcp.exceptions import ToolError
from pydantic import BaseModel, Field

from address_validator.app.container import Container
from address_validator.core.errors import ValidationError
from address_validator.core.models import ValidateResponse

INVALID_REQUEST = "Invalid request: address field is required"


class NormalizeResult(BaseModel):
    """Result of the offline normalization passes (no provider call)."""

    original: str = Field(..., description="Input exactly as received")
    normalized: str = Field(..., description="Address after abbreviation, typo and state corrections")
    changes: list[str] = Field(
        default_factory=list,
        description="One entry per replacement, e.g. 'Stret → street (typo correction)'",
    )


def register_address_tools(mcp: FastMCP, container: Container) -> None:
    validator = container.validator_service

    @mcp.tool(
        name="validate_address",
        description=(
            "Validates a free-form US postal address. Fixes common typos and abbreviations, "
            "resolves the address against the configured geocoding providers and returns "
            "street, number, city, state, postal code, county and country."
        ),
    )
    async def validate_address(address: str) -> dict[str, Any]:
        """
        Free-form address -> structured components + list of corrections.

        - address: e.g. '123 Main Stret, San Fransisco, CA 94102'
        """
        try:
            result = await validator.validate(address)
        except ValidationError:
            result = ValidateResponse.failure(INVALID_REQUEST)
        return result.to_dict()

    @mcp.tool(
        name="normalize_address",
        description=(
            "Cleans up a free-form US address without contacting any geocoding provider: "
            "expands street and direction abbreviations, corrects typos in street types, "
            "city names and states, and lists every change made."
        ),
    )
    def normalize_address(address: str) -> NormalizeResult:
        try:
            n = validator.normalize(address)
        except ValidationError as e:
            raise ToolError(INVALID_REQUEST) from e
        return NormalizeResult(original=n.original, normalized=n.normalized, changes=list(n.changes))
