from __future__ import annotations

import logging
import secrets
from typing import Any, Awaitable, Callable

from fastmcp import FastMCP
from pydantic import BaseModel, Field, ValidationError as PydanticValidationError
from starlette.requests import Request
from starlette.responses import JSONResponse, Response

from address_validator.app.container import Container
from address_validator.core.errors import ValidationError
from address_validator.core.models import ValidateResponse

log = logging.getLogger(__name__)

VALIDATE_PATH = "/api/v1/validate-address"
HEALTH_PATH = "/health"

INVALID_REQUEST = "Invalid request: address field is required"

Endpoint = Callable[[Request], Awaitable[Response]]


class ValidateAddressRequest(BaseModel):
    address: str = Field(..., description="Free-form US address, e.g. '123 Main Stret, San Fransisco, CA 94102'")


def _error(status_code: int, message: str) -> JSONResponse:
    return JSONResponse({"error": message, "code": status_code}, status_code=status_code)


def check_bearer(request: Request, token: str) -> JSONResponse | None:
    """Returns a 401 response when the Authorization header is missing or wrong."""
    header = request.headers.get("Authorization", "")
    if not header:
        return _error(401, "Authorization header required")
    scheme, _, supplied = header.partition(" ")
    if scheme != "Bearer":
        return _error(401, "Invalid authorization format. Use: Bearer <token>")

    supplied = supplied.strip()
    if not supplied:
        return _error(401, "Token is required")
    if not secrets.compare_digest(supplied.encode("utf-8"), token.encode("utf-8")):
        return _error(401, "Invalid token")
    return None


def check_json_headers(request: Request) -> JSONResponse | None:
    if request.method in ("POST", "PUT", "PATCH"):
        content_type = request.headers.get("Content-Type", "")
        if content_type != "application/json" and not content_type.startswith("application/json;"):
            return _error(415, "Content-Type must be application/json")

    accept = request.headers.get("Accept", "")
    if accept and accept != "*/*" and "application/json" not in accept:
        return _error(406, "Accept header must include application/json")
    return None


def _response(resp: ValidateResponse, status_code: int) -> JSONResponse:
    return JSONResponse(resp.to_dict(), status_code=status_code)


def make_validate_endpoint(container: Container) -> Endpoint:
    validator = container.validator_service
    token = container.settings.api_token

    async def validate_address(request: Request) -> Response:
        denied = check_bearer(request, token) or check_json_headers(request)
        if denied is not None:
            return denied

        try:
            payload: Any = await request.json()
            req = ValidateAddressRequest.model_validate(payload)
        except (ValueError, PydanticValidationError):
            return _response(ValidateResponse.failure(INVALID_REQUEST), 400)

        try:
            result = await validator.validate(req.address)
        except ValidationError:
            return _response(ValidateResponse.failure(INVALID_REQUEST), 400)

        # resolver failure is reported as a server error, body keeps status=error
        return _response(result, 200 if result.ok else 500)

    return validate_address


async def health(_request: Request) -> Response:
    return JSONResponse({"status": "healthy", "service": "address-validator"})


def register_http_routes(mcp: FastMCP, container: Container) -> None:
    mcp.custom_route(HEALTH_PATH, methods=["GET"])(health)
    mcp.custom_route(VALIDATE_PATH, methods=["POST"])(make_validate_endpoint(container))
    log.info("HTTP routes registered: %s, %s", HEALTH_PATH, VALIDATE_PATH)
