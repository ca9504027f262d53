"""
Response mapping - Terminal registration outcomes to HTTP responses.

Every response from the registration endpoint is JSON ({"message": ...} on
success, {"error": ...} on failure) and carries the CORS headers browser
clients need to call the endpoint cross-origin.
"""

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse, PlainTextResponse

from src.config.settings import get_settings
from src.domain.exceptions import (
    CaptchaRejected,
    ConflictError,
    IdentityStoreError,
    RegistrationError,
    ValidationError,
)

SUCCESS_MESSAGE = (
    "Registration successful. Please check your email or phone for an OTP to verify your account."
)
ALLOWED_HEADERS = "authorization, x-client-info, apikey, content-type"

# Checked in order; anything else is a server-side failure.
_STATUS_BY_ERROR: tuple[tuple[type[RegistrationError], int], ...] = (
    (ValidationError, status.HTTP_400_BAD_REQUEST),
    (CaptchaRejected, status.HTTP_400_BAD_REQUEST),
    (IdentityStoreError, status.HTTP_400_BAD_REQUEST),
    (ConflictError, status.HTTP_409_CONFLICT),
)


def cors_headers() -> dict[str, str]:
    """CORS headers attached to every registration response."""
    return {
        "Access-Control-Allow-Origin": get_settings().cors_allow_origin,
        "Access-Control-Allow-Headers": ALLOWED_HEADERS,
    }


def status_for(error: Exception) -> int:
    """HTTP status for a registration failure."""
    for error_type, status_code in _STATUS_BY_ERROR:
        if isinstance(error, error_type):
            return status_code
    return status.HTTP_500_INTERNAL_SERVER_ERROR


def success_response() -> JSONResponse:
    return JSONResponse({"message": SUCCESS_MESSAGE}, status_code=200, headers=cors_headers())


def error_response(error: Exception) -> JSONResponse:
    """Map an exception to {"error": message} with its status code."""
    message = error.message if isinstance(error, RegistrationError) else str(error)
    return JSONResponse(
        {"error": message or "Internal server error."},
        status_code=status_for(error),
        headers=cors_headers(),
    )


def preflight_response() -> PlainTextResponse:
    return PlainTextResponse("ok", status_code=200, headers=cors_headers())


async def _invalid_body_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    return JSONResponse(
        {"error": "Invalid request body."},
        status_code=status.HTTP_400_BAD_REQUEST,
        headers=cors_headers(),
    )


def install_exception_handlers(app: FastAPI) -> None:
    """Answer unparseable request bodies with 400 JSON instead of FastAPI's 422."""
    app.add_exception_handler(RequestValidationError, _invalid_body_handler)
