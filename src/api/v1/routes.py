"""
API v1 routes.

Defines REST endpoints for the account registration API.
"""

import logging

from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse, PlainTextResponse

from src.api.dependencies import get_registration_service
from src.api.models import ErrorResponse, RegisterRequest, RegisterResponse
from src.api.responses import error_response, preflight_response, success_response
from src.domain.exceptions import RegistrationError
from src.domain.ports import RegistrationRequest
from src.domain.registration import RegistrationService

logger = logging.getLogger(__name__)

router = APIRouter(tags=["v1"])


@router.post(
    "/register",
    response_model=RegisterResponse,
    responses={
        400: {"model": ErrorResponse, "description": "Invalid input or rejected by identity store"},
        409: {"model": ErrorResponse, "description": "Username, email, or phone already exists"},
        500: {"model": ErrorResponse, "description": "Store failure"},
    },
    summary="Register a new account",
    description="Submit a username, an email address or phone number, and a password. "
    "The identity provider sends a one-time passcode to verify the account.",
)
def register(
    request_data: RegisterRequest,
    service: RegistrationService = Depends(get_registration_service),
) -> JSONResponse:
    """
    Register a new account.

    - **username**: Unique username
    - **email_or_phone**: Email address or E.164 phone number
    - **password**: Password (minimum 8 characters)
    - **captchaToken**: Optional CAPTCHA token
    """
    registration = RegistrationRequest(
        username=request_data.username,
        identifier=request_data.email_or_phone,
        password=request_data.password,
        captcha_token=request_data.captcha_token,
    )
    try:
        service.register(registration)
    except RegistrationError as exc:
        return error_response(exc)
    except Exception as exc:
        logger.exception("Unhandled error during registration")
        return error_response(exc)
    return success_response()


@router.options("/register", include_in_schema=False)
def register_preflight() -> PlainTextResponse:
    """CORS preflight."""
    return preflight_response()
