"""
FastAPI dependencies - Dependency injection factories.

This module provides Depends() factories for injecting
domain services and infrastructure adapters into routes.
"""

import httpx
from fastapi import Request
from psycopg_pool import ConnectionPool

from src.adapters.captcha.passthrough import PassthroughCaptchaVerifier
from src.adapters.identity import GoTrueIdentityStore, PostgresIdentityStore
from src.adapters.otp.console import ConsoleOtpSender
from src.adapters.repository.postgres import PostgresProfileRepository
from src.config.settings import get_settings
from src.domain.ports import IdentityStore
from src.domain.registration import RegistrationService

# Module-level singletons - both adapters are stateless
_otp_sender = ConsoleOtpSender()
_captcha_verifier = PassthroughCaptchaVerifier()


def get_pool(request: Request) -> ConnectionPool:
    """
    Get connection pool from app state.

    The pool is created during app lifespan startup and stored in app.state.
    """
    return request.app.state.pool


def get_http_client(request: Request) -> httpx.Client:
    """Get the shared httpx client from app state (hosted identity backend only)."""
    return request.app.state.http_client


def get_profile_repository(request: Request) -> PostgresProfileRepository:
    """Create profile repository with connection pool from app state."""
    return PostgresProfileRepository(get_pool(request))


def get_otp_sender() -> ConsoleOtpSender:
    """Get console OTP sender (singleton)."""
    return _otp_sender


def get_captcha_verifier() -> PassthroughCaptchaVerifier:
    """Get passthrough CAPTCHA verifier (singleton)."""
    return _captcha_verifier


def get_identity_store(request: Request) -> IdentityStore:
    """Create the configured identity store adapter."""
    settings = get_settings()
    if settings.identity_backend == "gotrue":
        return GoTrueIdentityStore(
            client=get_http_client(request),
            base_url=settings.gotrue_url,
            service_role_key=settings.gotrue_service_role_key,
        )
    return PostgresIdentityStore(
        pool=get_pool(request),
        otp_sender=get_otp_sender(),
        bcrypt_cost=settings.bcrypt_cost,
        otp_length=settings.otp_length,
    )


def get_registration_service(request: Request) -> RegistrationService:
    """
    Create registration service with injected dependencies.

    Wires together both stores and the CAPTCHA verifier for the domain service.
    """
    settings = get_settings()
    return RegistrationService(
        identity_store=get_identity_store(request),
        profile_store=get_profile_repository(request),
        captcha_verifier=get_captcha_verifier(),
        captcha_enforced=settings.captcha_enforced,
        compensation_max_attempts=settings.compensation_max_attempts,
        compensation_backoff_seconds=settings.compensation_backoff_seconds,
    )
