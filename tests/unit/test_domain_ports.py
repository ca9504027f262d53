"""
Unit tests for domain ports and exceptions.

Tests verify:
- Port interfaces are properly defined
- Exceptions are properly structured
- Domain purity (zero framework imports)
"""

import json
import subprocess
from enum import Enum
from pathlib import Path

import pytest

from src.domain.exceptions import (
    CaptchaRejected,
    CaptchaUnavailable,
    CompensationFailure,
    ConflictError,
    IdentityStoreError,
    ProfileStoreError,
    RegistrationError,
    StoreError,
    ValidationError,
    ValidationReason,
)
from src.domain.ports import (
    CaptchaResult,
    CaptchaVerifier,
    IdentifierKind,
    IdentityStore,
    OtpSender,
    ProfileStore,
    RegistrationState,
)

DOMAIN_DIR = Path(__file__).resolve().parents[2] / "src" / "domain"


class TestRegistrationStateEnum:
    """Tests for RegistrationState enum."""

    def test_registration_state_is_str_enum(self) -> None:
        assert issubclass(RegistrationState, Enum)
        assert issubclass(RegistrationState, str)

    def test_happy_path_states(self) -> None:
        assert [s.value for s in RegistrationState][:5] == [
            "RECEIVED",
            "VALIDATED",
            "UNIQUENESS_CHECKED",
            "IDENTITY_CREATED",
            "PROFILE_INSERTED",
        ]

    def test_failure_states(self) -> None:
        for name in ("REJECTED", "COMPENSATING", "COMPENSATED_FAILURE", "UNCOMPENSATED_FAILURE", "STORE_ERROR"):
            assert RegistrationState[name].value == name

    def test_json_serializable(self) -> None:
        assert json.dumps(RegistrationState.PROFILE_INSERTED) == '"PROFILE_INSERTED"'


class TestIdentifierKindEnum:
    """IdentifierKind values double as identity store payload keys."""

    def test_values(self) -> None:
        assert IdentifierKind.EMAIL.value == "email"
        assert IdentifierKind.PHONE.value == "phone"


class TestCaptchaResultEnum:
    def test_values(self) -> None:
        assert {r.value for r in CaptchaResult} == {"verified", "rejected", "unavailable"}


class TestPortProtocols:
    """Ports declare the methods the domain calls."""

    def test_identity_store_methods(self) -> None:
        assert hasattr(IdentityStore, "create_account")
        assert hasattr(IdentityStore, "delete_account")

    def test_profile_store_methods(self) -> None:
        assert hasattr(ProfileStore, "find_by_username_or_email_or_phone")
        assert hasattr(ProfileStore, "insert_profile")

    def test_captcha_verifier_method(self) -> None:
        assert hasattr(CaptchaVerifier, "verify")

    def test_otp_sender_method(self) -> None:
        assert hasattr(OtpSender, "send_otp")


class TestDomainExceptions:
    """Tests for the error taxonomy."""

    @pytest.mark.parametrize(
        "error_type",
        [
            ValidationError,
            CaptchaRejected,
            CaptchaUnavailable,
            ConflictError,
            IdentityStoreError,
            StoreError,
            ProfileStoreError,
            CompensationFailure,
        ],
    )
    def test_inherits_registration_error(self, error_type: type) -> None:
        assert issubclass(error_type, RegistrationError)

    def test_store_error_hierarchy(self) -> None:
        assert issubclass(ProfileStoreError, StoreError)
        assert issubclass(CompensationFailure, ProfileStoreError)
        assert not issubclass(IdentityStoreError, StoreError)

    def test_validation_error_carries_reason(self) -> None:
        error = ValidationError(ValidationReason.PASSWORD_TOO_SHORT)
        assert error.reason is ValidationReason.PASSWORD_TOO_SHORT
        assert str(error) == "Password must be at least 8 characters long."

    def test_default_messages(self) -> None:
        assert ConflictError().message == "Username, email, or phone already exists."
        assert CaptchaRejected().message == "CAPTCHA verification failed."

    def test_identity_store_error_keeps_message(self) -> None:
        assert IdentityStoreError("Email rate limit exceeded").message == "Email rate limit exceeded"

    def test_compensation_failure_carries_identity_id(self) -> None:
        error = CompensationFailure("abc-123")
        assert error.identity_id == "abc-123"


class TestDomainPurity:
    """Tests for domain purity - zero framework imports."""

    @pytest.mark.parametrize(
        "pattern",
        [
            "from fastapi",
            "import fastapi",
            "from pydantic",
            "import pydantic",
            "from psycopg",
            "import psycopg",
            "import httpx",
            "import bcrypt",
        ],
    )
    def test_no_framework_imports_in_domain(self, pattern: str) -> None:
        result = subprocess.run(
            ["grep", "-r", pattern, str(DOMAIN_DIR)],
            capture_output=True,
            text=True,
        )
        assert result.returncode != 0, f"Framework import found: {result.stdout}"
