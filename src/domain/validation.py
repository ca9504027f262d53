"""
Input validation - Pure checks on a registration request.

Rules run in a fixed order and the first failing rule decides the reason:
missing fields, then password length, then identifier format.
"""

import re

from .exceptions import ValidationError, ValidationReason
from .ports import Credential, IdentifierKind, RegistrationRequest

MIN_PASSWORD_LENGTH = 8

_EMAIL_PATTERN = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")
# E.164: optional '+', leading digit 1-9, 2 to 15 digits in total
_PHONE_PATTERN = re.compile(r"^\+?[1-9]\d{1,14}$")


def classify_identifier(value: str) -> IdentifierKind | None:
    """Return EMAIL or PHONE for a well-formed identifier, None otherwise."""
    if _EMAIL_PATTERN.fullmatch(value):
        return IdentifierKind.EMAIL
    if _PHONE_PATTERN.fullmatch(value):
        return IdentifierKind.PHONE
    return None


def normalize_identifier(value: str, kind: IdentifierKind) -> str:
    """Strip whitespace; lowercase emails."""
    value = value.strip()
    if kind is IdentifierKind.EMAIL:
        return value.lower()
    return value


def validate(request: RegistrationRequest) -> Credential:
    """
    Validate a registration request.

    Args:
        request: Raw request fields, any of which may be None

    Returns:
        Credential with normalized username and identifier

    Raises:
        ValidationError: With the reason of the first rule that failed
    """
    username = (request.username or "").strip()
    identifier = (request.identifier or "").strip()
    password = request.password or ""

    if not username or not identifier or not password:
        raise ValidationError(ValidationReason.MISSING_FIELDS)

    if len(password) < MIN_PASSWORD_LENGTH:
        raise ValidationError(ValidationReason.PASSWORD_TOO_SHORT)

    kind = classify_identifier(identifier)
    if kind is None:
        raise ValidationError(ValidationReason.INVALID_IDENTIFIER_FORMAT)

    return Credential(
        username=username,
        identifier=normalize_identifier(identifier, kind),
        kind=kind,
        password=password,
    )
