"""
Shared test fixtures and configuration.

This module provides in-memory stand-ins for the two external stores so the
registration workflow can be exercised end to end without PostgreSQL or a
hosted identity provider.
"""

import uuid

import pytest

from src.domain.exceptions import IdentityStoreError, ProfileStoreError
from src.domain.ports import Credential, IdentifierKind, IdentityRecord, ProfileRecord


class InMemoryIdentityStore:
    """IdentityStore with call recording and switchable failures."""

    def __init__(self) -> None:
        self.accounts: dict[str, Credential] = {}
        self.create_calls: list[Credential] = []
        self.delete_calls: list[str] = []
        self.reject_with: str | None = None
        self.delete_failures = 0  # number of upcoming deletes that fail

    def create_account(self, credential: Credential) -> IdentityRecord:
        self.create_calls.append(credential)
        if self.reject_with is not None:
            raise IdentityStoreError(self.reject_with)
        if any(c.identifier == credential.identifier for c in self.accounts.values()):
            raise IdentityStoreError("A user with this email address has already been registered")
        identity_id = str(uuid.uuid4())
        self.accounts[identity_id] = credential
        if credential.kind is IdentifierKind.EMAIL:
            return IdentityRecord(id=identity_id, email=credential.identifier)
        return IdentityRecord(id=identity_id, phone=credential.identifier)

    def delete_account(self, identity_id: str) -> None:
        self.delete_calls.append(identity_id)
        if self.delete_failures > 0:
            self.delete_failures -= 1
            raise IdentityStoreError("identity provider timed out")
        self.accounts.pop(identity_id, None)


class InMemoryProfileStore:
    """ProfileStore with call recording and switchable failures."""

    def __init__(self) -> None:
        self.rows: list[ProfileRecord] = []
        self.find_calls: list[tuple[str, str]] = []
        self.insert_calls: list[ProfileRecord] = []
        self.fail_find = False
        self.fail_insert = False

    def find_by_username_or_email_or_phone(
        self, username: str, identifier: str
    ) -> list[ProfileRecord]:
        self.find_calls.append((username, identifier))
        if self.fail_find:
            raise ProfileStoreError("connection refused")
        return [
            row
            for row in self.rows
            if row.username == username or row.email == identifier or row.phone == identifier
        ]

    def insert_profile(self, record: ProfileRecord) -> None:
        self.insert_calls.append(record)
        if self.fail_insert:
            raise ProfileStoreError("insert failed")
        self.rows.append(record)


@pytest.fixture
def identity_store() -> InMemoryIdentityStore:
    """Empty in-memory identity store."""
    return InMemoryIdentityStore()


@pytest.fixture
def profile_store() -> InMemoryProfileStore:
    """Empty in-memory profile store."""
    return InMemoryProfileStore()
