"""
GoTrue identity store adapter - Implements IdentityStore protocol over HTTP.

Talks to a hosted GoTrue-compatible auth admin API (Supabase Auth and
friends). The provider hashes the password, enforces uniqueness of email and
phone, and delivers the verification OTP itself.

Endpoints:
- POST   {base_url}/auth/v1/admin/users        create a user
- DELETE {base_url}/auth/v1/admin/users/{id}   delete a user

Both are authenticated with the service role key, sent as the `apikey`
header and as a bearer token.
"""

import logging

import httpx

from src.domain.exceptions import IdentityStoreError, StoreError
from src.domain.ports import Credential, IdentityRecord

logger = logging.getLogger(__name__)

_ADMIN_USERS_PATH = "/auth/v1/admin/users"


def _error_message(response: httpx.Response) -> str:
    """Pull the provider's human-readable message out of an error response."""
    try:
        body = response.json()
    except ValueError:
        return response.text or f"Identity provider returned {response.status_code}"
    if isinstance(body, dict):
        for key in ("msg", "message", "error_description", "error"):
            value = body.get(key)
            if isinstance(value, str) and value:
                return value
    return f"Identity provider returned {response.status_code}"


class GoTrueIdentityStore:
    """
    Implements IdentityStore protocol via the GoTrue admin API.

    The httpx.Client is owned by the caller (created once in the app
    lifespan and shared across requests).
    """

    def __init__(self, client: httpx.Client, base_url: str, service_role_key: str) -> None:
        """
        Initialize identity store.

        Args:
            client: Shared httpx client; its timeout applies to every call
            base_url: Project URL, e.g. https://<project>.supabase.co
            service_role_key: Admin key for the auth API
        """
        self._client = client
        self._base_url = base_url.rstrip("/")
        self._headers = {
            "apikey": service_role_key,
            "Authorization": f"Bearer {service_role_key}",
            "Accept": "application/json",
        }

    def create_account(self, credential: Credential) -> IdentityRecord:
        """
        Create a user with the provider.

        Raises:
            IdentityStoreError: Provider rejected the user or could not be reached
            StoreError: The request was sent but its outcome is unknown
        """
        try:
            response = self._client.post(
                self._base_url + _ADMIN_USERS_PATH,
                headers=self._headers,
                json=credential.as_payload(),
            )
        except (httpx.ConnectError, httpx.ConnectTimeout) as exc:
            raise IdentityStoreError(f"Identity provider unreachable: {exc}") from exc
        except httpx.HTTPError as exc:
            logger.error(
                "Sign up for %s sent but unanswered (%s: %s); the provider may hold "
                "a user with no profile and needs reconciliation",
                credential.identifier,
                type(exc).__name__,
                exc,
            )
            raise StoreError("Failed to create user.") from exc

        if response.status_code >= 400:
            message = _error_message(response)
            logger.warning("Identity provider rejected sign up (%d): %s", response.status_code, message)
            raise IdentityStoreError(message)

        try:
            body = response.json()
        except ValueError:
            body = None
        user = (body.get("user") or body) if isinstance(body, dict) else None
        if not isinstance(user, dict):
            logger.error(
                "Identity provider accepted sign up for %s (%d) with an unreadable body; "
                "the user needs reconciliation",
                credential.identifier,
                response.status_code,
            )
            raise StoreError("Failed to create user.")
        return IdentityRecord(
            id=str(user.get("id") or ""),
            email=user.get("email") or None,
            phone=user.get("phone") or None,
        )

    def delete_account(self, identity_id: str) -> None:
        """
        Delete a user. A 404 means the user is already gone.

        Raises:
            IdentityStoreError: Provider refused the delete or could not be reached
        """
        try:
            response = self._client.delete(
                f"{self._base_url}{_ADMIN_USERS_PATH}/{identity_id}",
                headers=self._headers,
            )
        except httpx.HTTPError as exc:
            raise IdentityStoreError(f"Identity provider unreachable: {exc}") from exc

        if response.status_code == 404:
            logger.info("Identity %s already absent at provider", identity_id)
            return
        if response.status_code >= 400:
            raise IdentityStoreError(_error_message(response))
