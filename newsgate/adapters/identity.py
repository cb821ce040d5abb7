"""Identity provider admin API (Supabase GoTrue)."""

import logging

import httpx

from newsgate.config import settings

logger = logging.getLogger(__name__)


class IdentityProviderError(Exception):
    """Raised when the provider admin API rejects a request."""


class IdentityProviderAdmin:
    """Creates and removes provider accounts with the service-role key."""

    def __init__(
        self,
        http_client: httpx.AsyncClient,
        base_url: str | None = None,
        service_role_key: str | None = None,
    ):
        self._http = http_client
        self._base_url = (base_url or settings.supabase_url).rstrip("/")
        key = settings.supabase_service_role_key if service_role_key is None else service_role_key
        self._headers = {"apikey": key, "Authorization": f"Bearer {key}"}

    async def create_user(self, email: str, password: str, display_name: str) -> str:
        """Create a confirmed account and return its subject id."""
        payload = {
            "email": email,
            "password": password,
            "email_confirm": True,
            "user_metadata": {"display_name": display_name},
        }
        try:
            response = await self._http.post(
                f"{self._base_url}/auth/v1/admin/users", json=payload, headers=self._headers
            )
        except httpx.HTTPError as e:
            raise IdentityProviderError(str(e)) from e

        if response.status_code >= 400:
            raise IdentityProviderError(_error_message(response))
        return response.json()["id"]

    async def delete_user(self, auth_id: str) -> None:
        try:
            response = await self._http.delete(
                f"{self._base_url}/auth/v1/admin/users/{auth_id}", headers=self._headers
            )
        except httpx.HTTPError as e:
            raise IdentityProviderError(str(e)) from e

        if response.status_code >= 400:
            raise IdentityProviderError(_error_message(response))


def _error_message(response: httpx.Response) -> str:
    try:
        body = response.json()
    except ValueError:
        return f"HTTP {response.status_code}"
    if not isinstance(body, dict):
        return str(body) if body else f"HTTP {response.status_code}"
    return body.get("msg") or body.get("message") or body.get("error") or f"HTTP {response.status_code}"
