"""Keystore and signed-URL helper for the backend of a Koji.

Endpoints (POST, base ``KojiConfig.rest_url``):
  - /v1/keystore/get
  - /v1/cdn/signedRequest/create
"""

from __future__ import annotations

from typing import Any

from pykoji._constants import CREATE_SIGNED_REQUEST_ROUTE, KEYSTORE_GET_ROUTE
from pykoji.backend._base import BackendClient
from pykoji.models.secret import KeystoreGetRequest, SignedUrlRequest


class Secret(BackendClient):
    """Resolve encrypted remix values and sign CDN URLs."""

    _service = "secret"

    def _base_url(self) -> str:
        return self._config.rest_url

    async def resolve_value(self, key_path: str) -> Any:
        """Return the decrypted value stored at *key_path*.

        *key_path* is the value returned by
        :meth:`pykoji.RemixStore.encrypt_value` on the frontend.
        """
        body = KeystoreGetRequest(scope=self._project_id, token=self._project_token, key_path=key_path).to_body()
        response = await self._post(KEYSTORE_GET_ROUTE, body)
        return response.get("decryptedValue") if isinstance(response, dict) else None

    async def generate_signed_url(self, resource: str, expire_seconds: int | None = None) -> str | None:
        """Create a temporary signed URL for *resource*.

        CDN-hosted images accept transforms as query parameters, e.g.
        ``?blur=10``.
        """
        body = SignedUrlRequest(resource=resource, expire_seconds=expire_seconds).to_body()
        response = await self._post(CREATE_SIGNED_REQUEST_ROUTE, body)
        url = response.get("url") if isinstance(response, dict) else None
        return url if isinstance(url, str) else None
