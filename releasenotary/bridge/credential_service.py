"""Credential service client — look up, create and rotate signer API keys.

Endpoints (all bearer-authenticated, JSON in and out):

- ``GET  {base}/api_keys/identity/{identity}``          -> 200, paginated
- ``POST {base}/ledgers/{ledger}/api_keys``             -> 201
- ``PUT  {base}/ledgers/{ledger}/api_keys/{id}/rotate`` -> 200

An identity with no key is reported by the lookup endpoint as an empty
page, not as an HTTP error.
"""

from __future__ import annotations

import logging
from typing import Any
from urllib.parse import quote

from pydantic import BaseModel, ValidationError

from releasenotary.bridge.http import HttpClient, TransportError
from releasenotary.models.credentials import (
    ApiKeyCreateRequest,
    ApiKeyResponse,
    ApiKeysPage,
    Credential,
)

logger = logging.getLogger(__name__)

# Characters left unescaped in a single URL path segment.
_PATH_SEGMENT_SAFE = "$&+:=@"


def escape_path_segment(value: str) -> str:
    """Percent-encode *value* for use as one URL path segment."""
    return quote(value, safe=_PATH_SEGMENT_SAFE)


class CredentialService:
    """Client for the ledger's API key management endpoints.

    Parameters
    ----------
    http:
        Shared HTTP client.
    base_url:
        REST API root; a trailing ``/`` is stripped.
    token:
        Personal token used as the bearer credential.
    ledger_id:
        Ledger that new keys are created in.
    """

    def __init__(self, http: HttpClient, base_url: str, token: str, ledger_id: str) -> None:
        self._http = http
        self._base_url = base_url.rstrip("/")
        self._token = token
        self._ledger_id = ledger_id

    @property
    def base_url(self) -> str:
        return self._base_url

    def lookup(self, identity: str) -> Credential | None:
        """Return the key bound to *identity*, or ``None`` if there is none."""
        url = f"{self._base_url}/api_keys/identity/{escape_path_segment(identity)}"
        page = self._call("GET", url, expected_status=200, model=ApiKeysPage)
        if not page.items:
            logger.debug("No API key found for identity %s.", identity)
            return None
        item = page.items[0]
        return Credential(id=item.id, key=item.key, name=identity)

    def create(self, identity: str) -> Credential:
        """Create a read-write key named after *identity*."""
        url = f"{self._base_url}/ledgers/{self._ledger_id}/api_keys"
        payload = ApiKeyCreateRequest(name=identity).model_dump()
        created = self._call(
            "POST", url, expected_status=201, model=ApiKeyResponse, payload=payload
        )
        logger.info("Created API key %s for identity %s.", created.id, identity)
        return Credential(id=created.id, key=created.key, name=identity)

    def rotate(self, credential: Credential) -> Credential:
        """Rotate *credential*: same id, new secret."""
        url = (
            f"{self._base_url}/ledgers/{self._ledger_id}"
            f"/api_keys/{escape_path_segment(credential.id)}/rotate"
        )
        rotated = self._call("PUT", url, expected_status=200, model=ApiKeyResponse)
        logger.info("Rotated API key %s for identity %s.", rotated.id, credential.name)
        return Credential(id=rotated.id, key=rotated.key, name=credential.name)

    def _call(
        self,
        method: str,
        url: str,
        *,
        expected_status: int,
        model: type[BaseModel],
        payload: dict[str, Any] | None = None,
    ) -> Any:
        body = self._http.send_json(
            method,
            url,
            token=self._token,
            expected_status=expected_status,
            payload=payload,
        )
        try:
            return model.model_validate(body)
        except ValidationError as exc:
            raise TransportError(
                f"{method} {url}: unexpected response body {body!r}: {exc}",
                method=method,
                url=url,
                expected_status=expected_status,
                status_code=expected_status,
                body=str(body),
            ) from exc
