"""Notarization ledger client — submit and look up artifact fingerprints.

Bridge boundary
---------------
The ledger is an external service.  This module exposes it as a
``LedgerSession`` bound to one credential, with two operations:

``sign(artifact, status)``
    Record the artifact fingerprint with the given trust status.
``load_artifact(hash)``
    Read the record back; ``None`` when the ledger has no such hash.

Sessions speak JSON over HTTP(S) to ``{scheme}://{host}:{port}`` and
authenticate with the credential secret in the ``lc-api-key`` header.
``LedgerClient`` holds the connection parameters and opens sessions.
"""

from __future__ import annotations

import json
import logging
from typing import Any, Protocol, runtime_checkable

from pydantic import ValidationError

from releasenotary.bridge.credential_service import escape_path_segment
from releasenotary.bridge.http import HttpClient, TransportError, close_response
from releasenotary.models.artifacts import ArtifactStatus, LedgerRecord, LocalArtifact
from releasenotary.models.credentials import Credential

logger = logging.getLogger(__name__)

API_KEY_HEADER = "lc-api-key"


@runtime_checkable
class LedgerSession(Protocol):
    """Operations available once a credential is bound to the ledger."""

    def sign(self, artifact: LocalArtifact, status: ArtifactStatus) -> None: ...

    def load_artifact(self, artifact_hash: str) -> LedgerRecord | None: ...

    def close(self) -> None: ...


class LedgerClient:
    """Opens ledger sessions against one host/port/TLS endpoint.

    Parameters
    ----------
    http:
        Shared HTTP client.
    host, port:
        Ledger API endpoint.
    no_tls:
        Use plain ``http`` instead of ``https``.
    """

    def __init__(self, http: HttpClient, host: str, port: str | int, *, no_tls: bool = False) -> None:
        self._http = http
        self._host = host
        self._port = str(port)
        self._no_tls = no_tls

    @property
    def base_url(self) -> str:
        scheme = "http" if self._no_tls else "https"
        return f"{scheme}://{self._host}:{self._port}"

    def connect(self, credential: Credential) -> HttpLedgerSession:
        """Open a session that signs and verifies as *credential*."""
        if not self._host:
            raise TransportError("error initializing ledger client: empty ledger host")
        logger.debug("Connecting ledger session for %s at %s.", credential.name, self.base_url)
        return HttpLedgerSession(self._http, self.base_url, credential)


class HttpLedgerSession:
    """``LedgerSession`` over the ledger's JSON HTTP API."""

    def __init__(self, http: HttpClient, base_url: str, credential: Credential) -> None:
        self._http = http
        self._base_url = base_url.rstrip("/")
        self._credential = credential
        self._closed = False

    @property
    def credential(self) -> Credential:
        return self._credential

    @property
    def closed(self) -> bool:
        return self._closed

    def sign(self, artifact: LocalArtifact, status: ArtifactStatus) -> None:
        url = f"{self._base_url}/artifacts"
        payload = {
            "kind": "file",
            "name": artifact.name,
            "hash": artifact.hash,
            "size": artifact.size,
            "content_type": artifact.content_type,
            "metadata": artifact.metadata,
            "status": status.value,
        }
        self._exchange("POST", url, payload=payload, expected=(200, 201))

    def load_artifact(self, artifact_hash: str) -> LedgerRecord | None:
        url = f"{self._base_url}/artifacts/{escape_path_segment(artifact_hash)}"
        status_code, body = self._exchange("GET", url, expected=(200, 404))
        if status_code == 404:
            return None
        try:
            return LedgerRecord.model_validate(body)
        except ValidationError as exc:
            raise TransportError(
                f"GET {url}: unexpected ledger record {body!r}: {exc}",
                method="GET",
                url=url,
                status_code=status_code,
                body=str(body),
            ) from exc

    def close(self) -> None:
        self._closed = True

    def _exchange(
        self,
        method: str,
        url: str,
        *,
        expected: tuple[int, ...],
        payload: dict[str, Any] | None = None,
    ) -> tuple[int, Any]:
        if self._closed:
            raise TransportError(f"{method} {url}: ledger session is closed", method=method, url=url)
        headers = {
            "Accept": "application/json",
            API_KEY_HEADER: self._credential.key,
        }
        data = None
        if payload is not None:
            headers["Content-Type"] = "application/json"
            data = json.dumps(payload).encode("utf-8")

        response = self._http.request(method, url, headers=headers, body=data)
        try:
            text = response.text
        finally:
            close_response(response, f"{method} {url}")

        if response.status_code not in expected:
            raise TransportError(
                f"{method} {url} error: expected response status in {list(expected)}, "
                f"got {response.status_code} with body {text}",
                method=method,
                url=url,
                status_code=response.status_code,
                body=text,
            )
        if response.status_code == 404 or not text.strip():
            return response.status_code, None
        try:
            return response.status_code, json.loads(text)
        except ValueError as exc:
            raise TransportError(
                f"error JSON-unmarshaling {method} {url} response body {text}: {exc}",
                method=method,
                url=url,
                status_code=response.status_code,
                body=text,
            ) from exc
