"""Shared HTTP plumbing — one ``requests.Session``, one timeout, no retries.

Every outbound call in a run goes through a single ``HttpClient`` so the
connection pool is reused and the same timeout applies uniformly.  Any
network failure, unexpected status code, or undecodable JSON body is raised
as ``TransportError``; nothing is retried.
"""

from __future__ import annotations

import json
import logging
from typing import Any

import requests

logger = logging.getLogger(__name__)


class TransportError(RuntimeError):
    """Raised when an HTTP exchange fails or returns an unexpected response.

    Carries whatever request context is known so the operator can see
    exactly which call failed and what the server said.
    """

    def __init__(
        self,
        message: str,
        *,
        method: str = "",
        url: str = "",
        expected_status: int | None = None,
        status_code: int | None = None,
        body: str = "",
    ) -> None:
        super().__init__(message)
        self.method = method
        self.url = url
        self.expected_status = expected_status
        self.status_code = status_code
        self.body = body


def close_response(response: requests.Response, context: str) -> None:
    """Close *response*, logging (never raising) if the close fails."""
    try:
        response.close()
    except (OSError, requests.RequestException) as exc:
        logger.warning("error closing HTTP response body after %s: %s", context, exc)


class HttpClient:
    """Thin wrapper over ``requests.Session`` with a fixed timeout.

    Parameters
    ----------
    timeout_seconds:
        Applied to every request (connect and read).
    session:
        Pre-built session, mainly for tests.  A new one is created and
        owned by the client if not provided.
    """

    def __init__(
        self,
        timeout_seconds: float = 30.0,
        *,
        session: requests.Session | None = None,
    ) -> None:
        self._session = session if session is not None else requests.Session()
        self._timeout = timeout_seconds

    @property
    def timeout_seconds(self) -> float:
        return self._timeout

    def close(self) -> None:
        try:
            self._session.close()
        except (OSError, requests.RequestException) as exc:
            logger.warning("error closing HTTP session: %s", exc)

    def __enter__(self) -> HttpClient:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()

    # ------------------------------------------------------------------
    # Raw requests
    # ------------------------------------------------------------------

    def request(
        self,
        method: str,
        url: str,
        *,
        headers: dict[str, str] | None = None,
        body: bytes | None = None,
        stream: bool = False,
    ) -> requests.Response:
        """Send a request and return the response, whatever its status."""
        logger.debug("HTTP %s %s", method, url)
        try:
            return self._session.request(
                method,
                url,
                headers=headers,
                data=body,
                timeout=self._timeout,
                stream=stream,
            )
        except requests.RequestException as exc:
            raise TransportError(
                f"error sending request {method} {url}: {exc}",
                method=method,
                url=url,
            ) from exc

    # ------------------------------------------------------------------
    # JSON helpers
    # ------------------------------------------------------------------

    def fetch_json(self, url: str, *, headers: dict[str, str] | None = None) -> Any:
        """``GET`` *url* and decode the JSON body, accepting any 2xx status."""
        response = self.request("GET", url, headers=headers)
        try:
            body = response.text
        finally:
            close_response(response, f"GET {url}")

        if not 200 <= response.status_code < 300:
            raise TransportError(
                f"GET {url} error: expected a 2xx HTTP code, "
                f"got {response.status_code} with body {body}",
                method="GET",
                url=url,
                status_code=response.status_code,
                body=body,
            )
        return _decode_json("GET", url, body)

    def send_json(
        self,
        method: str,
        url: str,
        *,
        token: str,
        expected_status: int,
        payload: dict[str, Any] | None = None,
    ) -> Any:
        """Send a bearer-authenticated JSON request and decode the reply.

        The response status must equal *expected_status* exactly.
        """
        headers = {
            "Content-Type": "application/json",
            "Accept": "application/json",
            "Authorization": f"Bearer {token}",
        }
        data = json.dumps(payload).encode("utf-8") if payload is not None else None
        response = self.request(method, url, headers=headers, body=data)
        try:
            body = response.text
        finally:
            close_response(response, f"{method} {url}")

        if response.status_code != expected_status:
            status = f"{response.status_code} {response.reason or ''}".strip()
            raise TransportError(
                f"{method} {url} error: expected response status {expected_status}, "
                f"got {status} with body {body}",
                method=method,
                url=url,
                expected_status=expected_status,
                status_code=response.status_code,
                body=body,
            )
        return _decode_json(method, url, body)


def _decode_json(method: str, url: str, body: str) -> Any:
    try:
        return json.loads(body)
    except ValueError as exc:
        raise TransportError(
            f"error JSON-unmarshaling {method} {url} response body {body}: {exc}",
            method=method,
            url=url,
            body=body,
        ) from exc
